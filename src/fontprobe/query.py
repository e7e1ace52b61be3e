"""Query façade answering "is this font family installed?"."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from functools import partial
from threading import RLock

from fontprobe.config import FontProbeConfig, load_config
from fontprobe.diagnostics import DiagnosticEmitter, NullEmitter
from fontprobe.host import detect_host
from fontprobe.index import FontIndex
from fontprobe.selector import default_selector


__all__ = [
    "FontQuery",
    "create_font_query",
    "first_font_family",
    "font_query_context",
    "get_font_query",
    "has_font_family",
    "is_installed",
    "list_font_families",
    "reset",
    "set_font_query",
]

_FONT_QUERY: FontQuery | None = None
_LOCK: RLock = RLock()


class FontQuery:
    """Lookups against a :class:`FontIndex`, building it on first use.

    ``has_font_family`` and ``first_font_family`` return the caller's own
    string when a family is installed and ``""`` otherwise, so the result can
    be used both as a flag and as the chosen name.
    """

    def __init__(self, index: FontIndex) -> None:
        self.index = index

    def has_font_family(self, family: str) -> str:
        """Return ``family`` unchanged when installed, else ``""``."""
        return family if self.index.lookup(family) else ""

    def is_installed(self, family: str) -> bool:
        return self.index.lookup(family)

    def first_font_family(self, families: Iterable[str]) -> str:
        """Return the first installed entry of ``families``, else ``""``."""
        for family in families:
            if self.has_font_family(family):
                return family
        return ""

    def list_font_families(self) -> list[str]:
        return list(self.index.families)

    def reset(self) -> None:
        """Forget the cached snapshot; the next query probes again."""
        self.index.invalidate()


def create_font_query(
    config: FontProbeConfig | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> FontQuery:
    """Build a façade wired to the host probes described by ``config``."""
    config = config or load_config()
    emitter = emitter or NullEmitter()
    index = FontIndex(
        default_selector(config, emitter=emitter),
        host_factory=partial(detect_host, config),
        emitter=emitter,
    )
    return FontQuery(index)


def get_font_query() -> FontQuery:
    """Return the process-wide façade, creating it on first use."""
    global _FONT_QUERY
    with _LOCK:
        if _FONT_QUERY is None:
            _FONT_QUERY = create_font_query()
        return _FONT_QUERY


def set_font_query(query: FontQuery | None) -> FontQuery | None:
    """Replace the process-wide façade and return the previous one."""
    global _FONT_QUERY
    with _LOCK:
        previous = _FONT_QUERY
        _FONT_QUERY = query
        return previous


@contextmanager
def font_query_context(query: FontQuery) -> Iterator[FontQuery]:
    """Temporarily install ``query`` as the process-wide façade."""
    previous = set_font_query(query)
    try:
        yield query
    finally:
        set_font_query(previous)


def has_font_family(family: str) -> str:
    return get_font_query().has_font_family(family)


def is_installed(family: str) -> bool:
    return get_font_query().is_installed(family)


def first_font_family(families: Iterable[str]) -> str:
    return get_font_query().first_font_family(families)


def list_font_families() -> list[str]:
    return get_font_query().list_font_families()


def reset() -> None:
    """Invalidate the process-wide index, if one was created."""
    with _LOCK:
        query = _FONT_QUERY
    if query is not None:
        query.reset()
