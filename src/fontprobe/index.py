"""Cached, case-insensitive set of installed font families."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import RLock

from fontprobe.diagnostics import DiagnosticEmitter, NullEmitter
from fontprobe.host import HostCapabilities, detect_host
from fontprobe.selector import PlatformSelector, default_selector
from fontprobe.utils import normalize_family


logger = logging.getLogger(__name__)


class FontIndex:
    """Snapshot of the installed families, built lazily from the selector.

    The index is uninitialised until the first :meth:`lookup` (or an explicit
    :meth:`build`). :meth:`invalidate` returns it to that state so the next
    lookup probes the host again. Each successful build bumps
    :attr:`generation`; concurrent first lookups trigger a single build.
    """

    def __init__(
        self,
        selector: PlatformSelector | None = None,
        host_factory: Callable[[], HostCapabilities] = detect_host,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.selector = selector or default_selector(emitter=emitter)
        self.host_factory = host_factory
        self.emitter = emitter or NullEmitter()
        self._lock = RLock()
        self._keys: frozenset[str] | None = None
        self._families: tuple[str, ...] = ()
        self._source: str | None = None
        self._generation = 0

    @property
    def is_built(self) -> bool:
        return self._keys is not None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def source(self) -> str | None:
        """Name of the probe that produced the current snapshot."""
        return self._source

    @property
    def families(self) -> tuple[str, ...]:
        """Family names of the current snapshot as reported, sorted."""
        self._ensure_built()
        return self._families

    def build(self) -> int:
        """Probe the host, replace the snapshot and return its size."""
        return len(self._rebuild())

    def _rebuild(self) -> frozenset[str]:
        with self._lock:
            host = self.host_factory()
            result = self.selector.select(host)
            families = tuple(sorted({name for name in result.families if name.strip()}))
            keys = frozenset(normalize_family(name) for name in families)

            self._keys = keys
            self._families = families
            self._source = result.source
            self._generation += 1

            logger.debug(
                "Font index generation %d built from %s with %d families.",
                self._generation,
                result.source or "nothing",
                len(keys),
            )
            self.emitter.event(
                "index_built",
                {
                    "source": result.source,
                    "count": len(keys),
                    "generation": self._generation,
                },
            )
            return keys

    def lookup(self, name: str) -> bool:
        """Return True when ``name`` (any casing) is in the snapshot."""
        return normalize_family(name) in self._ensure_built()

    def invalidate(self) -> None:
        """Drop the snapshot; the next lookup rebuilds it."""
        with self._lock:
            self._keys = None
            self._families = ()
            self._source = None

    def _ensure_built(self) -> frozenset[str]:
        keys = self._keys
        if keys is not None:
            return keys
        with self._lock:
            keys = self._keys
            if keys is None:
                keys = self._rebuild()
            return keys

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name)

    def __len__(self) -> int:
        return len(self._ensure_built())


__all__ = ["FontIndex"]
