"""Exception hierarchy for font detection."""

from __future__ import annotations


class FontProbeError(RuntimeError):
    """Base exception for font detection failures."""


class ProbeUnavailableError(FontProbeError):
    """Raised when a probe cannot reach its tool or native API."""


class ToolNotFoundError(ProbeUnavailableError):
    """Raised when an external listing tool is not on PATH."""


class ConfigurationError(FontProbeError):
    """Raised when configuration cannot be read or validated."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


__all__ = [
    "ConfigurationError",
    "FontProbeError",
    "ProbeUnavailableError",
    "ToolNotFoundError",
    "exception_messages",
]
