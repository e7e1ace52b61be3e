"""Platform probes listing installed font families.

Each probe wraps one external enumeration mechanism and returns the raw family
names it reports. Probes never raise: a missing tool, a failing command, or an
unavailable native bridge degrades to an empty list.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
import logging
import shutil
import subprocess

from fontprobe.config import DEFAULT_REGISTRY_KEYS, FontProbeConfig
from fontprobe.diagnostics import DiagnosticEmitter
from fontprobe.exceptions import ProbeUnavailableError, ToolNotFoundError
from fontprobe.utils import (
    parse_registry_output,
    parse_xlfd_line,
    split_output_lines,
    unique_sorted,
)


logger = logging.getLogger(__name__)


def run_command(argv: Sequence[str], *, timeout: float | None = None) -> str:
    """Run an external listing tool and return its standard output."""
    if not argv:
        raise ProbeUnavailableError("No command given.")
    program = argv[0]
    executable = shutil.which(program)
    if executable is None:
        raise ToolNotFoundError(f"'{program}' is not available on PATH.")
    try:
        proc = subprocess.run(
            [executable, *argv[1:]],
            check=True,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise ProbeUnavailableError(f"'{program}' timed out after {timeout}s.") from exc
    except subprocess.CalledProcessError as exc:
        raise ProbeUnavailableError(f"'{program}' exited with status {exc.returncode}.") from exc
    except OSError as exc:
        raise ProbeUnavailableError(f"'{program}' could not be executed: {exc}") from exc
    return proc.stdout or ""


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Families reported by one probe invocation."""

    source: str | None
    families: tuple[str, ...]


class Probe(ABC):
    """Base class for probes; subclasses implement :meth:`collect`."""

    name: str = "probe"

    @abstractmethod
    def collect(self) -> list[str]:
        """Return raw family names or raise :class:`ProbeUnavailableError`."""

    def run(self) -> ProbeResult:
        """Collect families, converting unavailability into an empty result."""
        try:
            families = self.collect()
        except ProbeUnavailableError as exc:
            logger.debug("Font probe '%s' unavailable: %s", self.name, exc)
            families = []
        return ProbeResult(source=self.name, families=tuple(families))

    def __call__(self) -> list[str]:
        return list(self.run().families)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RegistryProbe(Probe):
    """List font families registered under the Windows fonts registry keys."""

    name = "registry"

    def __init__(
        self,
        keys: Iterable[str] = DEFAULT_REGISTRY_KEYS,
        *,
        command: str = "reg",
        timeout: float | None = None,
    ) -> None:
        self.keys = tuple(keys)
        self.command = command
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: FontProbeConfig) -> RegistryProbe:
        return cls(config.registry_keys, command=config.reg_command, timeout=config.timeout)

    def collect(self) -> list[str]:
        families: list[str] = []
        for key in self.keys:
            try:
                output = run_command([self.command, "query", key], timeout=self.timeout)
            except ToolNotFoundError:
                raise
            except ProbeUnavailableError as exc:
                # Per-user keys are often absent; skip only this key.
                logger.debug("Registry key '%s' skipped: %s", key, exc)
                continue
            families.extend(parse_registry_output(output))
        return families


class FontConfigProbe(Probe):
    """List font families through ``fc-list``, one family per line."""

    name = "fontconfig"

    def __init__(
        self,
        *,
        command: str = "fc-list",
        format_string: str = "%{family[0]}\n",
        timeout: float | None = None,
    ) -> None:
        self.command = command
        self.format_string = format_string
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: FontProbeConfig) -> FontConfigProbe:
        return cls(
            command=config.fc_list_command,
            format_string=config.fc_list_format,
            timeout=config.timeout,
        )

    def collect(self) -> list[str]:
        output = run_command(
            [self.command, "--format", self.format_string], timeout=self.timeout
        )
        return split_output_lines(output)


class XFontServerProbe(Probe):
    """List core X11 font families from ``xlsfonts`` XLFD names."""

    name = "xlsfonts"

    def __init__(
        self,
        *,
        command: str = "xlsfonts",
        pattern: str = "*",
        timeout: float | None = None,
    ) -> None:
        self.command = command
        self.pattern = pattern
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: FontProbeConfig) -> XFontServerProbe:
        return cls(
            command=config.xlsfonts_command,
            pattern=config.xlsfonts_pattern,
            timeout=config.timeout,
        )

    def collect(self) -> list[str]:
        output = run_command([self.command, "-fn", self.pattern], timeout=self.timeout)
        families = (parse_xlfd_line(line) for line in output.splitlines())
        return unique_sorted(family for family in families if family)


class NativeFontManagerProbe(Probe):
    """Query the Cocoa font manager through the PyObjC bridge."""

    name = "native"

    def collect(self) -> list[str]:
        try:
            from AppKit import NSFontManager
        except ImportError as exc:
            raise ProbeUnavailableError("PyObjC AppKit bridge is not installed.") from exc
        try:
            families = NSFontManager.sharedFontManager().availableFontFamilies()
        except Exception as exc:
            raise ProbeUnavailableError(f"NSFontManager query failed: {exc}") from exc
        return [str(family) for family in families or ()]


class FallbackProbe(Probe):
    """Run ``primary``; only when it finds nothing, run ``fallback`` instead.

    ``when`` gates the fallback; it is evaluated only after ``primary`` came
    back empty.
    """

    def __init__(
        self,
        primary: Probe,
        fallback: Probe,
        *,
        when: Callable[[], bool] | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.primary = primary
        self.fallback = fallback
        self.when = when
        self.emitter = emitter

    @property
    def name(self) -> str:  # type: ignore[override]
        return f"{self.primary.name}>{self.fallback.name}"

    def collect(self) -> list[str]:
        return list(self.run().families)

    def run(self) -> ProbeResult:
        result = self.primary.run()
        if result.families:
            return result
        if self.when is not None and not self.when():
            return result
        logger.debug(
            "Font probe '%s' found nothing, trying '%s'.", self.primary.name, self.fallback.name
        )
        if self.emitter is not None:
            self.emitter.event(
                "probe_fallback",
                {"primary": self.primary.name, "fallback": self.fallback.name},
            )
        return self.fallback.run()

    def __repr__(self) -> str:
        return f"FallbackProbe({self.primary!r}, {self.fallback!r})"


def run_probe(probe: Callable[[], Sequence[str]], default_source: str | None = None) -> ProbeResult:
    """Run any probe-like callable, including plain functions used as test doubles."""
    if isinstance(probe, Probe):
        return probe.run()
    families = probe()
    source = getattr(probe, "name", None) or default_source
    return ProbeResult(source=source, families=tuple(families or ()))


__all__ = [
    "FallbackProbe",
    "FontConfigProbe",
    "NativeFontManagerProbe",
    "Probe",
    "ProbeResult",
    "RegistryProbe",
    "XFontServerProbe",
    "run_command",
    "run_probe",
]
