"""Detect the font families installed on the host.

Architecture
: Probes (`RegistryProbe`, `FontConfigProbe`, `XFontServerProbe`,
  `NativeFontManagerProbe`) each wrap one enumeration mechanism and return raw
  family names, degrading to an empty list when their tool or API is missing.
: `PlatformSelector` walks an ordered list of `SelectionRule` entries and runs
  the probe of the first rule matching the `HostCapabilities`.
: `FontIndex` folds that result into a case-insensitive snapshot, built lazily
  and rebuilt only after `invalidate()`.
: `FontQuery` answers lookups; the module-level helpers delegate to a
  process-wide instance.
"""

from fontprobe.config import FontProbeConfig, load_config
from fontprobe.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from fontprobe.exceptions import (
    ConfigurationError,
    FontProbeError,
    ProbeUnavailableError,
    ToolNotFoundError,
)
from fontprobe.host import HostCapabilities, detect_host
from fontprobe.index import FontIndex
from fontprobe.probes import (
    FallbackProbe,
    FontConfigProbe,
    NativeFontManagerProbe,
    Probe,
    RegistryProbe,
    XFontServerProbe,
)
from fontprobe.query import (
    FontQuery,
    create_font_query,
    first_font_family,
    font_query_context,
    get_font_query,
    has_font_family,
    is_installed,
    list_font_families,
    reset,
    set_font_query,
)
from fontprobe.selector import PlatformSelector, SelectionResult, SelectionRule
from fontprobe.version import get_version


__version__ = get_version()

__all__ = [
    "ConfigurationError",
    "DiagnosticEmitter",
    "FallbackProbe",
    "FontConfigProbe",
    "FontIndex",
    "FontProbeConfig",
    "FontProbeError",
    "FontQuery",
    "HostCapabilities",
    "LoggingEmitter",
    "NativeFontManagerProbe",
    "NullEmitter",
    "PlatformSelector",
    "Probe",
    "ProbeUnavailableError",
    "RegistryProbe",
    "SelectionResult",
    "SelectionRule",
    "ToolNotFoundError",
    "XFontServerProbe",
    "create_font_query",
    "detect_host",
    "first_font_family",
    "font_query_context",
    "get_font_query",
    "has_font_family",
    "is_installed",
    "list_font_families",
    "load_config",
    "reset",
    "set_font_query",
]
