"""Detection of the host capabilities that drive probe selection."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import os
import shutil
import sys

from fontprobe.config import FontProbeConfig


WINDOWS = "windows"
MAC = "mac"
UNIX = "unix"

_GTK_DESKTOPS = {
    "gnome",
    "xfce",
    "cinnamon",
    "mate",
    "unity",
    "budgie",
    "pantheon",
    "lxde",
}


def os_family(platform: str | None = None) -> str:
    """Map a ``sys.platform`` value onto ``windows``, ``mac`` or ``unix``."""
    value = (platform if platform is not None else sys.platform).lower()
    if value.startswith(("win32", "cygwin", "msys")):
        return WINDOWS
    if value.startswith("darwin"):
        return MAC
    return UNIX


def is_gtk_toolkit(name: str | None) -> bool:
    """Return True for any GTK major version (``gtk``, ``gtk2``, ``gtk3``...)."""
    if not name:
        return False
    value = name.strip().lower()
    return value == "gtk" or (value.startswith("gtk") and value[3:].isdigit())


def infer_toolkit(environ: Mapping[str, str]) -> str | None:
    """Guess the GUI toolkit from environment hints."""
    if environ.get("GTK_MODULES") or environ.get("GDK_BACKEND"):
        return "gtk3"
    desktops = environ.get("XDG_CURRENT_DESKTOP", "")
    for desktop in desktops.replace(";", ":").split(":"):
        name = desktop.strip().lower()
        if name.startswith("x-"):
            name = name[2:]
        if name in _GTK_DESKTOPS:
            return "gtk3"
    return None


@dataclass(frozen=True, slots=True)
class HostCapabilities:
    """Snapshot of the features probes depend on."""

    os_family: str = UNIX
    toolkit: str | None = None
    x11: bool = False
    tools: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_windows(self) -> bool:
        return self.os_family == WINDOWS

    @property
    def is_mac(self) -> bool:
        return self.os_family == MAC

    @property
    def is_gtk(self) -> bool:
        return is_gtk_toolkit(self.toolkit)

    def has_tool(self, name: str) -> bool:
        """Return True when ``name`` was found on the host."""
        return name in self.tools

    def describe(self) -> dict[str, str]:
        """Return a printable summary of the capabilities."""
        return {
            "os": self.os_family,
            "toolkit": self.toolkit or "-",
            "x11": "yes" if self.x11 else "no",
            "tools": ", ".join(sorted(self.tools)) or "-",
        }


def available_tools(commands: Iterable[str]) -> frozenset[str]:
    """Return the commands that resolve on PATH."""
    return frozenset(command for command in commands if shutil.which(command) is not None)


def detect_host(
    config: FontProbeConfig | None = None,
    *,
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> HostCapabilities:
    """Inspect the running system and return its capabilities."""
    config = config or FontProbeConfig()
    env = os.environ if environ is None else environ

    toolkit = config.toolkit if config.toolkit else infer_toolkit(env)
    x11 = config.x11 if config.x11 is not None else bool(env.get("DISPLAY"))

    return HostCapabilities(
        os_family=os_family(platform),
        toolkit=toolkit,
        x11=x11,
        tools=available_tools(config.tool_commands),
    )


__all__ = [
    "MAC",
    "UNIX",
    "WINDOWS",
    "HostCapabilities",
    "available_tools",
    "detect_host",
    "infer_toolkit",
    "is_gtk_toolkit",
    "os_family",
]
