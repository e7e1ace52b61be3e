"""Configuration model for font detection.

FontProbeConfig

`toolkit` (`str | None`)
: GUI toolkit family of the host (``gtk3``, ``gtk4``, ``qt``...). Leave unset to
  infer it from the environment.

`x11` (`bool | None`)
: Force X11 availability on or off. Defaults to checking ``DISPLAY``.

`timeout` (`float | None`)
: Seconds allowed for each external tool invocation. ``None`` waits forever.

`skip_detection` (`bool`)
: Disable every probe; all lookups report missing fonts.

`registry_keys` (`list[str]`)
: Registry keys listed by ``reg query`` on Windows hosts.

`reg_command`, `fc_list_command`, `xlsfonts_command` (`str`)
: Executable names (or paths) of the external font listing tools.

`fc_list_format` (`str`)
: Format string passed to ``fc-list --format``; must print one family per line.

`xlsfonts_pattern` (`str`)
: Font name pattern handed to ``xlsfonts -fn``.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from fontprobe.exceptions import ConfigurationError


CONFIG_ENV = "FONTPROBE_CONFIG"
TOOLKIT_ENV = "FONTPROBE_TOOLKIT"
TIMEOUT_ENV = "FONTPROBE_TIMEOUT"
SKIP_ENV = "FONTPROBE_SKIP_FONT_CHECKS"

DEFAULT_REGISTRY_KEYS = (
    r"HKLM\SOFTWARE\Microsoft\Windows NT\CurrentVersion\Fonts",
    r"HKCU\SOFTWARE\Microsoft\Windows NT\CurrentVersion\Fonts",
)

_TRUTHY = {"1", "true", "yes", "on"}


class FontProbeConfig(BaseModel):
    """Settings controlling how installed fonts are detected."""

    model_config = ConfigDict(extra="forbid")

    toolkit: str | None = None
    x11: bool | None = None
    timeout: Annotated[float, Field(gt=0)] | None = 10.0
    skip_detection: bool = False
    registry_keys: list[str] = Field(default_factory=lambda: list(DEFAULT_REGISTRY_KEYS))
    reg_command: str = "reg"
    fc_list_command: str = "fc-list"
    fc_list_format: str = "%{family[0]}\n"
    xlsfonts_command: str = "xlsfonts"
    xlsfonts_pattern: str = "*"

    @field_validator("toolkit")
    @classmethod
    def _normalise_toolkit(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().lower()
        return value or None

    @property
    def tool_commands(self) -> tuple[str, ...]:
        """Return the executables probes may invoke."""
        return (self.reg_command, self.fc_list_command, self.xlsfonts_command)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Unable to read configuration file '{path}'.") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{path}' must contain a mapping.")
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    toolkit = environ.get(TOOLKIT_ENV)
    if toolkit:
        overrides["toolkit"] = toolkit
    timeout = environ.get(TIMEOUT_ENV)
    if timeout:
        overrides["timeout"] = None if timeout.strip().lower() == "none" else timeout
    skip = environ.get(SKIP_ENV)
    if skip:
        overrides["skip_detection"] = skip.strip().lower() in _TRUTHY
    return overrides


def load_config(
    path: str | Path | None = None,
    *,
    environ: dict[str, str] | None = None,
) -> FontProbeConfig:
    """Load configuration from ``path`` (or ``FONTPROBE_CONFIG``) plus env overrides."""
    env = os.environ if environ is None else environ
    if path is None:
        env_path = env.get(CONFIG_ENV)
        path = Path(env_path).expanduser() if env_path else None

    data: dict[str, Any] = {}
    if path is not None:
        data.update(_read_yaml(Path(path)))
    data.update(_env_overrides(env))

    try:
        return FontProbeConfig.model_validate(data)
    except ValidationError as exc:
        source = f"'{path}'" if path is not None else "environment"
        raise ConfigurationError(f"Invalid font detection configuration from {source}.") from exc


__all__ = [
    "CONFIG_ENV",
    "DEFAULT_REGISTRY_KEYS",
    "SKIP_ENV",
    "TIMEOUT_ENV",
    "TOOLKIT_ENV",
    "FontProbeConfig",
    "load_config",
]
