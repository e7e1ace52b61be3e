"""Choose the probe suited to the host and run it."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
import logging
import shutil

from fontprobe.config import FontProbeConfig
from fontprobe.diagnostics import DiagnosticEmitter, NullEmitter
from fontprobe.host import HostCapabilities
from fontprobe.probes import (
    FallbackProbe,
    FontConfigProbe,
    NativeFontManagerProbe,
    RegistryProbe,
    XFontServerProbe,
    run_probe,
)


logger = logging.getLogger(__name__)

NO_DETECTION_MESSAGE = "no way to detect fonts"

HostPredicate = Callable[[HostCapabilities], bool]
ProbeCallable = Callable[[], Sequence[str]]


@dataclass(frozen=True, slots=True)
class SelectionRule:
    """A probe guarded by the host capabilities it needs."""

    name: str
    predicate: HostPredicate
    probe: ProbeCallable


@dataclass(frozen=True, slots=True)
class SelectionResult:
    """Outcome of a selection: the winning rule and the families it produced."""

    rule: str | None
    source: str | None
    families: tuple[str, ...] = ()

    @property
    def detected(self) -> bool:
        return self.rule is not None


class PlatformSelector:
    """Evaluate rules in priority order; the first matching rule wins."""

    def __init__(
        self,
        rules: Iterable[SelectionRule],
        *,
        emitter: DiagnosticEmitter | None = None,
        announce_missing: bool = True,
    ) -> None:
        self._rules = tuple(rules)
        self.emitter = emitter or NullEmitter()
        self.announce_missing = announce_missing

    @property
    def rules(self) -> tuple[SelectionRule, ...]:
        return self._rules

    def match(self, host: HostCapabilities) -> SelectionRule | None:
        """Return the first rule applicable to ``host`` without running it."""
        for rule in self._rules:
            if rule.predicate(host):
                return rule
        return None

    def select(self, host: HostCapabilities) -> SelectionResult:
        """Run the winning probe and return its families."""
        rule = self.match(host)
        if rule is None:
            if self.announce_missing:
                logger.warning(NO_DETECTION_MESSAGE)
                logger.debug("No selection rule matched host %s.", host)
                self.emitter.warning(NO_DETECTION_MESSAGE)
            return SelectionResult(rule=None, source=None)

        result = run_probe(rule.probe, default_source=rule.name)
        logger.debug(
            "Rule '%s' selected; probe '%s' reported %d families.",
            rule.name,
            result.source,
            len(result.families),
        )
        return SelectionResult(rule=rule.name, source=result.source, families=result.families)


def default_rules(
    config: FontProbeConfig | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> tuple[SelectionRule, ...]:
    """Build the standard Windows, Mac, GTK and X11 rule chain."""
    config = config or FontProbeConfig()
    fc_list = config.fc_list_command
    xlsfonts = config.xlsfonts_command
    fontconfig = FontConfigProbe.from_config(config)

    return (
        SelectionRule(
            name="windows",
            predicate=lambda host: host.is_windows,
            probe=RegistryProbe.from_config(config),
        ),
        SelectionRule(
            name="mac",
            predicate=lambda host: host.is_mac,
            probe=FallbackProbe(
                NativeFontManagerProbe(),
                fontconfig,
                when=lambda: shutil.which(fc_list) is not None,
                emitter=emitter,
            ),
        ),
        SelectionRule(
            name="gtk",
            predicate=lambda host: host.is_gtk and host.has_tool(fc_list),
            probe=fontconfig,
        ),
        SelectionRule(
            name="x11",
            predicate=lambda host: host.x11 and host.has_tool(xlsfonts),
            probe=XFontServerProbe.from_config(config),
        ),
    )


def default_selector(
    config: FontProbeConfig | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> PlatformSelector:
    """Return the selector used by the default query façade."""
    config = config or FontProbeConfig()
    if config.skip_detection:
        logger.debug("Font detection disabled by configuration.")
        return PlatformSelector((), emitter=emitter, announce_missing=False)
    return PlatformSelector(default_rules(config, emitter=emitter), emitter=emitter)


__all__ = [
    "NO_DETECTION_MESSAGE",
    "PlatformSelector",
    "SelectionResult",
    "SelectionRule",
    "default_rules",
    "default_selector",
]
