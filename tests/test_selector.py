from __future__ import annotations

import logging

from fakes import CountingProbe, ListEmitter
import pytest

from fontprobe import selector as selector_module
from fontprobe.config import FontProbeConfig
from fontprobe.host import HostCapabilities
from fontprobe.probes import FontConfigProbe, NativeFontManagerProbe
from fontprobe.selector import (
    NO_DETECTION_MESSAGE,
    PlatformSelector,
    SelectionRule,
    default_rules,
    default_selector,
)


WINDOWS = HostCapabilities(os_family="windows")
MAC = HostCapabilities(os_family="mac")
GTK = HostCapabilities(toolkit="gtk3", x11=True, tools=frozenset({"fc-list", "xlsfonts"}))
GTK_WITHOUT_FC = HostCapabilities(toolkit="gtk2", x11=True, tools=frozenset({"xlsfonts"}))
X11 = HostCapabilities(toolkit="lucid", x11=True, tools=frozenset({"fc-list", "xlsfonts"}))
BARE = HostCapabilities(toolkit="lucid", x11=False, tools=frozenset({"xlsfonts"}))


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        (WINDOWS, "windows"),
        (MAC, "mac"),
        (GTK, "gtk"),
        (GTK_WITHOUT_FC, "x11"),
        (X11, "x11"),
        (BARE, None),
    ],
)
def test_default_rule_priority(host: HostCapabilities, expected: str | None) -> None:
    rule = default_selector(FontProbeConfig()).match(host)
    assert (rule.name if rule else None) == expected


def test_default_rules_order() -> None:
    assert [rule.name for rule in default_rules()] == ["windows", "mac", "gtk", "x11"]


def test_first_matching_rule_wins_without_merging() -> None:
    first = CountingProbe(["Arial"], name="first")
    second = CountingProbe(["Helvetica"], name="second")
    selector = PlatformSelector(
        [
            SelectionRule("first", lambda host: True, first),
            SelectionRule("second", lambda host: True, second),
        ]
    )

    result = selector.select(HostCapabilities())

    assert result.rule == "first"
    assert result.source == "first"
    assert result.families == ("Arial",)
    assert second.calls == 0


def test_matching_rule_with_empty_result_does_not_fall_through() -> None:
    empty = CountingProbe([], name="empty")
    other = CountingProbe(["Helvetica"], name="other")
    emitter = ListEmitter()
    selector = PlatformSelector(
        [
            SelectionRule("empty", lambda host: True, empty),
            SelectionRule("other", lambda host: True, other),
        ],
        emitter=emitter,
    )

    result = selector.select(HostCapabilities())

    assert result.detected
    assert result.families == ()
    assert other.calls == 0
    assert emitter.warnings == []


def test_no_matching_rule_emits_diagnostic_once() -> None:
    emitter = ListEmitter()
    selector = PlatformSelector(
        [SelectionRule("never", lambda host: False, CountingProbe(["Arial"]))],
        emitter=emitter,
    )

    result = selector.select(HostCapabilities())

    assert not result.detected
    assert result.families == ()
    assert emitter.warnings == [NO_DETECTION_MESSAGE]


def test_no_matching_rule_logs_warning_without_emitter(caplog: pytest.LogCaptureFixture) -> None:
    selector = PlatformSelector([])

    with caplog.at_level(logging.WARNING, logger="fontprobe.selector"):
        selector.select(HostCapabilities())

    warnings = [
        record
        for record in caplog.records
        if record.name == "fontprobe.selector" and record.levelno == logging.WARNING
    ]
    assert [record.getMessage() for record in warnings] == [NO_DETECTION_MESSAGE]


def test_skip_detection_is_silent(caplog: pytest.LogCaptureFixture) -> None:
    emitter = ListEmitter()
    selector = default_selector(FontProbeConfig(skip_detection=True), emitter=emitter)

    with caplog.at_level(logging.WARNING, logger="fontprobe.selector"):
        result = selector.select(WINDOWS)

    assert result.families == ()
    assert emitter.warnings == []
    assert not caplog.records


def test_mac_falls_back_to_fontconfig(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(NativeFontManagerProbe, "collect", lambda self: [])
    monkeypatch.setattr(FontConfigProbe, "collect", lambda self: ["Menlo", "Monaco"])
    monkeypatch.setattr(selector_module.shutil, "which", lambda name: f"/opt/bin/{name}")

    result = default_selector(FontProbeConfig()).select(MAC)

    assert result.rule == "mac"
    assert result.source == "fontconfig"
    assert result.families == ("Menlo", "Monaco")


def test_mac_without_fontconfig_stays_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    def fake_collect(self):
        calls.append("fontconfig")
        return ["Menlo"]

    monkeypatch.setattr(NativeFontManagerProbe, "collect", lambda self: [])
    monkeypatch.setattr(FontConfigProbe, "collect", fake_collect)
    monkeypatch.setattr(selector_module.shutil, "which", lambda name: None)

    result = default_selector(FontProbeConfig()).select(MAC)

    assert result.source == "native"
    assert result.families == ()
    assert calls == []


def test_mac_native_result_is_used_directly(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(NativeFontManagerProbe, "collect", lambda self: ["Helvetica"])
    monkeypatch.setattr(FontConfigProbe, "collect", lambda self: ["Menlo"])

    result = default_selector(FontProbeConfig()).select(MAC)

    assert result.source == "native"
    assert result.families == ("Helvetica",)
