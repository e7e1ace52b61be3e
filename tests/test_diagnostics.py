from __future__ import annotations

import logging

import pytest

from fontprobe.cli.diagnostics import CliEmitter
from fontprobe.cli.state import CLIState
from fontprobe.diagnostics import LoggingEmitter, NullEmitter, format_event_message
from fontprobe.exceptions import FontProbeError, ProbeUnavailableError, exception_messages


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("nothing to see")
        emitter.error("still quiet")
    assert not caplog.records
    emitter.event("ignored", {"value": 1})
    assert emitter.debug_enabled is False


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.INFO):
        emitter.warning("no way to detect fonts")
        emitter.event("index_built", {"source": "fontconfig", "count": 3, "generation": 1})
    messages = [record.message for record in caplog.records]
    assert "no way to detect fonts" in messages
    assert "Indexed 3 font families from fontconfig (generation 1)" in messages
    assert emitter.debug_enabled is True


def test_format_event_message() -> None:
    assert (
        format_event_message("probe_fallback", {"primary": "native", "fallback": "fontconfig"})
        == "Probe 'native' found no fonts, falling back to 'fontconfig'"
    )
    assert format_event_message("index_built", {"count": 0}) == "Indexed 0 font families from none"
    assert format_event_message("unknown", {}) is None


def test_cli_emitter_writes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    state = CLIState(verbosity=1)
    emitter = CliEmitter(state=state)

    emitter.warning("no way to detect fonts")

    captured = capsys.readouterr()
    assert "warning: no way to detect fonts" in captured.err
    assert emitter.debug_enabled is False


def test_exception_messages_follow_chain() -> None:
    try:
        try:
            raise ProbeUnavailableError("'fc-list' is not available on PATH.")
        except ProbeUnavailableError as exc:
            raise FontProbeError("detection failed") from exc
    except FontProbeError as exc:
        assert exception_messages(exc) == [
            "detection failed",
            "'fc-list' is not available on PATH.",
        ]
