from __future__ import annotations

from collections.abc import Iterator

import pytest

from fontprobe.query import set_font_query


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "FONTPROBE_CONFIG",
        "FONTPROBE_TOOLKIT",
        "FONTPROBE_TIMEOUT",
        "FONTPROBE_SKIP_FONT_CHECKS",
    ):
        monkeypatch.delenv(name, raising=False)
    previous = set_font_query(None)
    yield
    set_font_query(previous)
