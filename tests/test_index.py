from __future__ import annotations

from threading import Barrier, Thread

from fakes import CountingProbe, ListEmitter

from fontprobe.host import HostCapabilities
from fontprobe.index import FontIndex
from fontprobe.selector import PlatformSelector, SelectionRule


def _index(probe: CountingProbe, emitter: ListEmitter | None = None) -> FontIndex:
    selector = PlatformSelector([SelectionRule("fake", lambda host: True, probe)], emitter=emitter)
    return FontIndex(selector, host_factory=HostCapabilities, emitter=emitter)


def test_index_is_built_lazily_once() -> None:
    probe = CountingProbe(["DejaVu Sans Mono", "Consolas"])
    index = _index(probe)

    assert not index.is_built
    assert probe.calls == 0

    assert index.lookup("consolas")
    assert index.lookup("DEJAVU SANS MONO")
    assert not index.lookup("Helvetica")

    assert index.is_built
    assert probe.calls == 1
    assert index.generation == 1
    assert index.source == "fake"


def test_invalidate_forces_rebuild() -> None:
    probe = CountingProbe(["Consolas"])
    index = _index(probe)

    assert index.lookup("Consolas")
    index.invalidate()
    assert not index.is_built
    assert index.source is None

    probe.families = ["Fira Code"]
    assert not index.lookup("Consolas")
    assert index.lookup("fira code")
    assert probe.calls == 2
    assert index.generation == 2


def test_empty_snapshot_is_not_rebuilt_on_every_lookup() -> None:
    probe = CountingProbe([])
    index = _index(probe)

    assert not index.lookup("Arial")
    assert not index.lookup("Helvetica")
    assert probe.calls == 1
    assert len(index) == 0


def test_len_and_membership_build_the_snapshot_lazily() -> None:
    probe = CountingProbe(["Consolas", "consolas", "Fira Code"])
    index = _index(probe)

    assert len(index) == 2
    assert "FIRA CODE" in index
    assert 42 not in index
    assert probe.calls == 1

    index.invalidate()
    probe.families = ["Arial"]
    assert len(index) == 1
    assert index.build() == 1
    assert probe.calls == 3
    assert index.generation == 3


def test_families_are_sorted_and_deduplicated() -> None:
    probe = CountingProbe(["Noto Sans", "DejaVu Sans", "Noto Sans", "  "])
    index = _index(probe)

    assert index.families == ("DejaVu Sans", "Noto Sans")
    assert len(index) == 2
    assert "dejavu sans" in index
    assert 42 not in index


def test_build_reports_event() -> None:
    emitter = ListEmitter()
    index = _index(CountingProbe(["Consolas"]), emitter)

    assert index.build() == 1

    assert emitter.events == [("index_built", {"source": "fake", "count": 1, "generation": 1})]


def test_concurrent_first_lookups_build_once() -> None:
    probe = CountingProbe(["Consolas"])
    index = _index(probe)
    barrier = Barrier(8)
    results: list[bool] = []

    def worker() -> None:
        barrier.wait()
        results.append(index.lookup("consolas"))

    threads = [Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == [True] * 8
    assert probe.calls == 1
    assert index.generation == 1
