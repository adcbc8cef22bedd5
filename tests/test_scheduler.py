"""UpdateScheduler : un point par tick, un seul fetch en vol, pannes de source récupérées."""
import threading

import pytest

from livechart.chart.viewport import ViewportController
from livechart.data.buffer import SeriesBuffer
from livechart.data.errors import OutOfOrderError, SourceUnavailable
from livechart.data.scheduler import UpdateScheduler
from livechart.data.sources import DataSource, SimulatedSource
from tests.helpers import make_point


class CountingSource(DataSource):
    name = "counting"

    def __init__(self, start: int = 0):
        self.i = start

    def next_point(self):
        p = make_point(self.i)
        self.i += 1
        return p


class BlockingSource(CountingSource):
    """Bloque dans next_point() jusqu'à release ; compte les fetchs simultanés."""

    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def next_point(self):
        with self._lock:
            self.calls += 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.entered.set()
        self.release.wait(5)
        with self._lock:
            self.in_flight -= 1
        return super().next_point()


class FlakySource(CountingSource):
    def __init__(self, errors):
        super().__init__()
        self.errors = list(errors)

    def next_point(self):
        if self.errors:
            raise self.errors.pop(0)
        return super().next_point()


@pytest.fixture
def make_scheduler(qtbot):
    created = []

    def _make(source, window_size=60, **kw):
        buf = SeriesBuffer()
        vc = ViewportController(window_size)
        sched = UpdateScheduler(source, buf, vc, **kw)
        created.append(sched)
        return sched, buf, vc

    yield _make
    for s in created:
        s.shutdown()


def test_tick_appends_and_advances(make_scheduler, qtbot):
    sched, buf, vc = make_scheduler(CountingSource())
    for n in range(1, 4):
        with qtbot.waitSignal(sched.tickCompleted, timeout=2000) as blocker:
            assert sched.fire()
        assert blocker.args == [n]
    assert buf.length() == 3
    assert (vc.current_window().start, vc.current_window().end) == (0, 3)


def test_tick_keeps_pinned_window(make_scheduler, qtbot):
    sched, buf, vc = make_scheduler(CountingSource(start=100), window_size=5)
    buf.extend([make_point(i) for i in range(20)])
    vc.on_buffer_grew(20)
    vc.pan_by(4)
    with qtbot.waitSignal(sched.tickCompleted, timeout=2000):
        sched.fire()
    assert buf.length() == 21
    assert (vc.current_window().start, vc.current_window().end) == (11, 16)


def test_only_one_fetch_in_flight(make_scheduler, qtbot):
    source = BlockingSource()
    sched, buf, _ = make_scheduler(source)
    skipped = []
    sched.tickSkipped.connect(lambda: skipped.append(1))

    assert sched.fire()
    assert source.entered.wait(2)
    assert sched.busy
    assert not sched.fire()
    assert not sched.fire()
    assert skipped == [1, 1]

    with qtbot.waitSignal(sched.tickCompleted, timeout=2000):
        source.release.set()
    assert source.calls == 1
    assert source.max_in_flight == 1
    assert buf.length() == 1

    with qtbot.waitSignal(sched.tickCompleted, timeout=2000):
        assert sched.fire()
    assert source.calls == 2


def test_source_failure_is_recovered(make_scheduler, qtbot):
    source = FlakySource([SourceUnavailable("down"), RuntimeError("boom")])
    sched, buf, vc = make_scheduler(source)
    stale = []
    sched.staleChanged.connect(stale.append)

    with qtbot.waitSignal(sched.sourceFailed, timeout=2000) as blocker:
        sched.fire()
    assert blocker.args == ["down"]
    assert sched.stale

    with qtbot.waitSignal(sched.sourceFailed, timeout=2000) as blocker:
        sched.fire()
    assert "boom" in blocker.args[0]
    assert buf.length() == 0
    assert vc.current_window().end == 0

    with qtbot.waitSignal(sched.tickCompleted, timeout=2000):
        sched.fire()
    assert buf.length() == 1
    assert stale == [True, False]
    assert not sched.stale


def test_out_of_order_point_is_reported(make_scheduler, qtbot):
    sched, buf, vc = make_scheduler(CountingSource(start=0))
    buf.append(make_point(50))
    vc.on_buffer_grew(1)

    with qtbot.waitSignal(sched.invariantViolated, timeout=2000):
        sched.fire()
    assert buf.length() == 1
    assert vc.current_window().end == 1


def test_out_of_order_point_is_fatal_when_strict(make_scheduler):
    sched, buf, _ = make_scheduler(CountingSource(), strict=True)
    buf.append(make_point(50))
    with pytest.raises(OutOfOrderError):
        sched._on_fetched(sched._generation, "point", make_point(1))


def test_stop_discards_late_result(make_scheduler, qtbot):
    source = BlockingSource()
    sched, buf, _ = make_scheduler(source)
    sched.start()
    sched.fire()
    assert source.entered.wait(2)
    sched.stop()
    assert not sched.running

    with qtbot.assertNotEmitted(sched.tickCompleted, wait=200):
        source.release.set()
    assert buf.length() == 0


def test_timer_drives_ticks(make_scheduler, qtbot):
    sched, buf, _ = make_scheduler(CountingSource(), interval_ms=20)
    sched.start()
    assert sched.running
    qtbot.waitUntil(lambda: buf.length() >= 3, timeout=3000)
    sched.stop()


def test_load_history_seeds_the_window(make_scheduler, qtbot):
    sched, buf, vc = make_scheduler(SimulatedSource(seed=7), interval_ms=10_000)
    with qtbot.waitSignal(sched.tickCompleted, timeout=2000) as blocker:
        assert sched.load_history(60)
    assert blocker.args == [60]
    assert (vc.current_window().start, vc.current_window().end) == (0, 60)
    assert vc.follow_live

    # puis les ticks live s'enchaînent après l'historique
    with qtbot.waitSignal(sched.tickCompleted, timeout=2000):
        sched.fire()
    assert buf.length() == 61
    assert (vc.current_window().start, vc.current_window().end) == (1, 61)


def test_load_history_nothing_to_do(make_scheduler):
    sched, _, _ = make_scheduler(CountingSource())
    assert not sched.load_history(0)
