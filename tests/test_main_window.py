"""MainWindow : câblage session <-> vue <-> rendu."""
from livechart.data.sources import SimulatedSource
from livechart.session import ChartSession
from livechart.ui.main_window import MainWindow


def test_window_wires_session(qtbot):
    session = ChartSession(source=SimulatedSource(seed=5), window_size=20,
                           interval_ms=10_000, initial_points=30)
    win = MainWindow(session=session)
    qtbot.addWidget(win)
    win.show()

    qtbot.waitUntil(lambda: session.buffer.length() == 30, timeout=3000)
    assert len(win.chart.frame.points) == 20
    assert not win.actLive.isEnabled()

    # drag via les signaux de la vue : 50px à droite = 5 points en arrière
    win.chart.pointerDown.emit(100.0)
    win.chart.pointerMove.emit(150.0)
    win.chart.pointerUp.emit()
    assert session.viewport.current_window().end == 25
    assert win.actLive.isEnabled()

    win.actLive.trigger()
    assert session.viewport.follow_live
    assert win.chart.frame.viewport.end == 30

    win.close()
    assert not session.running
