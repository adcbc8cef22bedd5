# livechart/ui/main_window.py
from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import QApplication, QLabel, QMainWindow, QSizePolicy, QToolBar, QWidget

from livechart.chart.chart_bridge import RenderBridge, RenderFrame
from livechart.chart.chart_view import ChartView
from livechart.session import ChartSession

DARK_QSS = """
    /* --------- Global --------- */
    QMainWindow, QWidget { background-color:#0e1116; color:#cfd3dc; }
    * { font-family: "Inter", "Segoe UI", system-ui; font-size:13px; }

    /* --------- Toolbar --------- */
    QToolBar { background:#0b1220; border-bottom:1px solid #1f2937; spacing:10px; padding:6px; }
    QToolButton {
    background:#111827; color:#e5e7eb; border:1px solid #334155;
    padding:6px 12px; border-radius:10px;
    }
    QToolButton:hover { background:#0b1220; }
    QToolButton:disabled { color:#4b5563; border-color:#1f2937; }

    /* --------- Chips “état” --------- */
    QLabel[badge="ok"]   { background:#0a1f16; border:1px solid #1f7a4f; color:#8ff0b8; padding:2px 8px; border-radius:9px; }
    QLabel[badge="warn"] { background:#1f1a0a; border:1px solid #7a611f; color:#ffd479; padding:2px 8px; border-radius:9px; }
    QLabel[badge="err"]  { background:#1f0a0a; border:1px solid #7a1f1f; color:#ff9a9a; padding:2px 8px; border-radius:9px; }
"""


def _badge(label: QLabel, text: str, kind: str):
    label.setText(text)
    label.setProperty("badge", kind)
    label.style().unpolish(label); label.style().polish(label)


class MainWindow(QMainWindow):

    def __init__(self, session: ChartSession | None = None):
        super().__init__()
        self.setWindowTitle("Live Price Chart")
        self.resize(1200, 600)
        self.setStyleSheet(DARK_QSS)

        self.session = session or ChartSession(parent=self)
        self.chart = ChartView()
        self.setCentralWidget(self.chart)

        # Toolbar
        tb = QToolBar(); tb.setMovable(False); self.addToolBar(tb)
        self.actLive = QAction("⏭ Live", self)
        self.actLive.setToolTip("Revenir au dernier point (double-clic sur le chart)")
        self.actLive.triggered.connect(self.session.viewport.resume_live)
        tb.addAction(self.actLive)

        spacer = QWidget(); spacer.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred); tb.addWidget(spacer)

        self._mode_lbl  = QLabel(); tb.addWidget(self._mode_lbl)
        self._stale_lbl = QLabel(); tb.addWidget(self._stale_lbl)
        self._count_lbl = QLabel(); tb.addWidget(self._count_lbl)

        # Pointeur -> machine à états drag
        drag = self.session.drag
        self.chart.pointerDown.connect(drag.pointer_down)
        self.chart.pointerMove.connect(drag.pointer_move)
        self.chart.pointerUp.connect(drag.pointer_up)
        self.chart.pointerLeft.connect(drag.pointer_leave)
        self.chart.resumeRequested.connect(self.session.viewport.resume_live)

        # Buffer + viewport -> rendu
        self.bridge = RenderBridge(self)
        self.bridge.frameReady.connect(self._on_frame)
        self.bridge.bind(self.session.buffer, self.session.viewport)

        self.session.scheduler.staleChanged.connect(self._on_stale)
        self.session.scheduler.sourceFailed.connect(
            lambda msg: self.statusBar().showMessage(f"Source indisponible: {msg}", 8000))
        self.session.scheduler.invariantViolated.connect(
            lambda msg: self.statusBar().showMessage(f"Point rejeté: {msg}", 8000))

        self._on_stale(False)
        self.bridge.publish()

        app = QApplication.instance()
        if app:
            app.aboutToQuit.connect(self.stop_feed)

        QTimer.singleShot(0, self.session.start)

    # ---------- rendu ----------
    def _on_frame(self, frame: RenderFrame):
        self.chart.set_frame(frame)
        if frame.follow_live:
            _badge(self._mode_lbl, "● LIVE", "ok")
        else:
            _badge(self._mode_lbl, f"⏸ {frame.viewport.start}–{frame.viewport.end}", "warn")
        self.actLive.setEnabled(not frame.follow_live)
        self._count_lbl.setText(f"{self.session.buffer.length()} pts")

    def _on_stale(self, stale: bool):
        if stale:
            _badge(self._stale_lbl, "données périmées", "err")
            self._stale_lbl.show()
        else:
            self._stale_lbl.hide()

    # ---------- shutdown ----------
    def closeEvent(self, e):
        self.stop_feed()
        super().closeEvent(e)

    def stop_feed(self):
        self.session.stop()
