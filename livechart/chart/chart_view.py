# livechart/chart/chart_view.py
from __future__ import annotations

from PyQt6.QtCore import QPointF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QPainter, QPen, QPolygonF
from PyQt6.QtWidgets import QWidget

from .chart_bridge import RenderFrame

# (clé DataPoint, couleur, axe)
SERIES = [
    ("price",       "#00ff00", "left"),
    ("buy_volume",  "#3b82f6", "right"),
    ("sell_volume", "#ffd400", "right"),
]
MARGIN = 12


class ChartView(QWidget):
    """
    Widget hôte : dessine la fenêtre reçue (RenderFrame) et traduit la souris
    en événements pointeur. Ne connaît ni le buffer ni le viewport.
    """
    pointerDown     = pyqtSignal(float)
    pointerMove     = pyqtSignal(float)
    pointerUp       = pyqtSignal()
    pointerLeft     = pyqtSignal()
    resumeRequested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setMinimumHeight(240)
        self.setMouseTracking(False)
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self._frame: RenderFrame | None = None

    @property
    def frame(self) -> RenderFrame | None:
        return self._frame

    def set_frame(self, frame: RenderFrame):
        self._frame = frame
        self.update()

    # --------- souris -> pointeur ---------
    def mousePressEvent(self, e):
        if e.button() == Qt.MouseButton.LeftButton:
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            self.pointerDown.emit(e.position().x())
        super().mousePressEvent(e)

    def mouseMoveEvent(self, e):
        self.pointerMove.emit(e.position().x())
        super().mouseMoveEvent(e)

    def mouseReleaseEvent(self, e):
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.pointerUp.emit()
        super().mouseReleaseEvent(e)

    def mouseDoubleClickEvent(self, e):
        self.resumeRequested.emit()
        super().mouseDoubleClickEvent(e)

    def leaveEvent(self, e):
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.pointerLeft.emit()
        super().leaveEvent(e)

    # --------- rendu ---------
    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        w, h = self.width(), self.height()
        painter.fillRect(0, 0, w, h, QColor("#0e1116"))

        painter.setPen(QPen(QColor("#444444"), 1, Qt.PenStyle.DashLine))
        for i in range(1, 4):
            y = int(h * i / 4)
            painter.drawLine(0, y, w, y)

        frame = self._frame
        if frame is None or len(frame.points) < 2:
            painter.end()
            return

        # pas en x fixe : la fenêtre occupe toujours window_size cases
        step = (w - 2 * MARGIN) / max(1, frame.window_size - 1)
        for axis in ("left", "right"):
            keys = [(k, c) for k, c, a in SERIES if a == axis]
            values = [getattr(p, k) for k, _ in keys for p in frame.points]
            lo, hi = min(values), max(values)
            span = (hi - lo) or 1.0
            for key, color in keys:
                poly = QPolygonF([
                    QPointF(MARGIN + i * step,
                            h - MARGIN - (getattr(p, key) - lo) / span * (h - 2 * MARGIN))
                    for i, p in enumerate(frame.points)
                ])
                painter.setPen(QPen(QColor(color), 2))
                painter.drawPolyline(poly)

        painter.end()
