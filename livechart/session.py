# livechart/session.py
from __future__ import annotations

import logging

from PyQt6.QtCore import QObject

from livechart import config
from livechart.chart.drag import DragInteraction
from livechart.chart.viewport import ViewportController
from livechart.data.buffer import SeriesBuffer
from livechart.data.models import DataPoint
from livechart.data.scheduler import UpdateScheduler
from livechart.data.sources import DataSource, make_source

log = logging.getLogger(__name__)


class ChartSession(QObject):
    """
    Une instance de chart : possède le buffer, le viewport, le drag et le
    scheduler. Cycle de vie explicite start() / stop().
    """

    def __init__(self, source: DataSource | None = None,
                 window_size: int = config.WINDOW_SIZE,
                 interval_ms: int = config.UPDATE_INTERVAL_MS,
                 pixels_per_index: float = config.PIXELS_PER_INDEX,
                 initial_points: int = config.INITIAL_POINTS,
                 parent=None):
        super().__init__(parent)
        self.source = source or make_source()
        self.initial_points = initial_points

        self.buffer = SeriesBuffer(self)
        self.viewport = ViewportController(window_size, parent=self)
        self.drag = DragInteraction(self.viewport, pixels_per_index)
        self.scheduler = UpdateScheduler(self.source, self.buffer, self.viewport,
                                         interval_ms=interval_ms, parent=self)
        self._started = False
        self._closed = False

    @property
    def running(self) -> bool:
        return self._started

    def start(self):
        if self._closed:
            raise RuntimeError("session fermée: en créer une nouvelle")
        if self._started:
            return
        self._started = True
        if self.initial_points > 0 and self.buffer.length() == 0:
            self.scheduler.load_history(self.initial_points)
        self.scheduler.start()
        log.info("▶️ session démarrée (fenêtre=%d)", self.viewport.window_size)

    def stop(self):
        """Annule timer + fetch en vol. Buffer et viewport restent lisibles."""
        if not self._started:
            return
        self._started = False
        self._closed = True
        self.scheduler.shutdown()
        log.info("⏹️ session arrêtée (%d points)", self.buffer.length())

    def window_points(self) -> tuple[DataPoint, ...]:
        view = self.viewport.current_window()
        return self.buffer.slice(view.start, view.end)
