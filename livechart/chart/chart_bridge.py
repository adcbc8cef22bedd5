# livechart/chart/chart_bridge.py
from __future__ import annotations

import json
from dataclasses import dataclass

from PyQt6.QtCore import QObject, pyqtSignal

from livechart.data.buffer import SeriesBuffer
from livechart.data.models import DataPoint, Viewport

from .viewport import ViewportController


@dataclass(frozen=True)
class RenderFrame:
    points: tuple[DataPoint, ...]
    window_size: int
    viewport: Viewport
    follow_live: bool

    def to_json(self) -> str:
        payload = {"points": [p.to_dict() for p in self.points], "windowSize": self.window_size}
        return json.dumps(payload, separators=(",", ":"))


class RenderBridge(QObject):
    """
    Frontière vers le rendu : écoute buffer + viewport et publie la tranche
    visible (frameReady) à chaque changement. Lecture seule, ne modifie jamais la série.
    """
    frameReady = pyqtSignal(object)   # RenderFrame

    def __init__(self, parent=None):
        super().__init__(parent)
        self._buffer: SeriesBuffer | None = None
        self._viewport: ViewportController | None = None

    def bind(self, buffer: SeriesBuffer, viewport: ViewportController):
        self.unbind()
        self._buffer = buffer
        self._viewport = viewport
        buffer.changed.connect(self.publish)
        viewport.changed.connect(self.publish)
        viewport.followLiveChanged.connect(self.publish)

    def unbind(self):
        if self._buffer is not None:
            self._buffer.changed.disconnect(self.publish)
        if self._viewport is not None:
            self._viewport.changed.disconnect(self.publish)
            self._viewport.followLiveChanged.disconnect(self.publish)
        self._buffer = self._viewport = None

    def snapshot(self) -> RenderFrame | None:
        if self._buffer is None or self._viewport is None:
            return None
        view = self._viewport.current_window()
        return RenderFrame(
            points=self._buffer.slice(view.start, view.end),
            window_size=self._viewport.window_size,
            viewport=view,
            follow_live=self._viewport.follow_live,
        )

    def publish(self, *_):
        frame = self.snapshot()
        if frame is not None:
            self.frameReady.emit(frame)
