# livechart/data/buffer.py
from __future__ import annotations

import logging
from typing import Iterable

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import OutOfOrderError, RangeError
from .models import DataPoint

log = logging.getLogger(__name__)


class SeriesBuffer(QObject):
    """
    Série append-only, ordre d'insertion = ordre chronologique.
    Les index ne bougent jamais une fois attribués (pas de suppression).
    """
    appended = pyqtSignal(int, int)   # (premier index ajouté, nouvelle longueur)
    changed  = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._points: list[DataPoint] = []

    # ---------- écriture ----------
    def append(self, point: DataPoint) -> int:
        self._check_order(point, self.last())
        index = len(self._points)
        self._points.append(point)
        self._notify(index)
        return index

    def extend(self, points: Iterable[DataPoint]) -> int:
        """Ajout en bloc : tout le lot est validé avant d'écrire quoi que ce soit."""
        batch = list(points)
        prev = self.last()
        for p in batch:
            self._check_order(p, prev)
            prev = p

        first = len(self._points)
        if batch:
            self._points.extend(batch)
            self._notify(first)
        return first

    # ---------- lecture ----------
    def length(self) -> int:
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def point(self, index: int) -> DataPoint:
        return self._points[index]

    def last(self) -> DataPoint | None:
        return self._points[-1] if self._points else None

    def slice(self, start: int, end: int) -> tuple[DataPoint, ...]:
        n = len(self._points)
        if start < 0 or end > n or start > end:
            raise RangeError(f"slice({start}, {end}) hors bornes (length={n})")
        return tuple(self._points[start:end])

    # ---------- interne ----------
    @staticmethod
    def _check_order(point: DataPoint, prev: DataPoint | None):
        if prev is not None and point.timestamp < prev.timestamp:
            raise OutOfOrderError(
                f"timestamp {point.timestamp.isoformat()} < dernier {prev.timestamp.isoformat()}"
            )

    def _notify(self, first: int):
        log.debug("buffer: +%d point(s) (length=%d)", len(self._points) - first, len(self._points))
        self.appended.emit(first, len(self._points))
        self.changed.emit()
