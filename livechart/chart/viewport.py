# livechart/chart/viewport.py
from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from livechart.data.models import Viewport

log = logging.getLogger(__name__)


class ViewportController(QObject):
    """
    Fenêtre visible [start, end) sur les index du buffer.
    - follow_live=True  : la fenêtre suit le dernier point (auto-scroll)
    - follow_live=False : l'utilisateur a pané, la fenêtre reste épinglée
    Ne garde que des index (jamais les points) : la longueur connue du buffer
    arrive via on_buffer_grew().
    """
    changed           = pyqtSignal(object)   # Viewport
    followLiveChanged = pyqtSignal(bool)

    def __init__(self, window_size: int, length: int = 0, parent=None):
        super().__init__(parent)
        if window_size <= 0:
            raise ValueError("window_size doit être > 0")
        self.window_size = window_size
        self._length = max(0, length)
        self._follow_live = True
        self._view = self._live_edge()

    # ---------- lecture ----------
    def current_window(self) -> Viewport:
        return self._view

    @property
    def follow_live(self) -> bool:
        return self._follow_live

    @property
    def length(self) -> int:
        return self._length

    # ---------- croissance (UpdateScheduler) ----------
    def on_buffer_grew(self, new_length: int):
        if new_length < self._length:
            raise ValueError(f"le buffer ne rétrécit jamais ({new_length} < {self._length})")
        grown = new_length - self._length
        self._length = new_length
        if grown == 0 or not self._follow_live:
            # épinglé : les index absolus ne bougent pas
            return

        start = self._view.start + grown
        end = start + self.window_size
        if end > new_length or new_length < self.window_size:
            self._set_view(self._live_edge())
        else:
            self._set_view(Viewport(start, end, self.window_size))

    # ---------- pan (DragInteraction) ----------
    def pan_by(self, delta: int):
        """start -= delta : delta > 0 recule vers les données plus anciennes."""
        if self._length < self.window_size:
            # rien à paner, on reste en live
            return

        max_start = max(0, self._length - self.window_size)
        start = min(max(self._view.start - delta, 0), max_start)
        view = Viewport(start, start + self.window_size, self.window_size)

        self._set_view(view)
        # égalité stricte, pas de tolérance (sinon ça clignote au bord)
        self._set_follow(view.end == self._length)

    def resume_live(self):
        """Retour immédiat au bord live (bouton / double-clic)."""
        self._set_view(self._live_edge())
        self._set_follow(True)

    # ---------- interne ----------
    def _live_edge(self) -> Viewport:
        if self._length < self.window_size:
            return Viewport(0, self._length, self.window_size)
        return Viewport(self._length - self.window_size, self._length, self.window_size)

    def _set_view(self, view: Viewport):
        if view == self._view:
            return
        self._view = view
        self.changed.emit(view)

    def _set_follow(self, follow: bool):
        if follow == self._follow_live:
            return
        self._follow_live = follow
        log.debug("viewport: follow_live=%s (%d..%d)", follow, self._view.start, self._view.end)
        self.followLiveChanged.emit(follow)
