# livechart/chart/drag.py
from __future__ import annotations

import math
from enum import Enum

from livechart import config
from livechart.data.models import DragState

from .viewport import ViewportController


class DragPhase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


def _js_round(v: float) -> int:
    # Math.round : les demis vont vers +inf (round() de Python arrondit au pair)
    return math.floor(v + 0.5)


class DragInteraction:
    """
    Machine à états Idle <-> Dragging : transforme les événements pointeur
    en deltas d'index pour le ViewportController.
    Chaque move quantifie SON propre delta puis ré-ancre : le pan est
    incrémental, indépendant de la vitesse.
    """

    def __init__(self, viewport: ViewportController, pixels_per_index: float = config.PIXELS_PER_INDEX):
        if pixels_per_index <= 0:
            raise ValueError("pixels_per_index doit être > 0")
        self.viewport = viewport
        self.pixels_per_index = pixels_per_index
        self.state = DragState()

    @property
    def phase(self) -> DragPhase:
        return DragPhase.DRAGGING if self.state.active else DragPhase.IDLE

    def pointer_down(self, x: float):
        self.state = DragState(active=True, anchor_x=x)

    def pointer_move(self, x: float) -> int:
        """Retourne le delta d'index appliqué (0 si rien)."""
        if not self.state.active:
            return 0
        delta = _js_round((x - self.state.anchor_x) / self.pixels_per_index)
        if delta != 0:
            # drag vers la droite (delta > 0) -> données plus anciennes
            self.viewport.pan_by(delta)
            self.state.anchor_x = x
        return delta

    def pointer_up(self):
        self.state = DragState()

    def pointer_leave(self):
        self.state = DragState()
