"""Drag : Idle <-> Dragging, deltas quantifiés et incrémentaux."""
import pytest

from livechart.chart.drag import DragInteraction, DragPhase
from livechart.chart.viewport import ViewportController


@pytest.fixture
def vc():
    vc = ViewportController(60)
    vc.on_buffer_grew(200)
    return vc


def test_move_without_down_is_ignored(vc):
    drag = DragInteraction(vc, pixels_per_index=10)
    assert drag.pointer_move(500) == 0
    assert drag.phase is DragPhase.IDLE
    assert vc.follow_live


def test_drag_right_reveals_older_data(vc):
    drag = DragInteraction(vc, pixels_per_index=10)
    drag.pointer_down(100)
    assert drag.phase is DragPhase.DRAGGING
    assert drag.pointer_move(130) == 3
    v = vc.current_window()
    assert (v.start, v.end) == (137, 197)
    assert not vc.follow_live


def test_drag_left_back_to_edge_resumes_live(vc):
    drag = DragInteraction(vc, pixels_per_index=10)
    drag.pointer_down(100)
    drag.pointer_move(150)
    drag.pointer_move(0)
    assert vc.current_window().end == 200
    assert vc.follow_live


def test_anchor_resets_only_on_nonzero_delta(vc):
    drag = DragInteraction(vc, pixels_per_index=10)
    drag.pointer_down(0)
    # petits pas < 5px : cumulés jusqu'au seuil
    assert drag.pointer_move(3) == 0
    assert drag.state.anchor_x == 0
    assert drag.pointer_move(6) == 1
    assert drag.state.anchor_x == 6
    # incrémental : le move suivant part du nouvel ancrage
    assert drag.pointer_move(16) == 1
    assert vc.current_window().start == 138


def test_rounding_matches_math_round(vc):
    drag = DragInteraction(vc, pixels_per_index=10)
    drag.pointer_down(0)
    assert drag.pointer_move(25) == 3
    drag.pointer_down(0)
    assert drag.pointer_move(-15) == -1
    drag.pointer_down(0)
    assert drag.pointer_move(-16) == -2


@pytest.mark.parametrize("release", ["pointer_up", "pointer_leave"])
def test_release_keeps_position(vc, release):
    drag = DragInteraction(vc, pixels_per_index=10)
    drag.pointer_down(0)
    drag.pointer_move(100)
    before = vc.current_window()
    getattr(drag, release)()
    assert drag.phase is DragPhase.IDLE
    assert not drag.state.active
    drag.pointer_move(400)
    assert vc.current_window() == before


def test_custom_ratio(vc):
    drag = DragInteraction(vc, pixels_per_index=4)
    drag.pointer_down(0)
    assert drag.pointer_move(8) == 2


def test_invalid_ratio(vc):
    with pytest.raises(ValueError):
        DragInteraction(vc, pixels_per_index=0)
