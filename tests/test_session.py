"""
Tests for gesture handling and history integration in EditingSession.
"""
import pytest

from skinpaint.errors import GestureStateError
from skinpaint.geometry import HitResult
from skinpaint.layout import BodyPart
from skinpaint.paint import Tool
from skinpaint.session import EditingSession, GestureState, ToolSettings
from skinpaint.symmetry import SymmetryMode
from skinpaint.templates import SKIN_TONE
from skinpaint.texture import TRANSPARENT, Layer, Texture

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)


@pytest.fixture
def session():
    return EditingSession(settings=ToolSettings(color=RED), seed=42)


class TestSettings:

    def test_defaults(self):
        settings = ToolSettings()
        assert settings.tool is Tool.PENCIL
        assert settings.brush_radius == 0
        assert settings.layer is Layer.BASE
        assert settings.symmetry is SymmetryMode.NONE

    def test_rgb_color_is_normalised(self):
        assert ToolSettings(color=(1, 2, 3)).color == (1, 2, 3, 255)

    @pytest.mark.parametrize("radius", [-1, 9])
    def test_radius_range(self, radius):
        with pytest.raises(ValueError):
            ToolSettings(brush_radius=radius)


class TestGestures:

    def test_pencil_tap_end_to_end(self, session):
        entry = session.tap(10, 10)

        assert session.surface.get(10, 10, Layer.BASE) == RED
        assert session.surface.get(11, 10, Layer.BASE) == TRANSPARENT
        assert entry.description == "Pencil"
        assert len(session.history) == 2

    def test_drag_draws_line_and_records_one_entry(self, session):
        session.begin_gesture(0, 0)
        assert session.state is GestureState.PAINTING
        session.drag_to(10, 0)
        session.drag_to(10, 10)
        session.end_gesture()

        for x in range(0, 11, 2):
            assert session.surface.get(x, 0, Layer.BASE) == RED
        assert session.surface.get(10, 10, Layer.BASE) == RED
        assert session.state is GestureState.IDLE
        assert len(session.history) == 2

    def test_drag_does_not_restamp_joints(self, session):
        session.settings.color = (255, 0, 0, 128)
        session.begin_gesture(0, 0)
        session.drag_to(4, 0)
        session.drag_to(8, 0)
        session.end_gesture()

        for x in (0, 2, 4, 6, 8):
            assert session.surface.get(x, 0, Layer.BASE) == (255, 0, 0, 128)

    def test_gesture_records_only_its_own_changes(self, session):
        # Edits made directly on the surface are not attributed to a gesture.
        session.surface.set(4, 4, Layer.BASE, GREEN)
        session.settings.tool = Tool.ERASER
        assert session.tap(30, 30) is None
        assert len(session.history) == 1

    def test_surface_changes_before_gesture_ends(self, session):
        session.begin_gesture(3, 3)
        assert session.surface.get(3, 3, Layer.BASE) == RED
        assert len(session.history) == 1
        session.end_gesture()

    def test_unchanged_gesture_records_nothing(self, session):
        session.settings.tool = Tool.ERASER
        assert session.tap(5, 5) is None
        assert len(session.history) == 1

    def test_nested_begin_is_rejected(self, session):
        session.begin_gesture(1, 1)
        with pytest.raises(GestureStateError):
            session.begin_gesture(2, 2)

    def test_drag_without_gesture_is_rejected(self, session):
        with pytest.raises(GestureStateError):
            session.drag_to(1, 1)
        with pytest.raises(GestureStateError):
            session.end_gesture()

    def test_failed_begin_returns_to_idle(self, session):
        session.settings.color = (300, 0, 0, 255)
        with pytest.raises(ValueError):
            session.begin_gesture(1, 1)
        assert session.state is GestureState.IDLE

    def test_symmetry_follows_settings(self, session):
        session.settings.symmetry = SymmetryMode.HORIZONTAL
        session.tap(2, 2)
        assert session.surface.get(61, 2, Layer.BASE) == RED

    def test_fill_tool(self, session):
        session.settings.tool = Tool.FILL
        session.settings.layer = Layer.OVERLAY
        entry = session.tap(0, 0)
        assert entry.description == "Fill"
        assert session.surface.get(63, 63, Layer.OVERLAY) == RED
        assert session.surface.get(63, 63, Layer.BASE) == TRANSPARENT

    def test_recent_colors_track_painting(self, session):
        session.tap(0, 0)
        session.settings.color = GREEN
        session.tap(1, 0)
        assert session.recent_colors.as_list() == [GREEN, RED]


class TestEyedropper:

    def test_pick_sets_active_color(self, session):
        session.surface.set(4, 4, Layer.BASE, GREEN)
        session.settings.tool = Tool.EYEDROPPER

        assert session.tap(4, 4) is None
        assert session.settings.color == GREEN
        assert GREEN in session.recent_colors.as_list()

    def test_transparent_pick_keeps_color(self, session):
        session.settings.tool = Tool.EYEDROPPER
        session.tap(4, 4)
        assert session.settings.color == RED

    def test_drag_keeps_picking(self, session):
        session.surface.set(9, 9, Layer.BASE, GREEN)
        session.settings.tool = Tool.EYEDROPPER
        session.begin_gesture(0, 0)
        session.drag_to(9, 9)
        session.end_gesture()
        assert session.settings.color == GREEN


class TestSessionHistory:

    def test_undo_redo(self, session):
        session.tap(1, 1)
        session.tap(2, 2)

        assert session.undo()
        assert session.surface.get(2, 2, Layer.BASE) == TRANSPARENT
        assert session.surface.get(1, 1, Layer.BASE) == RED

        assert session.undo()
        assert session.snapshot() == Texture.blank()
        assert not session.undo()

        assert session.redo()
        assert session.surface.get(1, 1, Layer.BASE) == RED

    def test_new_gesture_clears_redo(self, session):
        session.tap(1, 1)
        session.undo()
        session.tap(3, 3)
        assert not session.redo()

    def test_history_locked_during_gesture(self, session):
        session.begin_gesture(0, 0)
        with pytest.raises(GestureStateError):
            session.undo()
        with pytest.raises(GestureStateError):
            session.redo()

    def test_undo_after_reset_returns_painting(self, session):
        session.tap(1, 1)
        session.reset()
        assert session.snapshot() == Texture.blank()
        session.undo()
        assert session.surface.get(1, 1, Layer.BASE) == RED

    def test_load_template(self, session):
        entry = session.load_template("steve")
        assert entry.description == "Template: steve"
        assert session.surface.get(12, 12, Layer.BASE) == SKIN_TONE

    def test_unknown_template(self, session):
        with pytest.raises(KeyError):
            session.load_template("herobrine")


class TestPaintHit:

    def test_hit_starts_gesture_and_paints_face(self, session):
        x, y = session.paint_hit(HitResult(BodyPart.HEAD, (0, 0, 1), (0, 0, 4)))
        assert (x, y) == (12, 12)
        assert session.state is GestureState.PAINTING
        assert session.surface.get(12, 12, Layer.BASE) == RED

        session.paint_hit(HitResult(BodyPart.BODY, (0, 0, 1), (0, 0, 2)))
        session.end_gesture()

        assert session.surface.get(24, 26, Layer.BASE) == RED
        assert len(session.history) == 2

    def test_hit_on_overlay_layer(self, session):
        session.settings.layer = Layer.OVERLAY
        assert session.paint_hit(HitResult(BodyPart.HEAD, (0, 0, 1), (0, 0, 4))) == (44, 12)
        session.end_gesture()
        assert session.surface.get(44, 12, Layer.OVERLAY) == RED

    def test_world_hit_goes_through_rig(self, session):
        assert session.paint_world_hit((0, 28, 4), (0, 0, 1)) == (12, 12)
        session.end_gesture()
        assert session.surface.get(12, 12, Layer.BASE) == RED

    def test_world_hit_with_explicit_part(self, session):
        session.rig.set_rotation(BodyPart.HEAD, (0, 90, 0))
        assert session.paint_world_hit((4, 28, 0), (1, 0, 0), BodyPart.HEAD) == (12, 12)
        session.end_gesture()

    def test_world_hit_off_model(self, session):
        assert session.paint_world_hit((0, 100, 0), (0, 1, 0)) is None
        assert session.state is GestureState.IDLE
