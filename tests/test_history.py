"""
Tests for the bounded undo/redo history.
"""
import pytest

from skinpaint.history import DEFAULT_MAX_HISTORY, HistoryManager
from skinpaint.texture import Layer, PixelSurface, Texture


def _texture(value: int) -> Texture:
    surface = PixelSurface()
    surface.set(0, 0, Layer.BASE, (value, 0, 0, 255))
    return surface.snapshot()


@pytest.fixture
def history():
    manager = HistoryManager()
    manager.push(Texture.blank(), "Initial")
    return manager


class TestUndoRedo:

    def test_baseline_cannot_be_undone(self, history):
        assert not history.can_undo
        assert history.undo() is None
        assert len(history) == 1

    def test_undo_returns_previous_state(self, history):
        history.push(_texture(1), "A")
        history.push(_texture(2), "B")

        assert history.undo() == _texture(1)
        assert history.undo() == Texture.blank()
        assert history.undo() is None

    def test_redo_reapplies(self, history):
        history.push(_texture(1), "A")
        history.undo()

        assert history.can_redo
        assert history.redo() == _texture(1)
        assert not history.can_redo
        assert history.redo() is None

    def test_undo_redo_round_trip_restores_same_state(self, history):
        for i in range(1, 6):
            history.push(_texture(i), f"Step {i}")
        for _ in range(3):
            history.undo()
        for _ in range(3):
            history.redo()
        assert history.current().texture == _texture(5)

    def test_push_clears_redo(self, history):
        history.push(_texture(1), "A")
        history.undo()
        history.push(_texture(2), "B")

        assert not history.can_redo
        assert history.redo() is None
        assert history.current().texture == _texture(2)

    def test_descriptions(self, history):
        history.push(_texture(1), "Brush")
        assert history.get_undo_description() == "Brush"
        assert history.get_redo_description() == ""
        history.undo()
        assert history.get_undo_description() == ""
        assert history.get_redo_description() == "Brush"

    def test_entries_are_timestamped(self, history):
        entry = history.push(_texture(1), "A")
        assert entry.timestamp > 0
        assert entry.description == "A"


class TestBounds:

    def test_default_cap(self):
        assert HistoryManager().max_history == DEFAULT_MAX_HISTORY == 50

    def test_oldest_entries_evicted(self):
        history = HistoryManager(max_history=50)
        for i in range(60):
            history.push(_texture(i), f"Step {i}")

        assert len(history) == 50
        # Only 49 steps back remain; the oldest survivor becomes the baseline.
        undone = 0
        while history.undo() is not None:
            undone += 1
        assert undone == 49
        assert history.current().texture == _texture(10)

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            HistoryManager(max_history=0)

    def test_clear(self, history):
        history.push(_texture(1), "A")
        history.undo()
        history.clear()
        assert len(history) == 0
        assert history.current() is None
        assert not history.can_redo


class TestListeners:

    def test_listener_receives_flags(self, history):
        calls = []
        history.add_listener(lambda can_undo, can_redo: calls.append((can_undo, can_redo)))

        history.push(_texture(1), "A")
        history.undo()
        history.redo()

        assert calls == [(True, False), (False, True), (True, False)]

    def test_remove_listener(self, history):
        calls = []
        listener = lambda *flags: calls.append(flags)
        history.add_listener(listener)
        history.remove_listener(listener)
        history.push(_texture(1), "A")
        assert calls == []

    def test_failing_listener_does_not_break_history(self, history, caplog):
        def broken(can_undo, can_redo):
            raise RuntimeError("boom")

        history.add_listener(broken)
        history.push(_texture(1), "A")

        assert history.can_undo
        assert "Error notifying history listener" in caplog.text
