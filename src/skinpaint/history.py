"""
Undo/Redo history for skin editing sessions.

Keeps full Texture snapshots on an undo stack (the top is always the
current state) and a redo stack of states that were undone.
"""

import time
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .texture import Texture

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 50


@dataclass(frozen=True)
class HistoryEntry:
    texture: Texture
    description: str = ""
    timestamp: float = field(default_factory=time.time)


class HistoryManager:
    """Bounded undo/redo stack of texture snapshots"""

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        """
        Args:
            max_history: Maximum number of entries kept on the undo stack;
                the oldest entry is evicted first.
        """
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")
        self.max_history = max_history
        self._undo_stack: List[HistoryEntry] = []
        self._redo_stack: List[HistoryEntry] = []
        self._listeners: List[Callable[[bool, bool], None]] = []

    def __len__(self):
        return len(self._undo_stack)

    @property
    def can_undo(self) -> bool:
        # The baseline entry is never undone.
        return len(self._undo_stack) > 1

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def push(self, texture: Texture, description: str = "Edit") -> HistoryEntry:
        """
        Records a new state. Clears the redo stack.

        Args:
            texture: Snapshot of the surface after the change
            description: Short label for the change
        """
        entry = HistoryEntry(texture, description)
        self._undo_stack.append(entry)

        if len(self._undo_stack) > self.max_history:
            del self._undo_stack[0]

        self._redo_stack.clear()
        self._notify_listeners()

        logger.debug(f"State saved: {description} (total: {len(self._undo_stack)})")
        return entry

    def undo(self) -> Optional[Texture]:
        """
        Steps back one entry.

        Returns:
            The texture to restore, or None if only the baseline is left
        """
        if not self.can_undo:
            logger.debug("Cannot undo - at beginning of history")
            return None

        entry = self._undo_stack.pop()
        self._redo_stack.append(entry)
        self._notify_listeners()

        current = self._undo_stack[-1]
        logger.debug(f"Undo: {entry.description} -> {current.description}")
        return current.texture

    def redo(self) -> Optional[Texture]:
        """
        Re-applies the most recently undone entry.

        Returns:
            The texture to restore, or None if there is nothing to redo
        """
        if not self.can_redo:
            logger.debug("Cannot redo - at end of history")
            return None

        entry = self._redo_stack.pop()
        self._undo_stack.append(entry)
        self._notify_listeners()

        logger.debug(f"Redo: {entry.description}")
        return entry.texture

    def current(self) -> Optional[HistoryEntry]:
        return self._undo_stack[-1] if self._undo_stack else None

    def clear(self):
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._notify_listeners()
        logger.debug("History cleared")

    def get_undo_description(self) -> str:
        """Description of the change that undo would revert"""
        if self.can_undo:
            return self._undo_stack[-1].description
        return ""

    def get_redo_description(self) -> str:
        if self.can_redo:
            return self._redo_stack[-1].description
        return ""

    def add_listener(self, callback: Callable[[bool, bool], None]):
        """
        Args:
            callback: Called with (can_undo, can_redo) after every change
        """
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[bool, bool], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self):
        for callback in self._listeners:
            try:
                callback(self.can_undo, self.can_redo)
            except Exception:
                logger.exception("Error notifying history listener")
