"""
Undo Manager - Bounded snapshot history over the before/after scenes
"""

from collections import deque
from typing import Optional

from PySide6.QtCore import QObject, Signal

from models.scene import SceneContainer
from sketch.sketch_constants import MAX_UNDO
from utils.debug_logger import debug_logger


class UndoManager(QObject):
    """Keeps deep copies of the scene container taken before each change

    Entries are pushed *before* a mutation, so popping one restores the state
    the user saw before that action. When the stack is full the oldest entry
    is dropped.
    """

    can_undo_changed = Signal(bool)

    def __init__(self, max_depth: int = MAX_UNDO):
        super().__init__()
        if max_depth < 1:
            raise ValueError("Undo depth must be at least 1")
        self.max_depth = max_depth
        self._stack: deque = deque(maxlen=max_depth)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def can_undo(self) -> bool:
        return len(self._stack) > 0

    def record_before_change(self, scenes: SceneContainer):
        """Snapshot the container; call before mutating it"""
        if len(self._stack) == self.max_depth:
            debug_logger.debug('UndoManager', "History full, dropping oldest entry",
                               {'count': self.max_depth})
        self._stack.append(scenes.copy())
        self.can_undo_changed.emit(True)

    def undo(self) -> Optional[SceneContainer]:
        """Pop the most recent snapshot, or None when there is no history"""
        if not self._stack:
            return None
        previous = self._stack.pop()
        self.can_undo_changed.emit(self.can_undo)
        debug_logger.info('UndoManager', "Restored snapshot", {'count': len(self._stack)})
        return previous

    def clear(self):
        self._stack.clear()
        self.can_undo_changed.emit(False)
