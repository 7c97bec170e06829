# History management for undo/redo functionality
"""
A single bounded undo/redo history shared by every image in a session.

Each entry pairs an image identifier with a deep copy of that image's
adjustments, taken right before a mutating gesture. Entries are kept in one
list with a position pointer: entries before the pointer can be undone,
entries after it can be redone.

Undoing an entry stores the state it replaces on that same entry, so redo
returns exactly what undo took away, however undos on different images are
interleaved.
"""

from typing import TypeVar, Generic, Optional, List, Callable, Tuple
from dataclasses import dataclass, field, replace
from copy import deepcopy
import time

from .errors import ConfigurationError, EditResult
from .logger import get_logger
from ..config import settings

logger = get_logger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class HistoryEntry(Generic[T]):
    """A single checkpoint in the history.

    ``state`` is the snapshot taken before the edit. ``redo_state`` is filled
    in when the entry is undone and holds the state that undo replaced.
    """
    image_id: str
    state: T
    description: str = ""
    timestamp: float = field(default_factory=time.time)
    redo_state: Optional[T] = None


class EditHistory(Generic[T]):
    """
    Bounded checkpoint history with a position pointer.

    Type parameter T is the snapshot type (normally Adjustments).
    """

    def __init__(
        self,
        max_size: int = settings.HISTORY_MAX_SIZE,
        deep_copy: bool = True,
        on_change: Optional[Callable[[], None]] = None
    ):
        """
        Initialize the history.

        Args:
            max_size: Maximum number of entries; the oldest is evicted first.
            deep_copy: Whether to deep copy states going in and coming out.
            on_change: Optional callback when history changes.
        """
        if max_size < 1:
            raise ConfigurationError(f"History size must be at least 1, got {max_size}",
                                     setting_name="HISTORY_MAX_SIZE")
        self._entries: List[HistoryEntry[T]] = []
        self._position = 0
        self._max_size = max_size
        self._deep_copy = deep_copy
        self._on_change = on_change

    def _copy(self, state: T) -> T:
        return deepcopy(state) if self._deep_copy else state

    def _evict_overflow(self) -> None:
        while len(self._entries) > self._max_size:
            self._entries.pop(0)
            self._position = max(0, self._position - 1)

    def checkpoint(self, image_id: str, state: T, description: str = "") -> None:
        """
        Record the state of ``image_id`` before a mutation.

        Anything that could have been redone is discarded.
        """
        del self._entries[self._position:]
        self._entries.append(HistoryEntry(image_id, self._copy(state), description))
        self._evict_overflow()
        self._position = len(self._entries)
        logger.debug("History checkpoint: %s for '%s' (size: %d)",
                     description or "unnamed", image_id, len(self._entries))
        self._notify_change()

    def undo(self, image_id: str, current: T) -> Tuple[EditResult, Optional[T]]:
        """
        Step back one checkpoint for ``image_id``.

        Args:
            image_id: The image currently being edited.
            current: Its present state, kept on the entry so that redo can return to it.

        Returns:
            (EditResult.OK, restored_state) or (advisory result, None).
        """
        if self._position == 0:
            logger.debug("Nothing to undo")
            return EditResult.NOTHING_TO_UNDO, None

        target = self._entries[self._position - 1]
        if target.image_id != image_id:
            logger.debug("Undo target belongs to '%s', not '%s'", target.image_id, image_id)
            return EditResult.CROSS_IMAGE, None

        self._position -= 1
        self._entries[self._position] = replace(target, redo_state=self._copy(current))
        logger.debug("Undo: restored '%s'", target.description or "unnamed")
        self._notify_change()
        return EditResult.OK, self._copy(target.state)

    def redo(self, image_id: str) -> Tuple[EditResult, Optional[T]]:
        """Step forward to the state the matching undo replaced."""
        if not self.can_redo():
            logger.debug("Nothing to redo")
            return EditResult.NOTHING_TO_REDO, None

        target = self._entries[self._position]
        if target.image_id != image_id:
            logger.debug("Redo target belongs to '%s', not '%s'", target.image_id, image_id)
            return EditResult.CROSS_IMAGE, None

        self._position += 1
        logger.debug("Redo: reapplied '%s'", target.description or "unnamed")
        self._notify_change()
        return EditResult.OK, self._copy(target.redo_state)

    def can_undo(self, image_id: Optional[str] = None) -> bool:
        if self._position == 0:
            return False
        return image_id is None or self._entries[self._position - 1].image_id == image_id

    def can_redo(self, image_id: Optional[str] = None) -> bool:
        # Entries past the pointer have all been undone, so each carries a redo_state
        if self._position >= len(self._entries):
            return False
        return image_id is None or self._entries[self._position].image_id == image_id

    def clear(self) -> None:
        """Clear all history."""
        self._entries.clear()
        self._position = 0
        logger.debug("History cleared")
        self._notify_change()

    @property
    def position(self) -> int:
        return self._position

    @property
    def max_size(self) -> int:
        return self._max_size

    def entries(self) -> List[HistoryEntry[T]]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get_undo_description(self) -> Optional[str]:
        """Get description of the checkpoint that would be restored by undo."""
        if self._position > 0:
            return self._entries[self._position - 1].description
        return None

    def _notify_change(self) -> None:
        """Notify listeners of history change."""
        if self._on_change:
            try:
                self._on_change()
            except Exception:
                logger.exception("Error in history change callback")
