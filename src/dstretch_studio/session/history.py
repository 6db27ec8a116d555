"""
In-memory undo/redo history of rendered pixel buffers.
"""

from typing import Optional

import numpy as np

from dstretch_studio.config import get_settings
from dstretch_studio.core.buffer import as_pixel_buffer


class HistoryStack:
    """Bounded undo/redo stack.

    Pushing after an undo discards the redo entries. When full, the oldest
    entry is dropped. Buffers are copied in and out.
    """

    def __init__(self, max_size: Optional[int] = None):
        """Initialize the history.

        Args:
            max_size: Maximum number of entries. Defaults to config.

        Raises:
            ValueError: If max_size is below 1
        """
        if max_size is None:
            max_size = get_settings().worker.history_size
        if max_size < 1:
            raise ValueError(f"History size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._entries: list[np.ndarray] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    @property
    def current(self) -> Optional[np.ndarray]:
        """Copy of the entry at the cursor, or None when empty."""
        if self._index < 0:
            return None
        return self._entries[self._index].copy()

    def push(self, buffer: np.ndarray) -> None:
        """Record a new state at the cursor."""
        del self._entries[self._index + 1:]
        self._entries.append(as_pixel_buffer(buffer))
        if len(self._entries) > self.max_size:
            del self._entries[: len(self._entries) - self.max_size]
        self._index = len(self._entries) - 1

    def undo(self) -> Optional[np.ndarray]:
        """Step back; returns the now-current buffer or None if impossible."""
        if not self.can_undo:
            return None
        self._index -= 1
        return self.current

    def redo(self) -> Optional[np.ndarray]:
        """Step forward; returns the now-current buffer or None if impossible."""
        if not self.can_redo:
            return None
        self._index += 1
        return self.current

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1
