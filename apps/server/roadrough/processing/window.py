"""Fixed-size window buffer for filtered motion samples."""

from __future__ import annotations

import numpy as np


class WindowAccumulator:
    """Collect filtered samples until exactly ``window_size`` are buffered.

    The backing array is allocated once; completing a window hands out a
    copy and rewinds the write index without resizing.
    """

    __slots__ = ("_data", "_count", "window_size")

    def __init__(self, window_size: int):
        if isinstance(window_size, bool) or not isinstance(window_size, int) or window_size < 1:
            raise ValueError(f"window_size must be a positive integer, got {window_size!r}")
        self.window_size = window_size
        self._data = np.zeros(window_size, dtype=np.float64)
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def push(self, value: float) -> np.ndarray | None:
        """Append *value*; return the completed window when it just filled up."""
        self._data[self._count] = value
        self._count += 1
        if self._count < self.window_size:
            return None
        completed = self._data.copy()
        self._count = 0
        return completed

    def discard(self) -> int:
        """Drop a partial window.  Returns the number of samples thrown away."""
        dropped = self._count
        self._count = 0
        return dropped
