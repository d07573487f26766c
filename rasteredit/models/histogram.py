from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class Histogram:
    """
    Per-channel frequency counts of a grid: shape (3, 256), one row per
    R, G, B channel. Derived from a grid, never stored on its own.
    """
    counts: np.ndarray

    def __post_init__(self):
        c = np.array(self.counts, dtype=np.int64, copy=True)
        if c.shape != (3, 256):
            raise ValueError(f"Histogram counts must have shape (3, 256), got {c.shape}")
        c.setflags(write=False)
        object.__setattr__(self, "counts", c)

    def channel(self, index: int) -> np.ndarray:
        return self.counts[index]

    @property
    def max_count(self) -> int:
        """Largest single-bin count across all three channels."""
        return int(self.counts.max())
