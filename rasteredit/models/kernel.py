from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class Kernel:
    """
    Odd-sized square matrix of real weights used for spatial convolution.
    """
    weights: np.ndarray  # Shape (2k+1, 2k+1), float64.

    def __post_init__(self):
        w = np.array(self.weights, dtype=np.float64, copy=True)
        if w.ndim != 2 or w.shape[0] != w.shape[1] or w.shape[0] % 2 == 0:
            raise ValueError(f"Kernel must be an odd-sized square matrix, got shape {w.shape}")
        w.setflags(write=False)
        object.__setattr__(self, "weights", w)

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    @property
    def radius(self) -> int:
        return self.size // 2

    @classmethod
    def coerce(cls, value) -> "Kernel":
        return value if isinstance(value, cls) else cls(value)


BLUR = Kernel([
    [1 / 16, 1 / 8, 1 / 16],
    [1 / 8,  1 / 4, 1 / 8],
    [1 / 16, 1 / 8, 1 / 16],
])

SHARPEN = Kernel([
    [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
    [-1 / 8,  1 / 4,  1 / 4,  1 / 4, -1 / 8],
    [-1 / 8,  1 / 4,  1.0,    1 / 4, -1 / 8],
    [-1 / 8,  1 / 4,  1 / 4,  1 / 4, -1 / 8],
    [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
])
