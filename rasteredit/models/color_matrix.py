from __future__ import annotations
from dataclasses import dataclass
import numpy as np

# Rec. 709 luma weights.
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)


@dataclass(frozen=True)
class ColorMatrix:
    """
    3x3 matrix mapping an input (r, g, b) to an output (r, g, b).
    Row i holds the weights of output channel i.
    """
    matrix: np.ndarray

    def __post_init__(self):
        m = np.array(self.matrix, dtype=np.float64, copy=True)
        if m.shape != (3, 3):
            raise ValueError(f"Color matrix must be 3x3, got shape {m.shape}")
        m.setflags(write=False)
        object.__setattr__(self, "matrix", m)

    @classmethod
    def coerce(cls, value) -> "ColorMatrix":
        return value if isinstance(value, cls) else cls(value)


GREYSCALE = ColorMatrix([LUMA_WEIGHTS, LUMA_WEIGHTS, LUMA_WEIGHTS])

SEPIA = ColorMatrix([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])
