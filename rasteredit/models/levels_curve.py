from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class LevelsCurve:
    """
    Value-object holding a quadratic tone curve f(v) = a*v^2 + b*v + c
    that passes through (shadow, 0), (midtone, 128) and (highlight, 255).
    """
    shadow: int
    midtone: int
    highlight: int
    a: float
    b: float
    c: float

    @classmethod
    def from_points(cls, shadow: int, midtone: int, highlight: int) -> "LevelsCurve":
        """
        Clamp the three control points in order (shadow, midtone, highlight)
        and solve the curve coefficients with Cramer's rule.

        Raises:
            ValueError: if the clamped points do not satisfy 0 <= b < m < w <= 255.
        """
        b = max(0, min(int(shadow), 255))
        m = max(b + 1, min(int(midtone), int(highlight) - 1))
        w = max(m + 1, min(int(highlight), 255))
        if not (0 <= b < m < w <= 255):
            raise ValueError(
                f"Levels points ({shadow}, {midtone}, {highlight}) cannot be ordered "
                f"as shadow < midtone < highlight within [0, 255]"
            )

        # det of [[b^2, b, 1], [m^2, m, 1], [w^2, w, 1]]
        det = b * b * (m - w) - b * (m * m - w * w) + (w * m * m - m * w * w)
        det_a = -b * (128 - 255) + 128 * w - 255 * m
        det_b = b * b * (128 - 255) + 255 * m * m - 128 * w * w
        det_c = b * b * (255 * m - 128 * w) - b * (255 * m * m - 128 * w * w)

        return cls(b, m, w, det_a / det, det_b / det, det_c / det)

    def evaluate(self, values) -> np.ndarray:
        v = np.asarray(values, dtype=np.float64)
        return self.a * v * v + self.b * v + self.c

    def lookup_table(self) -> np.ndarray:
        """256-entry uint8 map: f(v) rounded half up and clamped."""
        mapped = np.floor(self.evaluate(np.arange(256)) + 0.5)
        return np.clip(mapped, 0, 255).astype(np.uint8)
