from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple
import numpy as np

RGB = Tuple[int, int, int]


@dataclass(eq=False)
class PixelGrid:
    """
    Simple data object: a width x height grid of 8-bit RGB samples
    (+ optional source path for bookkeeping).

    The backing array is always a private copy, so two grids never share
    storage and every sample is clamped to [0, 255].
    """
    pixels: np.ndarray  # Shape (H, W, 3), dtype uint8, RGB order.
    path: Path | None = field(default=None, compare=False)  # Source of the image.

    def __post_init__(self):
        arr = np.asarray(self.pixels)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Pixel array must have shape (H, W, 3), got {arr.shape}")
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255)
        self.pixels = np.array(arr, dtype=np.uint8, copy=True)
        if self.path is not None:
            self.path = Path(self.path)

    # ── Constructors ─────────────────────────────────────────────────
    @classmethod
    def blank(cls, width: int, height: int) -> "PixelGrid":
        """Uniform black grid."""
        if width < 0 or height < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {width}x{height}")
        return cls(np.zeros((height, width, 3), dtype=np.uint8))

    @classmethod
    def from_planes(cls, red, green, blue) -> "PixelGrid":
        """
        Build a grid from three (H, W) channel planes.
        Values are clamped to [0, 255].
        """
        planes = [np.asarray(p) for p in (red, green, blue)]
        if not (planes[0].shape == planes[1].shape == planes[2].shape) or planes[0].ndim != 2:
            raise ValueError("Channel planes must be 2-D and share one shape")
        return cls(np.stack(planes, axis=-1))

    # ── Geometry ─────────────────────────────────────────────────────
    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def same_size(self, other: "PixelGrid") -> bool:
        return self.width == other.width and self.height == other.height

    # ── Per-cell access ──────────────────────────────────────────────
    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} grid")

    def get_pixel(self, x: int, y: int) -> RGB:
        self._check_bounds(x, y)
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def set_pixel(self, x: int, y: int, rgb) -> None:
        """Write one pixel, clamping every channel to [0, 255]."""
        self._check_bounds(x, y)
        self.pixels[y, x] = [max(0, min(255, int(v))) for v in rgb]

    # ── Channel planes ───────────────────────────────────────────────
    def channel(self, index: int) -> np.ndarray:
        """Copy of one channel plane, shape (H, W)."""
        if index not in (0, 1, 2):
            raise ValueError(f"Invalid channel: {index}")
        return self.pixels[:, :, index].copy()

    def planes(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.channel(0), self.channel(1), self.channel(2)

    def copy(self) -> "PixelGrid":
        return PixelGrid(self.pixels, self.path)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and np.array_equal(self.pixels, other.pixels)

    def __repr__(self) -> str:
        return f"PixelGrid({self.width}x{self.height}, path={self.path})"
