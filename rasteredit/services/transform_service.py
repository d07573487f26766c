from __future__ import annotations

from typing import Tuple
import logging

import numpy as np

from ..models.pixel_grid import PixelGrid
from ..models.kernel import Kernel, BLUR, SHARPEN
from ..models.color_matrix import ColorMatrix, GREYSCALE, SEPIA, LUMA_WEIGHTS
from .image_service import require_grid

logger = logging.getLogger(__name__)

# Absorbs floating-point error in weighted sums before truncating toward zero.
_TRUNC_EPS = 1e-9


def truncate_to_samples(values: np.ndarray) -> np.ndarray:
    """Truncate real values toward zero and clamp them to [0, 255]."""
    return np.clip(np.trunc(values + _TRUNC_EPS), 0, 255).astype(np.uint8)


def _grey(plane: np.ndarray) -> PixelGrid:
    return PixelGrid(np.repeat(plane[:, :, np.newaxis], 3, axis=2))


class TransformService:
    """
    Point and kernel transforms.  Every method reads the input grid and
    returns a newly built one.
    """

    # ─── Channel visualisation ─────────────────────────────────────
    def visualize_component(self, image: PixelGrid, channel: int) -> PixelGrid:
        """Greyscale grid carrying one channel's value in all three channels."""
        require_grid(image)
        return _grey(image.channel(channel))

    def visualize_red_component(self, image: PixelGrid) -> PixelGrid:
        return self.visualize_component(image, 0)

    def visualize_green_component(self, image: PixelGrid) -> PixelGrid:
        return self.visualize_component(image, 1)

    def visualize_blue_component(self, image: PixelGrid) -> PixelGrid:
        return self.visualize_component(image, 2)

    def visualize_value(self, image: PixelGrid) -> PixelGrid:
        """Per-pixel max of the three channels."""
        require_grid(image)
        return _grey(image.pixels.max(axis=2))

    def visualize_intensity(self, image: PixelGrid) -> PixelGrid:
        """Per-pixel mean of the three channels (integer division)."""
        require_grid(image)
        return _grey(image.pixels.astype(np.int32).sum(axis=2) // 3)

    def visualize_luma(self, image: PixelGrid) -> PixelGrid:
        require_grid(image)
        rgb = image.pixels.astype(np.float64)
        wr, wg, wb = LUMA_WEIGHTS
        luma = wr * rgb[:, :, 0] + wg * rgb[:, :, 1] + wb * rgb[:, :, 2]
        return _grey(truncate_to_samples(luma))

    # ─── Channel split / combine ───────────────────────────────────
    def split_channels(self, image: PixelGrid) -> Tuple[PixelGrid, PixelGrid, PixelGrid]:
        return (
            self.visualize_red_component(image),
            self.visualize_green_component(image),
            self.visualize_blue_component(image),
        )

    def combine_channels(self, red: PixelGrid, green: PixelGrid, blue: PixelGrid) -> PixelGrid:
        """
        R from `red`, G from `green`, B from `blue`, over the smallest
        common width and height.
        """
        require_grid(red, "red")
        require_grid(green, "green")
        require_grid(blue, "blue")
        width = min(red.width, green.width, blue.width)
        height = min(red.height, green.height, blue.height)
        return PixelGrid.from_planes(
            red.pixels[:height, :width, 0],
            green.pixels[:height, :width, 1],
            blue.pixels[:height, :width, 2],
        )

    # ─── Geometry ──────────────────────────────────────────────────
    def flip_horizontal(self, image: PixelGrid) -> PixelGrid:
        require_grid(image)
        return PixelGrid(image.pixels[:, ::-1])

    def flip_vertical(self, image: PixelGrid) -> PixelGrid:
        require_grid(image)
        return PixelGrid(image.pixels[::-1, :])

    # ─── Brightness ────────────────────────────────────────────────
    def brighten(self, image: PixelGrid, delta: int) -> PixelGrid:
        require_grid(image)
        logger.debug(f"Brightness {delta} on {image.width}x{image.height}")
        return PixelGrid(np.clip(image.pixels.astype(np.int64) + int(delta), 0, 255))

    def darken(self, image: PixelGrid, delta: int) -> PixelGrid:
        return self.brighten(image, -abs(int(delta)))

    # ─── Convolution ───────────────────────────────────────────────
    def apply_filter(self, image: PixelGrid, kernel) -> PixelGrid:
        """
        Correlate every channel with `kernel`, sampling out-of-bounds
        neighbours from the nearest edge pixel.

        Args:
            image (PixelGrid): Source grid.
            kernel (Kernel | array-like): Odd-sized square weight matrix.

        Returns:
            PixelGrid: Filtered grid, sums truncated toward zero and clamped.
        """
        require_grid(image)
        kernel = Kernel.coerce(kernel)
        if image.is_empty:
            return image.copy()

        r = kernel.radius
        h, w = image.height, image.width
        padded = np.pad(image.pixels.astype(np.float64), ((r, r), (r, r), (0, 0)), mode="edge")
        acc = np.zeros((h, w, 3), dtype=np.float64)
        for ky in range(kernel.size):
            for kx in range(kernel.size):
                acc += kernel.weights[ky, kx] * padded[ky:ky + h, kx:kx + w]

        logger.debug(f"Applied {kernel.size}x{kernel.size} kernel to {w}x{h}")
        return PixelGrid(truncate_to_samples(acc))

    def blur(self, image: PixelGrid) -> PixelGrid:
        return self.apply_filter(image, BLUR)

    def sharpen(self, image: PixelGrid) -> PixelGrid:
        return self.apply_filter(image, SHARPEN)

    # ─── Colour matrices ───────────────────────────────────────────
    def apply_color_transformation(self, image: PixelGrid, matrix) -> PixelGrid:
        """Per pixel, output channel i = clamp(sum_j matrix[i][j] * input[j])."""
        require_grid(image)
        m = ColorMatrix.coerce(matrix).matrix
        rgb = image.pixels.astype(np.float64)
        r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
        out = np.stack(
            [m[i, 0] * r + m[i, 1] * g + m[i, 2] * b for i in range(3)],
            axis=-1,
        )
        return PixelGrid(truncate_to_samples(out))

    def to_greyscale(self, image: PixelGrid) -> PixelGrid:
        return self.apply_color_transformation(image, GREYSCALE)

    def to_sepia(self, image: PixelGrid) -> PixelGrid:
        return self.apply_color_transformation(image, SEPIA)
