import logging

import numpy as np

from ..models.pixel_grid import PixelGrid
from .image_service import require_grid
from .transform_service import truncate_to_samples

logger = logging.getLogger(__name__)


class ResampleService:
    """Bilinear downscaling."""

    @staticmethod
    def _source_axis(target: int, source: int):
        """
        Sample positions on one axis: floor / ceil neighbours (clamped to
        the source) and the fractional offset between them.
        """
        pos = (np.arange(target, dtype=np.float64) + 0.5) * source / target - 0.5
        lo = np.floor(pos)
        frac = pos - lo
        lo_idx = np.clip(lo.astype(np.int64), 0, source - 1)
        hi_idx = np.clip(np.ceil(pos).astype(np.int64), 0, source - 1)
        return lo_idx, hi_idx, frac

    def downscale(self, image: PixelGrid, target_width: int, target_height: int) -> PixelGrid:
        """
        Shrink `image` to target_width x target_height.

        Raises:
            ValueError: if a target dimension is <= 0 or exceeds the source.
        """
        require_grid(image)
        if target_width <= 0 or target_height <= 0:
            raise ValueError(f"Width and height must be positive integers, "
                             f"got {target_width}x{target_height}")
        if target_width > image.width or target_height > image.height:
            raise ValueError(f"Target {target_width}x{target_height} exceeds source "
                             f"{image.width}x{image.height}")

        x0, x1, dx = self._source_axis(target_width, image.width)
        y0, y1, dy = self._source_axis(target_height, image.height)

        src = image.pixels.astype(np.float64)
        q11 = src[y0][:, x0]
        q21 = src[y0][:, x1]
        q12 = src[y1][:, x0]
        q22 = src[y1][:, x1]

        fx = dx[np.newaxis, :, np.newaxis]
        fy = dy[:, np.newaxis, np.newaxis]
        out = (q11 * (1 - fx) * (1 - fy)
               + q21 * fx * (1 - fy)
               + q12 * (1 - fx) * fy
               + q22 * fx * fy)

        logger.debug(f"Downscaled {image.width}x{image.height} -> {target_width}x{target_height}")
        return PixelGrid(truncate_to_samples(out))
