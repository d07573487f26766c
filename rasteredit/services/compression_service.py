"""
Lossy compression through a 2-D Haar wavelet transform.

The three channel planes are zero-padded to the next power-of-two square,
transformed, thresholded on a shared magnitude percentile, reconstructed and
cropped back to the source size.
"""
from __future__ import annotations

import logging
import math

import numpy as np

from ..models.pixel_grid import PixelGrid
from .image_service import require_grid

logger = logging.getLogger(__name__)

_SQRT2 = math.sqrt(2.0)


def next_power_of_two(n: int) -> int:
    size = 1
    while size < n:
        size *= 2
    return size


def haar_1d(data: np.ndarray, length: int, axis: int) -> None:
    """
    In-place Haar pass over the first `length` entries along `axis`:
    pairwise averages go to the first half, differences to the second.
    """
    view = np.moveaxis(data, axis, -1)
    span = view[..., :length]
    even = span[..., 0::2]
    odd = span[..., 1::2]
    avg = (even + odd) / _SQRT2
    diff = (even - odd) / _SQRT2
    half = length // 2
    view[..., :half] = avg
    view[..., half:length] = diff


def inverse_haar_1d(data: np.ndarray, length: int, axis: int) -> None:
    """In-place inverse of :func:`haar_1d`."""
    view = np.moveaxis(data, axis, -1)
    half = length // 2
    avg = view[..., :half].copy()
    diff = view[..., half:length].copy()
    view[..., 0:length:2] = (avg + diff) / _SQRT2
    view[..., 1:length:2] = (avg - diff) / _SQRT2


def haar_2d(plane: np.ndarray) -> np.ndarray:
    """Forward transform of a square power-of-two plane (returns a new array)."""
    data = np.array(plane, dtype=np.float64, copy=True)
    size = data.shape[0]
    step = size
    while step > 1:
        haar_1d(data, step, axis=1)              # every row, first `step` columns
        haar_1d(data[:step, :step], step, axis=0)  # first `step` columns
        step //= 2
    return data


def inverse_haar_2d(plane: np.ndarray) -> np.ndarray:
    data = np.array(plane, dtype=np.float64, copy=True)
    size = data.shape[0]
    step = 2
    while step <= size:
        inverse_haar_1d(data[:step, :step], step, axis=0)
        inverse_haar_1d(data, step, axis=1)
        step *= 2
    return data


def threshold_coefficients(planes: np.ndarray, percentage: float) -> np.ndarray:
    """
    Zero every coefficient whose magnitude is strictly below the magnitude
    found at rank floor(N * percentage / 100) across all planes.
    """
    magnitudes = np.sort(np.abs(planes), axis=None)
    n = magnitudes.size
    if n == 0:
        return planes.copy()
    rank = min(int(math.floor(n * percentage / 100.0)), n - 1)
    cutoff = magnitudes[rank]
    return np.where(np.abs(planes) < cutoff, 0.0, planes)


class CompressionService:
    """Haar-wavelet lossy compressor for pixel grids."""

    @staticmethod
    def validate_percentage(percentage) -> float:
        if percentage is None or isinstance(percentage, bool):
            raise ValueError(f"Compression percentage must be a number, got {percentage!r}")
        value = float(percentage)
        if math.isnan(value) or not 0 <= value <= 100:
            raise ValueError(f"Compression percentage must be between 0 and 100, got {percentage}")
        return value

    def compress(self, image: PixelGrid, percentage: float) -> PixelGrid:
        """
        Args:
            image (PixelGrid): Source grid.
            percentage (float): Share of coefficients, by magnitude rank, to drop (0..100).

        Returns:
            PixelGrid: Reconstructed grid; identical to the input at 0 %.
        """
        require_grid(image)
        percentage = self.validate_percentage(percentage)
        if image.is_empty:
            return image.copy()

        width, height = image.width, image.height
        size = next_power_of_two(max(width, height))

        padded = np.zeros((3, size, size), dtype=np.float64)
        padded[:, :height, :width] = np.moveaxis(image.pixels, -1, 0)

        coeffs = np.stack([haar_2d(padded[c]) for c in range(3)])
        coeffs = threshold_coefficients(coeffs, percentage)
        restored = np.stack([inverse_haar_2d(coeffs[c]) for c in range(3)])

        logger.debug(f"Compressed {width}x{height} (padded {size}) at {percentage}%")

        cropped = np.moveaxis(restored[:, :height, :width], 0, -1)
        return PixelGrid(np.clip(np.floor(cropped + 0.5), 0, 255))
