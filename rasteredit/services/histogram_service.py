from __future__ import annotations

from typing import Tuple
import logging
import os

import numpy as np
from dotenv import load_dotenv

from ..models.histogram import Histogram
from ..models.pixel_grid import PixelGrid
from .image_service import require_grid

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

HISTOGRAM_SIZE = 256
BACKGROUND = (255, 255, 255)
GRID_COLOR = (220, 220, 220)
CHANNEL_COLORS = ((255, 0, 0), (0, 255, 0), (0, 0, 255))


def bresenham(x0: int, y0: int, x1: int, y1: int):
    """Yield the integer points of the line from (x0, y0) to (x1, y1)."""
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


class HistogramService:
    """
    Histogram analytics and histogram-driven colour correction.
    """

    def __init__(self,
                 peak_min: int = None,
                 peak_max: int = None,
                 grid_spacing: int = None):
        """
        Args:
            peak_min: Lowest bin searched for a channel peak, inclusive (defaults to env var)
            peak_max: Highest bin searched for a channel peak, inclusive (defaults to env var)
            grid_spacing: Distance between rendered grid lines (defaults to env var)
        """
        self.peak_min = peak_min if peak_min is not None else int(os.getenv("COLOR_CORRECT_PEAK_MIN", "10"))
        self.peak_max = peak_max if peak_max is not None else int(os.getenv("COLOR_CORRECT_PEAK_MAX", "244"))
        self.grid_spacing = grid_spacing if grid_spacing is not None else int(os.getenv("HISTOGRAM_GRID_SPACING", "32"))

        if not (0 <= self.peak_min <= self.peak_max <= 255):
            raise ValueError(f"Invalid peak window [{self.peak_min}, {self.peak_max}]")
        if self.grid_spacing <= 0:
            raise ValueError(f"Grid spacing must be positive, got {self.grid_spacing}")

        logger.info(f"HistogramService initialized with peak window "
                    f"[{self.peak_min}, {self.peak_max}]")

    # ─── Counting ──────────────────────────────────────────────────
    def calculate_histogram(self, image: PixelGrid) -> Histogram:
        require_grid(image)
        counts = np.stack([
            np.bincount(image.pixels[:, :, c].ravel(), minlength=HISTOGRAM_SIZE)
            for c in range(3)
        ])
        return Histogram(counts)

    # ─── Colour correction ─────────────────────────────────────────
    def find_peaks(self, histogram: Histogram) -> Tuple[int, int, int]:
        """
        Most frequent bin of each channel inside the peak window.
        Ties keep the lowest bin; a channel with no samples in the
        window reports 0.
        """
        peaks = []
        for c in range(3):
            window = histogram.channel(c)[self.peak_min:self.peak_max + 1]
            if window.size == 0 or window.max() == 0:
                peaks.append(0)
            else:
                peaks.append(self.peak_min + int(np.argmax(window)))
        return tuple(peaks)

    @staticmethod
    def correction_map(current_peak: int, target_peak: int) -> np.ndarray:
        values = np.arange(HISTOGRAM_SIZE) - current_peak + target_peak
        return np.clip(values, 0, 255).astype(np.uint8)

    def color_correct(self, image: PixelGrid) -> PixelGrid:
        """
        Shift each channel so its histogram peak lands on the average
        of the three peaks, removing colour casts without touching contrast.
        """
        require_grid(image)
        peaks = self.find_peaks(self.calculate_histogram(image))
        average_peak = sum(peaks) // 3
        logger.debug(f"Colour correction peaks={peaks} target={average_peak}")

        out = np.empty_like(image.pixels)
        for c, peak in enumerate(peaks):
            out[:, :, c] = self.correction_map(peak, average_peak)[image.pixels[:, :, c]]
        return PixelGrid(out)

    # ─── Rendering ─────────────────────────────────────────────────
    def generate_histogram(self, image: PixelGrid) -> PixelGrid:
        """
        Render the three channel histograms as coloured line plots on a
        256x256 white canvas with light-grey grid lines.
        """
        histogram = self.calculate_histogram(image)
        size = HISTOGRAM_SIZE
        canvas = np.empty((size, size, 3), dtype=np.uint8)
        canvas[:, :] = BACKGROUND
        canvas[::self.grid_spacing, :] = GRID_COLOR
        canvas[:, ::self.grid_spacing] = GRID_COLOR

        max_count = histogram.max_count or 1
        for c, color in enumerate(CHANNEL_COLORS):
            counts = histogram.channel(c).astype(np.float64)
            ys = (size - 1) - np.floor(counts * (size - 1) / max_count + 0.5).astype(np.int64)
            for x in range(1, size):
                for px, py in bresenham(x - 1, int(ys[x - 1]), x, int(ys[x])):
                    canvas[py, px] = color

        return PixelGrid(canvas)
