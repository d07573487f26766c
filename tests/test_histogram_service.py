import numpy as np
import pytest

from rasteredit.models.histogram import Histogram
from rasteredit.models.pixel_grid import PixelGrid
from rasteredit.services.histogram_service import HistogramService, bresenham

from conftest import make_grid, uniform_grid

WHITE = (255, 255, 255)
GRID = (220, 220, 220)
BLUE = (0, 0, 255)


@pytest.fixture
def svc():
    return HistogramService(peak_min=10, peak_max=244, grid_spacing=32)


def test_calculate_histogram(svc, gradient):
    hist = svc.calculate_histogram(gradient)
    assert hist.counts.shape == (3, 256)
    assert all(hist.channel(c).sum() == 16 for c in range(3))
    for value in (0, 50, 100, 150):
        assert hist.channel(0)[value] == 4
    assert hist.channel(2)[75] == 4
    assert hist.channel(2)[50] == 3


def test_find_peaks_prefers_first_maximum(svc):
    counts = np.zeros((3, 256), dtype=int)
    counts[0, [5, 40, 90]] = [100, 7, 7]   # 5 lies outside the window
    counts[1, 200] = 3
    counts[2, 250] = 50                    # nothing inside the window
    assert svc.find_peaks(Histogram(counts)) == (40, 200, 0)


def test_color_correct_aligns_peaks(svc):
    grid = uniform_grid(3, 3, (100, 120, 140))
    assert svc.color_correct(grid) == uniform_grid(3, 3, (120, 120, 120))


def test_color_correct_shifts_whole_channel(svc):
    grid = make_grid(4, 1, lambda x, y: (100, 120, 140) if x < 3 else (0, 250, 255))
    out = svc.color_correct(grid)
    assert out.get_pixel(0, 0) == (120, 120, 120)
    # red +20, green +0, blue -20, clamped
    assert out.get_pixel(3, 0) == (20, 250, 235)


def test_color_correct_dark_image_is_unchanged(svc):
    grid = uniform_grid(2, 2, (5, 5, 5))
    assert svc.color_correct(grid) == grid


def test_peak_window_is_configurable(monkeypatch):
    monkeypatch.setenv("COLOR_CORRECT_PEAK_MIN", "0")
    monkeypatch.setenv("COLOR_CORRECT_PEAK_MAX", "255")
    svc = HistogramService()
    assert (svc.peak_min, svc.peak_max) == (0, 255)
    grid = uniform_grid(2, 2, (5, 50, 95))
    assert svc.color_correct(grid) == uniform_grid(2, 2, (50, 50, 50))


def test_invalid_peak_window():
    with pytest.raises(ValueError):
        HistogramService(peak_min=200, peak_max=100)
    with pytest.raises(ValueError):
        HistogramService(grid_spacing=0)


def test_bresenham_endpoints():
    points = list(bresenham(0, 0, 3, 1))
    assert points[0] == (0, 0) and points[-1] == (3, 1)
    assert len(points) == 4
    assert list(bresenham(2, 5, 2, 2)) == [(2, 5), (2, 4), (2, 3), (2, 2)]


def test_generate_histogram_layout(svc):
    grid = uniform_grid(4, 4, (100, 100, 100))
    plot = svc.generate_histogram(grid)
    assert (plot.width, plot.height) == (256, 256)
    assert plot.get_pixel(10, 10) == WHITE
    assert plot.get_pixel(32, 10) == GRID
    assert plot.get_pixel(10, 64) == GRID
    # empty bins sit on the bottom row, the full bin reaches the top;
    # the three channels coincide so the last drawn (blue) wins
    assert plot.get_pixel(50, 255) == BLUE
    assert plot.get_pixel(100, 0) == BLUE


def test_generate_histogram_of_empty_grid(svc):
    plot = svc.generate_histogram(PixelGrid.blank(0, 0))
    assert plot.get_pixel(5, 255) == BLUE
    assert plot.get_pixel(5, 5) == WHITE
