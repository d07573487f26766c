import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from rasteredit.models.pixel_grid import PixelGrid


def make_grid(width, height, fn):
    pixels = np.zeros((height, width, 3), dtype=np.int64)
    for y in range(height):
        for x in range(width):
            pixels[y, x] = fn(x, y)
    return PixelGrid(pixels)


def uniform_grid(width, height, rgb):
    return make_grid(width, height, lambda x, y: rgb)


@pytest.fixture
def gradient():
    """4x4 grid with pixel (x, y) = (50x, 50y, 25(x+y))."""
    return make_grid(4, 4, lambda x, y: (50 * x, 50 * y, 25 * (x + y)))


@pytest.fixture
def checker_mask():
    """4x4 mask, black where (x + y) is even, white elsewhere."""
    return make_grid(4, 4, lambda x, y: (0, 0, 0) if (x + y) % 2 == 0 else (255, 255, 255))


@pytest.fixture
def random_grid():
    rng = np.random.default_rng(1234)
    return PixelGrid(rng.integers(0, 256, size=(5, 7, 3)))
