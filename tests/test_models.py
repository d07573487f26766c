import numpy as np
import pytest

from rasteredit.models.color_matrix import ColorMatrix, GREYSCALE
from rasteredit.models.histogram import Histogram
from rasteredit.models.kernel import Kernel, BLUR, SHARPEN
from rasteredit.models.levels_curve import LevelsCurve
from rasteredit.models.operations import MaskOperation, SplitSide
from rasteredit.models.pixel_grid import PixelGrid


def test_blank_grid_is_black():
    grid = PixelGrid.blank(5, 3)
    assert (grid.width, grid.height) == (5, 3)
    assert grid.get_pixel(4, 2) == (0, 0, 0)
    assert not grid.pixels.any()


def test_set_pixel_clamps_every_channel():
    grid = PixelGrid.blank(2, 2)
    grid.set_pixel(1, 0, (300, -5, 128))
    assert grid.get_pixel(1, 0) == (255, 0, 128)


def test_constructor_clamps_and_copies():
    source = np.array([[[-20, 100, 400]]])
    grid = PixelGrid(source)
    assert grid.get_pixel(0, 0) == (0, 100, 255)

    source[0, 0, 1] = 7
    assert grid.get_pixel(0, 0) == (0, 100, 255)


def test_grids_never_share_storage(gradient):
    other = gradient.copy()
    other.set_pixel(0, 0, (9, 9, 9))
    assert gradient.get_pixel(0, 0) == (0, 0, 0)


def test_out_of_bounds_access_raises(gradient):
    with pytest.raises(IndexError):
        gradient.get_pixel(4, 0)
    with pytest.raises(IndexError):
        gradient.set_pixel(0, -1, (1, 2, 3))


def test_bad_shape_is_rejected():
    with pytest.raises(ValueError):
        PixelGrid(np.zeros((2, 2)))
    with pytest.raises(ValueError):
        PixelGrid(np.zeros((2, 2, 4)))


def test_from_planes_and_back(gradient):
    rebuilt = PixelGrid.from_planes(*gradient.planes())
    assert rebuilt == gradient
    with pytest.raises(ValueError):
        PixelGrid.from_planes(np.zeros((2, 2)), np.zeros((2, 3)), np.zeros((2, 2)))


def test_equality_ignores_path(gradient):
    tagged = PixelGrid(gradient.pixels, path="somewhere.ppm")
    assert tagged == gradient
    assert PixelGrid.blank(1, 2) != PixelGrid.blank(2, 1)


def test_kernel_validation():
    assert BLUR.radius == 1
    assert SHARPEN.radius == 2
    assert BLUR.weights.sum() == pytest.approx(1.0)
    with pytest.raises(ValueError):
        Kernel(np.ones((2, 2)))
    with pytest.raises(ValueError):
        Kernel(np.ones((3, 5)))


def test_color_matrix_must_be_3x3():
    assert GREYSCALE.matrix.shape == (3, 3)
    with pytest.raises(ValueError):
        ColorMatrix(np.eye(4))


def test_histogram_max_count():
    counts = np.zeros((3, 256), dtype=int)
    counts[1, 42] = 9
    hist = Histogram(counts)
    assert hist.max_count == 9
    assert hist.channel(1)[42] == 9
    with pytest.raises(ValueError):
        Histogram(np.zeros((3, 255)))


def test_identity_levels_curve():
    curve = LevelsCurve.from_points(0, 128, 255)
    assert curve.a == pytest.approx(0.0)
    assert curve.b == pytest.approx(1.0)
    assert curve.c == pytest.approx(0.0)
    assert list(curve.lookup_table()) == list(range(256))


def test_levels_points_are_clamped_in_order():
    curve = LevelsCurve.from_points(-10, 128, 300)
    assert (curve.shadow, curve.midtone, curve.highlight) == (0, 128, 255)

    curve = LevelsCurve.from_points(100, 50, 200)
    assert (curve.shadow, curve.midtone, curve.highlight) == (100, 101, 200)


def test_levels_points_that_cannot_be_ordered():
    with pytest.raises(ValueError):
        LevelsCurve.from_points(254, 255, 255)


def test_mask_operation_parsing():
    assert MaskOperation.parse("BLUR") is MaskOperation.BLUR
    assert MaskOperation.parse("luma-component") is MaskOperation.LUMA_COMPONENT
    assert MaskOperation.parse(MaskOperation.SEPIA) is MaskOperation.SEPIA
    with pytest.raises(ValueError):
        MaskOperation.parse("emboss")
    with pytest.raises(ValueError):
        MaskOperation.parse("")
    assert SplitSide("right") is SplitSide.RIGHT
