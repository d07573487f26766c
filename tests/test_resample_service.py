import pytest

from rasteredit.services.resample_service import ResampleService


@pytest.fixture
def svc():
    return ResampleService()


def test_downscale_to_single_pixel(svc, gradient):
    out = svc.downscale(gradient, 1, 1)
    assert (out.width, out.height) == (1, 1)
    assert out.get_pixel(0, 0) == (75, 75, 75)


def test_downscale_by_half(svc, gradient):
    out = svc.downscale(gradient, 2, 2)
    assert out.get_pixel(0, 0)[0] == 25
    assert out.get_pixel(1, 0)[0] == 125
    assert out.get_pixel(0, 1)[1] == 125


def test_same_size_is_identity(svc, gradient, random_grid):
    assert svc.downscale(gradient, 4, 4) == gradient
    assert svc.downscale(random_grid, 7, 5) == random_grid


def test_non_uniform_scale(svc, random_grid):
    out = svc.downscale(random_grid, 3, 5)
    assert (out.width, out.height) == (3, 5)


@pytest.mark.parametrize("w, h", [(0, 2), (2, 0), (-1, 1), (5, 4), (4, 5)])
def test_invalid_targets(svc, gradient, w, h):
    with pytest.raises(ValueError):
        svc.downscale(gradient, w, h)
