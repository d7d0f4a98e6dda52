import itertools

import pytest

from pixel_sampler.core.coordinate_mapper import map_to_pixel
from pixel_sampler.domain.errors import InvalidRequestError
from pixel_sampler.domain.models import PixelCoordinate, SampleRequest


def req(x, y, w, h):
    return SampleRequest(uri="img", x=x, y=y, display_width=w, display_height=h)


def test_identity_scale():
    assert map_to_pixel(req(50, 100, 100, 200), 100, 200) == PixelCoordinate(50, 100)


def test_downscaled_display_floors_to_corner():
    # scale 0.1: (9.9, 9.9) floors to (9, 9)
    assert map_to_pixel(req(99, 99, 100, 100), 10, 10) == PixelCoordinate(9, 9)


def test_upscaled_display():
    # 1000x1000 image shown at 100x100: scale 10
    assert map_to_pixel(req(12.34, 56.78, 100, 100), 1000, 1000) == PixelCoordinate(123, 567)


def test_non_uniform_scale():
    assert map_to_pixel(req(30, 30, 60, 120), 120, 60) == PixelCoordinate(60, 15)


def test_negative_coordinates_clamp_to_zero():
    assert map_to_pixel(req(-5, -0.5, 100, 100), 10, 10) == PixelCoordinate(0, 0)


def test_coordinates_beyond_display_clamp_to_last_pixel():
    assert map_to_pixel(req(100, 250, 100, 100), 10, 10) == PixelCoordinate(9, 9)


def test_huge_coordinates_clamp_without_overflow():
    assert map_to_pixel(req(1e308, -1e308, 1e-300, 1e-300), 10, 10) == PixelCoordinate(9, 0)


@pytest.mark.parametrize("w, h", [(0, 100), (100, 0), (-1, 100), (float("nan"), 10), (float("inf"), 10)])
def test_invalid_display_size_raises(w, h):
    with pytest.raises(InvalidRequestError):
        map_to_pixel(req(1, 1, w, h), 10, 10)


def test_non_finite_point_raises():
    with pytest.raises(InvalidRequestError):
        map_to_pixel(req(float("nan"), 1, 10, 10), 10, 10)


def test_every_display_point_maps_in_bounds():
    image_sizes = [(1, 1), (7, 3), (10, 10), (640, 480)]
    display_sizes = [(1, 1), (3.5, 9.25), (100, 100), (1920, 1080)]
    for (iw, ih), (dw, dh) in itertools.product(image_sizes, display_sizes):
        steps = 17
        for i, j in itertools.product(range(steps), range(steps)):
            x = dw * i / steps
            y = dh * j / steps
            coord = map_to_pixel(req(x, y, dw, dh), iw, ih)
            assert 0 <= coord.px < iw
            assert 0 <= coord.py < ih


def test_tiny_display_size_maps_origin_to_first_pixel():
    # image/display overflows to inf for a subnormal display size
    assert map_to_pixel(req(0, 0, 5e-324, 200), 100, 200) == PixelCoordinate(0, 0)
    assert map_to_pixel(req(0, 0, 5e-324, 5e-324), 100, 200) == PixelCoordinate(0, 0)


def test_tiny_display_size_clamps_positive_point_to_last_pixel():
    assert map_to_pixel(req(1, 0, 5e-324, 200), 100, 200) == PixelCoordinate(99, 0)
