import numpy as np
import pytest

from filmneg.core.buffer import RGB, PixelBuffer
from filmneg.core.film_base import (
    FILM_BASE_PRESETS,
    estimate_film_base,
    get_film_base_preset,
    sample_border,
    sample_color,
)
from filmneg.core.options import DEFAULT_FILM_BASE, ConversionOptions


class TestSampleBorder:

    def test_uniform_border(self, framed_negative):
        assert sample_border(framed_negative) == RGB(200, 120, 90)

    def test_empty_image(self):
        assert sample_border(PixelBuffer(0, 0, b"")) is None

    def test_average_is_rounded_half_up(self):
        # 1x1: the single pixel is sampled by all four edges
        buf = PixelBuffer(1, 1, [10, 21, 33, 255])
        assert sample_border(buf) == RGB(10, 21, 33)

        # 1x2: top, left and right hit (0, 0), bottom hits (0, 1)
        arr = np.zeros((2, 1, 4), dtype=np.uint8)
        arr[0, 0, :3] = (10, 0, 0)
        arr[1, 0, :3] = (12, 0, 0)
        assert sample_border(PixelBuffer.from_array(arr)).r == 11  # 42 / 4 = 10.5

    def test_limited_to_first_samples(self):
        # The top edge of a 1000px wide image alone yields 100 samples,
        # so the 50 kept are all from the top row.
        arr = np.zeros((20, 1000, 4), dtype=np.uint8)
        arr[...] = (10, 20, 30, 255)
        arr[0, :, :3] = (200, 100, 50)
        assert sample_border(PixelBuffer.from_array(arr)) == RGB(200, 100, 50)

    def test_left_and_right_edges_follow_height(self):
        # 5 wide, 100 high: one sample each on top and bottom, then 10
        # per side edge at y = 0, 10, ..., 90
        arr = np.zeros((100, 5, 4), dtype=np.uint8)
        arr[..., 3] = 255
        arr[:, 0, 0] = np.arange(100)
        arr[:, -1, 0] = np.arange(100)
        got = sample_border(PixelBuffer.from_array(arr))
        # (0 + 99 + 450 + 450) / 22
        assert got.r == 45


class TestSampleColor:

    def test_single_pixel(self, framed_negative):
        assert sample_color(framed_negative, 0, 0) == RGB(200, 120, 90)
        assert sample_color(framed_negative, 30, 30) == RGB(90, 70, 60)

    def test_patch_average_clipped_to_image(self):
        arr = np.zeros((4, 4, 4), dtype=np.uint8)
        arr[0, 0, :3] = (100, 0, 0)
        arr[0, 1, :3] = (101, 0, 0)
        buf = PixelBuffer.from_array(arr)
        # 3x3 patch at the corner covers 2x2 pixels: (100 + 101) / 4
        assert sample_color(buf, 0, 0, patch_size=3) == RGB(50, 0, 0)

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (60, 0), (0, 60)])
    def test_out_of_range(self, framed_negative, x, y):
        with pytest.raises(ValueError):
            sample_color(framed_negative, x, y)


class TestEstimateFilmBase:

    def test_default(self, framed_negative):
        assert estimate_film_base(framed_negative, ConversionOptions()) == DEFAULT_FILM_BASE

    def test_border_sampling(self, framed_negative):
        options = ConversionOptions(use_border_sampling=True)
        assert estimate_film_base(framed_negative, options) == RGB(200, 120, 90)

    def test_explicit_color_wins(self, framed_negative):
        options = ConversionOptions(film_base_color=(1, 2, 3), use_border_sampling=True)
        assert estimate_film_base(framed_negative, options) == RGB(1, 2, 3)

    def test_empty_image_falls_back_to_default(self):
        options = ConversionOptions(use_border_sampling=True)
        assert estimate_film_base(PixelBuffer(0, 0, b""), options) == DEFAULT_FILM_BASE


def test_film_presets():
    assert get_film_base_preset("generic_c41") == DEFAULT_FILM_BASE
    assert get_film_base_preset("Kodak_Portra400") == FILM_BASE_PRESETS["kodak_portra400"]
    assert get_film_base_preset("unknown_stock") is None
    for color in FILM_BASE_PRESETS.values():
        assert all(0 <= c <= 255 for c in color)
