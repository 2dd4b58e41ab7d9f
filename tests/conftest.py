"""Shared fixtures: small synthetic negatives."""

import numpy as np
import pytest

from filmneg.core.buffer import PixelBuffer


@pytest.fixture
def gray_buffer():
    """4x4 mid-grey, fully opaque."""
    return PixelBuffer.filled(4, 4, (128, 128, 128, 255))


@pytest.fixture
def random_buffer():
    """16x12 random RGBA negative with varying alpha."""
    rng = np.random.default_rng(42)
    arr = rng.integers(0, 256, size=(12, 16, 4), dtype=np.uint8)
    return PixelBuffer.from_array(arr)


@pytest.fixture
def framed_negative():
    """60x60 negative: uniform orange border of 5px around a darker centre."""
    arr = np.empty((60, 60, 4), dtype=np.uint8)
    arr[...] = (200, 120, 90, 255)
    arr[5:-5, 5:-5, :3] = (90, 70, 60)
    return PixelBuffer.from_array(arr)
