import numpy as np

from filmneg import PROCESSING_TYPES, process_image
from filmneg.core.inversion import convert_negative_to_positive
from filmneg.core.options import ConversionOptions
from filmneg.processing import NEGATIVE_CONVERSION, NO_PROCESSING


def test_processing_types():
    assert set(PROCESSING_TYPES) == {NO_PROCESSING, NEGATIVE_CONVERSION}


def test_none_returns_input(random_buffer):
    assert process_image(random_buffer, NO_PROCESSING) is random_buffer


def test_unknown_type_returns_input(random_buffer):
    assert process_image(random_buffer, "sharpen") is random_buffer


def test_negative_conversion(random_buffer):
    options = ConversionOptions(contrast_boost=1.3)
    out = process_image(random_buffer, NEGATIVE_CONVERSION, options)
    assert out == convert_negative_to_positive(random_buffer, options)


def test_default_type_is_conversion(gray_buffer):
    out = process_image(gray_buffer)
    assert np.all(out.as_array() == (109, 68, 60, 255))
