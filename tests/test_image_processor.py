import numpy as np
import pytest

from filmneg.core.buffer import RGB
from filmneg.core.export import save_image
from filmneg.core.film_base import FILM_BASE_PRESETS
from filmneg.core.image_loader import load_image
from filmneg.core.image_processor import ImageProcessor
from filmneg.core.inversion import convert_negative_to_positive
from filmneg.processing import NO_PROCESSING


@pytest.fixture
def processor(framed_negative):
    p = ImageProcessor()
    p.set_negative(framed_negative)
    return p


def test_nothing_loaded():
    p = ImageProcessor()
    with pytest.raises(RuntimeError):
        p.convert()
    with pytest.raises(RuntimeError):
        p.pick_film_base(0, 0)
    with pytest.raises(RuntimeError):
        p.export("out.jpg")


def test_pick_film_base(processor):
    color = processor.pick_film_base(2, 2, patch_size=3)
    assert color == RGB(200, 120, 90)
    assert processor.options.film_base_color == color
    assert processor.options.use_border_sampling is False


def test_border_sampling_and_manual_base_exclusive(processor):
    processor.set_film_base((10, 20, 30))
    processor.set_border_sampling(True)
    assert processor.options.film_base_color is None
    assert processor.options.use_border_sampling is True

    processor.set_film_base((10, 20, 30))
    assert processor.options.use_border_sampling is False

    processor.set_border_sampling(False)
    assert processor.options.use_border_sampling is False


def test_film_preset(processor):
    assert processor.use_film_preset("kodak_portra400") == FILM_BASE_PRESETS["kodak_portra400"]
    with pytest.raises(ValueError):
        processor.use_film_preset("kodachrome")


def test_convert_uses_current_options(processor, framed_negative):
    processor.update_options(contrast_boost=1.3)
    positive = processor.convert()
    assert positive is processor.get_positive()
    assert positive == convert_negative_to_positive(framed_negative, processor.options)


def test_changes_invalidate_result(processor):
    processor.convert()
    processor.update_options(contrast_boost=1.2)
    assert processor.get_positive() is None


def test_no_processing(processor, framed_negative):
    assert processor.convert(NO_PROCESSING) is framed_negative


def test_load_convert_export(tmp_path, framed_negative):
    src = tmp_path / "neg.png"
    save_image(framed_negative, src)

    p = ImageProcessor()
    info = p.load(src)
    assert info["width"] == 60
    assert p.source_path == src

    p.set_border_sampling(True)
    p.convert()
    dst = tmp_path / "pos.png"
    p.export(dst)

    assert np.array_equal(load_image(dst).pixels, p.get_positive().pixels)
