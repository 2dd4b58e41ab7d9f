import json

import numpy as np
import pytest

from filmneg.core.export import save_image
from filmneg.core.image_loader import load_image
from filmneg.main import build_parser, default_output_path, main


@pytest.fixture
def negative_file(tmp_path, framed_negative):
    path = tmp_path / "scan.png"
    save_image(framed_negative, path)
    return path


def test_default_output_path():
    assert default_output_path("/scans/roll1/frame_03.tif").name == "frame_03_positive.jpg"


def test_convert_with_defaults(negative_file):
    assert main([str(negative_file)]) == 0
    assert (negative_file.parent / "scan_positive.jpg").exists()


def test_no_processing_copies_pixels(negative_file, tmp_path):
    out = tmp_path / "copy.png"
    assert main([str(negative_file), "-o", str(out), "--type", "none"]) == 0
    assert load_image(out) == load_image(negative_file)


def test_border_sampling_and_tuning(negative_file, tmp_path):
    out = tmp_path / "pos.png"
    argv = [
        str(negative_file), "-o", str(out), "--border-sampling",
        "--opacity", "1.0", "--channels", "1,1,1", "--contrast", "1.0",
    ]
    assert main(argv) == 0
    # film base border subtracted to black
    assert tuple(load_image(out).as_array()[0, 0]) == (0, 0, 0, 255)


def test_pick_and_save_preset(negative_file, tmp_path):
    preset = tmp_path / "preset.json"
    argv = [
        str(negative_file), "-o", str(tmp_path / "pos.png"),
        "--pick", "1,1", "--pick-size", "3", "--save-preset", str(preset),
    ]
    assert main(argv) == 0
    data = json.loads(preset.read_text())
    assert data["filmBaseColor"] == {"r": 200, "g": 120, "b": 90}


def test_load_preset(negative_file, tmp_path):
    preset = tmp_path / "preset.json"
    preset.write_text(json.dumps({"baseSubtractionOpacity": 1.0, "useBorderSampling": True,
                                  "channelAdjustments": {"r": 1, "g": 1, "b": 1},
                                  "contrastBoost": 1.0}))
    out = tmp_path / "pos.png"
    assert main([str(negative_file), "-o", str(out), "--load-preset", str(preset)]) == 0
    assert np.all(load_image(out).as_array()[0, :5] == (0, 0, 0, 255))


@pytest.mark.parametrize(
    "extra",
    [
        ["--preset", "kodachrome"],
        ["--pick", "500,500"],
        ["--opacity", "3"],
        ["--load-preset", "missing.json"],
    ],
)
def test_errors_return_1(negative_file, tmp_path, extra):
    assert main([str(negative_file), "-o", str(tmp_path / "x.jpg"), *extra]) == 1


def test_missing_input(tmp_path):
    assert main([str(tmp_path / "missing.png")]) == 1


def test_base_sources_exclusive():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["in.png", "--base", "1,2,3", "--border-sampling"])


def test_bad_triplet():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["in.png", "--channels", "1,2"])


@pytest.mark.parametrize(
    "preset",
    [
        {"contrastBoost": None},
        {"contrastBoost": "strong"},
        {"useBorderSampling": "false"},
        {"channelAdjustments": {"r": 1, "g": 1, "b": "x"}},
    ],
)
def test_bad_preset_values_return_1(negative_file, tmp_path, preset):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(preset))
    argv = [str(negative_file), "-o", str(tmp_path / "x.jpg"), "--load-preset", str(path)]
    assert main(argv) == 1
