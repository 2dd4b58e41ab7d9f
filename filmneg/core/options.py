"""
Conversion options.

Every option has a default (see settings.CONVERSION_DEFAULTS), so an empty
ConversionOptions() reproduces the standard look. Options can also be
built from plain dicts / JSON preset files, using either the camelCase
keys of the web version (filmBaseColor, channelAdjustments, ...) or
snake_case field names.
"""

import dataclasses
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, NamedTuple, Optional

from .. import settings
from .buffer import RGB


class OptionsError(ValueError):
    """Raised for malformed or out-of-range conversion options."""
    pass


class ChannelAdjustments(NamedTuple):
    r: float = settings.CONVERSION_DEFAULTS["channel_adjustments"][0]
    g: float = settings.CONVERSION_DEFAULTS["channel_adjustments"][1]
    b: float = settings.CONVERSION_DEFAULTS["channel_adjustments"][2]


class CyanAdjustment(NamedTuple):
    hue: float = settings.CONVERSION_DEFAULTS["cyan_adjustment"][0]          # degrees added
    saturation: float = settings.CONVERSION_DEFAULTS["cyan_adjustment"][1]   # 1.0 = unchanged
    lightness: float = settings.CONVERSION_DEFAULTS["cyan_adjustment"][2]    # added to L


DEFAULT_FILM_BASE = RGB(*settings.DEFAULT_FILM_BASE)


@dataclass(frozen=True)
class ConversionOptions:
    film_base_color: Optional[RGB] = None
    use_border_sampling: bool = False
    base_subtraction_opacity: float = settings.CONVERSION_DEFAULTS["base_subtraction_opacity"]
    channel_adjustments: ChannelAdjustments = field(default_factory=ChannelAdjustments)
    contrast_boost: float = settings.CONVERSION_DEFAULTS["contrast_boost"]
    cyan_adjustment: CyanAdjustment = field(default_factory=CyanAdjustment)

    def __post_init__(self):
        # Accept plain tuples/dicts for the nested values
        if self.film_base_color is not None:
            object.__setattr__(self, "film_base_color", _coerce_rgb(self.film_base_color))
        object.__setattr__(
            self,
            "channel_adjustments",
            _coerce(ChannelAdjustments, self.channel_adjustments, "channelAdjustments"),
        )
        object.__setattr__(
            self,
            "cyan_adjustment",
            _coerce(CyanAdjustment, self.cyan_adjustment, "cyanAdjustment"),
        )
        object.__setattr__(
            self,
            "base_subtraction_opacity",
            _coerce_float(self.base_subtraction_opacity, "baseSubtractionOpacity"),
        )
        object.__setattr__(
            self, "contrast_boost", _coerce_float(self.contrast_boost, "contrastBoost")
        )
        self._validate()

    def _validate(self):
        if not isinstance(self.use_border_sampling, bool):
            raise OptionsError(
                f"useBorderSampling must be true or false, got {self.use_border_sampling!r}"
            )
        if not 0.0 <= self.base_subtraction_opacity <= 1.0:
            raise OptionsError(
                f"baseSubtractionOpacity must be in 0..1, got {self.base_subtraction_opacity}"
            )
        for name, value in self.channel_adjustments._asdict().items():
            if not math.isfinite(value) or value < 0.0:
                raise OptionsError(
                    f"channelAdjustments.{name} must be a finite number >= 0, got {value}"
                )
        for name, value in self.cyan_adjustment._asdict().items():
            if not math.isfinite(value):
                raise OptionsError(f"cyanAdjustment.{name} must be finite, got {value}")

    def replace(self, **changes) -> "ConversionOptions":
        """Copy with some fields changed."""
        return dataclasses.replace(self, **changes)

    # ------------------------------------------------------------------ dict / JSON

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConversionOptions":
        """
        Build options from a mapping; missing keys use their defaults.

        Raises:
            OptionsError: On unknown keys or malformed values
        """
        kwargs = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in _FIELD_NAMES:
                raise OptionsError(f"Unknown option: {key!r}")
            kwargs[name] = value

        try:
            return cls(**kwargs)
        except TypeError as e:
            raise OptionsError(f"Malformed options: {e}") from e

    def to_dict(self) -> dict:
        data = {
            "useBorderSampling": self.use_border_sampling,
            "baseSubtractionOpacity": self.base_subtraction_opacity,
            "channelAdjustments": self.channel_adjustments._asdict(),
            "contrastBoost": self.contrast_boost,
            "cyanAdjustment": self.cyan_adjustment._asdict(),
        }
        if self.film_base_color is not None:
            data["filmBaseColor"] = self.film_base_color._asdict()
        return data


_KEY_ALIASES = {
    "filmBaseColor": "film_base_color",
    "useBorderSampling": "use_border_sampling",
    "baseSubtractionOpacity": "base_subtraction_opacity",
    "channelAdjustments": "channel_adjustments",
    "contrastBoost": "contrast_boost",
    "cyanAdjustment": "cyan_adjustment",
}

_FIELD_NAMES = {f.name for f in dataclasses.fields(ConversionOptions)}


def _coerce(kind, value, label):
    if isinstance(value, Mapping):
        unknown = set(value) - set(kind._fields)
        if unknown:
            raise OptionsError(f"Unknown {label} keys: {sorted(unknown)}")

    try:
        if isinstance(value, Mapping):
            return kind(**{k: float(v) for k, v in value.items()})
        return kind(*(float(v) for v in value))
    except (TypeError, ValueError) as e:
        raise OptionsError(f"Malformed {label}: {value!r}") from e


def _coerce_float(value, label) -> float:
    if isinstance(value, bool):
        raise OptionsError(f"{label} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise OptionsError(f"{label} must be a number, got {value!r}") from e
    if not math.isfinite(number):
        raise OptionsError(f"{label} must be finite, got {value!r}")
    return number


def _coerce_rgb(value) -> RGB:
    if isinstance(value, Mapping):
        missing = {"r", "g", "b"} - set(value)
        if missing:
            raise OptionsError(f"filmBaseColor is missing {sorted(missing)}")
        value = (value["r"], value["g"], value["b"])

    try:
        r, g, b = value
    except (TypeError, ValueError) as e:
        raise OptionsError(f"filmBaseColor must have 3 channels, got {value!r}") from e

    channels = []
    for c in (r, g, b):
        try:
            valid = not isinstance(c, bool) and int(c) == c and 0 <= c <= 255
        except (TypeError, ValueError):
            valid = False
        if not valid:
            raise OptionsError(f"filmBaseColor channels must be integers 0..255, got {value!r}")
        channels.append(int(c))

    return RGB(*channels)


def load_options(path) -> ConversionOptions:
    """Load a JSON preset file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise OptionsError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise OptionsError(f"Preset {path} must contain a JSON object")

    return ConversionOptions.from_dict(data)


def save_options(options: ConversionOptions, path) -> None:
    Path(path).write_text(json.dumps(options.to_dict(), indent=2), encoding="utf-8")
