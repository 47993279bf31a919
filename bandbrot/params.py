"""Render parameters and palette selection for a single Mandelbrot render."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum


class InvalidParameters(ValueError):
    """Raised when a render is requested with parameters that cannot be computed."""


class PaletteKind(Enum):
    """Closed set of colouring algorithms."""

    GRAYSCALE = "grayscale"
    HUE_LINEAR = "hue-linear"
    HUE_LOGARITHMIC = "hue-logarithmic"
    HUE_SMOOTH = "hue-smooth"
    SINE_BANDS = "sine-bands"
    FIRE = "fire"

    @classmethod
    def from_name(cls, name: str) -> "PaletteKind":
        key = name.strip().lower().replace("_", "-")
        key = _PALETTE_ALIASES.get(key, key)
        for kind in cls:
            if kind.value == key:
                return kind
        choices = ", ".join(kind.value for kind in cls)
        raise ValueError(f"Unknown palette '{name}'. Valid choices: {choices}.")


# Names used by the original browser front end.
_PALETTE_ALIASES = {
    "hsl1": "hue-linear",
    "hsl2": "hue-logarithmic",
    "hsl3": "hue-smooth",
    "rgb1": "sine-bands",
}

DEFAULT_WIDTH = 512
DEFAULT_HEIGHT = 512
DEFAULT_CENTER_X = 0.0
DEFAULT_CENTER_Y = 0.0
DEFAULT_VIEW_SIZE = 4.0
DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_SAMPLES = 5
DEFAULT_CHUNKS = 16
DEFAULT_PALETTE = PaletteKind.HUE_SMOOTH

# Iteration caps are unsigned 32-bit values.
MAX_ITERATIONS_LIMIT = 2 ** 32 - 1


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set.

    ``view_size`` is the horizontal extent of the view in the complex plane;
    the vertical extent is ``view_size * height / width`` so pixels stay square.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    center_x: float = DEFAULT_CENTER_X
    center_y: float = DEFAULT_CENTER_Y
    view_size: float = DEFAULT_VIEW_SIZE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    samples: int = DEFAULT_SAMPLES
    palette: PaletteKind = DEFAULT_PALETTE

    @property
    def aspect(self) -> float:
        return self.height / self.width

    @property
    def buffer_size(self) -> int:
        return self.width * self.height * 4


def validate_parameters(params: RenderParameters) -> RenderParameters:
    """Reject parameters that cannot be rendered. Never clamps."""

    for name in ("width", "height", "samples", "max_iterations"):
        value = getattr(params, name)
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidParameters(f"{name} must be an integer, got {value!r}.")
        if value < 1:
            raise InvalidParameters(f"{name} must be at least 1, got {value}.")
    if params.max_iterations > MAX_ITERATIONS_LIMIT:
        raise InvalidParameters(
            f"max_iterations must be at most {MAX_ITERATIONS_LIMIT}, got {params.max_iterations}.")
    for name in ("center_x", "center_y", "view_size"):
        if not math.isfinite(getattr(params, name)):
            raise InvalidParameters(f"{name} must be finite, got {getattr(params, name)!r}.")
    if not isinstance(params.palette, PaletteKind):
        raise InvalidParameters(f"palette must be a PaletteKind, got {params.palette!r}.")
    return params
