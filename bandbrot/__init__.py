"""Public API for banded Mandelbrot rendering."""

from .bands import Band, BandResult, partition_bands, render_band
from .evaluator import escape_time, escape_time_grid
from .palette import colorize, hsl_to_rgb, map_color
from .params import InvalidParameters, PaletteKind, RenderParameters, validate_parameters
from .sampler import pixel_to_complex, sample_offsets, sample_pixel, sample_rows
from .scheduler import PixelBuffer, Renderer, render, render_async
from .viewport import (
    apply_zoom,
    compute_zoom_factors,
    recenter,
    zoom_sequence,
    zoom_to_rect,
)

__all__ = [
    "Band",
    "BandResult",
    "InvalidParameters",
    "PaletteKind",
    "PixelBuffer",
    "RenderParameters",
    "Renderer",
    "apply_zoom",
    "colorize",
    "compute_zoom_factors",
    "escape_time",
    "escape_time_grid",
    "hsl_to_rgb",
    "map_color",
    "partition_bands",
    "pixel_to_complex",
    "recenter",
    "render",
    "render_async",
    "render_band",
    "sample_offsets",
    "sample_pixel",
    "sample_rows",
    "validate_parameters",
    "zoom_sequence",
    "zoom_to_rect",
]
