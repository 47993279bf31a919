"""Iteration count to RGBA colour mapping."""

from __future__ import annotations

import math

import numpy as np

from .params import PaletteKind

INSIDE_COLOR = (0, 0, 0, 255)

# Hue used by the logarithmic palette when the logarithm is undefined.
LOG_FALLBACK_HUE = 240


def _channel(value: float) -> int:
    """Clamp to [0, 255] then truncate."""

    if not value > 0.0:
        return 0
    if value >= 255.0:
        return 255
    return int(value)


def hsl_to_rgb(hue: int, saturation: int, lightness: int) -> tuple[int, int, int, int]:
    """Convert HSL (hue in degrees, saturation and lightness in percent) to RGBA."""

    h = (hue % 360) / 60.0
    s = saturation / 100.0
    l = lightness / 100.0

    c = (1.0 - abs(2.0 * l - 1.0)) * s
    x = c * (1.0 - abs((h % 2.0) - 1.0))
    m = l - c / 2.0

    sector = int(h)
    if sector == 0:
        r, g, b = c, x, 0.0
    elif sector == 1:
        r, g, b = x, c, 0.0
    elif sector == 2:
        r, g, b = 0.0, c, x
    elif sector == 3:
        r, g, b = 0.0, x, c
    elif sector == 4:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return (
        _channel((r + m) * 255.0),
        _channel((g + m) * 255.0),
        _channel((b + m) * 255.0),
        255,
    )


def _logarithmic_hue(iterations: int, max_iterations: int) -> int:
    if max_iterations <= 1 or iterations <= 0:
        return LOG_FALLBACK_HUE
    log_iter = math.log(iterations) / math.log(max_iterations)
    hue = (1.0 - log_iter) * 240.0
    return int(min(max(hue, 0.0), 240.0))


def map_color(iterations: int, max_iterations: int, palette: PaletteKind) -> tuple[int, int, int, int]:
    """Colour for one aggregated iteration value.

    Points that never escaped are black for every palette.
    """

    if iterations >= max_iterations:
        return INSIDE_COLOR

    n = float(iterations)
    if palette is PaletteKind.GRAYSCALE:
        v = 255 - _channel(n / max_iterations * 255.0)
        return (v, v, v, 255)

    if palette is PaletteKind.HUE_LINEAR:
        hue = int(n / max_iterations * 360.0) % 360
        return hsl_to_rgb(hue, 100, 50)

    if palette is PaletteKind.HUE_LOGARITHMIC:
        return hsl_to_rgb(_logarithmic_hue(iterations, max_iterations), 100, 50)

    if palette is PaletteKind.HUE_SMOOTH:
        # log|z_n| is not tracked, so the smoothing term vanishes.
        nu = (n + 1.0) / max_iterations
        hue = min(int(360.0 * nu), 360) % 360
        return hsl_to_rgb(hue, 100, 50)

    if palette is PaletteKind.SINE_BANDS:
        return (
            _channel(abs(math.sin(n * 9.0)) * 255.0),
            _channel(abs(math.sin(n * 3.0)) * 255.0),
            _channel(abs(math.sin(n * 5.0)) * 255.0),
            255,
        )

    if palette is PaletteKind.FIRE:
        t = n / max_iterations
        r = min(255.0, 9.0 * (1.0 - t) * t * t * t * 255.0)
        g = min(255.0, 15.0 * (1.0 - t) * (1.0 - t) * t * t * 255.0)
        b = min(255.0, 8.5 * (1.0 - t) * (1.0 - t) * (1.0 - t) * t * 255.0)
        return (_channel(r), _channel(g), _channel(b), 255)

    raise ValueError(f"Unsupported palette {palette!r}")


def colorize(iterations: np.ndarray, max_iterations: int, palette: PaletteKind) -> np.ndarray:
    """Map an array of iteration values to RGBA, adding a trailing channel axis.

    Only the distinct values present are passed through :func:`map_color`, so
    the cost follows the image contents rather than ``max_iterations``.
    """

    iterations = np.clip(np.asarray(iterations, dtype=np.int64), 0, max_iterations)
    values, inverse = np.unique(iterations, return_inverse=True)
    colors = np.array(
        [map_color(int(n), max_iterations, palette) for n in values],
        dtype=np.uint8,
    ).reshape(-1, 4)
    return colors[inverse.reshape(iterations.shape)]
