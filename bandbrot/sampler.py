"""Pixel to complex-plane mapping and supersampled iteration counts."""

from __future__ import annotations

import numpy as np

from .evaluator import escape_time, escape_time_grid
from .params import RenderParameters


def sample_offsets(samples: int) -> np.ndarray:
    """Sub-pixel offsets along one axis.

    A single sample sits on the pixel's integer coordinate; ``k`` samples are
    spaced ``1/(k+1)`` apart strictly inside the pixel.
    """

    if samples <= 1:
        return np.zeros(1, dtype=np.float64)
    step = 1.0 / (samples + 1.0)
    return step * (np.arange(samples, dtype=np.float64) + 1.0)


def pixel_to_complex(x: float, y: float, params: RenderParameters) -> tuple[float, float]:
    """Map a (possibly fractional) pixel coordinate to a point of the complex plane."""

    cx = params.center_x + (x / params.width - 0.5) * params.view_size
    cy = params.center_y + (y / params.height - 0.5) * params.view_size * (params.height / params.width)
    return cx, cy


def sample_pixel(x: int, y: int, params: RenderParameters) -> int:
    """Aggregate iteration value of one pixel, evaluated point by point."""

    offsets = sample_offsets(params.samples)
    total = 0
    for ox in offsets:
        for oy in offsets:
            cx, cy = pixel_to_complex(x + float(ox), y + float(oy), params)
            total += escape_time(cx, cy, params.max_iterations)
    return total // (len(offsets) * len(offsets))


def sample_rows(params: RenderParameters, start_row: int, end_row: int) -> np.ndarray:
    """Aggregate iteration values for rows ``[start_row, end_row)``.

    Returns an ``int64`` array of shape ``(end_row - start_row, width)``.
    """

    rows = max(end_row - start_row, 0)
    offsets = sample_offsets(params.samples)
    n = offsets.size

    xs = np.arange(params.width, dtype=np.float64)
    ys = np.arange(start_row, start_row + rows, dtype=np.float64)

    # Axes: (row, column, x sub-sample, y sub-sample)
    sub_x = (xs[:, None] + offsets[None, :])[None, :, :, None]
    sub_y = (ys[:, None] + offsets[None, :])[:, None, None, :]

    cx = params.center_x + (sub_x / params.width - 0.5) * params.view_size
    cy = params.center_y + (sub_y / params.height - 0.5) * params.view_size * (params.height / params.width)
    cx, cy = np.broadcast_arrays(cx, cy)

    counts = escape_time_grid(cx, cy, params.max_iterations).astype(np.int64)
    return counts.sum(axis=(2, 3)) // (n * n)
