"""Utilities for moving the view: rectangle zoom, recentering and zoom sequences."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterator

import numpy as np

from .params import RenderParameters
from .sampler import pixel_to_complex

# Drag rectangles narrower or shorter than this (in pixels) are ignored.
MIN_ZOOM_EXTENT = 5


def recenter(params: RenderParameters, x: float, y: float) -> RenderParameters:
    """Move the view center to the point under pixel ``(x, y)``."""

    center_x, center_y = pixel_to_complex(x, y, params)
    return replace(params, center_x=center_x, center_y=center_y)


def apply_zoom(params: RenderParameters, zoom_factor: float) -> RenderParameters:
    """Scale the view size; factors below 1 zoom in."""

    return replace(params, view_size=float(np.float64(params.view_size) * np.float64(zoom_factor)))


def zoom_to_rect(
    params: RenderParameters,
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    *,
    min_extent: float = MIN_ZOOM_EXTENT,
) -> RenderParameters:
    """Fit the view to the pixel rectangle spanned by two corners.

    The larger of the two relative extents wins so the whole rectangle stays
    visible. Rectangles too small to be deliberate leave ``params`` unchanged.
    """

    rect_width = x1 - x0
    rect_height = y1 - y0
    if abs(rect_width) < min_extent or abs(rect_height) < min_extent:
        return params

    scale = max(abs(rect_width) / params.width, abs(rect_height) / params.height)
    zoomed = recenter(params, x0 + rect_width / 2, y0 + rect_height / 2)
    return replace(zoomed, view_size=params.view_size * scale)


def compute_zoom_factors(frames: int, zoom_factor: float, *, final_zoom: float | None, easing: str) -> np.ndarray:
    """Compute per-frame zoom multipliers for an animation."""

    if frames <= 0:
        return np.array([], dtype=np.float64)

    if final_zoom is not None and final_zoom > 0:
        log_target = np.log(final_zoom)

        def ease_in_out(t: float) -> float:
            return 3 * t ** 2 - 2 * t ** 3

        ease = (lambda u: u) if easing.lower() == "linear" else ease_in_out
        if frames == 1:
            alphas = np.array([1.0], dtype=np.float64)
        else:
            alphas = np.array([ease(i / (frames - 1)) for i in range(frames)], dtype=np.float64)
        alphas = np.clip(alphas, 0.0, 1.0)
        increments = np.diff(np.concatenate(([0.0], alphas)))
        return np.exp(increments * log_target)

    return np.full(frames, np.float64(zoom_factor), dtype=np.float64)


def zoom_sequence(params: RenderParameters, factors: np.ndarray) -> Iterator[RenderParameters]:
    """Yield one parameter snapshot per factor, each zoomed from the previous one."""

    for factor in factors:
        params = apply_zoom(params, float(factor))
        yield params
