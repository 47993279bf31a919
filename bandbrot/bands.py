"""Horizontal bands: the independent unit of rendering work."""

from __future__ import annotations

from dataclasses import dataclass

from .palette import colorize
from .params import InvalidParameters, RenderParameters
from .sampler import sample_rows


@dataclass(frozen=True)
class Band:
    """Rows ``[start_row, end_row)`` of the image."""

    start_row: int
    end_row: int

    @property
    def rows(self) -> int:
        return self.end_row - self.start_row


@dataclass(frozen=True)
class BandResult:
    """RGBA bytes for one band, row-major."""

    start_row: int
    pixels: bytes


def partition_bands(height: int, chunk_count: int) -> list[Band]:
    """Split ``[0, height)`` into ``chunk_count`` contiguous bands.

    Every band but the last holds ``max(1, height // chunk_count)`` rows; the
    last absorbs the remainder. When there are more bands than rows the
    surplus bands are empty.
    """

    if chunk_count < 1:
        raise InvalidParameters(f"chunk_count must be at least 1, got {chunk_count}.")
    if height < 1:
        raise InvalidParameters(f"height must be at least 1, got {height}.")

    chunk_size = max(1, height // chunk_count)
    bands = []
    for i in range(chunk_count):
        start = min(i * chunk_size, height)
        end = height if i == chunk_count - 1 else min((i + 1) * chunk_size, height)
        bands.append(Band(start, end))
    return bands


def render_band(band: Band, params: RenderParameters) -> BandResult:
    """Compute and colour every pixel of ``band`` into a buffer of its own."""

    iterations = sample_rows(params, band.start_row, band.end_row)
    rgba = colorize(iterations, params.max_iterations, params.palette)
    return BandResult(start_row=band.start_row, pixels=rgba.tobytes())
