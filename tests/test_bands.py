import pytest

from bandbrot.bands import Band, partition_bands, render_band
from bandbrot.params import InvalidParameters, PaletteKind, RenderParameters
from bandbrot.scheduler import render


@pytest.mark.parametrize("height", [1, 2, 3, 7, 16, 17, 100])
@pytest.mark.parametrize("chunk_count", [1, 2, 3, 8, 16, 150])
def test_bands_cover_every_row_once(height, chunk_count):
    bands = partition_bands(height, chunk_count)

    assert len(bands) == chunk_count
    assert bands[-1].end_row == height
    covered = [row for band in bands for row in range(band.start_row, band.end_row)]
    assert covered == list(range(height))
    assert all(band.start_row <= band.end_row for band in bands)


def test_last_band_absorbs_remainder():
    assert partition_bands(10, 3) == [Band(0, 3), Band(3, 6), Band(6, 10)]


def test_surplus_bands_are_empty():
    bands = partition_bands(3, 5)
    assert bands[:3] == [Band(0, 1), Band(1, 2), Band(2, 3)]
    assert all(band.rows == 0 for band in bands[3:])


@pytest.mark.parametrize("chunk_count", [0, -1])
def test_chunk_count_must_be_positive(chunk_count):
    with pytest.raises(InvalidParameters):
        partition_bands(10, chunk_count)


def test_band_buffer_is_sized_to_band():
    params = RenderParameters(width=9, height=8, max_iterations=20, samples=2, palette=PaletteKind.FIRE)
    result = render_band(Band(2, 5), params)
    assert result.start_row == 2
    assert len(result.pixels) == 3 * 9 * 4


def test_band_matches_rows_of_full_render():
    params = RenderParameters(width=9, height=8, center_x=-0.5, view_size=3.0, max_iterations=20,
                              samples=2, palette=PaletteKind.HUE_LINEAR)
    full = render(params, 1).data
    result = render_band(Band(3, 6), params)
    row_bytes = params.width * 4
    assert result.pixels == full[3 * row_bytes:6 * row_bytes]


def test_empty_band():
    params = RenderParameters(width=4, height=4, max_iterations=10, samples=1)
    assert render_band(Band(4, 4), params).pixels == b""
