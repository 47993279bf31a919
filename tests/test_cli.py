from concurrent.futures import ThreadPoolExecutor

import pytest
from PIL import Image

from bandbrot import cli, scheduler
from bandbrot.params import PaletteKind

SMALL = ["--width", "16", "--height", "12", "--max-iterations", "20", "--samples", "1", "--chunks", "4"]


def _resolve(args):
    parser = cli.build_parser()
    opt = parser.parse_args(args)
    return cli.resolve_parameters(opt, parser), cli.resolve_output_config(opt, parser)


def test_defaults():
    params, output = _resolve([])
    assert (params.width, params.height) == (512, 512)
    assert params.view_size == 4.0
    assert params.max_iterations == 1000
    assert params.samples == 5
    assert params.palette is PaletteKind.HUE_SMOOTH
    assert output.mode == "image"
    assert output.path.name == "mandelbrot.png"


def test_palette_aliases():
    params, _ = _resolve(["--palette", "hsl2"])
    assert params.palette is PaletteKind.HUE_LOGARITHMIC


def test_zoom_rect_is_applied():
    params, _ = _resolve(["--width", "100", "--height", "100", "--zoom-rect", "25,25,75,75"])
    assert params.view_size == 2.0


@pytest.mark.parametrize("args", [
    ["--width", "0"],
    ["--samples", "0"],
    ["--max-iterations", "0"],
    ["--chunks", "0"],
    ["--workers", "0"],
    ["--max-iterations", "4294967296"],
    ["--palette", "viridis"],
    ["--zoom-rect", "1,2,3"],
    ["--frames", "3"],
    ["--output", "out.jpg"],
    ["--mode", "gif", "--output", "movie.mp4"],
])
def test_invalid_arguments_exit(args):
    with pytest.raises(SystemExit):
        _resolve(args)


def test_writes_png(tmp_path, capsys):
    target = tmp_path / "view.png"
    assert cli.main([*SMALL, "--palette", "fire", "--output", str(target)]) == 0

    with Image.open(target) as image:
        assert image.size == (16, 12)
    assert "Render time" in capsys.readouterr().out


def test_writes_jpeg_without_alpha(tmp_path):
    target = tmp_path / "view.jpg"
    cli.main([*SMALL, "--format", "jpg", "--output", str(target)])
    with Image.open(target) as image:
        assert image.mode == "RGB"


def test_writes_gif(tmp_path):
    target = tmp_path / "zoom"
    cli.main([*SMALL, "--mode", "gif", "--frames", "3", "--zoom-factor", "0.5", "--output", str(target)])
    gif = tmp_path / "zoom.gif"
    assert gif.is_file()
    with Image.open(gif) as image:
        assert image.n_frames > 1


@pytest.fixture
def pool_sizes(monkeypatch):
    sizes = []

    class SizedPool(ThreadPoolExecutor):
        def __init__(self, max_workers=None, **kwargs):
            sizes.append(max_workers)
            super().__init__(max_workers=max_workers, **kwargs)

    monkeypatch.setattr(scheduler, "ThreadPoolExecutor", SizedPool)
    return sizes


def test_workers_option_sizes_thread_pool(tmp_path, pool_sizes):
    target = tmp_path / "view.png"
    cli.main([*SMALL, "--workers", "2", "--output", str(target)])

    assert pool_sizes == [2]
    assert target.is_file()


def test_workers_default_to_chunk_count(tmp_path, monkeypatch, pool_sizes):
    monkeypatch.setattr(scheduler.os, "cpu_count", lambda: 64)
    cli.main([*SMALL, "--output", str(tmp_path / "view.png")])

    assert pool_sizes == [4]
