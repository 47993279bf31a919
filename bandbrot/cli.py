"""Command-line front end: render a view or a zoom animation and write it to disk."""

import sys
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path

import imageio
import tensorflow as tf

from . import params as defaults
from .params import InvalidParameters, PaletteKind, RenderParameters, validate_parameters
from .scheduler import PixelBuffer, Renderer
from .viewport import compute_zoom_factors, zoom_sequence, zoom_to_rect

VERBOSE = False


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


VALID_MODES = ("image", "gif")


@dataclass
class OutputConfig:
    mode: str
    path: Path
    image_format: str
    frames: int


def build_parser():
    parser = ArgumentParser(description="Render the Mandelbrot set in parallel horizontal bands.")

    parser.add_argument('--width', type=int, dest='width', metavar='WIDTH',
                        help='image width in pixels', default=defaults.DEFAULT_WIDTH)

    parser.add_argument('--height', type=int, dest='height', metavar='HEIGHT',
                        help='image height in pixels', default=defaults.DEFAULT_HEIGHT)

    parser.add_argument('--center-x', type=float, dest='center_x', metavar='CENTER_X',
                        help='real part of the view center', default=defaults.DEFAULT_CENTER_X)

    parser.add_argument('--center-y', type=float, dest='center_y', metavar='CENTER_Y',
                        help='imaginary part of the view center', default=defaults.DEFAULT_CENTER_Y)

    parser.add_argument('--size', type=float, dest='view_size', metavar='SIZE',
                        help='horizontal extent of the view in the complex plane', default=defaults.DEFAULT_VIEW_SIZE)

    parser.add_argument('--max-iterations', type=int, dest='max_iterations', metavar='MAX_ITERATIONS',
                        help='iteration cap; points reaching it are drawn black', default=defaults.DEFAULT_MAX_ITERATIONS)

    parser.add_argument('--samples', type=int, dest='samples', metavar='SAMPLES',
                        help='supersampling grid per axis (1 disables antialiasing)', default=defaults.DEFAULT_SAMPLES)

    parser.add_argument('--palette', type=str, dest='palette', metavar='PALETTE',
                        default=defaults.DEFAULT_PALETTE.value,
                        help='colouring algorithm: ' + ', '.join(kind.value for kind in PaletteKind))

    parser.add_argument('--chunks', type=int, dest='chunks', metavar='CHUNKS',
                        help='number of horizontal bands rendered concurrently', default=defaults.DEFAULT_CHUNKS)

    parser.add_argument('--workers', type=int, dest='workers', metavar='WORKERS', default=None,
                        help='size of the band thread pool. Defaults to min(chunks, CPU count).')

    parser.add_argument('--zoom-rect', type=str, dest='zoom_rect', metavar='X0,Y0,X1,Y1',
                        help='pixel rectangle of the initial view to zoom into before rendering')

    parser.add_argument('--mode', dest='mode', choices=VALID_MODES, default='image',
                        help='write a single image or a zoom animation GIF')

    parser.add_argument('--frames', type=int, dest='frames', metavar='FRAMES', default=1,
                        help='number of frames for the gif mode')

    parser.add_argument('--zoom-factor', type=float, dest='zoom_factor', metavar='ZOOM_FACTOR', default=0.8,
                        help='factor applied to the view size each frame. Choose < 1 for zoom in, > 1 for zoom out')

    parser.add_argument('--final-zoom', type=float, default=None,
                        help='overall scale applied by the last frame. If set, overrides --zoom-factor.')

    parser.add_argument('--easing', type=str, default='ease',
                        help='temporal curve used with --final-zoom: "linear" or "ease".')

    parser.add_argument('--output', dest='output', type=str,
                        help='destination file. Defaults to mandelbrot.<format> or mandelbrot.gif.')

    parser.add_argument('--format', type=str, dest='format', metavar='FORMAT', default='png',
                        help='file format for the image mode. Can be any extension supported by Pillow.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='enable verbose logging, including TensorFlow diagnostics.')

    return parser


def parse_zoom_rect(value: str) -> tuple[float, float, float, float]:
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 4:
        raise ValueError("--zoom-rect needs four comma-separated values X0,Y0,X1,Y1.")
    x0, y0, x1, y1 = (float(p) for p in parts)
    return x0, y0, x1, y1


def resolve_parameters(opt, parser: ArgumentParser) -> RenderParameters:
    try:
        palette = PaletteKind.from_name(opt.palette)
    except ValueError as exc:
        parser.error(str(exc))

    params = RenderParameters(
        width=opt.width,
        height=opt.height,
        center_x=opt.center_x,
        center_y=opt.center_y,
        view_size=opt.view_size,
        max_iterations=opt.max_iterations,
        samples=opt.samples,
        palette=palette,
    )
    try:
        validate_parameters(params)
    except InvalidParameters as exc:
        parser.error(str(exc))

    if opt.chunks < 1:
        parser.error("--chunks must be at least 1.")
    if opt.workers is not None and opt.workers < 1:
        parser.error("--workers must be at least 1.")

    if opt.zoom_rect:
        try:
            params = zoom_to_rect(params, *parse_zoom_rect(opt.zoom_rect))
        except ValueError as exc:
            parser.error(str(exc))
    return params


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    image_format = (opt.format or "png").lower().lstrip(".") or "png"

    if opt.frames < 1:
        parser.error("--frames must be at least 1.")
    if opt.mode == "image" and opt.frames != 1:
        parser.error("--frames is only valid with --mode gif.")

    if opt.mode == "gif":
        output_path = Path(opt.output or "mandelbrot.gif").expanduser()
        if output_path.suffix:
            if output_path.suffix.lower() != ".gif":
                parser.error("GIF outputs must end with .gif.")
        else:
            output_path = output_path.with_suffix(".gif")
    else:
        output_path = Path(opt.output or f"mandelbrot.{image_format}").expanduser()
        expected_suffix = f".{image_format}"
        if output_path.suffix:
            if output_path.suffix.lower() != expected_suffix:
                parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
        else:
            output_path = output_path.with_suffix(expected_suffix)

    if output_path.exists() and output_path.is_dir():
        parser.error("--output must point to a file, not a directory.")

    return OutputConfig(
        mode=opt.mode,
        path=output_path.resolve(),
        image_format=image_format,
        frames=opt.frames,
    )


def write_single_image(buffer: PixelBuffer, output_path: Path, image_format: str) -> None:
    """Write a finished render to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    image = buffer.to_image()
    if pil_format in {"JPEG", "BMP"}:
        image = image.convert("RGB")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


def write_zoom_gif(renderer: Renderer, output_path: Path, factors, chunks: int) -> None:
    """Render one frame per zoom factor and append them to a GIF."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    frames = len(factors)
    writer = imageio.get_writer(str(output_path), mode='I', duration=0.1, loop=0)
    try:
        for i, frame_params in enumerate(zoom_sequence(renderer.params, factors)):
            print("frame {0} out of {1}".format(i, frames), end='\r')
            renderer.params = frame_params
            buffer = renderer.render(chunks)
            log("frame %d rendered in %.3f seconds" % (i, renderer.render_time))
            writer.append_data(buffer.to_array())
    finally:
        writer.close()


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)
    if not VERBOSE:
        tf.get_logger().setLevel("ERROR")

    params = resolve_parameters(opt, parser)
    output_config = resolve_output_config(opt, parser)

    log("TensorFlow version: %s" % tf.__version__)
    log("rendering %dx%d at (%.17g, %.17g), size %.6g, %d iterations, %d samples, palette %s, %d bands" % (
        params.width, params.height, params.center_x, params.center_y, params.view_size,
        params.max_iterations, params.samples, params.palette.value, opt.chunks))
    if opt.workers is not None:
        log("using %d worker threads" % opt.workers)

    renderer = Renderer(
        params,
        on_started=lambda: log("render started"),
        on_finished=lambda: log("render finished"),
        max_workers=opt.workers,
    )

    if output_config.mode == "gif":
        factors = compute_zoom_factors(
            output_config.frames,
            opt.zoom_factor,
            final_zoom=opt.final_zoom,
            easing=opt.easing,
        )
        write_zoom_gif(renderer, output_config.path, factors, opt.chunks)
    else:
        buffer = renderer.render(opt.chunks)
        write_single_image(buffer, output_config.path, output_config.image_format)

    print("Render time: %.3f seconds" % renderer.render_time)
    print("Saved %s" % output_config.path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
