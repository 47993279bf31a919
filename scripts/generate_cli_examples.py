from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "240", "--height", "160", "--center-x", "-0.6", "--size", "3.2",
             "--max-iterations", "300", "--samples", "2"]
PALETTES = ["grayscale", "hue-linear", "hue-logarithmic", "hue-smooth", "sine-bands", "fire"]


@dataclass
class Example:
    name: str
    args: list[str]
    expected: Path

    def full_args(self) -> list[str]:
        return [sys.executable, "render.py", *self.args, "--output", str(self.expected)]


def _palette_examples() -> list[Example]:
    return [
        Example(
            name=f"palette-{palette}",
            args=[*BASE_ARGS, "--palette", palette],
            expected=EXAMPLES_ROOT / "palette" / f"{palette}.png",
        )
        for palette in PALETTES
    ]


EXAMPLES: list[Example] = [
    *_palette_examples(),
    Example(
        name="no-antialiasing",
        args=[*BASE_ARGS, "--samples", "1", "--palette", "grayscale"],
        expected=EXAMPLES_ROOT / "samples" / "aliased.png",
    ),
    Example(
        name="single-band",
        args=[*BASE_ARGS, "--chunks", "1"],
        expected=EXAMPLES_ROOT / "chunks" / "single-band.png",
    ),
    Example(
        name="two-workers",
        args=[*BASE_ARGS, "--chunks", "8", "--workers", "2"],
        expected=EXAMPLES_ROOT / "chunks" / "two-workers.png",
    ),
    Example(
        name="zoom-rect",
        args=[*BASE_ARGS, "--zoom-rect", "20,40,80,80", "--palette", "fire"],
        expected=EXAMPLES_ROOT / "zoom-rect" / "seahorse-valley.png",
    ),
    Example(
        name="jpeg",
        args=[*BASE_ARGS, "--format", "jpg"],
        expected=EXAMPLES_ROOT / "format" / "view.jpg",
    ),
    Example(
        name="gif",
        args=[*BASE_ARGS, "--mode", "gif", "--frames", "6", "--center-x", "-0.7436", "--center-y", "0.1318",
              "--final-zoom", "1e-2", "--easing", "linear"],
        expected=EXAMPLES_ROOT / "gif" / "zoom.gif",
    ),
    Example(
        name="verbose",
        args=[*BASE_ARGS, "--verbose"],
        expected=EXAMPLES_ROOT / "verbose" / "diagnostic.png",
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def main() -> None:
    _ensure_clean([EXAMPLES_ROOT])
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        example.expected.parent.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        if not example.expected.is_file():
            raise RuntimeError(f"Expected file {example.expected} was not created")
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
