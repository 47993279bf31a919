"""Fan bands out to concurrent workers and assemble the final pixel buffer.

Renders are bounded only by CPU time. Callers choose ``chunk_count``, image
size, ``samples`` and ``max_iterations`` according to the parallelism they
have available; there is no timeout and no mid-render cancellation. A host
that needs to abandon stale renders should track a render generation and
discard results it no longer wants.
"""

from __future__ import annotations

import asyncio
import os
import time
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, replace
from typing import Callable, Optional

import numpy as np
import PIL.Image

from .bands import BandResult, partition_bands, render_band
from .params import (
    DEFAULT_CHUNKS,
    PaletteKind,
    RenderParameters,
    validate_parameters,
)


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major RGBA bytes of a finished render."""

    width: int
    height: int
    data: bytes

    def to_array(self) -> np.ndarray:
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4).copy()

    def to_image(self) -> PIL.Image.Image:
        return PIL.Image.frombytes("RGBA", (self.width, self.height), self.data)


class _Assembler:
    """Accumulates band results into one buffer; each band owns a disjoint byte range."""

    def __init__(self, params: RenderParameters):
        self.width = params.width
        self.height = params.height
        self._data = bytearray(params.buffer_size)

    def merge(self, result: BandResult) -> None:
        start = result.start_row * self.width * 4
        self._data[start:start + len(result.pixels)] = result.pixels

    def finish(self) -> PixelBuffer:
        return PixelBuffer(self.width, self.height, bytes(self._data))


def _default_workers(chunk_count: int) -> int:
    return max(1, min(chunk_count, os.cpu_count() or 1))


def render(
    params: RenderParameters,
    chunk_count: int = DEFAULT_CHUNKS,
    *,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
) -> PixelBuffer:
    """Render ``params`` by splitting the image into ``chunk_count`` bands.

    Bands run on ``executor`` when given, otherwise on a private thread pool.
    Results are placed by their start row, so completion order never affects
    the output.
    """

    validate_parameters(params)
    bands = partition_bands(params.height, chunk_count)
    assembler = _Assembler(params)

    if executor is None:
        workers = max_workers if max_workers is not None else _default_workers(chunk_count)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="band") as pool:
            futures = [pool.submit(render_band, band, params) for band in bands]
            for future in as_completed(futures):
                assembler.merge(future.result())
    else:
        futures = [executor.submit(render_band, band, params) for band in bands]
        for future in as_completed(futures):
            assembler.merge(future.result())

    # Give other threads (e.g. a UI thread) a turn before reporting completion.
    time.sleep(0)
    return assembler.finish()


async def _collect_bands(bands, params: RenderParameters, assembler: _Assembler, executor: Optional[Executor]) -> None:
    loop = asyncio.get_running_loop()
    tasks = [loop.run_in_executor(executor, render_band, band, params) for band in bands]
    try:
        for next_result in asyncio.as_completed(tasks):
            assembler.merge(await next_result)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Observe every outcome so no band failure goes unretrieved.
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def render_async(
    params: RenderParameters,
    chunk_count: int = DEFAULT_CHUNKS,
    *,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
) -> PixelBuffer:
    """Asyncio variant of :func:`render`.

    Bands run on ``executor`` when given, on a private pool of ``max_workers``
    threads when that is set, and on the loop's default executor otherwise.
    The first band failure is raised once the remaining bands are settled.
    """

    validate_parameters(params)
    bands = partition_bands(params.height, chunk_count)
    assembler = _Assembler(params)

    if executor is None and max_workers is not None:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="band") as pool:
            await _collect_bands(bands, params, assembler, pool)
    else:
        await _collect_bands(bands, params, assembler, executor)

    await asyncio.sleep(0)
    return assembler.finish()


def _noop() -> None:
    pass


class Renderer:
    """Host-facing renderer holding the current view.

    Each render works on a snapshot of the parameters taken when it starts, so
    updates made while a render is in flight only affect later renders.
    ``on_started`` and ``on_finished`` let a host show and hide a busy
    indicator; ``clock`` is a monotonic clock returning seconds. ``max_workers``
    and ``executor`` are passed through to :func:`render`.
    """

    def __init__(
        self,
        params: Optional[RenderParameters] = None,
        *,
        on_started: Callable[[], None] = _noop,
        on_finished: Callable[[], None] = _noop,
        clock: Callable[[], float] = time.perf_counter,
        max_workers: Optional[int] = None,
        executor: Optional[Executor] = None,
    ):
        self.params = params if params is not None else RenderParameters()
        self.on_started = on_started
        self.on_finished = on_finished
        self.clock = clock
        self.max_workers = max_workers
        self.executor = executor
        self.render_time = 0.0
        self.buffer: Optional[PixelBuffer] = None

    def update(self, **changes) -> RenderParameters:
        self.params = replace(self.params, **changes)
        return self.params

    def set_center(self, center_x: float, center_y: float) -> None:
        self.update(center_x=center_x, center_y=center_y)

    def set_size(self, view_size: float) -> None:
        self.update(view_size=view_size)

    def set_max_iterations(self, max_iterations: int) -> None:
        self.update(max_iterations=max_iterations)

    def set_samples(self, samples: int) -> None:
        self.update(samples=samples)

    def set_palette(self, palette: PaletteKind) -> None:
        self.update(palette=palette)

    def set_dimensions(self, width: int, height: int) -> None:
        self.update(width=width, height=height)

    def render(self, chunk_count: int = DEFAULT_CHUNKS) -> PixelBuffer:
        snapshot = validate_parameters(self.params)
        # Bad chunk counts are rejected before the host is notified.
        partition_bands(snapshot.height, chunk_count)
        self.on_started()
        try:
            start = self.clock()
            buffer = render(snapshot, chunk_count, max_workers=self.max_workers, executor=self.executor)
            self.render_time = self.clock() - start
        finally:
            self.on_finished()
        self.buffer = buffer
        return buffer

    async def render_async(self, chunk_count: int = DEFAULT_CHUNKS) -> PixelBuffer:
        snapshot = validate_parameters(self.params)
        # Bad chunk counts are rejected before the host is notified.
        partition_bands(snapshot.height, chunk_count)
        self.on_started()
        try:
            start = self.clock()
            buffer = await render_async(
                snapshot, chunk_count, max_workers=self.max_workers, executor=self.executor)
            self.render_time = self.clock() - start
        finally:
            self.on_finished()
        self.buffer = buffer
        return buffer
