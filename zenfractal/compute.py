"""
Per-frame fractal computation.

The UI layer hands over a viewport size, camera and iteration cap once per
frame and gets back a row-major (height, width) array of iteration counts.

Two paths:
- built-in recurrences in float64 run in a Numba JIT kernel, parallel over
  rows with prange
- custom expressions (and other scalar types) run through the Python
  runtime, split into row bands over worker threads, each thread owning its
  own Runtime
"""

import logging
import threading
import time
from dataclasses import dataclass

import numpy as np
from numba import jit, prange

from .colormaps import apply_palette
from .complex_number import Complex, resolve_scalar_type
from .escape import CustomRecurrence
from .fractals import BuiltinFractal, as_recurrence, iterate_point
from .runtime import Runtime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameRequest:
    """
    Everything a frame depends on.

    Attributes:
        width, height: Viewport size in pixels
        camera_x, camera_y: World coordinate of the top-left pixel
        zoom: Pixels per world unit, > 0
        max_iterations: Iteration cap
        recurrence: Anything fractals.as_recurrence() accepts
    """
    width: int
    height: int
    camera_x: float
    camera_y: float
    zoom: float
    max_iterations: int
    recurrence: object = 'mandelbrot'

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError(f"viewport must be at least 1x1, got {self.width}x{self.height}")
        if not self.zoom > 0:
            raise ValueError(f"zoom must be > 0, got {self.zoom}")
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")

    @classmethod
    def from_camera(cls, width, height, camera, max_iterations, recurrence='mandelbrot'):
        return cls(width, height, camera.x, camera.y, camera.zoom, max_iterations, recurrence)


@jit(nopython=True, parallel=True, cache=True)
def compute_builtin_frame(width, height, camera_x, camera_y, zoom, max_iter, fractal_id):
    """
    Iteration counts for a whole viewport using a built-in recurrence.

    Args:
        width, height: Output dimensions in pixels
        camera_x, camera_y: World coordinate of pixel (0, 0)
        zoom: Pixels per world unit
        max_iter: Iteration cap
        fractal_id: FRACTAL_* constant

    Returns:
        2D int64 array (height, width)
    """
    result = np.empty((height, width), dtype=np.int64)

    for py in prange(height):
        y0 = py / zoom + camera_y
        for px in range(width):
            x0 = px / zoom + camera_x
            result[py, px] = iterate_point(x0, y0, max_iter, fractal_id)

    return result


def compute_rows(request, recurrence, scalar_type, result, row_start, row_stop):
    """
    Fill rows [row_start, row_stop) of `result` with the Python path.

    `recurrence` must not be shared with another thread while this runs.
    """
    camera_x, camera_y, zoom = request.camera_x, request.camera_y, request.zoom
    max_iter = request.max_iterations

    for py in range(row_start, row_stop):
        y0 = scalar_type(py / zoom + camera_y)
        for px in range(request.width):
            x0 = scalar_type(px / zoom + camera_x)
            result[py, px] = recurrence.iterate(Complex(x0, y0), max_iter)


def _worker_recurrence(recurrence, scalar_type):
    # Each worker gets a private runtime; built-ins hold no state
    if isinstance(recurrence, CustomRecurrence):
        return recurrence.with_runtime(Runtime(scalar_type))
    return recurrence


def compute_frame(request, workers=1, scalar_type=np.float64):
    """
    Compute iteration counts for one frame.

    Args:
        request: FrameRequest
        workers: Number of threads for the Python path
        scalar_type: Scalar type (or its name) for the Python path

    Returns:
        2D int64 array (height, width), row-major, values in [0, max_iterations]

    Raises:
        ExpressionSyntaxError if the recurrence is malformed expression text
    """
    scalar_type = resolve_scalar_type(scalar_type)
    recurrence = as_recurrence(request.recurrence, Runtime(scalar_type))
    start_time = time.perf_counter()

    if isinstance(recurrence, BuiltinFractal) and scalar_type in (float, np.float64):
        result = compute_builtin_frame(
            request.width, request.height,
            float(request.camera_x), float(request.camera_y), float(request.zoom),
            request.max_iterations, recurrence.kernel_id
        )
    else:
        result = np.zeros((request.height, request.width), dtype=np.int64)
        workers = max(1, min(workers, request.height))
        band = -(-request.height // workers)

        threads = []
        errors = []

        def run_band(worker_recurrence, row_start, row_stop):
            try:
                compute_rows(request, worker_recurrence, scalar_type, result, row_start, row_stop)
            except Exception as e:
                errors.append(e)

        for row_start in range(0, request.height, band):
            row_stop = min(row_start + band, request.height)
            worker_recurrence = _worker_recurrence(recurrence, scalar_type)
            if workers == 1:
                compute_rows(request, worker_recurrence, scalar_type, result, row_start, row_stop)
                continue
            thread = threading.Thread(target=run_band,
                                      args=(worker_recurrence, row_start, row_stop))
            thread.daemon = True
            thread.start()
            threads.append(thread)

        for thread in threads:
            thread.join()
        if errors:
            raise errors[0]

    logger.debug("Computed %dx%d frame of %r in %.1f ms",
                 request.width, request.height, recurrence,
                 (time.perf_counter() - start_time) * 1000)
    return result


def warmup_jit(palette):
    """
    Warm up JIT compilation with small dummy arrays.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first real frame.
    """
    counts = compute_builtin_frame(10, 10, -2.0, -1.0, 5.0, 10, 0)
    out = np.zeros((10, 10, 4), dtype=np.uint8)
    apply_palette(counts, 10, palette, out)
