"""
Frame driver for the UI layer, with optional background computation.

The FractalRenderer class handles:
- Synchronous frames (render) and background frames (compute_async)
- Dropping superseded requests: a frame already running finishes, but its
  result is discarded once a newer request or a settings change arrived
- Falling back to the previous recurrence when a new custom expression
  doesn't parse
"""

import logging
import threading

import numpy as np

from .colormaps import colorize, get_default_palette, get_palette
from .compute import FrameRequest, compute_frame
from .complex_number import resolve_scalar_type
from .errors import ExpressionSyntaxError
from .fractals import as_recurrence
from .runtime import Runtime

logger = logging.getLogger(__name__)


class FractalRenderer:
    """
    Computes iteration counts and RGBA frames for a fixed viewport size.

    Usage:
        renderer = FractalRenderer(800, 600, max_iterations=64)
        renderer.compute_async(camera)

        # In your UI loop:
        rgba, counts, camera = renderer.get_result()
        if rgba is not None:
            display(rgba)

    Attributes:
        width, height: Viewport dimensions
        max_iterations: Iteration cap
        recurrence: Current recurrence (built-in or custom)
        formula_error: Message of the last rejected custom expression, or None
    """

    def __init__(self, width, height, max_iterations, recurrence='mandelbrot',
                 workers=1, scalar_type=np.float64, palette=None):
        """
        Initialize the renderer.

        Args:
            width, height: Viewport dimensions in pixels
            max_iterations: Iteration cap
            recurrence: Built-in name, FractalId or expression text
            workers: Threads used for custom expressions
            scalar_type: Scalar type (or name) for custom expressions
            palette: Nx4 RGBA palette (default ember)

        Raises:
            ExpressionSyntaxError if the initial expression is malformed
        """
        self.width = width
        self.height = height
        self.max_iterations = max_iterations
        self.workers = workers
        self.scalar_type = resolve_scalar_type(scalar_type)
        self.recurrence = as_recurrence(recurrence, Runtime(self.scalar_type))
        self.palette = palette if palette is not None else get_default_palette()
        self.formula_error = None

        # Async computation state
        self.lock = threading.Lock()
        self.computing = False
        self.pending_camera = None
        self.generation = 0
        self.result_ready = False
        self.counts = None
        self.rgba = None
        self.result_camera = None
        self._thread = None

    @classmethod
    def from_settings(cls, settings):
        """Build a renderer from a config.Settings instance."""
        recurrence = settings.fractal
        if recurrence == 'custom':
            recurrence = settings.custom_expression
        return cls(settings.width, settings.height, settings.max_iterations,
                   recurrence=recurrence, workers=settings.workers,
                   scalar_type=settings.scalar_type,
                   palette=get_palette(settings.palette))

    def frame_request(self, camera):
        return FrameRequest.from_camera(self.width, self.height, camera,
                                        self.max_iterations, self.recurrence)

    def render(self, camera):
        """
        Compute one frame synchronously.

        Returns:
            (counts, rgba): int64 (height, width) and uint8 (height, width, 4)
        """
        with self.lock:
            request = self.frame_request(camera)
            palette = self.palette
        counts = compute_frame(request, self.workers, self.scalar_type)
        rgba = colorize(counts, request.max_iterations, palette)
        return counts, rgba

    def compute_async(self, camera):
        """
        Request a frame for `camera` in the background.

        A request made while another one is pending replaces it.
        """
        with self.lock:
            self.pending_camera = camera
            self.generation += 1
            if not self.computing:
                self.computing = True
                self._thread = threading.Thread(target=self._compute_thread)
                self._thread.daemon = True
                self._thread.start()

    def _compute_thread(self):
        """Background thread working off pending requests."""
        while True:
            with self.lock:
                camera = self.pending_camera
                self.pending_camera = None
                generation = self.generation
                if camera is None:
                    self.computing = False
                    break

            try:
                counts, rgba = self.render(camera)
            except Exception:
                logger.exception("Frame computation failed")
                continue

            with self.lock:
                if generation != self.generation:
                    logger.debug("Dropping superseded frame")
                    continue
                self.counts = counts
                self.rgba = rgba
                self.result_camera = camera
                self.result_ready = True

    def wait(self, timeout=None):
        """Block until the background thread has no work left."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def get_result(self):
        """
        Get the latest background result if ready.

        Returns:
            (rgba, counts, camera) if a new result is ready, (None, None, None) otherwise
        """
        with self.lock:
            if self.result_ready:
                self.result_ready = False
                return self.rgba.copy(), self.counts.copy(), self.result_camera
        return None, None, None

    def update_settings(self, max_iterations=None, recurrence=None, palette=None):
        """
        Update rendering settings.

        A custom expression that doesn't parse is rejected: the error is
        logged and kept in formula_error, and the current recurrence stays.
        A FractalId with no built-in recurrence (CUSTOM) is logged and
        ignored the same way.
        A frame still computing with the old settings is dropped; request a
        new one afterwards.

        Args:
            max_iterations: New iteration cap (or None to keep current)
            recurrence: Built-in name, FractalId or expression text (or None)
            palette: New RGBA palette array (or None)

        Returns:
            True if any setting changed, False otherwise
        """
        changed = False
        new_recurrence = None
        if recurrence is not None:
            try:
                new_recurrence = as_recurrence(recurrence, Runtime(self.scalar_type))
            except ExpressionSyntaxError as e:
                logger.warning("Rejected expression %r: %s", recurrence, e)
                self.formula_error = str(e)
            except KeyError as e:
                # e.g. FractalId.CUSTOM, which names no built-in
                logger.warning("Rejected recurrence %r: %s", recurrence, e)
            else:
                self.formula_error = None

        with self.lock:
            if max_iterations is not None and max_iterations != self.max_iterations:
                if max_iterations < 0:
                    raise ValueError(f"max_iterations must be >= 0, got {max_iterations}")
                self.max_iterations = max_iterations
                changed = True
            if new_recurrence is not None and new_recurrence.name != self.recurrence.name:
                self.recurrence = new_recurrence
                changed = True
            if palette is not None:
                self.palette = palette
                changed = True
            if changed:
                # Anything in flight was computed with the old settings
                self.generation += 1
        return changed
