"""
Palettes and the iteration-count to color mapping.

Each palette function returns a numpy array of shape (N, 4) with RGBA
values (uint8). A pixel's color is palette[iterations / max_iterations *
(N - 1)], so the last entry is used for points that never escaped.

To add a new palette:
1. Define a create_palette_xxx() function that returns the color array
2. Add it to the PALETTES dictionary at the bottom of this file
"""

import numpy as np
from numba import jit, prange


def create_palette_ember():
    """
    Ember palette: black -> orange in 244 steps, then black.

    Points inside the set (iterations == max_iterations) land on the
    final black entry.
    """
    steps = 244
    colors = np.zeros((steps + 1, 4), dtype=np.uint8)
    for i in range(steps):
        factor = i / (steps - 1)
        colors[i] = [int(255 * factor), int(155 * factor), int(55 * factor), 255]
    colors[steps] = [0, 0, 0, 255]
    return colors


def create_palette_grayscale():
    """
    Grayscale palette: white -> black.

    Simple look, good for seeing raw iteration structure.
    """
    steps = 256
    colors = np.zeros((steps, 4), dtype=np.uint8)
    for i in range(steps):
        v = 255 - i
        colors[i] = [v, v, v, 255]
    return colors


@jit(nopython=True, cache=True)
def palette_index(iterations, max_iterations, palette_size):
    """
    Palette index for an iteration count, clamped to [0, palette_size - 1].

    A zero iteration cap maps to the last entry.
    """
    last = palette_size - 1
    if max_iterations <= 0:
        return last
    index = int(iterations / max_iterations * last)
    if index < 0:
        return 0
    if index > last:
        return last
    return index


@jit(nopython=True, parallel=True, cache=True)
def apply_palette(counts, max_iterations, palette, out):
    """
    Map iteration counts to RGBA colors.

    Args:
        counts: 2D array of iteration counts from compute_frame
        max_iterations: Iteration cap the counts were computed with
        palette: Nx4 array of RGBA colors (uint8)
        out: Output (height, width, 4) uint8 array, modified in place
    """
    height, width = counts.shape
    num_colors = palette.shape[0]

    for py in prange(height):
        for px in range(width):
            idx = palette_index(counts[py, px], max_iterations, num_colors)
            for ch in range(4):
                out[py, px, ch] = palette[idx, ch]


# Registry of all available palettes.
# Keys are display names, values are factory functions.
PALETTES = {
    'ember': create_palette_ember,
    'grayscale': create_palette_grayscale,
}


def get_palette(name):
    """
    Get a palette by name.

    Raises:
        KeyError if name not found
    """
    return PALETTES[name]()


def get_default_palette():
    """Get the default palette (ember)."""
    return create_palette_ember()


def list_palette_names():
    """Get list of available palette names."""
    return list(PALETTES.keys())


def colorize(counts, max_iterations, palette=None):
    """Allocate an RGBA image and fill it from iteration counts."""
    if palette is None:
        palette = get_default_palette()
    out = np.zeros(counts.shape + (4,), dtype=np.uint8)
    apply_palette(np.ascontiguousarray(counts, dtype=np.int64), max_iterations, palette, out)
    return out
