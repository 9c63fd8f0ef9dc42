"""
zenfractal: escape-time fractals with user-defined recurrences.

The core is a small expression runtime: recurrence text such as 'z*z+c' is
parsed into a tree over complex numbers and evaluated with the variables
a..z bound to complex values. Built-in fractals are JIT-compiled with Numba
and give the same iteration counts as their expression text.

Quick Start:
    from zenfractal import Complex, Runtime, iterate

    runtime = Runtime()
    runtime.set_value('z', Complex(1.0, 1.0))
    runtime.eval('z*z+c')                            # (0.0, 2.0i)

    iterate(Complex(-0.5, 0.5), 64, 'mandelbrot')    # built-in kernel
    iterate(Complex(-0.5, 0.5), 64, 'z*z+c')         # same count

Or from command line:
    python -m zenfractal eval "z*z+c" -z 1,1
    python -m zenfractal iterate --start=-0.5,0.5 --fractal octopus

Package Structure:
    - complex_number.py: Complex value type, generic over the scalar type
    - parser.py / syntax_tree.py: expression grammar and tree evaluation
    - runtime.py: binding table and eval/compile entry points
    - escape.py / fractals.py: escape-time iteration, built-in fractals
    - compute.py: whole-frame computation (JIT and threaded Python paths)
    - camera.py, colormaps.py, renderer.py: glue for the UI layer
    - config.py: settings.json loading
"""

from .camera import Camera
from .colormaps import PALETTES, apply_palette, colorize, get_palette, palette_index
from .complex_number import Complex, abs_, abs_sq, add, mul, scale, sub
from .compute import FrameRequest, compute_frame
from .config import Settings, load_settings
from .errors import BindingOutOfRangeError, EvaluationError, ExpressionSyntaxError, FractalError
from .escape import CustomRecurrence
from .fractals import FRACTALS, FractalId, get_fractal, iterate, list_fractal_names
from .parser import parse
from .renderer import FractalRenderer
from .runtime import BindingTable, Runtime

__version__ = "1.0.0"
__all__ = [
    "Camera",
    "PALETTES",
    "apply_palette",
    "colorize",
    "get_palette",
    "palette_index",
    "Complex",
    "abs_",
    "abs_sq",
    "add",
    "mul",
    "scale",
    "sub",
    "FrameRequest",
    "compute_frame",
    "Settings",
    "load_settings",
    "BindingOutOfRangeError",
    "EvaluationError",
    "ExpressionSyntaxError",
    "FractalError",
    "CustomRecurrence",
    "FRACTALS",
    "FractalId",
    "get_fractal",
    "iterate",
    "list_fractal_names",
    "parse",
    "FractalRenderer",
    "BindingTable",
    "Runtime",
]
