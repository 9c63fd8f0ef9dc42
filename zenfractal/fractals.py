"""
Built-in fractals and the iterate() entry point.

Each built-in recurrence exists twice:
- a Python step function on Complex values, usable with any scalar type
- a Numba JIT kernel on float64 (real, imag) pairs, used for fast frames

Both perform the same multiplications and additions in the same order as
the expression text would be evaluated by the runtime, so built-in and
custom paths give identical iteration counts.

Built-in fractals:
- mandelbrot: z*z + c
- octopus:    (c+z)*z + z*z*z + c*z*z + z
- quartic:    z*z*z*z + c
"""

from enum import IntEnum

from numba import jit

from .complex_number import Complex
from .escape import CustomRecurrence, check_max_iterations, escape_time


# Kernel IDs
FRACTAL_MANDELBROT = 0
FRACTAL_OCTOPUS = 1
FRACTAL_QUARTIC = 2


class FractalId(IntEnum):
    """Recurrence selector offered to the UI layer."""
    MANDELBROT = FRACTAL_MANDELBROT
    OCTOPUS = FRACTAL_OCTOPUS
    QUARTIC = FRACTAL_QUARTIC
    CUSTOM = 3


@jit(nopython=True, cache=True)
def cmul(ar, ai, br, bi):
    """(ar + ai·i) * (br + bi·i), same operation order as complex_number.mul."""
    return ar * br - ai * bi, ar * bi + br * ai


@jit(nopython=True, cache=True)
def step_function(zr, zi, cr, ci, fractal_id):
    """
    Apply one step of a built-in recurrence.

    Args:
        zr, zi: Current iterate
        cr, ci: Parameter (the starting point)
        fractal_id: One of the FRACTAL_* constants

    Returns:
        (new_zr, new_zi)
    """
    if fractal_id == FRACTAL_OCTOPUS:
        # (c + z) * z
        ar, ai = cmul(cr + zr, ci + zi, zr, zi)
        # + z * z * z
        br, bi = cmul(zr, zi, zr, zi)
        br, bi = cmul(br, bi, zr, zi)
        ar, ai = ar + br, ai + bi
        # + c * z * z
        br, bi = cmul(cr, ci, zr, zi)
        br, bi = cmul(br, bi, zr, zi)
        ar, ai = ar + br, ai + bi
        # + z
        return ar + zr, ai + zi

    elif fractal_id == FRACTAL_QUARTIC:
        # z * z * z * z + c
        ar, ai = cmul(zr, zi, zr, zi)
        ar, ai = cmul(ar, ai, zr, zi)
        ar, ai = cmul(ar, ai, zr, zi)
        return ar + cr, ai + ci

    # Default: z * z + c
    ar, ai = cmul(zr, zi, zr, zi)
    return ar + cr, ai + ci


@jit(nopython=True, cache=True)
def iterate_point(cr, ci, max_iter, fractal_id):
    """
    Escape-time count for one starting point.

    Returns the step index at which |z|² first exceeded 4, or max_iter.
    """
    zr, zi = cr, ci
    for i in range(max_iter):
        zr, zi = step_function(zr, zi, cr, ci, fractal_id)
        if zr * zr + zi * zi > 4.0:
            return i
    return max_iter


class BuiltinFractal:
    """
    A recurrence hard-coded for speed.

    Attributes:
        name: Registry key
        expr: The recurrence as expression text, accepted by the runtime
        step: Python step function (z, c) -> z on Complex values
        kernel_id: FRACTAL_* constant for the JIT kernels
    """

    def __init__(self, name, expr, step, kernel_id):
        self.name = name
        self.expr = expr
        self.step = step
        self.kernel_id = kernel_id

    def iterate(self, start, max_iterations):
        """
        Escape-time count for `start`.

        float64 starting points go through the JIT kernel, anything else
        through the generic Python step function.
        """
        max_iterations = check_max_iterations(max_iterations)
        if _is_float64(start.real) and _is_float64(start.imag):
            return int(iterate_point(float(start.real), float(start.imag),
                                     max_iterations, self.kernel_id))
        return self.iterate_generic(start, max_iterations)

    def iterate_generic(self, start, max_iterations):
        """Escape-time count computed with the Python step function."""
        return escape_time(self.step, start, max_iterations)

    def __repr__(self):
        return f"BuiltinFractal({self.name!r}, {self.expr!r})"


def _is_float64(value):
    # np.float64 subclasses float
    return isinstance(value, float)


# Registry of built-in fractals, in selector order.
FRACTALS = {}


def builtin_fractal(name, expr, kernel_id):
    """Register a Python step function as a built-in fractal."""
    def decorator(step):
        FRACTALS[name] = BuiltinFractal(name, expr, step, kernel_id)
        return step
    return decorator


@builtin_fractal('mandelbrot', 'z * z + c', FRACTAL_MANDELBROT)
def mandelbrot(z, c):
    return z * z + c


# Some sets found by experimenting with the expression input

@builtin_fractal('octopus', '(c + z) * z + z * z * z + c * z * z + z', FRACTAL_OCTOPUS)
def octopus(z, c):
    return (c + z) * z + z * z * z + c * z * z + z


@builtin_fractal('quartic', 'z * z * z * z + c', FRACTAL_QUARTIC)
def quartic(z, c):
    return z * z * z * z + c


def get_fractal(name):
    """
    Get a built-in fractal by name or FractalId.

    Raises:
        KeyError if not found
    """
    if isinstance(name, FractalId):
        if name is FractalId.CUSTOM:
            raise KeyError("FractalId.CUSTOM has no built-in recurrence")
        name = name.name.lower()
    return FRACTALS[name]


def list_fractal_names():
    """Get list of built-in fractal names."""
    return list(FRACTALS.keys())


def as_recurrence(recurrence, runtime=None):
    """
    Normalise a recurrence selector.

    Accepts a BuiltinFractal or CustomRecurrence (returned unchanged), a
    FractalId, a built-in name, or any other string as expression text.

    Raises:
        ExpressionSyntaxError if expression text is malformed
    """
    if isinstance(recurrence, (BuiltinFractal, CustomRecurrence)):
        return recurrence
    if isinstance(recurrence, FractalId):
        return get_fractal(recurrence)
    if isinstance(recurrence, str):
        if recurrence in FRACTALS:
            return FRACTALS[recurrence]
        return CustomRecurrence(recurrence, runtime)
    raise TypeError(f"unsupported recurrence {recurrence!r}")


def iterate(start, max_iterations, recurrence, runtime=None):
    """
    Escape-time iteration count for one starting point.

    Args:
        start: Complex starting point (also the fixed parameter c)
        max_iterations: Iteration cap, >= 1 (0 returns 0 immediately)
        recurrence: Built-in fractal, its name, a FractalId, a
            CustomRecurrence or expression text such as 'z*z+c'
        runtime: Runtime to evaluate expression text with (a fresh one
            is created when omitted)

    Returns:
        Count in [0, max_iterations]; max_iterations means "did not escape"
    """
    if not isinstance(start, Complex):
        start = Complex.from_builtin(start)
    return as_recurrence(recurrence, runtime).iterate(start, max_iterations)
