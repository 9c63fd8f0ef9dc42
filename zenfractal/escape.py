"""
Escape-time iteration.

Starting from z0 = c = start, the recurrence is applied until the squared
magnitude of the iterate exceeds 4 (escape radius 2) or the iteration cap is
reached. The returned count is the step index at which the escape happened,
or max_iterations when the point never escaped.
"""

import operator

from .complex_number import abs_sq
from .runtime import Runtime


ESCAPE_RADIUS_SQ = 4.0


def check_max_iterations(max_iterations):
    """
    Validate an iteration cap and return it as an int.

    Raises:
        ValueError if negative, TypeError if not an integer
    """
    max_iterations = operator.index(max_iterations)
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be >= 0, got {max_iterations}")
    return max_iterations


def escape_time(step, start, max_iterations):
    """
    Run the escape-time loop with a Python step function.

    Args:
        step: Callable (z, c) -> next z, working on Complex values
        start: Starting point, used for both z0 and c
        max_iterations: Iteration cap (0 returns 0 without calling step)

    Returns:
        Iteration count in [0, max_iterations]
    """
    max_iterations = check_max_iterations(max_iterations)
    c = z = start
    for i in range(max_iterations):
        z = step(z, c)
        if abs_sq(z) > ESCAPE_RADIUS_SQ:
            return i
    return max_iterations


class CustomRecurrence:
    """
    Recurrence given as expression text, evaluated through a Runtime.

    `c` is bound once per starting point and `z` is rebound on every step.
    By default the expression is compiled once and re-evaluated against the
    updated bindings; with reparse=True the text is parsed again on every
    step instead. Both give the same counts.

    The runtime is owned by this object. Use one CustomRecurrence per
    worker thread.

    Raises:
        ExpressionSyntaxError from the constructor if the text is malformed
    """

    def __init__(self, source, runtime=None, reparse=False):
        self.source = source
        self.runtime = runtime if runtime is not None else Runtime()
        self.reparse = reparse
        self.expression = self.runtime.compile(source)

    @property
    def name(self):
        return self.source

    def with_runtime(self, runtime):
        """Same expression bound to another runtime (e.g. for another thread)."""
        return CustomRecurrence(self.source, runtime, self.reparse)

    def iterate(self, start, max_iterations):
        max_iterations = check_max_iterations(max_iterations)
        if max_iterations == 0:
            return 0

        runtime = self.runtime
        bindings = runtime.bindings
        expression = self.expression
        source = self.source
        reparse = self.reparse

        z = runtime.coerce(start)
        runtime.set_value('c', z)

        for i in range(max_iterations):
            bindings.set('z', z)
            z = runtime.eval(source) if reparse else expression.evaluate()
            if abs_sq(z) > ESCAPE_RADIUS_SQ:
                return i
        return max_iterations

    def __repr__(self):
        return f"CustomRecurrence({self.source!r})"
