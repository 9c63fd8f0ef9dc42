"""
Command line entry point: python -m zenfractal

    python -m zenfractal eval "z*z+c" --z=1,1 --c=0,0
    python -m zenfractal iterate --start=-0.5,0.5 --fractal octopus
    python -m zenfractal iterate --start=0.3,0 --expr "z*z*z+c" -n 256

Complex arguments are written RE,IM. Use the --opt=value form when the
real part is negative.
"""

import argparse
import logging
import sys

from .complex_number import SCALAR_TYPES, Complex
from .errors import BindingOutOfRangeError, ExpressionSyntaxError
from .fractals import iterate, list_fractal_names
from .runtime import Runtime


def parse_complex_arg(text):
    """Parse 'RE,IM' (or just 'RE') into a Python complex."""
    parts = text.split(',')
    try:
        if len(parts) == 1:
            return complex(float(parts[0]), 0.0)
        if len(parts) == 2:
            return complex(float(parts[0]), float(parts[1]))
    except ValueError:
        pass
    raise argparse.ArgumentTypeError(f"expected RE,IM, got {text!r}")


def parse_binding_arg(text):
    """Parse 'x=RE,IM' into ('x', complex)."""
    name, sep, value = text.partition('=')
    if not sep:
        raise argparse.ArgumentTypeError(f"expected NAME=RE,IM, got {text!r}")
    return name.strip(), parse_complex_arg(value)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='zenfractal',
        description="Evaluate recurrence expressions and escape-time counts.")
    parser.add_argument('-v', '--verbose', action='store_true', help="debug logging")
    parser.add_argument('--scalar', choices=sorted(SCALAR_TYPES), default='float64',
                        help="scalar type for expression evaluation")
    commands = parser.add_subparsers(dest='command', required=True)

    eval_cmd = commands.add_parser('eval', help="evaluate an expression once")
    eval_cmd.add_argument('expression')
    eval_cmd.add_argument('-z', '--z', type=parse_complex_arg, help="value bound to z")
    eval_cmd.add_argument('-c', '--c', type=parse_complex_arg, help="value bound to c")
    eval_cmd.add_argument('--var', type=parse_binding_arg, action='append', default=[],
                          metavar='NAME=RE,IM', help="bind any variable a..z")

    iter_cmd = commands.add_parser('iterate', help="escape-time count for one point")
    iter_cmd.add_argument('--start', type=parse_complex_arg, default=0j,
                          help="starting point RE,IM (default 0,0)")
    iter_cmd.add_argument('-n', '--max-iterations', type=int, default=64)
    source = iter_cmd.add_mutually_exclusive_group()
    source.add_argument('--fractal', choices=list_fractal_names(), default='mandelbrot')
    source.add_argument('--expr', help="custom recurrence, e.g. 'z*z+c'")

    return parser


def run_eval(args, runtime):
    if args.z is not None:
        runtime.set_value('z', args.z)
    if args.c is not None:
        runtime.set_value('c', args.c)
    for name, value in args.var:
        runtime.set_value(name, value)
    print(runtime.eval(args.expression))


def run_iterate(args, runtime):
    recurrence = args.expr if args.expr is not None else args.fractal
    start = Complex.from_builtin(args.start, runtime.scalar_type)
    print(iterate(start, args.max_iterations, recurrence, runtime))


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    runtime = Runtime(args.scalar)
    try:
        if args.command == 'eval':
            run_eval(args, runtime)
        else:
            run_iterate(args, runtime)
    except (ExpressionSyntaxError, BindingOutOfRangeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
