"""
Abstract syntax tree for recurrence expressions.

The node set is closed: Constant and Variable leaves plus BinaryOp for
+, - and *. Nodes are frozen dataclasses, so a tree never changes after
the parser builds it. A tree belongs to whoever parsed it and is simply
dropped when it goes out of scope.
"""

from dataclasses import dataclass
from enum import Enum

from .complex_number import Complex, add, sub, mul
from .errors import EvaluationError


class BinaryOpType(Enum):
    ADD = '+'
    SUB = '-'
    MUL = '*'


@dataclass(frozen=True)
class Constant:
    """Leaf holding a value copied from the binding table at parse time."""
    value: Complex


@dataclass(frozen=True)
class Variable:
    """Leaf naming a binding table slot, looked up at evaluation time."""
    name: str


@dataclass(frozen=True)
class BinaryOp:
    left: object
    right: object
    op: BinaryOpType


def _leaf_value(node, bindings):
    if isinstance(node, Constant):
        return node.value
    elif isinstance(node, Variable):
        if bindings is None:
            raise EvaluationError(f"variable {node.name!r} evaluated without a binding table")
        return bindings.get(node.name)
    raise EvaluationError(f"unknown node kind {type(node).__name__}")


def _apply(op, left, right):
    if op is BinaryOpType.ADD:
        return add(left, right)
    elif op is BinaryOpType.SUB:
        return sub(left, right)
    elif op is BinaryOpType.MUL:
        return mul(left, right)
    raise EvaluationError(f"unknown binary operator {op!r}")


def evaluate(node, bindings=None):
    """
    Evaluate a tree to a Complex value.

    Walks the tree with an explicit stack, so long operator chains don't
    run into the interpreter's recursion limit.

    Args:
        node: Root of the tree
        bindings: Object with a get(letter) method, needed only when the
            tree contains Variable leaves

    Returns:
        The resulting Complex value

    Raises:
        EvaluationError for node kinds or operators outside the closed set
    """
    if not isinstance(node, BinaryOp):
        return _leaf_value(node, bindings)

    values = []
    stack = [(node, False)]
    while stack:
        node, children_done = stack.pop()
        if not isinstance(node, BinaryOp):
            values.append(_leaf_value(node, bindings))
        elif children_done:
            right = values.pop()
            left = values.pop()
            values.append(_apply(node.op, left, right))
        else:
            # Left before right
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
    return values[0]


def dump(node):
    """Fully parenthesised text form of a tree, for logs and debugging."""
    parts = []
    stack = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Constant):
            parts.append(str(item.value))
        elif isinstance(item, Variable):
            parts.append(item.name)
        elif isinstance(item, BinaryOp):
            stack.extend((')', item.right, f" {item.op.value} ", item.left, '('))
        else:
            raise EvaluationError(f"unknown node kind {type(item).__name__}")
    return ''.join(parts)


def node_count(node):
    """Number of nodes in a tree."""
    count = 0
    stack = [node]
    while stack:
        node = stack.pop()
        count += 1
        if isinstance(node, BinaryOp):
            stack.append(node.left)
            stack.append(node.right)
    return count
