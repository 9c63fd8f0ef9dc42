"""
Recursive-descent parser for recurrence expressions.

Grammar, lowest to highest precedence, all left-associative:

    expr    := add_sub
    add_sub := mul ( ('+' | '-') mul )*
    mul     := term ( '*' term )*
    term    := letter | '(' add_sub ')'
    letter  := 'a'..'z'

Tokens are single characters. Spaces, tabs and newlines between them are
ignored. There are no numeric literals, no unary minus and no functions.
"""

from .errors import ExpressionSyntaxError
from .syntax_tree import BinaryOp, BinaryOpType, Constant, Variable


WHITESPACE = frozenset(' \t\n')
LETTERS = frozenset('abcdefghijklmnopqrstuvwxyz')


class Parser:
    """
    Builds a tree from one source string.

    With a `lookup` callable every letter is resolved on the spot and stored
    as a Constant leaf, so the tree carries the values bound at parse time.
    Without one, letters become Variable leaves to be resolved later.
    """

    def __init__(self, source, lookup=None):
        self.source = source
        self.lookup = lookup
        self.pos = 0

    def parse(self):
        """
        Parse the whole source.

        Returns:
            Root node, or None when the source is empty or only whitespace

        Raises:
            ExpressionSyntaxError if the source doesn't match the grammar,
            or nests parentheses deeper than the interpreter's stack allows
        """
        self.pos = 0
        if self.eof():
            return None

        try:
            node = self.add_sub()
        except RecursionError:
            raise ExpressionSyntaxError("expression nested too deeply",
                                        self.source, self.pos) from None

        if not self.eof():
            self.error(f"unexpected {self.peek()!r}")
        return node

    def add_sub(self):
        left = self.mul()

        while not self.eof() and self.peek() in '+-':
            op = BinaryOpType.ADD if self.advance() == '+' else BinaryOpType.SUB
            left = BinaryOp(left, self.mul(), op)

        return left

    def mul(self):
        left = self.term()

        while not self.eof() and self.peek() == '*':
            self.advance()  # *
            left = BinaryOp(left, self.term(), BinaryOpType.MUL)

        return left

    def term(self):
        if self.eof():
            self.error("unexpected end of input, expected a variable or '('")

        token = self.peek()
        if token in LETTERS:
            return self.leaf(self.advance())

        if token == '(':
            self.advance()  # (
            node = self.add_sub()
            if self.eof():
                self.error("unexpected end of input, expected ')'")
            if self.advance() != ')':
                self.pos -= 1
                self.error(f"expected ')', got {self.peek()!r}")
            return node

        self.error(f"unexpected {token!r}, expected a variable or '('")

    def leaf(self, letter):
        if self.lookup is None:
            return Variable(letter)
        return Constant(self.lookup(letter))

    def skip_whitespace(self):
        source = self.source
        while self.pos < len(source) and source[self.pos] in WHITESPACE:
            self.pos += 1

    def peek(self):
        self.skip_whitespace()
        return self.source[self.pos]

    def advance(self):
        self.skip_whitespace()
        token = self.source[self.pos]
        self.pos += 1
        return token

    def eof(self):
        self.skip_whitespace()
        return self.pos >= len(self.source)

    def error(self, message):
        raise ExpressionSyntaxError(message, self.source, self.pos)


def parse(source, lookup=None):
    """Parse `source` into a tree (see Parser)."""
    return Parser(source, lookup).parse()
