"""Composable expressions evaluated against rows.

An expression computes a string from a row. Expressions drive both row
selection (``Table.select``: a row matches unless the result is ``"false"``)
and derived columns (``Table.add_column``).

Expressions are built with the factory functions of this module::

    female = concat(field("name"), const("ette"))
    is_bob = equals(field("name"), const("Bob"))
    either = or_(is_bob, contains(field("id"), const("4")))

Whenever an expression has two operands, the left operand is evaluated
before the right one. This only matters for stateful operators such as
``Counter`` or a ``string_op`` function that keeps its own state.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Callable

from string_tables.row import Row

TRUE_STR = "true"
FALSE_STR = "false"


def to_bool(value: str) -> bool:
    """Interpret an expression result: only ``"false"`` is false."""
    return value != FALSE_STR


def from_bool(value: bool) -> str:
    return TRUE_STR if value else FALSE_STR


class Expression:
    """Base class for expressions: a function from a row to a string."""

    def evaluate(self, row: Row) -> str:
        raise NotImplementedError

    def __call__(self, row: Row) -> str:
        return self.evaluate(row)


@dataclass
class Field(Expression):
    """The value of a field of the row."""

    name: str

    def evaluate(self, row: Row) -> str:
        return row.access(self.name)


@dataclass
class Const(Expression):
    """A constant string, whatever the row."""

    value: str

    def evaluate(self, row: Row) -> str:
        return self.value


@dataclass
class Concat(Expression):
    left: Expression
    right: Expression

    def evaluate(self, row: Row) -> str:
        left = self.left.evaluate(row)
        return left + self.right.evaluate(row)


@dataclass
class Equals(Expression):
    """``"true"`` when both operands produce the same string."""

    left: Expression
    right: Expression

    def evaluate(self, row: Row) -> str:
        left = self.left.evaluate(row)
        return from_bool(left == self.right.evaluate(row))


@dataclass
class Contains(Expression):
    """``"true"`` when the right result occurs as a substring of the left one."""

    haystack: Expression
    needle: Expression

    def evaluate(self, row: Row) -> str:
        haystack = self.haystack.evaluate(row)
        return from_bool(self.needle.evaluate(row) in haystack)


@dataclass
class BoolOp(Expression):
    """Apply a boolean function to both operands read as booleans.

    Both operands are always evaluated, there is no short-circuit.
    """

    op: Callable[[bool, bool], bool]
    left: Expression
    right: Expression

    def evaluate(self, row: Row) -> str:
        left = to_bool(self.left.evaluate(row))
        right = to_bool(self.right.evaluate(row))
        return from_bool(bool(self.op(left, right)))


@dataclass
class StringOp(Expression):
    """Apply an arbitrary string function to both operands."""

    op: Callable[[str, str], str]
    left: Expression
    right: Expression

    def evaluate(self, row: Row) -> str:
        left = self.left.evaluate(row)
        return self.op(left, self.right.evaluate(row))


@dataclass
class Counter(Expression):
    """Yield successive numbers, one per evaluation, ignoring the row.

    ``value`` is the number the next evaluation returns.
    """

    value: int = 1
    step: int = 1

    def evaluate(self, row: Row) -> str:
        current = self.value
        self.value += self.step
        return str(current)


def field(name: str) -> Expression:
    return Field(name)


def const(value: str) -> Expression:
    return Const(value)


def concat(left: Expression, right: Expression) -> Expression:
    return Concat(left, right)


def equals(left: Expression, right: Expression) -> Expression:
    return Equals(left, right)


def contains(haystack: Expression, needle: Expression) -> Expression:
    return Contains(haystack, needle)


def bool_op(op: Callable[[bool, bool], bool], left: Expression, right: Expression) -> Expression:
    return BoolOp(op, left, right)


def string_op(op: Callable[[str, str], str], left: Expression, right: Expression) -> Expression:
    return StringOp(op, left, right)


def counter(start: int = 1, step: int = 1) -> Counter:
    return Counter(start, step)


TRUE = Const(TRUE_STR)
FALSE = Const(FALSE_STR)


def and_(left: Expression, right: Expression) -> Expression:
    return BoolOp(operator.and_, left, right)


def or_(left: Expression, right: Expression) -> Expression:
    return BoolOp(operator.or_, left, right)


def not_(expr: Expression) -> Expression:
    return BoolOp(operator.xor, expr, TRUE)


def not_equals(left: Expression, right: Expression) -> Expression:
    return not_(Equals(left, right))
