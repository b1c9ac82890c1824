"""Symbolic polynomial expressions over column queries.

Gates are written once as functions of a constraint context. Evaluated against
the symbolic context they produce these nodes, which is how the constraint
system learns, at build time, which (column, rotation) pairs a gate reads and
what its degree is.
"""

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from protocol.columns import Column

QueryKey = Tuple[Column, int]


class Expression:
    """Base node. Supports +, -, * with other expressions and ints."""

    def degree(self) -> int:
        raise NotImplementedError

    def queries(self) -> FrozenSet[QueryKey]:
        raise NotImplementedError

    def __add__(self, other):
        return Sum(self, _lift(other))

    def __radd__(self, other):
        return Sum(_lift(other), self)

    def __sub__(self, other):
        return Sum(self, Negated(_lift(other)))

    def __rsub__(self, other):
        return Sum(_lift(other), Negated(self))

    def __mul__(self, other):
        return Product(self, _lift(other))

    def __rmul__(self, other):
        return Product(_lift(other), self)

    def __neg__(self):
        return Negated(self)


def _lift(value) -> Expression:
    if isinstance(value, Expression):
        return value
    if isinstance(value, int):
        return Constant(value)
    raise TypeError(f"Cannot use {type(value).__name__} in an expression")


@dataclass(frozen=True, eq=False)
class Constant(Expression):
    value: int

    def degree(self) -> int:
        return 0

    def queries(self) -> FrozenSet[QueryKey]:
        return frozenset()

    def __repr__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, eq=False)
class Query(Expression):
    column: Column
    rotation: int

    def degree(self) -> int:
        return 1

    def queries(self) -> FrozenSet[QueryKey]:
        return frozenset({(self.column, self.rotation)})

    def __repr__(self) -> str:
        if self.rotation == 0:
            return self.column.name
        if self.rotation == 1:
            return f"{self.column.name}'"
        return f"{self.column.name}[{self.rotation:+d}]"


@dataclass(frozen=True, eq=False)
class Sum(Expression):
    left: Expression
    right: Expression

    def degree(self) -> int:
        return max(self.left.degree(), self.right.degree())

    def queries(self) -> FrozenSet[QueryKey]:
        return self.left.queries() | self.right.queries()

    def __repr__(self) -> str:
        if isinstance(self.right, Negated):
            return f"({self.left!r} - {self.right.inner!r})"
        return f"({self.left!r} + {self.right!r})"


@dataclass(frozen=True, eq=False)
class Product(Expression):
    left: Expression
    right: Expression

    def degree(self) -> int:
        return self.left.degree() + self.right.degree()

    def queries(self) -> FrozenSet[QueryKey]:
        return self.left.queries() | self.right.queries()

    def __repr__(self) -> str:
        return f"{self.left!r} * {self.right!r}"


@dataclass(frozen=True, eq=False)
class Negated(Expression):
    inner: Expression

    def degree(self) -> int:
        return self.inner.degree()

    def queries(self) -> FrozenSet[QueryKey]:
        return self.inner.queries()

    def __repr__(self) -> str:
        return f"-{self.inner!r}"
