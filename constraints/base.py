"""Base classes for gate evaluation.

ConstraintContext provides a uniform interface for gate evaluation that works
symbolically (returns expression nodes), over a whole table (returns field
arrays) and at a single row (returns scalars). The same gate code is used in
all three contexts thanks to operator overloading and galois broadcasting.

Example:
    def gate(ctx: ConstraintContext):
        a = ctx.col(col_a)
        b = ctx.next_col(col_a)
        return [b - a * a]

    # Build time: which cells does the gate read, and at what degree?
    polys = gate(SymbolicConstraintContext())

    # Self-check: all active rows at once
    values = gate(TraceConstraintContext(table, rows))

    # Diagnosis: one row
    values = gate(RowConstraintContext(table, row))
"""

from abc import ABC, abstractmethod

import numpy as np

from primitives.field import to_field
from protocol.columns import Column, Rotation, RotationLike, resolve
from protocol.expressions import Constant, Query


class ConstraintContext(ABC):
    """Uniform interface for gate evaluation."""

    @abstractmethod
    def query(self, column: Column, rotation: RotationLike = Rotation.CUR):
        """Get column at current row + rotation.

        Returns:
            Symbolic: Query node
            Trace: array of values, one per active row
            Row: scalar value
        """
        pass

    @abstractmethod
    def const(self, value: int):
        """Get a constant in the representation of this context."""
        pass

    def note_gadget(self, value: Column, inverse: Column, owner: str) -> None:
        """Record that a gadget predicate over (value, inverse) is being read."""
        pass

    def col(self, column: Column):
        """Get column at current row."""
        return self.query(column, Rotation.CUR)

    def next_col(self, column: Column):
        """Get column at next row (offset +1)."""
        return self.query(column, Rotation.NEXT)

    def prev_col(self, column: Column):
        """Get column at previous row (offset -1)."""
        return self.query(column, Rotation.PREV)


class SymbolicConstraintContext(ConstraintContext):
    """Build-time implementation - returns expression nodes.

    Also collects the gadget predicates a gate reads, so the constraint system
    can check each one is backed by its binding identity.
    """

    def __init__(self):
        self.gadget_uses = []

    def note_gadget(self, value: Column, inverse: Column, owner: str) -> None:
        self.gadget_uses.append((value, inverse, owner))

    def query(self, column: Column, rotation: RotationLike = Rotation.CUR) -> Query:
        return Query(column, int(rotation))

    def const(self, value: int) -> Constant:
        return Constant(value)


class TraceConstraintContext(ConstraintContext):
    """Table implementation - returns arrays over a set of rows.

    Rotations are resolved by index arithmetic on the row array. The
    constraint system validates at build time that no active row plus a
    queried rotation leaves [0, MAX].
    """

    def __init__(self, table, rows: np.ndarray):
        self._table = table
        self._rows = np.asarray(rows, dtype=np.int64)

    def query(self, column: Column, rotation: RotationLike = Rotation.CUR):
        values = self._table.column_values(column)
        return values[self._rows + int(rotation)]

    def const(self, value: int):
        return to_field(self._table.field, value)


class RowConstraintContext(ConstraintContext):
    """Single-row implementation - returns scalars.

    Resolves every query through resolve(), so a rotation leaving the table
    raises OutOfRangeRow.
    """

    def __init__(self, table, row: int):
        self._table = table
        self._row = row

    def query(self, column: Column, rotation: RotationLike = Rotation.CUR):
        cell = resolve(column, self._row, rotation, self._table.max_row)
        return self._table.column_values(column)[cell.row]

    def const(self, value: int):
        return to_field(self._table.field, value)


class ConstraintModule(ABC):
    """Per-circuit constraint definition.

    A module declares its columns, selectors, gates and copy constraints on a
    fresh constraint system. Gate functions take a ConstraintContext, so the
    same code is used for build-time analysis and for checking a table.
    """

    @abstractmethod
    def configure(self, cs):
        """Declare everything the circuit needs on cs.

        Returns:
            A config object holding the declared columns and selectors
        """
        pass
