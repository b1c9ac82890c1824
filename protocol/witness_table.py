"""Witness table: concrete field values for every cell of one run.

A table belongs to exactly one constraint system and one public input. Advice
and fixed cells are written by the assigner, instance cells carry the public
inputs, and selector cells are derived from the system and never written.
"""

from typing import Dict, Sequence

import numpy as np

from primitives.field import to_field
from protocol.columns import Column, ColumnKind, RotationLike, resolve
from protocol.errors import UnassignedCell, WitnessTableFrozen


class WitnessTable:
    """Values of every cell, indexed by column and row."""

    def __init__(self, cs):
        self.cs = cs
        self._values: Dict[Column, np.ndarray] = {}
        self._assigned: Dict[Column, np.ndarray] = {}
        for column in cs.columns_of(ColumnKind.ADVICE) + cs.columns_of(ColumnKind.FIXED):
            self._values[column] = self.field.Zeros(self.n_rows)
            self._assigned[column] = np.zeros(self.n_rows, dtype=bool)
        for column in cs.columns_of(ColumnKind.INSTANCE):
            self._values[column] = self.field.Zeros(self.n_rows)
        self._frozen = False

    @property
    def field(self):
        return self.cs.field

    @property
    def max_row(self) -> int:
        return self.cs.max_row

    @property
    def n_rows(self) -> int:
        return self.cs.n_rows

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise WitnessTableFrozen("Witness table is frozen")

    def assign(self, column: Column, row: int, value) -> None:
        """Write one advice or fixed cell.

        Raises:
            OutOfRangeRow: If row is outside [0, MAX]
            WitnessTableFrozen: After freeze()
        """
        self._check_mutable()
        if column not in self._assigned:
            raise ValueError(f"Cannot assign {column}: only advice and fixed cells are assigned")
        cell = resolve(column, row, 0, self.max_row)
        self._values[column][cell.row] = to_field(self.field, value)
        self._assigned[column][cell.row] = True

    def assign_column(self, column: Column, values) -> None:
        """Write a whole advice or fixed column at once; ints of any sign are reduced into the field."""
        self._check_mutable()
        if column not in self._assigned:
            raise ValueError(f"Cannot assign {column}: only advice and fixed cells are assigned")
        if len(values) != self.n_rows:
            raise ValueError(f"Expected {self.n_rows} values for {column}, got {len(values)}")
        self._values[column][:] = self.field([int(v) % self.field.order for v in values])
        self._assigned[column][:] = True

    def set_instance(self, column: Column, values: Sequence[int]) -> None:
        """Set the public inputs of an instance column; unused slots stay zero."""
        self._check_mutable()
        if column.kind != ColumnKind.INSTANCE:
            raise ValueError(f"{column} is not an instance column")
        if len(values) > self.n_rows:
            raise ValueError(
                f"{len(values)} public inputs do not fit in {self.n_rows} instance rows"
            )
        column_values = self.field.Zeros(self.n_rows)
        for slot, value in enumerate(values):
            column_values[slot] = to_field(self.field, value)
        self._values[column] = column_values

    def instance_values(self, column: Column) -> list:
        return [int(v) for v in self._values[column]]

    def column_values(self, column: Column):
        """Field array of length MAX + 1 for any column kind."""
        if column.kind == ColumnKind.SELECTOR:
            return self.cs.selector_values(self.cs.selector_by_name(column.name))
        return self._values[column]

    def value(self, column: Column, row: int):
        cell = resolve(column, row, 0, self.max_row)
        return self.column_values(column)[cell.row]

    def query(self, column: Column, row: int, rotation: RotationLike = 0):
        """Value of (column, row + rotation)."""
        cell = resolve(column, row, rotation, self.max_row)
        return self.column_values(column)[cell.row]

    def is_assigned(self, column: Column, row: int) -> bool:
        if column.kind in (ColumnKind.SELECTOR, ColumnKind.INSTANCE):
            return True
        return bool(self._assigned[column][row])

    def freeze(self) -> "WitnessTable":
        """Check completeness and make the table read-only.

        Raises:
            UnassignedCell: First advice or fixed cell that was never written
        """
        if self._frozen:
            return self
        for column, assigned in self._assigned.items():
            missing = np.flatnonzero(~assigned)
            if len(missing) > 0:
                raise UnassignedCell(column, int(missing[0]))
        for values in self._values.values():
            values.flags.writeable = False
        self._frozen = True
        return self

    def as_dict(self) -> Dict[str, list]:
        """Column name -> list of ints, for advice, fixed and instance columns."""
        return {c.name: [int(v) for v in values] for c, values in self._values.items()}
