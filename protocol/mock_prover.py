"""Mock prover: checks a witness table against its constraint system.

No commitments and no transcript. Every gate is evaluated directly on the
table, over all of its active rows at once, and every copy constraint is
compared cell by cell. This is the self-check the witness assigner runs before
handing a table out, and the tool tests use to show that tampered tables and
wrong public inputs are rejected.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from protocol.columns import Cell, Column, ColumnKind
from protocol.errors import ConstraintViolation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifyFailure:
    """One unsatisfied constraint.

    Attributes:
        kind: "gate", "copy" or "unassigned"
        row: Row the failure is reported at
        gate: Gate name (gate failures)
        poly_index: Index of the failing polynomial within the gate
        cells: (cell, value) pairs the failing constraint reads
    """
    kind: str
    row: int
    gate: Optional[str] = None
    poly_index: Optional[int] = None
    cells: Tuple[Tuple[Cell, int], ...] = ()

    def __str__(self) -> str:
        cells = ", ".join(f"{cell!r}={value}" for cell, value in self.cells)
        if self.kind == "gate":
            return f"gate '{self.gate}' poly {self.poly_index} fails at row {self.row} [{cells}]"
        if self.kind == "copy":
            return f"copy constraint fails [{cells}]"
        return f"unassigned cell [{cells}]"


class MockProver:
    """Evaluate every constraint of cs on a witness table.

    Args:
        cs: Frozen constraint system
        table: Witness table for cs
        instance: Optional public inputs, one list per instance column, that
            replace the table's own instance values
    """

    def __init__(self, cs, table, instance: Optional[Sequence[Sequence[int]]] = None):
        self.cs = cs
        self.table = table
        self._instance = {}
        if instance is not None:
            columns = cs.columns_of(ColumnKind.INSTANCE)
            if len(instance) != len(columns):
                raise ValueError(
                    f"Expected {len(columns)} instance column(s), got {len(instance)}"
                )
            for column, values in zip(columns, instance):
                padded = self.field.Zeros(cs.n_rows)
                for slot, value in enumerate(values):
                    padded[slot] = int(value) % self.field.order
                self._instance[column] = padded

    @property
    def field(self):
        return self.cs.field

    @property
    def max_row(self) -> int:
        return self.cs.max_row

    def column_values(self, column: Column):
        if column in self._instance:
            return self._instance[column]
        return self.table.column_values(column)

    def _cell(self, column: Column, row: int) -> Tuple[Cell, int]:
        return Cell(column, row), int(self.column_values(column)[row])

    def verify(self, rows: Optional[range] = None) -> List[VerifyFailure]:
        """Check all constraints, optionally only on a range of rows.

        Restricting to a row range checks the gates whose active row falls in
        it and the copy constraints touching it, so disjoint ranges can be
        checked independently.
        """
        if rows is None:
            rows = range(self.cs.n_rows)
        row_filter = np.asarray(list(rows), dtype=np.int64)

        failures = []
        failures.extend(self._verify_assigned(row_filter))
        for gate in self.cs.gates:
            failures.extend(self._verify_gate(gate, row_filter))
        failures.extend(self._verify_copies(row_filter))
        return failures

    def _verify_assigned(self, row_filter: np.ndarray) -> List[VerifyFailure]:
        failures = []
        for kind in (ColumnKind.ADVICE, ColumnKind.FIXED):
            for column in self.cs.columns_of(kind):
                for row in row_filter:
                    if not self.table.is_assigned(column, int(row)):
                        failures.append(
                            VerifyFailure("unassigned", int(row), cells=(self._cell(column, int(row)),))
                        )
        return failures

    def _verify_gate(self, gate, row_filter: np.ndarray) -> List[VerifyFailure]:
        from constraints.base import TraceConstraintContext

        rows = np.intersect1d(self.cs.active_rows(gate.selector), row_filter)
        if len(rows) == 0:
            return []
        results = gate.evaluate(TraceConstraintContext(self, rows))
        queries = sorted(gate.queries, key=lambda q: (q[0].kind.value, q[0].index, q[1]))

        failures = []
        for poly_index, values in enumerate(results):
            nonzero = np.broadcast_to(np.asarray(values) != 0, rows.shape)
            for row in rows[nonzero]:
                row = int(row)
                cells = tuple(self._cell(column, row + rotation) for column, rotation in queries)
                failures.append(VerifyFailure("gate", row, gate.name, poly_index, cells))
        return failures

    def _verify_copies(self, row_filter: np.ndarray) -> List[VerifyFailure]:
        selected = set(int(r) for r in row_filter)
        failures = []
        for constraint in self.cs.copy_constraints:
            a, b = constraint.a, constraint.b
            if a.row not in selected and b.row not in selected:
                continue
            cell_a = self._cell(a.column, a.row)
            cell_b = self._cell(b.column, b.row)
            if cell_a[1] != cell_b[1]:
                row = a.row if a.column.kind != ColumnKind.INSTANCE else b.row
                failures.append(VerifyFailure("copy", row, cells=(cell_a, cell_b)))
        return failures

    def assert_satisfied(self, rows: Optional[range] = None) -> None:
        """Raise ConstraintViolation if any constraint fails."""
        failures = self.verify(rows)
        if failures:
            logger.warning("Self-check found %d failure(s); first: %s", len(failures), failures[0])
            raise ConstraintViolation(failures)
