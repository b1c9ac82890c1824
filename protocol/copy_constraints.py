"""Copy constraints: forced equality between pairs of cells.

Public instance values enter the private advice table only through these
bindings, so the gate set never duplicates them. Every cell that takes part in
an equality carries a proving cost; circuits keep that set small.

The equalities are encoded the way a PLONK permutation argument encodes wiring:
each equality-enabled column contributes n_rows positions (position =
column_slot * n_rows + row), and cells forced equal form one cycle of the
permutation sigma.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from protocol.columns import Cell, Column, resolve


@dataclass(frozen=True, eq=False)
class CopyConstraint:
    """Unordered pair of cells asserted equal."""
    a: Cell
    b: Cell

    def _key(self) -> frozenset:
        return frozenset((self.a, self.b))

    def __eq__(self, other) -> bool:
        if not isinstance(other, CopyConstraint):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"{self.a!r} == {self.b!r}"


class CopyConstraintSet:
    """Registered equalities of one constraint system."""

    def __init__(self, max_row: int):
        self.max_row = max_row
        self._constraints: List[CopyConstraint] = []
        self._seen = set()
        self._equality_columns: List[Column] = []

    def enable_equality(self, column: Column) -> None:
        """Allow cells of this column to take part in copy constraints."""
        if column not in self._equality_columns:
            self._equality_columns.append(column)

    def equate(self, cell_a: Cell, cell_b: Cell) -> CopyConstraint:
        """Register cell_a == cell_b.

        Raises:
            OutOfRangeRow: If either cell is outside [0, MAX]
        """
        for cell in (cell_a, cell_b):
            resolve(cell.column, cell.row, 0, self.max_row)
            self.enable_equality(cell.column)
        constraint = CopyConstraint(cell_a, cell_b)
        if constraint not in self._seen:
            self._seen.add(constraint)
            self._constraints.append(constraint)
        return constraint

    def __iter__(self):
        return iter(self._constraints)

    def __len__(self) -> int:
        return len(self._constraints)

    @property
    def equality_columns(self) -> List[Column]:
        return list(self._equality_columns)

    @property
    def equality_cells(self) -> List[Cell]:
        """Distinct cells that take part in at least one copy constraint."""
        cells = []
        for constraint in self._constraints:
            for cell in (constraint.a, constraint.b):
                if cell not in cells:
                    cells.append(cell)
        return cells

    def equivalence_classes(self) -> List[List[Cell]]:
        """Group cells connected by any chain of copy constraints."""
        parent: Dict[Cell, Cell] = {}

        def find(cell: Cell) -> Cell:
            parent.setdefault(cell, cell)
            while parent[cell] != cell:
                parent[cell] = parent[parent[cell]]
                cell = parent[cell]
            return cell

        for constraint in self._constraints:
            root_a, root_b = find(constraint.a), find(constraint.b)
            if root_a != root_b:
                parent[root_b] = root_a

        classes: Dict[Cell, List[Cell]] = {}
        for cell in self.equality_cells:
            classes.setdefault(find(cell), []).append(cell)
        return [sorted(members, key=self._position) for members in classes.values()]

    def _position(self, cell: Cell) -> int:
        slot = self._equality_columns.index(cell.column)
        return slot * (self.max_row + 1) + cell.row

    def permutation(self) -> Tuple[List[Column], List[int]]:
        """Permutation sigma over all positions of the equality columns.

        Cells in the same equivalence class form one cycle, in position order;
        every other position is a fixed point.

        Returns:
            (equality columns in slot order, sigma as a list of positions)
        """
        n_rows = self.max_row + 1
        sigma = list(range(len(self._equality_columns) * n_rows))
        for members in self.equivalence_classes():
            positions = [self._position(cell) for cell in members]
            for i, pos in enumerate(positions):
                sigma[pos] = positions[(i + 1) % len(positions)]
        return self.equality_columns, sigma
