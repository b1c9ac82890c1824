"""Column model: typed columns, cells and row rotations.

Every column shares the row extent [0, MAX]. A cell is addressed by
(column, row); a gate evaluated "at row r" reads (column, r + rotation).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from protocol.errors import OutOfRangeRow


class ColumnKind(Enum):
    """Column kind, fixed at declaration."""
    ADVICE = "advice"        # Private witness, prover-supplied
    FIXED = "fixed"          # Circuit constant
    INSTANCE = "instance"    # Public input
    SELECTOR = "selector"    # Boolean gate activation


@dataclass(frozen=True)
class Column:
    """A vertical storage lane.

    Attributes:
        index: Declaration order among columns of the same kind
        kind: Column kind
        name: Unique name within the constraint system
    """
    index: int
    kind: ColumnKind
    name: str

    def __repr__(self) -> str:
        return f"{self.kind.value}[{self.index}]({self.name})"


@dataclass(frozen=True)
class Cell:
    """A (column, absolute row) pair."""
    column: Column
    row: int

    def __repr__(self) -> str:
        return f"{self.column!r}@{self.row}"


@dataclass(frozen=True)
class Rotation:
    """Signed row offset relative to the row a gate is evaluated at."""
    offset: int

    def __int__(self) -> int:
        return self.offset

    def __index__(self) -> int:
        return self.offset

    def __repr__(self) -> str:
        return f"Rotation({self.offset:+d})"


Rotation.CUR = Rotation(0)
Rotation.NEXT = Rotation(1)
Rotation.PREV = Rotation(-1)

RotationLike = Union[Rotation, int]


def resolve(column: Column, base_row: int, rotation: RotationLike, max_row: int) -> Cell:
    """Resolve (column, base_row + rotation) to a cell, checking bounds.

    Raises:
        OutOfRangeRow: If base_row + rotation is outside [0, max_row]
    """
    offset = int(rotation)
    row = base_row + offset
    if row < 0 or row > max_row:
        raise OutOfRangeRow(column, row, max_row, rotation=offset)
    return Cell(column, row)
