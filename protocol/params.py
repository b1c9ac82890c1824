"""Circuit shape parameters."""

from dataclasses import dataclass

from primitives.field import FF


@dataclass(frozen=True)
class CircuitParams:
    """Immutable configuration of one circuit shape.

    Passed explicitly to the constraint system builder and, through the built
    system, to the witness assigner.

    Attributes:
        max_row: Index of the last table row (MAX); the table has MAX + 1 rows
        field: galois field class the table is defined over
        self_check: Re-check every constraint after witness assignment
    """
    max_row: int
    field: type = FF
    self_check: bool = True

    def __post_init__(self) -> None:
        if self.max_row < 0:
            raise ValueError(f"max_row must be >= 0, got {self.max_row}")

    @property
    def n_rows(self) -> int:
        return self.max_row + 1
