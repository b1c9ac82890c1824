"""Selector activation.

A selector is a boolean column whose value per row is a pure function of the
row index, fixed once MAX is known. Activations follow the constraint boundary
names used by STARK configs: firstRow, lastRow, everyRow and everyFrame (rows
[offsetMin, MAX - offsetMax]).
"""

from dataclasses import dataclass

import numpy as np

from protocol.columns import Column


@dataclass(frozen=True)
class Activation:
    """Rows on which a selector is on.

    Attributes:
        name: Boundary name ("firstRow", "lastRow", "everyRow", "everyFrame")
        offset_min: Rows skipped at the top (only for "everyFrame")
        offset_max: Rows skipped at the bottom (only for "everyFrame")
    """
    name: str
    offset_min: int = 0
    offset_max: int = 0

    @classmethod
    def first_row(cls) -> "Activation":
        return cls("firstRow")

    @classmethod
    def last_row(cls) -> "Activation":
        return cls("lastRow")

    @classmethod
    def every_row(cls) -> "Activation":
        return cls("everyRow")

    @classmethod
    def every_frame(cls, offset_min: int, offset_max: int) -> "Activation":
        if offset_min < 0 or offset_max < 0:
            raise ValueError(
                f"everyFrame offsets must be non-negative, got ({offset_min}, {offset_max})"
            )
        return cls("everyFrame", offset_min, offset_max)

    @classmethod
    def transition(cls) -> "Activation":
        """Every row that has a next row: [0, MAX - 1]."""
        return cls.every_frame(0, 1)

    def rows(self, max_row: int) -> np.ndarray:
        """Active row indices for a table with rows [0, max_row]."""
        return np.flatnonzero(activation_mask(self, max_row))


def activation_mask(activation: Activation, max_row: int) -> np.ndarray:
    """Boolean mask of length max_row + 1, True where the selector is on."""
    mask = np.zeros(max_row + 1, dtype=bool)
    if activation.name == "firstRow":
        mask[0] = True
    elif activation.name == "lastRow":
        mask[max_row] = True
    elif activation.name == "everyRow":
        mask[:] = True
    elif activation.name == "everyFrame":
        start = activation.offset_min
        stop = max_row + 1 - activation.offset_max
        if stop > start:
            mask[start:stop] = True
    else:
        raise ValueError(f"Unknown activation: {activation.name}")
    return mask


@dataclass(frozen=True)
class Selector:
    """A named selector column and its activation."""
    column: Column
    activation: Activation

    @property
    def name(self) -> str:
        return self.column.name

    def __repr__(self) -> str:
        return f"Selector({self.name}, {self.activation.name})"
