"""Error kinds raised while building a constraint system or assigning a witness.

Construction-time errors (OutOfRangeRow, MissingGadgetBinding) abort the
circuit build. AssignmentOverflow is a run-time error, recoverable by
rebuilding with a larger MAX. ConstraintViolation means the assigner produced
a table that does not satisfy the constraint system.
"""


class ArithmetizationError(Exception):
    """Base class for all arithmetization core errors."""


class OutOfRangeRow(ArithmetizationError):
    """A cell reference addresses a row outside [0, MAX]."""

    def __init__(self, column, row: int, max_row: int, rotation: int = 0, gate: str = None):
        self.column = column
        self.row = row
        self.max_row = max_row
        self.rotation = rotation
        self.gate = gate
        where = f" in gate '{gate}'" if gate else ""
        super().__init__(
            f"Row {row} of column {column} (rotation {rotation:+d}){where} "
            f"is outside [0, {max_row}]"
        )


class MissingGadgetBinding(ArithmetizationError):
    """A gate reads a guarded column on rows where its binding identity is not active."""

    def __init__(self, gate: str, column, owner: str, missing_rows):
        self.gate = gate
        self.column = column
        self.owner = owner
        self.missing_rows = list(missing_rows)
        shown = self.missing_rows[:8]
        more = "..." if len(self.missing_rows) > len(shown) else ""
        super().__init__(
            f"Gate '{gate}' reads {column} on rows {shown}{more} "
            f"where the {owner} identity is not enabled"
        )


class AssignmentOverflow(ArithmetizationError):
    """The public input needs more rows than the table has."""

    def __init__(self, required_rows: int, available_rows: int, column=None, row: int = None):
        self.required_rows = required_rows
        self.available_rows = available_rows
        self.column = column
        self.row = row
        at = f" (column {column}, row {row})" if column is not None else ""
        super().__init__(
            f"Assignment needs {required_rows} rows but the table has "
            f"{available_rows}{at}"
        )


class ConstraintViolation(ArithmetizationError):
    """The self-check found gates or copy constraints that do not hold."""

    def __init__(self, failures):
        self.failures = list(failures)
        lines = [str(f) for f in self.failures[:10]]
        if len(self.failures) > 10:
            lines.append(f"... and {len(self.failures) - 10} more")
        super().__init__(
            f"{len(self.failures)} constraint failure(s):\n  " + "\n  ".join(lines)
        )


class UnassignedCell(ArithmetizationError):
    """A required advice or fixed cell was never assigned."""

    def __init__(self, column, row: int):
        self.column = column
        self.row = row
        super().__init__(f"Cell {column}[{row}] is unassigned")


class ConstraintSystemFrozen(ArithmetizationError):
    """The constraint system was modified after freeze()."""


class WitnessTableFrozen(ArithmetizationError):
    """The witness table was modified after freeze()."""
