"""Protocol - Column model, constraint system, witness table and self-check."""

from protocol.columns import Cell, Column, ColumnKind, Rotation, resolve
from protocol.errors import (
    ArithmetizationError,
    AssignmentOverflow,
    ConstraintSystemFrozen,
    ConstraintViolation,
    MissingGadgetBinding,
    OutOfRangeRow,
    UnassignedCell,
    WitnessTableFrozen,
)
from protocol.expressions import Constant, Expression, Query
from protocol.selectors import Activation, Selector, activation_mask
from protocol.copy_constraints import CopyConstraint, CopyConstraintSet
from protocol.params import CircuitParams

from protocol.constraint_system import ConstraintSystem, Gate
from protocol.witness_table import WitnessTable
from protocol.mock_prover import MockProver, VerifyFailure

__all__ = [
    # Column model
    "Cell",
    "Column",
    "ColumnKind",
    "Rotation",
    "resolve",
    # Errors
    "ArithmetizationError",
    "AssignmentOverflow",
    "ConstraintSystemFrozen",
    "ConstraintViolation",
    "MissingGadgetBinding",
    "OutOfRangeRow",
    "UnassignedCell",
    "WitnessTableFrozen",
    # Expressions and selectors
    "Constant",
    "Expression",
    "Query",
    "Activation",
    "Selector",
    "activation_mask",
    # Copy constraints
    "CopyConstraint",
    "CopyConstraintSet",
    # Constraint system and tables
    "CircuitParams",
    "ConstraintSystem",
    "Gate",
    "WitnessTable",
    "MockProver",
    "VerifyFailure",
]
