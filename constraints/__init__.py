"""Constraint modules.

Gates are written once against a ConstraintContext and evaluated symbolically
(build-time analysis), over a whole table (self-check) or at a single row.
"""

from .base import (
    ConstraintContext,
    ConstraintModule,
    RowConstraintContext,
    SymbolicConstraintContext,
    TraceConstraintContext,
)
from .zero_test import ZeroTestGadget
from .fibonacci import (
    FibonacciConfig,
    FibonacciConstraints,
    InstanceSlot,
    SeedBinding,
    build_constraint_system,
)

__all__ = [
    "ConstraintContext",
    "ConstraintModule",
    "SymbolicConstraintContext",
    "TraceConstraintContext",
    "RowConstraintContext",
    "ZeroTestGadget",
    "FibonacciConfig",
    "FibonacciConstraints",
    "InstanceSlot",
    "SeedBinding",
    "build_constraint_system",
]
