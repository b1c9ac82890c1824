"""Fibonacci circuit constraints.

Proves knowledge of a table computing fib(N) for a public N, in MAX + 1 rows
whatever N is (0 <= N <= MAX).

Columns:
    n      advice    step counter, N at row 0, decremented to 0
    l, r   advice    the two running Fibonacci values
    n_inv  advice    zero-test inverse of n
    instance         public inputs [N, seed_0, seed_1, fib(N)]

Gate "fib" on body rows 0..MAX-1, with z = is_zero(n), z' = is_zero(n'):

    l' - r                          = 0
    (1 - z)  * (n' - (n - 1))       = 0
    z        * n'                   = 0
    (1 - z') * (r' - (l + r))       = 0
    z'       * (r' - r)             = 0

Once n hits 0 the row repeats unchanged to the bottom of the table, so the
result sits at l[MAX] for every N. The zero-test identity is enabled on every
row (0..MAX) because "fib" reads n_inv at both the current and next row.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from primitives.field import FF
from protocol.columns import Cell, Column, Rotation
from protocol.constraint_system import ConstraintSystem
from protocol.params import CircuitParams
from protocol.selectors import Activation, Selector

from .base import ConstraintContext, ConstraintModule
from .zero_test import ZeroTestGadget


class SeedBinding(Enum):
    """How row 0 is tied to the public inputs."""
    COPY = "copy"              # Copy constraints n[0], l[0], r[0] -> instance
    FIRST_ROW = "first_row"    # "start status" gate on the first row


class InstanceSlot(IntEnum):
    """Row of each public input in the instance column."""
    N = 0
    SEED_0 = 1
    SEED_1 = 2
    OUTPUT = 3


@dataclass(frozen=True)
class FibonacciConfig:
    """Columns and selectors of a configured Fibonacci circuit."""
    n: Column
    l: Column
    r: Column
    n_inv: Column
    instance: Column
    body: Selector
    zero_test: Selector
    first_row: Optional[Selector]
    is_zero: ZeroTestGadget
    seed_binding: SeedBinding

    @classmethod
    def from_system(cls, cs: ConstraintSystem) -> "FibonacciConfig":
        """Recover the config from a built system by column name."""
        n = cs.column("n")
        n_inv = cs.column("n_inv")
        try:
            first_row = cs.selector_by_name("first_row")
        except KeyError:
            first_row = None
        return cls(
            n=n,
            l=cs.column("l"),
            r=cs.column("r"),
            n_inv=n_inv,
            instance=cs.column("instance"),
            body=cs.selector_by_name("body"),
            zero_test=cs.selector_by_name("zero_test"),
            first_row=first_row,
            is_zero=ZeroTestGadget(n, n_inv),
            seed_binding=SeedBinding.FIRST_ROW if first_row is not None else SeedBinding.COPY,
        )


class FibonacciConstraints(ConstraintModule):
    """Constraint definition for the Fibonacci circuit."""

    def __init__(self, seed_binding: SeedBinding = SeedBinding.COPY):
        self.seed_binding = seed_binding
        self.config: Optional[FibonacciConfig] = None

    def configure(self, cs: ConstraintSystem) -> FibonacciConfig:
        n = cs.advice_column("n")
        l = cs.advice_column("l")
        r = cs.advice_column("r")
        n_inv = cs.advice_column("n_inv")
        instance = cs.instance_column("instance")

        body = cs.selector("body", Activation.transition())
        zero_test = cs.selector("zero_test", Activation.every_row())
        first_row = None
        if self.seed_binding == SeedBinding.FIRST_ROW:
            first_row = cs.selector("first_row", Activation.first_row())

        is_zero = ZeroTestGadget.configure(cs, n, n_inv)
        self.config = FibonacciConfig(
            n, l, r, n_inv, instance, body, zero_test, first_row, is_zero, self.seed_binding
        )

        is_zero.enable(cs, zero_test)
        cs.create_gate("fib", body, self.fib_gate)

        if self.seed_binding == SeedBinding.FIRST_ROW:
            cs.create_gate("start status", first_row, self.start_status_gate)
        else:
            cs.constrain_instance(Cell(n, 0), instance, InstanceSlot.N)
            cs.constrain_instance(Cell(l, 0), instance, InstanceSlot.SEED_0)
            cs.constrain_instance(Cell(r, 0), instance, InstanceSlot.SEED_1)
        cs.constrain_instance(Cell(l, cs.max_row), instance, InstanceSlot.OUTPUT)
        return self.config

    def fib_gate(self, ctx: ConstraintContext) -> list:
        cfg = self.config
        one = ctx.const(1)

        n, n_next = ctx.col(cfg.n), ctx.next_col(cfg.n)
        l, l_next = ctx.col(cfg.l), ctx.next_col(cfg.l)
        r, r_next = ctx.col(cfg.r), ctx.next_col(cfg.r)

        z = cfg.is_zero.is_zero(ctx)
        nz = cfg.is_zero.is_nonzero(ctx)
        z_next = cfg.is_zero.is_zero(ctx, Rotation.NEXT)
        nz_next = cfg.is_zero.is_nonzero(ctx, Rotation.NEXT)

        return [
            l_next - r,
            nz * (n_next - (n - one)),
            z * n_next,
            nz_next * (r_next - (l + r)),
            z_next * (r_next - r),
        ]

    def start_status_gate(self, ctx: ConstraintContext) -> list:
        cfg = self.config
        return [
            ctx.col(cfg.n) - ctx.query(cfg.instance, InstanceSlot.N),
            ctx.col(cfg.l) - ctx.query(cfg.instance, InstanceSlot.SEED_0),
            ctx.col(cfg.r) - ctx.query(cfg.instance, InstanceSlot.SEED_1),
        ]


def build_constraint_system(
    max_rows: int,
    seed_binding: SeedBinding = SeedBinding.COPY,
    field=FF,
    self_check: bool = True,
) -> ConstraintSystem:
    """Build and freeze the Fibonacci constraint system for rows [0, max_rows].

    Args:
        max_rows: MAX, the index of the last row
        seed_binding: How row 0 is tied to the public inputs
        field: galois field class
        self_check: Whether assign_witness re-checks its tables

    Raises:
        OutOfRangeRow: If max_rows < 3 (the public inputs need four instance rows)
    """
    cs = ConstraintSystem(CircuitParams(max_rows, field, self_check))
    FibonacciConstraints(seed_binding).configure(cs)
    return cs.freeze()
