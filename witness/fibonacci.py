"""Fibonacci witness assignment.

Fills the n, l, r and n_inv columns of a Fibonacci constraint system for one
public N. Every step is computed with the same zero-test predicate the gates
use, so no branch on the counter is needed:

    n' = z * n + (1 - z) * (n - 1)
    l' = r
    r' = z' * r + (1 - z') * (l + r)

where z = is_zero(n) and z' = is_zero(n').
"""

import logging
from typing import Tuple

from constraints.fibonacci import FibonacciConfig, InstanceSlot
from primitives.field import to_field
from protocol.constraint_system import ConstraintSystem
from protocol.errors import AssignmentOverflow
from protocol.mock_prover import MockProver
from protocol.witness_table import WitnessTable

from .base import WitnessModule

logger = logging.getLogger(__name__)

DEFAULT_SEEDS = (0, 1)


def fibonacci(n: int, seeds: Tuple[int, int] = DEFAULT_SEEDS) -> int:
    """Value the circuit exposes as its output for counter n.

    With F(0) = seeds[0] and F(1) = seeds[1], this is F(n) for n >= 1. For
    n = 0 the counter is already zero on the first row, nothing is stepped,
    and the output is F(1).
    """
    a, b = seeds
    for _ in range(max(n, 1) - 1):
        a, b = b, a + b
    return b


class FibonacciWitness(WitnessModule):
    """Witness assignment for the Fibonacci circuit."""

    def __init__(self, seeds: Tuple[int, int] = DEFAULT_SEEDS):
        self.seeds = seeds

    def _is_zero(self, cfg: FibonacciConfig, x):
        """1 - x * x^-1 (with 0^-1 taken as 0), on a one-element slice."""
        return type(x)(1) - x[0] * cfg.is_zero.assign_inverse(x)[0]

    def assign(self, cs: ConstraintSystem, public_n: int) -> WitnessTable:
        """Fill, freeze and (optionally) self-check a table for public_n.

        Raises:
            ValueError: If public_n is negative
            AssignmentOverflow: If public_n steps do not fit in rows [0, MAX]
            ConstraintViolation: If the self-check finds a failing constraint
        """
        cfg = FibonacciConfig.from_system(cs)
        if public_n < 0:
            raise ValueError(f"public_n must be >= 0, got {public_n}")
        if public_n > cs.max_row:
            raise AssignmentOverflow(public_n + 1, cs.n_rows, cfg.n, cs.max_row)

        F = cs.field
        one = F(1)
        n = F.Zeros(cs.n_rows)
        l = F.Zeros(cs.n_rows)
        r = F.Zeros(cs.n_rows)

        n[0] = to_field(F, public_n)
        l[0] = to_field(F, self.seeds[0])
        r[0] = to_field(F, self.seeds[1])

        for row in range(1, cs.n_rows):
            z = self._is_zero(cfg, n[row - 1:row])
            n[row] = z * n[row - 1] + (one - z) * (n[row - 1] - one)
            l[row] = r[row - 1]
            z_next = self._is_zero(cfg, n[row:row + 1])
            r[row] = z_next * r[row - 1] + (one - z_next) * (l[row - 1] + r[row - 1])

        table = WitnessTable(cs)
        table.assign_column(cfg.n, n)
        table.assign_column(cfg.l, l)
        table.assign_column(cfg.r, r)
        table.assign_column(cfg.n_inv, cfg.is_zero.assign_inverse(n))

        public = [0] * len(InstanceSlot)
        public[InstanceSlot.N] = public_n
        public[InstanceSlot.SEED_0] = self.seeds[0]
        public[InstanceSlot.SEED_1] = self.seeds[1]
        public[InstanceSlot.OUTPUT] = int(l[cs.max_row])
        table.set_instance(cfg.instance, public)
        table.freeze()

        logger.debug(
            "Assigned Fibonacci witness: N=%d, MAX=%d, output=%d",
            public_n, cs.max_row, public[InstanceSlot.OUTPUT],
        )

        if cs.params.self_check:
            MockProver(cs, table).assert_satisfied()
        return table


def assign_witness(
    constraint_system: ConstraintSystem,
    public_n: int,
    seeds: Tuple[int, int] = DEFAULT_SEEDS,
) -> WitnessTable:
    """Assign a frozen witness table computing fib(public_n)."""
    return FibonacciWitness(seeds).assign(constraint_system, public_n)
