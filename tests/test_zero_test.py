"""Tests for the zero-test gadget."""

import pytest

from constraints.base import RowConstraintContext
from constraints.zero_test import ZeroTestGadget
from primitives.field import FF, GOLDILOCKS_PRIME, to_field
from protocol.constraint_system import ConstraintSystem
from protocol.mock_prover import MockProver
from protocol.params import CircuitParams
from protocol.selectors import Activation
from protocol.witness_table import WitnessTable


@pytest.fixture
def gadget_system():
    """x, x_inv with the zero-test identity on every row of a 4-row table."""
    cs = ConstraintSystem(CircuitParams(max_row=3))
    x = cs.advice_column("x")
    x_inv = cs.advice_column("x_inv")
    everywhere = cs.selector("everywhere", Activation.every_row())
    gadget = ZeroTestGadget.configure(cs, x, x_inv)
    gadget.enable(cs, everywhere)
    return cs.freeze(), gadget


def _table(cs, gadget, xs, inverses=None):
    table = WitnessTable(cs)
    xs = FF(xs)
    table.assign_column(gadget.value, xs)
    table.assign_column(
        gadget.inverse, FF(inverses) if inverses is not None else gadget.assign_inverse(xs)
    )
    return table.freeze()


def test_honest_inverse_satisfies_identity(gadget_system) -> None:
    cs, gadget = gadget_system
    table = _table(cs, gadget, [0, 3, 0, 7])
    assert MockProver(cs, table).verify() == []


def test_is_zero_predicate_values(gadget_system) -> None:
    """1 on zero rows, 0 elsewhere."""
    cs, gadget = gadget_system
    table = _table(cs, gadget, [0, 3, 0, 7])
    values = [gadget.is_zero(RowConstraintContext(table, row)) for row in range(4)]
    assert values == [FF(1), FF(0), FF(1), FF(0)]


NONZERO_VALUES = [1, 2, 5, 2**32 + 7, GOLDILOCKS_PRIME - 1]


@pytest.mark.parametrize("x", NONZERO_VALUES)
@pytest.mark.parametrize("offset", [1, 2, -1, 7**20])
def test_wrong_inverse_of_nonzero_rejected(gadget_system, x, offset) -> None:
    """For x != 0 only x^-1 satisfies x * (1 - x * y) = 0."""
    cs, gadget = gadget_system
    inverse = FF(x) ** -1
    wrong = inverse + to_field(FF, offset)
    table = _table(cs, gadget, [x] * 4, inverses=[int(wrong)] + [int(inverse)] * 3)

    failures = MockProver(cs, table).verify()
    assert [(f.kind, f.gate, f.row) for f in failures] == [("gate", "x inv", 0)]


@pytest.mark.parametrize("x", NONZERO_VALUES)
def test_zero_inverse_of_nonzero_rejected(gadget_system, x) -> None:
    """y = 0 would make is_zero(x) = 1 for a non-zero x."""
    cs, gadget = gadget_system
    table = _table(cs, gadget, [x, x, 0, 0], inverses=[0, int(FF(x) ** -1), 0, 0])

    failures = MockProver(cs, table).verify()
    assert [f.row for f in failures] == [0]


def test_is_nonzero_is_complement(gadget_system) -> None:
    cs, gadget = gadget_system
    table = _table(cs, gadget, [0, 3, 0, 7])
    values = [gadget.is_nonzero(RowConstraintContext(table, row)) for row in range(4)]
    assert values == [FF(0), FF(1), FF(0), FF(1)]


def test_inverse_of_zero_is_free(gadget_system) -> None:
    """For x = 0 every y satisfies the identity, and is_zero stays 1."""
    cs, gadget = gadget_system
    table = _table(cs, gadget, [0, 0, 0, 0], inverses=[0, 1, 12345, 99])

    assert MockProver(cs, table).verify() == []
    for row in range(4):
        assert gadget.is_zero(RowConstraintContext(table, row)) == FF(1)


def test_configure_guards_inverse_column() -> None:
    cs = ConstraintSystem(CircuitParams(max_row=3))
    x = cs.advice_column("x")
    x_inv = cs.advice_column("x_inv")
    ZeroTestGadget.configure(cs, x, x_inv)
    assert cs.guard(x_inv).pair == (x, x_inv)
    assert list(cs.binding_rows(x_inv)) == []


def test_identity_degree(gadget_system) -> None:
    """x * (1 - x * y) is degree 3, plus the selector."""
    cs, _ = gadget_system
    assert cs.gates[0].polys[0].degree() == 3
    assert cs.degree == 4
