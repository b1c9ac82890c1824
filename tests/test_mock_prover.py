"""Self-check tests: tampered tables and wrong public inputs are rejected."""

import logging

import pytest

from constraints.fibonacci import SeedBinding, build_constraint_system
from protocol.columns import ColumnKind
from protocol.errors import ConstraintViolation
from protocol.mock_prover import MockProver
from protocol.witness_table import WitnessTable
from witness.fibonacci import assign_witness


def _tampered(cs, table, name: str, row: int, value: int) -> WitnessTable:
    """Copy of table with one advice cell overwritten."""
    values = table.as_dict()
    values[name][row] = value
    copy = WitnessTable(cs)
    for column in cs.columns_of(ColumnKind.ADVICE):
        copy.assign_column(column, values[column.name])
    copy.set_instance(cs.column("instance"), values["instance"])
    return copy.freeze()


class TestTamperedTable:
    """Changing any advice cell breaks some constraint."""

    def test_tampered_l_fails_fib_gate(self, cs5) -> None:
        table = _tampered(cs5, assign_witness(cs5, 4), "l", 3, 7)

        failures = MockProver(cs5, table).verify()
        assert len(failures) == 1
        failure = failures[0]
        assert (failure.kind, failure.gate, failure.poly_index, failure.row) == ("gate", "fib", 0, 2)
        cells = {repr(cell): value for cell, value in failure.cells}
        assert cells["advice[1](l)@3"] == 7

    def test_tampered_inverse_fails_zero_test(self, cs5) -> None:
        table = _tampered(cs5, assign_witness(cs5, 4), "n_inv", 1, 5)
        gates = {f.gate for f in MockProver(cs5, table).verify()}
        assert "n inv" in gates

    def test_tampered_seed_fails_copy(self, cs5) -> None:
        table = _tampered(cs5, assign_witness(cs5, 4), "l", 0, 1)
        kinds = {f.kind for f in MockProver(cs5, table).verify()}
        assert kinds == {"gate", "copy"}

    def test_assert_satisfied_raises(self, cs5, caplog) -> None:
        table = _tampered(cs5, assign_witness(cs5, 4), "r", 2, 0)
        with caplog.at_level(logging.WARNING, logger="protocol.mock_prover"):
            with pytest.raises(ConstraintViolation) as exc_info:
                MockProver(cs5, table).assert_satisfied()
        assert exc_info.value.failures
        assert "fib" in str(exc_info.value)
        assert "Self-check found" in caplog.text


class TestPublicInputs:
    """A correct table does not verify against the wrong public inputs."""

    @pytest.mark.parametrize("binding", list(SeedBinding))
    def test_wrong_output_rejected(self, binding) -> None:
        cs = build_constraint_system(5, seed_binding=binding)
        table = assign_witness(cs, 4)

        failures = MockProver(cs, table, instance=[[4, 0, 1, 4]]).verify()
        assert len(failures) == 1
        assert failures[0].kind == "copy"
        assert [value for _, value in failures[0].cells] == [3, 4]

    def test_correct_override_accepted(self, cs5) -> None:
        table = assign_witness(cs5, 4)
        assert MockProver(cs5, table, instance=[[4, 0, 1, 3]]).verify() == []

    def test_override_needs_every_instance_column(self, cs5) -> None:
        table = assign_witness(cs5, 4)
        with pytest.raises(ValueError):
            MockProver(cs5, table, instance=[])


class TestRowRanges:
    """Disjoint row ranges can be checked independently."""

    def test_failure_confined_to_its_shard(self, cs5) -> None:
        table = _tampered(cs5, assign_witness(cs5, 4), "l", 3, 7)
        prover = MockProver(cs5, table)

        assert [f.row for f in prover.verify(rows=range(0, 3))] == [2]
        assert prover.verify(rows=range(3, 6)) == []

    def test_shards_cover_full_check(self, cs5) -> None:
        table = _tampered(cs5, assign_witness(cs5, 4), "r", 2, 0)
        prover = MockProver(cs5, table)
        full = prover.verify()
        sharded = prover.verify(rows=range(0, 2)) + prover.verify(rows=range(2, 6))
        assert sorted((f.gate, f.row, f.poly_index) for f in full) == \
            sorted((f.gate, f.row, f.poly_index) for f in sharded)


def test_unassigned_cells_reported(cs5) -> None:
    table = WitnessTable(cs5)
    table.assign(cs5.column("n"), 0, 4)
    failures = MockProver(cs5, table).verify()
    assert any(f.kind == "unassigned" for f in failures)
