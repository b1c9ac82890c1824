"""Constraint system: columns, selectors, gates and copy constraints of one circuit shape.

The system is built once per circuit shape (MAX and column layout), validated
by freeze(), and from then on shared read-only by every witness assignment for
that shape.

Build-time validation:
    - Rotation validity: no active row of a gate plus a queried rotation may
      address a row outside [0, MAX]  (OutOfRangeRow)
    - Gadget coupling: a gate reading a guarded column (e.g. the inverse
      column of a zero-test gadget) must only do so on rows where the binding
      gate for the same (value, inverse) pair is active, and a gadget
      predicate may only be read for the pair its column is guarded with
      (MissingGadgetBinding)

Example:
    cs = ConstraintSystem(CircuitParams(max_row=7))
    a = cs.advice_column("a")
    body = cs.selector("body", Activation.transition())
    cs.create_gate("double", body, lambda ctx: [ctx.next_col(a) - ctx.col(a) * 2])
    cs.freeze()
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

import numpy as np

from protocol.columns import Cell, Column, ColumnKind, RotationLike, resolve
from protocol.copy_constraints import CopyConstraintSet
from protocol.errors import ConstraintSystemFrozen, MissingGadgetBinding, OutOfRangeRow
from protocol.expressions import Expression, QueryKey
from protocol.params import CircuitParams
from protocol.selectors import Activation, Selector, activation_mask

logger = logging.getLogger(__name__)

GateFn = Callable[..., list]

# (value column, guarded column); value is None for a plain guard
GuardPair = Tuple[Optional[Column], Column]


@dataclass(frozen=True)
class Guard:
    """A guarded column, the column it is paired with, and the gadget owning both."""
    pair: GuardPair
    owner: str


@dataclass(frozen=True, eq=False)
class Gate:
    """A named set of polynomial identities instantiated on a selector's active rows.

    Attributes:
        name: Gate name
        selector: Governing selector
        fn: Gate function fn(ctx) -> list of polynomials
        polys: Symbolic polynomials (fn evaluated on the symbolic context)
        binds: (value, inverse) pair this gate is the binding identity for, if any
        uses: (value, inverse) pairs whose gadget predicate the gate reads
    """
    name: str
    selector: Selector
    fn: GateFn
    polys: Tuple[Expression, ...]
    binds: Optional[GuardPair] = None
    uses: Tuple[GuardPair, ...] = ()

    @property
    def queries(self) -> FrozenSet[QueryKey]:
        result = frozenset()
        for poly in self.polys:
            result = result | poly.queries()
        return result

    @property
    def degree(self) -> int:
        """Maximum polynomial degree, counting the selector factor."""
        return 1 + max((poly.degree() for poly in self.polys), default=0)

    def evaluate(self, ctx) -> list:
        return list(self.fn(ctx))

    def __repr__(self) -> str:
        return f"Gate({self.name!r} on {self.selector.name})"


class ConstraintSystem:
    """Columns, selectors, gates and copy constraints for one circuit shape."""

    def __init__(self, params: CircuitParams):
        self.params = params
        self._columns: List[Column] = []
        self._by_name: Dict[str, Column] = {}
        self._selectors: Dict[str, Selector] = {}
        self._selector_masks: Dict[Column, np.ndarray] = {}
        self._gates: List[Gate] = []
        self._guards: Dict[Column, Guard] = {}
        self.copy_constraints = CopyConstraintSet(params.max_row)
        self.degree = 0
        self._frozen = False

    # --- Shape ---

    @property
    def max_row(self) -> int:
        return self.params.max_row

    @property
    def n_rows(self) -> int:
        return self.params.n_rows

    @property
    def field(self):
        return self.params.field

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ConstraintSystemFrozen("Constraint system is frozen")

    # --- Column model ---

    def declare_column(self, kind: ColumnKind, name: str) -> Column:
        """Declare a column of the given kind. Kinds never change afterwards."""
        self._check_mutable()
        if name in self._by_name:
            raise ValueError(f"Column '{name}' already declared")
        index = sum(1 for c in self._columns if c.kind == kind)
        column = Column(index, kind, name)
        self._columns.append(column)
        self._by_name[name] = column
        return column

    def advice_column(self, name: str) -> Column:
        return self.declare_column(ColumnKind.ADVICE, name)

    def fixed_column(self, name: str) -> Column:
        return self.declare_column(ColumnKind.FIXED, name)

    def instance_column(self, name: str) -> Column:
        return self.declare_column(ColumnKind.INSTANCE, name)

    def selector(self, name: str, activation: Activation) -> Selector:
        """Declare a selector whose activation is a pure function of the row index."""
        column = self.declare_column(ColumnKind.SELECTOR, name)
        selector = Selector(column, activation)
        self._selectors[name] = selector
        self._selector_masks[column] = activation_mask(activation, self.max_row)
        return selector

    @property
    def columns(self) -> List[Column]:
        return list(self._columns)

    def columns_of(self, kind: ColumnKind) -> List[Column]:
        return [c for c in self._columns if c.kind == kind]

    def column(self, name: str) -> Column:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(
                f"No column '{name}'. Available: {list(self._by_name.keys())}"
            ) from None

    def selector_by_name(self, name: str) -> Selector:
        return self._selectors[name]

    @property
    def selectors(self) -> List[Selector]:
        return list(self._selectors.values())

    def active_rows(self, selector: Selector) -> np.ndarray:
        return np.flatnonzero(self._selector_masks[selector.column])

    def selector_values(self, selector: Selector):
        """Selector as a 0/1 field column."""
        return self.field(self._selector_masks[selector.column].astype(np.int64))

    def resolve(self, column: Column, base_row: int, rotation: RotationLike) -> Cell:
        return resolve(column, base_row, rotation, self.max_row)

    # --- Gates ---

    def create_gate(
        self,
        name: str,
        selector: Selector,
        fn: GateFn,
        binds: Optional[GuardPair] = None,
    ) -> Gate:
        """Register fn(ctx) -> polynomials, enforced on the selector's active rows.

        Args:
            name: Gate name
            selector: Selector turning the gate on
            fn: Gate function, evaluated on any ConstraintContext
            binds: (value, inverse) pair for which this gate is the binding identity

        Gadget predicates the gate reads are recorded; an inverse column read
        this way is guarded on first use, paired with its value column.
        """
        from constraints.base import SymbolicConstraintContext

        self._check_mutable()
        if selector.name not in self._selectors or self._selectors[selector.name] != selector:
            raise ValueError(f"Selector {selector!r} is not declared in this system")
        ctx = SymbolicConstraintContext()
        polys = tuple(fn(ctx))
        if not polys:
            raise ValueError(f"Gate '{name}' has no polynomials")
        for value, inverse, owner in ctx.gadget_uses:
            if inverse not in self._guards:
                self.guard_column(inverse, owner, paired_with=value)
        uses = tuple(dict.fromkeys((value, inverse) for value, inverse, _ in ctx.gadget_uses))
        gate = Gate(name, selector, fn, polys, binds, uses)
        self._gates.append(gate)
        return gate

    @property
    def gates(self) -> List[Gate]:
        return list(self._gates)

    def guard_column(
        self, column: Column, owner: str, paired_with: Optional[Column] = None
    ) -> None:
        """Mark a column as only sound where a binding gate for (paired_with, column) is active."""
        self._check_mutable()
        self._guards[column] = Guard((paired_with, column), owner)

    def guard(self, column: Column) -> Optional[Guard]:
        return self._guards.get(column)

    def binding_rows(self, column: Column) -> np.ndarray:
        """Rows on which a binding gate for the guarded column's pair is active."""
        guard = self._guards.get(column)
        if guard is None:
            return np.array([], dtype=np.int64)
        rows = [self.active_rows(g.selector) for g in self._gates if g.binds == guard.pair]
        if not rows:
            return np.array([], dtype=np.int64)
        return np.unique(np.concatenate(rows))

    # --- Copy constraints ---

    def enable_equality(self, column: Column) -> None:
        self._check_mutable()
        self.copy_constraints.enable_equality(column)

    def equate(self, cell_a: Cell, cell_b: Cell) -> None:
        """Force two cells to hold equal values."""
        self._check_mutable()
        self.copy_constraints.equate(cell_a, cell_b)

    def constrain_instance(self, cell: Cell, instance: Column, slot: int) -> None:
        """Bind a cell to a slot (row) of an instance column."""
        if instance.kind != ColumnKind.INSTANCE:
            raise ValueError(f"{instance} is not an instance column")
        self.equate(cell, Cell(instance, int(slot)))

    # --- Validation ---

    def freeze(self) -> "ConstraintSystem":
        """Validate the system and make it immutable.

        Raises:
            OutOfRangeRow: A gate reads outside [0, MAX] on one of its active rows
            MissingGadgetBinding: A gate reads a guarded column on unbound rows
        """
        if self._frozen:
            return self
        for gate in self._gates:
            self._validate_columns(gate)
            self._validate_rotations(gate)
            self._validate_bindings(gate)
        self.degree = max((g.degree for g in self._gates), default=0)
        self._frozen = True
        logger.debug(
            "Constraint system frozen: %d rows, %d columns, %d gates, degree %d, "
            "%d copy constraints over %d equality cells",
            self.n_rows, len(self._columns), len(self._gates), self.degree,
            len(self.copy_constraints), len(self.copy_constraints.equality_cells),
        )
        return self

    def _validate_columns(self, gate: Gate) -> None:
        for column, _ in gate.queries:
            if self._by_name.get(column.name) != column:
                raise ValueError(f"Gate '{gate.name}' queries undeclared column {column}")

    def _validate_rotations(self, gate: Gate) -> None:
        rows = self.active_rows(gate.selector)
        if len(rows) == 0:
            return
        first, last = int(rows[0]), int(rows[-1])
        for column, rotation in sorted(gate.queries, key=lambda q: (q[0].name, q[1])):
            if first + rotation < 0:
                raise OutOfRangeRow(column, first + rotation, self.max_row, rotation, gate.name)
            if last + rotation > self.max_row:
                raise OutOfRangeRow(column, last + rotation, self.max_row, rotation, gate.name)

    def _validate_bindings(self, gate: Gate) -> None:
        rows = self.active_rows(gate.selector)
        for pair in gate.uses:
            guard = self._guards[pair[1]]
            if guard.pair != pair:
                raise MissingGadgetBinding(
                    gate.name, pair[1], guard.owner, [int(r) for r in rows]
                )
        for column, rotation in gate.queries:
            guard = self._guards.get(column)
            if guard is None or gate.binds == guard.pair:
                continue
            missing = np.setdiff1d(rows + rotation, self.binding_rows(column))
            if len(missing) > 0:
                raise MissingGadgetBinding(
                    gate.name, column, guard.owner, [int(r) for r in missing]
                )
