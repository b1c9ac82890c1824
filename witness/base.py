"""Base class for witness assignment."""

from abc import ABC, abstractmethod

from protocol.constraint_system import ConstraintSystem
from protocol.witness_table import WitnessTable


class WitnessModule(ABC):
    """Per-circuit witness assignment. Used by the prover only.

    The constraint system is built once per circuit shape; a witness module
    fills a fresh table for it on every run, from that run's public inputs.
    """

    @abstractmethod
    def assign(self, cs: ConstraintSystem, *public_inputs) -> WitnessTable:
        """Fill and freeze a witness table for cs.

        Args:
            cs: Frozen constraint system
            public_inputs: Circuit-specific public inputs

        Returns:
            Frozen WitnessTable satisfying cs
        """
        pass
