"""Witness assignment modules.

Each circuit has its own WitnessModule that fills a fresh table for a built
constraint system from one run's public inputs.
"""

from .base import WitnessModule
from .fibonacci import FibonacciWitness, assign_witness, fibonacci

__all__ = [
    "WitnessModule",
    "FibonacciWitness",
    "assign_witness",
    "fibonacci",
]
