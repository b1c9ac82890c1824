"""Primitives - Low-level field arithmetic building blocks."""

from primitives.field import (
    FF,
    GOLDILOCKS_PRIME,
    batch_inverse,
    inverse_or_zero,
    to_field,
)

__all__ = [
    "FF",
    "GOLDILOCKS_PRIME",
    "batch_inverse",
    "inverse_or_zero",
    "to_field",
]
