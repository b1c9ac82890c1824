"""Goldilocks prime field GF(p) and the helpers the arithmetization core needs.

Uses galois library for all field arithmetic. FF is the default field type; any
galois prime field class can be used in its place, the core only relies on
add, sub, mul, inverse and equality.
"""

import galois
import numpy as np

# --- Field Construction ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

FF = galois.GF(GOLDILOCKS_PRIME)
"""Base field GF(p) - Goldilocks prime field."""


def to_field(field, value: int):
    """Lift a Python int (possibly negative) into `field`."""
    return field(int(value) % field.order)


# --- Montgomery Batch Inversion ---

def batch_inverse(values):
    """Montgomery batch inversion for any galois array.

    Converts N field inversions into 3N-3 multiplications + 1 inversion.

    Algorithm:
    1. Forward pass: Compute prefix products cumprods[i] = a[0] * a[1] * ... * a[i]
    2. Single inversion: inv_total = cumprods[N-1]^(-1)
    3. Backward pass: Extract individual inverses using cumprods

    Args:
        values: Galois FieldArray to invert (must all be non-zero)

    Returns:
        Galois FieldArray where result[i] = values[i]^(-1)

    Raises:
        ZeroDivisionError: If any element is zero
    """
    n = len(values)
    if n == 0:
        return values
    if n == 1:
        return values ** -1

    field_type = type(values)

    cumprods = field_type.Zeros(n)
    cumprods[0] = values[0]
    for i in range(1, n):
        cumprods[i] = cumprods[i - 1] * values[i]

    inv_total = cumprods[n - 1] ** -1

    results = field_type.Zeros(n)
    z = inv_total
    for i in range(n - 1, 0, -1):
        results[i] = z * cumprods[i - 1]
        z = z * values[i]
    results[0] = z

    return results


def inverse_or_zero(values):
    """Element-wise inverse, mapping zero entries to zero.

    This is the canonical witness for an inverse column: x^-1 where x != 0,
    and 0 where x == 0. Non-zero entries are inverted with one batch inversion.
    """
    field_type = type(values)
    result = field_type.Zeros(len(values))
    nonzero = np.flatnonzero(np.asarray(values) != 0)
    if len(nonzero) > 0:
        result[nonzero] = batch_inverse(values[nonzero])
    return result
