"""Epsilon-aware numeric predicates shared by every primitive.

All "is this value positive / zero" decisions in the intersection code go
through these helpers instead of raw comparisons against 0. The tolerance is
the float32 machine epsilon, matching Taichi's default ``ti.f32`` precision,
which absorbs rounding at glancing incidence and self-intersection.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.core.numeric import is_positive
    >>> # Use is_positive(t) within a Taichi kernel to accept a hit distance
"""

import numpy as np
import taichi as ti

# Machine epsilon for 32-bit floats (~1.19e-7)
EPSILON = float(np.finfo(np.float32).eps)


@ti.func
def is_nearly_zero(x: ti.f32) -> ti.i32:
    """Check whether a value lies within epsilon of zero.

    Args:
        x: The value to test.

    Returns:
        1 if |x| < EPSILON, 0 otherwise.
    """
    return ti.abs(x) < EPSILON


@ti.func
def is_positive(x: ti.f32) -> ti.i32:
    """Check whether a value is positive beyond epsilon.

    Values in (0, EPSILON] are treated as zero, so a hit at the ray origin
    is never reported.

    Args:
        x: The value to test.

    Returns:
        1 if x > EPSILON, 0 otherwise.
    """
    return x > EPSILON


@ti.func
def clamp01(x: ti.f32) -> ti.f32:
    """Clamp a value into [0, 1]."""
    return ti.min(ti.max(x, 0.0), 1.0)


def is_nearly_zero_py(x: float) -> bool:
    """Python-scope twin of is_nearly_zero() for input validation."""
    return abs(x) < EPSILON


def is_positive_py(x: float) -> bool:
    """Python-scope twin of is_positive() for input validation."""
    return x > EPSILON
