"""
Argument checks shared by the partitioner, transform engine and buffer
generation.

Every precondition violation raises InvalidArgumentError before any work
is dispatched. It subclasses ValueError so callers that already catch
ValueError keep working.
"""

import numbers

import numpy as np


class InvalidArgumentError(ValueError):
    """A size, worker count or policy argument is out of range."""


def check_count(value, name: str, minimum: int = 0) -> int:
    """
    Validate an integer count argument.

    Args:
        value: Value to check (bools are rejected)
        name: Argument name used in the error message
        minimum: Smallest accepted value

    Returns:
        value as a plain int
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgumentError(
            f"{name} must be an integer, got {type(value).__name__}"
        )
    if value < minimum:
        raise InvalidArgumentError(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def as_buffer(data) -> np.ndarray:
    """Coerce data to a 1-D float64 sample buffer (no copy if already one)."""
    buf = np.asarray(data, dtype=np.float64)
    if buf.ndim != 1:
        raise InvalidArgumentError(f"Sample buffer must be 1-D, got shape {buf.shape}")
    return buf
