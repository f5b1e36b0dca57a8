"""
Sample buffer generation.

A sample buffer is a 1-D float64 ndarray filled with independent uniform
draws in [0, 1), in draw order. The random source is a collaborator:
anything with next_f64() works, and sources that can fill a whole
buffer at once override fill() for speed.
"""

import logging
from typing import Optional

import numpy as np

from utils.validation import check_count

logger = logging.getLogger(__name__)


class RandomSource:
    """Stream of uniform floats in [0, 1)."""

    def next_f64(self) -> float:
        raise NotImplementedError

    def fill(self, size: int) -> np.ndarray:
        """Draw `size` values in order. Override for a bulk path."""
        return np.fromiter((self.next_f64() for _ in range(size)), dtype=np.float64, count=size)


class NumpyRandomSource(RandomSource):
    """
    RandomSource backed by numpy's default Generator (PCG64).

    Args:
        seed: Seed for reproducible runs; None seeds from OS entropy
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def next_f64(self) -> float:
        return float(self._rng.random())

    def fill(self, size: int) -> np.ndarray:
        return self._rng.random(size, dtype=np.float64)


_default_source: Optional[RandomSource] = None


def default_source() -> RandomSource:
    """Process-wide source, seeded once on first use."""
    global _default_source
    if _default_source is None:
        _default_source = NumpyRandomSource()
    return _default_source


def generate(size: int, source: Optional[RandomSource] = None) -> np.ndarray:
    """
    Generate a buffer of `size` uniform samples.

    Args:
        size: Number of samples (>= 0)
        source: RandomSource to draw from (default: process-wide source)

    Returns:
        float64 array of shape (size,)
    """
    size = check_count(size, 'size')
    if source is None:
        source = default_source()

    buf = np.asarray(source.fill(size), dtype=np.float64)
    if buf.shape != (size,):
        raise ValueError(f"Random source returned shape {buf.shape}, expected ({size},)")

    logger.debug(f"Generated {size:,} samples ({buf.nbytes / 1e6:.1f} MB)")
    return buf
