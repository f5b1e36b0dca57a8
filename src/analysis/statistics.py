"""
Descriptive statistics over sample buffers.

compute_stats is the reference two-pass algorithm:
    pass 1: sum, running min, running max  -> mean = sum / N
    pass 2: sum of squared deviations      -> population variance (divisor N)

The second pass keeps the variance non-negative, unlike the
E[x^2] - E[x]^2 shortcut.

compute_stats_chunked produces the same summary from per-chunk partials
merged with Chan's pairwise update, the same combination used for
streaming normalization stats.

Reference:
- Chan, Tony F et al. (1983). Algorithms for Computing the Sample Variance.
"""

import math
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Mapping

import numpy as np

from engine.partition import DEFAULT_POLICY, Chunk, partition
from utils.validation import as_buffer


@dataclass(frozen=True)
class Summary:
    """Mean, population std-dev, min and max of a buffer."""

    mean: float
    std_dev: float
    min: float
    max: float

    @classmethod
    def empty(cls) -> 'Summary':
        """Summary defined for a zero-length buffer."""
        return cls(mean=0.0, std_dev=0.0, min=0.0, max=0.0)

    @property
    def variance(self) -> float:
        return self.std_dev ** 2

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Mapping[str, float]) -> 'Summary':
        return cls(
            mean=float(values['mean']),
            std_dev=float(values['std_dev']),
            min=float(values['min']),
            max=float(values['max']),
        )


def compute_stats(data) -> Summary:
    """
    Compute mean, std-dev, min and max of a sample buffer.

    NaN values propagate into mean and std_dev. min/max are running values
    seeded with data[0]: a leading NaN sticks (every later comparison with
    it is false), any other NaN is skipped.

    Args:
        data: 1-D sequence of floats (any length, including 0)

    Returns:
        Summary; all zeros for an empty buffer
    """
    buf = as_buffer(data)
    n = len(buf)
    if n == 0:
        return Summary.empty()

    # Pass 1
    total = float(np.sum(buf))
    lo, hi = _running_min_max(buf)
    mean = total / n

    # Pass 2
    deviations = buf - mean
    variance = float(np.dot(deviations, deviations)) / n

    return Summary(mean=mean, std_dev=math.sqrt(variance), min=lo, max=hi)


def _running_min_max(view: np.ndarray):
    """min and max as a scan seeded with view[0] using x < lo / x > hi."""
    if np.isnan(view[0]):
        return float(view[0]), float(view[0])
    # Seed is a number, so fmin/fmax skip every NaN after it
    return float(np.fmin.reduce(view)), float(np.fmax.reduce(view))


def _chunk_partial(view: np.ndarray) -> dict:
    """Count, mean, M2, NaN-skipping min/max and leading-NaN flag of one non-empty chunk."""
    n = len(view)
    mean = float(np.sum(view)) / n
    deviations = view - mean
    return {
        'n': n,
        'mean': mean,
        'm2': float(np.dot(deviations, deviations)),
        'min': float(np.fmin.reduce(view)),
        'max': float(np.fmax.reduce(view)),
        'lead_nan': bool(np.isnan(view[0])),
    }


def _combine_partials(a: dict, b: dict) -> dict:
    """Merge two partials with Chan's parallel algorithm."""
    n_ab = a['n'] + b['n']
    delta = b['mean'] - a['mean']

    return {
        'n': n_ab,
        'mean': a['mean'] + delta * b['n'] / n_ab,
        'm2': a['m2'] + b['m2'] + delta**2 * a['n'] * b['n'] / n_ab,
        'min': float(np.fmin(a['min'], b['min'])),
        'max': float(np.fmax(a['max'], b['max'])),
        'lead_nan': a['lead_nan'],
    }


def compute_stats_chunked(
    data,
    workers: int = 4,
    policy: str = DEFAULT_POLICY,
) -> Summary:
    """
    Compute the same Summary as compute_stats from per-chunk partials.

    The buffer is split with the transform engine's partitioner so each
    partial matches what one worker saw. Empty chunks contribute nothing.
    Agrees with compute_stats up to floating-point rounding.
    """
    buf = as_buffer(data)
    chunks = partition(len(buf), workers, policy)
    return combine_chunk_stats(buf, chunks)


def combine_chunk_stats(buf: np.ndarray, chunks: Iterable[Chunk]) -> Summary:
    """Summarize buf from the partials of the given (disjoint, covering) chunks."""
    combined = None
    for chunk in chunks:
        if chunk.size == 0:
            continue
        partial = _chunk_partial(buf[chunk.as_slice()])
        combined = partial if combined is None else _combine_partials(combined, partial)

    if combined is None:
        return Summary.empty()

    variance = max(combined['m2'], 0.0) / combined['n']
    return Summary(
        mean=combined['mean'],
        std_dev=math.sqrt(variance),
        min=math.nan if combined['lead_nan'] else combined['min'],
        max=math.nan if combined['lead_nan'] else combined['max'],
    )


def summarize(results) -> Dict[str, Summary]:
    """
    Compute a Summary per named buffer.

    Args:
        results: Mapping name -> buffer, or anything with an items() method
                 yielding (name, buffer) pairs (e.g. TransformResultSet)

    Returns:
        Dict name -> Summary, in the order given
    """
    return {name: compute_stats(buf) for name, buf in results.items()}
