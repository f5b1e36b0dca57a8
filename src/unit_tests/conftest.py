"""
Pytest fixtures and configuration for the transform/statistics unit tests.

Provides reusable sample buffers, executors and test utilities.
"""

import pytest
import numpy as np
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent
sys.path.insert(0, str(src_path))


# ============== Buffer Fixtures ==============

@pytest.fixture
def small_buffer():
    """The four-element scenario buffer."""
    return np.array([1.0, 2.0, 3.0, 4.0])


@pytest.fixture
def uniform_samples():
    """Seeded uniform samples in [0, 1)."""
    rng = np.random.default_rng(42)
    return rng.random(10_000)


@pytest.fixture
def signed_samples():
    """Seeded samples spanning every branch of the piecewise transforms."""
    rng = np.random.default_rng(7)
    return rng.uniform(-6.0, 6.0, size=5_003)


# ============== Executor Fixtures ==============

@pytest.fixture
def thread_pool():
    """Shared executor injected into the engine; closed after the test."""
    with ThreadPoolExecutor(max_workers=3) as pool:
        yield pool


# ============== Utility Functions ==============

def assert_buffers_equal(a, b):
    """Assert two buffers are identical, treating NaN == NaN."""
    a = np.asarray(a)
    b = np.asarray(b)
    assert a.shape == b.shape, f"Shape mismatch: {a.shape} vs {b.shape}"
    if not np.array_equal(a, b, equal_nan=True):
        diff = np.flatnonzero(~((a == b) | (np.isnan(a) & np.isnan(b))))
        raise AssertionError(f"Buffers differ at {len(diff)} indices, first: {diff[:5]}")
