"""
Elementwise transformation library.

Four piecewise approximations applied by the parallel transform engine:

    square          x * x
    sqrt            x ** 0.5 (NaN for negative finite x, not trapped)
    log_approx      2(x - 1)/(x + 1) for x > 0, else 0
    sigmoid_approx  0 below -3, 1 above 3, else 0.5 + x(0.15 - 0.005 x^2)

These are NOT accurate implementations of their namesakes. Only
reproducibility is guaranteed, so the formulas must stay exactly as
written.

Every function takes a scalar or an ndarray. Scalars come back as float,
arrays as float64 arrays of the same shape. They are marked with
@vectorized so the engine hands them a whole chunk at once; any other
callable is applied one element at a time.
"""

from collections import OrderedDict
from typing import Callable, Dict, Union

import numpy as np

ArrayLike = Union[float, np.ndarray]


def vectorized(fn: Callable) -> Callable:
    """Mark fn as safe to call on a whole 1-D float64 array."""
    fn.vectorized = True
    return fn


def is_vectorized(fn: Callable) -> bool:
    return getattr(fn, 'vectorized', False) is True


def _finish(result: np.ndarray, scalar: bool) -> ArrayLike:
    return float(result) if scalar else result


@vectorized
def square(x: ArrayLike) -> ArrayLike:
    arr = np.asarray(x, dtype=np.float64)
    return _finish(arr * arr, arr.ndim == 0)


@vectorized
def sqrt_approx(x: ArrayLike) -> ArrayLike:
    """
    x ** 0.5 with pow() semantics.

    Negative finite input yields NaN; -0.0 gives 0.0 and -inf gives inf.
    """
    arr = np.asarray(x, dtype=np.float64)
    with np.errstate(invalid='ignore'):
        out = np.power(arr, 0.5)
    return _finish(out, arr.ndim == 0)


@vectorized
def log_approx(x: ArrayLike) -> ArrayLike:
    """First Pade-style term of ln(x) around 1; zero for x <= 0."""
    arr = np.asarray(x, dtype=np.float64)
    # x == -1 divides by zero in the discarded branch
    with np.errstate(divide='ignore', invalid='ignore'):
        out = np.where(arr > 0, 2.0 * (arr - 1.0) / (arr + 1.0), 0.0)
    return _finish(out, arr.ndim == 0)


@vectorized
def sigmoid_approx(x: ArrayLike) -> ArrayLike:
    """Cubic sigmoid clamped to [0, 1] outside [-3, 3]."""
    arr = np.asarray(x, dtype=np.float64)
    with np.errstate(over='ignore', invalid='ignore'):
        cubic = 0.5 + arr * (0.15 - 0.005 * arr * arr)
        out = np.where(arr < -3.0, 0.0, np.where(arr > 3.0, 1.0, cubic))
    return _finish(out, arr.ndim == 0)


# Order matters: results are associated with names by position
TRANSFORMS: Dict[str, Callable[[ArrayLike], ArrayLike]] = OrderedDict([
    ('square', square),
    ('sqrt', sqrt_approx),
    ('log_approx', log_approx),
    ('sigmoid_approx', sigmoid_approx),
])


def get_transform(name: str) -> Callable[[ArrayLike], ArrayLike]:
    """Look up a library transform by name."""
    if name not in TRANSFORMS:
        raise KeyError(f"Unknown transform '{name}', expected one of {list(TRANSFORMS)}")
    return TRANSFORMS[name]
