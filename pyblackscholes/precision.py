"""
pyblackscholes.precision
~~~~~~~~~~~~~~~~~~~~~~~~

Iteration budget and precision floor of the implied volatility solver per floating point width.

:copyright: © 2017 Gammon Capital LLC
:license: MIT, see LICENSE for more details.
"""

import numpy as np

# Householder(3) roughly triples the number of correct digits per step, so one step from the
# rational guess saturates single precision and two saturate double precision.
_IMPLIED_VOLATILITY_MAXIMUM_ITERATIONS = {
    np.dtype(np.float32): 1,
    np.dtype(np.float64): 2,
}


def _supported(dtype) -> np.dtype:
    dtype = np.dtype(dtype)
    if dtype not in _IMPLIED_VOLATILITY_MAXIMUM_ITERATIONS:
        raise TypeError(f"Unsupported floating point type: {dtype}")
    return dtype


def implied_volatility_maximum_iterations(dtype=np.float64) -> int:
    return _IMPLIED_VOLATILITY_MAXIMUM_ITERATIONS[_supported(dtype)]


def precision_floor(dtype=np.float64) -> float:
    """The relative step below which further refinement cannot change the result."""
    return float(np.finfo(_supported(dtype)).eps)


def to_dtype(value: float, dtype=np.float64):
    return _supported(dtype).type(value)
