"""
pyblackscholes.implied_volatility
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Implied volatility of the option described by an Inputs.

calc_rational_iv() inverts the price with the transformed rational guess of "Let's be rational"
(Jäckel, 2016) and reaches full double precision in at most two iterations. calc_iv() is the
simpler Newton-Raphson estimator seeded with the modified Corrado-Miller guess of
"A modified Corrado-Miller implied volatility estimator" (Pluciennik, 2007), iterating until the
price error is below a tolerance.

:copyright: © 2017 Gammon Capital LLC
:license: MIT, see LICENSE for more details.
"""

import logging
from dataclasses import replace
from math import exp, isfinite, pi, sqrt

from pyblackscholes.constants import (
    CORRADO_MILLER_A,
    CORRADO_MILLER_B,
    CORRADO_MILLER_C,
    CORRADO_MILLER_D,
    CORRADO_MILLER_E,
    CORRADO_MILLER_F,
    SQRT_TWO_PI,
)
from pyblackscholes.exceptions import ConvergenceFailure
from pyblackscholes.greeks import calc_vega
from pyblackscholes.inputs import Inputs
from pyblackscholes.lets_be_rational import implied_volatility
from pyblackscholes.pricing import calc_price

logger = logging.getLogger(__name__)

newton_raphson_maximum_iterations = 100


def modified_corrado_miller_guess(inputs: Inputs) -> float:
    p = inputs.require_price()
    discounted_strike = inputs.k * exp(-inputs.r * inputs.t)
    f_minus_x = inputs.s - discounted_strike
    f_plus_x = inputs.s + discounted_strike
    one_over_sqrt_t = 1.0 / sqrt(inputs.t)

    # A negative radicand means the quadratic approximation has no real root, take its vertex.
    root = sqrt(max((p - f_minus_x / 2.0) ** 2 - f_minus_x**2 / pi, 0.0))
    x = one_over_sqrt_t * (SQRT_TWO_PI / f_plus_x)
    y = p - (inputs.s - inputs.k) / 2.0 + root

    return (
        x * (p - f_minus_x / 2.0 + root)
        + CORRADO_MILLER_A
        + CORRADO_MILLER_B / x
        + CORRADO_MILLER_C * y
        + CORRADO_MILLER_D / x**2
        + CORRADO_MILLER_E * y**2
        + CORRADO_MILLER_F * y / x
    )


def calc_iv(
    inputs: Inputs,
    tolerance: float,
    max_iterations: int = newton_raphson_maximum_iterations,
) -> float:
    """
    Newton-Raphson implied volatility; iterates until the price error is within tolerance.
    Recommended tolerances lie between 0.001 and 0.0001 for the best efficiency/accuracy trade off.
    """
    p = inputs.require_price()
    sigma = modified_corrado_miller_guess(inputs)
    if not isfinite(sigma) or sigma <= 0:
        raise ConvergenceFailure("Failed to converge")

    trial = replace(inputs, sigma=sigma)
    for _ in range(max_iterations):
        diff = calc_price(trial) - p
        if abs(diff) <= tolerance:
            return sigma
        # Vega is quoted per percentage point.
        sigma -= diff / (calc_vega(trial) * 100.0)
        if not isfinite(sigma) or sigma <= 0:
            raise ConvergenceFailure("Failed to converge")
        trial = replace(inputs, sigma=sigma)
    logger.debug(
        "Newton-Raphson exhausted %d iterations at sigma=%r", max_iterations, sigma
    )
    raise ConvergenceFailure(f"Failed to converge within {max_iterations} iterations")


def calc_rational_iv(inputs: Inputs) -> float:
    p = inputs.require_price()
    # The rational solver works with the forward and the undiscounted option price, so remove the discount.
    rate_inv_discount = exp(inputs.r * inputs.t)
    p = p * rate_inv_discount
    # Continuous dividends enter through the forward.
    forward = inputs.s * rate_inv_discount * exp(-inputs.q * inputs.t)
    return implied_volatility(p, forward, inputs.k, inputs.t, inputs.theta)
