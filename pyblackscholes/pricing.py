"""
pyblackscholes.pricing
~~~~~~~~~~~~~~~~~~~~~~

Black-Scholes-Merton prices of European options with a continuous dividend yield.

:copyright: © 2017 Gammon Capital LLC
:license: MIT, see LICENSE for more details.
"""

from math import exp, log, sqrt

from pyblackscholes.black import black
from pyblackscholes.inputs import Inputs, OptionType
from pyblackscholes.normaldistribution import norm_cdf, norm_pdf


def calc_d1d2(inputs: Inputs) -> tuple[float, float]:
    sigma = inputs.require_sigma()
    numd1 = log(inputs.s / inputs.k) + (
        inputs.r - inputs.q + 0.5 * sigma * sigma
    ) * inputs.t
    den = sigma * sqrt(inputs.t)
    d1 = numd1 / den
    return d1, d1 - den


def calc_nd1nd2(inputs: Inputs) -> tuple[float, float]:
    """Φ(d1), Φ(d2) for calls and Φ(-d1), Φ(-d2) for puts."""
    d1, d2 = calc_d1d2(inputs)
    if inputs.option_type is OptionType.CALL:
        return norm_cdf(d1), norm_cdf(d2)
    return norm_cdf(-d1), norm_cdf(-d2)


def calc_nprimed1(inputs: Inputs) -> float:
    d1, _ = calc_d1d2(inputs)
    return norm_pdf(d1)


def calc_nprimed2(inputs: Inputs) -> float:
    _, d2 = calc_d1d2(inputs)
    return norm_pdf(d2)


def calc_price(inputs: Inputs) -> float:
    nd1, nd2 = calc_nd1nd2(inputs)
    discounted_spot = nd1 * inputs.s * exp(-inputs.q * inputs.t)
    discounted_strike = nd2 * inputs.k * exp(-inputs.r * inputs.t)
    if inputs.option_type is OptionType.CALL:
        return max(0.0, discounted_spot - discounted_strike)
    return max(0.0, discounted_strike - discounted_spot)


def calc_rational_price(inputs: Inputs) -> float:
    """The same price by way of the forward and the normalised Black function."""
    sigma = inputs.require_sigma()
    # The Black function wants the forward price, not the spot price.
    forward = inputs.s * exp((inputs.r - inputs.q) * inputs.t)
    undiscounted_price = black(forward, inputs.k, sigma, inputs.t, inputs.theta)
    return undiscounted_price * exp(-inputs.r * inputs.t)
