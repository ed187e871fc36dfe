"""
pyblackscholes.greeks
~~~~~~~~~~~~~~~~~~~~~

Closed form Black-Scholes-Merton sensitivities.

Theta is per calendar day, vega, rho and vanna are per percentage point of volatility or rate.
The higher order formulas follow https://en.wikipedia.org/wiki/Greeks_(finance)#Black.E2.80.93Scholes_Greeks .

:copyright: © 2017 Gammon Capital LLC
:license: MIT, see LICENSE for more details.
"""

from math import exp, sqrt

from pyblackscholes.constants import DAYS_PER_YEAR
from pyblackscholes.inputs import Inputs, OptionType
from pyblackscholes.pricing import (
    calc_d1d2,
    calc_nd1nd2,
    calc_nprimed1,
    calc_nprimed2,
    calc_price,
)


def _is_call(inputs: Inputs) -> bool:
    return inputs.option_type is OptionType.CALL


def calc_delta(inputs: Inputs) -> float:
    nd1, _ = calc_nd1nd2(inputs)
    e_negqt = exp(-inputs.q * inputs.t)
    return nd1 * e_negqt if _is_call(inputs) else -nd1 * e_negqt


def calc_gamma(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    return (
        exp(-inputs.q * inputs.t)
        * calc_nprimed1(inputs)
        / (inputs.s * sigma * sqrt(inputs.t))
    )


def calc_theta(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    nprimed1 = calc_nprimed1(inputs)
    nd1, nd2 = calc_nd1nd2(inputs)
    e_negqt = exp(-inputs.q * inputs.t)
    e_negrt = exp(-inputs.r * inputs.t)
    decay = -(inputs.s * sigma * e_negqt * nprimed1 / (2.0 * sqrt(inputs.t)))
    rate = inputs.r * inputs.k * e_negrt * nd2
    dividend = inputs.q * inputs.s * e_negqt * nd1
    if _is_call(inputs):
        return (decay - rate + dividend) / DAYS_PER_YEAR
    return (decay + rate - dividend) / DAYS_PER_YEAR


def calc_vega(inputs: Inputs) -> float:
    return (
        0.01
        * inputs.s
        * exp(-inputs.q * inputs.t)
        * sqrt(inputs.t)
        * calc_nprimed1(inputs)
    )


def calc_rho(inputs: Inputs) -> float:
    _, nd2 = calc_nd1nd2(inputs)
    rho = 0.01 * inputs.k * inputs.t * exp(-inputs.r * inputs.t) * nd2
    return rho if _is_call(inputs) else -rho


def calc_epsilon(inputs: Inputs) -> float:
    nd1, _ = calc_nd1nd2(inputs)
    epsilon = inputs.s * inputs.t * exp(-inputs.q * inputs.t) * nd1
    return -epsilon if _is_call(inputs) else epsilon


def calc_lambda(inputs: Inputs) -> float:
    return calc_delta(inputs) * inputs.s / calc_price(inputs)


def calc_vanna(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    _, d2 = calc_d1d2(inputs)
    return d2 * exp(-inputs.q * inputs.t) * calc_nprimed1(inputs) * -0.01 / sigma


def calc_charm(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    nprimed1 = calc_nprimed1(inputs)
    nd1, _ = calc_nd1nd2(inputs)
    _, d2 = calc_d1d2(inputs)
    e_negqt = exp(-inputs.q * inputs.t)
    sqrt_t = sqrt(inputs.t)
    drift = (
        e_negqt
        * nprimed1
        * (2.0 * (inputs.r - inputs.q) * inputs.t - d2 * sigma * sqrt_t)
        / (2.0 * inputs.t * sigma * sqrt_t)
    )
    if _is_call(inputs):
        return inputs.q * e_negqt * nd1 - drift
    return -inputs.q * e_negqt * nd1 - drift


def calc_veta(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    d1, d2 = calc_d1d2(inputs)
    sqrt_t = sqrt(inputs.t)
    return (
        -inputs.s
        * exp(-inputs.q * inputs.t)
        * calc_nprimed1(inputs)
        * sqrt_t
        * (
            inputs.q
            + ((inputs.r - inputs.q) * d1) / (sigma * sqrt_t)
            - ((1.0 + d1 * d2) / (2.0 * inputs.t))
        )
    )


def calc_vomma(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    d1, d2 = calc_d1d2(inputs)
    return calc_vega(inputs) * ((d1 * d2) / sigma)


def calc_speed(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    d1, _ = calc_d1d2(inputs)
    return -calc_gamma(inputs) / inputs.s * (d1 / (sigma * sqrt(inputs.t)) + 1.0)


def calc_zomma(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    d1, d2 = calc_d1d2(inputs)
    return calc_gamma(inputs) * ((d1 * d2 - 1.0) / sigma)


def calc_color(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    d1, d2 = calc_d1d2(inputs)
    sigma_sqrt_t = sigma * sqrt(inputs.t)
    return (
        -exp(-inputs.q * inputs.t)
        * (calc_nprimed1(inputs) / (2.0 * inputs.s * inputs.t * sigma_sqrt_t))
        * (
            2.0 * inputs.q * inputs.t
            + 1.0
            + (2.0 * (inputs.r - inputs.q) * inputs.t - d2 * sigma_sqrt_t)
            / sigma_sqrt_t
            * d1
        )
    )


def calc_ultima(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    d1, d2 = calc_d1d2(inputs)
    return (
        -calc_vega(inputs)
        / (sigma * sigma)
        * (d1 * d2 * (1.0 - d1 * d2) + d1 * d1 + d2 * d2)
    )


def calc_dual_delta(inputs: Inputs) -> float:
    """Sensitivity of the price to the strike."""
    _, nd2 = calc_nd1nd2(inputs)
    e_negrt = exp(-inputs.r * inputs.t)
    return -e_negrt * nd2 if _is_call(inputs) else e_negrt * nd2


def calc_dual_gamma(inputs: Inputs) -> float:
    sigma = inputs.require_sigma()
    return exp(-inputs.r * inputs.t) * (
        calc_nprimed2(inputs) / (inputs.k * sigma * sqrt(inputs.t))
    )


_GREEKS = {
    "delta": calc_delta,
    "gamma": calc_gamma,
    "theta": calc_theta,
    "vega": calc_vega,
    "rho": calc_rho,
    "epsilon": calc_epsilon,
    "lambda": calc_lambda,
    "vanna": calc_vanna,
    "charm": calc_charm,
    "veta": calc_veta,
    "vomma": calc_vomma,
    "speed": calc_speed,
    "zomma": calc_zomma,
    "color": calc_color,
    "ultima": calc_ultima,
    "dual_delta": calc_dual_delta,
    "dual_gamma": calc_dual_gamma,
}


def calc_all_greeks(inputs: Inputs) -> dict[str, float]:
    return {name: greek(inputs) for name, greek in _GREEKS.items()}
