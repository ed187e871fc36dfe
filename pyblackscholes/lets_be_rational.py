"""
pyblackscholes.lets_be_rational
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Implied Black volatility from a transformed rational guess, after Peter Jaeckel's LetsBeRational.

:copyright: © 2017 Gammon Capital LLC
:license: MIT, see LICENSE for more details.

About LetsBeRational:
~~~~~~~~~~~~~~~~~~~~~

The source code of LetsBeRational resides at www.jaeckel.org/LetsBeRational.7z .

======================================================================================
Copyright © 2013-2014 Peter Jäckel.

Permission to use, copy, modify, and distribute this software is freely granted,
provided that this notice is preserved.

WARRANTY DISCLAIMER
The Software is provided "as is" without warranty of any kind, either express or implied,
including without limitation any implied warranties of condition, uninterrupted use,
merchantability, fitness for a particular purpose, or non-infringement.
======================================================================================
"""

import logging
from enum import Enum
from math import exp, fabs, isfinite, log, sqrt
from typing import Callable, NamedTuple, Optional

import numpy as np

from pyblackscholes.black import (
    DENORMALIZATION_CUTOFF,
    black,
    is_below_horizon,
    normalised_black_call,
    normalised_intrinsic,
    normalised_vega,
    normalised_volga,
)
from pyblackscholes.constants import (
    DBL_MAX,
    DBL_MIN,
    ONE_OVER_SQRT_TWO,
    PI_OVER_SIX,
    SQRT_DBL_MAX,
    SQRT_ONE_OVER_THREE,
    SQRT_PI_OVER_TWO,
    SQRT_THREE,
    TWO_PI,
    TWO_PI_OVER_SQRT_TWENTY_SEVEN,
)
from pyblackscholes.exceptions import (
    AboveMaximumException,
    BelowIntrinsicException,
    ConvergenceFailure,
    DomainFailure,
)
from pyblackscholes.normaldistribution import erfcx, inverse_norm_cdf, norm_cdf
from pyblackscholes.precision import (
    implied_volatility_maximum_iterations,
    precision_floor,
    to_dtype,
)
from pyblackscholes.rationalcubic import InterpolationNode, RationalCubicInterpolant

logger = logging.getLogger(__name__)


class Region(Enum):
    """Segment of the normalised price axis, each with its own initial guess."""

    DENORMALISED = "denormalised"
    LOW_PRICE = "low_price"
    NEAR_MONEY_LOWER = "near_money_lower"
    NEAR_MONEY_UPPER = "near_money_upper"
    HIGH_PRICE = "high_price"


class _Anchors(NamedTuple):
    """Evaluations of b(x,s) and b'(x,s) at the segment boundaries s_l < s_c < s_h."""

    b_max: float
    s_c: float
    b_c: float
    v_c: float
    s_l: float = 0.0
    b_l: float = 0.0
    v_l: float = 0.0
    s_h: float = 0.0
    b_h: float = 0.0
    v_h: float = 0.0


class IterationState:
    """
    Progress of one implied volatility solve: the current total deviation estimate s, the number of
    Householder iterations taken, the last objective residual b(x,s)-beta, the region of the initial
    guess and whether the step size fell below the precision floor before the budget ran out.
    """

    __slots__ = ("s", "iterations", "residual", "region", "converged")

    def __init__(self, region: Region, s: float = 0.0):
        self.region = region
        self.s = s
        self.iterations = 0
        self.residual = 0.0
        self.converged = False

    def __repr__(self) -> str:
        return (
            f"IterationState(s={self.s!r}, iterations={self.iterations}, "
            f"residual={self.residual!r}, region={self.region}, converged={self.converged})"
        )


def _inverse_node(b: float, s: float, v: float) -> InterpolationNode:
    """Node of the inverse map beta -> s, whose slope is 1/vega."""
    return InterpolationNode(b, s, 1 / v if v > DBL_MIN else DBL_MAX)


class _Bracket:
    """Total deviations known to lie below and above the root, with the inverse map's node at each priced end."""

    __slots__ = ("s_left", "s_right", "left", "right")

    def __init__(
        self,
        s_left: float = DBL_MIN,
        s_right: float = DBL_MAX,
        left: Optional[InterpolationNode] = None,
        right: Optional[InterpolationNode] = None,
    ):
        self.s_left = s_left
        self.s_right = s_right
        self.left = left
        self.right = right

    def contains(self, s: float) -> bool:
        return self.s_left < s < self.s_right

    def tighten(self, s: float, b: float, bp: float, beta: float) -> None:
        if b > beta and s < self.s_right:
            self.s_right = s
            self.right = _inverse_node(b, s, bp) if bp > 0 else None
        elif b < beta and s > self.s_left:
            self.s_left = s
            self.left = _inverse_node(b, s, bp) if bp > 0 else None

    def estimate(self, beta: float) -> float:
        """A shape preserving interpolation of the inverse map when both ends are priced, else the midpoint."""
        midpoint = 0.5 * (self.s_left + self.s_right)
        if self.left is None or self.right is None:
            return midpoint
        s = RationalCubicInterpolant.shape_preserving(self.left, self.right)(beta)
        return s if self.contains(s) else midpoint


def _householder_factor(newton: float, halley: float, hh3: float) -> float:
    return (1 + 0.5 * halley * newton) / (1 + newton * (halley + hh3 * newton / 6))


def _square(x: float) -> float:
    return x * x


def _compute_f_lower_map_and_first_two_derivatives(
    x: float, s: float
) -> tuple[float, float, float]:
    ax = fabs(x)
    z = SQRT_ONE_OVER_THREE * ax / s
    y = z * z
    s2 = s * s
    Phi = norm_cdf(-z)
    # Φ(-z)/φ(z) without dividing by an underflowing density.
    Phi_over_phi = SQRT_PI_OVER_TWO * erfcx(ONE_OVER_SQRT_TWO * z)
    fpp = (
        PI_OVER_SIX
        * y
        / (s2 * s)
        * Phi
        * (8 * SQRT_THREE * s * ax + (3 * s2 * (s2 - 8) - 8 * x * x) * Phi_over_phi)
        * np.exp(2 * y + 0.25 * s2)
    )
    if is_below_horizon(s):
        fp = 1
        f = 0
    else:
        Phi2 = Phi * Phi
        fp = TWO_PI * y * Phi2 * np.exp(y + 0.125 * s * s)
        if is_below_horizon(x):
            f = 0
        else:
            f = TWO_PI_OVER_SQRT_TWENTY_SEVEN * ax * (Phi2 * Phi)
    return f, fp, fpp


def _compute_f_upper_map_and_first_two_derivatives(
    x: float, s: float
) -> tuple[float, float, float]:
    f = norm_cdf(-0.5 * s)
    if is_below_horizon(x):
        fp = -0.5
        fpp = 0
    else:
        w = _square(x / s)
        fp = -0.5 * np.exp(0.5 * w)
        fpp = SQRT_PI_OVER_TWO * np.exp(w + 0.125 * s * s) * w / s

    return f, fp, fpp


def _inverse_f_lower_map(x: float, f: float) -> float:
    return (
        0
        if is_below_horizon(f)
        else fabs(
            x
            / (
                SQRT_THREE
                * inverse_norm_cdf(
                    pow(f / (TWO_PI_OVER_SQRT_TWENTY_SEVEN * fabs(x)), 1.0 / 3.0)
                )
            )
        )
    )


def _inverse_f_upper_map(f: float) -> float:
    return -2.0 * inverse_norm_cdf(f)


def _classify(x: float, beta: float) -> tuple[Region, Optional[_Anchors]]:
    x = -fabs(x)
    if beta <= 0 or beta < DENORMALIZATION_CUTOFF:
        return Region.DENORMALISED, None
    b_max = exp(0.5 * x)
    # The temptation is great to use the optimised form b_c = exp(x/2)/2-exp(-x/2)·Phi(sqrt(-2·x)) but that would
    # require implementing all of the round-off and over/underflow handling of normalised_black_call, too.
    s_c = sqrt(fabs(2 * x))
    b_c = normalised_black_call(x, s_c)
    v_c = normalised_vega(x, s_c)
    if beta < b_c:
        s_l = s_c - b_c / v_c
        b_l = normalised_black_call(x, s_l)
        anchors = _Anchors(
            b_max, s_c, b_c, v_c, s_l=s_l, b_l=b_l, v_l=normalised_vega(x, s_l)
        )
        return (Region.LOW_PRICE if beta < b_l else Region.NEAR_MONEY_LOWER), anchors
    s_h = s_c + (b_max - b_c) / v_c if v_c > DBL_MIN else s_c
    b_h = normalised_black_call(x, s_h)
    anchors = _Anchors(
        b_max, s_c, b_c, v_c, s_h=s_h, b_h=b_h, v_h=normalised_vega(x, s_h)
    )
    return (Region.NEAR_MONEY_UPPER if beta <= b_h else Region.HIGH_PRICE), anchors


def classify_region(x: float, beta: float) -> Region:
    """
    The segment of the price axis that beta falls in for log-moneyness x, where beta is the normalised
    time value (price less intrinsic, divided by √(F·K)). Calls and puts share the segments of the
    out-of-the-money call at -|x|.
    """
    return _classify(x, beta)[0]


def _low_price_guess(beta: float, x: float, a: _Anchors) -> tuple[float, _Bracket]:
    f_lower_map_l, d_f_lower_map_l_d_beta, d2_f_lower_map_l_d_beta2 = (
        _compute_f_lower_map_and_first_two_derivatives(x, a.s_l)
    )
    f = RationalCubicInterpolant.convex_fit_at_right(
        InterpolationNode(0.0, 0.0, 1.0),
        InterpolationNode(a.b_l, f_lower_map_l, d_f_lower_map_l_d_beta),
        d2_f_lower_map_l_d_beta2,
        True,
    )(beta)
    if not (f > 0):
        # This can happen due to roundoff truncation for extreme values such as |x|>500.
        # We switch to quadratic interpolation using f(0)≡0, f(b_l), and f'(0)≡1 to specify the quadratic.
        t = beta / a.b_l
        f = (f_lower_map_l * t + a.b_l * (1 - t)) * t
    s = _inverse_f_lower_map(x, f)
    return s, _Bracket(s_right=a.s_l, right=_inverse_node(a.b_l, a.s_l, a.v_l))


def _near_money_lower_guess(
    beta: float, x: float, a: _Anchors
) -> tuple[float, _Bracket]:
    left = _inverse_node(a.b_l, a.s_l, a.v_l)
    right = _inverse_node(a.b_c, a.s_c, a.v_c)
    s = RationalCubicInterpolant.convex_fit_at_right(left, right, 0.0, False)(beta)
    return s, _Bracket(a.s_l, a.s_c, left, right)


def _near_money_upper_guess(
    beta: float, x: float, a: _Anchors
) -> tuple[float, _Bracket]:
    left = _inverse_node(a.b_c, a.s_c, a.v_c)
    right = _inverse_node(a.b_h, a.s_h, a.v_h)
    s = RationalCubicInterpolant.convex_fit_at_left(left, right, 0.0, False)(beta)
    return s, _Bracket(a.s_c, a.s_h, left, right)


def _high_price_guess(beta: float, x: float, a: _Anchors) -> tuple[float, _Bracket]:
    f_upper_map_h, d_f_upper_map_h_d_beta, d2_f_upper_map_h_d_beta2 = (
        _compute_f_upper_map_and_first_two_derivatives(x, a.s_h)
    )
    f = -DBL_MAX
    if -SQRT_DBL_MAX < d2_f_upper_map_h_d_beta2 < SQRT_DBL_MAX:
        f = RationalCubicInterpolant.convex_fit_at_left(
            InterpolationNode(a.b_h, f_upper_map_h, d_f_upper_map_h_d_beta),
            InterpolationNode(a.b_max, 0.0, -0.5),
            d2_f_upper_map_h_d_beta2,
            True,
        )(beta)
    if f <= 0:
        # We switch to quadratic interpolation using f(b_h), f(b_max)≡0, and f'(b_max)≡-1/2 to specify the quadratic.
        h = a.b_max - a.b_h
        t = (beta - a.b_h) / h
        f = (f_upper_map_h * (1 - t) + 0.5 * h * t) * (1 - t)
    s = _inverse_f_upper_map(f)
    return s, _Bracket(s_left=a.s_h, left=_inverse_node(a.b_h, a.s_h, a.v_h))


_INITIAL_GUESS = {
    Region.LOW_PRICE: _low_price_guess,
    Region.NEAR_MONEY_LOWER: _near_money_lower_guess,
    Region.NEAR_MONEY_UPPER: _near_money_upper_guess,
    Region.HIGH_PRICE: _high_price_guess,
}


def initial_guess(beta: float, x: float) -> tuple[Region, float]:
    """The region of (x, beta) and the rational guess for s, without any refinement."""
    region, anchors = _classify(x, beta)
    if region is Region.DENORMALISED:
        return region, 0.0
    return region, _INITIAL_GUESS[region](beta, -fabs(x), anchors)[0]


# See http://en.wikipedia.org/wiki/Householder%27s_method for a detailed explanation of the third order
# Householder iteration. Given the objective function g(s) whose root we seek, iterate
#
#     s_n+1  =  s_n  -  (g/g') · [ 1 - (g''/g')·(g/g') ] / [ 1 - (g/g')·( (g''/g') - (g'''/g')·(g/g')/6 ) ]
#
# Denoting  newton:=-(g/g'), halley:=(g''/g'), and hh3:=(g'''/g'), this reads
#
#     s_n+1  =  s_n  +  newton · [ 1 + halley·newton/2 ] / [ 1 + newton·( halley + hh3·newton/6 ) ]
#
# Each step below returns s_n+1 - s_n, or None where the objective underflows.


def _lower_householder_step(
    x: float, s: float, b: float, bp: float, beta: float, b_max: float
) -> Optional[float]:
    """
    In the lowest segment the objective function is

        g(s) = 1/ln(b(x,s)) - 1/ln(beta)

    This makes
                 g'               =   -b'/(b·ln(b)²)
                 newton = -g/g'   =   (ln(beta)-ln(b))·ln(b)/ln(beta)·b/b'
                 halley = g''/g'  =   b''/b'  -  b'/b·(1+2/ln(b))
                 hh3    = g'''/g' =   b'''/b' +  2(b'/b)²·(1+3/ln(b)·(1+1/ln(b)))  -  3(b''/b)·(1+2/ln(b))
    """
    if b <= 0 or bp <= 0:
        return None
    ln_b = log(b)
    ln_beta = log(beta)
    bpob = bp / b
    h = x / s
    b_halley = h * h / s - s / 4
    newton = (ln_beta - ln_b) * ln_b / ln_beta / bpob
    halley = b_halley - bpob * (1 + 2 / ln_b)
    b_hh3 = b_halley * b_halley - 3 * _square(h / s) - 0.25
    hh3 = (
        b_hh3
        + 2 * _square(bpob) * (1 + 3 / ln_b * (1 + 1 / ln_b))
        - 3 * b_halley * bpob * (1 + 2 / ln_b)
    )
    return newton * _householder_factor(newton, halley, hh3)


def _central_householder_step(
    x: float, s: float, b: float, bp: float, beta: float, b_max: float
) -> Optional[float]:
    """
    In the two middle segments the objective function is g(s) = b(x,s)-beta. This makes

                 newton = -g/g'   =  -(b-beta)/b'
                 halley = g''/g'  =    b''/b'    =  x²/s³-s/4
                 hh3    = g'''/g' =    b'''/b'   =  halley² - 3·(x/s²)² - 1/4
    """
    if bp <= 0 or s <= 0:
        return None
    newton = (beta - b) / bp
    halley = normalised_volga(x, s) / bp
    hh3 = halley * halley - 3 * _square(x / (s * s)) - 0.25
    return newton * _householder_factor(newton, halley, hh3)


def _upper_householder_step(
    x: float, s: float, b: float, bp: float, beta: float, b_max: float
) -> Optional[float]:
    """
    In the upper segment the objective function is

        g(s) = ln(b_max-beta)-ln(b_max-b(x,s))

    This makes
                 g'               =   b'/(b_max-b)
                 newton = -g/g'   =   ln((b_max-b)/(b_max-beta))·(b_max-b)/b'
                 halley = g''/g'  =   b''/b'  +  b'/(b_max-b)
                 hh3    = g'''/g' =   b'''/b' +  g'·(2g'+3b''/b')
    """
    if b >= b_max or bp <= DBL_MIN:
        return None
    b_max_minus_b = b_max - b
    g = log((b_max - beta) / b_max_minus_b)
    gp = bp / b_max_minus_b
    b_halley = _square(x / s) / s - s / 4
    b_hh3 = b_halley * b_halley - 3 * _square(x / (s * s)) - 0.25
    newton = -g / gp
    halley = b_halley + gp
    hh3 = b_hh3 + gp * (2 * gp + 3 * b_halley)
    return newton * _householder_factor(newton, halley, hh3)


Step = Callable[[float, float, float, float, float, float], Optional[float]]


def _objective_step(region: Region, beta: float, b_max: float) -> Step:
    if region is Region.LOW_PRICE:
        return _lower_householder_step
    # Below half of b_max we better let the objective function be g(s) = b(x,s)-beta.
    if region is Region.HIGH_PRICE and beta > 0.5 * b_max:
        return _upper_householder_step
    return _central_householder_step


def _refine(
    state: IterationState,
    beta: float,
    x: float,
    b_max: float,
    bracket: _Bracket,
    step: Step,
    N: int,
    eps: float,
) -> None:
    s = state.s
    ds = -DBL_MAX
    ds_previous = 0.0
    direction_reversal_count = 0
    while state.iterations < N and fabs(ds) > eps * s:
        b = normalised_black_call(x, s)
        bp = normalised_vega(x, s)
        bracket.tighten(s, b, bp, beta)
        state.residual = b - beta
        ds_unconstrained = step(x, s, b, bp, beta, b_max)
        if ds_unconstrained is None or 3 == direction_reversal_count:
            # Numerical underflow or looping inefficiently: fall back onto the bracket.
            s_next = bracket.estimate(beta)
            direction_reversal_count = 0
        else:
            s_next = s + max(-0.5 * s, ds_unconstrained)
            if not bracket.contains(s_next):
                logger.debug(
                    "Householder step to s=%r left the bracket [%r, %r]",
                    s_next,
                    bracket.s_left,
                    bracket.s_right,
                )
                s_next = bracket.estimate(beta)
        ds_previous, ds = ds, s_next - s
        if state.iterations > 0 and ds * ds_previous < 0:
            direction_reversal_count += 1
        s = s_next
        state.iterations += 1
        if bracket.s_right - bracket.s_left <= eps * s:
            ds = 0.0
            break
    state.s = s
    state.converged = not (fabs(ds) > eps * s)


def solve_normalised_implied_volatility(
    beta: float, x: float, q: float, N: int, dtype=np.float64
) -> IterationState:
    """
    Run the solver on a normalised price beta and return its iteration state; state.s is the implied
    total deviation.

    NOTE that this returns s=0 when beta<intrinsic without any safety checks.
    """
    # Subtract intrinsic.
    if q * x > 0:
        beta = fabs(max(beta - normalised_intrinsic(x, q), 0.0))
        q = -q
    # Map puts to calls
    if q < 0:
        x = -x
        q = -q
    region, anchors = _classify(x, beta)
    if region is Region.DENORMALISED:
        # For zero or denormalized (a.k.a. 'subnormal') prices we return 0 since it would be impossible
        # to converge to full machine accuracy anyway.
        state = IterationState(region)
        state.residual = -beta
        state.converged = True
        return state
    if beta >= anchors.b_max:
        raise AboveMaximumException
    s, bracket = _INITIAL_GUESS[region](beta, x, anchors)
    state = IterationState(region, s)
    _refine(
        state,
        beta,
        x,
        anchors.b_max,
        bracket,
        _objective_step(region, beta, anchors.b_max),
        N,
        precision_floor(dtype),
    )
    logger.debug("Solved %r", state)
    return state


def _unchecked_normalised_implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
    beta: float, x: float, q: float, N: int, dtype=np.float64
) -> float:
    return solve_normalised_implied_volatility(beta, x, q, N, dtype).s


def normalised_implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
    beta: float, x: float, q: float, N: int, dtype=np.float64
) -> float:
    # Map in-the-money to out-of-the-money
    if q * x > 0:
        beta -= normalised_intrinsic(x, q)
        q = -q

    if beta < 0:
        raise BelowIntrinsicException
    return _unchecked_normalised_implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
        beta, x, q, N, dtype
    )


def _check_domain(price: float, F: float, K: float, T: float) -> None:
    for name, value in (
        ("price", price),
        ("forward", F),
        ("strike", K),
        ("time to maturity", T),
    ):
        if not isfinite(value):
            raise DomainFailure(f"The {name} must be finite, got {value!r}")
    for name, value in (("forward", F), ("strike", K), ("time to maturity", T)):
        if not value > 0:
            raise DomainFailure(f"The {name} must be positive, got {value!r}")


def implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
    price: float, F: float, K: float, T: float, q: float, N: int, dtype=np.float64
) -> float:
    _check_domain(price, F, K, T)
    intrinsic = fabs(max(K - F if q < 0 else F - K, 0.0))
    if price < intrinsic:
        logger.debug("Price %r is below the intrinsic value %r", price, intrinsic)
        raise BelowIntrinsicException
    max_price = K if q < 0 else F
    if price >= max_price:
        logger.debug("Price %r is not below the maximum value %r", price, max_price)
        raise AboveMaximumException
    x = log(F / K)
    # Map in-the-money to out-of-the-money
    if q * x > 0:
        price = fabs(max(price - intrinsic, 0.0))
        q = -q
    s = _unchecked_normalised_implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
        price / (sqrt(F) * sqrt(K)), x, q, N, dtype
    )
    sigma = s / sqrt(T)
    if not (isfinite(sigma) and sigma >= 0):
        raise ConvergenceFailure(
            f"Implied volatility failed to converge: sigma={sigma!r} after {N} iterations"
        )
    return to_dtype(sigma, dtype)


def normalised_implied_volatility_from_a_transformed_rational_guess(
    beta: float, x: float, q: float
) -> float:
    return normalised_implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
        beta, x, q, implied_volatility_maximum_iterations()
    )


def implied_volatility_from_a_transformed_rational_guess(
    price: float, F: float, K: float, T: float, q: float
) -> float:
    return implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
        price, F, K, T, q, implied_volatility_maximum_iterations()
    )


def implied_volatility(
    market_price: float,
    forward: float,
    strike: float,
    time_to_maturity: float,
    option_sign: float,
    dtype=np.float64,
):
    """
    The Black volatility reproducing an undiscounted market price, to the precision of dtype
    (numpy.float32 or numpy.float64) within that width's iteration budget.

    option_sign is +1 for calls and -1 for puts (an OptionType will do). Raises DomainFailure for
    non-finite or non-positive inputs, BelowIntrinsicException or AboveMaximumException (both
    InvalidPrice) for prices outside the no-arbitrage bounds, and ConvergenceFailure if the result is
    not a finite non-negative number. A price equal to the intrinsic value yields 0.
    """
    # Iterate in double precision whatever the width of the inputs; dtype only sets the budget.
    return implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
        float(market_price),
        float(forward),
        float(strike),
        float(time_to_maturity),
        float(option_sign),
        implied_volatility_maximum_iterations(dtype),
        dtype,
    )


def black_price(
    forward: float,
    strike: float,
    volatility: float,
    time_to_maturity: float,
    option_sign: float,
    dtype=np.float64,
):
    """The undiscounted Black price as a scalar of the given dtype."""
    return to_dtype(
        black(forward, strike, volatility, time_to_maturity, float(option_sign)),
        dtype,
    )
