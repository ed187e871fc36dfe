"""
pyblackscholes.black
~~~~~~~~~~~~~~~~~~~~

The normalised Black function and its first two derivatives with respect to total deviation.

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

from math import exp, fabs, log, sqrt

import numpy as np
from numpy.polynomial.polynomial import polyval
from scipy.linalg import pascal
from scipy.special import factorial2

from pyblackscholes.constants import (
    FOURTH_ROOT_DBL_EPSILON,
    ONE_OVER_SQRT_TWO,
    ONE_OVER_SQRT_TWO_PI,
    SIXTEENTH_ROOT_DBL_EPSILON,
    SQRT_DBL_MIN,
    SQRT_TWO_PI,
)
from pyblackscholes.normaldistribution import erfcx, norm_cdf

# Set this to 0 if you want positive results for (positive) denormalized inputs, else to DBL_MIN.
# Note that you cannot achieve full machine accuracy from denormalized inputs!
DENORMALIZATION_CUTOFF = 0

asymptotic_expansion_accuracy_threshold = -10
small_t_expansion_of_normalized_black_threshold = 2 * SIXTEENTH_ROOT_DBL_EPSILON
# Above h+t > 0.85 the first term of the Black formula dominates and is evaluated directly.
norm_cdf_dominance_threshold = 0.85


def _square(x: float) -> float:
    return x * x


def is_below_horizon(x: float) -> bool:
    """This weeds out denormalized (a.k.a. 'subnormal') numbers."""
    return fabs(x) < DENORMALIZATION_CUTOFF


def _normalized_black_call_using_norm_cdf(x: float, s: float) -> float:
    """
            b(x,s)  =  Φ(x/s+s/2)·exp(x/2)  -   Φ(x/s-s/2)·exp(-x/2)
                =  Φ(h+t)·exp(x/2)      -   Φ(h-t)·exp(-x/2)
    with
                h  =  x/s   and   t  =  s/2
    """
    h = x / s
    t = 0.5 * s
    b_max = exp(0.5 * x)
    b = norm_cdf(h + t) * b_max - norm_cdf(h - t) / b_max
    return fabs(max(b, 0.0))


# Coefficients of the 17th order expansion below: (2n-1)!! with alternating sign, and the odd
# rows and columns of Pascal's triangle which give the polynomial in e for each power of q.
_asym_facts_17 = np.concatenate(
    [[1], [factorial2(n) * (-1) ** ((n + 1) // 2) for n in range(1, 34, 2)]]
)
_asym_pascal_odd_17 = 2 * pascal(2 * 17 + 2, kind="lower")[:, 1::2][1::2, :].T


def _asymptotic_expansion_of_normalized_black_call(h: float, t: float) -> float:
    """
    For h = x/s well below -10 and small t = s/2, the bracket in

        b = exp(-(h²+t²)/2)/√(2π) · [ Y(h+t) - Y(h-t) ],    Y(z) := Φ(z)/φ(z)

    follows from the Mills ratio series Y(z) = -1/z·(1 - 1/z² + 3/z⁴ - ...) of Abramowitz & Stegun
    (26.2.12). With r := (h+t)(h-t), q := (h/r)² and e := (t/h)² the bracket is t/r times a
    polynomial in q whose coefficients are polynomials in e.
    """
    e = (t / h) * (t / h)
    r = (h + t) * (h - t)
    q = (h / r) * (h / r)
    # Seventeen terms give a relative accuracy of 1.64E-16 for h <= -10.
    asymptotic_expansion_sum = polyval(
        q, _asym_facts_17 * polyval(e, _asym_pascal_odd_17)
    )
    b = (
        ONE_OVER_SQRT_TWO_PI
        * exp((-0.5 * (h * h + t * t)))
        * (t / r)
        * asymptotic_expansion_sum
    )
    return fabs(max(b, 0.0))


def _small_t_expansion_of_normalized_black_call(h: float, t: float) -> float:
    """
    Taylor series of Y(h+t) - Y(h-t) in t up to t¹², with Y(z) := Φ(z)/φ(z) and

        b = exp(-(h²+t²)/2)/√(2π) · [ Y(h+t) - Y(h-t) ].

    Accurate to ε for h ≤ 0 and t below 2·ε^(1/16) ≈ 0.21. Every coefficient is a polynomial in h²
    and a := 1 + h·Y(h), which carries the precision for |h| > 1.
    """
    # Y(h) = √(π/2)·erfcx(-h/√2), and h·Y(h) tends to -1 from above as h -> -∞, so a > 0.
    a = 1 + h * (0.5 * SQRT_TWO_PI) * erfcx(-ONE_OVER_SQRT_TWO * h)
    w = t * t
    h2 = h * h
    # fmt: off
    expansion = (
        2 * t * (a + w * (
        (-1 + 3 * a + a * h2) / 6 + w * (
        (-7 + 15 * a + h2 * (-1 + 10 * a + a * h2)) / 120 + w * (
        (-57 + 105 * a + h2 * (-18 + 105 * a + h2 * (-1 + 21 * a + a * h2))) / 5040 + w * (
        (-561 + 945 * a + h2 * (-285 + 1260 * a + h2 * (-33 + 378 * a + h2 * (-1 + 36 * a + a * h2)))) / 362880 + w * (
        (-6555 + 10395 * a + h2 * (-4680 + 17325 * a + h2 * (-840 + 6930 * a + h2 * (-52 + 990 * a + h2 * (-1 + 55 * a + a * h2))))) / 39916800 + w * (
        (-89055 + 135135 * a + h2 * (-82845 + 270270 * a + h2 * (-20370 + 135135 * a + h2 * (-1926 + 25740 * a + h2 * (-75 + 2145 * a + h2 * (-1 + 78 * a + a * h2)))))) ) / 6227020800.0
    )))))))
    # fmt: on
    b = ONE_OVER_SQRT_TWO_PI * exp((-0.5 * (h * h + t * t))) * expansion
    return fabs(max(b, 0.0))


def _normalised_black_call_using_erfcx(h: float, t: float) -> float:
    """
    Given h = x/s and t = s/2, the normalised Black function can be written as

        b(x,s)  =  Φ(x/s+s/2)·exp(x/2)  -   Φ(x/s-s/2)·exp(-x/2)
                =  Φ(h+t)·exp(h·t)      -   Φ(h-t)·exp(-h·t) .                     (*)

    The error of any cumulative normal Φ(z) is dominated by the accuracy of exp(-z²/2), which is not
    reliably more than 14 digits when z is large (Marsaglia, "Evaluating the Normal Distribution").
    Taking the difference of the two products in (*) loses more. The scaled complementary error function
    erfcx(z) = exp(z²)·erfc(z) is evaluated by Cody's rational approximations *without* the exponential
    when z > 4, i.e. z < -5.66 in Φ(z). Writing

                Φ(z) = exp(-z²/2)·erfcx(-z/√2)/2

    transforms the normalised Black function to

      b   =  ½ · exp(-½(h²+t²)) · [ erfcx(-(h+t)/√2) -  erfcx(-(h-t)/√2) ]

    which involves only one exponential, and the difference inside the square bracket is between two
    rational functions which retains (just about) the full 16 digits.
    """

    b = (
        0.5
        * exp(-0.5 * (h * h + t * t))
        * (erfcx(-ONE_OVER_SQRT_TWO * (h + t)) - erfcx(-ONE_OVER_SQRT_TWO * (h - t)))
    )
    return fabs(max(b, 0.0))


def normalised_intrinsic(x: float, q: float) -> float:
    """Normalised intrinsic value 2·sinh(|x|/2) of the in-the-money option, else 0."""
    if q * x <= 0:
        return 0
    ax = fabs(x)
    x2 = x * x
    # Below √√92897280 ≈ 98 times the fourth root of ε the Taylor series of 2·sinh(x/2) is exact to ε.
    if x2 < 98 * FOURTH_ROOT_DBL_EPSILON:
        return ax * (
            1
            + x2
            * (1 / 24 + x2 * (1 / 1920 + x2 * (1 / 322560 + x2 / 92897280)))
        )
    b_max = exp(0.5 * ax)
    return b_max - 1 / b_max


def normalised_intrinsic_call(x: float) -> float:
    return normalised_intrinsic(x, 1)


def normalised_black_call(x: float, s: float) -> float:
    """
    b(x,s) = Φ(x/s+s/2)·exp(x/2) - Φ(x/s-s/2)·exp(-x/2) for a call with log-moneyness x and total
    deviation s. In-the-money calls are priced as the intrinsic value plus the out-of-the-money call at -x.
    """
    intrinsic = 0.0
    if x > 0:
        intrinsic = normalised_intrinsic_call(x)
        x = -x
    if s <= -x * DENORMALIZATION_CUTOFF:
        return intrinsic
    # Denote h := x/s and t := s/2. We evaluate the condition |h|>|η|, i.e., h<η  &&  t < τ+|h|-|η|  avoiding any
    # divisions by s , where η = asymptotic_expansion_accuracy_threshold  and τ =
    # small_t_expansion_of_normalized_black_threshold .
    if x < s * asymptotic_expansion_accuracy_threshold and 0.5 * s * s + x < s * (
        small_t_expansion_of_normalized_black_threshold
        + asymptotic_expansion_accuracy_threshold
    ):
        # Region 1.
        return intrinsic + _asymptotic_expansion_of_normalized_black_call(
            x / s, 0.5 * s
        )
    if 0.5 * s < small_t_expansion_of_normalized_black_threshold:
        # Region 2.
        return intrinsic + _small_t_expansion_of_normalized_black_call(x / s, 0.5 * s)
    # We evaluate the condition h+t>0.85 avoiding any divisions by s.
    if x + 0.5 * s * s > s * norm_cdf_dominance_threshold:
        # Region 3.
        return intrinsic + _normalized_black_call_using_norm_cdf(x, s)
    # Region 4.
    return intrinsic + _normalised_black_call_using_erfcx(x / s, 0.5 * s)


def normalised_black(x: float, s: float, q: float) -> float:
    """q = ±1"""
    return normalised_black_call(
        -x if q < 0 else x, s
    )  # Reciprocal-strike call-put equivalence


def normalised_vega(x: float, s: float) -> float:
    """∂b/∂s = exp(-½((x/s)²+(s/2)²))/√(2π), identical for calls and puts."""
    ax = fabs(x)
    if ax <= 0:
        return ONE_OVER_SQRT_TWO_PI * exp(-0.125 * s * s)
    return (
        0
        if s <= 0 or s <= ax * SQRT_DBL_MIN
        else ONE_OVER_SQRT_TWO_PI * exp(-0.5 * (_square(x / s) + _square(0.5 * s)))
    )


def normalised_volga(x: float, s: float) -> float:
    """∂²b/∂s² = ∂b/∂s · (x²/s³ - s/4)."""
    vega = normalised_vega(x, s)
    if vega <= 0:
        return 0
    return vega * (_square(x / s) / s - 0.25 * s)


def black(F: float, K: float, sigma: float, T: float, q: float) -> float:
    """Undiscounted Black price of a call (q=1) or put (q=-1) on a forward F struck at K."""
    intrinsic = fabs(max((K - F if q < 0 else F - K), 0.0))
    # Map in-the-money to out-of-the-money
    if q * (F - K) > 0:
        q = -q
    time_value = (sqrt(F) * sqrt(K)) * normalised_black(log(F / K), sigma * sqrt(T), q)
    return intrinsic + max(time_value, 0.0)
