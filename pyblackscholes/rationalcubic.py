"""
pyblackscholes.rationalcubic
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Shape preserving rational cubic interpolation.

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

Based on

    R. Delbourgo, J.A. Gregory - "Shape preserving piecewise rational interpolation",
    SIAM J. Sci. Stat. Comput. 6(4), 1985.

The interpolant on [x_l, x_r] is, with t := (x-x_l)/h and h := x_r-x_l,

            y_r·t³ + (r·y_r-h·d_r)·t²·(1-t) + (r·y_l+h·d_l)·t·(1-t)² + y_l·(1-t)³
    y(x) =  ----------------------------------------------------------------------
                                  1 + (r-3)·t·(1-t)

r = 3 is the standard cubic Hermite interpolant and r -> ∞ is linear interpolation.
"""

from math import fabs
from typing import NamedTuple

from pyblackscholes.constants import DBL_EPSILON, DBL_MAX, DBL_MIN, SQRT_DBL_EPSILON

minimum_rational_cubic_control_parameter_value = -(1 - SQRT_DBL_EPSILON)
maximum_rational_cubic_control_parameter_value = 2 / (DBL_EPSILON * DBL_EPSILON)


def _is_zero(x: float) -> bool:
    return fabs(x) < DBL_MIN


def rational_cubic_interpolation(
    x: float,
    x_l: float,
    x_r: float,
    y_l: float,
    y_r: float,
    d_l: float,
    d_r: float,
    r: float,
) -> float:
    h = x_r - x_l
    if fabs(h) <= 0:
        return 0.5 * (y_l + y_r)
    t = (x - x_l) / h
    # r should be greater than -1. We do not assert r > -1 so that NaN propagates as it should.
    if h > 0 and not (r >= maximum_rational_cubic_control_parameter_value):
        omt = 1 - t
        t2 = t * t
        omt2 = omt * omt
        return (
            y_r * t2 * t
            + (r * y_r - h * d_r) * t2 * omt
            + (r * y_l + h * d_l) * t * omt2
            + y_l * omt2 * omt
        ) / (1 + (r - 3) * t * omt)
    # Linear interpolation without over- or underflow.
    return y_r * t + y_l * (1 - t)


def rational_cubic_control_parameter_to_fit_second_derivative_at_left_side(
    x_l: float,
    x_r: float,
    y_l: float,
    y_r: float,
    d_l: float,
    d_r: float,
    second_derivative_l: float,
) -> float:
    h = x_r - x_l
    numerator = 0.5 * h * second_derivative_l + (d_r - d_l)
    if _is_zero(numerator):
        return 0
    denominator = (y_r - y_l) / h - d_l
    if _is_zero(denominator):
        return (
            maximum_rational_cubic_control_parameter_value
            if numerator > 0
            else minimum_rational_cubic_control_parameter_value
        )
    return numerator / denominator


def rational_cubic_control_parameter_to_fit_second_derivative_at_right_side(
    x_l: float,
    x_r: float,
    y_l: float,
    y_r: float,
    d_l: float,
    d_r: float,
    second_derivative_r: float,
) -> float:
    h = x_r - x_l
    numerator = 0.5 * h * second_derivative_r + (d_r - d_l)
    if _is_zero(numerator):
        return 0
    denominator = d_r - (y_r - y_l) / h
    if _is_zero(denominator):
        return (
            maximum_rational_cubic_control_parameter_value
            if numerator > 0
            else minimum_rational_cubic_control_parameter_value
        )
    return numerator / denominator


def minimum_rational_cubic_control_parameter(
    d_l: float, d_r: float, s: float, prefer_shape_preservation_over_smoothness: bool
) -> float:
    """
    The smallest control parameter r for which the interpolant with end slopes d_l, d_r and
    secant slope s retains whichever of monotonicity, convexity or concavity the data admit.

    An end slope whose sign disagrees with the secant makes any curved interpolant overshoot one
    of the end values. We then return the linear limit if shape preservation is preferred. When
    the slopes are consistent with no shape at all and smoothness is preferred, we return the
    smallest r.
    """
    monotonic = d_l * s >= 0 and d_r * s >= 0
    convex = d_l <= s <= d_r
    concave = d_l >= s >= d_r
    if not monotonic and prefer_shape_preservation_over_smoothness:
        return maximum_rational_cubic_control_parameter_value
    if not monotonic and not convex and not concave:
        return minimum_rational_cubic_control_parameter_value
    d_r_m_d_l = d_r - d_l
    d_r_m_s = d_r - s
    s_m_d_l = s - d_l
    r1 = -DBL_MAX
    r2 = r1
    # If monotone, we have r >= r1 where r1 := (d_l+d_r)/s.
    if monotonic:
        if not _is_zero(s):
            r1 = (d_r + d_l) / s
        elif prefer_shape_preservation_over_smoothness:
            r1 = maximum_rational_cubic_control_parameter_value
    if convex or concave:
        if not (_is_zero(s_m_d_l) or _is_zero(d_r_m_s)):
            r2 = max(fabs(d_r_m_d_l / d_r_m_s), fabs(d_r_m_d_l / s_m_d_l))
        elif prefer_shape_preservation_over_smoothness:
            r2 = maximum_rational_cubic_control_parameter_value
    elif monotonic and prefer_shape_preservation_over_smoothness:
        # Linear along segments whose secant disagrees with the edge slopes, e.g. a flat
        # segment with negative slopes on either edge.
        r2 = maximum_rational_cubic_control_parameter_value
    return max(minimum_rational_cubic_control_parameter_value, max(r1, r2))


def convex_rational_cubic_control_parameter_to_fit_second_derivative_at_left_side(
    x_l: float,
    x_r: float,
    y_l: float,
    y_r: float,
    d_l: float,
    d_r: float,
    second_derivative_l: float,
    prefer_shape_preservation_over_smoothness: bool,
) -> float:
    r = rational_cubic_control_parameter_to_fit_second_derivative_at_left_side(
        x_l, x_r, y_l, y_r, d_l, d_r, second_derivative_l
    )
    r_min = minimum_rational_cubic_control_parameter(
        d_l, d_r, (y_r - y_l) / (x_r - x_l), prefer_shape_preservation_over_smoothness
    )
    return max(r, r_min)


def convex_rational_cubic_control_parameter_to_fit_second_derivative_at_right_side(
    x_l: float,
    x_r: float,
    y_l: float,
    y_r: float,
    d_l: float,
    d_r: float,
    second_derivative_r: float,
    prefer_shape_preservation_over_smoothness: bool,
) -> float:
    r = rational_cubic_control_parameter_to_fit_second_derivative_at_right_side(
        x_l, x_r, y_l, y_r, d_l, d_r, second_derivative_r
    )
    r_min = minimum_rational_cubic_control_parameter(
        d_l, d_r, (y_r - y_l) / (x_r - x_l), prefer_shape_preservation_over_smoothness
    )
    return max(r, r_min)


class InterpolationNode(NamedTuple):
    x: float
    f: float
    fp: float


class RationalCubicInterpolant:
    """
    Rational cubic through two nodes (x, f(x), f'(x)) with control parameter r.

    Nodes whose abscissae do not increase from left to right yield the linear interpolant. So
    does `shape_preserving` when an end slope has the opposite sign of the secant, since the
    curve would otherwise overshoot one of the end values.
    """

    __slots__ = ("left", "right", "r")

    def __init__(self, left: InterpolationNode, right: InterpolationNode, r: float):
        self.left = left
        self.right = right
        self.r = r

    def __call__(self, x: float) -> float:
        return rational_cubic_interpolation(
            x,
            self.left.x,
            self.right.x,
            self.left.f,
            self.right.f,
            self.left.fp,
            self.right.fp,
            self.r,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.left!r}, {self.right!r}, r={self.r!r})"

    @classmethod
    def shape_preserving(
        cls, left: InterpolationNode, right: InterpolationNode
    ) -> "RationalCubicInterpolant":
        if not right.x > left.x:
            return cls(left, right, maximum_rational_cubic_control_parameter_value)
        secant = (right.f - left.f) / (right.x - left.x)
        return cls(
            left,
            right,
            minimum_rational_cubic_control_parameter(left.fp, right.fp, secant, True),
        )

    @classmethod
    def convex_fit_at_left(
        cls,
        left: InterpolationNode,
        right: InterpolationNode,
        second_derivative: float,
        prefer_shape_preservation_over_smoothness: bool,
    ) -> "RationalCubicInterpolant":
        if not right.x > left.x:
            return cls(left, right, maximum_rational_cubic_control_parameter_value)
        r = convex_rational_cubic_control_parameter_to_fit_second_derivative_at_left_side(
            left.x,
            right.x,
            left.f,
            right.f,
            left.fp,
            right.fp,
            second_derivative,
            prefer_shape_preservation_over_smoothness,
        )
        return cls(left, right, r)

    @classmethod
    def convex_fit_at_right(
        cls,
        left: InterpolationNode,
        right: InterpolationNode,
        second_derivative: float,
        prefer_shape_preservation_over_smoothness: bool,
    ) -> "RationalCubicInterpolant":
        if not right.x > left.x:
            return cls(left, right, maximum_rational_cubic_control_parameter_value)
        r = convex_rational_cubic_control_parameter_to_fit_second_derivative_at_right_side(
            left.x,
            right.x,
            left.f,
            right.f,
            left.fp,
            right.fp,
            second_derivative,
            prefer_shape_preservation_over_smoothness,
        )
        return cls(left, right, r)
