# -*- coding: utf-8 -*-

"""
pyblackscholes
~~~~~~~~~~~~~~

Black-Scholes prices, greeks and implied volatilities, the latter by way of Peter Jaeckel's LetsBeRational.

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

from pyblackscholes.black import (
    black,
    normalised_black,
    normalised_black_call,
    normalised_intrinsic,
    normalised_vega,
    normalised_volga,
)
from pyblackscholes.exceptions import (
    AboveMaximumException,
    BelowIntrinsicException,
    ConvergenceFailure,
    DomainFailure,
    ImpliedVolatilityError,
    InvalidPrice,
)
from pyblackscholes.greeks import (
    calc_all_greeks,
    calc_charm,
    calc_color,
    calc_delta,
    calc_dual_delta,
    calc_dual_gamma,
    calc_epsilon,
    calc_gamma,
    calc_lambda,
    calc_rho,
    calc_speed,
    calc_theta,
    calc_ultima,
    calc_vanna,
    calc_vega,
    calc_veta,
    calc_vomma,
    calc_zomma,
)
from pyblackscholes.implied_volatility import calc_iv, calc_rational_iv
from pyblackscholes.inputs import Inputs, OptionType
from pyblackscholes.lets_be_rational import (
    IterationState,
    Region,
    black_price,
    classify_region,
    implied_volatility,
    implied_volatility_from_a_transformed_rational_guess,
    implied_volatility_from_a_transformed_rational_guess_with_limited_iterations,
    initial_guess,
    normalised_implied_volatility_from_a_transformed_rational_guess,
    normalised_implied_volatility_from_a_transformed_rational_guess_with_limited_iterations,
    solve_normalised_implied_volatility,
)
from pyblackscholes.normaldistribution import inverse_norm_cdf, norm_cdf, norm_pdf
from pyblackscholes.precision import (
    implied_volatility_maximum_iterations,
    precision_floor,
)
from pyblackscholes.pricing import calc_price, calc_rational_price
from pyblackscholes.rationalcubic import (
    InterpolationNode,
    RationalCubicInterpolant,
    rational_cubic_interpolation,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())
