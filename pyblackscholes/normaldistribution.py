"""
pyblackscholes.normaldistribution
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Standard normal distribution functions that stay accurate far into the tails.

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

from math import exp

from scipy.special import erfcx, ndtr, ndtri

from pyblackscholes.constants import ONE_OVER_SQRT_TWO, ONE_OVER_SQRT_TWO_PI

# Below this argument Φ(z) is evaluated as exp(-z²/2)·erfcx(-z/√2)/2. Cody's erfcx needs no
# exponential for arguments above 4, i.e. z < -4·√2.
NORM_CDF_ERFCX_THRESHOLD = -5.656854249492380195206754896838792314199


def norm_pdf(x: float) -> float:
    return ONE_OVER_SQRT_TWO_PI * exp(-0.5 * x * x)


def norm_cdf(z: float) -> float:
    """
    Cumulative standard normal distribution Φ(z).

    In the lower tail we use

        Φ(z) = ½ · exp(-z²/2) · erfcx(-z/√2)

    so that the only loss of accuracy comes from the single exponential, rather than computing
    1 - Φ(-z) or an erfc of a large argument. Φ(+∞) = 1 and Φ(-∞) = 0.
    """
    if z < NORM_CDF_ERFCX_THRESHOLD:
        return 0.5 * exp(-0.5 * z * z) * erfcx(-ONE_OVER_SQRT_TWO * z)
    return float(ndtr(z))


def inverse_norm_cdf(p: float) -> float:
    return float(ndtri(p))


__all__ = ["erfcx", "inverse_norm_cdf", "norm_cdf", "norm_pdf"]
