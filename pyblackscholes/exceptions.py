"""
pyblackscholes.exceptions
~~~~~~~~~~~~~~~~~~~~~~~~~

Errors raised by the pricing and implied volatility functions.

:copyright: © 2017 Gammon Capital LLC
:license: MIT, see LICENSE for more details.
"""


class ImpliedVolatilityError(Exception):
    "Base class for implied volatility errors."


class InvalidPrice(ImpliedVolatilityError, ValueError):
    "The price violates the static no-arbitrage bounds."


class BelowIntrinsicException(InvalidPrice):
    "The price is below the intrinsic value."


class AboveMaximumException(InvalidPrice):
    "The price is above the maximum value."


class ConvergenceFailure(ImpliedVolatilityError, ArithmeticError):
    "The iteration ended on a non-finite or negative volatility."


class DomainFailure(ImpliedVolatilityError, ValueError):
    "An input is outside the domain of the Black model (NaN, infinite or non-positive)."
