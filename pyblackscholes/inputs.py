"""
pyblackscholes.inputs
~~~~~~~~~~~~~~~~~~~~~

Option parameters shared by the pricing, greeks and implied volatility functions.

:copyright: © 2017 Gammon Capital LLC
:license: MIT, see LICENSE for more details.
"""

from dataclasses import dataclass
from enum import IntEnum
from math import isfinite
from typing import Optional


class OptionType(IntEnum):
    """The theta sign of the option: +1 for calls and -1 for puts."""

    CALL = 1
    PUT = -1

    def __neg__(self) -> "OptionType":
        return OptionType.PUT if self is OptionType.CALL else OptionType.CALL


@dataclass
class Inputs:
    """
    option_type: call or put
    s: spot price of the underlying
    k: strike price
    p: option price, required for implied volatility
    r: continuously compounded risk-free rate
    q: continuous dividend yield
    t: time to maturity in years
    sigma: volatility, required for prices and greeks
    """

    option_type: OptionType
    s: float
    k: float
    p: Optional[float]
    r: float
    q: float
    t: float
    sigma: Optional[float]

    def __post_init__(self):
        self.option_type = OptionType(self.option_type)
        for name in ("s", "k", "r", "q", "t"):
            value = getattr(self, name)
            if not isfinite(value):
                raise ValueError(f"Expected a finite value for {name}, received {value!r}")
        for name in ("s", "k"):
            if not getattr(self, name) > 0:
                raise ValueError(f"Expected a positive value for {name}, received {getattr(self, name)!r}")
        if not self.t > 0:
            raise ValueError(f"Expected a positive time to maturity, received {self.t!r}")

    @property
    def theta(self) -> float:
        return float(self.option_type)

    def require_sigma(self) -> float:
        if self.sigma is None:
            raise ValueError("Expected a float for sigma, received None")
        if not (isfinite(self.sigma) and self.sigma > 0):
            raise ValueError(f"Expected a positive finite sigma, received {self.sigma!r}")
        return self.sigma

    def require_price(self) -> float:
        if self.p is None:
            raise ValueError("Option price is required, received None for p")
        return self.p
