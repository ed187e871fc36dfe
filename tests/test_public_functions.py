import unittest
from math import exp, log, sqrt

import numpy as np

import pyblackscholes
from pyblackscholes import OptionType

DELTA = 1.0e-12


class TestPublicFunctions(unittest.TestCase):
    def test_black(self):
        actual = pyblackscholes.black(100, 100, 0.2, 0.5, OptionType.CALL)
        self.assertAlmostEqual(actual, 5.637197779701664, delta=DELTA)

    def test_black_discounted_forward(self):
        F = 146 * exp(0.053 * 2.35)
        actual = exp(-0.053 * 2.35) * pyblackscholes.black(
            F, 200, 0.315, 2.35, OptionType.CALL
        )
        self.assertAlmostEqual(actual, 17.78430959128285, delta=DELTA)

    def test_black_price(self):
        actual = pyblackscholes.black_price(100, 100, 0.2, 0.5, OptionType.CALL)
        self.assertIsInstance(actual, np.float64)
        self.assertAlmostEqual(actual, 5.637197779701664, delta=DELTA)

        actual = pyblackscholes.black_price(
            100, 100, 0.2, 0.5, OptionType.CALL, dtype=np.float32
        )
        self.assertIsInstance(actual, np.float32)
        self.assertAlmostEqual(float(actual), 5.637197779701664, delta=1e-6)

    def test_implied_volatility(self):
        actual = pyblackscholes.implied_volatility(
            5.637197779701664, 100, 100, 0.5, OptionType.CALL
        )
        self.assertAlmostEqual(actual, 0.2, delta=DELTA)

    def test_implied_volatility_from_a_transformed_rational_guess(self):
        actual = pyblackscholes.implied_volatility_from_a_transformed_rational_guess(
            5.637197779701664, 100, 100, 0.5, 1
        )
        self.assertAlmostEqual(actual, 0.2, delta=DELTA)

    def test_implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
        self,
    ):
        price = 6.54635543387
        actual = pyblackscholes.implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
            price, 100, 100, 0.5, 1, 1
        )
        self.assertAlmostEqual(actual, 0.232323232, delta=DELTA)

    def test_normalised_black(self):
        x = log(100 / 95)
        s = 0.3 * sqrt(0.5)

        actual_put = pyblackscholes.normalised_black(x, s, OptionType.PUT)
        self.assertAlmostEqual(actual_put, 0.061296663817558904, delta=DELTA)

        actual_call = pyblackscholes.normalised_black(x, s, OptionType.CALL)
        self.assertAlmostEqual(actual_call, 0.11259558142181655, delta=DELTA)

    def test_normalised_black_call(self):
        x = log(100 / 95)
        s = 0.3 * sqrt(0.5)

        actual = pyblackscholes.normalised_black_call(x, s)
        self.assertAlmostEqual(actual, 0.11259558142181655, delta=DELTA)

    def test_normalised_vega(self):
        for s, expected in (
            (0.0, 0.3989422804014327),
            (2.937528694999807, 0.13566415614561067),
            (0.2, 0.3969525474770118),
        ):
            with self.subTest(s=s):
                actual = pyblackscholes.normalised_vega(0.0, s)
                self.assertAlmostEqual(actual, expected, delta=DELTA)

    def test_normalised_volga(self):
        # At the money b''(s) = -s/4·b'(s).
        s = 0.2
        actual = pyblackscholes.normalised_volga(0.0, s)
        expected = -0.25 * s * 0.3969525474770118
        self.assertAlmostEqual(actual, expected, delta=DELTA)

    def test_normalised_implied_volatility_from_a_transformed_rational_guess(self):
        for x, s, q in ((0.0, 0.2, OptionType.CALL), (0.1, 0.23232323888, OptionType.PUT)):
            with self.subTest(x=x, s=s, q=q):
                beta = pyblackscholes.normalised_black(x, s, q)
                actual = pyblackscholes.normalised_implied_volatility_from_a_transformed_rational_guess(
                    beta, x, q
                )
                self.assertAlmostEqual(actual, s, delta=DELTA)

    def test_normalised_implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
        self,
    ):
        for x, s, q in ((0.0, 0.2, OptionType.CALL), (0.1, 0.23232323888, OptionType.PUT)):
            with self.subTest(x=x, s=s, q=q):
                beta = pyblackscholes.normalised_black(x, s, q)
                actual = pyblackscholes.normalised_implied_volatility_from_a_transformed_rational_guess_with_limited_iterations(
                    beta, x, q, 1
                )
                self.assertAlmostEqual(actual, s, delta=DELTA)


if __name__ == "__main__":
    unittest.main()
