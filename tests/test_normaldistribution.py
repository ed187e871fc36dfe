import unittest
from math import exp, inf

from scipy.special import log_ndtr, ndtr

from pyblackscholes.normaldistribution import (
    NORM_CDF_ERFCX_THRESHOLD,
    inverse_norm_cdf,
    norm_cdf,
    norm_pdf,
)

DELTA = 1.0e-15


class TestNormalDistribution(unittest.TestCase):
    def test_norm_cdf_at_zero_and_infinity(self):
        self.assertEqual(norm_cdf(0.0), 0.5)
        self.assertEqual(norm_cdf(inf), 1.0)
        self.assertEqual(norm_cdf(-inf), 0.0)

    def test_norm_cdf_symmetry(self):
        for z in (0.1, 0.5, 1.0, 2.0, 3.0):
            with self.subTest(z=z):
                self.assertAlmostEqual(norm_cdf(z) + norm_cdf(-z), 1.0, delta=DELTA)

    def test_norm_cdf_lower_tail(self):
        # Relative accuracy deep in the tail, far beyond where 1-Φ(-z) is of any use.
        for z in (-6.0, -10.0, -20.0, -30.0, -37.0):
            with self.subTest(z=z):
                expected = exp(log_ndtr(z))
                actual = norm_cdf(z)
                self.assertGreater(actual, 0.0)
                self.assertAlmostEqual(actual / expected, 1.0, delta=1e-12)

    def test_norm_cdf_underflows_to_zero(self):
        self.assertEqual(norm_cdf(-40.0), 0.0)

    def test_norm_cdf_is_continuous_across_the_erfcx_threshold(self):
        below = norm_cdf(NORM_CDF_ERFCX_THRESHOLD - 1e-12)
        above = norm_cdf(NORM_CDF_ERFCX_THRESHOLD)
        expected = float(ndtr(NORM_CDF_ERFCX_THRESHOLD))
        self.assertAlmostEqual(below / expected, 1.0, delta=1e-10)
        self.assertAlmostEqual(above / expected, 1.0, delta=1e-14)

    def test_norm_pdf(self):
        self.assertAlmostEqual(norm_pdf(0.0), 0.3989422804014327, delta=DELTA)
        self.assertAlmostEqual(norm_pdf(1.0), norm_pdf(-1.0), delta=DELTA)
        self.assertAlmostEqual(norm_pdf(1.0), 0.24197072451914337, delta=DELTA)
        self.assertEqual(norm_pdf(50.0), 0.0)

    def test_inverse_norm_cdf(self):
        self.assertEqual(inverse_norm_cdf(0.5), 0.0)
        for z in (-5.0, -2.0, -0.3, 0.7, 3.0):
            with self.subTest(z=z):
                self.assertAlmostEqual(inverse_norm_cdf(norm_cdf(z)), z, delta=1e-9)


if __name__ == "__main__":
    unittest.main()
