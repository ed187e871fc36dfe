import unittest

import numpy as np

from pyblackscholes.precision import (
    implied_volatility_maximum_iterations,
    precision_floor,
    to_dtype,
)


class TestPrecision(unittest.TestCase):
    def test_maximum_iterations(self):
        self.assertEqual(implied_volatility_maximum_iterations(np.float32), 1)
        self.assertEqual(implied_volatility_maximum_iterations(np.float64), 2)
        self.assertEqual(implied_volatility_maximum_iterations(), 2)
        self.assertEqual(implied_volatility_maximum_iterations("float32"), 1)

    def test_precision_floor(self):
        self.assertEqual(precision_floor(np.float64), 2.220446049250313e-16)
        self.assertEqual(precision_floor(np.float32), float(np.finfo(np.float32).eps))

    def test_to_dtype(self):
        self.assertIsInstance(to_dtype(0.2, np.float32), np.float32)
        self.assertIsInstance(to_dtype(0.2), np.float64)

    def test_unsupported_widths(self):
        for dtype in (np.float16, np.int64, np.complex128):
            with self.subTest(dtype=dtype):
                with self.assertRaises(TypeError):
                    implied_volatility_maximum_iterations(dtype)
                with self.assertRaises(TypeError):
                    precision_floor(dtype)


if __name__ == "__main__":
    unittest.main()
