import unittest

import numpy as np

from pyblackscholes.rationalcubic import (
    InterpolationNode,
    RationalCubicInterpolant,
    maximum_rational_cubic_control_parameter_value,
    minimum_rational_cubic_control_parameter,
    minimum_rational_cubic_control_parameter_value,
    rational_cubic_control_parameter_to_fit_second_derivative_at_left_side,
    rational_cubic_control_parameter_to_fit_second_derivative_at_right_side,
    rational_cubic_interpolation,
)

DELTA = 1.0e-14

# y = x³ on [0, 1]
CUBE = (0.0, 1.0, 0.0, 1.0, 0.0, 3.0)


class TestRationalCubicInterpolation(unittest.TestCase):
    def test_matches_end_values(self):
        for r in (0.0, 3.0, 10.0, 1e6):
            with self.subTest(r=r):
                self.assertEqual(rational_cubic_interpolation(0.0, *CUBE, r), 0.0)
                self.assertAlmostEqual(
                    rational_cubic_interpolation(1.0, *CUBE, r), 1.0, delta=DELTA
                )

    def test_r_equal_three_is_cubic_hermite(self):
        for x in (0.25, 0.5, 0.8):
            with self.subTest(x=x):
                actual = rational_cubic_interpolation(x, *CUBE, 3.0)
                self.assertAlmostEqual(actual, x**3, delta=DELTA)

    def test_maximum_control_parameter_is_linear(self):
        actual = rational_cubic_interpolation(
            0.25, *CUBE, maximum_rational_cubic_control_parameter_value
        )
        self.assertAlmostEqual(actual, 0.25, delta=DELTA)

    def test_large_control_parameter_approaches_linear(self):
        actual = rational_cubic_interpolation(0.25, *CUBE, 1e12)
        self.assertAlmostEqual(actual, 0.25, delta=1e-10)

    def test_coincident_abscissae_return_the_mean(self):
        actual = rational_cubic_interpolation(1.0, 1.0, 1.0, 2.0, 4.0, 0.0, 0.0, 3.0)
        self.assertEqual(actual, 3.0)

    def test_decreasing_abscissae_are_interpolated_linearly(self):
        actual = rational_cubic_interpolation(0.5, 1.0, 0.0, 2.0, 4.0, 7.0, -7.0, 3.0)
        self.assertAlmostEqual(actual, 3.0, delta=DELTA)

    def test_control_parameter_fits_second_derivative(self):
        # The cubic Hermite interpolant of x³ is x³ itself, with y''(0) = 0 and y''(1) = 6.
        r_left = rational_cubic_control_parameter_to_fit_second_derivative_at_left_side(
            *CUBE, 0.0
        )
        r_right = rational_cubic_control_parameter_to_fit_second_derivative_at_right_side(
            *CUBE, 6.0
        )
        self.assertAlmostEqual(r_left, 3.0, delta=DELTA)
        self.assertAlmostEqual(r_right, 3.0, delta=DELTA)

    def test_minimum_control_parameter_for_monotone_convex_data(self):
        self.assertAlmostEqual(
            minimum_rational_cubic_control_parameter(0.0, 3.0, 1.0, False),
            3.0,
            delta=DELTA,
        )

    def test_minimum_control_parameter_without_any_shape(self):
        self.assertEqual(
            minimum_rational_cubic_control_parameter(-1.0, -1.0, 1.0, True),
            maximum_rational_cubic_control_parameter_value,
        )
        self.assertEqual(
            minimum_rational_cubic_control_parameter(-1.0, -1.0, 1.0, False),
            minimum_rational_cubic_control_parameter_value,
        )

    def test_minimum_control_parameter_is_never_below_the_pole(self):
        r = minimum_rational_cubic_control_parameter(1.0, 1.0, 1.0, False)
        self.assertGreater(r, -1.0)


class TestRationalCubicInterpolant(unittest.TestCase):
    def test_shape_preserving_is_monotone_and_convex(self):
        left = InterpolationNode(0.0, 0.0, 0.1)
        right = InterpolationNode(1.0, 1.0, 5.0)
        f = RationalCubicInterpolant.shape_preserving(left, right)
        self.assertEqual(f(0.0), 0.0)
        self.assertAlmostEqual(f(1.0), 1.0, delta=DELTA)

        y = np.array([f(x) for x in np.linspace(0.0, 1.0, 201)])
        self.assertTrue(np.all(np.diff(y) >= 0))
        self.assertTrue(np.all(np.diff(y, 2) >= -1e-12))

    def test_shape_preserving_with_inconsistent_slopes_is_linear(self):
        left = InterpolationNode(0.0, 0.0, 10.0)
        right = InterpolationNode(1.0, 1.0, 10.0)
        f = RationalCubicInterpolant.shape_preserving(left, right)
        self.assertEqual(f.r, maximum_rational_cubic_control_parameter_value)
        self.assertAlmostEqual(f(0.5), 0.5, delta=DELTA)

    def test_shape_preserving_with_a_slope_against_the_secant_stays_within_the_end_values(self):
        # Convex slopes, but the left one points away from the right node.
        left = InterpolationNode(0.0, 0.0, -1.0)
        right = InterpolationNode(1.0, 1.0, 2.0)
        f = RationalCubicInterpolant.shape_preserving(left, right)
        self.assertEqual(f.r, maximum_rational_cubic_control_parameter_value)
        for x in np.linspace(0.0, 1.0, 101):
            with self.subTest(x=x):
                self.assertGreaterEqual(f(x), 0.0)
                self.assertLessEqual(f(x), 1.0 + DELTA)

    def test_minimum_control_parameter_with_a_slope_against_the_secant(self):
        self.assertEqual(
            minimum_rational_cubic_control_parameter(-1.0, 2.0, 1.0, True),
            maximum_rational_cubic_control_parameter_value,
        )
        self.assertLess(
            minimum_rational_cubic_control_parameter(-1.0, 2.0, 1.0, False),
            maximum_rational_cubic_control_parameter_value,
        )

    def test_degenerate_nodes(self):
        left = InterpolationNode(1.0, 2.0, 0.0)
        right = InterpolationNode(1.0, 4.0, 0.0)
        for constructor in (
            RationalCubicInterpolant.shape_preserving,
            lambda a, b: RationalCubicInterpolant.convex_fit_at_left(a, b, 0.0, True),
            lambda a, b: RationalCubicInterpolant.convex_fit_at_right(a, b, 0.0, True),
        ):
            with self.subTest(constructor=constructor):
                self.assertEqual(constructor(left, right)(1.0), 3.0)

    def test_convex_fit_at_left(self):
        left = InterpolationNode(0.0, 0.0, 0.0)
        right = InterpolationNode(1.0, 1.0, 3.0)
        f = RationalCubicInterpolant.convex_fit_at_left(left, right, 0.0, False)
        self.assertAlmostEqual(f.r, 3.0, delta=DELTA)
        self.assertAlmostEqual(f(0.5), 0.125, delta=DELTA)

    def test_convex_fit_at_right(self):
        left = InterpolationNode(0.0, 0.0, 0.0)
        right = InterpolationNode(1.0, 1.0, 3.0)
        f = RationalCubicInterpolant.convex_fit_at_right(left, right, 6.0, False)
        self.assertAlmostEqual(f.r, 3.0, delta=DELTA)
        self.assertAlmostEqual(f(0.5), 0.125, delta=DELTA)

    def test_convex_fit_is_raised_to_preserve_shape(self):
        # A second derivative of -100 at the left asks for a concave start on convex data.
        left = InterpolationNode(0.0, 0.0, 0.0)
        right = InterpolationNode(1.0, 1.0, 3.0)
        f = RationalCubicInterpolant.convex_fit_at_left(left, right, -100.0, False)
        self.assertGreaterEqual(
            f.r, minimum_rational_cubic_control_parameter(0.0, 3.0, 1.0, False)
        )


if __name__ == "__main__":
    unittest.main()
