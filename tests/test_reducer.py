import math
import unittest
from functools import reduce

from chembalance.config import BalancerConfig
from chembalance.reducer import approximate_fraction, reduce_to_integers


class TestApproximateFraction(unittest.TestCase):
    def test_smallest_denominator_wins(self):
        self.assertEqual(approximate_fraction(0.75), (3, 4, True))
        self.assertEqual(approximate_fraction(2.0), (2, 1, True))
        self.assertEqual(approximate_fraction(1.0 / 6.0), (1, 6, True))
        self.assertEqual(approximate_fraction(-0.5), (-1, 2, True))

    def test_fallback_when_search_bound_is_exceeded(self):
        config = BalancerConfig(max_denominator=2)
        self.assertEqual(approximate_fraction(1.0 / 3.0, config), (333, 1000, False))


class TestReduceToIntegers(unittest.TestCase):
    def test_water(self):
        reduction = reduce_to_integers([1.0, 0.5, 1.0])
        self.assertTrue(reduction.success)
        self.assertTrue(reduction.exact)
        self.assertEqual(reduction.coefficients, (2, 1, 2))
        self.assertEqual(reduction.denominators, (1, 2, 1))

    def test_glucose(self):
        reduction = reduce_to_integers([1.0 / 6.0, 1.0, 1.0, 1.0])
        self.assertEqual(reduction.coefficients, (1, 6, 6, 6))

    def test_common_factor_is_divided_out(self):
        reduction = reduce_to_integers([2.0, 4.0, 6.0])
        self.assertEqual(reduction.coefficients, (1, 2, 3))
        self.assertEqual(reduce(math.gcd, reduction.coefficients), 1)

    def test_all_negative_vector_is_flipped(self):
        reduction = reduce_to_integers([-1.0, -0.5, -1.0])
        self.assertTrue(reduction.success)
        self.assertEqual(reduction.coefficients, (2, 1, 2))

    def test_mixed_signs_fail(self):
        reduction = reduce_to_integers([-2.0, 2.0, 1.0])
        self.assertFalse(reduction.success)
        self.assertEqual(reduction.coefficients, (-2, 2, 1))

    def test_zero_coefficient_fails(self):
        reduction = reduce_to_integers([0.0, 1.0, 1.0])
        self.assertFalse(reduction.success)
        self.assertIn("zero or negative", reduction.message)

    def test_empty_vector_fails(self):
        self.assertFalse(reduce_to_integers([]).success)

    def test_fallback_is_flagged(self):
        # 1/1009 has no denominator <= 1000
        with self.assertLogs("chembalance.reducer", level="WARNING"):
            reduction = reduce_to_integers([1.0 / 1009.0, 1.0])
        self.assertTrue(reduction.success)
        self.assertFalse(reduction.exact)
        self.assertEqual(reduction.coefficients, (1, 1000))


if __name__ == '__main__':
    unittest.main()
