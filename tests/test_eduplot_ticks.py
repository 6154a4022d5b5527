import math
import unittest

from eduplot.errors import UnsupportedTickIntervalError
from eduplot.ticks import MAX_TICKS, build_ticks, decimal_places, format_pi_label, is_finite_decimal


class BuildTicksTests(unittest.TestCase):
    def test_decimal_interval_has_exact_labels(self) -> None:
        ticks = build_ticks(0, 1, 0.1)
        self.assertEqual(ticks.values, tuple(i / 10 for i in range(11)))
        self.assertEqual(
            ticks.labels,
            ("0", "0.1", "0.2", "0.3", "0.4", "0.5", "0.6", "0.7", "0.8", "0.9", "1"),
        )

    def test_repeated_calls_are_identical(self) -> None:
        for args in ((0, 1, 0.1), (-2.5, 7.5, 0.25), (0, 2, 1 / 3), (-1, 1, 1 / 6), (-math.pi, 2 * math.pi, math.pi / 2)):
            first = build_ticks(*args)
            second = build_ticks(*args)
            self.assertEqual(first.values, second.values)
            self.assertEqual(first.labels, second.labels)
            self.assertGreater(len(first), 0)

    def test_values_and_labels_have_equal_length(self) -> None:
        for args in ((0, 10, 2), (-3, 3, 0.5), (0, 2, 1 / 3), (0, 2 * math.pi, math.pi / 4)):
            ticks = build_ticks(*args)
            self.assertEqual(len(ticks.values), len(ticks.labels))
            self.assertEqual(len(ticks), len(ticks.values))

    def test_negative_range_labels(self) -> None:
        ticks = build_ticks(-1, 1, 0.5)
        self.assertEqual(ticks.labels, ("-1", "-0.5", "0", "0.5", "1"))

    def test_start_is_first_multiple_inside_range(self) -> None:
        ticks = build_ticks(0.05, 1, 0.25)
        self.assertEqual(ticks.labels, ("0.25", "0.5", "0.75", "1"))
        self.assertAlmostEqual(ticks.values[0], 0.25)

    def test_thirds_use_fraction_labels(self) -> None:
        ticks = build_ticks(0, 2, 1 / 3)
        self.assertEqual(ticks.labels, ("0", "1/3", "2/3", "1", "4/3", "5/3", "2"))
        self.assertAlmostEqual(ticks.values[1], 1 / 3)
        self.assertEqual(ticks.values[-1], 2.0)

    def test_thirds_with_negative_start_round_up(self) -> None:
        ticks = build_ticks(-1.5, 1, 1 / 3)
        self.assertEqual(ticks.labels[0], "-4/3")
        self.assertEqual(ticks.labels[1], "-1")
        self.assertEqual(ticks.labels[-1], "1")

    def test_sixths_reduce_and_keep_terminating_halves_decimal(self) -> None:
        ticks = build_ticks(0, 1, 1 / 6)
        self.assertEqual(ticks.labels, ("0", "1/6", "1/3", "0.5", "2/3", "5/6", "1"))

    def test_pi_multiples_use_symbolic_labels(self) -> None:
        ticks = build_ticks(-math.pi, 2 * math.pi, math.pi / 2)
        self.assertEqual(ticks.labels, ("-π", "-π/2", "0", "π/2", "π", "3π/2", "2π"))
        self.assertAlmostEqual(ticks.values[-1], 2 * math.pi)

    def test_unsupported_interval_raises(self) -> None:
        with self.assertRaises(UnsupportedTickIntervalError) as ctx:
            build_ticks(0, 1, 1 / 7)
        self.assertAlmostEqual(ctx.exception.interval, 1 / 7)

    def test_invalid_range_returns_empty(self) -> None:
        self.assertEqual(len(build_ticks(5, 1, 1)), 0)
        self.assertEqual(len(build_ticks(0, 1, 0)), 0)
        self.assertEqual(len(build_ticks(0, 1, -0.5)), 0)

    def test_tick_count_is_capped(self) -> None:
        ticks = build_ticks(0, 1e6, 1)
        self.assertEqual(len(ticks), MAX_TICKS)


class TickHelperTests(unittest.TestCase):
    def test_finite_decimal_detection(self) -> None:
        self.assertTrue(is_finite_decimal(0.1))
        self.assertTrue(is_finite_decimal(2.0))
        self.assertFalse(is_finite_decimal(1 / 3))

    def test_decimal_places(self) -> None:
        self.assertEqual(decimal_places(50.0), 0)
        self.assertEqual(decimal_places(0.25), 2)
        self.assertEqual(decimal_places(1e-7), 7)

    def test_pi_label_reduction(self) -> None:
        self.assertEqual(format_pi_label(3, 2), "3π/2")
        self.assertEqual(format_pi_label(-2, 1), "-2π")
        self.assertEqual(format_pi_label(2, 4), "π/2")
        self.assertEqual(format_pi_label(0, 3), "0")


if __name__ == "__main__":
    unittest.main()
