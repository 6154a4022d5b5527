import unittest

from eduplot.layout import (
    ChartArea,
    Extents,
    calculate_line_legend_layout,
    calculate_right_y_axis_layout,
    calculate_title_layout,
    calculate_x_axis_layout,
    calculate_y_axis_layout,
    select_axis_labels,
)
from eduplot.text import (
    abbreviate_month,
    escape_text,
    estimate_text_width,
    estimate_wrapped_text_dimensions,
    format_number,
    wrap_text,
)


def _gaps(labels, positions, keep, char_width=7.0):
    picked = sorted(keep)
    out = []
    for a, b in zip(picked, picked[1:]):
        half = (len(labels[a]) + len(labels[b])) * char_width / 2.0
        out.append(abs(positions[b] - positions[a]) - half)
    return out


class SelectAxisLabelsTests(unittest.TestCase):
    def test_all_labels_kept_when_they_fit(self) -> None:
        keep = select_axis_labels(["0", "1", "2"], [0.0, 100.0, 200.0], 200.0, "horizontal", 12.0, 10.0)
        self.assertEqual(keep, {0, 1, 2})

    def test_dense_labels_are_thinned_by_stride(self) -> None:
        labels = ["10"] * 21
        positions = [i * 10.0 for i in range(21)]
        keep = select_axis_labels(labels, positions, 200.0, "horizontal", 12.0, 10.0)
        self.assertEqual(keep, {0, 3, 6, 9, 12, 15, 18})
        for gap in _gaps(labels, positions, keep):
            self.assertGreaterEqual(gap, 10.0)

    def test_stride_grows_until_real_sizes_fit(self) -> None:
        labels = ["1000000000", "2", "3000000000", "4"]
        positions = [0.0, 35.0, 70.0, 105.0]
        keep = select_axis_labels(labels, positions, 105.0, "horizontal", 12.0, 10.0)
        self.assertEqual(keep, {0, 3})

    def test_vertical_labels_use_font_height(self) -> None:
        keep = select_axis_labels(["1"] * 5, [0.0, 10.0, 20.0, 30.0, 40.0], 40.0, "vertical", 12.0, 4.0)
        self.assertEqual(keep, {0, 3})

    def test_empty_labels_are_never_selected(self) -> None:
        keep = select_axis_labels(["", "a", ""], [0.0, 50.0, 100.0], 100.0, "horizontal")
        self.assertEqual(keep, {1})
        self.assertEqual(select_axis_labels(["", ""], [0.0, 1.0], 10.0, "horizontal"), set())

    def test_length_mismatch_raises(self) -> None:
        with self.assertRaisesRegex(ValueError, "equal length"):
            select_axis_labels(["a", "b"], [0.0], 100.0, "horizontal")


class LayoutHelperTests(unittest.TestCase):
    def test_chart_area_edges(self) -> None:
        area = ChartArea(left=10.0, top=20.0, width=100.0, height=50.0)
        self.assertEqual(area.right, 110.0)
        self.assertEqual(area.bottom, 70.0)
        self.assertTrue(area.contains(10.0, 70.0))
        self.assertFalse(area.contains(9.0, 30.0))

    def test_extents_include_and_intersect(self) -> None:
        ext = Extents(min_x=0.0, max_x=10.0, min_y=0.0, max_y=10.0).include(-5.0, 3.0, 2.0, 20.0)
        self.assertEqual(ext, Extents(min_x=-5.0, max_x=10.0, min_y=0.0, max_y=20.0))
        clipped = ext.intersect(ChartArea(left=0.0, top=0.0, width=4.0, height=4.0))
        self.assertEqual(clipped, Extents(min_x=0.0, max_x=4.0, min_y=0.0, max_y=4.0))
        self.assertIsNone(ext.intersect(ChartArea(left=100.0, top=0.0, width=4.0, height=4.0)))

    def test_title_layout_reserves_space_only_with_title(self) -> None:
        self.assertEqual(calculate_title_layout(None, 400.0), 0.0)
        self.assertGreater(calculate_title_layout("Population", 400.0), 20.0)

    def test_y_axis_layout_grows_with_label_width(self) -> None:
        narrow, _ = calculate_y_axis_layout(["1"], None, 300.0)
        wide, _ = calculate_y_axis_layout(["1000000"], None, 300.0)
        self.assertAlmostEqual(wide - narrow, 6 * 7.0)
        with_title, title_x = calculate_y_axis_layout(["1"], "Count", 300.0)
        self.assertGreater(with_title, narrow)
        self.assertGreater(title_x, 20.0)

    def test_right_y_axis_layout_mirrors_left(self) -> None:
        left, left_title_x = calculate_y_axis_layout(["10", "20"], "Rate", 300.0)
        right, inset = calculate_right_y_axis_layout(["10", "20"], "Rate", 300.0)
        self.assertAlmostEqual(right, left)
        self.assertAlmostEqual(inset, left_title_x)

    def test_x_axis_layout_adds_title_height(self) -> None:
        self.assertGreater(calculate_x_axis_layout("Month", 300.0), calculate_x_axis_layout(None, 300.0))

    def test_line_legend_layout(self) -> None:
        self.assertEqual(calculate_line_legend_layout([]), (0.0, 0.0))
        width, height = calculate_line_legend_layout(["a", "bb"], font_px=10.0, row_gap_px=5.0)
        self.assertAlmostEqual(width, 20.0 + 8.0 + 12.0)
        self.assertAlmostEqual(height, 25.0)


class TextTests(unittest.TestCase):
    def test_estimate_text_width(self) -> None:
        self.assertAlmostEqual(estimate_text_width("abc", 10.0), 18.0)

    def test_wrap_text_greedy_and_newlines(self) -> None:
        self.assertEqual(wrap_text("one two three", 50.0, 10.0), ["one two", "three"])
        self.assertEqual(wrap_text("a\nb", 1000.0, 10.0), ["a", "b"])
        self.assertEqual(wrap_text("", 10.0, 10.0), [""])

    def test_wrapped_dimensions(self) -> None:
        dims = estimate_wrapped_text_dimensions("one two three", 50.0, 10.0, 1.2)
        self.assertAlmostEqual(dims.height, 24.0)
        self.assertEqual(dims.max_width, 50.0)

    def test_abbreviate_month(self) -> None:
        self.assertEqual(abbreviate_month("January"), "Jan")
        self.assertEqual(abbreviate_month("september"), "Sep")
        self.assertEqual(abbreviate_month("Q1"), "Q1")

    def test_format_number_strips_float_noise(self) -> None:
        self.assertEqual(format_number(50.0), "50")
        self.assertEqual(format_number(0.1 + 0.2), "0.3")
        self.assertEqual(format_number(-0.00001), "0")
        self.assertEqual(format_number(-2.5), "-2.5")

    def test_escape_text(self) -> None:
        self.assertEqual(escape_text('a<b & "c"'), "a&lt;b &amp; &quot;c&quot;")
        self.assertEqual(escape_text("it's"), "it&#x27;s")


if __name__ == "__main__":
    unittest.main()
