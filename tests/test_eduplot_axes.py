import math
import unittest

from eduplot.axes import (
    AxisDomain,
    CategoryXAxis,
    NumericXAxis,
    YAxis,
    compute_and_render_x_axis,
    compute_and_render_y_axis,
    draw_chart_title,
)
from eduplot.chart import ChartOptions, setup_chart_axes
from eduplot.errors import (
    InvalidAxisDomainError,
    InvalidCategoriesError,
    InvalidDimensionsError,
    InvalidTickIntervalError,
)
from eduplot.layout import ChartArea, calculate_right_y_axis_layout
from eduplot.svg import SvgCanvas
from eduplot.theme import DEFAULT_THEME

AREA = ChartArea(left=50.0, top=20.0, width=400.0, height=200.0)


class XAxisTests(unittest.TestCase):
    def test_empty_domain_raises_before_drawing(self) -> None:
        canvas = SvgCanvas()
        spec = NumericXAxis(label="x", domain=AxisDomain(5, 5), tick_interval=1)
        with self.assertRaises(InvalidAxisDomainError) as ctx:
            compute_and_render_x_axis(spec, AREA, canvas)
        self.assertEqual((ctx.exception.minimum, ctx.exception.maximum), (5, 5))
        self.assertIn("x-axis min 5 must be less than max 5", str(ctx.exception))
        self.assertIsNone(canvas.extents)

    def test_non_positive_interval_raises(self) -> None:
        spec = NumericXAxis(label="", domain=AxisDomain(0, 10), tick_interval=0)
        with self.assertRaises(InvalidTickIntervalError):
            compute_and_render_x_axis(spec, AREA, SvgCanvas())

    def test_empty_categories_raise(self) -> None:
        for scale_type in ("categoryBand", "categoryPoint"):
            with self.assertLogs("eduplot.axes", level="ERROR") as logs:
                with self.assertRaises(InvalidCategoriesError) as ctx:
                    compute_and_render_x_axis(
                        CategoryXAxis(label="", categories=(), scale_type=scale_type), AREA, SvgCanvas()
                    )
            self.assertIn(scale_type, str(ctx.exception))
            self.assertIn("no categories", logs.output[0])

    def test_numeric_mapping_and_labels(self) -> None:
        canvas = SvgCanvas()
        spec = NumericXAxis(label="Time (s)", domain=AxisDomain(0, 10), tick_interval=2)
        result = compute_and_render_x_axis(spec, AREA, canvas)
        self.assertIsNone(result.band_width)
        self.assertEqual(result.to_svg(0), 50.0)
        self.assertEqual(result.to_svg(5), 250.0)
        self.assertEqual(result.to_svg(10), 450.0)
        body = canvas.finalize(0).svg_body
        for label in ("0", "2", "4", "6", "8", "10"):
            self.assertIn(f">{label}</text>", body)
        self.assertEqual(body.count(f'stroke="{DEFAULT_THEME.grid_major}"'), 6)
        self.assertIn(">Time (s)</tspan>", body)

    def test_band_scale_centers(self) -> None:
        canvas = SvgCanvas()
        spec = CategoryXAxis(label="", categories=("A", "B", "C", "D"), show_grid_lines=True)
        result = compute_and_render_x_axis(spec, AREA, canvas)
        self.assertEqual(result.band_width, 100.0)
        self.assertEqual(result.to_svg(0), 100.0)
        self.assertEqual(result.to_svg(3), 400.0)
        body = canvas.finalize(0).svg_body
        self.assertNotIn(DEFAULT_THEME.grid_major, body)
        self.assertIn(">D</text>", body)

    def test_point_scale_spans_axis(self) -> None:
        result = compute_and_render_x_axis(
            CategoryXAxis(label="", categories=("a", "b", "c"), scale_type="categoryPoint"), AREA, SvgCanvas()
        )
        self.assertIsNone(result.band_width)
        self.assertEqual(result.to_svg(0), 50.0)
        self.assertEqual(result.to_svg(2), 450.0)

    def test_hidden_ticks_and_labels(self) -> None:
        canvas = SvgCanvas()
        spec = NumericXAxis(
            label="",
            domain=AxisDomain(0, 4),
            tick_interval=1,
            show_grid_lines=False,
            show_tick_labels=False,
            show_ticks=False,
        )
        compute_and_render_x_axis(spec, AREA, canvas)
        body = canvas.finalize(0).svg_body
        self.assertEqual(body.count("<line"), 1)
        self.assertNotIn("<text", body)

    def test_label_formatter_receives_tick_values(self) -> None:
        seen: list[float] = []

        def percent(value: float) -> str:
            seen.append(value)
            return f"{value * 100:.0f}%"

        canvas = SvgCanvas()
        spec = NumericXAxis(label="", domain=AxisDomain(0, 1), tick_interval=0.5, label_formatter=percent)
        compute_and_render_x_axis(spec, AREA, canvas)
        body = canvas.finalize(0).svg_body
        self.assertEqual(seen, [0.0, 0.5, 1.0])
        self.assertIn(">50%</text>", body)
        self.assertIn(">100%</text>", body)

    def test_single_point_category_is_centered(self) -> None:
        result = compute_and_render_x_axis(
            CategoryXAxis(label="", categories=("only",), scale_type="categoryPoint"), AREA, SvgCanvas()
        )
        self.assertEqual(result.to_svg(0), AREA.left + AREA.width / 2.0)
        self.assertIsNone(result.band_width)


class YAxisTests(unittest.TestCase):
    def test_numeric_mapping_is_inverted(self) -> None:
        canvas = SvgCanvas()
        result = compute_and_render_y_axis(
            YAxis(label="Count", domain=AxisDomain(0, 10), tick_interval=5), AREA, canvas, 20.0
        )
        self.assertEqual(result.to_svg(0), 220.0)
        self.assertEqual(result.to_svg(10), 20.0)
        body = canvas.finalize(0).svg_body
        self.assertIn('text-anchor="end"', body)
        self.assertIn("rotate(-90 20 120)", body)

    def test_label_formatter_formats_pi_ticks_by_value(self) -> None:
        canvas = SvgCanvas()
        spec = YAxis(
            label="", domain=AxisDomain(0, 3.2), tick_interval=math.pi / 2, label_formatter=lambda v: f"{v:.2f}"
        )
        compute_and_render_y_axis(spec, AREA, canvas, 20.0)
        body = canvas.finalize(0).svg_body
        self.assertIn(">1.57</text>", body)
        self.assertIn(">3.14</text>", body)
        self.assertNotIn("π", body)

    def test_invalid_domain_raises(self) -> None:
        with self.assertRaises(InvalidAxisDomainError):
            compute_and_render_y_axis(YAxis(label="", domain=AxisDomain(3, 1), tick_interval=1), AREA, SvgCanvas(), 0.0)
        with self.assertRaises(InvalidTickIntervalError):
            compute_and_render_y_axis(YAxis(label="", domain=AxisDomain(0, 1), tick_interval=-1), AREA, SvgCanvas(), 0.0)

    def test_categorical_band_centers(self) -> None:
        canvas = SvgCanvas()
        result = compute_and_render_y_axis(
            YAxis(label="", categories=("low", "high"), show_grid_lines=True), AREA, canvas, 0.0
        )
        self.assertEqual(result.band_width, 100.0)
        self.assertEqual(result.to_svg(0), 70.0)
        self.assertNotIn(DEFAULT_THEME.grid_major, canvas.finalize(0).svg_body)

    def test_empty_categories_raise(self) -> None:
        with self.assertRaises(InvalidCategoriesError):
            compute_and_render_y_axis(YAxis(label="", categories=()), AREA, SvgCanvas(), 0.0)

    def test_right_placement(self) -> None:
        canvas = SvgCanvas()
        compute_and_render_y_axis(
            YAxis(label="Rate", domain=AxisDomain(0, 1), tick_interval=0.5, placement="right"), AREA, canvas, 500.0
        )
        body = canvas.finalize(0).svg_body
        self.assertNotIn('text-anchor="end"', body)
        self.assertIn("rotate(90 500 120)", body)
        self.assertIn('x1="450" y1="20" x2="450" y2="220"', body)


class ChartTitleTests(unittest.TestCase):
    def test_title_height_reported(self) -> None:
        canvas = SvgCanvas()
        used = draw_chart_title(canvas, "Rainfall", 400.0)
        self.assertAlmostEqual(used, 20.0 + 18.0 * 1.2)
        body = canvas.finalize(0).svg_body
        self.assertIn(">Rainfall</tspan>", body)
        self.assertIn('font-weight="600"', body)


class ChartSetupTests(unittest.TestCase):
    def _options(self, placement: str) -> ChartOptions:
        return ChartOptions(
            width=400,
            height=300,
            x_axis=NumericXAxis(label="t", domain=AxisDomain(0, 10), tick_interval=2),
            y_axis=YAxis(label="Rate", domain=AxisDomain(0, 1), tick_interval=0.5, placement=placement),
        )

    def test_right_axis_reserves_right_margin(self) -> None:
        canvas = SvgCanvas(chart_area=ChartArea(0.0, 0.0, 400.0, 300.0))
        chart = setup_chart_axes(self._options("right"), canvas)
        margin, _ = calculate_right_y_axis_layout(["0", "0.5", "1"], "Rate", 300.0 - 30.0 - 20.0)
        self.assertEqual(chart.chart_area.left, 20.0)
        self.assertAlmostEqual(chart.chart_area.right, 400.0 - margin)

    def test_left_axis_mapping(self) -> None:
        canvas = SvgCanvas(chart_area=ChartArea(0.0, 0.0, 400.0, 300.0))
        chart = setup_chart_axes(self._options("left"), canvas)
        area = chart.chart_area
        self.assertAlmostEqual(chart.to_svg_x(0), area.left)
        self.assertAlmostEqual(chart.to_svg_y(1), area.top)
        self.assertIsNone(chart.band_width)

    def test_too_small_raises(self) -> None:
        options = ChartOptions(
            width=40,
            height=30,
            x_axis=NumericXAxis(label="", domain=AxisDomain(0, 1), tick_interval=1),
            y_axis=YAxis(label="", domain=AxisDomain(0, 1), tick_interval=1),
        )
        with self.assertRaises(InvalidDimensionsError):
            setup_chart_axes(options, SvgCanvas())


if __name__ == "__main__":
    unittest.main()
