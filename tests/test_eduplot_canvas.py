import unittest

from eduplot.errors import CanvasError
from eduplot.layout import ChartArea
from eduplot.svg import GradientStop, LegendRow, PathBuilder, Rotation, SvgCanvas, to_svg_document


class CanvasFinalizeTests(unittest.TestCase):
    def test_finalize_pads_tracked_extents(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_circle(50, 50, 5)
        result = canvas.finalize(10)
        self.assertEqual((result.vb_min_x, result.vb_min_y, result.width, result.height), (35, 35, 30, 30))
        self.assertEqual(result.view_box, "35 35 30 30")
        self.assertTrue(result.svg_body.startswith("<defs>"))

    def test_chart_area_seeds_extents(self) -> None:
        canvas = SvgCanvas(chart_area=ChartArea(left=0.0, top=0.0, width=100.0, height=50.0))
        result = canvas.finalize(0)
        self.assertEqual((result.vb_min_x, result.vb_min_y, result.width, result.height), (0, 0, 100, 50))

    def test_finalize_rounds_outward(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_rect(0.5, 0.5, 10.2, 10.2)
        result = canvas.finalize(0)
        self.assertEqual((result.vb_min_x, result.vb_min_y), (0, 0))
        self.assertEqual((result.width, result.height), (11, 11))

    def test_finalize_only_once(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_circle(0, 0, 1)
        canvas.finalize(0)
        with self.assertRaises(CanvasError):
            canvas.finalize(0)
        with self.assertRaises(CanvasError):
            canvas.draw_circle(0, 0, 1)

    def test_empty_canvas_cannot_finalize(self) -> None:
        with self.assertRaises(CanvasError):
            SvgCanvas().finalize(8)

    def test_invalid_defaults_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "font_px_default"):
            SvgCanvas(font_px_default=0)
        with self.assertRaisesRegex(ValueError, "line_height_default"):
            SvgCanvas(line_height_default=-1)

    def test_document_wraps_body(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_circle(50, 50, 5)
        svg = to_svg_document(canvas.finalize(10))
        self.assertTrue(svg.startswith('<svg width="30" height="30" viewBox="35 35 30 30"'))
        self.assertIn('xmlns="http://www.w3.org/2000/svg"', svg)
        self.assertTrue(svg.endswith("</svg>"))


class CanvasExtentTests(unittest.TestCase):
    def test_stroke_width_expands_extents(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_line(0, 0, 10, 0, stroke="#000000", stroke_width=2)
        ext = canvas.extents
        self.assertEqual((ext.min_y, ext.max_y), (-1.0, 1.0))

    def test_text_outside_chart_area_grows_viewbox(self) -> None:
        canvas = SvgCanvas(chart_area=ChartArea(left=0.0, top=0.0, width=100.0, height=100.0))
        canvas.draw_text(-40, 50, "label")
        result = canvas.finalize(8)
        self.assertEqual(result.vb_min_x, -48)

    def test_anchor_shifts_text_box(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_text(100, 50, "abcde", anchor="end", font_px=10)
        self.assertAlmostEqual(canvas.extents.min_x, 70.0)
        self.assertAlmostEqual(canvas.extents.max_x, 100.0)

    def test_rotated_text_box(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_text(
            0, 0, "abcdefghij", anchor="middle", baseline="middle", font_px=10, rotate=Rotation(-90, 0, 0)
        )
        ext = canvas.extents
        self.assertAlmostEqual(ext.min_x, -5.0)
        self.assertAlmostEqual(ext.max_x, 5.0)
        self.assertAlmostEqual(ext.min_y, -30.0)
        self.assertAlmostEqual(ext.max_y, 30.0)

    def test_translated_group_offsets_extents(self) -> None:
        canvas = SvgCanvas()
        with canvas.translated(10, 20):
            canvas.draw_circle(0, 0, 1)
        self.assertEqual((canvas.extents.min_x, canvas.extents.min_y), (9.0, 19.0))
        body = canvas.finalize(0).svg_body
        self.assertIn('<g transform="translate(10 20)"><circle', body)
        self.assertTrue(body.endswith("</g>"))


class CanvasMarkupTests(unittest.TestCase):
    def test_text_is_escaped(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_text(0, 0, "a<b")
        self.assertIn(">a&lt;b</text>", canvas.finalize(0).svg_body)

    def test_image_markup_and_extent(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_image(10, 20, 30, 40, "icon.png")
        result = canvas.finalize(0)
        self.assertIn('<image x="10" y="20" width="30" height="40" href="icon.png" />', result.svg_body)
        self.assertEqual(result.view_box, "10 20 30 40")

    def test_wrapped_text_emits_tspans(self) -> None:
        canvas = SvgCanvas()
        canvas.draw_text(0, 0, "one two three", max_width=50, font_px=10)
        body = canvas.finalize(0).svg_body
        self.assertEqual(body.count("<tspan"), 2)
        self.assertIn('dy="1.2em"', body)

    def test_defs_gradients_and_patterns(self) -> None:
        canvas = SvgCanvas()
        self.assertEqual(canvas.add_hatch_pattern("hatch", color="#333333"), "url(#hatch)")
        ref = canvas.add_linear_gradient("fade", [GradientStop(0, "#ffffff"), GradientStop(1, "#000000", 0.5)])
        self.assertEqual(ref, "url(#fade)")
        canvas.add_radial_gradient("glow", [GradientStop(0, "#ffffff")])
        canvas.add_style(".label { font-weight: bold; }")
        canvas.draw_rect(0, 0, 10, 10, fill=ref)
        body = canvas.finalize(0).svg_body
        defs = body[: body.index("</defs>")]
        self.assertIn('<pattern id="hatch"', defs)
        self.assertIn('<linearGradient id="fade"', defs)
        self.assertIn('stop-opacity="0.5"', defs)
        self.assertIn('<radialGradient id="glow"', defs)
        self.assertIn("<style>.label { font-weight: bold; }</style>", defs)

    def test_path_builder(self) -> None:
        path = PathBuilder().move_to(0, 0).line_to(10, 5).quadratic_curve_to(12, -3, 20, 0).close_path()
        self.assertEqual(path.path_data(), "M 0 0 L 10 5 Q 12 -3 20 0 Z")
        self.assertEqual((path.extents.min_y, path.extents.max_x), (-3.0, 20.0))
        canvas = SvgCanvas()
        canvas.draw_path(path, stroke="#000000", stroke_width=2)
        self.assertEqual(canvas.extents.min_x, -1.0)
        self.assertIn('<path d="M 0 0 L 10 5 Q 12 -3 20 0 Z"', canvas.finalize(0).svg_body)

    def test_arc_contributes_endpoint_only(self) -> None:
        path = PathBuilder().move_to(0, 0).arc_to(50, 50, 0, False, True, 10, 0)
        self.assertEqual(path.extents.max_y, 0.0)
        self.assertIn("A 50 50 0 0 1 10 0", path.path_data())

    def test_legend_block_rows(self) -> None:
        canvas = SvgCanvas()
        height = canvas.draw_legend_block(
            0,
            0,
            [LegendRow("Actual", "#007acc", marker="circle"), LegendRow("Forecast", "#cc0000", dash="5 3")],
            row_gap_px=6,
            label_font_px=12,
        )
        self.assertAlmostEqual(height, 30.0)
        body = canvas.finalize(0).svg_body
        self.assertIn(">Actual</text>", body)
        self.assertIn('stroke-dasharray="5 3"', body)
        self.assertEqual(body.count("<circle"), 1)


class ClippedRegionTests(unittest.TestCase):
    def test_clipped_content_is_wrapped_and_later_content_is_not(self) -> None:
        canvas = SvgCanvas(chart_area=ChartArea(left=0.0, top=0.0, width=100.0, height=100.0))
        canvas.draw_in_clipped_region(lambda c: c.draw_line(-50, 50, 150, 50, stroke="#000000", stroke_width=2))
        canvas.draw_text(200, 50, "outside")
        result = canvas.finalize(8)
        body = result.svg_body
        self.assertIn('<clipPath id="clip-0"><rect x="0" y="0" width="100" height="100" /></clipPath>', body)
        self.assertIn('<g clip-path="url(#clip-0)"><line x1="-50"', body)
        group_end = body.index("</g>")
        self.assertGreater(body.index(">outside</text>"), group_end)
        self.assertEqual(result.vb_min_x, -8)
        self.assertGreater(result.vb_min_x + result.width, 250)

    def test_clip_def_is_registered_once(self) -> None:
        canvas = SvgCanvas(chart_area=ChartArea(left=0.0, top=0.0, width=100.0, height=100.0))
        canvas.draw_in_clipped_region(lambda c: c.draw_circle(10, 10, 2))
        canvas.draw_in_clipped_region(lambda c: c.draw_circle(20, 20, 2))
        body = canvas.finalize(0).svg_body
        self.assertEqual(body.count("<clipPath"), 1)
        self.assertEqual(body.count('clip-path="url(#clip-0)"'), 2)

    def test_nested_clipping_is_rejected(self) -> None:
        canvas = SvgCanvas(chart_area=ChartArea(left=0.0, top=0.0, width=100.0, height=100.0))
        with self.assertRaises(CanvasError):
            canvas.draw_in_clipped_region(lambda c: c.draw_in_clipped_region(lambda inner: None))

    def test_clipped_canvas_cannot_add_defs_or_finalize(self) -> None:
        canvas = SvgCanvas(chart_area=ChartArea(left=0.0, top=0.0, width=100.0, height=100.0))
        with self.assertRaises(CanvasError):
            canvas.draw_in_clipped_region(lambda c: c.add_def("<g />"))
        with self.assertRaises(CanvasError):
            canvas.draw_in_clipped_region(lambda c: c.finalize())

    def test_clipping_requires_an_area(self) -> None:
        with self.assertRaises(CanvasError):
            SvgCanvas().draw_in_clipped_region(lambda c: None)

    def test_conflicting_clip_rect_rejected(self) -> None:
        canvas = SvgCanvas()
        canvas.register_clip_rect(ChartArea(left=0.0, top=0.0, width=10.0, height=10.0))
        self.assertEqual(canvas.register_clip_rect(ChartArea(left=0.0, top=0.0, width=10.0, height=10.0)), "clip-0")
        with self.assertRaises(CanvasError):
            canvas.register_clip_rect(ChartArea(left=0.0, top=0.0, width=20.0, height=10.0))


if __name__ == "__main__":
    unittest.main()
