from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Mapping

from ..constants import AXIS_VIEWBOX_PADDING_PX, DEFAULT_FONT_PX, DEFAULT_LINE_HEIGHT
from ..errors import InvalidDimensionsError
from ..geometry import (
    FunctionPolyline,
    PlotDistance,
    PlotLine,
    PlotPoint,
    PlotPolygon,
    PlotPolyline,
    PointSlopeEquation,
    PointsPolyline,
    SlopeInterceptEquation,
    StandardEquation,
    render_distances,
    render_lines,
    render_points,
    render_polygons,
    render_polylines,
)
from ..layout import ChartArea
from ..plane import PlaneAxis, PlaneOptions, setup_coordinate_plane
from ..svg.canvas import SvgCanvas
from ..svg.document import to_svg_document
from ..theme import DEFAULT_THEME, ThemeTokens
from ._coerce import (
    coerce_bool,
    coerce_list,
    coerce_mapping,
    coerce_number,
    coerce_optional_str,
    coerce_str,
    require,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoordinatePlaneProps:
    width: float
    height: float
    x_axis: PlaneAxis
    y_axis: PlaneAxis
    title: str | None = None
    show_quadrant_labels: bool = False
    points: tuple[PlotPoint, ...] = ()
    lines: tuple[PlotLine, ...] = ()
    polygons: tuple[PlotPolygon, ...] = ()
    distances: tuple[PlotDistance, ...] = ()
    polylines: tuple[PlotPolyline, ...] = ()


def generate_coordinate_plane(props: CoordinatePlaneProps, *, theme: ThemeTokens = DEFAULT_THEME) -> str:
    """Render a full Cartesian plane widget to a standalone SVG string.

    Layers are drawn bottom to top: polygons, lines, polylines, points,
    then distances.
    """

    if props.width <= 0 or props.height <= 0:
        LOGGER.error("invalid coordinate plane dimensions: %sx%s", props.width, props.height)
        raise InvalidDimensionsError(props.width, props.height)

    canvas = SvgCanvas(
        chart_area=ChartArea(left=0.0, top=0.0, width=props.width, height=props.height),
        font_px_default=DEFAULT_FONT_PX,
        line_height_default=DEFAULT_LINE_HEIGHT,
    )
    plane = setup_coordinate_plane(
        PlaneOptions(
            width=props.width,
            height=props.height,
            x_axis=props.x_axis,
            y_axis=props.y_axis,
            title=props.title,
            show_quadrant_labels=props.show_quadrant_labels,
        ),
        canvas,
        theme=theme,
    )
    point_map = {point.id: point for point in props.points}

    render_polygons(props.polygons, point_map, plane.to_svg_x, plane.to_svg_y, canvas, theme=theme)
    render_lines(props.lines, props.x_axis, props.y_axis, plane.to_svg_x, plane.to_svg_y, canvas, theme=theme)
    render_polylines(props.polylines, plane.to_svg_x, plane.to_svg_y, canvas, theme=theme)
    render_points(props.points, plane.to_svg_x, plane.to_svg_y, canvas, theme=theme)
    render_distances(props.distances, point_map, plane.to_svg_x, plane.to_svg_y, canvas, theme=theme)

    finalized = canvas.finalize(AXIS_VIEWBOX_PADDING_PX)
    return to_svg_document(finalized, font_family=theme.font_family, font_px=theme.font_base)


def parse_coordinate_plane_props(raw: Mapping[str, Any]) -> CoordinatePlaneProps:
    where = "coordinatePlane"
    return CoordinatePlaneProps(
        width=coerce_number(require(raw, "width", where), "width"),
        height=coerce_number(require(raw, "height", where), "height"),
        x_axis=_parse_axis(coerce_mapping(require(raw, "xAxis", where), "xAxis"), "xAxis"),
        y_axis=_parse_axis(coerce_mapping(require(raw, "yAxis", where), "yAxis"), "yAxis"),
        title=coerce_optional_str(raw.get("title"), "title"),
        show_quadrant_labels=coerce_bool(raw.get("showQuadrantLabels", False), "showQuadrantLabels"),
        points=tuple(_parse_point(coerce_mapping(p, "points[]")) for p in coerce_list(raw.get("points"), "points")),
        lines=tuple(_parse_line(coerce_mapping(p, "lines[]")) for p in coerce_list(raw.get("lines"), "lines")),
        polygons=tuple(
            _parse_polygon(coerce_mapping(p, "polygons[]")) for p in coerce_list(raw.get("polygons"), "polygons")
        ),
        distances=tuple(
            _parse_distance(coerce_mapping(p, "distances[]")) for p in coerce_list(raw.get("distances"), "distances")
        ),
        polylines=tuple(
            _parse_polyline(coerce_mapping(p, "polylines[]")) for p in coerce_list(raw.get("polylines"), "polylines")
        ),
    )


def _parse_axis(raw: Mapping[str, Any], where: str) -> PlaneAxis:
    return PlaneAxis(
        label=coerce_str(raw.get("label", ""), f"{where}.label"),
        min=coerce_number(require(raw, "min", where), f"{where}.min"),
        max=coerce_number(require(raw, "max", where), f"{where}.max"),
        tick_interval=coerce_number(require(raw, "tickInterval", where), f"{where}.tickInterval"),
        show_grid_lines=coerce_bool(raw.get("showGridLines", True), f"{where}.showGridLines"),
        show_tick_labels=coerce_bool(raw.get("showTickLabels", True), f"{where}.showTickLabels"),
    )


def _parse_point(raw: Mapping[str, Any]) -> PlotPoint:
    style = raw.get("style", "closed")
    if style not in ("open", "closed"):
        raise ValueError(f"Unsupported point style: {style}")
    return PlotPoint(
        id=coerce_str(require(raw, "id", "point"), "point.id"),
        x=coerce_number(require(raw, "x", "point"), "point.x"),
        y=coerce_number(require(raw, "y", "point"), "point.y"),
        label=coerce_str(raw.get("label", ""), "point.label"),
        style=style,
        color=coerce_optional_str(raw.get("color"), "point.color"),
    )


def _parse_style(raw: Mapping[str, Any], default: str) -> str:
    style = raw.get("style", default)
    if style not in ("solid", "dashed"):
        raise ValueError(f"Unsupported line style: {style}")
    return style


def _parse_line(raw: Mapping[str, Any]) -> PlotLine:
    eq_raw = coerce_mapping(require(raw, "equation", "line"), "line.equation")
    kind = eq_raw.get("type")
    if kind == "slopeIntercept":
        equation: Any = SlopeInterceptEquation(
            slope=coerce_number(require(eq_raw, "slope", "equation"), "slope"),
            y_intercept=coerce_number(require(eq_raw, "yIntercept", "equation"), "yIntercept"),
        )
    elif kind == "standard":
        equation = StandardEquation(
            a=coerce_number(require(eq_raw, "A", "equation"), "A"),
            b=coerce_number(require(eq_raw, "B", "equation"), "B"),
            c=coerce_number(require(eq_raw, "C", "equation"), "C"),
        )
    elif kind == "pointSlope":
        equation = PointSlopeEquation(
            x1=coerce_number(require(eq_raw, "x1", "equation"), "x1"),
            y1=coerce_number(require(eq_raw, "y1", "equation"), "y1"),
            slope=coerce_number(require(eq_raw, "slope", "equation"), "slope"),
        )
    else:
        raise ValueError(f"Unsupported line equation type: {kind}")
    return PlotLine(
        id=coerce_str(require(raw, "id", "line"), "line.id"),
        equation=equation,
        color=coerce_str(raw.get("color", "#000000"), "line.color"),
        style=_parse_style(raw, "solid"),  # type: ignore[arg-type]
        label=coerce_optional_str(raw.get("label"), "line.label"),
    )


def _parse_polygon(raw: Mapping[str, Any]) -> PlotPolygon:
    vertices = tuple(coerce_str(v, "polygon.vertices[]") for v in coerce_list(require(raw, "vertices", "polygon"), "vertices"))
    return PlotPolygon(
        vertices=vertices,
        is_closed=coerce_bool(raw.get("isClosed", True), "polygon.isClosed"),
        fill_color=coerce_str(raw.get("fillColor", "none"), "polygon.fillColor"),
        stroke_color=coerce_str(raw.get("strokeColor", "#000000"), "polygon.strokeColor"),
        label=coerce_str(raw.get("label", ""), "polygon.label"),
    )


def _parse_distance(raw: Mapping[str, Any]) -> PlotDistance:
    return PlotDistance(
        point_id1=coerce_str(require(raw, "pointId1", "distance"), "distance.pointId1"),
        point_id2=coerce_str(require(raw, "pointId2", "distance"), "distance.pointId2"),
        show_legs=coerce_bool(raw.get("showLegs", True), "distance.showLegs"),
        show_leg_labels=coerce_bool(raw.get("showLegLabels", False), "distance.showLegLabels"),
        hypotenuse_label=coerce_optional_str(raw.get("hypotenuseLabel"), "distance.hypotenuseLabel"),
        color=coerce_str(raw.get("color", "#000000"), "distance.color"),
        style=_parse_style(raw, "dashed"),  # type: ignore[arg-type]
    )


def _parse_polyline(raw: Mapping[str, Any]) -> PlotPolyline:
    kind = raw.get("type", "points")
    common: dict[str, Any] = {
        "id": coerce_str(require(raw, "id", "polyline"), "polyline.id"),
        "color": coerce_str(raw.get("color", "#000000"), "polyline.color"),
        "style": _parse_style(raw, "solid"),
        "label": coerce_optional_str(raw.get("label"), "polyline.label"),
    }
    if kind == "points":
        points = tuple(
            (
                coerce_number(require(p, "x", "polyline point"), "x"),
                coerce_number(require(p, "y", "polyline point"), "y"),
            )
            for p in (coerce_mapping(item, "polyline.points[]") for item in coerce_list(raw.get("points"), "points"))
        )
        return PointsPolyline(points=points, **common)
    if kind == "function":
        x_range = coerce_mapping(require(raw, "xRange", "polyline"), "polyline.xRange")
        return FunctionPolyline(
            coefficients=tuple(coerce_number(c, "coefficients[]") for c in coerce_list(raw.get("coefficients"), "coefficients")),
            x_min=coerce_number(require(x_range, "min", "xRange"), "xRange.min"),
            x_max=coerce_number(require(x_range, "max", "xRange"), "xRange.max"),
            resolution=int(coerce_number(raw.get("resolution", 100), "polyline.resolution")),
            **common,
        )
    raise ValueError(f"Unsupported polyline type: {kind}")
