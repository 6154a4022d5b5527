from __future__ import annotations

PADDING_PX = 20.0
AXIS_VIEWBOX_PADDING_PX = 8.0
TICK_LENGTH_PX = 5.0
AXIS_STROKE_WIDTH_PX = 1.5
GRID_STROKE_WIDTH_PX = 1.0

CHART_TITLE_TOP_PADDING_PX = 20.0
TICK_LABEL_PADDING_PX = 8.0
X_AXIS_TITLE_PADDING_PX = 22.0

CHART_TITLE_FONT_PX = 18.0
AXIS_TITLE_FONT_PX = 16.0
TICK_LABEL_FONT_PX = 12.0
LABEL_AVG_CHAR_WIDTH_PX = 7.0

X_AXIS_MIN_LABEL_PADDING_PX = 10.0
Y_AXIS_MIN_LABEL_GAP_PX = 4.0

DEFAULT_FONT_PX = 12.0
DEFAULT_LINE_HEIGHT = 1.2
DEFAULT_FONT_FAMILY = "sans-serif"
