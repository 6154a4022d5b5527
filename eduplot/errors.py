from __future__ import annotations


class PlotError(Exception):
    """Base class for rendering errors raised by eduplot."""


class InvalidAxisDomainError(PlotError):
    def __init__(self, axis: str, minimum: float, maximum: float) -> None:
        super().__init__(f"{axis}-axis min {minimum} must be less than max {maximum}")
        self.axis = axis
        self.minimum = minimum
        self.maximum = maximum


class InvalidTickIntervalError(PlotError):
    def __init__(self, axis: str, interval: float) -> None:
        super().__init__(f"{axis}-axis tickInterval must be positive (got {interval})")
        self.axis = axis
        self.interval = interval


class InvalidCategoriesError(PlotError):
    def __init__(self, axis: str, scale_type: str) -> None:
        super().__init__(f"{axis}-axis {scale_type} requires non-empty categories")
        self.axis = axis
        self.scale_type = scale_type


class UnsupportedTickIntervalError(PlotError):
    def __init__(self, interval: float) -> None:
        super().__init__(f"unsupported non-terminating tick interval: {interval}")
        self.interval = interval


class TickGridAlignmentError(PlotError):
    def __init__(self, value: float, denominator: int) -> None:
        super().__init__(f"value {value} is not aligned to tick grid 1/{denominator}")
        self.value = value
        self.denominator = denominator


class InvalidDimensionsError(PlotError):
    def __init__(self, width: float, height: float) -> None:
        super().__init__(f"chart dimensions must be positive (got {width}x{height})")
        self.width = width
        self.height = height


class InvalidLineEquationError(PlotError):
    def __init__(self, line_id: str) -> None:
        super().__init__(f"line `{line_id}` has A=0 and B=0 and does not describe a line")
        self.line_id = line_id


class LabelPlacementError(PlotError):
    def __init__(self, label: str) -> None:
        super().__init__(f"no collision-free position found for label `{label}`")
        self.label = label


class CanvasError(PlotError):
    """Raised for misuse of the canvas lifecycle (finalize twice, nested clipping...)."""
