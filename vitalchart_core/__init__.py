from .chart_frame import ChartFrame, FramePatch, FrameUpdate
from .dimensions import ContainerBox, DimensionProvider, Dimensions, SizedContainer, observe_dimensions
from .events import PointerEvent, PointerEventType, parse_pointer_event
from .marks import CircleMark, LineMark, Mark, PathMark, RectMark, TextMark, group_element
from .surface import DrawableSurface, SurfaceRoot, format_length

__all__ = [
    "ChartFrame",
    "CircleMark",
    "ContainerBox",
    "DimensionProvider",
    "Dimensions",
    "DrawableSurface",
    "FramePatch",
    "FrameUpdate",
    "LineMark",
    "Mark",
    "PathMark",
    "PointerEvent",
    "PointerEventType",
    "RectMark",
    "SizedContainer",
    "SurfaceRoot",
    "TextMark",
    "format_length",
    "group_element",
    "observe_dimensions",
    "parse_pointer_event",
]
