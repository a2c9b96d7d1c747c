"""Hover interaction for vitalchart scenes: hit regions and tooltips."""

from .controller import RenderContext, TooltipController
from .hit_regions import HitRegion, band_hit_regions, resolve_hit, slice_hit_regions
from .tooltip import (
    AnnotationGroup,
    TooltipEvent,
    TooltipState,
    apply_tooltip_state,
    clamp_label_x,
    transition,
)

__all__ = [
    "AnnotationGroup",
    "HitRegion",
    "RenderContext",
    "TooltipController",
    "TooltipEvent",
    "TooltipState",
    "apply_tooltip_state",
    "band_hit_regions",
    "clamp_label_x",
    "resolve_hit",
    "slice_hit_regions",
    "transition",
]
