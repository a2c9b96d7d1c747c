from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
import xml.etree.ElementTree as ET

from vitalchart_core.marks import CircleMark, Mark, RectMark, group_element


TooltipState = Literal["idle", "hover"]
TooltipEvent = Literal["enter", "leave"]


def transition(state: TooltipState, event: TooltipEvent) -> TooltipState:
    """Pure per-record hover transition: enter -> hover, leave -> idle."""
    if event == "enter":
        return "hover"
    if event == "leave":
        return "idle"
    return state


def clamp_label_x(
    anchor_x: float,
    label_width: float,
    *,
    plot_left: float,
    plot_right: float,
    shift: float,
) -> float:
    """Horizontal label origin that keeps the label inside the plot.

    The label sits at `anchor_x` when it fits. Otherwise it moves left by
    `shift`, and is then pinned so its right edge never passes `plot_right`
    (and its left edge never passes `plot_left` when the plot is wide enough).
    """
    if anchor_x + label_width <= plot_right:
        return max(plot_left, anchor_x)
    x = anchor_x - shift
    if x + label_width > plot_right:
        x = plot_right - label_width
    return max(min(plot_left, plot_right - label_width), x)


@dataclass
class AnnotationGroup:
    """Hover-revealed marks of one record.

    `label` marks are laid out relative to the label origin, which is placed
    at (`label_x`, `label_y`) when the group is materialised.
    """

    record_index: int
    anchor_x: float
    highlight: RectMark
    label: tuple[Mark, ...]
    label_width: float
    label_y: float
    ring: tuple[CircleMark, ...] = ()
    label_x: float = 0.0
    opacity: float = 0.0

    def __post_init__(self) -> None:
        self.label_x = self.anchor_x

    @property
    def visible(self) -> bool:
        return self.opacity > 0.0

    def mark_count(self) -> int:
        return 1 + len(self.label) + len(self.ring)

    def build_element(self) -> ET.Element:
        group = ET.Element("g", {"data-role": "annotation", "opacity": "1" if self.visible else "0"})
        group.append(self.highlight.to_element())
        for mark in self.ring:
            group.append(mark.to_element())
        group.append(group_element(self.label, dx=self.label_x, dy=self.label_y, role="tooltip-label"))
        return group


def apply_tooltip_state(
    group: AnnotationGroup,
    state: TooltipState,
    *,
    plot_width: float,
    shift: float,
) -> None:
    """Render effect: the only place a hover state touches the scene."""
    if state == "hover":
        group.label_x = clamp_label_x(
            group.anchor_x,
            group.label_width,
            plot_left=0.0,
            plot_right=plot_width,
            shift=shift,
        )
        group.opacity = 1.0
        return
    group.opacity = 0.0
