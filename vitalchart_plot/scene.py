from __future__ import annotations

from dataclasses import dataclass, field
import xml.etree.ElementTree as ET

from vitalchart_core.marks import CircleMark, Mark, RectMark, TextMark, group_element
from vitalchart_plot.builder import PlotArea
from vitalchart_plot.text import ANCHOR_SHIFT, load_font
from vitalchart_ui.controller import RenderContext


# Antialiased edges bleed about one pixel past the geometry.
BOUNDS_PAD = 1.0


@dataclass
class Scene:
    """One full render pass: every mark plus the interaction context.

    `backdrop` marks use surface coordinates; `marks`, annotation groups and
    hit regions use plot coordinates (origin at the plot's top-left corner).
    """

    width: float
    height: float
    plot: PlotArea
    context: RenderContext
    backdrop: list[Mark] = field(default_factory=list)
    marks: list[Mark] = field(default_factory=list)

    def data_marks(self) -> list[Mark]:
        return [m for m in self.marks if m.record_index is not None]

    def marks_with_role(self, role: str) -> list[Mark]:
        found = [m for m in self.backdrop if m.role == role]
        found.extend(m for m in self.marks if m.role == role)
        for group in self.context.annotations:
            found.extend(m for m in (group.highlight, *group.ring, *group.label) if m.role == role)
        return found

    def mark_count(self) -> int:
        return (
            len(self.backdrop)
            + len(self.marks)
            + sum(group.mark_count() for group in self.context.annotations)
        )

    def annotation_bounds(self, index: int) -> tuple[float, float, float, float]:
        """Surface-space (x, y, width, height) painted by one annotation group."""
        group = self.context.annotations[index]
        boxes = [_box(m, 0.0, 0.0) for m in (group.highlight, *group.ring)]
        boxes.extend(_box(m, group.label_x, group.label_y) for m in group.label)
        found = [b for b in boxes if b is not None]
        x0 = min(b[0] for b in found) - BOUNDS_PAD
        y0 = min(b[1] for b in found) - BOUNDS_PAD
        x1 = max(b[2] for b in found) + BOUNDS_PAD
        y1 = max(b[3] for b in found) + BOUNDS_PAD
        return (x0 + self.plot.x, y0 + self.plot.y, x1 - x0, y1 - y0)

    def build_element(self) -> ET.Element:
        root = ET.Element("g", {"data-role": "chart"})
        root.append(group_element(self.backdrop, role="backdrop"))
        root.append(group_element(self.marks, dx=self.plot.x, dy=self.plot.y, role="plot"))
        overlay = group_element((), dx=self.plot.x, dy=self.plot.y, role="interaction")
        for group in self.context.annotations:
            overlay.append(group.build_element())
        for region in self.context.hit_regions:
            # Unfilled shapes receive no pointer events.
            overlay.append(
                RectMark(
                    x=region.x,
                    y=0.0,
                    width=region.width,
                    height=region.height,
                    fill="transparent",
                    role="hit-region",
                    record_index=region.record_index,
                ).to_element()
            )
        root.append(overlay)
        return root


def _box(mark: Mark, dx: float, dy: float) -> tuple[float, float, float, float] | None:
    if isinstance(mark, RectMark):
        return (mark.x + dx, mark.y + dy, mark.x + dx + mark.width, mark.y + dy + mark.height)
    if isinstance(mark, CircleMark):
        return (mark.cx + dx - mark.r, mark.cy + dy - mark.r, mark.cx + dx + mark.r, mark.cy + dy + mark.r)
    if isinstance(mark, TextMark) and mark.text:
        font = load_font(mark.font_size)
        advance = font.getlength(mark.text)
        ascent, descent = font.getmetrics()
        x0 = mark.x + dx - advance * ANCHOR_SHIFT.get(mark.anchor, 0.0)
        return (x0, mark.y + dy - ascent, x0 + advance, mark.y + dy + descent)
    return None
