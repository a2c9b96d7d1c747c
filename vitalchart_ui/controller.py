from __future__ import annotations

from dataclasses import dataclass, field
import logging

from .hit_regions import HitRegion, resolve_hit
from .tooltip import AnnotationGroup, TooltipEvent, TooltipState, apply_tooltip_state, transition


LOGGER = logging.getLogger(__name__)


@dataclass
class RenderContext:
    """Per-render interaction state; rebuilt together with the scene."""

    annotations: list[AnnotationGroup]
    hit_regions: list[HitRegion]
    plot_width: float
    plot_height: float
    offset: tuple[float, float] = (0.0, 0.0)
    tooltip_shift: float = 0.0
    states: list[TooltipState] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.states = ["idle"] * len(self.annotations)

    def hovered(self) -> list[int]:
        return [i for i, state in enumerate(self.states) if state == "hover"]


class TooltipController:
    """Drives per-record hover transitions on one `RenderContext`.

    Handlers only write opacity and label position of annotation groups that
    already exist; they never rebuild the scene and never raise.
    """

    def __init__(self, context: RenderContext) -> None:
        self._context = context
        self._pointer_index: int | None = None

    @property
    def context(self) -> RenderContext:
        return self._context

    def pointer_enter(self, index: int) -> TooltipState | None:
        return self._dispatch(index, "enter")

    def pointer_leave(self, index: int) -> TooltipState | None:
        return self._dispatch(index, "leave")

    def pointer_move(self, x: float, y: float) -> int | None:
        """Track a pointer in surface coordinates; returns the hovered record."""
        ctx = self._context
        local_x = x - ctx.offset[0]
        local_y = y - ctx.offset[1]
        target = resolve_hit(
            ctx.hit_regions,
            local_x,
            local_y,
            plot_width=ctx.plot_width,
            plot_height=ctx.plot_height,
        )
        if target == self._pointer_index:
            return target
        if self._pointer_index is not None:
            self.pointer_leave(self._pointer_index)
        if target is not None:
            self.pointer_enter(target)
        self._pointer_index = target
        return target

    def pointer_exit(self) -> None:
        if self._pointer_index is not None:
            self.pointer_leave(self._pointer_index)
            self._pointer_index = None

    def hovered(self) -> list[int]:
        return self._context.hovered()

    def _dispatch(self, index: int, event: TooltipEvent) -> TooltipState | None:
        ctx = self._context
        if not 0 <= index < len(ctx.annotations):
            LOGGER.debug("ignoring %s for unknown record index %d", event, index)
            return None
        state = transition(ctx.states[index], event)
        ctx.states[index] = state
        apply_tooltip_state(
            ctx.annotations[index],
            state,
            plot_width=ctx.plot_width,
            shift=ctx.tooltip_shift,
        )
        return state
