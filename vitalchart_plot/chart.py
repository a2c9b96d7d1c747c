from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar

import numpy as np

from vitalchart_core.chart_frame import ChartFrame, FrameUpdate
from vitalchart_core.dimensions import DimensionProvider, Dimensions
from vitalchart_core.events import PointerEvent, parse_pointer_event
from vitalchart_core.surface import DrawableSurface
from vitalchart_plot.activity import render_activity_scene
from vitalchart_plot.adapters import normalize_sessions
from vitalchart_plot.average import render_average_scene
from vitalchart_plot.compile import Rect, compile_full_update, compile_region_update
from vitalchart_plot.config import ActivityChartConfig, AverageChartConfig, ChartConfig, ChartKind
from vitalchart_plot.errors import PlotDataError
from vitalchart_plot.raster import rasterize_scene
from vitalchart_plot.records import Dataset
from vitalchart_plot.scene import Scene
from vitalchart_ui.controller import TooltipController


LOGGER = logging.getLogger(__name__)


class Chart:
    """Self-contained chart bound to one drawable surface.

    Every dataset replacement or dimension change rebuilds the whole scene and
    swaps it into the surface. Public methods never raise: input problems and
    unexpected failures are logged and leave an empty surface behind.
    """

    kind: ClassVar[ChartKind]

    def __init__(
        self,
        data: Any = None,
        *,
        config: ChartConfig | None = None,
        surface: DrawableSurface | None = None,
    ) -> None:
        self.config = config if config is not None else self.default_config()
        self.surface = surface if surface is not None else DrawableSurface()
        self._dataset = Dataset(kind=self.kind)
        self._dimensions: Dimensions | None = None
        self._scene: Scene | None = None
        self._controller: TooltipController | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._frame: ChartFrame | None = None
        if data is not None:
            self.set_data(data)

    @classmethod
    def default_config(cls) -> ChartConfig:
        raise NotImplementedError

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def dimensions(self) -> Dimensions | None:
        return self._dimensions

    @property
    def scene(self) -> Scene | None:
        return self._scene

    @property
    def controller(self) -> TooltipController | None:
        return self._controller

    def set_data(self, payload: Any) -> Scene | None:
        try:
            self._dataset = normalize_sessions(payload, self.kind)
        except PlotDataError as exc:
            LOGGER.warning("%s ignored malformed payload: %s", type(self).__name__, exc)
            self._dataset = Dataset(kind=self.kind)
        if self._dimensions is None:
            return None
        return self.render(self._dimensions)

    def bind(self, provider: DimensionProvider) -> None:
        self.unbind()
        self._unsubscribe = provider.subscribe(self.render)

    def unbind(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def render(self, dimensions: Dimensions | None) -> Scene | None:
        if dimensions is None:
            LOGGER.debug("%s render skipped: dimensions not ready", type(self).__name__)
            return None
        self._dimensions = dimensions
        try:
            scene = self._build_scene(dimensions)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("%s render failed: %s", type(self).__name__, exc)
            scene = None
        self._scene = scene
        if scene is None:
            self.surface.clear()
            self._controller = None
        else:
            self.surface.replace_root(scene, width=dimensions.width, height=dimensions.height)
            self._controller = TooltipController(scene.context)
        self._present()
        return scene

    def attach_frame(self, frame: ChartFrame | None) -> None:
        """Present into `frame` from now on; a current scene is pushed at once."""
        self._frame = frame
        if frame is not None and self._scene is not None:
            self._present()

    @property
    def frame(self) -> ChartFrame | None:
        return self._frame

    def handle_pointer(self, event: PointerEvent) -> int | None:
        """Feed a pointer event; returns the hovered record index, if any."""
        controller = self._controller
        scene = self._scene
        if controller is None or scene is None:
            return None
        before = set(controller.hovered())
        dirty = {i: scene.annotation_bounds(i) for i in before} if self._frame is not None else {}
        try:
            if event.event_type == "pointer_leave":
                controller.pointer_exit()
                target = None
            elif event.x is None or event.y is None:
                return None
            else:
                target = controller.pointer_move(event.x, event.y)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("%s pointer handling failed: %s", type(self).__name__, exc)
            return None
        changed = before.symmetric_difference(controller.hovered())
        if changed and self._frame is not None:
            rects: list[Rect] = [dirty[i] for i in changed if i in dirty]
            rects.extend(scene.annotation_bounds(i) for i in changed)
            self._present(rects)
        return target

    def handle_host_event(self, event_type: str, payload: object = None) -> int | None:
        """Entry point for raw host pointer payloads such as ``{"x": 10, "y": 4}``."""
        event = parse_pointer_event(event_type, payload)
        if event is None:
            LOGGER.debug("%s ignored host event %r", type(self).__name__, event_type)
            return None
        return self.handle_pointer(event)

    def to_svg(self) -> str:
        return self.surface.to_svg()

    def to_rgba(self) -> np.ndarray | None:
        if self._scene is None:
            return None
        return rasterize_scene(self._scene)

    def compile_full_update(self) -> FrameUpdate | None:
        rgba = self.to_rgba()
        if rgba is None:
            return None
        return compile_full_update(rgba)

    def compile_region_update(self, rects: list[Rect]) -> FrameUpdate | None:
        rgba = self.to_rgba()
        if rgba is None:
            return None
        return compile_region_update(rgba, rects)

    def _present(self, rects: list[Rect] | None = None) -> None:
        """Push the current scene into the attached frame; `rects` limits the copy."""
        frame = self._frame
        if frame is None:
            return
        try:
            if self._scene is None:
                frame.clear()
                return
            update = self.compile_full_update() if rects is None else self.compile_region_update(rects)
            if update is not None:
                frame.apply(update)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("%s frame presentation failed: %s", type(self).__name__, exc)

    def _build_scene(self, dimensions: Dimensions) -> Scene | None:
        raise NotImplementedError


class ActivityChart(Chart):
    """Daily weight and burned calories as paired bars."""

    kind = "activity"
    config: ActivityChartConfig

    @classmethod
    def default_config(cls) -> ActivityChartConfig:
        return ActivityChartConfig()

    def _build_scene(self, dimensions: Dimensions) -> Scene | None:
        return render_activity_scene(self._dataset, dimensions, self.config)


class AverageSessionsChart(Chart):
    """Average session length per weekday as a smoothed line."""

    kind = "average"
    config: AverageChartConfig

    @classmethod
    def default_config(cls) -> AverageChartConfig:
        return AverageChartConfig()

    def _build_scene(self, dimensions: Dimensions) -> Scene | None:
        return render_average_scene(self._dataset, dimensions, self.config)
