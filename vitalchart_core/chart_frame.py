from __future__ import annotations

from dataclasses import dataclass
import logging
import threading

import torch


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FramePatch:
    """RGBA255 pixels placed with their top-left corner at (`x`, `y`)."""

    x: int
    y: int
    rgba: torch.Tensor

    @property
    def width(self) -> int:
        return int(self.rgba.shape[1])

    @property
    def height(self) -> int:
        return int(self.rgba.shape[0])


@dataclass(frozen=True)
class FrameUpdate:
    """Patches for one presentation step.

    A `full` update carries a single patch at the origin that defines the whole
    frame, including its size; otherwise every patch must fit the current frame.
    """

    patches: tuple[FramePatch, ...]
    full: bool = False

    def pixel_count(self) -> int:
        return sum(p.width * p.height for p in self.patches)


class ChartFrame:
    """Presented RGBA frame of one chart.

    Charts push a full update after every rebuild and region updates for the
    annotation groups a hover change touched. Updates are all-or-nothing: a
    rejected update leaves pixels and revision unchanged.
    """

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self._lock = threading.Lock()
        self._pixels = torch.zeros((max(0, height), max(0, width), 4), dtype=torch.uint8)
        self._revision = 0
        self._pixels_written = 0

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def pixels_written(self) -> int:
        """Total pixels copied by applied updates; region updates keep it low."""
        return self._pixels_written

    def snapshot(self) -> torch.Tensor:
        with self._lock:
            return self._pixels.clone()

    def clear(self) -> int:
        with self._lock:
            self._pixels = torch.zeros_like(self._pixels)
            self._revision += 1
            return self._revision

    def apply(self, update: FrameUpdate) -> int:
        if not update.patches:
            raise ValueError("frame update has no patches")
        for patch in update.patches:
            _check_patch(patch)

        with self._lock:
            if update.full:
                if len(update.patches) != 1 or (update.patches[0].x, update.patches[0].y) != (0, 0):
                    raise ValueError("full update needs exactly one patch at the origin")
                rgba = update.patches[0].rgba
                if tuple(rgba.shape[:2]) != tuple(self._pixels.shape[:2]):
                    LOGGER.debug(
                        "chart frame resized from %dx%d to %dx%d",
                        self.width,
                        self.height,
                        rgba.shape[1],
                        rgba.shape[0],
                    )
                staged = rgba.clone()
            else:
                for patch in update.patches:
                    if patch.x + patch.width > self.width or patch.y + patch.height > self.height:
                        raise ValueError(
                            f"patch at ({patch.x}, {patch.y}) size {patch.width}x{patch.height} "
                            f"exceeds frame {self.width}x{self.height}"
                        )
                staged = self._pixels.clone()
                for patch in update.patches:
                    staged[patch.y : patch.y + patch.height, patch.x : patch.x + patch.width] = patch.rgba
            self._pixels = staged
            self._pixels_written += update.pixel_count()
            self._revision += 1
            return self._revision


def _check_patch(patch: FramePatch) -> None:
    if not torch.is_tensor(patch.rgba) or patch.rgba.dtype != torch.uint8:
        raise ValueError("patch pixels must be a uint8 torch.Tensor")
    if patch.rgba.ndim != 3 or patch.rgba.shape[2] != 4 or patch.width == 0 or patch.height == 0:
        raise ValueError(f"patch pixels must have shape (H, W, 4), got {tuple(patch.rgba.shape)}")
    if patch.x < 0 or patch.y < 0:
        raise ValueError("patch origin must be >= 0")
