from __future__ import annotations

import math
from typing import Iterable

import numpy as np
import torch

from vitalchart_core.chart_frame import FramePatch, FrameUpdate


Rect = tuple[float, float, float, float]


def _validate_frame(frame_rgba: np.ndarray) -> None:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")


def compile_full_update(frame_rgba: np.ndarray) -> FrameUpdate:
    _validate_frame(frame_rgba)
    tensor = torch.from_numpy(np.ascontiguousarray(frame_rgba))
    return FrameUpdate(patches=(FramePatch(0, 0, tensor),), full=True)


def compile_region_update(frame_rgba: np.ndarray, rects: Iterable[Rect]) -> FrameUpdate | None:
    """Patches for the given surface rects, grown to whole pixels and clipped.

    Returns None when no rect intersects the frame.
    """
    _validate_frame(frame_rgba)
    height, width = frame_rgba.shape[:2]
    patches: list[FramePatch] = []
    for x, y, w, h in rects:
        x0 = max(0, int(math.floor(x)))
        y0 = max(0, int(math.floor(y)))
        x1 = min(width, int(math.ceil(x + w)))
        y1 = min(height, int(math.ceil(y + h)))
        if x1 <= x0 or y1 <= y0:
            continue
        patch = torch.from_numpy(np.ascontiguousarray(frame_rgba[y0:y1, x0:x1]))
        patches.append(FramePatch(x0, y0, patch))
    if not patches:
        return None
    return FrameUpdate(patches=tuple(patches))
