from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping


PointerEventType = Literal[
    "pointer_move",
    "pointer_enter",
    "pointer_leave",
]

_POINTER_EVENT_TYPES = frozenset({"pointer_move", "pointer_enter", "pointer_leave"})


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position in surface coordinates (origin top-left)."""

    event_type: PointerEventType
    x: float | None = None
    y: float | None = None


def parse_pointer_event(event_type: str, payload: object) -> PointerEvent | None:
    """Parse a host pointer payload; anything unrecognised yields None."""

    if event_type not in _POINTER_EVENT_TYPES:
        return None
    if event_type == "pointer_leave":
        return PointerEvent(event_type="pointer_leave")
    if not isinstance(payload, Mapping):
        return None
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        return None
    return PointerEvent(event_type=event_type, x=x, y=y)  # type: ignore[arg-type]
