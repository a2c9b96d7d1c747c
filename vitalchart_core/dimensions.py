from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Iterable, Iterator, Protocol


LOGGER = logging.getLogger(__name__)

DimensionsCallback = Callable[["Dimensions | None"], None]


@dataclass(frozen=True)
class Dimensions:
    width: float
    height: float

    def __post_init__(self) -> None:
        # Frozen: assign through object.__setattr__ to clamp in place.
        object.__setattr__(self, "width", max(0.0, float(self.width)))
        object.__setattr__(self, "height", max(0.0, float(self.height)))

    @property
    def empty(self) -> bool:
        return self.width <= 0.0 or self.height <= 0.0


class SizedContainer(Protocol):
    def measure(self) -> tuple[float, float] | None:
        """Current pixel size, or None while the container is not attached."""
        ...

    def on_resize(self, listener: Callable[[], None]) -> None:
        """Register a callback fired after every size or attachment change."""
        ...


class ContainerBox:
    """Headless container whose size is driven explicitly by the host."""

    def __init__(self, width: float = 0.0, height: float = 0.0, *, attached: bool = True) -> None:
        self._width = float(width)
        self._height = float(height)
        self._attached = attached
        self._listeners: list[Callable[[], None]] = []

    @property
    def attached(self) -> bool:
        return self._attached

    def measure(self) -> tuple[float, float] | None:
        if not self._attached:
            return None
        return (self._width, self._height)

    def on_resize(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def attach(self) -> None:
        self._attached = True
        self._fire()

    def detach(self) -> None:
        self._attached = False

    def resize(self, width: float, height: float) -> None:
        self._width = float(width)
        self._height = float(height)
        self._fire()

    def _fire(self) -> None:
        for listener in list(self._listeners):
            listener()


class DimensionProvider:
    """Observes a container and pushes its size to subscribers on every change.

    The first delivery happens at subscription time when the container can
    already be measured. A detached container produces no event at all; the
    subscriber simply waits for the next `notify()` after attachment.
    """

    def __init__(self, container: SizedContainer) -> None:
        self._container = container
        self._subscribers: list[DimensionsCallback] = []
        self._current: Dimensions | None = None
        container.on_resize(self.notify)

    @property
    def current(self) -> Dimensions | None:
        return self._current

    def subscribe(self, callback: DimensionsCallback) -> Callable[[], None]:
        self._subscribers.append(callback)
        measured = self._measure()
        if measured is not None:
            self._current = measured
            callback(measured)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def notify(self) -> Dimensions | None:
        """Resize-observation entry point; returns the emitted value, if any."""
        measured = self._measure()
        if measured is None:
            LOGGER.debug("container not attached; deferring dimensions event")
            return None
        if measured == self._current:
            return None
        self._current = measured
        for callback in list(self._subscribers):
            callback(measured)
        return measured

    def _measure(self) -> Dimensions | None:
        size = self._container.measure()
        if size is None:
            return None
        width, height = size
        return Dimensions(width=width, height=height)


def observe_dimensions(samples: Iterable[tuple[float, float] | None]) -> Iterator[Dimensions]:
    """Lazily turn raw size samples into change-only `Dimensions` values."""
    last: Dimensions | None = None
    for sample in samples:
        if sample is None:
            continue
        dims = Dimensions(width=sample[0], height=sample[1])
        if dims == last:
            continue
        last = dims
        yield dims
