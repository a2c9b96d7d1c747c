from __future__ import annotations

from typing import Protocol
import xml.etree.ElementTree as ET


SVG_NAMESPACE = "http://www.w3.org/2000/svg"


class SurfaceRoot(Protocol):
    def build_element(self) -> ET.Element:
        """Materialise the current state as an SVG `<g>` element tree."""
        ...


class DrawableSurface:
    """SVG-capable surface exclusively owned by one chart instance.

    At most one root group is attached at a time. Replacing the root drops the
    previous one first, so repeated redraws never accumulate nodes.
    """

    def __init__(self, width: float = 0.0, height: float = 0.0) -> None:
        self.width = float(width)
        self.height = float(height)
        self._root: SurfaceRoot | None = None
        self._revision = 0

    @property
    def root(self) -> SurfaceRoot | None:
        return self._root

    @property
    def revision(self) -> int:
        return self._revision

    def clear(self) -> None:
        if self._root is not None:
            self._root = None
            self._revision += 1

    def replace_root(self, root: SurfaceRoot, *, width: float, height: float) -> None:
        self.clear()
        self.width = float(width)
        self.height = float(height)
        self._root = root
        self._revision += 1

    def to_element(self) -> ET.Element:
        svg = ET.Element(
            "svg",
            {
                "xmlns": SVG_NAMESPACE,
                "width": format_length(self.width),
                "height": format_length(self.height),
                "viewBox": f"0 0 {format_length(self.width)} {format_length(self.height)}",
            },
        )
        if self._root is not None:
            svg.append(self._root.build_element())
        return svg

    def to_svg(self) -> str:
        return ET.tostring(self.to_element(), encoding="unicode")

    def node_count(self) -> int:
        """Number of elements below the `<svg>` element."""
        return sum(1 for _ in self.to_element().iter()) - 1


def format_length(value: float) -> str:
    out = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if out in ("", "-0") else out
