from __future__ import annotations

import unittest
import xml.etree.ElementTree as ET

import numpy as np
import torch

from vitalchart_core.chart_frame import ChartFrame, FramePatch, FrameUpdate
from vitalchart_core.marks import CircleMark, LineMark, RectMark, TextMark, group_element
from vitalchart_core.surface import DrawableSurface, format_length
from vitalchart_plot.compile import compile_full_update, compile_region_update


class _Root:
    def __init__(self, children: int) -> None:
        self.children = children

    def build_element(self) -> ET.Element:
        group = ET.Element("g")
        for _ in range(self.children):
            ET.SubElement(group, "rect")
        return group


class DrawableSurfaceTests(unittest.TestCase):
    def test_replacing_root_never_accumulates_nodes(self) -> None:
        surface = DrawableSurface()
        surface.replace_root(_Root(3), width=100, height=50)
        first = surface.node_count()
        surface.replace_root(_Root(3), width=100, height=50)
        self.assertEqual(surface.node_count(), first)
        self.assertEqual(first, 4)

    def test_clear_detaches_root(self) -> None:
        surface = DrawableSurface()
        surface.replace_root(_Root(1), width=10, height=10)
        revision = surface.revision
        surface.clear()
        self.assertIsNone(surface.root)
        self.assertEqual(surface.node_count(), 0)
        self.assertEqual(surface.revision, revision + 1)
        surface.clear()
        self.assertEqual(surface.revision, revision + 1)

    def test_svg_serialisation(self) -> None:
        surface = DrawableSurface()
        surface.replace_root(_Root(1), width=258, height=320)
        svg = surface.to_svg()
        self.assertTrue(svg.startswith("<svg"))
        self.assertIn('viewBox="0 0 258 320"', svg)
        self.assertIn("<rect", svg)

    def test_format_length(self) -> None:
        self.assertEqual(format_length(2.0), "2")
        self.assertEqual(format_length(1.23456), "1.235")
        self.assertEqual(format_length(-0.0001), "0")


class MarkElementTests(unittest.TestCase):
    def test_rect_attributes(self) -> None:
        element = RectMark(1.0, 2.0, 3.5, 4.0, fill="#FF0101", role="bar", record_index=0).to_element()
        self.assertEqual(
            element.attrib,
            {"x": "1", "y": "2", "width": "3.5", "height": "4", "fill": "#FF0101", "data-role": "bar"},
        )

    def test_opacity_is_written_only_when_not_opaque(self) -> None:
        element = CircleMark(5.0, 5.0, 10.0, fill="#FFFFFF", opacity=0.3, role="ring").to_element()
        self.assertEqual(element.get("opacity"), "0.3")

    def test_dashed_line_and_text(self) -> None:
        line = LineMark(0.0, 1.0, 10.0, 1.0, stroke="#DEDEDE", dash=(3.0, 3.0), role="grid").to_element()
        self.assertEqual(line.get("stroke-dasharray"), "3,3")
        text = TextMark(4.0, 5.0, "70kg", fill="#FFFFFF", anchor="middle").to_element()
        self.assertEqual(text.text, "70kg")
        self.assertEqual(text.get("text-anchor"), "middle")

    def test_group_translation(self) -> None:
        group = group_element([RectMark(0.0, 0.0, 1.0, 1.0, fill="#000")], dx=24.0, dy=64.0, role="plot")
        self.assertEqual(group.get("transform"), "translate(24,64)")
        self.assertEqual(len(list(group)), 1)


def _pixels(height: int, width: int, value: int) -> torch.Tensor:
    return torch.full((height, width, 4), value, dtype=torch.uint8)


class ChartFrameTests(unittest.TestCase):
    def test_initial_frame_is_blank(self) -> None:
        frame = ChartFrame(width=4, height=3)
        snap = frame.snapshot()
        self.assertEqual(tuple(snap.shape), (3, 4, 4))
        self.assertEqual(snap.dtype, torch.uint8)
        self.assertEqual(int(snap.sum()), 0)
        self.assertEqual((frame.revision, frame.pixels_written), (0, 0))

    def test_full_update_defines_size_and_region_update_patches(self) -> None:
        frame = ChartFrame()
        payload = torch.arange(16, dtype=torch.uint8).view(2, 2, 4)
        self.assertEqual(frame.apply(FrameUpdate(patches=(FramePatch(0, 0, payload),), full=True)), 1)
        self.assertEqual((frame.width, frame.height), (2, 2))
        self.assertTrue(torch.equal(frame.snapshot(), payload))

        frame.apply(FrameUpdate(patches=(FramePatch(1, 1, _pixels(1, 1, 200)),)))
        snap = frame.snapshot()
        self.assertEqual(snap[1, 1].tolist(), [200, 200, 200, 200])
        self.assertEqual(snap[0, 0].tolist(), [0, 1, 2, 3])
        self.assertEqual(frame.pixels_written, 5)
        self.assertEqual(frame.revision, 2)

    def test_snapshot_is_a_copy(self) -> None:
        frame = ChartFrame(width=1, height=1)
        frame.snapshot()[0, 0] = 9
        self.assertEqual(int(frame.snapshot().sum()), 0)

    def test_rejected_update_leaves_frame_untouched(self) -> None:
        frame = ChartFrame(width=2, height=2)
        before = frame.snapshot()
        update = FrameUpdate(patches=(FramePatch(0, 0, _pixels(1, 1, 5)), FramePatch(1, 1, _pixels(2, 2, 5))))
        with self.assertRaises(ValueError):
            frame.apply(update)
        self.assertTrue(torch.equal(frame.snapshot(), before))
        self.assertEqual((frame.revision, frame.pixels_written), (0, 0))

    def test_malformed_updates(self) -> None:
        frame = ChartFrame(width=2, height=2)
        with self.assertRaises(ValueError):
            frame.apply(FrameUpdate(patches=()))
        with self.assertRaises(ValueError):
            frame.apply(FrameUpdate(patches=(FramePatch(0, 0, torch.zeros((1, 1, 4), dtype=torch.int32)),)))
        with self.assertRaises(ValueError):
            frame.apply(FrameUpdate(patches=(FramePatch(-1, 0, _pixels(1, 1, 0)),)))
        with self.assertRaises(ValueError):
            frame.apply(FrameUpdate(patches=(FramePatch(1, 0, _pixels(2, 1, 0)),), full=True))
        self.assertEqual(frame.revision, 0)

    def test_clear_bumps_revision(self) -> None:
        frame = ChartFrame()
        frame.apply(FrameUpdate(patches=(FramePatch(0, 0, _pixels(2, 3, 7)),), full=True))
        self.assertEqual(frame.clear(), 2)
        self.assertEqual(int(frame.snapshot().sum()), 0)
        self.assertEqual((frame.width, frame.height), (3, 2))


class CompileTests(unittest.TestCase):
    def test_full_update(self) -> None:
        update = compile_full_update(np.zeros((2, 3, 4), dtype=np.uint8))
        self.assertTrue(update.full)
        self.assertEqual(len(update.patches), 1)
        patch = update.patches[0]
        self.assertEqual((patch.x, patch.y, patch.width, patch.height), (0, 0, 3, 2))

    def test_region_update_grows_to_whole_pixels_and_clips(self) -> None:
        rgba = np.full((4, 4, 4), 7, dtype=np.uint8)
        update = compile_region_update(rgba, [(1.5, 0.2, 1.0, 1.0), (2.0, 2.0, 5.0, 5.0)])
        assert update is not None
        self.assertFalse(update.full)
        boxes = [(p.x, p.y, p.width, p.height) for p in update.patches]
        self.assertEqual(boxes, [(1, 0, 2, 2), (2, 2, 2, 2)])
        self.assertEqual(update.pixel_count(), 8)

    def test_region_update_outside_frame_is_none(self) -> None:
        rgba = np.zeros((4, 4, 4), dtype=np.uint8)
        self.assertIsNone(compile_region_update(rgba, [(10.0, 10.0, 2.0, 2.0), (0.0, 0.0, 0.0, 3.0)]))
        self.assertIsNone(compile_region_update(rgba, []))

    def test_frame_validation(self) -> None:
        with self.assertRaises(ValueError):
            compile_full_update(np.zeros((2, 2, 4), dtype=np.float32))
        with self.assertRaises(ValueError):
            compile_region_update(np.zeros((2, 2, 3), dtype=np.uint8), [(0.0, 0.0, 1.0, 1.0)])


if __name__ == "__main__":
    unittest.main()
