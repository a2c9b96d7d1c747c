from __future__ import annotations

import unittest

from vitalchart_core.marks import RectMark, TextMark
from vitalchart_ui.controller import RenderContext, TooltipController
from vitalchart_ui.hit_regions import slice_hit_regions
from vitalchart_ui.tooltip import AnnotationGroup, apply_tooltip_state, clamp_label_x, transition


def _group(index: int, anchor_x: float, label_width: float = 30.0) -> AnnotationGroup:
    return AnnotationGroup(
        record_index=index,
        anchor_x=anchor_x,
        highlight=RectMark(anchor_x, 0.0, 10.0, 50.0, fill="#C4C4C4", opacity=0.5, role="highlight"),
        label=(
            RectMark(0.0, 0.0, label_width, 20.0, fill="#E60000", role="tooltip-bubble"),
            TextMark(label_width / 2.0, 12.0, f"{index}kg", fill="#FFFFFF", anchor="middle", role="tooltip-text"),
        ),
        label_width=label_width,
        label_y=10.0,
    )


def _context(count: int = 4, plot_width: float = 100.0) -> RenderContext:
    step = plot_width / count
    return RenderContext(
        annotations=[_group(i, i * step) for i in range(count)],
        hit_regions=slice_hit_regions(count, plot_width, 50.0),
        plot_width=plot_width,
        plot_height=50.0,
        offset=(10.0, 5.0),
        tooltip_shift=40.0,
    )


class TooltipStateTests(unittest.TestCase):
    def test_transitions(self) -> None:
        self.assertEqual(transition("idle", "enter"), "hover")
        self.assertEqual(transition("hover", "enter"), "hover")
        self.assertEqual(transition("hover", "leave"), "idle")
        self.assertEqual(transition("idle", "leave"), "idle")

    def test_label_stays_at_anchor_when_it_fits(self) -> None:
        self.assertEqual(clamp_label_x(10.0, 39.0, plot_left=0.0, plot_right=186.0, shift=49.0), 10.0)
        self.assertEqual(clamp_label_x(147.0, 39.0, plot_left=0.0, plot_right=186.0, shift=49.0), 147.0)

    def test_label_shifts_left_near_right_edge(self) -> None:
        self.assertEqual(clamp_label_x(160.0, 39.0, plot_left=0.0, plot_right=186.0, shift=49.0), 111.0)

    def test_small_shift_is_hard_clamped(self) -> None:
        self.assertEqual(clamp_label_x(180.0, 39.0, plot_left=0.0, plot_right=186.0, shift=5.0), 147.0)

    def test_clamp_property_over_every_anchor(self) -> None:
        plot_right = 186.0
        width = 39.0
        for anchor in range(0, 187):
            x = clamp_label_x(float(anchor), width, plot_left=0.0, plot_right=plot_right, shift=49.0)
            self.assertLessEqual(x + width, plot_right)
            self.assertGreaterEqual(x, 0.0)
            if anchor + width <= plot_right:
                self.assertEqual(x, anchor)

    def test_label_wider_than_plot_keeps_right_edge(self) -> None:
        x = clamp_label_x(0.0, 50.0, plot_left=0.0, plot_right=30.0, shift=10.0)
        self.assertLessEqual(x + 50.0, 30.0)

    def test_render_effect_writes_opacity_and_position(self) -> None:
        group = _group(3, 90.0)
        self.assertFalse(group.visible)
        apply_tooltip_state(group, "hover", plot_width=100.0, shift=40.0)
        self.assertTrue(group.visible)
        self.assertEqual(group.label_x, 50.0)
        apply_tooltip_state(group, "idle", plot_width=100.0, shift=40.0)
        self.assertFalse(group.visible)

    def test_annotation_element_reflects_visibility(self) -> None:
        group = _group(0, 20.0)
        self.assertEqual(group.build_element().get("opacity"), "0")
        apply_tooltip_state(group, "hover", plot_width=100.0, shift=40.0)
        element = group.build_element()
        self.assertEqual(element.get("opacity"), "1")
        label = element.find("g")
        assert label is not None
        self.assertEqual(label.get("transform"), "translate(20,10)")
        self.assertEqual(group.mark_count(), 3)


class TooltipControllerTests(unittest.TestCase):
    def test_context_starts_idle(self) -> None:
        context = _context()
        self.assertEqual(context.states, ["idle"] * 4)
        self.assertEqual(context.hovered(), [])

    def test_pointer_move_enters_and_leaves_records(self) -> None:
        context = _context()
        controller = TooltipController(context)

        self.assertEqual(controller.pointer_move(10.0 + 30.0, 5.0 + 10.0), 1)
        self.assertEqual(controller.hovered(), [1])
        self.assertTrue(context.annotations[1].visible)

        self.assertEqual(controller.pointer_move(10.0 + 80.0, 5.0 + 10.0), 3)
        self.assertEqual(controller.hovered(), [3])
        self.assertFalse(context.annotations[1].visible)
        # anchor 75 + width 30 overflows the 100px plot, so the label moves left.
        self.assertEqual(context.annotations[3].label_x, 35.0)

    def test_pointer_outside_plot_clears_hover(self) -> None:
        controller = TooltipController(_context())
        controller.pointer_move(20.0, 20.0)
        self.assertIsNone(controller.pointer_move(20.0, -100.0))
        self.assertEqual(controller.hovered(), [])

    def test_pointer_exit(self) -> None:
        controller = TooltipController(_context())
        controller.pointer_move(20.0, 20.0)
        controller.pointer_exit()
        self.assertEqual(controller.hovered(), [])
        controller.pointer_exit()

    def test_direct_events_are_independent_per_record(self) -> None:
        controller = TooltipController(_context())
        self.assertEqual(controller.pointer_enter(0), "hover")
        self.assertEqual(controller.pointer_enter(2), "hover")
        self.assertEqual(controller.hovered(), [0, 2])
        self.assertEqual(controller.pointer_leave(0), "idle")
        self.assertEqual(controller.hovered(), [2])

    def test_unknown_index_is_ignored(self) -> None:
        controller = TooltipController(_context())
        self.assertIsNone(controller.pointer_enter(99))
        self.assertIsNone(controller.pointer_leave(-1))
        self.assertEqual(controller.hovered(), [])


if __name__ == "__main__":
    unittest.main()
