from __future__ import annotations

import unittest

import numpy as np

from vitalchart_plot.scales import BandScale
from vitalchart_ui.hit_regions import band_hit_regions, resolve_hit, slice_hit_regions


def _band_regions(count: int = 7, width: float = 186.0, padding: float = 0.6):
    scale = BandScale(tuple(str(i) for i in range(1, count + 1)), (0.0, width), padding_inner=padding)
    starts = [scale(day) for day in scale.domain]
    slots = [scale.slot(i) for i in range(count)]
    return scale, band_hit_regions(starts, scale.bandwidth(), slots, 224.0)


class HitRegionTests(unittest.TestCase):
    def test_band_regions_use_bandwidth_and_do_not_overlap(self) -> None:
        scale, regions = _band_regions()
        self.assertEqual(len(regions), 7)
        for region in regions:
            self.assertAlmostEqual(region.width, 186.0 / 7.0 * (1.0 - 0.6))
            self.assertEqual(region.height, 224.0)
        for left, right in zip(regions, regions[1:]):
            self.assertLessEqual(left.x + left.width, right.x)

    def test_capture_slots_tile_plot_width(self) -> None:
        for regions in (_band_regions()[1], slice_hit_regions(7, 186.0, 224.0)):
            self.assertEqual(regions[0].capture[0], 0.0)
            self.assertEqual(regions[-1].capture[1], 186.0)
            for left, right in zip(regions, regions[1:]):
                self.assertAlmostEqual(left.capture[1], right.capture[0])

    def test_slices_are_equal(self) -> None:
        regions = slice_hit_regions(7, 226.0, 187.0)
        for region in regions:
            self.assertAlmostEqual(region.width, 226.0 / 7.0)
        self.assertEqual(slice_hit_regions(0, 226.0, 187.0), [])

    def test_every_position_resolves_to_exactly_one_record(self) -> None:
        _, regions = _band_regions()
        seen: set[int] = set()
        previous = 0
        for x in np.linspace(0.0, 186.0, 745):
            index = resolve_hit(regions, float(x), 100.0, plot_width=186.0, plot_height=224.0)
            self.assertIsNotNone(index)
            assert index is not None
            self.assertGreaterEqual(index, previous)
            owners = [r.record_index for r in regions if r.captures(float(x))]
            self.assertLessEqual(len(owners), 1)
            previous = index
            seen.add(index)
        self.assertEqual(seen, set(range(7)))

    def test_right_edge_belongs_to_last_record(self) -> None:
        regions = slice_hit_regions(4, 100.0, 50.0)
        self.assertEqual(resolve_hit(regions, 100.0, 10.0, plot_width=100.0, plot_height=50.0), 3)

    def test_outside_plot_resolves_to_none(self) -> None:
        regions = slice_hit_regions(4, 100.0, 50.0)
        self.assertIsNone(resolve_hit(regions, -1.0, 10.0, plot_width=100.0, plot_height=50.0))
        self.assertIsNone(resolve_hit(regions, 101.0, 10.0, plot_width=100.0, plot_height=50.0))
        self.assertIsNone(resolve_hit(regions, 50.0, 51.0, plot_width=100.0, plot_height=50.0))
        self.assertIsNone(resolve_hit([], 50.0, 10.0, plot_width=100.0, plot_height=50.0))


if __name__ == "__main__":
    unittest.main()
