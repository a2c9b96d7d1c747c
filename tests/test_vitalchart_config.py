from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from vitalchart_plot.config import (
    WEEKDAY_INITIALS,
    ActivityChartConfig,
    AverageChartConfig,
    Margins,
    TooltipStyle,
    apply_overrides,
    default_config,
    load_chart_config,
)


class ChartConfigTests(unittest.TestCase):
    def test_activity_defaults(self) -> None:
        config = ActivityChartConfig()
        self.assertEqual(config.band_padding, 0.6)
        self.assertEqual(config.series_padding, 0.5)
        self.assertEqual(config.headroom_factor, 1.4)
        self.assertEqual(config.bar_width, 8.0)
        self.assertEqual(dict(config.series_colors), {"kilogram": "#020203", "calories": "#FF0101"})
        self.assertEqual(config.tooltip.shift, config.tooltip.label_width + 10.0)

    def test_average_defaults(self) -> None:
        config = AverageChartConfig()
        self.assertEqual(config.band_padding, 0.0)
        self.assertEqual(config.tick_labels, WEEKDAY_INITIALS)
        self.assertIsNone(config.tooltip.label_top)
        self.assertEqual(config.tooltip.shift, config.tooltip.label_width + 10.0)

    def test_default_config_by_kind(self) -> None:
        self.assertIsInstance(default_config("activity"), ActivityChartConfig)
        self.assertIsInstance(default_config("average"), AverageChartConfig)
        with self.assertRaises(ValueError):
            default_config("pie")  # type: ignore[arg-type]

    def test_validation(self) -> None:
        with self.assertRaises(ValueError):
            ActivityChartConfig(band_padding=1.0)
        with self.assertRaises(ValueError):
            ActivityChartConfig(series_colors={"kilogram": "#000"})
        with self.assertRaises(ValueError):
            ActivityChartConfig(axis_key="steps")
        with self.assertRaises(ValueError):
            ActivityChartConfig(headroom_factor=0.5)
        with self.assertRaises(ValueError):
            Margins(top=-1.0)
        with self.assertRaises(ValueError):
            TooltipStyle(shift=-1.0)
        with self.assertRaises(ValueError):
            AverageChartConfig(point_radius=0.0)

    def test_load_toml_overrides(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "activity.toml"
            path.write_text(
                "\n".join(
                    [
                        "band_padding = 0.5",
                        'tick_labels = ["a", "b"]',
                        "[margins]",
                        "top = 10.0",
                        "[tooltip]",
                        "shift = 20.0",
                        "[series_colors]",
                        'calories = "#00FF00"',
                    ]
                ),
                encoding="utf-8",
            )
            config = load_chart_config(path, "activity")
        assert isinstance(config, ActivityChartConfig)
        self.assertEqual(config.band_padding, 0.5)
        self.assertEqual(config.tick_labels, ("a", "b"))
        self.assertEqual(config.margins.top, 10.0)
        self.assertEqual(config.margins.right, 48.0)
        self.assertEqual(config.tooltip.shift, 20.0)
        self.assertEqual(config.tooltip.label_width, 39.0)
        self.assertEqual(config.series_colors["calories"], "#00FF00")
        self.assertEqual(config.series_colors["kilogram"], "#020203")

    def test_unknown_keys_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            apply_overrides(ActivityChartConfig(), {"colour": "red"})
        with self.assertRaises(ValueError):
            apply_overrides(ActivityChartConfig(), {"margins": {"middle": 1.0}})
        with self.assertRaises(ValueError):
            apply_overrides(ActivityChartConfig(), {"series_colors": "red"})

    def test_overrides_are_validated(self) -> None:
        with self.assertRaises(ValueError):
            apply_overrides(AverageChartConfig(), {"band_padding": 2.0})

    def test_wrong_value_types_are_rejected(self) -> None:
        cases = [
            {"headroom_factor": "tall"},
            {"bar_width": True},
            {"axis_tick_count": 2.5},
            {"title": 3},
            {"tick_labels": "abc"},
            {"tick_labels": [1, 2]},
            {"margins": {"top": "x"}},
            {"tooltip": {"shift": True}},
            {"series_colors": {"calories": 255}},
        ]
        for raw in cases:
            with self.subTest(raw=raw), self.assertRaises(ValueError):
                apply_overrides(ActivityChartConfig(), raw)

    def test_integers_are_accepted_for_float_fields(self) -> None:
        config = apply_overrides(ActivityChartConfig(), {"bar_width": 6, "margins": {"left": 10}})
        self.assertEqual(config.bar_width, 6.0)
        self.assertIsInstance(config.bar_width, float)
        self.assertEqual(config.margins.left, 10.0)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_chart_config("/nonexistent/vitalchart.toml", "average")


if __name__ == "__main__":
    unittest.main()
