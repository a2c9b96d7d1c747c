from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from vitalchart_core import ChartFrame, ContainerBox, DimensionProvider
from vitalchart_plot import ActivityChart, AverageSessionsChart, load_chart_config


ACTIVITY = {
    "activity": {
        "sessions": [
            {"day": "2020-07-01", "kilogram": 80, "calories": 240},
            {"day": "2020-07-02", "kilogram": 80, "calories": 220},
            {"day": "2020-07-03", "kilogram": 81, "calories": 280},
            {"day": "2020-07-04", "kilogram": 81, "calories": 290},
            {"day": "2020-07-05", "kilogram": 80, "calories": 160},
            {"day": "2020-07-06", "kilogram": 78, "calories": 162},
            {"day": "2020-07-07", "kilogram": 76, "calories": 390},
        ]
    }
}

AVERAGE = {
    "average": {
        "sessions": [
            {"day": 1, "sessionLength": 30},
            {"day": 2, "sessionLength": 23},
            {"day": 3, "sessionLength": 45},
            {"day": 4, "sessionLength": 50},
            {"day": 5, "sessionLength": 0},
            {"day": 6, "sessionLength": 0},
            {"day": 7, "sessionLength": 60},
        ]
    }
}


def _save_frame(path: Path, frame: ChartFrame) -> None:
    if frame.revision == 0:
        raise RuntimeError(f"nothing presented for {path.name}")
    rgba: np.ndarray = frame.snapshot().numpy()
    Image.fromarray(rgba).save(path)


def _hover_last(chart: ActivityChart | AverageSessionsChart) -> None:
    scene = chart.scene
    if scene is None or not scene.context.hit_regions:
        return
    region = scene.context.hit_regions[-1]
    chart.handle_host_event(
        "pointer_move",
        {
            "x": scene.plot.x + region.x + region.width / 2.0,
            "y": scene.plot.y + scene.plot.height / 2.0,
        },
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Render the weekly activity and session charts.")
    parser.add_argument("--out", type=Path, default=Path("vitalchart_demo"))
    parser.add_argument("--activity-config", type=Path, default=None)
    parser.add_argument("--average-config", type=Path, default=None)
    parser.add_argument("--hover", action="store_true", help="hover the last record before saving")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    out_dir: Path = args.out
    out_dir.mkdir(parents=True, exist_ok=True)

    activity = ActivityChart(
        ACTIVITY,
        config=load_chart_config(args.activity_config, "activity") if args.activity_config else None,
    )
    average = AverageSessionsChart(
        AVERAGE,
        config=load_chart_config(args.average_config, "average") if args.average_config else None,
    )

    frames = {"activity": ChartFrame(), "average": ChartFrame()}
    activity.attach_frame(frames["activity"])
    average.attach_frame(frames["average"])

    activity_box = ContainerBox(835, 320)
    average_box = ContainerBox(258, 263)
    activity.bind(DimensionProvider(activity_box))
    average.bind(DimensionProvider(average_box))

    if args.hover:
        _hover_last(activity)
        _hover_last(average)

    for name, chart in (("activity", activity), ("average", average)):
        svg_path = out_dir / f"{name}.svg"
        png_path = out_dir / f"{name}.png"
        svg_path.write_text(chart.to_svg(), encoding="utf-8")
        _save_frame(png_path, frames[name])
        print(f"wrote {svg_path}")
        print(f"wrote {png_path}")


if __name__ == "__main__":
    main()
