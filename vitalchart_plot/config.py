from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib
from typing import Any, Literal, Mapping, TypeVar


ChartKind = Literal["activity", "average"]

WEEKDAY_INITIALS = ("L", "M", "M", "J", "V", "S", "D")


@dataclass(frozen=True)
class Margins:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    def __post_init__(self) -> None:
        if min(self.top, self.right, self.bottom, self.left) < 0:
            raise ValueError("margins must be >= 0")


@dataclass(frozen=True)
class TooltipStyle:
    label_width: float = 39.0
    label_height: float = 70.0
    # None anchors the label above the hovered datum instead of a fixed row.
    label_top: float | None = 20.0
    label_gap: float = 5.0
    shift: float = 49.0
    label_fill: str = "#E60000"
    text_fill: str = "#FFFFFF"
    font_size: float = 10.0
    highlight_fill: str = "#C4C4C4"
    highlight_opacity: float = 0.5
    ring_radius: float | None = None
    ring_opacity: float = 0.3

    def __post_init__(self) -> None:
        if self.label_width <= 0 or self.label_height <= 0:
            raise ValueError("tooltip label width/height must be > 0")
        if self.shift < 0:
            raise ValueError("tooltip shift must be >= 0")
        for name in ("highlight_opacity", "ring_opacity"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1]")
        if self.ring_radius is not None and self.ring_radius <= 0:
            raise ValueError("ring_radius must be > 0")


@dataclass(frozen=True)
class ActivityChartConfig:
    margins: Margins = field(default_factory=lambda: Margins(top=64.0, right=48.0, bottom=32.0, left=24.0))
    series_keys: tuple[str, ...] = ("kilogram", "calories")
    series_colors: Mapping[str, str] = field(
        default_factory=lambda: {"kilogram": "#020203", "calories": "#FF0101"}
    )
    series_labels: Mapping[str, str] = field(
        default_factory=lambda: {"kilogram": "Poids (kg)", "calories": "Calories brûlées (kCal)"}
    )
    series_units: Mapping[str, str] = field(default_factory=lambda: {"kilogram": "kg", "calories": "Kcal"})
    band_padding: float = 0.6
    series_padding: float = 0.5
    headroom_factor: float = 1.4
    bar_width: float | None = 8.0
    axis_key: str = "kilogram"
    axis_tick_count: int = 3
    axis_top_inset: float = 5.0
    tick_labels: tuple[str, ...] | None = None
    tick_padding: float = 16.0
    title: str = "Activité quotidienne"
    background: str = "#FBFBFB"
    baseline_color: str = "#DEDEDE"
    grid_color: str = "#DEDEDE"
    text_color: str = "#9B9EAC"
    title_color: str = "#20253A"
    font_size: float = 12.0
    tooltip: TooltipStyle = field(default_factory=TooltipStyle)

    def __post_init__(self) -> None:
        _validate_padding("band_padding", self.band_padding)
        _validate_padding("series_padding", self.series_padding)
        if not self.series_keys:
            raise ValueError("series_keys must not be empty")
        missing = [key for key in self.series_keys if key not in self.series_colors]
        if missing:
            raise ValueError(f"series_colors missing keys: {missing}")
        if self.axis_key not in self.series_keys:
            raise ValueError(f"axis_key `{self.axis_key}` is not a series key")
        if self.headroom_factor < 1.0:
            raise ValueError("headroom_factor must be >= 1")
        if self.bar_width is not None and self.bar_width <= 0:
            raise ValueError("bar_width must be > 0")
        if self.axis_tick_count <= 0:
            raise ValueError("axis_tick_count must be > 0")


@dataclass(frozen=True)
class AverageChartConfig:
    margins: Margins = field(default_factory=lambda: Margins(top=40.0, right=16.0, bottom=36.0, left=16.0))
    value_key: str = "session_length"
    value_unit: str = "min"
    band_padding: float = 0.0
    value_top_inset: float = 30.0
    tick_labels: tuple[str, ...] | None = WEEKDAY_INITIALS
    tick_padding: float = 20.0
    title: str = "Durée moyenne des sessions"
    background: str = "#FF0000"
    line_color: str = "#FFFFFF"
    line_width: float = 2.0
    point_radius: float = 4.0
    text_color: str = "#FFFFFF"
    title_color: str = "#FFFFFF"
    font_size: float = 12.0
    tooltip: TooltipStyle = field(
        default_factory=lambda: TooltipStyle(
            label_width=50.0,
            label_height=20.0,
            label_top=None,
            label_gap=5.0,
            shift=60.0,
            label_fill="#FFFFFF",
            text_fill="#000000",
            font_size=8.0,
            highlight_fill="#000000",
            highlight_opacity=0.2,
            ring_radius=10.0,
            ring_opacity=0.3,
        )
    )

    def __post_init__(self) -> None:
        _validate_padding("band_padding", self.band_padding)
        if self.value_top_inset < 0:
            raise ValueError("value_top_inset must be >= 0")
        if self.point_radius <= 0:
            raise ValueError("point_radius must be > 0")


ChartConfig = ActivityChartConfig | AverageChartConfig
_ConfigT = TypeVar("_ConfigT", ActivityChartConfig, AverageChartConfig)

_NESTED_TABLES = {"margins": Margins, "tooltip": TooltipStyle}
_MAPPING_TABLES = ("series_colors", "series_labels", "series_units")


def default_config(kind: ChartKind) -> ChartConfig:
    if kind == "activity":
        return ActivityChartConfig()
    if kind == "average":
        return AverageChartConfig()
    raise ValueError(f"unknown chart kind: {kind}")


def load_chart_config(path: str | Path, kind: ChartKind) -> ChartConfig:
    """Read TOML overrides on top of the default config for `kind`."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    return apply_overrides(default_config(kind), raw)


def apply_overrides(config: _ConfigT, raw: Mapping[str, Any]) -> _ConfigT:
    annotations = {f.name: f.type for f in fields(config)}
    changes: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in annotations:
            raise ValueError(f"unknown config key: {key}")
        if key in _NESTED_TABLES:
            changes[key] = _override_table(getattr(config, key), value, key)
        elif key in _MAPPING_TABLES:
            if not isinstance(value, Mapping):
                raise ValueError(f"`{key}` must be a table")
            if not all(isinstance(v, str) for v in value.values()):
                raise ValueError(f"`{key}` values must be strings")
            changes[key] = {**getattr(config, key), **{str(k): v for k, v in value.items()}}
        else:
            changes[key] = _coerce(key, annotations[key], value)
    return replace(config, **changes)


def _override_table(current: Any, value: Any, key: str) -> Any:
    if not isinstance(value, Mapping):
        raise ValueError(f"`{key}` must be a table")
    annotations = {f.name: f.type for f in fields(current)}
    unknown = sorted(set(value) - set(annotations))
    if unknown:
        raise ValueError(f"unknown `{key}` keys: {unknown}")
    changes = {name: _coerce(f"{key}.{name}", annotations[name], v) for name, v in value.items()}
    return replace(current, **changes)


def _coerce(name: str, annotation: Any, value: Any) -> Any:
    """Check a TOML value against a field annotation; TOML has no null."""
    base = str(annotation).split(" | ")[0]
    if base.startswith("tuple"):
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return tuple(value)
        expected = "an array of strings"
    elif base == "float":
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        expected = "a number"
    elif base == "int":
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        expected = "an integer"
    elif base == "str":
        if isinstance(value, str):
            return value
        expected = "a string"
    else:
        raise ValueError(f"`{name}` cannot be overridden")
    raise ValueError(f"`{name}` must be {expected}, got {type(value).__name__}")


def _validate_padding(name: str, value: float) -> None:
    if not 0.0 <= value < 1.0:
        raise ValueError(f"{name} must be in [0, 1)")
