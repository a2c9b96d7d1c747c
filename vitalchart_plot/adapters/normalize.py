from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
import logging
import math
from numbers import Real
from typing import Any

import numpy as np

from vitalchart_plot.errors import PlotDataError
from vitalchart_plot.records import AverageSession, Dataset, DatasetKind, Record, WeightSession


LOGGER = logging.getLogger(__name__)

_SESSION_LENGTH_KEYS = ("sessionLength", "session_length")


def normalize_sessions(payload: Any, kind: DatasetKind) -> Dataset:
    """Build a `Dataset` from a payload exposing a `sessions` sequence.

    The payload may be the session container itself or a wrapper keyed by the
    chart kind (`{"activity": {"sessions": [...]}}`). A missing container
    yields an empty dataset. Records without a usable `day` and records that
    repeat an earlier `day` are dropped; unusable metric values become nan so
    only the marks depending on them disappear.
    """

    sessions = _resolve_sessions(payload, kind)
    if sessions is None:
        return Dataset(kind=kind)
    if isinstance(sessions, (str, bytes, bytearray)) or not isinstance(sessions, Sequence):
        raise PlotDataError(f"`sessions` must be a sequence, got {type(sessions)!r}")

    records: list[Record] = []
    seen_days: set[str] = set()
    for index, raw in enumerate(sessions):
        record = _build_record(raw, kind)
        if record is None:
            LOGGER.warning("dropping %s session %d: missing or invalid day", kind, index)
            continue
        day_key = str(record.day)
        if day_key in seen_days:
            LOGGER.warning("dropping %s session %d: duplicate day %r", kind, index, record.day)
            continue
        seen_days.add(day_key)
        records.append(record)
    return Dataset(kind=kind, records=tuple(records))


def coerce_metric(raw: Any) -> float:
    if raw is None or isinstance(raw, bool):
        return math.nan
    if isinstance(raw, Decimal):
        value = float(raw)
    elif isinstance(raw, (Real, np.number)):
        value = float(raw)
    else:
        return math.nan
    return value if math.isfinite(value) else math.nan


def _resolve_sessions(payload: Any, kind: DatasetKind) -> Any:
    if payload is None:
        return None
    sessions = _field(payload, "sessions")
    if sessions is not None:
        return sessions
    wrapped = _field(payload, kind)
    if wrapped is None:
        return None
    return _field(wrapped, "sessions")


def _field(raw: Any, name: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(name)
    return getattr(raw, name, None)


def _build_record(raw: Any, kind: DatasetKind) -> Record | None:
    if raw is None:
        return None
    if kind == "activity":
        day = _field(raw, "day")
        if day is None or isinstance(day, bool) or str(day).strip() == "":
            return None
        return WeightSession(
            day=str(day),
            kilogram=coerce_metric(_field(raw, "kilogram")),
            calories=coerce_metric(_field(raw, "calories")),
        )
    ordinal = _coerce_ordinal(_field(raw, "day"))
    if ordinal is None:
        return None
    length: Any = None
    for key in _SESSION_LENGTH_KEYS:
        length = _field(raw, key)
        if length is not None:
            break
    return AverageSession(day=ordinal, session_length=coerce_metric(length))


def _coerce_ordinal(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value != int(value) or value < 1:
        return None
    return int(value)
