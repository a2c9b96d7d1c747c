from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence, Union

import numpy as np


DatasetKind = Literal["activity", "average"]


@dataclass(frozen=True)
class WeightSession:
    day: str
    kilogram: float
    calories: float

    def value(self, key: str) -> float:
        if key == "kilogram":
            return self.kilogram
        if key == "calories":
            return self.calories
        raise KeyError(key)


@dataclass(frozen=True)
class AverageSession:
    day: int
    session_length: float

    def value(self, key: str) -> float:
        if key == "session_length":
            return self.session_length
        raise KeyError(key)


Record = Union[WeightSession, AverageSession]


@dataclass(frozen=True)
class Dataset:
    """Ordered records of one chart; order defines the categorical axis."""

    kind: DatasetKind
    records: tuple[Record, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    @property
    def empty(self) -> bool:
        return not self.records

    def days(self) -> list[str]:
        return [str(r.day) for r in self.records]

    def values(self, key: str) -> np.ndarray:
        return np.asarray([r.value(key) for r in self.records], dtype=np.float64)

    def stacked_values(self, keys: Sequence[str]) -> np.ndarray:
        """Shape (len(records), len(keys)); missing values are nan."""
        if not self.records:
            return np.zeros((0, len(keys)), dtype=np.float64)
        return np.stack([self.values(key) for key in keys], axis=1)
