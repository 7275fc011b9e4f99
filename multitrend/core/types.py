# multitrend/core/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

# ============================================================
# Field layout (FROZEN)
# ============================================================
FIELDS: Tuple[str, str] = ("open", "close")
OPEN = 0
CLOSE = 1

SCALE_SCHEMA_VERSION = 1


def field_index(name: str) -> int:
    try:
        return FIELDS.index(name)
    except ValueError:
        raise KeyError(f"unknown field {name!r}, expected one of {FIELDS}") from None


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


# ============================================================
# Observation
# ============================================================
@dataclass(frozen=True)
class Observation:
    date: str
    entity: str
    open: float
    close: float


# ============================================================
# Pivoted series
# ============================================================
@dataclass(frozen=True)
class PivotedSeries:
    """
    Dense per-entity, per-date aligned series.

    values[e, f, t]:
        e = position in `entities`
        f = OPEN / CLOSE
        t = position in `dates`
    NaN marks a hole.
    """

    dates: Tuple[str, ...]
    entities: Tuple[str, ...]
    values: np.ndarray

    def __post_init__(self):
        expected = (len(self.entities), len(FIELDS), len(self.dates))
        if self.values.shape != expected:
            raise ValueError(
                f"values shape {self.values.shape} != {expected} (entities, fields, dates)"
            )
        _readonly(self.values)

    @property
    def entity_count(self) -> int:
        return len(self.entities)

    @property
    def date_count(self) -> int:
        return len(self.dates)

    def entity_index(self, entity: str) -> int:
        try:
            return self.entities.index(entity)
        except ValueError:
            raise KeyError(f"unknown entity {entity!r}") from None

    def series(self, entity: str, field_name: str) -> np.ndarray:
        return self.values[self.entity_index(entity), field_index(field_name)]

    def holes(self) -> np.ndarray:
        return np.isnan(self.values)

    def hole_count(self) -> int:
        return int(self.holes().sum())

    def with_values(self, values: np.ndarray) -> "PivotedSeries":
        return PivotedSeries(dates=self.dates, entities=self.entities, values=values)

    def to_mapping(self) -> Dict[str, Dict[str, List[Optional[float]]]]:
        """entity → field → list, holes as None."""
        out: Dict[str, Dict[str, List[Optional[float]]]] = {}
        for e, entity in enumerate(self.entities):
            out[entity] = {
                name: [None if np.isnan(v) else float(v) for v in self.values[e, f]]
                for f, name in enumerate(FIELDS)
            }
        return out


# ============================================================
# Scale parameters
# ============================================================
@dataclass(frozen=True)
class ScaleParams:
    """
    Per entity / field min-max over the full history.

    mins / maxs: shape (entity_count, 2), read-only.
    """

    entities: Tuple[str, ...]
    mins: np.ndarray
    maxs: np.ndarray

    def __post_init__(self):
        expected = (len(self.entities), len(FIELDS))
        if self.mins.shape != expected or self.maxs.shape != expected:
            raise ValueError(f"scale shape mismatch, expected {expected}")
        _readonly(self.mins)
        _readonly(self.maxs)

    def get(self, entity: str, field_name: str) -> Tuple[float, float]:
        e = self._entity_index(entity)
        f = field_index(field_name)
        return float(self.mins[e, f]), float(self.maxs[e, f])

    def transform(self, values: np.ndarray) -> np.ndarray:
        """
        values: (entity_count, 2, T) → normalised copy, holes preserved.
        """
        lo = self.mins[:, :, None]
        span = (self.maxs - self.mins)[:, :, None]
        with np.errstate(invalid="ignore", divide="ignore"):
            out = np.where(span == 0, 0.0, (values - lo) / np.where(span == 0, 1.0, span))
        out[np.isnan(values)] = np.nan
        return out

    def inverse(self, entity: str, field_name: str, value: float) -> float:
        lo, hi = self.get(entity, field_name)
        return lo + value * (hi - lo)

    # ---------------- record (de)serialisation ----------------
    def to_record(self) -> dict:
        return {
            "schema_version": SCALE_SCHEMA_VERSION,
            "entities": list(self.entities),
            "scale_params": {
                entity: {
                    name: {
                        "min": float(self.mins[e, f]),
                        "max": float(self.maxs[e, f]),
                    }
                    for f, name in enumerate(FIELDS)
                }
                for e, entity in enumerate(self.entities)
            },
        }

    @classmethod
    def from_record(cls, record: dict) -> "ScaleParams":
        version = record.get("schema_version")
        if version != SCALE_SCHEMA_VERSION:
            raise ValueError(
                f"unsupported scale params schema_version={version!r}, "
                f"expected {SCALE_SCHEMA_VERSION}"
            )

        entities = tuple(record["entities"])
        params = record["scale_params"]

        mins = np.empty((len(entities), len(FIELDS)), dtype=np.float64)
        maxs = np.empty_like(mins)
        for e, entity in enumerate(entities):
            for f, name in enumerate(FIELDS):
                mins[e, f] = float(params[entity][name]["min"])
                maxs[e, f] = float(params[entity][name]["max"])

        return cls(entities=entities, mins=mins, maxs=maxs)

    def _entity_index(self, entity: str) -> int:
        try:
            return self.entities.index(entity)
        except ValueError:
            raise KeyError(f"unknown entity {entity!r}") from None


# ============================================================
# Window samples
# ============================================================
@dataclass(frozen=True)
class WindowSample:
    anchor_index: int
    anchor_date: str
    inputs: np.ndarray   # (lookback_length, entity_count * 2)
    labels: np.ndarray   # (entity_count * horizon_length,)


@dataclass
class SampleSet:
    """
    Ordered supervised samples, one per valid anchor.

    inputs : (N, lookback_length, entity_count * 2), float64
             step vector = [e0_open, e0_close, e1_open, e1_close, ...]
    labels : (N, entity_count * horizon_length), int8
             column = entity_index * horizon_length + day_index
    anchors: (N,) axis positions, strictly increasing
    """

    inputs: np.ndarray
    labels: np.ndarray
    anchors: np.ndarray
    anchor_dates: Tuple[str, ...]
    entities: Tuple[str, ...]
    lookback_length: int
    horizon_length: int
    _disposed: bool = field(default=False, repr=False)

    def __post_init__(self):
        n = len(self.anchors)
        if self.inputs.shape[0] != n or self.labels.shape[0] != n or len(self.anchor_dates) != n:
            raise ValueError("inputs / labels / anchors length mismatch")
        _readonly(self.inputs)
        _readonly(self.labels)
        _readonly(self.anchors)

    def __len__(self) -> int:
        return len(self.anchors)

    def __iter__(self) -> Iterator[WindowSample]:
        for i in range(len(self)):
            yield self.sample(i)

    def __enter__(self) -> "SampleSet":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def feature_count(self) -> int:
        return len(self.entities) * len(FIELDS)

    @property
    def output_count(self) -> int:
        return len(self.entities) * self.horizon_length

    def sample(self, i: int) -> WindowSample:
        return WindowSample(
            anchor_index=int(self.anchors[i]),
            anchor_date=self.anchor_dates[i],
            inputs=self.inputs[i],
            labels=self.labels[i],
        )

    def slice(self, start: int, stop: int) -> "SampleSet":
        """Owned copy of samples[start:stop]."""
        return SampleSet(
            inputs=self.inputs[start:stop].copy(),
            labels=self.labels[start:stop].copy(),
            anchors=self.anchors[start:stop].copy(),
            anchor_dates=self.anchor_dates[start:stop],
            entities=self.entities,
            lookback_length=self.lookback_length,
            horizon_length=self.horizon_length,
        )

    def feature_names(self) -> List[str]:
        return [f"{entity}.{name}" for entity in self.entities for name in FIELDS]

    def label_names(self) -> List[str]:
        return [
            f"{entity}.d{day + 1}"
            for entity in self.entities
            for day in range(self.horizon_length)
        ]

    def dispose(self) -> None:
        """Release the numeric buffers; metadata stays readable."""
        if self._disposed:
            return
        self.inputs = _readonly(
            np.empty((0, self.lookback_length, self.feature_count), dtype=np.float64)
        )
        self.labels = _readonly(np.empty((0, self.output_count), dtype=np.int8))
        self.anchors = _readonly(np.empty((0,), dtype=np.int64))
        self.anchor_dates = ()
        self._disposed = True


@dataclass
class ChronologicalSplit:
    train: SampleSet
    test: SampleSet
    split_index: int

    def __enter__(self) -> "ChronologicalSplit":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()

    def dispose(self) -> None:
        self.train.dispose()
        self.test.dispose()


# ============================================================
# Evaluation
# ============================================================
@dataclass(frozen=True)
class PredictionRecord:
    entity: str
    sample_index: int
    day: int              # 1-based horizon day
    probability: float
    predicted: int
    actual: int
    correct: bool


@dataclass(frozen=True)
class EvaluationReport:
    """
    Per-entity diagnostics decomposed from a flat prediction matrix.

    records[entity][sample_index] → horizon_length PredictionRecords
    """

    entities: Tuple[str, ...]
    horizon_length: int
    sample_count: int
    accuracies: Dict[str, float]
    records: Dict[str, Tuple[Tuple[PredictionRecord, ...], ...]]
    overall_accuracy: float
    anchor_dates: Optional[Tuple[str, ...]] = None

    def accuracy(self, entity: str) -> float:
        return self.accuracies[entity]

    def timeline(self, entity: str, limit: Optional[int] = None) -> Tuple[Tuple[PredictionRecord, ...], ...]:
        rows = self.records[entity]
        return rows if limit is None else rows[:limit]

    def ranking(self) -> List[Tuple[str, float]]:
        """(entity, accuracy) sorted by accuracy descending, canonical order on ties."""
        return sorted(self.accuracies.items(), key=lambda kv: -kv[1])

    def to_frame(self) -> pd.DataFrame:
        rows = []
        for entity in self.entities:
            for sample in self.records[entity]:
                for rec in sample:
                    rows.append(
                        {
                            "entity": rec.entity,
                            "sample_index": rec.sample_index,
                            "anchor_date": (
                                self.anchor_dates[rec.sample_index]
                                if self.anchor_dates is not None
                                else None
                            ),
                            "day": rec.day,
                            "probability": rec.probability,
                            "predicted": rec.predicted,
                            "actual": rec.actual,
                            "correct": rec.correct,
                        }
                    )
        return pd.DataFrame(
            rows,
            columns=[
                "entity", "sample_index", "anchor_date", "day",
                "probability", "predicted", "actual", "correct",
            ],
        )


# ============================================================
# Dataset summary
# ============================================================
@dataclass(frozen=True)
class DatasetSummary:
    entities: Tuple[str, ...]
    date_count: int
    first_date: str
    last_date: str
    sample_count: int
    train_samples: int
    test_samples: int
    lookback_length: int
    horizon_length: int

    def as_dict(self) -> dict:
        return {
            "entities": list(self.entities),
            "date_count": self.date_count,
            "first_date": self.first_date,
            "last_date": self.last_date,
            "sample_count": self.sample_count,
            "train_samples": self.train_samples,
            "test_samples": self.test_samples,
            "lookback_length": self.lookback_length,
            "horizon_length": self.horizon_length,
        }


def observations_to_frame(observations: Sequence[Observation]) -> pd.DataFrame:
    return pd.DataFrame(
        [(o.date, o.entity, o.open, o.close) for o in observations],
        columns=["date", "entity", "open", "close"],
    )
