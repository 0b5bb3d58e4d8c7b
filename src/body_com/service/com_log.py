"""CSV persistence of per-frame COM displacement."""

from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Optional, Tuple

import numpy as np
import pandas as pd

LOGGER = logging.getLogger(__name__)

LOG_COLUMNS = ("x", "y", "z")


class DisplacementLog:
    """Append ``x,y,z`` rows to a file truncated when the log is opened."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.rows_written = 0
        self._handle: Optional[IO[str]] = None
        self._writer = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> "DisplacementLog":
        if self._handle is not None:
            return self
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._handle)
        self.rows_written = 0
        LOGGER.info("Writing displacement log to %s", self.path)
        return self

    def append(self, displacement: Iterable[float]) -> None:
        if self._writer is None:
            raise RuntimeError("Displacement log is not open.")
        x, y, z = (float(value) for value in displacement)
        self._writer.writerow([x, y, z])
        self.rows_written += 1

    def close(self) -> None:
        if self._handle is None:
            return
        self._handle.flush()
        self._handle.close()
        self._handle = None
        self._writer = None
        LOGGER.info("Closed displacement log %s (%d rows)", self.path, self.rows_written)

    def __enter__(self) -> "DisplacementLog":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def load_displacement_log(path: Path | str) -> pd.DataFrame:
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Displacement log not found: {source}")
    if source.stat().st_size == 0:
        return pd.DataFrame(columns=list(LOG_COLUMNS), dtype=float)
    return pd.read_csv(source, header=None, names=list(LOG_COLUMNS), usecols=[0, 1, 2], dtype=float)


@dataclass(slots=True)
class DisplacementSummary:
    row_count: int
    final: Optional[Tuple[float, float, float]]
    max_abs: Optional[Tuple[float, float, float]]
    path_length: float

    def as_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"row_count": self.row_count, "path_length": self.path_length}
        for name, values in (("final", self.final), ("max_abs", self.max_abs)):
            for axis, value in zip(LOG_COLUMNS, values or (None, None, None)):
                payload[f"{name}_{axis}"] = value
        return payload


def summarize_displacement_log(path: Path | str) -> DisplacementSummary:
    frame = load_displacement_log(path)
    if frame.empty:
        return DisplacementSummary(row_count=0, final=None, max_abs=None, path_length=float("nan"))
    values = frame[list(LOG_COLUMNS)].to_numpy(dtype=float)
    steps = np.linalg.norm(np.diff(values, axis=0), axis=1)
    path_length = float(steps.sum()) if len(steps) else 0.0
    final = tuple(float(v) for v in values[-1])
    max_abs = tuple(float(v) for v in np.abs(values).max(axis=0))
    if not math.isfinite(path_length):
        LOGGER.warning("Displacement log %s contains non-finite values", path)
    return DisplacementSummary(
        row_count=int(len(values)),
        final=final,
        max_abs=max_abs,
        path_length=path_length,
    )


__all__ = [
    "DisplacementLog",
    "DisplacementSummary",
    "LOG_COLUMNS",
    "load_displacement_log",
    "summarize_displacement_log",
]
