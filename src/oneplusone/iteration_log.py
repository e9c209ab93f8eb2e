"""CSV log of optimizer iterations."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, List

from .state import IterationRecord

BASE_FIELDS = ("iteration", "accepted", "cost", "candidate_cost", "radius", "frobenius_norm")


class IterationLogger:
    """Append one CSV row per optimizer step.

    Instances are callable so they can be registered directly with
    :meth:`OnePlusOneEvolutionaryOptimizer.add_observer`.
    """

    def __init__(self, path: Path | str, dimension: int) -> None:
        self.path = Path(path)
        self.dimension = int(dimension)
        self.param_fields = [f"param_x{index}" for index in range(self.dimension)]
        self.rows_written = 0

        fieldnames = [*BASE_FIELDS, *self.param_fields]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        write_header = not self.path.exists() or self.path.stat().st_size == 0
        if not write_header:
            existing = _read_header(self.path)
            if existing != fieldnames:
                raise ValueError(
                    f"Iteration log {self.path} has columns {existing}, expected {fieldnames}"
                )
        self._fh = self.path.open("a", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(self._fh, fieldnames=fieldnames)
        if write_header:
            self._writer.writeheader()

    def log(self, record: IterationRecord) -> None:
        row: Dict[str, Any] = {
            "iteration": record.iteration,
            "accepted": int(record.accepted),
            "cost": record.cost,
            "candidate_cost": record.candidate_cost,
            "radius": record.radius,
            "frobenius_norm": record.frobenius_norm,
        }
        for name, value in zip(self.param_fields, record.position, strict=False):
            row[name] = value
        self._writer.writerow(row)
        self._fh.flush()
        self.rows_written += 1

    def __call__(self, record: IterationRecord) -> None:
        self.log(record)

    def close(self) -> None:
        self._fh.close()

    def __enter__(self) -> "IterationLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:  # pragma: no cover - best effort cleanup
        fh = getattr(self, "_fh", None)
        if fh is None:
            return
        try:
            fh.close()
        except Exception:  # noqa: BLE001 - guard for interpreter shutdown
            pass


def _read_header(path: Path) -> List[str]:
    with path.open("r", newline="", encoding="utf-8") as fh:
        return next(csv.reader(fh), [])


__all__ = ["BASE_FIELDS", "IterationLogger"]
