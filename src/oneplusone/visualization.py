"""Utility functions for generating static plots from iteration logs."""
from __future__ import annotations

from pathlib import Path

import matplotlib

# Force a non-interactive backend to support headless environments (tests/CI).
matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import pandas as pd

REQUIRED_COLUMNS = ("iteration", "cost", "radius")


class VisualizationError(RuntimeError):
    """Raised when a visualization cannot be generated."""


def plot_history(
    log_path: Path | str,
    *,
    title: str | None = None,
    output_path: Path | str | None = None,
    log_scale: bool = True,
) -> Path:
    """Plot the committed cost and the search radius against the iteration count."""

    log_path = Path(log_path)
    df = _read_log(log_path)

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise VisualizationError(
            f"Log file {log_path} does not contain required columns: {', '.join(missing)}"
        )
    df = df.sort_values("iteration")
    iterations = df["iteration"].to_list()
    cost = pd.to_numeric(df["cost"], errors="coerce")
    radius = pd.to_numeric(df["radius"], errors="coerce")

    fig, (cost_ax, radius_ax) = plt.subplots(2, 1, figsize=(6, 6), sharex=True)
    cost_ax.plot(iterations, cost, color="#5DA5DA", label="Cost")
    if "accepted" in df.columns:
        accepted = df["accepted"].astype(bool)
        cost_ax.scatter(
            df.loc[accepted, "iteration"],
            cost[accepted],
            color="#F15854",
            s=8,
            label="Accepted step",
        )
    cost_ax.set_ylabel("Cost")
    cost_ax.grid(True, linestyle=":", linewidth=0.5)
    cost_ax.legend()

    radius_ax.plot(iterations, radius, color="#60BD68", label="Radius")
    if "frobenius_norm" in df.columns:
        norm = pd.to_numeric(df["frobenius_norm"], errors="coerce")
        radius_ax.plot(iterations, norm, color="#B276B2", linestyle="--", label="Search norm")
    if log_scale and (radius > 0).all():
        radius_ax.set_yscale("log")
    radius_ax.set_xlabel("Iteration")
    radius_ax.set_ylabel("Step size")
    radius_ax.grid(True, linestyle=":", linewidth=0.5)
    radius_ax.legend()

    fig.suptitle(title or "Optimization history")
    fig.tight_layout()

    output = _resolve_output_path(log_path, output_path, suffix="history")
    fig.savefig(output)
    plt.close(fig)
    return output


def _read_log(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise VisualizationError(f"Log file not found: {path}")
    try:
        df = pd.read_csv(path)
    except pd.errors.EmptyDataError as exc:  # type: ignore[attr-defined]
        raise VisualizationError(f"Log file is empty: {path}") from exc
    if df.empty:
        raise VisualizationError(f"Log file does not contain any iterations: {path}")
    return df


def _resolve_output_path(log_path: Path, output_path: Path | str | None, *, suffix: str) -> Path:
    if output_path is not None:
        return Path(output_path)
    directory = log_path.parent
    stem = log_path.stem
    return directory / f"{stem}_{suffix}.png"


__all__ = ["VisualizationError", "plot_history"]
