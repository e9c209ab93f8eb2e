"""Run directories for optimizer runs and the files written before a run starts."""
from __future__ import annotations

import json
import re
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import yaml

from .config import ArtifactsConfig, RunConfig

_UNSAFE_NAME_CHARS = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class RunArtifacts:
    """Paths produced for a concrete optimizer run."""

    run_id: str
    run_dir: Path
    config_original: Path
    config_resolved: Path
    log_path: Path
    summary_path: Path
    meta_path: Path

    @classmethod
    def in_directory(cls, run_dir: Path, log_path: Path | None = None) -> "RunArtifacts":
        return cls(
            run_id=run_dir.name or run_dir.as_posix(),
            run_dir=run_dir,
            config_original=run_dir / "config_original.yaml",
            config_resolved=run_dir / "config_resolved.json",
            log_path=log_path or run_dir / "log.csv",
            summary_path=run_dir / "summary.json",
            meta_path=run_dir / "meta.json",
        )


def prepare_run_environment(
    config_model: RunConfig,
    *,
    config_source: Path | None = None,
    runs_root: Path | None = None,
) -> tuple[Dict[str, Any], RunArtifacts]:
    """Claim a run directory and point the config's artifacts into it.

    Without an explicit ``artifacts.run_root`` the directory is named after
    ``metadata.name`` under ``runs_root`` and suffixed ``-02``, ``-03``, ...
    when taken. Returns the resolved config mapping and the artifact paths.
    """

    current = config_model.artifacts
    if current is not None and current.run_root:
        run_dir = Path(current.run_root)
        run_dir.mkdir(parents=True, exist_ok=True)
    else:
        run_dir = _claim_run_directory(runs_root or Path("runs"), _run_name(config_model.metadata.name))

    explicit_log = current.log_file if current is not None else None
    artifacts = RunArtifacts.in_directory(run_dir, Path(explicit_log) if explicit_log else None)

    resolved = config_model.model_copy(
        update={
            "artifacts": ArtifactsConfig(
                run_root=str(artifacts.run_dir), log_file=str(artifacts.log_path)
            )
        }
    )

    artifacts.log_path.parent.mkdir(parents=True, exist_ok=True)
    _store_config(resolved, artifacts, config_source)
    _store_meta(resolved, artifacts, config_source)
    return resolved.model_dump(mode="python"), artifacts


def _run_name(name: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("-", name.strip().lower()).strip("-") or "run"


def _claim_run_directory(root: Path, name: str) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    candidate, index = root / name, 2
    while True:
        try:
            candidate.mkdir()
        except FileExistsError:
            candidate = root / f"{name}-{index:02d}"
            index += 1
        else:
            return candidate


def _store_config(model: RunConfig, artifacts: RunArtifacts, source: Path | None) -> None:
    if source is not None and source.exists():
        shutil.copyfile(source, artifacts.config_original)
    else:
        with artifacts.config_original.open("w", encoding="utf-8") as fh:
            yaml.safe_dump(model.model_dump(mode="python"), fh, allow_unicode=True, sort_keys=False)

    with artifacts.config_resolved.open("w", encoding="utf-8") as fh:
        json.dump(model.model_dump(mode="json"), fh, indent=2, ensure_ascii=False)


def _store_meta(model: RunConfig, artifacts: RunArtifacts, source: Path | None) -> None:
    optimizer = model.optimizer
    meta: Dict[str, Any] = {
        "run_id": artifacts.run_id,
        "run_dir": str(artifacts.run_dir),
        "created_at": datetime.now(timezone.utc).isoformat(),
        "metadata": model.metadata.model_dump(mode="json"),
        "seed": model.seed,
        "optimizer": {
            "direction": "maximize" if optimizer.maximize else "minimize",
            "initial_radius": optimizer.initial_radius,
            "growth_factor": optimizer.resolved_growth_factor,
            "shrink_factor": optimizer.resolved_shrink_factor,
            "maximum_iteration": optimizer.maximum_iteration,
            "epsilon": optimizer.epsilon,
        },
        "cost_function": f"{model.cost_function.module}:{model.cost_function.callable}",
        "artifacts": {
            "config_original": str(artifacts.config_original),
            "config_resolved": str(artifacts.config_resolved),
            "log": str(artifacts.log_path),
            "summary": str(artifacts.summary_path),
        },
        "source": {"config_path": str(source) if source else None},
    }
    with artifacts.meta_path.open("w", encoding="utf-8") as fh:
        json.dump(meta, fh, indent=2, ensure_ascii=False)


__all__ = ["RunArtifacts", "prepare_run_environment"]
