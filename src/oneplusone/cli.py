"""Command line interface for running and inspecting optimizer runs."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

import yaml
from pydantic import ValidationError

from .config import RunConfig
from .run_management import prepare_run_environment

if TYPE_CHECKING:
    from .optimization import OptimizationResult


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the (1+1) evolutionary strategy optimizer from a YAML configuration."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/quadratic.yaml"),
        help="Path to the run configuration YAML file.",
    )
    parser.add_argument(
        "--as-json",
        action="store_true",
        help="Print the validated configuration as JSON for downstream tooling.",
    )
    parser.add_argument(
        "--summarize",
        action="store_true",
        help="Only print a summary of the configuration without running the optimizer.",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        help="Override optimizer.maximum_iteration from the configuration.",
    )
    parser.add_argument(
        "--runs-root",
        type=Path,
        default=Path("runs"),
        help="Directory under which run directories are allocated.",
    )
    subparsers = parser.add_subparsers(dest="command")
    _configure_visualize_subcommand(subparsers)
    return parser.parse_args()


def _configure_visualize_subcommand(subparsers: argparse._SubParsersAction) -> None:
    visualize = subparsers.add_parser(
        "visualize",
        help="Render cost and radius history from an iteration log.",
    )
    visualize.add_argument("--log", type=Path, required=True, help="Iteration log CSV file.")
    visualize.add_argument("--output", type=Path, help="Destination image path.")
    visualize.add_argument("--title", help="Optional plot title.")


def load_config(path: Path) -> RunConfig:
    if not path.exists():
        raise SystemExit(f"Configuration file not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if not isinstance(data, dict):
        raise SystemExit("Configuration root must be a mapping (YAML dictionary).")

    return _validate(data, "Configuration validation failed")


def apply_overrides(config: RunConfig, *, max_iterations: int | None) -> RunConfig:
    if max_iterations is None:
        return config
    data = config.model_dump(mode="python")
    data["optimizer"]["maximum_iteration"] = max_iterations
    return _validate(data, "Configuration validation failed after applying overrides")


def _validate(data: Dict[str, Any], headline: str) -> RunConfig:
    try:
        return RunConfig.model_validate(data)
    except ValidationError as exc:
        details = []
        for error in exc.errors(include_url=False):
            location = ".".join(str(loc) for loc in error["loc"])
            details.append(f"- {location or '<root>'}: {error['msg']}")
        raise SystemExit(headline + ":\n" + "\n".join(details)) from exc


def summarize_config(config: Dict[str, Any]) -> str:
    metadata = config.get("metadata", {})
    optimizer = config.get("optimizer", {})
    cost_function = config.get("cost_function", {})
    position = config.get("initial_position")

    def _or_default(value: Any) -> Any:
        return "default" if value is None or (isinstance(value, (int, float)) and value < 0) else value

    lines = [
        f"Run name       : {metadata.get('name', 'N/A')}",
        f"Description    : {metadata.get('description') or 'N/A'}",
        f"Seed           : {config.get('seed')}",
        "",
        "[Optimizer]",
        f"  Initial radius : {optimizer.get('initial_radius')}",
        f"  Growth factor  : {_or_default(optimizer.get('growth_factor'))}",
        f"  Shrink factor  : {_or_default(optimizer.get('shrink_factor'))}",
        f"  Max iterations : {optimizer.get('maximum_iteration')}",
        f"  Epsilon        : {optimizer.get('epsilon')}",
        f"  Direction      : {'maximize' if optimizer.get('maximize') else 'minimize'}",
        "",
        "[Cost function]",
        f"  Target         : {cost_function.get('module')}:{cost_function.get('callable')}",
        f"  Options        : {json.dumps(cost_function.get('options') or {}, sort_keys=True)}",
        f"  Start position : {position if position is not None else 'origin'}",
    ]
    return "\n".join(lines)


def format_result(result: "OptimizationResult") -> str:
    position = ", ".join(f"{value:.6g}" for value in result.best_position)
    lines = [
        f"Termination    : {result.termination.value}",
        f"Iterations     : {result.iterations}",
        f"Accepted steps : {result.accepted_steps} ({result.acceptance_rate:.1%})",
        f"Best cost      : {result.best_cost:.6g}",
        f"Best position  : [{position}]",
        f"Final radius   : {result.radius:.6g}",
        f"Search norm    : {result.frobenius_norm:.6g}",
    ]
    if result.log_path is not None:
        lines.append(f"Iteration log  : {result.log_path}")
    if result.summary_path is not None:
        lines.append(f"Summary        : {result.summary_path}")
    return "\n".join(lines)


def _handle_visualize_command(args: argparse.Namespace) -> None:
    from .visualization import VisualizationError, plot_history

    try:
        output = plot_history(args.log, title=args.title, output_path=args.output)
    except VisualizationError as exc:
        raise SystemExit(str(exc)) from exc
    print(f"History plot written to {output}")


def main() -> None:
    args = parse_args()

    if getattr(args, "command", None) == "visualize":
        _handle_visualize_command(args)
        return

    config_model = load_config(args.config)
    config_model = apply_overrides(config_model, max_iterations=args.max_iterations)
    config = config_model.model_dump(mode="python")

    if args.as_json:
        print(json.dumps(config, indent=2, ensure_ascii=False))
        return

    if args.summarize:
        print(summarize_config(config))
        return

    from .optimization import run_optimization

    config_for_run, _ = prepare_run_environment(
        config_model,
        config_source=args.config,
        runs_root=args.runs_root,
    )
    result = run_optimization(config_for_run)
    print(format_result(result))


if __name__ == "__main__":
    main()
