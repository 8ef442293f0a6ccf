"""
Run the greedy scheduler on all experiment instances.
"""

from pathlib import Path
import time

from src.config import (
    PROJECT_ROOT,
    fitness_weights_from_config,
    load_experiment,
    load_scenario,
)
from src.greedy import solve_problem
from src.instances import load_problem, write_solution
from src.io import ensure_dir, make_run_id, write_csv_rows, write_json
from src.metrics import summarize_solution
from src.scoring import FitnessWeights


METRIC_FIELDS = [
    "run_id",
    "instance",
    "seed",
    "score",
    "replay_score",
    "served",
    "late",
    "unserved",
    "skipped",
    "bonus_rides",
    "rides_per_vehicle_mean",
    "rides_per_vehicle_max",
    "idle_vehicles",
    "cpu_time_sec",
]


def run_greedy() -> None:
    exp = load_experiment(PROJECT_ROOT / "configs" / "experiment_main.yaml")
    data_dir = PROJECT_ROOT / exp.get("output", {}).get("data_dir", "data")
    weights = fitness_weights_from_config(exp)

    jobs: list[tuple[str, int | None, Path]] = []
    for scenario in exp.get("scenarios") or []:
        scen_cfg = load_scenario(PROJECT_ROOT / "configs" / scenario)
        scen_name = scen_cfg.get("name", Path(scenario).stem)
        for seed in exp["seeds"]:
            path = data_dir / "instances" / scen_name / f"seed{seed}" / "problem.in"
            jobs.append((scen_name, int(seed), path))
    for inp in exp.get("inputs") or []:
        path = PROJECT_ROOT / inp
        jobs.append((path.stem, None, path))

    rows: list[dict[str, object]] = []
    for name, seed, path in jobs:
        print(f"    - {name}" + ("" if seed is None else f" seed {seed}"))
        run_id = make_run_id(name, seed, {"algo": "greedy"})
        out_dir = ensure_dir(data_dir / "solutions" / run_id)
        metrics = solve_instance(path, out_dir, weights)
        row = {"run_id": run_id, "instance": name, "seed": seed, **metrics}
        write_json(out_dir / "metrics.json", {**row, "problem": str(path)})
        rows.append(row)

    write_csv_rows(
        data_dir / "metrics" / "greedy_runs.csv",
        rows,
        fieldnames=METRIC_FIELDS,
    )


def solve_instance(
    problem_path: Path,
    out_dir: Path,
    weights: FitnessWeights,
) -> dict[str, float]:
    """
    Solve one instance file, write its solution and return its metrics.
    """
    problem = load_problem(problem_path)
    start_time = time.time()
    vehicles, skipped = solve_problem(problem, weights)
    elapsed_time = time.time() - start_time
    write_solution(out_dir / "solution.out", vehicles)
    metrics = summarize_solution(problem, vehicles, skipped)
    metrics["cpu_time_sec"] = float(elapsed_time)
    return metrics


def main() -> None:
    run_greedy()


if __name__ == "__main__":
    main()
