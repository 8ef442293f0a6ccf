"""
Make plots for the experiment results.
"""

from pathlib import Path

from src.config import PROJECT_ROOT, load_experiment
from src.instances import load_problem, load_solution
from src.io import ensure_dir, read_json
from src.plotting import plot_routes_on_grid, plot_scores


def make_plots() -> None:
    exp = load_experiment(PROJECT_ROOT / "configs" / "experiment_main.yaml")
    data_dir = PROJECT_ROOT / exp.get("output", {}).get("data_dir", "data")
    plots_dir = ensure_dir(data_dir / "plots")
    routes_dir = ensure_dir(plots_dir / "routes")

    sols_root = data_dir / "solutions"
    if sols_root.exists():
        for sol_dir in sorted(sols_root.iterdir()):
            sol_path = sol_dir / "solution.out"
            meta_path = sol_dir / "metrics.json"
            if not sol_path.exists() or not meta_path.exists():
                continue
            meta = read_json(meta_path)
            problem_path = Path(meta.get("problem", ""))
            if not problem_path.is_file():
                continue
            out_png = routes_dir / f"{meta.get('run_id', sol_dir.name)}.png"
            plot_routes_on_grid(
                load_problem(problem_path),
                load_solution(sol_path),
                out_png,
            )

    runs_csv = data_dir / "metrics" / "greedy_runs.csv"
    if runs_csv.exists():
        plot_scores(runs_csv, plots_dir / "scores.png")


def main() -> None:
    make_plots()


if __name__ == "__main__":
    main()
