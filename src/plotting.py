"""
Plotting utilities.
"""

from pathlib import Path
from typing import Sequence
import matplotlib.pyplot as plt
import pandas as pd

from src.models import ORIGIN, Problem


def plot_routes_on_grid(
    problem: Problem,
    assignments: Sequence[Sequence[int]],
    out_png: str | Path,
    max_vehicles: int | None = 20,
) -> None:
    """
    Plot the path of each vehicle on the grid: from the origin to the start of
    its first ride, along the ride, to the start of the next ride and so on.
    Rows go on the y axis. Only the first `max_vehicles` vehicles are drawn.
    """
    rides_by_id = {r.id: r for r in problem.rides}
    params = problem.params

    fig, ax = plt.subplots(figsize=(8, 8))
    for vid, ride_ids in enumerate(assignments):
        if max_vehicles is not None and vid >= max_vehicles:
            break
        if not ride_ids:
            continue
        points = [ORIGIN]
        for rid in ride_ids:
            ride = rides_by_id[rid]
            points.extend([ride.start, ride.end])
        rows = [p[0] for p in points]
        cols = [p[1] for p in points]
        ax.plot(cols, rows, linewidth=1.5, alpha=0.7, marker="o", markersize=2)

    unserved = set(rides_by_id) - {rid for ids in assignments for rid in ids}
    if unserved:
        ax.scatter(
            [rides_by_id[rid].start[1] for rid in sorted(unserved)],
            [rides_by_id[rid].start[0] for rid in sorted(unserved)],
            marker="x",
            color="grey",
            alpha=0.6,
            label="unserved",
        )
        ax.legend(loc="upper right")

    ax.set_xlim(-0.5, params.columns - 0.5)
    ax.set_ylim(-0.5, params.rows - 0.5)
    ax.set_aspect("equal", adjustable="box")
    ax.set_title("Routes by vehicle")
    ax.set_xlabel("column")
    ax.set_ylabel("row")
    out_png = Path(out_png)
    out_png.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_png, dpi=150)
    plt.close(fig)


def plot_scores(
    metrics_csv_path: str | Path,
    out_png: str | Path,
    value_columns: list[str] | None = None,
) -> None:
    """
    Bar charts of the run metrics, one panel per column, one bar per run.
    """
    df = pd.read_csv(metrics_csv_path)
    if df.empty:
        return
    if value_columns is None:
        value_columns = ["score", "served", "unserved", "bonus_rides"]
    fig, axes = plt.subplots(
        1,
        len(value_columns),
        figsize=(4 * len(value_columns), 4),
    )
    if len(value_columns) == 1:
        axes = [axes]
    for ax, col in zip(axes, value_columns):
        df.plot.bar(x="run_id", y=col, ax=ax, legend=False)
        ax.set_title(col)
        ax.set_xlabel("")
        ax.tick_params(axis="x", labelrotation=90)
    fig.tight_layout()
    out_png = Path(out_png)
    out_png.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_png, dpi=150)
    plt.close(fig)
