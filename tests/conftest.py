from pathlib import Path

import pytest

from src.instances import load_problem
from src.models import Problem, ProblemParams, Ride


PROJECT_ROOT = Path(__file__).resolve().parents[1]
A_EXAMPLE = PROJECT_ROOT / "data" / "inputs" / "a_example.in"


def make_ride(rid, start, end, earliest_start=0, latest_finish=1000):
    return Ride(
        id=rid,
        start=start,
        end=end,
        earliest_start=earliest_start,
        latest_finish=latest_finish,
    )


def make_problem(rides, n_vehicles=1, bonus=0, rows=100, columns=100, n_steps=10000):
    params = ProblemParams(
        rows=rows,
        columns=columns,
        n_vehicles=n_vehicles,
        n_rides=len(rides),
        bonus=bonus,
        n_steps=n_steps,
    )
    return Problem(params=params, rides=tuple(rides))


@pytest.fixture
def a_example() -> Problem:
    return load_problem(A_EXAMPLE)


@pytest.fixture
def scenario_cfg() -> dict:
    return {
        "name": "unit",
        "grid": {"rows": 30, "columns": 40},
        "fleet": {"n_vehicles": 6},
        "rides": {
            "n_rides": 80,
            "slack_min": 5,
            "slack_max": 60,
            "tight_share": 0.25,
        },
        "bonus": 7,
        "n_steps": 400,
    }
