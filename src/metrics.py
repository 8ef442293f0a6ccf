"""
Functions to score and summarize a solution.

The scorer replays every vehicle's rides from scratch with the rules of the
problem, independently of the scheduler's bookkeeping, so it can also be used
to check solutions read from file.
"""

from dataclasses import dataclass, field
from typing import Sequence
import numpy as np

from src.models import ORIGIN, Problem, Vehicle, distance


@dataclass
class ScoreReport:
    """
    The result of replaying a solution.
    """
    score: int
    bonus_rides: int
    served_rides: int
    late_rides: int
    unserved_rides: int
    vehicle_scores: list[int] = field(default_factory=list)


def score_assignments(
    problem: Problem,
    assignments: Sequence[Sequence[int]],
) -> ScoreReport:
    """
    Replay the ride ids of each vehicle. A vehicle starts at the origin at
    step 0, drives to each ride start, waits for the ride to open if early and
    drives the ride. The ride earns its length if it finishes strictly before
    its latest finish and within the simulation, plus the bonus if it started
    exactly at its earliest start. Late rides are still driven.
    """
    params = problem.params
    if len(assignments) > params.n_vehicles:
        raise ValueError(
            f"{len(assignments)} vehicles in solution, fleet has {params.n_vehicles}"
        )
    rides_by_id = {r.id: r for r in problem.rides}

    seen: set[int] = set()
    vehicle_scores: list[int] = []
    bonus_rides = served = late = 0
    for vid, ride_ids in enumerate(assignments):
        position = ORIGIN
        step = 0
        v_score = 0
        for rid in ride_ids:
            if rid not in rides_by_id:
                raise ValueError(f"vehicle {vid}: unknown ride {rid}")
            if rid in seen:
                raise ValueError(f"vehicle {vid}: ride {rid} assigned twice")
            seen.add(rid)
            ride = rides_by_id[rid]

            step += distance(position, ride.start)
            on_time_start = step <= ride.earliest_start
            step = max(step, ride.earliest_start) + ride.length
            position = ride.end

            if step < ride.latest_finish and step <= params.n_steps:
                served += 1
                v_score += ride.length
                if on_time_start:
                    bonus_rides += 1
                    v_score += params.bonus
            else:
                late += 1
        vehicle_scores.append(v_score)

    return ScoreReport(
        score=sum(vehicle_scores),
        bonus_rides=bonus_rides,
        served_rides=served,
        late_rides=late,
        unserved_rides=len(problem.rides) - len(seen),
        vehicle_scores=vehicle_scores,
    )


def summarize_solution(
    problem: Problem,
    vehicles: Sequence[Vehicle],
    skipped: Sequence[int] = (),
) -> dict[str, float]:
    """
    Summarize the global metrics of a solution. `score` is the scheduler's own
    total, `replay_score` the one recomputed by `score_assignments`.
    """
    report = score_assignments(problem, [v.rides for v in vehicles])
    rides_per_vehicle = np.array([len(v.rides) for v in vehicles], dtype=float)
    idle_vehicles = int(np.count_nonzero(rides_per_vehicle == 0))
    if rides_per_vehicle.size == 0:
        rides_per_vehicle = np.zeros(1)
    return {
        "score": float(sum(v.score for v in vehicles)),
        "replay_score": float(report.score),
        "served": float(report.served_rides),
        "late": float(report.late_rides),
        "unserved": float(report.unserved_rides),
        "skipped": float(len(skipped)),
        "bonus_rides": float(report.bonus_rides),
        "rides_per_vehicle_mean": float(rides_per_vehicle.mean()),
        "rides_per_vehicle_max": float(rides_per_vehicle.max()),
        "idle_vehicles": float(idle_vehicles),
    }
