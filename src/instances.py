"""
Reading, writing and generating problem instances and solutions.

Instances use the plain text format below, one ride per line in id order:

    R C F N B T
    a b x y s f
    ...

where R x C is the grid, F the fleet size, N the number of rides, B the
on-time bonus and T the number of steps. A ride goes from (a, b) to (x, y),
opens at step s and must finish before step f.

Solutions have one line per vehicle, in fleet order: the number of rides
followed by the ride ids in the order they are served.
"""

from pathlib import Path
from typing import Iterable, Sequence
import numpy as np

from src.io import ensure_dir, file_sha256, read_text, write_manifest, write_text
from src.models import Problem, ProblemParams, Ride, Vehicle


HEADER_FIELDS = ("rows", "columns", "n_vehicles", "n_rides", "bonus", "n_steps")
RIDE_FIELDS = 6


def parse_problem(text: str) -> Problem:
    """
    Parse an instance. Fails with a ValueError pointing at the offending line
    on any malformed input, so the scheduler only ever sees valid problems.
    """
    lines = text.rstrip().splitlines()
    if not lines or not lines[0].strip():
        raise ValueError("empty problem: missing header line")

    header = _parse_int_line(lines[0], 1, len(HEADER_FIELDS))
    params = ProblemParams(**dict(zip(HEADER_FIELDS, header)))

    ride_lines = lines[1:]
    if len(ride_lines) != params.n_rides:
        raise ValueError(
            f"header declares {params.n_rides} rides, found {len(ride_lines)}"
        )

    rides = []
    for rid, line in enumerate(ride_lines):
        lineno = rid + 2
        a, b, x, y, s, f = _parse_int_line(line, lineno, RIDE_FIELDS)
        for row, col in ((a, b), (x, y)):
            if row >= params.rows or col >= params.columns:
                raise ValueError(
                    f"line {lineno}: intersection ({row}, {col}) outside of "
                    f"the {params.rows}x{params.columns} grid"
                )
        rides.append(
            Ride(
                id=rid,
                start=(a, b),
                end=(x, y),
                earliest_start=s,
                latest_finish=f,
            )
        )
    return Problem(params=params, rides=tuple(rides))


def load_problem(path: str | Path) -> Problem:
    return parse_problem(read_text(path))


def format_problem(problem: Problem) -> str:
    p = problem.params
    out = [" ".join(str(getattr(p, name)) for name in HEADER_FIELDS)]
    for r in sorted(problem.rides, key=lambda r: r.id):
        out.append(
            f"{r.start[0]} {r.start[1]} {r.end[0]} {r.end[1]} "
            f"{r.earliest_start} {r.latest_finish}"
        )
    return "\n".join(out) + "\n"


def write_problem(path: str | Path, problem: Problem) -> None:
    write_text(path, format_problem(problem))


def format_solution(vehicles: Iterable[Vehicle]) -> str:
    """
    One line per vehicle: the number of rides, then the ride ids.
    """
    out = []
    for v in vehicles:
        out.append(" ".join(str(n) for n in [len(v.rides), *v.rides]))
    return "\n".join(out) + "\n" if out else ""


def write_solution(path: str | Path, vehicles: Iterable[Vehicle]) -> None:
    write_text(path, format_solution(vehicles))


def parse_solution(text: str) -> list[list[int]]:
    """
    Parse a solution into the list of ride ids of each vehicle.
    """
    assignments: list[list[int]] = []
    for lineno, line in enumerate(text.rstrip().splitlines(), start=1):
        tokens = line.split()
        if not tokens:
            raise ValueError(f"line {lineno}: empty vehicle line")
        values = _to_ints(tokens, lineno)
        count, rides = values[0], values[1:]
        if count != len(rides):
            raise ValueError(
                f"line {lineno}: declares {count} rides, lists {len(rides)}"
            )
        assignments.append(rides)
    return assignments


def load_solution(path: str | Path) -> list[list[int]]:
    return parse_solution(read_text(path))


def generate_instances_for_scenario(
    scenario_cfg: dict,
    seeds: list[int],
    data_dir: str | Path,
) -> list[Path]:
    """
    Generate one instance per seed for a scenario. Returns the written paths.

    data/
        instances/
            <scenario_name>/
                seed<seed0>/
                    problem.in
                    manifest.json
                seed<seed1>/
                    ...
    """
    scenario_name = scenario_cfg.get("name", "scenario")
    base_dir = ensure_dir(Path(data_dir) / "instances" / scenario_name)
    paths = []
    for seed in seeds:
        problem = generate_problem(scenario_cfg, int(seed))
        out_dir = ensure_dir(base_dir / f"seed{seed}")
        problem_path = out_dir / "problem.in"
        write_problem(problem_path, problem)
        write_manifest(
            out_dir / "manifest.json",
            {
                "scenario": scenario_name,
                "seed": int(seed),
                "sha256": file_sha256(problem_path),
                "counts": {
                    "n_rides": problem.params.n_rides,
                    "n_vehicles": problem.params.n_vehicles,
                },
            },
        )
        paths.append(problem_path)
    return paths


def generate_problem(scenario_cfg: dict, seed: int) -> Problem:
    """
    Generate a random instance for a scenario. Rides get uniform start and end
    intersections and an opening step that leaves time to drive them within
    the simulation. Their latest finish leaves a slack over the ride length
    drawn from [slack_min, slack_max], or from [1, slack_min) for the
    `tight_share` of tight rides, capped at the number of steps. The slack is
    never zero, so a ride started at its earliest start always finishes
    strictly before its latest finish.
    """
    rng = np.random.default_rng(seed)

    rows = int(scenario_cfg["grid"]["rows"])
    columns = int(scenario_cfg["grid"]["columns"])
    rides_cfg = scenario_cfg["rides"]
    n_rides = int(rides_cfg["n_rides"])
    n_steps = int(scenario_cfg["n_steps"])
    slack_min = int(rides_cfg["slack_min"])
    slack_max = int(rides_cfg["slack_max"])
    tight_share = float(rides_cfg.get("tight_share", 0.0))

    params = ProblemParams(
        rows=rows,
        columns=columns,
        n_vehicles=int(scenario_cfg["fleet"]["n_vehicles"]),
        n_rides=n_rides,
        bonus=int(scenario_cfg["bonus"]),
        n_steps=n_steps,
    )

    starts = np.column_stack(
        (rng.integers(0, rows, n_rides), rng.integers(0, columns, n_rides))
    )
    ends = np.column_stack(
        (rng.integers(0, rows, n_rides), rng.integers(0, columns, n_rides))
    )
    lengths = np.abs(starts - ends).sum(axis=1)
    earliest = rng.integers(0, np.maximum(n_steps - lengths, 1))
    slack = rng.integers(slack_min, slack_max + 1, n_rides)
    tight = rng.uniform(size=n_rides) < tight_share
    slack[tight] = rng.integers(1, max(slack_min, 2), int(tight.sum()))
    latest = np.minimum(earliest + lengths + slack, n_steps)

    rides = tuple(
        Ride(
            id=rid,
            start=(int(starts[rid, 0]), int(starts[rid, 1])),
            end=(int(ends[rid, 0]), int(ends[rid, 1])),
            earliest_start=int(earliest[rid]),
            latest_finish=int(latest[rid]),
        )
        for rid in range(n_rides)
    )
    return Problem(params=params, rides=rides)


def _parse_int_line(line: str, lineno: int, n_fields: int) -> list[int]:
    tokens = line.split()
    if len(tokens) != n_fields:
        raise ValueError(
            f"line {lineno}: expected {n_fields} integers, got {len(tokens)}"
        )
    values = _to_ints(tokens, lineno)
    if any(v < 0 for v in values):
        raise ValueError(f"line {lineno}: negative value in {values}")
    return values


def _to_ints(tokens: Sequence[str], lineno: int) -> list[int]:
    try:
        return [int(t) for t in tokens]
    except ValueError:
        raise ValueError(
            f"line {lineno}: non-integer token in {' '.join(tokens)!r}"
        ) from None
