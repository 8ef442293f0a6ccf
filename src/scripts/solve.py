"""
Solve a single instance file with the greedy scheduler.

Usage:
    python -m src.scripts.solve data/inputs/a_example.in
    python -m src.scripts.solve problem.in --output problem.out
    python -m src.scripts.solve problem.in --config experiment_main

Without --output the solution is printed followed by its score. With it, the
solution alone is written to the file.

Exit codes:
    0: Success
    1: Instance or config loading error
"""

import argparse
import sys

from src.config import fitness_weights_from_config, load_yaml_config
from src.greedy import solve_problem
from src.instances import format_solution, load_problem, write_solution
from src.scoring import DEFAULT_WEIGHTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Assign the rides of an instance to its fleet."
    )
    parser.add_argument("problem", help="instance file")
    parser.add_argument("-o", "--output", help="write the solution to this file")
    parser.add_argument(
        "-c",
        "--config",
        help="YAML config whose `fitness` section sets the fitness weights",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        problem = load_problem(args.problem)
        weights = (
            fitness_weights_from_config(load_yaml_config(args.config))
            if args.config
            else DEFAULT_WEIGHTS
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    vehicles, _ = solve_problem(problem, weights)

    if args.output:
        write_solution(args.output, vehicles)
        return 0

    sys.stdout.write(format_solution(vehicles))
    score = sum(v.score for v in vehicles)
    print(f"Score: {score:,d}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
