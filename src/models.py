"""
Data models for the problem entities.
"""

from dataclasses import dataclass, field


# Tuple of (row, column) coordinates on the grid.
Coord = tuple[int, int]

# Every vehicle starts its day at the grid origin.
ORIGIN: Coord = (0, 0)


def distance(a: Coord, b: Coord) -> int:
    """
    Manhattan distance between two grid points.
    """
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass(frozen=True)
class ProblemParams:
    """
    Scalars describing a problem instance: grid size, fleet size, number of
    rides, bonus for starting a ride on time and number of simulation steps.
    """
    rows: int
    columns: int
    n_vehicles: int
    n_rides: int
    bonus: int
    n_steps: int


@dataclass(frozen=True)
class Ride:
    """
    A ride from a start to an end intersection. It can't start before
    `earliest_start` and must finish strictly before `latest_finish`. The
    ride length is computed once when the ride is built.
    """
    id: int
    start: Coord
    end: Coord
    earliest_start: int
    latest_finish: int
    length: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "length", distance(self.start, self.end))


@dataclass
class Vehicle:
    """
    A vehicle of the fleet. It keeps its current position, the step at which
    it is free again, the ids of the rides assigned to it (in completion order)
    and the score collected so far.
    """
    id: int
    position: Coord = ORIGIN
    next_available_step: int = 0
    rides: list[int] = field(default_factory=list)
    score: int = 0


@dataclass(frozen=True)
class Problem:
    """
    A complete problem instance. The rides are kept in load order, so
    `rides[i].id == i` for an instance read from file.
    """
    params: ProblemParams
    rides: tuple[Ride, ...]
