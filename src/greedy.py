"""
Greedy constructive scheduler assigning rides to the fleet.
"""

from enum import Enum
from math import inf
from typing import Iterable

from src.models import Problem, ProblemParams, Ride, Vehicle
from src.scoring import (
    DEFAULT_WEIGHTS,
    FitnessWeights,
    fitness_score,
    idle_time,
    real_score,
    steps_to_complete,
)


class Phase(Enum):
    """
    Phases of a scheduler run, always visited in this order.
    """
    SORTING = "sorting"
    BOOTSTRAPPING = "bootstrapping"
    GREEDY_ASSIGNMENT = "greedy_assignment"
    DONE = "done"


class GreedyScheduler:
    """
    One-shot greedy scheduler. A run goes through the following steps:
        1. Sort the rides by earliest start (stable, ties keep load order).
        2. Create the fleet and give each vehicle, in fleet order, the first
           ride left that it can complete on time. This spreads the fleet on
           the earliest demand.
        3. Give every remaining ride to the vehicle with the best fitness
           score (first vehicle wins on ties). Rides no vehicle can complete
           on time are skipped.

    Assignments are never revisited. A scheduler solves a single problem.
    """

    def __init__(
        self,
        problem: Problem | None = None,
        weights: FitnessWeights = DEFAULT_WEIGHTS,
    ) -> None:
        self.weights = weights
        self.params: ProblemParams | None = None
        self.rides: tuple[Ride, ...] = ()
        self.vehicles: list[Vehicle] = []
        self.skipped: list[int] = []
        self.phase: Phase | None = None
        self._cursor = 0
        if problem is not None:
            self.load_problem(problem.params, problem.rides)

    def load_problem(self, params: ProblemParams, rides: Iterable[Ride]) -> None:
        """
        Load the problem parameters and the (unsorted) ride catalog. The ride
        ids are kept as they are.
        """
        if self.phase is not None:
            raise RuntimeError("scheduler already ran, create a new one")
        self.params = params
        self.rides = tuple(rides)

    def solve(self) -> list[Vehicle]:
        """
        Run the scheduler and return the fleet, in creation order, each
        vehicle with its assigned rides and score.
        """
        if self.params is None:
            raise RuntimeError("no problem loaded")
        if self.phase is not None:
            raise RuntimeError("scheduler already ran, create a new one")

        self.phase = Phase.SORTING
        self.rides = sort_rides(self.rides)

        self.phase = Phase.BOOTSTRAPPING
        self._bootstrap_fleet()

        self.phase = Phase.GREEDY_ASSIGNMENT
        while self._cursor < len(self.rides):
            ride = self.rides[self._cursor]
            self._cursor += 1
            best_idx, best_score = self._fittest_vehicle(ride)
            if best_score == -inf:
                self.skipped.append(ride.id)
                continue
            self.assign_if_feasible(self.vehicles[best_idx], ride)

        self.phase = Phase.DONE
        return self.vehicles

    def assign_if_feasible(self, vehicle: Vehicle, ride: Ride) -> bool:
        """
        Assign the ride to the vehicle if it can be completed on time. Returns
        whether the ride has been assigned.
        """
        bonus = self.params.bonus
        if fitness_score(ride, vehicle, bonus, self.weights) == -inf:
            return False

        # Order matters: the idle time and the steps to complete depend on
        # the position and availability before the ride.
        vehicle.rides.append(ride.id)
        vehicle.score += real_score(ride, vehicle, bonus)
        vehicle.next_available_step += (
            max(idle_time(ride, vehicle), 0) + steps_to_complete(ride, vehicle)
        )
        vehicle.position = ride.end
        return True

    def _bootstrap_fleet(self) -> None:
        for vid in range(self.params.n_vehicles):
            vehicle = Vehicle(id=vid)
            self.vehicles.append(vehicle)
            while self._cursor < len(self.rides):
                ride = self.rides[self._cursor]
                self._cursor += 1
                if self.assign_if_feasible(vehicle, ride):
                    break
                self.skipped.append(ride.id)

    def _fittest_vehicle(self, ride: Ride) -> tuple[int, float]:
        """
        Linear scan of the fleet returning the index and fitness score of the
        best vehicle for the ride. Strict comparison keeps the first vehicle
        on ties.
        """
        best_idx = -1
        best_score = -inf
        for idx, vehicle in enumerate(self.vehicles):
            score = fitness_score(ride, vehicle, self.params.bonus, self.weights)
            if best_idx < 0 or score > best_score:
                best_idx = idx
                best_score = score
        return best_idx, best_score


def sort_rides(rides: Iterable[Ride]) -> tuple[Ride, ...]:
    """
    Rides ordered by earliest start. Python's sort is stable, so rides with
    the same earliest start keep their relative order.
    """
    return tuple(sorted(rides, key=lambda r: r.earliest_start))


def solve_problem(
    problem: Problem,
    weights: FitnessWeights = DEFAULT_WEIGHTS,
) -> tuple[list[Vehicle], list[int]]:
    """
    Solve a problem with a fresh scheduler. Returns the fleet and the ids of
    the rides left unassigned.
    """
    scheduler = GreedyScheduler(problem, weights)
    vehicles = scheduler.solve()
    return vehicles, scheduler.skipped
