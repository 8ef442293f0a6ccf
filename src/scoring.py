"""
Scoring functions of a ride for a vehicle.

Two scores are computed for every (ride, vehicle) pair:
    - the real score, the points actually awarded if the vehicle serves the
      ride next;
    - the fitness score, a ranking index used by the greedy scheduler to pick
      the vehicle for a ride. It can be negative and doesn't need to match
      the real score.

All functions are pure: they read the vehicle's position and next available
step but never change them.
"""

from dataclasses import dataclass
from math import inf

from src.models import Ride, Vehicle, distance


@dataclass(frozen=True)
class FitnessWeights:
    """
    Tunable weights of the fitness score.
        - perfect_ride: multiplier for rides reached exactly at their earliest
          start (bonus, no idle).
        - started_ride: multiplier for rides reached after their earliest start
          (no bonus, no idle).
        - idle_ride: multiplier for rides reached before their earliest start
          (bonus, with idle).
        - idle_step: cost of a single idle step.
        - travel_step: cost of a single step travelled to reach the ride start.
    """
    perfect_ride: float = 1.0
    started_ride: float = 1.0
    idle_ride: float = 1.0
    idle_step: float = 0.0
    travel_step: float = 1.0


DEFAULT_WEIGHTS = FitnessWeights()


def travel_to_start(ride: Ride, vehicle: Vehicle) -> int:
    """
    Steps needed by the vehicle to reach the start of the ride from its
    current position.
    """
    return distance(ride.start, vehicle.position)


def steps_to_complete(ride: Ride, vehicle: Vehicle) -> int:
    """
    Steps needed by the vehicle to reach the start of the ride and drive it to
    the end, not counting any wait.
    """
    return travel_to_start(ride, vehicle) + ride.length


def arrival_step(ride: Ride, vehicle: Vehicle) -> int:
    """
    Step at which the vehicle reaches the start of the ride.
    """
    return vehicle.next_available_step + travel_to_start(ride, vehicle)


def idle_time(ride: Ride, vehicle: Vehicle) -> int:
    """
    Steps the vehicle has to wait at the start of the ride before it opens.
    Zero or negative if the ride is already open on arrival.
    """
    return ride.earliest_start - arrival_step(ride, vehicle)


def is_feasible(ride: Ride, vehicle: Vehicle) -> bool:
    """
    A ride is feasible for a vehicle if, leaving right away on arrival, it
    finishes strictly before its latest finish step.
    """
    return arrival_step(ride, vehicle) + ride.length < ride.latest_finish


def min_score(ride: Ride) -> int:
    return ride.length


def max_score(ride: Ride, bonus: int) -> int:
    return ride.length + bonus


def real_score(ride: Ride, vehicle: Vehicle, bonus: int) -> int:
    """
    Points awarded if the vehicle serves the ride next: nothing if it can't
    finish on time, the ride length plus the bonus if it can start at the
    earliest start (idling if needed), the ride length otherwise.
    """
    if not is_feasible(ride, vehicle):
        return 0
    if arrival_step(ride, vehicle) <= ride.earliest_start:
        return max_score(ride, bonus)
    return min_score(ride)


def fitness_score(
    ride: Ride,
    vehicle: Vehicle,
    bonus: int,
    weights: FitnessWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Ranking index of the ride for the vehicle. Higher is better; -inf if the
    ride can't be completed on time, so it is never chosen.
    """
    arrival = arrival_step(ride, vehicle)
    if arrival + ride.length >= ride.latest_finish:
        return -inf

    travel = travel_to_start(ride, vehicle) * weights.travel_step

    if arrival == ride.earliest_start:
        return (max_score(ride, bonus) - travel) * weights.perfect_ride

    if arrival > ride.earliest_start:
        return (min_score(ride) - travel) * weights.started_ride

    idle = (ride.earliest_start - arrival) * weights.idle_step
    return (max_score(ride, bonus) - idle - travel) * weights.idle_ride
