from collections import defaultdict

import pytest

from conftest import make_problem, make_ride
from src.greedy import GreedyScheduler, Phase, solve_problem, sort_rides
from src.instances import format_solution, generate_problem
from src.metrics import score_assignments
from src.models import Vehicle
from src.scoring import FitnessWeights, is_feasible


class RecordingScheduler(GreedyScheduler):
    """
    Scheduler keeping, for every successful assignment, whether the ride was
    feasible and the vehicle's next available step afterwards.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.log = []

    def assign_if_feasible(self, vehicle, ride):
        feasible = is_feasible(ride, vehicle)
        assigned = super().assign_if_feasible(vehicle, ride)
        if assigned:
            self.log.append((vehicle.id, ride.id, feasible, vehicle.next_available_step))
        return assigned


def test_single_zero_length_ride_gets_bonus():
    problem = make_problem(
        [make_ride(0, (0, 0), (0, 0), earliest_start=0, latest_finish=10)],
        n_vehicles=1,
        bonus=2,
    )
    vehicles, skipped = solve_problem(problem)
    assert vehicles[0].rides == [0]
    assert vehicles[0].score == 2
    assert skipped == []


def test_ride_infeasible_for_every_vehicle_is_skipped():
    problem = make_problem(
        [make_ride(0, (0, 0), (0, 5), earliest_start=0, latest_finish=5)],
        n_vehicles=2,
        bonus=3,
    )
    vehicles, skipped = solve_problem(problem)
    assert [v.rides for v in vehicles] == [[], []]
    assert [v.score for v in vehicles] == [0, 0]
    assert skipped == [0]


def test_rides_served_by_earliest_start_not_by_proximity():
    rides = [
        make_ride(0, (0, 1), (0, 9), earliest_start=0),
        # starts where ride 0 ends, but opens last
        make_ride(1, (0, 9), (0, 8), earliest_start=50),
        make_ride(2, (5, 5), (5, 6), earliest_start=5),
    ]
    vehicles, _ = solve_problem(make_problem(rides, n_vehicles=1))
    assert vehicles[0].rides == [0, 2, 1]


def test_a_example(a_example):
    vehicles, skipped = solve_problem(a_example)
    assert format_solution(vehicles) == "2 1 2\n1 0\n"
    assert [v.score for v in vehicles] == [4, 6]
    assert skipped == []


def test_bootstrap_gives_each_vehicle_its_own_ride():
    rides = [make_ride(i, (0, 0), (1, 1)) for i in range(3)]
    vehicles, _ = solve_problem(make_problem(rides, n_vehicles=3))
    assert [v.rides for v in vehicles] == [[0], [1], [2]]


def test_bootstrap_skips_rides_a_fresh_vehicle_cannot_serve():
    rides = [
        make_ride(0, (0, 0), (0, 9), earliest_start=0, latest_finish=5),
        make_ride(1, (0, 0), (0, 2), earliest_start=1),
    ]
    scheduler = GreedyScheduler(make_problem(rides, n_vehicles=2))
    vehicles = scheduler.solve()
    assert [v.rides for v in vehicles] == [[1], []]
    assert scheduler.skipped == [0]


def test_tie_goes_to_first_vehicle():
    rides = [
        make_ride(0, (0, 0), (0, 2), earliest_start=0),
        make_ride(1, (0, 0), (0, 2), earliest_start=0),
        make_ride(2, (0, 2), (0, 3), earliest_start=5),
    ]
    vehicles, _ = solve_problem(make_problem(rides, n_vehicles=2))
    assert vehicles[0].rides == [0, 2]
    assert vehicles[1].rides == [1]


def test_strictly_better_later_vehicle_wins():
    rides = [
        make_ride(0, (0, 0), (0, 1), earliest_start=0),
        make_ride(1, (0, 0), (0, 6), earliest_start=0),
        make_ride(2, (0, 6), (0, 7), earliest_start=8),
    ]
    vehicles, _ = solve_problem(make_problem(rides, n_vehicles=2))
    assert vehicles[0].rides == [0]
    assert vehicles[1].rides == [1, 2]


def test_idle_step_weight_changes_the_chosen_vehicle():
    rides = [
        make_ride(0, (0, 0), (0, 1), earliest_start=0),
        # the second vehicle idles 3 steps here and ends up 3 steps behind
        make_ride(1, (0, 0), (0, 1), earliest_start=3),
        make_ride(2, (0, 1), (0, 2), earliest_start=4),
    ]
    problem = make_problem(rides, n_vehicles=2, bonus=10)

    vehicles, _ = solve_problem(problem)
    assert vehicles[0].rides == [0, 2]

    vehicles, _ = solve_problem(problem, FitnessWeights(idle_step=1.0))
    assert vehicles[1].rides == [1, 2]


def test_assign_if_feasible_updates_vehicle_state():
    ride = make_ride(4, (0, 3), (0, 5), earliest_start=10, latest_finish=100)
    scheduler = GreedyScheduler(make_problem([ride], bonus=1))
    vehicle = Vehicle(id=0)

    assert scheduler.assign_if_feasible(vehicle, ride)
    assert vehicle.rides == [4]
    assert vehicle.score == 3
    # 3 steps to the start, 7 idle, 2 to drive the ride
    assert vehicle.next_available_step == 12
    assert vehicle.position == (0, 5)


def test_assign_if_feasible_leaves_vehicle_alone_when_infeasible():
    ride = make_ride(0, (0, 3), (0, 5), earliest_start=0, latest_finish=5)
    scheduler = GreedyScheduler(make_problem([ride]))
    vehicle = Vehicle(id=0, position=(0, 0), next_available_step=1)

    assert not scheduler.assign_if_feasible(vehicle, ride)
    assert vehicle == Vehicle(id=0, position=(0, 0), next_available_step=1)


def test_sort_is_stable_and_idempotent():
    rides = [
        make_ride(0, (0, 0), (0, 1), earliest_start=5),
        make_ride(1, (0, 0), (0, 1), earliest_start=2),
        make_ride(2, (0, 0), (0, 1), earliest_start=5),
        make_ride(3, (0, 0), (0, 1), earliest_start=2),
    ]
    once = sort_rides(rides)
    assert [r.id for r in once] == [1, 3, 0, 2]
    assert [r.id for r in sort_rides(once)] == [1, 3, 0, 2]


def test_load_problem_keeps_ride_ids():
    rides = [
        make_ride(7, (0, 0), (0, 1), earliest_start=9),
        make_ride(3, (0, 0), (0, 1), earliest_start=1),
    ]
    scheduler = GreedyScheduler()
    scheduler.load_problem(make_problem(rides).params, rides)
    vehicles = scheduler.solve()
    assert vehicles[0].rides == [3, 7]
    assert scheduler.phase is Phase.DONE


def test_solve_runs_once():
    scheduler = GreedyScheduler(make_problem([make_ride(0, (0, 0), (0, 1))]))
    scheduler.solve()
    with pytest.raises(RuntimeError):
        scheduler.solve()
    with pytest.raises(RuntimeError):
        scheduler.load_problem(make_problem([]).params, [])


def test_solve_requires_a_problem():
    with pytest.raises(RuntimeError):
        GreedyScheduler().solve()


def test_no_vehicles_skips_every_ride():
    rides = [make_ride(i, (0, 0), (0, 1)) for i in range(3)]
    vehicles, skipped = solve_problem(make_problem(rides, n_vehicles=0))
    assert vehicles == []
    assert skipped == [0, 1, 2]


def test_generated_problem_invariants(scenario_cfg):
    problem = generate_problem(scenario_cfg, seed=11)
    scheduler = RecordingScheduler(problem)
    vehicles = scheduler.solve()

    assigned = [rid for v in vehicles for rid in v.rides]
    assert len(assigned) == len(set(assigned))
    assert sorted(assigned + scheduler.skipped) == list(range(len(problem.rides)))

    assert all(feasible for _, _, feasible, _ in scheduler.log)
    steps = defaultdict(list)
    for vid, _, _, step in scheduler.log:
        steps[vid].append(step)
    for history in steps.values():
        assert history == sorted(history)

    report = score_assignments(problem, [v.rides for v in vehicles])
    assert report.score == sum(v.score for v in vehicles)
    assert report.late_rides == 0


def test_solve_is_deterministic(scenario_cfg):
    problem = generate_problem(scenario_cfg, seed=3)
    first, _ = solve_problem(problem)
    second, _ = solve_problem(problem)
    assert format_solution(first) == format_solution(second)
