"""End-to-end tests of the two-phase world step."""

from __future__ import annotations

import pytest

from speedcam_sim.errors import CollisionError
from speedcam_sim.model import SpeedCam
from speedcam_sim.substrate import BoundaryKind


def run(world, steps: int, dt: float = 0.1, check=None, use_numba: bool = False) -> None:
    for _ in range(steps):
        before = {c.id: c.position for c in world.cars()}
        if use_numba:
            world.step_numba(dt)
        else:
            world.step(dt)
        if check is not None:
            check(before)


class TestEnforcement:
    def test_limit_applied_and_released_at_the_flags(self, reference_car, cam, make_world) -> None:
        world = make_world([reference_car], cameras=[cam])
        car = reference_car
        exit_speeds = []

        def check(before) -> None:
            x_prev, x = before[car.id], car.position
            if x <= 400.0 or x > 500.0:
                assert car.max_speed == 10.0
            else:
                assert car.max_speed == 5.0
            if x_prev <= 500.0 < x:
                exit_speeds.append(car.velocity)

        run(world, 1000, check=check)

        assert car.position > 500.0
        assert len(exit_speeds) == 1
        assert exit_speeds[0] < 5.0 * 1.1

    def test_speeder_gets_scaled_limit(self, make_car, cam, make_world) -> None:
        car = make_car(behavior=0.2)
        world = make_world([car], cameras=[cam])
        inside = []

        def check(before) -> None:
            if 400.0 < car.position <= 500.0:
                inside.append(car.max_speed)

        run(world, 1000, check=check)
        assert inside
        assert all(m == pytest.approx(6.0) for m in inside)
        assert car.max_speed == 10.0

    def test_zone_state_survives_laps_on_a_ring(self, reference_car, cam, make_world) -> None:
        world = make_world([reference_car], cameras=[cam], boundary=BoundaryKind.PERIODIC)
        car = reference_car
        laps = 0

        def check(before) -> None:
            nonlocal laps
            if car.position < before[car.id]:
                laps += 1
            assert 0.0 <= car.position < 1000.0
            expected = 5.0 if 400.0 < car.position <= 500.0 else 10.0
            assert car.max_speed == expected

        run(world, 3000, check=check)
        assert laps >= 2

    def test_wrap_across_exit_flag_restores_speed(self, make_car, make_world) -> None:
        car = make_car(position=990.0, velocity=10.0)
        world = make_world(
            [car], cameras=[SpeedCam(995.0, 5.0, 50.0)], boundary=BoundaryKind.PERIODIC,
        )
        car.set_max_speed(5.0)

        world.step(1.0)

        assert car.position == pytest.approx(0.0)
        assert car.max_speed == 10.0
        assert world.lanes[0].items[0].as_car() is car

    def test_lanes_are_independent(self, make_car, cam, make_world) -> None:
        a = make_car(position=0.0, lane=0)
        b = make_car(position=0.0, lane=1)
        world = make_world([a, b], cameras=[cam])
        run(world, 100)
        assert sorted(world.lanes) == [0, 1]
        assert a.position == pytest.approx(b.position)


class TestViolations:
    def test_spot_camera_catches_speeder(self, make_car, cam, make_world) -> None:
        speeder = make_car(behavior=0.5)
        world = make_world([speeder], cameras=[cam])
        run(world, 1000)

        events = world.violations.events
        assert len(events) == 1
        assert events[0].kind == "spot"
        assert events[0].car_id == speeder.id
        assert events[0].measured_speed > 5.0
        assert events[0].speed_limit == 5.0

    def test_spot_camera_ignores_compliant_driver(self, make_car, cam, make_world) -> None:
        world = make_world([make_car(behavior=-0.1)], cameras=[cam])
        run(world, 1000)
        assert world.violations.count() == 0

    def test_average_camera(self, make_car, make_world) -> None:
        avg_cam = SpeedCam(500.0, 5.0, 100.0, check_average=True)
        speeder = make_car(behavior=0.5, lane=0)
        careful = make_car(behavior=-0.3, lane=1)
        world = make_world([speeder, careful], cameras=[avg_cam])
        run(world, 1000)

        events = world.violations.to_list()
        assert [e["car_id"] for e in events] == [speeder.id]
        assert events[0]["kind"] == "average"
        assert events[0]["measured_speed"] > 5.0


class TestForces:
    def test_camera_braking_inside_zone(self, make_car, cam, make_world) -> None:
        car = make_car(position=450.0, velocity=10.0)
        braking = make_world([car], cameras=[cam], camera_braking=True)
        assert braking.compute_forces()[0][0] == pytest.approx(-2.0)

        plain = make_world([car], cameras=[cam])
        assert plain.compute_forces()[0][0] == pytest.approx(0.0)

    def test_no_braking_outside_zone(self, make_car, cam, make_world) -> None:
        car = make_car(position=300.0, velocity=10.0)
        world = make_world([car], cameras=[cam], camera_braking=True)
        assert world.compute_forces()[0][0] == pytest.approx(0.0)

    def test_numba_forces_match_sequential(self, make_car, cam, make_world) -> None:
        cars = []
        for lane in range(3):
            for k in range(8):
                cars.append(make_car(
                    position=120.0 * k + 7.0 * lane,
                    velocity=(k * 1.7 + lane) % 12.0 - 1.0,
                    lane=lane,
                    size=4.0,
                    behavior=0.1 * lane,
                ))
        world = make_world(cars, cameras=[cam], boundary=BoundaryKind.PERIODIC, camera_braking=True)

        sequential = world.compute_forces(use_numba=False)
        parallel = world.compute_forces(use_numba=True)

        assert len(sequential) == len(parallel) == 24
        for s, p in zip(sequential, parallel):
            assert p[0] == pytest.approx(s[0], rel=1e-9, abs=1e-12)

    def test_numba_step_matches_sequential_step(self, make_car, cam, make_world) -> None:
        def scenario():
            cars = [make_car(position=x, size=2.0) for x in (0.0, 60.0, 200.0, 450.0)]
            return make_world(cars, cameras=[cam], boundary=BoundaryKind.PERIODIC)

        a, b = scenario(), scenario()
        run(a, 200)
        run(b, 200, use_numba=True)

        for ca, cb in zip(a.cars(), b.cars()):
            assert cb.position == pytest.approx(ca.position, rel=1e-9)
            assert cb.max_speed == ca.max_speed


class TestCollisions:
    @pytest.mark.parametrize("use_numba", [False, True])
    def test_zero_separation_is_fatal(self, make_car, make_world, use_numba: bool) -> None:
        cars = [make_car(position=5.0), make_car(position=5.0)]
        world = make_world(cars)
        with pytest.raises(CollisionError):
            run(world, 1, use_numba=use_numba)

    @pytest.mark.parametrize("use_numba", [False, True])
    def test_tiny_separation_is_fatal(self, make_car, make_world, use_numba: bool) -> None:
        cars = [make_car(position=0.0, velocity=100.0), make_car(position=1e-60)]
        world = make_world(cars)
        with pytest.raises(CollisionError):
            run(world, 1, use_numba=use_numba)

    @pytest.mark.parametrize("use_numba", [False, True])
    def test_follower_driving_through_leader_is_fatal(self, make_car, make_world, use_numba: bool) -> None:
        follower = make_car(position=0.0, velocity=100.0)
        leader = make_car(position=5.0)
        world = make_world([follower, leader])
        with pytest.raises(CollisionError):
            run(world, 1, dt=1.0, use_numba=use_numba)

    def test_driving_through_leader_across_the_wall_is_fatal(self, make_car, make_world) -> None:
        leader = make_car(position=10.0)
        follower = make_car(position=990.0, velocity=100.0)
        world = make_world([leader, follower], boundary=BoundaryKind.PERIODIC)
        with pytest.raises(CollisionError):
            run(world, 1, dt=1.0)

    def test_reflected_car_stays_on_the_road(self, make_car, make_world) -> None:
        car = make_car(position=900.0, velocity=10.0)
        world = make_world([car], boundary=BoundaryKind.REFLECTIVE)
        velocities = []

        def check(before) -> None:
            assert 0.0 <= car.position <= 1000.0
            velocities.append(car.velocity)

        run(world, 300, check=check)
        assert min(velocities) < 0.0

    def test_reflective_lane_runs_or_reports_collision(self, make_car, cam, make_world) -> None:
        """
        Several cars bouncing off the far wall either keep running inside
        the road or stop with CollisionError, never with another error.
        """
        cars = [make_car(position=x) for x in (0.0, 100.0, 200.0)]
        world = make_world(cars, cameras=[cam], boundary=BoundaryKind.REFLECTIVE)

        def check(before) -> None:
            for c in world.cars():
                assert 0.0 <= c.position <= 1000.0

        try:
            run(world, 3000, check=check)
        except CollisionError:
            pass

    def test_ids_are_assigned(self, make_car, make_world) -> None:
        world = make_world([make_car(position=0.0), make_car(position=50.0)])
        assert sorted(c.id for c in world.cars()) == [0, 1]

    def test_debug_stats(self, make_car, cam, make_world) -> None:
        world = make_world([make_car()], cameras=[cam])
        run(world, 3)
        assert world.get_debug_stats() == {
            "lanes": 1, "cars": 1, "flags": 2, "steps": 3, "violations": 0,
        }
        assert world.time == pytest.approx(0.3)
