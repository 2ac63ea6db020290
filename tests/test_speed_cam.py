"""Tests for speed cameras and their zone flags."""

from __future__ import annotations

import dataclasses

import pytest

from speedcam_sim.errors import ConfigurationError
from speedcam_sim.model import SpeedCam, SpeedCamFlag


class TestSpeedCam:
    @pytest.mark.parametrize(
        "args",
        [
            (500.0, 0.0, 100.0),
            (500.0, -5.0, 100.0),
            (500.0, 5.0, 0.0),
            (500.0, 5.0, -10.0),
            (float("inf"), 5.0, 100.0),
        ],
    )
    def test_rejects_invalid_parameters(self, args) -> None:
        with pytest.raises(ConfigurationError):
            SpeedCam(*args)

    def test_is_immutable(self, cam) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            cam.speed_limit = 50.0  # type: ignore[misc]

    def test_contains(self, cam) -> None:
        assert cam.contains(400.0)
        assert cam.contains(450.0)
        assert cam.contains(500.0)
        assert not cam.contains(399.9)
        assert not cam.contains(500.1)

    def test_set_max_speed_is_idempotent(self, cam, make_car) -> None:
        car = make_car(behavior=0.1)
        cam.set_max_speed(car)
        first = car.max_speed
        cam.set_max_speed(car)
        assert car.max_speed == first == pytest.approx(5.5)

    def test_no_braking_under_limit(self, cam, make_car) -> None:
        assert cam.force_to(make_car(velocity=4.9))[0] == 0.0

    def test_quadratic_braking_above_limit(self, cam, make_car) -> None:
        # -2 / 100 * 10^2
        assert cam.force_to(make_car(velocity=10.0))[0] == pytest.approx(-2.0)

    def test_braking_starts_at_limit(self, cam, make_car) -> None:
        assert cam.force_to(make_car(velocity=5.0))[0] == pytest.approx(-0.5)


class TestFlags:
    def test_positions_and_status(self, cam) -> None:
        entry, exit_ = cam.flags()
        assert entry.position == 400.0
        assert entry.status is True
        assert exit_.position == 500.0
        assert exit_.status is False

    def test_flags_share_the_camera(self, cam) -> None:
        entry, exit_ = cam.flags()
        assert entry.cam is cam
        assert exit_.cam is cam

    def test_flags_are_idempotent(self, cam) -> None:
        assert cam.flags() == cam.flags()

    def test_flag_is_immutable(self, cam) -> None:
        entry, _ = cam.flags()
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.status = False  # type: ignore[misc]

    def test_passed_by_is_strict(self, cam, make_car) -> None:
        entry, _ = cam.flags()
        assert not entry.passed_by(make_car(position=399.0))
        assert not entry.passed_by(make_car(position=400.0))
        assert entry.passed_by(make_car(position=400.01))

    def test_entry_imposes_limit(self, cam, make_car) -> None:
        entry, _ = cam.flags()
        car = make_car(position=401.0, behavior=0.2)
        entry.apply(car)
        assert car.max_speed == pytest.approx(6.0)
        assert car.own_max_speed == 10.0

    def test_exit_restores_own_max_speed(self, cam, make_car) -> None:
        entry, exit_ = cam.flags()
        car = make_car(position=501.0)
        entry.apply(car)
        exit_.apply(car)
        assert car.max_speed == 10.0

    def test_exit_on_unrestricted_car_is_harmless(self, cam, make_car) -> None:
        _, exit_ = cam.flags()
        car = make_car(position=501.0)
        exit_.apply(car)
        assert car.max_speed == 10.0

    def test_flag_pos_vector(self) -> None:
        flag = SpeedCamFlag(12.5, True, SpeedCam(20.0, 3.0, 7.5))
        assert flag.pos[0] == 12.5
        assert flag.is_entry
