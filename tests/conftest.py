"""Shared fixtures for the traffic dynamics tests."""

from __future__ import annotations

import pytest

from speedcam_sim.model import Car, Road, SpeedCam, WorldState
from speedcam_sim.substrate import BoundaryKind


@pytest.fixture
def reference_car() -> Car:
    """Car(lane=0, size=1, max_speed=10, drift=1, behavior=0, own_max_speed=10)."""
    return Car(0, 1.0, 10.0, 1.0, 0.0, 10.0)


@pytest.fixture
def make_car():
    def _make(position: float = 0.0, velocity: float = 0.0, lane: int = 0, **kwargs) -> Car:
        params = dict(size=1.0, max_speed=10.0, drift=1.0, behavior=0.0, own_max_speed=10.0)
        params.update(kwargs)
        car = Car(lane=lane, **params)
        car.pos[0] = position
        car.vel[0] = velocity
        return car

    return _make


@pytest.fixture
def cam() -> SpeedCam:
    """Zone [400, 500] with a 5 m/s limit."""
    return SpeedCam(500.0, 5.0, 100.0, False)


@pytest.fixture
def make_world():
    def _make(cars, cameras=(), lane_length: float = 1000.0,
              boundary: BoundaryKind = BoundaryKind.OPEN, **kwargs) -> WorldState:
        road = Road(lane_length=lane_length, boundary=boundary, cameras=cameras)
        return WorldState(road, cars, **kwargs)

    return _make
