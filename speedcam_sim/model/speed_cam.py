from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from speedcam_sim.errors import ConfigurationError
from speedcam_sim.substrate import Cartesian1D

from .car import Car


@dataclass(frozen=True)
class SpeedCam:
    """
    Enforcement zone [position - length, position].
    position is the downstream boundary where the camera stands.
    """
    position: float              # [m]
    speed_limit: float           # [m/s]
    length: float                # [m] zone extent upstream of the camera
    check_average: bool = False

    def __post_init__(self) -> None:
        if not math.isfinite(self.position):
            raise ConfigurationError(f"camera position must be finite, got {self.position}")
        if not self.speed_limit > 0.0:
            raise ConfigurationError(f"speed limit must be positive, got {self.speed_limit}")
        if not self.length > 0.0:
            raise ConfigurationError(f"zone length must be positive, got {self.length}")

    @property
    def pos(self) -> Cartesian1D:
        return Cartesian1D([self.position])

    @property
    def entry_position(self) -> float:
        return self.position - self.length

    def contains(self, x: float) -> bool:
        return self.entry_position <= x <= self.position

    def set_max_speed(self, car: Car) -> None:
        car.set_max_speed(self.speed_limit)

    def force_to(self, car: Car) -> Cartesian1D:
        """Quadratic braking force, zero while the car is under the limit."""
        v = car.vel[0]
        if v < self.speed_limit:
            return Cartesian1D.zeros()
        return Cartesian1D([-2.0 / self.length * v * v])

    def flags(self) -> Tuple[SpeedCamFlag, SpeedCamFlag]:
        """(entry, exit) markers of the zone; build them once per run."""
        return (
            SpeedCamFlag(self.entry_position, True, self),
            SpeedCamFlag(self.position, False, self),
        )


@dataclass(frozen=True)
class SpeedCamFlag:
    """
    Stationary zone boundary. An entry flag (status=True) imposes the
    camera's limit on a car that passes it, an exit flag (status=False)
    gives the car back its own maximum speed.
    """
    position: float
    status: bool
    cam: SpeedCam

    @property
    def pos(self) -> Cartesian1D:
        return Cartesian1D([self.position])

    @property
    def is_entry(self) -> bool:
        return self.status

    def passed_by(self, car: Car) -> bool:
        return self.position < car.position

    def apply(self, car: Car) -> None:
        if self.status:
            self.cam.set_max_speed(car)
        else:
            car.restore_max_speed()
