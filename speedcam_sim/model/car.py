from __future__ import annotations

import math
from dataclasses import dataclass, field

from speedcam_sim.errors import CollisionError, ConfigurationError
from speedcam_sim.substrate import Cartesian1D, State


@dataclass(eq=False)
class Car(State):
    """
    Single-lane agent driven by a drift force toward its current
    maximum speed and a soft-core repulsion from its neighbours.

    max_speed is the current ceiling (overridden inside enforcement
    zones), own_max_speed the intrinsic one restored on zone exit.
    """
    lane: int
    size: float                  # [m]
    max_speed: float             # [m/s] current ceiling
    drift: float                 # drift gain
    behavior: float              # > 0: speeder, (-1, 0]: compliant driver
    own_max_speed: float         # [m/s] intrinsic ceiling
    mass: float = 1.0
    id: int = -1                 # assigned by the world, bookkeeping only

    pos: Cartesian1D = field(default_factory=Cartesian1D.zeros)
    vel: Cartesian1D = field(default_factory=Cartesian1D.zeros)

    def __post_init__(self) -> None:
        if self.lane < 0:
            raise ConfigurationError(f"lane must be non-negative, got {self.lane}")
        if not self.size > 0.0:
            raise ConfigurationError(f"car size must be positive, got {self.size}")
        if not self.max_speed > 0.0:
            raise ConfigurationError(f"max_speed must be positive, got {self.max_speed}")
        if not self.own_max_speed > 0.0:
            raise ConfigurationError(f"own_max_speed must be positive, got {self.own_max_speed}")
        if not self.drift >= 0.0:
            raise ConfigurationError(f"drift must be non-negative, got {self.drift}")
        if not self.mass > 0.0:
            raise ConfigurationError(f"mass must be positive, got {self.mass}")
        if not self.behavior > -1.0:
            raise ConfigurationError(f"behavior must be greater than -1, got {self.behavior}")

    @property
    def position(self) -> float:
        return self.pos[0]

    @property
    def velocity(self) -> float:
        return self.vel[0]

    def drift_force(self) -> Cartesian1D:
        return Cartesian1D([self.drift * math.tanh(self.max_speed - self.vel[0])])

    def set_max_speed(self, speed_limit: float) -> None:
        """Adopt a posted limit, scaled by the driver's behavior."""
        if not speed_limit > 0.0:
            raise ConfigurationError(f"speed limit must be positive, got {speed_limit}")
        self.max_speed = (1.0 + self.behavior) * speed_limit

    def restore_max_speed(self) -> None:
        self.max_speed = self.own_max_speed

    def safe_distance(self, ahead: bool) -> float:
        """
        Required gap to a neighbour.

        :param ahead: True when the neighbour is in front of this car
        """
        if not ahead:
            return self.size
        v = self.vel[0]
        # reversing cars would otherwise get a gap smaller than their own size
        return max(self.size, self.size + v * (2.0 + 0.05 * v))

    def force_from(self, other: Car) -> Cartesian1D:
        """
        12-6 soft-core force exerted by ``other`` on this car.
        Equals 24/r at contact (t = 1) and turns weakly attractive for t < 1.
        """
        r = self.pos.distance(other.pos)
        if not r > 0.0 or not math.isfinite(r):
            raise CollisionError(
                f"cars {self.id} and {other.id} in lane {self.lane} "
                f"have separation {r} at x={self.position:.3f}"
            )

        if self.pos[0] < other.pos[0]:
            t = self.safe_distance(True) / r
            sign = -1.0
        else:
            t = self.safe_distance(False) / r
            sign = 1.0

        # plain products saturate to inf where ** would raise OverflowError
        t3 = t * t * t
        t6 = t3 * t3
        force = sign * 4.0 / r * (12.0 * t6 * t6 - 6.0 * t6)
        if not math.isfinite(force):
            raise CollisionError(
                f"cars {self.id} and {other.id} in lane {self.lane} "
                f"overlap at separation {r:.3e} (x={self.position:.3f})"
            )
        return Cartesian1D([force])

    def shifted(self, offset: float) -> Car:
        """Copy of this car displaced by ``offset`` (periodic image)."""
        image = Car(
            self.lane, self.size, self.max_speed, self.drift,
            self.behavior, self.own_max_speed, mass=self.mass, id=self.id,
        )
        image.pos = self.pos + Cartesian1D([offset])
        image.vel = self.vel.copy()
        return image

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "lane": self.lane,
            "position": self.position,
            "velocity": self.velocity,
            "max_speed": self.max_speed,
            "own_max_speed": self.own_max_speed,
            "behavior": self.behavior,
        }
