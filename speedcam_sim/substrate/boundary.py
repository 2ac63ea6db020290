import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from speedcam_sim.errors import ConfigurationError

from .kinematics import Movement


class BoundaryKind(str, Enum):
    PERIODIC = "periodic"
    REFLECTIVE = "reflective"
    OPEN = "open"


@dataclass(frozen=True)
class PlanePair:
    """
    Pair of walls at bounds[0] and bounds[1] along one axis.

    Applied to a Movement after the integrator and before commit.
    """
    axis: int
    bounds: Tuple[float, float]
    kind: BoundaryKind = BoundaryKind.PERIODIC

    def __post_init__(self) -> None:
        lo, hi = self.bounds
        if not (math.isfinite(lo) and math.isfinite(hi)) or hi <= lo:
            raise ConfigurationError(f"invalid bounds {self.bounds}")

    @property
    def length(self) -> float:
        return self.bounds[1] - self.bounds[0]

    def check_bc(self, movement: Movement) -> int:
        """
        Adjust movement in place.

        :return: +1 if the position wrapped past the upper wall,
                 -1 if it wrapped past the lower wall, 0 otherwise
                 (always 0 for reflective/open walls)
        """
        if self.kind is BoundaryKind.OPEN:
            return 0

        lo, hi = self.bounds
        x = movement.pos[self.axis]
        if not math.isfinite(x):
            return 0
        if self.kind is BoundaryKind.REFLECTIVE and lo <= x <= hi:
            return 0

        laps = math.floor((x - lo) / self.length)
        if laps == 0:
            return 0

        if self.kind is BoundaryKind.PERIODIC:
            wrapped = lo + (x - lo) % self.length
            # float modulo can land exactly on hi for tiny negative offsets
            if wrapped >= hi:
                wrapped = lo
            movement.pos[self.axis] = wrapped
            return 1 if laps > 0 else -1

        # unfold over period 2L; an odd number of walls hit reverses the car
        offset = (x - lo) - laps * self.length
        if laps % 2:
            offset = self.length - offset
            movement.vel[self.axis] = -movement.vel[self.axis]
        movement.pos[self.axis] = lo + offset
        return 0
