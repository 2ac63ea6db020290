from typing import Iterable, List, Sequence

from speedcam_sim.errors import ConfigurationError
from speedcam_sim.substrate import BoundaryKind, PlanePair

from .speed_cam import SpeedCam, SpeedCamFlag


class Road:
    """
    Straight road [0, lane_length] shared by all lanes, with its
    boundary condition and speed cameras.
    Every camera zone must lie fully inside the road.
    """

    def __init__(
        self,
        lane_length: float = 1000.0,
        boundary: BoundaryKind = BoundaryKind.PERIODIC,
        cameras: Iterable[SpeedCam] = (),
    ) -> None:
        if not lane_length > 0.0:
            raise ConfigurationError(f"lane length must be positive, got {lane_length}")

        self.lane_length = float(lane_length)
        self.boundary = BoundaryKind(boundary)
        self.bounds = PlanePair(0, (0.0, self.lane_length), self.boundary)
        self.cameras: List[SpeedCam] = list(cameras)

        for cam in self.cameras:
            if cam.entry_position < 0.0 or cam.position >= self.lane_length:
                raise ConfigurationError(
                    f"camera zone [{cam.entry_position}, {cam.position}] "
                    f"is outside the road [0, {self.lane_length})"
                )

        # one pair of flags per camera for the whole run, shared by all lanes
        self._flags: List[SpeedCamFlag] = []
        for cam in self.cameras:
            self._flags.extend(cam.flags())

    @property
    def periodic(self) -> bool:
        return self.boundary is BoundaryKind.PERIODIC

    def flags(self) -> Sequence[SpeedCamFlag]:
        return tuple(self._flags)

    def cameras_covering(self, x: float) -> List[SpeedCam]:
        """Cameras whose zone contains position x."""
        return [cam for cam in self.cameras if cam.contains(x)]
