from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import TYPE_CHECKING, Dict, List, Literal, Tuple

if TYPE_CHECKING:
    from speedcam_sim.model.car import Car
    from speedcam_sim.model.speed_cam import SpeedCam, SpeedCamFlag


ViolationKind = Literal["spot", "average"]


@dataclass
class ViolationEvent:
    car_id: int
    lane: int
    cam_position: float          # [m]
    kind: ViolationKind
    measured_speed: float        # [m/s]
    speed_limit: float           # [m/s]
    time: float                  # [s] when the car crossed the exit flag

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ViolationLog:
    """
    Records cars caught by cameras.

    - spot cameras measure the speed when the car crosses the exit flag
    - average cameras divide the zone length by the time spent between
      the entry and exit flags
    """
    events: List[ViolationEvent] = field(default_factory=list)
    _entries: Dict[Tuple[int, SpeedCam], float] = field(default_factory=dict, repr=False)

    def observe(self, flag: SpeedCamFlag, car: Car, t: float) -> None:
        cam = flag.cam
        if flag.is_entry:
            if cam.check_average:
                self._entries[(car.id, cam)] = t
            return

        if cam.check_average:
            t_in = self._entries.pop((car.id, cam), None)
            # cars that started inside the zone have no entry time
            if t_in is None or t <= t_in:
                return
            measured = cam.length / (t - t_in)
        else:
            measured = car.velocity

        if measured > cam.speed_limit:
            self.events.append(ViolationEvent(
                car_id=car.id,
                lane=car.lane,
                cam_position=cam.position,
                kind="average" if cam.check_average else "spot",
                measured_speed=measured,
                speed_limit=cam.speed_limit,
                time=t,
            ))

    def count(self) -> int:
        return len(self.events)

    def to_list(self) -> List[dict]:
        return [e.to_dict() for e in self.events]
