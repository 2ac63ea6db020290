from dataclasses import dataclass, asdict, field
from typing import List, Literal, Optional


BackendName = Literal["sequential", "numba", "mpi"]
BoundaryName = Literal["periodic", "reflective", "open"]


@dataclass
class CameraConfig:
    # camera (downstream zone boundary) position [m]
    position: float
    # [m/s]
    speed_limit: float
    # zone extent upstream of the camera [m]
    length: float
    check_average: bool = False


@dataclass
class SimulationConfig:
    # total time of simulation (seconds)
    total_time: float = 300.0
    # time step (seconds)
    dt: float = 0.1

    # road
    lane_length: float = 1000.0
    boundary: BoundaryName = "periodic"
    num_lanes: int = 1
    cameras: List[CameraConfig] = field(default_factory=lambda: [
        CameraConfig(position=500.0, speed_limit=8.0, length=100.0),
    ])
    # add SpeedCam.force_to() braking inside zones
    camera_braking: bool = False

    # cars, evenly spaced on every lane
    num_cars: int = 10
    car_size: float = 4.0
    max_speed: float = 13.9
    drift: float = 1.0
    behavior: float = 0.0
    # behavior drawn uniformly from [behavior - spread, behavior + spread]
    behavior_spread: float = 0.0
    random_seed: int = 42

    backend: BackendName = "sequential"

    # numba
    num_threads: int = 1
    # mpi: number of ranks is taken from the communicator

    output_dir: str = "results"
    # scenario desc
    label: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)
