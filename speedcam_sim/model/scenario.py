import random
from typing import Iterable, List

from speedcam_sim.config import SimulationConfig
from speedcam_sim.errors import ConfigurationError
from speedcam_sim.substrate import BoundaryKind

from .car import Car
from .road import Road
from .speed_cam import SpeedCam
from .world_state import WorldState


def build_road(config: SimulationConfig) -> Road:
    cameras = [
        SpeedCam(c.position, c.speed_limit, c.length, c.check_average)
        for c in config.cameras
    ]
    return Road(
        lane_length=config.lane_length,
        boundary=BoundaryKind(config.boundary),
        cameras=cameras,
    )


def build_cars(config: SimulationConfig) -> List[Car]:
    """
    num_cars cars per lane, evenly spaced from position 0, at rest.
    Car ids are global and do not depend on how lanes are split
    between MPI ranks.
    """
    if config.num_lanes < 1:
        raise ConfigurationError(f"num_lanes must be at least 1, got {config.num_lanes}")
    if config.num_cars < 0:
        raise ConfigurationError(f"num_cars must be non-negative, got {config.num_cars}")
    if config.num_cars * config.car_size >= config.lane_length:
        raise ConfigurationError(
            f"{config.num_cars} cars of size {config.car_size} do not fit "
            f"on a lane of length {config.lane_length}"
        )
    if config.behavior - config.behavior_spread <= -1.0:
        raise ConfigurationError("behavior - behavior_spread must stay above -1")

    rng = random.Random(config.random_seed)
    spacing = config.lane_length / max(config.num_cars, 1)

    cars: List[Car] = []
    for lane in range(config.num_lanes):
        for k in range(config.num_cars):
            behavior = config.behavior
            if config.behavior_spread > 0.0:
                behavior = rng.uniform(
                    config.behavior - config.behavior_spread,
                    config.behavior + config.behavior_spread,
                )
            car = Car(
                lane=lane,
                size=config.car_size,
                max_speed=config.max_speed,
                drift=config.drift,
                behavior=behavior,
                own_max_speed=config.max_speed,
                id=len(cars),
            )
            car.pos[0] = k * spacing
            cars.append(car)
    return cars


def build_world(config: SimulationConfig, active_lanes: Iterable[int] | None = None) -> WorldState:
    road = build_road(config)
    cars = build_cars(config)
    if active_lanes is not None:
        keep = set(active_lanes)
        cars = [c for c in cars if c.lane in keep]
    return WorldState(
        road=road,
        cars=cars,
        camera_braking=config.camera_braking,
        active_lanes=active_lanes,
    )
