from speedcam_sim.model.car import Car
from speedcam_sim.model.speed_cam import SpeedCam, SpeedCamFlag
from speedcam_sim.model.traffic_item import ItemKind, TrafficItem
from speedcam_sim.model.road import Road
from speedcam_sim.model.lane import Lane
from speedcam_sim.model.world_state import WorldState


__all__ = [
    "Car", "SpeedCam", "SpeedCamFlag", "ItemKind", "TrafficItem",
    "Road", "Lane", "WorldState",
]
