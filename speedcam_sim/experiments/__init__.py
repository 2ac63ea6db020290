from speedcam_sim.config import CameraConfig, SimulationConfig
from speedcam_sim.backends import get_backend, BACKENDS


__all__ = ["CameraConfig", "SimulationConfig", "get_backend", "BACKENDS"]
