from abc import ABC, abstractmethod
from dataclasses import asdict

from speedcam_sim.config import SimulationConfig
from speedcam_sim.metrics.types import SimulationResult
from speedcam_sim.model.world_state import WorldState
from speedcam_sim.substrate import ConstStep


class SimulationBackend(ABC):
    """
    Abstract base for all backends (Sequential, Numba, MPI).
    """

    name: str = "base"

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.timeiter = ConstStep(config.dt)
        self.timeiter.set_tmax(config.total_time)

    @abstractmethod
    def run(self) -> SimulationResult:
        """
        Runs simulation and returns results.

        :raises CollisionError: two cars met; the run is aborted
        """
        raise NotImplementedError

    def _result(self, world: WorldState, wall_time: float, extra: dict) -> SimulationResult:
        return SimulationResult(
            backend=self.name,
            config=asdict(self.config),
            wall_time_seconds=wall_time,
            total_simulated_time=world.time,
            steps=world.steps,
            cars=[c.snapshot() for c in world.cars()],
            violations=world.violations.to_list(),
            extra_stats=extra,
        )
