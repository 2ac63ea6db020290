from speedcam_sim.backends.base_backend import SimulationBackend
from speedcam_sim.config import SimulationConfig
from speedcam_sim.errors import CollisionError
from speedcam_sim.io.logging_utils import logger
from speedcam_sim.metrics.types import SimulationResult
from speedcam_sim.metrics.timers import Timer
from speedcam_sim.model.scenario import build_world


class SequentialBackend(SimulationBackend):
    """
    Sequential implementation of the simulation.
    Used as a reference for speedup measurements.
    """

    name = "sequential"

    def __init__(self, config: SimulationConfig):
        super().__init__(config)
        self.world = build_world(config)

    def run(self) -> SimulationResult:
        with Timer() as t:
            try:
                for _t, dt in self.timeiter.into_diff():
                    self.world.step(dt)
            except CollisionError:
                logger.error(f"Collision at t={self.world.time:.2f} s, run aborted")
                raise

        debug_stats = self.world.get_debug_stats()
        debug_stats["steps_per_second"] = t.rate(self.world.steps)

        return self._result(self.world, t.elapsed, debug_stats)
