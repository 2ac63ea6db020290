from numba import set_num_threads

from speedcam_sim.backends.base_backend import SimulationBackend
from speedcam_sim.config import SimulationConfig
from speedcam_sim.errors import CollisionError
from speedcam_sim.io.logging_utils import logger
from speedcam_sim.metrics.types import SimulationResult
from speedcam_sim.metrics.timers import Timer
from speedcam_sim.model.scenario import build_world


class NumbaBackend(SimulationBackend):
    """
    Parallel CPU backend using Numba.
    It uses the same WorldState model, but calls step_numba()
    which computes the force phase with a Numba @njit(parallel=True) kernel.
    """

    name = "numba"

    def __init__(self, config: SimulationConfig):
        super().__init__(config)

        # Configure the number of threads used by Numba
        if self.config.num_threads > 0:
            set_num_threads(self.config.num_threads)

        self.world = build_world(config)

    def run(self) -> SimulationResult:
        steps = iter(self.timeiter.into_diff())

        try:
            # Warm-up step to trigger Numba JIT compilation (not measured)
            first = next(steps, None)
            if first is not None:
                self.world.step_numba(first[1])

            with Timer() as t:
                for _t, dt in steps:
                    self.world.step_numba(dt)
        except CollisionError:
            logger.error(f"Collision at t={self.world.time:.2f} s, run aborted")
            raise

        debug_stats = self.world.get_debug_stats()
        debug_stats["steps_per_second"] = t.rate(max(self.world.steps - 1, 0))

        return self._result(self.world, t.elapsed, debug_stats)
