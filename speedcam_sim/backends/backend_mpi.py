from mpi4py import MPI

from speedcam_sim.backends.base_backend import SimulationBackend
from speedcam_sim.config import SimulationConfig
from speedcam_sim.errors import CollisionError
from speedcam_sim.io.logging_utils import logger
from speedcam_sim.metrics.types import SimulationResult
from speedcam_sim.metrics.timers import Timer
from speedcam_sim.model.scenario import build_world


class MPIBackend(SimulationBackend):
    """
    MPI backend using domain decomposition by lanes.

    Lanes never interact (no lane changing), so each MPI rank simulates
    only a subset of them, for example with 4 lanes and 2 ranks:
    - rank 0: lanes 0, 2
    - rank 1: lanes 1, 3

    Final car states and violation events are gathered to rank 0 and
    broadcast back, so every rank returns the same result.
    """

    name = "mpi"

    def __init__(self, config: SimulationConfig):
        super().__init__(config)

        self.comm = MPI.COMM_WORLD
        self.rank = self.comm.Get_rank()
        self.size = self.comm.Get_size()

        # Assign lanes to ranks in a simple round-robin fashion
        # If there are more ranks than lanes, some ranks get an empty world
        self.active_lanes = [
            lane for lane in range(config.num_lanes) if lane % max(self.size, 1) == self.rank
        ]

        self.world = build_world(config, active_lanes=self.active_lanes)

    def run(self) -> SimulationResult:
        # Sequential update per rank; domain decomposition is across ranks.
        with Timer() as t:
            try:
                for _t, dt in self.timeiter.into_diff():
                    self.world.step(dt)
            except CollisionError:
                logger.error(
                    f"[rank {self.rank}] collision at t={self.world.time:.2f} s, run aborted"
                )
                self.comm.Abort(1)
                raise

        local_cars = [c.snapshot() for c in self.world.cars()]
        local_violations = self.world.violations.to_list()

        comm = self.comm
        all_cars = comm.gather(local_cars, root=0)
        all_violations = comm.gather(local_violations, root=0)
        global_wall = comm.reduce(t.elapsed, op=MPI.MAX, root=0)  # max wall time across ranks

        if self.rank == 0:
            cars = sorted((c for chunk in all_cars for c in chunk), key=lambda c: (c["lane"], c["position"]))
            violations = sorted((v for chunk in all_violations for v in chunk), key=lambda v: (v["time"], v["car_id"]))
        else:
            cars, violations = None, None

        # Broadcast global data to all ranks
        cars, violations, wall_time = comm.bcast((cars, violations, global_wall), root=0)

        debug_stats = {
            "num_ranks": self.size,
            "rank": self.rank,
            "local_lanes": self.active_lanes,
            "local_cars": len(local_cars),
            "local_violations": len(local_violations),
        }

        return SimulationResult(
            backend=self.name,
            config=self.config.to_dict(),
            wall_time_seconds=wall_time,
            total_simulated_time=self.world.time,
            steps=self.world.steps,
            cars=cars,
            violations=violations,
            extra_stats=debug_stats,
        )
