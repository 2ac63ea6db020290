from __future__ import annotations

from dataclasses import asdict

from mpi4py import MPI

from speedcam_sim.config import CameraConfig, SimulationConfig
from speedcam_sim.io.logging_utils import setup_logging, logger
from speedcam_sim.io.results_writer import save_result_as_json
from speedcam_sim.backends.backend_mpi import MPIBackend


def main() -> None:
    # Initialize logging (each rank gets the same config; we will log only on rank 0)
    setup_logging()

    comm = MPI.COMM_WORLD
    rank = comm.Get_rank()

    # Hard-coded config for MPI experiments
    cfg = SimulationConfig(
        backend="mpi",
        total_time=600.0,    # total simulated time [s]
        dt=0.1,              # time step [s]
        lane_length=5000.0,  # [m]
        num_lanes=8,
        num_cars=100,        # cars per lane
        behavior_spread=0.3,
        cameras=[
            CameraConfig(position=1500.0, speed_limit=8.0, length=200.0),
            CameraConfig(position=4000.0, speed_limit=11.0, length=1000.0, check_average=True),
        ],
        random_seed=42,
    )

    # Create MPI backend directly, do NOT use run_single / get_backend
    backend = MPIBackend(cfg)
    result = backend.run()

    # Only rank 0 prints and saves results
    if rank == 0:
        logger.info("=== MPI run finished ===")
        logger.info(f"Backend: {result.backend}")
        logger.info(f"Config: {asdict(cfg)}")
        logger.info(f"Wall time: {result.wall_time_seconds:.4f} s")
        logger.info(f"Cars: {len(result.cars)}")
        logger.info(f"Violations recorded: {len(result.violations)}")

        path = save_result_as_json(result, cfg.output_dir)
        logger.info(f"Results saved to {path}")


if __name__ == "__main__":
    main()
