from speedcam_sim.config import SimulationConfig
from speedcam_sim.experiments.runner import run_single
from speedcam_sim.io.logging_utils import setup_logging, logger
from speedcam_sim.io.results_writer import save_result_as_json
from speedcam_sim.backends import BACKENDS


def choose_backend() -> str:
    print("=== Choose backend ===")
    for i, name in enumerate(BACKENDS.keys(), start=1):
        print(f"{i}. {name}")
    choice = input("Enter number: ").strip()

    try:
        idx = int(choice) - 1
        name = list(BACKENDS.keys())[idx]
    except (ValueError, IndexError):
        print("Invalid choice, falling back to 'sequential'")
        name = "sequential"
    return name


def main():
    setup_logging()

    print("=== Speed camera traffic simulation ===")

    backend_name = choose_backend()

    try:
        total_time = float(input("Total simulation time [s] (default 300): ") or "300")
        dt = float(input("Time step dt [s] (default 0.1): ") or "0.1")
        num_cars = int(input("Cars per lane (default 10): ") or "10")
        num_lanes = int(input("Lanes (default 1): ") or "1")
        spread = float(input("Behavior spread (default 0.2): ") or "0.2")
    except ValueError:
        print("Invalid input, using defaults.")
        total_time, dt, num_cars, num_lanes, spread = 300.0, 0.1, 10, 1, 0.2

    cfg = SimulationConfig(
        backend=backend_name,
        total_time=total_time,
        dt=dt,
        num_cars=num_cars,
        num_lanes=num_lanes,
        behavior_spread=spread,
    )

    logger.info(f"Running simulation with backend='{backend_name}'")
    result = run_single(cfg)

    logger.info("Simulation finished.")
    logger.info(f"Wall time: {result.wall_time_seconds:.4f} s")
    logger.info(f"Steps: {result.steps}")
    logger.info(f"Cars: {len(result.cars)}")
    logger.info(f"Violations recorded: {len(result.violations)}")

    path = save_result_as_json(result, cfg.output_dir)
    logger.info(f"Results saved to {path}")


if __name__ == "__main__":
    main()
