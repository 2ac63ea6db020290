from dataclasses import replace
from typing import Iterable, List

from speedcam_sim.backends import get_backend
from speedcam_sim.config import SimulationConfig
from speedcam_sim.metrics.types import SimulationResult


def run_single(config: SimulationConfig) -> SimulationResult:
    BackendCls = get_backend(config.backend)
    backend = BackendCls(config)
    return backend.run()


def run_scaling_experiment(
    base_config: SimulationConfig,
    backend_name: str,
    param_name: str,
    values: Iterable[int | float]
) -> List[SimulationResult]:
    """
    Helper: changes one parameter (e.g num_threads or num_cars) and runs backend

    :param base_config: configuration shared by all runs
    :param backend_name: registered backend name
    :param param_name: SimulationConfig field to vary
    :param values: values of that field, one run each
    :return: one result per value, in order
    """

    if param_name not in base_config.to_dict():
        raise ValueError(f"SimulationConfig has no field '{param_name}'")

    results: List[SimulationResult] = []
    for v in values:
        cfg = replace(base_config, backend=backend_name, **{param_name: v})
        res = run_single(cfg)
        results.append(res)
    return results
