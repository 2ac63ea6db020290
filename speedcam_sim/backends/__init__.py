from typing import Dict, Type

from speedcam_sim.backends.base_backend import SimulationBackend
from speedcam_sim.backends.backend_sequential import SequentialBackend
from speedcam_sim.backends.backend_numba import NumbaBackend

# IMPORTANT
# MPIBackend is intentionally NOT loaded here
# run_mpi.py will import it directly when needed

BACKENDS: Dict[str, Type[SimulationBackend]] = {
    SequentialBackend.name: SequentialBackend,
    NumbaBackend.name: NumbaBackend,
}


def get_backend(name: str) -> Type[SimulationBackend]:
    try:
        return BACKENDS[name]
    except KeyError:
        raise ValueError(
            f"Unknown backend '{name}'. Available: {', '.join(BACKENDS.keys())}"
        )
