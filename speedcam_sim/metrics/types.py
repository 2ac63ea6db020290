from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class SimulationResult:
    backend: str
    config: Dict[str, Any]

    # total time
    wall_time_seconds: float
    total_simulated_time: float
    steps: int

    # final state of every car (Car.snapshot())
    cars: List[Dict[str, Any]] = field(default_factory=list)
    # ViolationEvent dicts, in the order they were recorded
    violations: List[Dict[str, Any]] = field(default_factory=list)

    extra_stats: Dict[str, Any] = field(default_factory=dict)
