from typing import Iterator, Optional, Tuple

from speedcam_sim.errors import ConfigurationError


class ConstStep:
    """
    Fixed-step time iterator.

    >>> it = ConstStep(0.5)
    >>> it.set_tmax(1.0)
    >>> list(it.into_diff())
    [(0.0, 0.5), (0.5, 0.5)]
    """

    def __init__(self, dt: float) -> None:
        if not dt > 0.0:
            raise ConfigurationError(f"time step must be positive, got {dt}")
        self.dt = float(dt)
        self.tmax: Optional[float] = None

    def set_tmax(self, tmax: float) -> None:
        if not tmax > 0.0:
            raise ConfigurationError(f"tmax must be positive, got {tmax}")
        self.tmax = float(tmax)

    @property
    def num_steps(self) -> int:
        if self.tmax is None:
            raise ConfigurationError("tmax is not set")
        # round() absorbs float noise such as 20.0 / 0.1 = 199.99999999999997
        return int(round(self.tmax / self.dt))

    def into_diff(self) -> Iterator[Tuple[float, float]]:
        """Yield (t, dt) where t is the time at the start of each step."""
        for i in range(self.num_steps):
            yield i * self.dt, self.dt
