class SimulationError(Exception):
    """Base class for every error raised by the simulation core."""


class ConfigurationError(SimulationError, ValueError):
    """Invalid parameter rejected at construction time."""


class InvariantViolation(SimulationError):
    """Programming error: an operation was applied to the wrong kind of object."""


class InvalidPairingError(InvariantViolation):
    """A flag/car transition was requested on a pairing other than (flag, car)."""


class CollisionError(SimulationError):
    """
    Two cars reached zero separation or the state became non-finite.
    Fatal for the run: the driver must stop and report it.
    """
