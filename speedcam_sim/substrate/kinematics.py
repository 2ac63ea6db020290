from dataclasses import dataclass

from .vectors import Cartesian1D


@dataclass
class Movement:
    """Candidate next state produced by the integrator, not yet committed."""
    pos: Cartesian1D
    vel: Cartesian1D


class State:
    """
    Mixin for agents exposing ``pos``, ``vel`` (Cartesian1D) and ``mass``.

    Usage per step: accumulate the force, call euler(), let the boundary
    conditions adjust the movement, then renew_state().
    """

    def euler(self, force: Cartesian1D, dt: float) -> Movement:
        """Explicit Euler: both updates use the pre-step state."""
        acc = force * (1.0 / self.mass)
        return Movement(
            pos=self.pos + self.vel * dt,
            vel=self.vel + acc * dt,
        )

    def renew_state(self, movement: Movement) -> None:
        self.pos = movement.pos
        self.vel = movement.vel
