from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

import numpy as np
from numba import njit, prange

from speedcam_sim.errors import CollisionError
from speedcam_sim.io.logging_utils import logger
from speedcam_sim.metrics.violations import ViolationLog
from speedcam_sim.substrate import Cartesian1D

from .car import Car
from .lane import Lane, Neighbours
from .road import Road
from .speed_cam import SpeedCamFlag


@njit(parallel=True)
def lane_forces_kernel(
    positions: np.ndarray,
    velocities: np.ndarray,
    sizes: np.ndarray,
    max_speeds: np.ndarray,
    drifts: np.ndarray,
    behind_idx: np.ndarray,
    behind_off: np.ndarray,
    ahead_idx: np.ndarray,
    ahead_off: np.ndarray,
    out: np.ndarray,
) -> None:
    """
    Numba-parallel force phase: drift + repulsion from the immediate
    neighbours, one writer per car, neighbours read-only.

    A zero separation yields NaN for that car; the caller turns it into
    a CollisionError.
    """
    n = positions.shape[0]

    for i in prange(n):
        x = positions[i]
        v = velocities[i]
        size = sizes[i]
        sd_ahead = max(size, size + v * (2.0 + 0.05 * v))
        f = drifts[i] * np.tanh(max_speeds[i] - v)
        collided = False

        for side in range(2):
            if side == 0:
                j = behind_idx[i]
                other = positions[j] + behind_off[i] if j >= 0 else 0.0
            else:
                j = ahead_idx[i]
                other = positions[j] + ahead_off[i] if j >= 0 else 0.0
            if j < 0:
                continue

            r = abs(x - other)
            if r <= 0.0:
                collided = True
            elif x < other:
                t6 = (sd_ahead / r) ** 6
                f -= 4.0 / r * (12.0 * t6 * t6 - 6.0 * t6)
            else:
                t6 = (size / r) ** 6
                f += 4.0 / r * (12.0 * t6 * t6 - 6.0 * t6)

        if collided:
            out[i] = np.nan
        else:
            out[i] = f


class WorldState:
    """
    Manages the full state of the traffic simulation:
    - one ordered lane per lane index (cars + shared camera flags)
    - force phase (sequential or Numba-parallel)
    - integration with boundary conditions
    - flag transition pass and violation records

    Every step is two-phase: all forces are computed from the pre-step
    state, then cars are integrated and flags are checked on the new
    positions.
    """

    def __init__(
        self,
        road: Road,
        cars: Iterable[Car],
        camera_braking: bool = False,
        active_lanes: Iterable[int] | None = None,
    ) -> None:
        self.road = road
        self.camera_braking = camera_braking

        all_cars = list(cars)
        for i, car in enumerate(all_cars):
            if car.id < 0:
                car.id = i

        # Which lanes are actually simulated in this world (for MPI domain decomposition)
        if active_lanes is None:
            lane_ids = sorted({c.lane for c in all_cars})
        else:
            lane_ids = sorted(set(active_lanes))

        flags = road.flags()
        self.lanes: Dict[int, Lane] = {
            idx: Lane(idx, [c for c in all_cars if c.lane == idx], flags)
            for idx in lane_ids
        }

        self.time: float = 0.0
        self.steps: int = 0
        self.violations = ViolationLog()

    # ------------------------ PUBLIC API ------------------------

    def step(self, dt: float) -> None:
        """
        Sequential step:
        1) forces for every car from the pre-step state
        2) Euler integration + boundary conditions + commit
        3) flag transition pass on the new positions
        """
        for lane in self.lanes.values():
            cars = lane.cars()
            forces = self._compute_forces_sequential(lane, cars)
            self._advance_lane(lane, cars, forces, dt)
        self._finish_step(dt)

    def step_numba(self, dt: float) -> None:
        """
        Same as step(), with the force phase computed by a Numba
        @njit(parallel=True) kernel. Integration and transitions stay
        sequential.
        """
        for lane in self.lanes.values():
            cars = lane.cars()
            forces = self._compute_forces_numba(lane, cars)
            self._advance_lane(lane, cars, forces, dt)
        self._finish_step(dt)

    def cars(self) -> List[Car]:
        """All simulated cars, lane by lane, in position order."""
        out: List[Car] = []
        for idx in sorted(self.lanes):
            out.extend(self.lanes[idx].cars())
        return out

    def compute_forces(self, use_numba: bool = False) -> List[Cartesian1D]:
        """Forces on cars() without advancing the state."""
        out: List[Cartesian1D] = []
        for idx in sorted(self.lanes):
            lane = self.lanes[idx]
            cars = lane.cars()
            if use_numba:
                out.extend(self._compute_forces_numba(lane, cars))
            else:
                out.extend(self._compute_forces_sequential(lane, cars))
        return out

    def get_debug_stats(self) -> Dict[str, int]:
        return {
            "lanes": len(self.lanes),
            "cars": sum(len(lane.cars()) for lane in self.lanes.values()),
            "flags": len(self.road.flags()),
            "steps": self.steps,
            "violations": self.violations.count(),
        }

    # ------------------------ INTERNAL LOGIC ------------------------

    def _neighbours(self, lane: Lane) -> List[Neighbours]:
        return lane.neighbour_table(self.road.periodic, self.road.lane_length)

    def _compute_forces_sequential(self, lane: Lane, cars: List[Car]) -> List[Cartesian1D]:
        forces: List[Cartesian1D] = []
        for k, behind, behind_off, ahead, ahead_off in self._neighbours(lane):
            car = cars[k]
            force = car.drift_force()
            if behind >= 0:
                other = cars[behind] if behind_off == 0.0 else cars[behind].shifted(behind_off)
                force += car.force_from(other)
            if ahead >= 0:
                other = cars[ahead] if ahead_off == 0.0 else cars[ahead].shifted(ahead_off)
                force += car.force_from(other)
            forces.append(force)

        self._add_braking(cars, forces)
        return forces

    def _compute_forces_numba(self, lane: Lane, cars: List[Car]) -> List[Cartesian1D]:
        n = len(cars)
        if n == 0:
            return []

        table = self._neighbours(lane)
        positions = np.array([c.position for c in cars], dtype=np.float64)
        velocities = np.array([c.velocity for c in cars], dtype=np.float64)
        sizes = np.array([c.size for c in cars], dtype=np.float64)
        max_speeds = np.array([c.max_speed for c in cars], dtype=np.float64)
        drifts = np.array([c.drift for c in cars], dtype=np.float64)
        behind_idx = np.array([row[1] for row in table], dtype=np.int64)
        behind_off = np.array([row[2] for row in table], dtype=np.float64)
        ahead_idx = np.array([row[3] for row in table], dtype=np.int64)
        ahead_off = np.array([row[4] for row in table], dtype=np.float64)
        out = np.zeros(n, dtype=np.float64)

        lane_forces_kernel(
            positions, velocities, sizes, max_speeds, drifts,
            behind_idx, behind_off, ahead_idx, ahead_off, out,
        )

        bad = np.flatnonzero(~np.isfinite(out))
        if bad.size > 0:
            car = cars[int(bad[0])]
            raise CollisionError(
                f"non-finite force on car {car.id} in lane {lane.index} at x={car.position:.3f}"
            )

        forces = [Cartesian1D([f]) for f in out]
        self._add_braking(cars, forces)
        return forces

    def _add_braking(self, cars: List[Car], forces: List[Cartesian1D]) -> None:
        if not self.camera_braking:
            return
        for car, force in zip(cars, forces):
            for cam in self.road.cameras_covering(car.position):
                force += cam.force_to(car)

    def _advance_lane(self, lane: Lane, cars: List[Car], forces: List[Cartesian1D], dt: float) -> None:
        t_next = self.time + dt
        on_pass = self._make_pass_callback(t_next)

        wrapped: List[Tuple[Car, int]] = []
        unwrapped: List[float] = []
        for car, force in zip(cars, forces):
            if not force.is_finite():
                raise CollisionError(f"non-finite force on car {car.id} in lane {lane.index}")
            movement = car.euler(force, dt)
            if not (movement.pos.is_finite() and movement.vel.is_finite()):
                raise CollisionError(f"car {car.id} in lane {lane.index} has a non-finite state")
            direction = self.road.bounds.check_bc(movement)
            car.renew_state(movement)
            unwrapped.append(car.position + direction * self.road.lane_length)
            if direction != 0:
                wrapped.append((car, direction))

        self._check_no_overtaking(lane, cars, unwrapped)

        # front-most forward wraps first so each lands ahead of the next at index 0
        for car, direction in sorted(wrapped, key=lambda cw: -cw[1] * cw[0].position):
            lane.relocate_wrapped(car, direction, on_pass)

        lane.pass_flags(on_pass)

    def _check_no_overtaking(self, lane: Lane, cars: List[Car], unwrapped: List[float]) -> None:
        """
        Cars of one lane never pass through each other. ``cars`` is the
        pre-step order and ``unwrapped`` the post-step positions with
        periodic wraps undone, so the sequence must stay strictly increasing.
        """
        for k in range(len(cars) - 1):
            if not unwrapped[k] < unwrapped[k + 1]:
                raise CollisionError(
                    f"car {cars[k].id} ran into car {cars[k + 1].id} in lane {lane.index} "
                    f"at t={self.time:.2f} (x={cars[k].position:.3f} vs {cars[k + 1].position:.3f})"
                )
        if self.road.periodic and len(cars) > 1:
            # last car must stay behind the first car's image one lap ahead
            if not unwrapped[-1] < unwrapped[0] + self.road.lane_length:
                raise CollisionError(
                    f"car {cars[-1].id} ran into car {cars[0].id} across the wall "
                    f"in lane {lane.index} at t={self.time:.2f}"
                )

    def _make_pass_callback(self, t_next: float):
        def on_pass(flag: SpeedCamFlag, car: Car) -> None:
            logger.debug(
                f"t={t_next:.2f} car {car.id} lane {car.lane} "
                f"{'entered' if flag.is_entry else 'left'} zone of camera at "
                f"{flag.cam.position:.1f} (max_speed={car.max_speed:.2f})"
            )
            self.violations.observe(flag, car, t_next)
        return on_pass

    def _finish_step(self, dt: float) -> None:
        self.time += dt
        self.steps += 1
