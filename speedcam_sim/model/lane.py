from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Tuple

from speedcam_sim.io.logging_utils import logger

from .car import Car
from .speed_cam import SpeedCamFlag
from .traffic_item import TrafficItem


# (flag, car) -> None, called after a flag acted on a car
PassCallback = Callable[[SpeedCamFlag, Car], None]

# (index, behind index, behind offset, ahead index, ahead offset); -1 = no neighbour
Neighbours = Tuple[int, int, float, int, float]


class Lane:
    """
    Owned, position-ordered sequence of cars and flags for a single lane.
    """

    def __init__(self, index: int, cars: Iterable[Car], flags: Iterable[SpeedCamFlag]) -> None:
        self.index = index
        self.items: List[TrafficItem] = [TrafficItem.car(c) for c in cars]
        self.items.extend(TrafficItem.flag(f) for f in flags)
        self.items.sort(key=TrafficItem.sort_key)

    # ------------------------ QUERIES ------------------------

    def cars(self) -> List[Car]:
        """Cars in ascending position order."""
        return [item.as_car() for item in self.items if item.is_car]

    def is_sorted(self) -> bool:
        keys = [item.sort_key() for item in self.items]
        return all(a <= b for a, b in zip(keys, keys[1:]))

    def neighbour_table(self, periodic: bool, lane_length: float) -> List[Neighbours]:
        """
        Immediate behind/ahead neighbour of every car, indexed into cars().
        On a periodic road the first and last cars see each other through
        the wall, shifted by one lane length.
        """
        n = sum(1 for item in self.items if item.is_car)
        table: List[Neighbours] = []
        for k in range(n):
            behind, behind_off = k - 1, 0.0
            ahead, ahead_off = k + 1, 0.0
            if k == 0:
                behind, behind_off = (n - 1, -lane_length) if periodic and n > 1 else (-1, 0.0)
            if k == n - 1:
                ahead, ahead_off = (0, lane_length) if periodic and n > 1 else (-1, 0.0)
            table.append((k, behind, behind_off, ahead, ahead_off))
        return table

    # ------------------------ TRANSITIONS ------------------------

    def pass_flags(self, on_pass: Optional[PassCallback] = None) -> int:
        """
        One ascending pass over adjacent (car, flag) pairs. A car that moved
        past the flag right after it gets the transition and swaps places with
        the flag, so it can meet the next flag in the same pass.

        :return: number of transitions applied
        """
        fired = 0
        items = self.items
        for i in range(1, len(items)):
            behind, item = items[i - 1], items[i]
            if not (item.is_flag and behind.is_car):
                continue
            if item.try_pass(behind):
                items[i - 1], items[i] = item, behind
                fired += 1
                if on_pass is not None:
                    on_pass(item.as_flag(), behind.as_car())

        if not self.is_sorted():
            # a car moved backward past a flag; no transition
            logger.debug(f"lane {self.index}: restoring position order")
            items.sort(key=TrafficItem.sort_key)
        return fired

    def relocate_wrapped(self, car: Car, direction: int, on_pass: Optional[PassCallback] = None) -> None:
        """
        Move a car that crossed a periodic wall to the other end of the
        sequence. Going forward it first drives past every flag still ahead
        of it, so zone entry/exit pairing survives the wrap.
        """
        idx = next(i for i, item in enumerate(self.items) if item.is_car and item.as_car() is car)
        car_item = self.items.pop(idx)

        if direction > 0:
            for item in self.items[idx:]:
                if item.is_flag:
                    item.transition(car_item)
                    if on_pass is not None:
                        on_pass(item.as_flag(), car)
            self.items.insert(0, car_item)
        else:
            self.items.append(car_item)
