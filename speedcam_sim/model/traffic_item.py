from __future__ import annotations

from enum import Enum
from typing import Union

from speedcam_sim.errors import InvalidPairingError, InvariantViolation

from .car import Car
from .speed_cam import SpeedCamFlag


class ItemKind(Enum):
    CAR = "car"
    FLAG = "flag"


class TrafficItem:
    """
    Closed variant over {Car, SpeedCamFlag} stored in a lane's ordered
    sequence. Items compare by position only.

    The single cross-variant operation is a flag acting on the car
    directly behind it in the sequence; every other pairing raises
    InvalidPairingError.
    """

    __slots__ = ("_kind", "_value")

    def __init__(self, value: Union[Car, SpeedCamFlag]) -> None:
        if isinstance(value, Car):
            self._kind = ItemKind.CAR
        elif isinstance(value, SpeedCamFlag):
            self._kind = ItemKind.FLAG
        else:
            raise InvariantViolation(f"cannot wrap {type(value).__name__} in a TrafficItem")
        self._value = value

    @classmethod
    def car(cls, car: Car) -> TrafficItem:
        return cls(car)

    @classmethod
    def flag(cls, flag: SpeedCamFlag) -> TrafficItem:
        return cls(flag)

    @property
    def kind(self) -> ItemKind:
        return self._kind

    @property
    def is_car(self) -> bool:
        return self._kind is ItemKind.CAR

    @property
    def is_flag(self) -> bool:
        return self._kind is ItemKind.FLAG

    def as_car(self) -> Car:
        if not self.is_car:
            raise InvariantViolation(f"expected a car, got {self!r}")
        return self._value

    def as_flag(self) -> SpeedCamFlag:
        if not self.is_flag:
            raise InvariantViolation(f"expected a flag, got {self!r}")
        return self._value

    def pos(self) -> float:
        return self._value.position

    def sort_key(self):
        # on equal positions a car sorts before a flag so it can still pass it
        return (self.pos(), 0 if self.is_car else 1)

    def __lt__(self, other: TrafficItem) -> bool:
        return self.pos() < other.pos()

    def _check_pairing(self, other: TrafficItem) -> None:
        if not (self.is_flag and other.is_car):
            raise InvalidPairingError(
                f"transition is defined only for (flag, car), got "
                f"({self._kind.value}, {other._kind.value})"
            )

    def transition(self, other: TrafficItem) -> None:
        """Apply this flag to the car ``other`` unconditionally."""
        self._check_pairing(other)
        self._value.apply(other._value)

    def try_pass(self, other: TrafficItem) -> bool:
        """Apply this flag to ``other`` if the car has moved past it."""
        self._check_pairing(other)
        flag: SpeedCamFlag = self._value
        car: Car = other._value
        if not flag.passed_by(car):
            return False
        flag.apply(car)
        return True

    def __repr__(self) -> str:
        return f"TrafficItem.{self._kind.value}({self._value!r})"
