from __future__ import annotations

from typing import Iterable

import numpy as np


class Cartesian1D:
    """
    One-dimensional coordinate backed by a numpy array of length 1.
    Supports indexed access, +, -, scalar *, Euclidean distance
    and ordering by the single component.
    """

    __slots__ = ("coord",)

    def __init__(self, coord: Iterable[float] = (0.0,)) -> None:
        self.coord = np.array(coord, dtype=np.float64).reshape(1)

    @classmethod
    def zeros(cls) -> "Cartesian1D":
        return cls((0.0,))

    def __getitem__(self, idx: int) -> float:
        return float(self.coord[idx])

    def __setitem__(self, idx: int, value: float) -> None:
        self.coord[idx] = value

    def __add__(self, other: "Cartesian1D") -> "Cartesian1D":
        return Cartesian1D(self.coord + other.coord)

    def __iadd__(self, other: "Cartesian1D") -> "Cartesian1D":
        self.coord += other.coord
        return self

    def __sub__(self, other: "Cartesian1D") -> "Cartesian1D":
        return Cartesian1D(self.coord - other.coord)

    def __neg__(self) -> "Cartesian1D":
        return Cartesian1D(-self.coord)

    def __mul__(self, k: float) -> "Cartesian1D":
        return Cartesian1D(self.coord * k)

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cartesian1D):
            return NotImplemented
        return bool(self.coord[0] == other.coord[0])

    def __lt__(self, other: "Cartesian1D") -> bool:
        return bool(self.coord[0] < other.coord[0])

    def __le__(self, other: "Cartesian1D") -> bool:
        return bool(self.coord[0] <= other.coord[0])

    def __gt__(self, other: "Cartesian1D") -> bool:
        return bool(self.coord[0] > other.coord[0])

    def __ge__(self, other: "Cartesian1D") -> bool:
        return bool(self.coord[0] >= other.coord[0])

    __hash__ = None  # mutable

    def distance(self, other: "Cartesian1D") -> float:
        """Euclidean distance."""
        return float(np.linalg.norm(self.coord - other.coord))

    def is_finite(self) -> bool:
        return bool(np.isfinite(self.coord).all())

    def copy(self) -> "Cartesian1D":
        return Cartesian1D(self.coord)

    def __repr__(self) -> str:
        return f"Cartesian1D([{self.coord[0]!r}])"
