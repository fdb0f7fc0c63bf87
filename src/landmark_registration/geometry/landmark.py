"""
Landmark points.

A landmark is an exact integer 3D coordinate. Offsets between sensors are
expressed with the same type, so a translation vector is just a Landmark.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass(frozen=True, order=True)
class Landmark:
    """Immutable integer point; equality and hashing by coordinate value.

    Example:
        >>> a = Landmark(1, 2, 3)
        >>> b = Landmark(4, 6, 3)
        >>> a.dist_squared(b)
        25
        >>> a.manhattan(b)
        7
    """

    x: int
    y: int
    z: int

    @classmethod
    def from_iterable(cls, coords: Iterable[int]) -> "Landmark":
        values = tuple(int(c) for c in coords)
        if len(values) != 3:
            raise ValueError(f"Expected 3 coordinates, got {len(values)}")
        return cls(*values)

    @classmethod
    def parse(cls, text: str) -> "Landmark":
        """Parse an ``x,y,z`` line.

        Raises:
            ValueError: If a coordinate is missing, extra or not an integer
        """
        parts = [p.strip() for p in text.strip().split(",")]
        if len(parts) != 3:
            raise ValueError(f"cannot make landmark, expected x,y,z: {text!r}")
        try:
            return cls(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError as e:
            raise ValueError(f"cannot make landmark, bad coordinate in {text!r}") from e

    @classmethod
    def origin(cls) -> "Landmark":
        return cls(0, 0, 0)

    @property
    def coords(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def __getitem__(self, axis: int) -> int:
        return self.coords[axis]

    def __add__(self, other: "Landmark") -> "Landmark":
        return Landmark(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Landmark") -> "Landmark":
        return Landmark(self.x - other.x, self.y - other.y, self.z - other.z)

    def dist_squared(self, other: "Landmark") -> int:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def manhattan(self, other: "Landmark") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y) + abs(self.z - other.z)

    def __str__(self) -> str:
        return f"{self.x},{self.y},{self.z}"


def landmarks_to_array(landmarks: Sequence[Landmark]) -> "NDArray[np.int64]":
    """Stack landmarks into an Nx3 int64 array (empty input gives shape (0, 3))."""
    if len(landmarks) == 0:
        return np.zeros((0, 3), dtype=np.int64)
    return np.array([lm.coords for lm in landmarks], dtype=np.int64)


def array_to_landmarks(points: "NDArray[np.integer]") -> Tuple[Landmark, ...]:
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"Expected Nx3 array, got shape {points.shape}")
    return tuple(Landmark(int(p[0]), int(p[1]), int(p[2])) for p in points)
