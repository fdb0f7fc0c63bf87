"""
Axis-aligned orientations.

The 24 proper rotations of a cube, each written as a signed permutation of
the coordinate axes: ``apply(p)[i] = signs[i] * p[axes[i]]``. The table is
generated once at import and the identity is entry 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import permutations, product
from typing import Tuple, TYPE_CHECKING

import numpy as np

from .landmark import Landmark

if TYPE_CHECKING:
    from numpy.typing import NDArray


def _permutation_parity(axes: Tuple[int, ...]) -> int:
    inversions = sum(
        1
        for i in range(len(axes))
        for j in range(i + 1, len(axes))
        if axes[i] > axes[j]
    )
    return -1 if inversions % 2 else 1


@dataclass(frozen=True)
class Orientation:
    index: int
    signs: Tuple[int, int, int]
    axes: Tuple[int, int, int]

    def apply(self, landmark: Landmark) -> Landmark:
        c = landmark.coords
        return Landmark(
            self.signs[0] * c[self.axes[0]],
            self.signs[1] * c[self.axes[1]],
            self.signs[2] * c[self.axes[2]],
        )

    def apply_inverse(self, landmark: Landmark) -> Landmark:
        """Undo :meth:`apply`, mapping a rotated point back to its source frame."""
        out = [0, 0, 0]
        for i in range(3):
            out[self.axes[i]] = self.signs[i] * landmark[i]
        return Landmark(out[0], out[1], out[2])

    def apply_to_array(self, points: "NDArray[np.integer]") -> "NDArray[np.int64]":
        """Rotate an Nx3 integer array in one step."""
        points = np.asarray(points, dtype=np.int64)
        return points[:, list(self.axes)] * np.array(self.signs, dtype=np.int64)

    @property
    def matrix(self) -> "NDArray[np.int64]":
        """Integer 3x3 rotation matrix R with ``apply(p) == R @ p``."""
        R = np.zeros((3, 3), dtype=np.int64)
        for row in range(3):
            R[row, self.axes[row]] = self.signs[row]
        return R

    @property
    def is_identity(self) -> bool:
        return self.signs == (1, 1, 1) and self.axes == (0, 1, 2)


def _build_orientations() -> Tuple[Orientation, ...]:
    table = []
    for axes in permutations(range(3)):
        for signs in product((1, -1), repeat=3):
            # Keep proper rotations only: det = parity(axes) * prod(signs)
            if _permutation_parity(axes) * signs[0] * signs[1] * signs[2] != 1:
                continue
            table.append(Orientation(index=len(table), signs=signs, axes=axes))
    return tuple(table)


ORIENTATIONS: Tuple[Orientation, ...] = _build_orientations()
IDENTITY: Orientation = ORIENTATIONS[0]
