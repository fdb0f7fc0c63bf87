"""
Fingerprint Engine

Squared distances between landmarks of one sensor are exact integers and do
not change under any of the sensor's possible rotations or translations. Each
landmark is fingerprinted by the multiset of its distances to every other
landmark in the same sensor; two sensors observing the same physical
landmark produce multisets that overlap in one value per other shared
landmark.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from ..geometry.landmark import Landmark, landmarks_to_array

DistanceMultiset = Counter


def pairwise_squared_distances(landmarks: Sequence[Landmark]) -> np.ndarray:
    """NxN int64 matrix of squared Euclidean distances."""
    points = landmarks_to_array(landmarks)
    diff = points[:, None, :] - points[None, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def shared_count(a: DistanceMultiset, b: DistanceMultiset) -> int:
    """Size of the multiset intersection of two distance fingerprints."""
    return sum((a & b).values())


@dataclass(frozen=True)
class Fingerprint:
    """Per-landmark distance multisets for one sensor, in landmark order."""

    distances: Tuple[DistanceMultiset, ...]

    @classmethod
    def from_landmarks(cls, landmarks: Sequence[Landmark]) -> "Fingerprint":
        n = len(landmarks)
        if n == 0:
            return cls(distances=())

        d2 = pairwise_squared_distances(landmarks)
        rows = []
        for i in range(n):
            # Python ints keep the multisets picklable and hash-stable
            row = Counter(int(d) for j, d in enumerate(d2[i]) if j != i)
            rows.append(row)
        return cls(distances=tuple(rows))

    def __len__(self) -> int:
        return len(self.distances)

    def find_match(self, distances: DistanceMultiset, min_shared: int) -> Optional[int]:
        """Index of the first landmark sharing at least ``min_shared`` distances."""
        for idx, own in enumerate(self.distances):
            if shared_count(distances, own) >= min_shared:
                return idx
        return None
