"""Spread of sensor origins once every sensor sits in the global frame."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..geometry.landmark import Landmark, landmarks_to_array


def max_manhattan_distance(origins: Sequence[Landmark]) -> int:
    """
    Largest Manhattan distance between any two sensor origins.

    Returns 0 for fewer than two origins.
    """
    if len(origins) < 2:
        return 0
    points = landmarks_to_array(origins)
    dist = np.abs(points[:, None, :] - points[None, :, :]).sum(axis=2)
    return int(dist.max())
