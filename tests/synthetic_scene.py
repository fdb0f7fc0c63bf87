"""
Synthetic sensor scenes for tests.

A scene is a list of random integer world landmarks; sensors observe slices
of it from a known orientation and origin, so every test knows the exact
transform the matcher has to recover.
"""

from pathlib import Path
import sys

import numpy as np

sys.path.append(str(Path(__file__).parent.parent / "src"))

from landmark_registration.geometry import Landmark, Orientation
from landmark_registration.registration import SensorReading


def random_landmarks(seed: int, n: int, span: int = 1000) -> list:
    """``n`` distinct landmarks with coordinates in [-span, span]."""
    rng = np.random.default_rng(seed)
    seen = {}
    while len(seen) < n:
        x, y, z = (int(v) for v in rng.integers(-span, span + 1, size=3))
        seen.setdefault((x, y, z), Landmark(x, y, z))
    return list(seen.values())


def observe(world, orientation: Orientation, origin: Landmark) -> list:
    """Local coordinates of ``world`` for a sensor placed with ``orientation`` at ``origin``."""
    return [orientation.apply_inverse(w - origin) for w in world]


def make_reading(sensor_id: int, world, orientation: Orientation, origin: Landmark, seed: int = None) -> SensorReading:
    local = observe(world, orientation, origin)
    if seed is not None:
        # Report order carries no information
        order = np.random.default_rng(seed).permutation(len(local))
        local = [local[i] for i in order]
    return SensorReading(sensor_id, tuple(local))
