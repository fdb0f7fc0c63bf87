"""
Landmark Registration Package

A Python package for registering sensors that each report integer 3D landmark
coordinates in their own unknown axis-aligned frame. Sensors are matched
pairwise through rotation-invariant distance fingerprints, their orientation
(one of 24) and offset are recovered exactly, and every landmark is merged
into the frame of a single anchor sensor.
"""

__version__ = "0.1.0"

from .geometry import *
from .registration import *
from .preprocessing import *
from .acceleration import *
from .utils import *

__all__ = [
    "geometry",
    "registration",
    "preprocessing",
    "acceleration",
    "utils",
]
