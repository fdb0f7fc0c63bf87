"""
Geometry Module

Integer landmark points and the fixed table of 24 axis-aligned orientations.
"""

from .landmark import Landmark, landmarks_to_array, array_to_landmarks
from .orientation import Orientation, ORIENTATIONS, IDENTITY

__all__ = [
    "Landmark",
    "landmarks_to_array",
    "array_to_landmarks",
    "Orientation",
    "ORIENTATIONS",
    "IDENTITY",
]
