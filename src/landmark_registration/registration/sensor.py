"""
Sensor readings and placement records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple

from ..geometry.landmark import Landmark, landmarks_to_array, array_to_landmarks
from ..geometry.orientation import Orientation
from .fingerprint import Fingerprint


@dataclass(frozen=True)
class SensorReading:
    """Landmarks reported by one sensor in its own local frame.

    The fingerprint is derived once on construction and never rebuilt.
    """

    sensor_id: int
    landmarks: Tuple[Landmark, ...]
    fingerprint: Fingerprint = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        landmarks = tuple(self.landmarks)
        object.__setattr__(self, "landmarks", landmarks)
        object.__setattr__(self, "fingerprint", Fingerprint.from_landmarks(landmarks))

    @classmethod
    def from_coordinates(cls, sensor_id: int, coords: Iterable[Iterable[int]]) -> "SensorReading":
        return cls(sensor_id, tuple(Landmark.from_iterable(c) for c in coords))

    def __len__(self) -> int:
        return len(self.landmarks)

    def transformed(self, orientation: Orientation, offset: Landmark) -> Tuple[Landmark, ...]:
        """Landmarks in the global frame: rotate first, then translate."""
        if not self.landmarks:
            return ()
        points = orientation.apply_to_array(landmarks_to_array(self.landmarks))
        points = points + landmarks_to_array([offset])
        return array_to_landmarks(points)


@dataclass(frozen=True)
class PlacedSensor:
    """A sensor fixed in the global frame.

    ``offset`` is the sensor's origin in global coordinates.
    """

    reading: SensorReading
    orientation: Orientation
    offset: Landmark
    landmarks: Tuple[Landmark, ...]

    @property
    def sensor_id(self) -> int:
        return self.reading.sensor_id

    @property
    def fingerprint(self) -> Fingerprint:
        # Distances survive rotation and translation, so the local index still applies
        return self.reading.fingerprint

    def __len__(self) -> int:
        return len(self.landmarks)

    @classmethod
    def place(cls, reading: SensorReading, orientation: Orientation, offset: Landmark) -> "PlacedSensor":
        return cls(
            reading=reading,
            orientation=orientation,
            offset=offset,
            landmarks=reading.transformed(orientation, offset),
        )
