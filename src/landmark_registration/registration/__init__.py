"""
Registration Module

Correspondence search and frame unification for sensors that observe
overlapping landmark sets:
- Fingerprint: per-landmark multisets of squared distances
- PairwiseMatcher: correspondence proposal and transform recovery
- FrameCorrelator: fixed-point placement of every sensor in the anchor's frame
- max_manhattan_distance: spread of the placed sensor origins
"""

from .errors import (
    MalformedInputError,
    InvalidReadingsError,
    RegistrationError,
    UnsolvableOverlapError,
    DegenerateTransformError,
)
from .fingerprint import Fingerprint, shared_count, pairwise_squared_distances
from .sensor import SensorReading, PlacedSensor
from .matcher import PairwiseMatcher, recover_transform, lookup_correspondence
from .correlator import FrameCorrelator, GlobalMap, CorrelationResult, correlate
from .distance import max_manhattan_distance

__all__ = [
    "MalformedInputError",
    "InvalidReadingsError",
    "RegistrationError",
    "UnsolvableOverlapError",
    "DegenerateTransformError",
    "Fingerprint",
    "shared_count",
    "pairwise_squared_distances",
    "SensorReading",
    "PlacedSensor",
    "PairwiseMatcher",
    "recover_transform",
    "lookup_correspondence",
    "FrameCorrelator",
    "GlobalMap",
    "CorrelationResult",
    "correlate",
    "max_manhattan_distance",
]
