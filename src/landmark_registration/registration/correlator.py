"""
Frame Correlator

Places every sensor into the anchor sensor's frame and merges all observed
landmarks into one deduplicated set.

Scheduling is a fixed-point iteration. A pass walks the untried
(placed, pending) pairs in ascending id order; the first successful match
places the pending sensor and starts a new pass, since the new placement may
overlap sensors none of the earlier ones did. A pair that fails to match is
remembered for the rest of the call: matching is a pure function of the two
sensors' local coordinates, so it would fail again. A pass that places
nothing while sensors are still pending ends the correlation with
UnsolvableOverlapError.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Sequence, Set, Tuple, TYPE_CHECKING

from ..acceleration.parallel_executor import ParallelExecutor
from ..geometry.landmark import Landmark
from ..geometry.orientation import Orientation, IDENTITY
from ..utils.logging import setup_logger
from .distance import max_manhattan_distance
from .errors import InvalidReadingsError, UnsolvableOverlapError
from .matcher import PairwiseMatcher
from .sensor import PlacedSensor, SensorReading

if TYPE_CHECKING:
    from ..utils.config import AppConfig

logger = setup_logger(__name__)


class GlobalMap:
    """Landmarks merged so far plus the placed/pending bookkeeping."""

    def __init__(self, sensor_ids: Sequence[int]):
        self.landmarks: Set[Landmark] = set()
        self.placed: Dict[int, PlacedSensor] = {}
        self.pending: Set[int] = set(sensor_ids)
        self._lock = threading.Lock()

    def place(self, reading: SensorReading, orientation: Orientation, offset: Landmark) -> PlacedSensor:
        """
        Move a pending sensor to placed and merge its transformed landmarks.

        Raises:
            ValueError: If the sensor is not pending (unknown or already placed)
        """
        with self._lock:
            sensor_id = reading.sensor_id
            if sensor_id in self.placed:
                raise ValueError(f"Sensor {sensor_id} is already placed")
            if sensor_id not in self.pending:
                raise ValueError(f"Sensor {sensor_id} is not a known pending sensor")

            placed = PlacedSensor.place(reading, orientation, offset)
            self.pending.discard(sensor_id)
            self.placed[sensor_id] = placed
            self.landmarks.update(placed.landmarks)
            return placed

    @property
    def complete(self) -> bool:
        return not self.pending


@dataclass(frozen=True)
class CorrelationResult:
    landmarks: FrozenSet[Landmark]
    placements: Dict[int, PlacedSensor]

    @property
    def landmark_count(self) -> int:
        return len(self.landmarks)

    @property
    def origins(self) -> Dict[int, Landmark]:
        return {sid: p.offset for sid, p in self.placements.items()}

    @property
    def max_distance(self) -> int:
        return max_manhattan_distance([self.placements[sid].offset for sid in sorted(self.placements)])

    def to_dict(self) -> dict:
        return {"landmark_count": self.landmark_count, "max_distance": self.max_distance}


class FrameCorrelator:
    """
    Drive the pairwise matcher until every sensor is placed.

    Example:
        correlator = FrameCorrelator(threshold=12)
        result = correlator.correlate(readings)
        print(result.landmark_count, result.max_distance)
    """

    def __init__(
        self,
        threshold: int = 12,
        anchor_id: int = 0,
        executor: Optional[ParallelExecutor] = None,
    ):
        self.matcher = PairwiseMatcher(threshold=threshold, executor=executor)
        self.anchor_id = anchor_id

    @classmethod
    def from_config(cls, cfg: "AppConfig", executor: Optional[ParallelExecutor] = None) -> "FrameCorrelator":
        return cls(
            threshold=cfg.registration.overlap_threshold,
            anchor_id=cfg.registration.anchor_id,
            executor=executor,
        )

    @property
    def threshold(self) -> int:
        return self.matcher.threshold

    def correlate(self, readings: Sequence[SensorReading]) -> CorrelationResult:
        """
        Place every reading in the anchor's frame.

        Args:
            readings: Sensor readings with unique ids, in any order

        Returns:
            CorrelationResult with the merged landmarks and every placement

        Raises:
            InvalidReadingsError: If readings are empty, ids repeat or the anchor is missing
            UnsolvableOverlapError: If some sensors cannot be connected to the anchor
            DegenerateTransformError: If a correspondence set is ambiguous
        """
        if not readings:
            raise InvalidReadingsError("No sensor readings to correlate")

        by_id: Dict[int, SensorReading] = {}
        for reading in readings:
            if reading.sensor_id in by_id:
                raise InvalidReadingsError(f"Duplicate sensor id {reading.sensor_id}")
            by_id[reading.sensor_id] = reading
        if self.anchor_id not in by_id:
            raise InvalidReadingsError(f"Anchor sensor {self.anchor_id} not present in readings")

        global_map = GlobalMap(by_id)
        global_map.place(by_id[self.anchor_id], IDENTITY, Landmark.origin())
        logger.info(
            f"Correlating {len(by_id)} sensors (anchor {self.anchor_id}, "
            f"threshold {self.threshold})"
        )

        # Unordered pairs already attempted without success
        checked: Set[Tuple[int, int]] = set()
        passes = 0
        while not global_map.complete:
            passes += 1
            placed = self._run_pass(global_map, by_id, checked)
            if placed is None:
                logger.error(
                    f"Pass {passes} placed no sensor; {len(global_map.pending)} still pending"
                )
                raise UnsolvableOverlapError(global_map.placed.keys(), global_map.pending)

        result = CorrelationResult(
            landmarks=frozenset(global_map.landmarks),
            placements=dict(global_map.placed),
        )
        logger.info(
            f"Correlation complete after {passes} passes: {result.landmark_count} distinct "
            f"landmarks, {len(checked)} pairs without overlap"
        )
        return result

    def _run_pass(
        self,
        global_map: GlobalMap,
        by_id: Dict[int, SensorReading],
        checked: Set[Tuple[int, int]],
    ) -> Optional[PlacedSensor]:
        """Try untried pairs until one placement succeeds; None if none does."""
        for ref_id in sorted(global_map.placed):
            reference = global_map.placed[ref_id]
            for pend_id in sorted(global_map.pending):
                key = (min(ref_id, pend_id), max(ref_id, pend_id))
                if key in checked:
                    continue

                transform = self.matcher.match(reference, by_id[pend_id])
                if transform is None:
                    checked.add(key)
                    continue

                orientation, offset = transform
                placed = global_map.place(by_id[pend_id], orientation, offset)
                logger.info(
                    f"Placed sensor {pend_id} via sensor {ref_id}: orientation "
                    f"{orientation.index}, origin {offset}"
                )
                return placed
        return None


def correlate(
    readings: Sequence[SensorReading],
    threshold: int = 12,
    anchor_id: int = 0,
    executor: Optional[ParallelExecutor] = None,
) -> CorrelationResult:
    """Convenience wrapper around FrameCorrelator.correlate."""
    return FrameCorrelator(threshold=threshold, anchor_id=anchor_id, executor=executor).correlate(readings)
