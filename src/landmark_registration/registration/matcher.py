"""
Pairwise Matcher

Proposes landmark correspondences between a placed (reference) sensor and a
pending (candidate) sensor from their distance fingerprints, then recovers
the orientation and integer offset that map the candidate's local frame onto
the reference's global coordinates.

For ``threshold`` landmarks seen by both sensors, each of them has the same
``threshold - 1`` distances to the others in both sensors, so a candidate
landmark is proposed only when its fingerprint shares at least that many
values with the reference landmark's fingerprint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..acceleration.parallel_executor import ParallelExecutor
from ..geometry.landmark import Landmark, landmarks_to_array
from ..geometry.orientation import Orientation, ORIENTATIONS
from ..utils.logging import setup_logger
from .errors import DegenerateTransformError
from .fingerprint import DistanceMultiset, Fingerprint
from .sensor import PlacedSensor, SensorReading

logger = setup_logger(__name__)

Correspondence = Tuple[int, int]
Transform = Tuple[Orientation, Landmark]
Reference = Union[SensorReading, PlacedSensor]


def lookup_correspondence(
    item: Tuple[int, DistanceMultiset],
    *,
    candidate: Fingerprint,
    min_shared: int,
) -> Tuple[int, Optional[int]]:
    """Find the candidate landmark matching one reference landmark.

    Module level so it can be shipped to pool workers.
    """
    ref_idx, distances = item
    return ref_idx, candidate.find_match(distances, min_shared)


def recover_transform(
    reference_points: Sequence[Landmark],
    candidate_points: Sequence[Landmark],
) -> Optional[Transform]:
    """
    Find the orientation and offset with ``reference = rotate(candidate) + offset``.

    An orientation is accepted only if every corresponding pair yields the
    identical offset.

    Args:
        reference_points: Landmarks in the reference (global) frame
        candidate_points: Corresponding landmarks in the candidate's local frame

    Returns:
        (orientation, offset) or None if no orientation is consistent

    Raises:
        ValueError: If the two sequences differ in length or are empty
        DegenerateTransformError: If more than one orientation is consistent
    """
    if len(reference_points) != len(candidate_points):
        raise ValueError(
            f"Correspondence lists differ in length: {len(reference_points)} vs {len(candidate_points)}"
        )
    if len(reference_points) == 0:
        raise ValueError("Cannot recover a transform from zero correspondences")

    ref = landmarks_to_array(reference_points)
    cand = landmarks_to_array(candidate_points)

    solutions: List[Transform] = []
    for orientation in ORIENTATIONS:
        deltas = ref - orientation.apply_to_array(cand)
        if np.all(deltas == deltas[0]):
            offset = Landmark(int(deltas[0, 0]), int(deltas[0, 1]), int(deltas[0, 2]))
            solutions.append((orientation, offset))

    if len(solutions) > 1:
        indices = [o.index for o, _ in solutions]
        raise DegenerateTransformError(
            f"{len(solutions)} orientations {indices} fit the same "
            f"{len(reference_points)} correspondences",
            orientations=indices,
        )
    return solutions[0] if solutions else None


@dataclass
class PairwiseMatcher:
    threshold: int = 12
    executor: Optional[ParallelExecutor] = None

    def __post_init__(self) -> None:
        if self.threshold < 2:
            raise ValueError(f"Overlap threshold must be at least 2, got {self.threshold}")

    @property
    def min_shared(self) -> int:
        return self.threshold - 1

    def find_correspondences(
        self, reference: Reference, candidate: SensorReading
    ) -> Optional[List[Correspondence]]:
        """
        Propose (reference index, candidate index) pairs.

        Returns:
            The correspondences in reference order, or None if fewer than
            ``threshold`` were found

        Raises:
            DegenerateTransformError: If two reference landmarks claim the
                same candidate landmark
        """
        if len(reference) < self.threshold or len(candidate) < self.threshold:
            return None

        if self.executor is not None and self.executor.is_parallel:
            found = self._parallel_lookup(reference, candidate)
        else:
            found = self._sequential_lookup(reference, candidate)
        if found is None:
            return None

        claimed = {}
        for ref_idx, cand_idx in found:
            if cand_idx in claimed:
                raise DegenerateTransformError(
                    f"Candidate landmark {cand_idx} of sensor {candidate.sensor_id} matches "
                    f"landmarks {claimed[cand_idx]} and {ref_idx} of sensor {reference.sensor_id}"
                )
            claimed[cand_idx] = ref_idx

        if len(found) < self.threshold:
            return None
        return found

    def _sequential_lookup(
        self, reference: Reference, candidate: SensorReading
    ) -> Optional[List[Correspondence]]:
        found: List[Correspondence] = []
        n = len(reference)
        for ref_idx, distances in enumerate(reference.fingerprint.distances):
            cand_idx = candidate.fingerprint.find_match(distances, self.min_shared)
            if cand_idx is not None:
                found.append((ref_idx, cand_idx))
            # The remaining landmarks can no longer reach the threshold
            if len(found) + (n - ref_idx - 1) < self.threshold:
                return None
        return found

    def _parallel_lookup(
        self, reference: Reference, candidate: SensorReading
    ) -> List[Correspondence]:
        results = self.executor.map_items(
            items=list(enumerate(reference.fingerprint.distances)),
            worker_fn=lookup_correspondence,
            worker_kwargs={"candidate": candidate.fingerprint, "min_shared": self.min_shared},
        )
        return [(ref_idx, cand_idx) for ref_idx, cand_idx in results if cand_idx is not None]

    def match(self, reference: Reference, candidate: SensorReading) -> Optional[Transform]:
        """
        Recover the transform placing ``candidate`` in ``reference``'s frame.

        ``reference`` is expected to carry global coordinates already. The
        result is pure: nothing is mutated and the caller applies the
        transform.

        Returns:
            (orientation, offset) on success, None when the sensors do not
            overlap directly
        """
        correspondences = self.find_correspondences(reference, candidate)
        if correspondences is None:
            logger.debug(
                f"Sensors {reference.sensor_id} and {candidate.sensor_id}: "
                f"fewer than {self.threshold} correspondences"
            )
            return None

        ref_points = [reference.landmarks[i] for i, _ in correspondences]
        cand_points = [candidate.landmarks[j] for _, j in correspondences]
        transform = recover_transform(ref_points, cand_points)
        if transform is None:
            logger.debug(
                f"Sensors {reference.sensor_id} and {candidate.sensor_id}: "
                f"{len(correspondences)} correspondences but no consistent orientation"
            )
        return transform
