"""Segment-based center-of-mass estimation from tracked skeletons."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping

import numpy as np

from body_com.skeleton.joints import ConfidenceLevel, Skeleton

from .config import BASIC_8, BodySegment, SegmentModel, get_segment_model

SegmentExistence = Dict[BodySegment, bool]


class ExistencePolicy(str, Enum):
    """How segment existence flags are derived each frame."""

    ALL = "all"
    CONFIDENCE = "confidence"


def compute_segment_existence(
    skeleton: Skeleton,
    model: SegmentModel,
    *,
    policy: ExistencePolicy | str = ExistencePolicy.CONFIDENCE,
    min_confidence: ConfidenceLevel = ConfidenceLevel.LOW,
) -> SegmentExistence:
    """Flag each segment of ``model`` as observed or not.

    With ``ExistencePolicy.ALL`` every segment whose joints are present
    exists, whatever their confidence. With ``ExistencePolicy.CONFIDENCE``
    a segment exists only when every joint bounding it is strictly above
    ``min_confidence``. Joints absent from the skeleton count as
    ``ConfidenceLevel.NONE``.
    """
    policy = ExistencePolicy(policy)
    if policy is ExistencePolicy.ALL:
        return {
            segment: all(joint in skeleton for joint in model.segment_definition(segment).joints)
            for segment in model.segments()
        }

    existence: SegmentExistence = {}
    for segment in model.segments():
        definition = model.segment_definition(segment)
        existence[segment] = all(
            skeleton.confidence(joint) > min_confidence for joint in definition.joints
        )
    return existence


def estimate_segment_coms(
    skeleton: Skeleton,
    existence: Mapping[BodySegment, bool],
    model: SegmentModel = BASIC_8,
) -> Dict[BodySegment, np.ndarray]:
    """Locate the COM of every existing segment along its proximal-distal axis."""
    coms: Dict[BodySegment, np.ndarray] = {}
    for segment in model.segments():
        if not existence.get(segment, False):
            continue
        definition = model.segment_definition(segment)
        proximal = skeleton.position(definition.proximal)
        if definition.is_anchor:
            coms[segment] = proximal
            continue
        distal = skeleton.position(definition.distal)
        coms[segment] = proximal + definition.length_fraction * (distal - proximal)
    return coms


def aggregate_center_of_mass(
    segment_coms: Mapping[BodySegment, np.ndarray],
    existence: Mapping[BodySegment, bool],
    model: SegmentModel = BASIC_8,
) -> np.ndarray:
    """Mass-weighted sum of existing segment COMs.

    The sum is not divided by the mass of the included segments, so excluding
    a segment pulls the result towards the origin.
    """
    total = np.zeros(3, dtype=float)
    for segment in model.segments():
        if not existence.get(segment, False):
            continue
        total += model.segment_definition(segment).mass_fraction * np.asarray(segment_coms[segment], dtype=float)
    return total


@dataclass(slots=True)
class BodyCenterOfMass:
    """Per-skeleton result of one existence/estimate/aggregate pass."""

    body_id: int
    existence: SegmentExistence
    segment_coms: Dict[BodySegment, np.ndarray]
    com: np.ndarray

    @property
    def segment_count(self) -> int:
        return sum(1 for flag in self.existence.values() if flag)


class CenterOfMassEstimator:
    """Bind a segment model and existence policy chosen at construction."""

    def __init__(
        self,
        model: SegmentModel | str = BASIC_8,
        *,
        policy: ExistencePolicy | str = ExistencePolicy.CONFIDENCE,
        min_confidence: ConfidenceLevel = ConfidenceLevel.LOW,
    ) -> None:
        self.model = get_segment_model(model)
        self.policy = ExistencePolicy(policy)
        self.min_confidence = ConfidenceLevel(min_confidence)

    def existence(self, skeleton: Skeleton) -> SegmentExistence:
        return compute_segment_existence(
            skeleton,
            self.model,
            policy=self.policy,
            min_confidence=self.min_confidence,
        )

    def compute(self, skeleton: Skeleton) -> BodyCenterOfMass:
        existence = self.existence(skeleton)
        segment_coms = estimate_segment_coms(skeleton, existence, self.model)
        com = aggregate_center_of_mass(segment_coms, existence, self.model)
        return BodyCenterOfMass(
            body_id=skeleton.body_id,
            existence=existence,
            segment_coms=segment_coms,
            com=com,
        )


__all__ = [
    "BodyCenterOfMass",
    "CenterOfMassEstimator",
    "ExistencePolicy",
    "SegmentExistence",
    "aggregate_center_of_mass",
    "compute_segment_existence",
    "estimate_segment_coms",
]
