"""Center-of-mass feature computation."""

from .center_of_mass import (
    BodyCenterOfMass,
    CenterOfMassEstimator,
    ExistencePolicy,
    aggregate_center_of_mass,
    compute_segment_existence,
    estimate_segment_coms,
)
from .config import BASIC_8, FULL_14, BodySegment, SegmentDefinition, SegmentModel, get_segment_model
from .displacement import DisplacementMode, ReferenceTracker, signed_displacement

__all__ = [
    "aggregate_center_of_mass",
    "compute_segment_existence",
    "estimate_segment_coms",
    "get_segment_model",
    "signed_displacement",
    "BodyCenterOfMass",
    "BodySegment",
    "CenterOfMassEstimator",
    "DisplacementMode",
    "ExistencePolicy",
    "ReferenceTracker",
    "SegmentDefinition",
    "SegmentModel",
    "BASIC_8",
    "FULL_14",
]
