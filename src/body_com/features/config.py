"""Static anthropometric configuration for segment-based center of mass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Tuple

from body_com.skeleton.joints import Joint


class BodySegment(Enum):
    FOOT_RIGHT = "foot_right"
    SHANK_RIGHT = "shank_right"
    THIGH_RIGHT = "thigh_right"
    TRUNK_RIGHT = "trunk_right"
    UPPERARM_RIGHT = "upperarm_right"
    FOREARM_RIGHT = "forearm_right"
    HAND_RIGHT = "hand_right"
    FOOT_LEFT = "foot_left"
    SHANK_LEFT = "shank_left"
    THIGH_LEFT = "thigh_left"
    TRUNK_LEFT = "trunk_left"
    UPPERARM_LEFT = "upperarm_left"
    FOREARM_LEFT = "forearm_left"
    HAND_LEFT = "hand_left"
    HEAD = "head"


@dataclass(frozen=True, slots=True)
class SegmentDefinition:
    """Axis and coefficients of one body segment.

    The segment COM lies at ``proximal + length_fraction * (distal - proximal)``.
    A segment whose proximal and distal joints coincide is anchored directly
    at that joint.
    """

    proximal: Joint
    distal: Joint
    length_fraction: float
    mass_fraction: float

    @property
    def is_anchor(self) -> bool:
        return self.proximal == self.distal

    @property
    def joints(self) -> Tuple[Joint, ...]:
        return (self.proximal,) if self.is_anchor else (self.proximal, self.distal)


class SegmentModel:
    """Immutable lookup table of segment definitions."""

    def __init__(self, name: str, definitions: Mapping[BodySegment, SegmentDefinition]) -> None:
        if not definitions:
            raise ValueError("A segment model needs at least one segment.")
        for segment, definition in definitions.items():
            if not 0.0 <= definition.length_fraction <= 1.0:
                raise ValueError(f"{segment.name}: length fraction must lie in [0, 1].")
            if not 0.0 < definition.mass_fraction < 1.0:
                raise ValueError(f"{segment.name}: mass fraction must lie in (0, 1).")
        self.name = name
        self._definitions: Dict[BodySegment, SegmentDefinition] = dict(definitions)
        self._order: Tuple[BodySegment, ...] = tuple(definitions)

    def __repr__(self) -> str:
        return f"SegmentModel({self.name!r}, segments={len(self._order)})"

    def __contains__(self, segment: object) -> bool:
        return segment in self._definitions

    def __len__(self) -> int:
        return len(self._order)

    def segments(self) -> Tuple[BodySegment, ...]:
        return self._order

    def segment_definition(self, segment: BodySegment) -> SegmentDefinition:
        try:
            return self._definitions[segment]
        except KeyError as exc:
            raise KeyError(f"Segment {segment.name} is not part of model {self.name}") from exc

    def segments_for_joint(self, joint: Joint) -> Tuple[BodySegment, ...]:
        """Segments whose axis is bounded by ``joint``."""
        return tuple(
            segment for segment in self._order if joint in self._definitions[segment].joints
        )

    def total_mass_fraction(self) -> float:
        return float(sum(definition.mass_fraction for definition in self._definitions.values()))


# Length fractions are measured from the proximal joint.
_FOOT_LENGTH = 0.5
_SHANK_LENGTH = 0.419
_THIGH_LENGTH = 0.428
_TRUNK_LENGTH = 0.5
_UPPERARM_LENGTH = 0.458
_FOREARM_LENGTH = 0.434
_HAND_LENGTH = 0.468

# Fractions of total body mass.
_FOOT_MASS = 0.0133
_SHANK_MASS = 0.0535
_THIGH_MASS = 0.1175
_TRUNK_MASS = 0.225
_UPPERARM_MASS = 0.029
_FOREARM_MASS = 0.0157
_HAND_MASS = 0.005


def _lower_body(side: str) -> Dict[BodySegment, SegmentDefinition]:
    toe, ankle, knee, hip, shoulder = (
        Joint[f"{name}_{side}"] for name in ("TOE", "ANKLE", "KNEE", "HIP", "SHOULDER")
    )
    return {
        BodySegment[f"FOOT_{side}"]: SegmentDefinition(toe, ankle, _FOOT_LENGTH, _FOOT_MASS),
        BodySegment[f"SHANK_{side}"]: SegmentDefinition(ankle, knee, _SHANK_LENGTH, _SHANK_MASS),
        BodySegment[f"THIGH_{side}"]: SegmentDefinition(knee, hip, _THIGH_LENGTH, _THIGH_MASS),
        BodySegment[f"TRUNK_{side}"]: SegmentDefinition(hip, shoulder, _TRUNK_LENGTH, _TRUNK_MASS),
    }


def _arm(side: str) -> Dict[BodySegment, SegmentDefinition]:
    handtip, wrist, elbow, shoulder = (
        Joint[f"{name}_{side}"] for name in ("HANDTIP", "WRIST", "ELBOW", "SHOULDER")
    )
    return {
        BodySegment[f"UPPERARM_{side}"]: SegmentDefinition(elbow, shoulder, _UPPERARM_LENGTH, _UPPERARM_MASS),
        BodySegment[f"FOREARM_{side}"]: SegmentDefinition(wrist, elbow, _FOREARM_LENGTH, _FOREARM_MASS),
        BodySegment[f"HAND_{side}"]: SegmentDefinition(handtip, wrist, _HAND_LENGTH, _HAND_MASS),
    }


def _head(mass_fraction: float) -> Dict[BodySegment, SegmentDefinition]:
    return {BodySegment.HEAD: SegmentDefinition(Joint.NOSE, Joint.NOSE, 0.0, mass_fraction)}


BASIC_8 = SegmentModel(
    "BASIC_8",
    {**_lower_body("RIGHT"), **_lower_body("LEFT"), **_head(0.1814)},
)

FULL_14 = SegmentModel(
    "FULL_14",
    {
        **_lower_body("RIGHT"),
        **_arm("RIGHT"),
        **_lower_body("LEFT"),
        **_arm("LEFT"),
        **_head(0.082),
    },
)

SEGMENT_MODELS: Dict[str, SegmentModel] = {model.name: model for model in (BASIC_8, FULL_14)}


def get_segment_model(name: str | SegmentModel) -> SegmentModel:
    if isinstance(name, SegmentModel):
        return name
    key = str(name).strip().upper().replace("-", "_")
    try:
        return SEGMENT_MODELS[key]
    except KeyError as exc:
        choices = ", ".join(SEGMENT_MODELS)
        raise ValueError(f"Unknown segment model {name!r}; expected one of: {choices}") from exc


__all__ = [
    "BASIC_8",
    "BodySegment",
    "FULL_14",
    "SEGMENT_MODELS",
    "SegmentDefinition",
    "SegmentModel",
    "get_segment_model",
]
