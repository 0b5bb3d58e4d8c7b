"""Skeleton joint definitions for depth-sensor body tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterable, Iterator, Mapping

import numpy as np


class Joint(IntEnum):
    """Skeletal landmarks in body-tracking SDK index order."""

    PELVIS = 0
    SPINE_NAVAL = 1
    SPINE_CHEST = 2
    NECK = 3
    CLAVICLE_LEFT = 4
    SHOULDER_LEFT = 5
    ELBOW_LEFT = 6
    WRIST_LEFT = 7
    HAND_LEFT = 8
    HANDTIP_LEFT = 9
    THUMB_LEFT = 10
    CLAVICLE_RIGHT = 11
    SHOULDER_RIGHT = 12
    ELBOW_RIGHT = 13
    WRIST_RIGHT = 14
    HAND_RIGHT = 15
    HANDTIP_RIGHT = 16
    THUMB_RIGHT = 17
    HIP_LEFT = 18
    KNEE_LEFT = 19
    ANKLE_LEFT = 20
    TOE_LEFT = 21
    HIP_RIGHT = 22
    KNEE_RIGHT = 23
    ANKLE_RIGHT = 24
    TOE_RIGHT = 25
    HEAD = 26
    NOSE = 27
    EYE_LEFT = 28
    EAR_LEFT = 29
    EYE_RIGHT = 30
    EAR_RIGHT = 31


JOINT_COUNT = len(Joint)


class ConfidenceLevel(IntEnum):
    """Per-joint tracking confidence, ordered from worst to best."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3


def parse_confidence(value: object) -> ConfidenceLevel:
    """Accept an enum member, its name (any case) or its integer value."""
    if isinstance(value, ConfidenceLevel):
        return value
    if isinstance(value, str):
        try:
            return ConfidenceLevel[value.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown confidence level: {value!r}") from exc
    return ConfidenceLevel(int(value))


@dataclass(frozen=True, slots=True)
class JointData:
    """Position (millimetres, depth-camera space) and confidence of one joint."""

    joint: Joint
    x: float
    y: float
    z: float
    confidence: ConfidenceLevel = ConfidenceLevel.HIGH

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


@dataclass(slots=True)
class Skeleton:
    """One tracked body in one frame."""

    joints: Dict[Joint, JointData] = field(default_factory=dict)
    body_id: int = 0

    @classmethod
    def from_joints(cls, joints: Iterable[JointData], *, body_id: int = 0) -> "Skeleton":
        return cls(joints={item.joint: item for item in joints}, body_id=body_id)

    @classmethod
    def from_positions(
        cls,
        positions: Mapping[Joint, Iterable[float]],
        *,
        confidence: ConfidenceLevel = ConfidenceLevel.HIGH,
        body_id: int = 0,
    ) -> "Skeleton":
        """Build a skeleton where every joint shares the same confidence."""
        joints: Dict[Joint, JointData] = {}
        for joint, coords in positions.items():
            x, y, z = (float(value) for value in coords)
            joints[joint] = JointData(joint, x, y, z, confidence)
        return cls(joints=joints, body_id=body_id)

    def __contains__(self, joint: object) -> bool:
        return joint in self.joints

    def __iter__(self) -> Iterator[JointData]:
        return iter(self.joints.values())

    def __len__(self) -> int:
        return len(self.joints)

    def position(self, joint: Joint) -> np.ndarray:
        return self.joints[joint].position

    def confidence(self, joint: Joint) -> ConfidenceLevel:
        data = self.joints.get(joint)
        return data.confidence if data is not None else ConfidenceLevel.NONE


__all__ = [
    "ConfidenceLevel",
    "JOINT_COUNT",
    "Joint",
    "JointData",
    "Skeleton",
    "parse_confidence",
]
