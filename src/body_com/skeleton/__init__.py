"""Skeleton data structures."""

from .joints import JOINT_COUNT, ConfidenceLevel, Joint, JointData, Skeleton, parse_confidence
from .recording import RecordedFrame, load_recording, save_recording

__all__ = [
    "ConfidenceLevel",
    "JOINT_COUNT",
    "Joint",
    "JointData",
    "RecordedFrame",
    "Skeleton",
    "load_recording",
    "parse_confidence",
    "save_recording",
]
