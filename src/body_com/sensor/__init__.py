"""Sensor, tracker and calibration collaborators."""

from .base import (
    BodyFrame,
    BodyTracker,
    Calibration,
    CalibrationType,
    Capture,
    CaptureError,
    CaptureTimeout,
    DeviceConfig,
    InferenceQueueError,
    SensorBackend,
    SensorDevice,
    SensorError,
    SetupError,
)
from .calibration import CameraIntrinsics, PinholeCalibration, calibration_from_dict, load_calibration
from .replay import ReplayBackend

__all__ = [
    "BodyFrame",
    "BodyTracker",
    "Calibration",
    "CalibrationType",
    "CameraIntrinsics",
    "Capture",
    "CaptureError",
    "CaptureTimeout",
    "DeviceConfig",
    "InferenceQueueError",
    "PinholeCalibration",
    "ReplayBackend",
    "SensorBackend",
    "SensorDevice",
    "SensorError",
    "SetupError",
    "calibration_from_dict",
    "load_calibration",
]
