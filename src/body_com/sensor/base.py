"""Collaborator contracts for depth sensors, body trackers and calibration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np

from body_com.skeleton.joints import Skeleton


class SensorError(RuntimeError):
    """Base class for sensor and tracker failures."""


class SetupError(SensorError):
    """Device, camera, calibration or tracker could not be acquired."""


class CaptureError(SensorError):
    """Reading a capture from the device failed."""


class CaptureTimeout(CaptureError):
    """No capture arrived within the timeout."""


class InferenceQueueError(SensorError):
    """Enqueueing a capture or popping a body frame failed."""


class CalibrationType(str, Enum):
    DEPTH = "depth"
    COLOR = "color"


@dataclass(slots=True)
class DeviceConfig:
    """Camera settings applied when the cameras are started."""

    camera_fps: int = 30
    color_format: str = "BGRA32"
    color_resolution: str = "1080P"
    depth_mode: str = "NFOV_UNBINNED"
    synchronized_images_only: bool = True


class Capture(Protocol):
    color_image: Optional[np.ndarray]

    def release(self) -> None: ...


class BodyFrame(Protocol):
    skeletons: Sequence[Skeleton]

    def release(self) -> None: ...


class Calibration(Protocol):
    def project_3d_to_2d(
        self,
        point: Sequence[float],
        source: CalibrationType = CalibrationType.DEPTH,
        target: CalibrationType = CalibrationType.COLOR,
    ) -> Tuple[Optional[np.ndarray], bool]: ...


class SensorDevice(Protocol):
    def start_cameras(self, config: DeviceConfig) -> None: ...

    def get_calibration(self, config: DeviceConfig) -> Calibration: ...

    def get_capture(self, timeout_ms: Optional[int]) -> Capture: ...

    def stop_cameras(self) -> None: ...

    def close(self) -> None: ...


class BodyTracker(Protocol):
    def enqueue_capture(self, capture: Capture, timeout_ms: Optional[int]) -> None: ...

    def pop_result(self, timeout_ms: Optional[int]) -> BodyFrame: ...

    def shutdown(self) -> None: ...

    def destroy(self) -> None: ...


class SensorBackend(Protocol):
    def open_device(self) -> SensorDevice: ...

    def create_tracker(self, calibration: Calibration) -> BodyTracker: ...


__all__ = [
    "BodyFrame",
    "BodyTracker",
    "Calibration",
    "CalibrationType",
    "Capture",
    "CaptureError",
    "CaptureTimeout",
    "DeviceConfig",
    "InferenceQueueError",
    "SensorBackend",
    "SensorDevice",
    "SensorError",
    "SetupError",
]
