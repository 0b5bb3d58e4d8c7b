"""Sensor backend that replays recorded skeleton streams."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, List, Optional, Sequence

import numpy as np

from body_com.skeleton.joints import Skeleton
from body_com.skeleton.recording import RecordedFrame, load_recording

from .base import CaptureError, CaptureTimeout, DeviceConfig, InferenceQueueError, SetupError
from .calibration import PinholeCalibration

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ReplayCapture:
    frame_index: int
    recorded: RecordedFrame
    color_image: Optional[np.ndarray] = None
    released: bool = False

    def release(self) -> None:
        self.released = True


@dataclass(slots=True)
class ReplayBodyFrame:
    frame_index: int
    skeletons: List[Skeleton] = field(default_factory=list)
    released: bool = False

    def release(self) -> None:
        self.released = True


class ReplayDevice:
    """Deliver recorded frames as captures until the recording runs out."""

    def __init__(
        self,
        frames: Sequence[RecordedFrame],
        calibration: PinholeCalibration,
        *,
        render_color: bool = True,
    ) -> None:
        self._frames = list(frames)
        self._calibration = calibration
        self._render_color = render_color
        self._cursor = 0
        self.started = False
        self.closed = False
        self.config: Optional[DeviceConfig] = None

    def start_cameras(self, config: DeviceConfig) -> None:
        if self.closed:
            raise SetupError("Failed to start device: replay device is closed.")
        self.config = config
        self.started = True
        LOGGER.info("Replay cameras started (%d recorded frames)", len(self._frames))

    def get_calibration(self, config: DeviceConfig) -> PinholeCalibration:
        if not self.started:
            raise SetupError("Failed to get calibration: cameras are not started.")
        return self._calibration

    def get_capture(self, timeout_ms: Optional[int]) -> ReplayCapture:
        if not self.started:
            raise CaptureError("Failed to read a capture: cameras are not started.")
        if self._cursor >= len(self._frames):
            raise CaptureTimeout(f"Timed out waiting for a capture ({timeout_ms} ms).")
        index = self._cursor
        self._cursor += 1
        color_image = None
        if self._render_color:
            size = self._calibration.color
            color_image = np.zeros((size.height, size.width, 3), dtype=np.uint8)
        return ReplayCapture(frame_index=index, recorded=self._frames[index], color_image=color_image)

    def stop_cameras(self) -> None:
        self.started = False

    def close(self) -> None:
        self.closed = True


class ReplayTracker:
    """Return the recorded skeletons of each enqueued capture, in order."""

    def __init__(self) -> None:
        self._queue: Deque[ReplayCapture] = deque()
        self.shut_down = False
        self.destroyed = False

    def enqueue_capture(self, capture: ReplayCapture, timeout_ms: Optional[int]) -> None:
        if self.shut_down:
            raise InferenceQueueError("Failed to add capture to tracker process queue.")
        self._queue.append(capture)

    def pop_result(self, timeout_ms: Optional[int]) -> ReplayBodyFrame:
        if not self._queue:
            raise InferenceQueueError("Failed to pop capture from tracker process queue.")
        capture = self._queue.popleft()
        return ReplayBodyFrame(frame_index=capture.frame_index, skeletons=list(capture.recorded.skeletons))

    def shutdown(self) -> None:
        self.shut_down = True

    def destroy(self) -> None:
        self.destroyed = True


class ReplayBackend:
    """Open replay devices over a recording file or in-memory frames."""

    def __init__(
        self,
        frames: Optional[Sequence[RecordedFrame]] = None,
        *,
        recording_path: Path | str | None = None,
        calibration: Optional[PinholeCalibration] = None,
        render_color: bool = True,
    ) -> None:
        if frames is None and recording_path is None:
            raise ValueError("Provide recorded frames or a recording path.")
        self._frames = list(frames) if frames is not None else None
        self._recording_path = Path(recording_path) if recording_path is not None else None
        self.calibration = calibration or PinholeCalibration()
        self.render_color = render_color
        self.device: Optional[ReplayDevice] = None
        self.tracker: Optional[ReplayTracker] = None

    def open_device(self) -> ReplayDevice:
        frames = self._frames
        if frames is None:
            try:
                frames = load_recording(self._recording_path)
            except (FileNotFoundError, ValueError, KeyError) as exc:
                raise SetupError(f"No device found: {exc}") from exc
        self.device = ReplayDevice(frames, self.calibration, render_color=self.render_color)
        return self.device

    def create_tracker(self, calibration: PinholeCalibration) -> ReplayTracker:
        self.tracker = ReplayTracker()
        return self.tracker


__all__ = ["ReplayBackend", "ReplayBodyFrame", "ReplayCapture", "ReplayDevice", "ReplayTracker"]
