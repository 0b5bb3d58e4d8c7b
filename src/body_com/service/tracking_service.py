"""Per-frame center-of-mass tracking loop over a sensor and body tracker."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Set

import numpy as np

from body_com.config import TrackingConfig
from body_com.features.center_of_mass import CenterOfMassEstimator
from body_com.features.displacement import ReferenceTracker
from body_com.sensor.base import (
    BodyTracker,
    Calibration,
    CalibrationType,
    CaptureError,
    DeviceConfig,
    InferenceQueueError,
    SensorBackend,
    SensorDevice,
    SetupError,
)
from body_com.skeleton.joints import Skeleton

from .com_log import DisplacementLog
from .results import BodyFrameResult, FrameResult, OperatorAction, StopReason, TrackingSummary

LOGGER = logging.getLogger(__name__)


class FrameRenderer(Protocol):
    def render(self, image: Optional[np.ndarray], frame: FrameResult) -> None: ...

    def close(self) -> None: ...


class OperatorInput(Protocol):
    def poll(self) -> Set[OperatorAction]: ...

    def close(self) -> None: ...


# --------------------------------------------------------------------- #
# Session lifecycle
# --------------------------------------------------------------------- #
@dataclass(slots=True)
class TrackingSession:
    """Device, calibration and tracker acquired for one run."""

    device: Optional[SensorDevice] = None
    calibration: Optional[Calibration] = None
    tracker: Optional[BodyTracker] = None
    cameras_started: bool = False
    closed: bool = False

    def close(self) -> None:
        """Release the tracker then the device; handles that were never acquired are skipped."""
        if self.closed:
            return
        self.closed = True
        tracker, device = self.tracker, self.device
        self.tracker = None
        self.device = None
        self.calibration = None
        try:
            if tracker is not None:
                try:
                    tracker.shutdown()
                finally:
                    tracker.destroy()
        finally:
            if device is not None:
                try:
                    if self.cameras_started:
                        device.stop_cameras()
                finally:
                    self.cameras_started = False
                    device.close()
        LOGGER.info("Tracking session closed")

    def __enter__(self) -> "TrackingSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_session(backend: SensorBackend, device_config: Optional[DeviceConfig] = None) -> TrackingSession:
    """Open the device, start cameras, read calibration and create the tracker.

    Any failure closes whatever was already acquired and raises :class:`SetupError`.
    """
    config = device_config or DeviceConfig()
    session = TrackingSession()
    try:
        session.device = backend.open_device()
        LOGGER.info("Opened device")
        session.device.start_cameras(config)
        session.cameras_started = True
        session.calibration = session.device.get_calibration(config)
        LOGGER.info("Creating tracker...")
        session.tracker = backend.create_tracker(session.calibration)
        LOGGER.info("Created tracker")
    except Exception as exc:
        session.close()
        if isinstance(exc, SetupError):
            raise
        raise SetupError(f"Sensor setup failed: {exc}") from exc
    return session


# --------------------------------------------------------------------- #
# Frame loop
# --------------------------------------------------------------------- #
class FramePipeline:
    """Capture, track, compute COM and displacement, render and log, frame by frame."""

    def __init__(
        self,
        session: TrackingSession,
        config: Optional[TrackingConfig] = None,
        *,
        estimator: Optional[CenterOfMassEstimator] = None,
        reference: Optional[ReferenceTracker] = None,
        renderer: Optional[FrameRenderer] = None,
        operator_input: Optional[OperatorInput] = None,
        log: Optional[DisplacementLog] = None,
    ) -> None:
        self.session = session
        self.config = config or TrackingConfig()
        self.estimator = estimator or CenterOfMassEstimator(
            self.config.segment_model,
            policy=self.config.existence_policy,
            min_confidence=self.config.min_confidence,
        )
        self.reference = reference or ReferenceTracker(self.config.displacement_mode)
        self.renderer = renderer
        self.operator_input = operator_input
        if log is None and self.config.log_path is not None:
            log = DisplacementLog(self.config.log_path)
        self.log = log
        self._frame_index = 0

    # ------------------------------------------------------------------ #
    # Geometry
    # ------------------------------------------------------------------ #
    def _project(self, point: np.ndarray) -> Optional[np.ndarray]:
        calibration = self.session.calibration
        if calibration is None:
            return None
        pixel, valid = calibration.project_3d_to_2d(point, CalibrationType.DEPTH, CalibrationType.COLOR)
        if not valid:
            LOGGER.debug("Projection invalid for point (%.1f, %.1f, %.1f)", *np.asarray(point, dtype=float))
            return None
        return np.asarray(pixel, dtype=float)

    def process_bodies(self, skeletons: Sequence[Skeleton], frame_index: int = 0) -> FrameResult:
        """Compute COM results for every skeleton of one frame.

        Displacement is attached to the first skeleton only, which owns the
        reference pose.
        """
        bodies: list[BodyFrameResult] = []
        for skeleton in skeletons:
            center_of_mass = self.estimator.compute(skeleton)
            result = BodyFrameResult(center_of_mass=center_of_mass)
            if self.config.project_to_color:
                result.com_2d = self._project(center_of_mass.com)
                result.segment_coms_2d = {
                    segment: self._project(point) for segment, point in center_of_mass.segment_coms.items()
                }
            bodies.append(result)
        if bodies:
            bodies[0].displacement = self.reference.displacement(bodies[0].com)
        return FrameResult(frame_index=frame_index, bodies=bodies, reference_2d=self.reference.reference_2d)

    # ------------------------------------------------------------------ #
    # Loop
    # ------------------------------------------------------------------ #
    def _track_frame(self) -> tuple[Optional[FrameResult], Optional[StopReason]]:
        device, tracker = self.session.device, self.session.tracker
        if device is None or tracker is None:
            raise RuntimeError("Tracking session is not open.")
        try:
            capture = device.get_capture(self.config.capture_timeout_ms)
        except CaptureError as exc:
            LOGGER.warning("Capture failed: %s", exc)
            return None, StopReason.CAPTURE_FAILED

        body_frame = None
        try:
            try:
                tracker.enqueue_capture(capture, self.config.inference_timeout_ms)
            except InferenceQueueError as exc:
                LOGGER.warning("Failed to add capture to tracker process queue: %s", exc)
                return None, StopReason.ENQUEUE_FAILED
            try:
                body_frame = tracker.pop_result(self.config.inference_timeout_ms)
            except InferenceQueueError as exc:
                LOGGER.warning("Failed to pop result from tracker process queue: %s", exc)
                return None, StopReason.POP_FAILED

            frame = self.process_bodies(body_frame.skeletons, self._frame_index)
            LOGGER.debug("Frame %d: %d bodies tracked", self._frame_index, len(frame.bodies))
            if self.renderer is not None:
                self.renderer.render(capture.color_image, frame)
        finally:
            if body_frame is not None:
                body_frame.release()
            capture.release()
        self._frame_index += 1
        return frame, None

    def step(self, summary: TrackingSummary) -> Optional[StopReason]:
        """Run one frame; return the reason to stop, or None to continue."""
        frame, failure = self._track_frame()
        if failure is not None:
            return failure
        summary.frames_processed += 1
        summary.skeletons_processed += len(frame.bodies)

        actions = self.operator_input.poll() if self.operator_input is not None else set()
        if OperatorAction.QUIT in actions:
            return StopReason.CANCELLED

        primary = frame.primary
        if primary is None:
            return None
        if OperatorAction.SET_REFERENCE in actions:
            self.reference.set_reference(primary.com, primary.com_2d)
            primary.displacement = self.reference.displacement(primary.com)
        summary.last_com = primary.com
        summary.last_displacement = primary.displacement
        if primary.displacement is not None:
            LOGGER.debug("Displacement X: %.2f Y: %.2f Z: %.2f", *primary.displacement)
            # the origin default of always mode is for display only
            if self.log is not None and self.reference.has_reference:
                self.log.append(primary.displacement)
        return None

    def run(self) -> TrackingSummary:
        summary = TrackingSummary()
        LOGGER.info("COM tracking start")
        if self.log is not None:
            self.log.open()
        try:
            while True:
                if self.config.max_frames is not None and summary.frames_processed >= self.config.max_frames:
                    summary.stop_reason = StopReason.FRAME_LIMIT
                    break
                stop_reason = self.step(summary)
                if stop_reason is not None:
                    summary.stop_reason = stop_reason
                    break
        finally:
            if self.log is not None:
                self.log.close()
                summary.rows_written = self.log.rows_written
        LOGGER.info(
            "COM tracking stopped (%s) after %d frames, %d log rows",
            summary.stop_reason.value if summary.stop_reason else "error",
            summary.frames_processed,
            summary.rows_written,
        )
        return summary


def run_tracking(
    backend: SensorBackend,
    config: Optional[TrackingConfig] = None,
    *,
    renderer: Optional[FrameRenderer] = None,
    operator_input: Optional[OperatorInput] = None,
) -> TrackingSummary:
    """Open a session, run the frame loop and release everything afterwards.

    :class:`SetupError` propagates once the partially opened session is closed.
    """
    config = config or TrackingConfig()
    try:
        with open_session(backend, config.device) as session:
            pipeline = FramePipeline(
                session,
                config,
                renderer=renderer,
                operator_input=operator_input,
            )
            return pipeline.run()
    finally:
        if renderer is not None:
            renderer.close()
        if operator_input is not None and operator_input is not renderer:
            operator_input.close()


__all__ = [
    "FramePipeline",
    "FrameRenderer",
    "OperatorInput",
    "TrackingSession",
    "open_session",
    "run_tracking",
]
