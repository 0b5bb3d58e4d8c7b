"""Service-layer helpers orchestrating sensor, COM computation and logging."""

from .com_log import DisplacementLog, load_displacement_log, summarize_displacement_log
from .results import BodyFrameResult, FrameResult, OperatorAction, StopReason, TrackingSummary
from .tracking_service import FramePipeline, TrackingSession, open_session, run_tracking

__all__ = [
    "load_displacement_log",
    "open_session",
    "run_tracking",
    "summarize_displacement_log",
    "BodyFrameResult",
    "DisplacementLog",
    "FramePipeline",
    "FrameResult",
    "OperatorAction",
    "StopReason",
    "TrackingSession",
    "TrackingSummary",
]
