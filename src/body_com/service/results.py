"""Value objects produced by the frame pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from body_com.features.center_of_mass import BodyCenterOfMass
from body_com.features.config import BodySegment


class OperatorAction(str, Enum):
    QUIT = "quit"
    SET_REFERENCE = "set_reference"


class StopReason(str, Enum):
    CANCELLED = "cancelled"
    CAPTURE_FAILED = "capture_failed"
    ENQUEUE_FAILED = "enqueue_failed"
    POP_FAILED = "pop_failed"
    FRAME_LIMIT = "frame_limit"


@dataclass(slots=True)
class BodyFrameResult:
    """COM output for one skeleton, plus its image-plane projections."""

    center_of_mass: BodyCenterOfMass
    com_2d: Optional[np.ndarray] = None
    segment_coms_2d: Dict[BodySegment, Optional[np.ndarray]] = field(default_factory=dict)
    displacement: Optional[np.ndarray] = None

    @property
    def body_id(self) -> int:
        return self.center_of_mass.body_id

    @property
    def com(self) -> np.ndarray:
        return self.center_of_mass.com


@dataclass(slots=True)
class FrameResult:
    frame_index: int
    bodies: List[BodyFrameResult] = field(default_factory=list)
    reference_2d: Optional[np.ndarray] = None

    @property
    def primary(self) -> Optional[BodyFrameResult]:
        return self.bodies[0] if self.bodies else None


@dataclass(slots=True)
class TrackingSummary:
    frames_processed: int = 0
    skeletons_processed: int = 0
    rows_written: int = 0
    stop_reason: Optional[StopReason] = None
    last_com: Optional[np.ndarray] = None
    last_displacement: Optional[np.ndarray] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "frames_processed": self.frames_processed,
            "skeletons_processed": self.skeletons_processed,
            "rows_written": self.rows_written,
            "stop_reason": self.stop_reason.value if self.stop_reason else None,
            "last_com": None if self.last_com is None else [float(v) for v in self.last_com],
            "last_displacement": (
                None if self.last_displacement is None else [float(v) for v in self.last_displacement]
            ),
        }


__all__ = ["BodyFrameResult", "FrameResult", "OperatorAction", "StopReason", "TrackingSummary"]
