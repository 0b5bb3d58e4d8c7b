"""Runtime configuration for center-of-mass tracking runs."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from body_com.features.center_of_mass import ExistencePolicy
from body_com.features.displacement import DisplacementMode
from body_com.sensor.base import DeviceConfig
from body_com.skeleton.joints import ConfidenceLevel, parse_confidence

DEFAULT_LOG_PATH = Path("com_data.csv")
DEFAULT_CAPTURE_TIMEOUT_MS = 1000


@dataclass(slots=True)
class TrackingConfig:
    """Settings for one tracking run.

    ``inference_timeout_ms=None`` waits indefinitely for body-tracking results.
    """

    segment_model: str = "BASIC_8"
    existence_policy: ExistencePolicy = ExistencePolicy.CONFIDENCE
    min_confidence: ConfidenceLevel = ConfidenceLevel.LOW
    displacement_mode: DisplacementMode = DisplacementMode.AFTER_REFERENCE
    log_path: Optional[Path] = DEFAULT_LOG_PATH
    capture_timeout_ms: int = DEFAULT_CAPTURE_TIMEOUT_MS
    inference_timeout_ms: Optional[int] = None
    max_frames: Optional[int] = None
    project_to_color: bool = False
    device: DeviceConfig = field(default_factory=DeviceConfig)

    def __post_init__(self) -> None:
        self.existence_policy = ExistencePolicy(self.existence_policy)
        self.displacement_mode = DisplacementMode(self.displacement_mode)
        self.min_confidence = parse_confidence(self.min_confidence)
        if self.log_path is not None:
            self.log_path = Path(self.log_path)
        if self.capture_timeout_ms <= 0:
            raise ValueError("capture_timeout_ms must be positive.")
        if self.inference_timeout_ms is not None and self.inference_timeout_ms <= 0:
            raise ValueError("inference_timeout_ms must be positive or None.")
        if self.max_frames is not None and self.max_frames <= 0:
            raise ValueError("max_frames must be positive or None.")


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip().lower() in ("", "none", "infinite"):
        return None
    return int(value)


def build_config_from_env(**overrides) -> TrackingConfig:
    """Populate :class:`TrackingConfig` from ``BODY_COM_*`` environment variables."""
    log_path = os.getenv("BODY_COM_LOG_PATH", str(DEFAULT_LOG_PATH))
    values = dict(
        segment_model=os.getenv("BODY_COM_SEGMENT_MODEL", "BASIC_8"),
        existence_policy=os.getenv("BODY_COM_EXISTENCE_POLICY", ExistencePolicy.CONFIDENCE.value),
        min_confidence=os.getenv("BODY_COM_MIN_CONFIDENCE", ConfidenceLevel.LOW.name),
        displacement_mode=os.getenv("BODY_COM_DISPLACEMENT_MODE", DisplacementMode.AFTER_REFERENCE.value),
        log_path=Path(log_path) if log_path else None,
        capture_timeout_ms=int(os.getenv("BODY_COM_CAPTURE_TIMEOUT_MS", str(DEFAULT_CAPTURE_TIMEOUT_MS))),
        inference_timeout_ms=_optional_int(os.getenv("BODY_COM_INFERENCE_TIMEOUT_MS")),
        max_frames=_optional_int(os.getenv("BODY_COM_MAX_FRAMES")),
    )
    values.update({key: value for key, value in overrides.items() if value is not None})
    return TrackingConfig(**values)


__all__ = ["DEFAULT_CAPTURE_TIMEOUT_MS", "DEFAULT_LOG_PATH", "TrackingConfig", "build_config_from_env"]
