"""Pinhole calibration projecting depth-space points into camera images."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import cv2
import numpy as np

from .base import CalibrationType, SetupError


@dataclass(slots=True)
class CameraIntrinsics:
    """Pinhole intrinsics for one camera of the sensor."""

    width: int
    height: int
    fx: float
    fy: float
    cx: float
    cy: float
    distortion: Tuple[float, ...] = (0.0, 0.0, 0.0, 0.0, 0.0)

    def camera_matrix(self) -> np.ndarray:
        return np.array(
            [[self.fx, 0.0, self.cx], [0.0, self.fy, self.cy], [0.0, 0.0, 1.0]],
            dtype=np.float64,
        )

    def contains(self, pixel: np.ndarray) -> bool:
        return 0.0 <= pixel[0] < self.width and 0.0 <= pixel[1] < self.height


# Nominal values for a 1080P colour stream and an NFOV unbinned depth stream.
DEFAULT_COLOR_INTRINSICS = CameraIntrinsics(width=1920, height=1080, fx=913.0, fy=913.0, cx=960.0, cy=540.0)
DEFAULT_DEPTH_INTRINSICS = CameraIntrinsics(width=640, height=576, fx=504.0, fy=504.0, cx=320.0, cy=288.0)


@dataclass(slots=True)
class PinholeCalibration:
    """Project millimetre points from depth space with ``cv2.projectPoints``.

    ``rotation`` (Rodrigues vector) and ``translation`` (mm) move depth-space
    points into colour-camera space.
    """

    color: CameraIntrinsics = field(default_factory=lambda: DEFAULT_COLOR_INTRINSICS)
    depth: CameraIntrinsics = field(default_factory=lambda: DEFAULT_DEPTH_INTRINSICS)
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    translation: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def _extrinsics(self, source: CalibrationType, target: CalibrationType) -> Tuple[np.ndarray, np.ndarray]:
        rvec = np.asarray(self.rotation, dtype=np.float64).reshape(3, 1)
        tvec = np.asarray(self.translation, dtype=np.float64).reshape(3, 1)
        if source == target:
            return np.zeros((3, 1)), np.zeros((3, 1))
        if source is CalibrationType.DEPTH:
            return rvec, tvec
        # colour -> depth is the inverse transform
        rotation_matrix, _ = cv2.Rodrigues(rvec)
        inverse = rotation_matrix.T
        inverse_rvec, _ = cv2.Rodrigues(inverse)
        return inverse_rvec, -inverse @ tvec

    def project_3d_to_2d(
        self,
        point: Sequence[float],
        source: CalibrationType = CalibrationType.DEPTH,
        target: CalibrationType = CalibrationType.COLOR,
    ) -> Tuple[Optional[np.ndarray], bool]:
        """Return ``(pixel, valid)``; invalid when behind the camera or off-image."""
        source = CalibrationType(source)
        target = CalibrationType(target)
        intrinsics = self.color if target is CalibrationType.COLOR else self.depth
        rvec, tvec = self._extrinsics(source, target)

        object_point = np.asarray(point, dtype=np.float64).reshape(1, 3)
        rotation_matrix, _ = cv2.Rodrigues(rvec)
        camera_point = rotation_matrix @ object_point.reshape(3, 1) + tvec
        if not np.all(np.isfinite(camera_point)) or camera_point[2, 0] <= 0.0:
            return None, False

        image_points, _ = cv2.projectPoints(
            object_point,
            rvec,
            tvec,
            intrinsics.camera_matrix(),
            np.asarray(intrinsics.distortion, dtype=np.float64),
        )
        pixel = image_points.reshape(2)
        if not intrinsics.contains(pixel):
            return pixel, False
        return pixel, True


def calibration_from_dict(payload: Dict[str, object]) -> PinholeCalibration:
    """Build a calibration from ``{"color": {...}, "depth": {...}, ...}``."""

    def _intrinsics(key: str, default: CameraIntrinsics) -> CameraIntrinsics:
        values = payload.get(key)
        if not isinstance(values, dict):
            return default
        return CameraIntrinsics(
            width=int(values["width"]),
            height=int(values["height"]),
            fx=float(values["fx"]),
            fy=float(values["fy"]),
            cx=float(values["cx"]),
            cy=float(values["cy"]),
            distortion=tuple(float(v) for v in values.get("distortion", (0.0,) * 5)),
        )

    return PinholeCalibration(
        color=_intrinsics("color", DEFAULT_COLOR_INTRINSICS),
        depth=_intrinsics("depth", DEFAULT_DEPTH_INTRINSICS),
        rotation=tuple(float(v) for v in payload.get("rotation", (0.0, 0.0, 0.0))),
        translation=tuple(float(v) for v in payload.get("translation", (0.0, 0.0, 0.0))),
    )


def load_calibration(path: Path | str) -> PinholeCalibration:
    """Read a calibration JSON file; unreadable or malformed files raise :class:`SetupError`."""
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("expected a JSON object")
        return calibration_from_dict(payload)
    except (OSError, ValueError, KeyError, TypeError) as exc:
        raise SetupError(f"Failed to get calibration from {source}: {exc}") from exc


__all__ = [
    "CameraIntrinsics",
    "DEFAULT_COLOR_INTRINSICS",
    "DEFAULT_DEPTH_INTRINSICS",
    "PinholeCalibration",
    "calibration_from_dict",
    "load_calibration",
]
