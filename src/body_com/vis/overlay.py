"""OpenCV overlays for center-of-mass tracking frames."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Set

import cv2
import numpy as np

from body_com.service.results import BodyFrameResult, FrameResult, OperatorAction

LOGGER = logging.getLogger(__name__)

# BGR
SEGMENT_COLOR = (0, 255, 0)
COM_COLOR = (0, 0, 255)
REFERENCE_COLOR = (255, 0, 0)
TEXT_COLOR = (0, 0, 255)
MARKER_RADIUS = 20
TEXT_OFFSETS = ((30, 30), (30, 60), (30, 90))

ESCAPE_KEY = 27
SPACE_KEY = 32


def _pixel(point: Optional[np.ndarray]) -> Optional[tuple[int, int]]:
    if point is None:
        return None
    values = np.asarray(point, dtype=float)
    if values.shape[0] < 2 or not np.all(np.isfinite(values[:2])):
        return None
    return int(values[0]), int(values[1])


def _color(image: np.ndarray, bgr: tuple[int, int, int]) -> tuple[int, ...]:
    if image.ndim == 3 and image.shape[2] == 4:
        return (*bgr, 255)
    return bgr


def format_displacement(displacement: Sequence[float]) -> list[str]:
    return [f"{axis}: {float(value):.2f} mm" for axis, value in zip("XYZ", displacement)]


def draw_marker(image: np.ndarray, point: Optional[np.ndarray], color: tuple[int, int, int]) -> bool:
    pixel = _pixel(point)
    if pixel is None:
        return False
    cv2.circle(image, pixel, MARKER_RADIUS, _color(image, color), cv2.FILLED, cv2.LINE_8, 0)
    return True


def draw_body_overlay(image: np.ndarray, body: BodyFrameResult) -> np.ndarray:
    """Draw segment COMs, the body COM and displacement labels in place."""
    for point in body.segment_coms_2d.values():
        draw_marker(image, point, SEGMENT_COLOR)
    if not draw_marker(image, body.com_2d, COM_COLOR):
        return image
    if body.displacement is None:
        return image
    origin = _pixel(body.com_2d)
    for text, (dx, dy) in zip(format_displacement(body.displacement), TEXT_OFFSETS):
        cv2.putText(
            image,
            text,
            (origin[0] + dx, origin[1] + dy),
            cv2.FONT_HERSHEY_DUPLEX,
            1.0,
            _color(image, TEXT_COLOR),
            2,
        )
    return image


def draw_frame_overlay(image: np.ndarray, frame: FrameResult) -> np.ndarray:
    canvas = image.copy()
    for body in frame.bodies:
        draw_body_overlay(canvas, body)
    draw_marker(canvas, frame.reference_2d, REFERENCE_COLOR)
    return canvas


class OpenCVDisplay:
    """Preview window that also reads Esc/space from ``cv2.waitKey``."""

    def __init__(self, window_name: str = "color_image", *, wait_ms: int = 30) -> None:
        self.window_name = window_name
        self.wait_ms = int(wait_ms)
        self._opened = False

    def render(self, image: Optional[np.ndarray], frame: FrameResult) -> None:
        if image is None:
            return
        canvas = draw_frame_overlay(image, frame)
        cv2.imshow(self.window_name, canvas)
        self._opened = True

    def poll(self) -> Set[OperatorAction]:
        key = cv2.waitKey(self.wait_ms)
        if key < 0:
            return set()
        key &= 0xFF
        if key == ESCAPE_KEY:
            return {OperatorAction.QUIT}
        if key == SPACE_KEY:
            return {OperatorAction.SET_REFERENCE}
        return set()

    def close(self) -> None:
        if self._opened:
            cv2.destroyWindow(self.window_name)
            self._opened = False


class ImageFileRenderer:
    """Write every overlaid frame to ``output_dir``."""

    def __init__(self, output_dir: Path | str, *, filename_pattern: str = "frame_{index:05d}.jpg") -> None:
        self.output_dir = Path(output_dir)
        self.filename_pattern = filename_pattern
        self.written: list[Path] = []

    def render(self, image: Optional[np.ndarray], frame: FrameResult) -> None:
        if image is None:
            return
        self.output_dir.mkdir(parents=True, exist_ok=True)
        canvas = draw_frame_overlay(image, frame)
        if canvas.ndim == 3 and canvas.shape[2] == 4:
            canvas = cv2.cvtColor(canvas, cv2.COLOR_BGRA2BGR)
        path = self.output_dir / self.filename_pattern.format(index=frame.frame_index)
        if not cv2.imwrite(str(path), canvas):
            LOGGER.warning("Unable to write overlay frame %s", path)
            return
        self.written.append(path)

    def close(self) -> None:
        return None


class ScriptedInput:
    """Operator input replayed from frame indices, for headless runs."""

    def __init__(self, *, set_reference_at: Iterable[int] = (), quit_at: Optional[int] = None) -> None:
        self.set_reference_at = {int(index) for index in set_reference_at}
        self.quit_at = quit_at
        self._frame = 0

    def poll(self) -> Set[OperatorAction]:
        actions: Set[OperatorAction] = set()
        if self._frame in self.set_reference_at:
            actions.add(OperatorAction.SET_REFERENCE)
        if self.quit_at is not None and self._frame >= self.quit_at:
            actions.add(OperatorAction.QUIT)
        self._frame += 1
        return actions

    def close(self) -> None:
        return None


__all__ = [
    "COM_COLOR",
    "ImageFileRenderer",
    "OpenCVDisplay",
    "REFERENCE_COLOR",
    "SEGMENT_COLOR",
    "ScriptedInput",
    "draw_body_overlay",
    "draw_frame_overlay",
    "draw_marker",
    "format_displacement",
]
