"""Overlay rendering and operator input."""

from .overlay import (
    COM_COLOR,
    REFERENCE_COLOR,
    SEGMENT_COLOR,
    ImageFileRenderer,
    OpenCVDisplay,
    ScriptedInput,
    draw_body_overlay,
    draw_frame_overlay,
    draw_marker,
    format_displacement,
)

__all__ = [
    "COM_COLOR",
    "REFERENCE_COLOR",
    "SEGMENT_COLOR",
    "ImageFileRenderer",
    "OpenCVDisplay",
    "ScriptedInput",
    "draw_body_overlay",
    "draw_frame_overlay",
    "draw_marker",
    "format_displacement",
]
