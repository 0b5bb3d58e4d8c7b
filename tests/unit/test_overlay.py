from __future__ import annotations

import numpy as np

from body_com.features import BodyCenterOfMass, BodySegment
from body_com.service import BodyFrameResult, FrameResult, OperatorAction
from body_com.vis import (
    COM_COLOR,
    REFERENCE_COLOR,
    SEGMENT_COLOR,
    ImageFileRenderer,
    ScriptedInput,
    draw_frame_overlay,
    draw_marker,
)
from body_com.vis.overlay import format_displacement


def _body(com_2d, displacement=None) -> BodyFrameResult:
    center_of_mass = BodyCenterOfMass(
        body_id=0,
        existence={BodySegment.HEAD: True},
        segment_coms={BodySegment.HEAD: np.array([0.0, 0.0, 1000.0])},
        com=np.array([0.0, 0.0, 1000.0]),
    )
    return BodyFrameResult(
        center_of_mass=center_of_mass,
        com_2d=None if com_2d is None else np.array(com_2d, dtype=float),
        segment_coms_2d={BodySegment.HEAD: np.array([150.0, 40.0])},
        displacement=displacement,
    )


def test_format_displacement():
    assert format_displacement([1.234, -5.0, 0.0]) == ["X: 1.23 mm", "Y: -5.00 mm", "Z: 0.00 mm"]


def test_draw_marker_skips_invalid_points():
    image = np.zeros((50, 50, 3), dtype=np.uint8)
    assert not draw_marker(image, None, COM_COLOR)
    assert not draw_marker(image, np.array([np.nan, 3.0]), COM_COLOR)
    assert not image.any()
    assert draw_marker(image, np.array([25.0, 25.0]), COM_COLOR)
    assert tuple(image[25, 25]) == COM_COLOR


def test_frame_overlay_draws_on_a_copy():
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    frame = FrameResult(
        frame_index=0,
        bodies=[_body([60.0, 60.0], displacement=np.array([1.0, 2.0, 3.0]))],
        reference_2d=np.array([250.0, 170.0]),
    )

    canvas = draw_frame_overlay(image, frame)

    assert not image.any()
    assert tuple(canvas[40, 150]) == SEGMENT_COLOR
    assert tuple(canvas[60, 60]) == COM_COLOR
    assert tuple(canvas[170, 250]) == REFERENCE_COLOR


def test_frame_overlay_supports_bgra_images():
    image = np.zeros((100, 100, 4), dtype=np.uint8)
    frame = FrameResult(frame_index=0, bodies=[_body([50.0, 50.0])])
    canvas = draw_frame_overlay(image, frame)
    assert tuple(canvas[50, 50]) == (*COM_COLOR, 255)


def test_image_file_renderer_writes_frames(tmp_path):
    renderer = ImageFileRenderer(tmp_path / "frames", filename_pattern="frame_{index:03d}.png")
    frame = FrameResult(frame_index=4, bodies=[_body(None)])

    renderer.render(None, frame)
    renderer.render(np.zeros((40, 40, 4), dtype=np.uint8), frame)

    assert [path.name for path in renderer.written] == ["frame_004.png"]
    assert renderer.written[0].exists()


def test_scripted_input():
    operator = ScriptedInput(set_reference_at=[1], quit_at=2)
    assert operator.poll() == set()
    assert operator.poll() == {OperatorAction.SET_REFERENCE}
    assert operator.poll() == {OperatorAction.QUIT}
