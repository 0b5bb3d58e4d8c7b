from __future__ import annotations

import pytest

from body_com.sensor import (
    CaptureError,
    CaptureTimeout,
    DeviceConfig,
    InferenceQueueError,
    ReplayBackend,
    SetupError,
)
from body_com.skeleton import Joint, RecordedFrame, Skeleton


def _frame(body_id: int) -> RecordedFrame:
    return RecordedFrame(0.0, [Skeleton.from_positions({Joint.NOSE: (0.0, 0.0, 1000.0)}, body_id=body_id)])


def test_backend_requires_a_source():
    with pytest.raises(ValueError):
        ReplayBackend()


def test_device_replays_frames_then_times_out():
    backend = ReplayBackend(frames=[_frame(1), _frame(2)])
    device = backend.open_device()
    with pytest.raises(CaptureError):
        device.get_capture(100)

    device.start_cameras(DeviceConfig())
    calibration = device.get_calibration(DeviceConfig())
    tracker = backend.create_tracker(calibration)

    ids = []
    for _ in range(2):
        capture = device.get_capture(100)
        assert capture.color_image.shape == (1080, 1920, 3)
        tracker.enqueue_capture(capture, None)
        ids.append(tracker.pop_result(None).skeletons[0].body_id)
    assert ids == [1, 2]

    with pytest.raises(CaptureTimeout):
        device.get_capture(100)


def test_calibration_requires_started_cameras():
    device = ReplayBackend(frames=[]).open_device()
    with pytest.raises(SetupError):
        device.get_calibration(DeviceConfig())
    device.close()
    with pytest.raises(SetupError):
        device.start_cameras(DeviceConfig())


def test_tracker_queue_errors():
    backend = ReplayBackend(frames=[_frame(0)], render_color=False)
    device = backend.open_device()
    device.start_cameras(DeviceConfig())
    tracker = backend.create_tracker(device.get_calibration(DeviceConfig()))

    with pytest.raises(InferenceQueueError):
        tracker.pop_result(None)

    capture = device.get_capture(100)
    assert capture.color_image is None
    tracker.shutdown()
    with pytest.raises(InferenceQueueError):
        tracker.enqueue_capture(capture, None)


def test_invalid_recording_is_a_setup_error(tmp_path):
    path = tmp_path / "recording.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SetupError):
        ReplayBackend(recording_path=path).open_device()
