from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from body_com.skeleton import (
    JOINT_COUNT,
    ConfidenceLevel,
    Joint,
    JointData,
    RecordedFrame,
    Skeleton,
    load_recording,
    parse_confidence,
    save_recording,
)


def test_joint_enum_follows_sensor_order():
    assert JOINT_COUNT == 32
    assert Joint.PELVIS == 0
    assert Joint.KNEE_RIGHT == 23
    assert Joint.NOSE == 27
    assert Joint.EAR_RIGHT == 31


def test_confidence_levels_are_ordered_and_parsed():
    assert ConfidenceLevel.NONE < ConfidenceLevel.LOW < ConfidenceLevel.MEDIUM < ConfidenceLevel.HIGH
    assert parse_confidence("medium") is ConfidenceLevel.MEDIUM
    assert parse_confidence(1) is ConfidenceLevel.LOW
    assert parse_confidence(ConfidenceLevel.HIGH) is ConfidenceLevel.HIGH
    with pytest.raises(ValueError):
        parse_confidence("certain")


def test_skeleton_lookup():
    skeleton = Skeleton.from_positions({Joint.NOSE: (1.0, 2.0, 3.0)}, confidence=ConfidenceLevel.MEDIUM, body_id=4)
    assert Joint.NOSE in skeleton
    assert Joint.PELVIS not in skeleton
    assert len(skeleton) == 1
    assert skeleton.body_id == 4
    assert np.array_equal(skeleton.position(Joint.NOSE), [1.0, 2.0, 3.0])
    assert skeleton.confidence(Joint.NOSE) is ConfidenceLevel.MEDIUM
    assert skeleton.confidence(Joint.PELVIS) is ConfidenceLevel.NONE
    with pytest.raises(KeyError):
        skeleton.position(Joint.PELVIS)


def test_recording_save_and_load(tmp_path: Path):
    skeleton = Skeleton.from_joints(
        [
            JointData(Joint.NOSE, 1.0, 2.0, 1800.0),
            JointData(Joint.PELVIS, 0.0, 150.0, 2000.0, ConfidenceLevel.LOW),
        ],
        body_id=3,
    )
    path = save_recording(
        [RecordedFrame(0.0, [skeleton]), RecordedFrame(0.033, [])],
        tmp_path / "nested" / "recording.json",
    )

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["frame_count"] == 2
    assert payload["frames"][0]["bodies"][0]["joints"][0]["name"] == "PELVIS"

    frames = load_recording(path)
    assert len(frames) == 2
    assert frames[1].skeletons == []
    loaded = frames[0].skeletons[0]
    assert loaded.body_id == 3
    assert loaded.confidence(Joint.PELVIS) is ConfidenceLevel.LOW
    assert loaded.position(Joint.NOSE).tolist() == [1.0, 2.0, 1800.0]


def test_load_recording_defaults(tmp_path: Path):
    path = tmp_path / "recording.json"
    path.write_text(
        json.dumps({"frames": [{"bodies": [{"joints": [{"name": "nose", "x": 0, "y": 0, "z": 1}]}]}]}),
        encoding="utf-8",
    )
    frame = load_recording(path)[0]
    assert frame.timestamp_seconds == 0.0
    assert frame.skeletons[0].body_id == 0
    assert frame.skeletons[0].confidence(Joint.NOSE) is ConfidenceLevel.HIGH


def test_load_missing_recording(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_recording(tmp_path / "missing.json")
