"""JSON persistence for recorded skeleton streams."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from .joints import Joint, JointData, Skeleton, parse_confidence


@dataclass(slots=True)
class RecordedFrame:
    """Skeletons tracked in a single captured frame."""

    timestamp_seconds: float
    skeletons: List[Skeleton] = field(default_factory=list)


def _serialize_skeleton(skeleton: Skeleton) -> dict[str, object]:
    return {
        "body_id": skeleton.body_id,
        "joints": [
            {
                "name": data.joint.name,
                "x": data.x,
                "y": data.y,
                "z": data.z,
                "confidence": data.confidence.name,
            }
            for data in sorted(skeleton, key=lambda item: item.joint)
        ],
    }


def _parse_skeleton(payload: dict) -> Skeleton:
    joints = [
        JointData(
            joint=Joint[str(item["name"]).upper()],
            x=float(item["x"]),
            y=float(item["y"]),
            z=float(item["z"]),
            confidence=parse_confidence(item.get("confidence", "HIGH")),
        )
        for item in payload.get("joints", [])
    ]
    return Skeleton.from_joints(joints, body_id=int(payload.get("body_id", 0)))


def save_recording(frames: Sequence[RecordedFrame], output_path: Path | str) -> Path:
    """Write ``frames`` as ``{"frame_count": n, "frames": [...]}``."""
    payload = {
        "frame_count": len(frames),
        "frames": [
            {
                "timestamp_seconds": frame.timestamp_seconds,
                "bodies": [_serialize_skeleton(skeleton) for skeleton in frame.skeletons],
            }
            for frame in frames
        ],
    }
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def load_recording(path: Path | str) -> List[RecordedFrame]:
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Skeleton recording not found: {source}")
    data = json.loads(source.read_text(encoding="utf-8"))
    frames: List[RecordedFrame] = []
    for index, frame_payload in enumerate(data.get("frames", [])):
        frames.append(
            RecordedFrame(
                timestamp_seconds=float(frame_payload.get("timestamp_seconds", index)),
                skeletons=[_parse_skeleton(body) for body in frame_payload.get("bodies", [])],
            )
        )
    return frames


__all__ = ["RecordedFrame", "load_recording", "save_recording"]
