from __future__ import annotations

import pytest

from body_com.features.config import (
    BASIC_8,
    FULL_14,
    BodySegment,
    SegmentDefinition,
    SegmentModel,
    get_segment_model,
)
from body_com.skeleton import Joint


def test_basic_model_covers_lower_body_and_head():
    segments = BASIC_8.segments()
    assert segments == (
        BodySegment.FOOT_RIGHT,
        BodySegment.SHANK_RIGHT,
        BodySegment.THIGH_RIGHT,
        BodySegment.TRUNK_RIGHT,
        BodySegment.FOOT_LEFT,
        BodySegment.SHANK_LEFT,
        BodySegment.THIGH_LEFT,
        BodySegment.TRUNK_LEFT,
        BodySegment.HEAD,
    )
    assert BodySegment.FOREARM_LEFT not in BASIC_8


def test_full_model_adds_arm_segments():
    assert len(FULL_14) == 15
    for side in ("LEFT", "RIGHT"):
        for name in ("UPPERARM", "FOREARM", "HAND"):
            assert BodySegment[f"{name}_{side}"] in FULL_14


@pytest.mark.parametrize("model", [BASIC_8, FULL_14])
def test_mass_fractions_sum_to_one(model):
    assert model.total_mass_fraction() == pytest.approx(1.0)


def test_segment_definitions_match_coefficient_tables():
    thigh = BASIC_8.segment_definition(BodySegment.THIGH_RIGHT)
    assert (thigh.proximal, thigh.distal) == (Joint.KNEE_RIGHT, Joint.HIP_RIGHT)
    assert thigh.length_fraction == pytest.approx(0.428)
    assert thigh.mass_fraction == pytest.approx(0.1175)

    forearm = FULL_14.segment_definition(BodySegment.FOREARM_LEFT)
    assert (forearm.proximal, forearm.distal) == (Joint.WRIST_LEFT, Joint.ELBOW_LEFT)
    assert forearm.length_fraction == pytest.approx(0.434)

    assert BASIC_8.segment_definition(BodySegment.HEAD).mass_fraction == pytest.approx(0.1814)
    assert FULL_14.segment_definition(BodySegment.HEAD).mass_fraction == pytest.approx(0.082)


def test_head_is_anchored_at_nose():
    head = FULL_14.segment_definition(BodySegment.HEAD)
    assert head.is_anchor
    assert head.joints == (Joint.NOSE,)
    assert head.length_fraction == 0.0


def test_segments_for_joint_is_reverse_lookup():
    assert BASIC_8.segments_for_joint(Joint.KNEE_RIGHT) == (BodySegment.SHANK_RIGHT, BodySegment.THIGH_RIGHT)
    assert BASIC_8.segments_for_joint(Joint.SHOULDER_LEFT) == (BodySegment.TRUNK_LEFT,)
    assert FULL_14.segments_for_joint(Joint.SHOULDER_LEFT) == (BodySegment.TRUNK_LEFT, BodySegment.UPPERARM_LEFT)
    assert BASIC_8.segments_for_joint(Joint.EAR_LEFT) == ()


def test_unknown_segment_raises_key_error():
    with pytest.raises(KeyError):
        BASIC_8.segment_definition(BodySegment.HAND_LEFT)


def test_get_segment_model_by_name():
    assert get_segment_model("basic_8") is BASIC_8
    assert get_segment_model("FULL-14") is FULL_14
    assert get_segment_model(FULL_14) is FULL_14
    with pytest.raises(ValueError):
        get_segment_model("upper_body")


def test_invalid_coefficients_are_rejected():
    with pytest.raises(ValueError):
        SegmentModel("bad", {BodySegment.HEAD: SegmentDefinition(Joint.NOSE, Joint.NOSE, 1.5, 0.1)})
    with pytest.raises(ValueError):
        SegmentModel("bad", {BodySegment.HEAD: SegmentDefinition(Joint.NOSE, Joint.NOSE, 0.0, 1.0)})
