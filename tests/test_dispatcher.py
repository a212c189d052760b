from __future__ import annotations

import pytest

from posturecheck.core.config import Settings
from posturecheck.vision.evaluators import (
    PostureDispatcher,
    SquatEvaluator,
    build_dispatcher,
    evaluate_posture,
)


@pytest.mark.parametrize("activity", ["yoga", "", "Squat", None, 3])
def test_unknown_activity(squat_frame, activity):
    assert evaluate_posture(squat_frame(), activity) == ["Unknown posture type."]


def test_routes_by_activity(squat_frame, desk_frame):
    assert evaluate_posture(squat_frame(left_knee=(0.40, 0.7)), "squat") == ["Left knee over toe."]
    assert evaluate_posture(desk_frame(left_ear=(0.65, 0.3)), "desk") == [
        "Neck bent forward (>30° estimated). Angles: 90° / 180°"
    ]


def test_wrong_rule_set_reports_insufficient(squat_frame):
    # A lower-body frame sent as desk has no nose
    issues = evaluate_posture(squat_frame(), "desk")
    assert issues == ["Insufficient keypoints detected for desk posture evaluation. Ensure upper body is visible."]


def test_repeated_evaluation_is_identical(squat_frame):
    kps = squat_frame(left_knee=(0.40, 0.7), left_shoulder=(0.9, 0.5))
    first = evaluate_posture(kps, "squat")
    for _ in range(5):
        assert evaluate_posture(kps, "squat") == first


def test_keypoint_order_does_not_matter(desk_frame):
    kps = desk_frame(left_ear=(0.45, 0.6), left_shoulder=(0.7, 0.4), left_hip=(0.5, 0.6))
    assert evaluate_posture(list(reversed(kps)), "desk") == evaluate_posture(kps, "desk")


def test_scenario_c_low_confidence_squat(squat_frame):
    kps = squat_frame(right_hip=(0.55, 0.5, 0.1), left_shoulder=(0.9, 0.5))
    assert evaluate_posture(kps, "squat") == [
        "Insufficient keypoints detected for squat evaluation. Ensure full body is visible."
    ]


def test_custom_dispatcher_uses_given_evaluators(squat_frame):
    dispatcher = PostureDispatcher(squat=SquatEvaluator(min_confidence=0.95))
    assert dispatcher.activities == ["squat", "desk"]
    assert dispatcher.evaluate(squat_frame(score=0.9), "squat") == [
        "Insufficient keypoints detected for squat evaluation. Ensure full body is visible."
    ]


def test_build_dispatcher_from_settings(squat_frame, desk_frame):
    s = Settings(back_angle_min=170.0, spine_reference_offset=0.2, desk_min_confidence=0.95)
    dispatcher = build_dispatcher(s)
    assert dispatcher.evaluate(squat_frame(left_knee=(0.40, 0.7)), "squat") == [
        "Left knee over toe.",
        "Hunched back detected (Back angle: 166° / 180°).",
    ]
    assert dispatcher.evaluate(desk_frame(), "desk") == [
        "Insufficient keypoints detected for desk posture evaluation. Ensure upper body is visible."
    ]
