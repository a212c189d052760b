from __future__ import annotations

import pytest

from posturecheck.vision.geometry import Keypoint


def _build(base: dict, score: float, overrides: dict, drop: tuple) -> list[Keypoint]:
    points = dict(base)
    for name, value in overrides.items():
        points[name] = value
    out = []
    for name, value in points.items():
        if name in drop:
            continue
        x, y = value[0], value[1]
        s = value[2] if len(value) > 2 else score
        out.append(Keypoint(name=name, x=x, y=y, score=s))
    return out


# Side-on, standing upright: every back angle is 180° and knees sit over ankles.
SQUAT_UPRIGHT = {
    "left_shoulder": (0.45, 0.2),
    "left_hip": (0.45, 0.5),
    "left_knee": (0.45, 0.7),
    "left_ankle": (0.45, 0.9),
    "right_shoulder": (0.55, 0.2),
    "right_hip": (0.55, 0.5),
    "right_knee": (0.55, 0.7),
    "right_ankle": (0.55, 0.9),
}

# Seated upright: ear, shoulder and hip stacked vertically on both sides.
DESK_UPRIGHT = {
    "nose": (0.5, 0.1),
    "left_ear": (0.45, 0.1),
    "right_ear": (0.55, 0.1),
    "left_shoulder": (0.45, 0.3),
    "right_shoulder": (0.55, 0.3),
    "left_hip": (0.45, 0.6),
    "right_hip": (0.55, 0.6),
}


@pytest.fixture
def squat_frame():
    def make(score: float = 0.9, drop: tuple = (), **overrides) -> list[Keypoint]:
        return _build(SQUAT_UPRIGHT, score, overrides, drop)

    return make


@pytest.fixture
def desk_frame():
    def make(score: float = 0.9, drop: tuple = (), **overrides) -> list[Keypoint]:
        return _build(DESK_UPRIGHT, score, overrides, drop)

    return make
