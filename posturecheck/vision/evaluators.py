"""Rule-based posture evaluation for squat and desk-sitting frames.

Each evaluator takes the keypoints of a single frame and returns an ordered
list of human-readable issues. An empty list means the posture looks fine;
missing or low-confidence joints always produce an explicit
"insufficient keypoints" issue instead. Nothing is kept between calls.

Calibration constants:
    SQUAT_MIN_CONFIDENCE: joint score required for squat evaluation.
    DESK_MIN_CONFIDENCE: joint score required for desk evaluation.
    BACK_ANGLE_MIN: shoulder-hip-knee angle below which the back is hunched.
    NECK_ANGLE_MIN: ear-shoulder-hip angle below which the neck is bent.
    SPINE_ANGLE_MIN: shoulder-hip-vertical angle below which the user slouches.
    SPINE_REFERENCE_OFFSET: normalized distance of the vertical reference
        point below each hip.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from loguru import logger

from posturecheck.core.config import Settings, get_settings

from .geometry import Keypoint, Point, calculate_angle, find_keypoint

SQUAT_MIN_CONFIDENCE = 0.2
DESK_MIN_CONFIDENCE = 0.5
BACK_ANGLE_MIN = 150.0
NECK_ANGLE_MIN = 150.0
SPINE_ANGLE_MIN = 160.0
SPINE_REFERENCE_OFFSET = 0.1

UNKNOWN_POSTURE = "Unknown posture type."


def format_angle(angle: float) -> str:
    """Whole degrees, halves rounded up."""
    return str(Decimal(angle).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class PostureEvaluator(ABC):
    """Common interface for activity-specific rule sets."""

    activity: str
    required: Sequence[str] = ()
    optional: Sequence[str] = ()
    insufficient_message: str = ""

    def __init__(self, min_confidence: float) -> None:
        self.min_confidence = float(min_confidence)

    def evaluate(self, keypoints: Sequence[Keypoint]) -> List[str]:
        kps = {name: find_keypoint(keypoints, name) for name in (*self.required, *self.optional)}
        if not self._confident(kps):
            logger.debug("{} evaluation skipped: required joints missing or below {}", self.activity, self.min_confidence)
            return [self.insufficient_message]
        return self._apply_rules(kps)

    def _confident(self, kps: Dict[str, Optional[Keypoint]]) -> bool:
        for name in self.required:
            kp = kps.get(name)
            if kp is None or kp.score is None or not kp.score > self.min_confidence:
                return False
            if kp.x is None or kp.y is None:
                return False
        return True

    @abstractmethod
    def _apply_rules(self, kps: Dict[str, Optional[Keypoint]]) -> List[str]: ...


class SquatEvaluator(PostureEvaluator):
    """Knee-over-toe and back-angle checks for a side-on squat."""

    activity = "squat"
    required = (
        "left_shoulder",
        "right_shoulder",
        "left_hip",
        "right_hip",
        "left_knee",
        "right_knee",
        "left_ankle",
        "right_ankle",
    )
    insufficient_message = "Insufficient keypoints detected for squat evaluation. Ensure full body is visible."

    def __init__(
        self,
        min_confidence: float = SQUAT_MIN_CONFIDENCE,
        back_angle_min: float = BACK_ANGLE_MIN,
    ) -> None:
        super().__init__(min_confidence)
        self.back_angle_min = float(back_angle_min)

    def _apply_rules(self, kps: Dict[str, Optional[Keypoint]]) -> List[str]:
        issues: List[str] = []

        # Knee x against ankle x depends on which way the user faces the camera;
        # the two sides deliberately compare in opposite directions.
        if kps["left_knee"].x < kps["left_ankle"].x:
            issues.append("Left knee over toe.")
        if kps["right_knee"].x > kps["right_ankle"].x:
            issues.append("Right knee over toe.")

        left = calculate_angle(kps["left_shoulder"], kps["left_hip"], kps["left_knee"])
        right = calculate_angle(kps["right_shoulder"], kps["right_hip"], kps["right_knee"])
        if left < self.back_angle_min or right < self.back_angle_min:
            issues.append(f"Hunched back detected (Back angle: {format_angle(left)}° / {format_angle(right)}°).")

        return issues


class DeskSittingEvaluator(PostureEvaluator):
    """Neck bend and spine straightness checks for a seated user."""

    activity = "desk"
    required = ("nose", "left_shoulder", "right_shoulder", "left_hip", "right_hip")
    optional = ("left_ear", "right_ear")
    insufficient_message = "Insufficient keypoints detected for desk posture evaluation. Ensure upper body is visible."

    def __init__(
        self,
        min_confidence: float = DESK_MIN_CONFIDENCE,
        neck_angle_min: float = NECK_ANGLE_MIN,
        spine_angle_min: float = SPINE_ANGLE_MIN,
        spine_reference_offset: float = SPINE_REFERENCE_OFFSET,
    ) -> None:
        super().__init__(min_confidence)
        self.neck_angle_min = float(neck_angle_min)
        self.spine_angle_min = float(spine_angle_min)
        self.spine_reference_offset = float(spine_reference_offset)

    def _below_hip(self, hip: Keypoint) -> Point:
        return Point(x=hip.x, y=hip.y + self.spine_reference_offset)

    def _apply_rules(self, kps: Dict[str, Optional[Keypoint]]) -> List[str]:
        issues: List[str] = []

        # Ears are not gated; fall back to the nose when one is missing.
        neck_left = calculate_angle(kps["left_ear"] or kps["nose"], kps["left_shoulder"], kps["left_hip"])
        neck_right = calculate_angle(kps["right_ear"] or kps["nose"], kps["right_shoulder"], kps["right_hip"])
        if neck_left < self.neck_angle_min or neck_right < self.neck_angle_min:
            issues.append(f"Neck bent forward (>30° estimated). Angles: {format_angle(neck_left)}° / {format_angle(neck_right)}°")

        left_hip, right_hip = kps["left_hip"], kps["right_hip"]
        spine_left = calculate_angle(kps["left_shoulder"], left_hip, self._below_hip(left_hip))
        spine_right = calculate_angle(kps["right_shoulder"], right_hip, self._below_hip(right_hip))
        if spine_left < self.spine_angle_min or spine_right < self.spine_angle_min:
            issues.append(f"Back isn't straight (slouching detected). Angles: {format_angle(spine_left)}° / {format_angle(spine_right)}°")

        return issues


class PostureDispatcher:
    """Route a frame to the evaluator registered for its activity tag."""

    def __init__(
        self,
        squat: Optional[SquatEvaluator] = None,
        desk: Optional[DeskSittingEvaluator] = None,
    ) -> None:
        self._evaluators: Dict[str, PostureEvaluator] = {
            "squat": squat or SquatEvaluator(),
            "desk": desk or DeskSittingEvaluator(),
        }

    @property
    def activities(self) -> List[str]:
        return list(self._evaluators)

    def evaluate(self, keypoints: Sequence[Keypoint], activity: Optional[str]) -> List[str]:
        evaluator = self._evaluators.get(activity) if isinstance(activity, str) else None
        if evaluator is None:
            logger.debug("Unknown posture type: {!r}", activity)
            return [UNKNOWN_POSTURE]
        return evaluator.evaluate(keypoints)


_default_dispatcher = PostureDispatcher()


def evaluate_posture(keypoints: Sequence[Keypoint], activity: Optional[str]) -> List[str]:
    """Evaluate one frame with the default calibration."""
    return _default_dispatcher.evaluate(keypoints, activity)


def build_dispatcher(settings: Optional[Settings] = None) -> PostureDispatcher:
    """Build a dispatcher calibrated from application settings."""
    s = settings or get_settings()
    return PostureDispatcher(
        squat=SquatEvaluator(
            min_confidence=s.squat_min_confidence,
            back_angle_min=s.back_angle_min,
        ),
        desk=DeskSittingEvaluator(
            min_confidence=s.desk_min_confidence,
            neck_angle_min=s.neck_angle_min,
            spine_angle_min=s.spine_angle_min,
            spine_reference_offset=s.spine_reference_offset,
        ),
    )
