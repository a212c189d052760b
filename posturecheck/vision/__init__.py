"""Vision package exports."""

from .evaluators import (
    DeskSittingEvaluator,
    PostureDispatcher,
    PostureEvaluator,
    SquatEvaluator,
    build_dispatcher,
    evaluate_posture,
)
from .geometry import Keypoint, Point, calculate_angle, find_keypoint

__all__ = [
    "Keypoint",
    "Point",
    "find_keypoint",
    "calculate_angle",
    "PostureEvaluator",
    "SquatEvaluator",
    "DeskSittingEvaluator",
    "PostureDispatcher",
    "build_dispatcher",
    "evaluate_posture",
]
