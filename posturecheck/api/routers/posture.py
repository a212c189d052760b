"""Posture analysis endpoint router.

Evaluates a single frame of client-side keypoints and returns the issues found.
"""
from __future__ import annotations

import time

from fastapi import APIRouter
from loguru import logger

from posturecheck.api.schemas import Envelope, PostureFeedback, PostureInput
from posturecheck.vision.evaluators import PostureDispatcher, build_dispatcher

router = APIRouter()

dispatcher = build_dispatcher()


def build_feedback(payload: PostureInput, evaluator: PostureDispatcher | None = None) -> PostureFeedback:
    """Evaluate ``payload`` and pair the issues with the keypoints that produced them."""
    evaluator = evaluator or dispatcher
    issues = evaluator.evaluate(payload.to_keypoints(), payload.posture_type)
    logger.debug("posture type={} keypoints={} issues={}", payload.posture_type, len(payload.keypoints), len(issues))
    return PostureFeedback(
        timestamp=int(time.time() * 1000),
        issues=issues,
        keypoints=payload.keypoints,
    )


@router.post("/posture", response_model=Envelope)
async def posture_endpoint(payload: PostureInput) -> Envelope:
    """Return posture issues for one frame of keypoints."""
    feedback = build_feedback(payload)
    return Envelope(success=True, data=feedback.model_dump(exclude={"event"}))
