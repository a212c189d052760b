"""Pydantic schemas for request/response payloads.

REST endpoints use a standardized JSON envelope: {"success": bool, "data": any, "error": str|None}
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional, List

from posturecheck.vision.geometry import Keypoint


class Envelope(BaseModel):
    success: bool = True
    data: Optional[dict] = None
    error: Optional[str] = None


class Joint(BaseModel):
    # Unknown fields sent by the pose model are kept so they can be echoed back
    model_config = ConfigDict(extra="allow")

    name: str
    x: Optional[float] = None
    y: Optional[float] = None
    score: float = Field(ge=0.0, le=1.0, default=0.0)

    def to_keypoint(self) -> Keypoint:
        return Keypoint(name=self.name, x=self.x, y=self.y, score=self.score)


class PostureInput(BaseModel):
    """One frame of keypoints, as emitted by the client on ``keypointsData``."""

    model_config = ConfigDict(populate_by_name=True)

    keypoints: List[Joint] = Field(default_factory=list)
    # Left untyped: any tag other than "squat" or "desk" is reported as an issue, not rejected
    posture_type: Optional[Any] = Field(default=None, alias="postureType")

    def to_keypoints(self) -> List[Keypoint]:
        return [j.to_keypoint() for j in self.keypoints]


class PostureFeedback(BaseModel):
    event: str = "postureFeedback"
    timestamp: int
    issues: List[str]
    keypoints: List[Joint]


class SocketError(BaseModel):
    event: str = "error"
    error: str
    detail: Optional[str] = None
