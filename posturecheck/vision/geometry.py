"""Keypoint lookup and planar joint-angle helpers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

import numpy as np


@dataclass(frozen=True)
class Keypoint:
    name: str
    x: Optional[float]
    y: Optional[float]
    score: float = 0.0


@dataclass(frozen=True)
class Point:
    """A bare coordinate, used for reference points that are not detected joints."""

    x: Optional[float]
    y: Optional[float]


def _field(obj, key: str):
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def as_keypoint(obj) -> Optional[Keypoint]:
    """Coerce a wire-shaped ``{name, x, y, score}`` mapping or object to a Keypoint."""
    if obj is None or isinstance(obj, Keypoint):
        return obj
    return Keypoint(
        name=_field(obj, "name"),
        x=_field(obj, "x"),
        y=_field(obj, "y"),
        score=_field(obj, "score"),
    )


def find_keypoint(keypoints: Iterable, name: str) -> Optional[Keypoint]:
    """Return the first keypoint called ``name`` or None.

    Accepts Keypoint instances as well as plain ``{name, x, y, score}`` dicts.
    """
    for kp in keypoints:
        if _field(kp, "name") == name:
            return as_keypoint(kp)
    return None


def _coords(p) -> Optional[np.ndarray]:
    if p is None:
        return None
    x = _field(p, "x")
    y = _field(p, "y")
    if x is None or y is None:
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return np.array([float(x), float(y)])


def calculate_angle(p1, p2, p3) -> float:
    """Angle in degrees at vertex ``p2`` formed by ``p2->p1`` and ``p2->p3``.

    Returns 0.0 when a point is missing, lacks a coordinate, or coincides
    with the vertex. Callers cannot tell that apart from a real 0° angle.
    """
    a, b, c = _coords(p1), _coords(p2), _coords(p3)
    if a is None or b is None or c is None:
        return 0.0
    v1 = a - b
    v2 = c - b
    # hypot does not overflow on large finite components the way sqrt(x*x) does
    n1 = math.hypot(*v1)
    n2 = math.hypot(*v2)
    if n1 == 0 or n2 == 0 or not (math.isfinite(n1) and math.isfinite(n2)):
        return 0.0
    cos = float(np.dot(v1 / n1, v2 / n2))
    if not math.isfinite(cos):
        return 0.0
    return math.degrees(math.acos(min(max(cos, -1.0), 1.0)))
