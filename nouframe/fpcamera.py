"""A simple first-person camera steered by mouse motion."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

_MAX_JUMP = 200.0
_SENSITIVITY = 0.08


def _normalize(vector: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length == 0.0:
        raise ValueError("cannot normalise a zero-length vector")
    return vector / length


def _rotate(vector: np.ndarray, angle: float, axis: np.ndarray) -> np.ndarray:
    """Rotate ``vector`` by ``angle`` radians about ``axis`` (right-handed)."""
    axis = _normalize(axis)
    cos, sin = math.cos(angle), math.sin(angle)
    return (
        vector * cos
        + np.cross(axis, vector) * sin
        + axis * float(np.dot(axis, vector)) * (1.0 - cos)
    )


def _look_at(eye: np.ndarray, center: np.ndarray, up: np.ndarray) -> np.ndarray:
    f = _normalize(center - eye)
    s = _normalize(np.cross(f, up))
    u = np.cross(s, f)
    m = np.identity(4)
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -float(np.dot(s, eye))
    m[1, 3] = -float(np.dot(u, eye))
    m[2, 3] = float(np.dot(f, eye))
    return m


class FirstPersonCamera:
    """Camera with a position and a forward/up/right frame."""

    def __init__(
        self,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        forward: Sequence[float] = (0.0, 0.0, -1.0),
        up: Sequence[float] = (0.0, 1.0, 0.0),
    ) -> None:
        self.position = np.asarray(position, dtype=float).copy()
        self.forward = _normalize(np.asarray(forward, dtype=float))
        self.up = _normalize(np.asarray(up, dtype=float))
        self.right = _normalize(np.cross(self.forward, self.up))
        self.view_matrix = np.identity(4)
        self.update()

    def update(self) -> None:
        """Recompute the view matrix from the position and orientation."""
        self.view_matrix = _look_at(self.position, self.position + self.forward, self.up)

    def process_mouse_motion(
        self, new_x: float, new_y: float, prev_x: float, prev_y: float, dt: float
    ) -> None:
        """Turn the camera by a mouse move; jumps of 200 pixels or more are ignored."""
        change_x = float(new_x - prev_x)
        change_y = float(new_y - prev_y)
        if abs(change_x) >= _MAX_JUMP or abs(change_y) >= _MAX_JUMP:
            return

        pitch = _SENSITIVITY * change_y
        yaw = _SENSITIVITY * change_x

        self.forward = _normalize(self.forward)
        self.forward = _rotate(self.forward, math.radians(yaw), self.up)

        self.right = _normalize(np.cross(self.forward, self.up))

        self.forward = _normalize(_rotate(self.forward, math.radians(pitch), self.right))
        self.up = _normalize(self.up)