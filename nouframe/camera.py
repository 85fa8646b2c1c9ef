"""Camera component producing view and projection matrices."""

from __future__ import annotations

import math
from typing import Any, ClassVar, Optional

import numpy as np


def ortho_matrix(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> np.ndarray:
    """Right-handed orthographic projection mapping depth to [-1, 1]."""
    if right == left or top == bottom or far == near:
        raise ValueError("degenerate orthographic volume")
    m = np.identity(4)
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = -2.0 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    return m


def perspective_matrix(
    fov_y_radians: float, aspect: float, near: float, far: float
) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must be non-zero")
    if far == near:
        raise ValueError("near and far planes must differ")
    focal = 1.0 / math.tan(fov_y_radians / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = focal / aspect
    m[1, 1] = focal
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -(2.0 * far * near) / (far - near)
    m[3, 2] = -1.0
    return m


class Camera:
    """Camera attached to an entity; the first one created becomes current."""

    current: ClassVar[Optional[Any]] = None

    def __init__(self, owner: Any) -> None:
        if Camera.current is None:
            Camera.current = owner
        self._owner = owner
        self._projection = np.identity(4)
        self._view = np.identity(4)
        self._view_projection = np.identity(4)

    def update(self) -> None:
        """Recompute the view from the owner's transform."""
        self._view = np.linalg.inv(self._owner.transform.recompute_global())
        self._view_projection = self._projection @ self._view

    def ortho(
        self, left: float, right: float, bottom: float, top: float, near: float, far: float
    ) -> None:
        """Use an orthographic projection."""
        self._projection = ortho_matrix(left, right, bottom, top, near, far)
        self.update()

    def perspective(
        self, fov_y_degrees: float, aspect: float, near: float, far: float
    ) -> None:
        """Use a perspective projection with a vertical field of view in degrees."""
        self._projection = perspective_matrix(
            math.radians(fov_y_degrees), aspect, near, far
        )
        self.update()

    @property
    def view_projection(self) -> np.ndarray:
        """Projection times view."""
        return self._view_projection.copy()

    @property
    def view(self) -> np.ndarray:
        return self._view.copy()

    @property
    def projection(self) -> np.ndarray:
        return self._projection.copy()

    def close(self) -> None:
        """Stop being the current camera if this one is."""
        if Camera.current is self._owner:
            Camera.current = None