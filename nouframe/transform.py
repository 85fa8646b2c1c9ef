"""Object transforms with basic parent/child hierarchy support."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np


def translation_matrix(offset: Sequence[float]) -> np.ndarray:
    """Return a 4x4 matrix translating by ``offset``."""
    matrix = np.identity(4)
    matrix[:3, 3] = np.asarray(offset, dtype=float)[:3]
    return matrix


def scale_matrix(factors: Sequence[float]) -> np.ndarray:
    """Return a 4x4 matrix scaling by ``factors`` along x, y and z."""
    matrix = np.identity(4)
    matrix[[0, 1, 2], [0, 1, 2]] = np.asarray(factors, dtype=float)[:3]
    return matrix


def quaternion_matrix(quaternion: Sequence[float]) -> np.ndarray:
    """Return the 4x4 rotation matrix of a quaternion given as (w, x, y, z).

    The quaternion is used as given; it is not normalised here.
    """
    w, x, y, z = (float(c) for c in quaternion)
    matrix = np.identity(4)
    matrix[:3, :3] = [
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ]
    return matrix


def _normalized(quaternion: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(quaternion))
    if length <= 0.0:
        return np.array([1.0, 0.0, 0.0, 0.0])
    return quaternion / length


class Transform:
    """Position, rotation and scale of an object, with a parent and children."""

    def __init__(self) -> None:
        self.pos = np.zeros(3)
        self.scale = np.ones(3)
        self.rotation = np.array([1.0, 0.0, 0.0, 0.0])
        self._parent: Optional[Transform] = None
        self._children: list[Transform] = []
        self._global = np.identity(4)

    @property
    def parent(self) -> Optional["Transform"]:
        """The parent transform, or None."""
        return self._parent

    @parent.setter
    def parent(self, parent: Optional["Transform"]) -> None:
        if self._parent is not None:
            self._parent._remove_child(self)
        self._parent = parent
        if parent is not None:
            parent._children.append(self)

    @property
    def children(self) -> tuple["Transform", ...]:
        """The child transforms, in the order they were attached."""
        return tuple(self._children)

    def _remove_child(self, child: "Transform") -> None:
        for index, existing in enumerate(self._children):
            if existing is child:
                del self._children[index]
                return

    def _local(self, normalize: bool) -> np.ndarray:
        rotation = np.asarray(self.rotation, dtype=float)
        if normalize:
            rotation = _normalized(rotation)
        return (
            translation_matrix(self.pos)
            @ quaternion_matrix(rotation)
            @ scale_matrix(self.scale)
        )

    def do_fk(self) -> None:
        """Update the global matrix of this transform and all its descendants."""
        local = self._local(normalize=True)
        if self._parent is not None:
            self._global = self._parent._global @ local
        else:
            self._global = local
        for child in list(self._children):
            child.do_fk()

    def recompute_global(self) -> np.ndarray:
        """Recompute the global matrix up the parent chain and return it."""
        local = self._local(normalize=False)
        if self._parent is not None:
            self._global = self._parent.recompute_global() @ local
        else:
            self._global = local
        return self._global.copy()

    @property
    def global_matrix(self) -> np.ndarray:
        """The last computed global matrix."""
        return self._global.copy()

    def normal_matrix(self) -> np.ndarray:
        """The 3x3 matrix used to transform normals."""
        upper = self._global[:3, :3]
        sx, sy, sz = (float(s) for s in self.scale)
        if sx == sy and sx == sz:
            return upper.copy()
        return np.linalg.inv(upper.T)

    def detach(self) -> None:
        """Remove this transform from its parent."""
        self.parent = None