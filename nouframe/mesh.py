"""Vertex data of a 3D model, kept in per-attribute vertex buffers."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional, Sequence

import numpy as np


class Attrib(IntEnum):
    """Vertex attributes, numbered by their shader layout location."""

    POSITION = 0
    NORMAL = 1
    UV = 2
    JOINT_INFLUENCE = 3
    SKIN_WEIGHT = 4


def _as_elements(data: Sequence, width: int) -> np.ndarray:
    """Return ``data`` as a float32 array of shape (n, width)."""
    array = np.array(data, dtype=np.float32)
    if array.size == 0:
        return array.reshape(0, width)
    if array.ndim != 2 or array.shape[1] != width:
        raise ValueError(
            f"expected elements of {width} components, got shape {array.shape}"
        )
    return array


class VertexBuffer:
    """A block of per-vertex data with a fixed number of components per element."""

    def __init__(self, element_len: int, data: Sequence) -> None:
        if element_len <= 0:
            raise ValueError("element length must be positive")
        self.element_len = element_len
        self.start_index = 0
        self._data = np.zeros((0, element_len), dtype=np.float32)
        self.update(data)

    def update(self, data: Sequence) -> None:
        """Replace the buffer contents; the data must not be empty."""
        array = _as_elements(data, self.element_len)
        if len(array) == 0:
            raise ValueError("vertex buffer data must not be empty")
        self._data = array

    @property
    def length(self) -> int:
        """Number of elements in the buffer."""
        return len(self._data)

    @property
    def element_size(self) -> int:
        """Size of one element in bytes."""
        return self._data.itemsize * self.element_len

    @property
    def data(self) -> np.ndarray:
        """A copy of the buffer contents, shape (length, element_len)."""
        return self._data.copy()


class Mesh:
    """Positions, normals and texture coordinates of a model."""

    def __init__(self) -> None:
        self._verts = np.zeros((0, 3), dtype=np.float32)
        self._normals = np.zeros((0, 3), dtype=np.float32)
        self._uvs = np.zeros((0, 2), dtype=np.float32)
        self._buffers: dict[Attrib, VertexBuffer] = {}

    def _set_buffer(self, attrib: Attrib, width: int, data: np.ndarray) -> None:
        if len(data) == 0:
            self._buffers.pop(attrib, None)
            return
        existing = self._buffers.get(attrib)
        if existing is None:
            self._buffers[attrib] = VertexBuffer(width, data)
        else:
            existing.update(data)

    def set_verts(self, verts: Sequence) -> None:
        """Set vertex positions (3 components each)."""
        self._verts = _as_elements(verts, 3)
        self._set_buffer(Attrib.POSITION, 3, self._verts)

    def set_normals(self, normals: Sequence) -> None:
        """Set vertex normals (3 components each)."""
        self._normals = _as_elements(normals, 3)
        self._set_buffer(Attrib.NORMAL, 3, self._normals)

    def set_uvs(self, uvs: Sequence) -> None:
        """Set texture coordinates (2 components each)."""
        self._uvs = _as_elements(uvs, 2)
        self._set_buffer(Attrib.UV, 2, self._uvs)

    @property
    def verts(self) -> np.ndarray:
        return self._verts.copy()

    @property
    def normals(self) -> np.ndarray:
        return self._normals.copy()

    @property
    def uvs(self) -> np.ndarray:
        return self._uvs.copy()

    def buffer(self, attrib: Attrib) -> Optional[VertexBuffer]:
        """The vertex buffer for ``attrib``, or None if it has no data."""
        return self._buffers.get(attrib)