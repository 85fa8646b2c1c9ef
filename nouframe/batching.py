"""Batched immediate-mode drawing of lines, triangles and points."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Optional, Sequence

import numpy as np

from nouframe.camera import ortho_matrix, perspective_matrix

BLACK = (0.0, 0.0, 0.0, 1.0)
WHITE = (1.0, 1.0, 1.0, 1.0)
_BLUE = (0.0, 0.0, 1.0, 1.0)
_RED = (1.0, 0.0, 0.0, 1.0)

_GRID_HALF_LINES = 10


class PrimitiveMode(IntEnum):
    """How a batch's vertices are assembled; values match the GL enums."""

    POINTS = 0
    LINES = 1
    TRIANGLES = 4


class AlignMode(Enum):
    """Which axis points up when drawing a ground grid."""

    Y_UP = "y_up"
    Z_UP = "z_up"


@dataclass(frozen=True)
class Vertex:
    """A coloured vertex; ``size`` is only used for points."""

    position: tuple[float, float, float]
    color: tuple[float, float, float, float]
    size: Optional[float] = None


Sink = Callable[[PrimitiveMode, tuple, np.ndarray], None]


def _vec3(values: Sequence[float]) -> tuple[float, float, float]:
    x, y, z = (float(v) for v in values)
    return (x, y, z)


def _vec4(values: Sequence[float]) -> tuple[float, float, float, float]:
    r, g, b, a = (float(v) for v in values)
    return (r, g, b, a)


class Batch:
    """A bounded list of vertices drawn together with one primitive mode."""

    def __init__(self, mode: PrimitiveMode, capacity: int, sink: Optional[Sink] = None) -> None:
        if capacity <= 0:
            raise ValueError("batch capacity must be positive")
        self.mode = PrimitiveMode(mode)
        self.capacity = capacity
        self.sink = sink
        self._vertices: list[Vertex] = []

    def __len__(self) -> int:
        return len(self._vertices)

    @property
    def is_full(self) -> bool:
        return len(self._vertices) >= self.capacity

    @property
    def vertices(self) -> tuple[Vertex, ...]:
        return tuple(self._vertices)

    def append(self, vertex: Vertex) -> None:
        """Add a vertex; raises OverflowError if the batch is already full."""
        if self.is_full:
            raise OverflowError(f"{self.mode.name.lower()} batch is full")
        self._vertices.append(vertex)

    def flush(self, view_projection: np.ndarray) -> int:
        """Hand the pending vertices to the sink and clear; returns how many."""
        count = len(self._vertices)
        if count == 0:
            return 0
        if self.sink is not None:
            self.sink(self.mode, tuple(self._vertices), np.array(view_projection, copy=True))
        self._vertices.clear()
        return count


class Context:
    """Collects debug geometry into batches and flushes them to a sink."""

    MAX_TRI_VERTS = 6000
    MAX_LINE_VERTS = 6000
    MAX_POINT_VERTS = 6000

    def __init__(self, sink: Optional[Sink] = None) -> None:
        self.sink = sink
        self.window_width = 800
        self.window_height = 600
        self.viewport = (0, 0, self.window_width, self.window_height)
        self._projection = ortho_matrix(0.0, 800.0, 0.0, 600.0, -1.0, 1.0)
        self._view = np.identity(4)
        self.tris = Batch(PrimitiveMode.TRIANGLES, self.MAX_TRI_VERTS, sink)
        self.lines = Batch(PrimitiveMode.LINES, self.MAX_LINE_VERTS, sink)
        self.points = Batch(PrimitiveMode.POINTS, self.MAX_POINT_VERTS, sink)

    def set_window_size(self, width: int, height: int) -> None:
        if width != self.window_width or height != self.window_height:
            self.viewport = (0, 0, width, height)
        self.window_width = width
        self.window_height = height

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        self.window_width = width
        self.window_height = height
        self.viewport = (x, y, width, height)

    def ortho_projection(self) -> np.ndarray:
        """Pixel-space projection with the origin at the top-left corner."""
        return ortho_matrix(
            0.0, float(self.window_width), float(self.window_height), 0.0, -100.0, 100.0
        )

    @property
    def projection(self) -> np.ndarray:
        return self._projection.copy()

    @projection.setter
    def projection(self, matrix: np.ndarray) -> None:
        self._projection = np.array(matrix, dtype=float).reshape(4, 4)

    @property
    def view(self) -> np.ndarray:
        return self._view.copy()

    @view.setter
    def view(self, matrix: np.ndarray) -> None:
        self._view = np.array(matrix, dtype=float).reshape(4, 4)

    @property
    def view_projection(self) -> np.ndarray:
        """Projection times view."""
        return self._projection @ self._view

    def _add(self, batch: Batch, vertices: Sequence[Vertex]) -> None:
        for vertex in vertices:
            batch.append(vertex)
        if batch.is_full:
            batch.flush(self.view_projection)

    def add_line(self, a: Sequence[float], b: Sequence[float], color: Sequence[float]) -> None:
        c = _vec4(color)
        self._add(self.lines, [Vertex(_vec3(a), c), Vertex(_vec3(b), c)])

    def add_tri(
        self,
        a: Sequence[float],
        b: Sequence[float],
        c: Sequence[float],
        color: Sequence[float],
    ) -> None:
        col = _vec4(color)
        self._add(
            self.tris, [Vertex(_vec3(a), col), Vertex(_vec3(b), col), Vertex(_vec3(c), col)]
        )

    def add_quad(self, low: Sequence[float], high: Sequence[float], color: Sequence[float]) -> None:
        """Two triangles spanning ``low`` to ``high`` in the plane z = low.z."""
        lo, hi = _vec3(low), _vec3(high)
        min_x_max_y = (lo[0], hi[1], lo[2])
        max_x_min_y = (hi[0], lo[1], lo[2])
        self.add_tri(lo, max_x_min_y, min_x_max_y, color)
        self.add_tri(max_x_min_y, hi, min_x_max_y, color)

    def add_point(self, pos: Sequence[float], size: float, color: Sequence[float]) -> None:
        self._add(self.points, [Vertex(_vec3(pos), _vec4(color), float(size))])

    def flush(self) -> None:
        """Draw all pending triangles, then lines, then points."""
        vp = self.view_projection
        self.tris.flush(vp)
        self.lines.flush(vp)
        self.points.flush(vp)


def set_camera_mode_2d(context: Context, width: int, height: int) -> None:
    """Pixel-space orthographic camera with y pointing down."""
    context.set_window_size(width, height)
    context.projection = ortho_matrix(0.0, float(width), float(height), 0.0, -100.0, 100.0)


def set_camera_mode_3d(context: Context, width: int, height: int, fov: float) -> None:
    """Perspective camera; the projection is kept if the size is not positive."""
    context.set_window_size(width, height)
    if width > 0 and height > 0:
        context.projection = perspective_matrix(
            math.radians(fov), float(width) / float(height), 0.001, 1000.0
        )


def draw_grid(context: Context, grid_width: float, mode: AlignMode = AlignMode.Y_UP) -> None:
    """Ground grid of 21 by 21 lines, axis lines highlighted."""
    grid_min = -_GRID_HALF_LINES * grid_width
    grid_max = _GRID_HALF_LINES * grid_width
    z_up = mode is AlignMode.Z_UP
    y_up = mode is AlignMode.Y_UP

    def place(along: float, value: float) -> tuple[float, float, float]:
        return (along, value if z_up else 0.0, value if y_up else 0.0)

    steps = range(-_GRID_HALF_LINES, _GRID_HALF_LINES + 1)
    for x in steps:
        context.add_line(
            place(x * grid_width, grid_min),
            place(x * grid_width, grid_max),
            _BLUE if x == 0 else BLACK,
        )
        for y in steps:
            context.add_line(
                place(grid_min, y * grid_width),
                place(grid_max, y * grid_width),
                _RED if y == 0 else BLACK,
            )


def draw_line(
    context: Context,
    p0: Sequence[float],
    p1: Sequence[float],
    colour: Optional[Sequence[float]] = None,
) -> None:
    context.add_line(p0, p1, BLACK if colour is None else colour)


def draw_vector(
    context: Context,
    origin: Sequence[float],
    vector: Sequence[float],
    colour: Optional[Sequence[float]] = None,
) -> None:
    """A unit-length line from ``origin`` in the direction of ``vector``."""
    direction = np.asarray(vector, dtype=float)
    length = float(np.linalg.norm(direction))
    if length == 0.0:
        raise ValueError("cannot draw a zero-length vector")
    start = np.asarray(origin, dtype=float)
    context.add_line(start, start + direction / length, BLACK if colour is None else colour)


def draw_point(
    context: Context,
    p0: Sequence[float],
    size: float,
    colour: Optional[Sequence[float]] = None,
) -> None:
    context.add_point(p0, size, BLACK if colour is None else colour)