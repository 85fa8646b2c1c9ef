"""Frame timing and texture coordinates for sprite sheet animation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

_DEFAULT_FRAME_TIME = 1.0 / 60.0


@dataclass(frozen=True)
class SpriteCoordinates:
    """Pixel and normalised texture bounds of one sprite."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float
    u_min: float
    u_max: float
    v_min: float
    v_max: float


class SpriteSheetAnimation:
    """Steps through the sprites of a sheet according to per-frame durations."""

    def __init__(self) -> None:
        self.looping = True
        self.color = (1.0, 1.0, 1.0, 1.0)
        self._current = 0
        self._frame_time = 0.0
        self._lengths: list[float] = []
        self._coords: list[SpriteCoordinates] = []

    def slice(
        self,
        width: float,
        height: float,
        sprites_per_row: int,
        rows: int,
        anim_time: float,
    ) -> None:
        """Append the sprites of a ``width`` x ``height`` sheet, row by row."""
        if width <= 0 or height <= 0:
            raise ValueError("sheet dimensions must be positive")
        if sprites_per_row <= 0 or rows <= 0:
            raise ValueError("sheet must have at least one row and column")
        sprite_w = width / sprites_per_row
        sprite_h = height / rows
        frame_time = anim_time / (sprites_per_row * rows)
        if anim_time == 0.0:
            frame_time = _DEFAULT_FRAME_TIME
        for row in range(rows):
            for col in range(sprites_per_row):
                x_min = col * sprite_w
                y_min = row * sprite_h
                x_max = x_min + sprite_w
                y_max = y_min + sprite_h
                self._coords.append(
                    SpriteCoordinates(
                        x_min, x_max, y_min, y_max,
                        x_min / width, x_max / width,
                        y_min / height, y_max / height,
                    )
                )
                self._lengths.append(frame_time)

    def update(self, delta_time: float) -> None:
        """Advance the animation clock; at most one frame is stepped per call."""
        if not self._lengths:
            raise RuntimeError("sprite sheet has no frames")
        self._frame_time += delta_time
        if self._frame_time > self._lengths[self._current]:
            self._frame_time -= self._lengths[self._current]
            self._current += 1
            count = len(self._lengths)
            if self.looping:
                self._current %= count
            else:
                self._current = min(self._current, count - 1)

    def reset(self) -> None:
        """Go back to the first frame."""
        self._current = 0
        self._frame_time = 0.0

    @property
    def frame_lengths(self) -> list[float]:
        return list(self._lengths)

    @frame_lengths.setter
    def frame_lengths(self, times: Sequence[float]) -> None:
        if len(times) != len(self._lengths):
            raise ValueError("frame length count mismatch")
        self._lengths = [float(t) for t in times]

    def set_frame_length(self, frame: int, time: float) -> None:
        if not 0 <= frame < len(self._lengths):
            raise IndexError(f"Frame {frame} does not exist!")
        self._lengths[frame] = float(time)

    @property
    def frame_count(self) -> int:
        return len(self._coords)

    @property
    def current_frame(self) -> int:
        return self._current

    @property
    def current_coordinates(self) -> SpriteCoordinates:
        if not self._coords:
            raise RuntimeError("sprite sheet has no frames")
        return self._coords[self._current]

    def quad_uvs(self) -> list[tuple[float, float]]:
        """UVs for the quad corners: top-left, top-right, bottom-left, bottom-right."""
        c = self.current_coordinates
        return [
            (c.u_min, c.v_min),
            (c.u_max, c.v_min),
            (c.u_min, c.v_max),
            (c.u_max, c.v_max),
        ]