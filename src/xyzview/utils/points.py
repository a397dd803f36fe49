"""Point model shared by every processing stage.

A point carries float64 coordinates and either a full RGB color or none at
all. ``Point.color is None`` is the "absent" case; a ``Color`` instance is the
"present" case, so a partially colored point cannot be constructed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np


@dataclass(frozen=True)
class Color:
    """8-bit RGB color."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"Color channel {channel} must be an int, got {value!r}")
            if not 0 <= value <= 255:
                raise ValueError(f"Color channel {channel}={value} outside [0, 255]")
            object.__setattr__(self, channel, int(value))

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


RED = Color(255, 0, 0)
WHITE = Color(255, 255, 255)


@dataclass(frozen=True)
class Point:
    """Immutable point record: position plus optional color."""

    x: float
    y: float
    z: float
    color: Color | None = None

    def __post_init__(self) -> None:
        if self.color is not None and not isinstance(self.color, Color):
            raise ValueError(f"Point color must be a Color or None, got {self.color!r}")

    @classmethod
    def from_values(
        cls,
        x: float,
        y: float,
        z: float,
        r: int | None = None,
        g: int | None = None,
        b: int | None = None,
    ) -> Point:
        """Build a point from a nullable color triple.

        Raises:
            ValueError: if only some of r, g, b are given.
        """
        channels = (r, g, b)
        if all(c is None for c in channels):
            return cls(float(x), float(y), float(z))
        if any(c is None for c in channels):
            raise ValueError(f"Partially colored point: r={r}, g={g}, b={b}")
        return cls(float(x), float(y), float(z), Color(r, g, b))

    @property
    def has_color(self) -> bool:
        return self.color is not None

    @property
    def r(self) -> int | None:
        return self.color.r if self.color is not None else None

    @property
    def g(self) -> int | None:
        return self.color.g if self.color is not None else None

    @property
    def b(self) -> int | None:
        return self.color.b if self.color is not None else None

    def with_z(self, z: float) -> Point:
        """Return a copy with a new elevation."""
        return Point(self.x, self.y, float(z), self.color)

    def with_color(self, color: Color | None) -> Point:
        return Point(self.x, self.y, self.z, color)


def points_to_array(points: Sequence[Point]) -> np.ndarray:
    """Stack point positions into an (N, 3) float64 array."""
    if len(points) == 0:
        return np.zeros((0, 3), dtype=np.float64)
    return np.array([(p.x, p.y, p.z) for p in points], dtype=np.float64)


def count_colored(points: Iterable[Point]) -> int:
    return sum(1 for p in points if p.color is not None)


def bounding_box(points: Sequence[Point]) -> tuple[list[float], list[float]] | None:
    """Return (min_xyz, max_xyz) of the cloud, or None for an empty cloud."""
    if len(points) == 0:
        return None
    xyz = points_to_array(points)
    return xyz.min(axis=0).tolist(), xyz.max(axis=0).tolist()
