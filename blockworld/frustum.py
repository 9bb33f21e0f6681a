"""View-frustum planes and bounding-volume tests for culling."""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence
from dataclasses import dataclass

Vec3 = tuple[float, float, float]


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


@dataclass(frozen=True)
class Plane:
    """Plane ``normal . p + distance = 0``; the normal points inward."""

    normal: Vec3 = (0.0, 0.0, 0.0)
    distance: float = 0.0

    def signed_distance(self, point: Sequence[float]) -> float:
        return _dot(self.normal, point) + self.distance

    def normalized(self) -> Plane:
        """Copy with a unit normal; a zero normal is left unchanged."""
        length = math.sqrt(_dot(self.normal, self.normal))
        if length == 0.0:
            return self
        nx, ny, nz = self.normal
        return Plane((nx / length, ny / length, nz / length), self.distance / length)


@dataclass(frozen=True)
class AABB:
    """Axis-aligned box between two corners."""

    minimum: Vec3
    maximum: Vec3

    def center(self) -> Vec3:
        lo, hi = self.minimum, self.maximum
        return ((lo[0] + hi[0]) * 0.5, (lo[1] + hi[1]) * 0.5, (lo[2] + hi[2]) * 0.5)

    def extents(self) -> Vec3:
        lo, hi = self.minimum, self.maximum
        return ((hi[0] - lo[0]) * 0.5, (hi[1] - lo[1]) * 0.5, (hi[2] - lo[2]) * 0.5)

    def contains(self, point: Sequence[float]) -> bool:
        return all(lo <= p <= hi for lo, p, hi in zip(self.minimum, point, self.maximum))

    def intersects(self, other: AABB) -> bool:
        return all(
            lo <= other_hi and hi >= other_lo
            for lo, hi, other_lo, other_hi in zip(self.minimum, self.maximum, other.minimum, other.maximum)
        )


class PlaneIndex(enum.IntEnum):
    LEFT = 0
    RIGHT = 1
    BOTTOM = 2
    TOP = 3
    NEAR = 4
    FAR = 5


class Frustum:
    """Six clipping planes extracted from a view-projection matrix.

    The matrix is given as four rows of four numbers, in the usual
    mathematical orientation (points are column vectors).
    """

    def __init__(self, view_projection: Sequence[Sequence[float]] | None = None) -> None:
        self._planes: list[Plane] = [Plane() for _ in PlaneIndex]
        if view_projection is not None:
            self.update(view_projection)

    def update(self, view_projection: Sequence[Sequence[float]]) -> None:
        """Recompute the planes from a new matrix."""
        rows = [tuple(float(v) for v in row) for row in view_projection]
        if len(rows) != 4 or any(len(row) != 4 for row in rows):
            raise ValueError("view_projection must be a 4x4 matrix")
        w = rows[3]
        planes = []
        for axis in range(3):
            row = rows[axis]
            for sign in (1.0, -1.0):
                a, b, c, d = (w[k] + sign * row[k] for k in range(4))
                planes.append(Plane((a, b, c), d).normalized())
        self._planes = planes

    @property
    def planes(self) -> tuple[Plane, ...]:
        return tuple(self._planes)

    def contains_point(self, point: Sequence[float]) -> bool:
        return all(plane.signed_distance(point) >= 0.0 for plane in self._planes)

    def contains_aabb(self, bounds: AABB) -> bool:
        """True unless the box lies wholly outside one plane."""
        center = bounds.center()
        ex, ey, ez = bounds.extents()
        for plane in self._planes:
            nx, ny, nz = plane.normal
            r = ex * abs(nx) + ey * abs(ny) + ez * abs(nz)
            if plane.signed_distance(center) + r < 0.0:
                return False
        return True

    def contains_sphere(self, center: Sequence[float], radius: float) -> bool:
        return all(plane.signed_distance(center) >= -radius for plane in self._planes)

    def plane(self, index: PlaneIndex | int) -> Plane:
        return self._planes[PlaneIndex(index)]