"""Ear-clipping triangulation of planar polygons in 3D."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .geometry import polygon_normal


def _cross_2d(o: NDArray[np.float64], a: NDArray[np.float64], b: NDArray[np.float64]) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _point_in_triangle(p, a, b, c) -> bool:
    """Inclusive test for a point inside a CCW triangle."""
    return _cross_2d(a, b, p) >= 0 and _cross_2d(b, c, p) >= 0 and _cross_2d(c, a, p) >= 0


class Triangulator:
    """Splits a polygon given as vertex indices into triangles.

    The polygon is projected onto its own plane (Newell normal), so the
    returned triangles keep the winding of the input polygon: a polygon
    listed counter-clockwise when seen from one side yields triangles
    that are counter-clockwise from the same side.

    Example:
        triangulator = Triangulator(mesh.vertices)
        for a, b, c in triangulator.triangulate([0, 1, 2, 3]):
            ...
    """

    def __init__(self, vertices: NDArray[np.float64]) -> None:
        self.vertices = np.asarray(vertices, dtype=np.float64)

    def triangulate(self, polygon: list[int]) -> list[tuple[int, int, int]]:
        """Triangulate a simple polygon.

        Args:
            polygon: Vertex indices in boundary order

        Returns:
            Triangles as positions into ``polygon`` (not vertex indices).
            A convex n-gon gives n - 2 triangles; a polygon with zero area
            gives none.
        """
        n = len(polygon)
        if n < 3:
            return []

        points = self.vertices[list(polygon)]
        normal = polygon_normal(points)
        length = np.linalg.norm(normal)
        if length < 1e-12:
            return []
        if n == 3:
            return [(0, 1, 2)]

        points_2d = self._project(points, normal / length)
        return self._clip_ears(points_2d)

    @staticmethod
    def _project(points: NDArray[np.float64], normal: NDArray[np.float64]) -> NDArray[np.float64]:
        """Project onto a plane basis (u, v) with u × v = normal."""
        helper = np.array([1.0, 0.0, 0.0])
        if abs(normal[0]) > 0.9:
            helper = np.array([0.0, 1.0, 0.0])
        u = np.cross(helper, normal)
        u /= np.linalg.norm(u)
        v = np.cross(normal, u)
        centered = points - points.mean(axis=0)
        return np.column_stack([centered @ u, centered @ v])

    @staticmethod
    def _clip_ears(points: NDArray[np.float64]) -> list[tuple[int, int, int]]:
        """Ear clipping for a counter-clockwise 2D polygon."""
        remaining = list(range(len(points)))
        triangles: list[tuple[int, int, int]] = []

        while len(remaining) > 3:
            m = len(remaining)
            ear = None
            for pos in range(m):
                prev_idx = remaining[(pos - 1) % m]
                idx = remaining[pos]
                next_idx = remaining[(pos + 1) % m]
                a, b, c = points[prev_idx], points[idx], points[next_idx]

                # Reflex or collinear corners are never ears
                if _cross_2d(a, b, c) <= 1e-12:
                    continue

                blocked = False
                for other in remaining:
                    if other in (prev_idx, idx, next_idx):
                        continue
                    if _point_in_triangle(points[other], a, b, c):
                        blocked = True
                        break
                if not blocked:
                    ear = pos
                    break

            # Numerically awkward input: clip the first corner to keep going
            if ear is None:
                ear = 0

            prev_idx = remaining[(ear - 1) % m]
            next_idx = remaining[(ear + 1) % m]
            triangles.append((prev_idx, remaining[ear], next_idx))
            del remaining[ear]

        triangles.append((remaining[0], remaining[1], remaining[2]))
        return triangles
