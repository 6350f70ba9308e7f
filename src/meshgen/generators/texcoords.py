"""Texture coordinate builders, one per shape family.

Each builder fills ``mesh.tex_coords`` and ``mesh.tex_coord_indices`` in
place. Builders for wrapped surfaces compute the longitude with ``atan2``
mapped to ``[0, 1]``; when a triangle crosses the seam, a corner that
wrapped to 0 is moved to 1 so the triangle does not span the whole
texture.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from ..core.mesh import Mesh
from ..core.primitive import Sphere

# Longitudes below this snap to exactly 0
SEAM_EPSILON = 1.0e-6


class TexCoordAccumulator:
    """Collects texture points, reusing an existing point when it matches.

    Lookup is a linear scan over all points emitted so far. Primitive
    tessellations produce at most a few hundred points, so the quadratic
    cost stays small and the coordinate array stays compact.
    """

    def __init__(self, tolerance: float = 1.0e-6) -> None:
        self.tolerance = tolerance
        self.points: list[tuple[float, float]] = []
        self.indices: list[int] = []

    def find(self, point: tuple[float, float]) -> int:
        for i, (u, v) in enumerate(self.points):
            if abs(u - point[0]) <= self.tolerance and abs(v - point[1]) <= self.tolerance:
                return i
        return -1

    def add(self, u: float, v: float) -> int:
        """Append a corner referencing ``(u, v)`` and return its index."""
        point = (float(u), float(v))
        index = self.find(point)
        if index < 0:
            index = len(self.points)
            self.points.append(point)
        self.indices.append(index)
        return index

    def add_index(self, index: int) -> None:
        """Append a corner that references an already known point."""
        self.indices.append(index)

    def apply(self, mesh: Mesh) -> None:
        mesh.set_tex_coords(self.points, self.indices)


def _longitude(x: float, z: float) -> float:
    """Angle around the Y axis mapped to [0, 1]."""
    return (math.atan2(x, z) + math.pi) / 2.0 / math.pi


def _wrap_seam(s: list[float]) -> list[float]:
    over = any(value > 0.5 for value in s)
    wrapped = []
    for value in s:
        if value < SEAM_EPSILON:
            value = 0.0
        if value > 1.0:
            value = 1.0
        if over and value == 0.0:
            value = 1.0
        wrapped.append(value)
    return wrapped


# Four atlas corners shared by all box faces
_BOX_TEX_COORDS = [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)]

# Corner permutation per box triangle, in generation order
_BOX_TEX_COORD_INDICES = [
    (3, 2, 0), (0, 1, 3),
    (1, 2, 0), (1, 3, 2),
    (3, 2, 0), (3, 0, 1),
    (2, 0, 1), (2, 1, 3),
    (0, 1, 3), (0, 3, 2),
    (2, 1, 3), (2, 0, 1),
]


def build_box_tex_coords(mesh: Mesh) -> None:
    """Map the full texture onto each face of a generated box."""
    mesh.set_tex_coords(_BOX_TEX_COORDS, _BOX_TEX_COORD_INDICES)


def build_sphere_tex_coords(mesh: Mesh) -> None:
    """Equirectangular mapping with the seam duplicated."""
    vertices = mesh.vertices
    if isinstance(mesh.primitive, Sphere):
        radius = mesh.primitive.radius
    else:
        radius = float(np.linalg.norm(vertices, axis=1).max()) if len(vertices) else 0.0

    acc = TexCoordAccumulator()
    for face in mesh.faces:
        points = vertices[face]
        s = _wrap_seam([_longitude(p[0], p[2]) for p in points])
        for j, p in enumerate(points):
            w = p[1] / radius if radius > 0.0 else 0.0
            w = min(max(w, -1.0), 1.0)
            acc.add(s[j], 1.0 - math.acos(w) / math.pi)
    acc.apply(mesh)


def build_cylinder_tex_coords(mesh: Mesh) -> None:
    """Side unwrapped by longitude, caps mapped radially.

    Point 0 is reserved for the cap centers.
    """
    vertices = mesh.vertices
    acc = TexCoordAccumulator()
    acc.points.append((0.5, 0.5))

    for face in mesh.faces:
        points = vertices[face]
        is_side = any(points[0][1] != p[1] for p in points[1:])
        if is_side:
            s = _wrap_seam([_longitude(p[0], p[2]) for p in points])
            for j, p in enumerate(points):
                acc.add(s[j], 1.0 if p[1] > 0.0 else 0.0)
            continue

        is_top = points[0][1] > 0.0
        for p in points:
            if p[0] == 0.0 and p[2] == 0.0:
                acc.add_index(0)
                continue
            angle = math.atan2(p[2], p[0])
            if is_top:
                acc.add(0.5 + 0.5 * math.cos(angle), 0.5 - 0.5 * math.sin(angle))
            else:
                acc.add(0.5 + 0.5 * math.cos(angle), 0.5 + 0.5 * math.sin(angle))
    acc.apply(mesh)


def build_cone_tex_coords(mesh: Mesh) -> None:
    """Side unwrapped by longitude with the apex centered, base radial.

    Point 0 is reserved for the base center.
    """
    vertices = mesh.vertices
    acc = TexCoordAccumulator()
    acc.points.append((0.5, 0.5))

    for face in mesh.faces:
        points = vertices[face]
        top = -1
        for j, p in enumerate(points):
            if p[1] > 0.0:
                top = j

        if top >= 0:
            s = [0.0, 0.0, 0.0]
            previous = -1
            for j, p in enumerate(points):
                if j == top:
                    continue
                s[j] = _longitude(p[0], p[2])
                if previous != -1 and s[previous] > 0.5 and s[j] < SEAM_EPSILON:
                    s[j] = 1.0
                previous = j
            for j in range(3):
                if j == top:
                    acc.add(sum(s) / 2.0, 1.0)
                else:
                    acc.add(s[j], 0.0)
            continue

        for p in points:
            if p[0] == 0.0 and p[2] == 0.0:
                acc.add_index(0)
                continue
            angle = math.atan2(p[2], p[0])
            acc.add(0.5 + 0.5 * math.cos(angle), 0.5 + 0.5 * math.sin(angle))
    acc.apply(mesh)


def _chord_lengths(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Cumulative distance along a polyline, starting at 0."""
    if len(points) < 2:
        return np.zeros(len(points))
    segments = np.linalg.norm(np.diff(points, axis=0), axis=1)
    return np.concatenate([[0.0], np.cumsum(segments)])


def _normalized(values: NDArray[np.float64]) -> NDArray[np.float64]:
    total = values[-1] if len(values) else 0.0
    if total <= 0.0:
        return np.zeros_like(values)
    return values / total


def build_extrusion_tex_coords(
    mesh: Mesh,
    cross_section: Sequence[Sequence[float]],
    spine: Sequence[Sequence[float]],
    begin_cap_triangles: int = 0,
    end_cap_triangles: int = 0,
    end_cap_offset: int = 0,
) -> None:
    """Chord-length parametrization of a swept surface plus planar caps.

    The side block holds one point per (spine point, cross-section point)
    of the *unreduced* contours, so closed contours get a duplicated seam
    column or row. Cap points follow the side block, normalized by the
    cross-section's 2D bounding box; the end cap is mirrored in u so both
    caps read the same way from outside.

    Args:
        mesh: Extrusion mesh whose faces are sides, then begin cap, then
            end cap
        cross_section: Cross-section points as given in the descriptor
        spine: Spine points as given in the descriptor
        begin_cap_triangles: Number of triangles in the begin cap
        end_cap_triangles: Number of triangles in the end cap
        end_cap_offset: Index of the first vertex of the end ring
    """
    section = np.asarray(cross_section, dtype=np.float64).reshape(-1, 2)
    path = np.asarray(spine, dtype=np.float64).reshape(-1, 3)
    n_section = len(section)
    n_spine = len(path)

    s = _normalized(_chord_lengths(section))
    t = _normalized(_chord_lengths(path))
    points = [(s[j], t[i]) for i in range(n_spine) for j in range(n_section)]

    indices: list[int] = []
    for i in range(n_spine - 1):
        upper = i * n_section
        lower = (i + 1) * n_section
        for j in range(n_section - 1):
            jj = j + 1
            indices.extend([j + upper, j + lower, jj + lower])
            indices.extend([j + upper, jj + lower, jj + upper])

    if begin_cap_triangles or end_cap_triangles:
        xmin, zmin = section.min(axis=0)
        xmax, zmax = section.max(axis=0)
        xsize = (xmax - xmin) or 1.0
        zsize = (zmax - zmin) or 1.0

        faces = mesh.faces
        end_cap_start = len(faces) - end_cap_triangles
        begin_cap_start = end_cap_start - begin_cap_triangles

        if begin_cap_triangles:
            base = len(points)
            points.extend(((x - xmin) / xsize, (z - zmin) / zsize) for x, z in section)
            for face in faces[begin_cap_start:end_cap_start]:
                indices.extend(int(v) + base for v in face)

        if end_cap_triangles:
            base = len(points)
            points.extend(((xmax - x) / xsize, (z - zmin) / zsize) for x, z in section)
            for face in faces[end_cap_start:]:
                indices.extend(int(v) - end_cap_offset + base for v in face)

    mesh.set_tex_coords(points, indices)


def build_elevation_grid_tex_coords(
    mesh: Mesh, x_extent: float, z_extent: float
) -> None:
    """Map the grid's x/z extent linearly onto [0, 1]."""
    u = mesh.vertices[:, 0] / x_extent if x_extent else np.zeros(mesh.vertex_count)
    v = mesh.vertices[:, 2] / z_extent if z_extent else np.zeros(mesh.vertex_count)
    mesh.set_tex_coords(np.column_stack([u, v]), mesh.faces.copy())


def build_indexed_face_set_tex_coords(mesh: Mesh) -> None:
    """Project onto the two largest bounding-box extents.

    The longest axis maps to [0, 1] in u; the second axis is scaled by the
    same factor so the texture keeps its aspect ratio.
    """
    vertices = mesh.vertices
    if len(vertices) == 0:
        mesh.set_tex_coords(np.empty((0, 2)), mesh.faces.copy())
        return

    lower = vertices.min(axis=0)
    size = vertices.max(axis=0) - lower

    if size[0] >= size[1]:
        if size[0] >= size[2]:
            s_axis, t_axis = 0, (1 if size[1] >= size[2] else 2)
        else:
            s_axis, t_axis = 2, 0
    else:
        if size[1] >= size[2]:
            s_axis, t_axis = 1, (0 if size[0] >= size[2] else 2)
        else:
            s_axis, t_axis = 2, 1

    if size[s_axis] > 0.0:
        u = (vertices[:, s_axis] - lower[s_axis]) / size[s_axis]
        v = (vertices[:, t_axis] - lower[t_axis]) / size[s_axis]
    else:
        u = v = np.zeros(len(vertices))
    mesh.set_tex_coords(np.column_stack([u, v]), mesh.faces.copy())
