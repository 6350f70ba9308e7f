"""Extrusion generator: sweeps a 2D cross-section along a 3D spine."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.transform import Rotation

from ..core.mesh import LineSet, Mesh
from ..core.transform import axis_angle_rotation
from ..core.triangulator import Triangulator
from .base import finish_mesh, reject
from .config import DEFAULT_CONFIG, GeneratorConfig
from .texcoords import build_extrusion_tex_coords

logger = logging.getLogger(__name__)


def _default_cross_section() -> list[list[float]]:
    return [[1.0, 1.0], [1.0, -1.0], [-1.0, -1.0], [-1.0, 1.0], [1.0, 1.0]]


def _default_spine() -> list[list[float]]:
    return [[0.0, 0.0, 0.0], [0.0, 1.0, 0.0]]


@dataclass
class Extrusion:
    """Parameters of a swept surface.

    The cross-section lives in the local XZ plane and is carried along the
    spine, with the spine tangent as local Y. A contour whose first and
    last points are equal is treated as closed.

    Attributes:
        cross_section: 2D contour points
        spine: 3D path points
        scale: One (x, z) scale for all spine points or one per point
        orientation: One axis-angle rotation (ax, ay, az, angle) for all
            spine points or one per point
        crease_angle: Crease angle for normal generation
        begin_cap: Whether to close the start of an open spine
        end_cap: Whether to close the end of an open spine
    """

    cross_section: NDArray[np.float64] = field(default_factory=_default_cross_section)
    spine: NDArray[np.float64] = field(default_factory=_default_spine)
    scale: NDArray[np.float64] = field(default_factory=lambda: [[1.0, 1.0]])
    orientation: NDArray[np.float64] = field(default_factory=lambda: [[0.0, 0.0, 1.0, 0.0]])
    crease_angle: float = 0.0
    begin_cap: bool = True
    end_cap: bool = True

    def __post_init__(self) -> None:
        self.cross_section = np.asarray(self.cross_section, dtype=np.float64).reshape(-1, 2)
        self.spine = np.asarray(self.spine, dtype=np.float64).reshape(-1, 3)
        self.scale = np.asarray(self.scale, dtype=np.float64).reshape(-1, 2)
        self.orientation = np.asarray(self.orientation, dtype=np.float64).reshape(-1, 4)

    @property
    def is_spine_closed(self) -> bool:
        return len(self.spine) > 1 and bool(np.array_equal(self.spine[0], self.spine[-1]))

    @property
    def is_cross_section_closed(self) -> bool:
        return len(self.cross_section) > 1 and bool(
            np.array_equal(self.cross_section[0], self.cross_section[-1])
        )

    @property
    def spine_size(self) -> int:
        """Spine points that get a ring; a closed spine drops its repeated end."""
        return len(self.spine) - (1 if self.is_spine_closed else 0)

    @property
    def section_size(self) -> int:
        """Cross-section points per ring."""
        return len(self.cross_section) - (1 if self.is_cross_section_closed else 0)


def _spine_axes(
    spine: NDArray[np.float64], count: int, closed: bool
) -> tuple[list[NDArray[np.float64]], list[NDArray[np.float64]], int]:
    """Tangent and binormal candidates for each effective spine point.

    Returns:
        Tuple of (y_axes, z_axes, first_defined) where ``first_defined`` is
        the index of the first point with a non-degenerate binormal, or -1
        when the spine is straight
    """
    y_axes: list[NDArray[np.float64]] = []
    z_axes: list[NDArray[np.float64]] = []
    first_defined = -1

    if count == 2:
        tangent = spine[1] - spine[0]
        return [tangent, tangent], [np.zeros(3), np.zeros(3)], first_defined

    previous_z = np.zeros(3)
    for i in range(count):
        if i == 0:
            if closed:
                before, here, after = spine[count - 1], spine[0], spine[1]
                y = after - before
            else:
                before, here, after = spine[0], spine[1], spine[2]
                y = here - before
        elif i == count - 1:
            if closed:
                before, here, after = spine[count - 2], spine[count - 1], spine[0]
                y = after - before
            else:
                before, here, after = spine[count - 3], spine[count - 2], spine[count - 1]
                y = after - here
        else:
            before, here, after = spine[i - 1], spine[i], spine[i + 1]
            y = after - before
        z = np.cross(after - here, before - here)

        if np.linalg.norm(z) < 1e-12:
            # Collinear segments: keep the last valid binormal if any
            if first_defined != -1:
                z = previous_z
        else:
            if first_defined == -1:
                first_defined = i
            previous_z = z

        y_axes.append(y)
        z_axes.append(z)

    return y_axes, z_axes, first_defined


def _straight_frame(y: NDArray[np.float64]) -> NDArray[np.float64]:
    """Rotation taking +Y onto the tangent ``y`` (unit length)."""
    axis = np.array([y[2], 0.0, -y[0]])
    length = np.linalg.norm(axis)
    if length < 1e-12:
        if y[1] >= 0.0:
            return np.eye(3)
        return Rotation.from_rotvec([math.pi, 0.0, 0.0]).as_matrix()
    angle = math.acos(min(max(y[1], -1.0), 1.0))
    return Rotation.from_rotvec(axis / length * angle).as_matrix()


def _normalized(v: NDArray[np.float64]) -> NDArray[np.float64]:
    length = np.linalg.norm(v)
    return v / length if length > 0.0 else v


def _spine_frames(spine: NDArray[np.float64], count: int, closed: bool) -> list[NDArray[np.float64]]:
    """Orthonormal frames (columns x, y, z) along the spine."""
    y_axes, z_axes, first_defined = _spine_axes(spine, count, closed)

    frames = []
    for i in range(count):
        y = _normalized(y_axes[i])
        if first_defined == -1:
            frames.append(_straight_frame(y))
            continue

        if i < first_defined:
            z_axes[i] = z_axes[first_defined]
        # Keep the binormal on the same side to avoid a half turn twist
        if i and np.dot(z_axes[i], z_axes[i - 1]) < 0.0:
            z_axes[i] = -z_axes[i]
        z = _normalized(z_axes[i])
        x = np.cross(y, z)
        frames.append(np.column_stack([x, y, z]))
    return frames


def _per_point(values: NDArray[np.float64], count: int) -> bool:
    """Whether a scale/orientation list is usable for ``count`` points."""
    return len(values) <= 1 or len(values) >= count


def generate_extrusion(
    extrusion: Extrusion,
    config: GeneratorConfig = DEFAULT_CONFIG,
    tex_coords: bool = False,
) -> Mesh | None:
    """Sweep the cross-section along the spine.

    Vertices are laid out ring by ring, one ring per effective spine
    point. Faces are the side quads (two triangles each), then the begin
    cap, then the end cap.

    Args:
        extrusion: Extrusion parameters
        config: Active generator config
        tex_coords: Whether to build texture coordinates

    Returns:
        The swept mesh, or None when fewer than two usable spine or
        cross-section points remain
    """
    spine = extrusion.spine
    cross_section = extrusion.cross_section
    spine_closed = extrusion.is_spine_closed
    section_closed = extrusion.is_cross_section_closed

    spine_size = extrusion.spine_size
    section_size = extrusion.section_size
    if spine_size < 2 or section_size < 2:
        return reject("extrusion", "%d spine and %d cross-section points are not enough",
                      spine_size, section_size)
    if not _per_point(extrusion.scale, spine_size):
        return reject("extrusion", "%d scales for %d spine points",
                      len(extrusion.scale), spine_size)
    if not _per_point(extrusion.orientation, spine_size):
        return reject("extrusion", "%d orientations for %d spine points",
                      len(extrusion.orientation), spine_size)

    frames = _spine_frames(spine, spine_size, spine_closed)

    section = cross_section[:section_size]
    local = np.column_stack([section[:, 0], np.zeros(section_size), section[:, 1]])

    rings = []
    scale = np.array([1.0, 1.0])
    orientation = np.eye(3)
    for i in range(spine_size):
        if len(extrusion.scale) == 1:
            scale = extrusion.scale[0]
        elif len(extrusion.scale) > 1:
            scale = extrusion.scale[i]
        if len(extrusion.orientation) == 1:
            orientation = axis_angle_rotation(extrusion.orientation[0]).as_matrix()
        elif len(extrusion.orientation) > 1:
            orientation = axis_angle_rotation(extrusion.orientation[i]).as_matrix()

        scaled = local * np.array([scale[0], 0.0, scale[1]])
        rings.append((frames[i] @ orientation @ scaled.T).T + spine[i])
    vertices = np.vstack(rings)

    # Closed contours connect their last point back to the first
    spine_steps = spine_size if spine_closed else spine_size - 1
    section_steps = section_size if section_closed else section_size - 1

    faces = []
    for i in range(spine_steps):
        upper = i * section_size
        lower = ((i + 1) % spine_size) * section_size
        for j in range(section_steps):
            jj = (j + 1) % section_size
            faces.append((j + upper, j + lower, jj + lower))
            faces.append((j + upper, jj + lower, jj + upper))

    begin_cap_triangles = 0
    end_cap_triangles = 0
    end_ring_start = section_size * (spine_size - 1)
    if not spine_closed and (extrusion.begin_cap or extrusion.end_cap):
        triangulator = Triangulator(vertices)
        if extrusion.begin_cap:
            polygon = list(range(section_size))
            for a, b, c in triangulator.triangulate(polygon):
                faces.append((polygon[a], polygon[b], polygon[c]))
                begin_cap_triangles += 1
        if extrusion.end_cap:
            polygon = [end_ring_start + i for i in range(section_size)]
            for a, b, c in triangulator.triangulate(polygon):
                faces.append((polygon[a], polygon[c], polygon[b]))
                end_cap_triangles += 1

    mesh = Mesh(vertices=vertices, faces=faces)
    finish_mesh(mesh, config, extrusion.crease_angle)
    logger.debug("Extrusion: %d rings of %d points, caps %d/%d triangles",
                 spine_size, section_size, begin_cap_triangles, end_cap_triangles)

    if tex_coords:
        build_extrusion_tex_coords(
            mesh, cross_section, spine,
            begin_cap_triangles, end_cap_triangles, end_ring_start,
        )
    return mesh


def generate_extrusion_line_set(extrusion: Extrusion, mesh: Mesh) -> LineSet | None:
    """Wireframe of an extrusion mesh: ring edges plus spine rails.

    The line set shares ``mesh.vertices``; ``mesh`` must be the result of
    ``generate_extrusion`` for the same parameters.
    """
    spine_closed = extrusion.is_spine_closed
    section_closed = extrusion.is_cross_section_closed
    spine_size = extrusion.spine_size
    section_size = extrusion.section_size
    if spine_size < 2 or section_size < 2:
        return reject("extrusion line set", "%d spine and %d cross-section points are not enough",
                      spine_size, section_size)
    if mesh.vertex_count != spine_size * section_size:
        return reject("extrusion line set", "mesh has %d vertices, expected %d",
                      mesh.vertex_count, spine_size * section_size)

    section_steps = section_size if section_closed else section_size - 1
    rail_steps = spine_size if spine_closed else spine_size - 1

    lines = []
    for i in range(spine_size):
        offset = i * section_size
        for j in range(section_steps):
            lines.append((offset + j, offset + (j + 1) % section_size))
        if i < rail_steps:
            next_offset = ((i + 1) % spine_size) * section_size
            for j in range(section_size):
                lines.append((offset + j, next_offset + j))

    return LineSet(vertices=mesh.vertices, lines=lines)


def generate_extrusion_tex_coords(extrusion: Extrusion, mesh: Mesh) -> Mesh | None:
    """Build texture coordinates for a mesh made by ``generate_extrusion``.

    The cap triangle counts are read back from the mesh: faces after the
    side block that only use the first ring belong to the begin cap, the
    rest to the end cap.

    Returns:
        ``mesh`` with texture coordinates set, or None (mesh untouched)
        when it does not match the extrusion parameters
    """
    spine_size = extrusion.spine_size
    section_size = extrusion.section_size
    if spine_size < 2 or section_size < 2:
        return reject("extrusion tex coords", "%d spine and %d cross-section points are not enough",
                      spine_size, section_size)
    if mesh.vertex_count != spine_size * section_size:
        return reject("extrusion tex coords", "mesh has %d vertices, expected %d",
                      mesh.vertex_count, spine_size * section_size)

    spine_steps = spine_size if extrusion.is_spine_closed else spine_size - 1
    section_steps = section_size if extrusion.is_cross_section_closed else section_size - 1
    side_triangles = spine_steps * section_steps * 2
    if mesh.face_count < side_triangles:
        return reject("extrusion tex coords", "mesh has %d triangles, expected at least %d",
                      mesh.face_count, side_triangles)

    caps = mesh.faces[side_triangles:]
    begin_cap_triangles = int(np.count_nonzero(caps.max(axis=1) < section_size))
    build_extrusion_tex_coords(
        mesh, extrusion.cross_section, extrusion.spine,
        begin_cap_triangles, len(caps) - begin_cap_triangles,
        section_size * (spine_size - 1),
    )
    return mesh
