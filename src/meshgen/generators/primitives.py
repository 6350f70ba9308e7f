"""Primitive geometry generators.

One function per shape. Each takes the shape parameters plus the active
``GeneratorConfig`` and returns a new ``Mesh``, or ``None`` when the
parameters cannot produce a valid surface. Round shapes are built around
the Y axis and centered at the origin.
"""

from __future__ import annotations

import math

import numpy as np

from ..core.mesh import Mesh
from ..core.node import SceneNode, integrate
from ..core.primitive import Box, Capsule, Cone, Cylinder, Sphere
from .base import any_negative, finish_mesh, reject
from .config import DEFAULT_CONFIG, GeneratorConfig
from .texcoords import (
    build_box_tex_coords,
    build_cone_tex_coords,
    build_cylinder_tex_coords,
    build_sphere_tex_coords,
)

# Curved shapes need at least this many divisions around the axis
MIN_DIVISION_NUMBER = 4

# Crease angles used for normal generation
HARD = 0.0
ROUNDED = math.pi / 2.0
SMOOTH = math.pi

_BOX_FACES = [
    (0, 1, 2), (2, 3, 0),
    (0, 5, 1), (0, 4, 5),
    (1, 5, 6), (1, 6, 2),
    (2, 6, 7), (2, 7, 3),
    (3, 7, 4), (3, 4, 0),
    (4, 6, 5), (4, 7, 6),
]


def _ring(radius: float, y: float, count: int) -> list[list[float]]:
    """Points on a circle around the Y axis, starting at +X toward +Z."""
    points = []
    for i in range(count):
        angle = i * 2.0 * math.pi / count
        points.append([radius * math.cos(angle), y, radius * math.sin(angle)])
    return points


def _too_coarse(shape: str, config: GeneratorConfig) -> bool:
    if config.division_number < MIN_DIVISION_NUMBER:
        reject(shape, "division number %d is below %d",
               config.division_number, MIN_DIVISION_NUMBER)
        return True
    return False


def generate_box(
    size,
    config: GeneratorConfig = DEFAULT_CONFIG,
    tex_coords: bool = False,
) -> Mesh | None:
    """Generate an axis-aligned box centered at the origin.

    Args:
        size: Full extents (x, y, z)
        config: Active generator config
        tex_coords: Whether to build texture coordinates

    Returns:
        Mesh with 8 vertices and 12 triangles, or None unless ``size`` holds
        three non-negative extents
    """
    size = np.asarray(size, dtype=np.float64)
    if size.shape != (3,):
        return reject("box", "size must have 3 components, got %s", size.tolist())
    if any_negative(*size):
        return reject("box", "negative size %s", size.tolist())

    x, y, z = size / 2.0
    vertices = [
        [x, y, z], [-x, y, z], [-x, -y, z], [x, -y, z],
        [x, y, -z], [-x, y, -z], [-x, -y, -z], [x, -y, -z],
    ]
    mesh = Mesh(vertices=vertices, faces=_BOX_FACES, primitive=Box(tuple(size)))
    finish_mesh(mesh, config, HARD)

    if tex_coords:
        build_box_tex_coords(mesh)
    return mesh


def _pole_fans_and_bands(
    faces: list[tuple[int, int, int]],
    ring_count: int,
    hdn: int,
    top_index: int,
    bottom_index: int,
) -> None:
    """Connect ``ring_count`` stacked rings of ``hdn`` points and two poles."""
    for i in range(hdn):
        faces.append((top_index, (i + 1) % hdn, i))

    for i in range(ring_count - 1):
        upper = i * hdn
        lower = (i + 1) * hdn
        for j in range(hdn):
            j_next = (j + 1) % hdn
            faces.append((j + upper, j_next + lower, j + lower))
            faces.append((j + upper, j_next + upper, j_next + lower))

    offset = (ring_count - 1) * hdn
    for i in range(hdn):
        faces.append((bottom_index, i + offset, (i + 1) % hdn + offset))


def generate_sphere(
    radius: float,
    config: GeneratorConfig = DEFAULT_CONFIG,
    tex_coords: bool = False,
) -> Mesh | None:
    """Generate a UV sphere with single pole vertices.

    ``division_number // 2`` latitude bands and ``division_number``
    longitude samples; the pole vertices are appended after the rings.
    """
    if any_negative(radius):
        return reject("sphere", "negative radius %s", radius)
    if _too_coarse("sphere", config):
        return None

    vdn = config.division_number // 2  # latitudinal division number
    hdn = config.division_number  # longitudinal division number

    vertices = []
    for i in range(1, vdn):
        tv = i * math.pi / vdn
        for j in range(hdn):
            th = j * 2.0 * math.pi / hdn
            vertices.append([
                radius * math.sin(tv) * math.cos(th),
                radius * math.cos(tv),
                radius * math.sin(tv) * math.sin(th),
            ])

    top_index = len(vertices)
    vertices.append([0.0, radius, 0.0])
    bottom_index = len(vertices)
    vertices.append([0.0, -radius, 0.0])

    faces: list[tuple[int, int, int]] = []
    _pole_fans_and_bands(faces, vdn - 1, hdn, top_index, bottom_index)

    mesh = Mesh(vertices=vertices, faces=faces, primitive=Sphere(radius))
    finish_mesh(mesh, config, SMOOTH)

    if tex_coords:
        build_sphere_tex_coords(mesh)
    return mesh


def generate_cylinder(
    radius: float,
    height: float,
    config: GeneratorConfig = DEFAULT_CONFIG,
    bottom: bool = True,
    top: bool = True,
    side: bool = True,
    tex_coords: bool = False,
) -> Mesh | None:
    """Generate a cylinder along Y with optional caps and side.

    Vertex layout: top ring, bottom ring, top center, bottom center. The
    center vertices are kept even when their cap is disabled.
    """
    if any_negative(radius, height):
        return reject("cylinder", "negative radius %s or height %s", radius, height)
    if _too_coarse("cylinder", config):
        return None
    if not (bottom or top or side):
        return reject("cylinder", "every face group is disabled")

    n = config.division_number
    y = height / 2.0
    vertices = _ring(radius, y, n) + _ring(radius, -y, n)

    top_center = len(vertices)
    vertices.append([0.0, y, 0.0])
    bottom_center = len(vertices)
    vertices.append([0.0, -y, 0.0])

    faces = []
    for i in range(n):
        i_next = (i + 1) % n
        if top:
            faces.append((top_center, i_next, i))
        if side:
            faces.append((i, i_next + n, i + n))
            faces.append((i, i_next, i_next + n))
        if bottom:
            faces.append((bottom_center, i + n, i_next + n))

    mesh = Mesh(vertices=vertices, faces=faces, primitive=Cylinder(radius, height))
    finish_mesh(mesh, config, ROUNDED)

    if tex_coords:
        build_cylinder_tex_coords(mesh)
    return mesh


def generate_cone(
    radius: float,
    height: float,
    config: GeneratorConfig = DEFAULT_CONFIG,
    bottom: bool = True,
    side: bool = True,
    tex_coords: bool = False,
) -> Mesh | None:
    """Generate a cone along Y with its apex at ``+height/2``.

    Vertex layout: base ring, apex, base center.
    """
    if any_negative(radius, height):
        return reject("cone", "negative radius %s or height %s", radius, height)
    if _too_coarse("cone", config):
        return None
    if not (bottom or side):
        return reject("cone", "every face group is disabled")

    n = config.division_number
    vertices = _ring(radius, -height / 2.0, n)

    apex = len(vertices)
    vertices.append([0.0, height / 2.0, 0.0])
    bottom_center = len(vertices)
    vertices.append([0.0, -height / 2.0, 0.0])

    faces = []
    for i in range(n):
        i_next = (i + 1) % n
        if side:
            faces.append((apex, i_next, i))
        if bottom:
            faces.append((bottom_center, i, i_next))

    mesh = Mesh(vertices=vertices, faces=faces, primitive=Cone(radius, height))
    finish_mesh(mesh, config, ROUNDED)

    if tex_coords:
        build_cone_tex_coords(mesh)
    return mesh


def generate_capsule(
    radius: float,
    height: float,
    config: GeneratorConfig = DEFAULT_CONFIG,
) -> Mesh | None:
    """Generate a capsule: a sphere split at the equator and pulled apart.

    The latitude band count is rounded up to an even number so that the
    equator falls on a ring, which is then duplicated at ``+height/2`` and
    ``-height/2``. There is no texture mapping for capsules.
    """
    if any_negative(radius, height):
        return reject("capsule", "negative radius %s or height %s", radius, height)
    if _too_coarse("capsule", config):
        return None

    vdn = config.division_number // 2  # latitudinal division number
    if vdn % 2:
        vdn += 1
    hdn = config.division_number  # longitudinal division number

    vertices = []
    for i in range(1, vdn + 1):
        if i <= vdn // 2:
            y = height / 2.0
            tv = i * math.pi / vdn
        else:
            y = -height / 2.0
            tv = (i - 1) * math.pi / vdn
        for j in range(hdn):
            th = j * 2.0 * math.pi / hdn
            vertices.append([
                radius * math.sin(tv) * math.cos(th),
                radius * math.cos(tv) + y,
                radius * math.sin(tv) * math.sin(th),
            ])

    top_index = len(vertices)
    vertices.append([0.0, radius + height / 2.0, 0.0])
    bottom_index = len(vertices)
    vertices.append([0.0, -radius - height / 2.0, 0.0])

    faces: list[tuple[int, int, int]] = []
    _pole_fans_and_bands(faces, vdn, hdn, top_index, bottom_index)

    mesh = Mesh(vertices=vertices, faces=faces, primitive=Capsule(radius, height))
    return finish_mesh(mesh, config, ROUNDED)


def generate_disc(
    radius: float,
    inner_radius: float,
    config: GeneratorConfig = DEFAULT_CONFIG,
) -> Mesh | None:
    """Generate a flat annulus in the XZ plane.

    Inner and outer ring points are interleaved. All triangle corners
    share the single normal ``+Z`` regardless of the normal generation
    setting.
    """
    if inner_radius <= 0.0 or radius <= inner_radius:
        return reject("disc", "invalid radii (outer %s, inner %s)", radius, inner_radius)
    if _too_coarse("disc", config):
        return None

    n = config.division_number
    vertices = []
    for i in range(n):
        angle = i * 2.0 * math.pi / n
        x = math.cos(angle)
        z = math.sin(angle)
        vertices.append([inner_radius * x, 0.0, inner_radius * z])
        vertices.append([radius * x, 0.0, radius * z])

    faces = []
    for i in range(n):
        current = i * 2
        following = ((i + 1) % n) * 2
        faces.append((current, current + 1, following + 1))
        faces.append((current, following + 1, following))

    mesh = Mesh(
        vertices=vertices,
        faces=faces,
        normals=[[0.0, 0.0, 1.0]],
        normal_indices=np.zeros((len(faces), 3), dtype=np.int64),
    )
    return finish_mesh(mesh, config, None)


def generate_torus(
    radius: float,
    cross_section_radius: float,
    config: GeneratorConfig = DEFAULT_CONFIG,
    begin_angle: float = 0.0,
    end_angle: float = 2.0 * math.pi,
) -> Mesh | None:
    """Generate a torus around the Y axis, optionally as a partial sweep.

    A full sweep (``begin_angle <= 0`` and ``end_angle >= 2pi``) closes
    on itself. A partial sweep gets one extra ring so that both end angles
    are sampled; its open ends are not capped.

    Args:
        radius: Distance from the Y axis to the tube center
        cross_section_radius: Radius of the tube
        config: Active generator config
        begin_angle: Sweep start in radians
        end_angle: Sweep end in radians
    """
    if any_negative(radius, cross_section_radius):
        return reject("torus", "negative radius %s or cross-section radius %s",
                      radius, cross_section_radius)
    if end_angle <= begin_angle:
        return reject("torus", "empty sweep %s..%s", begin_angle, end_angle)

    full_sweep = begin_angle <= 0.0 and end_angle >= 2.0 * math.pi
    # Small bias so whole fractions of a turn are not truncated by rounding
    phi_count = int(config.division_number * end_angle / (2.0 * math.pi) + 1e-9)
    theta_count = config.division_number // 4
    if phi_count < 1 or theta_count < 2:
        return reject("torus", "division number %d is too coarse for the sweep",
                      config.division_number)

    phi_step = (end_angle - begin_angle) / phi_count
    if not full_sweep:
        phi_count += 1

    vertices = []
    for i in range(phi_count):
        phi = begin_angle + i * phi_step
        for j in range(theta_count):
            theta = j * 2.0 * math.pi / theta_count
            r = cross_section_radius * math.cos(theta) + radius
            vertices.append([
                math.cos(phi) * r,
                cross_section_radius * math.sin(theta),
                math.sin(phi) * r,
            ])

    band_count = phi_count if full_sweep else phi_count - 1
    faces = []
    for i in range(band_count):
        current = i * theta_count
        following = ((i + 1) % phi_count) * theta_count
        for j in range(theta_count):
            j_next = (j + 1) % theta_count
            faces.append((current + j, following + j_next, following + j))
            faces.append((current + j, current + j_next, following + j_next))

    mesh = Mesh(vertices=vertices, faces=faces)
    return finish_mesh(mesh, config, SMOOTH)


def generate_arrow(
    cylinder_radius: float,
    cylinder_height: float,
    cone_radius: float,
    cone_height: float,
    config: GeneratorConfig = DEFAULT_CONFIG,
) -> Mesh | None:
    """Generate an arrow pointing along +Y.

    The shaft is a cylinder centered at the origin with a bottom cap and
    an open top; the cone head sits on top of the shaft. Both parts are
    placed in a group and integrated into one mesh.
    """
    head = generate_cone(cone_radius, cone_height, config)
    shaft = generate_cylinder(cylinder_radius, cylinder_height, config, bottom=True, top=False)
    if head is None or shaft is None:
        return reject("arrow", "a component could not be generated")

    group = SceneNode("arrow")
    head_node = group.add_child(SceneNode("head", mesh=head))
    head_node.transform.translation = np.array(
        [0.0, cylinder_height / 2.0 + cone_height / 2.0, 0.0]
    )
    group.add_child(SceneNode("shaft", mesh=shaft))

    arrow = integrate(group)
    if config.bounding_box_update:
        arrow.update_bounding_box()
    return arrow
