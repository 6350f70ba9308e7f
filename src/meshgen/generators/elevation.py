"""Elevation grid generator for height-field terrain."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from ..core.mesh import Mesh
from .base import finish_mesh, reject
from .config import DEFAULT_CONFIG, GeneratorConfig
from .texcoords import build_elevation_grid_tex_coords


@dataclass
class ElevationGrid:
    """A regular height field over the XZ plane.

    Attributes:
        x_dimension: Number of samples along X
        z_dimension: Number of samples along Z
        x_spacing: Distance between samples along X
        z_spacing: Distance between samples along Z
        height: Row-major heights, ``height[z * x_dimension + x]``
        crease_angle: Crease angle for normal generation
        ccw: Winding of the triangles; True faces +Y for positive spacing
    """

    x_dimension: int = 0
    z_dimension: int = 0
    x_spacing: float = 1.0
    z_spacing: float = 1.0
    height: NDArray[np.float64] = field(default_factory=lambda: np.empty(0))
    crease_angle: float = 0.0
    ccw: bool = True

    def __post_init__(self) -> None:
        self.height = np.asarray(self.height, dtype=np.float64).ravel()

    @property
    def x_extent(self) -> float:
        return self.x_spacing * (self.x_dimension - 1)

    @property
    def z_extent(self) -> float:
        return self.z_spacing * (self.z_dimension - 1)


def generate_elevation_grid(
    grid: ElevationGrid,
    config: GeneratorConfig = DEFAULT_CONFIG,
    tex_coords: bool = False,
) -> Mesh | None:
    """Generate a lattice surface with two triangles per grid cell.

    Returns:
        Mesh, or None when the height count does not match the dimensions
        or the grid has fewer than 2 samples along an axis
    """
    if grid.x_dimension * grid.z_dimension != len(grid.height):
        return reject("elevation grid", "%d x %d grid with %d heights",
                      grid.x_dimension, grid.z_dimension, len(grid.height))
    if grid.x_dimension < 2 or grid.z_dimension < 2:
        return reject("elevation grid", "%d x %d grid has no cells",
                      grid.x_dimension, grid.z_dimension)

    xs, zs = np.meshgrid(
        np.arange(grid.x_dimension) * grid.x_spacing,
        np.arange(grid.z_dimension) * grid.z_spacing,
    )
    vertices = np.column_stack([xs.ravel(), grid.height, zs.ravel()])

    faces = []
    for z in range(grid.z_dimension - 1):
        current = z * grid.x_dimension
        following = (z + 1) * grid.x_dimension
        for x in range(grid.x_dimension - 1):
            if grid.ccw:
                faces.append((x + current, x + following, x + 1 + following))
                faces.append((x + current, x + 1 + following, x + 1 + current))
            else:
                faces.append((x + current, x + 1 + following, x + following))
                faces.append((x + current, x + 1 + current, x + 1 + following))

    mesh = Mesh(vertices=vertices, faces=faces)
    finish_mesh(mesh, config, grid.crease_angle)

    if tex_coords:
        build_elevation_grid_tex_coords(mesh, grid.x_extent, grid.z_extent)
    return mesh
