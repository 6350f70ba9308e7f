"""MeshGenerator: one entry point per shape with shared settings."""

from __future__ import annotations

import math
from dataclasses import replace

from ..core.mesh import LineSet, Mesh
from .config import DEFAULT_CONFIG, DEFAULT_DIVISION_NUMBER, GeneratorConfig
from .elevation import ElevationGrid, generate_elevation_grid
from .extrusion import (
    Extrusion,
    generate_extrusion,
    generate_extrusion_line_set,
    generate_extrusion_tex_coords,
)
from .primitives import (
    generate_arrow,
    generate_box,
    generate_capsule,
    generate_cone,
    generate_cylinder,
    generate_disc,
    generate_sphere,
    generate_torus,
)
from . import texcoords


class MeshGenerator:
    """Generates meshes for primitive shapes.

    Settings live in an immutable ``GeneratorConfig``. The setters below
    swap in an updated copy, so each call works on one consistent
    snapshot and the generator keeps no reference to the meshes it
    returns.

    Every ``generate_*`` method returns ``None`` when its parameters are
    invalid; callers must check before use.

    Example:
        generator = MeshGenerator()
        generator.division_number = 32
        sphere = generator.generate_sphere(1.0, tex_coords=True)
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config if config is not None else DEFAULT_CONFIG

    @staticmethod
    def default_division_number() -> int:
        return DEFAULT_DIVISION_NUMBER

    @property
    def division_number(self) -> int:
        return self.config.division_number

    @division_number.setter
    def division_number(self, n: int) -> None:
        self.config = self.config.with_division_number(n)

    @property
    def normal_generation_enabled(self) -> bool:
        return self.config.normal_generation

    @normal_generation_enabled.setter
    def normal_generation_enabled(self, on: bool) -> None:
        self.config = replace(self.config, normal_generation=bool(on))

    @property
    def bounding_box_update_enabled(self) -> bool:
        return self.config.bounding_box_update

    @bounding_box_update_enabled.setter
    def bounding_box_update_enabled(self, on: bool) -> None:
        self.config = replace(self.config, bounding_box_update=bool(on))

    # Shapes

    def generate_box(self, size, tex_coords: bool = False) -> Mesh | None:
        return generate_box(size, self.config, tex_coords=tex_coords)

    def generate_sphere(self, radius: float, tex_coords: bool = False) -> Mesh | None:
        return generate_sphere(radius, self.config, tex_coords=tex_coords)

    def generate_cylinder(
        self,
        radius: float,
        height: float,
        bottom: bool = True,
        top: bool = True,
        side: bool = True,
        tex_coords: bool = False,
    ) -> Mesh | None:
        return generate_cylinder(
            radius, height, self.config,
            bottom=bottom, top=top, side=side, tex_coords=tex_coords,
        )

    def generate_cone(
        self,
        radius: float,
        height: float,
        bottom: bool = True,
        side: bool = True,
        tex_coords: bool = False,
    ) -> Mesh | None:
        return generate_cone(
            radius, height, self.config, bottom=bottom, side=side, tex_coords=tex_coords
        )

    def generate_capsule(self, radius: float, height: float) -> Mesh | None:
        return generate_capsule(radius, height, self.config)

    def generate_disc(self, radius: float, inner_radius: float) -> Mesh | None:
        return generate_disc(radius, inner_radius, self.config)

    def generate_torus(
        self,
        radius: float,
        cross_section_radius: float,
        begin_angle: float = 0.0,
        end_angle: float = 2.0 * math.pi,
    ) -> Mesh | None:
        return generate_torus(
            radius, cross_section_radius, self.config,
            begin_angle=begin_angle, end_angle=end_angle,
        )

    def generate_arrow(
        self,
        cylinder_radius: float,
        cylinder_height: float,
        cone_radius: float,
        cone_height: float,
    ) -> Mesh | None:
        return generate_arrow(
            cylinder_radius, cylinder_height, cone_radius, cone_height, self.config
        )

    def generate_extrusion(self, extrusion: Extrusion, tex_coords: bool = False) -> Mesh | None:
        return generate_extrusion(extrusion, self.config, tex_coords=tex_coords)

    def generate_extrusion_line_set(self, extrusion: Extrusion, mesh: Mesh) -> LineSet | None:
        return generate_extrusion_line_set(extrusion, mesh)

    def generate_elevation_grid(
        self, grid: ElevationGrid, tex_coords: bool = False
    ) -> Mesh | None:
        return generate_elevation_grid(grid, self.config, tex_coords=tex_coords)

    # Texture coordinates for existing meshes

    def generate_tex_coords_for_box(self, mesh: Mesh) -> None:
        texcoords.build_box_tex_coords(mesh)

    def generate_tex_coords_for_sphere(self, mesh: Mesh) -> None:
        texcoords.build_sphere_tex_coords(mesh)

    def generate_tex_coords_for_cylinder(self, mesh: Mesh) -> None:
        texcoords.build_cylinder_tex_coords(mesh)

    def generate_tex_coords_for_cone(self, mesh: Mesh) -> None:
        texcoords.build_cone_tex_coords(mesh)

    def generate_tex_coords_for_extrusion(self, mesh: Mesh, extrusion: Extrusion) -> Mesh | None:
        return generate_extrusion_tex_coords(extrusion, mesh)

    def generate_tex_coords_for_elevation_grid(self, mesh: Mesh, grid: ElevationGrid) -> None:
        texcoords.build_elevation_grid_tex_coords(mesh, grid.x_extent, grid.z_extent)

    def generate_tex_coords_for_indexed_face_set(self, mesh: Mesh) -> None:
        texcoords.build_indexed_face_set_tex_coords(mesh)
