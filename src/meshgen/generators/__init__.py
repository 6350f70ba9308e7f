"""Geometry generators."""

from .config import DEFAULT_DIVISION_NUMBER, GeneratorConfig, load_config
from .elevation import ElevationGrid, generate_elevation_grid
from .extrusion import (
    Extrusion,
    generate_extrusion,
    generate_extrusion_line_set,
    generate_extrusion_tex_coords,
)
from .generator import MeshGenerator
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

__all__ = [
    "DEFAULT_DIVISION_NUMBER",
    "GeneratorConfig",
    "load_config",
    "MeshGenerator",
    "Extrusion",
    "ElevationGrid",
    "generate_box",
    "generate_sphere",
    "generate_cylinder",
    "generate_cone",
    "generate_capsule",
    "generate_disc",
    "generate_torus",
    "generate_arrow",
    "generate_extrusion",
    "generate_extrusion_line_set",
    "generate_extrusion_tex_coords",
    "generate_elevation_grid",
]
