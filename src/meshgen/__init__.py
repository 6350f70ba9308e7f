"""Procedural mesh generation for primitive shapes."""

from .core import LineSet, Mesh, PrimitiveKind, SceneNode, integrate
from .generators import ElevationGrid, Extrusion, GeneratorConfig, MeshGenerator
from .loader import ShapeLoader

__all__ = [
    "Mesh",
    "LineSet",
    "PrimitiveKind",
    "SceneNode",
    "integrate",
    "GeneratorConfig",
    "MeshGenerator",
    "Extrusion",
    "ElevationGrid",
    "ShapeLoader",
]
