"""Core geometry system components."""

from .transform import Transform
from .mesh import Mesh, LineSet
from .node import SceneNode, integrate
from .normals import NormalGenerator
from .primitive import Box, Capsule, Cone, Cylinder, Primitive, PrimitiveKind, Sphere
from .triangulator import Triangulator
from . import geometry

__all__ = [
    "Transform",
    "Mesh",
    "LineSet",
    "SceneNode",
    "integrate",
    "NormalGenerator",
    "Triangulator",
    "Primitive",
    "PrimitiveKind",
    "Box",
    "Sphere",
    "Cylinder",
    "Cone",
    "Capsule",
    "geometry",
]
