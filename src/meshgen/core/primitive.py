"""Analytic shape descriptors attached to tessellated meshes.

Consumers that prefer exact shapes (collision, physics) can read the
primitive instead of the triangles. Only the closed set of kinds below is
recognised; freeform meshes carry no primitive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class PrimitiveKind(Enum):
    """Kinds of analytic primitives."""

    BOX = "box"
    SPHERE = "sphere"
    CYLINDER = "cylinder"
    CONE = "cone"
    CAPSULE = "capsule"


@dataclass(frozen=True)
class Box:
    """Axis-aligned box with full extents ``size``."""

    size: tuple[float, float, float] = (1.0, 1.0, 1.0)
    kind: PrimitiveKind = field(default=PrimitiveKind.BOX, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", tuple(float(s) for s in self.size))


@dataclass(frozen=True)
class Sphere:
    radius: float = 1.0
    kind: PrimitiveKind = field(default=PrimitiveKind.SPHERE, init=False)


@dataclass(frozen=True)
class Cylinder:
    radius: float = 1.0
    height: float = 1.0
    kind: PrimitiveKind = field(default=PrimitiveKind.CYLINDER, init=False)


@dataclass(frozen=True)
class Cone:
    radius: float = 1.0
    height: float = 1.0
    kind: PrimitiveKind = field(default=PrimitiveKind.CONE, init=False)


@dataclass(frozen=True)
class Capsule:
    """Cylinder of ``height`` with hemispherical ends of ``radius``."""

    radius: float = 1.0
    height: float = 1.0
    kind: PrimitiveKind = field(default=PrimitiveKind.CAPSULE, init=False)


Primitive = Union[Box, Sphere, Cylinder, Cone, Capsule]
