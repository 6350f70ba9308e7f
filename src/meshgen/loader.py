"""YAML loader for shape definitions."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Callable

import numpy as np
import yaml

from .core.mesh import Mesh
from .core.node import SceneNode, integrate
from .core.transform import Transform
from .generators.elevation import ElevationGrid
from .generators.extrusion import Extrusion
from .generators.generator import MeshGenerator

logger = logging.getLogger(__name__)

ShapeBuilder = Callable[[MeshGenerator, dict[str, Any], bool], "Mesh | None"]


def _box(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_box(params.get("size", [1.0, 1.0, 1.0]), tex_coords=tex_coords)


def _sphere(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_sphere(params.get("radius", 1.0), tex_coords=tex_coords)


def _cylinder(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_cylinder(
        params.get("radius", 1.0),
        params.get("height", 1.0),
        bottom=params.get("bottom", True),
        top=params.get("top", True),
        side=params.get("side", True),
        tex_coords=tex_coords,
    )


def _cone(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_cone(
        params.get("radius", 1.0),
        params.get("height", 1.0),
        bottom=params.get("bottom", True),
        side=params.get("side", True),
        tex_coords=tex_coords,
    )


def _capsule(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_capsule(params.get("radius", 1.0), params.get("height", 1.0))


def _disc(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_disc(params.get("radius", 1.0), params.get("inner_radius", 0.5))


def _torus(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_torus(
        params.get("radius", 1.0),
        params.get("cross_section_radius", 0.25),
        begin_angle=params.get("begin_angle", 0.0),
        end_angle=params.get("end_angle", 2.0 * math.pi),
    )


def _arrow(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_arrow(
        params.get("cylinder_radius", 0.05),
        params.get("cylinder_height", 0.8),
        params.get("cone_radius", 0.1),
        params.get("cone_height", 0.2),
    )


def _extrusion(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_extrusion(Extrusion(**params), tex_coords=tex_coords)


def _elevation_grid(generator: MeshGenerator, params: dict[str, Any], tex_coords: bool) -> Mesh | None:
    return generator.generate_elevation_grid(ElevationGrid(**params), tex_coords=tex_coords)


# Registry of shape types: type name -> (builder, supports texture coordinates)
SHAPE_REGISTRY: dict[str, tuple[ShapeBuilder, bool]] = {
    "box": (_box, True),
    "sphere": (_sphere, True),
    "cylinder": (_cylinder, True),
    "cone": (_cone, True),
    "capsule": (_capsule, False),
    "disc": (_disc, False),
    "torus": (_torus, False),
    "arrow": (_arrow, False),
    "extrusion": (_extrusion, True),
    "elevation_grid": (_elevation_grid, True),
}


class ShapeLoader:
    """Loads shape definitions from YAML into a SceneNode hierarchy.

    YAML format:
    ```yaml
    name: signpost
    shapes:
      post:
        type: cylinder
        params: {radius: 0.05, height: 2.0, top: false}
        tex_coords: true
      arrow:
        type: arrow
        translation: [0.0, 1.2, 0.0]
        rotation: [0, 0, 1, -1.5708]   # axis-angle, radians
        scale: [1, 1, 1]
    ```
    """

    def __init__(self, generator: MeshGenerator | None = None) -> None:
        """Initialize the loader.

        Args:
            generator: Generator whose settings apply to every shape.
                Defaults to a generator with the default config.
        """
        self.generator = generator if generator is not None else MeshGenerator()

    def load(self, path: str | Path) -> SceneNode:
        """Load a shape definition file.

        Args:
            path: Path to the YAML file

        Returns:
            Root SceneNode with one child per shape

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the definition is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Shape definition not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f)

        return self._build_hierarchy(data)

    def load_string(self, yaml_string: str) -> SceneNode:
        """Load a shape definition from a YAML string."""
        data = yaml.safe_load(yaml_string)
        return self._build_hierarchy(data)

    def load_mesh(self, path: str | Path) -> Mesh:
        """Load a definition file and integrate it into a single mesh."""
        return integrate(self.load(path))

    def _build_hierarchy(self, data: dict[str, Any] | None) -> SceneNode:
        if not isinstance(data, dict):
            raise ValueError("Shape definition must be a mapping")

        root = SceneNode(data.get("name", "shapes"))
        shapes = data.get("shapes", {})
        if not isinstance(shapes, dict):
            raise ValueError("'shapes' must map shape names to definitions")

        for shape_name, shape_def in shapes.items():
            root.add_child(self._create_node(shape_name, shape_def))

        logger.debug("Loaded %d shapes into '%s'", len(root.children), root.name)
        return root

    def _create_node(self, name: str, shape_def: dict[str, Any]) -> SceneNode:
        if not isinstance(shape_def, dict):
            raise ValueError(f"Shape '{name}' must be a mapping")
        shape_type = shape_def.get("type")
        entry = SHAPE_REGISTRY.get(shape_type)
        if entry is None:
            raise ValueError(f"Unknown shape type for '{name}': {shape_type}")
        builder, supports_tex_coords = entry

        tex_coords = bool(shape_def.get("tex_coords", False))
        if tex_coords and not supports_tex_coords:
            logger.warning("Texture coordinates are not supported for %s '%s'", shape_type, name)
            tex_coords = False

        params = shape_def.get("params") or {}
        if not isinstance(params, dict):
            raise ValueError(f"Parameters of '{name}' must be a mapping")
        try:
            mesh = builder(self.generator, params, tex_coords)
        except TypeError as e:
            raise ValueError(f"Invalid parameters for '{name}': {e}") from e
        if mesh is None:
            raise ValueError(f"Shape '{name}' ({shape_type}) could not be generated from {params}")

        node = SceneNode(name, mesh=mesh)
        node.transform = Transform(
            translation=shape_def.get("translation", np.zeros(3)),
            rotation=shape_def.get("rotation", [0.0, 0.0, 1.0, 0.0]),
            scale=shape_def.get("scale", np.ones(3)),
        )
        return node
