"""Shared helpers for mesh generators.

Every generator samples its surface, then hands the mesh to
``finish_mesh`` which applies the normal generation and bounding box
settings of the active config. Invalid parameters are reported through
``reject`` which logs the reason and returns ``None``.
"""

from __future__ import annotations

import logging

from ..core.mesh import Mesh
from ..core.normals import NormalGenerator
from .config import GeneratorConfig

logger = logging.getLogger(__name__)

_normal_generator = NormalGenerator()


def finish_mesh(mesh: Mesh, config: GeneratorConfig, crease_angle: float | None) -> Mesh:
    """Apply post-processing switched on in ``config``.

    Args:
        mesh: Freshly sampled mesh
        config: Active generator config
        crease_angle: Crease angle for normal generation, or None when the
            shape supplies its own normals

    Returns:
        The same mesh, for chaining
    """
    if config.normal_generation and crease_angle is not None:
        _normal_generator.generate_normals(mesh, crease_angle)
    if config.bounding_box_update:
        mesh.update_bounding_box()
    return mesh


def reject(shape: str, reason: str, *args: object) -> None:
    """Log why a shape could not be generated and return None."""
    logger.debug("Cannot generate %s: " + reason, shape, *args)
    return None


def any_negative(*values: float) -> bool:
    return any(v < 0.0 for v in values)
