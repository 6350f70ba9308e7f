"""Crease-angle based normal generation."""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray

from .geometry import compute_face_normals
from .mesh import Mesh

logger = logging.getLogger(__name__)

# Fallback for corners where every contributing face is degenerate
_UP = np.array([0.0, 1.0, 0.0])


class NormalGenerator:
    """Generates per-corner normals that are smooth across soft edges.

    The normal at a triangle corner is the average of the triangle's own
    normal and the normals of the other triangles sharing that vertex
    whose angle to it is strictly below the crease angle. A crease angle
    of 0 keeps every face flat; pi smooths across everything short of a
    fold. Edges at exactly the crease angle (the rim of a cylinder with
    crease pi/2) stay hard.

    Equal corner normals are stored once, so a smooth vertex ends up with
    a single entry in the normal array.
    """

    def __init__(self, tolerance: float = 1e-6, decimals: int = 6) -> None:
        """Initialize the generator.

        Args:
            tolerance: Margin on the crease test so edges at exactly the
                crease angle are not smoothed
            decimals: Rounding used when merging equal normals
        """
        self.tolerance = tolerance
        self.decimals = decimals

    def generate_normals(self, mesh: Mesh, crease_angle: float) -> None:
        """Fill ``mesh.normals`` and ``mesh.normal_indices`` in place.

        After the call ``normal_indices`` has exactly one entry per
        triangle corner.

        Args:
            mesh: Mesh to update
            crease_angle: Dihedral threshold in radians
        """
        face_normals = compute_face_normals(mesh.vertices, mesh.faces)
        incident = self._incident_faces(mesh)
        cos_crease = math.cos(crease_angle) + self.tolerance

        normals: list[NDArray[np.float64]] = []
        lookup: dict[tuple[float, ...], int] = {}
        normal_indices = np.zeros_like(mesh.faces)

        for face_index, face in enumerate(mesh.faces):
            for corner, vertex in enumerate(face):
                others = [f for f in incident[vertex] if f != face_index]
                normal = self._corner_normal(
                    face_normals[face_index], face_normals[others], cos_crease
                )
                key = tuple(np.round(normal, self.decimals).tolist())
                index = lookup.get(key)
                if index is None:
                    index = len(normals)
                    lookup[key] = index
                    normals.append(normal)
                normal_indices[face_index, corner] = index

        mesh.set_normals(
            np.array(normals, dtype=np.float64).reshape(-1, 3), normal_indices
        )
        logger.debug(
            "Generated %d normals for %d triangles (crease %.3f)",
            len(normals), mesh.face_count, crease_angle,
        )

    @staticmethod
    def _incident_faces(mesh: Mesh) -> list[list[int]]:
        incident: list[list[int]] = [[] for _ in range(mesh.vertex_count)]
        for face_index, face in enumerate(mesh.faces):
            for vertex in set(face.tolist()):
                incident[vertex].append(face_index)
        return incident

    @staticmethod
    def _corner_normal(
        own: NDArray[np.float64],
        others: NDArray[np.float64],
        cos_crease: float,
    ) -> NDArray[np.float64]:
        if np.any(own):
            total = own + others[others @ own > cos_crease].sum(axis=0)
        else:
            # Degenerate triangle: borrow from every valid neighbor
            total = others.sum(axis=0)

        length = np.linalg.norm(total)
        if length > 1e-12:
            return total / length
        if np.any(own):
            return own.copy()
        return _UP.copy()
