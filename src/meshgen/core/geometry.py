"""Geometry utilities for face winding and normal computation.

The convention used across all generators is:

- Counter-clockwise winding (when viewed from outside) = outward normal
- For triangle (A, B, C), normal direction is (B-A) × (C-A)
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def compute_face_normals(
    vertices: NDArray[np.float64],
    faces: NDArray[np.int64],
) -> NDArray[np.float64]:
    """Compute unit normals for every triangle.

    Args:
        vertices: Nx3 vertex array
        faces: Mx3 triangle index array

    Returns:
        Mx3 array of unit normals; degenerate triangles get a zero vector
    """
    if len(faces) == 0:
        return np.empty((0, 3), dtype=np.float64)
    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    normals = np.cross(v1 - v0, v2 - v0)
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    return np.divide(
        normals, lengths, where=lengths > 1e-12, out=np.zeros_like(normals)
    )


def polygon_normal(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Compute the area-weighted normal of a (near) planar polygon.

    Uses Newell's method so that non-convex and slightly non-planar
    polygons still give a stable direction. The polygon appears
    counter-clockwise when viewed from the tip of the returned vector.

    Returns:
        Unnormalized normal; its length is twice the polygon area
    """
    current = np.asarray(points, dtype=np.float64)
    following = np.roll(current, -1, axis=0)
    return np.cross(current, following).sum(axis=0)


def verify_outward_normals(
    vertices: NDArray[np.float64],
    faces: NDArray[np.int64],
    center: NDArray[np.float64] | None = None,
) -> tuple[bool, list[int]]:
    """Verify that all face normals point outward from a center point.

    Args:
        vertices: Vertex array
        faces: Face index array (Nx3)
        center: Center point to measure "outward" from. If None, uses centroid.

    Returns:
        Tuple of (all_valid, list_of_bad_face_indices)
    """
    if center is None:
        center = vertices.mean(axis=0)

    normals = compute_face_normals(vertices, faces)
    face_centers = vertices[faces].mean(axis=1)
    outward = face_centers - center

    # Faces whose center coincides with the reference point are ignored
    valid = np.linalg.norm(outward, axis=1) > 1e-10
    dots = np.einsum("ij,ij->i", normals, outward)
    bad_faces = np.nonzero(valid & (dots < 0))[0].tolist()

    return len(bad_faces) == 0, bad_faces
