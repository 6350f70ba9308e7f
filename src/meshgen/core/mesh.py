"""Mesh class for generated geometry data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    import trimesh
    from .primitive import Primitive


def _index_array(indices) -> NDArray[np.int64]:
    return np.asarray(indices, dtype=np.int64).reshape(-1, 3)


class Mesh:
    """Container for triangulated mesh data.

    Vertices and triangles are always present. Normals and texture
    coordinates are indexed per triangle corner, so ``normal_indices`` and
    ``tex_coord_indices`` have the same shape as ``faces`` when set.
    """

    def __init__(
        self,
        vertices: NDArray[np.float64],
        faces: NDArray[np.int64],
        normals: NDArray[np.float64] | None = None,
        normal_indices: NDArray[np.int64] | None = None,
        tex_coords: NDArray[np.float64] | None = None,
        tex_coord_indices: NDArray[np.int64] | None = None,
        primitive: Primitive | None = None,
    ) -> None:
        """Create a mesh from geometry data.

        Args:
            vertices: Nx3 array of vertex positions
            faces: Mx3 array of triangle indices
            normals: Optional Kx3 array of unit normals
            normal_indices: Optional Mx3 array of indices into normals
            tex_coords: Optional Tx2 array of texture coordinates
            tex_coord_indices: Optional Mx3 array of indices into tex_coords
            primitive: Optional analytic shape descriptor
        """
        self.vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        self.faces = _index_array(faces)
        self.normals: NDArray[np.float64] | None = None
        self.normal_indices: NDArray[np.int64] | None = None
        self.tex_coords: NDArray[np.float64] | None = None
        self.tex_coord_indices: NDArray[np.int64] | None = None
        if normals is not None:
            self.set_normals(normals, normal_indices)
        if tex_coords is not None:
            self.set_tex_coords(tex_coords, tex_coord_indices)
        self.primitive = primitive
        self.bounds: NDArray[np.float64] | None = None

    @property
    def vertex_count(self) -> int:
        """Number of vertices in the mesh."""
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        """Number of faces (triangles) in the mesh."""
        return len(self.faces)

    @property
    def has_normals(self) -> bool:
        return self.normals is not None

    @property
    def has_tex_coords(self) -> bool:
        return self.tex_coords is not None

    def set_normals(self, normals, normal_indices=None) -> None:
        """Attach normals, defaulting to one normal per vertex."""
        self.normals = np.asarray(normals, dtype=np.float64).reshape(-1, 3)
        if normal_indices is None:
            normal_indices = self.faces.copy()
        self.normal_indices = _index_array(normal_indices)

    def set_tex_coords(self, tex_coords, tex_coord_indices=None) -> None:
        """Attach texture coordinates, defaulting to one point per vertex."""
        self.tex_coords = np.asarray(tex_coords, dtype=np.float64).reshape(-1, 2)
        if tex_coord_indices is None:
            tex_coord_indices = self.faces.copy()
        self.tex_coord_indices = _index_array(tex_coord_indices)

    def update_bounding_box(self) -> NDArray[np.float64] | None:
        """Recompute the axis-aligned bounds as a 2x3 ``[min, max]`` array."""
        if self.vertex_count == 0:
            self.bounds = None
        else:
            self.bounds = np.array(
                [self.vertices.min(axis=0), self.vertices.max(axis=0)]
            )
        return self.bounds

    def validate(self) -> None:
        """Check that every index array stays inside its target array.

        Raises:
            ValueError: If an index is out of range or a corner array does
                not match the triangle count
        """
        checks = [("faces", self.faces, self.vertex_count)]
        if self.normals is not None:
            checks.append(("normal_indices", self.normal_indices, len(self.normals)))
        if self.tex_coords is not None:
            checks.append(
                ("tex_coord_indices", self.tex_coord_indices, len(self.tex_coords))
            )

        for name, indices, size in checks:
            if indices.shape != self.faces.shape:
                raise ValueError(
                    f"{name} has shape {indices.shape}, expected {self.faces.shape}"
                )
            if indices.size and (indices.min() < 0 or indices.max() >= size):
                raise ValueError(f"{name} references an element outside 0..{size - 1}")

    def to_trimesh(self) -> trimesh.Trimesh:
        """Convert to a trimesh.Trimesh object for downstream consumers."""
        import trimesh as tm

        return tm.Trimesh(
            vertices=self.vertices,
            faces=self.faces,
            process=False,  # Don't modify our geometry
        )

    def transform(self, matrix: NDArray[np.float64]) -> Mesh:
        """Apply a 4x4 transformation matrix, returning a new mesh.

        The analytic primitive is dropped since it no longer describes
        the transformed geometry.

        Args:
            matrix: 4x4 transformation matrix

        Returns:
            New Mesh with transformed vertices and normals
        """
        ones = np.ones((len(self.vertices), 1))
        homogeneous = np.hstack([self.vertices, ones])
        new_vertices = (matrix @ homogeneous.T).T[:, :3]

        # Normals use the inverse transpose of the upper-left 3x3
        new_normals = None
        if self.normals is not None:
            normal_matrix = np.linalg.inv(matrix[:3, :3]).T
            new_normals = (normal_matrix @ self.normals.T).T
            norms = np.linalg.norm(new_normals, axis=1, keepdims=True)
            new_normals = np.divide(
                new_normals, norms, where=norms != 0, out=new_normals
            )

        mesh = Mesh(vertices=new_vertices, faces=self.faces.copy())
        if new_normals is not None:
            mesh.set_normals(new_normals, self.normal_indices.copy())
        if self.tex_coords is not None:
            mesh.set_tex_coords(self.tex_coords.copy(), self.tex_coord_indices.copy())
        return mesh

    @staticmethod
    def merge(meshes: list[Mesh]) -> Mesh:
        """Merge multiple meshes into a single mesh.

        Normals and texture coordinates survive only when every input
        mesh carries them.

        Args:
            meshes: List of Mesh objects to merge

        Returns:
            New Mesh containing all geometry
        """
        if not meshes:
            return Mesh(
                vertices=np.empty((0, 3)),
                faces=np.empty((0, 3), dtype=np.int64),
            )

        all_vertices = []
        all_faces = []
        all_normals = []
        all_normal_indices = []
        all_tex_coords = []
        all_tex_coord_indices = []
        vertex_offset = 0
        normal_offset = 0
        tex_coord_offset = 0
        has_normals = all(m.normals is not None for m in meshes)
        has_tex_coords = all(m.tex_coords is not None for m in meshes)

        for mesh in meshes:
            all_vertices.append(mesh.vertices)
            all_faces.append(mesh.faces + vertex_offset)
            vertex_offset += len(mesh.vertices)
            if has_normals:
                all_normals.append(mesh.normals)
                all_normal_indices.append(mesh.normal_indices + normal_offset)
                normal_offset += len(mesh.normals)
            if has_tex_coords:
                all_tex_coords.append(mesh.tex_coords)
                all_tex_coord_indices.append(mesh.tex_coord_indices + tex_coord_offset)
                tex_coord_offset += len(mesh.tex_coords)

        merged = Mesh(vertices=np.vstack(all_vertices), faces=np.vstack(all_faces))
        if has_normals:
            merged.set_normals(np.vstack(all_normals), np.vstack(all_normal_indices))
        if has_tex_coords:
            merged.set_tex_coords(
                np.vstack(all_tex_coords), np.vstack(all_tex_coord_indices)
            )
        return merged

    def __repr__(self) -> str:
        extras = []
        if self.primitive is not None:
            extras.append(self.primitive.kind.name.lower())
        if self.normals is not None:
            extras.append("normals")
        if self.tex_coords is not None:
            extras.append("tex_coords")
        extra_str = f", {', '.join(extras)}" if extras else ""
        return f"Mesh({self.vertex_count}v, {self.face_count}f{extra_str})"


@dataclass
class LineSet:
    """Wireframe edges over a vertex array shared with a mesh.

    Attributes:
        vertices: Nx3 vertex array (usually the mesh's own array)
        lines: Lx2 array of vertex index pairs
    """

    vertices: NDArray[np.float64]
    lines: NDArray[np.int64]

    def __post_init__(self) -> None:
        self.lines = np.asarray(self.lines, dtype=np.int64).reshape(-1, 2)

    @property
    def line_count(self) -> int:
        """Number of line segments."""
        return len(self.lines)
