"""Shape groups: generated meshes placed with local transforms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from .mesh import Mesh
from .transform import Transform


@dataclass
class SceneNode:
    """One shape (or an empty grouping node) inside a group.

    The transform is relative to the parent node. Meshes are stored in
    their local frame and only baked when the group is integrated.

    Example:
        arrow = SceneNode("arrow")
        head = arrow.add_child(SceneNode("head", mesh=cone_mesh))
        head.transform.translation = [0.0, 0.6, 0.0]
        arrow.add_child(SceneNode("shaft", mesh=cylinder_mesh))
        merged = integrate(arrow)
    """

    name: str
    transform: Transform = field(default_factory=Transform)
    mesh: Mesh | None = None
    children: list[SceneNode] = field(default_factory=list)
    parent: SceneNode | None = field(default=None, repr=False)

    def add_child(self, node: SceneNode) -> SceneNode:
        """Attach ``node`` below this one and return it."""
        node.parent = self
        self.children.append(node)
        return node

    def ancestors(self) -> list[SceneNode]:
        """Nodes from the root down to and including this one."""
        chain = []
        node: SceneNode | None = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return chain[::-1]

    def world_transform(self) -> NDArray[np.float64]:
        """4x4 matrix taking local coordinates to the root frame."""
        matrix = np.eye(4)
        for node in self.ancestors():
            matrix = matrix @ node.transform.to_matrix()
        return matrix

    def world_mesh(self) -> Mesh | None:
        if self.mesh is None:
            return None
        return self.mesh.transform(self.world_transform())

    def iter_nodes(self, include_self: bool = True) -> Iterator[SceneNode]:
        """Depth-first walk in insertion order."""
        stack = [self] if include_self else list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_meshes(self) -> Iterator[tuple[SceneNode, Mesh]]:
        """Yield ``(node, mesh)`` for every node with a mesh, in root space."""
        for node in self.iter_nodes():
            if node.mesh is not None:
                yield node, node.world_mesh()

    def flatten(self) -> Mesh:
        return Mesh.merge([mesh for _, mesh in self.iter_meshes()])

    def find(self, name: str) -> SceneNode | None:
        return next((node for node in self.iter_nodes() if node.name == name), None)

    @property
    def depth(self) -> int:
        return len(self.ancestors()) - 1

    def __repr__(self) -> str:
        parts = [repr(self.name)]
        if self.mesh is not None:
            parts.append(f"mesh={self.mesh.face_count}f")
        if self.children:
            parts.append(f"children={len(self.children)}")
        return f"SceneNode({', '.join(parts)})"


def integrate(group: SceneNode) -> Mesh:
    """Bake every transform in ``group`` into one mesh.

    Triangles keep their order of appearance in a depth-first walk. The
    result has no analytic primitive since it is a compound shape.
    """
    return group.flatten()
