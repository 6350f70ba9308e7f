"""Tests for the Mesh container, transforms and shape groups."""

import math

import numpy as np
import pytest

from meshgen.core import LineSet, Mesh, SceneNode, Transform, integrate
from meshgen.core.transform import axis_angle_rotation
from meshgen.generators import MeshGenerator


def triangle() -> Mesh:
    return Mesh(
        vertices=[[0, 0, 0], [1, 0, 0], [0, 1, 0]],
        faces=[[0, 1, 2]],
        normals=[[0, 0, 1]],
        normal_indices=[[0, 0, 0]],
        tex_coords=[[0, 0], [1, 0], [0, 1]],
    )


class TestMesh:
    def test_arrays_are_reshaped(self):
        mesh = Mesh(vertices=[0, 0, 0, 1, 0, 0, 0, 1, 0], faces=[0, 1, 2])
        assert mesh.vertices.shape == (3, 3)
        assert mesh.faces.shape == (1, 3)
        assert mesh.faces.dtype == np.int64

    def test_optional_data_defaults(self):
        mesh = Mesh(vertices=[[0, 0, 0], [1, 0, 0], [0, 1, 0]], faces=[[0, 1, 2]])
        assert not mesh.has_normals
        assert not mesh.has_tex_coords
        assert mesh.bounds is None
        assert mesh.primitive is None

    def test_tex_coord_indices_default_to_faces(self):
        mesh = triangle()
        np.testing.assert_array_equal(mesh.tex_coord_indices, mesh.faces)
        assert mesh.tex_coord_indices is not mesh.faces

    def test_bounding_box(self):
        mesh = triangle()
        np.testing.assert_allclose(mesh.update_bounding_box(), [[0, 0, 0], [1, 1, 0]])

    def test_empty_bounding_box(self):
        mesh = Mesh(vertices=np.empty((0, 3)), faces=np.empty((0, 3)))
        assert mesh.update_bounding_box() is None

    def test_validate_out_of_range_face(self):
        mesh = Mesh(vertices=[[0, 0, 0], [1, 0, 0]], faces=[[0, 1, 2]])
        with pytest.raises(ValueError, match="faces"):
            mesh.validate()

    def test_validate_corner_shape(self):
        mesh = triangle()
        mesh.normal_indices = np.zeros((2, 3), dtype=np.int64)
        with pytest.raises(ValueError, match="normal_indices"):
            mesh.validate()

    def test_validate_tex_coord_range(self):
        mesh = triangle()
        mesh.tex_coord_indices = np.array([[0, 1, 3]])
        with pytest.raises(ValueError, match="tex_coord_indices"):
            mesh.validate()

    def test_repr(self):
        mesh = MeshGenerator().generate_box([1, 1, 1], tex_coords=True)
        assert repr(mesh) == "Mesh(8v, 12f, box, normals, tex_coords)"

    def test_to_trimesh_keeps_geometry(self):
        mesh = MeshGenerator().generate_box([1, 2, 3])
        tm = mesh.to_trimesh()
        np.testing.assert_allclose(tm.vertices, mesh.vertices)
        np.testing.assert_array_equal(tm.faces, mesh.faces)
        assert tm.volume == pytest.approx(6.0)


class TestTransform:
    def test_identity(self):
        np.testing.assert_allclose(Transform.identity().to_matrix(), np.eye(4))

    def test_scale_rotate_translate_order(self):
        transform = Transform(
            translation=[1, 0, 0],
            rotation=[0, 0, 1, math.pi / 2],
            scale=[2, 1, 1],
        )
        point = transform.to_matrix() @ [1, 0, 0, 1]
        # Scaled to (2, 0, 0), rotated onto +Y, then shifted
        np.testing.assert_allclose(point, [1, 2, 0, 1], atol=1e-12)

    def test_zero_axis_rotation_is_identity(self):
        np.testing.assert_allclose(axis_angle_rotation([0, 0, 0, 2.0]).as_matrix(), np.eye(3))

    def test_mesh_transform_rotates_normals(self):
        mesh = triangle()
        matrix = Transform(rotation=[1, 0, 0, math.pi / 2]).to_matrix()
        moved = mesh.transform(matrix)
        np.testing.assert_allclose(moved.normals[0], [0, -1, 0], atol=1e-12)
        np.testing.assert_allclose(moved.vertices[2], [0, 0, 1], atol=1e-12)
        np.testing.assert_array_equal(moved.tex_coords, mesh.tex_coords)

    def test_mesh_transform_keeps_unit_normals_under_scale(self):
        mesh = MeshGenerator().generate_sphere(1.0)
        moved = mesh.transform(np.diag([1.0, 4.0, 1.0, 1.0]))
        np.testing.assert_allclose(np.linalg.norm(moved.normals, axis=1), 1.0)
        assert moved.primitive is None


class TestMerge:
    def test_offsets_indices(self):
        merged = Mesh.merge([triangle(), triangle()])
        assert merged.vertex_count == 6
        np.testing.assert_array_equal(merged.faces, [[0, 1, 2], [3, 4, 5]])
        np.testing.assert_array_equal(merged.normal_indices, [[0, 0, 0], [1, 1, 1]])
        np.testing.assert_array_equal(merged.tex_coord_indices, [[0, 1, 2], [3, 4, 5]])
        merged.validate()

    def test_drops_data_missing_from_any_part(self):
        plain = Mesh(vertices=[[0, 0, 0], [1, 0, 0], [0, 1, 0]], faces=[[0, 1, 2]])
        merged = Mesh.merge([triangle(), plain])
        assert merged.normals is None
        assert merged.tex_coords is None

    def test_empty(self):
        merged = Mesh.merge([])
        assert merged.vertex_count == 0
        assert merged.face_count == 0


class TestSceneNode:
    def test_integrate_applies_nested_transforms(self):
        group = SceneNode("group")
        group.transform.translation = np.array([0.0, 1.0, 0.0])
        child = group.add_child(SceneNode("child", mesh=triangle()))
        child.transform.translation = np.array([2.0, 0.0, 0.0])

        merged = integrate(group)
        np.testing.assert_allclose(merged.vertices[0], [2, 1, 0])
        assert merged.primitive is None
        assert child.depth == 1

    def test_iteration_and_find(self):
        root = SceneNode("root")
        a = root.add_child(SceneNode("a", mesh=triangle()))
        a.add_child(SceneNode("b", mesh=triangle()))
        assert [n.name for n in root.iter_nodes()] == ["root", "a", "b"]
        assert len(list(root.iter_meshes())) == 2
        assert root.find("b").parent is a
        assert root.find("missing") is None
        assert integrate(root).face_count == 2


def test_line_set_reshapes():
    line_set = LineSet(vertices=np.zeros((2, 3)), lines=[0, 1])
    assert line_set.lines.shape == (1, 2)
    assert line_set.line_count == 1
