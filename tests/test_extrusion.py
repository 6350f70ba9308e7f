"""Tests for swept extrusions and their wireframe line sets."""

import math
from collections import Counter

import numpy as np
import pytest

from meshgen.generators import Extrusion, MeshGenerator


@pytest.fixture
def generator() -> MeshGenerator:
    return MeshGenerator()


def open_edges(faces: np.ndarray) -> int:
    """Number of undirected edges used by a single triangle."""
    counts = Counter()
    for a, b, c in faces.tolist():
        for u, v in ((a, b), (b, c), (c, a)):
            counts[(min(u, v), max(u, v))] += 1
    return sum(1 for n in counts.values() if n == 1)


SQUARE_LOOP = [[0, 0, 0], [4, 0, 0], [4, 0, 4], [0, 0, 4], [0, 0, 0]]
BENT_SPINE = [[0, 0, 0], [0, 1, 0], [1, 2, 0]]


class TestStraightExtrusion:
    def test_default_is_a_closed_box(self, generator):
        mesh = generator.generate_extrusion(Extrusion())
        assert mesh.vertex_count == 8
        # 4 side quads plus two capped squares
        assert mesh.face_count == 8 + 2 + 2
        assert open_edges(mesh.faces) == 0
        assert mesh.primitive is None

    def test_ring_positions(self, generator):
        mesh = generator.generate_extrusion(Extrusion())
        np.testing.assert_allclose(mesh.vertices[:4, 1], 0.0)
        np.testing.assert_allclose(mesh.vertices[4:, 1], 1.0)
        np.testing.assert_allclose(
            mesh.vertices[:4], [[1, 0, 1], [1, 0, -1], [-1, 0, -1], [-1, 0, 1]]
        )

    @pytest.mark.parametrize("begin_cap,end_cap,cap_faces", [
        (False, False, 0),
        (True, False, 2),
        (False, True, 2),
    ])
    def test_caps(self, generator, begin_cap, end_cap, cap_faces):
        mesh = generator.generate_extrusion(Extrusion(begin_cap=begin_cap, end_cap=end_cap))
        assert mesh.face_count == 8 + cap_faces

    def test_caps_face_opposite_ways(self, generator):
        mesh = generator.generate_extrusion(Extrusion())
        v = mesh.vertices
        normals = [np.cross(v[b] - v[a], v[c] - v[a]) for a, b, c in mesh.faces[8:]]
        begin = [n[1] for n in normals[:2]]
        end = [n[1] for n in normals[2:]]
        assert np.sign(begin[0]) == np.sign(begin[1])
        assert np.sign(end[0]) == -np.sign(begin[0])

    def test_open_cross_section(self, generator):
        """An open contour leaves the side strip unclosed."""
        extrusion = Extrusion(cross_section=[[1, 0], [0, 1], [-1, 0]], begin_cap=False, end_cap=False)
        mesh = generator.generate_extrusion(extrusion)
        assert mesh.vertex_count == 6
        assert mesh.face_count == 4

    def test_downward_spine(self, generator):
        mesh = generator.generate_extrusion(Extrusion(spine=[[0, 0, 0], [0, -2, 0]]))
        np.testing.assert_allclose(mesh.vertices[4:, 1], -2.0)
        assert open_edges(mesh.faces) == 0

    def test_tilted_spine_rings_are_perpendicular(self, generator):
        tangent = np.array([1.0, 1.0, 1.0]) / math.sqrt(3.0)
        mesh = generator.generate_extrusion(Extrusion(spine=[[0, 0, 0], tangent * 3.0]))
        offsets = mesh.vertices[:4]
        np.testing.assert_allclose(offsets @ tangent, 0.0, atol=1e-12)
        np.testing.assert_allclose(np.linalg.norm(offsets, axis=1), math.sqrt(2.0))


class TestScaleAndOrientation:
    def test_per_point_scale(self, generator):
        extrusion = Extrusion(
            spine=[[0, 0, 0], [0, 1, 0], [0, 2, 0]],
            scale=[[1, 1], [2, 2], [3, 3]],
        )
        mesh = generator.generate_extrusion(extrusion)
        for ring, factor in enumerate([1, 2, 3]):
            offsets = mesh.vertices[ring * 4:(ring + 1) * 4] - [0, ring, 0]
            np.testing.assert_allclose(np.linalg.norm(offsets, axis=1), factor * math.sqrt(2.0))

    def test_single_scale_applies_everywhere(self, generator):
        mesh = generator.generate_extrusion(Extrusion(scale=[[2.0, 0.5]]))
        np.testing.assert_allclose(np.abs(mesh.vertices[:, 0]), 2.0)
        np.testing.assert_allclose(np.abs(mesh.vertices[:, 2]), 0.5)

    def test_single_orientation(self, generator):
        extrusion = Extrusion(orientation=[[0, 1, 0, math.pi / 4]])
        mesh = generator.generate_extrusion(extrusion)
        # Square corners rotate onto the axes
        np.testing.assert_allclose(np.abs(mesh.vertices[:, [0, 2]]).max(axis=1), math.sqrt(2.0))

    def test_zero_axis_orientation_is_identity(self, generator):
        plain = generator.generate_extrusion(Extrusion())
        rotated = generator.generate_extrusion(Extrusion(orientation=[[0, 0, 0, 1.0]]))
        np.testing.assert_allclose(plain.vertices, rotated.vertices)

    def test_scale_count_mismatch_fails(self, generator):
        extrusion = Extrusion(spine=BENT_SPINE, scale=[[1, 1], [2, 2]])
        assert generator.generate_extrusion(extrusion) is None

    def test_orientation_count_mismatch_fails(self, generator):
        extrusion = Extrusion(spine=BENT_SPINE, orientation=[[0, 1, 0, 0], [0, 1, 0, 1]])
        assert generator.generate_extrusion(extrusion) is None


class TestCurvedSpine:
    def test_counts(self, generator):
        mesh = generator.generate_extrusion(Extrusion(spine=BENT_SPINE))
        assert mesh.vertex_count == 12
        assert mesh.face_count == 2 * 4 * 2 + 4
        assert open_edges(mesh.faces) == 0

    def test_rings_follow_the_tangent(self, generator):
        spine = np.array(BENT_SPINE, dtype=np.float64)
        mesh = generator.generate_extrusion(Extrusion(spine=spine))

        first = mesh.vertices[:4] - spine[0]
        np.testing.assert_allclose(first[:, 1], 0.0, atol=1e-12)

        last_tangent = (spine[2] - spine[1]) / np.linalg.norm(spine[2] - spine[1])
        last = mesh.vertices[8:] - spine[2]
        np.testing.assert_allclose(last @ last_tangent, 0.0, atol=1e-12)
        np.testing.assert_allclose(np.linalg.norm(last, axis=1), math.sqrt(2.0))

    def test_collinear_start_inherits_binormal(self, generator):
        spine = [[0, 0, 0], [0, 1, 0], [0, 2, 0], [1, 3, 0]]
        mesh = generator.generate_extrusion(Extrusion(spine=spine))
        assert mesh is not None
        # The first rings stay flat in XZ and keep the frame of the bend
        np.testing.assert_allclose(mesh.vertices[:4, 1], 0.0, atol=1e-12)
        np.testing.assert_allclose(mesh.vertices[:4], mesh.vertices[4:8] - [0, 1, 0], atol=1e-12)

    def test_opposite_bends_keep_the_binormal_side(self, generator):
        """A zigzag spine does not twist the cross-section half a turn."""
        spine = np.array([[0, 0, 0], [0, 1, 0], [1, 2, 0], [1, 3, 0]], dtype=np.float64)
        mesh = generator.generate_extrusion(Extrusion(spine=spine))
        corners = mesh.vertices[::4] - spine
        # The second bend turns the other way, yet corner 0 stays below the plane
        np.testing.assert_allclose(corners[:, 2], -1.0, atol=1e-12)

    def test_closed_spine_wraps(self, generator):
        extrusion = Extrusion(spine=SQUARE_LOOP)
        assert extrusion.is_spine_closed
        mesh = generator.generate_extrusion(extrusion)
        assert mesh.vertex_count == 4 * 4
        # No caps on a closed spine
        assert mesh.face_count == 4 * 4 * 2
        assert open_edges(mesh.faces) == 0


class TestFailures:
    @pytest.mark.parametrize("extrusion", [
        Extrusion(spine=[[0, 0, 0]]),
        Extrusion(spine=[[0, 0, 0], [0, 0, 0]]),
        Extrusion(cross_section=[[1, 1]]),
        Extrusion(cross_section=[[1, 1], [1, 1]]),
    ])
    def test_too_few_points(self, generator, extrusion):
        assert generator.generate_extrusion(extrusion) is None


class TestLineSet:
    def test_open_spine(self, generator):
        extrusion = Extrusion()
        mesh = generator.generate_extrusion(extrusion)
        line_set = generator.generate_extrusion_line_set(extrusion, mesh)
        # Two square rings plus four rails
        assert line_set.line_count == 8 + 4
        assert line_set.vertices is mesh.vertices
        assert line_set.lines.max() < mesh.vertex_count

    def test_closed_spine_rails_wrap(self, generator):
        extrusion = Extrusion(spine=SQUARE_LOOP)
        mesh = generator.generate_extrusion(extrusion)
        line_set = generator.generate_extrusion_line_set(extrusion, mesh)
        assert line_set.line_count == 16 + 16
        assert line_set.lines.max() < mesh.vertex_count
        assert (12, 0) in map(tuple, line_set.lines.tolist())

    def test_open_cross_section(self, generator):
        extrusion = Extrusion(cross_section=[[1, 0], [0, 1], [-1, 0]])
        mesh = generator.generate_extrusion(extrusion)
        line_set = generator.generate_extrusion_line_set(extrusion, mesh)
        assert line_set.line_count == 2 * 2 + 3

    def test_mismatched_mesh_fails(self, generator):
        mesh = generator.generate_extrusion(Extrusion())
        other = Extrusion(spine=BENT_SPINE)
        assert generator.generate_extrusion_line_set(other, mesh) is None


class TestExtrusionTexCoords:
    def test_indices_match_faces(self, generator):
        mesh = generator.generate_extrusion(Extrusion(), tex_coords=True)
        assert mesh.tex_coord_indices.shape == mesh.faces.shape
        # 5 x 2 side grid plus 5 points per cap
        assert len(mesh.tex_coords) == 10 + 5 + 5
        mesh.validate()

    def test_range(self, generator):
        mesh = generator.generate_extrusion(Extrusion(spine=BENT_SPINE), tex_coords=True)
        assert mesh.tex_coords.min() >= 0.0
        assert mesh.tex_coords.max() <= 1.0

    def test_side_parametrization(self, generator):
        mesh = generator.generate_extrusion(Extrusion(), tex_coords=True)
        side = mesh.tex_coords[:10]
        np.testing.assert_allclose(side[:5, 0], [0.0, 0.25, 0.5, 0.75, 1.0])
        np.testing.assert_allclose(side[:5, 1], 0.0)
        np.testing.assert_allclose(side[5:, 1], 1.0)

    def test_end_cap_is_mirrored(self, generator):
        mesh = generator.generate_extrusion(Extrusion(), tex_coords=True)
        begin = mesh.tex_coords[10:15]
        end = mesh.tex_coords[15:20]
        np.testing.assert_allclose(end[:, 0], 1.0 - begin[:, 0])
        np.testing.assert_allclose(end[:, 1], begin[:, 1])

    def test_closed_spine(self, generator):
        mesh = generator.generate_extrusion(Extrusion(spine=SQUARE_LOOP), tex_coords=True)
        assert len(mesh.tex_coords) == 5 * 5
        mesh.validate()

    @pytest.mark.parametrize("extrusion", [
        Extrusion(),
        Extrusion(spine=BENT_SPINE, begin_cap=False),
        Extrusion(spine=BENT_SPINE, end_cap=False),
        Extrusion(spine=SQUARE_LOOP),
    ])
    def test_existing_mesh(self, generator, extrusion):
        """Coordinates added afterwards match those built with the mesh."""
        expected = generator.generate_extrusion(extrusion, tex_coords=True)
        mesh = generator.generate_extrusion(extrusion)
        assert mesh.tex_coords is None

        assert generator.generate_tex_coords_for_extrusion(mesh, extrusion) is mesh
        np.testing.assert_allclose(mesh.tex_coords, expected.tex_coords)
        np.testing.assert_array_equal(mesh.tex_coord_indices, expected.tex_coord_indices)

    def test_existing_mesh_mismatch_fails(self, generator):
        mesh = generator.generate_extrusion(Extrusion())
        assert generator.generate_tex_coords_for_extrusion(mesh, Extrusion(spine=BENT_SPINE)) is None
        assert mesh.tex_coords is None
