"""Tests for the elevation grid generator."""

import numpy as np
import pytest

from meshgen.generators import ElevationGrid, GeneratorConfig, MeshGenerator
from meshgen.generators.elevation import generate_elevation_grid


@pytest.fixture
def generator() -> MeshGenerator:
    return MeshGenerator()


def hill(x_dimension: int = 4, z_dimension: int = 3) -> ElevationGrid:
    xs, zs = np.meshgrid(np.arange(x_dimension), np.arange(z_dimension))
    return ElevationGrid(
        x_dimension=x_dimension,
        z_dimension=z_dimension,
        x_spacing=0.5,
        z_spacing=2.0,
        height=((xs - 1.5) ** 2 + zs ** 2).ravel() * 0.1,
    )


def test_counts(generator):
    mesh = generator.generate_elevation_grid(hill())
    assert mesh.vertex_count == 12
    assert mesh.face_count == 2 * 3 * 2
    assert mesh.primitive is None
    mesh.validate()


def test_vertex_layout(generator):
    """Samples are row-major with X varying fastest."""
    grid = hill()
    mesh = generator.generate_elevation_grid(grid)
    np.testing.assert_allclose(mesh.vertices[:4, 0], [0.0, 0.5, 1.0, 1.5])
    np.testing.assert_allclose(mesh.vertices[::4, 2], [0.0, 2.0, 4.0])
    np.testing.assert_allclose(mesh.vertices[:, 1], grid.height)


def test_extent(generator):
    grid = hill()
    assert grid.x_extent == pytest.approx(1.5)
    assert grid.z_extent == pytest.approx(4.0)
    mesh = generator.generate_elevation_grid(grid)
    np.testing.assert_allclose(mesh.bounds[:, 0], [0.0, 1.5])
    np.testing.assert_allclose(mesh.bounds[:, 2], [0.0, 4.0])


@pytest.mark.parametrize("ccw,sign", [(True, 1.0), (False, -1.0)])
def test_winding(generator, ccw, sign):
    grid = hill()
    grid.ccw = ccw
    mesh = generator.generate_elevation_grid(grid)
    v = mesh.vertices
    for a, b, c in mesh.faces:
        assert np.sign(np.cross(v[b] - v[a], v[c] - v[a])[1]) == sign


def test_smooth_crease_shares_normals(generator):
    hard = generator.generate_elevation_grid(hill())
    smooth_grid = hill()
    smooth_grid.crease_angle = np.pi
    smooth = generator.generate_elevation_grid(smooth_grid)
    assert len(smooth.normals) == smooth.vertex_count

    v = hard.vertices[hard.faces]
    face_normals = np.cross(v[:, 1] - v[:, 0], v[:, 2] - v[:, 0])
    face_normals /= np.linalg.norm(face_normals, axis=1, keepdims=True)
    for corner in range(3):
        np.testing.assert_allclose(hard.normals[hard.normal_indices[:, corner]], face_normals)


@pytest.mark.parametrize("grid", [
    ElevationGrid(x_dimension=3, z_dimension=3, height=np.zeros(8)),
    ElevationGrid(x_dimension=1, z_dimension=4, height=np.zeros(4)),
    ElevationGrid(x_dimension=4, z_dimension=1, height=np.zeros(4)),
    ElevationGrid(),
])
def test_malformed_grid_fails(generator, grid):
    assert generator.generate_elevation_grid(grid) is None


def test_tex_coords_span_the_grid(generator):
    mesh = generator.generate_elevation_grid(hill(), tex_coords=True)
    assert mesh.tex_coord_indices.shape == mesh.faces.shape
    np.testing.assert_allclose(mesh.tex_coords[0], [0.0, 0.0])
    np.testing.assert_allclose(mesh.tex_coords[-1], [1.0, 1.0])
    np.testing.assert_allclose(mesh.tex_coords[:4, 0], [0.0, 1 / 3, 2 / 3, 1.0])


def test_tex_coords_for_existing_mesh(generator):
    grid = hill()
    mesh = generator.generate_elevation_grid(grid)
    assert mesh.tex_coords is None
    generator.generate_tex_coords_for_elevation_grid(mesh, grid)
    assert mesh.tex_coords.min() == pytest.approx(0.0)
    assert mesh.tex_coords.max() == pytest.approx(1.0)


def test_without_normals():
    mesh = generate_elevation_grid(hill(), GeneratorConfig(normal_generation=False))
    assert mesh.normals is None
