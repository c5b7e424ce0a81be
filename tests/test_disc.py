"""Tests for the disc geometry kernel: positions, normals, UVs, winding and mirroring."""

from __future__ import annotations

import math

import numpy as np
import pytest

from instamesh import Axis, DiscParameters, Gradient, GradientKey, Mesh, UVType, axis_basis, generate


def _generate(**kwargs) -> Mesh:
    mesh = Mesh()
    assert generate(DiscParameters(**kwargs), mesh)
    return mesh


def _triangles(mesh: Mesh) -> np.ndarray:
    return mesh.indices.astype(np.int64).reshape(-1, 3)


@pytest.mark.parametrize(
    "segments_u, segments_v, double_sided",
    [(4, 1, False), (3, 1, True), (5, 3, True), (32, 32, False)],
)
def test_vertex_and_index_counts(segments_u: int, segments_v: int, double_sided: bool) -> None:
    """Vertex and index counts follow from the segment counts."""
    mesh = _generate(segments_u=segments_u, segments_v=segments_v, double_sided=double_sided)

    sides = 2 if double_sided else 1
    assert mesh.vertex_count == (segments_u + 1) * (segments_v + 1) * sides
    assert mesh.indices.size == segments_u * segments_v * 6 * sides
    assert mesh.normals.shape == (mesh.vertex_count, 3)
    assert mesh.uvs[0].shape == (mesh.vertex_count, 2)


@pytest.mark.parametrize("double_sided", [False, True])
def test_indices_within_vertex_range(double_sided: bool) -> None:
    """Every index lies in [0, vertex_count)."""
    mesh = _generate(segments_u=7, segments_v=5, double_sided=double_sided)

    assert mesh.indices.min() == 0
    assert mesh.indices.max() == mesh.vertex_count - 1


def test_full_turn_closes_seam() -> None:
    """A full turn puts the first and last rings on top of each other."""
    seg_u, seg_v = 12, 3
    mesh = _generate(inner_radius=0.25, outer_radius=2.0, segments_u=seg_u, segments_v=seg_v)

    ring = seg_v + 1
    first = mesh.vertices[:ring]
    last = mesh.vertices[seg_u * ring:(seg_u + 1) * ring]
    np.testing.assert_allclose(first, last, atol=1e-5)


def test_partial_turn_end_angle() -> None:
    """A quarter turn ends on the +Y direction."""
    seg_u, seg_v = 8, 1
    mesh = _generate(inner_radius=1.0, outer_radius=1.0, angle=0.25, segments_u=seg_u, segments_v=seg_v)

    last = mesh.vertices[seg_u * (seg_v + 1)]
    np.testing.assert_allclose(last, (0.0, 1.0, 0.0), atol=1e-6)


def test_small_fan_scenario() -> None:
    """A four-segment fan has fully determined vertices, UVs, normals and indices."""
    mesh = _generate(inner_radius=0.0, outer_radius=1.0, angle=1.0, segments_u=4, segments_v=1,
                     axis=Axis.Z, uv_channels=(UVType.RADIAL, UVType.TOP_PROJECTED))

    assert mesh.vertex_count == 10
    assert mesh.triangle_count == 8
    assert mesh.indices.size == 24

    # j=0 sits on the inner radius (0), j=1 on the outer radius
    np.testing.assert_allclose(mesh.vertices[0], (0.0, 0.0, 0.0), atol=1e-7)
    np.testing.assert_allclose(mesh.vertices[1], (1.0, 0.0, 0.0), atol=1e-7)
    np.testing.assert_allclose(mesh.vertices[3], (0.0, 1.0, 0.0), atol=1e-6)
    np.testing.assert_allclose(mesh.vertices[5], (-1.0, 0.0, 0.0), atol=1e-6)

    np.testing.assert_allclose(mesh.uvs[0][3], (0.25, 1.0))
    np.testing.assert_allclose(mesh.uvs[1][0], (0.5, 0.5))
    np.testing.assert_allclose(mesh.uvs[1][1], (1.0, 0.5))
    np.testing.assert_allclose(mesh.uvs[1][3], (0.5, 1.0), atol=1e-6)

    np.testing.assert_allclose(mesh.normals, np.tile((0.0, 0.0, 1.0), (10, 1)), atol=1e-6)
    assert mesh.faces[:2] == [(0, 1, 2), (2, 1, 3)]


def test_flipped_winding_and_normals() -> None:
    """flipped switches the winding to (a,c,b),(c,d,b) and negates the normals."""
    mesh = _generate(inner_radius=0.5, outer_radius=1.0, segments_u=4, segments_v=1, flipped=True)

    assert mesh.faces[:2] == [(0, 2, 1), (2, 3, 1)]
    np.testing.assert_allclose(mesh.normals[0], (0.0, 0.0, -1.0), atol=1e-6)


@pytest.mark.parametrize("double_sided", [False, True])
def test_flip_invariance(double_sided: bool) -> None:
    """Undoing the winding of a flipped mesh reproduces the unflipped index buffer."""
    kwargs = dict(inner_radius=0.3, outer_radius=1.5, segments_u=9, segments_v=4, double_sided=double_sided)
    front = _triangles(_generate(**kwargs))
    flipped = _triangles(_generate(flipped=True, **kwargs))

    np.testing.assert_array_equal(flipped[:, [0, 2, 1]], front)


def test_double_sided_mirror() -> None:
    """The back shell copies positions, UVs and colors and negates normals exactly."""
    seg_u, seg_v = 6, 3
    gradient = Gradient([GradientKey(0.0, (1.0, 0.0, 0.0)), GradientKey(1.0, (0.0, 0.0, 1.0))])
    mesh = _generate(inner_radius=0.2, outer_radius=1.0, extrusion=0.5, segments_u=seg_u, segments_v=seg_v,
                     double_sided=True, gradient=gradient, uv_channels=(UVType.RADIAL, UVType.TOP_PROJECTED))

    n = (seg_u + 1) * (seg_v + 1)
    np.testing.assert_array_equal(mesh.vertices[n:], mesh.vertices[:n])
    np.testing.assert_array_equal(mesh.uvs[0][n:], mesh.uvs[0][:n])
    np.testing.assert_array_equal(mesh.uvs[1][n:], mesh.uvs[1][:n])
    np.testing.assert_array_equal(mesh.colors[n:], mesh.colors[:n])
    np.testing.assert_array_equal(mesh.normals[n:], -mesh.normals[:n])

    tris = _triangles(mesh)
    side = seg_u * seg_v * 2
    assert tris[side:].min() >= n
    np.testing.assert_array_equal(tris[side:] - n, tris[:side][:, [0, 2, 1]])


@pytest.mark.parametrize("axis", list(Axis))
@pytest.mark.parametrize("flipped", [False, True])
@pytest.mark.parametrize("inner, outer", [(0.5, 1.0), (2.0, 1.0)])
def test_face_winding_matches_vertex_normals(axis: Axis, flipped: bool, inner: float, outer: float) -> None:
    """Geometric face normals point to the same side as the vertex normals."""
    mesh = _generate(inner_radius=inner, outer_radius=outer, extrusion=0.3, angle=0.8, segments_u=10,
                     segments_v=3, axis=axis, flipped=flipped, double_sided=True)

    tris = _triangles(mesh)
    p = mesh.vertices.astype(np.float64)
    face_n = np.cross(p[tris[:, 1]] - p[tris[:, 0]], p[tris[:, 2]] - p[tris[:, 0]])
    vert_n = mesh.normals.astype(np.float64)[tris].mean(axis=1)
    assert np.all(np.einsum("ij,ij->i", face_n, vert_n) > 0.0)


def test_reversed_radii_normals() -> None:
    """outer < inner grows inwards and the normals follow."""
    mesh = _generate(inner_radius=2.0, outer_radius=1.0, segments_u=8, segments_v=2)

    assert np.all(np.isfinite(mesh.vertices))
    np.testing.assert_allclose(mesh.normals[0], (0.0, 0.0, -1.0), atol=1e-6)
    np.testing.assert_allclose(np.linalg.norm(mesh.vertices[:3], axis=1), (2.0, 1.5, 1.0), atol=1e-6)


def test_radius_crossing_flips_normals() -> None:
    """Vertices past the radius zero crossing get negated normals."""
    mesh = _generate(inner_radius=1.0, outer_radius=-1.0, segments_u=4, segments_v=2)

    # per ring the rates are 1, 0, -1
    for ring in range(5):
        base = ring * 3
        n0, n1, n2 = mesh.normals[base:base + 3]
        np.testing.assert_array_equal(n1, n0)
        np.testing.assert_array_equal(n2, -n0)
        assert np.isclose(np.linalg.norm(n0), 1.0, atol=1e-6)


def test_flip_stacks_with_radius_crossing() -> None:
    """flipped and a negative outer rate negate the normal independently."""
    params = dict(inner_radius=1.0, outer_radius=-1.0, segments_u=4, segments_v=2)
    plain = _generate(**params)
    flipped = _generate(flipped=True, **params)

    np.testing.assert_array_equal(flipped.normals, -plain.normals)
    for ring in range(5):
        base = ring * 3
        np.testing.assert_allclose(flipped.normals[base], (0.0, 0.0, 1.0), atol=1e-6)
        np.testing.assert_allclose(flipped.normals[base + 2], (0.0, 0.0, -1.0), atol=1e-6)
        np.testing.assert_array_equal(flipped.normals[base + 2], plain.normals[base])


def test_collapsed_profile_yields_zero_normals() -> None:
    """A collapsed profile yields zero normals instead of NaN."""
    mesh = _generate(inner_radius=1.0, outer_radius=1.0, extrusion=0.0, segments_u=4, segments_v=1)

    assert np.all(np.isfinite(mesh.normals))
    np.testing.assert_array_equal(mesh.normals, np.zeros_like(mesh.normals))


def test_extrusion_along_sweep_axis() -> None:
    """Extrusion runs along the sweep axis, full at V=0 and zero at V=1."""
    seg_v = 4
    mesh = _generate(inner_radius=0.0, outer_radius=1.0, extrusion=2.0, segments_u=3, segments_v=seg_v, axis=Axis.Y)

    heights = mesh.vertices[: seg_v + 1, 1]
    np.testing.assert_allclose(heights, (2.0, 1.5, 1.0, 0.5, 0.0), atol=1e-6)


@pytest.mark.parametrize(
    "axis, expected",
    [
        (Axis.X, ((0, 1, 0), (0, 0, 1), (1, 0, 0))),
        (Axis.Y, ((0, 0, 1), (1, 0, 0), (0, 1, 0))),
        (Axis.Z, ((1, 0, 0), (0, 1, 0), (0, 0, 1))),
    ],
)
def test_axis_basis_cyclic(axis: Axis, expected) -> None:
    """The radial basis is a cyclic rotation of the sweep axis."""
    for got, want in zip(axis_basis(axis), expected):
        np.testing.assert_array_equal(got, want)


def test_top_projected_uv_in_unit_square() -> None:
    """Top-projected UVs are normalized by the larger radius into the unit square."""
    mesh = _generate(inner_radius=-0.5, outer_radius=3.0, segments_u=16, segments_v=4,
                     uv_channels=(UVType.TOP_PROJECTED,))

    uv = mesh.uvs[0]
    assert uv.min() >= -1e-6
    assert uv.max() <= 1.0 + 1e-6
    assert math.isclose(float(uv[:, 0].max()), 1.0, abs_tol=1e-6)


def test_zero_extent_top_projected_uv_is_centered() -> None:
    """With both radii zero the top-projected UVs sit at the center."""
    mesh = _generate(inner_radius=0.0, outer_radius=0.0, extrusion=1.0, segments_u=3, segments_v=1,
                     uv_channels=(UVType.TOP_PROJECTED,))

    np.testing.assert_array_equal(mesh.uvs[0], np.full((mesh.vertex_count, 2), 0.5, dtype=np.float32))
