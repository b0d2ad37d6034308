"""Tests for decomposition module."""

import jax
import jax.numpy as jnp

from obelisk.core.decomposition import (
    BASE_FACE,
    EDGES,
    JACOBIAN_TETS,
    SCALED_JACOBIAN_EDGES,
    TRIANGLE_FACES,
    VOLUME_TETS,
    distance_apex_to_base,
    largest_edge,
    make_edges,
    make_faces,
    make_jacobian_tets,
    make_volume_tets,
)
from obelisk.core.primitives import EPS, FLOAT_DTYPE


def test_index_tables() -> None:
    """Test the fixed vertex groupings and edge order."""
    assert VOLUME_TETS == ((0, 1, 2, 4), (0, 2, 3, 4))
    assert JACOBIAN_TETS == ((0, 1, 2, 4), (2, 3, 0, 4), (0, 1, 3, 4), (1, 2, 3, 4))
    assert BASE_FACE == (0, 1, 2, 3)
    assert TRIANGLE_FACES == ((0, 1, 4), (1, 2, 4), (2, 3, 4), (3, 0, 4))
    assert EDGES == ((0, 1), (1, 2), (2, 3), (3, 0), (0, 4), (1, 4), (2, 4), (3, 4))
    assert SCALED_JACOBIAN_EDGES == ((0, 1, 5), (2, 3, 7), (0, 3, 4), (1, 2, 6))

    # Every tet ends at the apex and every lateral triangle closes there
    assert all(tet[-1] == 4 for tet in VOLUME_TETS + JACOBIAN_TETS)
    assert all(tri[-1] == 4 for tri in TRIANGLE_FACES)

    # Each scaled Jacobian edge triple only touches vertices of its own tet
    for tet, edge_indices in zip(JACOBIAN_TETS, SCALED_JACOBIAN_EDGES):
        for index in edge_indices:
            tail, head = EDGES[index]
            assert tail in tet and head in tet


def test_make_volume_tets(jit_mode: str, unit_pyramid) -> None:
    """Test the two-tet volume split."""
    tets = make_volume_tets(unit_pyramid)
    assert tets.shape == (2, 4, 3)
    assert jnp.array_equal(tets[0], unit_pyramid[jnp.array([0, 1, 2, 4])])
    assert jnp.array_equal(tets[1], unit_pyramid[jnp.array([0, 2, 3, 4])])


def test_make_jacobian_tets(jit_mode: str, unit_pyramid) -> None:
    """Test the four corner tets."""
    tets = make_jacobian_tets(unit_pyramid)
    assert tets.shape == (4, 4, 3)
    for tet, grouping in zip(tets, JACOBIAN_TETS):
        assert jnp.array_equal(tet, unit_pyramid[jnp.array(grouping)])

    # Same tets under jit
    jitted = jax.jit(make_jacobian_tets)(unit_pyramid)
    assert jnp.array_equal(jitted, tets)


def test_make_faces(jit_mode: str, unit_pyramid) -> None:
    """Test the base quad and lateral triangles."""
    faces = make_faces(unit_pyramid.tolist())
    assert faces.base.shape == (4, 3)
    assert faces.triangles.shape == (4, 3, 3)
    assert jnp.array_equal(faces.base, unit_pyramid[:4])
    assert jnp.array_equal(faces.triangle(3), unit_pyramid[jnp.array([3, 0, 4])])
    for tri, grouping in zip(faces.triangles, TRIANGLE_FACES):
        assert jnp.array_equal(tri, unit_pyramid[jnp.array(grouping)])


def test_make_edges(jit_mode: str, unit_pyramid) -> None:
    """Test directed edges in their fixed order."""
    edges = make_edges(unit_pyramid)
    expected = jnp.array(
        [
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [-1.0, 0.0, 0.0],
            [0.0, -1.0, 0.0],
            [0.5, 0.5, 1.0],
            [-0.5, 0.5, 1.0],
            [-0.5, -0.5, 1.0],
            [0.5, -0.5, 1.0],
        ],
        dtype=FLOAT_DTYPE,
    )
    assert edges.shape == (8, 3)
    assert jnp.allclose(edges, expected, atol=EPS)

    # Base perimeter closes
    assert jnp.allclose(jnp.sum(edges[:4], axis=0), jnp.zeros(3), atol=EPS)


def test_largest_edge(jit_mode: str, unit_pyramid) -> None:
    """Test the longest edge length."""
    # Standard case 1 - lateral edges dominate
    assert jnp.isclose(largest_edge(unit_pyramid), jnp.sqrt(1.5), atol=EPS)

    # Standard case 2 - base edge dominates for a flat pyramid
    flat = unit_pyramid.at[4, 2].set(0.1)
    assert jnp.isclose(largest_edge(flat), 1.0, atol=EPS)

    # Edge case 1 - all points coincide
    assert largest_edge(jnp.zeros((5, 3), dtype=FLOAT_DTYPE)) == 0.0

    # Test with vmap
    batch = jnp.stack([unit_pyramid, flat, unit_pyramid * 2.0])
    vmap_results = jax.vmap(largest_edge)(batch)
    assert jnp.allclose(vmap_results, jnp.array([jnp.sqrt(1.5), 1.0, 2.0 * jnp.sqrt(1.5)]), atol=EPS)


def test_distance_apex_to_base(jit_mode: str, unit_pyramid) -> None:
    """Test apex distance and tilt cosine."""
    # Standard case 1 - apex straight above the centroid
    distance, cos_angle = distance_apex_to_base(unit_pyramid)
    assert jnp.isclose(distance, 1.0, atol=EPS)
    assert jnp.isclose(cos_angle, 1.0, atol=EPS)

    # Standard case 2 - tilted apex
    tilted = unit_pyramid.at[4].set(jnp.array([1.5, 0.5, 1.0]))
    distance, cos_angle = distance_apex_to_base(tilted)
    assert jnp.isclose(distance, 1.0, atol=EPS)
    assert jnp.isclose(cos_angle, 1.0 / jnp.sqrt(2.0), atol=EPS)

    # Standard case 3 - distance is independent of the base edge lengths
    stretched = unit_pyramid * jnp.array([3.0, 2.0, 1.0])
    distance, _ = distance_apex_to_base(stretched)
    assert jnp.isclose(distance, 1.0, atol=EPS)

    # Edge case 1 - apex below the base is negative
    below = unit_pyramid.at[4, 2].set(-2.0)
    distance, cos_angle = distance_apex_to_base(below)
    assert jnp.isclose(distance, -2.0, atol=EPS)
    assert jnp.isclose(cos_angle, -1.0, atol=EPS)

    # Edge case 2 - apex at the centroid
    centred = unit_pyramid.at[4].set(jnp.array([0.5, 0.5, 0.0]))
    distance, cos_angle = distance_apex_to_base(centred)
    assert distance == 0.0
    assert cos_angle == 0.0

    # Edge case 3 - degenerate base gives zeros instead of NaN
    collapsed = unit_pyramid.at[:4].set(0.0)
    distance, cos_angle = distance_apex_to_base(collapsed)
    assert distance == 0.0
    assert cos_angle == 0.0

    # Test with vmap
    batch = jnp.stack([unit_pyramid, tilted, collapsed])
    distances, cosines = jax.vmap(distance_apex_to_base)(batch)
    assert jnp.allclose(distances, jnp.array([1.0, 1.0, 0.0]), atol=EPS)
    assert jnp.allclose(cosines, jnp.array([1.0, 1.0 / jnp.sqrt(2.0), 0.0]), atol=EPS)
    assert not jnp.any(jnp.isnan(cosines))
