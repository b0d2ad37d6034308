"""
Pyramid decomposition module.

Splits a pyramid [base 0..3 in winding order, apex 4] into tetrahedra, faces
and directed edges. The index tables are the single source of vertex
groupings and edge order; the metric formulas index into them positionally.

       4
      /|\
     / | \
    3--|--2
   /   |   /
  0---------1
"""

from dataclasses import dataclass

import jax
import jax.numpy as jnp

from . import vector
from .primitives import (
    DBL_MIN,
    FLOAT_DTYPE,
    Edges,
    FloatScalar,
    Pyramid,
    Quad,
    Tri,
)

APEX = 4

VOLUME_TETS = ((0, 1, 2, 4), (0, 2, 3, 4))
"""Two tets whose signed volumes sum to the pyramid volume."""

JACOBIAN_TETS = ((0, 1, 2, 4), (2, 3, 0, 4), (0, 1, 3, 4), (1, 2, 3, 4))
"""Four overlapping corner tets, one per base corner, for the Jacobian metrics."""

BASE_FACE = (0, 1, 2, 3)
"""Base quadrilateral vertices."""

TRIANGLE_FACES = ((0, 1, 4), (1, 2, 4), (2, 3, 4), (3, 0, 4))
"""Lateral triangles, one per base edge, closing at the apex."""

EDGES = ((0, 1), (1, 2), (2, 3), (3, 0), (0, 4), (1, 4), (2, 4), (3, 4))
"""Directed (tail, head) edges: base perimeter first, then base-to-apex."""

SCALED_JACOBIAN_EDGES = ((0, 1, 5), (2, 3, 7), (0, 3, 4), (1, 2, 6))
"""Indices into EDGES of the three edges scaling each JACOBIAN_TETS entry."""


@jax.tree_util.register_dataclass
@dataclass(frozen=True)
class Faces:
    """Boundary faces of a pyramid."""

    base: Quad
    """Base quadrilateral [4, 3]."""

    triangles: jax.Array
    """Lateral triangles [4, 3, 3], ordered as TRIANGLE_FACES."""

    def triangle(self, index: int) -> Tri:
        """Return a single lateral triangle [3, 3]."""
        return self.triangles[index]


def _gather(coordinates: Pyramid, table: tuple) -> jax.Array:
    return jnp.asarray(coordinates, dtype=FLOAT_DTYPE)[jnp.array(table)]


def make_volume_tets(coordinates: Pyramid) -> jax.Array:
    """
    Split a pyramid into the two tets used for its volume.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.

    Returns
    -------
    (2, 4, 3) Array
        Tets {0, 1, 2, 4} and {0, 2, 3, 4}. Their signed volumes sum to the
        signed pyramid volume whether or not the base is convex.
    """
    return _gather(coordinates, VOLUME_TETS)


def make_jacobian_tets(coordinates: Pyramid) -> jax.Array:
    """
    Split a pyramid into the four corner tets used by the Jacobian metrics.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.

    Returns
    -------
    (4, 4, 3) Array
        Tets {0, 1, 2, 4}, {2, 3, 0, 4}, {0, 1, 3, 4}, {1, 2, 3, 4}. Each one
        keeps the base winding so a valid pyramid gives positive Jacobians.

    Notes
    -----
    The tets overlap; they do not partition the volume and must not be used
    in place of make_volume_tets.
    """
    return _gather(coordinates, JACOBIAN_TETS)


def make_faces(coordinates: Pyramid) -> Faces:
    """
    Extract the base quadrilateral and the four lateral triangles.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.

    Returns
    -------
    Faces
        Base {0, 1, 2, 3} and triangles {0, 1, 4}, {1, 2, 4}, {2, 3, 4}, {3, 0, 4}.
    """
    return Faces(
        base=_gather(coordinates, BASE_FACE),
        triangles=_gather(coordinates, TRIANGLE_FACES),
    )


def make_edges(coordinates: Pyramid) -> Edges:
    """
    Build the eight directed edge vectors of a pyramid.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.

    Returns
    -------
    (8, 3) Edges
        0->1, 1->2, 2->3, 3->0, 0->4, 1->4, 2->4, 3->4.
    """
    points = jnp.asarray(coordinates, dtype=FLOAT_DTYPE)
    return jnp.stack([vector.between(points[tail], points[head]) for tail, head in EDGES])


def largest_edge(coordinates: Pyramid) -> FloatScalar:
    """
    Length of the longest pyramid edge.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.

    Returns
    -------
    length : FloatScalar
        Maximum edge length. Compared on squared lengths, one sqrt at the end.
    """
    edges = make_edges(coordinates)
    max_squared = vector.length_squared(edges[0])
    for edge in edges[1:]:
        max_squared = jnp.maximum(max_squared, vector.length_squared(edge))
    return jnp.sqrt(max_squared)


def distance_apex_to_base(coordinates: Pyramid) -> tuple[FloatScalar, FloatScalar]:
    """
    Signed distance from the apex to the base plane, and its tilt cosine.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.

    Returns
    -------
    distance : FloatScalar
        (apex - centroid) . n / |n|, with centroid the mean of the base
        vertices and n = (v1 - v0) x (v3 - v0). Positive when the apex lies on
        the side the base winding points to.
    cos_angle : FloatScalar
        distance / |apex - centroid|, cosine of the angle between the
        centroid-to-apex vector and the base normal.

    Notes
    -----
    A degenerate base (|n| below DBL_MIN) gives distance and cosine 0, and an
    apex at the centroid gives cosine 0, so callers read them as zero quality.
    """
    points = jnp.asarray(coordinates, dtype=FLOAT_DTYPE)
    a, b, c, d, peak = points

    centroid = vector.divide(a + b + c + d, 4.0)
    normal = vector.cross(vector.between(a, b), vector.between(a, d))
    normal_length = vector.length(normal)
    pq = vector.between(centroid, peak)
    pq_length = vector.length(pq)

    zero = jnp.array(0.0, dtype=FLOAT_DTYPE)
    distance = jax.lax.cond(
        normal_length < DBL_MIN,
        lambda: zero,
        lambda: vector.dot(pq, normal) / normal_length,
    )
    cos_angle = jax.lax.cond(
        pq_length < DBL_MIN,
        lambda: zero,
        lambda: distance / pq_length,
    )
    return distance, cos_angle
