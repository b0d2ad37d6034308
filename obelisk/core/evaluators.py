"""
Single-element evaluators consumed by the pyramid metrics.

The pyramid metrics treat these as injected callables: any function with the
same signature (coordinates in, scalar out) can be passed in their place,
e.g. a stub in tests or an evaluator from another quality library.
"""

from collections.abc import Callable

import jax
import jax.numpy as jnp

from . import vector
from .primitives import DBL_MAX, DBL_MIN, FLOAT_DTYPE, FloatScalar, Quad, Tet

TetJacobianFn = Callable[[Tet], FloatScalar]
QuadShapeFn = Callable[[Quad], FloatScalar]


def tet_jacobian(tet: Tet) -> FloatScalar:
    """
    Jacobian of a linear tetrahedron.

    Parameters
    ----------
    tet : (4, 3) Tet
        Tetrahedron vertices [p0, p1, p2, p3].

    Returns
    -------
    jacobian : FloatScalar
        Scalar triple product (p3 - p0) . ((p1 - p0) x (p2 - p0)), six times
        the signed volume. Positive when p3 lies on the side of the p0, p1, p2
        triangle its right-handed normal points to.
    """
    side_0 = vector.between(tet[0], tet[1])
    side_2 = vector.between(tet[0], tet[2])
    side_3 = vector.between(tet[0], tet[3])
    return vector.dot(side_3, vector.cross(side_0, side_2))


def quad_signed_corner_areas(quad: Quad) -> jax.Array:
    """
    Signed corner areas of a quadrilateral.

    Parameters
    ----------
    quad : (4, 3) Quad
        Quadrilateral vertices in winding order.

    Returns
    -------
    (4,) Array
        Corner normal of each vertex projected onto the unit centre normal.
        Negative entries mark reflex or inverted corners.
    """
    edges = jnp.roll(quad, -1, axis=0) - quad

    # Corner i sits between incoming edge i-1 and outgoing edge i
    corner_normals = jnp.stack(
        [vector.cross(edges[i - 1], edges[i]) for i in range(4)]
    )

    principal_axis_1 = edges[0] - edges[2]
    principal_axis_2 = edges[1] - edges[3]
    centre_normal = vector.unit(vector.cross(principal_axis_1, principal_axis_2))
    return corner_normals @ centre_normal


def quad_shape(quad: Quad) -> FloatScalar:
    """
    Shape quality of a quadrilateral.

    Parameters
    ----------
    quad : (4, 3) Quad
        Quadrilateral vertices in winding order.

    Returns
    -------
    shape : FloatScalar
        Minimum over corners of 2 * area_i / (|e_i|^2 + |e_(i-1)|^2), which
        is 1 for a square. Zero for degenerate or inverted quads.
    """
    edges = jnp.roll(quad, -1, axis=0) - quad
    lengths_squared = jnp.sum(edges**2, axis=1)
    corner_areas = quad_signed_corner_areas(quad)

    def shape() -> FloatScalar:
        ratios = corner_areas / (lengths_squared + jnp.roll(lengths_squared, 1))
        min_shape = 2.0 * jnp.min(ratios)
        return jnp.where(
            min_shape < DBL_MIN,
            jnp.array(0.0, dtype=FLOAT_DTYPE),
            jnp.minimum(min_shape, DBL_MAX),
        )

    return jax.lax.cond(
        jnp.any(lengths_squared <= DBL_MIN),
        lambda: jnp.array(0.0, dtype=FLOAT_DTYPE),
        shape,
    )
