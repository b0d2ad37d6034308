"""
Pyramid quality metrics.

Every metric is a pure function of the (5, 3) coordinate array [base 0..3 in
winding order, apex 4]. Degenerate geometry degrades to 0 instead of raising,
so the metrics can be jit-compiled and vmapped over whole meshes.
"""

import jax
import jax.numpy as jnp

from . import vector
from .decomposition import (
    SCALED_JACOBIAN_EDGES,
    distance_apex_to_base,
    largest_edge,
    make_edges,
    make_faces,
    make_jacobian_tets,
    make_volume_tets,
)
from .errors import PyramidInputError
from .evaluators import QuadShapeFn, TetJacobianFn, quad_shape, tet_jacobian
from .primitives import DBL_MAX, DBL_MIN, FLOAT_DTYPE, SQRT2_HALVES, FloatScalar, Pyramid

PYRAMID_SHAPE = (5, 3)


def _as_pyramid(coordinates: Pyramid) -> jax.Array:
    points = jnp.asarray(coordinates, dtype=FLOAT_DTYPE)
    if points.shape != PYRAMID_SHAPE:
        raise PyramidInputError(
            f"Expected pyramid coordinates of shape {PYRAMID_SHAPE}, got {points.shape}"
        )
    return points


def _zero() -> FloatScalar:
    return jnp.array(0.0, dtype=FLOAT_DTYPE)


def _corner_jacobians(points: jax.Array, tet_jacobian: TetJacobianFn) -> list[FloatScalar]:
    # Python loop rather than vmap so injected evaluators need not be traceable in batch
    return [
        jnp.asarray(tet_jacobian(tet), dtype=FLOAT_DTYPE)
        for tet in make_jacobian_tets(points)
    ]


def pyramid_volume(coordinates: Pyramid) -> FloatScalar:
    """
    Signed volume of a pyramid.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.

    Returns
    -------
    volume : FloatScalar
        Sum of the signed volumes of the two volume tets. Negative for an
        inverted element (base wound clockwise seen from the apex); never
        clamped. Zero when the input does not hold exactly five points.
    """
    points = jnp.asarray(coordinates, dtype=FLOAT_DTYPE)
    if points.shape != PYRAMID_SHAPE:
        return _zero()

    volume = _zero()
    for tet in make_volume_tets(points):
        side_1 = vector.between(tet[0], tet[1])
        side_2 = vector.between(tet[0], tet[2])
        side_3 = vector.between(tet[0], tet[3])
        volume = volume + vector.dot(side_3, vector.cross(side_1, side_2)) / 6.0
    return volume


def pyramid_jacobian(
    coordinates: Pyramid,
    tet_jacobian: TetJacobianFn = tet_jacobian,
) -> FloatScalar:
    """
    Minimum corner Jacobian of a pyramid.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.
    tet_jacobian : TetJacobianFn, optional
        Tetrahedron Jacobian evaluator applied to each corner tet.

    Returns
    -------
    jacobian : FloatScalar
        min(min(j1, j2), min(j3, j4)) over the four corner tets. The worst
        corner governs solver conditioning, so the minimum is reported.

    Raises
    ------
    PyramidInputError
        If coordinates are not shaped (5, 3).
    """
    points = _as_pyramid(coordinates)
    j1, j2, j3, j4 = _corner_jacobians(points, tet_jacobian)
    return jnp.minimum(jnp.minimum(j1, j2), jnp.minimum(j3, j4))


def pyramid_scaled_jacobian(
    coordinates: Pyramid,
    tet_jacobian: TetJacobianFn = tet_jacobian,
) -> FloatScalar:
    """
    Minimum edge-normalised corner Jacobian of a pyramid.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.
    tet_jacobian : TetJacobianFn, optional
        Tetrahedron Jacobian evaluator applied to each corner tet.

    Returns
    -------
    scaled_jacobian : FloatScalar
        Minimum over corners of j_i / (l_a * l_b * l_c * sqrt(2) / 2), with
        (a, b, c) taken from SCALED_JACOBIAN_EDGES. Zero if any of the eight
        edges is shorter than DBL_MIN.

    Raises
    ------
    PyramidInputError
        If coordinates are not shaped (5, 3).

    Notes
    -----
    The value is 1 for a square base with the apex above the centroid at a
    height of half the base diagonal. Taller pyramids exceed 1.
    """
    points = _as_pyramid(coordinates)
    jacobians = _corner_jacobians(points, tet_jacobian)
    lengths = jnp.stack([vector.length(edge) for edge in make_edges(points)])

    def scaled() -> FloatScalar:
        min_scaled_jac = jnp.array(DBL_MAX, dtype=FLOAT_DTYPE)
        for jac, (a, b, c) in zip(jacobians, SCALED_JACOBIAN_EDGES):
            scaled_jac = jac / (lengths[a] * lengths[b] * lengths[c] * SQRT2_HALVES)
            min_scaled_jac = jnp.minimum(scaled_jac, min_scaled_jac)
        return min_scaled_jac

    return jax.lax.cond(jnp.any(lengths < DBL_MIN), _zero, scaled)


def pyramid_shape(
    coordinates: Pyramid,
    quad_shape: QuadShapeFn = quad_shape,
) -> FloatScalar:
    """
    Shape quality of a pyramid.

    Parameters
    ----------
    coordinates : (5, 3) Pyramid
        Pyramid vertices, base 0..3 then apex.
    quad_shape : QuadShapeFn, optional
        Quadrilateral shape evaluator applied to the base.

    Returns
    -------
    shape : FloatScalar
        base_shape * cos_angle * height_ratio, in [0, 1].

    Raises
    ------
    PyramidInputError
        If coordinates are not shaped (5, 3).

    Notes
    -----
    The height ratio compares the apex distance d with the reference length
    r = largest_edge * sqrt(2) / 2: d / r for a flat pyramid, r / d for a tall
    one, peaking at 1 when d == r. The result is 0 when the base shape is
    exactly 0, or when the apex is on or behind the base plane.
    """
    points = _as_pyramid(coordinates)
    faces = make_faces(points)

    base_shape = jnp.asarray(quad_shape(faces.base), dtype=FLOAT_DTYPE)
    distance, cos_angle = distance_apex_to_base(points)
    reference_length = largest_edge(points) * SQRT2_HALVES

    def shape() -> FloatScalar:
        height_ratio = jnp.where(
            distance < reference_length,
            distance / reference_length,
            reference_length / distance,
        )
        return base_shape * cos_angle * height_ratio

    degenerate = jnp.logical_or(
        base_shape == 0.0,
        jnp.logical_or(distance <= 0.0, cos_angle <= 0.0),
    )
    return jax.lax.cond(degenerate, _zero, shape)
