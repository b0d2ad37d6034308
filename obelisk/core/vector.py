"""
Vector module for 3D value arithmetic.

Vectors are (3,) float arrays [x, y, z]. JAX arrays are immutable, so every
operation returns a new vector and no two vectors share storage. Cross
products are right-handed.
"""

import jax
import jax.numpy as jnp

from .primitives import (
    FLOAT_DTYPE,
    BoolScalar,
    FloatScalar,
    Vector3,
    norm_3,
    norm_3_squared,
)


def make(x: float, y: float, z: float) -> Vector3:
    """
    Create a vector from three scalar components.

    Parameters
    ----------
    x, y, z : float
        Components of the vector.

    Returns
    -------
    (3,) Vector3
        Vector [x, y, z].
    """
    return jnp.array([x, y, z], dtype=FLOAT_DTYPE)


def from_coords(xyz) -> Vector3:
    """
    Create a vector from a 3-element coordinate buffer.

    Parameters
    ----------
    xyz : array-like
        Sequence or array holding [x, y, z].

    Returns
    -------
    (3,) Vector3
        Copy of the coordinates as a vector.
    """
    return jnp.asarray(xyz, dtype=FLOAT_DTYPE).reshape(3)


def between(tail: Vector3, head: Vector3) -> Vector3:
    """
    Create the vector pointing from tail to head.

    Parameters
    ----------
    tail : (3,) Vector3
        Start point.
    head : (3,) Vector3
        End point.

    Returns
    -------
    (3,) Vector3
        head - tail.
    """
    return head - tail


def add(v1: Vector3, v2: Vector3) -> Vector3:
    """Componentwise sum v1 + v2."""
    return v1 + v2


def subtract(v1: Vector3, v2: Vector3) -> Vector3:
    """Componentwise difference v1 - v2."""
    return v1 - v2


def negate(v: Vector3) -> Vector3:
    """Vector with every component negated."""
    return -v


def scale(v: Vector3, scalar: FloatScalar) -> Vector3:
    """Vector scaled by a scalar."""
    return v * scalar


def divide(v: Vector3, scalar: FloatScalar) -> Vector3:
    """
    Scale a vector by 1 / scalar.

    Parameters
    ----------
    v : (3,) Vector3
        Vector to divide.
    scalar : FloatScalar
        Divisor, must be non-zero.

    Returns
    -------
    (3,) Vector3
        v / scalar.

    Raises
    ------
    ZeroDivisionError
        If the divisor is a concrete zero.

    Notes
    -----
    A non-zero divisor is a precondition. The check only runs on concrete
    values; inside jit-compiled code the divisor is traced and the caller
    owns the precondition.
    """
    try:
        is_zero = bool(jnp.asarray(scalar) == 0.0)
    except jax.errors.ConcretizationTypeError:
        is_zero = False
    if is_zero:
        raise ZeroDivisionError("vector divided by a zero scalar")
    return v / scalar


def cross(v1: Vector3, v2: Vector3) -> Vector3:
    """
    Right-handed cross product v1 x v2.

    Parameters
    ----------
    v1 : (3,) Vector3
        Left operand.
    v2 : (3,) Vector3
        Right operand.

    Returns
    -------
    (3,) Vector3
        Determinant expansion [y1 z2 - z1 y2, z1 x2 - x1 z2, x1 y2 - y1 x2].
    """
    x1, y1, z1 = v1
    x2, y2, z2 = v2
    return jnp.array(
        [
            y1 * z2 - z1 * y2,
            z1 * x2 - x1 * z2,
            x1 * y2 - y1 * x2,
        ],
        dtype=FLOAT_DTYPE,
    )


def dot(v1: Vector3, v2: Vector3) -> FloatScalar:
    """Dot product of two vectors."""
    return v1[0] * v2[0] + v1[1] * v2[1] + v1[2] * v2[2]


def length(v: Vector3) -> FloatScalar:
    """Euclidean length of a vector."""
    return norm_3(v)


def length_squared(v: Vector3) -> FloatScalar:
    """Squared Euclidean length, for comparisons that avoid the square root."""
    return norm_3_squared(v)


def normalize(v: Vector3) -> tuple[Vector3, FloatScalar]:
    """
    Normalise a vector to unit length.

    Parameters
    ----------
    v : (3,) Vector3
        Input vector.

    Returns
    -------
    unit : (3,) Vector3
        Unit vector, or the input unchanged if its length is exactly zero.
    magnitude : FloatScalar
        Length of the input vector before normalisation.
    """
    magnitude = norm_3(v)
    unit_v = jax.lax.cond(
        magnitude != 0.0,
        lambda: v / magnitude,
        lambda: v,
    )
    return unit_v, magnitude


def unit(v: Vector3) -> Vector3:
    """Unit vector in the direction of v; a zero vector stays zero."""
    unit_v, _ = normalize(v)
    return unit_v


def set_length(v: Vector3, new_length: FloatScalar) -> Vector3:
    """
    Rescale a vector to a new length, keeping its direction.

    A zero vector has no direction and is returned unchanged.
    """
    return unit(v) * new_length


def interior_angle(v1: Vector3, v2: Vector3) -> FloatScalar:
    """
    Angle between two vectors in degrees.

    Parameters
    ----------
    v1 : (3,) Vector3
        First vector.
    v2 : (3,) Vector3
        Second vector.

    Returns
    -------
    angle : FloatScalar
        Angle in [0, 180] degrees, or 0 if either vector has zero length.

    Notes
    -----
    The cosine is clipped to [-1, 1] so round-off on (anti)parallel vectors
    cannot push arccos out of its domain.
    """
    len_1 = norm_3(v1)
    len_2 = norm_3(v2)

    def angle() -> FloatScalar:
        cos_angle = jnp.clip(dot(v1, v2) / (len_1 * len_2), -1.0, 1.0)
        return jnp.rad2deg(jnp.arccos(cos_angle))

    return jax.lax.cond(
        jnp.logical_and(len_1 > 0.0, len_2 > 0.0),
        angle,
        lambda: jnp.array(0.0, dtype=FLOAT_DTYPE),
    )


def perpendicular_z(v: Vector3) -> Vector3:
    """
    Rotate a vector by -90 degrees about the z-axis.

    Only meaningful in the XY plane; the z component is carried through.
    """
    x, y, z = v
    return jnp.array([y, -x, z], dtype=FLOAT_DTYPE)


def equal(v1: Vector3, v2: Vector3) -> BoolScalar:
    """Exact componentwise equality, no tolerance applied."""
    return jnp.all(v1 == v2)
