"""
Primitives module for shared array aliases, numerical constants, and basic functions.
"""

import jax.numpy as jnp
from jaxtyping import Array, Bool, Float

# Project precision settings (x64 is enabled on package import)
FLOAT_DTYPE = jnp.float64
EPS = 1e-12

# Numerical floor and ceiling used by the degenerate-geometry guards
DBL_MIN = 1.0e-30
DBL_MAX = 1.0e30

# Fixed normalisation constant for a right-tetrahedron corner
SQRT2_HALVES = 0.7071067811865476

# Project type aliases
BoolScalar = Bool[Array, ""]
FloatScalar = Float[Array, ""]
Vector3 = Float[Array, "3"]
Pyramid = Float[Array, "5 3"]
Tet = Float[Array, "4 3"]
Quad = Float[Array, "4 3"]
Tri = Float[Array, "3 3"]
Edges = Float[Array, "8 3"]


def norm_3(v: Vector3) -> FloatScalar:
    """
    Compute the Euclidean norm of a 3D vector.

    Parameters
    ----------
    v : Vector3
        3D vector [x, y, z].

    Returns
    -------
    norm : FloatScalar
        L2 norm (magnitude) of the vector.
    """
    return jnp.sqrt(v[0] ** 2 + v[1] ** 2 + v[2] ** 2)


def norm_3_squared(v: Vector3) -> FloatScalar:
    """
    Compute the squared Euclidean norm of a 3D vector.

    Parameters
    ----------
    v : Vector3
        3D vector [x, y, z].

    Returns
    -------
    norm_squared : FloatScalar
        Sum of squared components, no square root taken.
    """
    return v[0] ** 2 + v[1] ** 2 + v[2] ** 2
