"""Obelisk - JAX-based quality metrics for pyramid mesh elements."""

import logging

import jax
import jax.numpy as jnp

# Metric floors are tuned for double precision
jax.config.update("jax_enable_x64", True)

from obelisk.core.config import QualityConfig  # noqa: E402
from obelisk.core.decomposition import (  # noqa: E402
    Faces,
    distance_apex_to_base,
    largest_edge,
    make_edges,
    make_faces,
    make_jacobian_tets,
    make_volume_tets,
)
from obelisk.core.errors import PyramidInputError  # noqa: E402
from obelisk.core.evaluators import quad_shape, tet_jacobian  # noqa: E402
from obelisk.core.metrics import (  # noqa: E402
    pyramid_jacobian,
    pyramid_scaled_jacobian,
    pyramid_shape,
    pyramid_volume,
)
from obelisk.core.quality import (  # noqa: E402
    pyramid_quality,
    pyramid_quality_batch,
    validate_coordinates,
)
from obelisk.core.state import PyramidMetric, PyramidMetricVals  # noqa: E402
from obelisk.logging_config import setup_logging  # noqa: E402

logging.getLogger(__name__).addHandler(logging.NullHandler())


# Convenience functions
def quick_quality(coordinates) -> dict[str, float]:
    """Compute every pyramid metric and return them as plain floats."""
    return pyramid_quality(coordinates, PyramidMetric.ALL).as_dict()


def unit_pyramid(height: float = 1.0) -> jax.Array:
    """Unit-square base at z=0 with the apex above its centre at the given height."""
    return jnp.array(
        [
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [1.0, 1.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.5, 0.5, height],
        ],
        dtype=jnp.float64,
    )


__all__ = [
    # Configuration
    "QualityConfig",
    # Decomposition
    "Faces",
    "make_volume_tets",
    "make_jacobian_tets",
    "make_faces",
    "make_edges",
    "largest_edge",
    "distance_apex_to_base",
    # Evaluators
    "tet_jacobian",
    "quad_shape",
    # Metrics
    "pyramid_volume",
    "pyramid_jacobian",
    "pyramid_scaled_jacobian",
    "pyramid_shape",
    # Dispatch
    "PyramidMetric",
    "PyramidMetricVals",
    "PyramidInputError",
    "pyramid_quality",
    "pyramid_quality_batch",
    "validate_coordinates",
    # Logging
    "setup_logging",
    # Convenience functions
    "quick_quality",
    "unit_pyramid",
]
