"""Request flags and result records for pyramid quality evaluation."""

import enum
from dataclasses import dataclass, replace

import jax
import jax.numpy as jnp

from .primitives import FLOAT_DTYPE, FloatScalar


class PyramidMetric(enum.IntFlag):
    """Bit-flags selecting which pyramid metrics to compute."""

    NONE = 0
    VOLUME = 1
    JACOBIAN = 2
    SCALED_JACOBIAN = 4
    SHAPE = 8
    ALL = VOLUME | JACOBIAN | SCALED_JACOBIAN | SHAPE


METRIC_PRIORITY = (
    PyramidMetric.VOLUME,
    PyramidMetric.JACOBIAN,
    PyramidMetric.SCALED_JACOBIAN,
    PyramidMetric.SHAPE,
)
"""Order in which a first-only request picks its single metric."""


@jax.tree_util.register_dataclass
@dataclass(frozen=True)
class PyramidMetricVals:
    """Quality values of a pyramid; unrequested metrics stay at zero."""

    volume: FloatScalar
    """Signed volume, negative for an inverted element."""

    jacobian: FloatScalar
    """Minimum corner Jacobian."""

    scaled_jacobian: FloatScalar
    """Minimum edge-normalised corner Jacobian, 1 for the ideal pyramid."""

    shape: FloatScalar
    """Shape quality in [0, 1]."""

    @classmethod
    def zeros(cls) -> "PyramidMetricVals":
        """Return a record with every metric at zero."""
        return cls(
            volume=jnp.array(0.0, dtype=FLOAT_DTYPE),
            jacobian=jnp.array(0.0, dtype=FLOAT_DTYPE),
            scaled_jacobian=jnp.array(0.0, dtype=FLOAT_DTYPE),
            shape=jnp.array(0.0, dtype=FLOAT_DTYPE),
        )

    def with_metric(self, metric: PyramidMetric, value: FloatScalar) -> "PyramidMetricVals":
        """Return a copy with a single metric field set."""
        return replace(self, **{METRIC_FIELDS[metric]: value})

    def as_dict(self) -> dict[str, float]:
        """Plain float view of the record, for reporting."""
        return {name: float(getattr(self, name)) for name in METRIC_FIELDS.values()}


METRIC_FIELDS = {
    PyramidMetric.VOLUME: "volume",
    PyramidMetric.JACOBIAN: "jacobian",
    PyramidMetric.SCALED_JACOBIAN: "scaled_jacobian",
    PyramidMetric.SHAPE: "shape",
}
"""Result record field for each single-metric flag."""
