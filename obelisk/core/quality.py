"""
Metric dispatch for pyramid elements.

Entry points that validate caller input, select the requested metrics from a
PyramidMetric bit-flag, and collect the values into a PyramidMetricVals record.
Validation runs eagerly in Python; the metric evaluation itself is pure JAX.
"""

import logging
import operator
from functools import partial

import chex
import jax
import jax.numpy as jnp
from jaxtyping import Array, Float

from .config import QualityConfig
from .errors import PyramidInputError
from .metrics import (
    PYRAMID_SHAPE,
    pyramid_jacobian,
    pyramid_scaled_jacobian,
    pyramid_shape,
    pyramid_volume,
)
from .primitives import FLOAT_DTYPE, FloatScalar, Pyramid
from .state import METRIC_PRIORITY, PyramidMetric, PyramidMetricVals

logger = logging.getLogger(__name__)


def _check_coordinates(coordinates, expected_shape: tuple, check_finite: bool) -> jax.Array:
    """
    Convert coordinates to a float array and check shape and finiteness.

    ``expected_shape`` may hold None for an axis of any length.
    """
    try:
        points = jnp.asarray(coordinates, dtype=FLOAT_DTYPE)
    except (TypeError, ValueError) as e:
        raise PyramidInputError(f"Coordinates are not numeric: {e}") from e

    try:
        chex.assert_shape(points, expected_shape)
    except AssertionError as e:
        logger.warning("Rejected pyramid coordinates of shape %s", points.shape)
        raise PyramidInputError(
            f"Expected pyramid coordinates of shape {expected_shape}, got {points.shape}"
        ) from e

    if check_finite and not bool(jnp.all(jnp.isfinite(points))):
        logger.warning("Rejected pyramid coordinates containing NaN or infinity")
        raise PyramidInputError("Pyramid coordinates must be finite")

    return points


def validate_coordinates(coordinates, check_finite: bool = True) -> Pyramid:
    """
    Convert caller coordinates to a float array and check they form a pyramid.

    Parameters
    ----------
    coordinates : array-like
        Five points [base 0..3 in winding order, apex 4], each [x, y, z].
    check_finite : bool, optional
        Also reject NaN and infinite coordinates.

    Returns
    -------
    (5, 3) Pyramid
        Coordinates as a float64 array.

    Raises
    ------
    PyramidInputError
        If the point count or dimension is wrong, or a coordinate is not finite.
    """
    return _check_coordinates(coordinates, PYRAMID_SHAPE, check_finite)


def coerce_request(request) -> PyramidMetric:
    """
    Normalise a request flag, dropping bits that name no metric.

    Raises
    ------
    TypeError
        If the request is not an integer flag.
    """
    message = f"Metric request must be a PyramidMetric flag, got {type(request)}"
    if isinstance(request, bool):
        raise TypeError(message)
    try:
        bits = operator.index(request)
    except TypeError as e:
        raise TypeError(message) from e
    unknown = bits & ~int(PyramidMetric.ALL)
    if unknown:
        logger.debug("Ignoring unknown metric request bits %#x", unknown)
    return PyramidMetric(bits & int(PyramidMetric.ALL))


def selected_metrics(request: PyramidMetric, first_only: bool = False) -> tuple[PyramidMetric, ...]:
    """
    Metrics to compute for a request, in priority order.

    Parameters
    ----------
    request : PyramidMetric
        Requested metrics.
    first_only : bool, optional
        Keep only the highest-priority requested metric.

    Returns
    -------
    tuple[PyramidMetric, ...]
        Single-metric flags, volume first and shape last.
    """
    selected = tuple(metric for metric in METRIC_PRIORITY if metric in request)
    return selected[:1] if first_only else selected


def _compute_metric(
    metric: PyramidMetric,
    points: Pyramid,
    config: QualityConfig,
) -> FloatScalar:
    if metric == PyramidMetric.VOLUME:
        return pyramid_volume(points)
    elif metric == PyramidMetric.JACOBIAN:
        return pyramid_jacobian(points, tet_jacobian=config.tet_jacobian)
    elif metric == PyramidMetric.SCALED_JACOBIAN:
        return pyramid_scaled_jacobian(points, tet_jacobian=config.tet_jacobian)
    elif metric == PyramidMetric.SHAPE:
        return pyramid_shape(points, quad_shape=config.quad_shape)
    else:
        raise ValueError(f"Not a single pyramid metric: {metric!r}")


def _evaluate(
    points: Pyramid,
    metrics: tuple[PyramidMetric, ...],
    config: QualityConfig,
) -> PyramidMetricVals:
    vals = PyramidMetricVals.zeros()
    for metric in metrics:
        vals = vals.with_metric(metric, _compute_metric(metric, points, config))
    return vals


@partial(jax.jit, static_argnames=("metrics", "config"))
def _evaluate_batch(
    points: Float[Array, "n 5 3"],
    metrics: tuple[PyramidMetric, ...],
    config: QualityConfig,
) -> PyramidMetricVals:
    return jax.vmap(partial(_evaluate, metrics=metrics, config=config))(points)


def pyramid_quality(
    coordinates,
    request: PyramidMetric = PyramidMetric.ALL,
    config: QualityConfig = QualityConfig(),
) -> PyramidMetricVals:
    """
    Compute the requested quality metrics of one pyramid.

    Parameters
    ----------
    coordinates : array-like
        Five points [base 0..3 in winding order, apex 4], each [x, y, z].
    request : PyramidMetric, optional
        Bit-flag of metrics to compute, all of them by default.
    config : QualityConfig, optional
        Evaluators, dispatch mode and validation settings.

    Returns
    -------
    PyramidMetricVals
        Requested metrics; every other field is zero.

    Raises
    ------
    PyramidInputError
        If the coordinates do not describe a single finite pyramid.

    Notes
    -----
    By default every requested metric is computed. With
    ``config.first_only`` only the first requested metric in the order
    volume, Jacobian, scaled Jacobian, shape is computed and the rest stay zero.
    """
    points = validate_coordinates(coordinates, check_finite=config.check_finite)
    metrics = selected_metrics(coerce_request(request), first_only=config.first_only)
    logger.debug(
        "Evaluating pyramid metrics %s (first_only=%s)",
        [metric.name for metric in metrics],
        config.first_only,
    )
    return _evaluate(points, metrics, config)


def pyramid_quality_batch(
    coordinates,
    request: PyramidMetric = PyramidMetric.ALL,
    config: QualityConfig = QualityConfig(),
) -> PyramidMetricVals:
    """
    Compute the requested quality metrics of a batch of pyramids.

    Parameters
    ----------
    coordinates : array-like
        Pyramid coordinates [N, 5, 3].
    request : PyramidMetric, optional
        Bit-flag of metrics to compute, all of them by default.
    config : QualityConfig, optional
        Evaluators, dispatch mode and validation settings. Injected
        evaluators must be traceable by jax.vmap. The compiled evaluator is
        cached per request, config and batch size.

    Returns
    -------
    PyramidMetricVals
        Record whose fields are [N] arrays, one entry per pyramid.

    Raises
    ------
    PyramidInputError
        If the coordinates are not shaped [N, 5, 3] or are not finite.
    """
    points = _check_coordinates(coordinates, (None, *PYRAMID_SHAPE), config.check_finite)
    metrics = selected_metrics(coerce_request(request), first_only=config.first_only)
    logger.debug("Evaluating %d pyramids for metrics %s", points.shape[0], [m.name for m in metrics])
    return _evaluate_batch(points, metrics=metrics, config=config)
