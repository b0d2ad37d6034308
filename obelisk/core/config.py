"""Configuration dataclass for pyramid quality evaluation."""

from dataclasses import dataclass

from .evaluators import QuadShapeFn, TetJacobianFn, quad_shape, tet_jacobian


@dataclass(frozen=True)
class QualityConfig:
    """Configuration for metric dispatch and input validation."""

    tet_jacobian: TetJacobianFn = tet_jacobian
    """Tetrahedron Jacobian evaluator used by the Jacobian metrics."""

    quad_shape: QuadShapeFn = quad_shape
    """Quadrilateral shape evaluator used for the pyramid base."""

    first_only: bool = False
    """Compute only the highest-priority requested metric (volume, Jacobian,
    scaled Jacobian, shape) instead of every requested one."""

    check_finite: bool = True
    """Reject coordinates containing NaN or infinity before evaluating."""
