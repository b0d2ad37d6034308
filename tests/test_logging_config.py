"""Tests for logging configuration."""

import logging

from obelisk import quick_quality, unit_pyramid
from obelisk.logging_config import setup_logging


def test_setup_logging(tmp_path) -> None:
    """Test console and file handlers on the package logger."""
    log_file = tmp_path / "obelisk.log"
    logger = setup_logging(level=logging.DEBUG, log_file=str(log_file))
    try:
        assert logger.name == "obelisk"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

        # Calling again replaces rather than duplicates handlers
        logger = setup_logging(level=logging.DEBUG, log_file=str(log_file))
        assert len(logger.handlers) == 2

        quick_quality(unit_pyramid(height=1.0))
        for handler in logger.handlers:
            handler.flush()
        assert "Evaluating pyramid metrics" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_quick_quality() -> None:
    """Test the convenience wrapper returns plain floats."""
    result = quick_quality(unit_pyramid(height=2.0**0.5 / 2.0))
    assert set(result) == {"volume", "jacobian", "scaled_jacobian", "shape"}
    assert all(isinstance(value, float) for value in result.values())
    assert abs(result["scaled_jacobian"] - 1.0) < 1e-9
    assert abs(result["shape"] - 1.0) < 1e-9
