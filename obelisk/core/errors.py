"""Exceptions raised for malformed metric input."""


class PyramidInputError(ValueError):
    """Coordinates do not describe a single five-point pyramid."""
