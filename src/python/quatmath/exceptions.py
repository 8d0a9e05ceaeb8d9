"""Quaternion and vector exceptions."""


class QuaternionError(Exception):
    """Base exception for quatmath operations."""

    pass


class DegenerateQuaternionError(QuaternionError, ValueError):
    """Quaternion has zero length where an inverse is required."""

    pass


class DegenerateVectorError(QuaternionError, ValueError):
    """Vector has zero length where a direction is required."""

    pass
