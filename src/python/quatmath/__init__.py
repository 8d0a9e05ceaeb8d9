"""
===============================================================================
QUATMATH - Quaternion Rotation Library
===============================================================================
Quaternion algebra for representing, composing, interpolating and applying
3D rotations in graphics, animation and physics code.

Submodules:
    quaternion  -- Quaternion value type, Hamilton product, slerp, rotation
    vector      -- Vector3 value type consumed by the quaternion operations
    constants   -- Numeric precision, thresholds and angle conversions
    exceptions  -- Error hierarchy for degenerate input
===============================================================================
"""

from .exceptions import (
    DegenerateQuaternionError,
    DegenerateVectorError,
    QuaternionError,
)
from .quaternion import Quaternion, QuaternionResult
from .vector import Vector3, as_vector3

__all__ = [
    "DegenerateQuaternionError",
    "DegenerateVectorError",
    "Quaternion",
    "QuaternionError",
    "QuaternionResult",
    "Vector3",
    "as_vector3",
]

__version__ = "1.0.0"
