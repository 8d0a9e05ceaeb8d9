"""
===============================================================================
QUATMATH - Numeric Constants
===============================================================================
Central repository for the numeric policy shared by the quaternion and vector
types: component storage precision, interpolation thresholds, comparison
tolerances and angle conversion factors. All angles are in radians.
===============================================================================
"""

import numpy as np


# =============================================================================
# COMPONENT STORAGE
# =============================================================================
FLOAT_DTYPE = np.float32               # Single precision, one value per component

# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
HALF_PI = 0.5 * np.pi
RAD2DEG = 180.0 / PI

# =============================================================================
# INTERPOLATION
# =============================================================================
# Above this cosine the arc between two quaternions is too short for
# 1/sin(angle) to be stable, and slerp blends linearly instead.
SLERP_LINEAR_THRESHOLD = FLOAT_DTYPE(0.999)

# =============================================================================
# COMPARISON
# =============================================================================
DEFAULT_ATOL = 1e-6                    # Absolute tolerance for allclose()


def angle_to_degrees(radians: float) -> float:
    """Convert an angle in radians to degrees."""
    return radians * RAD2DEG
