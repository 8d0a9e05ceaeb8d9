"""
===============================================================================
QUATMATH - Three-Component Vector
===============================================================================

Minimal 3D vector value type consumed by the quaternion library. Quaternions
need exactly three things from a vector:

    - component access  v.x, v.y, v.z
    - v.normalize()     returning a unit-length copy
    - Vector3(x, y, z)  three-argument construction

Any object offering those three can be passed where a Vector3 is expected.
Plain 3-element sequences and numpy arrays are adapted with as_vector3().

Components are stored in single precision, matching the quaternion type.

===============================================================================
"""

import numpy as np
from typing import Iterator, Sequence, Union

from .constants import FLOAT_DTYPE
from .exceptions import DegenerateVectorError


class Vector3:
    """
    Three-component single-precision vector.

    Attributes
    ----------
    x : float
        First component.
    y : float
        Second component.
    z : float
        Third component.

    Examples
    --------
    >>> v = Vector3(3.0, 0.0, 4.0)
    >>> v.length()
    5.0
    >>> v.normalize()
    Vector3(x=+0.60000002, y=+0.00000000, z=+0.80000001)
    """

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self._v = np.array([x, y, z], dtype=FLOAT_DTYPE)

    @staticmethod
    def from_array(values: Union[Sequence[float], np.ndarray]) -> 'Vector3':
        """
        Create a vector from any 3-element sequence or array.

        Raises
        ------
        ValueError
            If the input does not hold exactly three values.
        """
        arr = np.asarray(values, dtype=FLOAT_DTYPE)
        if arr.shape != (3,):
            raise ValueError(f"Vector must have 3 elements, got shape {arr.shape}")
        return Vector3(arr[0], arr[1], arr[2])

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def x(self) -> float:
        return float(self._v[0])

    @property
    def y(self) -> float:
        return float(self._v[1])

    @property
    def z(self) -> float:
        return float(self._v[2])

    @property
    def components(self) -> np.ndarray:
        """Copy of the components as a float32 array [x, y, z]."""
        return self._v.copy()

    # =========================================================================
    # VECTOR OPERATIONS
    # =========================================================================

    def length_squared(self) -> float:
        return float(np.dot(self._v, self._v))

    def length(self) -> float:
        return float(np.sqrt(np.dot(self._v, self._v)))

    def dot(self, other: 'Vector3') -> float:
        """Inner product with another vector."""
        other = as_vector3(other)
        return float(self._v[0] * other.x + self._v[1] * other.y
                     + self._v[2] * other.z)

    def is_zero(self) -> bool:
        """True only when all three components are exactly zero."""
        return not self._v.any()

    def normalize(self) -> 'Vector3':
        """
        Return a unit-length copy of this vector.

        The vector itself is left untouched.

        Returns
        -------
        Vector3
            New vector with |v| = 1.

        Raises
        ------
        DegenerateVectorError
            If every component is zero and no direction exists.
        """
        length_sq = np.dot(self._v, self._v)
        if length_sq == 0.0:
            raise DegenerateVectorError(
                "Cannot normalize a zero-length vector. "
                "A direction is undefined for (0, 0, 0)."
            )
        unit = self._v / np.sqrt(length_sq)
        return Vector3(unit[0], unit[1], unit[2])

    # =========================================================================
    # PROTOCOLS
    # =========================================================================

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        if dtype is None:
            return self._v.copy()
        return self._v.astype(dtype)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __eq__(self, other: object) -> bool:
        """Exact componentwise equality."""
        if not isinstance(other, Vector3):
            return NotImplemented
        return bool(np.array_equal(self._v, other._v))

    def __repr__(self) -> str:
        return (f"Vector3(x={self.x:+.8f}, y={self.y:+.8f}, "
                f"z={self.z:+.8f})")


def _satisfies_vector_contract(obj: object) -> bool:
    return all(hasattr(obj, name) for name in ('x', 'y', 'z', 'normalize'))


def as_vector3(value) -> Vector3:
    """
    Adapt a value to the vector contract.

    Objects that already provide x, y, z and normalize() are returned as-is,
    so callers may pass their own vector types. Sequences and numpy arrays
    are converted to a Vector3.

    Raises
    ------
    ValueError
        If a sequence or array does not hold exactly three values.
    TypeError
        If the value is a quaternion (anything with a w component).
    """
    if hasattr(value, 'w'):
        raise TypeError(
            f"Expected a 3-component vector, got {type(value).__name__} "
            "with a w component"
        )
    if isinstance(value, Vector3) or _satisfies_vector_contract(value):
        return value
    return Vector3.from_array(value)
