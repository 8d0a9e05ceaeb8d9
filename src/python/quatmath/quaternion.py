"""
===============================================================================
QUATMATH - Quaternion Algebra
===============================================================================

Quaternion value type for representing and combining 3D orientations in
graphics, animation and physics code. Quaternions avoid the gimbal lock of
Euler angles and need only 4 numbers instead of the 9 of a rotation matrix.

Convention
----------
Components are stored vector-part first:

    q = (x, y, z, w) = w + x*i + y*j + z*k

where w is the scalar (real) part and (x, y, z) the vector (imaginary) part.
The default quaternion is the identity rotation (0, 0, 0, 1).

A unit quaternion represents a rotation by angle theta about unit axis n:

    q = (sin(theta/2) * n, cos(theta/2))

and rotates a vector v by the sandwich product v' = q * v * q^{-1}.

Normalization
-------------
Nothing is normalized implicitly. A Quaternion may hold any four values;
callers normalize explicitly when they need a rotation. Composition, slerp
and vector rotation assume unit input and do not correct drift themselves.

Mutation
--------
Algebraic operations are pure and return new instances. The only mutators
are set() and load_identity(), which modify in place and return self so calls
can be chained.

Degenerate inverse
------------------
A zero quaternion has no inverse. inverse() and delta() therefore return a
QuaternionResult that is either a quaternion or marked degenerate; nothing
is divided by zero and no exception is raised until the caller asks for the
value with unwrap().

References
----------
    [1] Shoemake, "Animating Rotation with Quaternion Curves",
        SIGGRAPH, 1985.
    [2] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.

===============================================================================
"""

import logging
import numbers

import numpy as np
from typing import Callable, Iterator, NamedTuple, Optional, Union

from .constants import DEFAULT_ATOL, FLOAT_DTYPE, SLERP_LINEAR_THRESHOLD, angle_to_degrees
from .exceptions import DegenerateQuaternionError
from .vector import Vector3, as_vector3

logger = logging.getLogger(__name__)


class QuaternionResult(NamedTuple):
    """
    Outcome of an operation that needs an inverse.

    Parameters
    ----------
    quaternion : Quaternion, optional
        The computed quaternion, or None when the input had zero length.
    """

    quaternion: Optional['Quaternion'] = None

    @property
    def degenerate(self) -> bool:
        """True when no quaternion could be computed."""
        return self.quaternion is None

    def unwrap(self) -> 'Quaternion':
        """
        Return the quaternion or raise if the result is degenerate.

        Raises
        ------
        DegenerateQuaternionError
            If the operation was applied to a zero-length quaternion.
        """
        if self.quaternion is None:
            raise DegenerateQuaternionError(
                "Quaternion has zero length and no inverse."
            )
        return self.quaternion

    def map(self, fn: Callable[['Quaternion'], 'Quaternion']) -> 'QuaternionResult':
        """Apply fn to the quaternion, passing a degenerate result through."""
        if self.quaternion is None:
            return self
        return QuaternionResult(fn(self.quaternion))


class Quaternion:
    """
    Quaternion for 3D rotation representation.

    Attributes
    ----------
    x : float
        First imaginary component (i-axis).
    y : float
        Second imaginary component (j-axis).
    z : float
        Third imaginary component (k-axis).
    w : float
        Scalar (real) component.

    Examples
    --------
    >>> q = Quaternion()  # Identity rotation
    >>> q_rot = Quaternion.from_axis_angle(Vector3(0.0, 0.0, 1.0), np.pi / 2)
    >>> v_rotated = q_rot.rotate_vector(Vector3(1.0, 0.0, 0.0))
    """

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0,
                 w: float = 1.0) -> None:
        """
        Initialize a quaternion from its four components.

        Parameters
        ----------
        x, y, z : float
            Vector part.
        w : float
            Scalar part.

        Notes
        -----
        Values are stored as given (cast to single precision). No
        normalization takes place, so Quaternion(0, 0, 0, 2) keeps length 2.
        """
        self._q = np.array([x, y, z, w], dtype=FLOAT_DTYPE)

    @classmethod
    def _from_array(cls, arr: np.ndarray) -> 'Quaternion':
        q = cls.__new__(cls)
        q._q = np.asarray(arr, dtype=FLOAT_DTYPE).copy()
        return q

    # =========================================================================
    # PROPERTIES - Read access to quaternion components
    # =========================================================================

    @property
    def x(self) -> float:
        """First imaginary component (i-axis)."""
        return float(self._q[0])

    @property
    def y(self) -> float:
        """Second imaginary component (j-axis)."""
        return float(self._q[1])

    @property
    def z(self) -> float:
        """Third imaginary component (k-axis)."""
        return float(self._q[2])

    @property
    def w(self) -> float:
        """Scalar (real) part of the quaternion."""
        return float(self._q[3])

    @property
    def components(self) -> np.ndarray:
        """
        Full quaternion as a 4-element array [x, y, z, w].

        Returns
        -------
        np.ndarray
            Copy of the internal float32 array.
        """
        return self._q.copy()

    @property
    def rotation_angle(self) -> float:
        """
        Rotation angle in radians, theta = 2 * arccos(w).

        Meaningful for unit quaternions only. The result lies in [0, 2*pi];
        q and -q give angles that sum to 2*pi and describe the same rotation.
        """
        # Clamp to [-1, 1] to protect against floating-point overshoot in arccos
        return float(2.0 * np.arccos(np.clip(self._q[3], -1.0, 1.0)))

    @property
    def rotation_axis(self) -> Vector3:
        """
        Unit rotation axis (x, y, z) / sin(theta/2).

        Returns
        -------
        Vector3
            Unit axis. Returns (0, 0, 1) when the vector part is zero
            (identity rotation), where the axis is undefined.
        """
        vec = self._q[:3]
        vec_norm = np.sqrt(np.dot(vec, vec))

        if vec_norm == 0.0:
            # Identity rotation: axis is undefined, return Z by convention
            return Vector3(0.0, 0.0, 1.0)

        axis = vec / vec_norm
        return Vector3(axis[0], axis[1], axis[2])

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @staticmethod
    def identity() -> 'Quaternion':
        """
        Create the identity quaternion (0, 0, 0, 1).

        The identity represents zero rotation and is the multiplicative
        identity: q * identity = identity * q = q.
        """
        return Quaternion(0.0, 0.0, 0.0, 1.0)

    @staticmethod
    def from_axis_angle(axis, angle: float) -> 'Quaternion':
        """
        Create a quaternion from an axis-angle representation.

        The corresponding quaternion is:

            q = (sin(angle/2) * n, cos(angle/2))

        where n is the normalized axis. The rotation follows the right-hand
        rule: positive angles turn counter-clockwise looking down the axis
        towards the origin.

        Parameters
        ----------
        axis : Vector3 or array_like
            Rotation axis. A normalized copy is used; the caller's vector is
            not modified.
        angle : float
            Rotation angle in radians.

        Returns
        -------
        Quaternion
            Unit quaternion representing the rotation.

        Raises
        ------
        DegenerateVectorError
            If the axis is the zero vector.
        """
        n = as_vector3(axis).normalize()

        half_angle = FLOAT_DTYPE(angle) / FLOAT_DTYPE(2.0)
        sin_half = np.sin(half_angle)
        cos_half = np.cos(half_angle)

        return Quaternion(n.x * sin_half, n.y * sin_half, n.z * sin_half,
                          cos_half)

    # =========================================================================
    # IN-PLACE SETTERS
    # =========================================================================

    def set(self, x: Union['Quaternion', float], y: Optional[float] = None,
            z: Optional[float] = None, w: Optional[float] = None) -> 'Quaternion':
        """
        Overwrite this quaternion in place.

        Accepts either another Quaternion, whose components are copied, or
        four scalar components.

        Returns
        -------
        Quaternion
            self, to allow chaining.

        Raises
        ------
        TypeError
            If the arguments are neither a Quaternion nor four components.
        """
        if isinstance(x, Quaternion):
            if y is not None or z is not None or w is not None:
                raise TypeError("set() takes a Quaternion or four components, not both")
            self._q[:] = x._q
            return self

        if y is None or z is None or w is None:
            raise TypeError("set() takes a Quaternion or four components")

        self._q[:] = (x, y, z, w)
        return self

    def load_identity(self) -> 'Quaternion':
        """Reset this quaternion to (0, 0, 0, 1) in place and return self."""
        self._q[:] = (0.0, 0.0, 0.0, 1.0)
        return self

    def is_identity(self) -> bool:
        """
        Check for the exact identity (0, 0, 0, 1).

        No tolerance is applied: a quaternion that is only numerically close
        to the identity is not reported as identity. Use allclose() against
        Quaternion.identity() when tolerance is needed.
        """
        x, y, z, w = self._q
        return bool(x == 0.0 and y == 0.0 and z == 0.0 and w == 1.0)

    # =========================================================================
    # QUATERNION ARITHMETIC
    # =========================================================================

    def negate(self) -> 'Quaternion':
        """
        Return (-x, -y, -z, -w).

        The negated quaternion represents the same rotation (q and -q cover
        SO(3) twice); slerp uses it to pick the shorter arc.
        """
        return Quaternion._from_array(-self._q)

    def conjugate(self) -> 'Quaternion':
        """
        Return the quaternion conjugate (-x, -y, -z, w).

        For unit quaternions the conjugate equals the inverse and represents
        the reverse rotation.
        """
        x, y, z, w = self._q
        return Quaternion(-x, -y, -z, w)

    def inverse(self) -> QuaternionResult:
        """
        Return the multiplicative inverse q^{-1} = q* / |q|^2.

        Returns
        -------
        QuaternionResult
            Degenerate if the squared length is exactly zero. If the squared
            length is exactly one, the conjugate is returned without dividing.
        """
        length_sq = self.length_squared()

        if length_sq == 0.0:
            logger.debug("Inverse requested for zero quaternion %r", self)
            return QuaternionResult(None)

        if length_sq == 1.0:
            # Unit quaternion: the inverse and the conjugate are equal
            return QuaternionResult(self.conjugate())

        return QuaternionResult(self.conjugate().scale(1.0 / length_sq))

    def length_squared(self) -> float:
        """Sum of the squares of all four components."""
        return self.dot(self)

    def length(self) -> float:
        """
        Euclidean norm sqrt(x^2 + y^2 + z^2 + w^2).

        For a rotation quaternion this is 1.0 up to rounding.
        """
        return float(np.sqrt(FLOAT_DTYPE(self.length_squared())))

    def normalize(self) -> 'Quaternion':
        """
        Return a new unit-length quaternion.

        Quaternions whose squared length is already exactly 1, or exactly 0,
        are returned as an unchanged copy. Everything else is scaled by
        1 / sqrt(length_squared).
        """
        length_sq = self.length_squared()
        if length_sq == 1.0 or length_sq == 0.0:
            return self.copy()
        return self.scale(1.0 / np.sqrt(FLOAT_DTYPE(length_sq)))

    def scale(self, scalar: float) -> 'Quaternion':
        """Multiply every component by a scalar."""
        return Quaternion._from_array(self._q * FLOAT_DTYPE(scalar))

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Multiply this quaternion by another (Hamilton product).

        Quaternion multiplication is NOT commutative: a * b != b * a in
        general, and the order decides the direction in which rotations
        compose. The terms below are kept in exactly this order:

            rw = w*qw - x*qx - y*qy - z*qz
            rx = w*qx + x*qw + y*qz - z*qy
            ry = w*qy + y*qw + z*qx - x*qz
            rz = w*qz + z*qw + x*qy - y*qx

        Parameters
        ----------
        other : Quaternion
            The right-hand quaternion in the product.

        Returns
        -------
        Quaternion
            The Hamilton product self * other.
        """
        x, y, z, w = self._q
        qx, qy, qz, qw = other._q

        rw = w * qw - x * qx - y * qy - z * qz
        rx = w * qx + x * qw + y * qz - z * qy
        ry = w * qy + y * qw + z * qx - x * qz
        rz = w * qz + z * qw + x * qy - y * qx

        return Quaternion(rx, ry, rz, rw)

    def delta(self, other: 'Quaternion') -> QuaternionResult:
        """
        Relative rotation d taking this quaternion onto other.

            self * d = other   =>   d = self^{-1} * other

        Returns
        -------
        QuaternionResult
            Degenerate when this quaternion has zero length.
        """
        return self.inverse().map(lambda inv: inv.multiply(other))

    def dot(self, other: 'Quaternion') -> float:
        """
        4D inner product of two quaternions.

        For unit quaternions this is the cosine of the angle between them on
        the unit hypersphere. A larger magnitude means closer rotations; a
        negative sign means -other is the nearer representation.
        """
        x, y, z, w = self._q
        qx, qy, qz, qw = other._q
        return float(x * qx + y * qy + z * qz + w * qw)

    def add(self, other: 'Quaternion') -> 'Quaternion':
        """Componentwise sum. Not a rotation operation."""
        return Quaternion._from_array(self._q + other._q)

    def subtract(self, other: 'Quaternion') -> 'Quaternion':
        """Componentwise difference. Not a rotation operation."""
        return Quaternion._from_array(self._q - other._q)

    def mult(self, other):
        """
        Multiply by a quaternion, a scalar or a vector.

        - Quaternion -> Hamilton product, see multiply()
        - real scalar -> componentwise scaling, see scale()
        - Vector3 or 3-element array -> rotated vector, see rotate_vector()

        Raises
        ------
        TypeError
            For any other operand type.
        """
        result = self._dispatch_mult(other)
        if result is NotImplemented:
            raise TypeError(
                f"Cannot multiply Quaternion by {type(other).__name__}"
            )
        return result

    def _dispatch_mult(self, other):
        if isinstance(other, Quaternion):
            return self.multiply(other)
        if isinstance(other, numbers.Real):
            return self.scale(other)
        if isinstance(other, (Vector3, np.ndarray, list, tuple)) or \
                hasattr(other, 'normalize'):
            return self.rotate_vector(other)
        return NotImplemented

    # =========================================================================
    # INTERPOLATION
    # =========================================================================

    def slerp(self, dest: 'Quaternion', t: float) -> 'Quaternion':
        """
        Spherical Linear Interpolation (SLERP) from this quaternion to dest.

        Moves along the shortest great-circle arc on the unit hypersphere at
        constant angular speed:

            slerp(q1, q2, t) = q1 * sin((1-t)*Omega) / sin(Omega)
                             + q2 * sin(t*Omega) / sin(Omega)

        where cos(Omega) = q1 . q2.

        Parameters
        ----------
        dest : Quaternion
            End quaternion (at t=1).
        t : float
            Interpolation parameter. Values outside [0, 1] extrapolate.

        Returns
        -------
        Quaternion
            Interpolated quaternion. The result is not re-normalized;
            callers needing exact unit length call normalize() on it.

        Notes
        -----
        - Identical inputs return a copy of self immediately, which keeps
          the endpoints exact and avoids 0/0 below.
        - If q1 . q2 < 0, dest is negated so the interpolation takes the
          short arc (q and -q are the same rotation).
        - Above cos(Omega) = 0.999 the weights fall back to the linear
          (1-t, t) because 1/sin(Omega) is unstable as Omega -> 0.
        """
        if np.array_equal(self._q, dest._q):
            return self.copy()

        cos = FLOAT_DTYPE(self.dot(dest))

        # Negative dot: the other representation of dest is closer
        if cos < 0.0:
            cos = -cos
            dest = dest.negate()

        t = FLOAT_DTYPE(t)
        if cos > SLERP_LINEAR_THRESHOLD:
            logger.debug("slerp: near-parallel inputs (cos=%.6f), blending linearly", cos)
            src_factor = FLOAT_DTYPE(1.0) - t
            dest_factor = t
        else:
            angle = np.arccos(cos)
            inv_sin = FLOAT_DTYPE(1.0) / np.sin(angle)

            src_factor = np.sin((FLOAT_DTYPE(1.0) - t) * angle) * inv_sin
            dest_factor = np.sin(t * angle) * inv_sin

        return Quaternion._from_array(src_factor * self._q + dest_factor * dest._q)

    # =========================================================================
    # ROTATION OPERATIONS
    # =========================================================================

    def rotate_vector(self, v):
        """
        Rotate a 3D vector by this quaternion.

        Evaluates the sandwich product v' = q * v * q* through its fully
        expanded component polynomial rather than two Hamilton products.
        The zero vector is returned as zero without evaluating it.

        Parameters
        ----------
        v : Vector3 or array_like
            Vector to rotate. Objects with x, y, z and normalize() are
            accepted as they are; sequences and arrays become Vector3.

        Returns
        -------
        Vector3
            Rotated vector, built with the same vector type as the input.

        Notes
        -----
        This quaternion must be unit length. A non-unit quaternion scales
        and shears the vector instead of rotating it, and no normalization
        is applied here.
        """
        v = as_vector3(v)
        vector_type = type(v)
        vx, vy, vz = FLOAT_DTYPE(v.x), FLOAT_DTYPE(v.y), FLOAT_DTYPE(v.z)

        if vx == 0.0 and vy == 0.0 and vz == 0.0:
            return vector_type(0.0, 0.0, 0.0)

        x, y, z, w = self._q

        rx = (w * w * vx + 2 * y * w * vz - 2 * z * w * vy + x * x * vx
              + 2 * y * x * vy + 2 * z * x * vz - z * z * vx - y * y * vx)
        ry = (2 * x * y * vx + y * y * vy + 2 * z * y * vz + 2 * w * z * vx
              - z * z * vy + w * w * vy - 2 * x * w * vz - x * x * vy)
        rz = (2 * x * z * vx + 2 * y * z * vy + z * z * vz - 2 * w * y * vx
              - y * y * vz + 2 * w * x * vy - x * x * vz + w * w * vz)

        return vector_type(float(rx), float(ry), float(rz))

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __mul__(self, other):
        """
        Multiplication operator, same dispatch as mult().

        - Quaternion * Quaternion -> Hamilton product
        - Quaternion * scalar     -> componentwise scaling
        - Quaternion * vector     -> rotated vector
        """
        return self._dispatch_mult(other)

    def __rmul__(self, other):
        """Right-multiplication by a scalar: scalar * Quaternion."""
        if isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented

    def __add__(self, other):
        if isinstance(other, Quaternion):
            return self.add(other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Quaternion):
            return self.subtract(other)
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        return self.negate()

    def __eq__(self, other: object) -> bool:
        """
        Exact componentwise equality.

        q and -q compare unequal even though they are the same rotation.
        """
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(np.array_equal(self._q, other._q))

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z, self.w))

    def __copy__(self) -> 'Quaternion':
        return self.copy()

    def __deepcopy__(self, memo) -> 'Quaternion':
        return self.copy()

    def __repr__(self) -> str:
        """
        Unambiguous string representation for debugging.

        Format: Quaternion(x=..., y=..., z=..., w=...)
        """
        return (f"Quaternion(x={self.x:+.8f}, y={self.y:+.8f}, "
                f"z={self.z:+.8f}, w={self.w:+.8f})")

    def __str__(self) -> str:
        angle_deg = angle_to_degrees(self.rotation_angle)
        return (f"[{self.x:+.6f}, {self.y:+.6f}, {self.z:+.6f}, "
                f"{self.w:+.6f}] (rot={angle_deg:.2f} deg)")

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def allclose(self, other: 'Quaternion', atol: float = DEFAULT_ATOL) -> bool:
        """
        Componentwise comparison within an absolute tolerance.

        Does not treat q and -q as equal; compare against other.negate() as
        well when either representation is acceptable.
        """
        return bool(np.allclose(self._q, other._q, rtol=0.0, atol=atol))

    def is_unit(self, tolerance: float = DEFAULT_ATOL) -> bool:
        """True if the length is within tolerance of 1.0."""
        return abs(self.length() - 1.0) < tolerance

    def copy(self) -> 'Quaternion':
        """Return an independent copy of this quaternion."""
        return Quaternion._from_array(self._q)
