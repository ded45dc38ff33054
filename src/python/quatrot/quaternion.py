"""
===============================================================================
QUATROT - Quaternion Rotation Library
===============================================================================

Quaternion value type for 3D rotation representation, composition and
interpolation, with conversions to and from rotation matrices and Euler
angles in six axis orderings.

Convention
----------
We use the scalar-last convention:

    q = (x, y, z, w) = w + x*i + y*j + z*k

where w is the scalar (real) part and (x, y, z) is the vector (imaginary)
part. A rotation by angle theta about unit axis n is

    q = (sin(theta/2) * n, cos(theta/2))

and q and -q describe the same rotation (double cover).

Values are immutable: every operation returns a new Quaternion. Quaternions
are NOT normalized on construction. Conversions that assume unit length
(to_mat3, to_mat4, rotate_vector) leave normalization to the caller, except
to_euler which normalizes first.

Matrix layout
-------------
Matrices are row-major and use the row-vector convention, v' = v @ M, with
the translation of a 4x4 matrix in its last row. See quatrot.matrix.

Composition
-----------
a * b applies b first, then a:

    (a * b).to_mat3() == b.to_mat3() @ a.to_mat3()

References
----------
    [1] Shoemake, "Animating Rotation with Quaternion Curves", SIGGRAPH 1985.
    [2] Diebel, "Representing Attitude: Euler Angles, Unit Quaternions, and
        Rotation Vectors", Stanford, 2006.
===============================================================================
"""

import logging
from numbers import Real
from typing import Iterator, Optional, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike

from quatrot import euler, matrix
from quatrot.constants import (
    AXIS_TOLERANCE, COMPARISON_TOLERANCE, GIMBAL_LOCK_THRESHOLD, SLERP_EPSILON,
    TWO_RAD2DEG, UNIT_TOLERANCE
)
from quatrot.rotation_order import RotationOrder
from quatrot.scalar import ScalarKind

logger = logging.getLogger(__name__)

KindLike = Union[ScalarKind, str, np.dtype, type]


class Quaternion:
    """
    Immutable quaternion for 3D rotation representation.

    Attributes
    ----------
    x, y, z : float
        Vector (imaginary) components.
    w : float
        Scalar (real) component.
    kind : ScalarKind
        Precision the components and all arithmetic on them are carried in.

    Examples
    --------
    >>> q = Quaternion()  # identity
    >>> q_rot = Quaternion.from_euler([np.pi / 2, 0.0, 0.0], RotationOrder.XYZ)
    >>> y_image = q_rot.rotate_vector([0.0, 1.0, 0.0])  # ~ [0, 0, 1]
    """

    __slots__ = ('_q', '_kind')

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, w: float = 1.0,
                 kind: KindLike = ScalarKind.FLOAT64) -> None:
        """
        Initialize a quaternion from its components.

        Parameters
        ----------
        x, y, z : float
            Vector part.
        w : float
            Scalar part.
        kind : ScalarKind or str, optional
            Precision to store the components in.
        """
        kind = ScalarKind.parse(kind)
        q = np.array([x, y, z, w], dtype=kind.dtype)
        q.setflags(write=False)

        self._q = q
        self._kind = kind

    @classmethod
    def _from_array(cls, q: ArrayLike, kind: ScalarKind) -> 'Quaternion':
        x, y, z, w = np.asarray(q, dtype=kind.dtype)
        return cls(x, y, z, w, kind=kind)

    @classmethod
    def from_components(cls, components: ArrayLike,
                        kind: KindLike = ScalarKind.FLOAT64) -> 'Quaternion':
        """
        Create a quaternion from a 4-element sequence in (x, y, z, w) order.

        Raises
        ------
        ValueError
            If the sequence does not hold exactly 4 values.
        """
        components = np.asarray(components).ravel()
        if components.size != 4:
            raise ValueError(f"A quaternion must have 4 components, got {components.size}")
        return cls._from_array(components, ScalarKind.parse(kind))

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def x(self) -> np.floating:
        """First imaginary component (i-axis)."""
        return self._q[0]

    @property
    def y(self) -> np.floating:
        """Second imaginary component (j-axis)."""
        return self._q[1]

    @property
    def z(self) -> np.floating:
        """Third imaginary component (k-axis)."""
        return self._q[2]

    @property
    def w(self) -> np.floating:
        """Scalar (real) part of the quaternion."""
        return self._q[3]

    @property
    def kind(self) -> ScalarKind:
        """Precision of the components."""
        return self._kind

    @property
    def components(self) -> np.ndarray:
        """
        Full quaternion as a writeable 4-element array [x, y, z, w].

        Returns
        -------
        np.ndarray
            Copy of the internal component array.
        """
        return self._q.copy()

    def astype(self, kind: KindLike) -> 'Quaternion':
        """Return the same quaternion carried in another precision."""
        return Quaternion._from_array(self._q, ScalarKind.parse(kind))

    # =========================================================================
    # STATIC FACTORY METHODS
    # =========================================================================

    @staticmethod
    def identity(kind: KindLike = ScalarKind.FLOAT64) -> 'Quaternion':
        """
        Create the identity quaternion (0, 0, 0, 1).

        The identity represents zero rotation and is the multiplicative
        identity element: q * identity == identity * q == q.
        """
        return Quaternion(0.0, 0.0, 0.0, 1.0, kind=kind)

    @staticmethod
    def from_euler(angles: ArrayLike, order: Union[RotationOrder, str] = RotationOrder.XYZ,
                   kind: KindLike = ScalarKind.FLOAT64) -> 'Quaternion':
        """
        Create a quaternion from Euler angles.

        Parameters
        ----------
        angles : array_like
            Angles (x, y, z) in radians about the X, Y and Z axes.
        order : RotationOrder or str, optional
            Sequence the elemental rotations are applied in.  Must match the
            order later passed to :meth:`to_euler` for a round trip.
        kind : ScalarKind or str, optional
            Precision of the result.

        Returns
        -------
        Quaternion
            Unit quaternion equivalent to the Euler sequence.
        """
        kind = ScalarKind.parse(kind)
        return Quaternion._from_array(euler.euler_to_quaternion(angles, order, dtype=kind.dtype), kind)

    @staticmethod
    def from_rotation_matrix(mat: ArrayLike, kind: KindLike = ScalarKind.FLOAT64) -> 'Quaternion':
        """
        Create a quaternion from the upper-left 3x3 of a 3x3 or 4x4 rotation matrix.

        The input is not validated: a matrix that is not a proper rotation
        yields a well-defined but meaningless quaternion.

        Raises
        ------
        ValueError
            If the matrix is not 3x3 or 4x4.
        """
        kind = ScalarKind.parse(kind)
        return Quaternion._from_array(matrix.rotmat_to_quaternion(mat, dtype=kind.dtype), kind)

    @staticmethod
    def from_axis_angle(axis: ArrayLike, angle: float,
                        kind: KindLike = ScalarKind.FLOAT64) -> 'Quaternion':
        """
        Create a quaternion from an axis-angle representation.

            q = (sin(theta/2) * n, cos(theta/2))

        Parameters
        ----------
        axis : array_like
            3-element rotation axis vector. Will be normalized internally.
        angle : float
            Rotation angle in radians.

        Returns
        -------
        Quaternion
            Unit quaternion representing the specified rotation.

        Raises
        ------
        ValueError
            If axis has near-zero magnitude.
        """
        kind = ScalarKind.parse(kind)
        axis = np.asarray(axis, dtype=kind.dtype).ravel()

        if axis.size != 3:
            raise ValueError(f"Rotation axis must have 3 components, got {axis.size}")

        axis_norm = np.linalg.norm(axis)

        if axis_norm < AXIS_TOLERANCE:
            raise ValueError(
                "Rotation axis has near-zero magnitude. "
                "Cannot define a rotation about a zero vector."
            )

        n = axis / axis_norm

        half_angle = kind.cast(angle) / 2
        sin_half = np.sin(half_angle)

        return Quaternion(sin_half * n[0], sin_half * n[1], sin_half * n[2],
                          np.cos(half_angle), kind=kind)

    # =========================================================================
    # QUATERNION ARITHMETIC
    # =========================================================================

    def _other(self, other: 'Quaternion') -> np.ndarray:
        """Components of ``other`` in this quaternion's precision."""
        return other._q.astype(self._kind.dtype, copy=False)

    def dot(self, other: 'Quaternion') -> np.floating:
        """
        4D inner product x1*x2 + y1*y2 + z1*z2 + w1*w2.

        For unit quaternions this is cos(theta/2), theta being the angle of
        the rotation between them.
        """
        b = self._other(other)
        return self._q[0] * b[0] + self._q[1] * b[1] + self._q[2] * b[2] + self._q[3] * b[3]

    def length_squared(self) -> np.floating:
        """Sum of the squared components."""
        return self.dot(self)

    def length(self) -> np.floating:
        """
        L2 norm (magnitude) of the quaternion.

        For a valid rotation quaternion, this should always be 1.0
        (within floating-point tolerance).
        """
        return np.sqrt(self.length_squared())

    def normal(self) -> 'Quaternion':
        """
        Return a new unit-magnitude quaternion.

        A zero quaternion has no direction to preserve; it normalizes to the
        identity instead of dividing by zero.

        Returns
        -------
        Quaternion
            A new quaternion with |q| = 1.
        """
        if self.length_squared() == 0:
            logger.debug("Normalizing a zero-length quaternion; returning identity")
            return Quaternion.identity(self._kind)

        inv_length = 1 / self.length()
        return Quaternion._from_array(self._q * inv_length, self._kind)

    def conjugate(self) -> 'Quaternion':
        """
        Return the quaternion conjugate (-x, -y, -z, w).

        For unit quaternions, the conjugate equals the inverse and represents
        the reverse rotation.
        """
        return Quaternion(-self.x, -self.y, -self.z, self.w, kind=self._kind)

    def invert(self) -> 'Quaternion':
        """
        Return the multiplicative inverse q* / |q|^2.

        A zero quaternion has no inverse; its inverse scale is taken as zero,
        which yields the zero quaternion (0, 0, 0, 0).

        Returns
        -------
        Quaternion
            q^{-1} such that q * q^{-1} = identity for any non-zero q.
        """
        length_sq = self.length_squared()

        if length_sq == 0:
            logger.debug("Inverting a zero-length quaternion; returning zero")
            inv_length_sq = self._kind.cast(0)
        else:
            inv_length_sq = 1 / length_sq

        return Quaternion(-self.x * inv_length_sq, -self.y * inv_length_sq,
                          -self.z * inv_length_sq, self.w * inv_length_sq, kind=self._kind)

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Multiply this quaternion by another (Hamilton product).

        Quaternion multiplication is NOT commutative: q1 * q2 != q2 * q1
        in general. The product represents sequential rotation: first by
        other, then by self.

        With q = (x, y, z, w) the product a * b is:

            x = a.x*b.w + a.w*b.x + a.y*b.z - a.z*b.y
            y = a.y*b.w + a.w*b.y + a.z*b.x - a.x*b.z
            z = a.z*b.w + a.w*b.z + a.x*b.y - a.y*b.x
            w = a.w*b.w - a.x*b.x - a.y*b.y - a.z*b.z

        Parameters
        ----------
        other : Quaternion
            The right-hand quaternion in the product.

        Returns
        -------
        Quaternion
            The Hamilton product self * other, in this quaternion's precision.
        """
        ax, ay, az, aw = self._q
        bx, by, bz, bw = self._other(other)

        x = ax * bw + aw * bx + ay * bz - az * by
        y = ay * bw + aw * by + az * bx - ax * bz
        z = az * bw + aw * bz + ax * by - ay * bx
        w = aw * bw - ax * bx - ay * by - az * bz

        return Quaternion(x, y, z, w, kind=self._kind)

    def negate(self) -> 'Quaternion':
        """
        Negate all components.

        -q represents the same rotation as q but is a distinct value.
        """
        return Quaternion._from_array(-self._q, self._kind)

    def scale(self, factor: float) -> 'Quaternion':
        """Multiply every component by a scalar. The result is generally not unit length."""
        return Quaternion._from_array(self._q * self._kind.cast(factor), self._kind)

    # =========================================================================
    # ROTATION OPERATIONS
    # =========================================================================

    def rotate_vector(self, v: ArrayLike) -> np.ndarray:
        """
        Rotate a 3D vector by this (unit) quaternion.

        Equivalent to v @ self.to_mat3(), using the optimized Rodrigues form
        instead of the full quaternion triple product:

            v' = v + w*t + (u x t),  t = 2*(u x v)

        where u = (x, y, z) is the vector part.

        Parameters
        ----------
        v : array_like
            3-element vector to rotate.

        Returns
        -------
        np.ndarray
            Rotated 3-element vector.
        """
        v = np.asarray(v, dtype=self._kind.dtype)
        u = self._q[:3]

        t = 2 * np.cross(u, v)
        return v + self.w * t + np.cross(u, t)

    def angle_to(self, other: 'Quaternion') -> np.floating:
        """
        Rotation angle in degrees needed to get from this orientation to another.

            angle = 2 * arccos(|q1 . q2|)

        The dot product is clamped to [-1, 1] first, since round-off can carry it
        just outside the domain of arccos. A quaternion and its negation are 0
        degrees apart.

        Parameters
        ----------
        other : Quaternion
            Another unit quaternion.

        Returns
        -------
        float
            Angle in degrees, in [0, 180].
        """
        d = np.clip(self.dot(other), -1, 1)
        return self._kind.cast(TWO_RAD2DEG * np.arccos(abs(d)))

    def rotate_towards(self, target: 'Quaternion', step_degrees: float,
                       epsilon: float = SLERP_EPSILON) -> 'Quaternion':
        """
        Rotate toward ``target`` by at most ``step_degrees``.

        The step is capped at the remaining angle, so a step larger than the
        separation lands exactly on ``target``.

        Parameters
        ----------
        target : Quaternion
            Orientation to rotate toward.
        step_degrees : float
            Maximum angle to rotate by, in degrees.
        epsilon : float, optional
            Linear-blend threshold forwarded to :meth:`slerp`.

        Returns
        -------
        Quaternion
            ``self`` when the two are already aligned, else the slerp toward
            ``target`` at t = min(1, step / angle).
        """
        angle = self.angle_to(target)

        if angle == 0:
            return self

        t = min(1, step_degrees / angle)
        return Quaternion.slerp(self, target, t, epsilon=epsilon)

    # =========================================================================
    # CONVERSION METHODS
    # =========================================================================

    def to_mat3(self) -> np.ndarray:
        """
        Convert a unit quaternion to a 3x3 row-vector rotation matrix.

        Row i of the result is the image of basis vector i. Normalize first
        if the quaternion may not be unit length.
        """
        return matrix.quaternion_to_rotmat(self._q, dtype=self._kind.dtype)

    def to_mat4(self) -> np.ndarray:
        """
        Convert a unit quaternion to a 4x4 homogeneous rotation matrix.

        The translation row is zero and M[3, 3] is 1.
        """
        return matrix.quaternion_to_transform(self._q, dtype=self._kind.dtype)

    def rot_trans(self, translation: ArrayLike) -> np.ndarray:
        """
        Build a 4x4 rotation + translation transform.

        The rotation is about the coordinate origin and ``translation`` is
        stored in the last row.
        """
        return matrix.quaternion_to_transform(self._q, translation, dtype=self._kind.dtype)

    def rot_trans_origin(self, translation: ArrayLike, origin: ArrayLike) -> np.ndarray:
        """
        Build a 4x4 transform that rotates about ``origin`` and then translates.

        The pivot point ``origin`` is carried to ``origin + translation``;
        every other point is rotated about the pivot first.

        Parameters
        ----------
        translation : array_like
            3-element translation.
        origin : array_like
            3-element pivot point of the rotation.

        Returns
        -------
        np.ndarray
            4x4 row-vector transform.
        """
        return matrix.quaternion_to_transform(self._q, translation, origin,
                                              dtype=self._kind.dtype)

    def to_euler(self, order: Union[RotationOrder, str] = RotationOrder.XYZ,
                 threshold: float = GIMBAL_LOCK_THRESHOLD) -> np.ndarray:
        """
        Convert to Euler angles in the given axis order.

        The quaternion is normalized before conversion.

        Parameters
        ----------
        order : RotationOrder or str, optional
            Sequence the returned angles are meant to be applied in.
        threshold : float, optional
            Gimbal-lock threshold on the |sin| of the middle angle.

        Returns
        -------
        np.ndarray
            Angles (x, y, z) in radians.

        Warnings
        --------
        Near gimbal lock (middle angle at +/-90 degrees) infinitely many angle
        triples describe the rotation. One of them is returned, with one of the
        outer angles set to 0. The rotation is reproduced, the input angles
        generally are not.
        """
        return euler.rotmat_to_euler(self.normal().to_mat4(), order, threshold=threshold)

    def to_axis_angle(self) -> Tuple[np.ndarray, np.floating]:
        """
        Convert to axis-angle representation.

        Returns
        -------
        tuple of (np.ndarray, float)
            (axis, angle) where axis is a 3-element unit vector and angle
            is in radians in [0, 2*pi].

        Notes
        -----
        For the identity quaternion (zero rotation), the axis is undefined.
        We return [0, 0, 1] by convention (Z-axis) with angle = 0.
        """
        q = self.normal()
        angle = 2 * np.arccos(np.clip(q.w, -1, 1))

        vec = q._q[:3]
        vec_norm = np.linalg.norm(vec)

        if vec_norm < AXIS_TOLERANCE:
            return np.array([0.0, 0.0, 1.0], dtype=self._kind.dtype), angle

        return vec / vec_norm, angle

    # =========================================================================
    # INTERPOLATION
    # =========================================================================

    @staticmethod
    def interpolate(a: 'Quaternion', b: 'Quaternion', t: float) -> 'Quaternion':
        """
        Component-wise linear interpolation (1 - t) * a + t * b.

        The result is NOT normalized; call :meth:`normal` on it when an
        orientation is needed.

        Parameters
        ----------
        a : Quaternion
            Value at t = 0.
        b : Quaternion
            Value at t = 1.
        t : float
            Interpolation parameter, normally in [0, 1]. Values outside
            extrapolate.
        """
        kind = a._kind
        t = kind.cast(t)
        return Quaternion._from_array((1 - t) * a._q + t * a._other(b), kind)

    @staticmethod
    def slerp(a: 'Quaternion', b: 'Quaternion', t: float,
              epsilon: float = SLERP_EPSILON) -> 'Quaternion':
        """
        Spherical Linear Interpolation (SLERP) between two quaternions.

        SLERP produces the shortest-path interpolation on the unit quaternion
        hypersphere (S^3), maintaining constant angular velocity:

            slerp(a, b, t) = a * sin((1-t)*Omega) / sin(Omega)
                           + b * sin(t*Omega) / sin(Omega)

        where Omega = arccos(a . b).

        Parameters
        ----------
        a : Quaternion
            Starting quaternion (at t=0).
        b : Quaternion
            Ending quaternion (at t=1).
        t : float
            Interpolation parameter, normally in [0, 1].
        epsilon : float, optional
            When 1 - cos(Omega) is not above this, sin(Omega) is too close to
            zero to divide by and a linear blend is used instead.

        Returns
        -------
        Quaternion
            Interpolated quaternion at parameter t, in a's precision. Not
            re-normalized; for unit inputs it is unit to within round-off.

        Notes
        -----
        - Always interpolates along the SHORT arc. If a . b < 0, b is negated
          before interpolating, so the result at t=1 may be -b.
        - Antipodal inputs (a . b = -1) are the same rotation; after the flip
          they take the linear branch and return a.
        """
        kind = a._kind
        t = kind.cast(t)
        b_q = a._other(b)

        cosom = a.dot(b)

        # q and -q are the same rotation; take the short way round
        if cosom < 0:
            cosom = -cosom
            b_q = -b_q

        if (1 - cosom) > epsilon:
            omega = np.arccos(cosom)
            sinom = np.sin(omega)
            scale0 = np.sin((1 - t) * omega) / sinom
            scale1 = np.sin(t * omega) / sinom
        else:
            logger.debug("slerp inputs nearly parallel (cos=%s); blending linearly", cosom)
            scale0 = 1 - t
            scale1 = t

        return Quaternion._from_array(scale0 * a._q + scale1 * b_q, kind)

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __mul__(self, other: Union['Quaternion', Real]) -> 'Quaternion':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product (b applied first, then a)
        - Quaternion * scalar -> component-wise scaling
        """
        if isinstance(other, Quaternion):
            return self.multiply(other)
        elif isinstance(other, (Real, np.number)):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other: Real) -> 'Quaternion':
        """Right-multiplication by a scalar: scalar * Quaternion."""
        if isinstance(other, (Real, np.number)):
            return self.scale(other)
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        return self.negate()

    def __eq__(self, other: object) -> bool:
        """
        Exact component-wise equality.

        q and -q are NOT equal here even though they are the same rotation;
        use :meth:`is_close` for a rotation-aware comparison.
        """
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(np.array_equal(self._q, other._q))

    def __hash__(self) -> int:
        return hash(tuple(float(c) for c in self._q))

    def __iter__(self) -> Iterator[np.floating]:
        return iter(self._q)

    def __repr__(self) -> str:
        """
        Unambiguous string representation for debugging.

        Format: Quaternion(x=..., y=..., z=..., w=...)
        """
        suffix = '' if self._kind is ScalarKind.FLOAT64 else f", kind={self._kind.value}"
        return (f"Quaternion(x={self.x:+.8f}, y={self.y:+.8f}, "
                f"z={self.z:+.8f}, w={self.w:+.8f}{suffix})")

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def is_close(self, other: 'Quaternion', tolerance: Optional[float] = None) -> bool:
        """
        Check if two quaternions represent the same rotation.

        Both q and -q are accepted.

        Parameters
        ----------
        other : Quaternion
            Quaternion to compare against.
        tolerance : float, optional
            Largest accepted component distance. Defaults to
            ``COMPARISON_TOLERANCE``.
        """
        if tolerance is None:
            tolerance = COMPARISON_TOLERANCE

        b = self._other(other)
        diff_pos = np.linalg.norm(self._q - b)
        diff_neg = np.linalg.norm(self._q + b)
        return bool(min(diff_pos, diff_neg) < tolerance)

    def is_unit(self, tolerance: float = UNIT_TOLERANCE) -> bool:
        """
        Check if this quaternion has unit norm.

        Parameters
        ----------
        tolerance : float
            Acceptable deviation from 1.0.
        """
        return bool(abs(self.length() - 1) < tolerance)
