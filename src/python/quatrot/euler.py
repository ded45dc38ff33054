"""
===============================================================================
QUATROT - Euler Angle Conversions
===============================================================================

Euler angles are always given as (x, y, z): the angles in radians about the X,
Y and Z axes.  The RotationOrder decides the sequence in which they are
applied.  For order ABC the column-vector rotation matrix is

    R = R_A(angle_A) @ R_B(angle_B) @ R_C(angle_C)

Composition uses the closed-form product of the three half-angle elemental
quaternions for each order.  Decomposition reads the pivot angle with asin from
a single matrix entry and the remaining two with atan2.  When the pivot axis is
at +/-90 degrees the first and third axes align (gimbal lock), only their
combination is observable, and one fixed solution is returned with the third
angle set to zero or the first set to zero depending on the order.
===============================================================================
"""

import logging
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from quatrot.constants import GIMBAL_LOCK_THRESHOLD
from quatrot.rotation_order import RotationOrder

logger = logging.getLogger(__name__)


def _angles(angles: ArrayLike, dtype: DTypeLike) -> NDArray:
    angles = np.asarray(angles, dtype=dtype).ravel()
    if angles.size != 3:
        raise ValueError(f"Euler angles must have 3 components, got {angles.size}")
    return angles


def euler_to_quaternion(angles: ArrayLike, order: Union[RotationOrder, str] = RotationOrder.XYZ,
                        dtype: DTypeLike = np.float64) -> NDArray:
    """
    Compose Euler angles into a quaternion.

    Parameters
    ----------
    angles : array_like
        Rotation angles (x, y, z) about each axis, in radians.
    order : RotationOrder or str, optional
        Sequence in which the elemental rotations are applied.
    dtype : dtype, optional
        Precision the composition is carried out in.

    Returns
    -------
    np.ndarray
        Unit quaternion components (x, y, z, w).
    """
    order = RotationOrder.parse(order)
    ax, ay, az = _angles(angles, dtype)

    c1 = np.cos(ax / 2)
    c2 = np.cos(ay / 2)
    c3 = np.cos(az / 2)
    s1 = np.sin(ax / 2)
    s2 = np.sin(ay / 2)
    s3 = np.sin(az / 2)

    if order is RotationOrder.XYZ:
        x = s1 * c2 * c3 + c1 * s2 * s3
        y = c1 * s2 * c3 - s1 * c2 * s3
        z = c1 * c2 * s3 + s1 * s2 * c3
        w = c1 * c2 * c3 - s1 * s2 * s3
    elif order is RotationOrder.YXZ:
        x = s1 * c2 * c3 + c1 * s2 * s3
        y = c1 * s2 * c3 - s1 * c2 * s3
        z = c1 * c2 * s3 - s1 * s2 * c3
        w = c1 * c2 * c3 + s1 * s2 * s3
    elif order is RotationOrder.ZXY:
        x = s1 * c2 * c3 - c1 * s2 * s3
        y = c1 * s2 * c3 + s1 * c2 * s3
        z = c1 * c2 * s3 + s1 * s2 * c3
        w = c1 * c2 * c3 - s1 * s2 * s3
    elif order is RotationOrder.ZYX:
        x = s1 * c2 * c3 - c1 * s2 * s3
        y = c1 * s2 * c3 + s1 * c2 * s3
        z = c1 * c2 * s3 - s1 * s2 * c3
        w = c1 * c2 * c3 + s1 * s2 * s3
    elif order is RotationOrder.YZX:
        x = s1 * c2 * c3 + c1 * s2 * s3
        y = c1 * s2 * c3 + s1 * c2 * s3
        z = c1 * c2 * s3 - s1 * s2 * c3
        w = c1 * c2 * c3 - s1 * s2 * s3
    else:
        # XZY
        x = s1 * c2 * c3 - c1 * s2 * s3
        y = c1 * s2 * c3 - s1 * c2 * s3
        z = c1 * c2 * s3 + s1 * s2 * c3
        w = c1 * c2 * c3 + s1 * s2 * s3

    return np.array([x, y, z, w], dtype=dtype)


def rotmat_to_euler(mat: ArrayLike, order: Union[RotationOrder, str] = RotationOrder.XYZ,
                    threshold: float = GIMBAL_LOCK_THRESHOLD) -> NDArray:
    """
    Decompose a rotation matrix into Euler angles.

    The upper-left 3x3 block of a 3x3 or 4x4 row-vector matrix (see
    :mod:`quatrot.matrix`) is read.  The pivot entry is clamped to [-1, 1]
    before asin so round-off cannot push it out of the domain.

    Parameters
    ----------
    mat : array_like
        3x3 or 4x4 row-vector rotation matrix.  Assumed to be a pure rotation.
    order : RotationOrder or str, optional
        Sequence the angles are to be applied in.
    threshold : float, optional
        Magnitude of the pivot entry at which the gimbal-lock branch is taken.

    Returns
    -------
    np.ndarray
        Angles (x, y, z) in radians, in the matrix's precision.

    Raises
    ------
    ValueError
        If the matrix is not 3x3 or 4x4.
    """
    order = RotationOrder.parse(order)
    mat = np.asarray(mat)

    if not np.issubdtype(mat.dtype, np.floating):
        mat = mat.astype(np.float64)

    if mat.shape not in ((3, 3), (4, 4)):
        raise ValueError(f"Rotation matrix must be 3x3 or 4x4, got shape {mat.shape}")

    zero = mat.dtype.type(0)
    locked = False

    # column-vector view: r[i, j] is the row i, column j entry of R
    r = mat[:3, :3].T
    m11, m12, m13 = r[0]
    m21, m22, m23 = r[1]
    m31, m32, m33 = r[2]

    if order is RotationOrder.XYZ:
        ay = np.arcsin(np.clip(m13, -1, 1))
        if abs(m13) < threshold:
            ax = np.arctan2(-m23, m33)
            az = np.arctan2(-m12, m11)
        else:
            locked = True
            ax = np.arctan2(m32, m22)
            az = zero

    elif order is RotationOrder.YXZ:
        ax = np.arcsin(-np.clip(m23, -1, 1))
        if abs(m23) < threshold:
            ay = np.arctan2(m13, m33)
            az = np.arctan2(m21, m22)
        else:
            locked = True
            ay = np.arctan2(-m31, m11)
            az = zero

    elif order is RotationOrder.ZXY:
        ax = np.arcsin(np.clip(m32, -1, 1))
        if abs(m32) < threshold:
            ay = np.arctan2(-m31, m33)
            az = np.arctan2(-m12, m22)
        else:
            locked = True
            ay = zero
            az = np.arctan2(m21, m11)

    elif order is RotationOrder.ZYX:
        ay = np.arcsin(-np.clip(m31, -1, 1))
        if abs(m31) < threshold:
            ax = np.arctan2(m32, m33)
            az = np.arctan2(m21, m11)
        else:
            locked = True
            ax = zero
            az = np.arctan2(-m12, m22)

    elif order is RotationOrder.YZX:
        az = np.arcsin(np.clip(m21, -1, 1))
        if abs(m21) < threshold:
            ax = np.arctan2(-m23, m22)
            ay = np.arctan2(-m31, m11)
        else:
            locked = True
            ax = zero
            ay = np.arctan2(m13, m33)

    else:
        # XZY
        az = np.arcsin(-np.clip(m12, -1, 1))
        if abs(m12) < threshold:
            ax = np.arctan2(m32, m22)
            ay = np.arctan2(m13, m11)
        else:
            locked = True
            ax = np.arctan2(-m23, m33)
            ay = zero

    angles = np.array([ax, ay, az], dtype=mat.dtype)

    if locked:
        logger.debug("Gimbal lock in %s decomposition; returning %s", order, angles)

    return angles
