"""
===============================================================================
QUATROT - Quaternion / Rotation Matrix Conversions
===============================================================================

Matrices are numpy arrays in row-major storage using the row-vector
convention:

    v' = v @ M

so row i of the upper-left 3x3 block is the image of basis vector i, and a
4x4 matrix carries its translation in the last row, M[3, 0:3]. The block is
therefore the transpose of the column-vector rotation matrix R with

    R = | 1-2(y^2+z^2)    2(xy-wz)      2(xz+wy)   |
        | 2(xy+wz)      1-2(x^2+z^2)    2(yz-wx)   |
        | 2(xz-wy)      2(yz+wx)      1-2(x^2+y^2) |

Quaternion components are passed around as 4-element arrays in
(x, y, z, w) order. None of these routines validate that their input is a
unit quaternion or a proper rotation matrix.
===============================================================================
"""

import logging
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

logger = logging.getLogger(__name__)


def _components(q: ArrayLike, dtype: DTypeLike) -> NDArray:
    q = np.asarray(q, dtype=dtype).ravel()
    if q.size != 4:
        raise ValueError(f"A quaternion must have 4 components, got {q.size}")
    return q


def _vector3(v: ArrayLike, dtype: DTypeLike, name: str) -> NDArray:
    v = np.asarray(v, dtype=dtype).ravel()
    if v.size != 3:
        raise ValueError(f"{name} must have 3 components, got {v.size}")
    return v


def quaternion_to_rotmat(q: ArrayLike, dtype: DTypeLike = np.float64) -> NDArray:
    """
    Expand a unit quaternion into its 3x3 rotation block.

    Parameters
    ----------
    q : array_like
        Quaternion components (x, y, z, w).  Assumed unit length.
    dtype : dtype, optional
        Precision the expansion is carried out in.

    Returns
    -------
    np.ndarray
        3x3 row-vector rotation matrix.
    """
    x, y, z, w = _components(q, dtype)

    # Doubled products, each formed once
    x2 = x + x
    y2 = y + y
    z2 = z + z

    xx = x * x2
    xy = x * y2
    xz = x * z2
    yy = y * y2
    yz = y * z2
    zz = z * z2
    wx = w * x2
    wy = w * y2
    wz = w * z2

    return np.array([
        [1 - (yy + zz), xy + wz,       xz - wy],
        [xy - wz,       1 - (xx + zz), yz + wx],
        [xz + wy,       yz - wx,       1 - (xx + yy)]
    ], dtype=dtype)


def quaternion_to_transform(q: ArrayLike, translation: Optional[ArrayLike] = None,
                            origin: Optional[ArrayLike] = None,
                            dtype: DTypeLike = np.float64) -> NDArray:
    """
    Build a 4x4 homogeneous transform from a rotation and an optional translation.

    Without an ``origin`` the rotation is about the coordinate origin and the
    translation is stored unchanged in the last row.  With an ``origin`` the
    rotation pivots about that point instead: the translation row becomes

        T[j] = translation[j] + origin[j] - sum_i(origin[i] * B[i, j])

    where B is the 3x3 rotation block, so that ``origin`` is carried to
    ``origin + translation``.

    Parameters
    ----------
    q : array_like
        Quaternion components (x, y, z, w).  Assumed unit length.
    translation : array_like, optional
        3-element translation.  Defaults to zero.
    origin : array_like, optional
        3-element pivot point.  Defaults to the coordinate origin.
    dtype : dtype, optional
        Precision of the result.

    Returns
    -------
    np.ndarray
        4x4 row-vector transform.
    """
    block = quaternion_to_rotmat(q, dtype=dtype)

    if translation is None:
        offset = np.zeros(3, dtype=dtype)
    else:
        offset = _vector3(translation, dtype, "Translation")

    if origin is not None:
        pivot = _vector3(origin, dtype, "Origin")
        offset = offset + pivot - pivot @ block

    transform = np.eye(4, dtype=dtype)
    transform[:3, :3] = block
    transform[3, :3] = offset

    return transform


def rotmat_to_quaternion(mat: ArrayLike, dtype: DTypeLike = np.float64) -> NDArray:
    """
    Extract the quaternion of the upper-left 3x3 block of a rotation matrix.

    The trace seeds the extraction when it is positive.  Otherwise the largest
    diagonal entry picks which component is recovered from a square root, and
    the other three follow from sums and differences of the off-diagonal
    entries.  This keeps the divisor away from zero for rotations near 180
    degrees, where the trace approaches -1.

    Parameters
    ----------
    mat : array_like
        3x3 or 4x4 row-vector rotation matrix.  Not checked for orthogonality.
    dtype : dtype, optional
        Precision the extraction is carried out in.

    Returns
    -------
    np.ndarray
        Quaternion components (x, y, z, w).

    Raises
    ------
    ValueError
        If the matrix is not 3x3 or 4x4.
    """
    mat = np.asarray(mat, dtype=dtype)

    if mat.shape not in ((3, 3), (4, 4)):
        raise ValueError(f"Rotation matrix must be 3x3 or 4x4, got shape {mat.shape}")

    # column-vector view: r[i, j] is the row i, column j entry of R
    r = mat[:3, :3].T
    m11, m12, m13 = r[0]
    m21, m22, m23 = r[1]
    m31, m32, m33 = r[2]

    trace = m11 + m22 + m33

    if trace > 0:
        s = 0.5 / np.sqrt(trace + 1)
        w = 0.25 / s
        x = (m32 - m23) * s
        y = (m13 - m31) * s
        z = (m21 - m12) * s

    elif m11 > m22 and m11 > m33:
        logger.debug("Non-positive trace %s; extracting from the x diagonal", trace)
        s = 2 * np.sqrt(1 + m11 - m22 - m33)
        w = (m32 - m23) / s
        x = 0.25 * s
        y = (m12 + m21) / s
        z = (m13 + m31) / s

    elif m22 > m33:
        logger.debug("Non-positive trace %s; extracting from the y diagonal", trace)
        s = 2 * np.sqrt(1 + m22 - m11 - m33)
        w = (m13 - m31) / s
        x = (m12 + m21) / s
        y = 0.25 * s
        z = (m23 + m32) / s

    else:
        logger.debug("Non-positive trace %s; extracting from the z diagonal", trace)
        s = 2 * np.sqrt(1 + m33 - m11 - m22)
        w = (m21 - m12) / s
        x = (m13 + m31) / s
        y = (m23 + m32) / s
        z = 0.25 * s

    return np.array([x, y, z, w], dtype=dtype)
