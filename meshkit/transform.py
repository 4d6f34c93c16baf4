"""Affine transformations of 3D point sets in homogeneous coordinates."""

from __future__ import annotations

import math

import numpy as np

_APPROX_PRECISION = 1e-12


def _as_matrix(value) -> np.ndarray:
    """Return a 4x4 float matrix from a Transform or array-like value."""
    if isinstance(value, Transform):
        return value.matrix
    try:
        matrix = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"cannot use {type(value).__name__} as a 4x4 matrix") from exc
    if matrix.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {matrix.shape}")
    return matrix


class Transform:
    """A 4x4 homogeneous transformation matrix acting on 3D points."""

    def __init__(self, matrix=None):
        self.matrix = np.eye(4) if matrix is None else _as_matrix(matrix).copy()

    def uniform_scale(self, s):
        """Replace the matrix by a uniform scaling by ``s``."""
        self.matrix = np.diag([float(s), float(s), float(s), 1.0])
        return self

    def scale(self, sx, sy, sz):
        """Replace the matrix by a per-axis scaling."""
        self.matrix = np.diag([float(sx), float(sy), float(sz), 1.0])
        return self

    def translate(self, t):
        """Replace the matrix by a translation by the vector ``t``."""
        offset = np.asarray(t, dtype=float).reshape(3)
        matrix = np.eye(4)
        matrix[:3, 3] = offset
        self.matrix = matrix
        return self

    def rotate_around_axis(self, theta, axis):
        """Replace the matrix by a rotation of ``theta`` radians about axis 0, 1 or 2."""
        if axis not in (0, 1, 2):
            raise ValueError(f"axis must be 0, 1 or 2, got {axis!r}")
        i1 = (axis + 1) % 3
        i2 = (axis + 2) % 3
        c, s = math.cos(theta), math.sin(theta)
        matrix = np.eye(4)
        matrix[i1, i1] = c
        matrix[i2, i2] = c
        matrix[i1, i2] = -s
        matrix[i2, i1] = s
        self.matrix = matrix
        return self

    def compose(self, other):
        """Return the transform ``self * other`` (``other`` applied first)."""
        return Transform(self.matrix @ _as_matrix(other))

    def __mul__(self, other):
        try:
            other_matrix = _as_matrix(other)
        except TypeError:
            return NotImplemented
        return Transform(self.matrix @ other_matrix)

    def __eq__(self, other):
        if not isinstance(other, Transform):
            return NotImplemented
        diff = float(np.sum((self.matrix - other.matrix) ** 2))
        smallest = min(float(np.sum(self.matrix**2)), float(np.sum(other.matrix**2)))
        return diff <= _APPROX_PRECISION**2 * smallest

    __hash__ = None

    def __repr__(self):
        return f"Transform({self.matrix.tolist()!r})"

    def apply(self, points):
        """Return the (n, 3) points transformed by this matrix."""
        pts = np.asarray(points, dtype=float)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValueError(f"expected an (n, 3) array of points, got shape {pts.shape}")
        homogeneous = np.hstack([pts, np.ones((len(pts), 1))])
        return (homogeneous @ self.matrix.T)[:, :3]


def rotate_with_quaternion(points, axis, theta):
    """Rotate (n, 3) points by ``theta`` radians about ``axis`` using a unit quaternion."""
    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError(f"expected an (n, 3) array of points, got shape {pts.shape}")
    direction = np.asarray(axis, dtype=float).reshape(3)
    norm = np.linalg.norm(direction)
    if norm > 0:
        direction = direction / norm
    w = math.cos(theta / 2.0)
    u = math.sin(theta / 2.0) * direction
    uv = np.cross(u, pts)
    return pts + 2.0 * w * uv + 2.0 * np.cross(u, uv)