"""Interpolation of planar sample points: piecewise linear, polynomial and cubic."""

from __future__ import annotations

import numpy as np
from scipy.linalg import qr, solve_triangular


def _samples(points, minimum):
    arr = np.asarray(points, dtype=float)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise ValueError(f"expected an (n, 2) array of points, got shape {arr.shape}")
    if len(arr) < minimum:
        raise ValueError(f"at least {minimum} points are required, got {len(arr)}")
    return arr[:, 0].copy(), arr[:, 1].copy()


def _solve_col_piv_qr(matrix, rhs):
    """Basic solution of ``matrix @ x = rhs`` by column-pivoted QR."""
    q, r, perm = qr(matrix, mode="economic", pivoting=True)
    solution = np.zeros(matrix.shape[1])
    diag = np.abs(np.diag(r))
    if diag.size == 0 or diag[0] == 0:
        return solution
    threshold = np.finfo(float).eps * min(matrix.shape) * diag[0]
    rank = int(np.count_nonzero(diag > threshold))
    projected = q.T @ rhs
    solution[perm[:rank]] = solve_triangular(r[:rank, :rank], projected[:rank])
    return solution


class LinearInterpolation:
    """Piecewise linear interpolation through the sample points."""

    def __init__(self, points):
        self._x, self._y = _samples(points, 1)

    def __call__(self, t):
        t = float(t)
        xs, ys = self._x.tolist(), self._y.tolist()
        if t > xs[-1]:
            return ys[-1]
        for x0, x1, y0, y1 in zip(xs, xs[1:], ys, ys[1:]):
            if x0 <= t <= x1:
                return y0 + (t - x0) * ((y1 - y0) / (x1 - x0))
        return 0.0


class LagrangeInterpolation:
    """Single polynomial through all sample points, from the Vandermonde system."""

    def __init__(self, points):
        x, y = _samples(points, 1)
        vandermonde = np.vander(x, increasing=True)
        self.coefficients = _solve_col_piv_qr(vandermonde, y)

    def __call__(self, t):
        return float(np.polynomial.polynomial.polyval(float(t), self.coefficients))


class CubicInterpolation:
    """Piecewise cubic interpolation with first and second derivative matching."""

    def __init__(self, points):
        self._x, self._y = _samples(points, 2)
        size = 4 * (len(self._x) - 1)
        system = np.zeros((size, size))
        rhs = np.zeros(size)
        pairs = zip(self._x, self._x[1:], self._y, self._y[1:])
        for i, (x0, x1, y0, y1) in enumerate(pairs):
            row = 4 * i
            system[row, row : row + 4] = [1.0, x0, x0**2, x0**3]
            rhs[row] = y0
            system[row + 1, row : row + 4] = [1.0, x1, x1**2, x1**3]
            rhs[row + 1] = y1
            if i > 0:
                prev = 4 * (i - 1)
                system[row + 2, prev + 1 : prev + 4] = [1.0, 2 * x1, 3 * x1**2]
                system[row + 2, row + 1 : row + 4] = [-1.0, -2 * x1, -3 * x1**2]
                system[row + 3, prev + 2 : prev + 4] = [2.0, 6 * x1]
                system[row + 3, row + 2 : row + 4] = [-2.0, -6 * x1]
        self.coefficients = _solve_col_piv_qr(system, rhs)

    def __call__(self, t):
        t = float(t)
        if t > self._x[-1]:
            return float(self._y[-1])
        for i, (x0, x1) in enumerate(zip(self._x, self._x[1:])):
            if x0 <= t <= x1:
                a, b, c, d = self.coefficients[4 * i : 4 * i + 4]
                return float(a + b * t + c * t * t + d * t * t * t)
        return 0.0

    def tangent(self, i, x):
        """Return the tangent direction (1, dy/dx) of segment ``i`` at ``x``."""
        if not 0 <= i < len(self._x) - 1:
            raise IndexError(f"segment index {i} out of range")
        b, c, d = self.coefficients[4 * i + 1 : 4 * i + 4]
        return np.array([1.0, b + 2 * c * x + 3 * d * x * x])