"""Bezier curve evaluation, subdivision and differential quantities."""

from __future__ import annotations

import math

import numpy as np


def _control(control, minimum=1):
    points = np.asarray(control, dtype=float)
    if points.ndim != 2:
        raise ValueError(f"expected an (n, d) array of control points, got shape {points.shape}")
    if len(points) < minimum:
        raise ValueError(f"at least {minimum} control points are required, got {len(points)}")
    return points


def _lerp_level(points, t):
    return (1 - t) * points[:-1] + t * points[1:]


def de_casteljau(control, t):
    """Evaluate the Bezier curve at parameter ``t``."""
    points = _control(control)
    while len(points) > 1:
        points = _lerp_level(points, t)
    return points[0].copy()


def de_casteljau_intermediate(control, t):
    """Return one step of the De Casteljau algorithm: n-1 interpolated points."""
    return _lerp_level(_control(control), t)


def plot_curve(control, resolution):
    """Sample the curve at ``resolution`` evenly spaced parameters from 0 to 1."""
    points = _control(control)
    if resolution < 2:
        raise ValueError("resolution must be at least 2")
    dt = 1.0 / (resolution - 1)
    return np.array([de_casteljau(points, i * dt) for i in range(resolution)])


def intermediate_points(control, t):
    """Stack every intermediate level of the De Casteljau algorithm at ``t``."""
    points = _control(control)
    levels = []
    while len(points) > 1:
        points = _lerp_level(points, t)
        levels.append(points)
    if not levels:
        return np.empty((0, points.shape[1]))
    return np.vstack(levels)


def subdivide(control, t):
    """Split the curve at ``t`` into two curves with as many control points each."""
    points = _control(control)
    left, right = [], []
    while len(points) > 0:
        left.append(points[0])
        right.append(points[-1])
        points = _lerp_level(points, t)
    return np.array(left), np.array(right[::-1])


def subdivision_plot(control, levels):
    """Concatenate the control polygons obtained by ``levels`` rounds of halving."""
    points = _control(control)
    if levels < 0:
        raise ValueError("levels must be non-negative")
    if levels == 0:
        return points.copy()
    left, right = subdivide(points, 0.5)
    return np.vstack([subdivision_plot(left, levels - 1), subdivision_plot(right, levels - 1)])


def compute_tangent(control, t0):
    """Return the first derivative of the curve at ``t0``."""
    points = _control(control, 2)
    derivative = (len(points) - 1) * np.diff(points, axis=0)
    return de_casteljau(derivative, t0)


def compute_normal(control, t0):
    """Return the second derivative of the curve at ``t0``."""
    points = _control(control, 3)
    n = len(points)
    second = (n - 2) * (n - 1) * (points[2:] - 2 * points[1:-1] + points[:-2])
    return de_casteljau(second, t0)


def _normalized(vector):
    norm = np.linalg.norm(vector)
    return vector / norm if norm > 0 else vector


def loop_of_vertices(control, t0, k, radius):
    """Return k+1 points on a circle around c(t0), orthogonal to the tangent; closed."""
    points = _control(control, 2)
    if points.shape[1] != 3:
        raise ValueError("control points must be three-dimensional")
    if k < 1:
        raise ValueError("k must be at least 1")
    centre = de_casteljau(points, t0)
    tangent = _normalized(compute_tangent(points, t0))
    reference = np.array([0.0, 0.0, 1.0])
    if abs(float(tangent @ reference)) > 0.95:
        reference = np.array([0.0, 1.0, 0.0])
    first = _normalized(np.cross(tangent, reference))
    second = _normalized(np.cross(tangent, first))
    angles = (2.0 * math.pi / k) * np.arange(k)
    ring = centre + radius * (np.cos(angles)[:, None] * first + np.sin(angles)[:, None] * second)
    return np.vstack([ring, ring[:1]])