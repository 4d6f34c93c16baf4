"""Helpers for sampling and assembling polylines."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

Color = tuple[float, float, float]


@dataclass
class CurveNetwork:
    """A set of points joined by polyline edges, each edge carrying a color."""

    points: list[tuple[float, float, float]] = field(default_factory=list)
    edges: list[tuple[int, int]] = field(default_factory=list)
    colors: list[Color] = field(default_factory=list)

    def add_curve(self, curve, color=(0.0, 0.0, 0.0)):
        """Append the rows of ``curve`` as a polyline of the given color."""
        rows = np.asarray(curve, dtype=float)
        if rows.ndim != 2 or rows.shape[1] < 3:
            raise ValueError(f"expected an (n, 3) array of points, got shape {rows.shape}")
        offset = len(self.points)
        self.points.extend(tuple(float(v) for v in row[:3]) for row in rows)
        edge_color = tuple(float(c) for c in color)
        for start in range(offset, offset + len(rows) - 1):
            self.edges.append((start, start + 1))
            self.colors.append(edge_color)


def build_linspace(points, resolution):
    """Return ``resolution`` evenly spaced values spanning the first column of ``points``."""
    if resolution < 2:
        raise ValueError("resolution must be at least 2")
    xs = np.asarray(points, dtype=float)[:, 0]
    low, high = xs.min(), xs.max()
    step = (high - low) / (resolution - 1)
    return low + step * np.arange(resolution)


def translate_points(points, offset):
    """Return ``points`` with ``offset`` added to every row."""
    pts = np.asarray(points, dtype=float)
    return pts + np.asarray(offset, dtype=float).reshape(-1)