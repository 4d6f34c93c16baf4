"""Nearest-neighbour matching and rigid alignment for iterative closest points."""

from __future__ import annotations

from enum import Enum

import numpy as np
from scipy.spatial import cKDTree

_NORMAL_NEIGHBOURS = 10


class KnnStrategy(Enum):
    """How nearest neighbours are searched."""

    OCTREE = "octree"
    BRUTEFORCE = "bruteforce"


def _cloud(points, name):
    arr = np.asarray(points, dtype=float)
    if arr.size == 0:
        arr = arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"expected an (n, 3) array for {name}, got shape {arr.shape}")
    return arr


def _nearest_indices(source, target, strategy):
    if strategy is KnnStrategy.OCTREE:
        _, indices = cKDTree(target).query(source, k=1)
        return np.asarray(indices, dtype=int).reshape(-1)
    if strategy is KnnStrategy.BRUTEFORCE:
        return np.array(
            [int(np.argmin(((target - p) ** 2).sum(axis=1))) for p in source], dtype=int
        )
    raise ValueError(f"unknown strategy {strategy!r}")


def nearest_neighbour(source, target, strategy=KnnStrategy.OCTREE):
    """Return, for each source point, its nearest point in ``target``."""
    src = _cloud(source, "source")
    tgt = _cloud(target, "target")
    if len(tgt) == 0:
        raise ValueError("target point set is empty")
    return tgt[_nearest_indices(src, tgt, strategy)]


def _pca_normals(points, tree):
    k = min(_NORMAL_NEIGHBOURS, len(points))
    _, neighbours = tree.query(points, k=k)
    neighbours = np.asarray(neighbours, dtype=int).reshape(len(points), k)
    groups = points[neighbours]
    centred = groups - groups.mean(axis=1, keepdims=True)
    covariance = np.einsum("nki,nkj->nij", centred, centred)
    _, vectors = np.linalg.eigh(covariance)
    normals = vectors[:, :, 0]
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    return normals / np.where(lengths > 0, lengths, 1.0)


def nearest_neighbour_point_to_plane(source, target):
    """Return the nearest target points and the PCA normals of ``target`` there.

    Normals are the smallest principal direction of the ten nearest target
    points around each target point.
    """
    src = _cloud(source, "source")
    tgt = _cloud(target, "target")
    if len(tgt) == 0:
        raise ValueError("target point set is empty")
    tree = cKDTree(tgt)
    normals = _pca_normals(tgt, tree)
    indices = _nearest_indices(src, tgt, KnnStrategy.OCTREE)
    return tgt[indices], normals[indices]


def rigid_align(source, target):
    """Return ``source`` moved by the rotation and translation that best fit
    it onto ``target``, the rows of both being in correspondence."""
    src = _cloud(source, "source")
    tgt = _cloud(target, "target")
    if src.shape != tgt.shape:
        raise ValueError(f"point sets differ in shape: {src.shape} and {tgt.shape}")
    if len(src) == 0:
        raise ValueError("point sets are empty")
    src_centre = src.mean(axis=0)
    tgt_centre = tgt.mean(axis=0)
    cross_cov = (src - src_centre).T @ (tgt - tgt_centre)
    u, _, vt = np.linalg.svd(cross_cov)
    v = vt.T
    rotation = v @ u.T
    if np.linalg.det(rotation) < 0:
        v[:, 2] *= -1
        rotation = v @ u.T
    translation = tgt_centre - rotation @ src_centre
    return src @ rotation.T + translation