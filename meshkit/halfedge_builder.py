"""Construction of a half-edge structure from a triangle face list."""

from __future__ import annotations

from collections import deque

import numpy as np

from meshkit.halfedge_ds import HalfedgeDS

_DEGREE = 3


def _edge_key(a, b):
    return (a, b) if a <= b else (b, a)


def _face_rows(faces, n_vertices):
    arr = np.asarray(faces, dtype=int)
    if arr.size == 0:
        arr = arr.reshape(0, _DEGREE)
    if arr.ndim != 2 or arr.shape[1] != _DEGREE:
        raise ValueError(f"expected an (m, 3) array of triangle faces, got shape {arr.shape}")
    if arr.size and (arr.min() < 0 or arr.max() >= n_vertices):
        raise ValueError("face refers to a vertex index out of range")
    return [tuple(int(v) for v in row) for row in arr]


def _face_halfedges(rows):
    """Yield (halfedge index, source, target) for every inner half-edge."""
    for i, row in enumerate(rows):
        for j in range(_DEGREE):
            yield i * _DEGREE + j, row[j], row[(j + 1) % _DEGREE]


def build_halfedges(n_vertices, faces, with_faces=False):
    """Build a :class:`HalfedgeDS` for a triangle mesh, boundaries included.

    Inner half-edge ``3*i + j`` runs from ``faces[i][j]`` to
    ``faces[i][(j+1) % 3]``; boundary half-edges are appended after them.
    With ``with_faces`` the first half-edge of each face is recorded.
    """
    if n_vertices < 0:
        raise ValueError("n_vertices must be non-negative")
    rows = _face_rows(faces, n_vertices)
    n_faces = len(rows)

    seen = set()
    inner_edges = 0
    for _, a, b in _face_halfedges(rows):
        key = _edge_key(a, b)
        if key in seen:
            inner_edges += 1
        else:
            seen.add(key)
    n_halfedges = 2 * len(seen)
    n_boundary = len(seen) - inner_edges

    mesh = HalfedgeDS(n_vertices, n_halfedges, n_faces if with_faces else None)

    for e, _, b in _face_halfedges(rows):
        mesh.target[e] = b
        mesh.face[e] = e // _DEGREE
        if with_faces and e % _DEGREE == 0:
            mesh.face_edge[e // _DEGREE] = e

    for e in range(n_faces * _DEGREE):
        nxt = e + 1 if e % _DEGREE != _DEGREE - 1 else e - (_DEGREE - 1)
        mesh.next_edge[e] = nxt
        mesh.prev_edge[nxt] = e

    first_seen = {}
    for e, a, b in _face_halfedges(rows):
        key = _edge_key(a, b)
        if key in first_seen:
            other = first_seen[key]
            mesh.opposite[e] = other
            mesh.opposite[other] = e
        else:
            first_seen[key] = e

    for e in range(n_halfedges):
        vertex = mesh.target[e]
        if vertex is not None:
            mesh.vertex_edge[vertex] = e

    if n_boundary > 0:
        _add_boundary_edges(mesh)
    return mesh


def _add_boundary_edges(mesh):
    """Create the exterior half-edges and link them into boundary cycles."""
    total = mesh.n_halfedges
    pending = deque(
        e
        for e in range(total)
        if mesh.opposite[e] is None and mesh.next_edge[e] is not None
    )
    counter = total - len(pending)
    while pending:
        first = pending.popleft()
        outer = counter
        counter += 1
        mesh.opposite[outer] = first
        mesh.opposite[first] = outer
        mesh.target[outer] = mesh.target[mesh.next_edge[mesh.next_edge[first]]]
        mesh.face[outer] = None

    for e in range(total):
        if mesh.face[e] is None:
            nxt = next_boundary_halfedge(mesh, e)
            mesh.next_edge[e] = nxt
            mesh.prev_edge[nxt] = e


def next_boundary_halfedge(mesh, e):
    """Return the boundary half-edge following the exterior half-edge ``e``.

    Turns around the target vertex of ``e``; the mesh must be manifold.
    """
    if mesh.face[e] is not None:
        raise ValueError(f"half-edge {e} is not a boundary half-edge")
    current = mesh.opposite[e]
    for _ in range(mesh.n_halfedges + 1):
        if current is None:
            break
        if mesh.face[current] is None:
            return current
        step = mesh.next_edge[current]
        step = mesh.next_edge[step] if step is not None else None
        current = mesh.opposite[step] if step is not None else None
    raise ValueError(f"no boundary half-edge follows {e}; the mesh is not manifold")