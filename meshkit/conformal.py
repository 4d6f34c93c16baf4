"""Spectral conformal parametrization of disc-like triangle meshes."""

from __future__ import annotations

import numpy as np
from scipy import sparse
from scipy.sparse.linalg import splu

_MAX_ITERATIONS = 1000
_TOLERANCE = 1e-6
_SHIFT = 1e-10


def _face_array(faces):
    arr = np.asarray(faces, dtype=int)
    if arr.size == 0:
        arr = arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"expected an (m, 3) array of faces, got shape {arr.shape}")
    return arr


def _vertex_array(vertices):
    arr = np.asarray(vertices, dtype=float)
    if arr.ndim != 2 or arr.shape[1] not in (2, 3):
        raise ValueError(f"expected an (n, 3) array of vertices, got shape {arr.shape}")
    if arr.shape[1] == 2:
        arr = np.column_stack([arr, np.zeros(len(arr))])
    return arr


def boundary_loop(faces):
    """Return the vertices of the longest boundary loop, in face orientation order.

    A loop starts at its smallest vertex index; a closed mesh gives an empty array.
    """
    F = _face_array(faces)
    directed = {(int(a), int(b)) for row in F for a, b in zip(row, np.roll(row, -1))}
    following = {a: b for a, b in directed if (b, a) not in directed}
    loops = []
    for start in sorted(following):
        if start not in following:
            continue
        loop = []
        vertex = start
        while vertex in following:
            loop.append(vertex)
            vertex = following.pop(vertex)
        loops.append(loop)
    return np.array(max(loops, key=len, default=[]), dtype=int)


def cotangent_matrix(vertices, faces):
    """Return the sparse cotangent Laplacian: 0.5*cot of the opposite angles
    off the diagonal, rows summing to zero."""
    V = _vertex_array(vertices)
    F = _face_array(faces)
    n = len(V)
    rows, cols, vals = [], [], []
    for corner in range(3):
        k = F[:, corner]
        i = F[:, (corner + 1) % 3]
        j = F[:, (corner + 2) % 3]
        e1 = V[i] - V[k]
        e2 = V[j] - V[k]
        with np.errstate(divide="ignore", invalid="ignore"):
            cot = np.einsum("ij,ij->i", e1, e2) / np.linalg.norm(np.cross(e1, e2), axis=1)
        weight = 0.5 * cot
        rows.extend([i, j, i, j])
        cols.extend([j, i, i, j])
        vals.extend([weight, weight, -weight, -weight])
    if not rows:
        return sparse.csr_matrix((n, n))
    return sparse.coo_matrix(
        (np.concatenate(vals), (np.concatenate(rows), np.concatenate(cols))), shape=(n, n)
    ).tocsr()


class ConformalParametrization:
    """Builds the conformal energy of a mesh with boundary and flattens it.

    Unknowns are stacked as (u_0..u_{n-1}, v_0..v_{n-1}).
    """

    def __init__(self, vertices, faces):
        self.vertices = _vertex_array(vertices)
        self.faces = _face_array(faces)
        if self.faces.size and (self.faces.min() < 0 or self.faces.max() >= len(self.vertices)):
            raise ValueError("face refers to a vertex index out of range")
        self.boundary = boundary_loop(self.faces)
        if len(self.boundary) == 0:
            raise ValueError("the mesh has no boundary")
        self.fixed_vertices = np.array(
            [self.boundary[0], self.boundary[len(self.boundary) // 2]], dtype=int
        )
        self.dirichlet = None
        self.area = None
        self.conformal_energy = None
        self.boundary_mass = None
        self.uv = None
        self.iterations = 0

    def compute_dirichlet(self):
        """Build the Dirichlet matrix: the cotangent matrix once per coordinate."""
        cot = cotangent_matrix(self.vertices, self.faces)
        self.dirichlet = sparse.block_diag((cot, cot), format="csr")
        return self.dirichlet

    def compute_area(self):
        """Build the matrix whose quadratic form is the signed area of the map."""
        n = len(self.vertices)
        starts = self.faces.reshape(-1)
        ends = np.roll(self.faces, -1, axis=1).reshape(-1)
        rows = np.concatenate([starts, ends])
        cols = np.concatenate([ends + n, starts + n])
        vals = np.concatenate([np.full(len(starts), 0.5), np.full(len(ends), -0.5)])
        self.area = sparse.coo_matrix((vals, (rows, cols)), shape=(2 * n, 2 * n)).tocsr()
        return self.area

    def compute_conformal_energy(self):
        """Build the conformal energy matrix ``dirichlet - area``."""
        if self.dirichlet is None:
            self.compute_dirichlet()
        if self.area is None:
            self.compute_area()
        self.conformal_energy = (self.dirichlet - self.area).tocsr()
        return self.conformal_energy

    def minimize_energy_spectral(self):
        """Find the minimising generalized eigenvector by inverse power iteration.

        Returns the (n, 2) coordinates, each column scaled into [0, 1].
        """
        if self.conformal_energy is None:
            self.compute_conformal_energy()
        n = len(self.vertices)
        size = 2 * n

        on_boundary = np.zeros(size)
        on_boundary[self.boundary] = 1.0
        on_boundary[self.boundary + n] = 1.0
        self.boundary_mass = sparse.diags(on_boundary, format="csr")
        d_p = len(self.boundary)

        def project_boundary(x):
            return on_boundary * x - (on_boundary @ x / d_p) * on_boundary

        constant_u = np.concatenate([np.ones(n), np.zeros(n)]) / np.sqrt(n)
        constant_v = np.concatenate([np.zeros(n), np.ones(n)]) / np.sqrt(n)

        def remove_translation(x):
            return x - constant_u * (constant_u @ x) - constant_v * (constant_v @ x)

        energy = ((self.conformal_energy + self.conformal_energy.T) / 2.0).tocsc()
        scale = float(np.abs(energy.diagonal()).max(initial=0.0)) or 1.0
        shifted = (energy + _SHIFT * scale * sparse.identity(size, format="csc")).tocsc()
        solve = splu(shifted).solve

        u = np.random.default_rng(0).uniform(-1.0, 1.0, size)
        u /= np.linalg.norm(u)
        self.iterations = 0
        while self.iterations < _MAX_ITERATIONS:
            w = remove_translation(project_boundary(u))
            v = remove_translation(solve(w))
            norm = np.linalg.norm(v)
            if norm == 0:
                break
            u = v / norm
            gu = project_boundary(u)
            eu = energy @ u
            denom = u @ gu
            residual = eu - (u @ eu / denom) * gu if denom != 0 else eu
            if np.linalg.norm(residual) < _TOLERANCE:
                break
            self.iterations += 1

        uv = np.column_stack([u[:n], u[n:]])
        low = uv.min(axis=0)
        span = uv.max(axis=0) - low
        span[span == 0] = 1.0
        self.uv = (uv - low) / span
        return self.uv

    def build_parametrizations(self):
        """Build every matrix and compute the spectral parametrization."""
        self.compute_dirichlet()
        self.compute_area()
        self.compute_conformal_energy()
        return self.minimize_energy_spectral()