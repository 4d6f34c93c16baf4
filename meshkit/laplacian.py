"""Cotangent Laplacian, lumped area matrix and heat diffusion on a triangle mesh."""

from __future__ import annotations

import numpy as np
from scipy import sparse
from scipy.sparse.linalg import spsolve

from meshkit.mesh import Mesh

_AREA_EPS = 1e-10


def _unit(vector):
    norm = np.linalg.norm(vector)
    return vector / norm if norm > 0 else vector


def _cotangent(x):
    """Return 1 / tan(x); infinite where tan(x) is zero."""
    with np.errstate(divide="ignore"):
        return float(np.float64(1.0) / np.tan(np.float64(x)))


class LaplacianMesh(Mesh):
    """A mesh carrying the matrices ``L`` (cotangent weights), ``A`` (lumped
    vertex areas), ``Ainv`` and the Laplacian ``Delta = Ainv @ L``."""

    def __init__(self, vertices, faces):
        super().__init__(vertices, faces)
        n = len(self.vertices)
        self.L = self._dirichlet(n)
        self.A, self.Ainv = self._area_matrices(n)
        self.Delta = (self.Ainv @ self.L).tocsr()

    def _dirichlet(self, n):
        rows, cols, vals = [], [], []

        def add(i, j, value):
            rows.append(i)
            cols.append(j)
            vals.append(value)

        for face in self.primal_faces:
            v0, v1, v2 = face.vertices[:3]
            p0, p1, p2 = v0.position, v1.position, v2.position
            cot_alpha = _cotangent(_unit(p1 - p0) @ _unit(p2 - p0))
            cot_beta = _cotangent(_unit(p2 - p1) @ _unit(p0 - p1))
            cot_gamma = _cotangent(_unit(p0 - p2) @ _unit(p1 - p2))
            i0, i1, i2 = v0.index, v1.index, v2.index
            add(i0, i1, 0.5 * cot_alpha)
            add(i1, i0, 0.5 * cot_alpha)
            add(i1, i2, 0.5 * cot_beta)
            add(i2, i1, 0.5 * cot_beta)
            add(i2, i0, 0.5 * cot_gamma)
            add(i0, i2, 0.5 * cot_gamma)
            add(i0, i0, -0.5 * (cot_alpha + cot_gamma))
            add(i1, i1, -0.5 * (cot_alpha + cot_beta))
            add(i2, i2, -0.5 * (cot_beta + cot_gamma))

        return sparse.coo_matrix((vals, (rows, cols)), shape=(n, n)).tocsr()

    def _area_matrices(self, n):
        areas = np.zeros(n)
        for vertex in self.primal_vertices:
            total = 0.0
            for face in vertex.one_ring_faces:
                p0, p1, p2 = (v.position for v in face.vertices[:3])
                total += np.linalg.norm(np.cross(p1 - p0, p2 - p0)) / 2.0 / 3.0
            areas[vertex.index] = total
        inverse = areas.copy()
        large = areas > _AREA_EPS
        inverse[large] = 1.0 / areas[large]
        return sparse.diags(areas, format="csr"), sparse.diags(inverse, format="csr")

    def _heat_vector(self, u):
        values = np.asarray(u, dtype=float).reshape(-1)
        if len(values) != len(self.vertices):
            raise ValueError(
                f"expected {len(self.vertices)} heat values, got {len(values)}"
            )
        return values

    def initial_heat(self):
        """Return the initial heat distribution: the x coordinate of each vertex."""
        return self.vertices[:, 0].copy()

    def heat_step_explicit(self, u, time_step):
        """Return ``u`` after one explicit Euler step of the heat equation."""
        values = self._heat_vector(u)
        return values + float(time_step) * (self.Delta @ values)

    def heat_step_implicit(self, u, time_step):
        """Return ``u`` after one implicit Euler step: solve (I - dt*Delta) x = u."""
        values = self._heat_vector(u)
        n = len(values)
        system = (sparse.identity(n, format="csr") - float(time_step) * self.Delta).tocsc()
        return np.asarray(spsolve(system, values), dtype=float).reshape(n)