"""Triangle surface mesh with vertex/face/half-edge connectivity and normals."""

from __future__ import annotations

import math
from collections import Counter

import numpy as np

from meshkit.halfedge_builder import build_halfedges
from meshkit.mesh_parts import HalfEdge, PrimalFace, Vertex


def _normalized(vector):
    norm = np.linalg.norm(vector)
    return vector / norm if norm > 0 else vector


def _halfedge_triangle(face):
    """Return the three corner positions of a face, in half-edge order."""
    hedge = face.halfedges[0]
    return (
        hedge.start.position,
        hedge.next.start.position,
        hedge.next.next.start.position,
    )


class Mesh:
    """A triangle mesh built from an (n, 3) vertex array and an (m, 3) face array."""

    def __init__(self, vertices, faces):
        V = np.asarray(vertices, dtype=float)
        if V.size == 0:
            V = V.reshape(0, 3)
        if V.ndim != 2 or V.shape[1] != 3:
            raise ValueError(f"expected an (n, 3) array of vertices, got shape {V.shape}")
        F = np.asarray(faces, dtype=int)
        if F.size == 0:
            F = F.reshape(0, 3)
        if F.ndim != 2 or F.shape[1] != 3:
            raise ValueError(f"expected an (m, 3) array of faces, got shape {F.shape}")
        if F.size and (F.min() < 0 or F.max() >= len(V)):
            raise ValueError("face refers to a vertex index out of range")

        self.vertices = V.copy()
        self.faces = F.copy()
        self.primal_vertices = [Vertex(i, row) for i, row in enumerate(self.vertices)]
        self.primal_faces = [
            PrimalFace(index=j, indices_vertices=[int(v) for v in row])
            for j, row in enumerate(self.faces)
        ]
        self._initialize_complex()
        self.halfedge_structure = build_halfedges(len(self.vertices), self.faces)
        self.hedges = self._compute_half_edges()

    def _initialize_complex(self):
        for face in self.primal_faces:
            for vi in face.indices_vertices:
                vertex = self.primal_vertices[vi]
                face.vertices.append(vertex)
                vertex.one_ring_faces.append(face)
            positions = np.array([v.position for v in face.vertices])
            face.barycenter = positions.mean(axis=0)
            v0, v1, v2 = positions
            face.normal = _normalized(np.cross(v1 - v0, v2 - v0))

    def _compute_half_edges(self):
        hedges = [HalfEdge(i) for i in range(3 * len(self.faces))]
        for face in self.primal_faces:
            base = 3 * face.index
            for j in range(3):
                hedge = hedges[base + j]
                start = self.primal_vertices[face.indices_vertices[j]]
                end = self.primal_vertices[face.indices_vertices[(j + 1) % 3]]
                hedge.start = start
                hedge.end = end
                start.incoming_half_edges.append(hedge)
                hedge.primal_face = face
                face.halfedges.append(hedge)
                hedge.next = hedges[base + (j + 1) % 3]

        starting_at = [[] for _ in self.primal_vertices]
        for hedge in hedges:
            starting_at[hedge.start.index].append(hedge)

        for hedge in hedges:
            if hedge.flip is not None:
                continue
            candidate = next(
                (c for c in starting_at[hedge.end.index] if c.end.index == hedge.start.index),
                None,
            )
            if candidate is None:
                hedge.boundary = True
            else:
                hedge.flip = candidate
                candidate.flip = hedge
        return hedges

    def vertex_degree_statistics(self):
        """Return the vertex degree distribution and any degree inconsistencies.

        The distribution maps a degree (number of incident faces) to how many
        vertices have it. The second item lists ``(vertex, face_degree,
        halfedge_degree)`` for every vertex whose face count differs from the
        number of half-edges stored on it.
        """
        degrees = [0] * len(self.primal_vertices)
        for face in self.primal_faces:
            for vi in face.indices_vertices:
                degrees[vi] += 1
        distribution = dict(sorted(Counter(degrees).items()))
        inconsistent = [
            (vertex.index, degrees[vertex.index], len(vertex.incoming_half_edges))
            for vertex in self.primal_vertices
            if degrees[vertex.index] != len(vertex.incoming_half_edges)
        ]
        return distribution, inconsistent

    def gaussian_curvature(self):
        """Return per-vertex angle defect divided by a third of the one-ring area."""
        angle_sums = np.zeros(len(self.primal_vertices))
        area_sums = np.zeros(len(self.primal_vertices))
        for vertex in self.primal_vertices:
            for face in vertex.one_ring_faces:
                v0, v1, v2 = _halfedge_triangle(face)
                e1 = _normalized(v1 - v0)
                e2 = _normalized(v2 - v0)
                angle_sums[vertex.index] += math.acos(float(np.clip(e1 @ e2, -1.0, 1.0)))
                area = np.linalg.norm(np.cross(v1 - v0, v2 - v0)) / 2.0
                area_sums[vertex.index] += area / 3.0
        with np.errstate(divide="ignore", invalid="ignore"):
            return (2.0 * math.pi - angle_sums) / area_sums

    def count_boundaries(self):
        """Count cycles reached by following ``next`` from unvisited boundary half-edges."""
        visited = set()
        count = 0
        for hedge in self.hedges:
            if hedge.boundary and hedge.index not in visited:
                count += 1
                current = hedge
                while True:
                    visited.add(current.index)
                    current = current.next
                    if current is hedge:
                        break
        return count

    def face_normals(self):
        """Return unit face normals computed from the face vertex order."""
        normals = np.zeros((len(self.primal_faces), 3))
        for i, face in enumerate(self.primal_faces):
            v0, v1, v2 = (v.position for v in face.vertices[:3])
            normals[i] = _normalized(np.cross(v1 - v0, v2 - v0))
        return normals

    def face_normals_hed(self):
        """Return unit face normals computed by walking each face's half-edges."""
        normals = np.zeros((len(self.primal_faces), 3))
        for i, face in enumerate(self.primal_faces):
            v0, v1, v2 = _halfedge_triangle(face)
            normals[i] = _normalized(np.cross(v1 - v0, v2 - v0))
        return normals

    def vertex_normals(self):
        """Return unit vertex normals: the normalised sum of incident face normals."""
        normals = np.zeros((len(self.primal_vertices), 3))
        for face, face_normal in zip(self.primal_faces, self.face_normals()):
            for vertex in face.vertices:
                normals[vertex.index] += face_normal
        return np.array([_normalized(row) for row in normals]).reshape(-1, 3)

    def vertex_normals_hed(self):
        """Return negated unit vertex normals computed through the half-edges."""
        normals = np.zeros((len(self.primal_vertices), 3))
        for i, vertex in enumerate(self.primal_vertices):
            total = np.zeros(3)
            for face in vertex.one_ring_faces:
                v0, v1, v2 = _halfedge_triangle(face)
                total += _normalized(np.cross(v1 - v0, v2 - v0))
            normals[i] = -_normalized(total)
        return normals