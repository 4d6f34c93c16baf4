"""Elements of a surface mesh: vertices, half-edges and triangular faces."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def _zero_vector():
    return np.zeros(3)


def _same_array(a, b):
    if a is None or b is None:
        return a is b
    return bool(np.array_equal(a, b))


def _index_of(part):
    return None if part is None else part.index


@dataclass(eq=False, repr=False)
class Vertex:
    """A mesh vertex with its position and its incident faces and half-edges."""

    index: int
    position: np.ndarray = field(default_factory=_zero_vector)
    one_ring_faces: list = field(default_factory=list)
    incoming_half_edges: list = field(default_factory=list)
    angle_defect: float = 0.0
    gaussian_curvature: float = 0.0
    voronoi_area: float = 0.0
    normal: np.ndarray = field(default_factory=_zero_vector)

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float).reshape(3)

    def __eq__(self, other):
        if not isinstance(other, Vertex):
            return NotImplemented
        return self.index == other.index and _same_array(self.position, other.position)

    def __str__(self):
        coords = "\n".join(f"{float(c):g}" for c in self.position)
        return f"position of vertex{self.index} is \n{coords}"

    def __repr__(self):
        return f"Vertex(index={self.index}, position={self.position.tolist()!r})"


@dataclass(eq=False, repr=False)
class HalfEdge:
    """A directed edge of a face, linked to its flip and to the next edge of its face."""

    index: int
    start: Vertex | None = None
    end: Vertex | None = None
    flip: HalfEdge | None = None
    next: HalfEdge | None = None
    primal_face: PrimalFace | None = None
    boundary: bool = False

    def __eq__(self, other):
        """Equal when indices, flip, next and face indices agree, and the start
        vertex of this half-edge is the end vertex of the other."""
        if not isinstance(other, HalfEdge):
            return NotImplemented
        return (
            self.index == other.index
            and self.start is other.end
            and _index_of(self.flip) == _index_of(other.flip)
            and _index_of(self.next) == _index_of(other.next)
            and _index_of(self.primal_face) == _index_of(other.primal_face)
        )

    def __str__(self):
        return f"start: {_index_of(self.start)} end: {_index_of(self.end)}"

    def __repr__(self):
        return (
            f"HalfEdge(index={self.index}, start={_index_of(self.start)}, "
            f"end={_index_of(self.end)}, boundary={self.boundary})"
        )


@dataclass(eq=False, repr=False)
class PrimalFace:
    """A triangular face with its vertices, half-edges and geometric attributes."""

    index: int = -1
    vertices: list = field(default_factory=list)
    halfedges: list = field(default_factory=list)
    indices_vertices: list = field(default_factory=list)
    indices_hedges: list = field(default_factory=list)
    barycenter: np.ndarray = field(default_factory=_zero_vector)
    circumcenter: np.ndarray = field(default_factory=_zero_vector)
    normal: np.ndarray = field(default_factory=_zero_vector)

    def __eq__(self, other):
        if not isinstance(other, PrimalFace):
            return NotImplemented
        return (
            list(self.indices_vertices) == list(other.indices_vertices)
            and self.index == other.index
            and _same_array(self.normal, other.normal)
            and _same_array(self.barycenter, other.barycenter)
            and list(self.indices_hedges) == list(other.indices_hedges)
        )

    def __str__(self):
        indices = " ".join(str(i) for i in self.indices_vertices[:3])
        return f"vertices of face {self.index} are {indices}"

    def __repr__(self):
        return f"PrimalFace(index={self.index}, indices_vertices={self.indices_vertices!r})"