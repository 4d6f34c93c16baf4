"""Array-based half-edge data structure for triangle meshes."""

from __future__ import annotations


def _undefined(count):
    return [None] * count


def _fmt(value):
    return "-1" if value is None else str(value)


class HalfedgeDS:
    """Connectivity tables of a half-edge mesh.

    Every half-edge ``e`` has an ``opposite[e]``, a ``next_edge[e]`` and a
    ``prev_edge[e]`` in the same face, a ``target[e]`` vertex and a
    ``face[e]``. ``vertex_edge[v]`` holds one half-edge pointing at vertex
    ``v``; ``face_edge[f]`` holds one half-edge of face ``f`` when faces are
    stored. ``None`` marks a reference that is not defined; boundary
    half-edges have no face.
    """

    def __init__(self, n_vertices, n_halfedges, n_faces=None):
        if n_vertices < 0 or n_halfedges < 0:
            raise ValueError("sizes must be non-negative")
        if n_faces is not None and n_faces < 0:
            raise ValueError("sizes must be non-negative")
        self.n_vertices = n_vertices
        self.n_halfedges = n_halfedges
        self.n_faces = n_faces
        self.opposite = _undefined(n_halfedges)
        self.next_edge = _undefined(n_halfedges)
        self.prev_edge = _undefined(n_halfedges)
        self.target = _undefined(n_halfedges)
        self.face = _undefined(n_halfedges)
        self.vertex_edge = _undefined(n_vertices)
        self.face_edge = None if n_faces is None else _undefined(n_faces)

    def describe(self):
        """Return a table of all half-edge references, then the face list if stored."""
        lines = [
            f"he{e}: \t{_fmt(self.opposite[e])}\t{_fmt(self.next_edge[e])}"
            f"\t{_fmt(self.target[e])}\t{_fmt(self.face[e])}"
            for e in range(self.n_halfedges)
        ]
        if self.face_edge is not None:
            lines.append(f"face list: {self.n_faces}")
            for f, e1 in enumerate(self.face_edge):
                if e1 is None:
                    lines.append(f"f{f}: \tincident edge: e-1")
                    continue
                e2 = self.next_edge[e1]
                e3 = self.next_edge[e2] if e2 is not None else None
                v1 = self.target[e1]
                v2 = self.target[e2] if e2 is not None else None
                v3 = self.target[e3] if e3 is not None else None
                lines.append(
                    f"f{f}: \tincident edge: e{e1}\t v{_fmt(v3)}, v{_fmt(v1)}, v{_fmt(v2)}"
                )
        return "\n".join(lines)

    def __repr__(self):
        return (
            f"HalfedgeDS(n_vertices={self.n_vertices}, "
            f"n_halfedges={self.n_halfedges}, n_faces={self.n_faces})"
        )