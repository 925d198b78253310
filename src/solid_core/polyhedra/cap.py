"""
Caps
====

A cap is the pyramid, cupola or rotunda shaped cluster of faces around
a peak vertex or top face. Caps are what augment/diminish/gyrate act on.

Detection matches the fixed signature catalog in spec/constants.py,
then checks the resulting boundary ring:
    - it is one closed cycle of edges
    - it has the expected side count (n, 2n or 10)
    - it is planar and regular (all vertices equidistant from its centroid)
    - the inner vertices sit on the axis, on the outer side of the ring
"""

import numpy as np
from typing import Iterable, List, Optional

from ..spec.constants import (
    PRECISION, CAP_PYRAMID, CAP_CUPOLA, CAP_ROTUNDA, CAP_CODES, CAP_SIGNATURES,
)
from ..operators.linalg import get_centroid
from .face_like import FaceLike


def _boundary_ring(polyhedron, face_indices: set) -> Optional[FaceLike]:
    """Chain the cap-face edges whose twin lies outside the cap."""
    outgoing = {}
    order = []
    for fi in sorted(face_indices):
        for edge in polyhedron.faces[fi].edges:
            if edge.twin().face_index in face_indices:
                continue
            a = edge.v1.index
            if a in outgoing:
                return None  # pinched ring
            outgoing[a] = edge
            order.append(a)
    if not order:
        return None

    start = order[0]
    edges = []
    current = start
    while True:
        edge = outgoing.get(current)
        if edge is None:
            return None
        edges.append(edge)
        current = edge.v2.index
        if current == start:
            break
        if len(edges) > len(outgoing):
            return None
    if len(edges) != len(outgoing):
        return None
    return FaceLike([e.v1 for e in edges], edges)


class Cap:
    """A removable pyramid / cupola / rotunda region of a polyhedron."""

    def __init__(self, polyhedron, kind: str, top_sides: int,
                 inner_indices: Iterable[int], face_indices: Iterable[int],
                 boundary: FaceLike):
        self.polyhedron = polyhedron
        self.type = kind
        self.top_sides = top_sides
        self._inner = sorted(set(inner_indices))
        self._faces = sorted(set(face_indices))
        self._boundary = boundary

    def __repr__(self):
        return f"Cap({self.using()}, inner={self._inner})"

    def equals(self, other) -> bool:
        return (isinstance(other, Cap)
                and other.polyhedron is self.polyhedron
                and other._inner == self._inner)

    # -------------------------------------------------------------------------
    # Detection
    # -------------------------------------------------------------------------

    @classmethod
    def _make(cls, polyhedron, kind: str, top_sides: int,
              inner_indices: set) -> Optional["Cap"]:
        face_indices = set()
        for i in inner_indices:
            face_indices.update(f.index for f in polyhedron.vertices[i].adjacent_faces())
        boundary = _boundary_ring(polyhedron, face_indices)
        if boundary is None:
            return None
        if boundary.num_sides != CAP_SIGNATURES[kind]["boundary"](top_sides):
            return None
        if set(boundary.vertex_indices()) & inner_indices:
            return None
        if not boundary.is_planar():
            return None

        center = boundary.centroid()
        radii = np.linalg.norm(boundary.vectors() - center, axis=1)
        if np.ptp(radii) > PRECISION:
            return None

        normal = boundary.normal()
        inner = polyhedron.positions[sorted(inner_indices)]
        heights = (inner - center) @ normal
        if np.any(heights < PRECISION):
            return None
        top = get_centroid(inner)
        off_axis = (top - center) - np.dot(top - center, normal) * normal
        if np.linalg.norm(off_axis) > PRECISION:
            return None

        return cls(polyhedron, kind, top_sides, inner_indices, face_indices, boundary)

    @classmethod
    def _pyramid_at(cls, polyhedron, vertex) -> Optional["Cap"]:
        faces = vertex.adjacent_faces()
        if len(faces) not in CAP_SIGNATURES[CAP_PYRAMID]["top_sides"]:
            return None
        if any(f.num_sides != 3 for f in faces):
            return None
        return cls._make(polyhedron, CAP_PYRAMID, len(faces), {vertex.index})

    @classmethod
    def _cupola_at(cls, polyhedron, top) -> Optional["Cap"]:
        if top.num_sides not in CAP_SIGNATURES[CAP_CUPOLA]["top_sides"]:
            return None
        sides = CAP_SIGNATURES[CAP_CUPOLA]["edge_faces"]
        neighbours = top.adjacent_faces()
        if any(f.num_sides != sides for f in neighbours):
            return None
        for v in top.vertices:
            around = v.adjacent_faces()
            if len(around) != 4:
                return None
            others = [f for f in around if not f.equals(top) and not f.in_set(neighbours)]
            if len(others) != 1 or others[0].num_sides != 3:
                return None
        return cls._make(polyhedron, CAP_CUPOLA, top.num_sides, set(top.vertex_indices()))

    @classmethod
    def _rotunda_at(cls, polyhedron, top) -> Optional["Cap"]:
        if top.num_sides not in CAP_SIGNATURES[CAP_ROTUNDA]["top_sides"]:
            return None
        sides = CAP_SIGNATURES[CAP_ROTUNDA]["edge_faces"]
        neighbours = top.adjacent_faces()
        if any(f.num_sides != sides for f in neighbours):
            return None
        top_idx = set(top.vertex_indices())
        for v in top.vertices:
            around = v.adjacent_faces()
            if len(around) != 4:
                return None
            others = [f for f in around if not f.equals(top) and not f.in_set(neighbours)]
            if len(others) != 1 or others[0].num_sides != 5:
                return None

        middle = set()
        for tri in neighbours:
            middle.update(i for i in tri.vertex_indices() if i not in top_idx)
        if len(middle) != top.num_sides:
            return None
        for i in middle:
            counts = sorted(f.num_sides for f in polyhedron.vertices[i].adjacent_faces())
            if counts != [3, 3, 5, 5]:
                return None
        return cls._make(polyhedron, CAP_ROTUNDA, top.num_sides, top_idx | middle)

    @classmethod
    def get_all(cls, polyhedron) -> List["Cap"]:
        """Every cap of the polyhedron: pyramids by vertex, then cupolae/rotundae by face."""
        caps = []
        for v in polyhedron.vertices:
            cap = cls._pyramid_at(polyhedron, v)
            if cap is not None:
                caps.append(cap)
        for face in polyhedron.faces:
            cap = cls._cupola_at(polyhedron, face) or cls._rotunda_at(polyhedron, face)
            if cap is not None:
                caps.append(cap)
        return caps

    @classmethod
    def find(cls, polyhedron, point) -> Optional["Cap"]:
        """The cap containing the face under point, if any."""
        hit = polyhedron.hit_face(point)
        point = np.asarray(point, dtype=float)
        containing = [cap for cap in polyhedron.caps() if hit.in_set(cap.faces())]
        if not containing:
            return None
        return min(containing, key=lambda c: np.linalg.norm(c.top_point() - point))

    @classmethod
    def nearest(cls, polyhedron, point, using: Optional[str] = None) -> Optional["Cap"]:
        """The cap whose boundary centroid is closest to point."""
        caps = [c for c in polyhedron.caps() if using is None or c.using() == using]
        if not caps:
            return None
        point = np.asarray(point, dtype=float)
        return min(caps, key=lambda c: np.linalg.norm(c.centroid() - point))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def using(self) -> str:
        """Augmentee code, e.g. 'Y4', 'U3', 'R5'."""
        return f"{CAP_CODES[self.type]}{self.top_sides}"

    def inner_vertex_indices(self) -> List[int]:
        return list(self._inner)

    def inner_vertices(self) -> list:
        return [self.polyhedron.vertices[i] for i in self._inner]

    def face_indices(self) -> List[int]:
        return list(self._faces)

    def faces(self) -> list:
        return [self.polyhedron.faces[i] for i in self._faces]

    def boundary(self) -> FaceLike:
        return self._boundary

    @property
    def vertices(self) -> list:
        """Inner and boundary vertices."""
        return self.inner_vertices() + list(self._boundary.vertices)

    def all_vertices(self) -> list:
        return self.vertices

    def vertex_indices(self) -> List[int]:
        return [v.index for v in self.vertices]

    def normal(self) -> np.ndarray:
        """Points out of the polyhedron through the cap."""
        return self._boundary.normal()

    def centroid(self) -> np.ndarray:
        return self._boundary.centroid()

    def normal_ray(self):
        return self.centroid(), self.normal()

    def top_point(self) -> np.ndarray:
        return get_centroid(self.polyhedron.positions[self._inner])

    def overlaps(self, other: "Cap") -> bool:
        """True if either cap's inner vertices touch the other cap."""
        mine, theirs = set(self._inner), set(other._inner)
        return bool(mine & set(other.vertex_indices()) or theirs & set(self.vertex_indices()))

    def transfer(self, polyhedron) -> "Cap":
        """The same cap on a similar copy of its polyhedron."""
        boundary = _boundary_ring(polyhedron, set(self._faces))
        return Cap(polyhedron, self.type, self.top_sides, self._inner, self._faces, boundary)
