"""
Polyhedron Mesh Model
=====================

Half-edge representation of a closed polyhedral surface.

CONSTRUCTION:
    Polyhedron(vertices, faces)
        vertices: (V, 3) positions
        faces:    list of index cycles, counter-clockwise seen from outside

INVARIANTS (checked at construction, MalformedMeshError otherwise):
    - every index is in range, every face has >= 3 distinct vertices
    - each directed edge (a, b) appears in exactly one face
    - each directed edge (a, b) has a twin (b, a) in another face
      (skipped for open meshes, closed=False; twin() then raises on
      border edges)

Polyhedra are immutable. `with_vertices` is the only way to move
vertices and returns a new, structurally identical instance. Structural
edits (add_face, remove_face, add_polyhedron, deduplicate_vertices)
also return new instances.
"""

import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple

from ..spec.constants import PRECISION
from ..spec.errors import MalformedMeshError, DimensionMismatchError
from ..operators.linalg import get_centroid, angle_between
from .face_like import FaceLike


class Vertex:
    """A vertex of a polyhedron, identified by its index."""

    __slots__ = ("polyhedron", "index")

    def __init__(self, polyhedron: "Polyhedron", index: int):
        self.polyhedron = polyhedron
        self.index = index

    def __repr__(self):
        return f"Vertex({self.index})"

    def __eq__(self, other):
        return (isinstance(other, Vertex)
                and other.polyhedron is self.polyhedron
                and other.index == self.index)

    def __hash__(self):
        return hash((id(self.polyhedron), self.index))

    @property
    def vec(self) -> np.ndarray:
        return self.polyhedron.positions[self.index]

    def adjacent_faces(self) -> List["Face"]:
        return [self.polyhedron.faces[i] for i in self.polyhedron._vertex_faces[self.index]]

    def adjacent_vertices(self) -> List["Vertex"]:
        seen = []
        for face in self.adjacent_faces():
            idx = face.vertex_indices()
            k = idx.index(self.index)
            nxt = idx[(k + 1) % len(idx)]
            if nxt not in seen:
                seen.append(nxt)
        return [self.polyhedron.vertices[i] for i in seen]


class Edge:
    """Directed half-edge v1 -> v2 belonging to one face."""

    __slots__ = ("v1", "v2", "face_index")

    def __init__(self, v1: Vertex, v2: Vertex, face_index: int):
        self.v1 = v1
        self.v2 = v2
        self.face_index = face_index

    def __repr__(self):
        return f"Edge({self.v1.index}->{self.v2.index})"

    def __eq__(self, other):
        return isinstance(other, Edge) and self.v1 == other.v1 and self.v2 == other.v2

    def __hash__(self):
        return hash((self.v1, self.v2))

    @property
    def polyhedron(self) -> "Polyhedron":
        return self.v1.polyhedron

    @property
    def face(self) -> "Face":
        return self.polyhedron.faces[self.face_index]

    def key(self) -> Tuple[int, int]:
        return self.v1.index, self.v2.index

    def twin(self) -> "Edge":
        return self.polyhedron.get_edge(self.v2.index, self.v1.index)

    def twin_face(self) -> "Face":
        return self.twin().face

    def adjacent_faces(self) -> List["Face"]:
        """[own face, face across the edge]"""
        return [self.face, self.twin_face()]

    def value(self) -> np.ndarray:
        return self.v2.vec - self.v1.vec

    def length(self) -> float:
        return float(np.linalg.norm(self.value()))

    def midpoint(self) -> np.ndarray:
        return (self.v1.vec + self.v2.vec) / 2

    def dihedral_angle(self) -> float:
        """Interior angle between the two faces meeting at this edge."""
        n1 = self.face.normal()
        n2 = self.twin_face().normal()
        return np.pi - angle_between(n1, n2)


class Face(FaceLike):
    """A face of a polyhedron."""

    def __init__(self, polyhedron: "Polyhedron", index: int):
        self.polyhedron = polyhedron
        self.index = index
        cycle = polyhedron.face_indices[index]
        vertices = [polyhedron.vertices[i] for i in cycle]
        edges = [polyhedron.get_edge(a, b) for a, b in zip(cycle, cycle[1:] + cycle[:1])]
        super().__init__(vertices, edges)

    def __repr__(self):
        return f"Face({self.index}: {self.vertex_indices()})"

    def equals(self, other) -> bool:
        return (isinstance(other, Face)
                and other.polyhedron is self.polyhedron
                and other.index == self.index)

    __eq__ = equals

    def __hash__(self):
        return hash((id(self.polyhedron), self.index))

    def in_set(self, faces) -> bool:
        return any(self.equals(f) for f in faces)


def _check_faces(num_vertices: int, faces) -> List[List[int]]:
    checked = []
    for fi, face in enumerate(faces):
        cycle = [int(i) for i in face]
        if len(cycle) < 3:
            raise MalformedMeshError(f"Face {fi} has {len(cycle)} vertices, expected >= 3")
        if len(set(cycle)) != len(cycle):
            raise MalformedMeshError(f"Face {fi} repeats a vertex: {cycle}")
        for i in cycle:
            if i < 0 or i >= num_vertices:
                raise MalformedMeshError(
                    f"Face {fi} references vertex {i}, valid range is [0, {num_vertices})")
        checked.append(cycle)
    return checked


class Polyhedron:
    """
    Closed polyhedral surface with half-edge connectivity.

    Derived values (centroid, caps) are cached per instance; since
    instances are immutable the caches never need invalidation.
    """

    def __init__(self, vertices, faces: Sequence[Sequence[int]], closed: bool = True):
        positions = np.array(vertices, dtype=float)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise MalformedMeshError(f"Expected (V, 3) vertex array, got shape {positions.shape}")
        positions.setflags(write=False)
        self.positions = positions
        self.face_indices = _check_faces(len(positions), faces)

        self.vertices = [Vertex(self, i) for i in range(len(positions))]

        # Directed edge lookup
        self._edges: Dict[Tuple[int, int], Edge] = {}
        self._vertex_faces: List[List[int]] = [[] for _ in range(len(positions))]
        for fi, cycle in enumerate(self.face_indices):
            for a, b in zip(cycle, cycle[1:] + cycle[:1]):
                if (a, b) in self._edges:
                    raise MalformedMeshError(
                        f"Directed edge ({a}, {b}) appears in faces "
                        f"{self._edges[(a, b)].face_index} and {fi}")
                self._edges[(a, b)] = Edge(self.vertices[a], self.vertices[b], fi)
                self._vertex_faces[a].append(fi)

        self.closed = closed
        for (a, b) in self._edges:
            if closed and (b, a) not in self._edges:
                raise MalformedMeshError(f"Edge ({a}, {b}) has no twin")

        self.faces = [Face(self, i) for i in range(len(self.face_indices))]
        self._centroid: Optional[np.ndarray] = None
        self._caps = None
        self._caps_from: Optional["Polyhedron"] = None

    def __repr__(self):
        return f"Polyhedron(V={self.num_vertices}, E={len(self.unique_edges())}, F={self.num_faces})"

    # -------------------------------------------------------------------------
    # Topology
    # -------------------------------------------------------------------------

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_faces(self) -> int:
        return len(self.faces)

    @property
    def edges(self) -> List[Edge]:
        """All half-edges (each geometric edge twice)."""
        return list(self._edges.values())

    def unique_edges(self) -> List[Edge]:
        """One half-edge per geometric edge."""
        return [e for (a, b), e in self._edges.items() if a < b]

    def get_edge(self, a: int, b: int) -> Edge:
        try:
            return self._edges[(a, b)]
        except KeyError:
            raise MalformedMeshError(f"No edge ({a}, {b}) in polyhedron") from None

    def faces_with_num_sides(self, n: int) -> List[Face]:
        return [f for f in self.faces if f.num_sides == n]

    def largest_face(self) -> Face:
        """First face with the most sides."""
        return max(self.faces, key=lambda f: f.num_sides)

    def euler_characteristic(self) -> int:
        return self.num_vertices - len(self.unique_edges()) + self.num_faces

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def centroid(self) -> np.ndarray:
        if self._centroid is None:
            self._centroid = get_centroid(self.positions)
        return self._centroid

    def edge_length(self) -> float:
        """Length of the first edge (edges are uniform for valid solids)."""
        return self.unique_edges()[0].length()

    def edge_lengths(self) -> np.ndarray:
        return np.array([e.length() for e in self.unique_edges()])

    def hit_face(self, point) -> Face:
        """Face whose plane passes closest to point (ties: nearest centroid)."""
        point = np.asarray(point, dtype=float)
        dists = np.array([abs(f.plane_distance(point)) for f in self.faces])
        close = [f for f, d in zip(self.faces, dists) if d <= dists.min() + PRECISION]
        return min(close, key=lambda f: np.linalg.norm(f.centroid() - point))

    def caps(self) -> list:
        """All caps detected from the signature catalog (cached)."""
        if self._caps is None:
            from .cap import Cap
            if self._caps_from is not None:
                self._caps = [cap.transfer(self) for cap in self._caps_from.caps()]
            else:
                self._caps = Cap.get_all(self)
        return self._caps

    # -------------------------------------------------------------------------
    # Rebuilds
    # -------------------------------------------------------------------------

    def with_vertices(self, positions, similar: bool = False) -> "Polyhedron":
        """
        Same topology, new vertex positions.

        similar=True promises the new positions are a rotation, uniform
        scaling and translation of the old ones; caps are then carried
        over instead of detected again.
        """
        arr = np.asarray(positions, dtype=float)
        if arr.shape != self.positions.shape:
            raise DimensionMismatchError(
                f"Expected positions of shape {self.positions.shape}, got {arr.shape}")
        moved = Polyhedron(arr, self.face_indices, closed=self.closed)
        if similar:
            moved._caps_from = self
        return moved

    def add_polyhedron(self, other: "Polyhedron") -> "Polyhedron":
        """Disjoint union of two polyhedra (vertices of other are appended)."""
        offset = self.num_vertices
        positions = np.vstack([self.positions, other.positions])
        faces = self.face_indices + [[i + offset for i in f] for f in other.face_indices]
        return Polyhedron(positions, faces)

    def to_data(self) -> Tuple[np.ndarray, List[List[int]]]:
        return self.positions.copy(), [list(f) for f in self.face_indices]

    def add_face(self, cycle: Sequence[int]) -> "Polyhedron":
        """New instance with one more face; closed once every edge has a twin."""
        faces = self.face_indices + [list(cycle)]
        return Polyhedron(self.positions, faces, closed=_is_closed(faces))

    def remove_face(self, face: "Face") -> "Polyhedron":
        """New (open) instance without the given face."""
        faces = [f for i, f in enumerate(self.face_indices) if i != face.index]
        return Polyhedron(self.positions, faces, closed=False)

    def deduplicate_vertices(self, tol: float = PRECISION) -> "Polyhedron":
        """
        Merge coincident vertices.

        Faces that collapse below three distinct vertices are dropped and
        vertices no face uses are removed. Kept vertices stay in order.
        """
        remap: Dict[int, int] = {}
        kept: List[int] = []
        for i, p in enumerate(self.positions):
            for k in kept:
                if np.linalg.norm(self.positions[k] - p) < tol:
                    remap[i] = k
                    break
            else:
                remap[i] = i
                kept.append(i)

        faces = []
        for cycle in self.face_indices:
            merged = []
            for i in cycle:
                j = remap[i]
                if not merged or merged[-1] != j:
                    merged.append(j)
            if len(merged) > 1 and merged[0] == merged[-1]:
                merged.pop()
            if len(set(merged)) >= 3:
                faces.append(merged)

        used = sorted({i for f in faces for i in f})
        index = {old: new for new, old in enumerate(used)}
        faces = [[index[i] for i in f] for f in faces]
        return Polyhedron(self.positions[used], faces, closed=_is_closed(faces))


def _is_closed(faces) -> bool:
    directed = {(a, b) for f in faces for a, b in zip(f, f[1:] + f[:1])}
    return all((b, a) in directed for a, b in directed)
