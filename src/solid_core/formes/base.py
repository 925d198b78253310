"""
Forme base
==========

A Forme is a (Specs, Polyhedron) pair: "this geometry, read as that
classification". Variants derive the face/cap semantics operations
consult: which caps are modifications, which faces may be augmented,
how a second modification site aligns with the first.

Formes are never mutated; derived values are computed at most once
per instance.
"""

import numpy as np
from typing import FrozenSet, Optional

from ..operators.linalg import get_centroid, is_inverse
from ..polyhedra import Polyhedron


class PolyhedronForme:
    """Base class of every Forme variant."""

    def __init__(self, specs, geom: Polyhedron):
        self.specs = specs
        self.geom = geom
        self._cap_inner: Optional[FrozenSet[int]] = None

    def __repr__(self):
        return f"{type(self).__name__}({self.specs.name()})"

    # -------------------------------------------------------------------------
    # Caps and source faces
    # -------------------------------------------------------------------------

    def caps(self) -> list:
        return self.geom.caps()

    def cap_inner_vertex_indices(self) -> FrozenSet[int]:
        if self._cap_inner is None:
            self._cap_inner = frozenset(
                i for cap in self.caps() for i in cap.inner_vertex_indices())
        return self._cap_inner

    def source_vertices(self) -> list:
        """Vertices that belong to the source solid (not inside a cap)."""
        inner = self.cap_inner_vertex_indices()
        return [v for v in self.geom.vertices if v.index not in inner]

    def source_centroid(self) -> np.ndarray:
        return get_centroid([v.vec for v in self.source_vertices()])

    def is_source_face(self, face) -> bool:
        inner = self.cap_inner_vertex_indices()
        return all(i not in inner for i in face.vertex_indices())

    def is_cap_boundary_neighbour(self, face) -> bool:
        """True if face lies just outside some cap's boundary."""
        return any(face.in_set(cap.boundary().adjacent_faces()) for cap in self.caps())

    def in_cap(self, face) -> bool:
        return any(face.in_set(cap.faces()) for cap in self.caps())

    # -------------------------------------------------------------------------
    # Variant behaviour
    # -------------------------------------------------------------------------

    def modifications(self) -> list:
        raise NotImplementedError

    def can_augment(self, face) -> bool:
        raise NotImplementedError

    def augmentable_faces(self) -> list:
        return [f for f in self.geom.faces if self.can_augment(f)]

    def has_alignment(self) -> bool:
        return False

    def is_modification(self, site) -> bool:
        return any(mod.equals(site) for mod in self.modifications())

    def is_isolated(self, site) -> bool:
        """True if site keeps clear of the other modifications."""
        return True

    def alignment(self, site) -> Optional[str]:
        """'para' if site faces away from the single modification, else 'meta'."""
        if not self.has_alignment():
            return None
        mods = self.modifications()
        if not mods:
            return None
        return "para" if is_inverse(site.normal(), mods[0].normal()) else "meta"
