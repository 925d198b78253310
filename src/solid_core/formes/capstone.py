"""
Capstone Formes
===============

    PrismaticForme      count 0: two parallel base faces
    MonoCapstoneForme   count 1: one cap + the opposite base face
    BiCapstoneForme     count 2: two opposite caps

Every variant exposes the two "bases" prism operations move apart or
twist: caps (all their vertices move) or faces.
"""

import numpy as np
from typing import List, Tuple

from ..spec.constants import CAP_PYRAMID, CAP_CUPOLA, CAP_ROTUNDA
from ..spec.errors import UnclassifiableSpecsError
from ..operators.linalg import is_inverse
from ..polyhedra import Cap, FaceLike
from .base import PolyhedronForme


def _boundary(base) -> FaceLike:
    return base.boundary() if isinstance(base, Cap) else base


class CapstoneForme(PolyhedronForme):
    """Shared behaviour of the three capstone variants."""

    def __init__(self, specs, geom):
        super().__init__(specs, geom)
        self._bases = None

    def _cap_kinds(self) -> Tuple[str, ...]:
        if self.specs.is_primary():
            return (CAP_PYRAMID,)
        if self.specs.rotunda_count == 0:
            return (CAP_CUPOLA,)
        if self.specs.rotunda_count == self.specs.count:
            return (CAP_ROTUNDA,)
        return (CAP_CUPOLA, CAP_ROTUNDA)

    def candidate_caps(self) -> list:
        """Caps of the right kind and size to sit on the prism ring."""
        m = self.specs.num_sides()
        return [cap for cap in self.geom.caps()
                if cap.type in self._cap_kinds()
                and cap.top_sides == self.specs.base
                and cap.boundary().num_sides == m]

    def base_caps(self) -> list:
        return [b for b in self.bases() if isinstance(b, Cap)]

    def base_faces(self) -> list:
        return [b for b in self.bases() if not isinstance(b, Cap)]

    def bases(self) -> list:
        if self._bases is None:
            self._bases = self._find_bases()
        return self._bases

    def _find_bases(self) -> list:
        raise NotImplementedError

    def base_boundaries(self) -> List[FaceLike]:
        """[top, bottom] rings of the prism section."""
        return [_boundary(b) for b in self.bases()]

    def prismatic_height(self) -> float:
        top, bottom = self.base_boundaries()
        return float(np.linalg.norm(top.centroid() - bottom.centroid()))

    def caps(self) -> list:
        return self.base_caps()

    def modifications(self) -> list:
        return self.base_caps()

    def has_alignment(self) -> bool:
        return False

    def _inverse_pair(self, firsts, seconds, what: str):
        for a in firsts:
            for b in seconds:
                if a is b:
                    continue
                same_sides = _boundary(a).num_sides == _boundary(b).num_sides
                if same_sides and is_inverse(a.normal(), b.normal()):
                    return [a, b]
        raise UnclassifiableSpecsError(f"No pair of opposite {what} in {self.specs.name()}")


class PrismaticForme(CapstoneForme):

    def ring_faces(self) -> list:
        return self.geom.faces_with_num_sides(self.specs.num_sides())

    def _find_bases(self) -> list:
        faces = self.ring_faces()
        return self._inverse_pair(faces, faces, "base faces")

    def can_augment(self, face) -> bool:
        if face.num_sides != self.specs.num_sides():
            return False
        return any(is_inverse(face.normal(), f.normal()) for f in self.ring_faces())


class MonoCapstoneForme(CapstoneForme):

    def _find_bases(self) -> list:
        faces = self.geom.faces_with_num_sides(self.specs.num_sides())
        return self._inverse_pair(self.candidate_caps(), faces, "cap and base face")

    def can_augment(self, face) -> bool:
        if face.num_sides != self.specs.num_sides():
            return False
        return any(is_inverse(face.normal(), cap.normal()) for cap in self.base_caps())


class BiCapstoneForme(CapstoneForme):

    def _find_bases(self) -> list:
        caps = self.candidate_caps()
        return self._inverse_pair(caps, caps, "caps")

    def can_augment(self, face) -> bool:
        return False
