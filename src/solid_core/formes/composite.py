"""
Composite Formes
================

One variant per source family:

AugmentedPrismForme
    base faces are the prism's two polygons; side faces are squares
    outside every cap's boundary ring. On the triangular prism every
    square touches every other one, so any free square is a side face.

AugmentedClassicalForme
    main faces: the regular source's faces, or a truncated source's
    large faces (side count != 3). Caps of a regular tetrahedron all
    look alike, so only the first counts.

DiminishedSolidForme
    diminished faces have the largest side count (pentagons where a
    vertex was removed). Augmentable: a diminished face, or a face
    surrounded by pentagons.

GyrateSolidForme
    a cupola cap is gyrate when, around its boundary, every pair of
    faces across an edge agree on being a square.
"""

from ..operators.linalg import is_inverse
from ..polyhedra import Cap
from .base import PolyhedronForme


class CompositeForme(PolyhedronForme):

    def has_alignment(self) -> bool:
        return self.specs.is_mono()

    def is_diminished_face(self, face) -> bool:
        """Where a cap was removed: the largest faces of a diminished solid."""
        return (self.specs.is_diminished()
                and face.num_sides == self.geom.largest_face().num_sides)

    def diminished_faces(self) -> list:
        return [f for f in self.geom.faces if self.is_diminished_face(f)]


class AugmentedPrismForme(CompositeForme):

    def modifications(self) -> list:
        return self.caps()

    def has_alignment(self) -> bool:
        return self.specs.is_mono() and self.specs.source_prism().is_secondary()

    def base_faces(self) -> list:
        n = self.specs.source_prism().num_sides()
        faces = self.geom.faces_with_num_sides(n)
        if n != 3:
            return faces
        # pyramid sides are triangles too: take the one parallel pair
        for i, a in enumerate(faces):
            for b in faces[i + 1:]:
                if is_inverse(a.normal(), b.normal()):
                    return [a, b]
        return []

    def is_base_face(self, face) -> bool:
        return face.in_set(self.base_faces())

    def is_side_face(self, face) -> bool:
        if face.num_sides != 4 or self.in_cap(face):
            return False
        if self.specs.source == "triangular prism":
            return True
        return not self.is_cap_boundary_neighbour(face)

    def can_augment(self, face) -> bool:
        return self.is_side_face(face)


class AugmentedClassicalForme(CompositeForme):

    def _regular(self) -> bool:
        return self.specs.source_classical().is_regular()

    def caps(self) -> list:
        caps = self.geom.caps()
        if self._regular() and self.specs.source_classical().is_tetrahedral():
            return caps[:1] if self.specs.is_augmented() else []
        return caps

    def modifications(self) -> list:
        return self.caps()

    def has_alignment(self) -> bool:
        return self.specs.is_mono() and self.specs.source_classical().is_icosahedral()

    def is_main_face(self, face) -> bool:
        return self.is_source_face(face) and (self._regular() or face.num_sides != 3)

    def is_minor_face(self, face) -> bool:
        return self.is_source_face(face) and not self.is_main_face(face)

    def is_cap_top(self, face) -> bool:
        inner = self.cap_inner_vertex_indices()
        return not self._regular() and all(i in inner for i in face.vertex_indices())

    def main_faces(self) -> list:
        return [f for f in self.geom.faces if self.is_main_face(f)]

    def minor_faces(self) -> list:
        return [f for f in self.geom.faces if self.is_minor_face(f)]

    def cap_tops(self) -> list:
        return [f for f in self.geom.faces if self.is_cap_top(f)]

    def can_augment(self, face) -> bool:
        return self.is_main_face(face) and not self.is_cap_boundary_neighbour(face)


class DiminishedSolidForme(CompositeForme):

    def augmented_cap(self):
        """The triangular pyramid on an augmented tridiminished icosahedron."""
        return next((c for c in self.caps() if c.boundary().num_sides == 3), None)

    def is_augmented_face(self, face) -> bool:
        cap = self.augmented_cap()
        return cap is not None and face.in_set(cap.faces())

    def modifications(self) -> list:
        cap = self.augmented_cap()
        return self.diminished_faces() + ([cap] if cap is not None else [])

    def can_augment(self, face) -> bool:
        if self.specs.is_augmented():
            return False
        if self.is_diminished_face(face):
            return True
        return all(f.num_sides == 5 for f in face.adjacent_faces())


class GyrateSolidForme(CompositeForme):

    def is_gyrate(self, cap) -> bool:
        return all((edge.face.num_sides == 4) == (edge.twin_face().num_sides == 4)
                   for edge in cap.boundary().edges)

    def gyrate_caps(self) -> list:
        return [c for c in self.caps() if self.is_gyrate(c)]

    def modifications(self) -> list:
        return self.gyrate_caps() + self.diminished_faces()

    def can_augment(self, face) -> bool:
        return self.is_diminished_face(face)

    def is_isolated(self, site) -> bool:
        """No other gyrate cap overlaps site and no diminished face touches its top."""
        inner = set(site.inner_vertex_indices()) if isinstance(site, Cap) else set()
        for mod in self.modifications():
            if mod.equals(site):
                continue
            if isinstance(mod, Cap) and isinstance(site, Cap):
                if site.overlaps(mod):
                    return False
            elif inner & set(mod.vertex_indices()):
                return False
        return True
