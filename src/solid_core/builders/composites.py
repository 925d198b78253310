"""
Composite Construction
======================

Composites are built from their source solid in three moves:

    augment   add a pyramid / cupola on a face (new apex or top vertices)
    diminish  drop the inner vertices of a cap
    gyrate    rotate the inner vertices of a cupola cap by π/top_sides

and then re-hulled, so face lists always come from the final vertex set.

SITE SELECTION:
    Candidate sites (faces or caps) are tried as itertools.combinations
    in index order; the first combination satisfying the constraints
    wins, which makes every build deterministic.

    - sites are pairwise non-adjacent (sharing a vertex / overlapping
      caps), except on the triangular prism where every square touches
      every other square
    - two sites: "para" needs inverse normals, "meta" forbids them
    - three sites: no two normals are inverse
"""

import itertools
import numpy as np
from typing import Callable, List, Optional, Sequence

from ..spec.constants import CAP_PYRAMID, CAP_CUPOLA, CAP_ROTUNDA, DEFAULT_AUGMENTEES
from ..spec.errors import UnknownSolidError
from ..operators.linalg import is_inverse, rotate_about_axis
from ..polyhedra import Polyhedron
from .capstones import build_capstone, cap_points
from .classical import build_classical
from .hull import convex_polyhedron

AUGMENTEE_KINDS = {"Y": CAP_PYRAMID, "U": CAP_CUPOLA, "R": CAP_ROTUNDA}


def parse_using(using: str):
    """'U5' -> ('cupola', 5)"""
    if not using or using[0] not in AUGMENTEE_KINDS or not using[1:].isdigit():
        raise ValueError(f"Expected an augmentee code like 'Y4' or 'U3', got {using!r}")
    return AUGMENTEE_KINDS[using[0]], int(using[1:])


# =============================================================================
# Single modifications
# =============================================================================

def augmentee_points(face, using: Optional[str] = None) -> List[np.ndarray]:
    """
    New vertices of a cap attached to face.

    Cupola triangles go over the face edges whose neighbour is not a
    triangle, so no new face lies flush with an old one.
    """
    using = using or DEFAULT_AUGMENTEES[face.num_sides]
    kind, top_sides = parse_using(using)
    if kind != CAP_PYRAMID and 2 * top_sides != face.num_sides:
        raise ValueError(f"Cannot attach {using} to a {face.num_sides}-sided face")
    if kind == CAP_PYRAMID and top_sides != face.num_sides:
        raise ValueError(f"Cannot attach {using} to a {face.num_sides}-sided face")

    triangle_edges = [i for i, e in enumerate(face.edges) if e.twin_face().num_sides != 3]
    return cap_points(face.vectors(), face.normal(), kind, triangle_edges, face.side_length())


def augment(geom: Polyhedron, faces: Sequence, using: Optional[str] = None) -> Polyhedron:
    points = [geom.positions]
    for face in faces:
        points.append(augmentee_points(face, using))
    return convex_polyhedron(np.vstack(points))


def diminish(geom: Polyhedron, caps: Sequence) -> Polyhedron:
    removed = {i for cap in caps for i in cap.inner_vertex_indices()}
    keep = [i for i in range(geom.num_vertices) if i not in removed]
    return convex_polyhedron(geom.positions[keep])


def gyrate_positions(geom: Polyhedron, caps: Sequence) -> np.ndarray:
    positions = geom.positions.copy()
    for cap in caps:
        inner = cap.inner_vertex_indices()
        positions[inner] = rotate_about_axis(
            positions[inner], cap.normal(), np.pi / cap.top_sides, cap.centroid())
    return positions


# =============================================================================
# Site selection
# =============================================================================

def faces_touch(a, b) -> bool:
    return bool(set(a.vertex_indices()) & set(b.vertex_indices()))


def caps_touch(a, b) -> bool:
    return a.overlaps(b)


def choose_sites(candidates: Sequence, count: int, align: Optional[str] = None,
                 touches: Callable = faces_touch, allow_touching: bool = False) -> list:
    """First combination of count sites meeting the placement rules."""
    for combo in itertools.combinations(candidates, count):
        pairs = list(itertools.combinations(combo, 2))
        if not allow_touching and any(touches(a, b) for a, b in pairs):
            continue
        inverse = [is_inverse(a.normal(), b.normal()) for a, b in pairs]
        if count == 2 and align == "para" and not inverse[0]:
            continue
        if count == 2 and align == "meta" and inverse[0]:
            continue
        if count == 3 and any(inverse):
            continue
        return list(combo)
    raise UnknownSolidError(f"No placement of {count} sites (align={align}) among {len(candidates)}")


# =============================================================================
# Families
# =============================================================================

def source_geometry(specs) -> Polyhedron:
    if specs.is_augmented_prism():
        return build_capstone(specs.source_prism())
    if specs.source_family() is None:
        raise UnknownSolidError(f"No source geometry for {specs.source!r}")
    return build_classical(specs.source)


def augment_sites(specs, geom: Polyhedron) -> list:
    """Faces a composite of this source family augments."""
    if specs.is_augmented_prism():
        return geom.faces_with_num_sides(4)
    return geom.faces_with_num_sides(geom.largest_face().num_sides)


def _augmented(specs, geom: Polyhedron) -> Polyhedron:
    sites = choose_sites(augment_sites(specs, geom), specs.augmented, specs.align,
                         allow_touching=specs.source == "triangular prism")
    return augment(geom, sites)


def _diminished_icosahedron(specs, geom: Polyhedron) -> Polyhedron:
    caps = choose_sites(geom.caps(), specs.diminished, specs.align, touches=caps_touch)
    result = diminish(geom, caps)
    if specs.augmented:
        # the one triangle surrounded by pentagons
        face = next(f for f in result.faces_with_num_sides(3)
                    if all(n.num_sides == 5 for n in f.adjacent_faces()))
        result = augment(result, [face], "Y3")
    return result


def _gyrate_rhombicosidodecahedron(specs, geom: Polyhedron) -> Polyhedron:
    total = specs.gyrate + specs.diminished
    caps = choose_sites(geom.caps(), total, specs.align, touches=caps_touch)
    diminished, gyrated = caps[:specs.diminished], caps[specs.diminished:]
    keep = set(range(geom.num_vertices)) - {i for c in diminished for i in c.inner_vertex_indices()}
    positions = gyrate_positions(geom, gyrated)
    return convex_polyhedron(positions[sorted(keep)])


def build_composite(specs) -> Polyhedron:
    """Unit-edge geometry for a Composite specs value."""
    geom = source_geometry(specs)
    if specs.total_count() == 0:
        return geom
    if specs.is_gyrate_solid():
        return _gyrate_rhombicosidodecahedron(specs, geom)
    if specs.is_diminished_solid():
        return _diminished_icosahedron(specs, geom)
    return _augmented(specs, geom)
