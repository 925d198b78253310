"""
Cut-and-Paste Operations
========================

    augment    attach a pyramid, cupola or rotunda to a face
    diminish   remove a cap
    gyrate     rotate a cupola or rotunda cap by π/top_sides

Each family declares one augment pair: the left solid has the face site,
the right solid the cap site. Augment is left -> right and diminish is
right -> left, whichever side has more modifications (augmenting a
diminished icosahedron takes a diminishment away).

SITES:
    face   forme.can_augment(face), and the augmentee keeps the solid
           convex: at every face edge, the solid's dihedral angle plus
           the augmentee's base dihedral stays below π - PRECISION
    cap    one of forme.caps()

    A third modification may not face either of the first two, and on
    the rhombicosidodecahedron family a new site keeps clear of the
    existing ones (forme.is_isolated).

GRAPH OPTIONS:
    using    augmentee code (Y4, U3, R5, ...)
    gyrate   'ortho' / 'gyro' for bicupolae and rhombicosidodecahedra
    twist    'left' / 'right' for gyroelongated bicupolae
    align    'para' / 'meta' when a second modification is placed

ANIMATION:
    The middle is the solid holding the cap. Its collapsed state presses
    the cap's inner vertices onto the boundary plane; gyrate turns them
    about the cap axis.
"""

import logging
from functools import lru_cache
import numpy as np
from typing import Iterator, List, Optional

from solid_core.spec.constants import (
    PRECISION, DEFAULT_AUGMENTEES, CAP_PYRAMID, CAP_ROTUNDA,
)
from solid_core.spec.errors import InvalidSpecsError
from solid_core.operators.linalg import is_inverse, project_onto_plane
from solid_core.polyhedra import Cap
from solid_core.specs import Capstone, Composite, PRIMARY, SECONDARY, PRISM_SOURCES
from solid_core.builders import get_geometry, parse_using
from solid_core.builders.composites import gyrate_positions
from solid_core.formes import from_specs, GyrateSolidForme
from .op_pair import GraphEntry, GraphOpts, SIDES, make_op_pair, combine_ops, pick_by
from .operation import Operation, OptionArgs
from .pose import get_face_poses, get_cap_poses

logger = logging.getLogger(__name__)

LEFT, RIGHT = 0, 1


# =============================================================================
# Convexity
# =============================================================================

def fits_augmentee(face, using: str) -> bool:
    """True if the augmentee's base has as many sides as face."""
    try:
        kind, top_sides = parse_using(using)
    except ValueError:
        return False
    return face.num_sides == (top_sides if kind == CAP_PYRAMID else 2 * top_sides)


@lru_cache(maxsize=None)
def _underside_angles(using: str) -> tuple:
    kind, top_sides = parse_using(using)
    if kind == CAP_PYRAMID:
        specs = Capstone(top_sides, PRIMARY, 1)
    else:
        specs = Capstone(top_sides, SECONDARY, 1, rotunda_count=int(kind == CAP_ROTUNDA))
    underside = get_geometry(specs).largest_face()
    return tuple(edge.dihedral_angle() for edge in underside.edges)


def can_augment_with(face, using: str) -> bool:
    """True if attaching using to face keeps the solid convex."""
    if not fits_augmentee(face, using):
        return False
    under = _underside_angles(using)
    n = face.num_sides
    angles = [edge.dihedral_angle() for edge in face.edges]
    # cupola and rotunda bases alternate, so try both phases
    return any(all(a + under[(i + offset) % n] < np.pi - PRECISION for i, a in enumerate(angles))
               for offset in (0, 1))


# =============================================================================
# Sites and graph options
# =============================================================================

def is_free_site(forme, site) -> bool:
    if forme.is_modification(site):
        return True
    mods = forme.modifications()
    if len(mods) == 2 and any(is_inverse(site.normal(), mod.normal()) for mod in mods):
        return False
    return forme.is_isolated(site)


def site_alignment(forme, site) -> Optional[str]:
    """Alignment of a new modification; None when site already is one."""
    if forme.is_modification(site):
        return None
    return forme.alignment(site)


def _forme_cap(forme, opts) -> Optional[Cap]:
    cap = opts.get("cap")
    if cap is None or not any(cap.equals(c) for c in forme.caps()):
        return None
    return cap


def _cap_gyrate(forme, cap) -> Optional[str]:
    if not isinstance(forme, GyrateSolidForme):
        return None
    return "gyro" if forme.is_gyrate(cap) else "ortho"


def augment_graph_opts(side: str, forme, opts: dict) -> Optional[dict]:
    """Face options on the left, cap options on the right; None for an unusable site."""
    if side == "left":
        face = opts.get("face")
        if face is None or not face.in_set(forme.geom.faces):
            return None
        using = opts.get("using") or DEFAULT_AUGMENTEES.get(face.num_sides)
        if using is None or not forme.can_augment(face):
            return None
        if not can_augment_with(face, using):
            logger.debug("%s on face %d of %s would not be convex",
                         using, face.index, forme.specs.name())
            return None
        if not is_free_site(forme, face):
            return None
        return pick_by({
            "using": using,
            "gyrate": opts.get("gyrate"),
            "twist": opts.get("twist"),
            "align": site_alignment(forme, face),
        })

    cap = _forme_cap(forme, opts)
    if cap is None or not is_free_site(forme, cap):
        return None
    return pick_by({
        "using": cap.using(),
        "gyrate": _cap_gyrate(forme, cap),
        "align": site_alignment(forme, cap),
    })


def gyrate_graph_opts(side: str, forme, opts: dict) -> Optional[dict]:
    """Left takes a cap in place, right a gyrated one."""
    cap = _forme_cap(forme, opts)
    if cap is None:
        return None
    if not isinstance(forme, GyrateSolidForme):
        return {}
    if (side == "right") != forme.is_gyrate(cap):
        return None
    if not is_free_site(forme, cap):
        return None
    return pick_by({"align": site_alignment(forme, cap)})


# =============================================================================
# Poses and transforms
# =============================================================================

def site_option(options: GraphOpts):
    for side in SIDES:
        for key in ("face", "cap"):
            site = options[side].get(key)
            if site is not None:
                return site
    raise ValueError("Expected a 'face' or 'cap' option")


def site_poses(site) -> list:
    return get_cap_poses(site) if isinstance(site, Cap) else get_face_poses(site)


def _site_using(options: GraphOpts, site) -> str:
    return options.left.get("using") or options.right.get("using") or site.using()


def get_augment_poses(forme, options: GraphOpts) -> list:
    """
    Poses at the operation site.

    On the solid the caller passed, the site itself. On a fetched solid,
    every place the site could have come from: caps of the same kind
    when augmenting, faces the size of the cap boundary when diminishing.
    """
    site = site_option(options)
    if site.polyhedron is forme.geom:
        return site_poses(site)
    if isinstance(site, Cap):
        sites = forme.geom.faces_with_num_sides(site.boundary().num_sides)
    else:
        using = _site_using(options, site)
        sites = [cap for cap in forme.geom.caps() if cap.using() == using]
    return [pose for s in sites for pose in site_poses(s)]


def get_gyrate_poses(forme, options: GraphOpts) -> list:
    site = site_option(options)
    if site.polyhedron is forme.geom:
        return get_cap_poses(site)
    return [pose for cap in forme.geom.caps() if cap.using() == site.using()
            for pose in get_cap_poses(cap)]


def site_cap(geom, options: GraphOpts) -> Cap:
    """The cap at the operation site of geom."""
    site = site_option(options)
    if isinstance(site, Cap) and site.polyhedron is geom:
        return site
    using = _site_using(options, site)
    cap = Cap.nearest(geom, site.centroid(), using)
    if cap is None:
        raise ValueError(f"No {using} cap near the operation site")
    return cap


def flatten_cap(forme, options: GraphOpts, result) -> np.ndarray:
    """Positions with the site cap's inner vertices pressed onto its boundary plane."""
    cap = site_cap(forme.geom, options)
    positions = forme.geom.positions.copy()
    inner = cap.inner_vertex_indices()
    positions[inner] = project_onto_plane(positions[inner], *cap.normal_ray())
    return positions


def gyrate_cap(forme, options: GraphOpts, result) -> np.ndarray:
    return gyrate_positions(forme.geom, [site_cap(forme.geom, options)])


def make_augment_pair(graph):
    return make_op_pair(graph, "right", get_pose=get_augment_poses,
                        to_left=flatten_cap, to_graph_opts=augment_graph_opts)


def make_gyrate_pair(graph):
    return make_op_pair(graph, "left", get_pose=get_gyrate_poses,
                        to_right=gyrate_cap, to_graph_opts=gyrate_graph_opts)


# =============================================================================
# Graphs
# =============================================================================

def _side_opts(specs, other, opts: dict) -> dict:
    """Options one side matches on; align marks the second modification placed."""
    opts = dict(opts)
    if specs.is_composite() and specs.total_count() == 1 and other.is_composite() and other.align:
        opts["align"] = other.align
    return pick_by(opts)


def _entry(left, right, left_opts=None, right_opts=None) -> GraphEntry:
    return GraphEntry(left, right, GraphOpts(_side_opts(left, right, left_opts or {}),
                                             _side_opts(right, left, right_opts or {})))


def _placeable(fewer, more) -> bool:
    """more adds one modification to fewer; a third one cannot join a para pair."""
    return not (fewer.total_count() == 2 and fewer.align == "para")


def _has_convex_site(specs, using: str) -> bool:
    forme = from_specs(specs)
    return any(can_augment_with(face, using) for face in forme.augmentable_faces())


def _capstone_removals(specs) -> Iterator:
    """(capstone with one cap fewer, code of the removed cap)"""
    if specs.is_prismatic():
        return
    if specs.rotunda_count == 0:
        rotundae = (False,)
    elif specs.rotunda_count == specs.count:
        rotundae = (True,)
    else:
        rotundae = (False, True)
    for rotunda in rotundae:
        try:
            fewer = specs.with_data(count=specs.count - 1, gyrate=None, twist=None,
                                    rotunda_count=specs.rotunda_count - int(rotunda))
        except InvalidSpecsError:
            continue
        yield fewer, specs.cap_using(rotunda)


def capstone_augments() -> Iterator[GraphEntry]:
    universe = set(Capstone.query())
    for right in Capstone.query():
        for left, using in _capstone_removals(right):
            if left not in universe or not _has_convex_site(left, using):
                continue
            left_opts = pick_by({"using": using, "gyrate": right.gyrate, "twist": right.twist})
            yield GraphEntry(left, right, GraphOpts(left_opts, {"using": using}))


def _augmentee(source: str) -> str:
    if source in PRISM_SOURCES:
        return "Y4"
    return DEFAULT_AUGMENTEES[get_geometry(Composite(source)).largest_face().num_sides]


def augmented_family_augments() -> Iterator[GraphEntry]:
    family = [s for s in Composite.query() if s.is_augmented_prism() or s.is_augmented_classical()]
    for more in family:
        if not more.augmented:
            continue
        opts = {"using": _augmentee(more.source)}
        for fewer in family:
            if (fewer.source == more.source and fewer.augmented == more.augmented - 1
                    and _placeable(fewer, more)):
                yield _entry(fewer, more, opts, opts)


def icosahedron_augments() -> Iterator[GraphEntry]:
    family = [s for s in Composite.query() if s.is_diminished_solid() and not s.augmented]
    opts = {"using": "Y5"}
    for more in family:
        for fewer in family:
            if fewer.diminished == more.diminished - 1 and _placeable(fewer, more):
                yield _entry(more, fewer, opts, opts)
    opts = {"using": "Y3"}
    yield _entry(Composite("icosahedron", diminished=3),
                 Composite("icosahedron", augmented=1, diminished=3), opts, opts)


def _rhombicosidodecahedra() -> List[Composite]:
    return [s for s in Composite.query() if s.is_gyrate_solid()]


def rhombicosidodecahedron_augments() -> Iterator[GraphEntry]:
    """A diminished face takes back a cupola, in place (ortho) or gyrated (gyro)."""
    family = _rhombicosidodecahedra()
    for left in family:
        if not left.diminished:
            continue
        for right in family:
            if right.diminished != left.diminished - 1:
                continue
            if right.gyrate == left.gyrate and _placeable(right, left):
                gyrate = "ortho"
            elif right.gyrate == left.gyrate + 1 and right.align == left.align:
                gyrate = "gyro"
            else:
                continue
            opts = {"using": "U5", "gyrate": gyrate}
            yield _entry(left, right, opts, opts)


def capstone_gyrations() -> Iterator[GraphEntry]:
    universe = set(Capstone.query())
    for specs in Capstone.query():
        if specs.is_ortho():
            gyro = specs.with_data(gyrate="gyro")
            if gyro in universe:
                yield GraphEntry(specs, gyro)


def rhombicosidodecahedron_gyrations() -> Iterator[GraphEntry]:
    family = _rhombicosidodecahedra()
    for left in family:
        for right in family:
            if (right.diminished == left.diminished and right.gyrate == left.gyrate + 1
                    and _placeable(left, right)):
                yield _entry(left, right)


capstone_augment = make_augment_pair(capstone_augments)
augmented_family_augment = make_augment_pair(augmented_family_augments)
icosahedron_augment = make_augment_pair(icosahedron_augments)
rhombicosidodecahedron_augment = make_augment_pair(rhombicosidodecahedron_augments)

AUGMENT_PAIRS = (
    capstone_augment,
    augmented_family_augment,
    icosahedron_augment,
    rhombicosidodecahedron_augment,
)

GYRATE_PAIRS = (
    make_gyrate_pair(capstone_gyrations),
    make_gyrate_pair(rhombicosidodecahedron_gyrations),
)


# =============================================================================
# Option enumeration
# =============================================================================

class FaceOptionArgs(OptionArgs):
    """Augment options: a face plus one of the graph's option choices."""

    hit_option = "face"

    def has_options(self, op, specs) -> bool:
        return op.can_apply_to(specs)

    @staticmethod
    def choices(op, specs) -> List[dict]:
        seen = []
        for entry in op.graph():
            if entry.start.equivalent(specs):
                choice = {k: v for k, v in entry.options.items() if k != "align"}
                if choice not in seen:
                    seen.append(choice)
        return seen

    def all_option_combos(self, op, forme):
        choices = self.choices(op, forme.specs)
        for face in forme.geom.faces:
            for choice in choices:
                if fits_augmentee(face, choice["using"]):
                    yield {"face": face, **choice}

    def get_hit_option(self, op, forme, point) -> dict:
        face = forme.geom.hit_face(point)
        for choice in self.choices(op, forme.specs):
            if op.accepts(forme, {"face": face, **choice}):
                return {"face": face}
        return {}


class CapOptionArgs(OptionArgs):
    """Diminish / gyrate options: one of the forme's caps."""

    hit_option = "cap"

    def has_options(self, op, specs) -> bool:
        return op.can_apply_to(specs)

    def all_option_combos(self, op, forme):
        return [{"cap": cap} for cap in forme.caps()]

    def get_hit_option(self, op, forme, point) -> dict:
        cap = Cap.find(forme.geom, point)
        return {"cap": cap} if cap is not None else {}


# =============================================================================
# Exported operations
# =============================================================================

augment = Operation("augment", combine_ops(pair[LEFT] for pair in AUGMENT_PAIRS), FaceOptionArgs())

diminish = Operation("diminish", combine_ops(pair[RIGHT] for pair in AUGMENT_PAIRS), CapOptionArgs())

gyrate = Operation("gyrate", combine_ops(side for pair in GYRATE_PAIRS for side in pair),
                   CapOptionArgs())
