"""
OpPair Engine
=============

An OpPair declares one geometric operation in both directions as a
graph of (left specs, right specs, per-side options) entries. The graph
is the single source of truth for which moves exist.

apply(side, forme, opts):
    1. to_graph_opts turns caller options (e.g. a clicked face) into graph
       options (e.g. which augmentee); None means "not a legal site"
    2. the entry matching (side, specs, graph options) is looked up
    3. the start pose comes from the current geometry
    4. the middle geometry is the start itself, the canonical end, or a
       separate pivot solid; it is aligned onto the start pose
    5. the end geometry is aligned onto the start pose
    6. to_left / to_right move the middle into the start and end shapes

POSE CANDIDATES:
    get_pose may return several poses (one per landmark roll, e.g. each
    vertex of a cap boundary). The start geometry always uses the first.
    For a fetched geometry every candidate is tried, and the one whose
    result best coincides with what it must match wins:

        middle  start_fn(aligned middle)  vs  start positions
        end     aligned end               vs  end_fn(middle)

    Score: matched vertices in both directions (within MATCH_TOL x edge
    length, via scipy cKDTree), then smaller residual, then order.

OPTIONS MATCHING:
    is_match(entry_opts, opts) is partial containment: every key the
    caller gives must be present with the same value.
"""

import logging
from dataclasses import dataclass, field
import numpy as np
from scipy.spatial import cKDTree
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from solid_core.spec.constants import MATCH_TOL
from solid_core.spec.errors import NoMatchingTransitionError, NoApplicableOperationError
from solid_core.formes import create_forme
from solid_core.builders import get_geometry
from .pose import Pose, align_polyhedron, as_pose_list

logger = logging.getLogger(__name__)

SIDES = ("left", "right")


def opposite_side(side: str) -> str:
    if side not in SIDES:
        raise ValueError(f"Expected side 'left' or 'right', got {side!r}")
    return "right" if side == "left" else "left"


def is_match(obj: Optional[dict], src: Optional[dict]) -> bool:
    """True if obj contains every key/value of src."""
    obj, src = obj or {}, src or {}
    return all(k in obj and obj[k] == v for k, v in src.items())


def pick_by(opts: Optional[dict]) -> dict:
    """Drop unset (falsy) values."""
    return {k: v for k, v in (opts or {}).items() if v}


# =============================================================================
# Graph data
# =============================================================================

# Frozen for value equality only: option dicts make entries unhashable.
@dataclass(frozen=True)
class GraphOpts:
    left: Dict[str, Any] = field(default_factory=dict)
    right: Dict[str, Any] = field(default_factory=dict)

    __hash__ = None

    def __getitem__(self, side: str) -> Dict[str, Any]:
        return self.left if side == "left" else self.right

    def with_side(self, side: str, opts: dict) -> "GraphOpts":
        merged = {**self[side], **opts}
        if side == "left":
            return GraphOpts(merged, dict(self.right))
        return GraphOpts(dict(self.left), merged)


@dataclass(frozen=True)
class GraphEntry:
    left: Any
    right: Any
    options: Optional[GraphOpts] = None

    __hash__ = None

    def __getitem__(self, side: str):
        return self.left if side == "left" else self.right

    def side_options(self, side: str) -> dict:
        return self.options[side] if self.options is not None else {}


@dataclass(frozen=True)
class DirectedEntry:
    start: Any
    end: Any
    options: Dict[str, Any] = field(default_factory=dict)

    __hash__ = None


@dataclass
class AnimationData:
    start: Any                  # middle geometry posed as the start solid
    end_vertices: np.ndarray    # middle positions posed as the end solid


@dataclass
class OpResult:
    animation_data: AnimationData
    result: Any                 # end geometry aligned onto the start
    result_specs: Any


def to_directed(side: str, graph: Iterable[GraphEntry]) -> Tuple[DirectedEntry, ...]:
    other = opposite_side(side)
    return tuple(DirectedEntry(e[side], e[other], dict(e.side_options(side))) for e in graph)


# =============================================================================
# Candidate scoring
# =============================================================================

def match_score(positions: np.ndarray, reference: np.ndarray, tol: float) -> Tuple[int, float]:
    """(matched count in both directions, residual of the matches)"""
    d_ref, _ = cKDTree(reference).query(positions)
    d_pos, _ = cKDTree(positions).query(reference)
    hits_ref, hits_pos = d_ref < tol, d_pos < tol
    count = int(hits_ref.sum() + hits_pos.sum())
    residual = float(d_ref[hits_ref].sum() + d_pos[hits_pos].sum())
    return count, residual


def best_candidate(candidates: List, evaluate: Callable, reference: np.ndarray, tol: float):
    """Candidate whose evaluated positions best match reference (first on ties)."""
    best, best_key = None, None
    for i, cand in enumerate(candidates):
        count, residual = match_score(evaluate(cand), reference, tol)
        key = (-count, residual, i)
        if best_key is None or key < best_key:
            best, best_key = cand, key
    logger.debug("picked candidate %d of %d (matched %d)", best_key[2], len(candidates), -best_key[0])
    return best


# =============================================================================
# OpPair
# =============================================================================

MiddleGetter = Callable[[GraphEntry], Any]


class OpPair:
    """
    Bidirectional operation between two families of solids.

    Args:
        graph: iterable (or zero-argument callable) of GraphEntry
        middle: "left", "right", or callable(entry) -> specs of a pivot solid
        get_pose: (forme, options) -> Pose or list of candidate Poses
        to_left / to_right: (middle_forme, options, specs) -> positions;
            default to the middle's own positions
        to_graph_opts: (side, forme, opts) -> graph options, or None when
            opts name a site the operation cannot use
        provider: geometry lookup, defaults to get_geometry
    """

    def __init__(self, graph, middle: Union[str, MiddleGetter], get_pose: Callable,
                 to_left: Optional[Callable] = None, to_right: Optional[Callable] = None,
                 to_graph_opts: Optional[Callable] = None, provider: Optional[Callable] = None):
        if isinstance(middle, str):
            opposite_side(middle)
        self._graph_source = graph
        self._graph: Optional[Tuple[GraphEntry, ...]] = None
        self.middle = middle
        self.get_pose = get_pose
        self.to_left = to_left
        self.to_right = to_right
        self._to_graph_opts = to_graph_opts
        self.provider = provider or get_geometry

    @property
    def graph(self) -> Tuple[GraphEntry, ...]:
        """Entries, materialized once."""
        if self._graph is None:
            source = self._graph_source() if callable(self._graph_source) else self._graph_source
            self._graph = tuple(source)
        return self._graph

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def entries(self, side: str, specs) -> List[GraphEntry]:
        return [e for e in self.graph if e[side].equals(specs)]

    def find_entry(self, side: str, specs, opts: Optional[dict] = None) -> Optional[GraphEntry]:
        for entry in self.graph:
            if entry[side].equals(specs) and is_match(entry.side_options(side), opts):
                return entry
        return None

    def get_entry(self, side: str, specs, opts: Optional[dict] = None) -> GraphEntry:
        entry = self.find_entry(side, specs, opts)
        if entry is None:
            raise NoMatchingTransitionError(
                f"No {side} entry for {specs.name()} with options {opts}")
        return entry

    def has_options(self, side: str, specs) -> bool:
        return len(self.entries(side, specs)) > 1

    def all_options(self, side: str, specs) -> List[dict]:
        return [dict(e.side_options(side)) for e in self.entries(side, specs)]

    def can_apply_to(self, side: str, specs) -> bool:
        return self.find_entry(side, specs) is not None

    def get_opposite(self, side: str, specs, opts: Optional[dict] = None):
        return self.get_entry(side, specs, opts)[opposite_side(side)]

    def to_graph_opts(self, side: str, forme, opts: Optional[dict]) -> Optional[dict]:
        if self._to_graph_opts is None:
            return pick_by(opts)
        return self._to_graph_opts(side, forme, opts or {})

    # -------------------------------------------------------------------------
    # Apply
    # -------------------------------------------------------------------------

    def _fetch(self, specs):
        return create_forme(specs, self.provider(specs))

    def _positions(self, fn: Optional[Callable], forme, options: GraphOpts, specs) -> np.ndarray:
        if fn is None:
            return forme.geom.positions.copy()
        return np.asarray(fn(forme, options, specs), dtype=float)

    def _aligned(self, forme, pose: Pose, start_pose: Pose):
        return create_forme(forme.specs, align_polyhedron(forme.geom, pose, start_pose))

    def resolve(self, side: str, forme, opts: Optional[dict]) -> Tuple[GraphEntry, GraphOpts]:
        """Matching entry and the options the pose/transform functions see."""
        graph_opts = self.to_graph_opts(side, forme, opts)
        if graph_opts is None:
            raise NoMatchingTransitionError(
                f"Options {opts} do not name a valid site on {forme.specs.name()}")
        entry = self.get_entry(side, forme.specs, graph_opts)
        options = entry.options or GraphOpts()
        return entry, options.with_side(side, opts or {})

    def apply(self, side: str, forme, opts: Optional[dict] = None) -> OpResult:
        entry, options = self.resolve(side, forme, opts)
        end_side = opposite_side(side)
        end_specs = entry[end_side]
        logger.debug("apply %s: %s -> %s", side, forme.specs.name(), end_specs.name())

        start_forme = create_forme(forme.specs, forme.geom)
        start_pose = as_pose_list(self.get_pose(start_forme, options))[0]
        tol = MATCH_TOL * start_forme.geom.edge_length()
        start_positions = start_forme.geom.positions

        start_fn, end_fn = ((self.to_left, self.to_right) if side == "left"
                            else (self.to_right, self.to_left))

        # middle
        if self.middle == side:
            middle = start_forme
        else:
            if self.middle == end_side:
                fetched = self._fetch(end_specs)
            else:
                pivot = self.middle(entry)
                fetched = pivot if hasattr(pivot, "geom") else self._fetch(pivot)
            candidates = as_pose_list(self.get_pose(fetched, options))
            pose = best_candidate(
                candidates,
                lambda p: self._positions(start_fn, self._aligned(fetched, p, start_pose),
                                          options, forme.specs),
                start_positions, tol)
            middle = self._aligned(fetched, pose, start_pose)

        end_vertices = self._positions(end_fn, middle, options, end_specs)

        # end
        if self.middle == end_side:
            aligned_end = middle.geom
        else:
            end_forme = self._fetch(end_specs)
            candidates = as_pose_list(self.get_pose(end_forme, options))
            pose = best_candidate(
                candidates,
                lambda p: align_polyhedron(end_forme.geom, p, start_pose).positions,
                end_vertices, tol)
            aligned_end = align_polyhedron(end_forme.geom, pose, start_pose)

        start_vertices = self._positions(start_fn, middle, options, forme.specs)
        animation = AnimationData(middle.geom.with_vertices(start_vertices), end_vertices)
        return OpResult(animation, aligned_end, end_specs)


# =============================================================================
# One-way operations
# =============================================================================

class OpInput:
    """A one-way operation: directed graph + apply + option translation."""

    def graph(self) -> Tuple[DirectedEntry, ...]:
        raise NotImplementedError

    def to_graph_opts(self, forme, opts: Optional[dict]) -> Optional[dict]:
        raise NotImplementedError

    def resolve(self, forme, opts: Optional[dict]):
        """(sub-operation, forme) that would handle forme + opts."""
        raise NotImplementedError

    def apply(self, forme, opts: Optional[dict] = None) -> OpResult:
        raise NotImplementedError

    def get_result_specs(self, forme, opts: Optional[dict] = None):
        op, forme = self.resolve(forme, opts)
        return op.get_result_specs(forme, opts)


class SideOp(OpInput):
    """One side of an OpPair."""

    def __init__(self, pair: OpPair, side: str):
        self.pair = pair
        self.side = side
        self._directed: Optional[Tuple[DirectedEntry, ...]] = None

    def __repr__(self):
        return f"SideOp({self.side})"

    def graph(self) -> Tuple[DirectedEntry, ...]:
        if self._directed is None:
            self._directed = to_directed(self.side, self.pair.graph)
        return self._directed

    def to_graph_opts(self, forme, opts):
        return self.pair.to_graph_opts(self.side, forme, opts)

    def resolve(self, forme, opts):
        return self, forme

    def apply(self, forme, opts=None) -> OpResult:
        return self.pair.apply(self.side, forme, opts)

    def get_result_specs(self, forme, opts=None):
        entry, _ = self.pair.resolve(self.side, forme, opts)
        return entry[opposite_side(self.side)]


def make_op_pair(graph, middle, get_pose, **kwargs) -> Tuple[SideOp, SideOp]:
    """OpPair wrapped as its (left -> right, right -> left) operations."""
    pair = OpPair(graph, middle, get_pose, **kwargs)
    return SideOp(pair, "left"), SideOp(pair, "right")


class CombinedOp(OpInput):
    """
    Several one-way operations covering different families.

    Dispatch: the first sub-operation with a directed entry whose start
    is equivalent to the solid and whose options contain the solid's
    graph options. The forme is re-read as that entry's start specs, so
    e.g. an augmented tetrahedron can use the triangular bipyramid's
    entries.
    """

    def __init__(self, ops: Iterable[OpInput]):
        self.ops = tuple(ops)
        self._graph: Optional[Tuple[DirectedEntry, ...]] = None

    def graph(self) -> Tuple[DirectedEntry, ...]:
        if self._graph is None:
            self._graph = tuple(e for op in self.ops for e in op.graph())
        return self._graph

    def _dispatch(self, forme, opts):
        # exact specs first, then any classification with the same name
        for exact in (True, False):
            for op in self.ops:
                for entry in op.graph():
                    if entry.start.equals(forme.specs) != exact:
                        continue
                    if exact:
                        candidate = forme
                    elif entry.start.equivalent(forme.specs):
                        candidate = create_forme(entry.start, forme.geom)
                    else:
                        continue
                    graph_opts = op.to_graph_opts(candidate, opts)
                    if graph_opts is None:
                        continue
                    if is_match(entry.options, pick_by(graph_opts)):
                        logger.debug("dispatch %s via %r (%s)", forme.specs.name(), op, entry.start)
                        return op, candidate, graph_opts
        raise NoApplicableOperationError(
            f"No operation accepts {forme.specs.name()} with options {opts}")

    def to_graph_opts(self, forme, opts):
        return self._dispatch(forme, opts)[2]

    def resolve(self, forme, opts):
        op, candidate, _ = self._dispatch(forme, opts)
        return op.resolve(candidate, opts)

    def apply(self, forme, opts=None) -> OpResult:
        op, candidate, _ = self._dispatch(forme, opts)
        return op.apply(candidate, opts)


def combine_ops(ops: Iterable[OpInput]) -> CombinedOp:
    return CombinedOp(ops)
