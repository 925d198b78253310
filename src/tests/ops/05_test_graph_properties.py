#!/usr/bin/env python3
"""
Operation Graph Properties
==========================

Whole-graph checks across every registered operation: the specs in the
graphs are buildable and classifiable, lookups invert, and the named
moves connect the solids they should.
"""

import pytest

from solid_core.specs import all_specs
from solid_core.formes import from_specs
from solid_ops import OPERATIONS
from solid_ops.op_pair import opposite_side


def _pairs():
    seen = {}
    for op in OPERATIONS.values():
        for side_op in op.op_input.ops:
            seen.setdefault(id(side_op.pair), side_op.pair)
    return list(seen.values())


PAIRS = _pairs()


def _graph_specs():
    found = []
    for pair in PAIRS:
        for entry in pair.graph:
            for specs in (entry.left, entry.right):
                if not any(specs.equals(s) for s in found):
                    found.append(specs)
    return found


# =============================================================================
# Registry
# =============================================================================

def test_operation_names():
    """R1.1: seven operations, keyed by name."""
    assert set(OPERATIONS) == {
        "elongate", "gyroelongate", "shorten", "turn", "augment", "diminish", "gyrate"}
    for name, op in OPERATIONS.items():
        assert op.name == name


def test_graph_specs_belong_to_universe():
    """R1.2: moves only reach classified solids, never digonal ones."""
    universe = set(all_specs())
    for pair in PAIRS:
        for entry in pair.graph:
            assert entry.left in universe and entry.right in universe, entry
            for specs in (entry.left, entry.right):
                assert not (specs.is_capstone() and specs.is_digonal())


@pytest.mark.parametrize("specs", _graph_specs(), ids=repr)
def test_graph_specs_are_classifiable(specs):
    """R1.3: every solid in a graph builds and reports its modifications."""
    forme = from_specs(specs)
    assert forme.specs.equals(specs)
    assert isinstance(forme.modifications(), list)


# =============================================================================
# Lookup
# =============================================================================

@pytest.mark.parametrize("side", ["left", "right"])
def test_lookup_inverts(side):
    """L1.1: an entry's own side and options lead back to its other side."""
    other = opposite_side(side)
    for pair in PAIRS:
        for entry in pair.graph:
            found = pair.find_entry(side, entry[side], entry.side_options(side))
            assert found is not None
            assert found[other].equals(entry[other]), entry


def test_no_self_loops():
    """L1.2: a move always changes the solid."""
    for pair in PAIRS:
        for entry in pair.graph:
            assert not entry.left.equals(entry.right), entry


# =============================================================================
# Named moves
# =============================================================================

def test_only_pentagonal_pyramid_augments_to_bipyramid():
    """N1.1: the pentagonal bipyramid is reached from the pentagonal pyramid."""
    for entry in OPERATIONS["augment"].graph():
        assert ((entry.end.name() == "pentagonal bipyramid")
                == (entry.start.name() == "pentagonal pyramid")), entry


def test_capstone_augments_add_one_cap():
    """N1.2: augmenting a capstone raises its cap count by one."""
    for entry in OPERATIONS["augment"].graph():
        if entry.start.is_capstone() and entry.end.is_capstone():
            assert entry.end.count == entry.start.count + 1
            assert entry.end.elongation == entry.start.elongation


def test_diminish_mirrors_augment():
    """N1.3: diminish is augment read backwards."""
    forward = {(e.start, e.end) for e in OPERATIONS["augment"].graph()}
    backward = {(e.end, e.start) for e in OPERATIONS["diminish"].graph()}
    assert forward == backward


def test_shorten_mirrors_lengthening():
    """N1.4: every elongation or gyroelongation can be shortened."""
    lengthen = {(e.start, e.end) for op in ("elongate", "gyroelongate")
                for e in OPERATIONS[op].graph()}
    shorten = {(e.end, e.start) for e in OPERATIONS["shorten"].graph()}
    assert lengthen == shorten


def test_gyrate_is_symmetric():
    """N1.5: gyrate goes both ways."""
    moves = {(e.start, e.end) for e in OPERATIONS["gyrate"].graph()}
    assert moves == {(end, start) for start, end in moves}
    for start, end in moves:
        if start.is_capstone():
            assert {start.gyrate, end.gyrate} == {"ortho", "gyro"}
