#!/usr/bin/env python3
"""
OPERATION SURVEY: WHICH MOVES EACH CLASSIFIED SOLID ACCEPTS
===========================================================

Walks the capstone and composite universe and lists, per solid, the
operations that start from it and the solids they lead to.

INPUTS
------

Internal (from model):
  - Capstone.query(), Composite.query()  (70 + 48 solids)
  - OPERATIONS graphs (elongate, gyroelongate, shorten, turn,
    augment, diminish, gyrate)

External:
  - None

OUTPUTS
-------

  - One line per solid: name, V/F counts, operations and their results
  - Totals: solids with no move at all, moves per operation

VALIDATION (run with --test)
----------------------------

  - T1: every solid in the universe builds and classifies
  - T2: the icosahedron diminishes, the pentagonal pyramid augments
  - T3: applying one move per operation lands on the graph's end solid

Usage:
    python scripts/01_operation_survey.py
    python scripts/01_operation_survey.py --name "square pyramid" --apply
    python scripts/01_operation_survey.py --test --verbose
"""

import logging
import sys
from collections import Counter
from pathlib import Path


def _find_src():
    """Find src/ by looking for solid_core/ subdirectory."""
    current = Path(__file__).resolve().parent
    for _ in range(10):
        for candidate in (current, current / 'src'):
            if (candidate / 'solid_core').is_dir():
                return candidate
        current = current.parent
    raise RuntimeError("Cannot find src/solid_core directory")

sys.path.insert(0, str(_find_src()))

from solid_core.specs import Capstone, Composite, specs_for
from solid_core.formes import create_forme, from_specs
from solid_ops import OPERATIONS

logger = logging.getLogger("operation_survey")


def survey_solid(specs) -> dict:
    """Operations available on one solid, with the names they lead to."""
    moves = {}
    for name, op in OPERATIONS.items():
        ends = sorted({e.end.name() for e in op.graph() if e.start.equivalent(specs)})
        if ends:
            moves[name] = ends
    return moves


def run_survey(names=None):
    universe = [*Capstone.query(), *Composite.query()]
    if names:
        universe = [s for name in names for s in specs_for(name)]

    per_op = Counter()
    stuck = []

    print(f"{'solid':<48} {'V':>4} {'F':>4} | operations")
    print("-" * 100)
    for specs in universe:
        forme = from_specs(specs)
        moves = survey_solid(specs)
        per_op.update({name: len(ends) for name, ends in moves.items()})
        if not moves:
            stuck.append(specs.name())
        summary = "; ".join(f"{name} -> {', '.join(ends)}" for name, ends in moves.items())
        print(f"{specs.name():<48} {forme.geom.num_vertices:>4} {forme.geom.num_faces:>4} | "
              f"{summary or '-'}")

    print()
    print("Moves per operation:")
    for name in OPERATIONS:
        print(f"  {name:<14} {per_op[name]:>4}")
    print(f"Solids with no move: {len(stuck)}")
    for name in stuck:
        print(f"  {name}")

    return {"n_solids": len(universe), "per_op": dict(per_op), "stuck": stuck}


def apply_all(specs):
    """Apply the first accepted option combo of every operation."""
    forme = from_specs(specs)
    results = {}
    for name, op in OPERATIONS.items():
        if not op.can_apply_to(specs):
            continue
        args = op.get_all_apply_args(forme)
        if not args:
            logger.info("%s: %s has no usable site", name, specs.name())
            continue
        result = op.apply(forme, args[0])
        results[name] = result
        print(f"  {name:<14} -> {result.result_specs.name():<40} "
              f"V={result.result.num_vertices} F={result.result.num_faces}")
    return results


# =============================================================================
# Validation
# =============================================================================

def test_universe_classifies():
    """T1: every solid builds and reports its modifications."""
    for specs in [*Capstone.query(), *Composite.query()]:
        forme = from_specs(specs)
        forme.modifications()
    print("✓ T1: universe classifies")


def test_known_moves():
    """T2: a few moves every survey must show."""
    assert "gyroelongated pentagonal pyramid" in survey_solid(Composite("icosahedron"))["diminish"]
    assert survey_solid(specs_for("pentagonal pyramid")[0])["augment"] == ["pentagonal bipyramid"]
    print("✓ T2: known moves present")


def test_apply_matches_graph():
    """T3: applied results agree with the graph."""
    for specs in (specs_for("square pyramid")[0], specs_for("triangular orthobicupola")[0]):
        forme = from_specs(specs)
        for name, result in apply_all(specs).items():
            op = OPERATIONS[name]
            expected = op.get_result_specs(forme, op.get_all_apply_args(forme)[0])
            assert result.result_specs.equals(expected), name
            create_forme(result.result_specs, result.result).modifications()
    print("✓ T3: applied results match graph ends")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Survey the operations each solid accepts")
    parser.add_argument("--test", action="store_true", help="Run validation checks")
    parser.add_argument("--name", action="append", help="Only survey solids with this name")
    parser.add_argument("--apply", action="store_true", help="Also apply one move per operation")
    parser.add_argument("--verbose", action="store_true", help="Log operation internals")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s %(levelname)s: %(message)s")

    if args.test:
        test_universe_classifies()
        test_known_moves()
        test_apply_matches_graph()
    else:
        run_survey(args.name)
        if args.apply:
            for name in args.name or []:
                for specs in specs_for(name):
                    print(f"\n{specs.name()}:")
                    apply_all(specs)
