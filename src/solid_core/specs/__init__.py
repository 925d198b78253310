"""
Specs classification
====================

Immutable values describing what kind of solid a geometry represents.

    Capstone    prism/antiprism core + pyramid/cupola/rotunda caps
    Composite   source solid + augmentations/diminishments/gyrations
    Elementary  named irregular solids
"""

from typing import List

from ..spec.errors import UnknownSolidError
from .base import PolyhedronSpecs
from .capstone import Capstone, opposite_twist, PRIMARY, SECONDARY
from .composite import Composite, Classical, PRISM_SOURCES, CLASSICAL_SOURCES
from .elementary import Elementary, ELEMENTARY_NAMES


def all_specs() -> List[PolyhedronSpecs]:
    """Every classified solid: capstones, then composites, then elementary."""
    return [*Capstone.query(), *Composite.query(), *Elementary.query()]


def specs_for(name: str) -> List[PolyhedronSpecs]:
    """All classifications sharing the canonical name."""
    return [s for s in all_specs() if s.name() == name]


def get_specs(name: str) -> PolyhedronSpecs:
    """First classification with the canonical name."""
    matches = specs_for(name)
    if not matches:
        raise UnknownSolidError(f"No solid named {name!r}")
    return matches[0]
