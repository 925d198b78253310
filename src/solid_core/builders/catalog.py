"""
Geometry Provider
=================

get_geometry(specs) -> Polyhedron

Pure lookup into a lazily built, read-only catalog keyed by the Specs
value. Capstones and composites are constructed on first use (unit edge
length) and cached for the life of the process. Elementary solids have
no parametric construction; they resolve only through explicit tables
registered on a GeometryProvider.

Lookups for Specs outside the classified universes raise
UnknownSolidError.
"""

import logging
from functools import lru_cache
from typing import Dict, Optional, Sequence

from ..spec.errors import UnknownSolidError
from ..specs import Capstone, Composite
from ..polyhedra import Polyhedron
from .capstones import build_capstone
from .composites import build_composite

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _capstone_set() -> frozenset:
    return frozenset(Capstone.query())


@lru_cache(maxsize=None)
def _composite_set() -> frozenset:
    return frozenset(Composite.query())


def build_geometry(specs) -> Polyhedron:
    """Construct (uncached) the canonical geometry of specs."""
    if specs.is_capstone() and specs in _capstone_set():
        return build_capstone(specs)
    if specs.is_composite() and specs in _composite_set():
        return build_composite(specs)
    raise UnknownSolidError(f"No geometry for {specs!r}")


@lru_cache(maxsize=None)
def _cached_geometry(specs) -> Polyhedron:
    logger.debug("building geometry for %r", specs)
    geom = build_geometry(specs)
    logger.debug("built %r: %r", specs, geom)
    return geom


class GeometryProvider:
    """
    Catalog of canonical geometries.

    Explicit tables (by canonical name) take precedence over the
    parametric constructions.
    """

    def __init__(self, tables: Optional[Dict[str, tuple]] = None):
        self._tables: Dict[str, Polyhedron] = {}
        for name, (vertices, faces) in (tables or {}).items():
            self.register(name, vertices, faces)

    def register(self, name: str, vertices, faces: Sequence[Sequence[int]]) -> Polyhedron:
        geom = Polyhedron(vertices, faces)
        self._tables[name] = geom
        return geom

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def get(self, specs) -> Polyhedron:
        geom = self._tables.get(specs.name())
        if geom is not None:
            return geom
        return _cached_geometry(specs)

    __call__ = get


default_provider = GeometryProvider()


def get_geometry(specs) -> Polyhedron:
    """Canonical geometry of specs from the default provider."""
    return default_provider.get(specs)
