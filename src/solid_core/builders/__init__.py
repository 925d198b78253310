"""
Geometry builders
=================

Unit-edge constructions for classified solids, and the provider that
serves them:

    hull        point cloud -> Polyhedron (scipy ConvexHull + face merge)
    classical   Platonic / Archimedean source solids from coordinates
    capstones   rings + caps
    composites  augment / diminish / gyrate a source
    catalog     get_geometry(specs), GeometryProvider
"""

from .hull import convex_polyhedron
from .classical import build_classical, CLASSICAL_POINTS
from .capstones import build_capstone, cap_points
from .composites import build_composite, parse_using, augmentee_points
from .catalog import GeometryProvider, get_geometry, build_geometry, default_provider
