"""
Geometry Catalog Tests
======================

Every capstone and composite in the universe is built with unit edges,
regular planar faces and a convex, closed surface.

TESTS
-----
- Known vertex/face counts
- Unit edges, regular faces, convexity, Euler characteristic (all 118)
- Provider caching, explicit tables, unknown solids

Run: python -m pytest tests/core/test_catalog.py -v
"""

import numpy as np
import pytest

from solid_core.spec.errors import UnknownSolidError
from solid_core.specs import Capstone, Composite, Elementary, PRIMARY, SECONDARY
from solid_core.builders import (
    GeometryProvider, get_geometry, build_geometry, build_classical,
)

BUILT = [*Capstone.query(), *Composite.query()]


# =============================================================================
# P1: Known counts
# =============================================================================

@pytest.mark.parametrize("specs, vertices, faces", [
    (Capstone(4, PRIMARY, 1, "prism"), 9, 9),
    (Capstone(3, SECONDARY, 2, gyrate="gyro"), 12, 14),
    (Capstone(5, SECONDARY, 2, gyrate="gyro", rotunda_count=2), 30, 32),
    (Capstone(5, PRIMARY, 2, "antiprism"), 12, 20),
    (Capstone(5, SECONDARY, 1, rotunda_count=1), 20, 17),
    (Capstone(4, SECONDARY, 2, "prism", "ortho"), 24, 26),
    (Capstone(3, PRIMARY, 0, "antiprism"), 6, 8),
    (Composite("pentagonal prism", augmented=1), 11, 10),
    (Composite("triangular prism", augmented=3), 9, 14),
    (Composite("icosahedron", diminished=2, align="meta"), 10, 12),
    (Composite("icosahedron", diminished=3), 9, 8),
    (Composite("icosahedron", augmented=1, diminished=3), 10, 10),
    (Composite("rhombicosidodecahedron", diminished=1), 55, 52),
    (Composite("rhombicosidodecahedron", gyrate=1), 60, 62),
])
def test_known_counts(specs, vertices, faces):
    """P1.1: vertex and face counts of sample solids."""
    geom = get_geometry(specs)
    assert geom.num_vertices == vertices
    assert geom.num_faces == faces


def test_aliases_share_shape():
    """P1.2: two classifications of one solid get congruent geometry."""
    a = get_geometry(Capstone(5, PRIMARY, 0, "antiprism"))
    b = get_geometry(Composite("icosahedron", diminished=2, align="para"))
    assert (a.num_vertices, a.num_faces) == (b.num_vertices, b.num_faces)
    assert np.allclose(np.sort(a.edge_lengths()), np.sort(b.edge_lengths()), atol=1e-6)


# =============================================================================
# P2: Every built solid
# =============================================================================

@pytest.mark.parametrize("specs", BUILT, ids=repr)
def test_unit_regular_convex(specs):
    """P2.1: unit edges, regular planar faces, convex, closed."""
    geom = get_geometry(specs)
    assert geom.closed
    assert geom.euler_characteristic() == 2
    assert np.allclose(geom.edge_lengths(), 1.0, atol=1e-6)

    for face in geom.faces:
        assert face.is_planar()
        radii = np.linalg.norm(face.vectors() - face.centroid(), axis=1)
        assert np.ptp(radii) < 1e-6
        # every vertex on the inner side of the face plane
        assert np.all(geom.positions @ face.normal() - face.centroid() @ face.normal() < 1e-6)


# =============================================================================
# P3: Provider
# =============================================================================

def test_geometry_is_cached():
    """P3.1: repeated lookups return the same instance."""
    specs = Capstone(4, SECONDARY, 1)
    assert get_geometry(specs) is get_geometry(specs)


def test_build_geometry_is_uncached():
    """P3.2: build_geometry constructs a fresh instance each time."""
    specs = Capstone(3, PRIMARY, 1)
    assert build_geometry(specs) is not build_geometry(specs)


def test_unknown_specs_raise():
    """P3.3: solids outside the universe have no geometry."""
    with pytest.raises(UnknownSolidError):
        get_geometry(Capstone(2, PRIMARY, 1))
    with pytest.raises(UnknownSolidError):
        get_geometry(Composite("cube", augmented=1))


def test_elementary_needs_a_table():
    """P3.4: elementary solids resolve only through registered tables."""
    with pytest.raises(UnknownSolidError):
        get_geometry(Elementary("snub disphenoid"))

    tetra = build_classical("tetrahedron")
    provider = GeometryProvider({"sphenocorona": tetra.to_data()})
    assert provider.has_table("sphenocorona")
    geom = provider.get(Elementary("sphenocorona"))
    assert geom.num_vertices == 4
    assert provider(Elementary("sphenocorona")) is geom


def test_tables_override_construction():
    """P3.5: an explicit table wins over the parametric build."""
    cube = build_classical("cube")
    provider = GeometryProvider()
    registered = provider.register("square pyramid", *cube.to_data())
    assert provider.get(Capstone(4, PRIMARY, 1)) is registered
    assert provider.get(Capstone(3, PRIMARY, 1)) is get_geometry(Capstone(3, PRIMARY, 1))
