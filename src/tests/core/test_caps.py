"""
Cap Detection Tests
===================

Caps are found from the signature catalog (spec/constants.py):
pyramids around all-triangle vertices, cupolae on n-gons ringed by
squares, rotundae on pentagons ringed by triangles.

Run: python -m pytest tests/core/test_caps.py -v
"""

import numpy as np
import pytest

from solid_core.spec.constants import CAP_PYRAMID, CAP_CUPOLA, CAP_ROTUNDA
from solid_core.polyhedra import Cap
from solid_core.specs import Capstone, PRIMARY, SECONDARY
from solid_core.builders import build_classical, get_geometry


def caps_by_code(geom):
    codes = {}
    for cap in geom.caps():
        codes[cap.using()] = codes.get(cap.using(), 0) + 1
    return codes


# =============================================================================
# P1: Known solids
# =============================================================================

@pytest.mark.parametrize("name, expected", [
    ("icosahedron", {"Y5": 12}),
    ("octahedron", {"Y4": 6}),
    ("tetrahedron", {"Y3": 4}),
    ("rhombicosidodecahedron", {"U5": 12}),
    ("cube", {}),
    ("dodecahedron", {}),
])
def test_classical_caps(name, expected):
    """P1.1: cap counts on classical solids."""
    assert caps_by_code(build_classical(name)) == expected


@pytest.mark.parametrize("specs, expected", [
    (Capstone(4, PRIMARY, 1), {"Y4": 1}),
    (Capstone(5, PRIMARY, 1, "prism"), {"Y5": 1}),
    (Capstone(3, SECONDARY, 1), {"U3": 1}),
    (Capstone(5, SECONDARY, 1, rotunda_count=1), {"R5": 1}),
    (Capstone(3, SECONDARY, 2, gyrate="gyro"), {"U3": 8}),
    (Capstone(4, PRIMARY, 0, "prism"), {}),
])
def test_capstone_caps(specs, expected):
    """P1.2: cap counts on capstones (the cuboctahedron has one per triangle)."""
    assert caps_by_code(get_geometry(specs)) == expected


def test_cap_kinds_and_boundaries():
    """P1.3: boundary ring sizes are n, 2n and 10."""
    rotunda = get_geometry(Capstone(5, SECONDARY, 1, rotunda_count=1)).caps()[0]
    cupola = get_geometry(Capstone(4, SECONDARY, 1)).caps()[0]
    pyramid = get_geometry(Capstone(3, PRIMARY, 1, "prism")).caps()[0]

    assert rotunda.type == CAP_ROTUNDA and rotunda.boundary().num_sides == 10
    assert cupola.type == CAP_CUPOLA and cupola.boundary().num_sides == 8
    assert pyramid.type == CAP_PYRAMID and pyramid.boundary().num_sides == 3

    assert len(rotunda.inner_vertex_indices()) == 10
    assert len(cupola.inner_vertex_indices()) == 4
    assert len(pyramid.inner_vertex_indices()) == 1


# =============================================================================
# P2: Cap geometry
# =============================================================================

def test_cap_normal_points_to_top(icosahedron):
    """P2.1: the cap normal points from the boundary towards the apex."""
    for cap in icosahedron.caps():
        assert np.dot(cap.top_point() - cap.centroid(), cap.normal()) > 0


def test_boundary_is_planar_and_regular(icosahedron):
    """P2.2: every boundary ring is a planar regular polygon."""
    for cap in icosahedron.caps():
        ring = cap.boundary()
        assert ring.is_planar()
        radii = np.linalg.norm(ring.vectors() - ring.centroid(), axis=1)
        assert np.ptp(radii) < 1e-6
        assert np.isclose(ring.side_length(), 1.0)


def test_cap_faces_and_vertices(icosahedron):
    """P2.3: a pyramid cap is its apex, five triangles, five ring vertices."""
    cap = icosahedron.caps()[0]
    assert len(cap.faces()) == 5
    assert all(f.num_sides == 3 for f in cap.faces())
    assert len(cap.vertices) == 6
    assert set(cap.inner_vertex_indices()).isdisjoint(cap.boundary().vertex_indices())


def test_overlapping_caps(icosahedron):
    """P2.4: neighbouring apexes overlap, opposite ones do not."""
    caps = icosahedron.caps()
    first = caps[0]
    neighbours = {v.index for v in first.inner_vertices()[0].adjacent_vertices()}
    for cap in caps[1:]:
        apex = cap.inner_vertex_indices()[0]
        assert cap.overlaps(first) == (apex in neighbours)


def test_cap_equality_is_per_polyhedron(icosahedron):
    """P2.5: caps compare by polyhedron identity and inner vertices."""
    caps = icosahedron.caps()
    assert caps[0].equals(caps[0])
    assert not caps[0].equals(caps[1])
    moved = icosahedron.with_vertices(icosahedron.positions, similar=True)
    assert not moved.caps()[0].equals(caps[0])


# =============================================================================
# P3: Hit tests
# =============================================================================

def test_find_cap_from_point(icosahedron):
    """P3.1: a point over a cap face finds the cap with the nearest apex."""
    cap = icosahedron.caps()[3]
    point = cap.top_point() * 1.05
    found = Cap.find(icosahedron, point)
    assert found is not None and found.equals(cap)


def test_find_cap_misses_capless_face():
    """P3.2: a face outside every cap gives None."""
    cube = build_classical("cube")
    assert Cap.find(cube, cube.faces[0].centroid()) is None


def test_nearest_cap_filters_by_code():
    """P3.3: nearest() only considers caps of the requested kind."""
    geom = get_geometry(Capstone(5, SECONDARY, 1, rotunda_count=1))
    far_point = geom.centroid() - 10 * geom.caps()[0].normal()
    assert Cap.nearest(geom, far_point, "R5").using() == "R5"
    assert Cap.nearest(geom, far_point, "U5") is None
