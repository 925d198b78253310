"""
Capstone Construction
=====================

Unit-edge capstones built by stacking rings along z and capping them.

RINGS (m = ring sides):
    circumradius  R_m = 1 / (2 sin(π/m))
    apothem       a_m = 1 / (2 tan(π/m))
    prism band    rings at z = ±1/2, same phase
    antiprism     rings at z = ±h/2, top phase + π/m,
                  h = sqrt(1 - 1 / (4 cos²(π/2m)))
    no elongation single ring at z = 0

CAPS on a ring with centroid c and outward axis k:
    pyramid   apex c + k sqrt(1 - R_m²)
    cupola    n = m/2 top vertices over the "triangle" ring edges,
              radius R_n, height sqrt(1 - (a_2n - a_n)²)
    rotunda   5 middle vertices over the triangle edges
                  r = (a_10² + φ² - 3/4) / (2 a_10), h = sqrt(φ² - r²)
              5 top vertices over the other edges
                  r = R_5, h = sqrt(φ² - R_5²)

Triangle edges alternate around the ring; which parity a cap uses
decides ortho (same parity on both caps) vs gyro (opposite parity,
reversed for cupolarotundae),
and for gyroelongated bi-capstones the twist.
"""

import numpy as np
from typing import List, Sequence

from ..spec.constants import PHI, CAP_PYRAMID, CAP_CUPOLA, CAP_ROTUNDA
from ..spec.errors import UnknownSolidError
from ..operators.linalg import as_points, get_centroid, unit
from ..polyhedra import Polyhedron
from .hull import convex_polyhedron


def circumradius(m: int) -> float:
    return 1 / (2 * np.sin(np.pi / m))


def apothem(m: int) -> float:
    return 1 / (2 * np.tan(np.pi / m))


def antiprism_height(m: int) -> float:
    return float(np.sqrt(1 - 1 / (4 * np.cos(np.pi / (2 * m)) ** 2)))


def ring(m: int, z: float, phase: float = 0.0) -> np.ndarray:
    """Regular unit-edge m-gon in the plane z, first vertex at angle phase."""
    angles = phase + 2 * np.pi * np.arange(m) / m
    r = circumradius(m)
    return np.column_stack([r * np.cos(angles), r * np.sin(angles), np.full(m, z)])


def cap_points(ring_points, axis, kind: str, triangle_edges: Sequence[int],
               edge_length: float = 1.0) -> List[np.ndarray]:
    """
    New vertices of a cap placed on a regular ring.

    Args:
        ring_points: (m, 3) ring vertices in cyclic order
        axis: direction the cap grows in
        kind: pyramid / cupola / rotunda
        triangle_edges: ring edge indices (edge i = points i, i+1) that
            get a triangle (ignored for pyramids)
        edge_length: ring edge length

    Returns:
        list of new vertex positions
    """
    pts = as_points(ring_points)
    m = len(pts)
    c = get_centroid(pts)
    k = unit(axis)
    s = edge_length

    if kind == CAP_PYRAMID:
        return [c + k * s * np.sqrt(1 - circumradius(m) ** 2)]

    mids = [(pts[i] + pts[(i + 1) % m]) / 2 for i in range(m)]
    triangles = [i for i in range(m) if i in set(triangle_edges)]
    others = [i for i in range(m) if i not in set(triangle_edges)]

    if kind == CAP_CUPOLA:
        n = m // 2
        h = np.sqrt(1 - (apothem(2 * n) - apothem(n)) ** 2)
        return [c + s * (unit(mids[i] - c) * circumradius(n) + k * h) for i in triangles]

    if kind == CAP_ROTUNDA:
        a10 = apothem(10)
        r_mid = (a10 ** 2 + PHI ** 2 - 0.75) / (2 * a10)
        h_mid = np.sqrt(PHI ** 2 - r_mid ** 2)
        r_top = circumradius(5)
        h_top = np.sqrt(PHI ** 2 - r_top ** 2)
        middle = [c + s * (unit(mids[i] - c) * r_mid + k * h_mid) for i in triangles]
        top = [c + s * (unit(mids[i] - c) * r_top + k * h_top) for i in others]
        return middle + top

    raise ValueError(f"Unknown cap kind {kind!r}")


def parity_edges(m: int, parity: int) -> List[int]:
    return [i for i in range(m) if i % 2 == parity]


def _cap_kind(specs, rotunda: bool) -> str:
    if specs.is_primary():
        return CAP_PYRAMID
    return CAP_ROTUNDA if rotunda else CAP_CUPOLA


def build_capstone(specs) -> Polyhedron:
    """Unit-edge geometry for a Capstone specs value."""
    if specs.is_digonal():
        raise UnknownSolidError(f"No construction for digonal capstone {specs.name()}")
    m = specs.num_sides()

    if specs.elongation == "prism":
        bottom, top = ring(m, -0.5), ring(m, 0.5)
    elif specs.elongation == "antiprism":
        h = antiprism_height(m)
        bottom, top = ring(m, -h / 2), ring(m, h / 2, np.pi / m)
    else:
        bottom = top = ring(m, 0.0)

    points = [bottom] if top is bottom else [bottom, top]
    up, down = np.array([0.0, 0.0, 1.0]), np.array([0.0, 0.0, -1.0])

    # triangle parity of each cap; a cupolarotunda is ortho when its
    # tops line up, which puts its bottom triangles out of step
    top_parity, bottom_parity = 0, 0
    if specs.is_bi():
        flip = specs.is_cupola_rotunda()
        if specs.is_gyroelongated():
            top_parity = int((specs.twist == "left") != flip)
        elif specs.is_gyro() != flip:
            bottom_parity = 1

    if specs.count >= 1:
        kind = _cap_kind(specs, specs.rotunda_count >= 1)
        points.append(cap_points(top, up, kind, parity_edges(m, top_parity)))
    if specs.count == 2:
        kind = _cap_kind(specs, specs.rotunda_count == 2)
        points.append(cap_points(bottom, down, kind, parity_edges(m, bottom_parity)))

    return convex_polyhedron(np.vstack(points))
