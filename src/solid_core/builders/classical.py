"""
Classical Solids
================

Coordinates of the source solids, scaled to unit edge length.

COORDINATES (φ = golden ratio):
    tetrahedron              (1,1,1) (1,-1,-1) (-1,1,-1) (-1,-1,1)
    cube                     (±1, ±1, ±1)
    octahedron               permutations of (±1, 0, 0)
    icosahedron              cyclic permutations of (0, ±1, ±φ)
    dodecahedron             (±1, ±1, ±1) + cyclic (0, ±1/φ, ±φ)
    truncated tetrahedron    permutations of (3, 1, 1), even number of minus signs
    truncated cube           permutations of (±ξ, ±1, ±1), ξ = √2 - 1
    truncated dodecahedron   cyclic (0, ±1/φ, ±(2+φ)), (±1/φ, ±φ, ±2φ), (±φ, ±2, ±φ²)
    rhombicosidodecahedron   cyclic (±1, ±1, ±φ³), (±φ², ±φ, ±2φ), (±(2+φ), 0, ±φ²)

Every solid is centered at the origin; edge length is rescaled to 1
from the minimum pairwise distance.
"""

import itertools
import numpy as np
from typing import Callable, Dict, Iterable, List, Tuple

from ..spec.constants import PHI
from ..operators.linalg import min_pairwise_distance
from ..polyhedra import Polyhedron
from .hull import convex_polyhedron


def _signed(base: Tuple[float, float, float]) -> List[Tuple[float, float, float]]:
    """All sign combinations of the non-zero entries."""
    options = [(x, -x) if x != 0 else (0.0,) for x in base]
    return [tuple(p) for p in itertools.product(*options)]


def _cyclic(base: Tuple[float, float, float]) -> List[Tuple[float, float, float]]:
    a, b, c = base
    return [(a, b, c), (b, c, a), (c, a, b)]


def _unique(points: Iterable) -> np.ndarray:
    seen = {}
    for p in points:
        key = tuple(np.round(p, 9))
        seen.setdefault(key, p)
    return np.array(list(seen.values()), dtype=float)


def _cyclic_signed(*bases) -> np.ndarray:
    pts = []
    for base in bases:
        for perm in _cyclic(base):
            pts.extend(_signed(perm))
    return _unique(pts)


def _normalized(points: np.ndarray) -> np.ndarray:
    pts = np.asarray(points, dtype=float)
    pts = pts - pts.mean(axis=0)
    return pts / min_pairwise_distance(pts)


def tetrahedron_points() -> np.ndarray:
    return np.array([(1, 1, 1), (1, -1, -1), (-1, 1, -1), (-1, -1, 1)], dtype=float)


def cube_points() -> np.ndarray:
    return np.array(_signed((1.0, 1.0, 1.0)), dtype=float)


def octahedron_points() -> np.ndarray:
    return _cyclic_signed((1.0, 0.0, 0.0))


def icosahedron_points() -> np.ndarray:
    return _cyclic_signed((0.0, 1.0, PHI))


def dodecahedron_points() -> np.ndarray:
    return _unique(list(cube_points()) + list(_cyclic_signed((0.0, 1 / PHI, PHI))))


def truncated_tetrahedron_points() -> np.ndarray:
    pts = []
    for perm in set(itertools.permutations((3.0, 1.0, 1.0))):
        for p in _signed(perm):
            if sum(1 for x in p if x < 0) % 2 == 0:
                pts.append(p)
    return _unique(pts)


def truncated_cube_points() -> np.ndarray:
    xi = np.sqrt(2) - 1
    return _cyclic_signed((xi, 1.0, 1.0))


def truncated_dodecahedron_points() -> np.ndarray:
    return _cyclic_signed(
        (0.0, 1 / PHI, 2 + PHI),
        (1 / PHI, PHI, 2 * PHI),
        (PHI, 2.0, PHI ** 2),
    )


def rhombicosidodecahedron_points() -> np.ndarray:
    return _cyclic_signed(
        (1.0, 1.0, PHI ** 3),
        (PHI ** 2, PHI, 2 * PHI),
        (2 + PHI, 0.0, PHI ** 2),
    )


CLASSICAL_POINTS: Dict[str, Callable[[], np.ndarray]] = {
    "tetrahedron": tetrahedron_points,
    "cube": cube_points,
    "octahedron": octahedron_points,
    "icosahedron": icosahedron_points,
    "dodecahedron": dodecahedron_points,
    "truncated tetrahedron": truncated_tetrahedron_points,
    "truncated cube": truncated_cube_points,
    "truncated dodecahedron": truncated_dodecahedron_points,
    "rhombicosidodecahedron": rhombicosidodecahedron_points,
}

# (V, F) for sanity checks
CLASSICAL_COUNTS = {
    "tetrahedron": (4, 4),
    "cube": (8, 6),
    "octahedron": (6, 8),
    "icosahedron": (12, 20),
    "dodecahedron": (20, 12),
    "truncated tetrahedron": (12, 8),
    "truncated cube": (24, 14),
    "truncated dodecahedron": (60, 32),
    "rhombicosidodecahedron": (60, 62),
}


def build_classical(name: str) -> Polyhedron:
    """Unit-edge classical solid by name."""
    if name not in CLASSICAL_POINTS:
        raise ValueError(f"Unknown classical solid {name!r}")
    poly = convex_polyhedron(_normalized(CLASSICAL_POINTS[name]()))

    expected_v, expected_f = CLASSICAL_COUNTS[name]
    if poly.num_vertices != expected_v:
        raise ValueError(f"Expected {expected_v} vertices for {name}, got {poly.num_vertices}")
    if poly.num_faces != expected_f:
        raise ValueError(f"Expected {expected_f} faces for {name}, got {poly.num_faces}")
    return poly
