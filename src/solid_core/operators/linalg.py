"""
Vector helpers
==============

Small numpy helpers shared by the mesh model, the builders and the
pose solver. Points are (3,) arrays, point sets are (N, 3) arrays.

Orientation conventions:
    - polygon normals follow the right-hand rule on the vertex order
      (counter-clockwise seen from the tip of the normal)
    - rotate_about_axis rotates counter-clockwise seen from the axis tip
"""

import numpy as np
from typing import Callable, Iterable

from ..spec.constants import EPS_ZERO, PRECISION


def as_points(points) -> np.ndarray:
    """Convert a sequence of points into an (N, 3) float array."""
    arr = np.asarray(points, dtype=float)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    if arr.shape[-1] != 3:
        raise ValueError(f"Expected points with 3 coordinates, got shape {arr.shape}")
    return arr


def unit(v: np.ndarray) -> np.ndarray:
    """Normalize a vector (raises on zero vectors)."""
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    if norm < EPS_ZERO:
        raise ValueError("Cannot normalize a zero vector")
    return v / norm


def get_centroid(points) -> np.ndarray:
    return as_points(points).mean(axis=0)


def get_normal(points) -> np.ndarray:
    """
    Unit normal of an ordered polygon (cross-sum / Newell form).

    Robust for non-planar or non-convex cycles: sums the cross products
    of consecutive vertices around the centroid.
    """
    pts = as_points(points)
    if len(pts) < 3:
        raise ValueError(f"Normal needs at least 3 points, got {len(pts)}")
    c = pts.mean(axis=0)
    rel = pts - c
    n = np.cross(rel, np.roll(rel, -1, axis=0)).sum(axis=0)
    norm = np.linalg.norm(n)
    if norm < EPS_ZERO:
        raise ValueError("Degenerate polygon: zero normal")
    return n / norm


def is_planar(points, tol: float = PRECISION) -> bool:
    """True if every point lies within tol of the best-fit plane."""
    pts = as_points(points)
    if len(pts) <= 3:
        return True
    rel = pts - pts.mean(axis=0)
    # Smallest singular value measures the out-of-plane spread
    _, _, vt = np.linalg.svd(rel)
    dist = np.abs(rel @ vt[-1])
    return bool(np.max(dist) < tol)


def is_inverse(v1, v2, tol: float = PRECISION) -> bool:
    """True if v1 and v2 point in opposite directions."""
    return bool(np.linalg.norm(unit(v1) + unit(v2)) < tol)


def angle_between(v1, v2) -> float:
    cos = np.dot(unit(v1), unit(v2))
    return float(np.arccos(np.clip(cos, -1.0, 1.0)))


def project_onto_plane(points, origin, normal) -> np.ndarray:
    pts = as_points(points)
    n = unit(normal)
    return pts - np.outer((pts - origin) @ n, n)


def rotate_about_axis(points, axis, angle: float, origin=None) -> np.ndarray:
    """
    Rotate points by angle (radians) around axis through origin.

    Rodrigues' formula:
        v' = v cos θ + (k × v) sin θ + k (k · v)(1 - cos θ)
    """
    pts = as_points(points)
    k = unit(axis)
    o = np.zeros(3) if origin is None else np.asarray(origin, dtype=float)
    rel = pts - o
    cos, sin = np.cos(angle), np.sin(angle)
    rotated = (rel * cos
               + np.cross(k, rel) * sin
               + np.outer(rel @ k, k) * (1 - cos))
    return rotated + o


def with_origin(origin, fn: Callable[[np.ndarray], np.ndarray]) -> Callable[[np.ndarray], np.ndarray]:
    """Wrap fn so that it acts on points relative to origin."""
    origin = np.asarray(origin, dtype=float)
    return lambda pts: fn(as_points(pts) - origin) + origin


def local_frame(normal) -> np.ndarray:
    """
    Orthonormal (u, v) spanning the plane perpendicular to normal.

    u = normal × x (or normal × y when normal is close to x).
    """
    n = unit(normal)
    if abs(n[0]) < 0.9:
        u = np.cross(n, [1, 0, 0])
    else:
        u = np.cross(n, [0, 1, 0])
    u = u / np.linalg.norm(u)
    v = np.cross(n, u)
    return np.array([u, v])


def order_ccw(points, normal) -> np.ndarray:
    """Indices ordering points counter-clockwise around normal."""
    pts = as_points(points)
    centroid = pts.mean(axis=0)
    u, v = local_frame(normal)
    rel = pts - centroid
    angles = np.arctan2(rel @ v, rel @ u)
    return np.argsort(angles)


def min_pairwise_distance(points: Iterable) -> float:
    pts = as_points(points)
    diff = pts[:, None, :] - pts[None, :, :]
    d = np.linalg.norm(diff, axis=-1)
    d[np.diag_indices(len(pts))] = np.inf
    return float(d.min())
