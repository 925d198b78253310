"""
Convex Hull Faces
=================

Turn a point cloud (vertices of a convex solid) into a Polyhedron.

scipy's ConvexHull returns a triangulated surface. Triangles whose
planes agree (within HULL_TOL) are merged back into polygonal faces,
and each face is ordered counter-clockwise around its outward normal.

Only hull vertices are kept; they stay in input order.
"""

import numpy as np
from scipy.spatial import ConvexHull
from typing import List

from ..spec.constants import HULL_TOL
from ..operators.linalg import as_points, order_ccw
from ..polyhedra import Polyhedron


def _group_coplanar(equations: np.ndarray, tol: float) -> List[List[int]]:
    """Group hull simplices by supporting plane (normal + offset)."""
    groups: List[List[int]] = []
    planes: List[np.ndarray] = []
    for si, eq in enumerate(equations):
        for gi, plane in enumerate(planes):
            if np.dot(eq[:3], plane[:3]) > 1 - tol and abs(eq[3] - plane[3]) < tol:
                groups[gi].append(si)
                break
        else:
            groups.append([si])
            planes.append(eq)
    return groups


def convex_polyhedron(points, tol: float = HULL_TOL) -> Polyhedron:
    """
    Build the Polyhedron bounding the convex hull of points.

    Args:
        points: (N, 3) vertex positions (every point should be a hull vertex)
        tol: coplanarity tolerance for merging hull triangles

    Returns:
        Polyhedron with polygonal faces, outward counter-clockwise
    """
    pts = as_points(points)
    if len(pts) < 4:
        raise ValueError(f"Need at least 4 points for a solid, got {len(pts)}")
    hull = ConvexHull(pts)

    used = sorted(set(int(i) for i in hull.vertices))
    remap = {old: new for new, old in enumerate(used)}

    faces = []
    for group in _group_coplanar(hull.equations, tol):
        idx = sorted({int(i) for si in group for i in hull.simplices[si]})
        normal = hull.equations[group[0], :3]
        order = order_ccw(pts[idx], normal)
        faces.append([remap[idx[o]] for o in order])

    return Polyhedron(pts[used], faces)
