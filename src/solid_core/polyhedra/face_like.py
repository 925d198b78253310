"""
FaceLike
========

Geometric queries shared by real faces and synthetic rings (cap
boundaries). Anything with ordered `vertices` and `edges` qualifies.

Regular-polygon formulas (side s, n sides):
    apothem = s / (2 tan(π/n))
    area    = n s apothem / 2
"""

import numpy as np
from typing import List, Tuple

from ..spec.constants import PRECISION
from ..operators.linalg import get_centroid, get_normal, is_planar


class FaceLike:
    """An ordered cycle of vertices with its half-edges."""

    def __init__(self, vertices: list, edges: list):
        if len(vertices) != len(edges):
            raise ValueError(
                f"Expected one edge per vertex, got {len(vertices)} vertices and {len(edges)} edges")
        self.vertices = list(vertices)
        self.edges = list(edges)

    def __repr__(self):
        return f"{type(self).__name__}({self.vertex_indices()})"

    @property
    def num_sides(self) -> int:
        return len(self.vertices)

    def vertex_indices(self) -> List[int]:
        return [v.index for v in self.vertices]

    def vectors(self) -> np.ndarray:
        return np.array([v.vec for v in self.vertices])

    def adjacent_faces(self) -> list:
        """Faces on the other side of each edge (via twins)."""
        return [edge.twin_face() for edge in self.edges]

    def num_unique_sides(self) -> int:
        """Number of non-degenerate edges."""
        return sum(1 for edge in self.edges if edge.length() > PRECISION)

    def side_length(self) -> float:
        return self.edges[0].length()

    def is_planar(self) -> bool:
        return is_planar(self.vectors())

    def centroid(self) -> np.ndarray:
        return get_centroid(self.vectors())

    def normal(self) -> np.ndarray:
        return get_normal(self.vectors())

    def plane(self) -> Tuple[np.ndarray, np.ndarray]:
        """(point, unit normal)"""
        return self.centroid(), self.normal()

    def normal_ray(self) -> Tuple[np.ndarray, np.ndarray]:
        """Ray from the centroid along the normal: (origin, direction)."""
        return self.centroid(), self.normal()

    def apothem(self) -> float:
        return self.side_length() / (2 * np.tan(np.pi / self.num_sides))

    def area(self) -> float:
        return self.num_sides * self.side_length() * self.apothem() / 2

    def distance_to_center(self) -> float:
        """Distance from the owning polyhedron's centroid to this face's centroid."""
        center = self.vertices[0].polyhedron.centroid()
        return float(np.linalg.norm(self.centroid() - center))

    def plane_distance(self, point) -> float:
        """Signed distance from point to this face's plane (positive outside)."""
        c, n = self.plane()
        return float(np.dot(np.asarray(point, dtype=float) - c, n))

    def is_valid(self) -> bool:
        """No degenerate edges."""
        return all(edge.length() > PRECISION for edge in self.edges)
