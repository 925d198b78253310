"""
Pose & Alignment
================

A Pose pins a geometry to a landmark:

    origin        point the landmark sits at
    scale         length the landmark is measured in (an edge length)
    orientation   (v1, v2): v1 is the primary axis, v2 fixes the roll

FRAME:
    u = v1 / |v1|
    w = v2 - (v2·u) u, normalized
    rows [u, w, u × w]

    When v2 is (nearly) parallel to v1 the roll is undefined. The frame
    then takes w from the first of x, y, z that is not parallel to u,
    so the result is arbitrary but always the same.

ALIGNMENT:
    align_polyhedron(geom, from_pose, to_pose) maps from_pose's frame
    onto to_pose's frame, scales by to.scale / from.scale and moves
    from.origin onto to.origin. Vertex order is preserved.
"""

from dataclasses import dataclass
import numpy as np
from typing import Callable, Iterable, List, Sequence, Tuple, Union

from solid_core.spec.constants import PRECISION
from solid_core.operators.linalg import as_points, unit
from solid_core.polyhedra import Polyhedron

REFERENCE_AXES = np.eye(3)


@dataclass(eq=False)
class Pose:
    origin: np.ndarray
    scale: float
    orientation: Tuple[np.ndarray, np.ndarray]

    def __post_init__(self):
        self.origin = np.asarray(self.origin, dtype=float)
        v1, v2 = self.orientation
        self.orientation = (np.asarray(v1, dtype=float), np.asarray(v2, dtype=float))
        if not self.scale > 0:
            raise ValueError(f"Expected a positive pose scale, got {self.scale}")

    def frame(self) -> np.ndarray:
        """Orthonormal right-handed frame, one axis per row."""
        v1, v2 = self.orientation
        u = unit(v1)
        w = v2 - np.dot(v2, u) * u
        if np.linalg.norm(w) < PRECISION:
            for axis in REFERENCE_AXES:
                w = axis - np.dot(axis, u) * u
                if np.linalg.norm(w) >= PRECISION:
                    break
        w = unit(w)
        return np.array([u, w, np.cross(u, w)])


PoseLike = Union[Pose, Sequence[Pose]]


def as_pose_list(poses: PoseLike) -> List[Pose]:
    if isinstance(poses, Pose):
        return [poses]
    poses = list(poses)
    if not poses:
        raise ValueError("Expected at least one candidate pose")
    return poses


def transform_points(points, from_pose: Pose, to_pose: Pose) -> np.ndarray:
    pts = as_points(points)
    rotation = from_pose.frame().T @ to_pose.frame()
    ratio = to_pose.scale / from_pose.scale
    return (pts - from_pose.origin) @ rotation * ratio + to_pose.origin


def align_polyhedron(geom: Polyhedron, from_pose: Pose, to_pose: Pose) -> Polyhedron:
    """Rigidly move (and uniformly scale) geom so from_pose lands on to_pose."""
    return geom.with_vertices(transform_points(geom.positions, from_pose, to_pose), similar=True)


# =============================================================================
# Vertex set transforms
# =============================================================================

def vertex_set_indices(vertex_set) -> List[int]:
    verts = vertex_set.vertices if hasattr(vertex_set, "vertices") else vertex_set
    return [v if isinstance(v, (int, np.integer)) else v.index for v in verts]


def get_transformed_vertices(geom: Polyhedron, vertex_sets: Iterable,
                             fn: Callable[[object], Callable[[np.ndarray], np.ndarray]]) -> np.ndarray:
    """
    Positions of geom after moving each vertex set.

    fn(vertex_set) returns a function over an (N, 3) point array; it is
    applied to that set's vertices. Sets are applied in order, so a
    vertex in two sets gets both transforms.
    """
    positions = geom.positions.copy()
    for vertex_set in vertex_sets:
        idx = vertex_set_indices(vertex_set)
        positions[idx] = fn(vertex_set)(positions[idx])
    return positions


# =============================================================================
# Landmark poses
# =============================================================================

def get_face_pose(face, index: int = 0) -> Pose:
    """Pose of a face, rolled onto its index-th vertex."""
    centroid = face.centroid()
    return Pose(centroid, face.side_length(),
                (face.normal(), face.vertices[index].vec - centroid))


def get_face_poses(face) -> List[Pose]:
    return [get_face_pose(face, k) for k in range(face.num_sides)]


def get_cap_pose(cap, index: int = 0) -> Pose:
    """Pose of a cap's boundary ring, rolled onto its index-th vertex."""
    boundary = cap.boundary()
    centroid = boundary.centroid()
    return Pose(centroid, boundary.side_length(),
                (cap.normal(), boundary.vertices[index].vec - centroid))


def get_cap_poses(cap) -> List[Pose]:
    return [get_cap_pose(cap, k) for k in range(cap.boundary().num_sides)]
