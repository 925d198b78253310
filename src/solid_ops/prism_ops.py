"""
Prism Operations
================

Operations that insert, remove or twist the prism band of a capstone:

    elongate       X            -> elongated X        (prism band)
    gyroelongate   X            -> gyroelongated X    (antiprism band)
    shorten        (gyro)elongated X -> X
    turn           elongated X <-> gyroelongated X

In every pair the middle is the banded solid (the right side). Going to
the left squashes it: each base (a cap or a base face) slides along its
own normal by half the height difference, and for an antiprism band it
also turns by half the twist angle π/m so the two rings line up.

POSE:
    origin       midpoint of the two base boundary centroids
    scale        edge length
    orientation  top normal, and a top boundary vertex direction turned
                 by (twist) π/2m when the band is an antiprism

    Candidates run over every top boundary vertex with either base on
    top; the engine keeps the one that lines the solids up.

TWIST:
    A bicupola gyroelongated with twist t keeps t if it was a gyro
    bicupola and takes the opposite twist if it was ortho; the band
    transform always uses the right side's twist.
"""

import numpy as np
from typing import List, Optional

from solid_core.operators.linalg import get_centroid, rotate_about_axis, with_origin
from solid_core.specs import Capstone, opposite_twist
from solid_core.specs.capstone import TWISTS
from solid_core.formes import from_specs
from .op_pair import GraphEntry, GraphOpts, make_op_pair, combine_ops
from .operation import Operation
from .pose import Pose, get_transformed_vertices


def twist_mult(twist: Optional[str]) -> int:
    return {"left": 1, "right": -1}.get(twist, 0)


def get_capstone_poses(forme, twist: Optional[str] = None) -> List[Pose]:
    """Candidate poses of a capstone; the first follows its first triangle edge."""
    boundaries = forme.base_boundaries()
    scale = forme.geom.edge_length()
    gyro = 1 if forme.specs.is_gyroelongated() else 0

    poses = []
    for top, bottom in (boundaries, boundaries[::-1]):
        normal, center = top.normal(), top.centroid()
        angle = gyro * twist_mult(twist) * np.pi / top.num_sides / 2
        origin = get_centroid([center, bottom.centroid()])

        edges = list(top.edges)
        if not forme.specs.is_prismatic():
            edges.sort(key=lambda e: e.face.num_sides != 3)
        for edge in edges:
            direction = rotate_about_axis(edge.v1.vec - center, normal, angle)[0]
            poses.append(Pose(origin, scale, (normal, direction)))
    return poses


def get_capstone_pose(forme, twist: Optional[str] = None) -> Pose:
    return get_capstone_poses(forme, twist)[0]


def get_scaled_prism_vertices(forme, scale: float, twist: Optional[str] = None) -> np.ndarray:
    """Slide each base out by scale/2 and turn it by half the twist angle."""
    angle = twist_mult(twist) * np.pi / forme.specs.num_sides()

    def move(base):
        origin, normal = base.normal_ray()
        return with_origin(origin, lambda rel: rotate_about_axis(rel + normal * scale / 2,
                                                                 normal, angle / 2))

    return get_transformed_vertices(forme.geom, forme.bases(), move)


def do_prism_transform(forme, result, twist: Optional[str] = None) -> np.ndarray:
    """Positions of forme with its band resized to the height of result."""
    result_forme = from_specs(result)
    result_height = (result_forme.prismatic_height() / result_forme.geom.edge_length()
                     * forme.geom.edge_length())
    scale = result_height - forme.prismatic_height()
    return get_scaled_prism_vertices(forme, scale, twist)


# =============================================================================
# Pairs
# =============================================================================

def make_prism_op(query, right_elongation: str = "antiprism"):
    """Factory: band pairs whose right side has right_elongation."""
    twist = None if right_elongation == "prism" else "left"

    def for_left(left_elongation: Optional[str]):
        def graph():
            for specs in Capstone.query():
                if query(specs) and not specs.is_prismatic() and specs.elongation == right_elongation:
                    yield GraphEntry(specs.with_data(elongation=left_elongation), specs)

        return make_op_pair(
            graph, "right",
            get_pose=lambda forme, options: get_capstone_poses(forme, twist),
            to_left=lambda forme, options, result: do_prism_transform(forme, result, twist),
        )

    return for_left


def _turn_prismatic_graph():
    for specs in Capstone.query():
        if specs.is_prism() and not specs.is_digonal():
            yield GraphEntry(specs, specs.with_data(elongation="antiprism"))


turn_prismatic = make_op_pair(
    _turn_prismatic_graph, "right",
    get_pose=lambda forme, options: get_capstone_poses(forme, "left"),
    to_left=lambda forme, options, result: do_prism_transform(forme, result, "left"),
)

_elongate = make_prism_op(lambda s: not s.is_digonal(), right_elongation="prism")(None)


def can_gyroelongate_primary(specs) -> bool:
    return specs.is_primary() and not specs.is_triangular()


def can_gyroelongate_secondary(specs) -> bool:
    return specs.is_secondary() and not specs.is_digonal()


pyramid_ops = make_prism_op(can_gyroelongate_primary)
gyroelongate_pyramid = pyramid_ops(None)
turn_pyramid = pyramid_ops("prism")

cupola_ops = make_prism_op(lambda s: can_gyroelongate_secondary(s) and s.is_mono())
gyroelongate_cupola = cupola_ops(None)
turn_cupola = cupola_ops("prism")


def make_bicupola_prism_op(left_elongation: Optional[str]):
    def graph():
        for specs in Capstone.query():
            if not (can_gyroelongate_secondary(specs) and specs.is_bi()
                    and specs.elongation == left_elongation):
                continue
            for twist in TWISTS:
                right = specs.with_data(
                    elongation="antiprism", gyrate=None,
                    twist=twist if specs.is_gyro() else opposite_twist(twist))
                yield GraphEntry(specs, right,
                                 GraphOpts({"twist": twist}, {"twist": opposite_twist(twist)}))

    return make_op_pair(
        graph, "right",
        get_pose=lambda forme, options: get_capstone_poses(forme, options.right.get("twist")),
        to_left=lambda forme, options, result: do_prism_transform(
            forme, result, options.right.get("twist")),
    )


gyroelongate_bicupola = make_bicupola_prism_op(None)
turn_bicupola = make_bicupola_prism_op("prism")

LEFT, RIGHT = 0, 1

# =============================================================================
# Exported operations
# =============================================================================

elongate = Operation("elongate", _elongate[LEFT])

gyroelongate = Operation("gyroelongate", combine_ops(
    op[LEFT] for op in (gyroelongate_pyramid, gyroelongate_cupola, gyroelongate_bicupola)))

shorten = Operation("shorten", combine_ops(
    op[RIGHT] for op in (_elongate, gyroelongate_pyramid, gyroelongate_cupola, gyroelongate_bicupola)))

turn = Operation("turn", combine_ops(
    side for op in (turn_prismatic, turn_pyramid, turn_cupola, turn_bicupola) for side in op))
