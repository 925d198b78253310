"""Linear-algebra helpers."""

from .linalg import (
    as_points,
    unit,
    get_centroid,
    get_normal,
    is_planar,
    is_inverse,
    angle_between,
    project_onto_plane,
    rotate_about_axis,
    with_origin,
    local_frame,
    order_ccw,
    min_pairwise_distance,
)
