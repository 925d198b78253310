"""
SOLID_OPS - Operations on classified solids
===========================================

Built on solid_core. NO rendering. NO UI state.

Structure:
    pose        - Pose, alignment, landmark poses
    op_pair     - OpPair engine, one-way ops, combine_ops
    operation   - Operation (invocation surface, option enumeration)
    prism_ops   - elongate, gyroelongate, shorten, turn
    cut_paste   - augment, diminish, gyrate

Usage:
    from solid_core.formes import from_specs
    from solid_ops import OPERATIONS

    result = OPERATIONS["elongate"].apply(from_specs(specs))
    result.result_specs, result.result        # end specs, aligned geometry
"""

from .pose import Pose, align_polyhedron, get_transformed_vertices
from .op_pair import (
    GraphEntry, GraphOpts, DirectedEntry, AnimationData, OpResult,
    OpPair, make_op_pair, combine_ops,
)
from .operation import Operation, OptionArgs
from .prism_ops import elongate, gyroelongate, shorten, turn
from .cut_paste import augment, diminish, gyrate

OPERATIONS = {
    op.name: op
    for op in (elongate, gyroelongate, shorten, turn, augment, diminish, gyrate)
}
