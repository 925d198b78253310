"""
Guard and Edge Case Tests for solid_core
========================================

Tests for boundary conditions, guards, and edge cases.
Separated from the model tests to keep those focused on invariants.

Run: python -m pytest tests/core/test_guards.py -v
"""

import pytest
import numpy as np

from solid_core.spec import errors
from solid_core.spec.constants import CAP_CUPOLA, CAP_PYRAMID, CAP_ROTUNDA
from solid_core.operators.linalg import (
    as_points, unit, get_normal, is_planar, is_inverse, angle_between,
    project_onto_plane, rotate_about_axis, with_origin, local_frame, order_ccw,
    min_pairwise_distance,
)
from solid_core.builders import build_classical, parse_using, augmentee_points
from solid_core.builders.composites import choose_sites


# =============================================================================
# P1: CRITICAL - Degenerate input guards
# =============================================================================

def test_unit_zero_vector_raises():
    """P1.1: zero vectors have no direction."""
    with pytest.raises(ValueError, match="zero vector"):
        unit([0.0, 0.0, 0.0])


def test_normal_of_collinear_points_raises():
    """P1.2: collinear polygons have no normal."""
    with pytest.raises(ValueError, match="Degenerate polygon"):
        get_normal([(0, 0, 0), (1, 0, 0), (2, 0, 0)])


def test_normal_needs_three_points():
    """P1.3: two points do not make a polygon."""
    with pytest.raises(ValueError, match="at least 3"):
        get_normal([(0, 0, 0), (1, 0, 0)])


def test_points_need_three_coordinates():
    """P1.4: 2-D points are rejected."""
    with pytest.raises(ValueError, match="3 coordinates"):
        as_points([(0, 0), (1, 1)])


def test_unknown_classical_raises():
    """P1.5: only the tabulated classical solids are built."""
    with pytest.raises(ValueError, match="Unknown classical"):
        build_classical("great dodecahedron")


@pytest.mark.parametrize("code", ["", "X4", "Y", "Uq", "4Y"])
def test_bad_augmentee_codes(code):
    """P1.6: augmentee codes are a kind letter and a side count."""
    with pytest.raises(ValueError, match="augmentee code"):
        parse_using(code)


def test_augmentee_must_fit_face():
    """P1.7: a cupola needs a face with twice its top's sides."""
    square = build_classical("cube").faces[0]
    with pytest.raises(ValueError, match="Cannot attach"):
        augmentee_points(square, "U3")
    with pytest.raises(ValueError, match="Cannot attach"):
        augmentee_points(square, "Y5")


def test_impossible_placement_raises():
    """P1.8: no two faces of a tetrahedron are opposite."""
    tetra = build_classical("tetrahedron")
    with pytest.raises(errors.UnknownSolidError, match="No placement"):
        choose_sites(tetra.faces, 2, "para", allow_touching=True)


# =============================================================================
# P2: IMPORTANT - Helper correctness
# =============================================================================

def test_parse_using():
    """P2.1: codes map to cap kinds."""
    assert parse_using("Y4") == (CAP_PYRAMID, 4)
    assert parse_using("U3") == (CAP_CUPOLA, 3)
    assert parse_using("R5") == (CAP_ROTUNDA, 5)


def test_normal_follows_right_hand_rule():
    """P2.2: counter-clockwise in the xy-plane points up."""
    square = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    assert np.allclose(get_normal(square), [0, 0, 1])
    assert np.allclose(get_normal(square[::-1]), [0, 0, -1])


def test_planarity():
    """P2.3: a lifted corner breaks planarity beyond the tolerance."""
    square = np.array([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)], dtype=float)
    assert is_planar(square)
    square[2, 2] = 0.1
    assert not is_planar(square)


def test_inverse_and_angle():
    """P2.4: opposite directions, right angles."""
    assert is_inverse([0, 0, 2], [0, 0, -1])
    assert not is_inverse([0, 0, 1], [0, 1, 0])
    assert np.isclose(angle_between([1, 0, 0], [0, 1, 0]), np.pi / 2)


def test_rotation_is_counter_clockwise():
    """P2.5: a quarter turn about z takes x to y."""
    rotated = rotate_about_axis([(1, 0, 0)], [0, 0, 1], np.pi / 2)
    assert np.allclose(rotated, [(0, 1, 0)])
    shifted = rotate_about_axis([(2, 0, 0)], [0, 0, 1], np.pi, origin=[1, 0, 0])
    assert np.allclose(shifted, [(0, 0, 0)])


def test_with_origin():
    """P2.6: functions act relative to the origin."""
    double = with_origin([1, 1, 1], lambda pts: pts * 2)
    assert np.allclose(double([(2, 2, 2)]), [(3, 3, 3)])


def test_projection_and_frame():
    """P2.7: projection drops the normal component; frame is orthonormal."""
    pts = project_onto_plane([(1, 2, 3)], np.zeros(3), [0, 0, 1])
    assert np.allclose(pts, [(1, 2, 0)])

    for normal in ([0, 0, 1], [1, 0, 0], [1, 1, 1]):
        u, v = local_frame(normal)
        assert np.isclose(np.dot(u, v), 0)
        assert np.isclose(np.dot(u, normal), 0)
        assert np.isclose(np.linalg.norm(np.cross(u, v)), 1)


def test_order_ccw_and_spacing():
    """P2.8: shuffled square corners come back in cyclic order."""
    corners = np.array([(1, 1, 0), (-1, -1, 0), (1, -1, 0), (-1, 1, 0)], dtype=float)
    order = order_ccw(corners, [0, 0, 1])
    ring = corners[order]
    assert np.allclose(get_normal(ring), [0, 0, 1])
    assert np.isclose(min_pairwise_distance(corners), 2.0)


# =============================================================================
# P3: Error taxonomy
# =============================================================================

@pytest.mark.parametrize("cls", [
    errors.MalformedMeshError, errors.DimensionMismatchError, errors.InvalidSpecsError,
    errors.UnclassifiableSpecsError, errors.UnknownSolidError,
    errors.NoMatchingTransitionError, errors.NoApplicableOperationError,
])
def test_errors_are_value_errors(cls):
    """P3.1: every error is a SolidError and a ValueError."""
    assert issubclass(cls, errors.SolidError)
    assert issubclass(cls, ValueError)
