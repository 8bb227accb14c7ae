import math

import numpy as np
import pytest

from usv_tracking.common import PrincipalAxis, RotatedBox
from usv_tracking.pose import PoseEstimator, principal_axis


def _angle_error(a, b):
    """Distance between two undirected axis angles."""
    d = abs(a - b) % math.pi
    return min(d, math.pi - d)


def _rectangle_outline(cx, cy, length, width, angle_deg, per_edge=25):
    """Points along the edges of a rotated length × width rectangle."""
    theta = math.radians(angle_deg)
    u = np.array([math.cos(theta), math.sin(theta)])
    v = np.array([-math.sin(theta), math.cos(theta)])
    c = np.array([cx, cy])
    corners = [
        c + u * length / 2 + v * width / 2,
        c - u * length / 2 + v * width / 2,
        c - u * length / 2 - v * width / 2,
        c + u * length / 2 - v * width / 2,
    ]
    pts = []
    for i in range(4):
        a, b = corners[i], corners[(i + 1) % 4]
        for t in np.linspace(0.0, 1.0, per_edge):
            pts.append(a + (b - a) * t)
    return np.array(pts, dtype=np.float32).reshape(-1, 1, 2)


def test_axis_follows_long_side_of_axis_aligned_rectangle():
    pts = _rectangle_outline(200, 150, 100, 50, 0)
    box, axis = PoseEstimator("min_area_rect").estimate(pts)

    assert box is not None
    assert axis.size == pytest.approx(50.0, abs=0.5)
    assert _angle_error(axis.orientation, 0.0) < 0.01
    assert sorted([axis.start[0], axis.end[0]]) == pytest.approx([150.0, 250.0], abs=0.5)


def test_axis_follows_long_side_of_rotated_rectangle():
    pts = _rectangle_outline(320, 240, 100, 50, 30)
    _, axis = PoseEstimator("min_area_rect").estimate(pts)

    assert axis.size == pytest.approx(50.0, abs=0.5)
    assert _angle_error(axis.orientation, math.radians(30)) < 0.01


def test_ellipse_fit_agrees_on_orientation():
    pts = _rectangle_outline(320, 240, 100, 50, -40)
    box, axis = PoseEstimator("ellipse").estimate(pts)

    assert box.center == pytest.approx((320.0, 240.0), abs=0.5)
    assert _angle_error(axis.orientation, math.radians(-40)) < 0.02


def test_four_point_boundary_has_no_pose():
    square = np.array([[[0, 0]], [[0, 10]], [[10, 10]], [[10, 0]]], dtype=np.int32)
    assert PoseEstimator().estimate(square) == (None, None)


def test_unknown_fit_is_rejected():
    with pytest.raises(ValueError):
        PoseEstimator("convex_hull")


def test_square_uses_first_edge():
    axis = principal_axis(RotatedBox((50.0, 50.0), (10.0, 10.0), 0.0))
    assert axis.size == pytest.approx(5.0)


def test_orientation_is_folded_into_half_turn():
    axis = PrincipalAxis((10.0, 0.0), (0.0, 10.0))
    assert axis.orientation == pytest.approx(3 * math.pi / 4)
    assert axis.length == pytest.approx(math.hypot(10, 10))


def test_min_area_rect_keeps_heading_of_thin_bar():
    xs = np.arange(0, 150, 10)
    pts = np.array(
        [[[x, 100]] for x in xs] + [[[x, 101]] for x in xs[::-1]], dtype=np.int32
    )
    _, axis = PoseEstimator("min_area_rect").estimate(pts)

    assert _angle_error(axis.orientation, 0.0) < 0.05
    assert axis.size == pytest.approx(70.0, abs=1.0)
