import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from voxtrace import Bin, LineContributionList, Point3D, VoxelIndex3D, trace
from voxtrace import ray_trace_voxels_on_cartesian_grid
from voxtrace.ray_tracing import _trace

UNIT = Point3D(1.0, 1.0, 1.0)


def voxels(lor):
    return [tuple(e.voxel) for e in lor]


def extended_chord(start, stop, voxel_size, k=1.0):
    """Chord of the line inside the box spanned by the start and stop voxels."""
    start, stop = np.asarray(start, float), np.asarray(stop, float)
    diff = stop - start
    t_entry, t_exit = -np.inf, np.inf
    for axis in range(3):
        if abs(diff[axis]) <= 1e-5:
            continue
        sign = 1 if diff[axis] >= 0 else -1
        lo = np.floor(start[axis] + 0.5) - sign * 0.5
        hi = np.floor(stop[axis] + 0.5) + sign * 0.5
        t_entry = max(t_entry, (lo - start[axis]) / diff[axis])
        t_exit = min(t_exit, (hi - start[axis]) / diff[axis])
    return (t_exit - t_entry) * np.linalg.norm(diff * np.asarray(voxel_size)) * k


# ---------------------------------------------------------------------------
# Concrete scenarios
# ---------------------------------------------------------------------------

def test_axis_aligned_line_covers_end_voxels():
    lor = trace(Point3D(0, 0, 0), Point3D(3, 0, 0), UNIT)
    assert voxels(lor) == [(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)]
    assert_allclose(lor.weights, [1.0, 1.0, 1.0, 1.0])


def test_diagonal_tie_goes_through_z_branch():
    # az == ay at every crossing: the z step wins, and the voxel entered in
    # between gets a zero weight
    lor = trace(Point3D(0, 0, 0), Point3D(1, 1, 0), UNIT)
    assert voxels(lor) == [(0, 0, 0), (1, 0, 0), (1, 1, 0)]
    assert_allclose(lor.weights, [math.sqrt(2), 0.0, math.sqrt(2)], rtol=1e-6, atol=1e-6)


def test_diagonal_tie_in_transaxial_plane_goes_through_y_branch():
    # ax == ay: not ax < ay, and ay < az because z is parallel
    lor = trace(Point3D(0, 0, 0), Point3D(0, 1, 1), UNIT)
    assert voxels(lor) == [(0, 0, 0), (0, 1, 0), (0, 1, 1)]
    assert_allclose(lor.weights, [math.sqrt(2), 0.0, math.sqrt(2)], rtol=1e-6, atol=1e-6)


def test_segment_inside_one_voxel_gives_one_entry():
    start, stop = Point3D(0.1, 0.2, -0.3), Point3D(0.3, 0.1, 0.2)
    lor = trace(start, stop, UNIT, 2.0)
    assert voxels(lor) == [(0, 0, 0)]
    assert_allclose(lor.weights[0], extended_chord(start, stop, UNIT, 2.0), rtol=1e-5)


def test_axis_aligned_segment_inside_one_voxel_counts_whole_voxel():
    lor = trace(Point3D(0, 0, 0), Point3D(0, 0, 0.2), Point3D(1.0, 1.0, 2.5))
    assert voxels(lor) == [(0, 0, 0)]
    assert_allclose(lor.weights, [2.5])


def test_voxel_size_and_normalisation_scale_weights():
    lor = trace(Point3D(0, 0, 0), Point3D(0, 0, 2), Point3D(1.0, 1.0, 2.5), 0.5)
    assert voxels(lor) == [(0, 0, 0), (0, 0, 1), (0, 0, 2)]
    assert_allclose(lor.weights, [1.25, 1.25, 1.25])


def test_negative_direction():
    lor = trace(Point3D(0, 0, 2), Point3D(0, 0, -1), UNIT)
    assert voxels(lor) == [(0, 0, 2), (0, 0, 1), (0, 0, 0), (0, 0, -1)]
    assert_allclose(lor.weights, [1.0] * 4)


def test_half_coordinates_round_away_from_zero():
    # -0.5 lies in voxel -1 and 0.5 in voxel 1
    lor = trace(Point3D(0, 0, -0.5), Point3D(0, 0, 0.5), UNIT)
    assert voxels(lor) == [(0, 0, -1), (0, 0, 0), (0, 0, 1)]


# ---------------------------------------------------------------------------
# Degenerate axes
# ---------------------------------------------------------------------------

def test_zero_length_line_terminates_without_entries():
    lor = trace(Point3D(1.2, 3.4, 5.6), Point3D(1.2, 3.4, 5.6), UNIT)
    assert len(lor) == 0


def test_zero_normalisation_gives_no_entries():
    lor = trace(Point3D(0, 0, 0), Point3D(0, 0, 3), UNIT, 0.0)
    assert len(lor) == 0


def test_difference_below_tolerance_is_parallel():
    # the stop point lies in the next z voxel, but the z difference is
    # within the 1e-5 tolerance so z is never stepped along
    lor = trace(Point3D(0.499996, 0, 0), Point3D(0.500004, 0, 2.8), UNIT)
    assert voxels(lor) == [(0, 0, 0), (0, 0, 1), (0, 0, 2), (0, 0, 3)]
    assert_allclose(lor.weights, [1.0] * 4, rtol=1e-5)


def test_difference_above_tolerance_is_traced():
    lor = trace(Point3D(0.49998, 0, 0), Point3D(0.50002, 0, 2.8), UNIT)
    assert voxels(lor) == [(0, 0, 0), (0, 0, 1), (1, 0, 1), (1, 0, 2), (1, 0, 3)]


@pytest.mark.parametrize("delta", [
    (0.0, 0.0, 7.1),
    (0.0, -6.3, 0.0),
    (4.4, 0.0, 0.0),
    (0.0, 2.6, -3.1),
    (-2.2, 0.0, 5.7),
])
def test_lines_parallel_to_planes_never_step_along_parallel_axes(delta):
    start = Point3D(0.2, 0.1, -0.3)
    stop = Point3D(*(s + d for s, d in zip(start, delta)))
    lor = trace(start, stop, UNIT)
    parallel = [axis for axis in range(3) if delta[axis] == 0.0]
    assert parallel
    for axis in parallel:
        assert set(lor.indices[:, axis]) == {0}
    assert_allclose(lor.total_weight(), extended_chord(start, stop, UNIT), rtol=1e-5)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

GENERIC_LINES = [
    (Point3D(0.2, 1.3, -0.7), Point3D(4.6, -2.1, 3.9), UNIT),
    (Point3D(-3.3, 0.4, 2.2), Point3D(1.1, 6.8, -4.6), Point3D(2.0, 1.5, 1.5)),
    (Point3D(10.1, -7.2, 0.3), Point3D(-1.4, 3.3, 12.6), Point3D(2.03125, 2.08626, 2.08626)),
]


@pytest.mark.parametrize("start,stop,voxel_size", GENERIC_LINES)
def test_weights_are_non_negative(start, stop, voxel_size):
    lor = trace(start, stop, voxel_size)
    assert len(lor) > 0
    assert np.all(lor.weights >= 0)


@pytest.mark.parametrize("start,stop,voxel_size", GENERIC_LINES)
def test_consecutive_voxels_are_face_neighbours(start, stop, voxel_size):
    lor = trace(start, stop, voxel_size)
    steps = np.abs(np.diff(lor.indices.astype(np.int64), axis=0))
    assert np.all(steps.sum(axis=1) == 1)
    assert len({tuple(v) for v in lor.indices}) == len(lor)


@pytest.mark.parametrize("start,stop,voxel_size", GENERIC_LINES)
def test_total_weight_is_extended_chord(start, stop, voxel_size):
    lor = trace(start, stop, voxel_size, 1.7)
    assert_allclose(lor.total_weight(), extended_chord(start, stop, voxel_size, 1.7), rtol=1e-5)


@pytest.mark.parametrize("start,stop,voxel_size", GENERIC_LINES)
def test_reversed_line_gives_reversed_entries(start, stop, voxel_size):
    forward = trace(start, stop, voxel_size)
    backward = trace(stop, start, voxel_size)
    assert voxels(backward) == voxels(forward)[::-1]
    assert_allclose(backward.weights, forward.weights[::-1], rtol=1e-4, atol=1e-5)


def test_first_and_last_voxel_contain_end_points():
    start, stop, voxel_size = GENERIC_LINES[0]
    lor = trace(start, stop, voxel_size)
    assert lor[0].voxel == VoxelIndex3D(0, 1, -1)
    assert lor[-1].voxel == VoxelIndex3D(5, -2, 4)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def test_appends_to_existing_entries():
    lor = LineContributionList()
    lor.append((9, 9, 9), 0.25)
    ray_trace_voxels_on_cartesian_grid(lor, (0, 0, 0), (0, 0, 1), UNIT)
    assert voxels(lor) == [(9, 9, 9), (0, 0, 0), (0, 0, 1)]


def test_small_buffer_is_grown():
    start = np.array([0.0, 0.0, 0.0])
    stop = np.array([0.0, 0.0, 12.0])
    indices, weights = _trace(start, stop, np.ones(3), 1.0, 1)
    assert indices.shape == (13, 3)
    assert_allclose(weights, np.ones(13))


def test_negative_normalisation_is_rejected():
    with pytest.raises(ValueError):
        trace(Point3D(0, 0, 0), Point3D(0, 0, 1), UNIT, -1.0)


def test_point_with_wrong_length_is_rejected():
    with pytest.raises(ValueError):
        trace((0, 0), (0, 0, 1), UNIT)


def test_trace_carries_projection_bin():
    lor = trace((0, 0, 0), (0, 0, 1), UNIT, proj_bin=Bin(1, 2, 3, -4))
    assert lor.proj_bin == Bin(1, 2, 3, -4)
    assert trace((0, 0, 0), (0, 0, 1), UNIT).proj_bin is None
