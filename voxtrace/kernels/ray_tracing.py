"""Numba kernel for ray tracing through voxels on a Cartesian grid.

This module contains the CPU kernel implementing the Siddon method: the exact
intersection lengths of a line with the voxels of an axis-aligned grid,
visited in order along the line.
"""

import math

from ..constants import (
    _JIT_DECORATOR,
    _SMALL_DIFFERENCE,
    _PARALLEL_INCREMENT_FACTOR,
    _AEND_SAFETY_FACTOR,
)


@_JIT_DECORATOR
def _round_half_away(value):
    """Round to the nearest integer, halves away from zero (so -0.5 gives -1)."""
    if value >= 0.0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


# ============================================================================
# Siddon Traversal Kernel
# ============================================================================

@_JIT_DECORATOR
def _ray_trace_kernel(start, stop, voxel_size, normalisation_constant, out_idx, out_w):
    """Trace the line from `start` to `stop` through the voxels of the grid.

    Parameters
    ----------
    start : numpy.ndarray
        Start point ``(z, y, x)`` in voxel-index units, float64, shape (3,).
    stop : numpy.ndarray
        Stop point ``(z, y, x)`` in voxel-index units, float64, shape (3,).
    voxel_size : numpy.ndarray
        Physical voxel size ``(z, y, x)``, float64, shape (3,).
    normalisation_constant : float
        Factor applied to every chord length.
    out_idx : numpy.ndarray
        Output voxel indices, integer array of shape (capacity, 3).
    out_w : numpy.ndarray
        Output weights, float array of shape (capacity,).

    Returns
    -------
    int
        Number of entries written, or -1 when `capacity` was too small.

    Notes
    -----
    The line is parametrised in physical length units as
    ``p(a) = start + a * (stop - start) / d12`` where ``d12`` is the physical
    length of the segment times `normalisation_constant`, so every
    difference of ``a`` values is already a scaled chord length.

    Voxel ``i`` spans ``[i - 0.5, i + 0.5]``. Traversal begins at the
    entrance of the voxel containing `start` and ends at the exit of the
    voxel containing `stop`; both end voxels are therefore fully traversed.

    When two axes cross a plane at exactly the same ``a``, the order is
    fixed: ``ax < ay`` selects x if ``ax < az``, otherwise z; else y is
    selected if ``ay < az``, otherwise z. The voxel entered in between is
    recorded with zero weight.
    """
    capacity = out_w.shape[0]

    diff_z = stop[0] - start[0]
    diff_y = stop[1] - start[1]
    diff_x = stop[2] - start[2]

    # d12 is the distance between the two points; multiplying by the
    # normalisation constant just scales the coordinate system
    d12 = math.sqrt(
        (diff_z * voxel_size[0]) ** 2
        + (diff_y * voxel_size[1]) ** 2
        + (diff_x * voxel_size[2]) ** 2
    ) * normalisation_constant

    sign_z = 1 if diff_z >= 0.0 else -1
    sign_y = 1 if diff_y >= 0.0 else -1
    sign_x = 1 if diff_x >= 0.0 else -1

    # === PARALLEL LINES ===
    # A step inc_? in a moves the line by exactly one voxel along that axis.
    # Along a parallel axis it gets a huge increment instead.
    zero_diff_in_z = abs(diff_z) <= _SMALL_DIFFERENCE
    zero_diff_in_y = abs(diff_y) <= _SMALL_DIFFERENCE
    zero_diff_in_x = abs(diff_x) <= _SMALL_DIFFERENCE

    inc_z = d12 * _PARALLEL_INCREMENT_FACTOR if zero_diff_in_z else d12 / abs(diff_z)
    inc_y = d12 * _PARALLEL_INCREMENT_FACTOR if zero_diff_in_y else d12 / abs(diff_y)
    inc_x = d12 * _PARALLEL_INCREMENT_FACTOR if zero_diff_in_x else d12 / abs(diff_x)

    # === BOUNDING PLANES ===
    # 'left' edge of the voxel containing the start point
    round_start_z = _round_half_away(start[0])
    round_start_y = _round_half_away(start[1])
    round_start_x = _round_half_away(start[2])
    zmin = round_start_z - sign_z * 0.5
    ymin = round_start_y - sign_y * 0.5
    xmin = round_start_x - sign_x * 0.5
    # 'right' edge of the voxel containing the stop point
    zmax = _round_half_away(stop[0]) + sign_z * 0.5
    ymax = _round_half_away(stop[1]) + sign_y * 0.5
    xmax = _round_half_away(stop[2]) + sign_x * 0.5

    # Last plane crossings, taken slightly early so that round-off in the
    # accumulated a? values cannot cause one extra step.
    if zero_diff_in_z:
        azend = d12 * _PARALLEL_INCREMENT_FACTOR
    else:
        azend = (zmax - start[0]) * inc_z * sign_z * _AEND_SAFETY_FACTOR
    if zero_diff_in_y:
        ayend = d12 * _PARALLEL_INCREMENT_FACTOR
    else:
        ayend = (ymax - start[1]) * inc_y * sign_y * _AEND_SAFETY_FACTOR
    if zero_diff_in_x:
        axend = d12 * _PARALLEL_INCREMENT_FACTOR
    else:
        axend = (xmax - start[2]) * inc_x * sign_x * _AEND_SAFETY_FACTOR

    amax = min(axend, min(ayend, azend))

    # === TRAVERSAL INITIALIZATION ===
    iz = round_start_z
    iy = round_start_y
    ix = round_start_x

    # Previous plane crossings. For a parallel axis the true value is
    # -infinity; -inc_? is low enough not to affect the start value of a.
    az = -inc_z if zero_diff_in_z else (zmin - start[0]) * inc_z * sign_z
    ay = -inc_y if zero_diff_in_y else (ymin - start[1]) * inc_y * sign_y
    ax = -inc_x if zero_diff_in_x else (xmin - start[2]) * inc_x * sign_x

    a = max(ax, max(ay, az))

    # next plane crossings
    if zero_diff_in_x:
        ax = axend
    else:
        ax += inc_x
    if zero_diff_in_y:
        ay = ayend
    else:
        ay += inc_y
    if zero_diff_in_z:
        az = azend
    else:
        az += inc_z

    # === TRAVERSAL LOOP ===
    n = 0
    while a < amax:
        if n >= capacity:
            return -1
        out_idx[n, 0] = iz
        out_idx[n, 1] = iy
        out_idx[n, 2] = ix
        if ax < ay:
            if ax < az:
                # leaves the voxel through a yz-plane
                out_w[n] = ax - a
                a = ax
                ax += inc_x
                ix += sign_x
            else:
                # leaves the voxel through an xy-plane
                out_w[n] = az - a
                a = az
                az += inc_z
                iz += sign_z
        elif ay < az:
            # leaves the voxel through an xz-plane
            out_w[n] = ay - a
            a = ay
            ay += inc_y
            iy += sign_y
        else:
            out_w[n] = az - a
            a = az
            az += inc_z
            iz += sign_z
        n += 1

    return n
