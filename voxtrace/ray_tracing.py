"""Voxel traversal engine.

Python entry points around the Siddon kernel in
:mod:`voxtrace.kernels.ray_tracing`. The engine is a pure function of its
inputs: it only writes into the caller's :class:`LineContributionList`, so
independent lines can be traced concurrently as long as each caller owns
its own list.
"""

import numpy as np

from .constants import _DTYPE, _INDEX_DTYPE, _RESERVE_EXTRA_ENTRIES
from .kernels import _ray_trace_kernel
from .lor import LineContributionList
from .utils import _as_point_array


def _estimate_num_entries(start, stop):
    """Upper estimate of the number of voxels between `start` and `stop`."""
    return int(np.sum(np.ceil(np.abs(stop - start)))) + _RESERVE_EXTRA_ENTRIES


def _trace(start, stop, voxel_size, normalisation_constant, capacity):
    """Run the kernel, doubling the output buffers until the line fits.

    Returns
    -------
    indices : numpy.ndarray
        Voxel indices, shape (n, 3).
    weights : numpy.ndarray
        Weights, shape (n,).
    """
    capacity = max(int(capacity), 1)
    while True:
        out_idx = np.empty((capacity, 3), dtype=_INDEX_DTYPE)
        out_w = np.empty(capacity, dtype=_DTYPE)
        n = _ray_trace_kernel(start, stop, voxel_size, normalisation_constant, out_idx, out_w)
        if n >= 0:
            return out_idx[:n], out_w[:n]
        capacity *= 2


def ray_trace_voxels_on_cartesian_grid(lor, start_point, stop_point, voxel_size,
                                       normalisation_constant=1.0):
    """Append the voxels crossed by a line, with their chord lengths, to `lor`.

    Parameters
    ----------
    lor : LineContributionList
        List the entries are appended to. Existing entries are kept.
    start_point : Point3D or array-like
        Start of the line ``(z, y, x)`` in voxel-index units.
    stop_point : Point3D or array-like
        End of the line ``(z, y, x)`` in voxel-index units.
    voxel_size : Point3D or array-like
        Physical voxel size ``(z, y, x)``; only used to weight distances.
    normalisation_constant : float, optional
        Factor applied to every chord length (default: 1.0).

    Returns
    -------
    LineContributionList
        `lor`, for chaining.

    Raises
    ------
    ValueError
        If a point does not have three components or
        `normalisation_constant` is negative.

    Notes
    -----
    Voxel ``i`` spans ``[i - 0.5, i + 0.5]`` along each axis. The voxels
    containing the start and the stop point are traversed completely: the
    weights add up to the chord of the line inside the box spanned by these
    two voxels, times `normalisation_constant`. An axis along which the
    points differ by at most 1e-5 voxels is treated as parallel and never
    stepped along. A zero-length line yields no entries.

    Coordinates are not checked for being finite.

    Examples
    --------
    >>> lor = ray_trace_voxels_on_cartesian_grid(
    ...     LineContributionList(), (0, 0, 0), (3, 0, 0), (1, 1, 1))
    >>> [tuple(e.voxel) for e in lor]
    [(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)]
    """
    start = _as_point_array(start_point, "start_point")
    stop = _as_point_array(stop_point, "stop_point")
    size = _as_point_array(voxel_size, "voxel_size")
    normalisation_constant = float(normalisation_constant)
    if normalisation_constant < 0:
        raise ValueError(
            f"normalisation_constant must be non-negative, got {normalisation_constant}"
        )

    capacity = _estimate_num_entries(start, stop)
    lor.reserve(len(lor) + capacity)
    indices, weights = _trace(start, stop, size, normalisation_constant, capacity)
    lor.extend(indices, weights)
    return lor


def trace(start_point, stop_point, voxel_size, normalisation_constant=1.0, proj_bin=None):
    """Trace a line into a new :class:`LineContributionList`.

    See :func:`ray_trace_voxels_on_cartesian_grid` for the conventions.
    """
    return ray_trace_voxels_on_cartesian_grid(
        LineContributionList(proj_bin=proj_bin), start_point, stop_point, voxel_size,
        normalisation_constant,
    )
