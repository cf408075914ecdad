"""Global constants and configuration for the voxtrace package.

This module defines the core constants used throughout voxtrace, including
data types, the numerical tolerances of the voxel traversal and the JIT
decorator used for the CPU kernels.
"""

import numpy as np
from numba import njit

# ---------------------------------------------------------------------------
# Data Types
# ---------------------------------------------------------------------------

_DTYPE = np.float32
"""Default data type for weights and projection data (numpy.float32)."""

_INDEX_DTYPE = np.int32
"""Data type of stored voxel indices (numpy.int32)."""

# ---------------------------------------------------------------------------
# Ray Tracing Tolerances
# ---------------------------------------------------------------------------

# Differences are in grid units, so they have a natural scale of 1.
_SMALL_DIFFERENCE = 1e-5
"""Per-axis |delta| (voxel units) at or below which a line counts as parallel to that axis' planes."""

_PARALLEL_INCREMENT_FACTOR = 1e6
"""Multiple of the line length used as plane-crossing increment along a parallel axis."""

_AEND_SAFETY_FACTOR = 0.9999
"""Shrink factor for the last plane crossing, absorbs round-off in the traversal loop."""

_RESERVE_EXTRA_ENTRIES = 3
"""Entries reserved on top of the summed per-axis voxel spans."""

# ---------------------------------------------------------------------------
# JIT Decorators
# ---------------------------------------------------------------------------

# No fastmath: the traversal relies on exact comparison order for its
# tie-breaks, which reassociation could change.
_JIT_DECORATOR = njit(cache=True)
"""Numba CPU JIT decorator used for the ray tracing kernel."""

# ---------------------------------------------------------------------------
# Grid Clipping
# ---------------------------------------------------------------------------

_CLIP_MARGIN = 1e-3
"""Distance (voxel units) kept from the outer faces of the grid when clipping lines to it."""
