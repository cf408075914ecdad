"""Numba kernels for ray tracing.

This subpackage contains the CPU JIT kernels behind the voxel traversal
engine.
"""

from .ray_tracing import (
    _ray_trace_kernel,
    _round_half_away,
)

__all__ = [
    '_ray_trace_kernel',
    '_round_half_away',
]
