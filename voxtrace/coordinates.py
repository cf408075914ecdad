"""Coordinate and bin types shared by the voxtrace modules.

All 3-D quantities are ordered ``(z, y, x)``: axial first, then the two
transaxial coordinates. This matches the ``(D, H, W)`` layout of image
tensors.
"""

from typing import NamedTuple


class Point3D(NamedTuple):
    """Three real coordinates ``(z, y, x)``.

    Used for start and stop points of a line (in voxel-index units or in mm)
    and for per-axis voxel sizes.
    """

    z: float
    y: float
    x: float


class VoxelIndex3D(NamedTuple):
    """Integer grid cell ``(z, y, x)``; valid only with respect to a grid."""

    z: int
    y: int
    x: int


class Bin(NamedTuple):
    """Projection-space bin coordinates."""

    segment_num: int
    view_num: int
    axial_pos_num: int
    tangential_pos_num: int
