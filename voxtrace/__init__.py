# voxtrace/__init__.py
"""voxtrace - exact ray tracing through voxel grids for tomographic projection.

Siddon-style computation of the voxels a line of response crosses and the
chord length in each, with the projection-space addressing, viewgram
containers and projectors built on top of it.
"""

from .coordinates import (
    Point3D,
    VoxelIndex3D,
    Bin,
)

from .lor import (
    LineContributionEntry,
    LineContributionList,
)

from .ray_tracing import (
    ray_trace_voxels_on_cartesian_grid,
    trace,
)

from .geometry import (
    Scanner,
    ProjDataInfoCylindrical,
    ImageGeometry,
)

from .viewgram import Viewgram

from .projectors import RayTracingProjector

__version__ = '0.1.0'

__all__ = [
    'Point3D',
    'VoxelIndex3D',
    'Bin',
    'LineContributionEntry',
    'LineContributionList',
    'ray_trace_voxels_on_cartesian_grid',
    'trace',
    'Scanner',
    'ProjDataInfoCylindrical',
    'ImageGeometry',
    'Viewgram',
    'RayTracingProjector',
]
