"""Ray tracing forward and back projection, one viewgram at a time.

For every bin of a viewgram the projector builds the line of response on
the detector cylinder, converts it to voxel-index units of the image grid,
clips it to the grid and traces it. The resulting line contribution list is
applied to a ``(D, H, W)`` image tensor.
"""

import logging

import torch

from .coordinates import Bin
from .lor import LineContributionList
from .ray_tracing import ray_trace_voxels_on_cartesian_grid
from .utils import _validate_3d_image

logger = logging.getLogger(__name__)


class RayTracingProjector:
    """Forward and back projector built on exact ray tracing.

    Parameters
    ----------
    proj_data_info : ProjDataInfoCylindrical
        Projection-space addressing of the data.
    image_geometry : ImageGeometry
        Grid of the images projected from or into.

    Notes
    -----
    Weights are chord lengths in mm (normalisation constant 1). Lines are
    traced independently and the projector holds no per-line state, so
    separate instances (or separate viewgrams) can be processed in parallel
    by the caller.

    Examples
    --------
    >>> projector = RayTracingProjector(proj_data_info, image_geometry)
    >>> viewgram = Viewgram(proj_data_info, view_num=0, segment_num=0)
    >>> projector.forward_project(viewgram, torch.ones(image_geometry.shape))
    """

    def __init__(self, proj_data_info, image_geometry):
        self.proj_data_info = proj_data_info
        self.image_geometry = image_geometry

    def get_lor(self, proj_bin: Bin) -> LineContributionList:
        """Voxels and chord lengths (mm) of the LOR of `proj_bin` inside the image.

        Returns an empty list if the LOR misses the image.
        """
        point1, point2 = self.proj_data_info.get_lor_endpoints(proj_bin)
        start = self.image_geometry.physical_to_index(point1)
        stop = self.image_geometry.physical_to_index(point2)
        lor = LineContributionList(proj_bin=proj_bin)
        clipped = self.image_geometry.clip_segment(start, stop)
        if clipped is None:
            return lor
        ray_trace_voxels_on_cartesian_grid(lor, clipped[0], clipped[1],
                                           self.image_geometry.voxel_size, 1.0)
        lor.keep_inside(self.image_geometry.shape)
        return lor

    def _check_viewgram(self, viewgram):
        if viewgram.proj_data_info is not self.proj_data_info:
            raise ValueError("Viewgram was built for a different projection data descriptor")

    @staticmethod
    def _bins(viewgram, min_axial_pos_num, max_axial_pos_num,
              min_tangential_pos_num, max_tangential_pos_num):
        """Bins of `viewgram` within the requested ranges (defaults: all)."""
        lo_ax = viewgram.min_axial_pos_num if min_axial_pos_num is None else min_axial_pos_num
        hi_ax = viewgram.max_axial_pos_num if max_axial_pos_num is None else max_axial_pos_num
        lo_tang = (viewgram.min_tangential_pos_num if min_tangential_pos_num is None
                   else min_tangential_pos_num)
        hi_tang = (viewgram.max_tangential_pos_num if max_tangential_pos_num is None
                   else max_tangential_pos_num)
        if lo_ax < viewgram.min_axial_pos_num or hi_ax > viewgram.max_axial_pos_num:
            raise ValueError(
                f"Axial range [{lo_ax}, {hi_ax}] exceeds viewgram range "
                f"[{viewgram.min_axial_pos_num}, {viewgram.max_axial_pos_num}]")
        if lo_tang < viewgram.min_tangential_pos_num or hi_tang > viewgram.max_tangential_pos_num:
            raise ValueError(
                f"Tangential range [{lo_tang}, {hi_tang}] exceeds viewgram range "
                f"[{viewgram.min_tangential_pos_num}, {viewgram.max_tangential_pos_num}]")
        for axial_pos_num in range(lo_ax, hi_ax + 1):
            for tangential_pos_num in range(lo_tang, hi_tang + 1):
                yield Bin(viewgram.segment_num, viewgram.view_num,
                          axial_pos_num, tangential_pos_num)

    def forward_project(self, viewgram, image: torch.Tensor,
                        min_axial_pos_num=None, max_axial_pos_num=None,
                        min_tangential_pos_num=None, max_tangential_pos_num=None):
        """Project `image` into `viewgram`.

        Parameters
        ----------
        viewgram : Viewgram
            Output, built for this projector's descriptor. Bins inside the
            requested ranges are overwritten, others are left untouched.
        image : torch.Tensor
            Image of shape ``image_geometry.shape``.
        min_axial_pos_num, max_axial_pos_num : int, optional
            Axial range to project (default: the whole viewgram).
        min_tangential_pos_num, max_tangential_pos_num : int, optional
            Tangential range to project (default: the whole viewgram).

        Returns
        -------
        Viewgram
            `viewgram`.

        Raises
        ------
        ValueError
            If the image shape, the viewgram's descriptor or a range does not
            match.
        """
        _validate_3d_image(image, self.image_geometry.shape)
        self._check_viewgram(viewgram)
        logger.debug("Forward projecting view %d, segment %d",
                     viewgram.view_num, viewgram.segment_num)
        for proj_bin in self._bins(viewgram, min_axial_pos_num, max_axial_pos_num,
                              min_tangential_pos_num, max_tangential_pos_num):
            lor = self.get_lor(proj_bin)
            viewgram[proj_bin.axial_pos_num, proj_bin.tangential_pos_num] = lor.forward_project(image)
        return viewgram

    def back_project(self, image: torch.Tensor, viewgram,
                     min_axial_pos_num=None, max_axial_pos_num=None,
                     min_tangential_pos_num=None, max_tangential_pos_num=None):
        """Accumulate the back projection of `viewgram` into `image` in place.

        Takes the same range arguments as :meth:`forward_project`.

        Returns
        -------
        torch.Tensor
            `image`.
        """
        _validate_3d_image(image, self.image_geometry.shape)
        self._check_viewgram(viewgram)
        logger.debug("Back projecting view %d, segment %d",
                     viewgram.view_num, viewgram.segment_num)
        for proj_bin in self._bins(viewgram, min_axial_pos_num, max_axial_pos_num,
                              min_tangential_pos_num, max_tangential_pos_num):
            value = viewgram[proj_bin.axial_pos_num, proj_bin.tangential_pos_num]
            if value == 0:
                continue
            self.get_lor(proj_bin).back_project(image, value)
        return image
