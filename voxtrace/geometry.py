"""Scanner, projection-data and image geometry.

This module provides the geometry collaborators of the ray tracer: a
description of a cylindrical PET scanner, the projection-space addressing
of its data (segments, views, axial and tangential positions) including the
physical line of response of every bin, and the Cartesian image grid with
its physical/index conversions.

All lengths are in mm, all angles in radians, all 3-D points ``(z, y, x)``
with z along the scanner axis and the origin at the scanner centre.
"""

import logging
import math
import warnings
from typing import Optional, Sequence, Tuple

import numpy as np

from .constants import _CLIP_MARGIN, _SMALL_DIFFERENCE
from .coordinates import Bin, Point3D, VoxelIndex3D
from .utils import _as_point_array, _as_point3d

logger = logging.getLogger(__name__)


# ============================================================================
# Scanner Description
# ============================================================================

class Scanner:
    """Geometry of a cylindrical scanner.

    Parameters
    ----------
    num_rings : int
        Number of detector rings.
    num_detectors_per_ring : int
        Number of crystals in one ring.
    inner_ring_radius : float
        Radius of the inner crystal surface, in mm.
    average_depth_of_interaction : float
        Mean interaction depth inside the crystals, in mm.
    ring_spacing : float
        Distance between the centres of adjacent rings, in mm.
    default_bin_size : float
        Tangential bin size of arc-corrected data, in mm.
    view_offset : float, optional
        Angle of view 0, in radians (default: 0.0).
    max_num_non_arccorrected_bins : int, optional
        Default number of tangential positions of non arc-corrected data.
    default_num_arccorrected_bins : int, optional
        Default number of tangential positions of arc-corrected data.
    num_axial_blocks_per_bucket, num_transaxial_blocks_per_bucket : int, optional
        Block layout of one bucket.
    num_axial_crystals_per_block, num_transaxial_crystals_per_block : int, optional
        Crystal layout of one block.
    num_axial_crystals_per_singles_unit, num_transaxial_crystals_per_singles_unit : int, optional
        Crystal layout of one singles unit.
    num_detector_layers : int, optional
        Number of crystal layers (default: 1).
    name : str, optional
        Human readable scanner name.

    Raises
    ------
    ValueError
        If counts or lengths are not positive, or the rings and detectors do
        not divide into whole buckets.
    """

    def __init__(self, num_rings, num_detectors_per_ring, inner_ring_radius,
                 average_depth_of_interaction, ring_spacing, default_bin_size,
                 view_offset=0.0, max_num_non_arccorrected_bins=None,
                 default_num_arccorrected_bins=None,
                 num_axial_blocks_per_bucket=1, num_transaxial_blocks_per_bucket=1,
                 num_axial_crystals_per_block=1, num_transaxial_crystals_per_block=1,
                 num_axial_crystals_per_singles_unit=None,
                 num_transaxial_crystals_per_singles_unit=None,
                 num_detector_layers=1, name="unknown"):
        self.name = name
        self.num_rings = int(num_rings)
        self.num_detectors_per_ring = int(num_detectors_per_ring)
        self.inner_ring_radius = float(inner_ring_radius)
        self.average_depth_of_interaction = float(average_depth_of_interaction)
        self.ring_spacing = float(ring_spacing)
        self.default_bin_size = float(default_bin_size)
        self.view_offset = float(view_offset)
        self.max_num_non_arccorrected_bins = int(
            max_num_non_arccorrected_bins if max_num_non_arccorrected_bins is not None
            else self.num_detectors_per_ring // 2)
        self.default_num_arccorrected_bins = int(
            default_num_arccorrected_bins if default_num_arccorrected_bins is not None
            else self.max_num_non_arccorrected_bins)
        self.num_axial_blocks_per_bucket = int(num_axial_blocks_per_bucket)
        self.num_transaxial_blocks_per_bucket = int(num_transaxial_blocks_per_bucket)
        self.num_axial_crystals_per_block = int(num_axial_crystals_per_block)
        self.num_transaxial_crystals_per_block = int(num_transaxial_crystals_per_block)
        self.num_axial_crystals_per_singles_unit = int(
            num_axial_crystals_per_singles_unit if num_axial_crystals_per_singles_unit is not None
            else self.num_axial_crystals_per_bucket)
        self.num_transaxial_crystals_per_singles_unit = int(
            num_transaxial_crystals_per_singles_unit
            if num_transaxial_crystals_per_singles_unit is not None
            else self.num_transaxial_crystals_per_bucket)
        self.num_detector_layers = int(num_detector_layers)
        self.check_consistency()

    @property
    def num_axial_crystals_per_bucket(self):
        return self.num_axial_blocks_per_bucket * self.num_axial_crystals_per_block

    @property
    def num_transaxial_crystals_per_bucket(self):
        return self.num_transaxial_blocks_per_bucket * self.num_transaxial_crystals_per_block

    @property
    def num_axial_buckets(self):
        return self.num_rings // self.num_axial_crystals_per_bucket

    @property
    def num_transaxial_buckets(self):
        return self.num_detectors_per_ring // self.num_transaxial_crystals_per_bucket

    @property
    def effective_ring_radius(self):
        """Ring radius at the average depth of interaction."""
        return self.inner_ring_radius + self.average_depth_of_interaction

    def check_consistency(self):
        """Validate the parameters, raising ValueError on the first problem."""
        counts = {
            'num_rings': self.num_rings,
            'num_detectors_per_ring': self.num_detectors_per_ring,
            'num_axial_blocks_per_bucket': self.num_axial_blocks_per_bucket,
            'num_transaxial_blocks_per_bucket': self.num_transaxial_blocks_per_bucket,
            'num_axial_crystals_per_block': self.num_axial_crystals_per_block,
            'num_transaxial_crystals_per_block': self.num_transaxial_crystals_per_block,
            'num_axial_crystals_per_singles_unit': self.num_axial_crystals_per_singles_unit,
            'num_transaxial_crystals_per_singles_unit':
                self.num_transaxial_crystals_per_singles_unit,
            'num_detector_layers': self.num_detector_layers,
            'max_num_non_arccorrected_bins': self.max_num_non_arccorrected_bins,
            'default_num_arccorrected_bins': self.default_num_arccorrected_bins,
        }
        for key, value in counts.items():
            if value <= 0:
                raise ValueError(f"Scanner {self.name}: {key} must be positive, got {value}")
        for key in ('inner_ring_radius', 'ring_spacing', 'default_bin_size'):
            if getattr(self, key) <= 0:
                raise ValueError(
                    f"Scanner {self.name}: {key} must be positive, got {getattr(self, key)}")
        if self.average_depth_of_interaction < 0:
            raise ValueError(f"Scanner {self.name}: average_depth_of_interaction must be >= 0")
        if self.num_rings % self.num_axial_crystals_per_bucket != 0:
            raise ValueError(
                f"Scanner {self.name}: {self.num_rings} rings do not divide into buckets of "
                f"{self.num_axial_crystals_per_bucket} axial crystals")
        if self.num_detectors_per_ring % self.num_transaxial_crystals_per_bucket != 0:
            raise ValueError(
                f"Scanner {self.name}: {self.num_detectors_per_ring} detectors per ring do not "
                f"divide into buckets of {self.num_transaxial_crystals_per_bucket} crystals")

    @classmethod
    def get_scanner_from_name(cls, name):
        """Return a new instance of a known scanner.

        Raises
        ------
        ValueError
            If `name` is not a known scanner.
        """
        key = name.strip().lower().replace(' ', '').replace('-', '')
        for aliases, params in _KNOWN_SCANNERS:
            if key in aliases:
                return cls(**params)
        raise ValueError(f"Unknown scanner '{name}'")

    def __repr__(self):
        return (f"Scanner(name={self.name!r}, num_rings={self.num_rings}, "
                f"num_detectors_per_ring={self.num_detectors_per_ring}, "
                f"inner_ring_radius={self.inner_ring_radius})")


_KNOWN_SCANNERS = [
    (('mmr', 'siemensmmr', 'biographmmr'), dict(
        name='Siemens mMR',
        num_rings=64,
        num_detectors_per_ring=504,
        inner_ring_radius=328.0,
        average_depth_of_interaction=7.0,
        ring_spacing=4.0625,
        default_bin_size=2.08626,
        view_offset=0.0,
        max_num_non_arccorrected_bins=344,
        default_num_arccorrected_bins=344,
        num_axial_blocks_per_bucket=2,
        num_transaxial_blocks_per_bucket=1,
        num_axial_crystals_per_block=8,
        num_transaxial_crystals_per_block=9,
        num_axial_crystals_per_singles_unit=16,
        num_transaxial_crystals_per_singles_unit=9,
        num_detector_layers=1,
    )),
]


# ============================================================================
# Projection-Space Addressing
# ============================================================================

class ProjDataInfoCylindrical:
    """Projection-space addressing for a cylindrical scanner.

    Segments are numbered symmetrically around 0 and each covers a range of
    ring differences. Within a segment, axial positions start at 0. Views run
    from 0 to ``num_views - 1`` over half a turn and tangential positions from
    ``-(n // 2)`` to ``-(n // 2) + n - 1``.

    Parameters
    ----------
    scanner : Scanner
        Scanner the data were acquired on. Shared, never modified.
    min_ring_diff, max_ring_diff : sequence of int
        Ring difference range of each segment, from the lowest segment number
        to the highest.
    num_views : int
        Number of views.
    num_tangential_poss : int
        Number of tangential positions.
    arc_corrected : bool, optional
        Whether tangential positions are equidistant in mm (default: True).
    tangential_sampling : float, optional
        Tangential bin size of arc-corrected data, in mm. Defaults to the
        scanner's default bin size.

    Raises
    ------
    ValueError
        If the ring difference table is malformed or a count is not positive.

    Notes
    -----
    A segment covering a single ring difference ``d`` has ``num_rings - |d|``
    axial positions spaced by the ring spacing. A segment covering several
    ring differences has ``2 * (num_rings - |avg|) - 1`` positions spaced by
    half the ring spacing, ``avg`` being its average ring difference.
    """

    def __init__(self, scanner, min_ring_diff, max_ring_diff, num_views,
                 num_tangential_poss, arc_corrected=True, tangential_sampling=None):
        self._scanner = scanner
        min_ring_diff = [int(d) for d in min_ring_diff]
        max_ring_diff = [int(d) for d in max_ring_diff]
        if len(min_ring_diff) != len(max_ring_diff) or not min_ring_diff:
            raise ValueError(
                f"Need the same non-zero number of minimum and maximum ring differences, "
                f"got {len(min_ring_diff)} and {len(max_ring_diff)}")
        if num_views <= 0 or num_tangential_poss <= 0:
            raise ValueError(
                f"num_views and num_tangential_poss must be positive, "
                f"got {num_views} and {num_tangential_poss}")

        num_axial_poss = []
        sampling_in_m = []
        previous_max = None
        for lo, hi in zip(min_ring_diff, max_ring_diff):
            if lo > hi:
                raise ValueError(f"Ring difference range [{lo}, {hi}] is empty")
            if previous_max is not None and lo <= previous_max:
                raise ValueError("Ring difference ranges must be increasing and non-overlapping")
            if max(abs(lo), abs(hi)) >= scanner.num_rings:
                raise ValueError(
                    f"Ring difference range [{lo}, {hi}] exceeds the {scanner.num_rings} rings")
            if lo == hi:
                num_axial_poss.append(scanner.num_rings - abs(lo))
                sampling_in_m.append(scanner.ring_spacing)
            else:
                if (lo + hi) % 2 != 0:
                    raise ValueError(
                        f"Ring difference range [{lo}, {hi}] has no integer average")
                num_axial_poss.append(2 * (scanner.num_rings - abs((lo + hi) // 2)) - 1)
                sampling_in_m.append(scanner.ring_spacing / 2)
            previous_max = hi

        self._min_ring_diff = min_ring_diff
        self._max_ring_diff = max_ring_diff
        self._num_axial_poss = num_axial_poss
        self._sampling_in_m = sampling_in_m
        self._min_segment_num = -(len(min_ring_diff) // 2)
        self._num_views = int(num_views)
        self._num_tangential_poss = int(num_tangential_poss)
        self._arc_corrected = bool(arc_corrected)
        self._tangential_sampling = float(
            tangential_sampling if tangential_sampling is not None else scanner.default_bin_size)
        if not self._arc_corrected and self._num_tangential_poss > scanner.max_num_non_arccorrected_bins:
            warnings.warn(
                f"{self._num_tangential_poss} tangential positions exceed the "
                f"{scanner.max_num_non_arccorrected_bins} non-arc-corrected bins of "
                f"{scanner.name}; outer bins may not intersect the detector ring",
                UserWarning,
                stacklevel=2,
            )

        logger.debug(
            "Projection data for %s: segments %d..%d, %d views, %d tangential positions, "
            "arc corrected: %s", scanner.name, self.min_segment_num, self.max_segment_num,
            self._num_views, self._num_tangential_poss, self._arc_corrected)

    @classmethod
    def from_span(cls, scanner, span, max_ring_diff, num_views, num_tangential_poss,
                  arc_corrected=True, tangential_sampling=None):
        """Build the descriptor for axially compressed data with the given `span`.

        Segment 0 covers ring differences ``-(span - 1) / 2 .. (span - 1) / 2``
        and every further segment the next `span` ring differences.

        Raises
        ------
        ValueError
            If `span` is not a positive odd number or `max_ring_diff` does
            not end on a segment boundary.
        """
        if span <= 0 or span % 2 != 1:
            raise ValueError(f"span must be a positive odd number, got {span}")
        half = (span - 1) // 2
        if max_ring_diff < half or (max_ring_diff - half) % span != 0:
            raise ValueError(
                f"max_ring_diff {max_ring_diff} does not end on a segment boundary for span {span}")
        num_positive_segments = (max_ring_diff - half) // span
        positive = [(half + 1 + k * span, half + (k + 1) * span)
                    for k in range(num_positive_segments)]
        negative = [(-hi, -lo) for lo, hi in reversed(positive)]
        ranges = negative + [(-half, half)] + positive
        return cls(scanner, [lo for lo, _ in ranges], [hi for _, hi in ranges],
                   num_views, num_tangential_poss, arc_corrected=arc_corrected,
                   tangential_sampling=tangential_sampling)

    # ------------------------------------------------------------------
    # Index ranges
    # ------------------------------------------------------------------

    @property
    def scanner(self):
        return self._scanner

    @property
    def arc_corrected(self):
        return self._arc_corrected

    @property
    def tangential_sampling(self):
        return self._tangential_sampling

    @property
    def num_segments(self):
        return len(self._num_axial_poss)

    @property
    def min_segment_num(self):
        return self._min_segment_num

    @property
    def max_segment_num(self):
        return self._min_segment_num + self.num_segments - 1

    @property
    def num_views(self):
        return self._num_views

    @property
    def min_view_num(self):
        return 0

    @property
    def max_view_num(self):
        return self._num_views - 1

    @property
    def num_tangential_poss(self):
        return self._num_tangential_poss

    @property
    def min_tangential_pos_num(self):
        return -(self._num_tangential_poss // 2)

    @property
    def max_tangential_pos_num(self):
        return self.min_tangential_pos_num + self._num_tangential_poss - 1

    def check_segment_num(self, segment_num):
        if not self.min_segment_num <= segment_num <= self.max_segment_num:
            raise ValueError(
                f"Segment {segment_num} outside range "
                f"[{self.min_segment_num}, {self.max_segment_num}]")

    def check_view_num(self, view_num):
        if not self.min_view_num <= view_num <= self.max_view_num:
            raise ValueError(
                f"View {view_num} outside range [{self.min_view_num}, {self.max_view_num}]")

    def check_bin(self, proj_bin):
        """Raise ValueError unless every coordinate of `proj_bin` is in range."""
        self.check_segment_num(proj_bin.segment_num)
        self.check_view_num(proj_bin.view_num)
        lo = self.get_min_axial_pos_num(proj_bin.segment_num)
        hi = self.get_max_axial_pos_num(proj_bin.segment_num)
        if not lo <= proj_bin.axial_pos_num <= hi:
            raise ValueError(
                f"Axial position {proj_bin.axial_pos_num} outside range [{lo}, {hi}] "
                f"of segment {proj_bin.segment_num}")
        if not self.min_tangential_pos_num <= proj_bin.tangential_pos_num <= self.max_tangential_pos_num:
            raise ValueError(
                f"Tangential position {proj_bin.tangential_pos_num} outside range "
                f"[{self.min_tangential_pos_num}, {self.max_tangential_pos_num}]")

    def _segment_index(self, segment_num):
        self.check_segment_num(segment_num)
        return segment_num - self._min_segment_num

    def get_num_axial_poss(self, segment_num):
        return self._num_axial_poss[self._segment_index(segment_num)]

    def get_min_axial_pos_num(self, segment_num):
        self.check_segment_num(segment_num)
        return 0

    def get_max_axial_pos_num(self, segment_num):
        return self.get_num_axial_poss(segment_num) - 1

    def get_min_ring_difference(self, segment_num):
        return self._min_ring_diff[self._segment_index(segment_num)]

    def get_max_ring_difference(self, segment_num):
        return self._max_ring_diff[self._segment_index(segment_num)]

    def get_average_ring_difference(self, segment_num):
        i = self._segment_index(segment_num)
        return (self._min_ring_diff[i] + self._max_ring_diff[i]) / 2

    def get_sampling_in_m(self, segment_num):
        """Axial distance between consecutive axial positions, in mm."""
        return self._sampling_in_m[self._segment_index(segment_num)]

    # ------------------------------------------------------------------
    # Bin geometry
    # ------------------------------------------------------------------

    def get_phi(self, proj_bin):
        """Angle of the LOR normal in the transaxial plane."""
        return self._scanner.view_offset + proj_bin.view_num * math.pi / self._num_views

    def get_s(self, proj_bin):
        """Signed distance of the LOR to the scanner axis, in mm."""
        if self._arc_corrected:
            return proj_bin.tangential_pos_num * self._tangential_sampling
        angular_increment = math.pi / self._scanner.num_detectors_per_ring
        return self._scanner.effective_ring_radius * math.sin(
            proj_bin.tangential_pos_num * angular_increment)

    def get_m(self, proj_bin):
        """Axial position of the LOR midpoint relative to the scanner centre, in mm."""
        num_axial_poss = self.get_num_axial_poss(proj_bin.segment_num)
        return ((proj_bin.axial_pos_num - (num_axial_poss - 1) / 2)
                * self.get_sampling_in_m(proj_bin.segment_num))

    def get_tantheta(self, proj_bin):
        """Tangent of the LOR's angle with the transaxial plane."""
        delta_z = self.get_average_ring_difference(proj_bin.segment_num) * self._scanner.ring_spacing
        half_chord = self._half_chord(self.get_s(proj_bin))
        return delta_z / (2 * half_chord)

    def _half_chord(self, s):
        radius = self._scanner.effective_ring_radius
        if abs(s) >= radius:
            raise ValueError(
                f"LOR at distance {s} mm does not intersect the detector ring of "
                f"radius {radius} mm")
        return math.sqrt(radius * radius - s * s)

    def get_lor_endpoints(self, proj_bin) -> Tuple[Point3D, Point3D]:
        """Return the two detector points of the LOR of `proj_bin`.

        Parameters
        ----------
        proj_bin : Bin
            Projection bin.

        Returns
        -------
        (Point3D, Point3D)
            Physical ``(z, y, x)`` points in mm where the LOR meets the
            detector cylinder (at the average depth of interaction).

        Raises
        ------
        ValueError
            If `proj_bin` is out of range.
        """
        self.check_bin(proj_bin)
        phi = self.get_phi(proj_bin)
        s = self.get_s(proj_bin)
        m = self.get_m(proj_bin)
        half_chord = self._half_chord(s)
        half_delta_z = (self.get_average_ring_difference(proj_bin.segment_num)
                        * self._scanner.ring_spacing / 2)

        cos_phi, sin_phi = math.cos(phi), math.sin(phi)
        # s = x cos(phi) + y sin(phi), the LOR runs along (-sin(phi), cos(phi))
        centre_x, centre_y = s * cos_phi, s * sin_phi
        point1 = Point3D(m - half_delta_z,
                         centre_y - half_chord * cos_phi,
                         centre_x + half_chord * sin_phi)
        point2 = Point3D(m + half_delta_z,
                         centre_y + half_chord * cos_phi,
                         centre_x - half_chord * sin_phi)
        return point1, point2

    def __repr__(self):
        return (f"ProjDataInfoCylindrical(scanner={self._scanner.name!r}, "
                f"segments={self.min_segment_num}..{self.max_segment_num}, "
                f"num_views={self._num_views}, "
                f"num_tangential_poss={self._num_tangential_poss}, "
                f"arc_corrected={self._arc_corrected})")


# ============================================================================
# Image Grid
# ============================================================================

class ImageGeometry:
    """Cartesian voxel grid of the reconstructed image.

    Parameters
    ----------
    dimensions : sequence of int
        Number of voxels ``(nz, ny, nx)``.
    voxel_size : sequence of float
        Voxel size ``(z, y, x)`` in mm.
    origin : sequence of float, optional
        Physical position of the centre of voxel ``(0, 0, 0)``. By default
        the grid is centred on the scanner centre.

    Raises
    ------
    ValueError
        If a dimension or voxel size is not positive.
    """

    def __init__(self, dimensions: Sequence[int], voxel_size, origin=None):
        dims = tuple(int(n) for n in dimensions)
        if len(dims) != 3 or any(n <= 0 for n in dims):
            raise ValueError(f"dimensions must be 3 positive integers, got {dimensions}")
        size = _as_point_array(voxel_size, "voxel_size")
        if np.any(size <= 0):
            raise ValueError(f"voxel_size must be positive, got {tuple(size)}")
        if origin is None:
            origin_arr = -(np.asarray(dims, dtype=np.float64) - 1) / 2 * size
        else:
            origin_arr = _as_point_array(origin, "origin")
        self._shape = dims
        self._voxel_size = size
        self._origin = origin_arr

    @classmethod
    def from_proj_data_info(cls, proj_data_info, zoom=1.0, num_xy=None):
        """Default grid for `proj_data_info`.

        Transaxial voxels are the tangential sampling divided by `zoom`,
        axial voxels half the ring spacing, covering all rings.
        """
        scanner = proj_data_info.scanner
        xy_size = proj_data_info.tangential_sampling / zoom
        if num_xy is None:
            num_xy = int(math.ceil(proj_data_info.num_tangential_poss * zoom))
        dims = (2 * scanner.num_rings - 1, num_xy, num_xy)
        return cls(dims, (scanner.ring_spacing / 2, xy_size, xy_size))

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._shape

    @property
    def voxel_size(self) -> Point3D:
        return _as_point3d(self._voxel_size)

    @property
    def origin(self) -> Point3D:
        return _as_point3d(self._origin)

    def physical_to_index(self, point) -> Point3D:
        """Convert a physical point (mm) to continuous voxel-index units."""
        arr = _as_point_array(point)
        return _as_point3d((arr - self._origin) / self._voxel_size)

    def index_to_physical(self, index) -> Point3D:
        """Convert (continuous) voxel-index coordinates to a physical point (mm)."""
        arr = _as_point_array(index, "index")
        return _as_point3d(arr * self._voxel_size + self._origin)

    def is_in_grid(self, voxel) -> bool:
        return all(0 <= int(i) < n for i, n in zip(voxel, self._shape))

    def voxel_containing(self, index) -> VoxelIndex3D:
        """Voxel containing a point given in voxel-index units.

        Points on a voxel boundary belong to the voxel away from zero, as in
        the ray tracer.
        """
        arr = _as_point_array(index, "index")
        z, y, x = (int(v) for v in np.sign(arr) * np.floor(np.abs(arr) + 0.5))
        return VoxelIndex3D(z, y, x)

    def clip_segment(self, start, stop) -> Optional[Tuple[Point3D, Point3D]]:
        """Clip a segment given in voxel-index units to the grid.

        The grid box is shrunk by a small margin so that the clipped end
        points lie strictly inside the first and last voxels.

        Returns
        -------
        (Point3D, Point3D) or None
            The clipped end points, or None if the segment misses the grid.
        """
        start = _as_point_array(start, "start")
        stop = _as_point_array(stop, "stop")
        direction = stop - start
        t_min, t_max = 0.0, 1.0
        for axis in range(3):
            lo = -0.5 + _CLIP_MARGIN
            hi = self._shape[axis] - 0.5 - _CLIP_MARGIN
            if abs(direction[axis]) <= _SMALL_DIFFERENCE:
                if start[axis] < lo or start[axis] > hi:
                    return None
                continue
            t1 = (lo - start[axis]) / direction[axis]
            t2 = (hi - start[axis]) / direction[axis]
            t_min = max(t_min, min(t1, t2))
            t_max = min(t_max, max(t1, t2))
        if t_min >= t_max:
            return None
        return _as_point3d(start + t_min * direction), _as_point3d(start + t_max * direction)

    def __repr__(self):
        return (f"ImageGeometry(dimensions={self._shape}, "
                f"voxel_size={tuple(float(v) for v in self._voxel_size)}, "
                f"origin={tuple(float(v) for v in self._origin)})")
