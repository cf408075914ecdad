"""Shared fixtures: a small cylindrical scanner and its default image grid."""

import pytest

from voxtrace import ImageGeometry, ProjDataInfoCylindrical, Scanner


@pytest.fixture(scope="module")
def scanner():
    return Scanner(
        num_rings=4, num_detectors_per_ring=32, inner_ring_radius=50.0,
        average_depth_of_interaction=0.0, ring_spacing=4.0, default_bin_size=4.0,
        num_axial_crystals_per_block=4, num_transaxial_crystals_per_block=4,
        name='test',
    )


@pytest.fixture(scope="module")
def proj_data_info(scanner):
    # segments -1..1, 8 views, tangential positions -8..7
    return ProjDataInfoCylindrical.from_span(scanner, 1, 1, 8, 16)


@pytest.fixture(scope="module")
def image_geometry(proj_data_info):
    # (7, 16, 16) voxels of (2, 4, 4) mm
    return ImageGeometry.from_proj_data_info(proj_data_info)
