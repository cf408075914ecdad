import numpy as np
import pytest
import torch

from voxtrace import Bin, ImageGeometry, ProjDataInfoCylindrical, RayTracingProjector, Viewgram


@pytest.fixture(scope="module")
def projector(proj_data_info, image_geometry):
    return RayTracingProjector(proj_data_info, image_geometry)


def test_central_lor_through_uniform_image(projector, image_geometry):
    # view 0, s = 0: the line runs along y at x index 7.5 and z index 2,
    # crossing all 16 rows of 4 mm voxels
    lor = projector.get_lor(Bin(0, 0, 1, 0))
    assert len(lor) == 16
    assert set(lor.indices[:, 0]) == {2}
    assert set(lor.indices[:, 2]) == {8}
    assert lor.total_weight() == pytest.approx(64.0)
    assert lor.forward_project(torch.ones(image_geometry.shape)) == pytest.approx(64.0)


def test_all_lor_voxels_are_inside_image(projector, proj_data_info, image_geometry):
    for proj_bin in (Bin(1, 3, 2, 5), Bin(-1, 7, 0, -8), Bin(0, 5, 3, 7)):
        lor = projector.get_lor(proj_bin)
        assert len(lor) > 0
        for entry in lor:
            assert image_geometry.is_in_grid(entry.voxel)


def test_forward_project_uniform_image(projector, proj_data_info, image_geometry):
    viewgram = Viewgram(proj_data_info, 0, 0)
    projector.forward_project(viewgram, torch.ones(image_geometry.shape))
    assert viewgram[1, 0] == pytest.approx(64.0)
    # symmetric about the centre of the grid
    assert viewgram[1, -3] == pytest.approx(viewgram[1, 3])
    # s = -32 mm runs along the boundary of the grid and is clipped away
    assert viewgram[1, -8] == 0.0
    assert float(viewgram.data[:, 1:].min()) > 0


def test_projectors_are_adjoint(projector, proj_data_info, image_geometry):
    generator = torch.Generator().manual_seed(1234)
    image = torch.rand(image_geometry.shape, generator=generator, dtype=torch.float64)
    lhs = 0.0
    back = torch.zeros(image_geometry.shape, dtype=torch.float64)
    for view_num, segment_num in ((0, 0), (3, 1), (6, -1)):
        projected = Viewgram(proj_data_info, view_num, segment_num)
        projector.forward_project(projected, image)
        values = torch.rand(projected.data.shape, generator=generator)
        measured = Viewgram.from_array(values, proj_data_info, view_num, segment_num)
        projector.back_project(back, measured)
        lhs += float((projected.data.double() * values.double()).sum())
    rhs = float((image * back).sum())
    assert lhs == pytest.approx(rhs, rel=1e-4)


def test_back_project_accumulates(projector, proj_data_info, image_geometry):
    viewgram = Viewgram(proj_data_info, 0, 0)
    viewgram[1, 0] = 1.0
    image = torch.zeros(image_geometry.shape)
    projector.back_project(image, viewgram)
    projector.back_project(image, viewgram)
    assert float(image.sum()) == pytest.approx(2 * 64.0)
    assert float(image[2, :, 8].sum()) == pytest.approx(2 * 64.0)


def test_sub_range_leaves_other_bins_untouched(projector, proj_data_info, image_geometry):
    viewgram = Viewgram(proj_data_info, 2, 0).fill(-1.0)
    projector.forward_project(viewgram, torch.ones(image_geometry.shape),
                              min_axial_pos_num=1, max_axial_pos_num=2,
                              min_tangential_pos_num=0, max_tangential_pos_num=0)
    data = viewgram.data.numpy()
    assert np.all(data[1:3, 8] > 0)
    mask = np.ones_like(data, dtype=bool)
    mask[1:3, 8] = False
    assert np.all(data[mask] == -1.0)


def test_sub_range_outside_viewgram_fails(projector, proj_data_info, image_geometry):
    viewgram = Viewgram(proj_data_info, 0, 1)
    with pytest.raises(ValueError):
        projector.forward_project(viewgram, torch.ones(image_geometry.shape),
                                  max_axial_pos_num=3)
    with pytest.raises(ValueError):
        projector.back_project(torch.zeros(image_geometry.shape), viewgram,
                               min_tangential_pos_num=-9)


def test_wrong_image_shape_fails(projector, proj_data_info):
    viewgram = Viewgram(proj_data_info, 0, 0)
    with pytest.raises(ValueError):
        projector.forward_project(viewgram, torch.ones(7, 16, 15))
    with pytest.raises(ValueError):
        projector.back_project(torch.zeros(16, 16), viewgram)


def test_viewgram_of_other_descriptor_fails(projector, scanner, image_geometry):
    other = ProjDataInfoCylindrical.from_span(scanner, 1, 1, 8, 16)
    viewgram = Viewgram(other, 0, 0)
    with pytest.raises(ValueError):
        projector.forward_project(viewgram, torch.ones(image_geometry.shape))


def test_lor_missing_image_is_empty(scanner):
    # an image far smaller than the ring misses the outermost LORs
    pdi = ProjDataInfoCylindrical.from_span(scanner, 1, 0, 8, 16)
    geometry = ImageGeometry((4, 4, 4), (4.0, 4.0, 4.0))
    lor = RayTracingProjector(pdi, geometry).get_lor(Bin(0, 0, 0, -8))
    assert len(lor) == 0
