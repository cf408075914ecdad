import math
import numpy as np
import torch
import matplotlib.pyplot as plt
from voxtrace import (ImageGeometry, ProjDataInfoCylindrical, RayTracingProjector,
                      Scanner, Viewgram)


def ellipsoid_phantom(image_geometry):
    """Warm ellipsoid with a hot and a cold sphere, in (z, y, x) order."""
    nz, ny, nx = image_geometry.shape
    z, y, x = np.meshgrid(np.arange(nz), np.arange(ny), np.arange(nx), indexing="ij")
    origin = image_geometry.origin
    size = image_geometry.voxel_size
    z = origin.z + z * size.z
    y = origin.y + y * size.y
    x = origin.x + x * size.x

    phantom = np.zeros(image_geometry.shape, dtype=np.float32)
    spheres = [
        # (z0, y0, x0, rz, ry, rx, value)
        (0.0, 0.0, 0.0, 80.0, 150.0, 200.0, 1.0),
        (20.0, 40.0, -60.0, 25.0, 25.0, 25.0, 3.0),
        (-20.0, -50.0, 70.0, 30.0, 30.0, 30.0, -1.0),
    ]
    for (z0, y0, x0, rz, ry, rx, value) in spheres:
        inside = ((z - z0) / rz) ** 2 + ((y - y0) / ry) ** 2 + ((x - x0) / rx) ** 2 <= 1.0
        phantom[inside] += value
    return np.clip(phantom, 0.0, None)


def main():
    scanner = Scanner.get_scanner_from_name("Siemens mMR")
    # direct planes only
    proj_data_info = ProjDataInfoCylindrical.from_span(
        scanner, span=1, max_ring_diff=0, num_views=252, num_tangential_poss=344,
        arc_corrected=False)
    # 4.2 mm transaxial voxels
    image_geometry = ImageGeometry.from_proj_data_info(proj_data_info, zoom=0.5)
    projector = RayTracingProjector(proj_data_info, image_geometry)
    print(proj_data_info)
    print(image_geometry)

    image = torch.from_numpy(ellipsoid_phantom(image_geometry))

    view_nums = [0, 63, 126]
    viewgrams = []
    for view_num in view_nums:
        viewgram = Viewgram(proj_data_info, view_num, segment_num=0)
        projector.forward_project(viewgram, image)
        viewgrams.append(viewgram)
        print(f"View {view_num} ({math.degrees(view_num * math.pi / 252):.1f} deg): "
              f"total {viewgram.data.sum().item():.1f}")

    back_projection = torch.zeros(image_geometry.shape)
    for viewgram in viewgrams:
        projector.back_project(back_projection, viewgram)

    central_slice = image_geometry.shape[0] // 2
    plt.figure(figsize=(15, 8))
    for i, viewgram in enumerate(viewgrams):
        plt.subplot(2, 3, i + 1)
        plt.imshow(viewgram.data.numpy(), cmap="gray", aspect="auto")
        plt.title(f"Viewgram, view {viewgram.view_num}")
        plt.xlabel("Tangential position")
        plt.ylabel("Axial position")
    plt.subplot(2, 3, 4)
    plt.imshow(image[central_slice].numpy(), cmap="gray")
    plt.title("Phantom, central slice")
    plt.axis("off")
    plt.subplot(2, 3, 5)
    plt.imshow(back_projection[central_slice].numpy(), cmap="gray")
    plt.title("Back projection of three views")
    plt.axis("off")
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
