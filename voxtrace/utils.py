"""Utility classes and helper functions for the voxtrace package.

This module provides the numpy to torch dtype map, conversion of point-like
inputs to the arrays the kernels expect, and image tensor validation.
"""

import numpy as np
import torch

from .coordinates import Point3D

_NP_TO_TORCH = {
    np.float32: torch.float32,
    np.float64: torch.float64,
}


# ============================================================================
# Point Conversion
# ============================================================================

def _as_point_array(point, name="point"):
    """Convert a ``(z, y, x)`` point-like to a float64 numpy array of shape (3,).

    Raises
    ------
    ValueError
        If `point` does not have exactly three components.
    """
    arr = np.ascontiguousarray(point, dtype=np.float64).reshape(-1)
    if arr.shape[0] != 3:
        raise ValueError(f"{name} must have 3 components (z, y, x), got {arr.shape[0]}")
    return arr


def _as_point3d(arr):
    return Point3D(float(arr[0]), float(arr[1]), float(arr[2]))


# ============================================================================
# Image Validation
# ============================================================================

def _validate_3d_image(tensor, expected_shape):
    """Validate an image tensor against the grid it is supposed to live on.

    Parameters
    ----------
    tensor : torch.Tensor
        Image tensor, expected in (D, H, W) = (z, y, x) order.
    expected_shape : tuple of int
        Grid dimensions ``(nz, ny, nx)``.

    Raises
    ------
    ValueError
        If `tensor` is not a 3D tensor of shape `expected_shape`.
    """
    if not isinstance(tensor, torch.Tensor):
        raise ValueError(f"Expected a torch.Tensor image, got {type(tensor).__name__}")
    shape = tuple(tensor.shape)
    if len(shape) != 3:
        raise ValueError(f"Expected 3D tensor, got {len(shape)}D")
    if shape != tuple(expected_shape):
        raise ValueError(
            f"Image shape mismatch: expected (D, H, W) = {tuple(expected_shape)}, "
            f"but tensor has shape {shape}. Please ensure your image was created "
            f"for the same image geometry."
        )
