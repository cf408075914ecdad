"""Sparse per-line contribution lists.

A :class:`LineContributionList` holds the voxels one line of response passes
through and the weight of each, in traversal order. It is filled by the ray
tracer and applied to image tensors by the projectors.
"""

from typing import NamedTuple, Optional

import numpy as np
import torch

from .constants import _DTYPE, _INDEX_DTYPE
from .coordinates import Bin, VoxelIndex3D


class LineContributionEntry(NamedTuple):
    """One ``(voxel, weight)`` pair of a line contribution list."""

    voxel: VoxelIndex3D
    weight: float


class LineContributionList:
    """Ordered, growable list of ``(voxel, weight)`` pairs for one line.

    Storage is a pair of numpy buffers (voxel indices of shape (capacity, 3)
    and weights of shape (capacity,)) that grow geometrically; `reserve` can
    be used to avoid reallocation. The list also carries a `scale_factor`
    which is applied whenever the list is used against image data, and
    optionally the :class:`~voxtrace.coordinates.Bin` it was computed for.

    Parameters
    ----------
    proj_bin : Bin, optional
        Projection bin this list belongs to.
    scale_factor : float, optional
        Multiplier applied to all weights when projecting (default: 1.0).

    Examples
    --------
    >>> lor = LineContributionList()
    >>> lor.append((0, 0, 0), 0.5)
    >>> lor.append((0, 0, 1), 1.0)
    >>> len(lor), lor.total_weight()
    (2, 1.5)
    """

    def __init__(self, proj_bin: Optional[Bin] = None, scale_factor: float = 1.0):
        self.proj_bin = proj_bin
        self.scale_factor = float(scale_factor)
        self._indices = np.empty((0, 3), dtype=_INDEX_DTYPE)
        self._weights = np.empty(0, dtype=_DTYPE)
        self._size = 0

    # ------------------------------------------------------------------
    # Capacity
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._weights.shape[0]

    def reserve(self, capacity: int) -> None:
        """Make room for at least `capacity` entries without reallocating."""
        if capacity <= self.capacity:
            return
        indices = np.empty((capacity, 3), dtype=_INDEX_DTYPE)
        weights = np.empty(capacity, dtype=_DTYPE)
        indices[:self._size] = self._indices[:self._size]
        weights[:self._size] = self._weights[:self._size]
        self._indices = indices
        self._weights = weights

    def _grow_for(self, extra: int) -> None:
        needed = self._size + extra
        if needed > self.capacity:
            self.reserve(max(needed, 2 * self.capacity))

    # ------------------------------------------------------------------
    # Filling
    # ------------------------------------------------------------------

    def append(self, voxel, weight: float) -> None:
        """Append one entry.

        Raises
        ------
        ValueError
            If `weight` is negative.
        """
        if weight < 0:
            raise ValueError(f"Weights must be non-negative, got {weight}")
        self._grow_for(1)
        self._indices[self._size] = voxel
        self._weights[self._size] = weight
        self._size += 1

    def extend(self, indices, weights) -> None:
        """Append a block of entries.

        Parameters
        ----------
        indices : array-like
            Voxel indices, shape (n, 3), ordered ``(z, y, x)``.
        weights : array-like
            Weights, shape (n,).
        """
        indices = np.asarray(indices, dtype=_INDEX_DTYPE).reshape(-1, 3)
        weights = np.asarray(weights, dtype=_DTYPE).reshape(-1)
        if indices.shape[0] != weights.shape[0]:
            raise ValueError(
                f"Got {indices.shape[0]} voxel indices but {weights.shape[0]} weights"
            )
        if np.any(weights < 0):
            raise ValueError("Weights must be non-negative")
        n = weights.shape[0]
        self._grow_for(n)
        self._indices[self._size:self._size + n] = indices
        self._weights[self._size:self._size + n] = weights
        self._size += n

    def clear(self) -> None:
        """Remove all entries, keeping the allocated capacity."""
        self._size = 0

    def keep_inside(self, shape) -> None:
        """Drop entries whose voxel lies outside a grid of the given `shape`.

        Relative order of the remaining entries is preserved.
        """
        indices = self._indices[:self._size]
        upper = np.asarray(shape, dtype=np.int64)
        mask = np.all((indices >= 0) & (indices < upper), axis=1)
        kept = int(mask.sum())
        self._indices[:kept] = indices[mask]
        self._weights[:kept] = self._weights[:self._size][mask]
        self._size = kept

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, i: int) -> LineContributionEntry:
        if i < 0:
            i += self._size
        if not 0 <= i < self._size:
            raise IndexError("LineContributionList index out of range")
        z, y, x = self._indices[i]
        return LineContributionEntry(VoxelIndex3D(int(z), int(y), int(x)), float(self._weights[i]))

    def __iter__(self):
        for i in range(self._size):
            yield self[i]

    @property
    def indices(self) -> np.ndarray:
        """Read-only view of the voxel indices, shape (n, 3)."""
        view = self._indices[:self._size]
        view.flags.writeable = False
        return view

    @property
    def weights(self) -> np.ndarray:
        """Read-only view of the unscaled weights, shape (n,)."""
        view = self._weights[:self._size]
        view.flags.writeable = False
        return view

    def scaled_weights(self) -> np.ndarray:
        """Weights multiplied by `scale_factor` (a new array)."""
        return self.weights * _DTYPE(self.scale_factor)

    def total_weight(self) -> float:
        """Sum of all weights times `scale_factor`."""
        return float(self.weights.sum(dtype=np.float64)) * self.scale_factor

    def __imul__(self, factor):
        self.scale_factor *= float(factor)
        return self

    # ------------------------------------------------------------------
    # Use against image data
    # ------------------------------------------------------------------

    def _torch_operands(self, image):
        device = image.device
        idx = torch.as_tensor(self._indices[:self._size].astype(np.int64), device=device)
        w = torch.as_tensor(self.scaled_weights(), device=device).to(dtype=image.dtype)
        return (idx[:, 0], idx[:, 1], idx[:, 2]), w

    def forward_project(self, image: torch.Tensor) -> float:
        """Return the weighted sum of `image` over the voxels of this list.

        All voxels must lie inside `image` (see `keep_inside`).
        """
        index, w = self._torch_operands(image)
        return float((image[index] * w).sum())

    def back_project(self, image: torch.Tensor, value: float) -> torch.Tensor:
        """Accumulate ``value * weight`` into `image` in place and return it."""
        index, w = self._torch_operands(image)
        image.index_put_(index, w * value, accumulate=True)
        return image

    def __repr__(self):
        return (f"LineContributionList(proj_bin={self.proj_bin}, size={self._size}, "
                f"scale_factor={self.scale_factor})")
