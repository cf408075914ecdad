"""Viewgram: projection data of one (view, segment) pair.

A viewgram is a 2-D tensor addressed by ``(axial_pos_num,
tangential_pos_num)``. Its index ranges are fixed at construction to the
ranges the projection-data descriptor reports for its segment, and it keeps
a shared, read-only reference to that descriptor.
"""

import numpy as np
import torch

from .constants import _DTYPE
from .utils import _NP_TO_TORCH

_TORCH_DTYPE = _NP_TO_TORCH[_DTYPE]


class Viewgram:
    """Projection data for a fixed view and segment.

    Parameters
    ----------
    proj_data_info : ProjDataInfoCylindrical
        Descriptor fixing the index ranges. Shared, never modified.
    view_num : int
        View number.
    segment_num : int
        Segment number.
    device : str or torch.device, optional
        Device of the zero-filled data tensor (default: 'cpu').

    Raises
    ------
    ValueError
        If `view_num` or `segment_num` is outside the descriptor's range.

    Examples
    --------
    >>> viewgram = Viewgram(proj_data_info, view_num=0, segment_num=0)
    >>> viewgram[viewgram.min_axial_pos_num, 0] = 1.0
    >>> viewgram.get_empty_copy().data.sum().item()
    0.0
    """

    def __init__(self, proj_data_info, view_num, segment_num, device='cpu'):
        proj_data_info.check_view_num(view_num)
        proj_data_info.check_segment_num(segment_num)
        data = torch.zeros(
            (proj_data_info.get_num_axial_poss(segment_num), proj_data_info.num_tangential_poss),
            dtype=_TORCH_DTYPE, device=device)
        self._init(data, proj_data_info, view_num, segment_num,
                   proj_data_info.get_min_axial_pos_num(segment_num),
                   proj_data_info.min_tangential_pos_num)

    def _init(self, data, proj_data_info, view_num, segment_num,
              min_axial_pos_num, min_tangential_pos_num):
        self._data = data
        self._proj_data_info = proj_data_info
        self._view_num = int(view_num)
        self._segment_num = int(segment_num)
        self._min_axial_pos_num = int(min_axial_pos_num)
        self._min_tangential_pos_num = int(min_tangential_pos_num)

    @classmethod
    def from_array(cls, array, proj_data_info, view_num, segment_num,
                   min_axial_pos_num=None, min_tangential_pos_num=None):
        """Wrap existing data as the viewgram of (`view_num`, `segment_num`).

        Parameters
        ----------
        array : numpy.ndarray or torch.Tensor
            2-D data of shape (num axial positions, num tangential positions).
            Tensors are used without copying and keep their dtype; other
            input is converted to float32.
        proj_data_info : ProjDataInfoCylindrical
            Descriptor the data must match.
        view_num, segment_num : int
            View and segment of the data.
        min_axial_pos_num, min_tangential_pos_num : int, optional
            Index of the first row and column of `array`. Default to the
            descriptor's minima.

        Raises
        ------
        ValueError
            If view or segment is out of range, or the index ranges of
            `array` differ from the descriptor's.
        """
        proj_data_info.check_view_num(view_num)
        proj_data_info.check_segment_num(segment_num)
        if isinstance(array, torch.Tensor):
            data = array
        else:
            data = torch.as_tensor(np.asarray(array), dtype=_TORCH_DTYPE)
        if data.dim() != 2:
            raise ValueError(f"Expected 2D viewgram data, got {data.dim()}D")
        if min_axial_pos_num is None:
            min_axial_pos_num = proj_data_info.get_min_axial_pos_num(segment_num)
        if min_tangential_pos_num is None:
            min_tangential_pos_num = proj_data_info.min_tangential_pos_num

        actual = (int(min_axial_pos_num), int(min_axial_pos_num) + data.shape[0] - 1,
                  int(min_tangential_pos_num), int(min_tangential_pos_num) + data.shape[1] - 1)
        expected = (proj_data_info.get_min_axial_pos_num(segment_num),
                    proj_data_info.get_max_axial_pos_num(segment_num),
                    proj_data_info.min_tangential_pos_num,
                    proj_data_info.max_tangential_pos_num)
        if actual != expected:
            raise ValueError(
                f"Viewgram index ranges mismatch for view {view_num}, segment {segment_num}: "
                f"expected axial [{expected[0]}, {expected[1]}] and tangential "
                f"[{expected[2]}, {expected[3]}], got axial [{actual[0]}, {actual[1]}] "
                f"and tangential [{actual[2]}, {actual[3]}]")

        viewgram = cls.__new__(cls)
        viewgram._init(data, proj_data_info, view_num, segment_num,
                       min_axial_pos_num, min_tangential_pos_num)
        return viewgram

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------

    @property
    def proj_data_info(self):
        return self._proj_data_info

    @property
    def view_num(self):
        return self._view_num

    @property
    def segment_num(self):
        return self._segment_num

    @property
    def data(self) -> torch.Tensor:
        return self._data

    @property
    def num_axial_poss(self):
        return self._data.shape[0]

    @property
    def min_axial_pos_num(self):
        return self._min_axial_pos_num

    @property
    def max_axial_pos_num(self):
        return self._min_axial_pos_num + self.num_axial_poss - 1

    @property
    def num_tangential_poss(self):
        return self._data.shape[1]

    @property
    def min_tangential_pos_num(self):
        return self._min_tangential_pos_num if self.num_axial_poss > 0 else 0

    @property
    def max_tangential_pos_num(self):
        return self.min_tangential_pos_num + self.num_tangential_poss - 1

    def _offset(self, key):
        axial_pos_num, tangential_pos_num = key
        row = axial_pos_num - self._min_axial_pos_num
        col = tangential_pos_num - self._min_tangential_pos_num
        if not (0 <= row < self.num_axial_poss and 0 <= col < self.num_tangential_poss):
            raise IndexError(
                f"({axial_pos_num}, {tangential_pos_num}) outside viewgram ranges "
                f"[{self.min_axial_pos_num}, {self.max_axial_pos_num}] x "
                f"[{self.min_tangential_pos_num}, {self.max_tangential_pos_num}]")
        return row, col

    def __getitem__(self, key):
        return float(self._data[self._offset(key)])

    def __setitem__(self, key, value):
        self._data[self._offset(key)] = value

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------

    def get_empty_copy(self):
        """New zero-filled viewgram with the same view, segment and ranges."""
        copy = Viewgram.__new__(Viewgram)
        copy._init(torch.zeros_like(self._data), self._proj_data_info, self._view_num,
                   self._segment_num, self._min_axial_pos_num, self._min_tangential_pos_num)
        return copy

    def fill(self, value):
        self._data.fill_(value)
        return self

    def to(self, device):
        """Viewgram sharing addressing with this one, data on `device`."""
        moved = Viewgram.__new__(Viewgram)
        moved._init(self._data.to(device), self._proj_data_info,
                    self._view_num, self._segment_num, self._min_axial_pos_num,
                    self._min_tangential_pos_num)
        return moved

    def __repr__(self):
        return (f"Viewgram(view_num={self._view_num}, segment_num={self._segment_num}, "
                f"axial=[{self.min_axial_pos_num}, {self.max_axial_pos_num}], "
                f"tangential=[{self.min_tangential_pos_num}, {self.max_tangential_pos_num}])")
