# binning/binner_nd.py

import numpy as np

from core.ndarray import NDArray
from binning.locks import StripedLocks
from binning import grid_io


class BinnerND:
    """
    Accumulates weighted points of an N-dimensional space on a regular grid.

    Each axis i covers [lower_bound[i], upper_bound[i]] with bin_count[i]
    equal bins. Points outside the range on any axis are dropped; a point
    exactly on the upper bound goes into the last bin.

    add_point / add_points may be called from several threads at once.
    clear, normalize and write_to_file must only run once all producers are
    done.
    """
    def __init__(self, lower_bound, upper_bound, bin_count, n_stripes: int = None):
        self.lower_bound = np.array(lower_bound, dtype=np.float64).ravel()
        self.upper_bound = np.array(upper_bound, dtype=np.float64).ravel()
        self.bin_count = np.array(bin_count, dtype=np.int64).ravel()
        self.ndim = len(self.bin_count)

        if self.ndim < 1:
            raise ValueError("A binner needs at least one axis")
        if len(self.lower_bound) != self.ndim or len(self.upper_bound) != self.ndim:
            raise ValueError(
                f"Got {len(self.lower_bound)} lower bounds and {len(self.upper_bound)} upper bounds "
                f"for {self.ndim} axes"
            )
        if np.any(self.bin_count < 1):
            raise ValueError(f"Every axis needs at least one bin, got {self.bin_count.tolist()}")
        if np.any(~(self.upper_bound > self.lower_bound)):
            raise ValueError("Upper bound must be larger than lower bound on every axis")

        self.bin_width = (self.upper_bound - self.lower_bound) / self.bin_count
        self.bins = NDArray(self.bin_count)
        self._strides = np.array(self.bins.strides, dtype=np.int64)
        self._locks = StripedLocks(n_stripes)
        self.clear()

    def __call__(self, pos, weight: float = 1.0):
        self.add_point(pos, weight)

    @property
    def grid(self) -> np.ndarray:
        """The bins as an array of shape bin_count (a view, not a copy)."""
        return self.bins.to_array()

    def bin_index(self, pos):
        """Multi-index of the bin containing pos, or None if pos is out of range."""
        if len(pos) != self.ndim:
            raise ValueError(f"Expected a point with {self.ndim} coordinates, got {len(pos)}")
        index = []
        for i in range(self.ndim):
            x = pos[i]
            if not (self.lower_bound[i] <= x <= self.upper_bound[i]):
                return None
            k = int((x - self.lower_bound[i]) / self.bin_width[i])
            index.append(min(k, int(self.bin_count[i]) - 1))
        return tuple(index)

    def add_point(self, pos, weight: float = 1.0):
        index = self.bin_index(pos)
        if index is None:
            return
        linear = self.bins.linear_index(index)
        with self._locks.for_cell(linear):
            self.bins.data[linear] += weight

    def add_points(self, positions, weights=None):
        """
        Add a batch of points.

        Parameters:
            positions: Array of shape (M, N).
            weights: Array of shape (M,), or None for unit weights.
        """
        positions = np.asarray(positions, dtype=np.float64)
        if positions.ndim == 1:
            positions = positions.reshape(1, -1)
        if positions.shape[1] != self.ndim:
            raise ValueError(f"Expected points with {self.ndim} coordinates, got {positions.shape[1]}")
        if weights is None:
            weights = np.ones(len(positions))
        weights = np.broadcast_to(np.asarray(weights, dtype=np.float64), (len(positions),))

        linear, inside = self._linear_indices(positions)
        with self._locks.all():
            np.add.at(self.bins.data, linear, weights[inside])

    def _linear_indices(self, positions: np.ndarray):
        inside = np.all((positions >= self.lower_bound) & (positions <= self.upper_bound), axis=1)
        idx = ((positions[inside] - self.lower_bound) / self.bin_width).astype(np.int64)
        idx = np.minimum(idx, self.bin_count - 1)
        return idx @ self._strides, inside

    def clear(self):
        self.bins.fill(0.)

    def normalize(self, to_peak: bool = True) -> float:
        return grid_io.normalize_grid(self.bins.data, to_peak)

    def total(self) -> float:
        return float(self.bins.data.sum())

    def peak(self) -> float:
        return float(self.bins.data.max())

    def bin_centers(self, axis: int) -> np.ndarray:
        return grid_io.bin_centers(self.lower_bound[axis], self.bin_width[axis], int(self.bin_count[axis]))

    def _iter_centers(self):
        it = iter(self.bins)
        for _ in it:
            pos = it.get_pos()
            yield [self.lower_bound[n] + self.bin_width[n] * (pos[n] + 0.5) for n in range(self.ndim)]

    def write_to_file(self, filename, ascii: bool = True, log_pdf: bool = True):
        values = grid_io.transform_values(self.bins.data, log_pdf)
        if ascii:
            grid_io.write_ascii(filename, self._iter_centers(), values)
        else:
            grid_io.write_binary(filename, self.lower_bound, self.upper_bound,
                                 self.bin_count, self.bin_width, values)
