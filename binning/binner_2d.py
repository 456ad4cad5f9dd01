# binning/binner_2d.py

import sys

import numpy as np
import matplotlib.pyplot as plt

from binning.locks import StripedLocks
from binning import grid_io


class Binner2D:
    """
    Bins two selected coordinates of points from an N-dimensional sample space.

    Parameters:
        lower_bound, upper_bound: Range of the two binned axes.
        bin_count: Number of bins along the two binned axes.
        source_axes: Which two coordinates of an incoming sample are binned.
        sample_dim: Number of coordinates of an incoming sample.
    """
    def __init__(self, lower_bound, upper_bound, bin_count, source_axes, sample_dim: int,
                 n_stripes: int = None):
        self.lower_bound = np.array(lower_bound, dtype=np.float64).ravel()
        self.upper_bound = np.array(upper_bound, dtype=np.float64).ravel()
        self.bin_count = np.array(bin_count, dtype=np.int64).ravel()
        self.source_axes = tuple(int(a) for a in source_axes)
        self.sample_dim = int(sample_dim)

        for name, arr in (("lower_bound", self.lower_bound), ("upper_bound", self.upper_bound),
                          ("bin_count", self.bin_count), ("source_axes", self.source_axes)):
            if len(arr) != 2:
                raise ValueError(f"{name} needs exactly 2 entries, got {len(arr)}")
        if any(not 0 <= a < self.sample_dim for a in self.source_axes):
            raise ValueError(f"Source axes {self.source_axes} out of range for {self.sample_dim}-dimensional samples")
        if np.any(self.bin_count < 1):
            raise ValueError(f"Every axis needs at least one bin, got {self.bin_count.tolist()}")
        if np.any(~(self.upper_bound > self.lower_bound)):
            raise ValueError("Upper bound must be larger than lower bound on both axes")

        self.bin_width = (self.upper_bound - self.lower_bound) / self.bin_count
        self.grid = np.zeros(tuple(self.bin_count), dtype=np.float64)
        self._locks = StripedLocks(n_stripes)

    def __call__(self, pos, weight: float = 1.0):
        self.add_point(pos, weight)

    @property
    def ndim(self) -> int:
        return 2

    def bin_index(self, pos):
        if len(pos) != self.sample_dim:
            raise ValueError(f"Expected a point with {self.sample_dim} coordinates, got {len(pos)}")
        index = []
        for i, axis in enumerate(self.source_axes):
            x = pos[axis]
            if not (self.lower_bound[i] <= x <= self.upper_bound[i]):
                return None
            k = int((x - self.lower_bound[i]) / self.bin_width[i])
            index.append(min(k, int(self.bin_count[i]) - 1))
        return tuple(index)

    def add_point(self, pos, weight: float = 1.0):
        index = self.bin_index(pos)
        if index is None:
            return
        with self._locks.for_cell(index[0] * int(self.bin_count[1]) + index[1]):
            self.grid[index] += weight

    def add_points(self, positions, weights=None):
        positions = np.asarray(positions, dtype=np.float64)
        if positions.ndim == 1:
            positions = positions.reshape(1, -1)
        if positions.shape[1] != self.sample_dim:
            raise ValueError(f"Expected points with {self.sample_dim} coordinates, got {positions.shape[1]}")
        if weights is None:
            weights = np.ones(len(positions))
        weights = np.broadcast_to(np.asarray(weights, dtype=np.float64), (len(positions),))

        xy = positions[:, list(self.source_axes)]
        inside = np.all((xy >= self.lower_bound) & (xy <= self.upper_bound), axis=1)
        idx = ((xy[inside] - self.lower_bound) / self.bin_width).astype(np.int64)
        idx = np.minimum(idx, self.bin_count - 1)
        with self._locks.all():
            np.add.at(self.grid, (idx[:, 0], idx[:, 1]), weights[inside])

    def clear(self):
        self.grid.fill(0.)

    def normalize(self, to_peak: bool = True) -> float:
        return grid_io.normalize_grid(self.grid, to_peak)

    def total(self) -> float:
        return float(self.grid.sum())

    def peak(self) -> float:
        return float(self.grid.max())

    def bin_centers(self, axis: int) -> np.ndarray:
        return grid_io.bin_centers(self.lower_bound[axis], self.bin_width[axis], int(self.bin_count[axis]))

    def write_to_file(self, filename, ascii: bool = True, log_pdf: bool = True):
        values = grid_io.transform_values(self.grid, log_pdf)
        if ascii:
            x_centers = self.bin_centers(0)
            y_centers = self.bin_centers(1)
            X, Y = np.meshgrid(x_centers, y_centers, indexing='ij')
            grid_io.write_ascii(filename, zip(X.ravel(), Y.ravel()), values)
        else:
            grid_io.write_binary(filename, self.lower_bound, self.upper_bound,
                                 self.bin_count, self.bin_width, values)

    def print_bins(self, precision: int = 3, file=None):
        """Print the grid with axis 1 running upwards and axis 0 to the right."""
        out = file if file is not None else sys.stdout
        fmt = f"{{:.{precision}g}}"
        x_centers = self.bin_centers(0)
        y_centers = self.bin_centers(1)

        for k in range(int(self.bin_count[1]) - 1, -1, -1):
            row = "".join(fmt.format(v) + "\t" for v in self.grid[:, k])
            print(fmt.format(y_centers[k]) + "\t||\t" + row, file=out)
        print("====\t" * (int(self.bin_count[0]) + 2), file=out)
        print("\t||\t" + "".join(fmt.format(x) + "\t" for x in x_centers), file=out)

    def plot_bins(self, filename, log_pdf: bool = False):
        values = grid_io.transform_values(self.grid, log_pdf).reshape(self.grid.shape)
        x_edges = self.lower_bound[0] + self.bin_width[0] * np.arange(self.bin_count[0] + 1)
        y_edges = self.lower_bound[1] + self.bin_width[1] * np.arange(self.bin_count[1] + 1)

        fig, ax = plt.subplots()
        mesh = ax.pcolormesh(x_edges, y_edges, values.T, shading="flat")
        fig.colorbar(mesh, ax=ax, label="log density" if log_pdf else "density")
        ax.set_xlabel(f"coordinate {self.source_axes[0]}")
        ax.set_ylabel(f"coordinate {self.source_axes[1]}")

        plt.tight_layout()
        plt.savefig(filename, dpi=300)
        plt.close(fig)
