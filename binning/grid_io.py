# binning/grid_io.py
"""
Normalization and file output shared by the 2D and N-dimensional binners.

Binary layout (native byte order), one header record per axis followed by
the flat grid in row-major order:

    uint32  number of axes
    uint32  bins along this axis
    float64 lower bound
    float64 upper bound
    float64 bin width
    ...
    float64 values[prod(bins)]
"""

import os
from dataclasses import dataclass

import numpy as np

import constants

HEADER_DTYPE = np.dtype([
    ('ndim', '=u4'),
    ('bins', '=u4'),
    ('lower', '=f8'),
    ('upper', '=f8'),
    ('width', '=f8'),
])
VALUE_DTYPE = np.dtype('=f8')


@dataclass
class GridFile:
    """Contents of a binary grid file."""
    lower_bound: np.ndarray
    upper_bound: np.ndarray
    bin_count: np.ndarray
    bin_width: np.ndarray
    values: np.ndarray = None

    @property
    def ndim(self) -> int:
        return len(self.bin_count)


def normalize_grid(values: np.ndarray, to_peak: bool = True) -> float:
    """
    Rescale values in place, either so the largest bin is 1 (to_peak) or so
    the bins sum to 1. An all-zero grid gives non-finite bins.

    Returns the normalization constant that was divided out.
    """
    norm = values.max() if to_peak else values.sum()
    with np.errstate(divide='ignore', invalid='ignore'):
        values /= norm
    return float(norm)


def log_floor(values: np.ndarray) -> float:
    """Natural log of the smallest strictly positive bin, -inf if there is none."""
    positive = values[values > 0.]
    if positive.size == 0:
        return -np.inf
    return float(np.log(positive.min()))


def transform_values(values: np.ndarray, log_pdf: bool = True, floor_offset: float = None) -> np.ndarray:
    """
    Values as they go to disk. With log_pdf the nonzero bins are replaced by
    their natural log and empty bins by log_floor(values) - floor_offset.
    Without log_pdf a copy of the raw values is returned.
    """
    flat = np.asarray(values, dtype=np.float64).ravel()
    if not log_pdf:
        return flat.copy()

    if floor_offset is None:
        floor_offset = constants.LOG_FLOOR_OFFSET
    floor = log_floor(flat)
    empty = flat == 0.
    out = np.empty_like(flat)
    with np.errstate(divide='ignore', invalid='ignore'):
        out[~empty] = np.log(flat[~empty])
    out[empty] = floor - floor_offset
    return out


def bin_centers(lower: float, width: float, count: int) -> np.ndarray:
    return lower + width * (np.arange(count) + 0.5)


def write_ascii(filename, centers, values):
    """
    Write one tab-separated line per bin: the bin-center coordinates, then
    the value. `centers` yields one coordinate tuple per entry in `values`.
    """
    with open(filename, "w") as f:
        for coords, value in zip(centers, values):
            fields = [repr(float(c)) for c in coords]
            fields.append(repr(float(value)))
            f.write("\t".join(fields) + "\n")


def write_binary(filename, lower_bound, upper_bound, bin_count, bin_width, values):
    ndim = len(bin_count)
    header = np.zeros(ndim, dtype=HEADER_DTYPE)
    header['ndim'] = ndim
    header['bins'] = bin_count
    header['lower'] = lower_bound
    header['upper'] = upper_bound
    header['width'] = bin_width

    with open(filename, "wb") as f:
        f.write(header.tobytes())
        f.write(np.ascontiguousarray(values, dtype=VALUE_DTYPE).tobytes())


def _read_records(f, dtype, count=None) -> np.ndarray:
    data = f.read() if count is None else f.read(dtype.itemsize * count)
    if len(data) % dtype.itemsize:
        raise ValueError(f"File truncated inside a {dtype.itemsize}-byte record")
    if not data:
        return np.empty(0, dtype=dtype)
    return np.frombuffer(data, dtype=dtype)


def _read_header(f) -> GridFile:
    first = _read_records(f, HEADER_DTYPE, 1)
    if first.size != 1:
        raise ValueError("File too short to contain a grid header")
    ndim = int(first['ndim'][0])
    if ndim < 1:
        raise ValueError(f"Invalid number of axes in header: {ndim}")

    rest = _read_records(f, HEADER_DTYPE, ndim - 1)
    if rest.size != ndim - 1:
        raise ValueError(f"Header truncated: expected {ndim} axis records")
    header = np.concatenate([first, rest])
    if np.any(header['ndim'] != ndim):
        raise ValueError("Inconsistent number of axes between header records")

    return GridFile(
        lower_bound=header['lower'].copy(),
        upper_bound=header['upper'].copy(),
        bin_count=header['bins'].astype(np.int64),
        bin_width=header['width'].copy(),
    )


def read_binary_header(filename) -> GridFile:
    """Read only the per-axis records of a binary grid file."""
    with open(filename, "rb") as f:
        return _read_header(f)


def read_binary(filename) -> GridFile:
    """Read a binary grid file, values reshaped to the per-axis bin counts."""
    with open(filename, "rb") as f:
        grid = _read_header(f)
        expected = int(np.prod(grid.bin_count))
        values = _read_records(f, VALUE_DTYPE)
    if values.size != expected:
        raise ValueError(f"Expected {expected} grid values, found {values.size}")
    grid.values = values.reshape(tuple(grid.bin_count)).copy()
    return grid


def read_ascii(filename, ndim: int):
    """Read an ascii grid file back into (centers, values) arrays."""
    if os.path.getsize(filename) == 0:
        return np.empty((0, ndim)), np.empty(0)
    data = np.loadtxt(filename, delimiter="\t", ndmin=2)
    if data.shape[1] != ndim + 1:
        raise ValueError(f"Expected {ndim + 1} columns, found {data.shape[1]}")
    return data[:, :ndim], data[:, ndim]
