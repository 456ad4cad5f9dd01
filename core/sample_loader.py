# core/sample_loader.py

from abc import ABC, abstractmethod

import numpy as np


class BaseSampleReader(ABC):
    """
    Reads weighted sample points in blocks.

    read_block returns (positions, weights) with shapes (M, ndim) and (M,),
    M <= size. An exhausted stream raises EOFError.
    """
    def __init__(self, fin, ndim: int, weighted: bool = None):
        if ndim < 1:
            raise ValueError(f"Samples need at least one coordinate, got {ndim}")
        self.fin = fin
        self.ndim = ndim
        self.weighted = weighted
        self.samples_read = 0

    @abstractmethod
    def read_block(self, size: int):
        pass

    def skip(self, n: int):
        """Discard the next n samples, or fewer if the stream ends first."""
        while n > 0:
            try:
                positions, _ = self.read_block(min(n, 10000))
            except EOFError:
                return
            n -= len(positions)

    def _check_columns(self, ncols: int):
        if self.weighted is None:
            if ncols == self.ndim:
                self.weighted = False
            elif ncols == self.ndim + 1:
                self.weighted = True
            else:
                raise ValueError(f"Expected {self.ndim} or {self.ndim + 1} columns, got {ncols}")
        expected = self.ndim + 1 if self.weighted else self.ndim
        if ncols != expected:
            raise ValueError(f"Expected {expected} columns, got {ncols}")

    def _split(self, data: np.ndarray):
        positions = data[:, :self.ndim]
        if self.weighted:
            weights = data[:, self.ndim]
        else:
            weights = np.ones(len(data))
        return positions, weights


class TextSampleReader(BaseSampleReader):
    """Whitespace-separated columns, one sample per line, '#' starts a comment line."""
    def read_block(self, size: int):
        rows = []
        while len(rows) < size:
            line = self.fin.readline()
            if line == '':
                break
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            fields = line.split()
            self._check_columns(len(fields))
            rows.append([float(x) for x in fields])

        if not rows:
            raise EOFError("End of sample file reached")

        self.samples_read += len(rows)
        return self._split(np.array(rows, dtype=np.float64))


class NpySampleReader(BaseSampleReader):
    """A 2D .npy array with one sample per row."""
    def __init__(self, fin, ndim: int, weighted: bool = None):
        super().__init__(fin, ndim, weighted)
        data = np.load(fin, allow_pickle=False)
        if data.ndim != 2:
            raise ValueError(f"Sample array must be 2D, got shape {data.shape}")
        self._check_columns(data.shape[1])
        self.data = data.astype(np.float64, copy=False)
        self.offset = 0

    def read_block(self, size: int):
        if self.offset >= len(self.data):
            raise EOFError("End of sample array reached")
        block = self.data[self.offset:self.offset + size]
        self.offset += len(block)
        self.samples_read += len(block)
        return self._split(block)


def load_samples(fin, sample_format: str, ndim: int, weighted: bool = None):
    if sample_format == 'text':
        return TextSampleReader(fin, ndim, weighted)
    elif sample_format == 'npy':
        return NpySampleReader(fin, ndim, weighted)
    else:
        raise ValueError(f"Unsupported sample format: {sample_format}")
