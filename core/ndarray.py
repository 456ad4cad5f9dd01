# core/ndarray.py

import numpy as np


class NDArrayIterator:
    """Walks an NDArray in linear order and remembers where it is."""
    def __init__(self, array):
        self.array = array
        self.linear = -1

    def __iter__(self):
        return self

    def __next__(self) -> float:
        self.linear += 1
        if self.linear >= self.array.get_size():
            raise StopIteration
        return float(self.array.data[self.linear])

    def get_pos(self) -> tuple:
        """Multi-index of the element most recently yielded."""
        if self.linear < 0:
            raise ValueError("Iterator has not yielded an element yet")
        return self.array.multi_index(self.linear)


class NDArray:
    """
    Dense N-dimensional array stored as one flat float64 buffer.

    Parameters:
        shape: Number of bins along each axis. The last axis varies fastest
               in the flat buffer (row-major order).
    """
    def __init__(self, shape):
        shape = tuple(int(n) for n in shape)
        if len(shape) == 0:
            raise ValueError("NDArray needs at least one axis")
        if any(n < 1 for n in shape):
            raise ValueError(f"Every axis needs at least one element, got {shape}")

        self.shape = shape
        self.ndim = len(shape)

        strides = [1] * self.ndim
        for i in range(self.ndim - 2, -1, -1):
            strides[i] = strides[i + 1] * shape[i + 1]
        self.strides = tuple(strides)

        self.size = strides[0] * shape[0]
        self.data = np.zeros(self.size, dtype=np.float64)

    def linear_index(self, index) -> int:
        if len(index) != self.ndim:
            raise ValueError(f"Expected {self.ndim} indices, got {len(index)}")
        linear = 0
        for i, (k, n) in enumerate(zip(index, self.shape)):
            if not 0 <= k < n:
                raise IndexError(f"Index {k} out of range for axis {i} with {n} bins")
            linear += int(k) * self.strides[i]
        return linear

    def multi_index(self, linear: int) -> tuple:
        if not 0 <= linear < self.size:
            raise IndexError(f"Linear index {linear} out of range for size {self.size}")
        index = []
        for stride in self.strides:
            k, linear = divmod(linear, stride)
            index.append(k)
        return tuple(index)

    def _resolve(self, index) -> int:
        if np.ndim(index) == 0:
            linear = int(index)
            if not 0 <= linear < self.size:
                raise IndexError(f"Linear index {linear} out of range for size {self.size}")
            return linear
        return self.linear_index(index)

    def get_element(self, index) -> float:
        """Element at a multi-index (sequence) or linear index (int)."""
        return float(self.data[self._resolve(index)])

    def set_element(self, index, value: float):
        self.data[self._resolve(index)] = value

    def add_to_element(self, index, value: float):
        self.data[self._resolve(index)] += value

    def get_size(self) -> int:
        return self.size

    def get_width(self, axis: int) -> int:
        return self.shape[axis]

    def get_shape(self) -> tuple:
        return self.shape

    def fill(self, value: float):
        self.data.fill(value)

    def to_array(self) -> np.ndarray:
        """Reshaped view of the buffer with the array's shape."""
        return self.data.reshape(self.shape)

    def __iter__(self):
        return NDArrayIterator(self)

    def __len__(self):
        return self.size
