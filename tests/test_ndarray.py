import numpy as np
import pytest

from core.ndarray import NDArray


def test_strides_are_row_major():
    arr = NDArray([2, 3, 4])
    assert arr.strides == (12, 4, 1)
    assert arr.get_size() == 24
    assert len(arr) == 24
    assert arr.get_width(1) == 3
    assert arr.get_shape() == (2, 3, 4)


def test_linear_and_multi_index_agree():
    arr = NDArray([2, 3, 4])
    for linear in range(arr.get_size()):
        assert arr.linear_index(arr.multi_index(linear)) == linear
    assert arr.multi_index(23) == (1, 2, 3)


def test_element_access_by_either_index():
    arr = NDArray([3, 2])
    arr.set_element((2, 1), 5.0)
    assert arr.get_element(5) == 5.0
    arr.add_to_element(5, 1.5)
    assert arr.get_element((2, 1)) == 6.5
    assert arr.to_array()[2, 1] == 6.5


def test_fill():
    arr = NDArray([2, 2])
    arr.fill(3.0)
    np.testing.assert_array_equal(arr.data, np.full(4, 3.0))


def test_iterator_reports_positions():
    arr = NDArray([2, 2])
    arr.data[:] = [1.0, 2.0, 3.0, 4.0]
    seen = []
    it = iter(arr)
    for value in it:
        seen.append((it.get_pos(), value))
    assert seen == [((0, 0), 1.0), ((0, 1), 2.0), ((1, 0), 3.0), ((1, 1), 4.0)]


@pytest.mark.parametrize("shape", [[], [0], [3, 0]])
def test_invalid_shape(shape):
    with pytest.raises(ValueError):
        NDArray(shape)


def test_out_of_range_index():
    arr = NDArray([2, 2])
    with pytest.raises(IndexError):
        arr.get_element((2, 0))
    with pytest.raises(IndexError):
        arr.get_element(4)
    with pytest.raises(ValueError):
        arr.get_element((0, 0, 0))
