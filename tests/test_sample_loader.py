import io

import numpy as np
import pytest

from core.sample_loader import load_samples, TextSampleReader, NpySampleReader

TEXT = """# x y w
0.0 1.0 2.0

1.0 2.0 3.0
2.0 3.0 4.0
"""


def test_text_reader_detects_weights():
    reader = load_samples(io.StringIO(TEXT), 'text', 2)
    assert isinstance(reader, TextSampleReader)
    positions, weights = reader.read_block(2)
    np.testing.assert_array_equal(positions, [[0.0, 1.0], [1.0, 2.0]])
    np.testing.assert_array_equal(weights, [2.0, 3.0])
    assert reader.weighted

    positions, weights = reader.read_block(10)
    assert len(positions) == 1
    with pytest.raises(EOFError):
        reader.read_block(10)
    assert reader.samples_read == 3


def test_text_reader_unweighted():
    reader = load_samples(io.StringIO(TEXT), 'text', 3)
    _, weights = reader.read_block(5)
    np.testing.assert_array_equal(weights, [1.0, 1.0, 1.0])
    assert not reader.weighted


def test_text_reader_rejects_ragged_rows():
    reader = load_samples(io.StringIO("1 2 3\n1 2\n"), 'text', 2)
    with pytest.raises(ValueError):
        reader.read_block(5)


def test_text_reader_forced_weights():
    reader = load_samples(io.StringIO("1 2\n"), 'text', 2, weighted=True)
    with pytest.raises(ValueError):
        reader.read_block(5)


def test_skip():
    reader = load_samples(io.StringIO(TEXT), 'text', 2)
    reader.skip(2)
    positions, _ = reader.read_block(5)
    np.testing.assert_array_equal(positions, [[2.0, 3.0]])
    reader.skip(5)


def test_npy_reader():
    buf = io.BytesIO()
    np.save(buf, np.arange(12, dtype=float).reshape(4, 3))
    buf.seek(0)
    reader = load_samples(buf, 'npy', 2)
    assert isinstance(reader, NpySampleReader)
    positions, weights = reader.read_block(3)
    np.testing.assert_array_equal(positions[0], [0.0, 1.0])
    np.testing.assert_array_equal(weights, [2.0, 5.0, 8.0])
    positions, _ = reader.read_block(3)
    assert len(positions) == 1
    with pytest.raises(EOFError):
        reader.read_block(3)


def test_npy_reader_rejects_1d():
    buf = io.BytesIO()
    np.save(buf, np.arange(3, dtype=float))
    buf.seek(0)
    with pytest.raises(ValueError):
        load_samples(buf, 'npy', 2)


def test_unknown_format():
    with pytest.raises(ValueError):
        load_samples(io.StringIO(""), 'csv', 2)
