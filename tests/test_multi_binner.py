import numpy as np
import pytest

from binning.binner_2d import Binner2D
from binning.multi_binner import MultiBinner


def make_member(axes):
    return Binner2D([0.0, 0.0], [1.0, 1.0], [4, 4], axes, 3)


def make_collector():
    collector = MultiBinner()
    for axes in [(0, 1), (1, 2), (0, 2)]:
        collector.add_member(make_member(axes))
    return collector


def test_broadcast_matches_direct_add():
    collector = make_collector()
    direct = [make_member(b.source_axes) for b in collector]
    p = [0.1, 0.6, 0.9]

    collector.broadcast(p, 2.5)
    for binner in direct:
        binner.add_point(p, 2.5)

    assert collector.member_count() == 3
    for i, binner in enumerate(direct):
        np.testing.assert_array_equal(collector.get_member(i).grid, binner.grid)


def test_call_and_batch_broadcast():
    collector = make_collector()
    collector([0.1, 0.6, 0.9], 1.0)
    collector.broadcast_points([[0.1, 0.6, 0.9], [2.0, 0.5, 0.5]], [1.0, 5.0])
    assert collector.get_member(0).total() == 2.0
    assert collector.get_member(1).total() == 7.0
    assert collector.get_member(2).total() == 2.0


def test_shared_members():
    shared = make_member((0, 1))
    a = MultiBinner()
    b = MultiBinner()
    a.add_member(shared)
    b.add_member(shared)

    a.broadcast([0.5, 0.5, 0.5], 1.0)
    b.broadcast([0.5, 0.5, 0.5], 1.0)
    assert shared.total() == 2.0
    assert a.get_member(0) is b.get_member(0)


def test_add_new_member():
    collector = MultiBinner(3)
    binner = collector.add_new_member([0.0, 0.0], [1.0, 1.0], [2, 2], (2, 0))
    assert collector.get_member(0) is binner
    assert binner.sample_dim == 3


def test_add_new_member_needs_sample_dim():
    with pytest.raises(ValueError):
        MultiBinner().add_new_member([0.0, 0.0], [1.0, 1.0], [2, 2], (0, 1))


def test_mismatched_sample_dim():
    collector = MultiBinner(3)
    with pytest.raises(ValueError):
        collector.add_member(Binner2D([0.0, 0.0], [1.0, 1.0], [2, 2], (0, 1), 2))


def test_clear_all_and_normalize_all():
    collector = make_collector()
    collector.broadcast([0.1, 0.6, 0.9], 4.0)
    collector.broadcast([0.3, 0.3, 0.3], 1.0)
    collector.normalize_all(to_peak=True)
    assert all(b.peak() == pytest.approx(1.0) for b in collector)

    collector.clear_all()
    assert all(b.total() == 0.0 for b in collector)


@pytest.mark.parametrize("i", [3, 10, -1])
def test_get_member_out_of_range(i):
    collector = make_collector()
    with pytest.raises(IndexError):
        collector.get_member(i)


def test_write_all(tmp_path):
    collector = make_collector()
    collector.add_member(make_member((0, 1)))
    collector.broadcast([0.1, 0.6, 0.9], 1.0)

    filenames = collector.write_all(str(tmp_path / "proj"), ascii=True, log_pdf=False)
    names = [f.rsplit("/", 1)[-1] for f in filenames]
    assert names == ["proj_0_1_0.dat", "proj_1_2.dat", "proj_0_2.dat", "proj_0_1_3.dat"]
    for f in filenames:
        assert len(open(f).read().splitlines()) == 16
