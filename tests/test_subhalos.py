import numpy as np
import pytest

from halopaint.errors import InvalidArgument
from halopaint.subhalos import generate_subhalo_offsets, halo_index_of_subhalos, prepend_zeros, subhalo_slice


def test_offsets_example():
    off = generate_subhalo_offsets([2, 0, 3])
    assert off.tolist() == [0, 2, 2, 5]
    assert off.dtype == np.int64


def test_offsets_empty():
    assert generate_subhalo_offsets([]).tolist() == [0]


def test_offsets_invariants_on_random_counts():
    rng = np.random.default_rng(5)
    counts = rng.poisson(2.0, size=1000)
    off = generate_subhalo_offsets(counts)
    assert off.size == counts.size + 1
    assert off[0] == 0
    assert off[-1] == counts.sum()
    assert np.all(np.diff(off) >= 0)
    np.testing.assert_array_equal(np.diff(off), counts)


def test_offsets_accept_whole_floats():
    assert generate_subhalo_offsets(np.array([1.0, 2.0])).tolist() == [0, 1, 3]


@pytest.mark.parametrize("counts", [[1, -1, 2], [0.5, 1.0], [[1, 2], [3, 4]]])
def test_offsets_reject_bad_counts(counts):
    with pytest.raises(InvalidArgument):
        generate_subhalo_offsets(counts)


def test_subhalo_slices_and_parent_index():
    off = generate_subhalo_offsets([2, 0, 3])
    flat = np.arange(off[-1])
    assert flat[subhalo_slice(off, 0)].tolist() == [0, 1]
    assert flat[subhalo_slice(off, 1)].size == 0
    assert flat[subhalo_slice(off, 2)].tolist() == [2, 3, 4]
    assert halo_index_of_subhalos(off).tolist() == [0, 0, 2, 2, 2]


def test_parent_index_rejects_bad_offsets():
    with pytest.raises(InvalidArgument):
        halo_index_of_subhalos(np.array([1, 2, 3]))
    with pytest.raises(InvalidArgument):
        halo_index_of_subhalos(np.array([0, 3, 2]))


def test_prepend_zeros_copies_and_keeps_dtype():
    a = np.array([[1.5, 2.5], [3.5, 4.5]], dtype=np.float32)
    out = prepend_zeros(a, nzeros=2)
    assert out.tolist() == [0.0, 0.0, 1.5, 2.5, 3.5, 4.5]
    assert out.dtype == np.float32
    out[2] = 9.0
    assert a[0, 0] == 1.5
    assert prepend_zeros(np.array([7], dtype=np.int64)).tolist() == [0, 7]
    assert prepend_zeros(np.array([7]), nzeros=0).tolist() == [7]


@pytest.mark.parametrize("nzeros", [-1, 1.5])
def test_prepend_zeros_rejects_bad_count(nzeros):
    with pytest.raises(InvalidArgument):
        prepend_zeros(np.ones(3), nzeros=nzeros)
