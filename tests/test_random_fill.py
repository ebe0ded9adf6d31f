import numpy as np
import pytest

from halopaint.errors import InvalidArgument
from halopaint.random_fill import threaded_rand


def test_threaded_rand_writes_every_element():
    arr = np.full((10_001,), -1.0)
    out = threaded_rand(arr, chunk_size=256, seed=3, n_workers=4)
    assert out is arr
    assert np.all(arr >= 0.0)
    assert np.all(arr < 1.0)


def test_threaded_rand_is_independent_of_worker_count():
    a = threaded_rand(np.empty((5000,)), chunk_size=300, seed=42, n_workers=1)
    b = threaded_rand(np.empty((5000,)), chunk_size=300, seed=42, n_workers=6)
    np.testing.assert_array_equal(a, b)


def test_threaded_rand_chunks_use_distinct_streams():
    arr = threaded_rand(np.empty((2000,)), chunk_size=1000, seed=7, n_workers=2)
    assert not np.array_equal(arr[:1000], arr[1000:])


def test_threaded_rand_seeds_differ():
    a = threaded_rand(np.empty((1000,)), seed=1)
    b = threaded_rand(np.empty((1000,)), seed=2)
    assert not np.array_equal(a, b)


def test_threaded_rand_uniform_moments():
    arr = threaded_rand(np.empty((200_000,)), chunk_size=4096, seed=11, n_workers=4)
    assert abs(arr.mean() - 0.5) < 5e-3
    assert abs(arr.var() - 1.0 / 12.0) < 5e-3


def test_threaded_rand_float32():
    arr = threaded_rand(np.zeros((777,), dtype=np.float32), chunk_size=100, seed=0, n_workers=3)
    assert arr.dtype == np.float32
    assert np.all((arr >= 0.0) & (arr < 1.0))


def test_threaded_rand_empty_array():
    arr = threaded_rand(np.empty((0,)), seed=0)
    assert arr.size == 0


def test_threaded_rand_rejects_bad_input():
    with pytest.raises(InvalidArgument):
        threaded_rand(np.zeros((4, 4)))
    with pytest.raises(InvalidArgument):
        threaded_rand(np.zeros((10,), dtype=np.int64))
    with pytest.raises(InvalidArgument):
        threaded_rand(np.zeros((10,)), chunk_size=0)
    with pytest.raises(InvalidArgument):
        threaded_rand(np.zeros((20,))[::2])
