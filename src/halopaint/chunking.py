"""Index-range partitioning for parallel dispatch.

Two conventions are exposed:

  - `chunk` / `worker_range` return 1-based inclusive `(start, end)` pairs, the
    catalog-row convention used when reporting halo ranges.
  - `chunk_slices` / `worker_slice` return the same partitions as 0-based
    half-open `slice` objects for direct numpy indexing.

All functions are pure. The worker count and id are explicit arguments.
"""

from __future__ import annotations

import numbers

from .errors import InvalidArgument


def as_count(value, *, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgument(f"{name} must be an integer; got {value!r}.")
    return int(value)


def chunk(length: int, chunk_size: int) -> list[tuple[int, int]]:
    """Split `[1, length]` into consecutive `(start, end)` pairs of size `chunk_size`.

    The last chunk may be shorter. `length == 0` yields no chunks.
    """
    length = as_count(length, name="length")
    chunk_size = as_count(chunk_size, name="chunk_size")
    if chunk_size <= 0:
        raise InvalidArgument("chunk_size must be positive.")
    if length < 0:
        raise InvalidArgument("length must be non-negative.")
    return [(i, min(i + chunk_size - 1, length)) for i in range(1, length + 1, chunk_size)]


def worker_range(total_length: int, worker_count: int, worker_id: int) -> tuple[int, int]:
    """Return the `(start, end)` range owned by `worker_id` (1-based) of `worker_count`.

    Sizes differ by at most one; the first `total_length % worker_count` workers
    take the extra item. An empty range is returned as `(start, start - 1)`.
    """
    total_length = as_count(total_length, name="total_length")
    worker_count = as_count(worker_count, name="worker_count")
    worker_id = as_count(worker_id, name="worker_id")
    if total_length < 0:
        raise InvalidArgument("total_length must be non-negative.")
    if worker_count <= 0:
        raise InvalidArgument("worker_count must be positive.")
    if not (1 <= worker_id <= worker_count):
        raise InvalidArgument(f"worker_id must be in [1, {worker_count}]; got {worker_id}.")
    d, r = divmod(total_length, worker_count)
    start = (worker_id - 1) * d + min(r, worker_id - 1) + 1
    end = start + d - 1 + (1 if worker_id <= r else 0)
    return start, end


def chunk_slices(length: int, chunk_size: int) -> list[slice]:
    return [slice(a - 1, b) for a, b in chunk(length, chunk_size)]


def worker_slice(total_length: int, worker_count: int, worker_id: int) -> slice:
    a, b = worker_range(total_length, worker_count, worker_id)
    return slice(a - 1, b)
