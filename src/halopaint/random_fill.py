from __future__ import annotations

import numpy as np

from .chunking import chunk_slices
from .errors import InvalidArgument
from .parallel import run_tasks


def threaded_rand(
    arr: np.ndarray,
    *,
    chunk_size: int = 4096,
    seed: int | np.random.SeedSequence | None = None,
    n_workers: int | None = None,
) -> np.ndarray:
    """Fill `arr` in place with uniform [0, 1) draws, one generator per chunk.

    Chunk generators are spawned from a single `SeedSequence`, so chunks never
    share generator state and, for fixed `seed` and `chunk_size`, the result does
    not depend on `n_workers`. Returns `arr`.
    """
    if not isinstance(arr, np.ndarray) or arr.ndim != 1:
        raise InvalidArgument("arr must be a 1D numpy array.")
    if arr.dtype not in (np.float32, np.float64):
        raise InvalidArgument(f"arr must be float32 or float64; got {arr.dtype}.")
    if not arr.flags.c_contiguous or not arr.flags.writeable:
        raise InvalidArgument("arr must be C-contiguous and writeable.")

    slices = chunk_slices(int(arr.size), chunk_size)
    ss = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    children = ss.spawn(len(slices))

    def _fill(sl: slice, child: np.random.SeedSequence):
        def task() -> None:
            rng = np.random.default_rng(child)
            rng.random(out=arr[sl], dtype=arr.dtype)

        return task

    run_tasks([_fill(sl, child) for sl, child in zip(slices, children, strict=True)], n_workers=n_workers)
    return arr
