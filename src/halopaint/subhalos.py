from __future__ import annotations

import numpy as np

from .chunking import as_count
from .errors import InvalidArgument


def prepend_zeros(arr, *, nzeros: int = 1) -> np.ndarray:
    """Flattened copy of `arr` with `nzeros` zeros of the same dtype in front.

    Used to turn a running total into an offset table, and to pad ell-indexed
    spectra that start at ell=1 out to ell=0.
    """
    nzeros = as_count(nzeros, name="nzeros")
    if nzeros < 0:
        raise InvalidArgument("nzeros must be non-negative.")
    flat = np.ravel(arr)
    return np.concatenate([np.zeros((nzeros,), dtype=flat.dtype), flat])


def generate_subhalo_offsets(num_subhalos) -> np.ndarray:
    """Offsets of each halo's first subhalo in a flattened subhalo list.

    Given per-halo subhalo counts, returns the prefix sum with a leading zero
    (length N+1): halo i owns flattened slots [offsets[i], offsets[i+1]) and
    offsets[N] is the total subhalo count.
    """
    counts = np.asarray(num_subhalos)
    if counts.ndim != 1:
        raise InvalidArgument("num_subhalos must be 1D.")
    if counts.size and not np.issubdtype(counts.dtype, np.integer):
        if not np.all(np.isfinite(counts)) or np.any(counts != np.round(counts)):
            raise InvalidArgument("num_subhalos must hold whole numbers.")
    counts = counts.astype(np.int64, copy=False)
    if np.any(counts < 0):
        raise InvalidArgument("num_subhalos must be non-negative.")
    return prepend_zeros(np.cumsum(counts))


def subhalo_slice(offsets: np.ndarray, i: int) -> slice:
    return slice(int(offsets[i]), int(offsets[i + 1]))


def halo_index_of_subhalos(offsets: np.ndarray) -> np.ndarray:
    """Parent halo index for every flattened subhalo slot."""
    offsets = np.asarray(offsets, dtype=np.int64)
    if offsets.ndim != 1 or offsets.size == 0 or offsets[0] != 0 or np.any(np.diff(offsets) < 0):
        raise InvalidArgument("offsets must be 1D, start at 0 and be non-decreasing.")
    return np.repeat(np.arange(offsets.size - 1, dtype=np.int64), np.diff(offsets))
