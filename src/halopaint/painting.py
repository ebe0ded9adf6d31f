"""Accumulate per-source flux into a shared HEALPix grid.

Two ways of running the accumulation in parallel:

  - "reduce" (default): every worker owns a contiguous block of sources and a
    private partial grid; the partial grids are summed into the output in one
    final single-threaded pass. No two threads ever write the same array, so
    updates cannot be lost.
  - "sorted": sources are sorted by colatitude (descending) and the sorted
    sequence is chunked; chunks look up their pixels concurrently, then the
    chunks are added into the grid one after another in sorted order.

Either way the grid is untouched if any chunk fails. Floating-point sums are
not reproduced bit-for-bit across strategies or worker counts; results agree to
rounding.
"""

from __future__ import annotations

import time

import numpy as np

from .chunking import as_count, chunk_slices, worker_slice
from .config import STRATEGIES
from .errors import InvalidArgument
from .parallel import log_progress, progress_enabled, resolve_n_workers, run_tasks
from .pixelization import Pixelization


def _validate_sources(flux, theta, phi) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    flux = np.asarray(flux, dtype=float)
    theta = np.asarray(theta, dtype=float)
    phi = np.asarray(phi, dtype=float)
    if flux.ndim != 1 or theta.shape != flux.shape or phi.shape != flux.shape:
        raise InvalidArgument(
            f"flux, theta and phi must be 1D with equal length; got {flux.shape}, {theta.shape}, {phi.shape}."
        )
    if not np.all(np.isfinite(flux)):
        raise InvalidArgument("flux must be finite.")
    if np.any(~(theta >= 0.0) | (theta > np.pi)) or not np.all(np.isfinite(phi)):
        raise InvalidArgument("theta must lie in [0, pi] and phi must be finite.")
    return flux, theta, phi


def _paint_reduce(grid, flux, theta, phi, pixelization, n_workers: int) -> None:
    n = int(flux.size)
    npix = int(grid.size)
    n_workers = max(1, min(n_workers, n))

    def _task(sl: slice):
        def task() -> np.ndarray:
            ipix = pixelization.angle_to_pixel(theta[sl], phi[sl])
            return np.bincount(ipix, weights=flux[sl], minlength=npix)

        return task

    partials = run_tasks([_task(worker_slice(n, n_workers, w)) for w in range(1, n_workers + 1)], n_workers=n_workers)
    for partial in partials:
        grid += partial


def _paint_sorted(grid, flux, theta, phi, pixelization, chunk_size: int, n_workers: int) -> None:
    # Stable sort keeps equal-θ sources in input order.
    perm = np.argsort(-theta, kind="stable")

    def _task(sl: slice):
        def task() -> tuple[np.ndarray, np.ndarray]:
            idx = perm[sl]
            return idx, pixelization.angle_to_pixel(theta[idx], phi[idx])

        return task

    lookups = run_tasks([_task(sl) for sl in chunk_slices(int(flux.size), chunk_size)], n_workers=n_workers)
    # Adds start only once every chunk has its pixels.
    for idx, ipix in lookups:
        np.add.at(grid, ipix, flux[idx])


def catalog_to_map(
    grid: np.ndarray,
    flux,
    theta,
    phi,
    pixelization: Pixelization,
    *,
    strategy: str = "reduce",
    chunk_size: int = 4096,
    n_workers: int | None = None,
    progress: bool | None = None,
) -> np.ndarray:
    """Paint sources into `grid` and convert the result to flux per steradian.

    For every source, `grid[pix(theta, phi)] += flux`; afterwards every pixel is
    divided by the pixel solid angle. The scaling pass runs even when there are
    no sources. `grid` is modified in place and returned; if painting fails it
    is left as it was.
    """
    if not isinstance(grid, np.ndarray) or grid.ndim != 1 or grid.size != int(pixelization.npix):
        raise InvalidArgument(f"grid must be a 1D array with {pixelization.npix} pixels.")
    if not np.issubdtype(grid.dtype, np.floating):
        raise InvalidArgument(f"grid must have a floating dtype; got {grid.dtype}.")
    if strategy not in STRATEGIES:
        raise InvalidArgument(f"Unsupported strategy: {strategy!r} (expected one of {STRATEGIES}).")
    chunk_size = as_count(chunk_size, name="chunk_size")
    if chunk_size <= 0:
        raise InvalidArgument("chunk_size must be positive.")
    flux, theta, phi = _validate_sources(flux, theta, phi)
    n_workers = resolve_n_workers(n_workers)

    t0 = time.perf_counter()
    if flux.size:
        if strategy == "reduce":
            _paint_reduce(grid, flux, theta, phi, pixelization, n_workers)
        else:
            _paint_sorted(grid, flux, theta, phi, pixelization, chunk_size, n_workers)

    per_pixel_steradian = 1.0 / pixelization.pixel_area()
    grid *= per_pixel_steradian

    if progress_enabled(progress):
        log_progress(
            "paint",
            f"{flux.size:,} sources -> npix={grid.size:,} strategy={strategy} workers={n_workers} "
            f"dt={time.perf_counter() - t0:.2f}s",
        )
    return grid


def paint_map(
    flux,
    theta,
    phi,
    pixelization: Pixelization,
    *,
    strategy: str = "reduce",
    chunk_size: int = 4096,
    n_workers: int | None = None,
    progress: bool | None = None,
) -> np.ndarray:
    grid = np.zeros((int(pixelization.npix),), dtype=float)
    return catalog_to_map(
        grid,
        flux,
        theta,
        phi,
        pixelization,
        strategy=strategy,
        chunk_size=chunk_size,
        n_workers=n_workers,
        progress=progress,
    )
