from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .chunking import chunk_slices
from .errors import InvalidArgument, OutOfRange
from .parallel import log_progress, progress_enabled, run_tasks
from .pixelization import Pixelization


@dataclass(frozen=True)
class HaloCatalog:
    """Halo positions and masses, one row per halo.

    positions are comoving Cartesian coordinates in Mpc with the observer at the
    origin; mass is in Msun (the convention of the distance→redshift table used
    with it).
    """

    positions: np.ndarray  # (N, 3)
    mass: np.ndarray  # (N,)

    def __post_init__(self) -> None:
        # Read-only views; the caller's arrays keep their own flags.
        pos = np.asarray(self.positions, dtype=float).view()
        mass = np.asarray(self.mass, dtype=float).view()
        if pos.ndim != 2 or pos.shape[1] != 3:
            raise InvalidArgument(f"positions must have shape (N, 3); got {pos.shape}.")
        if mass.shape != (pos.shape[0],):
            raise InvalidArgument("mass must have shape (N,) matching positions.")
        if not (np.all(np.isfinite(pos)) and np.all(np.isfinite(mass))):
            raise InvalidArgument("positions and mass must be finite.")
        pos.setflags(write=False)
        mass.setflags(write=False)
        object.__setattr__(self, "positions", pos)
        object.__setattr__(self, "mass", mass)

    @classmethod
    def from_table(cls, table: np.ndarray) -> "HaloCatalog":
        """Build from an in-memory (N, 4) table with columns [x, y, z, mass]."""
        t = np.asarray(table, dtype=float)
        if t.ndim != 2 or t.shape[1] != 4:
            raise InvalidArgument(f"Halo table must have shape (N, 4) with columns x,y,z,mass; got {t.shape}.")
        return cls(positions=t[:, :3], mass=t[:, 3])

    @property
    def n_halos(self) -> int:
        return int(self.positions.shape[0])


@dataclass(frozen=True)
class HaloDerived:
    """Per-halo quantities, index-aligned with the HaloCatalog they came from."""

    distance: np.ndarray  # (N,) Mpc
    redshift: np.ndarray  # (N,)
    pixel: np.ndarray  # (N,) int64, RING
    theta: np.ndarray  # (N,) rad, colatitude
    phi: np.ndarray  # (N,) rad, longitude

    @property
    def n_halos(self) -> int:
        return int(self.distance.size)


def _positions(positions) -> np.ndarray:
    if isinstance(positions, HaloCatalog):
        return positions.positions
    pos = np.asarray(positions, dtype=float)
    if pos.ndim != 2 or pos.shape[1] != 3:
        raise InvalidArgument(f"positions must have shape (N, 3); got {pos.shape}.")
    return pos


def get_basic_halo_properties(
    positions,
    r2z: Callable[[np.ndarray], np.ndarray],
    pixelization: Pixelization,
    *,
    chunk_size: int = 4096,
    n_workers: int | None = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Compute comoving distance, redshift and pixel index for every halo.

    `r2z` must raise OutOfRange for distances outside its domain (see
    `RedshiftInterpolant`); a halo at the origin has no direction and is rejected
    the same way. Any other callable may be passed, so its returns are checked
    too: a non-finite or negative redshift raises OutOfRange before anything is
    stored. Chunks write disjoint slices of the outputs.
    """
    pos = _positions(positions)
    n = int(pos.shape[0])
    dist = np.empty((n,), dtype=float)
    redshift = np.empty((n,), dtype=float)
    hp_ind = np.empty((n,), dtype=np.int64)

    def _task(sl: slice):
        def task() -> None:
            p = pos[sl]
            d = np.sqrt(np.sum(p * p, axis=1))
            if np.any(d <= 0.0):
                raise OutOfRange("Halo at the origin: distance is zero and the direction is undefined.")
            z = np.asarray(r2z(d), dtype=float)
            if z.shape != d.shape:
                raise OutOfRange(f"distance→redshift function returned shape {z.shape}; expected {d.shape}.")
            bad = ~np.isfinite(z) | (z < 0.0)
            if np.any(bad):
                first = float(d[np.flatnonzero(bad)[0]])
                raise OutOfRange(
                    f"{int(np.count_nonzero(bad))} halo(s) got a non-finite or negative redshift "
                    f"(first at distance {first:.6g} Mpc)."
                )
            dist[sl] = d
            redshift[sl] = z
            u = p / d[:, None]
            hp_ind[sl] = pixelization.vector_to_pixel(u[:, 0], u[:, 1], u[:, 2])

        return task

    run_tasks([_task(sl) for sl in chunk_slices(n, chunk_size)], n_workers=n_workers)
    return dist, redshift, hp_ind


def get_angles(
    positions,
    pixelization: Pixelization,
    *,
    chunk_size: int = 4096,
    n_workers: int | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Colatitude θ ∈ [0, π] and longitude φ ∈ [0, 2π) of every halo."""
    pos = _positions(positions)
    n = int(pos.shape[0])
    theta = np.empty((n,), dtype=float)
    phi = np.empty((n,), dtype=float)

    def _task(sl: slice):
        def task() -> None:
            p = pos[sl]
            if np.any(np.all(p == 0.0, axis=1)):
                raise OutOfRange("Halo at the origin: the direction is undefined.")
            theta[sl], phi[sl] = pixelization.vector_to_angle(p[:, 0], p[:, 1], p[:, 2])

        return task

    run_tasks([_task(sl) for sl in chunk_slices(n, chunk_size)], n_workers=n_workers)
    return theta, phi


def derive_halo_properties(
    catalog: HaloCatalog,
    r2z: Callable[[np.ndarray], np.ndarray],
    pixelization: Pixelization,
    *,
    chunk_size: int = 4096,
    n_workers: int | None = None,
    progress: bool | None = None,
) -> HaloDerived:
    t0 = time.perf_counter()
    dist, redshift, hp_ind = get_basic_halo_properties(
        catalog, r2z, pixelization, chunk_size=chunk_size, n_workers=n_workers
    )
    theta, phi = get_angles(catalog, pixelization, chunk_size=chunk_size, n_workers=n_workers)
    for a in (dist, redshift, hp_ind, theta, phi):
        a.setflags(write=False)
    if progress_enabled(progress):
        z_txt = f"z=[{redshift.min():.3f}, {redshift.max():.3f}]" if redshift.size else "z=[]"
        log_progress(
            "geometry",
            f"{catalog.n_halos:,} halos {z_txt} dt={time.perf_counter() - t0:.2f}s",
        )
    return HaloDerived(distance=dist, redshift=redshift, pixel=hp_ind, theta=theta, phi=phi)
