from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import astropy.units as u
import numpy as np

from .config import PaintConfig
from .errors import InvalidArgument
from .geometry import HaloCatalog, HaloDerived, derive_halo_properties
from .painting import paint_map
from .parallel import log_progress, progress_enabled
from .pixelization import HealpixRing

# flux_model(catalog, derived) -> per-halo flux, shape (N,), plain or a Quantity
FluxModel = Callable[[HaloCatalog, HaloDerived], "np.ndarray | u.Quantity"]


@dataclass(frozen=True)
class PaintResult:
    grid: np.ndarray | u.Quantity  # (npix,) flux per steradian, RING
    derived: HaloDerived
    nside: int
    unit: u.UnitBase | None = None  # grid unit when the flux model returned a Quantity


def paint_catalog(
    catalog: HaloCatalog,
    r2z: Callable[[np.ndarray], np.ndarray],
    flux_model: FluxModel,
    *,
    config: PaintConfig | None = None,
) -> PaintResult:
    """Halo catalog → all-sky flux map.

    Derives per-halo distance, redshift and sky position, asks `flux_model` for
    the flux of each halo (in whatever flux unit the caller works in), and paints
    the fluxes into a HEALPix RING map normalized per steradian.

    If `flux_model` returns a Quantity, its unit is carried through: the grid is
    returned as a Quantity in (flux unit)/sr and `PaintResult.unit` records it.
    Plain arrays give a plain grid and `unit=None`.
    """
    cfg = config or PaintConfig.from_env()
    pix = HealpixRing(cfg.nside)
    progress = progress_enabled(cfg.progress)
    t0 = time.perf_counter()

    derived = derive_halo_properties(
        catalog,
        r2z,
        pix,
        chunk_size=cfg.chunk_size,
        n_workers=cfg.workers,
        progress=progress,
    )
    raw = flux_model(catalog, derived)
    unit = None
    if isinstance(raw, u.Quantity):
        unit = raw.unit / u.sr
        raw = raw.value
    flux = np.asarray(raw, dtype=float)
    if flux.shape != (catalog.n_halos,):
        raise InvalidArgument(f"flux_model must return shape ({catalog.n_halos},); got {flux.shape}.")

    grid = paint_map(
        flux,
        derived.theta,
        derived.phi,
        pix,
        strategy=cfg.strategy,
        chunk_size=cfg.chunk_size,
        n_workers=cfg.workers,
        progress=progress,
    )
    if progress:
        log_progress("pipeline", f"done nside={cfg.nside} elapsed={time.perf_counter() - t0:.2f}s")
    if unit is not None:
        grid = grid << unit
    return PaintResult(grid=grid, derived=derived, nside=cfg.nside, unit=unit)
