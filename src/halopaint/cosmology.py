from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np
from scipy.interpolate import PchipInterpolator

from .errors import InvalidArgument, OutOfRange


@dataclass(frozen=True)
class RedshiftInterpolant:
    """Comoving distance [Mpc] → redshift with an explicit validated domain.

    `r2z` is any monotone vectorized callable. Distances outside
    [d_min, d_max] and redshifts outside [z_min, z_max] raise OutOfRange; nothing
    is clamped.
    """

    r2z: Callable[[np.ndarray], np.ndarray]
    d_min: float
    d_max: float
    z_min: float
    z_max: float

    def __post_init__(self) -> None:
        if not (np.isfinite(self.d_min) and np.isfinite(self.d_max) and self.d_max > self.d_min):
            raise InvalidArgument("Require finite d_min < d_max.")
        if not (np.isfinite(self.z_min) and np.isfinite(self.z_max) and self.z_max > self.z_min):
            raise InvalidArgument("Require finite z_min < z_max.")

    @classmethod
    def from_table(cls, distance: np.ndarray, redshift: np.ndarray) -> "RedshiftInterpolant":
        """Monotone cubic (PCHIP) interpolant through tabulated (distance, redshift) pairs."""
        d = np.asarray(distance, dtype=float)
        z = np.asarray(redshift, dtype=float)
        if d.ndim != 1 or d.shape != z.shape or d.size < 2:
            raise InvalidArgument("distance and redshift must be 1D arrays of equal length >= 2.")
        if not (np.all(np.isfinite(d)) and np.all(np.isfinite(z))):
            raise InvalidArgument("distance and redshift tables must be finite.")
        if np.any(np.diff(d) <= 0) or np.any(np.diff(z) <= 0):
            raise InvalidArgument("distance and redshift tables must be strictly increasing.")
        spline = PchipInterpolator(d, z, extrapolate=False)
        return cls(r2z=spline, d_min=float(d[0]), d_max=float(d[-1]), z_min=float(z[0]), z_max=float(z[-1]))

    def __call__(self, distance) -> np.ndarray:
        d = np.asarray(distance, dtype=float)
        bad = ~np.isfinite(d) | (d < self.d_min) | (d > self.d_max)
        if np.any(bad):
            first = float(d.ravel()[np.flatnonzero(bad.ravel())[0]])
            raise OutOfRange(
                f"{int(np.count_nonzero(bad))} distance(s) outside the interpolation domain "
                f"[{self.d_min:.6g}, {self.d_max:.6g}] Mpc (first: {first:.6g})."
            )
        z = np.asarray(self.r2z(d), dtype=float)
        # Small tolerance for interpolation round-off at the table ends.
        tol = 1e-12 * max(1.0, abs(self.z_max))
        bad_z = ~np.isfinite(z) | (z < self.z_min - tol) | (z > self.z_max + tol)
        if np.any(bad_z):
            raise OutOfRange(
                f"{int(np.count_nonzero(bad_z))} redshift(s) outside [{self.z_min:.6g}, {self.z_max:.6g}] "
                "returned by the distance→redshift function."
            )
        return z
