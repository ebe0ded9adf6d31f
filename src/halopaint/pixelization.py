from __future__ import annotations

from typing import Protocol

import healpy as hp
import numpy as np

from .errors import InvalidArgument


class Pixelization(Protocol):
    """Sphere → pixel mapping under a fixed global pixel ordering."""

    npix: int

    def vector_to_pixel(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray: ...

    def angle_to_pixel(self, theta: np.ndarray, phi: np.ndarray) -> np.ndarray: ...

    def vector_to_angle(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> tuple[np.ndarray, np.ndarray]: ...

    def pixel_area(self) -> float: ...


class HealpixRing:
    """HEALPix pixelization in RING ordering (colatitude θ ∈ [0, π], longitude φ ∈ [0, 2π))."""

    def __init__(self, nside: int):
        nside = int(nside)
        if nside <= 0 or not hp.isnsideok(nside):
            raise InvalidArgument(f"Invalid HEALPix nside: {nside}.")
        self.nside = nside
        self.npix = int(hp.nside2npix(nside))

    def __repr__(self) -> str:
        return f"HealpixRing(nside={self.nside})"

    def vector_to_pixel(self, x, y, z) -> np.ndarray:
        return np.asarray(hp.vec2pix(self.nside, x, y, z, nest=False), dtype=np.int64)

    def angle_to_pixel(self, theta, phi) -> np.ndarray:
        return np.asarray(hp.ang2pix(self.nside, theta, phi, nest=False), dtype=np.int64)

    def vector_to_angle(self, x, y, z) -> tuple[np.ndarray, np.ndarray]:
        vec = np.column_stack((np.ravel(x), np.ravel(y), np.ravel(z)))
        if vec.shape[0] == 0:
            return np.zeros((0,), dtype=float), np.zeros((0,), dtype=float)
        theta, phi = hp.vec2ang(vec)
        return np.asarray(theta, dtype=float), np.asarray(phi, dtype=float)

    def pixel_area(self) -> float:
        """Solid angle per pixel in steradians."""
        return float(hp.nside2pixarea(self.nside))
