from __future__ import annotations

import astropy.units as u


class HalopaintError(Exception):
    """Base class for errors raised by the painting core."""


class InvalidArgument(HalopaintError, ValueError):
    """Malformed partition or array parameters (non-positive sizes, negative lengths, shape mismatch)."""


class OutOfRange(HalopaintError, ValueError):
    """A halo distance or redshift falls outside the distance→redshift interpolant's domain."""


class UnitMismatch(HalopaintError, u.UnitsError):
    """A spectral quantity was combined with, or converted to, an incompatible physical dimension."""
