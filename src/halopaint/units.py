from __future__ import annotations

from typing import Iterable

import astropy.units as u

from .errors import UnitMismatch

# Spectral radiance per unit frequency, the dimension every spectral model returns.
SURFACE_BRIGHTNESS = u.Jy / u.sr


def require_quantity(value, *, name: str) -> u.Quantity:
    """Return `value` as a Quantity, refusing bare numbers."""
    if not isinstance(value, u.Quantity):
        raise UnitMismatch(f"{name} must carry an explicit unit; got {type(value).__name__}.")
    return value


def physical_kind(q: u.Quantity | u.UnitBase, kinds: Iterable[str], *, name: str) -> str:
    """Return which of `kinds` (astropy physical types) `q` has, else raise UnitMismatch."""
    unit = q.unit if isinstance(q, u.Quantity) else u.Unit(q)
    ptype = unit.physical_type
    for kind in kinds:
        if ptype == kind:
            return kind
    raise UnitMismatch(f"{name} has physical type '{ptype}'; expected one of {sorted(kinds)}.")


def require_surface_brightness(unit) -> u.UnitBase:
    """Validate an output unit for spectral radiance (flux density per solid angle)."""
    try:
        unit = u.Unit(unit)
    except (TypeError, ValueError) as e:
        raise UnitMismatch(f"Not a valid unit: {unit!r}.") from e
    if not unit.is_equivalent(SURFACE_BRIGHTNESS):
        raise UnitMismatch(f"unit_out={unit} is not a flux density per solid angle (e.g. Jy/sr).")
    return unit


def convert(q: u.Quantity, unit, *, name: str = "quantity", equivalencies=()) -> u.Quantity:
    """Convert `q` to `unit`, failing fast with UnitMismatch on incompatible dimensions."""
    q = require_quantity(q, name=name)
    try:
        return q.to(unit, equivalencies=equivalencies)
    except u.UnitConversionError as e:
        raise UnitMismatch(f"Cannot convert {name} from {q.unit} to {unit}.") from e
