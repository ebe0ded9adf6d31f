from __future__ import annotations

import astropy.constants as const
import astropy.units as u
import numpy as np

from .errors import InvalidArgument
from .units import convert, physical_kind, require_quantity, require_surface_brightness

# Fixsen et al. (1998), ApJ 508, 123: Galactic + interplanetary foreground in the
# FIRAS data, modelled as a power-law-emissivity blackbody in wavenumber.
FIXSEN_AMPLITUDE = 1.3e-5
FIXSEN_INDEX = 0.64
FIXSEN_REFERENCE_WAVENUMBER = 100.0 / u.cm
FIXSEN_TEMPERATURE = 18.5 * u.K


def _kelvin(temperature) -> u.Quantity:
    temperature = require_quantity(temperature, name="temperature")
    physical_kind(temperature, ("temperature",), name="temperature")
    T = convert(temperature, u.K, name="temperature", equivalencies=u.temperature())
    if np.any(~np.isfinite(T.value)) or np.any(T.value <= 0):
        raise InvalidArgument("temperature must be finite and positive.")
    return T


def _spectral_kind(x) -> str:
    x = require_quantity(x, name="x")
    kind = physical_kind(x, ("frequency", "length"), name="x")
    if np.any(~np.isfinite(x.value)) or np.any(x.value <= 0):
        raise InvalidArgument("x (frequency or wavelength) must be finite and positive.")
    return kind


def _blackbody_frequency(nu: u.Quantity, T: u.Quantity) -> u.Quantity:
    nu = nu.to(u.GHz)
    x = (const.h * nu / (const.k_B * T)).to_value(u.dimensionless_unscaled)
    return 2.0 * const.h * nu**3 / const.c**2 / np.expm1(x) / u.sr


def _blackbody_wavelength(lam: u.Quantity, T: u.Quantity) -> u.Quantity:
    lam = lam.to(u.um)
    x = (const.h * const.c / (lam * const.k_B * T)).to_value(u.dimensionless_unscaled)
    nu = (const.c / lam).to(u.GHz)
    b_lambda = 2.0 * const.h * const.c**2 / lam**5 / np.expm1(x)
    # B_nu = B_lambda * lambda^2 / c = B_lambda * c / nu^2
    return b_lambda * const.c / nu**2 / u.sr


def blackbody(x: u.Quantity, temperature: u.Quantity, *, unit_out=u.Jy / u.sr) -> u.Quantity:
    """Planck spectral radiance per unit frequency.

    Parameters
    ----------
    x:
        Frequency or wavelength (any compatible unit, scalar or array).
    temperature:
        Blackbody temperature.
    unit_out:
        Output unit; must be flux density per solid angle (e.g. Jy/sr, MJy/sr,
        erg / (s cm2 Hz sr)).
    """
    unit_out = require_surface_brightness(unit_out)
    T = _kelvin(temperature)
    if _spectral_kind(x) == "frequency":
        emission = _blackbody_frequency(x, T)
    else:
        emission = _blackbody_wavelength(x, T)
    return convert(emission, unit_out, name="blackbody radiance")


def _wavenumber(x: u.Quantity) -> u.Quantity:
    if _spectral_kind(x) == "frequency":
        return (x / const.c).to(1 / u.cm)
    return (1.0 / x).to(1 / u.cm)


def fixsen_model(
    x: u.Quantity,
    *,
    temperature: u.Quantity = FIXSEN_TEMPERATURE,
    unit_out=u.MJy / u.sr,
) -> u.Quantity:
    """Fixsen et al. (1998) modified-blackbody foreground.

    I(x) = 1.3e-5 (σ / 100 cm^-1)^0.64 B(x, T), with σ the wavenumber of `x`
    (ν/c for a frequency, 1/λ for a wavelength). Both forms describe the same
    physical spectrum, so frequency and wavelength inputs agree at ν = c/λ.
    """
    unit_out = require_surface_brightness(unit_out)
    sigma = _wavenumber(x)
    ratio = (sigma / FIXSEN_REFERENCE_WAVENUMBER).to_value(u.dimensionless_unscaled)
    b = blackbody(x, temperature, unit_out=unit_out)
    return FIXSEN_AMPLITUDE * ratio**FIXSEN_INDEX * b
