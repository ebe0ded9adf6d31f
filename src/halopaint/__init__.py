"""
halopaint: paint halo catalogs into all-sky HEALPix flux maps.

The main public entry points are:
  - `paint_catalog` (catalog → map in one call)
  - `catalog_to_map` (accumulate source fluxes into an existing grid)
  - `blackbody`, `fixsen_model` (unit-tagged spectral models)
"""

from .chunking import chunk, chunk_slices, worker_range, worker_slice
from .config import PaintConfig
from .cosmology import RedshiftInterpolant
from .errors import HalopaintError, InvalidArgument, OutOfRange, UnitMismatch
from .geometry import HaloCatalog, HaloDerived, derive_halo_properties, get_angles, get_basic_halo_properties
from .painting import catalog_to_map, paint_map
from .pipeline import PaintResult, paint_catalog
from .pixelization import HealpixRing, Pixelization
from .random_fill import threaded_rand
from .spectral import blackbody, fixsen_model
from .subhalos import generate_subhalo_offsets, halo_index_of_subhalos, prepend_zeros, subhalo_slice

__all__ = [
    "chunk",
    "chunk_slices",
    "worker_range",
    "worker_slice",
    "PaintConfig",
    "RedshiftInterpolant",
    "HalopaintError",
    "InvalidArgument",
    "OutOfRange",
    "UnitMismatch",
    "HaloCatalog",
    "HaloDerived",
    "derive_halo_properties",
    "get_angles",
    "get_basic_halo_properties",
    "catalog_to_map",
    "paint_map",
    "PaintResult",
    "paint_catalog",
    "HealpixRing",
    "Pixelization",
    "threaded_rand",
    "blackbody",
    "fixsen_model",
    "generate_subhalo_offsets",
    "halo_index_of_subhalos",
    "prepend_zeros",
    "subhalo_slice",
]
