import numpy as np
import pytest
from astropy.cosmology import FlatLambdaCDM

from halopaint.cosmology import RedshiftInterpolant


@pytest.fixture(scope="session")
def cosmo():
    return FlatLambdaCDM(H0=70.0, Om0=0.3)


@pytest.fixture(scope="session")
def r2z(cosmo):
    z = np.linspace(1e-4, 4.5, 3000)
    chi = cosmo.comoving_distance(z).value  # Mpc
    return RedshiftInterpolant.from_table(chi, z)


def random_positions(n: int, *, seed: int, r_min: float = 100.0, r_max: float = 4000.0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    v = rng.normal(size=(n, 3))
    v /= np.linalg.norm(v, axis=1)[:, None]
    r = rng.uniform(r_min, r_max, size=n)
    return v * r[:, None]


@pytest.fixture
def make_positions():
    return random_positions
