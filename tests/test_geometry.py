import healpy as hp
import numpy as np
import pytest

from halopaint.cosmology import RedshiftInterpolant
from halopaint.errors import InvalidArgument, OutOfRange
from halopaint.geometry import HaloCatalog, derive_halo_properties, get_angles, get_basic_halo_properties
from halopaint.pixelization import HealpixRing


def test_basic_properties_match_direct_computation(r2z, cosmo, make_positions):
    pos = make_positions(3000, seed=1)
    pix = HealpixRing(64)
    dist, z, ipix = get_basic_halo_properties(pos, r2z, pix, chunk_size=128, n_workers=4)

    np.testing.assert_allclose(dist, np.linalg.norm(pos, axis=1), rtol=1e-13)
    np.testing.assert_allclose(cosmo.comoving_distance(z).value, dist, rtol=1e-6)
    np.testing.assert_array_equal(ipix, hp.vec2pix(64, pos[:, 0], pos[:, 1], pos[:, 2]))
    assert ipix.dtype == np.int64


def test_angles_ranges_and_consistency(make_positions):
    pos = make_positions(2000, seed=2)
    pix = HealpixRing(32)
    theta, phi = get_angles(pos, pix, chunk_size=100, n_workers=3)
    assert np.all((theta >= 0.0) & (theta <= np.pi))
    assert np.all((phi >= 0.0) & (phi < 2.0 * np.pi))

    r = np.linalg.norm(pos, axis=1)
    np.testing.assert_allclose(np.cos(theta), pos[:, 2] / r, atol=1e-12)
    np.testing.assert_allclose(np.sin(theta) * np.cos(phi), pos[:, 0] / r, atol=1e-12)
    np.testing.assert_allclose(np.sin(theta) * np.sin(phi), pos[:, 1] / r, atol=1e-12)


def test_outputs_follow_input_permutation(r2z, make_positions):
    pos = make_positions(1500, seed=3)
    mass = np.geomspace(1e12, 1e15, pos.shape[0])
    pix = HealpixRing(16)
    perm = np.random.default_rng(9).permutation(pos.shape[0])

    a = derive_halo_properties(HaloCatalog(pos, mass), r2z, pix, chunk_size=64, n_workers=4)
    b = derive_halo_properties(HaloCatalog(pos[perm], mass[perm]), r2z, pix, chunk_size=97, n_workers=2)

    np.testing.assert_allclose(a.distance[perm], b.distance, rtol=1e-14)
    np.testing.assert_allclose(a.redshift[perm], b.redshift, rtol=1e-14)
    np.testing.assert_array_equal(a.pixel[perm], b.pixel)
    np.testing.assert_allclose(a.theta[perm], b.theta, rtol=1e-14)
    np.testing.assert_allclose(a.phi[perm], b.phi, rtol=1e-14)


def test_derived_arrays_are_read_only(r2z, make_positions):
    pos = make_positions(10, seed=4)
    d = derive_halo_properties(HaloCatalog(pos, np.ones(10)), r2z, HealpixRing(8), n_workers=1)
    assert d.n_halos == 10
    with pytest.raises(ValueError):
        d.redshift[0] = 1.0


def test_distance_beyond_domain_raises_out_of_range(r2z, make_positions):
    pos = make_positions(500, seed=5)
    pos[321] = [0.0, 0.0, 2.0 * r2z.d_max]
    with pytest.raises(OutOfRange):
        get_basic_halo_properties(pos, r2z, HealpixRing(8), chunk_size=16, n_workers=4)


def test_halo_at_origin_raises_out_of_range(r2z):
    pos = np.array([[100.0, 0.0, 0.0], [0.0, 0.0, 0.0]])
    with pytest.raises(OutOfRange):
        get_basic_halo_properties(pos, r2z, HealpixRing(8), n_workers=1)
    with pytest.raises(OutOfRange):
        get_angles(pos, HealpixRing(8), n_workers=1)


@pytest.mark.parametrize(
    "bad_r2z",
    [
        lambda d: np.where(d > 150.0, np.nan, d / 3000.0),
        lambda d: np.where(d > 150.0, -0.01, d / 3000.0),
        lambda d: np.where(d > 150.0, np.inf, d / 3000.0),
    ],
)
def test_plain_callable_bad_redshift_raises_out_of_range(bad_r2z):
    pos = np.array([[100.0, 0.0, 0.0], [0.0, 200.0, 0.0], [0.0, 0.0, 120.0]])
    with pytest.raises(OutOfRange):
        get_basic_halo_properties(pos, bad_r2z, HealpixRing(8), chunk_size=1, n_workers=2)


def test_plain_callable_good_redshift_is_stored():
    pos = np.array([[100.0, 0.0, 0.0], [0.0, 200.0, 0.0]])
    dist, z, _ = get_basic_halo_properties(pos, lambda d: d / 3000.0, HealpixRing(8), n_workers=1)
    np.testing.assert_allclose(z, dist / 3000.0)


def test_interpolant_never_clamps():
    r2z = RedshiftInterpolant.from_table(np.array([10.0, 20.0, 30.0]), np.array([0.1, 0.2, 0.3]))
    assert float(r2z(20.0)) == pytest.approx(0.2)
    with pytest.raises(OutOfRange):
        r2z(np.array([15.0, 30.0000001]))
    with pytest.raises(OutOfRange):
        r2z(np.nan)


def test_interpolant_checks_returned_redshift():
    r2z = RedshiftInterpolant(r2z=lambda d: d * 10.0, d_min=0.0, d_max=1.0, z_min=0.0, z_max=5.0)
    with pytest.raises(OutOfRange):
        r2z(np.array([0.2, 0.9]))


def test_interpolant_rejects_bad_tables():
    with pytest.raises(InvalidArgument):
        RedshiftInterpolant.from_table(np.array([1.0, 1.0, 2.0]), np.array([0.1, 0.2, 0.3]))
    with pytest.raises(InvalidArgument):
        RedshiftInterpolant.from_table(np.array([1.0]), np.array([0.1]))


def test_catalog_from_table_and_validation():
    table = np.array([[1.0, 2.0, 3.0, 1e13], [4.0, 5.0, 6.0, 2e13]])
    cat = HaloCatalog.from_table(table)
    assert cat.n_halos == 2
    np.testing.assert_array_equal(cat.mass, [1e13, 2e13])
    assert table.flags.writeable
    with pytest.raises(InvalidArgument):
        HaloCatalog.from_table(np.zeros((3, 3)))
    with pytest.raises(InvalidArgument):
        HaloCatalog(np.zeros((3, 3)), np.zeros(2))


def test_empty_catalog(r2z):
    d = derive_halo_properties(HaloCatalog(np.zeros((0, 3)), np.zeros(0)), r2z, HealpixRing(8), n_workers=2)
    assert d.n_halos == 0
    assert d.pixel.dtype == np.int64
