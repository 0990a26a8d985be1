"""
Test suite for coordinate frame transformations.

Tests cover:
- Perifocal to geocentric direction cosine matrix
- Inertial to rotating frame
- Right ascension and declination quadrants
"""

import numpy as np
import pytest
from orbitbox import (perifocal_to_geocentric, change_coords, inertial_to_rotating,
                      right_ascension_declination)


class TestPerifocalToGeocentric:

    @pytest.mark.parametrize("Omega, omega, i", [
        (0.0, 0.0, 0.0), (1.2, 2.5, 0.6), (4.0, 5.0, 2.8), (6.0, 0.1, np.pi/2),
    ])
    def test_orthonormal(self, Omega, omega, i):
        Q = perifocal_to_geocentric(Omega, omega, i)
        assert np.allclose(Q @ Q.T, np.eye(3), atol=1e-14)
        assert np.linalg.det(Q) == pytest.approx(1.0)

    def test_identity(self):
        assert np.allclose(perifocal_to_geocentric(0.0, 0.0, 0.0), np.eye(3))

    def test_orbit_normal(self):
        """The third column is the orbit normal."""
        Omega, i = 1.2, 0.6
        Q = perifocal_to_geocentric(Omega, 2.5, i)
        expected = [np.sin(Omega)*np.sin(i), -np.cos(Omega)*np.sin(i), np.cos(i)]
        assert np.allclose(Q[:, 2], expected)

    def test_perigee_direction(self):
        """With i = 0 the perigee lies at angle Omega + omega from x."""
        Q = perifocal_to_geocentric(0.4, 0.7, 0.0)
        assert np.allclose(Q[:, 0], [np.cos(1.1), np.sin(1.1), 0.0])

    def test_change_coords(self):
        vec = change_coords([1.0, 0.0, 0.0], np.pi/2, 0.0, 0.0)
        assert np.allclose(vec, [0.0, 1.0, 0.0])

    def test_change_coords_node(self):
        """The perifocal x axis maps to the ascending node when omega = 0."""
        vec = change_coords([7000.0, 0.0, 0.0], 0.8, 0.0, 1.0)
        assert np.allclose(vec, 7000.0*np.array([np.cos(0.8), np.sin(0.8), 0.0]))


class TestInertialToRotating:

    def test_fixed_point(self):
        """An inertial direction at angle theta_g appears on the rotating x axis."""
        theta_g = 0.9
        R = inertial_to_rotating(theta_g)
        assert np.allclose(R @ [np.cos(theta_g), np.sin(theta_g), 0.0], [1.0, 0.0, 0.0])

    def test_z_axis_unchanged(self):
        assert np.allclose(inertial_to_rotating(2.0) @ [0, 0, 1.0], [0, 0, 1.0])

    def test_orthonormal(self):
        R = inertial_to_rotating(4.2)
        assert np.allclose(R @ R.T, np.eye(3))


class TestRightAscensionDeclination:

    @pytest.mark.parametrize("r, ra, dec", [
        ([1.0, 0.0, 0.0], 0.0, 0.0),
        ([1.0, 1.0, 0.0], np.pi/4, 0.0),
        ([-1.0, 1.0, 0.0], 3*np.pi/4, 0.0),
        ([-1.0, -1.0, 0.0], 5*np.pi/4, 0.0),
        ([1.0, -1.0, 0.0], 7*np.pi/4, 0.0),
        ([-1.0, 0.0, 1.0], np.pi, np.pi/4),
        ([0.0, 3.0, -3.0], np.pi/2, -np.pi/4),
    ])
    def test_quadrants(self, r, ra, dec):
        alpha, delta = right_ascension_declination(np.array(r)*7000.0)
        assert alpha == pytest.approx(ra, abs=1e-7)
        assert delta == pytest.approx(dec, abs=1e-12)

    def test_pole(self):
        """Right ascension is reported as zero on the polar axis."""
        assert right_ascension_declination([0.0, 0.0, 7000.0]) == (0.0, pytest.approx(np.pi/2))
        alpha, delta = right_ascension_declination([0.0, 0.0, -7000.0])
        assert alpha == 0.0
        assert delta == pytest.approx(-np.pi/2)

    def test_range(self):
        rng = np.random.default_rng(1)
        for r in rng.normal(size=(50, 3)):
            alpha, delta = right_ascension_declination(r)
            assert 0 <= alpha < 2*np.pi
            assert -np.pi/2 <= delta <= np.pi/2
            # reconstruct the direction
            u = [np.cos(delta)*np.cos(alpha), np.cos(delta)*np.sin(alpha), np.sin(delta)]
            assert np.allclose(u, r/np.linalg.norm(r), atol=1e-7)

    def test_bad_input(self):
        with pytest.raises(ValueError):
            right_ascension_declination([1.0, 2.0])
