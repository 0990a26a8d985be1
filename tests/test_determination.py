"""
Test suite for initial orbit determination.

Tests cover:
- Gibbs method on circular and elliptic orbits
- Lambert's problem, prograde and retrograde on the same endpoints
- Transfers beyond half a revolution and hyperbolic transfers
- Degenerate geometry and invalid input
- Element sets built from either method
"""

import numpy as np
import pytest
from orbitbox import (OES, gibbs, lambert, transfer_angle, propagate,
                      LambertSolution, StateVector, DegenerateGeometryError,
                      ConvergenceError, temp_config)
from orbitbox.kepler import true_to_eccentric, eccentric_to_mean

MU = 398600.0


def time_between(oes, theta1, theta2):
    """Time of flight from theta1 to theta2 on a bound orbit (theta1 < theta2 < π)."""
    e = oes.e
    M1 = eccentric_to_mean(true_to_eccentric(theta1, e), e)
    M2 = eccentric_to_mean(true_to_eccentric(theta2, e), e)
    return (M2 - M1) / oes.mean_motion()


@pytest.fixture
def circle():
    return OES.from_elements(h=np.sqrt(MU*8000), e=0.0, i=0.5, Omega=1.0,
                             omega=0.0, mu=MU)


@pytest.fixture
def ellipse():
    h = np.sqrt(MU*8000)  # p = 8000 km
    return OES.from_elements(h=h, e=0.2, i=0.5, Omega=0.7, omega=1.1, mu=MU)


@pytest.fixture
def retrograde_ellipse():
    h = np.sqrt(MU*8000)
    return OES.from_elements(h=h, e=0.2, i=np.pi - 0.5, Omega=0.7, omega=1.1, mu=MU)


# =============================================================================
# Gibbs
# =============================================================================

class TestGibbs:

    def test_circular(self, circle):
        """Recovers the circular velocity at the middle observation."""
        r1, r2, r3 = (circle.state_at(t).r for t in (0.2, 0.9, 1.6))
        state = gibbs(r1, r2, r3, MU)
        assert isinstance(state, StateVector)
        assert np.array_equal(state.r, r2)
        assert np.allclose(state.v, circle.state_at(0.9).v, rtol=0, atol=1e-8)
        assert state.speed == pytest.approx(np.sqrt(MU/8000), rel=1e-10)

    @pytest.mark.parametrize("thetas", [(0.2, 0.9, 1.6), (5.0, 5.8, 0.4), (2.0, 2.1, 2.2)])
    def test_elliptic(self, ellipse, thetas):
        r1, r2, r3 = (ellipse.state_at(t).r for t in thetas)
        state = gibbs(r1, r2, r3, MU)
        assert np.allclose(state.v, ellipse.state_at(thetas[1]).v, rtol=0, atol=1e-7)

    def test_collinear(self):
        with pytest.raises(DegenerateGeometryError):
            gibbs([7000, 0, 0], [8000, 0, 0], [9000, 0, 0], MU)

    def test_opposite_collinear(self):
        with pytest.raises(DegenerateGeometryError):
            gibbs([7000, 0, 0], [-7000, 0, 0], [7500, 0, 0], MU)

    def test_zero_vector(self):
        with pytest.raises(DegenerateGeometryError):
            gibbs([0, 0, 0], [7000, 0, 0], [0, 7000, 0], MU)

    def test_not_coplanar(self):
        with pytest.raises(ValueError):
            gibbs([7000, 0, 0], [0, 7000, 0], [0, 0, 7000], MU)

    def test_not_coplanar_nonstrict(self):
        """Relaxed validation warns and still returns a velocity."""
        with temp_config(STRICT_VALIDATION=False):
            with pytest.warns(UserWarning):
                state = gibbs([7000, 0, 0], [0, 7000, 0], [0, 0, 7000], MU)
        assert np.all(np.isfinite(state.v))

    def test_from_gibbs(self, ellipse):
        r1, r2, r3 = (ellipse.state_at(t).r for t in (0.2, 0.9, 1.6))
        oes = OES.from_gibbs(r1, r2, r3, MU)
        assert oes.h == pytest.approx(ellipse.h, rel=1e-9)
        assert oes.e == pytest.approx(ellipse.e, abs=1e-9)
        assert oes.i == pytest.approx(ellipse.i, abs=1e-9)
        assert oes.Omega == pytest.approx(ellipse.Omega, abs=1e-9)
        assert oes.omega == pytest.approx(ellipse.omega, abs=1e-8)
        assert oes.theta == pytest.approx(0.9, abs=1e-8)


# =============================================================================
# Lambert
# =============================================================================

class TestTransferAngle:

    def test_quarter_turn(self):
        r1, r2 = [7000, 0, 0], [0, 8000, 0]
        assert transfer_angle(r1, r2) == pytest.approx(np.pi/2)
        assert transfer_angle(r1, r2, prograde=False) == pytest.approx(3*np.pi/2)

    def test_clockwise_geometry(self):
        r1, r2 = [7000, 0, 0], [0, -8000, 0]
        assert transfer_angle(r1, r2) == pytest.approx(3*np.pi/2)
        assert transfer_angle(r1, r2, prograde=False) == pytest.approx(np.pi/2)

    def test_complementary(self):
        r1, r2 = [5000, 2000, 3000], [-1000, 7000, 1500]
        total = transfer_angle(r1, r2, True) + transfer_angle(r1, r2, False)
        assert total == pytest.approx(2*np.pi)


class TestLambert:

    def test_prograde(self, ellipse):
        """Recovers the orbit's velocities at both ends."""
        dt = time_between(ellipse, 0.3, 1.6)
        r1, r2 = ellipse.state_at(0.3).r, ellipse.state_at(1.6).r
        sol = lambert(r1, r2, dt, MU)
        assert isinstance(sol, LambertSolution)
        assert np.allclose(sol.v1, ellipse.state_at(0.3).v, rtol=0, atol=1e-6)
        assert np.allclose(sol.v2, ellipse.state_at(1.6).v, rtol=0, atol=1e-6)
        assert sol.z > 0  # elliptic transfer
        assert sol.iterations >= 1

    def test_retrograde(self, retrograde_ellipse):
        oes = retrograde_ellipse
        dt = time_between(oes, 0.3, 1.6)
        r1, r2 = oes.state_at(0.3).r, oes.state_at(1.6).r
        sol = lambert(r1, r2, dt, MU, prograde=False)
        assert np.allclose(sol.v1, oes.state_at(0.3).v, rtol=0, atol=1e-6)
        assert np.allclose(sol.v2, oes.state_at(1.6).v, rtol=0, atol=1e-6)

    def test_consistent_with_propagation(self, ellipse):
        """Propagating the departure state arrives at r2."""
        dt = time_between(ellipse, 0.3, 1.6)
        r1, r2 = ellipse.state_at(0.3).r, ellipse.state_at(1.6).r
        sol = lambert(r1, r2, dt, MU)
        arrival = propagate(sol.departure, dt, MU)
        assert np.allclose(arrival.r, r2, rtol=0, atol=1e-3)
        assert np.allclose(arrival.v, sol.v2, rtol=0, atol=1e-6)

    def test_from_lambert(self, ellipse):
        dt = time_between(ellipse, 0.3, 1.6)
        r1, r2 = ellipse.state_at(0.3).r, ellipse.state_at(1.6).r
        oes = OES.from_lambert(r1, r2, dt, MU)
        assert oes.h == pytest.approx(ellipse.h, rel=1e-6)
        assert oes.e == pytest.approx(ellipse.e, abs=1e-6)
        assert oes.i == pytest.approx(ellipse.i, abs=1e-6)
        assert oes.Omega == pytest.approx(ellipse.Omega, abs=1e-6)
        assert oes.omega == pytest.approx(ellipse.omega, abs=1e-5)
        assert oes.theta == pytest.approx(0.3, abs=1e-5)

    def test_zero_transfer_angle(self):
        with pytest.raises(DegenerateGeometryError):
            lambert([7000, 0, 0], [8000, 0, 0], 1000.0, MU)

    def test_half_revolution(self):
        """180 degree transfers have no unique plane."""
        with pytest.raises(DegenerateGeometryError):
            lambert([7000, 0, 0], [-8000, 0, 0], 3000.0, MU)

    @pytest.mark.parametrize("dt", [0.0, -100.0])
    def test_non_positive_time(self, dt):
        with pytest.raises(ValueError):
            lambert([7000, 0, 0], [0, 8000, 0], dt, MU)

    def test_iteration_cap(self, ellipse):
        dt = time_between(ellipse, 0.3, 1.6)
        r1, r2 = ellipse.state_at(0.3).r, ellipse.state_at(1.6).r
        with pytest.raises(ConvergenceError):
            lambert(r1, r2, dt, MU, max_iter=1)


def planar_pair(angle):
    """r1 on the x axis and r2 at the given polar angle in the xy plane."""
    r1 = np.array([7000.0, 0.0, 0.0])
    r2 = 9000.0 * np.array([np.cos(angle), np.sin(angle), 0.0])
    return r1, r2


# period of a reference orbit with a = 8000 km
PERIOD_8000 = 2*np.pi*np.sqrt(8000.0**3/MU)


class TestLambertLongWay:
    """Transfers sweeping more than half a revolution."""

    @pytest.mark.parametrize("periods", [0.6, 1.2, 2.0])
    def test_prograde_beyond_half_turn(self, periods):
        r1, r2 = planar_pair(5.5)
        dt = periods * PERIOD_8000
        assert transfer_angle(r1, r2) == pytest.approx(5.5)
        sol = lambert(r1, r2, dt, MU)
        assert 0 < sol.z < 4*np.pi**2
        assert np.all(np.abs(sol.v1) < 20)
        assert np.cross(r1, sol.v1)[2] > 0
        arrival = propagate(sol.departure, dt, MU)
        assert np.allclose(arrival.r, r2, rtol=0, atol=1e-3)
        assert np.allclose(arrival.v, sol.v2, rtol=0, atol=1e-5)

    def test_longer_flight_higher_z(self):
        """Longer flights over the same arc converge to larger z."""
        r1, r2 = planar_pair(5.5)
        zs = [lambert(r1, r2, k*PERIOD_8000, MU).z for k in (0.6, 1.2, 2.0)]
        assert zs[0] < zs[1] < zs[2]

    def test_element_set(self):
        r1, r2 = planar_pair(5.5)
        oes = OES.from_lambert(r1, r2, 1.2*PERIOD_8000, MU)
        assert 0 <= oes.e < 1
        assert oes.i == pytest.approx(0.0, abs=1e-9)


class TestLambertDirection:
    """One r1, r2, dt solved with both direction flags."""

    @pytest.mark.parametrize("angle", [2.0, 5.5])
    @pytest.mark.parametrize("prograde", [True, False])
    def test_arrives(self, angle, prograde):
        r1, r2 = planar_pair(angle)
        dt = 0.8 * PERIOD_8000
        sol = lambert(r1, r2, dt, MU, prograde=prograde)
        arrival = propagate(sol.departure, dt, MU)
        assert np.allclose(arrival.r, r2, rtol=0, atol=1e-3)
        assert np.allclose(arrival.v, sol.v2, rtol=0, atol=1e-5)

    @pytest.mark.parametrize("angle", [2.0, 5.5])
    def test_angular_momentum_sign(self, angle):
        """The prograde flag gives h_z > 0 and the retrograde flag h_z < 0."""
        r1, r2 = planar_pair(angle)
        dt = 0.8 * PERIOD_8000
        pro = lambert(r1, r2, dt, MU, prograde=True)
        retro = lambert(r1, r2, dt, MU, prograde=False)
        assert np.cross(r1, pro.v1)[2] > 0
        assert np.cross(r1, retro.v1)[2] < 0
        assert not np.allclose(pro.v1, retro.v1)

    def test_complementary_arcs(self):
        """The two arcs together cover a full revolution about the body."""
        r1, r2 = planar_pair(2.0)
        dt = 0.8 * PERIOD_8000
        pro = OES.from_lambert(r1, r2, dt, MU, prograde=True)
        retro = OES.from_lambert(r1, r2, dt, MU, prograde=False)
        assert pro.i == pytest.approx(0.0, abs=1e-9)
        assert retro.i == pytest.approx(np.pi, abs=1e-9)


class TestLambertHyperbolic:

    def test_short_flight(self):
        """A quarter turn in five minutes needs a hyperbolic transfer."""
        r1, r2 = [7000.0, 0.0, 0.0], [0.0, 7000.0, 0.0]
        sol = lambert(r1, r2, 300.0, MU)
        assert sol.z < 0
        arrival = propagate(sol.departure, 300.0, MU)
        assert np.allclose(arrival.r, r2, rtol=0, atol=1e-3)
