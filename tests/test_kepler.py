"""
Test suite for the Kepler equation solvers.

Tests cover:
- Classical Kepler equation (circular, elliptic, failure modes)
- Universal Kepler equation
- Anomaly conversions
"""

import math

import numpy as np
import pytest
from orbitbox import (solve_kepler, solve_universal_kepler, stumpff_c, stumpff_s,
                      ConvergenceError, SolverStatus, temp_config)
from orbitbox.kepler import (true_to_eccentric, eccentric_to_true,
                             eccentric_to_mean, mean_to_true)

MU = 398600.0


class TestClassicalKepler:
    """E - e sin E = M"""

    @pytest.mark.parametrize("M", np.linspace(0, 2*np.pi, 13))
    def test_circular(self, M):
        """For e = 0 the eccentric anomaly equals the mean anomaly."""
        assert solve_kepler(0.0, M) == pytest.approx(M, abs=1e-8)

    def test_elliptic(self):
        E = solve_kepler(0.5, 1.0)
        assert abs(E - 0.5*math.sin(E) - 1.0) < 1e-7

    @pytest.mark.parametrize("e", [0.1, 0.5, 0.9, 0.99])
    @pytest.mark.parametrize("M", [0.05, 1.0, 3.0, 3.5, 6.0])
    def test_residual(self, e, M):
        """The converged E satisfies Kepler's equation."""
        E = solve_kepler(e, M)
        assert abs(E - e*math.sin(E) - M) < 1e-7

    def test_iteration_cap(self):
        """Too few iterations raise ConvergenceError."""
        with pytest.raises(ConvergenceError) as excinfo:
            solve_kepler(0.9, 0.1, max_iter=2)
        assert excinfo.value.status is SolverStatus.MAX_ITER_EXCEEDED
        assert excinfo.value.iterations == 2

    @pytest.mark.parametrize("e", [1.0, 1.5, -0.1])
    def test_invalid_eccentricity(self, e):
        with pytest.raises(ValueError):
            solve_kepler(e, 1.0)

    def test_invalid_eccentricity_relaxed_exhausts(self):
        """With relaxed validation an out-of-domain e reaches the iteration cap."""
        with temp_config(STRICT_VALIDATION=False):
            with pytest.warns(UserWarning):
                with pytest.raises(ConvergenceError) as excinfo:
                    solve_kepler(1.5, 1.0, max_iter=3)
        assert excinfo.value.status is SolverStatus.MAX_ITER_EXCEEDED
        assert excinfo.value.iterations == 3


class TestUniversalKepler:
    """Universal anomaly solver."""

    def test_zero_time(self):
        """No elapsed time gives chi = 0."""
        res = solve_universal_kepler(0.0, 7000.0, 0.5, 1/8000, MU)
        assert res.chi == pytest.approx(0.0, abs=1e-12)
        assert res.C == 0.5
        assert res.S == 1.0 / 6.0

    def test_circular_quarter_period(self):
        """On a circle chi = sqrt(a)·ΔE."""
        r0 = 7000.0
        T = 2*np.pi*r0**1.5/np.sqrt(MU)
        res = solve_universal_kepler(T/4, r0, 0.0, 1/r0, MU)
        assert res.chi == pytest.approx(np.sqrt(r0)*np.pi/2, rel=1e-9)
        assert res.z == pytest.approx((np.pi/2)**2, rel=1e-9)
        assert res.C == pytest.approx(stumpff_c(res.z))
        assert res.S == pytest.approx(stumpff_s(res.z))

    def test_backward(self):
        """Negative time gives negative chi."""
        res = solve_universal_kepler(-600.0, 7000.0, 0.0, 1/7000, MU)
        assert res.chi < 0

    def test_hyperbolic(self):
        """Negative alpha is solved on the hyperbolic branch."""
        res = solve_universal_kepler(1000.0, 7000.0, 0.0, -1/20000, MU)
        assert res.chi > 0
        assert res.z < 0

    def test_iteration_cap(self):
        with pytest.raises(ConvergenceError):
            solve_universal_kepler(3600.0, 7000.0, 1.0, 1/9000, MU, max_iter=1)


class TestAnomalyConversions:
    """True, eccentric and mean anomaly."""

    @pytest.mark.parametrize("theta", [0.0, 0.7, 2.0, 3.5, 5.9])
    def test_true_eccentric_round_trip(self, theta):
        E = true_to_eccentric(theta, 0.3)
        assert eccentric_to_true(E, 0.3) == pytest.approx(theta, abs=1e-12)

    def test_apsides(self):
        """Perigee and apogee are fixed points of every conversion."""
        assert true_to_eccentric(0.0, 0.6) == 0.0
        assert true_to_eccentric(np.pi, 0.6) == pytest.approx(np.pi)
        assert eccentric_to_mean(np.pi, 0.6) == pytest.approx(np.pi)

    def test_true_anomaly_range(self):
        """Returned true anomalies lie in [0, 2π)."""
        for E in np.linspace(-6, 6, 25):
            theta = eccentric_to_true(E, 0.4)
            assert 0 <= theta < 2*np.pi

    def test_mean_to_true(self):
        """mean_to_true inverts true -> mean."""
        e, theta = 0.25, 2.2
        M = eccentric_to_mean(true_to_eccentric(theta, e), e)
        assert mean_to_true(M, e) == pytest.approx(theta, abs=1e-7)

    def test_mean_to_true_wraps(self):
        assert mean_to_true(2*np.pi + 1.0, 0.0) == pytest.approx(1.0, abs=1e-8)

    def test_nonstrict_warning(self):
        """Out-of-range eccentricity warns when validation is relaxed."""
        with temp_config(STRICT_VALIDATION=False):
            with pytest.warns(UserWarning):
                try:
                    solve_kepler(1.2, 0.5)
                except ConvergenceError:
                    pass
