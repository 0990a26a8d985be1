'''Orbital mechanics toolbox
Kepler equation solvers and anomaly conversions'''

import math
from typing import NamedTuple

from .roots import newton, MAX_ITER
from .stumpff import stumpff_c, stumpff_s
from .utils import validation_error, TWO_PI


class UniversalAnomaly(NamedTuple):
    """Converged universal anomaly with the Stumpff values at that point."""
    chi: float  # universal anomaly [km^0.5]
    C: float    # C(z)
    S: float    # S(z)
    z: float    # alpha*chi^2


def solve_kepler(e: float, M_e: float, max_iter: int = MAX_ITER) -> float:
    """
    Solve Kepler's equation E - e*sin(E) = M_e for the eccentric anomaly.

    Parameters
    ----------
    e : float
        Eccentricity, 0 <= e < 1
    M_e : float
        Mean anomaly [rad]
    max_iter : int, optional
        Iteration cap (default MAX_ITER)

    Returns
    -------
    float
        Eccentric anomaly E [rad]

    Raises
    ------
    ValueError
        If e is outside [0, 1) and config.STRICT_VALIDATION is True
    ConvergenceError
        If Newton's method does not converge within max_iter iterations

    Notes
    -----
    An eccentricity outside [0, 1) is rejected as invalid input before any
    iteration when validation is strict, so it surfaces as ValueError rather
    than as an exhausted iteration. With STRICT_VALIDATION off the solve is
    attempted after a warning, and a solve that does not converge raises
    ConvergenceError with status MAX_ITER_EXCEEDED.
    """
    if not 0 <= e < 1:
        validation_error(f"Classical Kepler equation requires 0 <= e < 1, got e={e}")
    # initial estimate, Prussing and Conway, 1993
    if M_e < math.pi:
        E0 = M_e + e / 2
    else:
        E0 = M_e - e / 2
    result = newton(
        lambda E: E - e * math.sin(E) - M_e,
        lambda E: 1 - e * math.cos(E),
        E0,
        max_iter=max_iter,
    )
    return result.check("Kepler equation solve")


def solve_universal_kepler(
    dt: float,
    r0: float,
    vr0: float,
    alpha: float,
    mu: float,
    max_iter: int = MAX_ITER,
) -> UniversalAnomaly:
    """
    Solve the universal Kepler equation for the universal anomaly.

    Parameters
    ----------
    dt : float
        Time since the initial state [s]
    r0 : float
        Initial radial distance [km]
    vr0 : float
        Initial radial velocity [km/s]
    alpha : float
        Reciprocal of the semi-major axis [1/km]
        (positive ellipse, zero parabola, negative hyperbola)
    mu : float
        Gravitational parameter [km³/s²]
    max_iter : int, optional
        Iteration cap (default MAX_ITER)

    Returns
    -------
    UniversalAnomaly
        chi together with C(z), S(z) and z evaluated at the converged chi,
        ready for the Lagrange coefficients

    Raises
    ------
    ConvergenceError
        If Newton's method does not converge within max_iter iterations
    """
    sqmu = math.sqrt(mu)
    a0 = r0 * vr0 / sqmu
    b0 = 1 - alpha * r0

    def f(chi):
        chisq = chi * chi
        z = alpha * chisq
        return (a0 * chisq * stumpff_c(z) + b0 * chi * chisq * stumpff_s(z)
                + r0 * chi - sqmu * dt)

    def fprime(chi):
        chisq = chi * chi
        z = alpha * chisq
        return (a0 * chi * (1 - z * stumpff_s(z)) + b0 * chisq * stumpff_c(z)
                + r0)

    # initial guess of the universal anomaly, Chobotov (2002)
    chi0 = sqmu * abs(alpha) * dt
    chi = newton(f, fprime, chi0, max_iter=max_iter).check("Universal Kepler equation solve")
    z = alpha * chi * chi
    return UniversalAnomaly(chi, stumpff_c(z), stumpff_s(z), z)


# ========== ANOMALY CONVERSIONS ==========
def true_to_eccentric(theta: float, e: float) -> float:
    """Eccentric anomaly from true anomaly (elliptic orbits), in (-π, π]."""
    return 2 * math.atan2(math.sqrt(1 - e) * math.sin(theta / 2),
                          math.sqrt(1 + e) * math.cos(theta / 2))


def eccentric_to_true(E: float, e: float) -> float:
    """True anomaly from eccentric anomaly (elliptic orbits), in [0, 2π)."""
    theta = 2 * math.atan2(math.sqrt(1 + e) * math.sin(E / 2),
                           math.sqrt(1 - e) * math.cos(E / 2))
    return theta % TWO_PI


def eccentric_to_mean(E: float, e: float) -> float:
    """Mean anomaly from eccentric anomaly (Kepler's equation)."""
    return E - e * math.sin(E)


def mean_to_true(M_e: float, e: float) -> float:
    """True anomaly from mean anomaly, solving Kepler's equation."""
    E = solve_kepler(e, M_e % TWO_PI)
    return eccentric_to_true(E, e)
