'''Orbital mechanics toolbox
Initial orbit determination: Gibbs and Lambert methods'''

import math
from dataclasses import dataclass

import numpy as np

from .config import config
from .exceptions import ConvergenceError, DegenerateGeometryError
from .roots import newton, SolverStatus, ERR_TOL, MAX_ITER
from .state import StateVector
from .stumpff import stumpff_c, stumpff_s
from .utils import as_vector3, check_mu, safe_arccos, validation_error, TWO_PI

# single-revolution upper limit on z, where C(z) vanishes
Z_MAX = 4 * math.pi**2
# lowest z tried when bracketing a hyperbolic Lambert transfer
Z_SEARCH_MIN = -1.0e4
UPPER_BRACKET_STEPS = 20
BISECTION_STEPS = 100


# ========== GIBBS METHOD ==========
def gibbs(r1, r2, r3, mu: float) -> StateVector:
    """
    Velocity at the middle of three coplanar position observations.

    No observation times are needed. The observations must lie on one orbit
    and be ordered along it.

    Parameters
    ----------
    r1, r2, r3 : array_like
        Successive position vectors [km]
    mu : float
        Gravitational parameter [km³/s²]

    Returns
    -------
    StateVector
        Position r2 and the velocity at r2

    Raises
    ------
    DegenerateGeometryError
        If the observations are collinear (or otherwise make the N or D
        vectors vanish)
    ValueError
        If the observations are not coplanar and config.STRICT_VALIDATION is True
    """
    mu = check_mu(mu)
    r1 = as_vector3(r1, "r1")
    r2 = as_vector3(r2, "r2")
    r3 = as_vector3(r3, "r3")
    r1_norm = np.linalg.norm(r1)
    r2_norm = np.linalg.norm(r2)
    r3_norm = np.linalg.norm(r3)
    scale = max(r1_norm, r2_norm, r3_norm)
    if scale == 0 or min(r1_norm, r2_norm, r3_norm) == 0:
        raise DegenerateGeometryError("Gibbs observations must be nonzero vectors")

    C12 = np.cross(r1, r2)
    C23 = np.cross(r2, r3)
    C31 = np.cross(r3, r1)

    # triple product normalized by the radii, zero for coplanar vectors
    out_of_plane = abs(np.dot(r1, C23)) / (r1_norm * r2_norm * r3_norm)
    if out_of_plane > config.COPLANAR_TOL:
        validation_error(f"Gibbs observations are not coplanar "
                         f"(normalized triple product {out_of_plane:.3e})")

    N = r1_norm*C23 + r2_norm*C31 + r3_norm*C12
    D = C12 + C23 + C31
    S = (r2_norm - r3_norm)*r1 + (r3_norm - r1_norm)*r2 + (r1_norm - r2_norm)*r3
    N_norm = np.linalg.norm(N)
    D_norm = np.linalg.norm(D)
    if (D_norm < config.DEGENERACY_TOL * scale**2
            or N_norm < config.DEGENERACY_TOL * scale**3):
        raise DegenerateGeometryError(
            f"Gibbs method is degenerate for these observations "
            f"(|N|={N_norm:.3e}, |D|={D_norm:.3e}); positions may be collinear")

    v2 = np.sqrt(mu / (N_norm * D_norm)) * (np.cross(D, r2) / r2_norm + S)
    if not np.all(np.isfinite(v2)):
        raise DegenerateGeometryError("Gibbs method produced a non-finite velocity")
    return StateVector(r2, v2)


# ========== LAMBERT METHOD ==========
@dataclass(frozen=True)
class LambertSolution:
    """
    Solution of Lambert's problem.

    Attributes
    ----------
    departure : StateVector
        Position and transfer velocity at r1
    arrival : StateVector
        Position and transfer velocity at r2
    z : float
        Converged universal variable z = alpha*chi^2
    iterations : int
        Newton iterations used
    """
    departure: StateVector
    arrival: StateVector
    z: float
    iterations: int

    @property
    def v1(self) -> np.ndarray:
        return self.departure.v

    @property
    def v2(self) -> np.ndarray:
        return self.arrival.v


def transfer_angle(r1, r2, prograde: bool = True) -> float:
    """
    Transfer angle from r1 to r2 for a prograde or retrograde trajectory.

    The sign of the z-component of r1 x r2 tells whether the short way
    around moves counter-clockwise when viewed from +z. Prograde transfers
    move counter-clockwise, retrograde ones clockwise; the two flags give
    complementary angles.

    Parameters
    ----------
    r1, r2 : array_like
        Position vectors [km]
    prograde : bool, optional
        Direction of motion (default True)

    Returns
    -------
    float
        Transfer angle in [0, 2π) [rad]
    """
    r1 = as_vector3(r1, "r1")
    r2 = as_vector3(r2, "r2")
    cross_z = np.cross(r1, r2)[2]
    invcos = safe_arccos(np.dot(r1, r2) / (np.linalg.norm(r1) * np.linalg.norm(r2)))
    if prograde:
        if cross_z >= 0:
            dtheta = invcos
        else:
            dtheta = TWO_PI - invcos
    else:
        if cross_z < 0:
            dtheta = invcos
        else:
            dtheta = TWO_PI - invcos
    return dtheta

def lambert(r1, r2, dt: float, mu: float, prograde: bool = True,
            max_iter: int = MAX_ITER) -> LambertSolution:
    """
    Solve Lambert's problem with universal variables.

    The time-of-flight equation F(z) = 0 is solved for the universal
    variable z on the single-revolution interval, bounded below by y(z) = 0
    (or Z_SEARCH_MIN when y stays positive) and above by 4π². F increases
    monotonically there. A sign change is bracketed first, as in Curtis,
    Algorithm 5.2. Newton's method then runs inside the bracket.

    Parameters
    ----------
    r1, r2 : array_like
        Initial and final position vectors [km]
    dt : float
        Time of flight from r1 to r2 [s], must be positive
    mu : float
        Gravitational parameter [km³/s²]
    prograde : bool, optional
        True for a prograde transfer, False for retrograde (default True)
    max_iter : int, optional
        Iteration cap (default MAX_ITER)

    Returns
    -------
    LambertSolution
        Transfer velocities at both ends

    Raises
    ------
    DegenerateGeometryError
        If r1 and r2 are collinear with the origin (zero or 180 degree
        transfer, where the transfer plane is undefined)
    ConvergenceError
        If no single-revolution transfer matches dt, or the time-of-flight
        equation does not converge
    """
    mu = check_mu(mu)
    if not dt > 0:
        raise ValueError(f"Time of flight must be positive, got {dt}")
    r1 = as_vector3(r1, "r1")
    r2 = as_vector3(r2, "r2")
    r1_norm = float(np.linalg.norm(r1))
    r2_norm = float(np.linalg.norm(r2))

    dtheta = transfer_angle(r1, r2, prograde)
    one_minus_cos = 1 - math.cos(dtheta)
    sin_dtheta = math.sin(dtheta)
    if one_minus_cos < config.DEGENERACY_TOL or abs(sin_dtheta) < config.DEGENERACY_TOL:
        raise DegenerateGeometryError(
            f"Lambert transfer angle {math.degrees(dtheta):.6f} deg is degenerate; "
            f"r1 and r2 must not be collinear with the central body")
    A = sin_dtheta * math.sqrt(r1_norm * r2_norm / one_minus_cos)
    sqmu = math.sqrt(mu)

    def y(z):
        return r1_norm + r2_norm + A * (z * stumpff_s(z) - 1) / math.sqrt(stumpff_c(z))

    def F(z):
        yz = y(z)
        if yz < 0:
            return math.nan
        C, S = stumpff_c(z), stumpff_s(z)
        return (yz / C)**1.5 * S + A * math.sqrt(yz) - sqmu * dt

    def Fprime(z):
        yz = y(z)
        if yz <= 0:
            return math.nan
        if abs(z) > ERR_TOL:
            C, S = stumpff_c(z), stumpff_s(z)
            return ((yz / C)**1.5 * ((1 / (2 * z)) * (C - 1.5 * S / C) + 0.75 * S * S / C)
                    + (A / 8) * (3 * S / C * math.sqrt(yz) + A * math.sqrt(C / yz)))
        return ((math.sqrt(2) / 40) * yz**1.5
                + (A / 8) * (math.sqrt(yz) + A * math.sqrt(0.5 / yz)))

    lo, hi = _bracket_lambert(y, F)
    result = newton(F, Fprime, 0.5 * (lo + hi), max_iter=max_iter, bracket=(lo, hi))
    z = result.check("Lambert time-of-flight solve")
    if not (lo <= z <= hi and y(z) > 0):
        raise ConvergenceError(
            f"Lambert time-of-flight solve left the single-revolution interval "
            f"(z={z!r})",
            status=SolverStatus.NON_FINITE,
            iterations=result.iterations,
            last_value=z,
        )

    yz = y(z)
    # Lagrange coefficients
    f = 1 - yz / r1_norm
    g = A * math.sqrt(yz / mu)
    gdot = 1 - yz / r2_norm
    v1 = (r2 - f * r1) / g
    v2 = (gdot * r2 - r1) / g
    if not (np.all(np.isfinite(v1)) and np.all(np.isfinite(v2))):
        raise DegenerateGeometryError("Lambert solution produced a non-finite velocity")
    return LambertSolution(StateVector(r1, v1), StateVector(r2, v2), z, result.iterations)


def _bracket_lambert(y, F):
    """
    Bracket the root of the Lambert time-of-flight function.

    Returns (lo, hi) with y > 0 at both ends, F(lo) < 0 and F(hi) > 0.
    Both ends lie below Z_MAX, where C(z) vanishes.
    """
    lo = None
    # upper end: F grows without bound as z approaches 4π²
    z = 0.0
    for _ in range(UPPER_BRACKET_STEPS):
        if y(z) > 0:
            Fz = F(z)
            if Fz > 0:
                hi = z
                break
            lo = z
        z = 0.5 * (z + Z_MAX)
    else:
        raise ConvergenceError(
            "Lambert time of flight is not reached below z = 4π²",
            status=SolverStatus.MAX_ITER_EXCEEDED, iterations=UPPER_BRACKET_STEPS, last_value=z)
    if lo is not None:
        return lo, hi

    # lower end: step down from hi, halving back toward the last good point
    # whenever the step lands where y < 0
    good = hi
    step = 1.0
    while True:
        z = good - step
        if z < Z_SEARCH_MIN:
            raise ConvergenceError(
                "No single-revolution Lambert transfer is this short",
                status=SolverStatus.MAX_ITER_EXCEEDED, iterations=0, last_value=z)
        if y(z) > 0:
            if F(z) < 0:
                return z, hi
            good = z
            step *= 2
            continue
        bad = z
        for _ in range(BISECTION_STEPS):
            z = 0.5 * (bad + good)
            if y(z) <= 0:
                bad = z
            elif F(z) < 0:
                return z, hi
            else:
                good = z
        raise ConvergenceError(
            "Could not bracket the Lambert time-of-flight root near y = 0",
            status=SolverStatus.MAX_ITER_EXCEEDED, iterations=BISECTION_STEPS, last_value=z)
