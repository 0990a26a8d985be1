'''Orbital mechanics toolbox
Universal-variable state propagation'''

import math
from typing import NamedTuple

from .kepler import solve_universal_kepler
from .state import StateVector
from .utils import check_mu


class LagrangeCoefficients(NamedTuple):
    """Lagrange coefficients mapping an initial state to a propagated state."""
    f: float
    g: float
    fdot: float
    gdot: float


def lagrange_coefficients(chi, C, S, r0, vr0, alpha, dt, mu) -> LagrangeCoefficients:
    """
    Lagrange coefficients in terms of the universal anomaly.

    Parameters
    ----------
    chi : float
        Universal anomaly [km^0.5]
    C, S : float
        Stumpff functions evaluated at z = alpha*chi^2
    r0 : float
        Initial radius [km]
    vr0 : float
        Initial radial velocity [km/s]
    alpha : float
        Reciprocal of the semi-major axis [1/km]
    dt : float
        Elapsed time [s]
    mu : float
        Gravitational parameter [km³/s²]
    """
    sqmu = math.sqrt(mu)
    chisq = chi * chi
    chicube = chisq * chi
    z = alpha * chisq
    # radius after dt, from the universal variable form of the orbit equation
    r1 = chisq * C + (r0 * vr0 / sqmu) * chi * (1 - z * S) + r0 * (1 - z * C)
    f = 1 - (chisq / r0) * C
    g = dt - chicube * S / sqmu
    fdot = sqmu / (r0 * r1) * (alpha * chicube * S - chi)
    gdot = 1 - chisq * C / r1
    return LagrangeCoefficients(f, g, fdot, gdot)


def propagate(state, dt: float, mu: float) -> StateVector:
    """
    Advance a two-body state by dt using universal variables.

    The same formulation covers elliptic, parabolic and hyperbolic orbits;
    the reciprocal semi-major axis from the energy equation carries the
    orbit type through the Stumpff functions.

    Parameters
    ----------
    state : StateVector or tuple of array_like
        Initial state, either a StateVector or an (r, v) pair [km, km/s]
    dt : float
        Elapsed time [s], may be negative
    mu : float
        Gravitational parameter [km³/s²]

    Returns
    -------
    StateVector
        State after dt

    Raises
    ------
    ConvergenceError
        If the universal Kepler equation does not converge

    Examples
    --------
    >>> mu = 398600.0
    >>> s0 = StateVector([7000, 0, 0], [0, math.sqrt(mu/7000), 0])
    >>> s1 = propagate(s0, 600.0, mu)
    """
    mu = check_mu(mu)
    if not isinstance(state, StateVector):
        state = StateVector(*state)
    r0 = state.radius
    v0 = state.speed
    vr0 = state.radial_velocity
    # from energy equation:  v^2/2 - mu/r = -mu/2a, reciprocal of semimajor axis is
    alpha = 2 / r0 - v0 * v0 / mu

    chi, C, S, _ = solve_universal_kepler(dt, r0, vr0, alpha, mu)
    f, g, fdot, gdot = lagrange_coefficients(chi, C, S, r0, vr0, alpha, dt, mu)

    return StateVector(f * state.r + g * state.v,
                       fdot * state.r + gdot * state.v)
