'''Orbital mechanics toolbox
Oblateness perturbation and plane change maneuvers'''

from dataclasses import dataclass

import numpy as np

from .bodies import BodyParams, EARTH
from .config import config
from .exceptions import DegenerateGeometryError
from .utils import as_vector3, check_mu, resolve_quadrant, safe_arccos


@dataclass(frozen=True)
class J2Perturbation:
    """
    J2 perturbing acceleration.

    Attributes
    ----------
    radial, transverse, normal : float
        Components along r, along h x r and along h [km/s²]
    acceleration : np.ndarray
        The same acceleration in the inertial frame [km/s²]
    """
    radial: float
    transverse: float
    normal: float
    acceleration: np.ndarray


def j2_perturbation(r, v, mu: float, body: BodyParams = EARTH) -> J2Perturbation:
    """
    Perturbing acceleration due to the oblateness of the central body.

    p_r = pre·(1 - 3 sin²i sin²u)
    p_⊥ = pre·sin²i·sin 2u
    p_h = pre·sin 2i·sin u
    pre = -(3/2)·J2·mu·R²/r⁴

    where u = omega + theta is the argument of latitude.

    Parameters
    ----------
    r : array_like
        Position vector [km]
    v : array_like
        Velocity vector [km/s]
    mu : float
        Gravitational parameter [km³/s²]
    body : BodyParams, optional
        Central body supplying J2 and the equatorial radius (default EARTH)

    Returns
    -------
    J2Perturbation
    """
    mu = check_mu(mu)
    r = as_vector3(r, "position")
    v = as_vector3(v, "velocity")
    J2 = body.require_j2()
    r_norm = np.linalg.norm(r)
    h_vec = np.cross(r, v)
    h = np.linalg.norm(h_vec)
    if h == 0:
        raise DegenerateGeometryError("Orbit plane undefined for rectilinear motion")

    u_r = r / r_norm
    h_hat = h_vec / h
    u_perp = np.cross(h_hat, u_r)
    i = safe_arccos(h_hat[2])

    # argument of latitude from the node line
    N = np.cross([0.0, 0.0, 1.0], h_vec)
    N_len = np.linalg.norm(N)
    if N_len < config.SNAP_TO_EQUATORIAL * h:
        u = 0.0  # all terms that depend on u vanish with sin(i)
    else:
        u = resolve_quadrant(safe_arccos(np.dot(N, r) / (N_len * r_norm)), r[2])

    sinsq = np.sin(i)**2
    sinu = np.sin(u)
    pre = -1.5 * J2 * mu * body.radius**2 / r_norm**4
    p_r = pre * (1 - 3 * sinsq * sinu * sinu)
    p_perp = pre * sinsq * np.sin(2 * u)
    p_h = pre * np.sin(2 * i) * sinu
    return J2Perturbation(float(p_r), float(p_perp), float(p_h),
                          p_r * u_r + p_perp * u_perp + p_h * h_hat)


def plane_change_delta_v(v1: float, v2: float, delta_i: float) -> float:
    """
    Delta-v for a combined speed and plane change maneuver.

    Parameters
    ----------
    v1, v2 : float
        Speeds before and after the maneuver [km/s]
    delta_i : float
        Angle between the velocity vectors [rad]
    """
    return float(np.sqrt(v1*v1 + v2*v2 - 2*v1*v2*np.cos(delta_i)))
