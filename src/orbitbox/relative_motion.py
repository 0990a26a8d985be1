'''Orbital mechanics toolbox
Relative motion in the local vertical/local horizontal frame'''

from dataclasses import dataclass

import numpy as np

from .exceptions import DegenerateGeometryError
from .utils import as_vector3, check_mu


@dataclass(frozen=True)
class RelativeState:
    """
    Position, velocity and acceleration of a target relative to a chaser.

    All vectors are expressed in the LVLH frame of the reference spacecraft:
    x radial (outward), y along-track, z along the orbit normal.
    """
    position: np.ndarray      # km
    velocity: np.ndarray      # km/s
    acceleration: np.ndarray  # km/s²


def lvlh_basis(r, v) -> np.ndarray:
    """
    Rotation matrix from the inertial frame to the LVLH frame of (r, v).

    Rows are the unit vectors i (radial), j = k x i (along-track) and
    k = h/|h| (orbit normal).
    """
    r = as_vector3(r, "position")
    v = as_vector3(v, "velocity")
    h = np.cross(r, v)
    h_norm = np.linalg.norm(h)
    if h_norm == 0:
        raise DegenerateGeometryError("LVLH frame undefined for rectilinear motion")
    i_hat = r / np.linalg.norm(r)
    k_hat = h / h_norm
    j_hat = np.cross(k_hat, i_hat)
    return np.vstack([i_hat, j_hat, k_hat])


def relative_state(r_1, v_1, r_2, v_2, mu: float) -> RelativeState:
    """
    State of spacecraft 2 relative to spacecraft 1 in the LVLH frame of 1.

    The relative velocity and acceleration are those seen by an observer
    rotating with the LVLH frame, which turns with angular velocity
    Omega = h/r² and angular acceleration -2(v·r)Omega/r².

    Parameters
    ----------
    r_1, v_1 : array_like
        Inertial position [km] and velocity [km/s] of the reference spacecraft
    r_2, v_2 : array_like
        Inertial position [km] and velocity [km/s] of the target
    mu : float
        Gravitational parameter [km³/s²]

    Returns
    -------
    RelativeState
    """
    mu = check_mu(mu)
    r_1 = as_vector3(r_1, "r_1")
    v_1 = as_vector3(v_1, "v_1")
    r_2 = as_vector3(r_2, "r_2")
    v_2 = as_vector3(v_2, "v_2")
    Q = lvlh_basis(r_1, v_1)

    r_1norm = np.linalg.norm(r_1)
    r_2norm = np.linalg.norm(r_2)
    r_1normsq = r_1norm * r_1norm
    h_1 = np.cross(r_1, v_1)

    Omega = h_1 / r_1normsq
    Omega_dot = -2 * np.dot(v_1, r_1) * Omega / r_1normsq
    # two-body accelerations
    a_1 = -mu * r_1 / r_1norm**3
    a_2 = -mu * r_2 / r_2norm**3

    r_rel = r_2 - r_1
    v_rel = v_2 - v_1 - np.cross(Omega, r_rel)
    a_rel = (a_2 - a_1 - np.cross(Omega_dot, r_rel)
             - np.cross(Omega, np.cross(Omega, r_rel))
             - 2 * np.cross(Omega, v_rel))
    return RelativeState(Q @ r_rel, Q @ v_rel, Q @ a_rel)
