'''Orbital mechanics toolbox
Coordinate frame transformations'''

import numpy as np

from .config import config
from .utils import as_vector3, resolve_quadrant, safe_arccos


def perifocal_to_geocentric(Omega: float, omega: float, i: float) -> np.ndarray:
    """
    Direction cosine matrix from the perifocal to the geocentric equatorial frame.

    Built from the classical 3-1-3 Euler sequence R3(Ω) R1(i) R3(ω).

    Parameters
    ----------
    Omega : float
        Right ascension of the ascending node [rad]
    omega : float
        Argument of perigee [rad]
    i : float
        Inclination [rad]

    Returns
    -------
    np.ndarray
        3x3 rotation matrix Q such that r_geo = Q @ r_pqw
    """
    sO, cO = np.sin(Omega), np.cos(Omega)
    so, co = np.sin(omega), np.cos(omega)
    si, ci = np.sin(i), np.cos(i)
    return np.array([
        [cO*co - sO*ci*so, -cO*so - sO*ci*co,  sO*si],
        [sO*co + cO*ci*so, -sO*so + cO*ci*co, -cO*si],
        [si*so,             si*co,             ci   ]
    ])


def change_coords(perifocal_vec, Omega: float, omega: float, i: float) -> np.ndarray:
    """Rotate a perifocal-frame vector into the geocentric equatorial frame."""
    return perifocal_to_geocentric(Omega, omega, i) @ as_vector3(perifocal_vec)


def inertial_to_rotating(theta_g: float) -> np.ndarray:
    """
    Rotation matrix from the inertial to a body-fixed frame.

    The body-fixed frame is rotated by theta_g about the shared polar axis.
    """
    c, s = np.cos(theta_g), np.sin(theta_g)
    return np.array([
        [ c, s, 0],
        [-s, c, 0],
        [ 0, 0, 1]
    ])


def right_ascension_declination(r):
    """
    Right ascension and declination of a geocentric position vector.

    Parameters
    ----------
    r : array_like
        Position vector in a geocentric equatorial (or body-fixed) frame

    Returns
    -------
    tuple of float
        (right ascension in [0, 2π), declination in [-π/2, π/2]) [rad].
        In a body-fixed frame these are the longitude and latitude.

    Notes
    -----
    Right ascension is undefined on the polar axis; it is reported as 0 there.
    """
    r = as_vector3(r, "position")
    l, m, n = r / np.linalg.norm(r)
    delta = float(np.arcsin(np.clip(n, -1.0, 1.0)))
    cos_delta = np.cos(delta)
    if cos_delta < config.SNAP_TO_ZERO_THRESHOLD:
        return 0.0, delta
    alpha = resolve_quadrant(safe_arccos(l / cos_delta), m)
    return alpha, delta
