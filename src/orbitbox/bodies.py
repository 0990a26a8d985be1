"""
Central Body Definitions
========================

Immutable gravitational and rotational parameters for the central body of a
two-body problem. The ground track and J2 routines take a ``BodyParams``
argument and default to ``EARTH``.

Values taken from Vallado, Fundamentals of Astrodynamics, Fifth Edition, 2022, Appendix D
Units referenced to km (i.e. mu = km^3/s^2)

Examples
--------
>>> from orbitbox import EARTH, BodyParams
>>> EARTH.mu
398600.4415
>>> planet = BodyParams(mu=3.986e5, radius=6378.0, J2=1.08263e-3,
...                     rotation_rate=7.2921e-5, name='Earth (Curtis)')
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BodyParams:
    """
    Immutable parameters for a celestial body.

    Attributes
    ----------
    mu : float
        Gravitational parameter [km³/s²]
    radius : float
        Equatorial radius [km]
    J2 : float, optional
        J2 zonal harmonic coefficient [dimensionless]
        Required for oblateness drift and perturbation calculations
    rotation_rate : float, optional
        Sidereal angular rotation rate [rad/s]
        Required for ground track calculations
    name : str, optional
        Body identifier
    """
    mu: float
    radius: float
    J2: Optional[float] = None
    rotation_rate: Optional[float] = None
    name: Optional[str] = None

    def __post_init__(self):
        #Validate parameters
        if self.mu <= 0:
            raise ValueError(f"Gravitational parameter must be positive, got {self.mu}")
        if self.radius <= 0:
            raise ValueError(f"Radius must be positive, got {self.radius}")
        if self.J2 is not None and abs(self.J2) > 1:
            raise ValueError(f"J2 coefficient seems unrealistic: {self.J2}")

    def require_j2(self) -> float:
        """Return J2, raising if the body does not define it."""
        if self.J2 is None:
            raise ValueError(f"J2 is not defined for body '{self.name}'")
        return self.J2

    def require_rotation_rate(self) -> float:
        """Return the rotation rate, raising if the body does not define it."""
        if self.rotation_rate is None:
            raise ValueError(f"rotation_rate is not defined for body '{self.name}'")
        return self.rotation_rate


# Pre-defined common bodies for convenience

EARTH = BodyParams(
    mu=3.986004415e5,
    radius=6378.1363,
    J2=1.0826269e-3,
    rotation_rate=7.2921150e-5,
    name='Earth'
)

MOON = BodyParams(
    mu=4.902799e3,
    radius=1738.0,
    J2=2.027e-4,
    rotation_rate=2.661700e-6,
    name='Moon'
)

MARS = BodyParams(
    mu=4.305e4,
    radius=3397.2,
    J2=1.964e-3,
    rotation_rate=7.0882181e-5,
    name='Mars'
)

SUN = BodyParams(
    mu=1.32712428e11,
    radius=6.96e5,
    J2=None,
    rotation_rate=None,
    name='Sun'
)
