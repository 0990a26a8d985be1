'''Orbital mechanics toolbox
OrbitalElementSet class definition'''

import logging

import numpy as np

from .config import config
from .determination import gibbs, lambert
from .exceptions import DegenerateGeometryError
from .frames import perifocal_to_geocentric
from .state import StateVector
from .utils import (as_vector3, check_mu, resolve_quadrant, safe_arccos,
                    validation_error, TWO_PI)

logger = logging.getLogger(__name__)


class OrbitalElementSet:
    """
    Classical orbital elements of a two-body orbit.

    Represents the orbit by its specific angular momentum h, eccentricity e,
    inclination i, right ascension of the ascending node Omega and argument
    of perigee omega, together with the gravitational parameter mu.
    Secondary parameters (a, r_p, r_a, period) are computed once at
    construction. OrbitalElementSet is immutable; every orbit determination
    entry point returns a new instance.

    Parameters
    ----------
    h : float
        Specific angular momentum [km²/s]
    e : float
        Eccentricity (0 circular, 0<e<1 elliptic)
    i : float
        Inclination [rad], in [0, π]
    Omega : float
        Right ascension of the ascending node [rad], wrapped to [0, 2π)
    omega : float
        Argument of perigee [rad], wrapped to [0, 2π)
    mu : float
        Gravitational parameter [km³/s²]
    theta : float, optional
        True anomaly [rad] at the epoch of the determination, if known
    validate : bool, optional
        Whether to validate elements (default True)

    Notes
    -----
    Apoapsis, period and mean motion only exist for bound orbits. For e >= 1
    they are reported as inf (period, r_a) and 0 (mean motion), and the
    semi-major axis is h²/(mu(1-e²)), negative for hyperbolas.
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, h, e, i, Omega, omega, mu, theta=None, validate=True):
        self._mu = check_mu(mu)
        self._elements = np.array([h, e, i, Omega % TWO_PI, omega % TWO_PI],
                                  dtype=float)
        self._theta = None if theta is None else float(theta) % TWO_PI
        if validate:
            self._validate()
        # Ensure immutability of elements array
        self._elements.flags.writeable = False
        self._compute_secondary()

    def _validate(self):
        """Check that the primary elements describe a physical orbit"""
        if not np.all(np.isfinite(self._elements)):
            raise ValueError("Elements contain NaN or Inf")
        h, e, i, _, _ = self._elements
        if h <= 0:
            raise ValueError(f"Angular momentum must be positive, got h={h}")
        if e < 0:
            raise ValueError(f"Eccentricity must be non-negative, got e={e}")
        if i < 0 or i > np.pi:
            raise ValueError(f"Inclination out of range [0, pi], got i={i}")
        if e >= 1:
            validation_error(f"Secondary parameters assume a bound orbit, got e={e}")

    def _compute_secondary(self):
        """Secondary parameters from h, e and mu"""
        h, e = self._elements[0], self._elements[1]
        mu = self._mu
        self._r_p = h*h / (mu*(1 + e))
        if e < 1:
            self._r_a = h*h / (mu*(1 - e))
            self._a = (self._r_p + self._r_a) / 2
            self._period = 2*np.pi*self._a**1.5 / np.sqrt(mu)
        else:
            self._r_a = np.inf
            self._a = np.inf if e == 1 else h*h / (mu*(1 - e*e))
            self._period = np.inf

    # ========== ORBIT DETERMINATION ==========
    @classmethod
    def from_elements(cls, h, e, i, Omega, omega, mu):
        """
        Create an element set directly from classical elements.

        Parameters
        ----------
        h : float
            Specific angular momentum [km²/s]
        e : float
            Eccentricity
        i, Omega, omega : float
            Inclination, RAAN, argument of perigee [rad]
        mu : float
            Gravitational parameter [km³/s²]
        """
        return cls(h, e, i, Omega, omega, mu)

    @classmethod
    def from_apsides(cls, r_p, r_a, i, Omega, omega, mu):
        """
        Create an element set from perigee and apogee radii.

        Parameters
        ----------
        r_p : float
            Perigee radius [km]
        r_a : float
            Apogee radius [km], r_a >= r_p
        i, Omega, omega : float
            Inclination, RAAN, argument of perigee [rad]
        mu : float
            Gravitational parameter [km³/s²]
        """
        if r_p <= 0:
            raise ValueError(f"Perigee radius must be positive, got {r_p}")
        if r_a < r_p:
            raise ValueError(f"Apogee radius ({r_a}) must not be below "
                             f"perigee radius ({r_p})")
        mu = check_mu(mu)
        e = (r_a - r_p) / (r_a + r_p)
        h = np.sqrt(mu*r_p*(1 + e))
        return cls(h, e, i, Omega, omega, mu)

    @classmethod
    def from_state(cls, r, v, mu):
        """
        Create an element set from a position/velocity state vector.

        The true anomaly at the state is stored in ``theta``. Degenerate
        angles are snapped rather than left undefined:

        - equatorial orbits (node line below config.SNAP_TO_EQUATORIAL
          relative to h): Omega = 0, node line along the x axis
        - circular orbits (e below config.SNAP_TO_CIRCULAR): omega = 0,
          true anomaly measured from the node line

        Parameters
        ----------
        r : array_like or StateVector
            Position vector [km], or a StateVector (then v must be None)
        v : array_like
            Velocity vector [km/s]
        mu : float
            Gravitational parameter [km³/s²]

        Raises
        ------
        DegenerateGeometryError
            If r and v are parallel (rectilinear motion, h = 0)
        """
        if isinstance(r, StateVector):
            if v is not None:
                raise ValueError("Pass either a StateVector or r and v, not both")
            r, v = r.r, r.v
        mu = check_mu(mu)
        r = as_vector3(r, "position")
        v = as_vector3(v, "velocity")
        r_scalar = np.linalg.norm(r)
        speed = np.linalg.norm(v)
        v_r = np.dot(r, v) / r_scalar

        h_vec = np.cross(r, v)
        h = np.linalg.norm(h_vec)
        if h < config.SNAP_TO_ZERO_THRESHOLD * r_scalar * max(speed, 1.0):
            raise DegenerateGeometryError("Position and velocity are parallel; "
                                          "angular momentum is zero")
        # inclination
        i = safe_arccos(h_vec[2] / h)

        # node line
        N = np.cross([0.0, 0.0, 1.0], h_vec)
        N_len = np.linalg.norm(N)
        equatorial = N_len < config.SNAP_TO_EQUATORIAL * h
        if equatorial:
            logger.debug("Equatorial orbit: RAAN snapped to zero")
            Omega = 0.0
            N_hat = np.array([1.0, 0.0, 0.0])
        else:
            # right ascension of the ascending node
            Omega = resolve_quadrant(safe_arccos(N[0] / N_len), N[1])
            N_hat = N / N_len

        # eccentricity vector
        e_vec = ((speed*speed - mu/r_scalar)*r - r_scalar*v_r*v) / mu
        e = np.linalg.norm(e_vec)

        if e < config.SNAP_TO_CIRCULAR:
            logger.debug("Circular orbit: argument of perigee snapped to zero")
            omega = 0.0
            # true anomaly measured from the node line
            theta = resolve_quadrant(safe_arccos(np.dot(N_hat, r) / r_scalar),
                                     np.dot(np.cross(N_hat, r), h_vec))
        else:
            # argument of perigee
            if equatorial:
                reference = np.dot(np.cross(N_hat, e_vec), h_vec)
            else:
                reference = e_vec[2]
            omega = resolve_quadrant(safe_arccos(np.dot(N_hat, e_vec) / e), reference)
            # true anomaly
            theta = resolve_quadrant(safe_arccos(np.dot(e_vec, r) / (e*r_scalar)), v_r)

        return cls(h, e, i, Omega, omega, mu, theta=theta, validate=False)

    @classmethod
    def from_gibbs(cls, r1, r2, r3, mu):
        """
        Create an element set from three coplanar position observations.

        The velocity at r2 is found with the Gibbs method and the elements
        are derived from that state; ``theta`` is the true anomaly at r2.

        Raises
        ------
        DegenerateGeometryError
            If the observations are collinear
        """
        state = gibbs(r1, r2, r3, mu)
        return cls.from_state(state.r, state.v, mu)

    @classmethod
    def from_lambert(cls, r1, r2, dt, mu, prograde=True):
        """
        Create an element set from two positions and the time of flight.

        The departure velocity at r1 is found by solving Lambert's problem
        and the elements are derived from that state; ``theta`` is the true
        anomaly at r1.

        Raises
        ------
        DegenerateGeometryError
            If r1 and r2 are collinear with the central body
        ConvergenceError
            If the time-of-flight equation does not converge
        """
        solution = lambert(r1, r2, dt, mu, prograde=prograde)
        return cls.from_state(solution.departure.r, solution.departure.v, mu)

    # ========== PROPERTY ACCESS ==========
    @property
    def mu(self):
        """Gravitational parameter [km³/s²]"""
        return self._mu

    @property
    def elements(self):
        """Primary elements [h, e, i, Omega, omega] (read-only)"""
        return self._elements

    @property
    def h(self):
        """Specific angular momentum magnitude [km²/s]"""
        return float(self._elements[0])

    @property
    def e(self):
        """Eccentricity"""
        return float(self._elements[1])

    @property
    def i(self):
        """Inclination [rad]"""
        return float(self._elements[2])

    @property
    def Omega(self):
        """Right ascension of the ascending node [rad]"""
        return float(self._elements[3])

    @property
    def omega(self):
        """Argument of perigee [rad]"""
        return float(self._elements[4])

    @property
    def theta(self):
        """True anomaly at determination epoch [rad], None if not known"""
        return self._theta

    @property
    def h_vec(self):
        """Specific angular momentum vector [km²/s]"""
        return self.h * self.perifocal_to_geocentric()[:, 2]

    @property
    def e_vec(self):
        """Eccentricity vector (points to perigee)"""
        return self.e * self.perifocal_to_geocentric()[:, 0]

    @property
    def a(self):
        """Semi-major axis [km]"""
        return float(self._a)

    @property
    def alpha(self):
        """Reciprocal of the semi-major axis [1/km]"""
        return 1.0 / self._a

    @property
    def r_p(self):
        """Perigee radius [km]"""
        return float(self._r_p)

    @property
    def r_a(self):
        """Apogee radius [km]"""
        return float(self._r_a)

    @property
    def period(self):
        """Orbital period [s]"""
        return float(self._period)

    @property
    def semi_latus_rectum(self):
        """Semi-latus rectum p = h²/mu [km]"""
        return self.h**2 / self._mu

    # ========== ORBITAL PROPERTIES ==========
    def is_bound(self):
        """True for circular and elliptic orbits"""
        return self.e < 1

    def mean_motion(self):
        """
        Calculate mean motion (n = 2π/T)

        Returns
        -------
        float
            Mean motion [rad/s], 0 for unbound orbits
        """
        if not self.is_bound():
            return 0.0
        return 2*np.pi / self.period

    def specific_energy(self):
        """Calculate specific orbital energy (energy per unit mass) [km²/s²]"""
        return -self._mu*(1 - self.e**2) / (2*self.semi_latus_rectum)

    def radius_at(self, theta):
        """Orbit equation: radius at true anomaly theta [km]"""
        return self.semi_latus_rectum / (1 + self.e*np.cos(theta))

    # ========== FRAME TRANSFORMS ==========
    def perifocal_to_geocentric(self):
        """Direction cosine matrix from the perifocal to the geocentric frame"""
        return perifocal_to_geocentric(self.Omega, self.omega, self.i)

    def perifocal_state(self, theta=None):
        """
        State vector in the perifocal frame at true anomaly theta.

        Parameters
        ----------
        theta : float, optional
            True anomaly [rad]; defaults to the stored true anomaly
        """
        theta = self._resolve_theta(theta)
        r = self.radius_at(theta) * np.array([np.cos(theta), np.sin(theta), 0.0])
        v = (self._mu / self.h) * np.array([-np.sin(theta), self.e + np.cos(theta), 0.0])
        return StateVector(r, v)

    def state_at(self, theta=None):
        """
        State vector in the geocentric equatorial frame at true anomaly theta.

        Parameters
        ----------
        theta : float, optional
            True anomaly [rad]; defaults to the stored true anomaly
        """
        pqw = self.perifocal_state(theta)
        Q = self.perifocal_to_geocentric()
        return StateVector(Q @ pqw.r, Q @ pqw.v)

    def with_orientation(self, Omega=None, omega=None, theta=None):
        """
        New element set with the same shape and a different orientation.

        The stored true anomaly refers to the old epoch and is replaced by
        ``theta`` (None if not given).
        """
        return OrbitalElementSet(
            self.h, self.e, self.i,
            self.Omega if Omega is None else Omega,
            self.omega if omega is None else omega,
            self._mu, theta=theta, validate=False)

    def _resolve_theta(self, theta):
        if theta is not None:
            return theta
        if self._theta is None:
            raise ValueError("True anomaly is not known for this element set; "
                             "pass theta explicitly")
        return self._theta

    # ========== BATCH OPERATIONS ==========
    class Batch:
        """
        Batch operations on collections of OrbitalElementSet.
        """
        _COLUMNS = ['h', 'e', 'i', 'Omega', 'omega', 'theta',
                    'a', 'r_p', 'r_a', 'period']

        @staticmethod
        def to_numpy(sets):
            """Array of shape (n, 5) with the primary elements of each set"""
            return np.array([s.elements for s in sets])

        @staticmethod
        def to_dataframe(sets, index=None):
            """
            Convert list of OrbitalElementSet to pandas DataFrame.

            Parameters
            ----------
            sets : list of OrbitalElementSet
                Element sets to tabulate
            index : array-like, optional
                Index for the DataFrame (e.g., time values).
                If None, uses integer index.

            Returns
            -------
            pd.DataFrame
                One row per set with primary and secondary parameters;
                theta is NaN where unknown
            """
            import pandas as pd
            columns = OrbitalElementSet.Batch._COLUMNS
            if not sets:
                return pd.DataFrame(columns=columns)
            if index is not None and len(index) != len(sets):
                raise ValueError(
                    f"Index length ({len(index)}) must match "
                    f"number of element sets ({len(sets)})"
                )
            rows = [[s.h, s.e, s.i, s.Omega, s.omega,
                     np.nan if s.theta is None else s.theta,
                     s.a, s.r_p, s.r_a, s.period] for s in sets]
            return pd.DataFrame(rows, columns=columns, index=index)

    # ========== SPECIAL METHODS ==========
    def __repr__(self):
        #Machine-readable representation
        h, e, i, Omega, omega = self._elements.tolist()
        return (f"OrbitalElementSet(h={h}, e={e}, i={i}, Omega={Omega}, "
                f"omega={omega}, mu={self._mu}, theta={self._theta})")

    def __str__(self):
        #Human-readable representation
        h, e, i, Omega, omega = self._elements
        lines = ["Orbital Element Set:",
                 f"  h     = {h:12.4f} km²/s",
                 f"  e     = {e:12.6f}",
                 f"  i     = {np.degrees(i):12.4f}°",
                 f"  RAAN  = {np.degrees(Omega):12.4f}°",
                 f"  ω     = {np.degrees(omega):12.4f}°"]
        if self._theta is not None:
            lines.append(f"  θ     = {np.degrees(self._theta):12.4f}°")
        lines.append(f"  a     = {self._a:12.4f} km")
        lines.append(f"  T     = {self._period:12.4f} s")
        return "\n".join(lines)

    def __eq__(self, other):
        #Check equality with tolerance
        if not isinstance(other, OrbitalElementSet):
            return NotImplemented
        return (np.isclose(self._mu, other._mu,
                           rtol=config.EQUALITY_RTOL, atol=config.EQUALITY_ATOL)
                and np.allclose(self._elements, other._elements,
                                rtol=config.EQUALITY_RTOL,
                                atol=config.EQUALITY_ATOL))

    def __hash__(self):
        #Hash with rounding to match equality
        rounded = tuple(round(x, config.HASH_DECIMALS) for x in self._elements)
        return hash((round(self._mu, config.HASH_DECIMALS), rounded))
