'''Orbital mechanics toolbox
Ground track and J2 secular drift'''

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .bodies import BodyParams, EARTH
from .config import config
from .frames import inertial_to_rotating, right_ascension_declination
from .kepler import (eccentric_to_mean, eccentric_to_true, solve_kepler,
                     true_to_eccentric)
from .orbital_elements import OrbitalElementSet
from .utils import validation_error, TWO_PI

logger = logging.getLogger(__name__)


def j2_secular_rates(elements: OrbitalElementSet,
                     body: BodyParams = EARTH) -> Tuple[float, float]:
    """
    Secular drift rates of RAAN and argument of perigee due to oblateness.

    dΩ/dt = pre·cos(i)
    dω/dt = pre·(5/2·sin²i - 2)
    pre   = -3/2 · √mu · J2 · R² / ((1-e²)² · a^(7/2))

    Parameters
    ----------
    elements : OrbitalElementSet
        Bound orbit
    body : BodyParams, optional
        Central body supplying J2 and the equatorial radius (default EARTH)

    Returns
    -------
    tuple of float
        (dOmega/dt, domega/dt) [rad/s]
    """
    if not elements.is_bound():
        validation_error(f"J2 secular rates require a bound orbit, got e={elements.e}")
    J2 = body.require_j2()
    e, a, i = elements.e, elements.a, elements.i
    pre = (-1.5*np.sqrt(elements.mu)*J2*body.radius**2
           / ((1 - e*e)**2 * a**3.5))
    return pre*np.cos(i), pre*(2.5*np.sin(i)**2 - 2)


@dataclass(frozen=True)
class GroundTrackPoint:
    """
    Sub-satellite point after an elapsed time.

    Attributes
    ----------
    longitude : float
        Body-fixed longitude [rad], in [0, 2π)
    latitude : float
        Geocentric latitude [rad]
    true_anomaly : float
        True anomaly at the new time [rad]
    elements : OrbitalElementSet
        Element set with RAAN and argument of perigee advanced by the J2
        secular drift
    time : float
        Elapsed time from the reference epoch [s]
    """
    longitude: float
    latitude: float
    true_anomaly: float
    elements: OrbitalElementSet
    time: float


def sat_long_lat(elements: OrbitalElementSet, theta0: float, dt: float,
                 body: BodyParams = EARTH, theta_g0: float = 0.0) -> GroundTrackPoint:
    """
    Longitude and latitude of the sub-satellite point dt seconds after the epoch.

    The satellite is advanced along its orbit by Kepler's equation while
    the orbit plane and line of apsides drift under J2. The position is
    rotated into the body-fixed frame, whose x axis is theta_g0 east of the
    inertial x axis at the epoch.

    The drifted orbit is returned as a new element set in the result; the
    input element set is not modified. To continue the track from the new
    state, pass ``result.elements`` and ``result.true_anomaly`` back in.

    Parameters
    ----------
    elements : OrbitalElementSet
        Bound orbit at the epoch
    theta0 : float
        True anomaly at the epoch [rad]
    dt : float
        Elapsed time [s]
    body : BodyParams, optional
        Central body supplying J2, radius and rotation rate (default EARTH)
    theta_g0 : float, optional
        Angle of the body-fixed x axis from the inertial x axis at the epoch [rad]

    Returns
    -------
    GroundTrackPoint
    """
    e = elements.e
    # time from perigee at the epoch
    M0 = eccentric_to_mean(true_to_eccentric(theta0, e), e)
    # mean anomaly for the new time
    M = (M0 + elements.mean_motion()*dt) % TWO_PI
    theta = eccentric_to_true(solve_kepler(e, M), e)

    # update orbit orientation with the oblateness drift
    Omega_dot, omega_dot = j2_secular_rates(elements, body)
    drifted = elements.with_orientation(
        Omega=elements.Omega + Omega_dot*dt,
        omega=elements.omega + omega_dot*dt,
        theta=theta,
    )

    # position in the geocentric equatorial frame
    r_geo = drifted.state_at(theta).r
    # angle between stationary and rotating x axes
    theta_g = theta_g0 + body.require_rotation_rate()*dt
    r_fixed = inertial_to_rotating(theta_g) @ r_geo

    longitude, latitude = right_ascension_declination(r_fixed)
    return GroundTrackPoint(longitude, latitude, theta, drifted, float(dt))


class GroundTrack:
    """
    Sampled ground track of an orbit.

    Every point is computed from the same epoch element set, so the J2
    drift at each sample is the drift accumulated since the epoch.

    Attributes:
        points: tuple of GroundTrackPoint in time order
        body: central body
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, points, body: BodyParams = EARTH):
        self._points = tuple(points)
        self._body = body

    @classmethod
    def compute(cls, elements: OrbitalElementSet, theta0: float, times=None,
                body: BodyParams = EARTH, theta_g0: float = 0.0,
                n_points: Optional[int] = None) -> "GroundTrack":
        """
        Compute a ground track.

        Parameters:
            elements: Bound orbit at the epoch
            theta0: True anomaly at the epoch [rad]
            times: Elapsed times from the epoch [s]; defaults to one orbital
                period sampled at n_points
            body: Central body (default EARTH)
            theta_g0: Body-fixed frame angle at the epoch [rad]
            n_points: Samples when times is not given
                (default config.DEFAULT_TRACK_POINTS)
        """
        if times is None:
            if n_points is None:
                n_points = config.DEFAULT_TRACK_POINTS
            times = np.linspace(0.0, elements.period, n_points)
        times = np.atleast_1d(np.asarray(times, dtype=float))
        points = [sat_long_lat(elements, theta0, t, body, theta_g0) for t in times]
        logger.debug("Computed ground track over %s with %d points", body.name, len(points))
        return cls(points, body)

    # ========== PROPERTY ACCESS ==========
    @property
    def points(self):
        return self._points

    @property
    def body(self) -> BodyParams:
        return self._body

    @property
    def times(self) -> np.ndarray:
        return np.array([p.time for p in self._points])

    @property
    def longitudes(self) -> np.ndarray:
        """Longitudes [rad] in [0, 2π)"""
        return np.array([p.longitude for p in self._points])

    @property
    def latitudes(self) -> np.ndarray:
        """Latitudes [rad]"""
        return np.array([p.latitude for p in self._points])

    # ========== EXPORT ==========
    def to_dataframe(self) -> pd.DataFrame:
        """
        Tabulate the ground track.

        Returns
        -------
        pd.DataFrame
            Columns t [s], longitude and latitude [deg], longitude wrapped to
            [-180, 180), true anomaly, RAAN and argument of perigee [deg]
        """
        lon = np.degrees(self.longitudes)
        data = {
            't': self.times,
            'longitude': (lon + 180.0) % 360.0 - 180.0,
            'latitude': np.degrees(self.latitudes),
            'true_anomaly': np.degrees([p.true_anomaly for p in self._points]),
            'Omega': np.degrees([p.elements.Omega for p in self._points]),
            'omega': np.degrees([p.elements.omega for p in self._points]),
        }
        return pd.DataFrame(data)

    # ========== PLOTTING ==========
    def plot(self, track_color: Optional[str] = None,
             name: Optional[str] = None) -> go.Figure:
        """
        Plot the ground track on a world map.

        Parameters:
            track_color: Line color (default: config.DEFAULT_TRACK_COLOR)
            name: Legend entry (default: 'Ground track')

        Returns:
            Plotly Figure object
        """
        if track_color is None:
            track_color = config.DEFAULT_TRACK_COLOR
        df = self.to_dataframe()
        lon, lat = [], []
        # break the line where the track wraps across the antimeridian
        for k, (x, y) in enumerate(zip(df['longitude'], df['latitude'])):
            if k > 0 and abs(x - lon[-1]) > 180.0:
                lon.append(None)
                lat.append(None)
            lon.append(x)
            lat.append(y)

        fig = go.Figure()
        fig.add_trace(go.Scattergeo(
            lon=lon,
            lat=lat,
            mode='lines',
            line=dict(color=track_color, width=2),
            name=name or 'Ground track',
        ))
        fig.update_layout(
            title=f"Ground track ({self._body.name})",
            geo=dict(projection_type='equirectangular', showland=True),
        )
        return fig

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        return len(self._points)

    def __getitem__(self, key):
        return self._points[key]

    def __iter__(self):
        return iter(self._points)

    def __repr__(self):
        return (f"GroundTrack(body={self._body.name}, n_points={len(self)}, "
                f"duration={self.times[-1] - self.times[0] if self._points else 0.0})")


def ground_track(elements: OrbitalElementSet, theta0: float, times=None,
                 body: BodyParams = EARTH, theta_g0: float = 0.0,
                 n_points: Optional[int] = None) -> GroundTrack:
    """Shortcut for GroundTrack.compute()"""
    return GroundTrack.compute(elements, theta0, times, body, theta_g0, n_points)
