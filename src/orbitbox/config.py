"""
Global Configuration for Orbitbox Package
=========================================

This module provides package-wide configuration settings that users can modify
to control numerical tolerances, validation behavior, and default plotting options.

Examples
--------
View current configuration:

>>> import orbitbox
>>> print(orbitbox.config)

Modify settings:

>>> orbitbox.config.EQUALITY_RTOL = 1e-14  # Stricter equality checks
>>> orbitbox.config.DEFAULT_TRACK_POINTS = 2000  # Denser ground tracks

Reset to defaults:

>>> orbitbox.config.reset()

Temporarily modify settings:

>>> with orbitbox.temp_config(STRICT_VALIDATION=False):
...     # Out-of-domain inputs warn instead of raising
...     orbitbox.solve_kepler(1.2, 0.5)

Notes
-----
These settings affect package-wide behavior. Modifying them will impact
all subsequent operations until changed again or reset. The Newton iteration
cap and step tolerance are fixed constants in ``orbitbox.roots`` and are not
part of this configuration.
"""

from dataclasses import dataclass
from contextlib import contextmanager
import math


@dataclass
class OrbitboxConfig:
    """
    Global configuration for Orbitbox package.

    Attributes
    ----------
    EQUALITY_RTOL : float
        Relative tolerance for floating-point equality comparisons.
        Default: 1e-12 (approximately millimeter-level at LEO distances)
    EQUALITY_ATOL : float
        Absolute tolerance for floating-point equality comparisons.
        Default: 1e-14
    HASH_DECIMALS : int
        Number of decimal places for rounding when computing hash values.
        Automatically computed to preserve hash contract
    SNAP_TO_ZERO_THRESHOLD : float
        Values below this threshold are treated as exactly zero.
        Default: 1e-10
    SNAP_TO_CIRCULAR : float
        Eccentricity below this threshold treated as circular orbit (e=0).
        Argument of perigee is then set to zero.
        Default: 1e-8
    SNAP_TO_EQUATORIAL : float
        Node line magnitude, relative to the angular momentum, below which
        the orbit is treated as equatorial. RAAN is then set to zero.
        Default: 1e-8
    DEGENERACY_TOL : float
        Relative magnitude below which Gibbs/Lambert denominators are
        treated as zero and a DegenerateGeometryError is raised.
        Default: 1e-10
    COPLANAR_TOL : float
        Maximum out-of-plane component (unit vectors) accepted for the three
        Gibbs observations.
        Default: 1e-6
    STRICT_VALIDATION : bool
        If True, validation failures raise exceptions.
        If False, validation failures issue warnings.
        Default: True
    DEFAULT_TRACK_POINTS : int
        Default number of samples for ground track generation.
        Default: 500
    DEFAULT_TRACK_COLOR : str
        Default color for ground track lines in plots.
        Default: 'red'
    """

    # Numerical tolerance for equality comparisons
    EQUALITY_RTOL: float = 1e-12
    EQUALITY_ATOL: float = 1e-14

    # Snapping behavior thresholds
    SNAP_TO_ZERO_THRESHOLD: float = 1e-10
    SNAP_TO_CIRCULAR: float = 1e-8
    SNAP_TO_EQUATORIAL: float = 1e-8

    # Orbit determination geometry checks
    DEGENERACY_TOL: float = 1e-10
    COPLANAR_TOL: float = 1e-6

    # Validation behavior
    STRICT_VALIDATION: bool = True

    # Ground track defaults
    DEFAULT_TRACK_POINTS: int = 500
    DEFAULT_TRACK_COLOR: str = 'red'

    @property
    def HASH_DECIMALS(self) -> int:
        """
        Compute hash rounding decimals from equality tolerance.

        The hash rounding must be coarse enough that if two values
        are equal (within EQUALITY_ATOL), they hash to the same value.

        Formula: HASH_DECIMALS = -floor(log10(ATOL)) - 2
        The -2 provides safety margin (2 orders of magnitude).

        Returns
        -------
        int
            Number of decimal places for hash rounding
        """
        magnitude = -math.floor(math.log10(self.EQUALITY_ATOL))
        return max(magnitude - 2, 0)  # At least 0 decimals

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import orbitbox
        >>> orbitbox.config.EQUALITY_RTOL = 1e-6  # Modify
        >>> orbitbox.config.reset()  # Back to defaults
        >>> orbitbox.config.EQUALITY_RTOL
        1e-12
        """
        defaults = OrbitboxConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["OrbitboxConfig:"]
        lines.append("  Numerical Tolerances:")
        lines.append(f"    EQUALITY_RTOL = {self.EQUALITY_RTOL}")
        lines.append(f"    EQUALITY_ATOL = {self.EQUALITY_ATOL}")
        lines.append(f"    HASH_DECIMALS = {self.HASH_DECIMALS}")
        lines.append("  Snapping Thresholds:")
        lines.append(f"    SNAP_TO_ZERO_THRESHOLD = {self.SNAP_TO_ZERO_THRESHOLD}")
        lines.append(f"    SNAP_TO_CIRCULAR = {self.SNAP_TO_CIRCULAR}")
        lines.append(f"    SNAP_TO_EQUATORIAL = {self.SNAP_TO_EQUATORIAL}")
        lines.append("  Orbit Determination:")
        lines.append(f"    DEGENERACY_TOL = {self.DEGENERACY_TOL}")
        lines.append(f"    COPLANAR_TOL = {self.COPLANAR_TOL}")
        lines.append("  Behavior:")
        lines.append(f"    STRICT_VALIDATION = {self.STRICT_VALIDATION}")
        lines.append("  Ground Track:")
        lines.append(f"    DEFAULT_TRACK_POINTS = {self.DEFAULT_TRACK_POINTS}")
        lines.append(f"    DEFAULT_TRACK_COLOR = '{self.DEFAULT_TRACK_COLOR}'")
        return "\n".join(lines)


# Global configuration instance
config = OrbitboxConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import orbitbox
    >>> with orbitbox.temp_config(EQUALITY_RTOL=1e-6, STRICT_VALIDATION=False):
    ...     # Use relaxed tolerances
    ...     ...
    >>> # Original config restored here
    >>> orbitbox.config.EQUALITY_RTOL
    1e-12

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(
                f"OrbitboxConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
