"""
Utility functions for the Orbitbox package.
"""

import warnings
from typing import Type

import numpy as np

from .config import config

TWO_PI = 2 * np.pi


def validation_error(message: str, error_class: Type[Exception] = ValueError):
    """
    Raise error or warn based on config.STRICT_VALIDATION.

    This function provides consistent validation behavior across the package.
    When STRICT_VALIDATION is True (default), raises the specified exception.
    When False, issues a UserWarning instead.

    Parameters
    ----------
    message : str
        Validation error message
    error_class : Type[Exception], optional
        Exception class to raise if STRICT_VALIDATION is True.
        Default: ValueError

    Raises
    ------
    Exception (of type error_class)
        If config.STRICT_VALIDATION is True

    Warns
    -----
    UserWarning
        If config.STRICT_VALIDATION is False

    Examples
    --------
    >>> from orbitbox.utils import validation_error
    >>> from orbitbox import config
    >>> config.STRICT_VALIDATION = True
    >>> validation_error("Invalid value")  # Raises ValueError

    >>> config.STRICT_VALIDATION = False
    >>> validation_error("Invalid value")  # Issues warning
    """
    if config.STRICT_VALIDATION:
        raise error_class(message)
    else:
        warnings.warn(message, UserWarning, stacklevel=2)


def resolve_quadrant(angle: float, reference: float) -> float:
    """
    Resolve an arccos result to the full circle [0, 2π).

    ``arccos`` only returns values in [0, π]. The sign of a reference
    component decides the half-plane: a negative reference maps the angle
    to ``2π - angle``. A reference of exactly zero keeps the principal value.

    Parameters
    ----------
    angle : float
        Principal value in [0, π] [rad]
    reference : float
        Component whose sign selects the half-plane

    Returns
    -------
    float
        Angle in [0, 2π) [rad]
    """
    if reference < 0:
        angle = TWO_PI - angle
    return float(angle % TWO_PI)


def safe_arccos(x: float) -> float:
    """arccos with the argument clipped to [-1, 1] to absorb rounding."""
    return float(np.arccos(np.clip(x, -1.0, 1.0)))


def as_vector3(vec, name: str = "vector") -> np.ndarray:
    """
    Convert input to a float 3-vector, validating shape and finiteness.

    Parameters
    ----------
    vec : array_like
        Candidate 3-vector
    name : str, optional
        Name used in error messages

    Returns
    -------
    np.ndarray
        Float array of shape (3,)
    """
    arr = np.asarray(vec, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"{name} must be a 3-vector, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains NaN or Inf")
    return arr


def check_mu(mu: float) -> float:
    """Validate a gravitational parameter and return it as a float."""
    if not mu > 0:
        raise ValueError(f"Gravitational parameter must be positive, got {mu}")
    return float(mu)
