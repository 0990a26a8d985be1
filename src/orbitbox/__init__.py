"""
Orbitbox: Orbital Mechanics Toolbox

A Python package for two-body orbit determination, universal-variable
propagation, coordinate frame transformation, ground tracks, relative
motion and perturbation calculations.
"""
import logging

# Configuration
from .config import config, temp_config

# Errors
from .exceptions import OrbitboxError, ConvergenceError, DegenerateGeometryError

# Numerical kernels
from .roots import newton, RootResult, SolverStatus, MAX_ITER, ERR_TOL
from .stumpff import stumpff_c, stumpff_s
from .kepler import solve_kepler, solve_universal_kepler, UniversalAnomaly

# Core classes
from .bodies import BodyParams, EARTH, MOON, MARS, SUN
from .state import StateVector
from .orbital_elements import OrbitalElementSet, OrbitalElementSet as OES

# Operations
from .propagation import propagate, lagrange_coefficients
from .determination import gibbs, lambert, transfer_angle, LambertSolution
from .frames import (perifocal_to_geocentric, change_coords,
                     right_ascension_declination, inertial_to_rotating)
from .ground_track import (sat_long_lat, ground_track, j2_secular_rates,
                           GroundTrack, GroundTrackPoint)
from .relative_motion import relative_state, lvlh_basis, RelativeState
from .perturbations import j2_perturbation, plane_change_delta_v, J2Perturbation

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from orbitbox import *"
__all__ = [
    # Configuration
    "config",
    "temp_config",
    # Errors
    "OrbitboxError",
    "ConvergenceError",
    "DegenerateGeometryError",
    # Numerical kernels
    "newton",
    "RootResult",
    "SolverStatus",
    "MAX_ITER",
    "ERR_TOL",
    "stumpff_c",
    "stumpff_s",
    "solve_kepler",
    "solve_universal_kepler",
    "UniversalAnomaly",
    # Classes
    "BodyParams",
    "StateVector",
    "OrbitalElementSet",
    "LambertSolution",
    "GroundTrack",
    "GroundTrackPoint",
    "RelativeState",
    "J2Perturbation",
    # Abbreviations
    "OES",
    # Constants
    "EARTH",
    "MOON",
    "MARS",
    "SUN",
    # Operations
    "propagate",
    "lagrange_coefficients",
    "gibbs",
    "lambert",
    "transfer_angle",
    "perifocal_to_geocentric",
    "change_coords",
    "right_ascension_declination",
    "inertial_to_rotating",
    "sat_long_lat",
    "ground_track",
    "j2_secular_rates",
    "relative_state",
    "lvlh_basis",
    "j2_perturbation",
    "plane_change_delta_v",
]
