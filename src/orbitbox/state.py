'''Orbital mechanics toolbox
StateVector class definition'''

import numpy as np

from .config import config
from .utils import as_vector3


class StateVector:
    """
    Immutable position/velocity pair in a right-handed Cartesian frame.

    Parameters
    ----------
    r : array_like
        Position vector [km]
    v : array_like
        Velocity vector [km/s]

    Notes
    -----
    The arrays are stored as read-only copies; create a new StateVector to
    change the state.
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, r, v):
        self._r = as_vector3(r, "position").copy()
        self._v = as_vector3(v, "velocity").copy()
        # Ensure immutability of state arrays
        self._r.flags.writeable = False
        self._v.flags.writeable = False

    @classmethod
    def from_array(cls, state):
        """Create a StateVector from a 6-element array [x, y, z, vx, vy, vz]"""
        state = np.asarray(state, dtype=float)
        if state.shape != (6,):
            raise ValueError(f"State array must have shape (6,), got {state.shape}")
        return cls(state[:3], state[3:])

    # ========== PROPERTY ACCESS ==========
    @property
    def r(self) -> np.ndarray:
        """Position vector [km] (read-only)"""
        return self._r

    @property
    def v(self) -> np.ndarray:
        """Velocity vector [km/s] (read-only)"""
        return self._v

    @property
    def radius(self) -> float:
        """Distance from the central body [km]"""
        return float(np.linalg.norm(self._r))

    @property
    def speed(self) -> float:
        """Velocity magnitude [km/s]"""
        return float(np.linalg.norm(self._v))

    @property
    def radial_velocity(self) -> float:
        """Component of velocity along the position vector [km/s]"""
        return float(np.dot(self._r, self._v)) / self.radius

    def as_array(self) -> np.ndarray:
        """State as a new 6-element array [x, y, z, vx, vy, vz]"""
        return np.concatenate([self._r, self._v])

    # ========== SPECIAL METHODS ==========
    def __iter__(self):
        #Allow unpacking r, v = state
        return iter((self._r, self._v))

    def __repr__(self):
        return f"StateVector(r={self._r.tolist()}, v={self._v.tolist()})"

    def __str__(self):
        r, v = self._r, self._v
        return (f"State Vector:\n"
                f"  r = [{r[0]:12.4f}, {r[1]:12.4f}, {r[2]:12.4f}] km\n"
                f"  v = [{v[0]:12.4f}, {v[1]:12.4f}, {v[2]:12.4f}] km/s")

    def __eq__(self, other):
        #Check equality with tolerance
        if not isinstance(other, StateVector):
            return NotImplemented
        return np.allclose(self.as_array(), other.as_array(),
                           rtol=config.EQUALITY_RTOL, atol=config.EQUALITY_ATOL)

    def __hash__(self):
        #Hash with rounding to match equality
        rounded = tuple(round(x, config.HASH_DECIMALS) for x in self.as_array())
        return hash(rounded)
