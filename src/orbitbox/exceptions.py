"""
Exception types raised by the Orbitbox package.

Two failure kinds exist besides plain input validation errors:

- ``ConvergenceError``: a Newton solve reached its iteration cap or
  produced a non-finite step.
- ``DegenerateGeometryError``: an orbit determination or frame computation
  hit a near-zero denominator (collinear observations, zero transfer angle).
"""


class OrbitboxError(Exception):
    """Base class for all Orbitbox errors."""


class ConvergenceError(OrbitboxError, RuntimeError):
    """
    Raised when an iterative solver fails to converge.

    Attributes
    ----------
    status : SolverStatus
        Termination status reported by the root finder
    iterations : int
        Number of iterations performed
    last_value : float
        Last iterate (not a solution)
    """
    def __init__(self, message, status=None, iterations=None, last_value=None):
        super().__init__(message)
        self.status = status
        self.iterations = iterations
        self.last_value = last_value


class DegenerateGeometryError(OrbitboxError, ValueError):
    """Raised when observation geometry makes a determination ill-posed."""
