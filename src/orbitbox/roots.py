"""
Newton root finder shared by all Orbitbox solvers.

Every iterative solver in the package (classical Kepler, universal Kepler,
Lambert) supplies its own function/derivative pair to ``newton``. The
iteration cap and step tolerance are fixed for all of them.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from .exceptions import ConvergenceError

logger = logging.getLogger(__name__)

MAX_ITER = 1000
ERR_TOL = 1e-8


class SolverStatus(Enum):
    CONVERGED = 'converged'
    MAX_ITER_EXCEEDED = 'max_iter_exceeded'   # iteration cap reached
    NON_FINITE = 'non_finite'                 # zero derivative, NaN/Inf step or overflow


@dataclass(frozen=True)
class RootResult:
    """
    Outcome of a Newton solve.

    Attributes
    ----------
    value : float
        Converged root, or the last iterate when the solve failed
    iterations : int
        Number of Newton steps evaluated
    status : SolverStatus
        Termination status
    """
    value: float
    iterations: int
    status: SolverStatus

    @property
    def converged(self) -> bool:
        return self.status == SolverStatus.CONVERGED

    def check(self, what: str = "Newton iteration") -> float:
        """
        Return the root, raising ConvergenceError if the solve failed.

        Parameters
        ----------
        what : str, optional
            Description of the solve, used in the error message
        """
        if self.converged:
            return self.value
        if self.status == SolverStatus.MAX_ITER_EXCEEDED:
            reason = f"did not converge within {self.iterations} iterations"
        else:
            reason = f"produced a non-finite step after {self.iterations} iterations"
        raise ConvergenceError(
            f"{what} {reason} (last value {self.value!r})",
            status=self.status,
            iterations=self.iterations,
            last_value=self.value,
        )


def newton(
    f: Callable[[float], float],
    fprime: Callable[[float], float],
    x0: float,
    max_iter: int = MAX_ITER,
    tol: float = ERR_TOL,
    bracket: Optional[Tuple[float, float]] = None,
) -> RootResult:
    """
    Find a root of f by Newton's method.

    Iterates ``x <- x - f(x)/f'(x)`` until the absolute step is below
    ``tol`` or ``max_iter`` steps have been evaluated. The converged value is
    the iterate at which the small step was computed (the step itself is not
    applied), matching the usual convention for these solvers.

    When ``bracket`` is given, f must change sign between its ends. The
    bracket shrinks around the root as iterates are evaluated, and a Newton
    step that would leave it is replaced by a bisection step.

    Parameters
    ----------
    f : callable
        Scalar function of one variable
    fprime : callable
        Derivative of f
    x0 : float
        Initial guess
    max_iter : int, optional
        Iteration cap (default MAX_ITER)
    tol : float, optional
        Absolute tolerance on the Newton step (default ERR_TOL)
    bracket : tuple of float, optional
        Interval (lo, hi) known to contain the root

    Returns
    -------
    RootResult
        Root value, iteration count, and termination status. Failure is
        reported through ``status``; call ``RootResult.check()`` to raise.

    Raises
    ------
    ValueError
        If f does not change sign over ``bracket``

    Examples
    --------
    >>> res = newton(lambda x: x**2 - 2, lambda x: 2*x, 1.0)
    >>> res.converged, round(res.value, 8)
    (True, 1.41421356)
    """
    x = float(x0)
    if bracket is not None:
        lo, hi = sorted(float(b) for b in bracket)
        lo_sign = math.copysign(1.0, f(lo))
        if lo_sign == math.copysign(1.0, f(hi)):
            raise ValueError(f"Function does not change sign over [{lo}, {hi}]")
        if not lo <= x <= hi:
            x = 0.5 * (lo + hi)

    for iteration in range(1, max_iter + 1):
        try:
            fval = f(x)
            dval = fprime(x)
        except OverflowError:
            logger.warning("Newton solve overflowed at x=%r (iteration %d)",
                           x, iteration)
            return RootResult(x, iteration, SolverStatus.NON_FINITE)
        if dval == 0 or not math.isfinite(fval) or not math.isfinite(dval):
            logger.warning("Newton solve stopped on non-finite step at x=%r "
                           "(iteration %d)", x, iteration)
            return RootResult(x, iteration, SolverStatus.NON_FINITE)
        step = fval / dval
        if not math.isfinite(step):
            logger.warning("Newton solve stopped on non-finite step at x=%r "
                           "(iteration %d)", x, iteration)
            return RootResult(x, iteration, SolverStatus.NON_FINITE)
        if abs(step) < tol:
            logger.debug("Newton solve converged to %r in %d iterations",
                         x, iteration)
            return RootResult(x, iteration, SolverStatus.CONVERGED)
        if bracket is None:
            x = x - step
            continue

        if math.copysign(1.0, fval) == lo_sign:
            lo = x
        else:
            hi = x
        if hi - lo < tol:
            logger.debug("Newton solve converged to %r in %d iterations "
                         "(bracket collapsed)", x, iteration)
            return RootResult(x, iteration, SolverStatus.CONVERGED)
        x_new = x - step
        if not lo < x_new < hi:
            x_new = 0.5 * (lo + hi)
        x = x_new

    logger.warning("Newton solve exhausted %d iterations (last x=%r)", max_iter, x)
    return RootResult(x, max_iter, SolverStatus.MAX_ITER_EXCEEDED)
