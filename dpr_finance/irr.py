"""Periodic NPV and Newton-Raphson IRR for annual DPR cash flows.

The IRR solver is deliberately simple and reproducible: fixed initial guess,
fixed step tolerance, fixed iteration cap. It is a *best effort* contract.
Streams with several sign changes may not converge; in that case (or when the
derivative vanishes) the current estimate is returned instead of raising.
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

logger = logging.getLogger(__name__)


# ============================================================================
# NPV
# ============================================================================


def npv(rate: float, cashflows: Sequence[float]) -> float:
    """Present value of a DPR cash flow stream whose first entry sits at t=0.

    Parameters
    ----------
    rate : float
        Annual discount rate as a decimal (0.10 is 10%).
    cashflows : Sequence[float]
        ``[outlay, cf_1, ..., cf_N]``; the outlay is normally negative.

    Returns
    -------
    float
        ``sum(cf[t] / (1 + rate) ** t)``. Rates at or below -100% are
        treated as -99.9999%.

    Examples
    --------
    >>> npv(0.10, [-1000, 500, 500, 500])
    243.426...
    """
    base = 1.0 + max(float(rate), -0.999999)
    return sum(float(cf) / base ** t for t, cf in enumerate(cashflows))


def discounted_value(rate: float, initial_investment: float, cashflows: Sequence[float]) -> float:
    """NPV of flows received at the end of years 1..N less an upfront investment."""
    return npv(rate, [-float(initial_investment), *cashflows])


# ============================================================================
# IRR (Newton-Raphson)
# ============================================================================


def _npv_and_derivative(rate: float, cashflows: Sequence[float]) -> Tuple[float, float]:
    f_value = 0.0
    f_derivative = 0.0
    for t, cf in enumerate(cashflows):
        f_value += cf / (1.0 + rate) ** t
        f_derivative += -t * cf / (1.0 + rate) ** (t + 1)
    return f_value, f_derivative


def irr_newton(
    cashflows: Sequence[float],
    guess: float = 0.10,
    tolerance: float = 1e-5,
    max_iterations: int = 1000,
    min_derivative: float = 1e-9,
) -> float:
    """Internal Rate of Return by Newton-Raphson.

    Parameters
    ----------
    cashflows : Sequence[float]
        Cashflow series starting at t=0 (usually negative).
    guess : float
        Starting rate (decimal).
    tolerance : float
        Converged once ``|x_new - x| < tolerance``.
    max_iterations : int
        Iteration cap.
    min_derivative : float
        Stop early when ``|dNPV/dr|`` falls below this.

    Returns
    -------
    float
        IRR as a decimal. On convergence this is the final Newton step;
        otherwise the last estimate reached.

    Examples
    --------
    >>> irr_newton([-1000, 500, 500, 500])
    0.2337...
    """
    cfs = [float(x) for x in cashflows]
    x = float(guess)

    for iteration in range(max_iterations):
        if 1.0 + x == 0.0:
            logger.debug("IRR: estimate hit a rate of -1; returning it")
            return x
        try:
            f_value, f_derivative = _npv_and_derivative(x, cfs)
        except OverflowError:
            logger.debug("IRR: overflow at estimate %.6g; returning it", x)
            return x

        if abs(f_derivative) < min_derivative:
            logger.debug("IRR: flat derivative after %d iterations", iteration)
            return x

        new_x = x - f_value / f_derivative
        if abs(new_x - x) < tolerance:
            return new_x
        x = new_x

    logger.debug("IRR: no convergence within %d iterations", max_iterations)
    return x


__all__ = [
    "npv",
    "discounted_value",
    "irr_newton",
]
