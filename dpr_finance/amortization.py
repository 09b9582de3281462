"""Term-loan amortization for DPR projections.

Straight-line principal: the loan is repaid in ``tenure`` equal annual
instalments of ``loan_required / tenure``; interest is simple annual interest
on the opening balance of each year.

The unrounded schedule (``iter_loan_schedule``) feeds the projection engine;
``calculate_amortization`` emits the same rows rounded to 2 decimals for
presentation. Rounding only happens at emission so multi-year figures do not
drift.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple

from dpr_finance.inputs import FinancialInputs, InvalidInputError
from dpr_finance.utils import round2

logger = logging.getLogger(__name__)

# (year, opening, interest, principal, closing)
ScheduleRow = Tuple[int, float, float, float, float]


@dataclass(frozen=True)
class AmortizationEntry:
    """One year of the repayment schedule."""

    year: int
    opening_balance: float
    interest: float
    principal: float
    closing_balance: float

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def _check_loan_terms(loan_required: float, interest_rate: float, tenure: int) -> None:
    if isinstance(tenure, bool) or not isinstance(tenure, int):
        raise InvalidInputError(f"Loan tenure must be an integer number of years, got {tenure!r}")
    if tenure < 1:
        raise InvalidInputError(f"Loan tenure must be at least 1 year, got {tenure}")
    if not math.isfinite(loan_required) or loan_required < 0:
        raise InvalidInputError(f"Loan amount must be a finite non-negative number, got {loan_required!r}")
    if not math.isfinite(interest_rate) or interest_rate < 0:
        raise InvalidInputError(f"Interest rate must be a finite non-negative number, got {interest_rate!r}")


def iter_loan_schedule(
    loan_required: float,
    interest_rate: float,
    tenure: int,
) -> Iterator[ScheduleRow]:
    """Yield unrounded schedule rows for years 1..tenure.

    The closing balance of the final year is pinned to exactly 0 so that
    floating point residue never leaves a phantom balance (or phantom
    interest) after the loan is repaid.
    """
    _check_loan_terms(loan_required, interest_rate, tenure)

    instalment = loan_required / tenure
    balance = loan_required
    for year in range(1, tenure + 1):
        interest = balance * (interest_rate / 100)
        closing = max(0.0, balance - instalment)
        if year == tenure:
            closing = 0.0
        yield year, balance, interest, instalment, closing
        balance = closing


def calculate_amortization(inputs: FinancialInputs) -> List[AmortizationEntry]:
    """Build the year-by-year repayment schedule for the term loan.

    Parameters
    ----------
    inputs : FinancialInputs
        Uses ``loan_required``, ``interest_rate`` and ``loan_tenure``.

    Returns
    -------
    list[AmortizationEntry]
        Exactly ``loan_tenure`` entries, rounded to 2 decimals.

    Raises
    ------
    InvalidInputError
        If tenure is below 1 (the instalment would divide by zero) or the
        loan terms are not finite.
    """
    schedule = [
        AmortizationEntry(
            year=year,
            opening_balance=round2(opening),
            interest=round2(interest),
            principal=round2(principal),
            closing_balance=round2(closing),
        )
        for year, opening, interest, principal, closing in iter_loan_schedule(
            inputs.loan_required, inputs.interest_rate, inputs.loan_tenure
        )
    ]
    logger.debug(
        "Amortization: loan=%.2f over %d years at %.2f%%",
        inputs.loan_required,
        inputs.loan_tenure,
        inputs.interest_rate,
    )
    return schedule


__all__ = [
    "AmortizationEntry",
    "iter_loan_schedule",
    "calculate_amortization",
]
