"""Five-year P&L and balance-sheet projection engine.

The engine estimates viability from an assumed net margin, not from a
bottom-up cost model, so the P&L is solved profit-first:

1. Revenue compounds from the year-1 figure at the growth rate.
2. PAT is ``revenue * net_margin``; PBT and tax are back-solved from it.
3. Interest comes from the opening loan balance of the amortization
   schedule; depreciation is straight-line on original cost.
4. EBITDA (``pbt + interest + depreciation``) and expense
   (``revenue - ebitda``) are residuals.

Balance sheet
-------------
Share capital is the promoter contribution, reserves accumulate PAT (no
dividends), the long-term loan follows the schedule and net fixed assets
decline by cumulative depreciation (floored at 0). Current assets are the
balancing plug ``total_liabilities - net_fixed_assets``, so the two sides
agree by construction. This is a known simplification of the model.

All internal arithmetic is full precision; each emitted field is rounded to
2 decimals.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from dpr_finance.amortization import ScheduleRow, iter_loan_schedule
from dpr_finance.inputs import FinancialInputs, InvalidInputError
from dpr_finance.policy import DEFAULT_POLICY, PolicyConstants
from dpr_finance.utils import round2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearProjection:
    """One projected year: P&L, cash flow, DSCR and balance-sheet snapshot."""

    year: int
    revenue: float
    expense: float
    ebitda: float
    interest: float
    depreciation: float
    pbt: float
    tax: float
    pat: float
    cash_flow: float
    dscr: float
    share_capital: float
    reserves: float
    long_term_loan: float
    total_liabilities: float
    net_fixed_assets: float
    current_assets: float
    total_assets: float

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def annual_depreciation(inputs: FinancialInputs) -> float:
    """Straight-line depreciation on original cost; land is not depreciated."""
    return (
        inputs.building_cost * (inputs.depreciation_building / 100)
        + inputs.machinery_cost * (inputs.depreciation_machinery / 100)
        + inputs.other_cost * (inputs.depreciation_other / 100)
    )


def _dscr(pat: float, depreciation: float, interest: float, principal: float) -> float:
    """(PAT + depreciation + interest) / (interest + principal); 0 when nothing is due."""
    debt_service = interest + principal
    if debt_service > 0:
        return (pat + depreciation + interest) / debt_service
    return 0.0


def calculate_projections(
    inputs: FinancialInputs,
    policy: PolicyConstants = DEFAULT_POLICY,
) -> List[YearProjection]:
    """Project the P&L, cash flow and balance sheet over the policy horizon.

    Parameters
    ----------
    inputs : FinancialInputs
        Validated assumptions (net margin below 100, tenure >= 1).
    policy : PolicyConstants
        Supplies ``horizon_years`` (5 by default).

    Returns
    -------
    list[YearProjection]
        Exactly ``policy.horizon_years`` rows, year 1 first.
    """
    inputs.check_finite()
    if inputs.income_tax_rate >= 100:
        raise InvalidInputError(
            f"Income tax rate must be below 100%, got {inputs.income_tax_rate}"
        )

    schedule: Dict[int, ScheduleRow] = {
        row[0]: row
        for row in iter_loan_schedule(
            inputs.loan_required, inputs.interest_rate, inputs.loan_tenure
        )
    }

    depreciation = annual_depreciation(inputs)
    gross_block = inputs.gross_block
    tax_rate = inputs.income_tax_rate / 100

    revenue = inputs.year1_revenue
    reserves = 0.0
    accumulated_depreciation = 0.0

    projections: List[YearProjection] = []
    for year in range(1, policy.horizon_years + 1):
        if year > 1:
            revenue = revenue * (1 + inputs.revenue_growth_rate / 100)

        pat = revenue * (inputs.net_margin / 100)
        pbt = pat / (1 - tax_rate)
        tax = pbt * tax_rate

        row: Optional[ScheduleRow] = schedule.get(year)
        if row is None:
            # Loan fully repaid before this year
            interest = principal = closing_balance = 0.0
        else:
            _, _, interest, principal, closing_balance = row

        ebitda = pbt + interest + depreciation
        expense = revenue - ebitda
        cash_flow = pat + depreciation - principal
        dscr = _dscr(pat, depreciation, interest, principal)

        reserves += pat
        accumulated_depreciation += depreciation

        share_capital = inputs.own_contribution
        total_liabilities = share_capital + reserves + closing_balance
        net_fixed_assets = max(0.0, gross_block - accumulated_depreciation)
        current_assets = total_liabilities - net_fixed_assets
        # The plug makes the asset side equal the liability side
        total_assets = total_liabilities

        logger.debug(
            "Year %d: revenue=%.4f pat=%.4f interest=%.4f dscr=%.4f",
            year,
            revenue,
            pat,
            interest,
            dscr,
        )

        projections.append(
            YearProjection(
                year=year,
                revenue=round2(revenue),
                expense=round2(expense),
                ebitda=round2(ebitda),
                interest=round2(interest),
                depreciation=round2(depreciation),
                pbt=round2(pbt),
                tax=round2(tax),
                pat=round2(pat),
                cash_flow=round2(cash_flow),
                dscr=round2(dscr),
                share_capital=round2(share_capital),
                reserves=round2(reserves),
                long_term_loan=round2(closing_balance),
                total_liabilities=round2(total_liabilities),
                net_fixed_assets=round2(net_fixed_assets),
                current_assets=round2(current_assets),
                total_assets=round2(total_assets),
            )
        )

    return projections


__all__ = [
    "YearProjection",
    "annual_depreciation",
    "calculate_projections",
]
