from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Optional


@dataclass(frozen=True)
class ComputedMetrics:
    """
    Per-listing investment metrics.

    Ratio fields typed Optional[float] are None when not computable
    (zero denominator). dscr is None when there is no mortgage payment,
    i.e. coverage is unbounded.
    """
    purchase_price: float
    expected_rent: float
    down_payment: float
    loan_amount: float
    monthly_mortgage_payment: float
    monthly_hoa: float
    monthly_property_tax: float
    monthly_insurance: float
    total_monthly_expenses: float   # hoa + tax + insurance, no debt service
    monthly_net_income: float       # cash flow after debt service
    annual_net_income: float
    cash_on_cash_return: float      # percent, 0 when nothing was put down
    meets_1_percent_rule: bool
    meets_2_percent_rule: bool
    meets_50_percent_rule: bool
    cap_rate: Optional[float]
    price_to_rent_ratio: Optional[float]
    dscr: Optional[float]
    break_even_ratio: Optional[float]
    operating_expense_ratio: Optional[float]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PortfolioTotals:
    total_assets: float
    total_debt: float
    total_equity: float
    total_expenses_monthly: float
    debt_service: float
    noi_monthly: float
    noi_yearly: float
    cashflow_monthly: float
    cashflow_yearly: float


@dataclass(frozen=True)
class PortfolioMetrics:
    """
    Ratios over a PortfolioTotals fold. Every ratio degrades to 0 on a zero
    denominator so the numbers stay renderable while a cell is being edited.
    """
    total_rent_monthly: float
    total_rent_annual: float
    active_units: int
    rent_per_unit_per_month: float
    coc_return: float
    leverage: float
    dscr: float
    levered_cash_yield: float
    unlevered_cash_yield: float
    cap_rate: float
    grm: float
    opex_ratio: float
    property_count: int
    avg_property_value: float
    avg_rent_per_property: float


@dataclass(frozen=True)
class PortfolioSummary:
    totals: PortfolioTotals
    metrics: PortfolioMetrics

    def values(self) -> dict[str, float]:
        """Flat field -> value mapping over totals and metrics."""
        out: dict[str, float] = {}
        for part in (self.totals, self.metrics):
            for f in fields(part):
                out[f.name] = getattr(part, f.name)
        return out
