"""
Portfolio row recalculation and roll-ups.

Everything here is a pure function over the rows passed in. Callers
recompute from scratch after every edit: mutate a row, run
`recalculate_row`, then `aggregate` the whole working set.
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Any

from rooflet.adapters.config import config
from rooflet.domain.finance import FinancingStrategy, monthly_mortgage_payment
from rooflet.domain.metrics import (
    ComputedMetrics,
    PortfolioMetrics,
    PortfolioSummary,
    PortfolioTotals,
)
from rooflet.domain.property import MarketListing, PortfolioFilters, PropertyData

EDITABLE_FIELDS = (
    "market_value",
    "debt",
    "rent",
    "hoa",
    "re_tax",
    "insurance",
    "other_expenses",
    "interest_rate",
)


def _div(num: float, den: float, scale: float = 1.0) -> float:
    return num / den * scale if den > 0 else 0.0


def calculate_debt_service(debt: float, interest_rate: float, term_years: int | None = None) -> float:
    """Monthly payment on an owned property's outstanding debt."""
    return monthly_mortgage_payment(
        principal=debt or 0.0,
        annual_rate_percent=interest_rate or 0.0,
        term_years=term_years or config.PORTFOLIO_LOAN_TERM_YEARS,
    )


def recalculate_row(row: PropertyData) -> PropertyData:
    """Re-derive equity, debt service, NOI, cash flow and return from the editable fields."""
    market_value = row.market_value
    debt = row.debt

    equity = market_value - debt
    equity_percent = _div(equity, market_value, 100.0)

    debt_service = calculate_debt_service(debt, row.interest_rate)

    noi_monthly = row.rent - row.hoa - row.re_tax - row.insurance - row.other_expenses
    cashflow = noi_monthly - debt_service

    return row.model_copy(
        update={
            "equity": equity,
            "equity_percent": equity_percent,
            "debt_service": debt_service,
            "noi_monthly": noi_monthly,
            "noi_yearly": noi_monthly * 12.0,
            "cashflow": cashflow,
            "return_percent": _div(cashflow * 12.0, equity, 100.0),
        }
    )


def update_row(row: PropertyData, field: str, value: Any) -> PropertyData:
    """
    Set one editable field and recalculate. The value goes through model
    validation, so a cleared cell (None) reads as 0 and "1500" as 1500.0.
    """
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"{field!r} is derived and cannot be edited")
    edited = PropertyData.model_validate({**row.model_dump(), field: value})
    return recalculate_row(edited)


def create_empty_row(address: str = "New Property") -> PropertyData:
    return PropertyData(address=address, is_new=True)


def row_from_listing(
    listing: MarketListing,
    metrics: ComputedMetrics,
    financing: FinancingStrategy,
) -> PropertyData:
    """
    Temporary portfolio row for an interested listing, financed the way
    the listing's metrics were computed.
    """
    row = PropertyData(
        address=listing.address,
        state=listing.state,
        market_value=metrics.purchase_price,
        debt=max(metrics.loan_amount, 0.0),
        rent=metrics.expected_rent,
        hoa=metrics.monthly_hoa,
        re_tax=metrics.monthly_property_tax,
        insurance=metrics.monthly_insurance,
        interest_rate=financing.interest_rate,
        is_temporary=True,
        listing_id=listing.id,
    )
    return recalculate_row(row)


def clear_temporary(rows: Iterable[PropertyData]) -> list[PropertyData]:
    return [r for r in rows if not r.is_temporary]


def apply_filters(rows: Iterable[PropertyData], filters: PortfolioFilters) -> list[PropertyData]:
    out = list(rows)

    if not filters.include_vacant:
        out = [r for r in out if r.rent > 0]

    if filters.selected_states:
        wanted = set(filters.selected_states)
        out = [r for r in out if (r.state or "") in wanted]

    if filters.cash_flow_filter == "positive":
        out = [r for r in out if r.cashflow > 0]
    elif filters.cash_flow_filter == "negative":
        out = [r for r in out if r.cashflow < 0]

    if filters.debt_filter == "with-debt":
        out = [r for r in out if r.debt > 0]
    elif filters.debt_filter == "no-debt":
        out = [r for r in out if r.debt == 0]

    if filters.min_market_value > 0:
        out = [r for r in out if r.market_value >= filters.min_market_value]

    return out


def portfolio_totals(rows: Sequence[PropertyData]) -> PortfolioTotals:
    return PortfolioTotals(
        total_assets=math.fsum(r.market_value for r in rows),
        total_debt=math.fsum(r.debt for r in rows),
        total_equity=math.fsum(r.equity for r in rows),
        total_expenses_monthly=math.fsum(r.hoa + r.re_tax + r.insurance + r.other_expenses for r in rows),
        debt_service=math.fsum(r.debt_service for r in rows),
        noi_monthly=math.fsum(r.noi_monthly for r in rows),
        noi_yearly=math.fsum(r.noi_yearly for r in rows),
        cashflow_monthly=math.fsum(r.cashflow for r in rows),
        cashflow_yearly=math.fsum(r.cashflow * 12.0 for r in rows),
    )


def portfolio_metrics(rows: Sequence[PropertyData], totals: PortfolioTotals) -> PortfolioMetrics:
    total_rent_monthly = math.fsum(r.rent for r in rows)
    total_rent_annual = total_rent_monthly * 12.0
    active_units = sum(1 for r in rows if r.rent > 0)
    property_count = len(rows)

    coc_return = _div(totals.cashflow_yearly, totals.total_equity, 100.0)

    return PortfolioMetrics(
        total_rent_monthly=total_rent_monthly,
        total_rent_annual=total_rent_annual,
        active_units=active_units,
        rent_per_unit_per_month=_div(total_rent_monthly, active_units),
        coc_return=coc_return,
        leverage=_div(totals.total_debt, totals.total_assets, 100.0),
        # no debt service means no coverage risk: reported as 0, not unbounded
        dscr=_div(totals.noi_monthly, totals.debt_service),
        levered_cash_yield=coc_return,
        unlevered_cash_yield=_div(totals.noi_yearly, totals.total_assets, 100.0),
        cap_rate=_div(totals.noi_yearly, totals.total_assets, 100.0),
        grm=_div(totals.total_assets, total_rent_annual),
        opex_ratio=_div(totals.total_expenses_monthly, total_rent_monthly, 100.0),
        property_count=property_count,
        avg_property_value=_div(totals.total_assets, property_count),
        avg_rent_per_property=_div(total_rent_monthly, property_count),
    )


def aggregate(rows: Iterable[PropertyData]) -> PortfolioSummary:
    rows = list(rows)
    totals = portfolio_totals(rows)
    return PortfolioSummary(totals=totals, metrics=portfolio_metrics(rows, totals))
