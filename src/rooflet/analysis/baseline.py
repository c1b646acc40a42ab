"""
Change indicators against an immutable baseline.

Two values count as changed only when their *rendered* forms differ, so
sub-cent or sub-0.1% drift never lights up a badge.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from rooflet.domain.metrics import PortfolioSummary
from rooflet.domain.property import PropertyData

ValueKind = Literal["currency", "percent", "ratio", "count"]
Direction = Literal["up", "down"]

# absolute threshold used for per-cell badges in the editable table
CELL_CHANGE_THRESHOLD = 0.01


def format_compact_currency(value: float) -> str:
    v = value or 0.0
    if abs(v) >= 1_000_000:
        return f"${v / 1_000_000:.1f}M"
    if abs(v) >= 100_000:
        return f"${v / 1000:.1f}K"
    return f"${v:,.0f}"


def format_compact_percent(value: float) -> str:
    return f"{(value or 0.0):.1f}%"


def format_ratio(value: float) -> str:
    return f"{(value or 0.0):.2f}x"


def format_count(value: float) -> str:
    return f"{(value or 0.0):.0f}"


FORMATTERS: dict[ValueKind, Callable[[float], str]] = {
    "currency": format_compact_currency,
    "percent": format_compact_percent,
    "ratio": format_ratio,
    "count": format_count,
}

# presentation kind for every PortfolioSummary field
SUMMARY_FIELD_KINDS: dict[str, ValueKind] = {
    "total_assets": "currency",
    "total_debt": "currency",
    "total_equity": "currency",
    "total_expenses_monthly": "currency",
    "debt_service": "currency",
    "noi_monthly": "currency",
    "noi_yearly": "currency",
    "cashflow_monthly": "currency",
    "cashflow_yearly": "currency",
    "total_rent_monthly": "currency",
    "total_rent_annual": "currency",
    "active_units": "count",
    "rent_per_unit_per_month": "currency",
    "coc_return": "percent",
    "leverage": "percent",
    "dscr": "ratio",
    "levered_cash_yield": "percent",
    "unlevered_cash_yield": "percent",
    "cap_rate": "percent",
    "grm": "ratio",
    "opex_ratio": "percent",
    "property_count": "count",
    "avg_property_value": "currency",
    "avg_rent_per_property": "currency",
}


@dataclass(frozen=True)
class Diff:
    changed: bool
    direction: Direction | None  # None unless changed
    current: str
    baseline: str


def diff(current: float, baseline: float, kind: ValueKind = "currency") -> Diff:
    fmt = FORMATTERS[kind]
    current_text = fmt(current)
    baseline_text = fmt(baseline)
    changed = current_text != baseline_text
    direction: Direction | None = None
    if changed:
        direction = "up" if (current or 0.0) > (baseline or 0.0) else "down"
    return Diff(
        changed=changed,
        direction=direction,
        current=current_text,
        baseline=baseline_text,
    )


def diff_summary(current: PortfolioSummary, baseline: PortfolioSummary) -> dict[str, Diff]:
    now = current.values()
    was = baseline.values()
    return {
        name: diff(now[name], was[name], kind)
        for name, kind in SUMMARY_FIELD_KINDS.items()
    }


def changed_fields(current: PortfolioSummary, baseline: PortfolioSummary) -> list[str]:
    return [name for name, d in diff_summary(current, baseline).items() if d.changed]


def row_changed(current: PropertyData, baseline: PropertyData | None, field: str) -> bool:
    """Per-cell badge. Rows without a baseline (user-added) compare against 0."""
    now = getattr(current, field) or 0.0
    was = (getattr(baseline, field) or 0.0) if baseline is not None else 0.0
    return abs(now - was) >= CELL_CHANGE_THRESHOLD
