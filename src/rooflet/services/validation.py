# src/rooflet/services/validation.py
"""
Caller-side input validation.

The engine itself never validates; anything that reaches it is assumed
sane. This module is where form payloads get coerced and rejected.
"""
from __future__ import annotations

import math
import re
from datetime import date
from typing import Any

from rooflet.adapters.config import config
from rooflet.domain.finance import DownPayment, FinancingStrategy


class FinancingInputError(ValueError):
    pass


class RentPeriodError(ValueError):
    def __init__(self, message: str, period_index: int | None = None) -> None:
        super().__init__(message)
        self.period_index = period_index


_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_currency(value: Any) -> float:
    """
    "$1,234.56" -> 1234.56. Blank or garbage -> 0.0.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).replace("$", "").replace(",", "").strip()
    if not s:
        return 0.0
    try:
        return float(s)
    except ValueError:
        return 0.0


def parse_percentage(value: Any) -> float:
    """
    "6.125%" -> 6.125. Percent units are kept (no /100).
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).replace("%", "").strip()
    if not s:
        return 0.0
    try:
        return float(s)
    except ValueError:
        return 0.0


def _required_num(raw: dict[str, Any], *keys: str, parser=parse_percentage, default: Any = None) -> float:
    for key in keys:
        if key in raw and raw[key] not in (None, ""):
            return parser(raw[key])
    if default is None:
        raise FinancingInputError(f"Missing required field: {keys[0]}")
    return float(default)


def financing_from_payload(raw: dict[str, Any]) -> FinancingStrategy:
    """
    Build a FinancingStrategy from a form payload.

    Accepts either the nested form
        {"down_payment": {"type": "amount", "value": 50000}, ...}
    or the flat form the dashboard stores
        {"downPaymentType": "percent", "downPaymentPercent": 20,
         "downPaymentAmount": 100000, "interestRate": 6, "loanTermYears": 30}
    For the flat form only the field named by the type is read; the other is
    a stale display shadow and is ignored.
    """
    nested = raw.get("down_payment")
    if isinstance(nested, dict):
        dp_type = str(nested.get("type") or "percent").lower()
        dp_value = nested.get("value")
    else:
        dp_type = str(raw.get("down_payment_type") or raw.get("downPaymentType") or "percent").lower()
        if dp_type == "amount":
            dp_value = raw.get("down_payment_amount", raw.get("downPaymentAmount"))
        else:
            dp_value = raw.get(
                "down_payment_percent",
                raw.get("downPaymentPercent", config.DEFAULT_DOWN_PAYMENT_PERCENT),
            )

    if dp_type not in ("percent", "amount"):
        raise FinancingInputError(f"Invalid down payment type: {dp_type!r}")
    if dp_value in (None, ""):
        raise FinancingInputError(f"Missing down payment {dp_type}")

    if dp_type == "percent":
        pct = parse_percentage(dp_value)
        # NaN fails both comparisons
        if not (0.0 <= pct <= 100.0):
            raise FinancingInputError("down payment percent must be between 0 and 100")
        down_payment = DownPayment.percent(pct)
    else:
        amount = parse_currency(dp_value)
        if not math.isfinite(amount) or amount < 0:
            raise FinancingInputError("down payment amount must be a non-negative number")
        down_payment = DownPayment.amount(amount)

    rate = _required_num(raw, "interest_rate", "interestRate", default=config.DEFAULT_INTEREST_RATE)
    if not math.isfinite(rate) or rate < 0:
        raise FinancingInputError("interest rate must be a non-negative number")

    term_raw = raw.get("loan_term_years", raw.get("loanTermYears", config.DEFAULT_LOAN_TERM_YEARS))
    try:
        term = int(term_raw)
    except (TypeError, ValueError, OverflowError) as err:
        raise FinancingInputError("Invalid loan term") from err
    if term <= 0:
        raise FinancingInputError("loan term must be > 0 years")

    return FinancingStrategy(down_payment=down_payment, interest_rate=rate, loan_term_years=term)


def financing_to_payload(financing: FinancingStrategy, price: float | None = None) -> dict[str, Any]:
    """
    Flat form for persistence. The non-authoritative field is derived
    from `price` when one is given and omitted otherwise.
    """
    dp = financing.down_payment
    out: dict[str, Any] = {
        "downPaymentType": dp.type,
        "interestRate": financing.interest_rate,
        "loanTermYears": financing.loan_term_years,
    }
    if dp.type == "percent":
        out["downPaymentPercent"] = dp.value
        if price is not None:
            out["downPaymentAmount"] = dp.as_amount(price)
    else:
        out["downPaymentAmount"] = dp.value
        if price is not None:
            out["downPaymentPercent"] = dp.as_percent(price)
    return out


def default_financing() -> FinancingStrategy:
    return FinancingStrategy(
        down_payment=DownPayment.percent(config.DEFAULT_DOWN_PAYMENT_PERCENT),
        interest_rate=config.DEFAULT_INTEREST_RATE,
        loan_term_years=config.DEFAULT_LOAN_TERM_YEARS,
    )


def validate_down_payment(financing: FinancingStrategy, price: float) -> None:
    """A fixed down payment may not exceed the price (no negative loan)."""
    if price < 0:
        raise FinancingInputError("price must be non-negative")
    if financing.down_payment.type == "amount" and financing.down_payment.value > price:
        raise FinancingInputError(
            f"down payment ${financing.down_payment.value:,.0f} exceeds price ${price:,.0f}"
        )


def validate_date(value: str | None) -> date | None:
    """
    Parse a YYYY-MM-DD string. Empty is allowed (returns None).
    """
    if not value:
        return None
    if not _DATE_RE.match(value):
        raise ValueError("Date must be in format YYYY-MM-DD")
    try:
        parsed = date.fromisoformat(value)
    except ValueError as err:
        raise ValueError(f"Invalid date: {value}") from err
    if not (1900 <= parsed.year <= 2100):
        raise ValueError("Year must be between 1900 and 2100")
    return parsed
