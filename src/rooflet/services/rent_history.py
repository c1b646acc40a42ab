# src/rooflet/services/rent_history.py
from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from rooflet.adapters.logging_utils import get_logger
from rooflet.domain.rent_periods import MonthlyRentRecord, RentPeriod, ValidationWarning
from rooflet.services.validation import RentPeriodError

logger = get_logger(__name__)

MAX_PERIOD_DAYS = 3650


def month_count(start: date, end: date) -> int:
    """Calendar months touched by [start, end], counting both endpoint months."""
    return max(0, (end.year - start.year) * 12 + (end.month - start.month) + 1)


def validate_rent_periods(
    periods: Sequence[RentPeriod],
    today: date | None = None,
    lease_end: date | None = None,
) -> list[ValidationWarning]:
    """
    Advisory checks over user-entered rent periods.

    Periods are ordered by start date (stable, so ties keep input order)
    and each adjacent pair is checked for overlap and for a gap of more
    than one day. Independently, every period ending after `today` gets a
    future warning, and after `lease_end` a past-lease-end warning.
    Indices in warnings always refer to the caller's original order.

    Periods missing a date are skipped; `check_rent_periods` rejects them.
    """
    today = today or date.today()

    dated = [
        (idx, p) for idx, p in enumerate(periods)
        if p.start_date is not None and p.end_date is not None
    ]
    ordered = sorted(dated, key=lambda item: item[1].start_date)

    warnings: list[ValidationWarning] = []

    for (i, current), (j, nxt) in zip(ordered, ordered[1:]):
        if current.end_date >= nxt.start_date:
            warnings.append(
                ValidationWarning(
                    type="overlap",
                    message=f"Period {i + 1} and Period {j + 1} overlap",
                    period_indices=[i, j],
                )
            )

    for (i, current), (j, nxt) in zip(ordered, ordered[1:]):
        days = (nxt.start_date - current.end_date).days
        if days > 1:
            warnings.append(
                ValidationWarning(
                    type="gap",
                    message=f"{days} day gap between Period {i + 1} and Period {j + 1}",
                    period_indices=[i, j],
                )
            )

    for idx, period in ordered:
        if period.end_date > today:
            warnings.append(
                ValidationWarning(
                    type="future",
                    message=f"Period {idx + 1} ends in the future",
                    period_indices=[idx],
                )
            )

    if lease_end is not None:
        for idx, period in ordered:
            if period.end_date > lease_end:
                warnings.append(
                    ValidationWarning(
                        type="past-lease-end",
                        message=f"Period {idx + 1} extends past the lease end date",
                        period_indices=[idx],
                    )
                )

    return warnings


def check_rent_periods(
    periods: Sequence[RentPeriod],
    lease_start: date | None = None,
    lease_end: date | None = None,
) -> None:
    """
    Strict pass run at submission. Raises RentPeriodError on the first
    problem; unlike validate_rent_periods any pairwise overlap is fatal.
    """
    if not periods:
        raise RentPeriodError(
            "Please add at least one rent period or disable automatic rent history creation."
        )

    for i, period in enumerate(periods):
        n = i + 1
        start, end = period.start_date, period.end_date

        if start is None or end is None:
            raise RentPeriodError(f"Period {n} is missing start or end date.", i)
        if lease_start is not None and start < lease_start:
            raise RentPeriodError(
                f"Period {n}: Start date cannot be before the lease start date ({lease_start.isoformat()}).", i
            )
        if lease_end is not None and end > lease_end:
            raise RentPeriodError(
                f"Period {n}: End date cannot be after the lease end date ({lease_end.isoformat()}).", i
            )
        if period.monthly_rent <= 0:
            raise RentPeriodError(f"Period {n} must have a rent amount greater than $0.", i)
        if end < start:
            raise RentPeriodError(f"Period {n}: End date must be after start date.", i)
        if (end - start).days > MAX_PERIOD_DAYS:
            raise RentPeriodError(
                f"Period {n}: Period duration exceeds 10 years. Please verify the dates.", i
            )

        for j in range(i + 1, len(periods)):
            other = periods[j]
            if other.start_date is None or other.end_date is None:
                continue
            if start <= other.end_date and end >= other.start_date:
                raise RentPeriodError(
                    f"Period {n} and Period {j + 1} overlap. Please adjust the dates.", i
                )


def expand_periods_to_monthly_records(periods: Sequence[RentPeriod]) -> list[MonthlyRentRecord]:
    """
    One fully-paid record per calendar month covered by each period, dated
    the 1st of the month. Periods are expanded in input order.
    """
    records: list[MonthlyRentRecord] = []
    for period in periods:
        if period.start_date is None or period.end_date is None:
            continue
        year, month = period.start_date.year, period.start_date.month
        last = period.end_date.year * 12 + period.end_date.month
        while year * 12 + month <= last:
            records.append(
                MonthlyRentRecord(
                    payment_date=date(year, month, 1),
                    expected_amount=period.monthly_rent,
                    paid_amount=period.monthly_rent,
                )
            )
            month += 1
            if month > 12:
                month = 1
                year += 1

    if periods and not records:
        logger.warning("rent_history_no_records", extra={"periods": len(periods)})
    return records


def total_months(periods: Sequence[RentPeriod]) -> int:
    return sum(
        month_count(p.start_date, p.end_date)
        for p in periods
        if p.start_date is not None and p.end_date is not None
    )


def total_expected(periods: Sequence[RentPeriod]) -> float:
    return sum(
        month_count(p.start_date, p.end_date) * p.monthly_rent
        for p in periods
        if p.start_date is not None and p.end_date is not None
    )
