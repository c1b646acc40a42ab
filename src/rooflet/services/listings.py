# src/rooflet/services/listings.py
from __future__ import annotations

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel

from rooflet.adapters.config import config
from rooflet.adapters.logging_utils import get_logger
from rooflet.analysis.finance import (
    compute_investment_metrics,
    estimate_monthly_insurance,
    estimate_monthly_property_tax,
)
from rooflet.domain.finance import FinancingStrategy
from rooflet.domain.metrics import ComputedMetrics
from rooflet.domain.ports import RentEstimator
from rooflet.domain.property import ExpectedRent, MarketListing
from rooflet.services.validation import FinancingInputError, validate_down_payment

logger = get_logger(__name__)

SortDirection = Literal["asc", "desc"]


@dataclass(frozen=True)
class EnrichedListing:
    listing: MarketListing
    expected_rent: float | None = None
    metrics: ComputedMetrics | None = None
    reason: str | None = None  # why metrics are missing

    @property
    def monthly_cashflow(self) -> float | None:
        return self.metrics.monthly_net_income if self.metrics else None


class ListingFilters(BaseModel):
    source: str | None = None
    property_type: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_beds: int | None = None
    min_baths: float | None = None
    city: str | None = None
    state: str | None = None
    hide_without_cashflow: bool = False
    min_cashflow: float | None = None
    max_cashflow: float | None = None
    interested_only: bool = False
    search: str | None = None


def _fetch_rents(
    zip_codes: Iterable[str],
    estimator: RentEstimator,
    max_workers: int,
) -> dict[str, list[ExpectedRent]]:
    """
    One lookup per ZIP on a thread pool. A failed lookup is logged and
    left out of the result; the others are unaffected.
    """
    zips = sorted(set(zip_codes))
    out: dict[str, list[ExpectedRent]] = {}
    if not zips:
        return out

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(zips)))) as ex:
        futs = {ex.submit(estimator.rents_for_zip, z): z for z in zips}
        for fut in as_completed(futs):
            z = futs[fut]
            try:
                out[z] = fut.result()
            except Exception as e:
                logger.warning("expected_rent_lookup_failed", extra={"zip_code": z, "error": str(e)})
    return out


def enrich_listing(
    listing: MarketListing,
    rents: Sequence[ExpectedRent] | None,
    financing: FinancingStrategy,
) -> EnrichedListing:
    if not listing.zip_code or not listing.bedrooms or not listing.price:
        return EnrichedListing(listing=listing, reason="missing zip code, bedrooms or price")
    if rents is None:
        return EnrichedListing(listing=listing, reason=f"no expected rent data for {listing.zip_code}")

    match = next((r for r in rents if r.bedrooms == listing.bedrooms), None)
    if match is None:
        return EnrichedListing(
            listing=listing,
            reason=f"no expected rent for {listing.bedrooms} bedrooms in {listing.zip_code}",
        )

    try:
        validate_down_payment(financing, listing.price)
    except FinancingInputError as e:
        return EnrichedListing(listing=listing, expected_rent=match.expected_rent, reason=str(e))

    metrics = compute_investment_metrics(
        listing.price,
        match.expected_rent,
        financing,
        listing.hoa_fee or 0.0,
        estimate_monthly_property_tax(listing.price, listing.state),
        estimate_monthly_insurance(listing.price),
    )
    return EnrichedListing(listing=listing, expected_rent=match.expected_rent, metrics=metrics)


def enrich_listings(
    listings: Sequence[MarketListing],
    estimator: RentEstimator,
    financing: FinancingStrategy,
    *,
    max_workers: int | None = None,
) -> list[EnrichedListing]:
    """Attach expected rent + investment metrics to each listing, preserving order."""
    rents_by_zip = _fetch_rents(
        (l.zip_code for l in listings if l.zip_code),
        estimator,
        max_workers or config.ENRICH_MAX_WORKERS,
    )
    out = [enrich_listing(l, rents_by_zip.get(l.zip_code or ""), financing) for l in listings]

    logger.info(
        "listings_enriched",
        extra={
            "listings": len(out),
            "with_metrics": sum(1 for e in out if e.metrics is not None),
            "zip_codes": len(rents_by_zip),
        },
    )
    return out


def _contains(haystack: str | None, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def filter_listings(items: Iterable[EnrichedListing], filters: ListingFilters) -> list[EnrichedListing]:
    out = list(items)

    if filters.source:
        out = [e for e in out if e.listing.source == filters.source]
    if filters.property_type:
        out = [e for e in out if e.listing.property_type == filters.property_type]
    if filters.min_price is not None:
        out = [e for e in out if (e.listing.price or 0.0) >= filters.min_price]
    if filters.max_price is not None:
        out = [e for e in out if (e.listing.price or 0.0) <= filters.max_price]
    if filters.min_beds is not None:
        out = [e for e in out if (e.listing.bedrooms or 0) >= filters.min_beds]
    if filters.min_baths is not None:
        out = [e for e in out if (e.listing.bathrooms or 0.0) >= filters.min_baths]
    if filters.city:
        out = [e for e in out if _contains(e.listing.city, filters.city)]
    if filters.state:
        out = [e for e in out if _contains(e.listing.state, filters.state)]
    if filters.hide_without_cashflow:
        out = [e for e in out if e.monthly_cashflow is not None]
    if filters.min_cashflow is not None:
        out = [e for e in out if (e.monthly_cashflow or 0.0) >= filters.min_cashflow]
    if filters.max_cashflow is not None:
        out = [e for e in out if (e.monthly_cashflow or 0.0) <= filters.max_cashflow]
    if filters.interested_only:
        out = [e for e in out if e.listing.is_interested]

    if filters.search:
        q = filters.search
        out = [
            e for e in out
            if any(
                _contains(v, q)
                for v in (
                    e.listing.address,
                    e.listing.city,
                    e.listing.state,
                    e.listing.zip_code,
                    e.listing.property_type,
                    e.listing.source,
                )
            )
        ]

    return out


_LISTING_SORT_FIELDS = {"address", "city", "price", "bedrooms", "bathrooms"}
_METRIC_SORT_FIELDS = {
    "expected_rent",
    "monthly_net_income",
    "cap_rate",
    "cash_on_cash_return",
    "price_to_rent_ratio",
    "dscr",
    "break_even_ratio",
    "operating_expense_ratio",
}


def _sort_key(field: str):
    def key(e: EnrichedListing) -> Any:
        if field in ("address", "city"):
            return (getattr(e.listing, field) or "").lower()
        if field in _LISTING_SORT_FIELDS:
            return getattr(e.listing, field) or 0
        if field == "expected_rent":
            return e.expected_rent or 0.0
        if e.metrics is None:
            return 0.0
        return getattr(e.metrics, field) or 0.0

    return key


def sort_listings(
    items: Iterable[EnrichedListing],
    field: str,
    direction: SortDirection = "asc",
) -> list[EnrichedListing]:
    """Stable sort; listings without a value for `field` sort as 0."""
    if field not in _LISTING_SORT_FIELDS | _METRIC_SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {field}")
    return sorted(items, key=_sort_key(field), reverse=direction == "desc")
