# src/rooflet/services/preferences.py
"""
Per-portfolio persisted state: the modified working set, the active
filters and the financing strategy. The engine never reads these; callers
load them before recomputing and save them after an edit.
"""
from __future__ import annotations

from collections.abc import Sequence

from pydantic import ValidationError

from rooflet.adapters.logging_utils import get_logger
from rooflet.domain.finance import FinancingStrategy
from rooflet.domain.ports import PreferenceStore
from rooflet.domain.property import PortfolioFilters, PropertyData
from rooflet.services.validation import (
    FinancingInputError,
    financing_from_payload,
    financing_to_payload,
)

logger = get_logger(__name__)

MODIFIED_ROWS_KEY = "portfolio-modified-properties"
FILTERS_KEY = "portfolio-filters"
FINANCING_KEY = "financing-strategy"


def save_modified_rows(store: PreferenceStore, portfolio_id: str, rows: Sequence[PropertyData]) -> None:
    if not rows:
        return
    store.set(portfolio_id, MODIFIED_ROWS_KEY, [r.model_dump() for r in rows])


def load_modified_rows(store: PreferenceStore, portfolio_id: str) -> list[PropertyData] | None:
    """Saved working set, or None when nothing (usable) was saved."""
    raw = store.get(portfolio_id, MODIFIED_ROWS_KEY)
    if not raw:
        return None
    try:
        return [PropertyData.model_validate(item) for item in raw]
    except (ValidationError, TypeError) as e:
        logger.warning(
            "modified_rows_unreadable",
            extra={"portfolio_id": portfolio_id, "error": str(e)},
        )
        return None


def reset_to_baseline(
    store: PreferenceStore,
    portfolio_id: str,
    baseline: Sequence[PropertyData],
) -> list[PropertyData]:
    """Drop saved edits and hand back a fresh copy of the baseline."""
    store.clear(portfolio_id, MODIFIED_ROWS_KEY)
    return [r.model_copy() for r in baseline]


def save_filters(store: PreferenceStore, portfolio_id: str, filters: PortfolioFilters) -> None:
    store.set(portfolio_id, FILTERS_KEY, filters.model_dump())


def load_filters(store: PreferenceStore, portfolio_id: str) -> PortfolioFilters:
    raw = store.get(portfolio_id, FILTERS_KEY)
    if not raw:
        return PortfolioFilters()
    try:
        return PortfolioFilters.model_validate(raw)
    except ValidationError as e:
        logger.warning("filters_unreadable", extra={"portfolio_id": portfolio_id, "error": str(e)})
        return PortfolioFilters()


def clear_filters(store: PreferenceStore, portfolio_id: str) -> None:
    store.clear(portfolio_id, FILTERS_KEY)


def save_financing(store: PreferenceStore, portfolio_id: str, financing: FinancingStrategy) -> None:
    store.set(portfolio_id, FINANCING_KEY, financing_to_payload(financing))


def load_financing(
    store: PreferenceStore,
    portfolio_id: str,
    default: FinancingStrategy,
) -> FinancingStrategy:
    raw = store.get(portfolio_id, FINANCING_KEY)
    if not raw:
        return default
    try:
        return financing_from_payload(raw)
    except FinancingInputError as e:
        logger.warning("financing_unreadable", extra={"portfolio_id": portfolio_id, "error": str(e)})
        return default
