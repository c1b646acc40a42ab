# src/rooflet/domain/ports.py
from __future__ import annotations

from typing import Any, Protocol

from rooflet.domain.property import ExpectedRent


# ----------------------------
# Expected rent (opaque external estimator)
# ----------------------------

class RentEstimator(Protocol):
    def rents_for_zip(self, zip_code: str) -> list[ExpectedRent]:
        """All bedroom-count estimates known for a ZIP code. May raise."""
        ...


# ----------------------------
# Tax / insurance heuristics
# ----------------------------

class PropertyTaxEstimator(Protocol):
    def __call__(self, price: float, state: str | None = None) -> float:
        ...


class InsuranceEstimator(Protocol):
    def __call__(self, price: float) -> float:
        ...


# ----------------------------
# Persisted preferences, scoped per portfolio
# ----------------------------

class PreferenceStore(Protocol):
    def get(self, portfolio_id: str, key: str) -> Any | None:
        ...

    def set(self, portfolio_id: str, key: str, value: Any) -> None:
        ...

    def clear(self, portfolio_id: str, key: str | None = None) -> None:
        ...
