# src/rooflet/adapters/rent_estimator_static.py
from __future__ import annotations

from dataclasses import dataclass, field

from rooflet.domain.property import ExpectedRent


@dataclass
class StaticRentEstimator:
    """
    Table-backed estimator: {zip_code: {bedrooms: rent}}.
    Always available, never touches the network. ZIPs listed in
    `failing_zips` raise, to exercise per-lookup failure handling.
    """

    table: dict[str, dict[int, float]] = field(default_factory=dict)
    failing_zips: set[str] = field(default_factory=set)

    def rents_for_zip(self, zip_code: str) -> list[ExpectedRent]:
        if zip_code in self.failing_zips:
            raise RuntimeError(f"no estimate service for {zip_code}")
        by_beds = self.table.get(zip_code, {})
        return [
            ExpectedRent(zip_code=zip_code, bedrooms=beds, expected_rent=rent)
            for beds, rent in sorted(by_beds.items())
        ]
