# src/rooflet/adapters/rent_estimator_http.py
from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote

from rooflet.adapters.expected_rent_client import (
    ExpectedRentClient,
    ExpectedRentError,
    make_expected_rent_client,
)
from rooflet.adapters.logging_utils import get_logger
from rooflet.domain.property import ExpectedRent

logger = get_logger(__name__)


@dataclass
class HttpRentEstimator:
    """
    Expected-rent service keyed by ZIP code. One call returns every
    bedroom count the service knows for that ZIP.
    """

    client: ExpectedRentClient = field(default_factory=make_expected_rent_client)

    def rents_for_zip(self, zip_code: str) -> list[ExpectedRent]:
        zip_code = str(zip_code).strip()
        payload = self.client.get(f"/expected-rent/zip/{quote(zip_code)}")
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ExpectedRentError(f"Unexpected response type: {type(payload)}")

        out: list[ExpectedRent] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            rent = item.get("expectedRent", item.get("expected_rent"))
            beds = item.get("bedrooms")
            if rent is None or beds is None:
                logger.debug("expected_rent_incomplete_row", extra={"zip_code": zip_code})
                continue
            out.append(
                ExpectedRent(
                    zip_code=str(item.get("zipCode") or zip_code),
                    bedrooms=int(beds),
                    expected_rent=max(float(rent), 0.0),
                )
            )
        return out
