# src/rooflet/adapters/expected_rent_client.py
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Mapping

import requests

from rooflet.adapters.config import config
from rooflet.adapters.logging_utils import get_logger

logger = get_logger(__name__)

# rate limiting and gateway hiccups; anything else >= 400 is final
RETRYABLE_STATUS = frozenset({429, 502, 503, 504})


class ExpectedRentError(RuntimeError):
    pass


@dataclass(frozen=True)
class ExpectedRentClient:
    """
    Thin JSON GET client for the expected-rent service.

    404 means "no data" and returns None. Retryable statuses and network
    errors back off exponentially (base * 2**attempt), stretched to the
    server's Retry-After when that is longer.
    """

    base_url: str
    api_key: str | None = None
    timeout_s: float = 20.0
    max_retries: int = 4
    backoff_base_s: float = 0.8

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _backoff(self, attempt: int, retry_after: str | None = None) -> float:
        wait = self.backoff_base_s * (2**attempt)
        if retry_after:
            try:
                wait = max(wait, float(retry_after))
            except ValueError:
                logger.debug("expected_rent_bad_retry_after", extra={"retry_after": retry_after})
        return wait

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        url = self._url(path)
        failure: Exception | None = None

        for attempt in range(self.max_retries + 1):
            last_try = attempt == self.max_retries
            try:
                resp = requests.get(url, headers=self._headers(), params=dict(params or {}), timeout=self.timeout_s)
            except requests.RequestException as e:
                failure = e
                logger.info("expected_rent_network_error", extra={"url": url, "attempt": attempt, "error": str(e)})
                if not last_try:
                    time.sleep(self._backoff(attempt))
                continue

            if resp.status_code in RETRYABLE_STATUS:
                failure = ExpectedRentError(f"HTTP {resp.status_code}")
                wait = self._backoff(attempt, resp.headers.get("Retry-After"))
                logger.info(
                    "expected_rent_retry",
                    extra={"status": resp.status_code, "attempt": attempt, "wait_s": wait},
                )
                if not last_try:
                    time.sleep(wait)
                continue

            if resp.status_code == 404:
                return None
            if resp.status_code >= 400:
                raise ExpectedRentError(f"Expected rent HTTP {resp.status_code}: {resp.text}")
            return resp.json()

        raise ExpectedRentError(f"Expected rent request failed after retries: {failure!r}")


def make_expected_rent_client() -> ExpectedRentClient:
    return ExpectedRentClient(
        base_url=config.EXPECTED_RENT_BASE_URL,
        api_key=config.EXPECTED_RENT_API_KEY,
        timeout_s=config.EXPECTED_RENT_TIMEOUT_S,
        max_retries=config.EXPECTED_RENT_MAX_RETRIES,
        backoff_base_s=config.EXPECTED_RENT_BACKOFF_BASE_S,
    )
