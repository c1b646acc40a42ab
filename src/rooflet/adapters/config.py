# src/rooflet/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # persisted preferences (financing defaults, filters, modified rows)
    DB_URI: str = Field(default="sqlite:///rooflet.db")

    # Default financing strategy, percent units (20 means 20%)
    DEFAULT_DOWN_PAYMENT_PERCENT: float = Field(default=20.0)
    DEFAULT_INTEREST_RATE: float = Field(default=6.0)
    DEFAULT_LOAN_TERM_YEARS: int = Field(default=30)

    # Owned properties carry only debt + rate, so debt service assumes this term
    PORTFOLIO_LOAN_TERM_YEARS: int = Field(default=30)

    # Tax / insurance heuristics
    PROPERTY_TAX_RATE: float = Field(default=0.011)  # annual, fraction of value
    INSURANCE_PER_THOUSAND_MONTHLY: float = Field(default=0.35)

    # -----------------------------
    # Expected-rent service
    # -----------------------------
    EXPECTED_RENT_BASE_URL: str = Field(default="http://localhost:8080/api")
    EXPECTED_RENT_API_KEY: str | None = Field(default=None)
    EXPECTED_RENT_TIMEOUT_S: float = Field(default=20.0)
    EXPECTED_RENT_MAX_RETRIES: int = Field(default=4)
    EXPECTED_RENT_BACKOFF_BASE_S: float = Field(default=0.8)

    # one rent lookup per unique zip code runs on this many threads
    ENRICH_MAX_WORKERS: int = Field(default=8)

    model_config = SettingsConfigDict(
        env_prefix="ROOFLET_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "DEFAULT_DOWN_PAYMENT_PERCENT",
        "DEFAULT_INTEREST_RATE",
        mode="before",
    )
    @classmethod
    def _to_percent(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("value must be numeric or percent-like") from err
        if f < 0 or f > 100:
            raise ValueError("percent must be between 0 and 100")
        return f

    @field_validator("PROPERTY_TAX_RATE", mode="before")
    @classmethod
    def _to_fraction(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        f = float(v)
        # "1.1" reads as 1.1%, "0.011" is already a fraction
        if f > 0.2:
            f = f / 100.0
        if f < 0:
            raise ValueError("PROPERTY_TAX_RATE must be non-negative")
        return f

    @field_validator("DEFAULT_LOAN_TERM_YEARS", "PORTFOLIO_LOAN_TERM_YEARS", mode="before")
    @classmethod
    def _term_positive(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("loan term must be > 0 years")
        return n


config = AppConfig()
