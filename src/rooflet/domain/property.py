from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CashflowFilter = Literal["all", "positive", "negative"]
DebtFilter = Literal["all", "with-debt", "no-debt"]


class PropertyFinancialInput(BaseModel):
    """Inputs for one property or listing. Only price and rent are required."""
    price: float = Field(..., description="Purchase price / principal basis")
    expected_rent: float = Field(..., description="Expected gross monthly rent")

    hoa: float = 0.0
    other_expenses: float = 0.0
    # monthly; None means "not provided", callers may estimate from price
    property_tax: float | None = None
    insurance: float | None = None

    state: str | None = None

    # already-owned properties only
    debt: float | None = None
    equity: float | None = None

    @field_validator("hoa", "other_expenses", mode="before")
    @classmethod
    def _missing_cost_is_zero(cls, v):
        return 0.0 if v is None else v


class PropertyData(BaseModel):
    """
    One editable portfolio row.

    Editable: market_value, debt, rent, hoa, re_tax, insurance,
    other_expenses, interest_rate. Everything else is derived by
    `recalculate_row` and must not be edited directly.
    """
    model_config = ConfigDict(extra="ignore")

    address: str
    state: str | None = None

    market_value: float = 0.0
    equity: float = 0.0
    debt: float = 0.0
    equity_percent: float = 0.0

    rent: float = 0.0
    hoa: float = 0.0
    re_tax: float = 0.0
    insurance: float = 0.0
    other_expenses: float = 0.0
    interest_rate: float = 0.0  # annual percent

    debt_service: float = 0.0
    noi_monthly: float = 0.0
    noi_yearly: float = 0.0
    cashflow: float = 0.0
    return_percent: float = 0.0

    is_new: bool = False
    is_temporary: bool = False  # interested market listing, not owned
    listing_id: str | None = None

    @field_validator(
        "market_value", "debt", "rent", "hoa", "re_tax", "insurance",
        "other_expenses", "interest_rate",
        mode="before",
    )
    @classmethod
    def _missing_input_is_zero(cls, v):
        return 0.0 if v is None else v


class PortfolioFilters(BaseModel):
    include_vacant: bool = True
    selected_states: list[str] = Field(default_factory=list)
    cash_flow_filter: CashflowFilter = "all"
    debt_filter: DebtFilter = "all"
    min_market_value: float = 0.0


class MarketListing(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    address: str = ""
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

    price: float | None = None
    bedrooms: int | None = None
    bathrooms: float | None = None
    hoa_fee: float | None = None

    property_type: str | None = None
    source: str | None = None
    is_interested: bool = False


class ExpectedRent(BaseModel):
    zip_code: str
    bedrooms: int
    expected_rent: float
