from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DownPaymentType = Literal["percent", "amount"]


@dataclass(frozen=True)
class DownPayment:
    """
    Single authoritative down payment.

    `type == "percent"` -> value is 0-100 of the purchase price
    `type == "amount"`  -> value is dollars

    The other representation is always derived from the price on demand.
    """
    type: DownPaymentType
    value: float

    @classmethod
    def percent(cls, value: float) -> DownPayment:
        return cls(type="percent", value=float(value))

    @classmethod
    def amount(cls, value: float) -> DownPayment:
        return cls(type="amount", value=float(value))

    def as_amount(self, price: float) -> float:
        if self.type == "percent":
            return price * (self.value / 100.0)
        return self.value

    def as_percent(self, price: float) -> float:
        if self.type == "percent":
            return self.value
        if price <= 0:
            return 0.0
        return self.value / price * 100.0

    def switch_to(self, type_: DownPaymentType, price: float) -> DownPayment:
        """Convert to the other input mode, keeping the same dollars down at `price`."""
        if type_ == self.type:
            return self
        if type_ == "percent":
            return DownPayment.percent(self.as_percent(price))
        return DownPayment.amount(self.as_amount(price))


@dataclass(frozen=True)
class FinancingStrategy:
    down_payment: DownPayment
    interest_rate: float      # annual percent, e.g. 6.0
    loan_term_years: int      # 30

    @property
    def down_payment_type(self) -> DownPaymentType:
        return self.down_payment.type

    def down_payment_for(self, price: float) -> float:
        return self.down_payment.as_amount(price)

    def loan_amount_for(self, price: float) -> float:
        return price - self.down_payment_for(price)


@dataclass(frozen=True)
class PaymentSplit:
    principal: float
    interest: float
    total_payment: float


def annuity_payment(rate_monthly: float, n_months: int, principal: float) -> float:
    r = rate_monthly
    if r == 0:
        return principal / n_months
    return principal * (r * (1 + r) ** n_months) / ((1 + r) ** n_months - 1)


def monthly_mortgage_payment(principal: float, annual_rate_percent: float, term_years: int) -> float:
    """
    Standard fixed-rate amortization formula:
    M = P * [ r(1+r)^n / ((1+r)^n - 1) ]
    P = loan principal
    r = monthly interest rate (annual percent / 1200)
    n = number of payments (months)

    A zero rate degrades to straight-line P / n. Non-positive principal is 0.
    """
    n_months = int(term_years) * 12
    if principal <= 0 or n_months <= 0:
        return 0.0
    rate = max(annual_rate_percent, 0.0) / 1200.0
    return annuity_payment(rate, n_months, principal)


def first_payment_split(principal: float, annual_rate_percent: float, term_years: int) -> PaymentSplit:
    """Principal vs. interest share of the first monthly payment."""
    payment = monthly_mortgage_payment(principal, annual_rate_percent, term_years)
    interest = max(principal, 0.0) * max(annual_rate_percent, 0.0) / 1200.0
    return PaymentSplit(
        principal=payment - interest,
        interest=interest,
        total_payment=payment,
    )
