import math
from typing import Optional

from rooflet.adapters.config import config
from rooflet.domain.finance import FinancingStrategy, monthly_mortgage_payment
from rooflet.domain.metrics import ComputedMetrics
from rooflet.domain.ports import InsuranceEstimator, PropertyTaxEstimator
from rooflet.domain.property import PropertyFinancialInput
from rooflet.domain.rules import (
    meets_fifty_percent_rule,
    meets_one_percent_rule,
    meets_two_percent_rule,
)

# Effective annual property tax rate (fraction of value) by state.
# Unknown or missing states fall back to config.PROPERTY_TAX_RATE.
STATE_PROPERTY_TAX_RATES: dict[str, float] = {
    "AL": 0.0040, "AK": 0.0104, "AZ": 0.0056, "AR": 0.0061, "CA": 0.0071,
    "CO": 0.0049, "CT": 0.0170, "DE": 0.0057, "DC": 0.0057, "FL": 0.0082,
    "GA": 0.0083, "HI": 0.0029, "ID": 0.0063, "IL": 0.0208, "IN": 0.0081,
    "IA": 0.0150, "KS": 0.0134, "KY": 0.0080, "LA": 0.0056, "ME": 0.0109,
    "MD": 0.0105, "MA": 0.0112, "MI": 0.0132, "MN": 0.0105, "MS": 0.0075,
    "MO": 0.0093, "MT": 0.0074, "NE": 0.0154, "NV": 0.0055, "NH": 0.0186,
    "NJ": 0.0223, "NM": 0.0067, "NY": 0.0140, "NC": 0.0077, "ND": 0.0098,
    "OH": 0.0141, "OK": 0.0087, "OR": 0.0086, "PA": 0.0136, "RI": 0.0132,
    "SC": 0.0056, "SD": 0.0114, "TN": 0.0064, "TX": 0.0160, "UT": 0.0052,
    "VT": 0.0171, "VA": 0.0082, "WA": 0.0087, "WV": 0.0057, "WI": 0.0161,
    "WY": 0.0056,
}


def property_tax_rate(state: str | None = None) -> float:
    if state:
        rate = STATE_PROPERTY_TAX_RATES.get(state.strip().upper())
        if rate is not None:
            return rate
    return config.PROPERTY_TAX_RATE


def estimate_monthly_property_tax(price: float, state: str | None = None) -> float:
    """
    Heuristic monthly property tax: price * effective annual rate / 12.
    Replace with a jurisdiction-accurate estimator where one exists.
    """
    return max(price, 0.0) * property_tax_rate(state) / 12.0


def estimate_monthly_insurance(price: float) -> float:
    # roughly $0.35 per $1,000 of value per month
    return max(price, 0.0) / 1000.0 * config.INSURANCE_PER_THOUSAND_MONTHLY


def _ratio(numerator: float, denominator: float, scale: float = 1.0) -> Optional[float]:
    """numerator / denominator * scale, or None when not computable."""
    if denominator == 0:
        return None
    value = numerator / denominator * scale
    if not math.isfinite(value):
        return None
    return value


def compute_investment_metrics(
    price: float,
    expected_rent: float,
    financing: FinancingStrategy,
    hoa: float = 0.0,
    monthly_property_tax: float = 0.0,
    monthly_insurance: float = 0.0,
    *,
    other_expenses: float = 0.0,
) -> ComputedMetrics:
    """
    Full metrics bundle for one listing.

    Operating expenses (hoa, tax, insurance, other) exclude the mortgage;
    cash flow is rent minus operating expenses minus debt service.
    The down payment is taken as given: an amount above the price is
    rejected by the validation layer before this point.
    """

    # --- financing basics ---
    down_payment = financing.down_payment_for(price)
    loan_amount = price - down_payment

    mortgage_monthly = monthly_mortgage_payment(
        principal=loan_amount,
        annual_rate_percent=financing.interest_rate,
        term_years=financing.loan_term_years,
    )

    # --- operating expenses ---
    total_operating = hoa + monthly_property_tax + monthly_insurance + other_expenses

    # --- cash flow ---
    net_monthly = expected_rent - total_operating - mortgage_monthly
    net_annual = net_monthly * 12.0

    cash_on_cash = _ratio(net_annual, down_payment, 100.0) or 0.0

    # --- NOI based ratios ---
    noi_monthly = expected_rent - total_operating
    cap_rate = _ratio(noi_monthly * 12.0, price, 100.0)
    dscr = _ratio(noi_monthly, mortgage_monthly)

    return ComputedMetrics(
        purchase_price=price,
        expected_rent=expected_rent,
        down_payment=down_payment,
        loan_amount=loan_amount,
        monthly_mortgage_payment=mortgage_monthly,
        monthly_hoa=hoa,
        monthly_property_tax=monthly_property_tax,
        monthly_insurance=monthly_insurance,
        total_monthly_expenses=total_operating,
        monthly_net_income=net_monthly,
        annual_net_income=net_annual,
        cash_on_cash_return=cash_on_cash,
        meets_1_percent_rule=meets_one_percent_rule(expected_rent, price),
        meets_2_percent_rule=meets_two_percent_rule(expected_rent, price),
        meets_50_percent_rule=meets_fifty_percent_rule(expected_rent, mortgage_monthly),
        cap_rate=cap_rate,
        price_to_rent_ratio=_ratio(price, expected_rent * 12.0),
        dscr=dscr,
        break_even_ratio=_ratio(total_operating + mortgage_monthly, expected_rent, 100.0),
        operating_expense_ratio=_ratio(total_operating, expected_rent, 100.0),
    )


def metrics_for_input(
    item: PropertyFinancialInput,
    financing: FinancingStrategy,
    *,
    tax_estimator: PropertyTaxEstimator | None = estimate_monthly_property_tax,
    insurance_estimator: InsuranceEstimator | None = estimate_monthly_insurance,
) -> ComputedMetrics:
    """
    compute_investment_metrics for a PropertyFinancialInput, estimating
    property tax and insurance from the price when the input omits them.
    """
    tax = item.property_tax
    if tax is None:
        tax = tax_estimator(item.price, item.state) if tax_estimator else 0.0

    insurance = item.insurance
    if insurance is None:
        insurance = insurance_estimator(item.price) if insurance_estimator else 0.0

    return compute_investment_metrics(
        item.price,
        item.expected_rent,
        financing,
        item.hoa,
        tax,
        insurance,
        other_expenses=item.other_expenses,
    )
