"""Investor rules of thumb for a single listing."""


def meets_percent_rule(monthly_rent: float, purchase_price: float, pct: float) -> bool:
    """Monthly rent is at least `pct` of the purchase price (0.01 for the 1% rule)."""
    if purchase_price <= 0:
        return False
    return monthly_rent >= purchase_price * pct


def meets_one_percent_rule(monthly_rent: float, purchase_price: float) -> bool:
    return meets_percent_rule(monthly_rent, purchase_price, 0.01)


def meets_two_percent_rule(monthly_rent: float, purchase_price: float) -> bool:
    return meets_percent_rule(monthly_rent, purchase_price, 0.02)


def meets_fifty_percent_rule(monthly_rent: float, monthly_mortgage_payment: float) -> bool:
    # half of rent goes to non-debt expenses, the other half must clear the mortgage
    return monthly_rent * 0.5 >= monthly_mortgage_payment
