# src/rooflet/analysis/finance_batch.py

from __future__ import annotations

import numpy as np
import pandas as pd

from rooflet.adapters.config import config
from rooflet.analysis.finance import STATE_PROPERTY_TAX_RATES
from rooflet.domain.finance import FinancingStrategy

METRIC_COLUMNS = [
    "down_payment",
    "loan_amount",
    "monthly_mortgage_payment",
    "monthly_property_tax",
    "monthly_insurance",
    "total_monthly_expenses",
    "monthly_net_income",
    "cash_on_cash_return",
    "meets_1_percent_rule",
    "meets_2_percent_rule",
    "meets_50_percent_rule",
    "cap_rate",
    "price_to_rent_ratio",
    "dscr",
    "break_even_ratio",
    "operating_expense_ratio",
]


def _column(df: pd.DataFrame, col: str) -> np.ndarray | None:
    if col not in df.columns:
        return None
    return df[col].to_numpy(dtype=float)


def _safe_divide(num: np.ndarray, den: np.ndarray, scale: float = 1.0) -> np.ndarray:
    out = np.full_like(num, np.nan, dtype=float)
    mask = den != 0
    out[mask] = num[mask] / den[mask] * scale
    return out


def _monthly_tax(df: pd.DataFrame, price: np.ndarray) -> np.ndarray:
    given = _column(df, "property_tax")
    if "state" in df.columns:
        rates = (
            df["state"]
            .fillna("")
            .astype(str)
            .str.strip()
            .str.upper()
            .map(STATE_PROPERTY_TAX_RATES)
            .fillna(config.PROPERTY_TAX_RATE)
            .to_numpy(dtype=float)
        )
    else:
        rates = np.full_like(price, config.PROPERTY_TAX_RATE, dtype=float)
    estimated = np.maximum(price, 0.0) * rates / 12.0
    if given is None:
        return estimated
    return np.where(np.isnan(given), estimated, given)


def _monthly_insurance(df: pd.DataFrame, price: np.ndarray) -> np.ndarray:
    given = _column(df, "insurance")
    estimated = np.maximum(price, 0.0) / 1000.0 * config.INSURANCE_PER_THOUSAND_MONTHLY
    if given is None:
        return estimated
    return np.where(np.isnan(given), estimated, given)


def compute_listing_metrics_df(df: pd.DataFrame, financing: FinancingStrategy) -> pd.DataFrame:
    """
    Vectorized investment metrics over a DataFrame of listings.

    Expected columns on df:
      - price
      - expected_rent (gross monthly)
    Optional:
      - hoa, property_tax, insurance (monthly; missing tax/insurance are estimated)
      - state (for the tax estimate)

    Returns a copy of df with METRIC_COLUMNS appended. Ratios that are not
    computable are NaN (pandas' missing marker); booleans are plain bools.
    """
    price = df["price"].to_numpy(dtype=float)
    rent = df["expected_rent"].to_numpy(dtype=float)

    hoa = _column(df, "hoa")
    hoa = np.zeros_like(price) if hoa is None else np.nan_to_num(hoa, nan=0.0)
    tax = _monthly_tax(df, price)
    insurance = _monthly_insurance(df, price)

    # --- Financing ---
    if financing.down_payment.type == "percent":
        down_payment = price * (financing.down_payment.value / 100.0)
    else:
        down_payment = np.full_like(price, financing.down_payment.value, dtype=float)
    loan_amount = price - down_payment

    r_monthly = max(financing.interest_rate, 0.0) / 1200.0
    n_months = int(financing.loan_term_years) * 12

    mortgage = np.zeros_like(price, dtype=float)
    mask_loan = loan_amount > 0
    if n_months > 0 and mask_loan.any():
        la = loan_amount[mask_loan]
        if r_monthly == 0:
            mortgage[mask_loan] = la / n_months
        else:
            growth = (1.0 + r_monthly) ** n_months
            mortgage[mask_loan] = la * r_monthly * growth / (growth - 1.0)

    # --- Operating side ---
    total_operating = hoa + tax + insurance
    noi_monthly = rent - total_operating
    net_monthly = noi_monthly - mortgage

    coc = np.nan_to_num(_safe_divide(net_monthly * 12.0, down_payment, 100.0), nan=0.0)

    out = df.copy()
    out["down_payment"] = down_payment
    out["loan_amount"] = loan_amount
    out["monthly_mortgage_payment"] = mortgage
    out["monthly_property_tax"] = tax
    out["monthly_insurance"] = insurance
    out["total_monthly_expenses"] = total_operating
    out["monthly_net_income"] = net_monthly
    out["cash_on_cash_return"] = coc
    out["meets_1_percent_rule"] = (price > 0) & (rent >= price * 0.01)
    out["meets_2_percent_rule"] = (price > 0) & (rent >= price * 0.02)
    out["meets_50_percent_rule"] = rent * 0.5 >= mortgage
    out["cap_rate"] = _safe_divide(noi_monthly * 12.0, price, 100.0)
    out["price_to_rent_ratio"] = _safe_divide(price, rent * 12.0)
    out["dscr"] = _safe_divide(noi_monthly, mortgage)
    out["break_even_ratio"] = _safe_divide(total_operating + mortgage, rent, 100.0)
    out["operating_expense_ratio"] = _safe_divide(total_operating, rent, 100.0)
    return out
