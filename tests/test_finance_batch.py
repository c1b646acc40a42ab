import math

import numpy as np
import pandas as pd
import pytest

from rooflet.analysis.finance import metrics_for_input
from rooflet.analysis.finance_batch import METRIC_COLUMNS, compute_listing_metrics_df
from rooflet.domain.finance import DownPayment, FinancingStrategy
from rooflet.domain.property import PropertyFinancialInput


@pytest.fixture
def listings_df():
    return pd.DataFrame(
        {
            "id": ["a", "b", "c", "d"],
            "price": [200_000.0, 300_000.0, 0.0, 150_000.0],
            "expected_rent": [2_000.0, 1_500.0, 900.0, 0.0],
            "hoa": [0.0, 120.0, np.nan, 0.0],
            "property_tax": [np.nan, 250.0, np.nan, np.nan],
            "state": ["MI", "TX", None, "ZZ"],
        }
    )


def _per_item(df, financing):
    out = []
    for rec in df.to_dict(orient="records"):
        out.append(
            metrics_for_input(
                PropertyFinancialInput(
                    price=rec["price"],
                    expected_rent=rec["expected_rent"],
                    hoa=None if pd.isna(rec["hoa"]) else rec["hoa"],
                    property_tax=None if pd.isna(rec["property_tax"]) else rec["property_tax"],
                    state=None if pd.isna(rec["state"]) else rec["state"],
                ),
                financing,
            )
        )
    return out


@pytest.mark.parametrize(
    "down",
    [DownPayment.percent(20.0), DownPayment.amount(50_000.0), DownPayment.percent(100.0)],
)
def test_batch_matches_per_listing_metrics(listings_df, down):
    financing = FinancingStrategy(down_payment=down, interest_rate=6.0, loan_term_years=30)
    scored = compute_listing_metrics_df(listings_df, financing)

    assert list(scored["id"]) == ["a", "b", "c", "d"]
    assert set(METRIC_COLUMNS) <= set(scored.columns)

    for i, single in enumerate(_per_item(listings_df, financing)):
        row = scored.iloc[i]
        for col in METRIC_COLUMNS:
            expected = getattr(single, col)
            got = row[col]
            if expected is None:
                assert math.isnan(got), (i, col)
            elif isinstance(expected, bool):
                assert bool(got) is expected, (i, col)
            else:
                assert got == pytest.approx(expected), (i, col)


def test_batch_does_not_mutate_input(listings_df, financing):
    before = listings_df.copy()
    compute_listing_metrics_df(listings_df, financing)
    pd.testing.assert_frame_equal(listings_df, before)


def test_batch_without_optional_columns(financing):
    df = pd.DataFrame({"price": [200_000.0], "expected_rent": [2_000.0]})
    scored = compute_listing_metrics_df(df, financing)

    assert scored.loc[0, "monthly_property_tax"] == pytest.approx(200_000.0 * 0.011 / 12.0)
    assert scored.loc[0, "monthly_insurance"] == pytest.approx(70.0)
    assert scored.loc[0, "monthly_mortgage_payment"] == pytest.approx(959.28, abs=0.01)
