# tests/conftest.py
import pytest

from rooflet.adapters.memory_prefs import InMemoryPreferenceStore
from rooflet.adapters.rent_estimator_static import StaticRentEstimator
from rooflet.analysis.portfolio import recalculate_row
from rooflet.domain.finance import DownPayment, FinancingStrategy
from rooflet.domain.property import MarketListing, PropertyData


@pytest.fixture
def financing():
    """20% down, 6%, 30 years."""
    return FinancingStrategy(
        down_payment=DownPayment.percent(20.0),
        interest_rate=6.0,
        loan_term_years=30,
    )


def _row(address, state, market_value, debt, rent, hoa=0.0, re_tax=0.0, insurance=0.0, rate=6.0):
    return recalculate_row(
        PropertyData(
            address=address,
            state=state,
            market_value=market_value,
            debt=debt,
            rent=rent,
            hoa=hoa,
            re_tax=re_tax,
            insurance=insurance,
            interest_rate=rate,
        )
    )


@pytest.fixture
def rows():
    """
    Small mixed portfolio:
      - leveraged cash-flowing duplex (MI)
      - paid-off single family (OH)
      - vacant condo with debt (MI)
    """
    return [
        _row("12 Elm St", "MI", 300_000.0, 200_000.0, 2_800.0, hoa=0.0, re_tax=350.0, insurance=100.0, rate=5.5),
        _row("7 Oak Ave", "OH", 180_000.0, 0.0, 1_600.0, re_tax=200.0, insurance=80.0),
        _row("301 Lake Dr #4", "MI", 150_000.0, 110_000.0, 0.0, hoa=250.0, re_tax=150.0, insurance=50.0, rate=7.0),
    ]


@pytest.fixture
def store():
    return InMemoryPreferenceStore()


@pytest.fixture
def estimator():
    return StaticRentEstimator(
        table={
            "48009": {2: 1_900.0, 3: 2_400.0},
            "43004": {3: 1_700.0},
        },
        failing_zips={"99999"},
    )


@pytest.fixture
def listings():
    return [
        MarketListing(id="a", address="1 Main St", city="Birmingham", state="MI", zip_code="48009",
                      price=240_000.0, bedrooms=3, bathrooms=2.0, hoa_fee=0.0,
                      property_type="single_family", source="zillow"),
        MarketListing(id="b", address="2 Pine Rd", city="Birmingham", state="MI", zip_code="48009",
                      price=180_000.0, bedrooms=2, bathrooms=1.0, hoa_fee=150.0,
                      property_type="condo", source="redfin", is_interested=True),
        MarketListing(id="c", address="3 High St", city="Columbus", state="OH", zip_code="43004",
                      price=160_000.0, bedrooms=3, bathrooms=1.5,
                      property_type="single_family", source="zillow"),
        MarketListing(id="d", address="4 Nowhere Ln", city="Gone", state="ZZ", zip_code="99999",
                      price=100_000.0, bedrooms=3, bathrooms=1.0,
                      property_type="single_family", source="zillow"),
        MarketListing(id="e", address="5 Unknown Ct", city="Columbus", state="OH", zip_code=None,
                      price=120_000.0, bedrooms=2, bathrooms=1.0,
                      property_type="townhouse", source="redfin"),
    ]
