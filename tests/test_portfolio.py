import pytest

from rooflet.analysis.finance import compute_investment_metrics
from rooflet.analysis.portfolio import (
    aggregate,
    apply_filters,
    calculate_debt_service,
    clear_temporary,
    create_empty_row,
    recalculate_row,
    row_from_listing,
    update_row,
)
from rooflet.domain.property import MarketListing, PortfolioFilters, PropertyData


def test_debt_service_known_values():
    assert calculate_debt_service(300_000.0, 6.0) == pytest.approx(1798.65, abs=0.01)
    assert calculate_debt_service(500_000.0, 5.5) == pytest.approx(2838.95, abs=0.01)
    assert calculate_debt_service(0.0, 6.0) == 0.0
    # zero rate amortizes straight-line over the portfolio term
    assert calculate_debt_service(360_000.0, 0.0) == pytest.approx(1000.0)


def test_recalculate_row_derives_everything():
    row = recalculate_row(
        PropertyData(
            address="12 Elm St",
            market_value=300_000.0,
            debt=200_000.0,
            rent=2_800.0,
            re_tax=350.0,
            insurance=100.0,
            interest_rate=5.5,
        )
    )

    assert row.equity == pytest.approx(100_000.0)
    assert row.equity_percent == pytest.approx(100.0 / 3.0)
    assert row.noi_monthly == pytest.approx(2_350.0)
    assert row.noi_yearly == pytest.approx(28_200.0)
    assert row.debt_service == pytest.approx(2838.95 * 0.4, abs=0.01)
    assert row.cashflow == pytest.approx(row.noi_monthly - row.debt_service)
    assert row.return_percent == pytest.approx(row.cashflow * 12.0 / 100_000.0 * 100.0)


def test_recalculate_row_is_idempotent(rows):
    for row in rows:
        assert recalculate_row(row) == row


def test_zero_market_value_and_equity_do_not_divide():
    row = recalculate_row(PropertyData(address="x", market_value=0.0, debt=0.0, rent=500.0))
    assert row.equity_percent == 0.0
    assert row.return_percent == 0.0
    assert row.cashflow == pytest.approx(500.0)


def test_update_row_recalculates(rows):
    before = rows[0]
    after = update_row(before, "market_value", 350_000.0)

    assert after.market_value == 350_000.0
    assert after.equity == pytest.approx(150_000.0)
    assert after.debt_service == pytest.approx(before.debt_service)
    assert before.market_value == 300_000.0


def test_update_row_coerces_cleared_and_text_cells(rows):
    cleared = update_row(rows[0], "rent", None)
    assert cleared.rent == 0.0
    assert cleared.noi_monthly == pytest.approx(-450.0)

    typed = update_row(rows[0], "rent", "1500")
    assert typed.rent == 1_500.0
    assert typed.noi_monthly == pytest.approx(1_050.0)

    with pytest.raises(ValueError):
        update_row(rows[0], "rent", "lots")


def test_update_row_rejects_derived_fields(rows):
    with pytest.raises(ValueError):
        update_row(rows[0], "cashflow", 10.0)


def test_create_empty_row_is_new_and_zeroed():
    row = create_empty_row()
    assert row.is_new is True
    assert row.address == "New Property"
    assert row.market_value == 0.0
    assert row.cashflow == 0.0


def test_aggregate_totals(rows):
    summary = aggregate(rows)
    t, m = summary.totals, summary.metrics

    assert t.total_assets == pytest.approx(630_000.0)
    assert t.total_debt == pytest.approx(310_000.0)
    assert t.total_equity == pytest.approx(320_000.0)
    assert t.total_expenses_monthly == pytest.approx(450.0 + 280.0 + 450.0)
    assert t.noi_monthly == pytest.approx(sum(r.noi_monthly for r in rows))
    assert t.cashflow_yearly == pytest.approx(t.cashflow_monthly * 12.0)

    assert m.property_count == 3
    assert m.active_units == 2
    assert m.total_rent_monthly == pytest.approx(4_400.0)
    assert m.rent_per_unit_per_month == pytest.approx(2_200.0)
    assert m.leverage == pytest.approx(310_000.0 / 630_000.0 * 100.0)
    assert m.dscr == pytest.approx(t.noi_monthly / t.debt_service)
    assert m.grm == pytest.approx(630_000.0 / 52_800.0)
    assert m.levered_cash_yield == m.coc_return
    assert m.cap_rate == m.unlevered_cash_yield
    assert m.avg_property_value == pytest.approx(210_000.0)


def test_aggregate_ignores_row_order(rows):
    forward = aggregate(rows).values()
    backward = aggregate(list(reversed(rows))).values()
    shuffled = aggregate([rows[1], rows[2], rows[0]]).values()
    assert forward == backward == shuffled


def test_debt_free_portfolio_has_zero_leverage_and_dscr(rows):
    summary = aggregate([rows[1]])
    assert summary.totals.debt_service == 0.0
    assert summary.metrics.leverage == 0.0
    assert summary.metrics.dscr == 0.0


def test_empty_portfolio_is_all_zeros():
    values = aggregate([]).values()
    assert all(v == 0 for v in values.values())


def test_filters(rows):
    assert [r.address for r in apply_filters(rows, PortfolioFilters(include_vacant=False))] == [
        "12 Elm St",
        "7 Oak Ave",
    ]
    assert {r.state for r in apply_filters(rows, PortfolioFilters(selected_states=["MI"]))} == {"MI"}
    assert all(r.cashflow < 0 for r in apply_filters(rows, PortfolioFilters(cash_flow_filter="negative")))
    assert [r.address for r in apply_filters(rows, PortfolioFilters(debt_filter="no-debt"))] == ["7 Oak Ave"]
    assert len(apply_filters(rows, PortfolioFilters(debt_filter="with-debt"))) == 2
    assert [r.address for r in apply_filters(rows, PortfolioFilters(min_market_value=200_000.0))] == ["12 Elm St"]
    assert apply_filters(rows, PortfolioFilters()) == rows


def test_interested_listing_becomes_temporary_row(rows, financing):
    listing = MarketListing(id="L1", address="9 Birch Way", state="MI", zip_code="48009", price=200_000.0, bedrooms=3)
    metrics = compute_investment_metrics(200_000.0, 2_000.0, financing, 0.0, 150.0, 70.0)

    temp = row_from_listing(listing, metrics, financing)
    assert temp.is_temporary is True
    assert temp.listing_id == "L1"
    assert temp.debt == pytest.approx(160_000.0)
    assert temp.debt_service == pytest.approx(metrics.monthly_mortgage_payment)
    assert temp.noi_monthly == pytest.approx(2_000.0 - 220.0)

    combined = rows + [temp]
    assert aggregate(combined).metrics.property_count == 4
    assert clear_temporary(combined) == rows
