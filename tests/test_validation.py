from datetime import date

import pytest

from rooflet.domain.finance import DownPayment, FinancingStrategy
from rooflet.services.validation import (
    FinancingInputError,
    default_financing,
    financing_from_payload,
    financing_to_payload,
    parse_currency,
    parse_percentage,
    validate_date,
    validate_down_payment,
)


def test_parse_currency_and_percentage_accept_form_strings():
    assert parse_currency("$1,234.56") == pytest.approx(1234.56)
    assert parse_currency("") == 0.0
    assert parse_currency("abc") == 0.0
    assert parse_currency(None) == 0.0
    assert parse_percentage("6.125%") == pytest.approx(6.125)
    assert parse_percentage(7) == 7.0


def test_flat_payload_reads_only_the_authoritative_field():
    fin = financing_from_payload(
        {
            "downPaymentType": "amount",
            "downPaymentAmount": "$50,000",
            "downPaymentPercent": 99,  # stale display value
            "interestRate": "6.5%",
            "loanTermYears": "15",
        }
    )
    assert fin.down_payment == DownPayment.amount(50_000.0)
    assert fin.interest_rate == pytest.approx(6.5)
    assert fin.loan_term_years == 15


def test_nested_payload():
    fin = financing_from_payload({"down_payment": {"type": "percent", "value": 25}, "interest_rate": 7})
    assert fin.down_payment == DownPayment.percent(25.0)
    assert fin.interest_rate == 7.0
    assert fin.loan_term_years == 30


def test_empty_payload_falls_back_to_defaults():
    assert financing_from_payload({}) == default_financing()


@pytest.mark.parametrize(
    "payload",
    [
        {"downPaymentType": "percent", "downPaymentPercent": 120},
        {"downPaymentType": "amount", "downPaymentAmount": -1},
        {"downPaymentType": "amount"},
        {"downPaymentType": "shares", "downPaymentPercent": 20},
        {"interestRate": -0.5},
        {"loanTermYears": 0},
        {"loanTermYears": "thirty"},
        {"interestRate": "nan"},
        {"interestRate": "inf"},
        {"downPaymentType": "amount", "downPaymentAmount": "inf"},
        {"downPaymentType": "amount", "downPaymentAmount": float("nan")},
        {"downPaymentType": "percent", "downPaymentPercent": "nan"},
        {"loanTermYears": float("inf")},
    ],
)
def test_bad_payloads_are_rejected(payload):
    with pytest.raises(FinancingInputError):
        financing_from_payload(payload)


def test_payload_round_trip_keeps_authoritative_type():
    fin = FinancingStrategy(DownPayment.amount(40_000.0), 6.0, 30)
    payload = financing_to_payload(fin, price=200_000.0)

    assert payload["downPaymentType"] == "amount"
    assert payload["downPaymentPercent"] == pytest.approx(20.0)
    assert financing_from_payload(payload) == fin


def test_down_payment_above_price_is_rejected():
    fin = FinancingStrategy(DownPayment.amount(250_000.0), 6.0, 30)
    with pytest.raises(FinancingInputError, match="exceeds price"):
        validate_down_payment(fin, 200_000.0)

    validate_down_payment(fin, 250_000.0)
    validate_down_payment(FinancingStrategy(DownPayment.percent(100.0), 6.0, 30), 200_000.0)


def test_validate_date():
    assert validate_date("2024-02-29") == date(2024, 2, 29)
    assert validate_date("") is None
    assert validate_date(None) is None

    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        validate_date("02/29/2024")
    with pytest.raises(ValueError, match="Invalid date"):
        validate_date("2023-02-29")
    with pytest.raises(ValueError, match="between 1900 and 2100"):
        validate_date("1850-01-01")
