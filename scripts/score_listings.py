"""
Batch investment metrics for a file of listings.

This script:
  1. Reads listings (csv / json / parquet) with at least `price` and
     `expected_rent` columns; `hoa`, `property_tax`, `insurance` and
     `state` are optional.
  2. Runs rooflet.analysis.finance_batch.compute_listing_metrics_df under
     one financing strategy (config defaults unless overridden).
  3. Writes the listings back out with the metric columns appended.
"""

from __future__ import annotations

import argparse
import time

from rooflet.adapters.logging_utils import get_logger
from rooflet.adapters.storage import read_df, write_df
from rooflet.analysis.finance_batch import compute_listing_metrics_df
from rooflet.services.validation import default_financing, financing_from_payload, financing_to_payload

logger = get_logger("rooflet.scripts.score_listings")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute cash flow, cap rate, DSCR and rule checks for a listings file."
    )
    parser.add_argument("input", help="Listings file (.csv, .json or .parquet).")
    parser.add_argument(
        "--output",
        type=str,
        default="data/derived/listing_metrics.parquet",
        help="Where to write the scored listings.",
    )
    parser.add_argument(
        "--down-payment-percent",
        type=float,
        default=None,
        help="Down payment as a percent of price (e.g. 25).",
    )
    parser.add_argument(
        "--down-payment-amount",
        type=float,
        default=None,
        help="Fixed down payment in dollars. Takes precedence over --down-payment-percent.",
    )
    parser.add_argument("--interest-rate", type=float, default=None, help="Annual rate in percent.")
    parser.add_argument("--loan-term-years", type=int, default=None)
    return parser.parse_args()


def _financing_from_args(args: argparse.Namespace):
    payload = financing_to_payload(default_financing())
    if args.down_payment_amount is not None:
        payload["downPaymentType"] = "amount"
        payload["downPaymentAmount"] = args.down_payment_amount
    elif args.down_payment_percent is not None:
        payload["downPaymentType"] = "percent"
        payload["downPaymentPercent"] = args.down_payment_percent
    if args.interest_rate is not None:
        payload["interestRate"] = args.interest_rate
    if args.loan_term_years is not None:
        payload["loanTermYears"] = args.loan_term_years
    return financing_from_payload(payload)


def main() -> None:
    args = parse_args()
    financing = _financing_from_args(args)

    df = read_df(args.input)
    logger.info("score_listings_start", extra={"rows": len(df), "input": args.input})

    t0 = time.perf_counter()
    scored = compute_listing_metrics_df(df, financing)
    dt = time.perf_counter() - t0

    write_df(scored, args.output)
    logger.info(
        "score_listings_done",
        extra={
            "rows": len(scored),
            "seconds": round(dt, 3),
            "positive_cashflow": int((scored["monthly_net_income"] > 0).sum()),
            "output": args.output,
        },
    )


if __name__ == "__main__":
    main()
