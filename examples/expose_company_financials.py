#!/usr/bin/env python3
"""
Example: Expose company financials to rule packs of every shape.

Builds a small table of company filings, applies whole-dataset,
grouped, per-column, per-row and per-cell packs, prints the
normalized report, then asserts there are no breakers.

Usage:
    python examples/expose_company_financials.py
"""

import logging
import sys
from pathlib import Path

import pandas as pd

# Allow imports from src/
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from rulepack import (
    RuleViolation,
    assert_any_breaker,
    cell_packs,
    col_packs,
    data_packs,
    expose,
    get_exposure,
    group_packs,
    row_packs,
)


def build_filings() -> pd.DataFrame:
    return pd.DataFrame({
        'cik': ['0000320193', '0000789019', '0001018724', '0001652044', '0001326801', '0000012345'],
        'ticker': ['AAPL', 'MSFT', 'AMZN', 'GOOGL', 'META', 'bad'],
        'sector': ['tech', 'tech', 'retail', 'tech', 'tech', 'retail'],
        'revenue': [394_328, 211_915, 513_983, 282_836, 116_609, -10],
        'net_income': [99_803, 72_738, 30_425, 59_972, 39_098, 5],
    })


PACKS = [
    data_packs(
        size=lambda df: {'at_least_5_companies': len(df) >= 5},
    ),
    group_packs(
        sector_revenue=lambda df: df.groupby('sector')['revenue'].sum().gt(0).to_frame('positive_total'),
        group_vars=['sector'],
    ),
    col_packs(
        not_null=lambda df: df.notna().all().add_prefix('not_null._.'),
    ),
    row_packs(
        margins=lambda df: (df['net_income'] <= df['revenue']).to_frame('income_within_revenue'),
        tickers=lambda df: df['ticker'].str.fullmatch(r'[A-Z]{1,5}').to_frame('ticker_format'),
    ),
    cell_packs(
        positive=lambda df: (df[['revenue', 'net_income']] > 0).add_prefix('positive._.'),
    ),
]


def main():
    logging.basicConfig(level=logging.INFO, format='%(name)s %(levelname)s %(message)s')

    filings = build_filings()
    exposed = expose(filings, PACKS)
    exposure = get_exposure(exposed)

    packs_info, report = exposure.to_frames()
    print("\nPacks:")
    print(packs_info[['name', 'type', 'success']].to_string(index=False))
    print("\nBreakers:")
    print(report.to_string(index=False))

    try:
        assert_any_breaker(exposed)
    except RuleViolation as exc:
        print(f"\n{exc}")


if __name__ == '__main__':
    main()
