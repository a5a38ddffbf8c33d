"""
Glass Production — End-to-end analytics pipeline.

Runs the full pipeline from a production export (or simulated records) to
dashboard-ready outputs and prints smoke-test summaries.

Usage:
    python main.py [path/to/export.csv]
"""

import logging
import sys
from datetime import date
from pathlib import Path

import pandas as pd

from glass_dashboard.config import COMPANY_NAME, PRODUCTION_EXPORT_FILE
from glass_dashboard.dashboard import (
    get_concentration_view,
    get_pivot_view,
    get_top_stats,
    get_trend_view,
    get_yoy_view,
)
from glass_dashboard.kpis import summarise_daily_to_monthly
from glass_dashboard.loaders import load_production_records, split_valid_records
from glass_dashboard.simulator import generate_production_records
from glass_dashboard.transforms import (
    build_daily_totals,
    build_dashboard_stats,
    build_metric_points,
)
from glass_dashboard.yoy import get_available_years

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def load_records(argv: list[str]) -> pd.DataFrame:
    """Records from the given export, the default export, or the simulator."""
    path = Path(argv[1]) if len(argv) > 1 else PRODUCTION_EXPORT_FILE

    if path.exists():
        raw = load_production_records(path)
        records, errors = split_valid_records(raw)
        for err in errors[:10]:
            print(f"  ! {err}")
        return records

    logger.warning("Export %s not found, using simulated records", path)
    return generate_production_records()


def main(argv: list[str]) -> None:
    """Run the full analytics pipeline and print smoke-test outputs."""

    print("=" * 70)
    print(f"  {COMPANY_NAME.upper()} — Business Analytics Dashboard")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source data
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING PRODUCTION RECORDS")
    print("-" * 40)

    records = load_records(argv)
    print(f"\nProduction records: {len(records)} valid rows")
    if records.empty:
        print("Nothing to analyse.")
        return

    last_day = pd.to_datetime(records["production_date"]).max().date()
    stats = build_dashboard_stats(records, today=last_day)
    for key, value in stats.items():
        print(f"  {key:20s} | {value:,.1f}")

    # ------------------------------------------------------------------
    # 2. Build metric points
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] BUILDING METRIC POINTS")
    print("-" * 40)

    monthly_clients = build_metric_points(records, "client", "monthly")
    monthly_products = build_metric_points(records, "product", "monthly")
    daily = build_metric_points(records, "client", "daily")
    print(f"\nmonthly x client:  {len(monthly_clients)} points")
    print(f"monthly x product: {len(monthly_products)} points")
    print(f"daily x client:    {len(daily)} points")
    print(f"top stats:         {get_top_stats(monthly_clients)}")

    monthly_totals = summarise_daily_to_monthly(build_daily_totals(records))
    print("\nMonthly totals:")
    print(monthly_totals.round(1).to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Analyses
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] ANALYSES")
    print("-" * 40)

    print("\nPivot (client x month, quantity):")
    print(get_pivot_view(monthly_clients).round(1).to_string())

    for label, points in (("Client", monthly_clients), ("Product", monthly_products)):
        view = get_concentration_view(points)
        print(f"\n{label} concentration:")
        if view["summary"] is None:
            print("  no data")
            continue
        print(view["entries"][["rank", "name", "percentage", "abc_grade"]]
              .round(2).to_string(index=False))
        summary = view["summary"]
        print(f"  HHI {summary['hhi_index']} | risk {summary['concentration_risk']}")

    trend = get_trend_view(daily)
    print("\nTrend summary (MA 7/30):")
    for key, value in (trend["summary"] or {}).items():
        print(f"  {key:20s} | {value}")

    years = get_available_years(monthly_clients)
    print(f"\nAvailable years: {years}")
    yoy = get_yoy_view(monthly_clients, years[0])
    print(f"\nYear-over-year {years[0]} vs {years[0] - 1}:")
    print(yoy["monthly"].to_string(index=False))
    print(f"  {yoy['summary']}")

    print("\n" + "=" * 70)
    print(f"  Pipeline complete ({date.today():%Y-%m-%d}).")
    print("=" * 70)


if __name__ == "__main__":
    main(sys.argv)
