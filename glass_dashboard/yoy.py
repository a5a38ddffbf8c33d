"""
Year-over-year comparison of monthly production totals.
"""

import logging
from collections.abc import Iterable
from datetime import date

import pandas as pd

from .kpis import calc_growth_rate, round_half_up
from .models import (
    Metric,
    MetricPoint,
    MonthGrowth,
    YoYMonthlyEntry,
    YoYSummary,
)
from .pivot import points_to_frame

logger = logging.getLogger(__name__)

_MONTHS = range(1, 13)


def aggregate_by_month(points: Iterable[MetricPoint]) -> pd.DataFrame:
    """Sum quantity and area per calendar month of YYYY-MM periods.

    Returns
    -------
    DataFrame indexed by month 1..12 with columns quantity, area_pyeong.
    Months without data are 0; periods without a valid month are ignored.
    """
    df = points_to_frame(points)
    empty = pd.DataFrame(
        0.0, index=pd.Index(_MONTHS, name="month"), columns=["quantity", "area_pyeong"]
    )
    if df.empty:
        return empty

    df = df.assign(
        month=pd.to_numeric(df["period"].str.split("-").str[1], errors="coerce")
    )
    df = df[df["month"].between(1, 12)].astype({"month": int})
    if df.empty:
        return empty

    monthly = df.groupby("month")[["quantity", "area_pyeong"]].sum()
    return monthly.reindex(empty.index, fill_value=0.0)


def build_monthly_comparison(
    current_points: Iterable[MetricPoint],
    prev_points: Iterable[MetricPoint],
) -> list[YoYMonthlyEntry]:
    """Twelve monthly entries with per-month growth rates (1 decimal)."""
    current = aggregate_by_month(current_points)
    prev = aggregate_by_month(prev_points)

    entries = []
    for month in _MONTHS:
        cur_qty = float(current.at[month, "quantity"])
        cur_area = float(current.at[month, "area_pyeong"])
        prev_qty = float(prev.at[month, "quantity"])
        prev_area = float(prev.at[month, "area_pyeong"])

        entries.append(YoYMonthlyEntry(
            month=month,
            current_year_quantity=cur_qty,
            current_year_area=cur_area,
            prev_year_quantity=prev_qty,
            prev_year_area=prev_area,
            quantity_growth_rate=calc_growth_rate(cur_qty, prev_qty),
            area_growth_rate=calc_growth_rate(cur_area, prev_area),
        ))
    return entries


def summarise_yoy(
    entries: list[YoYMonthlyEntry],
    metric: Metric = "quantity",
) -> YoYSummary:
    """Totals, overall and average growth, best/worst month for one metric.

    Only months with a defined growth rate take part in the average, the
    best/worst search and the positive/negative counts. On equal rates the
    earliest month is reported.
    """
    if metric == "quantity":
        current_total = sum(e.current_year_quantity for e in entries)
        prev_total = sum(e.prev_year_quantity for e in entries)
        rates = [(e.month, e.quantity_growth_rate) for e in entries]
    else:
        current_total = sum(e.current_year_area for e in entries)
        prev_total = sum(e.prev_year_area for e in entries)
        rates = [(e.month, e.area_growth_rate) for e in entries]

    valid = [MonthGrowth(month=m, rate=r) for m, r in rates if r is not None]

    avg_growth = None
    best = worst = None
    if valid:
        avg_growth = round_half_up(sum(g.rate for g in valid) / len(valid), 1)
        best = valid[0]
        worst = valid[0]
        for g in valid[1:]:
            if g.rate > best.rate:
                best = g
            if g.rate < worst.rate:
                worst = g

    return YoYSummary(
        current_year_total=current_total,
        prev_year_total=prev_total,
        overall_growth_rate=calc_growth_rate(current_total, prev_total),
        avg_monthly_growth=avg_growth,
        best_month=best,
        worst_month=worst,
        positive_months=sum(1 for g in valid if g.rate > 0),
        negative_months=sum(1 for g in valid if g.rate < 0),
    )


def compare_year_over_year(
    current_points: Iterable[MetricPoint],
    prev_points: Iterable[MetricPoint],
    metric: Metric = "quantity",
) -> tuple[list[YoYMonthlyEntry], YoYSummary]:
    """Return (12 monthly entries, summary) for two years of monthly points.

    Each input is expected to hold one year of YYYY-MM periods.
    """
    entries = build_monthly_comparison(current_points, prev_points)
    summary = summarise_yoy(entries, metric)

    if summary.prev_year_total == 0:
        logger.warning("No prior-year %s — growth rates undefined", metric)
    logger.info(
        "YoY %s: %.1f vs %.1f (growth %s)",
        metric, summary.current_year_total, summary.prev_year_total,
        summary.overall_growth_rate,
    )
    return entries, summary


def get_available_years(
    points: Iterable[MetricPoint],
    today: date | None = None,
) -> list[int]:
    """Distinct years in the period labels, newest first.

    Falls back to the current year and the two before it when there is
    no data.
    """
    years = {int(p.period[:4]) for p in points}
    if not years:
        current = (today or date.today()).year
        return [current, current - 1, current - 2]
    return sorted(years, reverse=True)
