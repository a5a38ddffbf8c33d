"""
KPI computation functions — pure functions with no side effects.

Provides growth-rate calculation, achievement classification, daily-to-
monthly aggregation and monthly target tracking.
"""

import logging
import math
from datetime import date

import pandas as pd

from .config import ACHIEVEMENT_AMBER_PCT, ACHIEVEMENT_GREEN_PCT
from .models import MonthlyAchievement

logger = logging.getLogger(__name__)


def round_half_up(value: float, ndigits: int = 1) -> float:
    """Round with exact halves going towards +inf (12.25 -> 12.3, -12.25 -> -12.2)."""
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


def calc_growth_rate(
    current: float,
    previous: float,
    ndigits: int | None = 1,
) -> float | None:
    """Return the percentage change from previous to current.

    None if previous == 0. Rounded to ndigits unless ndigits is None.
    """
    if previous == 0:
        return None
    rate = (current - previous) * 100 / previous
    if ndigits is None:
        return rate
    return round_half_up(rate, ndigits)


def classify_achievement(rate: float | None) -> str:
    """Return 'green', 'amber', 'red' or 'grey' for an achievement rate (%).

    Logic
    -----
    - green  if rate >= 100
    - amber  if rate >= 80
    - red    if rate > 0
    - grey   otherwise (no production or no rate)
    """
    if rate is None or pd.isna(rate):
        return "grey"
    if rate >= ACHIEVEMENT_GREEN_PCT:
        return "green"
    if rate >= ACHIEVEMENT_AMBER_PCT:
        return "amber"
    if rate > 0:
        return "red"
    return "grey"


def summarise_daily_to_monthly(df_daily: pd.DataFrame) -> pd.DataFrame:
    """Aggregate daily production totals to monthly grain.

    Parameters
    ----------
    df_daily : DataFrame with 'date', 'quantity' and 'area_pyeong' columns.

    Returns
    -------
    DataFrame with columns month (YYYY-MM), quantity, area_pyeong.
    """
    if df_daily.empty:
        logger.warning("Empty daily DataFrame — returning empty monthly summary")
        return pd.DataFrame(columns=["month", "quantity", "area_pyeong"])

    df = df_daily.copy()
    df["month"] = pd.to_datetime(df["date"]).dt.strftime("%Y-%m")

    result = (
        df.groupby("month", sort=True)[["quantity", "area_pyeong"]]
        .sum()
        .reset_index()
    )

    logger.info("Summarised daily data to %d monthly rows", len(result))
    return result


def calc_monthly_achievement(
    daily_totals: pd.DataFrame,
    target_quantity: float,
    year: int,
    month: int,
    as_of: date,
) -> MonthlyAchievement | None:
    """Progress of one month's production against its quantity target.

    Parameters
    ----------
    daily_totals : DataFrame with 'date' and 'quantity' columns.
    target_quantity : Monthly target. None is returned when it is not positive.
    as_of : Reference day; days before it in the month count as passed.

    Returns
    -------
    MonthlyAchievement. The month is on track when the achievement rate is
    at least the share of the month already elapsed. The daily target is
    the remaining quantity spread over the remaining days, rounded up.
    """
    if target_quantity <= 0:
        logger.warning("No target set for %d-%02d", year, month)
        return None

    month_start = pd.Timestamp(year=year, month=month, day=1)
    days_in_month = month_start.days_in_month

    actual = 0.0
    if not daily_totals.empty:
        dates = pd.to_datetime(daily_totals["date"])
        in_month = (dates.dt.year == year) & (dates.dt.month == month)
        actual = float(daily_totals.loc[in_month, "quantity"].sum())

    as_of_ts = pd.Timestamp(as_of)
    if as_of_ts < month_start:
        days_passed = 0
    elif as_of_ts.year == year and as_of_ts.month == month:
        days_passed = as_of_ts.day
    else:
        days_passed = days_in_month
    days_remaining = days_in_month - days_passed

    rate = round_half_up(actual * 100 / target_quantity, 1)
    expected = round_half_up(days_passed * 100 / days_in_month, 1)
    remaining = max(target_quantity - actual, 0.0)

    if days_remaining > 0:
        daily_target = math.ceil(remaining / days_remaining)
    else:
        daily_target = math.ceil(remaining)

    return MonthlyAchievement(
        year=year,
        month=month,
        target_quantity=target_quantity,
        actual_quantity=actual,
        remaining_quantity=remaining,
        achievement_rate=rate,
        days_passed=days_passed,
        days_remaining=days_remaining,
        expected_progress=expected,
        daily_target_quantity=daily_target,
        is_on_track=rate >= expected,
        status=classify_achievement(rate),
    )
