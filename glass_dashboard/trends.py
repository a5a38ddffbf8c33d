"""
Trend analysis: short/long moving averages, rolling deviation, outlier
flags and direction of trend over daily production totals.
"""

import logging
from collections.abc import Iterable

import pandas as pd

from .config import (
    MA_LONG_DEFAULT,
    MA_SHORT_DEFAULT,
    OUTLIER_SIGMA,
    OVERALL_TREND_BAND_PCT,
    TREND_DOWN_RATIO,
    TREND_UP_RATIO,
)
from .models import MetricPoint, TrendDirection, TrendPoint, TrendSummary
from .pivot import points_to_frame

logger = logging.getLogger(__name__)


def _optional(val) -> float | None:
    """Return None for NaN, else a plain float."""
    if pd.isna(val):
        return None
    return float(val)


def aggregate_by_date(points: Iterable[MetricPoint]) -> pd.DataFrame:
    """Sum quantity and area per period label, sorted ascending.

    Returns
    -------
    DataFrame with columns date, quantity, area_pyeong.
    """
    df = points_to_frame(points)
    if df.empty:
        return pd.DataFrame(columns=["date", "quantity", "area_pyeong"])

    daily = (
        df.groupby("period", sort=True)[["quantity", "area_pyeong"]]
        .sum()
        .reset_index()
        .rename(columns={"period": "date"})
    )
    return daily


def classify_direction(current: float | None, previous: float | None) -> TrendDirection:
    """Compare consecutive short moving averages.

    'up' above 1.01x the previous value, 'down' below 0.99x, otherwise
    (or when either value is missing) 'neutral'.
    """
    if current is None or previous is None:
        return "neutral"
    if current > previous * TREND_UP_RATIO:
        return "up"
    if current < previous * TREND_DOWN_RATIO:
        return "down"
    return "neutral"


def build_trend_points(
    daily: pd.DataFrame,
    ma_short: int = MA_SHORT_DEFAULT,
    ma_long: int = MA_LONG_DEFAULT,
) -> list[TrendPoint]:
    """Attach moving-average statistics to each day of an aggregated series.

    A window statistic is only defined once the full window of trailing
    days is available. The deviation is the population standard deviation
    over the long window; a day is an outlier when it lies more than two
    deviations from the long moving average.
    """
    if daily.empty:
        return []

    quantity = daily["quantity"].astype(float)

    short_ma = quantity.rolling(window=ma_short, min_periods=ma_short).mean()
    long_window = quantity.rolling(window=ma_long, min_periods=ma_long)
    long_ma = long_window.mean()
    long_std = long_window.std(ddof=0)
    prev_short_ma = short_ma.shift(1)

    points = []
    for i, row in enumerate(daily.itertuples(index=False)):
        ma_s = _optional(short_ma.iloc[i])
        ma_l = _optional(long_ma.iloc[i])
        std = _optional(long_std.iloc[i]) if ma_l is not None else None

        is_outlier = (
            ma_l is not None
            and std is not None
            and abs(float(row.quantity) - ma_l) > OUTLIER_SIGMA * std
        )

        points.append(TrendPoint(
            date=str(row.date),
            quantity=float(row.quantity),
            area_pyeong=float(row.area_pyeong),
            ma_short=ma_s,
            ma_long=ma_l,
            std_dev=std,
            is_outlier=is_outlier,
            trend_direction=classify_direction(ma_s, _optional(prev_short_ma.iloc[i])),
        ))

    return points


def summarise_trend(trend_points: list[TrendPoint]) -> TrendSummary | None:
    """Averages, extremes, volatility and overall direction of a trend series.

    Volatility is the coefficient of variation of daily quantity (%).
    Overall trend compares the first and last defined long moving average:
    more than +5% is 'up', less than -5% is 'down'.
    """
    if not trend_points:
        return None

    quantities = pd.Series([p.quantity for p in trend_points], dtype=float)
    areas = pd.Series([p.area_pyeong for p in trend_points], dtype=float)

    avg_quantity = float(quantities.mean())
    std_quantity = float(quantities.std(ddof=0))
    volatility = std_quantity / avg_quantity * 100 if avg_quantity > 0 else 0.0

    valid_ma = [p.ma_long for p in trend_points if p.ma_long is not None]

    overall_trend: TrendDirection = "neutral"
    trend_strength = 0.0
    if valid_ma and valid_ma[0] != 0:
        first, last = valid_ma[0], valid_ma[-1]
        trend_strength = (last - first) / first * 100
        if trend_strength > OVERALL_TREND_BAND_PCT:
            overall_trend = "up"
        elif trend_strength < -OVERALL_TREND_BAND_PCT:
            overall_trend = "down"

    return TrendSummary(
        overall_trend=overall_trend,
        trend_strength=trend_strength,
        outlier_count=sum(1 for p in trend_points if p.is_outlier),
        avg_daily_quantity=avg_quantity,
        avg_daily_area=float(areas.mean()),
        max_quantity=float(quantities.max()),
        min_quantity=float(quantities.min()),
        max_area=float(areas.max()),
        min_area=float(areas.min()),
        volatility=volatility,
        total_days=len(trend_points),
    )


def analyze_trend(
    points: Iterable[MetricPoint],
    ma_short: int = MA_SHORT_DEFAULT,
    ma_long: int = MA_LONG_DEFAULT,
) -> tuple[list[TrendPoint], TrendSummary | None]:
    """Return (trend points, summary) for daily metric points.

    Points are summed per date across all dimension values first.
    """
    daily = aggregate_by_date(points)
    if daily.empty:
        logger.warning("No daily data — returning empty trend analysis")
        return [], None

    trend_points = build_trend_points(daily, ma_short, ma_long)
    summary = summarise_trend(trend_points)

    logger.info(
        "Trend over %d days (MA %d/%d): %s, %d outliers",
        summary.total_days, ma_short, ma_long,
        summary.overall_trend, summary.outlier_count,
    )
    return trend_points, summary
