"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end. Each
function runs one analyzer and returns plain dicts or DataFrames suitable
for rendering cards, charts and tables. No number or date formatting is
applied here.
"""

import logging

import pandas as pd

from .concentration import aggregate_by_entity, analyze_concentration, get_high_risk_entries
from .config import MA_LONG_DEFAULT, MA_SHORT_DEFAULT
from .models import Metric, MetricPoint
from .pivot import points_to_frame, transform_to_pivot_table
from .transforms import filter_points_by_year
from .trends import analyze_trend
from .yoy import compare_year_over_year

logger = logging.getLogger(__name__)

TOTAL_LABEL = "Total"


def get_pivot_view(points: list[MetricPoint], metric: Metric = "quantity") -> pd.DataFrame:
    """Pivot table as a DataFrame with a trailing total column and total row.

    Returns
    -------
    DataFrame indexed by dimension value (plus 'Total'), one column per
    period (plus 'Total'). Empty DataFrame when there are no points.
    """
    table = transform_to_pivot_table(points, metric)
    if not table.rows:
        return pd.DataFrame()

    frame = pd.DataFrame.from_dict(table.values, orient="index")
    frame = frame.reindex(index=table.rows, columns=table.columns)
    frame[TOTAL_LABEL] = pd.Series(table.row_totals)

    totals = dict(table.column_totals)
    totals[TOTAL_LABEL] = table.grand_total
    # Appended rather than assigned by label: a dimension value may itself be "Total"
    total_row = pd.DataFrame([totals], index=[TOTAL_LABEL], columns=frame.columns)
    frame = pd.concat([frame, total_row])

    frame.index.name = "dimension_value"
    return frame


def get_concentration_view(
    points: list[MetricPoint],
    metric: Metric = "quantity",
) -> dict:
    """Ranked entries, summary and individually dominant entities.

    Returns
    -------
    {"entries": DataFrame, "summary": dict | None, "high_risk": DataFrame}
    """
    entries, summary = analyze_concentration(points, metric)
    columns = [
        "name", "quantity", "area_pyeong", "percentage",
        "cumulative_percentage", "abc_grade", "rank",
    ]

    return {
        "entries": pd.DataFrame([e.model_dump() for e in entries], columns=columns),
        "summary": summary.model_dump() if summary is not None else None,
        "high_risk": pd.DataFrame(
            [e.model_dump() for e in get_high_risk_entries(entries)], columns=columns
        ),
    }


def get_trend_view(
    points: list[MetricPoint],
    ma_short: int = MA_SHORT_DEFAULT,
    ma_long: int = MA_LONG_DEFAULT,
) -> dict:
    """Daily series with moving averages, its summary and the outlier days.

    Returns
    -------
    {"series": DataFrame, "summary": dict | None, "outliers": DataFrame}
    """
    trend_points, summary = analyze_trend(points, ma_short, ma_long)
    series = pd.DataFrame(
        [p.model_dump() for p in trend_points],
        columns=["date", "quantity", "area_pyeong", "ma_short", "ma_long",
                 "std_dev", "is_outlier", "trend_direction"],
    )

    return {
        "series": series,
        "summary": summary.model_dump() if summary is not None else None,
        "outliers": series[series["is_outlier"].astype(bool)].reset_index(drop=True),
    }


def get_yoy_view(
    monthly_points: list[MetricPoint],
    target_year: int,
    metric: Metric = "quantity",
) -> dict:
    """Compare target_year against the year before it.

    Parameters
    ----------
    monthly_points : Monthly (YYYY-MM) points covering both years.

    Returns
    -------
    {"monthly": DataFrame of 12 rows, "summary": dict}
    """
    current = filter_points_by_year(monthly_points, target_year)
    prev = filter_points_by_year(monthly_points, target_year - 1)
    entries, summary = compare_year_over_year(current, prev, metric)

    return {
        "monthly": pd.DataFrame([e.model_dump() for e in entries]),
        "summary": summary.model_dump(),
    }


def get_top_stats(points: list[MetricPoint]) -> dict | None:
    """Totals and distinct dimension/period counts; None when no points."""
    df = points_to_frame(points)
    if df.empty:
        return None

    return {
        "total_quantity": float(df["quantity"].sum()),
        "total_area_pyeong": float(df["area_pyeong"].sum()),
        "unique_dimensions": int(df["dimension_value"].nunique()),
        "unique_periods": int(df["period"].nunique()),
    }


def get_dimension_ranking(
    points: list[MetricPoint],
    metric: Metric = "quantity",
    limit: int = 15,
) -> pd.DataFrame:
    """Largest dimension values by the selected metric, for bar charts."""
    totals = aggregate_by_entity(points)
    if totals.empty:
        return totals

    return (
        totals.sort_values(metric, ascending=False, kind="stable")
        .head(limit)
        .reset_index(drop=True)
    )


def get_period_totals(points: list[MetricPoint]) -> pd.DataFrame:
    """Totals per period in chronological order, for trend charts."""
    df = points_to_frame(points)
    if df.empty:
        return pd.DataFrame(columns=["period", "quantity", "area_pyeong"])

    return (
        df.groupby("period", sort=True)[["quantity", "area_pyeong"]]
        .sum()
        .reset_index()
    )
