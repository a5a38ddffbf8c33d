"""
Data transforms: group cleaned production records into metric points and
the summary tables the dashboard filters and cards are built from.

Records are the output of loaders.split_valid_records(); negative
quantities or areas are expected to have been rejected there.
"""

import logging
from datetime import date

import pandas as pd

from .config import PERIOD_FORMATS, ROW_DIMENSIONS, UNASSIGNED_LABEL
from .models import MetricPoint, PeriodType, RowDimension

logger = logging.getLogger(__name__)


def _dimension_column(row_dimension: str) -> str:
    try:
        return ROW_DIMENSIONS[row_dimension]
    except KeyError:
        raise ValueError(
            f"Unknown row dimension '{row_dimension}'; "
            f"expected one of {sorted(ROW_DIMENSIONS)}"
        ) from None


def _prepare_records(
    records: pd.DataFrame,
    start_date: date | None = None,
    end_date: date | None = None,
) -> pd.DataFrame:
    """Dated, zero-filled copy of records within [start_date, end_date]."""
    df = records[records["production_date"].notna()].copy()
    df["date"] = pd.to_datetime(df["production_date"])

    if start_date is not None:
        df = df[df["date"] >= pd.Timestamp(start_date)]
    if end_date is not None:
        df = df[df["date"] <= pd.Timestamp(end_date)]

    df["quantity"] = pd.to_numeric(df["quantity"], errors="coerce").fillna(0).astype(float)
    df["area_pyeong"] = pd.to_numeric(df["area_pyeong"], errors="coerce").fillna(0).astype(float)
    for col in ROW_DIMENSIONS.values():
        df[col] = df[col].fillna(UNASSIGNED_LABEL)
    return df


def build_period_label(dates: pd.Series, period_type: PeriodType) -> pd.Series:
    """Format dates as zero-padded period labels.

    daily 'YYYY-MM-DD', weekly ISO 'YYYY-Www', monthly 'YYYY-MM',
    yearly 'YYYY'.
    """
    if period_type not in PERIOD_FORMATS:
        raise ValueError(
            f"Unknown period type '{period_type}'; "
            f"expected one of {sorted(PERIOD_FORMATS)}"
        )

    dates = pd.to_datetime(dates)
    if period_type == "weekly":
        iso = dates.dt.isocalendar()
        return (
            iso["year"].astype(str) + "-W" + iso["week"].astype(str).str.zfill(2)
        ).astype(object)
    return dates.dt.strftime(PERIOD_FORMATS[period_type])


def build_metric_points(
    records: pd.DataFrame,
    row_dimension: RowDimension = "client",
    period_type: PeriodType = "monthly",
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[MetricPoint]:
    """Group records into one MetricPoint per (dimension value, period).

    Parameters
    ----------
    records : Validated production records.
    row_dimension : 'client' or 'product'.
    period_type : 'daily', 'weekly', 'monthly' or 'yearly'.
    start_date, end_date : Inclusive production-date bounds (optional).

    Returns
    -------
    Points sorted by period, then dimension value.
    """
    column = _dimension_column(row_dimension)
    df = _prepare_records(records, start_date, end_date)

    if df.empty:
        logger.warning("No production records in range %s — %s", start_date, end_date)
        return []

    df["period"] = build_period_label(df["date"], period_type)

    grouped = (
        df.groupby([column, "period"])[["quantity", "area_pyeong"]]
        .sum()
        .reset_index()
        .sort_values(["period", column], kind="stable")
    )

    points = [
        MetricPoint(
            dimension_value=str(getattr(row, column)),
            period=row.period,
            quantity=float(row.quantity),
            area_pyeong=float(row.area_pyeong),
        )
        for row in grouped.itertuples(index=False)
    ]

    logger.info(
        "Built %d metric points (%s x %s)", len(points), row_dimension, period_type
    )
    return points


def filter_points_by_year(points: list[MetricPoint], year: int) -> list[MetricPoint]:
    """Points whose period label falls in the given year."""
    prefix = f"{year:04d}"
    return [p for p in points if p.period.startswith(prefix)]


def build_daily_totals(
    records: pd.DataFrame,
    start_date: date | None = None,
    end_date: date | None = None,
) -> pd.DataFrame:
    """Production totals per day.

    Returns
    -------
    DataFrame with columns date (YYYY-MM-DD), quantity, area_pyeong.
    """
    df = _prepare_records(records, start_date, end_date)
    if df.empty:
        return pd.DataFrame(columns=["date", "quantity", "area_pyeong"])

    df["date"] = build_period_label(df["date"], "daily")
    daily = (
        df.groupby("date", sort=True)[["quantity", "area_pyeong"]]
        .sum()
        .reset_index()
    )
    logger.info("Built daily totals with %d rows", len(daily))
    return daily


def build_dimension_list(
    records: pd.DataFrame,
    row_dimension: RowDimension = "client",
    start_date: date | None = None,
    end_date: date | None = None,
) -> pd.DataFrame:
    """Distinct dimension values ranked by total quantity, for UI filters.

    Returns
    -------
    DataFrame with columns <dimension column>, total_quantity.
    """
    column = _dimension_column(row_dimension)
    df = _prepare_records(records, start_date, end_date)
    if df.empty:
        return pd.DataFrame(columns=[column, "total_quantity"])

    result = (
        df.groupby(column)["quantity"]
        .sum()
        .rename("total_quantity")
        .reset_index()
        .sort_values(["total_quantity", column], ascending=[False, True])
        .reset_index(drop=True)
    )
    return result


def build_client_product_cross(
    records: pd.DataFrame,
    client: str | None = None,
    limit: int = 100,
    start_date: date | None = None,
    end_date: date | None = None,
) -> pd.DataFrame:
    """Client x product totals, largest quantity first.

    Returns
    -------
    DataFrame with columns client, product_name, quantity, area_pyeong,
    record_count (at most `limit` rows).
    """
    columns = ["client", "product_name", "quantity", "area_pyeong", "record_count"]
    df = _prepare_records(records, start_date, end_date)
    if client is not None:
        df = df[df["client"] == client]
    if df.empty:
        return pd.DataFrame(columns=columns)

    cross = (
        df.groupby(["client", "product_name"])
        .agg(
            quantity=("quantity", "sum"),
            area_pyeong=("area_pyeong", "sum"),
            record_count=("quantity", "size"),
        )
        .reset_index()
        .sort_values("quantity", ascending=False, kind="stable")
        .head(limit)
        .reset_index(drop=True)
    )
    return cross[columns]


def build_dashboard_stats(
    records: pd.DataFrame,
    today: date,
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict:
    """Headline numbers for the overview cards.

    Returns
    -------
    {"total_quantity", "total_area_pyeong", "unique_clients", "today_quantity"}
    """
    df = _prepare_records(records, start_date, end_date)
    if df.empty:
        return {
            "total_quantity": 0.0,
            "total_area_pyeong": 0.0,
            "unique_clients": 0,
            "today_quantity": 0.0,
        }

    clients = df.loc[df["client"] != UNASSIGNED_LABEL, "client"]
    today_rows = df[df["date"] == pd.Timestamp(today)]

    return {
        "total_quantity": float(df["quantity"].sum()),
        "total_area_pyeong": float(df["area_pyeong"].sum()),
        "unique_clients": int(clients.nunique()),
        "today_quantity": float(today_rows["quantity"].sum()),
    }
