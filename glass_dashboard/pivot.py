"""
Pivot transformer: cross-tabulates metric points as dimension x period.
"""

import logging
from collections.abc import Iterable

import pandas as pd

from .models import Metric, MetricPoint, PivotTable

logger = logging.getLogger(__name__)


def points_to_frame(points: Iterable[MetricPoint]) -> pd.DataFrame:
    """Return metric points as a DataFrame, one row per point, input order kept."""
    frame = pd.DataFrame(
        [p.model_dump() for p in points],
        columns=["dimension_value", "period", "quantity", "area_pyeong"],
    )
    return frame.astype({"quantity": float, "area_pyeong": float})


def transform_to_pivot_table(
    points: Iterable[MetricPoint],
    metric: Metric = "quantity",
) -> PivotTable:
    """Build a dense dimension x period matrix with row, column and grand totals.

    Rows and columns are sorted ascending; period labels sort
    chronologically because MetricPoint only admits zero-padded labels.
    Points sharing a (dimension_value, period) pair are summed. Cells with
    no data are 0.
    """
    df = points_to_frame(points)

    if df.empty:
        logger.warning("No metric points — returning empty pivot table")
        return PivotTable()

    table = df.pivot_table(
        index="dimension_value",
        columns="period",
        values=metric,
        aggfunc="sum",
        fill_value=0.0,
    )
    table = table.sort_index(axis=0).sort_index(axis=1)

    rows = [str(r) for r in table.index]
    columns = [str(c) for c in table.columns]

    values = {
        row: {col: float(table.at[row, col]) for col in columns}
        for row in rows
    }
    row_totals = {row: float(total) for row, total in table.sum(axis=1).items()}
    column_totals = {col: float(total) for col, total in table.sum(axis=0).items()}
    grand_total = sum(row_totals.values())

    logger.info("Built pivot table with %d rows x %d columns", len(rows), len(columns))
    return PivotTable(
        rows=rows,
        columns=columns,
        values=values,
        row_totals=row_totals,
        column_totals=column_totals,
        grand_total=grand_total,
    )
