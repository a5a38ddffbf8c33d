from datetime import date

import pandas as pd
import pytest

from conftest import make_points
from glass_dashboard.config import UNASSIGNED_LABEL
from glass_dashboard.loaders import split_valid_records
from glass_dashboard.transforms import (
    build_client_product_cross,
    build_daily_totals,
    build_dashboard_stats,
    build_dimension_list,
    build_metric_points,
    build_period_label,
    filter_points_by_year,
)


class TestBuildPeriodLabel:

    @pytest.mark.parametrize("period_type, expected", [
        ("daily", ["2024-03-04", "2024-12-30"]),
        ("weekly", ["2024-W10", "2025-W01"]),
        ("monthly", ["2024-03", "2024-12"]),
        ("yearly", ["2024", "2024"]),
    ])
    def test_formats(self, period_type, expected):
        dates = pd.Series(pd.to_datetime(["2024-03-04", "2024-12-30"]))

        assert build_period_label(dates, period_type).tolist() == expected

    def test_iso_week_year_boundary(self):
        dates = pd.Series(pd.to_datetime(["2021-01-03"]))

        assert build_period_label(dates, "weekly").tolist() == ["2020-W53"]

    def test_unknown_period_type(self):
        with pytest.raises(ValueError, match="Unknown period type"):
            build_period_label(pd.Series(pd.to_datetime(["2024-01-01"])), "hourly")


class TestBuildMetricPoints:

    def test_monthly_by_client(self, records):
        points = build_metric_points(records)

        assert [(p.dimension_value, p.period, p.quantity) for p in points] == [
            ("대성창호", "2024-01", 4),
            ("한빛건설", "2024-01", 16),
            (UNASSIGNED_LABEL, "2024-02", 0),
            ("한빛건설", "2024-02", 8),
        ]
        assert points[1].area_pyeong == pytest.approx(5.5)

    def test_records_without_date_are_dropped(self, records):
        points = build_metric_points(records)

        assert all(p.dimension_value != "미래유리" for p in points)

    def test_by_product_yearly(self, records):
        points = build_metric_points(records, row_dimension="product", period_type="yearly")

        totals = {p.dimension_value: p.quantity for p in points}
        assert totals == {"16mm 복층유리": 10, "5mm 투명 강화유리": 18, "6mm 접합유리": 0}
        assert {p.period for p in points} == {"2024"}

    def test_weekly(self, records):
        points = build_metric_points(records, period_type="weekly")

        assert sorted({p.period for p in points}) == ["2024-W01", "2024-W03", "2024-W05"]

    def test_date_range_inclusive(self, records):
        points = build_metric_points(
            records, period_type="daily",
            start_date=date(2024, 1, 20), end_date=date(2024, 2, 2),
        )

        assert [(p.period, p.quantity) for p in points] == [
            ("2024-01-20", 6), ("2024-02-02", 8),
        ]

    def test_empty_range(self, records):
        assert build_metric_points(records, start_date=date(2030, 1, 1)) == []

    def test_unknown_dimension(self, records):
        with pytest.raises(ValueError, match="Unknown row dimension"):
            build_metric_points(records, row_dimension="site")

    def test_simulated_records_validate_cleanly(self, simulated_records):
        valid, errors = split_valid_records(simulated_records)
        points = build_metric_points(valid, period_type="daily")

        assert errors == []
        assert sum(p.quantity for p in points) == simulated_records["quantity"].sum()


class TestFilterPointsByYear:

    def test_filters_on_prefix(self):
        points = make_points([("a", "2023-12", 1), ("a", "2024-01", 2), ("a", "2024-W02", 3)])

        assert [p.quantity for p in filter_points_by_year(points, 2024)] == [2, 3]


class TestSummaryTables:

    def test_daily_totals(self, records):
        daily = build_daily_totals(records)

        assert daily["date"].tolist() == ["2024-01-05", "2024-01-20", "2024-02-02", "2024-02-03"]
        assert daily["quantity"].tolist() == [14, 6, 8, 0]
        assert daily["area_pyeong"].tolist() == pytest.approx([4.75, 2.0, 2.75, 1.0])

    def test_daily_totals_empty(self):
        daily = build_daily_totals(pd.DataFrame(columns=["production_date", "client", "product_name",
                                                         "quantity", "area_pyeong"]))

        assert daily.empty
        assert list(daily.columns) == ["date", "quantity", "area_pyeong"]

    def test_dimension_list(self, records):
        clients = build_dimension_list(records)

        assert clients["client"].tolist() == ["한빛건설", "대성창호", UNASSIGNED_LABEL]
        assert clients["total_quantity"].tolist() == [24, 4, 0]

    def test_client_product_cross(self, records):
        cross = build_client_product_cross(records)

        assert list(cross.columns) == [
            "client", "product_name", "quantity", "area_pyeong", "record_count",
        ]
        first = cross.iloc[0]
        assert (first["client"], first["product_name"]) == ("한빛건설", "5mm 투명 강화유리")
        assert first["quantity"] == 18
        assert first["record_count"] == 2

    def test_client_product_cross_filtered(self, records):
        cross = build_client_product_cross(records, client="한빛건설")

        assert set(cross["client"]) == {"한빛건설"}
        assert len(cross) == 2
        assert len(build_client_product_cross(records, limit=1)) == 1

    def test_dashboard_stats(self, records):
        stats = build_dashboard_stats(records, today=date(2024, 1, 5))

        assert stats["total_quantity"] == 28
        assert stats["total_area_pyeong"] == pytest.approx(10.5)
        assert stats["unique_clients"] == 2
        assert stats["today_quantity"] == 14

    def test_dashboard_stats_empty_range(self, records):
        stats = build_dashboard_stats(records, today=date(2024, 1, 5), start_date=date(2030, 1, 1))

        assert stats == {
            "total_quantity": 0.0,
            "total_area_pyeong": 0.0,
            "unique_clients": 0,
            "today_quantity": 0.0,
        }
