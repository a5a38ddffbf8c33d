import pytest

from conftest import make_points
from glass_dashboard.pivot import points_to_frame, transform_to_pivot_table


class TestTransformToPivotTable:

    def test_rows_and_columns_sorted(self, pivot_points):
        table = transform_to_pivot_table(pivot_points)

        assert table.rows == sorted(["한빛건설", "대성창호", "미래유리"])
        assert table.columns == ["2024-01", "2024-02", "2024-03"]

    def test_missing_cells_are_zero(self, pivot_points):
        table = transform_to_pivot_table(pivot_points)

        assert table.values["미래유리"]["2024-01"] == 0
        assert table.values["한빛건설"]["2024-03"] == 0
        assert table.values["한빛건설"]["2024-02"] == 120

    def test_totals_consistent(self, pivot_points):
        table = transform_to_pivot_table(pivot_points)

        assert table.grand_total == pytest.approx(420)
        assert table.grand_total == pytest.approx(sum(table.row_totals.values()))
        assert table.grand_total == pytest.approx(sum(table.column_totals.values()))
        for row in table.rows:
            assert table.row_totals[row] == pytest.approx(
                sum(table.values[row][c] for c in table.columns)
            )
        for col in table.columns:
            assert table.column_totals[col] == pytest.approx(
                sum(table.values[r][col] for r in table.rows)
            )

    def test_area_metric(self, pivot_points):
        table = transform_to_pivot_table(pivot_points, metric="area_pyeong")

        assert table.values["한빛건설"]["2024-02"] == pytest.approx(40.5)
        assert table.row_totals["대성창호"] == pytest.approx(38.0)
        assert table.grand_total == pytest.approx(121.0)

    def test_duplicate_pairs_accumulate(self):
        points = make_points([
            ("한빛건설", "2024-01", 10),
            ("한빛건설", "2024-01", 15),
            ("한빛건설", "2024-02", 5),
        ])
        table = transform_to_pivot_table(points)

        assert table.values["한빛건설"]["2024-01"] == 25
        assert table.row_totals["한빛건설"] == 30
        assert table.column_totals["2024-01"] == 25

    def test_empty_input(self):
        table = transform_to_pivot_table([])

        assert table.rows == []
        assert table.columns == []
        assert table.values == {}
        assert table.grand_total == 0

    def test_same_input_same_table(self, pivot_points):
        first = transform_to_pivot_table(pivot_points)
        second = transform_to_pivot_table(pivot_points)

        assert first == second

    def test_daily_periods_sort_chronologically(self):
        points = make_points([
            ("a", "2024-10-01", 1),
            ("a", "2024-02-15", 1),
            ("a", "2023-12-31", 1),
        ])
        table = transform_to_pivot_table(points)

        assert table.columns == ["2023-12-31", "2024-02-15", "2024-10-01"]


class TestPointsToFrame:

    def test_keeps_input_order(self, pivot_points):
        df = points_to_frame(pivot_points)

        assert list(df.columns) == ["dimension_value", "period", "quantity", "area_pyeong"]
        assert df["dimension_value"].tolist()[:2] == ["한빛건설", "대성창호"]

    def test_empty(self):
        assert points_to_frame([]).empty
