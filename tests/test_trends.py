import statistics

import pytest

from conftest import daily_series, make_points
from glass_dashboard.trends import (
    aggregate_by_date,
    analyze_trend,
    classify_direction,
)


class TestAggregateByDate:

    def test_sums_dimensions_and_sorts(self):
        points = make_points([
            ("대성창호", "2024-01-02", 5, 1.0),
            ("한빛건설", "2024-01-01", 10, 2.0),
            ("대성창호", "2024-01-01", 3, 0.5),
        ])
        daily = aggregate_by_date(points)

        assert daily["date"].tolist() == ["2024-01-01", "2024-01-02"]
        assert daily["quantity"].tolist() == [13, 5]
        assert daily["area_pyeong"].tolist() == [2.5, 1.0]


class TestClassifyDirection:

    @pytest.mark.parametrize("current, previous, expected", [
        (102, 100, "up"),
        (101, 100, "neutral"),
        (99, 100, "neutral"),
        (98, 100, "down"),
        (None, 100, "neutral"),
        (100, None, "neutral"),
    ])
    def test_bands(self, current, previous, expected):
        assert classify_direction(current, previous) == expected


class TestMovingAverageWindows:

    def test_short_series_window_boundaries(self):
        points, summary = analyze_trend(daily_series(range(1, 11)), ma_short=7, ma_long=30)

        assert len(points) == 10
        assert all(p.ma_short is None for p in points[:6])
        assert all(p.ma_short is not None for p in points[6:])
        assert all(p.ma_long is None for p in points)
        assert all(p.std_dev is None for p in points)
        assert not any(p.is_outlier for p in points)
        assert summary.overall_trend == "neutral"
        assert summary.trend_strength == 0

    def test_short_ma_values(self):
        points, _ = analyze_trend(daily_series(range(1, 11)), ma_short=7, ma_long=30)

        assert points[6].ma_short == pytest.approx(4.0)
        assert points[9].ma_short == pytest.approx(7.0)

    def test_long_ma_and_population_std(self):
        quantities = [90, 110] * 15
        points, _ = analyze_trend(daily_series(quantities), ma_short=7, ma_long=30)

        last = points[-1]
        assert last.ma_long == pytest.approx(100)
        assert last.std_dev == pytest.approx(10)
        assert points[-2].ma_long is None


class TestOutlierDetection:

    def test_spike_three_deviations_above_prior_window(self):
        prior = [90, 110] * 15
        spike = statistics.mean(prior) + 3 * statistics.pstdev(prior)
        quantities = prior + [spike, 110, 90, 110, 90]

        points, summary = analyze_trend(daily_series(quantities), ma_short=7, ma_long=30)

        assert len(points) == 35
        assert points[30].is_outlier is True
        assert points[29].is_outlier is False
        assert points[31].is_outlier is False
        assert points[32].is_outlier is False
        assert summary.outlier_count == 1

    def test_constant_series_has_no_outliers(self):
        points, summary = analyze_trend(daily_series([50] * 40))

        assert not any(p.is_outlier for p in points)
        assert all(p.trend_direction == "neutral" for p in points)
        assert summary.volatility == 0


class TestTrendDirection:

    def test_rising_series(self):
        points, _ = analyze_trend(daily_series([100 + 10 * i for i in range(12)]), ma_short=7)

        assert points[6].trend_direction == "neutral"
        assert all(p.trend_direction == "up" for p in points[7:])

    def test_falling_series(self):
        points, _ = analyze_trend(daily_series([300 - 10 * i for i in range(12)]), ma_short=7)

        assert all(p.trend_direction == "down" for p in points[7:])


class TestTrendSummary:

    def test_overall_up(self):
        quantities = [100 + 5 * i for i in range(40)]
        points, summary = analyze_trend(daily_series(quantities), ma_short=7, ma_long=30)

        first = points[29].ma_long
        last = points[39].ma_long
        assert summary.overall_trend == "up"
        assert summary.trend_strength == pytest.approx((last - first) / first * 100)

    def test_overall_neutral_within_band(self):
        quantities = [100 + (i % 2) for i in range(40)]
        _, summary = analyze_trend(daily_series(quantities), ma_short=7, ma_long=30)

        assert summary.overall_trend == "neutral"
        assert abs(summary.trend_strength) <= 5

    def test_overall_down(self):
        quantities = [400 - 5 * i for i in range(40)]
        _, summary = analyze_trend(daily_series(quantities), ma_short=7, ma_long=30)

        assert summary.overall_trend == "down"
        assert summary.trend_strength < -5

    def test_statistics(self):
        _, summary = analyze_trend(daily_series([10, 30]))

        assert summary.avg_daily_quantity == pytest.approx(20)
        assert summary.avg_daily_area == pytest.approx(2)
        assert summary.max_quantity == 30
        assert summary.min_quantity == 10
        assert summary.max_area == pytest.approx(3)
        assert summary.min_area == pytest.approx(1)
        assert summary.volatility == pytest.approx(50)
        assert summary.total_days == 2

    def test_zero_mean_volatility(self):
        _, summary = analyze_trend(daily_series([0, 0, 0]))

        assert summary.volatility == 0

    def test_empty_input(self):
        assert analyze_trend([]) == ([], None)
