import pandas as pd
import pytest

from glass_dashboard.models import MetricPoint
from glass_dashboard.simulator import generate_production_records


def make_points(rows):
    """MetricPoints from (dimension_value, period, quantity[, area_pyeong]) tuples."""
    points = []
    for row in rows:
        dim, period, qty = row[:3]
        area = row[3] if len(row) > 3 else 0.0
        points.append(MetricPoint(
            dimension_value=dim, period=period, quantity=qty, area_pyeong=area,
        ))
    return points


def daily_series(quantities, start="2024-01-01", dimension="전체"):
    """One point per consecutive day carrying the given quantities."""
    dates = pd.date_range(start, periods=len(quantities), freq="D").strftime("%Y-%m-%d")
    return make_points(
        (dimension, d, q, q / 10) for d, q in zip(dates, quantities)
    )


def monthly_series(year, quantities, dimension="한빛건설"):
    return make_points(
        (dimension, f"{year}-{m:02d}", q, q / 2)
        for m, q in enumerate(quantities, start=1)
    )


@pytest.fixture
def pivot_points():
    return make_points([
        ("한빛건설", "2024-02", 120, 40.5),
        ("대성창호", "2024-01", 80, 20.0),
        ("한빛건설", "2024-01", 100, 30.0),
        ("미래유리", "2024-03", 50, 12.5),
        ("대성창호", "2024-03", 70, 18.0),
    ])


@pytest.fixture(scope="session")
def simulated_records():
    return generate_production_records(start_date="2024-01-01", days=60, daily_items=15)


@pytest.fixture
def records():
    """Small hand-written record set in converted-record shape."""
    return pd.DataFrame([
        {"production_date": "2024-01-05", "client": "한빛건설", "product_name": "5mm 투명 강화유리",
         "quantity": 10, "area_pyeong": 3.5},
        {"production_date": "2024-01-05", "client": "대성창호", "product_name": "16mm 복층유리",
         "quantity": 4, "area_pyeong": 1.25},
        {"production_date": "2024-01-20", "client": "한빛건설", "product_name": "16mm 복층유리",
         "quantity": 6, "area_pyeong": 2.0},
        {"production_date": "2024-02-02", "client": "한빛건설", "product_name": "5mm 투명 강화유리",
         "quantity": 8, "area_pyeong": 2.75},
        {"production_date": "2024-02-03", "client": None, "product_name": "6mm 접합유리",
         "quantity": None, "area_pyeong": 1.0},
        {"production_date": None, "client": "미래유리", "product_name": "6mm 접합유리",
         "quantity": 99, "area_pyeong": 9.0},
    ])
