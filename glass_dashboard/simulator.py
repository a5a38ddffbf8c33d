"""
Simulated data generator for the glass production dashboard.

Generates production records shaped like the converted MES export
(see loaders.convert_records). All values are synthetic.
"""

import numpy as np
import pandas as pd

from .loaders.production_export import RECORD_COLUMNS

# ---------------------------------------------------------------------------
# Typical order mix: (client, base daily share, site)
# ---------------------------------------------------------------------------
_CLIENTS = [
    ("한빛건설", 0.30, "세종 리버뷰"),
    ("대성창호", 0.22, "평택 고덕"),
    ("미래유리", 0.15, "청주 오창"),
    ("서원인테리어", 0.10, "대전 도안"),
    ("동해산업", 0.08, "강릉 교동"),
    ("새롬시스템", 0.06, "천안 불당"),
    ("우진글라스", 0.05, "아산 탕정"),
    ("태광창호", 0.04, "공주 신관"),
]

# (product name, product code, typical width mm, typical height mm)
_PRODUCTS = [
    ("5mm 투명 강화유리", "TG-05", 1200, 1800),
    ("8mm 투명 강화유리", "TG-08", 1500, 2100),
    ("16mm 복층유리", "DG-16", 1000, 1400),
    ("22mm 로이복층유리", "LE-22", 1100, 1600),
    ("6mm 접합유리", "LG-06", 900, 1200),
]

_LINES = ["A", "B", "C"]

# Square metres per pyeong
_SQM_PER_PYEONG = 3.305785


def generate_production_records(
    start_date: str = "2024-01-01",
    days: int = 730,
    daily_items: int = 40,
    seed: int = 42,
) -> pd.DataFrame:
    """Generate simulated production records.

    Produces roughly daily_items records per working day (Sundays off),
    with client shares following _CLIENTS and a mild upward drift.

    Returns
    -------
    DataFrame with the converted-record columns (RECORD_COLUMNS).
    """
    rng = np.random.default_rng(seed)
    dates = pd.date_range(start_date, periods=days, freq="D")
    shares = np.array([share for _, share, _ in _CLIENTS])
    shares = shares / shares.sum()

    rows = []
    pid = 0
    for day_idx, day in enumerate(dates):
        if day.dayofweek == 6:
            continue

        drift = 1 + 0.0003 * day_idx
        n_items = max(int(rng.normal(daily_items * drift, daily_items * 0.15)), 1)

        for _ in range(n_items):
            pid += 1
            client, _, site = _CLIENTS[rng.choice(len(_CLIENTS), p=shares)]
            name, code, width, height = _PRODUCTS[rng.integers(len(_PRODUCTS))]

            w = int(width * rng.uniform(0.7, 1.3))
            h = int(height * rng.uniform(0.7, 1.3))
            quantity = int(rng.integers(1, 12))
            area_sqm = w * h / 1_000_000 * quantity
            hour = int(rng.integers(7, 19))
            minute = int(rng.integers(0, 60))

            rows.append({
                "s": True,
                "registered_at": f"{day:%Y-%m-%d} {hour}:{minute:02d}",
                "pid": f"P{pid:07d}",
                "process": "강화",
                "product_code": code,
                "product_name": name,
                "width": float(w),
                "height": float(h),
                "quantity": quantity,
                "area_pyeong": round(area_sqm / _SQM_PER_PYEONG, 2),
                "order_number": f"ORD-{day:%y%m}-{pid % 500:03d}",
                "order_no": str(pid % 50 + 1),
                "client": client,
                "site": site,
                "line": _LINES[pid % len(_LINES)],
                "registrar": "system",
                "note": None,
                "production_date": f"{day:%Y-%m-%d}",
                "production_time": f"{hour:02d}:{minute:02d}:00",
                "year": day.year,
                "month": day.month,
                "week": int(day.isocalendar()[1]),
                "area_sqm": round(area_sqm, 3),
            })

    df = pd.DataFrame(rows, columns=RECORD_COLUMNS)
    for col in ("quantity", "year", "month", "week"):
        df[col] = df[col].astype("Int64")
    return df
