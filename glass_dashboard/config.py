"""
Configuration: file paths, export column mapping, analysis thresholds.

Thresholds are kept here rather than inline so the dashboard, the
pipeline runner and the tests all read the same values.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths — adjust these if source files move
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

PRODUCTION_EXPORT_FILE = DATA_DIR / "production_records.csv"

SUPPORTED_EXTENSIONS = {".csv", ".txt", ".xlsx"}

# ---------------------------------------------------------------------------
# Company identity
# ---------------------------------------------------------------------------
COMPANY_NAME = "Glass Production"

# ---------------------------------------------------------------------------
# Production export columns
# ---------------------------------------------------------------------------
# Mapping from raw export headers (Korean) to canonical column names
CSV_COLUMN_MAP: dict[str, str] = {
    "S": "s",
    "등록일시": "registered_at",
    "PID": "pid",
    "공정": "process",
    "품목코드": "product_code",
    "품명": "product_name",
    "가로": "width",
    "세로": "height",
    "수량": "quantity",
    "평수": "area_pyeong",
    "의뢰번호": "order_number",
    "NO.": "order_no",
    "거래처": "client",
    "현장": "site",
    "라인": "line",
    "등록자": "registrar",
    "비고": "note",
    "일자": "production_date",
    "시간": "production_time",
    "연": "year",
    "월": "month",
    "주차": "week",
    "면적": "area_sqm",
}

# Columns an export must carry to be usable at all
REQUIRED_COLUMNS = {"production_date", "product_name", "quantity"}

TEXT_COLUMNS = [
    "pid", "process", "product_code", "product_name", "order_number",
    "order_no", "client", "site", "line", "registrar", "note",
]
FLOAT_COLUMNS = ["width", "height", "area_pyeong", "area_sqm"]
INT_COLUMNS = ["quantity", "year", "month", "week"]

# ---------------------------------------------------------------------------
# Analysis dimensions
# ---------------------------------------------------------------------------
# row_dimension -> record column
ROW_DIMENSIONS: dict[str, str] = {
    "client": "client",
    "product": "product_name",
}

# period_type -> strftime format of the period label (weekly uses ISO weeks)
PERIOD_FORMATS: dict[str, str] = {
    "daily": "%Y-%m-%d",
    "weekly": "%G-W%V",
    "monthly": "%Y-%m",
    "yearly": "%Y",
}

UNASSIGNED_LABEL = "(unassigned)"

# ---------------------------------------------------------------------------
# Concentration (ABC / HHI)
# ---------------------------------------------------------------------------
# Cumulative-share upper bounds (inclusive) for grades A and B
ABC_GRADE_A_MAX = 70.0
ABC_GRADE_B_MAX = 90.0

# Risk rules: a level applies when ANY of its thresholds is reached.
# HHI is on the percentage-point scale (max 10,000).
CONCENTRATION_RISK_RULES: dict[str, dict] = {
    "HIGH": {"hhi": 2500, "top1": 25.0, "top3": 60.0, "score": 5},
    "MEDIUM": {"hhi": 1500, "top1": 15.0, "top5": 70.0, "score": 3},
    "LOW": {"score": 1},
}

# Individual share at or above which an entity is flagged on its own
HIGH_RISK_SHARE_PCT = 15.0

# ---------------------------------------------------------------------------
# Trend / moving average
# ---------------------------------------------------------------------------
MA_SHORT_DEFAULT = 7
MA_LONG_DEFAULT = 30
OUTLIER_SIGMA = 2.0

# Day-to-day short-MA band (ratio) and overall long-MA change band (%)
TREND_UP_RATIO = 1.01
TREND_DOWN_RATIO = 0.99
OVERALL_TREND_BAND_PCT = 5.0

# ---------------------------------------------------------------------------
# Target achievement
# ---------------------------------------------------------------------------
ACHIEVEMENT_GREEN_PCT = 100.0
ACHIEVEMENT_AMBER_PCT = 80.0
