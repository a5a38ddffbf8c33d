"""
Immutable record types exchanged between the data layer, the analyzers
and the dashboard.

All models are frozen pydantic models. MetricPoint is the boundary type:
its period must be a zero-padded ISO-style label (YYYY, YYYY-MM,
YYYY-MM-DD or YYYY-Www) so that sorting period strings sorts them
chronologically.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Metric = Literal["quantity", "area_pyeong"]
RowDimension = Literal["client", "product"]
PeriodType = Literal["daily", "weekly", "monthly", "yearly"]
AbcGrade = Literal["A", "B", "C"]
RiskLevel = Literal["HIGH", "MEDIUM", "LOW"]
TrendDirection = Literal["up", "down", "neutral"]

PERIOD_PATTERN = (
    r"^\d{4}"
    r"(-(0[1-9]|1[0-2])(-(0[1-9]|[12]\d|3[01]))?|-W(0[1-9]|[1-4]\d|5[0-3]))?$"
)


class MetricPoint(BaseModel):
    """One (dimension, period) cell of production totals."""

    model_config = ConfigDict(frozen=True)

    dimension_value: str
    period: str = Field(..., pattern=PERIOD_PATTERN)
    quantity: float = Field(0.0, ge=0)
    area_pyeong: float = Field(0.0, ge=0)

    def metric_value(self, metric: Metric) -> float:
        return self.quantity if metric == "quantity" else self.area_pyeong


class PivotTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    rows: list[str] = Field(default_factory=list)
    columns: list[str] = Field(default_factory=list)
    values: dict[str, dict[str, float]] = Field(default_factory=dict)
    row_totals: dict[str, float] = Field(default_factory=dict)
    column_totals: dict[str, float] = Field(default_factory=dict)
    grand_total: float = 0.0


class ConcentrationEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    quantity: float
    area_pyeong: float
    percentage: float
    cumulative_percentage: float
    abc_grade: AbcGrade
    rank: int = Field(..., ge=1)


class ConcentrationSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_count: int
    top1_percentage: float
    top3_percentage: float
    top5_percentage: float
    top10_percentage: float
    hhi_index: int
    concentration_risk: RiskLevel
    risk_score: int
    a_grade_count: int
    b_grade_count: int
    c_grade_count: int


class TrendPoint(BaseModel):
    """Daily total with its moving-average statistics.

    ma_short, ma_long and std_dev stay None until the trailing window
    ending at this point is completely filled.
    """

    model_config = ConfigDict(frozen=True)

    date: str
    quantity: float
    area_pyeong: float
    ma_short: float | None = None
    ma_long: float | None = None
    std_dev: float | None = None
    is_outlier: bool = False
    trend_direction: TrendDirection = "neutral"


class TrendSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_trend: TrendDirection
    trend_strength: float
    outlier_count: int
    avg_daily_quantity: float
    avg_daily_area: float
    max_quantity: float
    min_quantity: float
    max_area: float
    min_area: float
    volatility: float
    total_days: int


class YoYMonthlyEntry(BaseModel):
    """Monthly totals of two consecutive years.

    Growth rates are None when the prior-year value is 0, which keeps
    "no base to compare against" distinct from "no change".
    """

    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12)
    current_year_quantity: float
    current_year_area: float
    prev_year_quantity: float
    prev_year_area: float
    quantity_growth_rate: float | None = None
    area_growth_rate: float | None = None


class MonthGrowth(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12)
    rate: float


class YoYSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_year_total: float
    prev_year_total: float
    overall_growth_rate: float | None = None
    avg_monthly_growth: float | None = None
    best_month: MonthGrowth | None = None
    worst_month: MonthGrowth | None = None
    positive_months: int = 0
    negative_months: int = 0


class MonthlyAchievement(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(..., ge=1, le=12)
    target_quantity: float
    actual_quantity: float
    remaining_quantity: float
    achievement_rate: float
    days_passed: int
    days_remaining: int
    expected_progress: float
    daily_target_quantity: int
    is_on_track: bool
    status: str
