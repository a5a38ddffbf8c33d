"""
Concentration analysis: Pareto ranking, ABC grading and HHI risk.

Entities (clients or products) are ranked by their share of the selected
metric. Ties keep the order in which entities first appear in the input,
so ranks are deterministic for a given input order.
"""

import logging
from collections.abc import Iterable

import pandas as pd

from .config import (
    ABC_GRADE_A_MAX,
    ABC_GRADE_B_MAX,
    CONCENTRATION_RISK_RULES,
    HIGH_RISK_SHARE_PCT,
)
from .kpis import round_half_up
from .models import (
    AbcGrade,
    ConcentrationEntry,
    ConcentrationSummary,
    Metric,
    MetricPoint,
    RiskLevel,
)
from .pivot import points_to_frame

logger = logging.getLogger(__name__)


def aggregate_by_entity(points: Iterable[MetricPoint]) -> pd.DataFrame:
    """Sum quantity and area per dimension value.

    Returns
    -------
    DataFrame with columns name, quantity, area_pyeong in first-encounter
    order.
    """
    df = points_to_frame(points)
    if df.empty:
        return pd.DataFrame(columns=["name", "quantity", "area_pyeong"])

    totals = (
        df.groupby("dimension_value", sort=False)[["quantity", "area_pyeong"]]
        .sum()
        .reset_index()
        .rename(columns={"dimension_value": "name"})
    )
    return totals


def classify_abc_grade(cumulative_percentage: float) -> AbcGrade:
    """Return 'A' up to 70% cumulative share, 'B' up to 90%, 'C' beyond."""
    if cumulative_percentage <= ABC_GRADE_A_MAX:
        return "A"
    if cumulative_percentage <= ABC_GRADE_B_MAX:
        return "B"
    return "C"


def classify_concentration_risk(
    hhi_index: float,
    top1_percentage: float,
    top3_percentage: float,
    top5_percentage: float,
) -> tuple[RiskLevel, int]:
    """Return (risk_level, risk_score).

    Logic
    -----
    - HIGH   if hhi >= 2500 or top1 >= 25 or top3 >= 60
    - MEDIUM if hhi >= 1500 or top1 >= 15 or top5 >= 70
    - LOW    otherwise
    """
    high = CONCENTRATION_RISK_RULES["HIGH"]
    if (
        hhi_index >= high["hhi"]
        or top1_percentage >= high["top1"]
        or top3_percentage >= high["top3"]
    ):
        return "HIGH", high["score"]

    medium = CONCENTRATION_RISK_RULES["MEDIUM"]
    if (
        hhi_index >= medium["hhi"]
        or top1_percentage >= medium["top1"]
        or top5_percentage >= medium["top5"]
    ):
        return "MEDIUM", medium["score"]

    return "LOW", CONCENTRATION_RISK_RULES["LOW"]["score"]


def rank_entities(
    points: Iterable[MetricPoint],
    metric: Metric = "quantity",
) -> list[ConcentrationEntry]:
    """Rank entities by share of the metric and assign ABC grades.

    Returns an empty list when the metric total is 0.
    """
    totals = aggregate_by_entity(points)
    if totals.empty:
        return []

    # Stable sort keeps first-encounter order among equal values
    ranked = totals.sort_values(metric, ascending=False, kind="stable")

    total = float(ranked[metric].sum())
    if total == 0:
        logger.warning("Metric '%s' totals 0 — no concentration to rank", metric)
        return []

    entries = []
    cumulative = 0.0
    for rank, row in enumerate(ranked.itertuples(index=False), start=1):
        value = float(getattr(row, metric))
        percentage = value / total * 100
        cumulative += percentage

        # A lone entity holds 100% of the total and is still grade A
        grade = "A" if len(ranked) == 1 else classify_abc_grade(cumulative)

        entries.append(ConcentrationEntry(
            name=str(row.name),
            quantity=float(row.quantity),
            area_pyeong=float(row.area_pyeong),
            percentage=percentage,
            cumulative_percentage=cumulative,
            abc_grade=grade,
            rank=rank,
        ))

    return entries


def summarise_concentration(
    entries: list[ConcentrationEntry],
) -> ConcentrationSummary | None:
    """Top-N shares, HHI, risk level and grade counts for ranked entries.

    The HHI is the sum of squared percentage shares (0-100 scale), so a
    single entity scores 10,000.
    """
    if not entries:
        return None

    def top_share(n: int) -> float:
        return sum(e.percentage for e in entries[:n])

    top1 = top_share(1)
    top3 = top_share(3)
    top5 = top_share(5)
    top10 = top_share(10)

    hhi_index = int(round_half_up(sum(e.percentage ** 2 for e in entries), 0))
    risk, score = classify_concentration_risk(hhi_index, top1, top3, top5)

    grades = [e.abc_grade for e in entries]

    return ConcentrationSummary(
        total_count=len(entries),
        top1_percentage=top1,
        top3_percentage=top3,
        top5_percentage=top5,
        top10_percentage=top10,
        hhi_index=hhi_index,
        concentration_risk=risk,
        risk_score=score,
        a_grade_count=grades.count("A"),
        b_grade_count=grades.count("B"),
        c_grade_count=grades.count("C"),
    )


def analyze_concentration(
    points: Iterable[MetricPoint],
    metric: Metric = "quantity",
) -> tuple[list[ConcentrationEntry], ConcentrationSummary | None]:
    """Return (ranked entries, summary); ([], None) when there is nothing to rank."""
    entries = rank_entities(points, metric)
    summary = summarise_concentration(entries)

    if summary is not None:
        logger.info(
            "Concentration over %d entities: HHI=%d risk=%s",
            summary.total_count, summary.hhi_index, summary.concentration_risk,
        )
    return entries, summary


def get_high_risk_entries(
    entries: list[ConcentrationEntry],
    threshold_pct: float = HIGH_RISK_SHARE_PCT,
) -> list[ConcentrationEntry]:
    """Entries whose individual share reaches threshold_pct."""
    return [e for e in entries if e.percentage >= threshold_pct]
