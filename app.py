"""
Glass Production — Interactive Dashboard

Run with:  streamlit run app.py
"""

from datetime import date, timedelta

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from glass_dashboard.config import (
    COMPANY_NAME,
    MA_LONG_DEFAULT,
    MA_SHORT_DEFAULT,
    PRODUCTION_EXPORT_FILE,
)
from glass_dashboard.dashboard import (
    get_concentration_view,
    get_dimension_ranking,
    get_period_totals,
    get_pivot_view,
    get_top_stats,
    get_trend_view,
    get_yoy_view,
)
from glass_dashboard.kpis import calc_monthly_achievement
from glass_dashboard.loaders import (
    convert_records,
    load_production_records,
    read_production_export,
    split_valid_records,
)
from glass_dashboard.simulator import generate_production_records
from glass_dashboard.transforms import (
    build_client_product_cross,
    build_daily_totals,
    build_dashboard_stats,
    build_dimension_list,
    build_metric_points,
)
from glass_dashboard.yoy import get_available_years

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title=f"{COMPANY_NAME} Dashboard",
    page_icon="🏭",
    layout="wide",
    initial_sidebar_state="expanded",
)

MONTH_NAMES = ["1월", "2월", "3월", "4월", "5월", "6월",
               "7월", "8월", "9월", "10월", "11월", "12월"]

METRIC_LABELS = {"quantity": "수량", "area_pyeong": "평수"}
DIMENSION_LABELS = {"client": "거래처", "product": "품목"}
PERIOD_LABELS = {"daily": "일별", "weekly": "주별", "monthly": "월별", "yearly": "연별"}

GRADE_COLORS = {"A": "#ef4444", "B": "#f59e0b", "C": "#22c55e"}
RISK_COLORS = {"HIGH": "#e74c3c", "MEDIUM": "#f39c12", "LOW": "#2ecc71"}
STATUS_COLORS = {
    "green": "#2ecc71",
    "amber": "#f39c12",
    "red": "#e74c3c",
    "grey": "#95a5a6",
}


# ---------------------------------------------------------------------------
# Data loading (cached)
# ---------------------------------------------------------------------------
@st.cache_data
def load_default_records() -> pd.DataFrame:
    if PRODUCTION_EXPORT_FILE.exists():
        records, _ = split_valid_records(load_production_records(PRODUCTION_EXPORT_FILE))
        return records
    return generate_production_records()


@st.cache_data
def cached_points(records: pd.DataFrame, dimension: str, period: str, start, end):
    return build_metric_points(records, dimension, period, start, end)


records = st.session_state.get("uploaded_records")
if records is None:
    records = load_default_records()

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("Glass Production")
st.sidebar.markdown("생산실적 분석 대시보드")
st.sidebar.divider()

page = st.sidebar.radio(
    "Navigate",
    ["Overview", "Pivot", "Concentration", "Trend", "Year-over-Year", "Import"],
)

if records.empty:
    last_day = date.today()
else:
    last_day = pd.to_datetime(records["production_date"]).max().date()

date_range = st.sidebar.date_input(
    "기간", value=(last_day - timedelta(days=90), last_day)
)
# While a range is being picked only the start date is set
if len(date_range) == 2:
    start_date, end_date = date_range
else:
    start_date, end_date = date_range[0], None

dimension = st.sidebar.selectbox(
    "행 기준", list(DIMENSION_LABELS), format_func=DIMENSION_LABELS.get
)
period_type = st.sidebar.selectbox(
    "기간 단위", list(PERIOD_LABELS), index=2, format_func=PERIOD_LABELS.get
)
metric = st.sidebar.radio(
    "지표", list(METRIC_LABELS), format_func=METRIC_LABELS.get, horizontal=True
)

st.sidebar.divider()
st.sidebar.caption(f"{len(records):,} production records loaded")


def metric_card(label: str, value, unit: str = "", color: str = "#3498db"):
    value_str = f"{value:,.1f}" if value is not None else "N/A"
    st.markdown(
        f"""
        <div style="background: linear-gradient(135deg, {color}22, {color}11);
                    border-left: 4px solid {color};
                    border-radius: 8px; padding: 16px; margin-bottom: 8px;">
            <div style="font-size: 13px; color: #888; font-weight: 600;">{label}</div>
            <div style="font-size: 28px; font-weight: 700; color: #222; margin: 4px 0;">
                {value_str} <span style="font-size: 14px; color: #888;">{unit}</span>
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


# ===========================================================================
# PAGE: Overview
# ===========================================================================
if page == "Overview":
    st.title("Overview")

    stats = build_dashboard_stats(records, last_day, start_date, end_date)
    cols = st.columns(4)
    with cols[0]:
        metric_card("총 생산수량", stats["total_quantity"], "EA")
    with cols[1]:
        metric_card("총 평수", stats["total_area_pyeong"], "평")
    with cols[2]:
        metric_card("거래처 수", stats["unique_clients"])
    with cols[3]:
        metric_card(f"{last_day:%m/%d} 생산수량", stats["today_quantity"], "EA")

    st.divider()
    st.subheader("월별 목표 달성률")
    target = st.number_input("이번 달 목표 수량", min_value=0, value=0, step=1000)
    achievement = calc_monthly_achievement(
        build_daily_totals(records), target, last_day.year, last_day.month, last_day
    )
    if achievement is None:
        st.info("목표 수량을 입력하면 달성률이 표시됩니다.")
    else:
        color = STATUS_COLORS[achievement.status]
        st.progress(min(achievement.achievement_rate, 100.0) / 100)
        st.markdown(
            f"<span style='color:{color}; font-weight:700'>{achievement.achievement_rate}%</span>"
            f" 달성 (예상 진행률 {achievement.expected_progress}%) · "
            f"{achievement.days_passed}일 경과 / {achievement.days_remaining}일 남음",
            unsafe_allow_html=True,
        )
        if not achievement.is_on_track:
            st.warning(
                f"목표 달성을 위해 일일 {achievement.daily_target_quantity:,}개 이상 생산이 필요합니다."
            )

    daily = build_daily_totals(records, start_date, end_date)
    if not daily.empty:
        fig = go.Figure(go.Bar(x=daily["date"], y=daily[metric], marker_color="#3498db"))
        fig.update_layout(
            title="일별 생산 추이", height=350, plot_bgcolor="rgba(0,0,0,0)"
        )
        st.plotly_chart(fig, use_container_width=True)


# ===========================================================================
# PAGE: Pivot
# ===========================================================================
elif page == "Pivot":
    st.title("Pivot Analysis")

    points = cached_points(records, dimension, period_type, start_date, end_date)
    top = get_top_stats(points)
    if top is None:
        st.warning("선택한 기간에 데이터가 없습니다.")
    else:
        cols = st.columns(4)
        cols[0].metric("총 수량", f"{top['total_quantity']:,.0f}")
        cols[1].metric("총 평수", f"{top['total_area_pyeong']:,.1f}")
        cols[2].metric(f"{DIMENSION_LABELS[dimension]} 수", top["unique_dimensions"])
        cols[3].metric("기간 수", top["unique_periods"])

        st.dataframe(get_pivot_view(points, metric), use_container_width=True)

        col1, col2 = st.columns(2)
        with col1:
            ranking = get_dimension_ranking(points, metric)
            fig = go.Figure(go.Bar(
                x=ranking[metric], y=ranking["name"], orientation="h",
                marker_color="#3498db",
            ))
            fig.update_layout(
                title=f"상위 {DIMENSION_LABELS[dimension]}", height=450,
                yaxis=dict(autorange="reversed"), plot_bgcolor="rgba(0,0,0,0)",
            )
            st.plotly_chart(fig, use_container_width=True)
        with col2:
            periods = get_period_totals(points)
            fig = go.Figure(go.Scatter(
                x=periods["period"], y=periods[metric], mode="lines+markers",
                line=dict(color="#e74c3c", width=2),
            ))
            fig.update_layout(title="기간별 추이", height=450, plot_bgcolor="rgba(0,0,0,0)")
            st.plotly_chart(fig, use_container_width=True)

        st.subheader("거래처 x 품목")
        clients = build_dimension_list(
            records, "client", start_date=start_date, end_date=end_date
        )["client"].tolist()
        selected = st.selectbox("거래처", ["all"] + clients)
        cross = build_client_product_cross(
            records, None if selected == "all" else selected,
            start_date=start_date, end_date=end_date,
        )
        st.dataframe(cross, use_container_width=True, hide_index=True)


# ===========================================================================
# PAGE: Concentration
# ===========================================================================
elif page == "Concentration":
    st.title(f"{DIMENSION_LABELS[dimension]} 집중도 분석")

    points = cached_points(records, dimension, "monthly", start_date, end_date)
    view = get_concentration_view(points, metric)
    summary = view["summary"]

    if summary is None:
        st.warning("선택한 기간에 데이터가 없습니다.")
    else:
        risk_color = RISK_COLORS[summary["concentration_risk"]]
        cols = st.columns(4)
        with cols[0]:
            metric_card("HHI", summary["hhi_index"], color=risk_color)
        with cols[1]:
            metric_card("Top 1", summary["top1_percentage"], "%")
        with cols[2]:
            metric_card("Top 3", summary["top3_percentage"], "%")
        with cols[3]:
            metric_card("Top 5", summary["top5_percentage"], "%")

        if not view["high_risk"].empty:
            names = ", ".join(view["high_risk"]["name"])
            st.error(f"단일 비중 15% 이상: {names}")

        entries = view["entries"].head(20)
        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=entries["name"], y=entries["percentage"], name="비중",
            marker_color=[GRADE_COLORS[g] for g in entries["abc_grade"]],
        ))
        fig.add_trace(go.Scatter(
            x=entries["name"], y=entries["cumulative_percentage"], name="누적 비중",
            mode="lines+markers", yaxis="y2", line=dict(color="#333"),
        ))
        fig.update_layout(
            title="파레토 차트 (ABC 분석)",
            yaxis=dict(title="%"),
            yaxis2=dict(overlaying="y", side="right", range=[0, 105]),
            height=450, plot_bgcolor="rgba(0,0,0,0)",
        )
        st.plotly_chart(fig, use_container_width=True)

        st.caption(
            f"A {summary['a_grade_count']} · B {summary['b_grade_count']} · "
            f"C {summary['c_grade_count']} (총 {summary['total_count']})"
        )
        st.dataframe(view["entries"].head(30), use_container_width=True, hide_index=True)


# ===========================================================================
# PAGE: Trend
# ===========================================================================
elif page == "Trend":
    st.title("이동평균 추세 분석")

    col1, col2 = st.columns(2)
    ma_short = col1.number_input("단기 이동평균 (일)", 2, 60, MA_SHORT_DEFAULT)
    ma_long = col2.number_input("장기 이동평균 (일)", 3, 180, MA_LONG_DEFAULT)

    points = cached_points(records, "client", "daily", start_date, end_date)
    view = get_trend_view(points, int(ma_short), int(ma_long))
    summary = view["summary"]

    if summary is None:
        st.warning("선택한 기간에 데이터가 없습니다.")
    else:
        cols = st.columns(4)
        cols[0].metric("전체 추세", summary["overall_trend"], f"{summary['trend_strength']:+.1f}%")
        cols[1].metric("일평균 수량", f"{summary['avg_daily_quantity']:,.0f}")
        cols[2].metric("변동성 (CV)", f"{summary['volatility']:.1f}%")
        cols[3].metric("이상치", summary["outlier_count"])

        series = view["series"]
        fig = go.Figure()
        fig.add_trace(go.Bar(x=series["date"], y=series["quantity"], name="수량",
                             marker_color="#bdc3c7"))
        fig.add_trace(go.Scatter(x=series["date"], y=series["ma_short"],
                                 name=f"MA{int(ma_short)}", line=dict(color="#3498db")))
        fig.add_trace(go.Scatter(x=series["date"], y=series["ma_long"],
                                 name=f"MA{int(ma_long)}", line=dict(color="#e74c3c")))
        outliers = view["outliers"]
        fig.add_trace(go.Scatter(x=outliers["date"], y=outliers["quantity"], name="이상치",
                                 mode="markers", marker=dict(color="#8e44ad", size=10)))
        fig.update_layout(height=450, plot_bgcolor="rgba(0,0,0,0)")
        st.plotly_chart(fig, use_container_width=True)

        if not outliers.empty:
            st.subheader("이상치 목록")
            st.dataframe(outliers.head(20), use_container_width=True, hide_index=True)


# ===========================================================================
# PAGE: Year-over-Year
# ===========================================================================
elif page == "Year-over-Year":
    st.title("전년 동기 대비 분석")

    all_monthly = cached_points(records, "client", "monthly", None, None)
    years = get_available_years(all_monthly)
    target_year = st.selectbox("기준 연도", years)

    view = get_yoy_view(all_monthly, target_year, metric)
    summary = view["summary"]
    monthly = view["monthly"]
    prefix = "quantity" if metric == "quantity" else "area"
    current_col = "current_year_quantity" if metric == "quantity" else "current_year_area"
    prev_col = "prev_year_quantity" if metric == "quantity" else "prev_year_area"

    cols = st.columns(4)
    cols[0].metric(f"{target_year}년", f"{summary['current_year_total']:,.0f}")
    cols[1].metric(f"{target_year - 1}년", f"{summary['prev_year_total']:,.0f}")
    growth = summary["overall_growth_rate"]
    cols[2].metric("성장률", f"{growth:+.1f}%" if growth is not None else "N/A")
    cols[3].metric("증가/감소 월", f"{summary['positive_months']} / {summary['negative_months']}")

    labels = [MONTH_NAMES[m - 1] for m in monthly["month"]]
    fig = go.Figure()
    fig.add_trace(go.Bar(x=labels, y=monthly[prev_col], name=f"{target_year - 1}",
                         marker_color="#bdc3c7"))
    fig.add_trace(go.Bar(x=labels, y=monthly[current_col], name=f"{target_year}",
                         marker_color="#3498db"))
    fig.add_trace(go.Scatter(x=labels, y=monthly[f"{prefix}_growth_rate"], name="성장률 (%)",
                             yaxis="y2", mode="lines+markers", line=dict(color="#e74c3c")))
    fig.update_layout(
        barmode="group", height=450, plot_bgcolor="rgba(0,0,0,0)",
        yaxis2=dict(overlaying="y", side="right"),
    )
    st.plotly_chart(fig, use_container_width=True)

    best, worst = summary["best_month"], summary["worst_month"]
    if best is not None:
        st.info(
            f"최고 성장: {MONTH_NAMES[best['month'] - 1]} ({best['rate']:+.1f}%) · "
            f"최저 성장: {MONTH_NAMES[worst['month'] - 1]} ({worst['rate']:+.1f}%)"
        )


# ===========================================================================
# PAGE: Import
# ===========================================================================
elif page == "Import":
    st.title("Import Production Records")
    st.caption("CSV, TXT 또는 XLSX 생산실적 파일을 업로드하세요.")

    uploaded = st.file_uploader("생산실적 파일", type=["csv", "txt", "xlsx"])
    if uploaded is not None:
        try:
            converted = convert_records(read_production_export(uploaded, uploaded.name))
        except ValueError as e:
            st.error(str(e))
        else:
            valid, errors = split_valid_records(converted)
            cols = st.columns(3)
            cols[0].metric("전체", len(converted))
            cols[1].metric("유효", len(valid))
            cols[2].metric("오류", len(errors))

            if errors:
                st.warning("\n".join(errors[:10]))
            st.dataframe(valid.head(50), use_container_width=True, hide_index=True)

            if not valid.empty and st.button("이 데이터로 분석하기"):
                st.session_state["uploaded_records"] = valid
                st.success(f"{len(valid):,}건을 불러왔습니다.")
