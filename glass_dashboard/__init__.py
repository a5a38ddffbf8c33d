"""
Glass Production — Business Analytics Dashboard

Analytics backend for turning MES production-record exports (CSV/TXT/XLSX)
into pivot tables, moving-average trends, year-over-year comparisons and
client/product concentration analysis.

To swap file exports for a database feed:
    Replace loaders.load_production_records with a query returning the
    same converted-record columns. Everything from transforms onward is
    unchanged.

To connect to Streamlit/Dash:
    Call transforms.build_metric_points(...) once per filter change and
    pass the points to the dashboard.get_*_view functions, which return
    plain dicts and DataFrames.

To tune the analyses:
    ABC/HHI thresholds, moving-average windows and trend bands live in
    config.py.
"""
