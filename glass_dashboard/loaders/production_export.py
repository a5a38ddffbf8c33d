"""
Loader for production-record exports from the plant's MES.

The export is a flat table with Korean headers (일자, 품명, 수량, 평수,
거래처, ...), delivered as CSV, tab-delimited TXT or XLSX. Each row is one
registered production item.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any

import pandas as pd

from ..config import (
    CSV_COLUMN_MAP,
    FLOAT_COLUMNS,
    INT_COLUMNS,
    REQUIRED_COLUMNS,
    SUPPORTED_EXTENSIONS,
    TEXT_COLUMNS,
)
from .utils import normalise_date, parse_bool, parse_time, safe_float, safe_int

logger = logging.getLogger(__name__)

RECORD_COLUMNS = list(CSV_COLUMN_MAP.values())


def _clean_text(val: Any) -> str | None:
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return None
    s = str(val).strip()
    return s or None


def read_production_export(source: str | Path | IO, filename: str) -> pd.DataFrame:
    """Read a raw export into a string-valued DataFrame.

    Parameters
    ----------
    source : Path or file-like object (e.g. a Streamlit upload).
    filename : Name used to pick the parser from its extension.
    """
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"Unsupported file type '{ext}' for {filename}; "
            f"expected one of {sorted(SUPPORTED_EXTENSIONS)}"
        )

    if ext == ".xlsx":
        raw = pd.read_excel(source, dtype=object, engine="openpyxl")
    elif ext == ".txt":
        # Delimiter is sniffed: TXT exports are usually tab-separated
        raw = pd.read_csv(
            source, sep=None, engine="python", dtype=str,
            keep_default_na=False, encoding="utf-8-sig",
        )
    else:
        raw = pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8-sig")

    raw.columns = [str(c).strip() for c in raw.columns]
    return raw


def convert_records(raw: pd.DataFrame) -> pd.DataFrame:
    """Rename export headers and coerce every column to its canonical type.

    Returns
    -------
    DataFrame with all RECORD_COLUMNS. Missing values are None/NaN/<NA>;
    quantity, year, month and week are nullable integers (floored).
    """
    df = raw.rename(columns=CSV_COLUMN_MAP)

    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Export is missing required columns: {sorted(missing)}")

    for col in RECORD_COLUMNS:
        if col not in df.columns:
            df[col] = None

    result = pd.DataFrame(index=df.index)
    result["s"] = df["s"].map(parse_bool)
    result["registered_at"] = df["registered_at"].map(_clean_text)
    for col in TEXT_COLUMNS:
        result[col] = df[col].map(_clean_text)
    for col in FLOAT_COLUMNS:
        result[col] = pd.to_numeric(df[col].map(safe_float), errors="coerce")
    for col in INT_COLUMNS:
        result[col] = df[col].map(safe_int).astype("Int64")
    result["production_date"] = df["production_date"].map(normalise_date)
    result["production_time"] = df["production_time"].map(parse_time)

    return result[RECORD_COLUMNS].reset_index(drop=True)


def load_production_records(path: str | Path) -> pd.DataFrame:
    """Load and type-convert a production export from disk.

    Assumptions
    -----------
    - First row is the header row.
    - Headers use the MES Korean labels; already-canonical headers are
      accepted too.
    - Rows are not validated here; see split_valid_records().
    """
    path = Path(path)
    try:
        raw = read_production_export(path, path.name)
    except Exception:
        logger.exception("Failed to open production export: %s", path)
        raise

    df = convert_records(raw)
    if df.empty:
        logger.warning("No production rows in %s", path)

    logger.info("Loaded %d production rows from %s", len(df), path)
    return df


def validate_record(record: Mapping[str, Any]) -> list[str]:
    """Return the problems with one converted record (empty when valid)."""
    errors = []

    if _clean_text(record.get("production_date")) is None:
        errors.append("production_date is required")
    if _clean_text(record.get("product_name")) is None:
        errors.append("product_name is required")

    for field in ("quantity", "area_pyeong"):
        val = record.get(field)
        if val is not None and not pd.isna(val) and val < 0:
            errors.append(f"{field} must be >= 0")

    return errors


def split_valid_records(df: pd.DataFrame) -> tuple[pd.DataFrame, list[str]]:
    """Separate valid records from invalid ones.

    Returns
    -------
    (valid_df, errors) where each error reads "Row N: ..." with N the line
    number in the source file (header is line 1).
    """
    errors = []
    keep = []

    for pos, record in enumerate(df.to_dict("records")):
        problems = validate_record(record)
        if problems:
            errors.append(f"Row {pos + 2}: {', '.join(problems)}")
        keep.append(not problems)

    valid = df[keep].reset_index(drop=True) if len(df) else df.copy()

    if errors:
        logger.warning("%d of %d rows failed validation", len(errors), len(df))
    logger.info("Validated %d production rows", len(valid))
    return valid, errors
