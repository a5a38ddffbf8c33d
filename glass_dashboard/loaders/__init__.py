"""Data ingestion loaders for production-record exports."""

from .production_export import convert_records, load_production_records
from .production_export import read_production_export
from .production_export import split_valid_records, validate_record

__all__ = [
    "convert_records",
    "load_production_records",
    "read_production_export",
    "split_valid_records",
    "validate_record",
]
