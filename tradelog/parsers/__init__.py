"""Parsers for broker trade exports."""

from tradelog.parsers.csv_parser import (
    ColumnLayout,
    ColumnMapper,
    FixedColumnMapper,
    HeaderNameMapper,
    detect_side,
    get_mapper,
    parse_report,
    parse_trades,
)
from tradelog.parsers.formats import decode_upload, ensure_supported

__all__ = [
    "ColumnLayout",
    "ColumnMapper",
    "FixedColumnMapper",
    "HeaderNameMapper",
    "decode_upload",
    "detect_side",
    "ensure_supported",
    "get_mapper",
    "parse_report",
    "parse_trades",
]
