"""Trade export to CSV and JSON."""

import csv
import io
import json
from typing import Iterable

from tradelog.models import TradeRecord

EXPORT_COLUMNS = [
    "id",
    "symbol",
    "side",
    "quantity",
    "price",
    "date",
    "time",
    "entryDate",
    "exitDate",
    "exitPrice",
    "netPnL",
    "description",
    "notes",
    "tags",
]


def _row(trade: TradeRecord) -> list[str]:
    data = trade.model_dump(mode="json", by_alias=True)
    data["tags"] = ";".join(trade.tags)
    return ["" if data.get(col) is None else str(data[col]) for col in EXPORT_COLUMNS]


def export_csv(records: Iterable[TradeRecord]) -> str:
    """Render trades as CSV with a header row.

    Values containing commas, quotes or newlines are quoted.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for trade in records:
        writer.writerow(_row(trade))
    return buffer.getvalue()


def export_json(records: Iterable[TradeRecord]) -> str:
    """Render trades as a JSON array using the stored field names."""
    return json.dumps(
        [t.model_dump(mode="json", by_alias=True) for t in records],
        indent=2,
    )
