"""CSV trade-import parser.

Broker exports have no fixed shape: account banners come before the
table, blank lines and footers are mixed in, and quoting is
inconsistent. The parser looks for a header sentinel row, then reads
every following line as a fill. Rows that cannot be read are dropped
rather than raised, so one bad line never blocks an import.
"""

import csv
import logging
import math
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, Field

from tradelog.models import ParseReport, SkippedRow, TradeRecord
from tradelog.parsers.dates import to_entry_date

logger = logging.getLogger(__name__)

MIN_FIELDS = 6
HEADER_TOKENS = ("symbol", "description")
HEADER_SYMBOL_LABEL = "symbol"

# Checked in this order; sell keywords win when both appear
SELL_KEYWORDS = ("sold", "sell")
BUY_KEYWORDS = ("bought", "buy")


class ColumnLayout(BaseModel):
    """Field positions of a data row."""

    symbol: int = Field(default=0, ge=0)
    description: Optional[int] = Field(default=1, ge=0)
    quantity: int = Field(default=2, ge=0)
    price: int = Field(default=3, ge=0)
    date: Optional[int] = Field(default=4, ge=0)
    time: Optional[int] = Field(default=5, ge=0)

    model_config = {"frozen": True}

    @property
    def min_fields(self) -> int:
        """Number of fields a row needs to cover every position."""
        positions = [p for p in self.model_dump().values() if p is not None]
        return max(MIN_FIELDS, max(positions) + 1)


class ColumnMapper(ABC):
    """Locates the header row of an export and resolves column positions.

    One implementation per known export layout; the parser asks the
    mapper which line is the header and where each field lives.
    """

    @abstractmethod
    def is_header(self, fields: list[str]) -> bool:
        """Check whether a split line is the header sentinel row."""
        pass

    @abstractmethod
    def bind(self, header_fields: list[str]) -> ColumnLayout:
        """Resolve column positions from the header row."""
        pass


class FixedColumnMapper(ColumnMapper):
    """Default mapper: sentinel detection plus conventional fixed positions.

    Layout is symbol, description, quantity, price, date, time.
    """

    def is_header(self, fields: list[str]) -> bool:
        return any(_clean(field).lower() in HEADER_TOKENS for field in fields)

    def bind(self, header_fields: list[str]) -> ColumnLayout:
        return ColumnLayout()


class HeaderNameMapper(FixedColumnMapper):
    """Mapper that reads column positions from the header labels.

    Symbol, quantity and price keep their fixed position when their label
    cannot be found; description, date and time are left unset and read
    as empty.
    """

    OPTIONAL_COLUMNS = ("description", "date", "time")

    COLUMN_ALIASES: list[tuple[str, tuple[str, ...]]] = [
        ("symbol", ("symbol", "sym", "ticker")),
        ("description", ("description", "desc")),
        ("quantity", ("qty", "quantity", "shares")),
        ("price", ("trade price", "fill price", "exec price", "price")),
        ("date", ("trade date", "exec date", "date")),
        ("time", ("exec time", "execution time", "time")),
    ]

    def bind(self, header_fields: list[str]) -> ColumnLayout:
        positions: dict[str, Optional[int]] = {}
        for index, raw_label in enumerate(header_fields):
            label = _clean(raw_label).lower()
            for key, aliases in self.COLUMN_ALIASES:
                if key in positions:
                    continue
                if any(alias in label for alias in aliases):
                    positions[key] = index
                    break
        for key in self.OPTIONAL_COLUMNS:
            positions.setdefault(key, None)
        logger.debug("Resolved column positions from header: %s", positions)
        return ColumnLayout(**positions)


MAPPERS: dict[str, type[ColumnMapper]] = {
    "fixed": FixedColumnMapper,
    "header": HeaderNameMapper,
}


def get_mapper(name: str) -> ColumnMapper:
    """Get a column mapper by name.

    Args:
        name: Mapper name ("fixed" or "header").

    Returns:
        Mapper instance.

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        return MAPPERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown column mapper '{name}'. Choose from: {', '.join(sorted(MAPPERS))}"
        ) from None


def _clean(value: str) -> str:
    """Strip whitespace and stray quote characters."""
    return value.replace('"', "").strip()


def _field(fields: list[str], index: Optional[int]) -> str:
    if index is None:
        return ""
    return _clean(fields[index])


def _split_fields(line: str) -> list[str]:
    """Split a line on commas, honouring quoted fields."""
    try:
        fields = next(csv.reader([line]), [])
    except csv.Error:
        fields = line.split(",")
    return [field.strip() for field in fields]


def _parse_quantity(text: str) -> Optional[int]:
    try:
        return int(_clean(text).replace(",", ""))
    except ValueError:
        return None


def _parse_price(text: str) -> Optional[float]:
    try:
        price = float(_clean(text).replace("$", "").replace(",", ""))
    except ValueError:
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def detect_side(quantity: int, description: Optional[str]) -> str:
    """Determine the fill side.

    The quantity sign gives the default (positive BUY, negative SELL);
    keywords in the description override it.

    Args:
        quantity: Signed quantity from the export.
        description: Free-text description column.

    Returns:
        "BUY" or "SELL".
    """
    text = (description or "").lower()
    if any(keyword in text for keyword in SELL_KEYWORDS):
        return "SELL"
    if any(keyword in text for keyword in BUY_KEYWORDS):
        return "BUY"
    return "BUY" if quantity > 0 else "SELL"


def _parse_row(
    fields: list[str], layout: ColumnLayout
) -> tuple[Optional[TradeRecord], str]:
    """Convert one split data row into a TradeRecord.

    Returns:
        (record, "") on success, (None, reason) when the row is skipped.
    """
    if len(fields) < layout.min_fields:
        return None, "too-few-fields"

    symbol = _clean(fields[layout.symbol])
    if not symbol:
        return None, "missing-symbol"
    if symbol.lower() == HEADER_SYMBOL_LABEL:
        return None, "header-repeat"

    quantity = _parse_quantity(fields[layout.quantity])
    if quantity is None or quantity == 0:
        return None, "bad-quantity"

    price = _parse_price(fields[layout.price])
    if price is None:
        return None, "bad-price"

    description = _field(fields, layout.description) or None
    trade_date = _field(fields, layout.date)
    trade_time = _field(fields, layout.time) or None

    record = TradeRecord(
        symbol=symbol.upper(),
        side=detect_side(quantity, description),
        quantity=abs(quantity),
        price=price,
        date=trade_date,
        time=trade_time,
        entry_date=to_entry_date(trade_date, trade_time),
        description=description,
    )
    return record, ""


def parse_report(csv_text: str, mapper: Optional[ColumnMapper] = None) -> ParseReport:
    """Parse broker CSV text and report skipped rows.

    Args:
        csv_text: Raw CSV text.
        mapper: Column mapper; defaults to FixedColumnMapper.

    Returns:
        ParseReport with accepted records in input order and the skipped
        rows with their reasons.
    """
    mapper = mapper or FixedColumnMapper()
    accepted: list[TradeRecord] = []
    skipped: list[SkippedRow] = []
    layout: Optional[ColumnLayout] = None

    for line_no, line in enumerate(csv_text.splitlines(), start=1):
        if not line.strip():
            continue

        fields = _split_fields(line)

        if layout is None:
            if mapper.is_header(fields):
                layout = mapper.bind(fields)
            continue

        record, reason = _parse_row(fields, layout)
        if record is None:
            logger.debug("Skipping line %d (%s): %r", line_no, reason, line)
            skipped.append(SkippedRow(line=line_no, reason=reason, text=line))
        else:
            accepted.append(record)

    if layout is None:
        logger.info("No header row found; no trades parsed")
    else:
        logger.info("Parsed %d trades, skipped %d rows", len(accepted), len(skipped))

    return ParseReport(accepted=accepted, skipped=skipped)


def parse_trades(csv_text: str, mapper: Optional[ColumnMapper] = None) -> list[TradeRecord]:
    """Parse broker CSV text into trade records.

    Never raises for malformed input; unreadable rows are left out.

    Args:
        csv_text: Raw CSV text.
        mapper: Column mapper; defaults to FixedColumnMapper.

    Returns:
        Trade records in input order (possibly empty).
    """
    return parse_report(csv_text, mapper).accepted
