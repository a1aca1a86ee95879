"""TradeRecord data model."""

import re
from typing import Literal, Optional
from pydantic import BaseModel, Field

_TIME_SEPARATOR = re.compile(r"(?:T|\s+)\d{1,2}:\d{2}")


class TradeRecord(BaseModel):
    """Represents one parsed fill (entry or exit) from a broker export."""

    id: Optional[str] = Field(default=None, description="Store-assigned identifier")
    symbol: str = Field(..., min_length=1, description="Ticker symbol (uppercase)")
    side: Literal["BUY", "SELL"] = Field(..., description="Fill side")
    quantity: int = Field(..., gt=0, description="Shares or contracts")
    price: float = Field(..., gt=0, description="Fill price")
    date: str = Field(..., description="Date as written in the export")
    time: Optional[str] = Field(default=None, description="Time of day as written in the export")
    entry_date: str = Field(
        ..., alias="entryDate", description="ISO 8601 entry timestamp"
    )
    description: Optional[str] = Field(default=None, description="Source annotation")
    net_pnl: Optional[float] = Field(
        default=None, alias="netPnL", description="Realized P&L after fees"
    )
    exit_price: Optional[float] = Field(
        default=None, gt=0, alias="exitPrice", description="Exit price (manual trades)"
    )
    exit_date: Optional[str] = Field(
        default=None, alias="exitDate", description="ISO 8601 exit timestamp"
    )
    notes: Optional[str] = Field(default=None, description="Journal notes")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def position_side(self) -> str:
        """Side normalized to LONG/SHORT."""
        return "LONG" if self.side == "BUY" else "SHORT"

    @property
    def trade_date(self) -> str:
        """Date portion of the entry timestamp, used as the aggregation key."""
        return _TIME_SEPARATOR.split(self.entry_date, maxsplit=1)[0].strip()

    @property
    def pnl(self) -> float:
        """Realized P&L with a missing value counted as zero."""
        return self.net_pnl if self.net_pnl is not None else 0.0
