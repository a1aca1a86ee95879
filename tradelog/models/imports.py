"""Import result models."""

from pydantic import BaseModel, Field

from tradelog.models.trade import TradeRecord


class SkippedRow(BaseModel):
    """A CSV line the parser dropped, with the reason."""

    line: int = Field(..., ge=1, description="1-based line number in the input")
    reason: str = Field(..., description="Short machine-readable reason")
    text: str = Field(default="", description="Raw line text")

    model_config = {"frozen": True}


class ParseReport(BaseModel):
    """Accepted records plus the rows that were skipped."""

    accepted: list[TradeRecord] = Field(default_factory=list)
    skipped: list[SkippedRow] = Field(default_factory=list)

    model_config = {"frozen": True}


class ImportResult(BaseModel):
    """Outcome of an import reported back to the user."""

    saved_count: int = Field(..., ge=0, alias="savedCount")
    preview: list[TradeRecord] = Field(default_factory=list, max_length=3)
    skipped_count: int = Field(default=0, ge=0, alias="skippedCount")

    model_config = {"frozen": True, "populate_by_name": True}
