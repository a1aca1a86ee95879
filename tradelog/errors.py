"""Exception types for tradelog."""


class TradelogError(Exception):
    """Base class for all tradelog errors."""


class UnsupportedFormatError(TradelogError):
    """Raised when an uploaded file is not CSV text (e.g. a spreadsheet)."""


class StoreError(TradelogError):
    """Base class for trade store failures."""


class StoreUnavailableError(StoreError):
    """Raised when the backing key-value store cannot be reached."""


class StoreCorruptedError(StoreError):
    """Raised when the stored trade collection cannot be decoded."""


class ConfigError(TradelogError):
    """Raised when the configuration file is malformed."""


class ManualTradeError(TradelogError, ValueError):
    """Raised when a manually entered trade fails validation."""
