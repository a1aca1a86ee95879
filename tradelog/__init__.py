"""tradelog - trade journal for broker CSV exports."""

__version__ = "0.1.0"
