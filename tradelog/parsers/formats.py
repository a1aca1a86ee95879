"""Upload format gate.

Rejects files that are not delimited text before they reach the CSV
parser. The parser itself never raises, so this is the only place an
import can fail because of the file's contents.
"""

import logging
from pathlib import PurePath
from typing import Optional

from tradelog.errors import UnsupportedFormatError

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSIONS = {".xlsx", ".xlsm", ".xls", ".ods", ".numbers"}

# ZIP container (xlsx, ods, numbers) and OLE2 compound file (legacy xls)
BINARY_SIGNATURES = (
    b"PK\x03\x04",
    b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",
)


def ensure_supported(data: bytes, filename: Optional[str] = None) -> None:
    """Raise if the upload is a spreadsheet or other binary file.

    Args:
        data: Raw file bytes.
        filename: Optional original file name, used for its extension.

    Raises:
        UnsupportedFormatError: If the file is not CSV text.
    """
    if filename:
        suffix = PurePath(filename).suffix.lower()
        if suffix in SPREADSHEET_EXTENSIONS:
            raise UnsupportedFormatError(
                f"{suffix} files are not supported. Export the statement as CSV and try again."
            )

    if data.startswith(BINARY_SIGNATURES):
        raise UnsupportedFormatError(
            "Spreadsheet files are not supported. Export the statement as CSV and try again."
        )

    if b"\x00" in data[:4096]:
        raise UnsupportedFormatError("Binary files are not supported. Upload a CSV export.")


def decode_upload(data: bytes, filename: Optional[str] = None) -> str:
    """Validate an upload and decode it as UTF-8 text.

    A leading byte-order mark is dropped and undecodable bytes are
    replaced rather than rejected.

    Args:
        data: Raw file bytes.
        filename: Optional original file name.

    Returns:
        Decoded CSV text.

    Raises:
        UnsupportedFormatError: If the file is not CSV text.
    """
    ensure_supported(data, filename)
    text = data.decode("utf-8-sig", errors="replace")
    if "\ufffd" in text:
        logger.warning("Upload %s contained non-UTF-8 bytes; they were replaced", filename or "<data>")
    return text
