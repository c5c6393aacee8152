"""Conversion utilities for note dates and ciphertext fields."""

import base64
import binascii
import datetime
import re

# Fixed width, zero padded: 05.07.2021
DATE_FORMAT = "%d.%m.%Y"
_DATE_RE = re.compile(r"[0-9]{2}\.[0-9]{2}\.[0-9]{4}")


def format_date(value: datetime.date) -> str:
    """Format a date as DD.MM.YYYY."""
    return f"{value.day:02d}.{value.month:02d}.{value.year:04d}"


def parse_date(text: str) -> datetime.date:
    """Parse a DD.MM.YYYY string strictly.

    Unpadded forms like "1.1.2021", surrounding whitespace and impossible
    dates like 31.02.2021 are rejected.

    Raises:
        ValueError: If the text is not a valid fixed-width date
    """
    if not _DATE_RE.fullmatch(text):
        raise ValueError(f"Date must be in DD.MM.YYYY format: {text!r}")
    return datetime.datetime.strptime(text, DATE_FORMAT).date()


def encode_field(data: bytes) -> str:
    """Encode ciphertext as base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode_field(text: str) -> bytes:
    """Decode base64 text back to ciphertext.

    Raises:
        ValueError: If the text is not valid base64
    """
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid base64 data: {e}") from e
