"""Data models for cryptnotes."""

from dataclasses import dataclass
import datetime


@dataclass
class Note:
    """A dated note whose title and body are ciphertext."""

    date: datetime.date
    title: bytes
    body: bytes

    @property
    def sort_key(self) -> datetime.date:
        """Notes are ordered by date alone; ties keep insertion order."""
        return self.date
