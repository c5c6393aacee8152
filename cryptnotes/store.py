"""In-memory note collection kept sorted by date."""

import dataclasses
import datetime
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from . import crypto
from .models import Note

_LOG = logging.getLogger(__name__)


def _require_text(name: str, value: str) -> bytes:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, not {type(value).__name__}")
    if not value:
        raise ValueError(f"{name} must not be empty")
    return value.encode("utf-8")


def _require_date(value: datetime.date) -> datetime.date:
    # datetime is a date subclass but does not compare with plain dates
    if not isinstance(value, datetime.date) or isinstance(value, datetime.datetime):
        raise TypeError(f"date must be a datetime.date, not {type(value).__name__}")
    return value


def _to_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise crypto.DecryptionError("Decrypted text is not valid UTF-8") from e


class NoteStore:
    """Ordered collection of encrypted notes.

    Notes are sorted ascending by date; notes sharing a date stay in the
    order they were inserted. Positions are indexes into that sorted view
    and shift whenever a note is added, removed or re-dated.
    """

    def __init__(self) -> None:
        self._notes: list[Note] = []
        self._lock = threading.RLock()

    @classmethod
    def from_notes(cls, notes: Iterable[Note]) -> "NoteStore":
        """Build a store from already-encrypted notes, sorting them."""
        store = cls()
        store._notes = list(notes)
        for note in store._notes:
            _require_date(note.date)
        store._sort()
        return store

    def __len__(self) -> int:
        with self._lock:
            return len(self._notes)

    def _sort(self) -> None:
        # list.sort is stable
        self._notes.sort(key=lambda note: note.sort_key)

    def _check_position(self, position: int) -> None:
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError(f"Position must be an int, not {type(position).__name__}")
        if not 0 <= position < len(self._notes):
            raise IndexError(f"No note at position {position}")

    def notes(self) -> tuple[Note, ...]:
        """Copies of the notes in sorted order."""
        with self._lock:
            return tuple(dataclasses.replace(note) for note in self._notes)

    def add(
        self,
        date: datetime.date,
        title: str,
        body: str,
        password: str,
    ) -> int:
        """Encrypt and insert a note, returning its position."""
        _require_date(date)
        title_plain = _require_text("title", title)
        body_plain = _require_text("body", body)
        with self._lock:
            note = Note(
                date=date,
                title=crypto.encrypt(title_plain, password),
                body=crypto.encrypt(body_plain, password),
            )
            self._notes.append(note)
            self._sort()
            position = self._position_of(note)
        _LOG.debug("Added note dated %s at position %d", date, position)
        return position

    def _position_of(self, note: Note) -> int:
        for i, candidate in enumerate(self._notes):
            if candidate is note:
                return i
        raise LookupError("Note is not in the store")

    def get(self, position: int, password: str) -> tuple[datetime.date, str, str]:
        """Return (date, title, body) of a note, decrypting both fields."""
        with self._lock:
            self._check_position(position)
            note = self._notes[position]
            title = crypto.decrypt(note.title, password)
            body = crypto.decrypt(note.body, password)
            return note.date, _to_text(title), _to_text(body)

    def list(self, password: str) -> list[tuple[datetime.date, str]]:
        """Return (date, title) for every note; bodies are not decrypted."""
        with self._lock:
            return [
                (note.date, _to_text(crypto.decrypt(note.title, password)))
                for note in self._notes
            ]

    def update_date(self, position: int, new_date: datetime.date) -> int:
        """Change a note's date and re-sort, returning its new position."""
        _require_date(new_date)
        with self._lock:
            self._check_position(position)
            note = self._notes[position]
            note.date = new_date
            self._sort()
            return self._position_of(note)

    def update_title(self, position: int, title: str, password: str) -> None:
        plain = _require_text("title", title)
        with self._lock:
            self._check_position(position)
            ciphertext = crypto.encrypt(plain, password)
            self._notes[position].title = ciphertext

    def update_body(self, position: int, body: str, password: str) -> None:
        plain = _require_text("body", body)
        with self._lock:
            self._check_position(position)
            ciphertext = crypto.encrypt(plain, password)
            self._notes[position].body = ciphertext

    def remove(self, position: int) -> None:
        with self._lock:
            self._check_position(position)
            del self._notes[position]
        _LOG.debug("Removed note at position %d", position)


@dataclass
class Session:
    """Everything one interactive run works on."""

    password: str
    path: Path
    store: NoteStore = field(default_factory=NoteStore)
