"""JSON persistence layer for the encrypted note store."""

import json
import logging
import os
import tempfile
from pathlib import Path

from .convert import decode_field, encode_field, format_date, parse_date
from .models import Note
from .store import NoteStore

_LOG = logging.getLogger(__name__)

# Default notes file, relative to the working directory
DATA_FILE_NAME = "notes_data.json"

FORMAT_VERSION = 1
_RECORD_KEYS = frozenset({"date", "title", "body"})


class NotesDBError(Exception):
    """Base exception for notes file errors."""
    pass


class MalformedDataError(NotesDBError):
    """Notes file content is structurally invalid."""
    pass


class StorageIOError(NotesDBError):
    """Notes file could not be read or written."""
    pass


def _record_to_dict(note: Note) -> dict:
    return {
        "date": format_date(note.date),
        "title": encode_field(note.title),
        "body": encode_field(note.body),
    }


def _record_from_dict(index: int, record: object) -> Note:
    if not isinstance(record, dict):
        raise MalformedDataError(f"Record {index} is not an object")
    if set(record) != _RECORD_KEYS:
        raise MalformedDataError(
            f"Record {index} must have exactly the fields date, title, body; "
            f"got {sorted(record)}"
        )

    fields = {}
    for key in ("date", "title", "body"):
        if not isinstance(record[key], str):
            raise MalformedDataError(f"Record {index}: {key} must be a string")
        fields[key] = record[key]

    try:
        date = parse_date(fields["date"])
    except ValueError as e:
        raise MalformedDataError(f"Record {index}: {e}") from e

    ciphertexts = {}
    for key in ("title", "body"):
        try:
            data = decode_field(fields[key])
        except ValueError as e:
            raise MalformedDataError(f"Record {index}: {key}: {e}") from e
        if not data:
            raise MalformedDataError(f"Record {index}: {key} is empty")
        ciphertexts[key] = data

    return Note(date=date, title=ciphertexts["title"], body=ciphertexts["body"])


def save(store: NoteStore) -> bytes:
    """Serialize a store to UTF-8 JSON, notes in their sorted order."""
    document = {
        "version": FORMAT_VERSION,
        "notes": [_record_to_dict(note) for note in store.notes()],
    }
    return json.dumps(document, indent=2).encode("utf-8")


def load(data: bytes | None) -> NoteStore:
    """Parse bytes produced by :func:`save` into a store.

    Empty input gives an empty store. Records out of date order are
    re-sorted.

    Raises:
        MalformedDataError: If the data is not a valid notes document
    """
    if data is None or not data.strip():
        return NoteStore()

    try:
        document = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MalformedDataError(f"Notes file is not UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise MalformedDataError(f"Notes file is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise MalformedDataError("Notes file must contain a JSON object")
    version = document.get("version")
    if version != FORMAT_VERSION:
        raise MalformedDataError(f"Unsupported notes file version: {version!r}")
    records = document.get("notes")
    if not isinstance(records, list):
        raise MalformedDataError("Notes file has no notes list")

    notes = [_record_from_dict(i, record) for i, record in enumerate(records)]
    return NoteStore.from_notes(notes)


def read_store(path: Path) -> NoteStore:
    """Load the store from a file; a missing or empty file is an empty store.

    Raises:
        MalformedDataError: If the file content is invalid
        StorageIOError: If the file exists but cannot be read
    """
    path = Path(path)
    if not path.exists():
        _LOG.info("Notes file %s does not exist, starting empty", path)
        return NoteStore()

    try:
        data = path.read_bytes()
    except OSError as e:
        raise StorageIOError(f"Cannot read notes file {path}: {e}") from e

    store = load(data)
    _LOG.info("Loaded %d notes from %s", len(store), path)
    return store


def write_store(path: Path, store: NoteStore) -> None:
    """Write the store to a file atomically.

    Raises:
        StorageIOError: If the file cannot be written
    """
    path = Path(path)
    data = save(store)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb", dir=path.parent, prefix=f".{path.name}.", delete=False
        ) as f:
            temp_path = f.name
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except OSError as e:
        if temp_path is not None and os.path.exists(temp_path):
            os.unlink(temp_path)
        raise StorageIOError(f"Cannot write notes file {path}: {e}") from e

    _LOG.info("Saved %d notes to %s", len(store), path)
