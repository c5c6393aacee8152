import datetime

import pytest

from cryptnotes import crypto
from cryptnotes.store import NoteStore

PASSWORD = "correct horse"


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    # Full-strength PBKDF2 makes every encrypt call take a noticeable time
    monkeypatch.setattr(crypto, "PBKDF2_ITERATIONS", 1000)


@pytest.fixture
def store():
    notes = NoteStore()
    notes.add(datetime.date(2021, 1, 1), "A", "X", PASSWORD)
    notes.add(datetime.date(2020, 5, 5), "B", "Y", PASSWORD)
    return notes
