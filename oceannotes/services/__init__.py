"""Services package initialization."""

from oceannotes.services.client import CancelToken, Health, NotesClient
from oceannotes.services.filter import filter_notes
from oceannotes.services.runner import AsyncRunner
from oceannotes.services.store import NoteStore

__all__ = [
    "AsyncRunner",
    "CancelToken",
    "Health",
    "NoteStore",
    "NotesClient",
    "filter_notes",
]
