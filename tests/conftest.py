"""Shared pytest fixtures and test helpers for Ocean Notes tests."""

import asyncio
import os

import httpx
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from oceannotes.exc import RequestError, UnreachableError  # noqa: E402
from oceannotes.models.note import Note, NotePatch  # noqa: E402
from oceannotes.services.client import Health, NotesClient  # noqa: E402

BASE_URL = "http://notes.test"


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for testing PySide6 widgets."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


# Test helper functions (not fixtures, but available for import)


def make_client(handler) -> NotesClient:
    """
    Helper to build a client whose requests are answered by ``handler``.

    Args:
        handler: Function (sync or async) taking an ``httpx.Request`` and
            returning an ``httpx.Response``

    Returns:
        NotesClient bound to :data:`BASE_URL`
    """
    return NotesClient(BASE_URL, transport=httpx.MockTransport(handler))


def make_notes(*rows) -> tuple[Note, ...]:
    """
    Helper to build confirmed notes from ``(id, title)`` or
    ``(id, title, content)`` tuples.
    """
    return tuple(Note(*row) for row in rows)


class FakeClient:
    """
    In-memory stand-in for :class:`NotesClient`.

    Every call is recorded in :attr:`calls`.  By default calls succeed at
    once; a test can make a call fail by setting ``fail_<operation>`` to an
    exception, or hold it by setting ``gate_<operation>`` to an
    ``asyncio.Event`` that it sets when the call should resolve.
    """

    base_url = BASE_URL

    def __init__(self, notes=()):
        self.server_notes = list(notes)
        self.next_id = max((n.id for n in self.server_notes), default=0) + 1
        self.calls: list[tuple] = []
        self.health = Health("ok")
        self.fail_health: Exception | None = None
        self.fail_list: Exception | None = None
        self.fail_create: Exception | None = None
        self.fail_update: Exception | None = None
        self.fail_remove: Exception | None = None
        self.gate_create: asyncio.Event | None = None
        self.gate_update: asyncio.Event | None = None
        self.gate_remove: asyncio.Event | None = None
        #: Queue of (gate, result-or-exception) consumed by list_all calls.
        self.list_responses: list[tuple[asyncio.Event | None, object]] = []
        self.closed = False

    async def _wait(self, gate):
        if gate is not None:
            await gate.wait()

    async def check_health(self):
        self.calls.append(("health",))
        if self.fail_health is not None:
            raise self.fail_health
        return self.health

    async def list_all(self, token=None):
        self.calls.append(("list",))
        if self.list_responses:
            gate, result = self.list_responses.pop(0)
            await self._wait(gate)
        else:
            result = self.fail_list or list(self.server_notes)
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def create(self, title, content=""):
        self.calls.append(("create", title, content))
        await self._wait(self.gate_create)
        if self.fail_create is not None:
            raise self.fail_create
        note = Note(self.next_id, title, content)
        self.next_id += 1
        self.server_notes.append(note)
        return note

    async def update(self, note_id, patch: NotePatch):
        self.calls.append(("update", note_id, patch))
        await self._wait(self.gate_update)
        if self.fail_update is not None:
            raise self.fail_update
        for index, note in enumerate(self.server_notes):
            if note.id == note_id:
                self.server_notes[index] = note.patched(patch)
                return self.server_notes[index]
        raise RequestError(404, "not_found")

    async def remove(self, note_id):
        self.calls.append(("remove", note_id))
        await self._wait(self.gate_remove)
        if self.fail_remove is not None:
            raise self.fail_remove
        self.server_notes = [n for n in self.server_notes if n.id != note_id]
        return True

    async def aclose(self):
        self.closed = True

    def network_calls(self, kind=None):
        """Return recorded calls, optionally only those of one kind."""
        if kind is None:
            return list(self.calls)
        return [call for call in self.calls if call[0] == kind]


def server_error(status=500, message="Internal Server Error"):
    """Helper returning a RequestError as the client would raise it."""
    return RequestError(status, f"{status} {message}")


def unreachable():
    """Helper returning an UnreachableError as the client would raise it."""
    return UnreachableError(BASE_URL, "connection refused")
