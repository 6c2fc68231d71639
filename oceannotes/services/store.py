"""Client-side note store with optimistic updates."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from PySide6.QtCore import QObject, Signal

from oceannotes.exc import (
    Cancelled,
    ConflictError,
    DoesNotExist,
    NotesError,
    ValidationError,
)
from oceannotes.models.note import Note, NotePatch
from oceannotes.services.client import CancelToken

if TYPE_CHECKING:
    from oceannotes.services.client import NotesClient

logger = logging.getLogger(__name__)


class NoteStore(QObject):
    """
    The single in-memory source of truth for notes during a session.

    The store owns the ordered note collection, the selection, and the
    error and progress flags the UI displays.  Every mutating operation
    follows the same shape: snapshot the collection, apply the change
    locally, call the service, then either keep the change (replacing local
    data with the service's answer) or put the snapshot back.

    The collection is an immutable tuple that is replaced, never modified,
    so a snapshot is just a reference and readers on other threads always
    see a consistent list.  All mutation must happen on one thread, the
    one running the event loop the operations are awaited on.

    Operations never raise: they return ``True`` on success and ``False``
    on failure, recording the failure in :attr:`last_error` and
    :attr:`error_message`.

    Args:
        client: Client for the notes service

    Keyword Args:
        parent: Parent QObject

    """

    #: Offset added to the largest known ID to build a temporary ID.
    TEMP_ID_OFFSET: Final[int] = 1_000_000

    #: Emitted whenever :attr:`notes` is replaced.
    notes_changed = Signal()
    #: Emitted whenever :attr:`selected_id` changes.
    selection_changed = Signal()
    #: Emitted with the new :attr:`error_message` ("" when cleared).
    error_changed = Signal(str)
    #: Emitted with the new value of :attr:`loading`.
    loading_changed = Signal(bool)
    #: Emitted with the new value of :attr:`saving`.
    saving_changed = Signal(bool)
    #: Emitted with the new value of :attr:`health`.
    health_changed = Signal(bool)

    def __init__(self, client: NotesClient, parent: QObject | None = None) -> None:
        super().__init__(parent)
        #: The notes service client.
        self.client = client
        #: The notes, in display order.
        self._notes: tuple[Note, ...] = ()
        #: The selected note ID, or None when composing a new note.
        self._selected_id: int | None = None
        #: The last operation error, or None.
        self.last_error: NotesError | None = None
        #: Display string for :attr:`last_error` ("" when there is none).
        self.error_message = ""
        #: Whether the service last reported itself healthy (None if unknown).
        self.health: bool | None = None
        #: Token of the refresh currently in flight.
        self._refresh_token: CancelToken | None = None
        #: Number of create/update operations in flight.
        self._saving_count = 0
        #: IDs of notes with an update or delete in flight.
        self._busy: set[int] = set()

    # ---------------------------------------------------------------
    # State
    # ---------------------------------------------------------------

    @property
    def notes(self) -> tuple[Note, ...]:
        """The notes, in display order."""
        return self._notes

    @property
    def selected_id(self) -> int | None:
        """ID of the selected note, or None when composing a new note."""
        return self._selected_id

    @property
    def selected_note(self) -> Note | None:
        """The selected note, or None."""
        return self.find(self._selected_id)

    @property
    def loading(self) -> bool:
        """Whether a refresh is in flight."""
        return self._refresh_token is not None

    @property
    def saving(self) -> bool:
        """Whether any create or update is in flight."""
        return self._saving_count > 0

    def find(self, note_id: int | None) -> Note | None:
        """
        Find a note by ID.

        Args:
            note_id: Note ID, or None

        Returns:
            The note, or None if it is not in the collection

        """
        if note_id is None:
            return None
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def _set_notes(self, notes: tuple[Note, ...]) -> None:
        self._notes = notes
        self.notes_changed.emit()

    def _set_selected(self, note_id: int | None) -> None:
        if note_id == self._selected_id:
            return
        self._selected_id = note_id
        self.selection_changed.emit()

    def _clear_error(self) -> None:
        if self.last_error is None:
            return
        self.last_error = None
        self.error_message = ""
        self.error_changed.emit("")

    def _fail(self, action: str, error: NotesError) -> bool:
        """
        Record an operation failure.

        Args:
            action: What was being attempted, e.g. ``"create note"``
            error: The failure

        Returns:
            False, so callers can ``return self._fail(...)``

        """
        if isinstance(error, (ValidationError, ConflictError, DoesNotExist)):
            message = str(error)
        else:
            message = f"Failed to {action}: {error!s}"
        logger.warning(message)
        self.last_error = error
        self.error_message = message
        self.error_changed.emit(message)
        return False

    def _begin_saving(self) -> None:
        self._saving_count += 1
        if self._saving_count == 1:
            self.saving_changed.emit(True)

    def _end_saving(self) -> None:
        self._saving_count -= 1
        if self._saving_count == 0:
            self.saving_changed.emit(False)

    def _check_mutable(self, note_id: int) -> Note:
        """
        Check that a note may be updated or deleted right now.

        Args:
            note_id: ID of the note

        Raises:
            DoesNotExist: The note is not in the collection
            ConflictError: The note is pending or already being changed

        Returns:
            The note

        """
        note = self.find(note_id)
        if note is None:
            raise DoesNotExist("Note", note_id)
        if note.pending:
            raise ConflictError(note_id, "has not been saved yet")
        if note_id in self._busy:
            raise ConflictError(note_id)
        return note

    def _confirm(self, temporary_id: int, created: Note) -> tuple[Note, ...]:
        """
        Swap a pending note for the note the service created.

        The confirmed note takes the pending note's position.  Any other
        entry already carrying the server ID (say, from a refresh that landed
        in between) is dropped so IDs stay unique.  If the pending note is
        gone, the confirmed note goes to the head of the collection.

        Args:
            temporary_id: ID of the pending note
            created: Note returned by the service

        Returns:
            The new collection

        """
        confirmed: list[Note] = []
        replaced = False
        for note in self._notes:
            if note.id == temporary_id and not replaced:
                confirmed.append(created)
                replaced = True
            elif note.id != created.id:
                confirmed.append(note)
        if not replaced:
            confirmed.insert(0, created)
        return tuple(confirmed)

    def _temporary_id(self) -> int:
        return max((note.id for note in self._notes), default=0) + self.TEMP_ID_OFFSET

    @staticmethod
    def _validate_title(title: str | None) -> None:
        if title is not None and not title.strip():
            msg = "Title is required"
            raise ValidationError(msg)

    # ---------------------------------------------------------------
    # Operations
    # ---------------------------------------------------------------

    def select(self, note_id: int | None) -> None:
        """
        Select a note, or pass None to compose a new one.

        Selecting an ID that is not in the collection clears the selection.

        Args:
            note_id: ID of the note to select, or None

        """
        if note_id is not None and self.find(note_id) is None:
            note_id = None
        self._set_selected(note_id)

    async def check_health(self) -> bool:
        """
        Ask the service whether it is healthy and record the answer.

        Returns:
            True if the service reported ``"ok"``

        """
        try:
            health = await self.client.check_health()
        except NotesError as e:
            logger.warning(f"Health check failed: {e}")
            self.health = False
        else:
            self.health = health.ok
        self.health_changed.emit(self.health)
        return self.health

    async def refresh(self) -> bool:
        """
        Reload the whole collection from the service.

        A refresh that is still in flight when another one starts is
        cancelled, and whatever it eventually returns is ignored.  On failure
        the current collection is left as it is.

        Returns:
            True if this refresh's result was applied

        """
        if self._refresh_token is not None:
            self._refresh_token.cancel()
        token = CancelToken()
        was_loading = self.loading
        self._refresh_token = token
        self._clear_error()
        if not was_loading:
            self.loading_changed.emit(True)
        try:
            notes = await self.client.list_all(token)
        except Cancelled:
            logger.debug("Superseded refresh cancelled")
            return False
        except NotesError as e:
            if token.cancelled:
                return False
            return self._fail("list notes", e)
        finally:
            if self._refresh_token is token:
                self._refresh_token = None
                self.loading_changed.emit(False)
        if token.cancelled:
            logger.debug("Discarding result of superseded refresh")
            return False
        ordered = tuple(sorted(notes, key=lambda note: note.id, reverse=True))
        logger.info(f"Loaded {len(ordered)} notes")
        self._set_notes(ordered)
        if self._selected_id is not None and self.find(self._selected_id) is None:
            self._set_selected(None)
        return True

    async def create(self, title: str, content: str = "") -> bool:
        """
        Create a note optimistically.

        A pending note with a temporary ID is put at the head of the
        collection straight away.  When the service confirms, it is replaced
        in place by the service's note, which becomes the selection; if the
        service fails, the pending note is removed again.

        Args:
            title: Note title; must not be blank
            content: Note body

        Returns:
            True if the service created the note

        """
        self._clear_error()
        try:
            self._validate_title(title)
        except ValidationError as e:
            return self._fail("create note", e)
        title = title.strip()
        content = content or ""
        optimistic = Note(
            id=self._temporary_id(), title=title, content=content, pending=True
        )
        self._set_notes((optimistic, *self._notes))
        self._begin_saving()
        try:
            created = await self.client.create(title, content)
        except NotesError as e:
            logger.info(f"Rolling back pending note {optimistic.id}")
            self._set_notes(
                tuple(note for note in self._notes if note.id != optimistic.id)
            )
            return self._fail("create note", e)
        finally:
            self._end_saving()
        self._set_notes(self._confirm(optimistic.id, created))
        self._set_selected(created.id)
        logger.info(f"Created note {created.id}")
        return True

    async def update(self, note_id: int, patch: NotePatch) -> bool:
        """
        Update a note optimistically.

        Args:
            note_id: ID of the note
            patch: Fields to change; a title, if given, must not be blank

        Returns:
            True if the service accepted the update

        """
        self._clear_error()
        try:
            self._validate_title(patch.title)
            self._check_mutable(note_id)
        except NotesError as e:
            return self._fail("update note", e)
        if patch.title is not None:
            patch = NotePatch(title=patch.title.strip(), content=patch.content)
        snapshot = self._notes
        self._set_notes(
            tuple(
                note.patched(patch) if note.id == note_id else note
                for note in snapshot
            )
        )
        self._busy.add(note_id)
        self._begin_saving()
        try:
            updated = await self.client.update(note_id, patch)
        except NotesError as e:
            logger.info(f"Rolling back update of note {note_id}")
            self._set_notes(snapshot)
            return self._fail("update note", e)
        finally:
            self._busy.discard(note_id)
            self._end_saving()
        self._set_notes(
            tuple(updated if note.id == note_id else note for note in self._notes)
        )
        logger.info(f"Updated note {note_id}")
        return True

    async def delete(self, note_id: int) -> bool:
        """
        Delete a note optimistically.

        The note disappears (and is deselected) immediately; if the service
        fails, the collection is restored as it was before the call.

        Args:
            note_id: ID of the note

        Returns:
            True if the service deleted the note

        """
        self._clear_error()
        try:
            self._check_mutable(note_id)
        except NotesError as e:
            return self._fail("delete note", e)
        snapshot = self._notes
        self._set_notes(tuple(note for note in snapshot if note.id != note_id))
        if self._selected_id == note_id:
            self._set_selected(None)
        self._busy.add(note_id)
        try:
            await self.client.remove(note_id)
        except NotesError as e:
            logger.info(f"Rolling back delete of note {note_id}")
            self._set_notes(snapshot)
            return self._fail("delete note", e)
        finally:
            self._busy.discard(note_id)
        logger.info(f"Deleted note {note_id}")
        return True

    async def aclose(self) -> None:
        """Cancel any refresh in flight and close the client."""
        if self._refresh_token is not None:
            self._refresh_token.cancel()
        await self.client.aclose()
