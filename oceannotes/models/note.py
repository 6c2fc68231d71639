"""Note model."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, ClassVar


@dataclass(frozen=True)
class NotePatch:
    """
    A partial update to a note.

    Fields left as ``None`` are not sent to the server and are not touched
    when the patch is applied locally.
    """

    #: The new title, if changing.
    title: str | None = None
    #: The new content, if changing.
    content: str | None = None

    def as_payload(self) -> dict[str, str]:
        """
        Build the JSON body for ``PUT /api/notes/{id}``.

        Returns:
            Dictionary with only the fields that are set

        """
        payload: dict[str, str] = {}
        if self.title is not None:
            payload["title"] = self.title
        if self.content is not None:
            payload["content"] = self.content
        return payload


@dataclass(frozen=True)
class Note:
    """
    Represents a note.

    A note is either confirmed by the notes service, in which case ``id`` is
    the server-assigned ID, or pending, in which case ``id`` is a temporary
    ID synthesized locally while the create request is in flight.
    """

    #: Number of characters shown in list previews.
    PREVIEW_LENGTH: ClassVar[int] = 180

    #: The note ID.
    id: int
    #: The note title.
    title: str
    #: The note body.
    content: str = ""
    #: Whether the note is an optimistic create awaiting confirmation.
    pending: bool = False

    @classmethod
    def from_json(cls, data: Any) -> Note:
        """
        Build a note from a decoded JSON object.

        Unknown keys are ignored; a missing or null ``content`` becomes an
        empty string.

        Args:
            data: Decoded JSON object

        Raises:
            ValueError: ``data`` is not an object or has no usable ``id``

        Returns:
            A confirmed note

        """
        if not isinstance(data, dict):
            msg = f"Expected a note object, got {type(data).__name__}"
            raise ValueError(msg)  # noqa: TRY004
        return cls(
            id=cls._parse_id(data.get("id")),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
        )

    @staticmethod
    def _parse_id(raw_id: Any) -> int:
        """
        Convert a JSON ``id`` into an integer.

        Integers, integral floats and decimal strings are accepted.

        Raises:
            ValueError: ``raw_id`` is anything else

        """
        if isinstance(raw_id, int) and not isinstance(raw_id, bool):
            return raw_id
        if isinstance(raw_id, float) and raw_id.is_integer():
            return int(raw_id)
        if isinstance(raw_id, str) and raw_id.strip().isdecimal():
            return int(raw_id)
        msg = f"Note object has no usable id: {raw_id!r}"
        raise ValueError(msg)

    def patched(self, patch: NotePatch) -> Note:
        """
        Return a copy of this note with ``patch`` applied.

        Args:
            patch: Fields to change

        Returns:
            The patched note

        """
        changes = patch.as_payload()
        if not changes:
            return self
        return replace(self, **changes)

    def matches(self, query: str) -> bool:
        """
        Check whether the note matches a search query.

        The match is a case-insensitive substring test against the title or
        the content.  ``query`` is expected to be already lower-cased.

        Args:
            query: Lower-cased search text

        Returns:
            True if the title or content contains ``query``

        """
        return query in self.title.lower() or query in self.content.lower()

    @property
    def display_title(self) -> str:
        """The title, or ``"Untitled"`` when blank."""
        return self.title or "Untitled"

    def preview(self, limit: int | None = None) -> str:
        """
        Get a one-paragraph preview of the content for list display.

        Keyword Args:
            limit: Maximum number of characters before truncation

        Returns:
            The content, truncated with an ellipsis, or ``"No content"``

        """
        if limit is None:
            limit = self.PREVIEW_LENGTH
        if not self.content:
            return "No content"
        if len(self.content) > limit:
            return f"{self.content[:limit]}…"
        return self.content
