"""Search filter for the notes list."""

from collections.abc import Sequence

from oceannotes.models.note import Note


def normalize_query(text: str | None) -> str:
    """
    Normalize raw search text for matching.

    Args:
        text: Text typed in the search field

    Returns:
        The stripped, lower-cased query

    """
    return (text or "").strip().lower()


def filter_notes(notes: Sequence[Note], text: str | None) -> list[Note]:
    """
    Find the notes matching a search string.

    Matching is a case-insensitive substring test against the title or the
    content.  The input sequence is never modified and the relative order of
    the notes is preserved.

    Args:
        notes: Notes to filter
        text: Raw search text; blank means "everything"

    Returns:
        The matching notes, in their original order

    """
    query = normalize_query(text)
    if not query:
        return list(notes)
    return [note for note in notes if note.matches(query)]
