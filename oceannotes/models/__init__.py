"""Data models for Ocean Notes."""

from oceannotes.models.note import Note, NotePatch

__all__ = ["Note", "NotePatch"]
