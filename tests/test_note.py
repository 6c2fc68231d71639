"""Unit tests for Note model."""

import pytest

from oceannotes.models.note import Note, NotePatch


class TestNote:
    """Test cases for Note model."""

    def test_from_json_with_all_fields(self):
        """Test building a note from a full service payload."""
        note = Note.from_json({"id": 3, "title": "T", "content": "C", "extra": 1})
        assert note == Note(3, "T", "C")
        assert note.pending is False

    def test_from_json_defaults_missing_content(self):
        """Test a missing or null content becomes an empty string."""
        assert Note.from_json({"id": 1, "title": "T"}).content == ""
        assert Note.from_json({"id": 1, "title": "T", "content": None}).content == ""

    def test_from_json_accepts_numeric_string_id(self):
        """Test IDs sent as strings are converted."""
        assert Note.from_json({"id": "12", "title": "T"}).id == 12

    def test_from_json_accepts_integral_float_id(self):
        """Test IDs sent as whole-number floats are converted."""
        assert Note.from_json({"id": 7.0, "title": "T"}).id == 7

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            {"title": "no id"},
            {"id": True},
            {"id": [5]},
            {"id": {}},
            {"id": 1.9},
            {"id": "1.9"},
            {"id": "abc"},
            {"id": ""},
        ],
    )
    def test_from_json_rejects_bad_payloads(self, data):
        """Test payloads without a usable ID are rejected."""
        with pytest.raises(ValueError):
            Note.from_json(data)

    def test_patched_changes_only_given_fields(self):
        """Test applying a partial patch."""
        note = Note(1, "T", "C")
        assert note.patched(NotePatch(title="U")) == Note(1, "U", "C")
        assert note.patched(NotePatch(content="")) == Note(1, "T", "")
        assert note.patched(NotePatch()) is note

    def test_matches_title_or_content(self):
        """Test case-insensitive substring matching."""
        note = Note(1, "Shopping List", "Milk and EGGS")
        assert note.matches("list")
        assert note.matches("eggs")
        assert not note.matches("bread")

    def test_preview(self):
        """Test content previews."""
        assert Note(1, "T").preview() == "No content"
        assert Note(1, "T", "short").preview() == "short"
        long_text = "x" * 200
        assert Note(1, "T", long_text).preview() == "x" * 180 + "…"
        assert Note(1, "T", "abcdef").preview(limit=3) == "abc…"

    def test_display_title(self):
        """Test blank titles display as "Untitled"."""
        assert Note(1, "").display_title == "Untitled"
        assert Note(1, "Title").display_title == "Title"


class TestNotePatch:
    """Test cases for NotePatch."""

    def test_as_payload_skips_unset_fields(self):
        """Test only set fields are sent."""
        assert NotePatch().as_payload() == {}
        assert NotePatch(title="T").as_payload() == {"title": "T"}
        assert NotePatch(content="").as_payload() == {"content": ""}
        assert NotePatch("T", "C").as_payload() == {"title": "T", "content": "C"}
