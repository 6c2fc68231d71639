"""Notes list UI component."""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QMouseEvent
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QSpacerItem,
    QVBoxLayout,
    QWidget,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from oceannotes.models.note import Note


class NoteItem(QFrame):
    """
    One entry of the notes list.

    Pending notes show a "(saving…)" marker and cannot be edited or deleted.

    Args:
        note: Note to display
        parent: Parent widget

    """

    edit_requested = Signal(int)  # Emits note ID
    delete_requested = Signal(int)  # Emits note ID

    def __init__(self, note: Note, parent: QWidget | None = None):
        super().__init__(parent)
        self.note = note
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self._setup_ui()

    def _setup_ui(self) -> None:
        """Set up the UI layout."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(4)

        title = html.escape(self.note.display_title)
        if self.note.pending:
            title += ' <span style="font-size: 10pt; color: #888;">(saving…)</span>'
        self.title_label = QLabel(title)
        self.title_label.setFont(QFont("Helvetica", 13, QFont.Weight.Bold))
        self.title_label.setTextFormat(Qt.TextFormat.RichText)
        layout.addWidget(self.title_label)

        self.content_label = QLabel(self.note.preview())
        self.content_label.setTextFormat(Qt.TextFormat.PlainText)
        self.content_label.setWordWrap(True)
        self.content_label.setStyleSheet("color: #444;")
        layout.addWidget(self.content_label)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self.edit_button = QPushButton("Edit")
        self.edit_button.clicked.connect(lambda: self.edit_requested.emit(self.note.id))
        buttons.addWidget(self.edit_button)
        self.delete_button = QPushButton("Delete")
        self.delete_button.setAccessibleName(
            f"Delete note {self.note.title or self.note.id}"
        )
        self.delete_button.clicked.connect(
            lambda: self.delete_requested.emit(self.note.id)
        )
        buttons.addWidget(self.delete_button)
        layout.addLayout(buttons)

        self.edit_button.setEnabled(not self.note.pending)
        self.delete_button.setEnabled(not self.note.pending)

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        """Handle mouse double-click event."""
        if event.button() == Qt.MouseButton.LeftButton and not self.note.pending:
            self.edit_requested.emit(self.note.id)
        super().mouseDoubleClickEvent(event)


class NotesPanel(QWidget):
    """
    Widget displaying the (already filtered) list of notes.

    Args:
        parent: Parent widget

    """

    edit_requested = Signal(int)  # Emits note ID
    delete_requested = Signal(int)  # Emits note ID

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        #: The items currently shown.
        self.note_items: list[NoteItem] = []
        #: The empty-state label, when shown.
        self.empty_label: QLabel | None = None
        self._setup_ui()

    def _setup_ui(self) -> None:
        """Set up the UI layout."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

    def _show_empty(self, text: str) -> None:
        layout = self.layout()
        empty_label = QLabel(text)
        empty_label.setObjectName("empty")
        empty_label.setStyleSheet("color: #666; font-style: italic;")
        empty_label.setFont(QFont("Helvetica", 11))
        layout.addWidget(empty_label)
        self.empty_label = empty_label

    def update_notes(self, notes: Sequence[Note], loading: bool = False) -> None:
        """
        Update the list display.

        Args:
            notes: Notes to show, in display order

        Keyword Args:
            loading: Whether a refresh is in flight

        """
        for item in self.note_items:
            item.deleteLater()
        self.note_items.clear()
        self.empty_label = None

        layout = self.layout()
        if layout is None:
            return

        # Clear layout
        while layout.count():
            child = layout.takeAt(0)
            widget = child.widget()
            if widget:
                widget.deleteLater()

        if not notes:
            self._show_empty("Loading notes…" if loading else "No notes found.")
            return

        for note in notes:
            item = NoteItem(note, self)
            item.edit_requested.connect(self.edit_requested.emit)
            item.delete_requested.connect(self.delete_requested.emit)
            layout.addWidget(item)
            self.note_items.append(item)

        spacer = QSpacerItem(
            20, 40, QSizePolicy.Policy.Minimum, QSizePolicy.Policy.Expanding
        )
        layout.addItem(spacer)
