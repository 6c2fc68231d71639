"""Editor form for creating and editing notes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from PySide6.QtCore import Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

if TYPE_CHECKING:
    from oceannotes.models.note import Note


class NoteForm(QWidget):
    """
    Form bound to the selected note, or blank for composing a new one.

    The form only validates and reports what the user typed; the window
    decides whether a submission is a create or an update.

    Args:
        parent: Parent widget

    """

    #: Maximum title length accepted by the title field.
    TITLE_MAX_LENGTH: Final[int] = 200

    submitted = Signal(str, str)  # Emits (title, content)
    cancelled = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        #: The note being edited, or None when composing.
        self.note: Note | None = None
        #: Whether a save is in flight.
        self.saving = False
        self._setup_ui()

    @property
    def is_editing(self) -> bool:
        """Whether the form is bound to an existing note."""
        return self.note is not None

    def _setup_ui(self) -> None:
        """Set up the UI layout."""
        layout = QVBoxLayout(self)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #c0392b;")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        title_label = QLabel("Title")
        title_label.setFont(QFont("Helvetica", 12))
        layout.addWidget(title_label)
        self.title_edit = QLineEdit()
        self.title_edit.setMaxLength(self.TITLE_MAX_LENGTH)
        self.title_edit.setPlaceholderText("Enter a descriptive title")
        self.title_edit.returnPressed.connect(self._on_submit_clicked)
        layout.addWidget(self.title_edit)

        content_label = QLabel("Content")
        content_label.setFont(QFont("Helvetica", 12))
        layout.addWidget(content_label)
        self.content_edit = QPlainTextEdit()
        self.content_edit.setPlaceholderText("Write your note here…")
        layout.addWidget(self.content_edit)

        button_layout = QHBoxLayout()
        button_layout.addStretch()
        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.cancelled.emit)
        button_layout.addWidget(self.cancel_button)
        self.submit_button = QPushButton()
        self.submit_button.setDefault(True)
        self.submit_button.clicked.connect(self._on_submit_clicked)
        button_layout.addWidget(self.submit_button)
        layout.addLayout(button_layout)

        self._update_buttons()

    def _update_buttons(self) -> None:
        if self.saving:
            self.submit_button.setText("Saving…")
        elif self.is_editing:
            self.submit_button.setText("Save Changes")
        else:
            self.submit_button.setText("Create Note")
        self.submit_button.setEnabled(not self.saving)
        self.cancel_button.setEnabled(not self.saving)

    def _show_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.setVisible(bool(message))

    def set_note(self, note: Note | None) -> None:
        """
        Bind the form to a note, resetting the fields.

        Args:
            note: Note to edit, or None for a blank form

        """
        self.note = note
        self.title_edit.setText(note.title if note else "")
        self.content_edit.setPlainText(note.content if note else "")
        self._show_error("")
        self._update_buttons()

    def set_saving(self, saving: bool) -> None:
        """
        Reflect whether a save is in flight.

        Args:
            saving: True while saving

        """
        self.saving = saving
        self._update_buttons()

    def values(self) -> tuple[str, str]:
        """Get the current (title, content) as typed."""
        return self.title_edit.text(), self.content_edit.toPlainText()

    def _on_submit_clicked(self) -> None:
        """Validate and emit :attr:`submitted`."""
        if self.saving:
            return
        self._show_error("")
        title, content = self.values()
        if not title.strip():
            self._show_error("Title is required")
            return
        self.submitted.emit(title.strip(), content)
        if not self.is_editing:
            self.title_edit.clear()
            self.content_edit.clear()
