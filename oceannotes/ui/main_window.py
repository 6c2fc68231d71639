"""Main application window."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from PySide6.QtCore import QSettings, Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from oceannotes.models.note import NotePatch
from oceannotes.services.filter import filter_notes
from oceannotes.ui.note_form import NoteForm
from oceannotes.ui.notes_panel import NotesPanel

if TYPE_CHECKING:
    from PySide6.QtGui import QCloseEvent

    from oceannotes.services.runner import AsyncRunner
    from oceannotes.services.store import NoteStore

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main application window: notes list on the left, editor on the right.

    The window never changes notes itself.  It reads the store's state when
    the store signals a change, and sends every user intent to the store by
    scheduling the matching coroutine on the runner.

    Args:
        store: The note store
        runner: Runner whose loop the store's operations are awaited on

    """

    #: Main window geometry
    MAIN_WINDOW_GEOMETRY: Final[tuple[int, int, int, int]] = (100, 100, 1200, 760)
    #: Seconds to wait for the store to close when the window closes.
    CLOSE_TIMEOUT: Final[float] = 2.0

    def __init__(
        self,
        store: NoteStore,
        runner: AsyncRunner,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        #: The note store.
        self.store = store
        #: The runner the store's coroutines are scheduled on.
        self.runner = runner
        #: ID of the note the editor form is bound to.
        self._form_note_id: int | None = None
        #: UI preferences
        self.settings = QSettings()

        self.build()
        self._connect_store()
        self.render_health(self.store.health)
        self.render_notes()
        self.render_selection()

    # ---------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------

    def build(self) -> None:
        """
        Build the main window.

        - Setup the main window.
        - Setup global shortcuts.

        """
        self._setup_main_window()
        self._setup_global_shortcuts()

    def _setup_header(self) -> QWidget:
        header = QWidget()
        header_layout = QHBoxLayout(header)
        brand = QLabel("✦ Ocean Notes")
        brand.setStyleSheet("font-size: 16pt; font-weight: bold;")
        header_layout.addWidget(brand)
        header_layout.addStretch()
        self.health_label = QLabel()
        header_layout.addWidget(self.health_label)
        return header

    def _setup_toolbar(self) -> QWidget:
        toolbar = QWidget()
        toolbar_layout = QHBoxLayout(toolbar)
        toolbar_layout.setContentsMargins(0, 0, 0, 0)
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search notes…")
        self.search_edit.setAccessibleName("Search notes")
        self.search_edit.setFixedWidth(220)
        self.search_edit.textChanged.connect(lambda _text: self.render_notes())
        toolbar_layout.addWidget(self.search_edit)
        toolbar_layout.addStretch()
        self.new_button = QPushButton("+ New Note")
        self.new_button.setToolTip("Create a new note")
        self.new_button.clicked.connect(self.new_note)
        toolbar_layout.addWidget(self.new_button)
        self.refresh_button = QPushButton("Refresh")
        self.refresh_button.clicked.connect(self.refresh)
        toolbar_layout.addWidget(self.refresh_button)
        return toolbar

    def _setup_main_window(self) -> None:
        """
        Set up the main window.
        """
        self.setWindowTitle("Ocean Notes")
        app = QApplication.instance()
        if isinstance(app, QApplication) and not app.windowIcon().isNull():
            self.setWindowIcon(app.windowIcon())
        self.setGeometry(*self.MAIN_WINDOW_GEOMETRY)
        geometry = self.settings.value("window/geometry")
        if geometry is not None:
            self.restoreGeometry(geometry)

        central_widget = QWidget()
        central_layout = QVBoxLayout(central_widget)
        central_layout.addWidget(self._setup_header())

        columns = QHBoxLayout()
        central_layout.addLayout(columns, stretch=1)

        # Left column: toolbar, error banner, notes list
        list_column = QVBoxLayout()
        list_title = QLabel("Your Notes")
        list_title.setStyleSheet("font-size: 13pt; font-weight: bold;")
        list_column.addWidget(list_title)
        list_column.addWidget(self._setup_toolbar())
        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #c0392b;")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        list_column.addWidget(self.error_label)
        scroll_area = QScrollArea()
        scroll_area.setWidgetResizable(True)
        scroll_area.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.notes_panel = NotesPanel()
        self.notes_panel.edit_requested.connect(self.select_note)
        self.notes_panel.delete_requested.connect(self.delete_note)
        scroll_area.setWidget(self.notes_panel)
        list_column.addWidget(scroll_area, stretch=1)
        columns.addLayout(list_column, stretch=1)

        # Right column: editor
        editor_column = QVBoxLayout()
        self.editor_title = QLabel("Create Note")
        self.editor_title.setStyleSheet("font-size: 13pt; font-weight: bold;")
        editor_column.addWidget(self.editor_title)
        self.note_form = NoteForm()
        self.note_form.submitted.connect(self.submit_note)
        self.note_form.cancelled.connect(self.new_note)
        editor_column.addWidget(self.note_form, stretch=1)
        columns.addLayout(editor_column, stretch=1)

        self.setCentralWidget(central_widget)
        self.show_message(f"Notes service: {self.store.client.base_url}", duration=0)

    def _setup_global_shortcuts(self) -> None:
        """
        Set up global keyboard shortcuts.

        - Ctrl+N: new note
        - Ctrl+R / F5: refresh
        - Ctrl+F: focus search
        """
        QShortcut(QKeySequence("Ctrl+N"), self).activated.connect(self.new_note)
        QShortcut(QKeySequence("Ctrl+R"), self).activated.connect(self.refresh)
        QShortcut(QKeySequence("F5"), self).activated.connect(self.refresh)
        QShortcut(QKeySequence("Ctrl+F"), self).activated.connect(
            self.search_edit.setFocus
        )

    def _connect_store(self) -> None:
        # Store signals may be emitted from the runner's thread; connecting
        # them to bound methods of this widget queues delivery onto the GUI
        # thread.
        self.store.notes_changed.connect(self.render_notes)
        self.store.selection_changed.connect(self.render_selection)
        self.store.error_changed.connect(self.render_error)
        self.store.loading_changed.connect(self.render_loading)
        self.store.saving_changed.connect(self.note_form.set_saving)
        self.store.health_changed.connect(self.render_health)

    # ---------------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------------

    def show_message(self, message: str, duration: int = 2000) -> None:
        """
        Show a message in the status bar.

        Args:
            message: Message to show

        Keyword Args:
            duration: Milliseconds to show it for, 0 to keep it

        """
        self.statusBar().showMessage(message, duration)

    def render_health(self, healthy: bool | None) -> None:
        """Render the health indicator."""
        if healthy:
            self.health_label.setText("Backend connected")
            self.health_label.setStyleSheet("color: #1e8449;")
        else:
            self.health_label.setText("Backend unavailable")
            self.health_label.setStyleSheet("color: #c0392b;")

    def render_notes(self) -> None:
        """Render the filtered notes list."""
        notes = self.store.notes
        visible = filter_notes(notes, self.search_edit.text())
        self.notes_panel.update_notes(
            visible, loading=self.store.loading and not notes
        )

    def render_selection(self) -> None:
        """Bind the editor to the selected note when the selection changes."""
        note = self.store.selected_note
        note_id = note.id if note is not None else None
        if note_id == self._form_note_id:
            return
        self._form_note_id = note_id
        self.note_form.set_note(note)
        self.editor_title.setText("Edit Note" if note is not None else "Create Note")

    def render_error(self, message: str) -> None:
        """Render the error banner."""
        self.error_label.setText(message)
        self.error_label.setVisible(bool(message))

    def render_loading(self, loading: bool) -> None:
        """Render the refresh button state."""
        self.refresh_button.setEnabled(not loading)
        self.refresh_button.setText("Refreshing…" if loading else "Refresh")
        self.render_notes()

    # ---------------------------------------------------------------
    # Intents
    # ---------------------------------------------------------------

    def refresh(self) -> None:
        """Reload the notes from the service."""
        self.runner.submit(self.store.refresh())

    def check_health(self) -> None:
        """Ask the service for its health once."""
        self.runner.submit(self.store.check_health())

    def new_note(self) -> None:
        """Switch the editor to composing a new note."""
        self.runner.call(self.store.select, None)

    def select_note(self, note_id: int) -> None:
        """Bind the editor to a note."""
        self.runner.call(self.store.select, note_id)

    def delete_note(self, note_id: int) -> None:
        """Delete a note."""
        self.runner.submit(self.store.delete(note_id))

    def submit_note(self, title: str, content: str) -> None:
        """Create or update the note in the editor."""
        if self.note_form.is_editing and self._form_note_id is not None:
            patch = NotePatch(title=title, content=content)
            self.runner.submit(self.store.update(self._form_note_id, patch))
        else:
            self.runner.submit(self.store.create(title, content))

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        """Save the window geometry and close the store."""
        self.settings.setValue("window/geometry", self.saveGeometry())
        if self.runner.running:
            try:
                self.runner.run(self.store.aclose(), timeout=self.CLOSE_TIMEOUT)
            except Exception:
                logger.exception("Failed to close the note store cleanly")
            self.runner.stop()
        super().closeEvent(event)
