import sys

from PySide6.QtCore import QCoreApplication, QTimer
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from oceannotes import __version__
from oceannotes.config import resolve_base_url, resolve_timeout
from oceannotes.services.client import NotesClient
from oceannotes.services.runner import AsyncRunner
from oceannotes.services.store import NoteStore

from .main_window import MainWindow


def create_application() -> tuple[QApplication, MainWindow]:
    """
    Create the application and its main window.

    The base URL and timeout are resolved once, here.  The health check and
    the first refresh are scheduled to run once the Qt event loop starts.

    Returns:
        The application and the (shown) main window

    """
    QCoreApplication.setOrganizationName("Ocean Notes")
    QCoreApplication.setApplicationName("Ocean Notes")

    app = QApplication(sys.argv)
    app.setApplicationVersion(__version__)
    QGuiApplication.setApplicationDisplayName("Ocean Notes")

    runner = AsyncRunner()
    runner.start()
    client = NotesClient(resolve_base_url(), timeout=resolve_timeout())
    store = NoteStore(client)

    window = MainWindow(store, runner)
    window.show()

    # Use QTimer to ensure these run after the event loop starts
    QTimer.singleShot(0, window.check_health)
    QTimer.singleShot(0, window.refresh)
    return app, window
