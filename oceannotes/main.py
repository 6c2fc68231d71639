"""Main entry point for the Ocean Notes application."""

import logging
import sys

from oceannotes.config import resolve_log_level
from oceannotes.ui.application import create_application


def main():
    """
    Run the Ocean Notes application.
    """
    logging.basicConfig(
        level=resolve_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app, _window = create_application()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
