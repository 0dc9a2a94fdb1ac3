"""
Application Initialization
==========================
This module wires the pieces together and starts the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Sets up logging.
2. Instantiates the application state (AppState).
3. Instantiates the Main Window (View), passing the state in.
"""
import logging

from solviewer.application import create_app
from solviewer.config import LOG_FILE, LOG_LEVEL
from solviewer.logging_config import setup_logging
from solviewer.model.state import AppState
from solviewer.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> int:
    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=LOG_LEVEL, log_file=LOG_FILE)

    # 2. Create the Qt Application
    app = create_app()

    # 3. Initialize the Data Model
    state = AppState()

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(state)
    window.show()

    # 5. Start Event Loop
    logger.info("Starting event loop.")
    return app.exec()
