"""
Application Initialization
==========================
This module constructs the Model-View architecture and starts the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging.
2. Instantiates the Data Model (ProjectState) with the starting chain.
3. Instantiates the Main Window (View) and passes the Model into it.
"""
import sys
from PySide6.QtWidgets import QApplication

from dimensionchain.config import APP_NAME, LOG_LEVEL, LOG_FILE
from dimensionchain.logging_config import setup_logging
from dimensionchain.model.state import ProjectState
from dimensionchain.view.main_window import MainWindow


def main() -> None:
    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=LOG_LEVEL, log_file=LOG_FILE)

    # 2. Create the Qt Application
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    # 3. Initialize the Data Model
    project = ProjectState.example()

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(project)
    window.show()

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
