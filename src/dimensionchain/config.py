"""
Configuration & Constants
=========================
This module serves as the central registry for global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (anchor spacing, canvas size, file
   names) from being scattered throughout the model and the view.
2. Consistency: The model and the diagram agree on where a new callout goes.

Exports:
    ANCHOR_ORIGIN_X, ANCHOR_ORIGIN_Y, ANCHOR_STEP_X: Default callout placement.
    DEFAULT_IMPORT_POLICY (str): Policy used when loading project files.
"""
import logging
from typing import Optional

APP_NAME: str = "Chaîne de cotes"

# --- Annotation layout (diagram coordinates) ---
# The first callout sits at the origin, each new one one step to the right
ANCHOR_ORIGIN_X: float = 50.0
ANCHOR_ORIGIN_Y: float = 100.0
ANCHOR_STEP_X: float = 150.0

# --- Diagram ---
CANVAS_WIDTH: int = 800
CANVAS_HEIGHT: int = 460
CALLOUT_LINE_LENGTH: float = 100.0
CALLOUT_LABEL_OFFSET: tuple[float, float] = (10.0, -20.0)
CALLOUT_FONT_SIZE: int = 14

# --- Display ---
DISPLAY_DECIMALS: int = 2
LENGTH_UNIT: str = "mm"

# --- Project files ---
DEFAULT_PROJECT_FILENAME: str = "chaine_cotes.json"
PROJECT_FILE_EXTENSION: str = ".json"
PROJECT_FILE_FILTER: str = "Projets (*.json)"
IMAGE_FILE_FILTER: str = "Images (*.png *.jpg *.jpeg *.bmp *.gif)"

# "lenient" mirrors how older project files were always read, "strict" rejects
# anything that is not a well-formed document
DEFAULT_IMPORT_POLICY: str = "lenient"

# --- Logging ---
LOG_LEVEL: int = logging.INFO
LOG_FILE: Optional[str] = None
