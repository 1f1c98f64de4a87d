"""
Pytest configuration for dimensionchain tests.

Adds 'src' to sys.path so the tests run from a plain checkout (same trick as
run.py) and provides the project states shared by the test modules.
"""
import logging
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from dimensionchain.model.dimensions import Anchor, DimensionEntry
from dimensionchain.model.numeric import Valid
from dimensionchain.model.state import ProjectState


@pytest.fixture
def example_state() -> ProjectState:
    """L1 = 120.2 -0.1/+0.1 and L2 = 40.0 -0.2/+0.3."""
    return ProjectState.example()


@pytest.fixture
def empty_state() -> ProjectState:
    return ProjectState()


@pytest.fixture
def image_state() -> ProjectState:
    state = ProjectState(entries=[
        DimensionEntry("A", Valid(12.5), Valid(-0.05), Valid(0.0), Anchor(10.0, 20.0)),
        DimensionEntry("B", Valid(-30.0), Valid(-0.1), Valid(0.2), Anchor(-5.5, 300.25)),
        DimensionEntry("Jeu", Valid(17.5), Valid(0.0), Valid(0.15), Anchor(400.0, 20.0)),
    ])
    state.set_background_image("data:image/png;base64,iVBORw0KGgo=")
    return state


@pytest.fixture
def reset_package_logger():
    """Drop handlers installed by setup_logging once the test is done."""
    logger = logging.getLogger("dimensionchain")
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(level)
