import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from Qt.QtWidgets import QApplication

from ModeSitter.commands import COMMANDS
from ModeSitter.faces import FACES
from ModeSitter.modes import MODES


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication for every Qt test"""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture(autouse=True)
def clean_registries():
    """Start and end every test with empty process-wide registries"""
    MODES.reset()
    COMMANDS.reset()
    FACES.reset()
    yield
    MODES.reset()
    COMMANDS.reset()
    FACES.reset()
