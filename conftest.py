"""
Shared pytest setup: one offscreen QApplication for the whole run.

Widgets created by tests are deleted before the application goes away, so
no Qt object outlives it at interpreter shutdown.
"""

import gc
import os
import sys

import pytest

CURRENT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(CURRENT_DIR, 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from PySide6.QtCore import QCoreApplication, QEvent
from PySide6.QtWidgets import QApplication

# Module-level reference keeps the application alive until interpreter exit
_app = None


@pytest.fixture(scope='session', autouse=True)
def qapp():
    global _app
    _app = QApplication.instance() or QApplication([])
    yield _app
    _app.closeAllWindows()
    QCoreApplication.sendPostedEvents(None, QEvent.DeferredDelete)
    gc.collect()


@pytest.fixture
def delete_widgets(qapp):
    """Collects widgets and deletes them when the test ends"""
    widgets = []
    yield widgets
    for widget in widgets:
        widget.close()
        widget.deleteLater()
    QCoreApplication.sendPostedEvents(None, QEvent.DeferredDelete)
    gc.collect()
