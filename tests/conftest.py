import pathlib
import sys

import pytest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from PySide6.QtCore import QCoreApplication  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Timers and queued callbacks need an application instance."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
