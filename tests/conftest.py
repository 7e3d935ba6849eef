import os

import pytest

# Ensure Qt runs headless in CI/CLI environments without a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture()
def inner():
    from gridstyles_py.core.layout import Rect

    return Rect(10, 20, 200, 300)


@pytest.fixture()
def measure():
    from _support import fake_measure

    return fake_measure
