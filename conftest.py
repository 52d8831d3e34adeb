import pytest

from lms.library import Library
from lms.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture
def lib(monkeypatch):
    # Fresh in-memory library per test, shared with the CLI singleton
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
    from main import LibraryManager

    lib = LibraryManager.reset(Library(language="en"))
    yield lib
    LibraryManager.reset(None)
