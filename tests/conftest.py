import pytest

from vidgrab.core.search_path import SearchPathContext

from .helpers import FakeOpener


@pytest.fixture
def empty_context():
    return SearchPathContext({"PATH": ""})


@pytest.fixture
def fake_opener():
    return FakeOpener()
