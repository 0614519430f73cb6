import pytest

from exemel.clipboard import MemoryClipboard
from exemel.config import Settings
from exemel.models import CleaningContext
from exemel.pipeline import CleaningPipeline
from exemel.session import EditorSession

ENCODED_LOG = (
    '<Log><Entry When="today" Payload="&lt;Order Id=&quot;7&quot;&gt;'
    '&lt;Line Sku=&quot;A1&quot;/&gt;&lt;/Order&gt;"/></Log>'
)


@pytest.fixture()
def test_settings():
    return Settings(
        indent_size=2,
        synthetic_root_name="Root",
        log_level="DEBUG",
    )


@pytest.fixture()
def pipeline(test_settings):
    return CleaningPipeline(settings=test_settings)


@pytest.fixture()
def make_context():
    def _make(text: str) -> CleaningContext:
        return CleaningContext.start(text)

    return _make


@pytest.fixture()
def statuses():
    return []


@pytest.fixture()
def clipboard():
    return MemoryClipboard()


@pytest.fixture()
def session(clipboard, statuses, test_settings):
    return EditorSession(
        clipboard=clipboard,
        status_sink=statuses.append,
        settings=test_settings,
    )


@pytest.fixture()
def encoded_log():
    return ENCODED_LOG
