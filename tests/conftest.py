import pytest
from loguru import logger


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test.

    Yields a list of loguru record dicts; use ``record["level"].name`` and
    ``record["message"]``.
    """
    records: list[dict] = []
    handler_id = logger.add(
        lambda message: records.append(message.record),
        level="DEBUG",
        format="{message}",
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove rops related variables from the environment.

    Values written during the test (e.g. by load_dotenv) are removed again
    on teardown.
    """
    for name in (
        "ROPS_CONFIG",
        "ROPS_LOG_LEVEL",
        "CHARTS_CONFIG",
        "CHARTS_DEFAULT_NAMESPACE",
        "METABLOCK_API_URL",
        "METABLOCK_SPACE",
        "METABLOCK_API_TOKEN",
    ):
        # setenv first so monkeypatch remembers the original state
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
