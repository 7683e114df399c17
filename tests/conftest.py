import logging

import pytest

# Rewrite the shared helpers' asserts so failures show the compared values.
pytest.register_assert_rewrite("bookstore_harness.assertions")

from bookstore_harness import ApiClient, HarnessSettings, authenticate
from bookstore_harness.server import LiveServer

logger = logging.getLogger(__name__)


# --- Pytest Fixtures ---

@pytest.fixture(scope="session")
def stand_in_server():
    """
    Starts the in-process bookstore API when BOOKSTORE_BASE_URL is not set.
    Yields None when the suite targets an external server.
    """
    if HarnessSettings().base_url:
        yield None
        return

    server = LiveServer().start()
    yield server
    server.stop()


@pytest.fixture(scope="session")
def settings(stand_in_server):
    """One settings object per run, with base_url resolved."""
    settings = HarnessSettings()
    if stand_in_server is not None:
        settings = settings.model_copy(update={"base_url": stand_in_server.base_url})
    logger.info("Running bookstore API tests against %s", settings.base_url)
    return settings


@pytest.fixture(autouse=True)
def reset_stand_in_data(stand_in_server):
    """Every test starts from the seeded data when running against the stand-in."""
    if stand_in_server is not None:
        stand_in_server.store.reset()


@pytest.fixture
def client(settings):
    with ApiClient(settings) as api_client:
        yield api_client


@pytest.fixture
def token(client, settings):
    """Bearer token for mutating calls, obtained by a fresh login."""
    token = authenticate(client, settings)
    assert token, "Authentication token should not be null or empty"
    return token
