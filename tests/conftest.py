import pytest

from review_scraper import config
from review_scraper.config import PaginationStrategy, Settings
from tests.helpers import BASE_URL


@pytest.fixture
def settings():
    return Settings(base_url=BASE_URL, strategy=PaginationStrategy.FAN_OUT, max_concurrency=4)


@pytest.fixture
def probe_settings():
    return Settings(base_url=BASE_URL, strategy=PaginationStrategy.PROBE)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()
