"""Scraper configuration loaded from the environment."""

import logging
import os
from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.trustpilot.com"
PRODUCT_PATH = "/review/{product}"
PAGE_QUERY = "?page={page}"
PAGE_QUERY_ALL_LANGUAGES = "?languages=all&page={page}"


class PaginationStrategy(str, Enum):
    PROBE = "probe"
    FAN_OUT = "fan_out"


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    all_languages: bool = True
    strategy: PaginationStrategy = PaginationStrategy.FAN_OUT
    max_concurrency: int = 8  # 0 means unbounded
    max_pages: Optional[int] = None
    request_timeout: float = 30.0
    proxy: Optional[str] = None
    outputs_dir: str = "outputs"

    def product_url(self, product: str) -> str:
        return self.base_url.rstrip("/") + PRODUCT_PATH.format(product=product)

    def page_url(self, product: str, page: int) -> str:
        query = PAGE_QUERY_ALL_LANGUAGES if self.all_languages else PAGE_QUERY
        return self.product_url(product) + query.format(page=page)

    def with_overrides(self, **overrides) -> "Settings":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer; using %s", name, raw, default)
        return default
    if value < 0:
        logger.warning("%s=%r is negative; using %s", name, raw, default)
        return default
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from SCRAPER_* environment variables with sensible defaults."""
    load_dotenv()

    base_url = os.getenv("SCRAPER_BASE_URL", DEFAULT_BASE_URL)
    all_languages = os.getenv("SCRAPER_ALL_LANGUAGES", "true").lower() in {"1", "true", "yes"}
    strategy_raw = os.getenv("SCRAPER_STRATEGY", PaginationStrategy.FAN_OUT.value).strip().lower()
    try:
        strategy = PaginationStrategy(strategy_raw)
    except ValueError:
        logger.warning("Unknown SCRAPER_STRATEGY %r; using %s", strategy_raw, PaginationStrategy.FAN_OUT.value)
        strategy = PaginationStrategy.FAN_OUT
    max_concurrency = _int_env("SCRAPER_MAX_CONCURRENCY", 8)
    max_pages = _int_env("SCRAPER_MAX_PAGES", None)
    timeout_raw = os.getenv("SCRAPER_REQUEST_TIMEOUT", "30")
    try:
        request_timeout = float(timeout_raw)
    except ValueError:
        logger.warning("SCRAPER_REQUEST_TIMEOUT=%r is not a number; using 30", timeout_raw)
        request_timeout = 30.0
    proxy = os.getenv("SCRAPER_PROXY") or os.getenv("HTTPS_PROXY") or os.getenv("HTTP_PROXY")
    outputs_dir = os.getenv("SCRAPER_OUTPUTS_DIR", "outputs")

    return Settings(
        base_url=base_url,
        all_languages=all_languages,
        strategy=strategy,
        max_concurrency=max_concurrency,
        max_pages=max_pages or None,
        request_timeout=request_timeout,
        proxy=proxy,
        outputs_dir=outputs_dir,
    )
