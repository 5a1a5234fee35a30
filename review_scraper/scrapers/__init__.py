from review_scraper.scrapers.aggregator import Aggregator
from review_scraper.scrapers.async_base_scraper import AsyncBaseScraper, PageResult
from review_scraper.scrapers.trustpilot_scraper import TrustpilotScraper, scrape_product

__all__ = ["Aggregator", "AsyncBaseScraper", "PageResult", "TrustpilotScraper", "scrape_product"]
