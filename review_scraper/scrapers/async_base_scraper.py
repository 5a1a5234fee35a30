import asyncio
import logging
from typing import List, NamedTuple, Optional, Tuple

from review_scraper.clients import RequestsClient
from review_scraper.config import PaginationStrategy, Settings, get_settings
from review_scraper.document import Node, parse_document
from review_scraper.errors import PageNotFound, ParseError, ScrapeError, TransportError
from review_scraper.models import CompanyReviews, Review
from review_scraper.scrapers.aggregator import Aggregator

log = logging.getLogger("async_scraper")


class PageResult(NamedTuple):
    number: int
    url: str
    cards: List[Node]
    total_pages: Optional[int] = None


class AsyncBaseScraper:
    '''
    Drives one product scrape: pagination, page fetching, per-card
    extraction and aggregation. Site subclasses supply the URLs and the
    markup rules:
      - find_cards(document) -> list of card nodes
      - find_total_pages(document) -> int
      - extract_review(card, page_url, position) -> Review
    '''

    def __init__(self, product: str, settings: Optional[Settings] = None, client=None):
        self.product = product
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self.client = client or RequestsClient(timeout=self.settings.request_timeout, proxy=self.settings.proxy)
        self.pages_fetched = 0

    def page_url(self, page_number: int) -> str:
        return self.settings.page_url(self.product, page_number)

    async def fetch_page(self, page_number: int, with_total: bool = False) -> PageResult:
        url = self.page_url(page_number)
        log.info("Scraping page %d of %s", page_number, url)
        try:
            res = await self.client.get(url)
        except TransportError as e:
            e.page = page_number
            raise
        except Exception as e:
            raise TransportError(f"GET {url} failed: {e}", page=page_number, url=url) from e
        if not 200 <= res.status_code < 300:
            raise PageNotFound(page_number, url, res.status_code)
        try:
            document = parse_document(res.body)
            cards = self.find_cards(document)
            total_pages = self.find_total_pages(document) if with_total else None
        except ParseError as e:
            e.page, e.url = page_number, url
            raise
        self.pages_fetched += 1
        log.debug("page %d: %d cards", page_number, len(cards))
        return PageResult(page_number, url, cards, total_pages)

    async def emit_page(self, page: PageResult, aggregator: Aggregator) -> int:
        # document order within a page
        for position, card in enumerate(page.cards, start=1):
            await aggregator.send(self.extract_review(card, page.url, position))
        return len(page.cards)

    def _over_page_cap(self, page_number: int) -> bool:
        cap = self.settings.max_pages
        return cap is not None and page_number > cap

    async def probe_pages(self, aggregator: Aggregator) -> None:
        '''Fetch page 1, 2, 3, ... one at a time until a page is not found.'''
        page_number = 0
        while True:
            page_number += 1
            if self._over_page_cap(page_number):
                log.info("stopping at max_pages=%d", self.settings.max_pages)
                return
            try:
                page = await self.fetch_page(page_number)
            except PageNotFound:
                log.info("reached last page %d", page_number)
                return
            await self.emit_page(page, aggregator)

    async def fan_out_pages(self, aggregator: Aggregator) -> None:
        '''
        Fetch page 1, read the page count from it, then fetch the remaining
        pages concurrently. A failing page does not cancel its siblings;
        the first failure (in page order) is raised once all have finished.
        '''
        first = await self.fetch_page(1, with_total=True)
        total = first.total_pages
        if self.settings.max_pages is not None and total > self.settings.max_pages:
            log.info("capping %d pages at max_pages=%d", total, self.settings.max_pages)
            total = self.settings.max_pages
        log.info("found %d pages for %s", total, self.product)
        await self.emit_page(first, aggregator)

        limit = self.settings.max_concurrency
        semaphore = asyncio.Semaphore(limit) if limit and limit > 0 else None

        async def produce(page_number: int) -> int:
            if semaphore is None:
                page = await self.fetch_page(page_number)
            else:
                async with semaphore:
                    page = await self.fetch_page(page_number)
            return await self.emit_page(page, aggregator)

        results = await asyncio.gather(*(produce(n) for n in range(2, total + 1)), return_exceptions=True)
        errors = [r for r in results if isinstance(r, BaseException)]
        for e in errors:
            log.error("page failed: %s", e)
        if errors:
            raise errors[0]

    async def scrape(self) -> Tuple[CompanyReviews, Optional[ScrapeError]]:
        '''
        Returns every review that reached the aggregator, plus the page-level
        error that ended the scrape (None on complete success). Records
        collected before an error are returned, not discarded.
        '''
        aggregator = Aggregator().start()
        error: Optional[ScrapeError] = None
        try:
            if self.settings.strategy == PaginationStrategy.PROBE:
                await self.probe_pages(aggregator)
            else:
                await self.fan_out_pages(aggregator)
        except ScrapeError as e:
            log.error("Scrape of %s stopped: %s", self.product, e)
            error = e
        finally:
            await aggregator.close()
            if self._owns_client:
                self.client.close()
        reviews = await aggregator.result()
        log.info("Collected %d reviews for %s over %d pages", len(reviews.reviews), self.product, self.pages_fetched)
        return reviews, error

    def find_cards(self, document: Node) -> List[Node]:
        raise NotImplementedError

    def find_total_pages(self, document: Node) -> int:
        raise NotImplementedError

    def extract_review(self, card: Node, page_url: str, position: int) -> Review:
        raise NotImplementedError
