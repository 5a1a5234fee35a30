"""Trustpilot review listing scraper.

NOTE: Trustpilot class names carry build hashes (``styles_cardWrapper__x1y2``),
so every selector below matches on the stable prefix only. Inspect the live
site and update selectors if extraction stops working.
"""
import logging
import re
from typing import List, Optional, Tuple

from review_scraper.config import Settings
from review_scraper.document import Node, first
from review_scraper.errors import ParseError, ScrapeError
from review_scraper.models import CompanyReviews, Review
from review_scraper.scrapers.async_base_scraper import AsyncBaseScraper
from review_scraper.utils import clean_content

log = logging.getLogger("trustpilotscraper")

CARD = "div[class^='styles_cardWrapper__']:has(article)"
REVIEWER_NAME = "aside[class^='styles_consumerInfoWrapper__'] a[name='consumer-profile'] > span[class^='typography_heading']"
TIME = "time"
CONTENT_SECTION = "section[class^='styles_reviewContentwrapper__']"
REVIEW_HEADER = "div[class^='styles_reviewHeader__']"
REVIEW_LINK = "div[class^='styles_reviewContent__'] a"
REVIEW_TEXT = "div[class^='styles_reviewContent__'] p[data-service-review-text-typography='true']"
PAGINATION_LAST = "a[name='pagination-button-last']"
PAGINATION_BUTTONS = "a[name^='pagination-button-']"

_DIGITS = re.compile(r"\d+")
_NUMBERED_BUTTON = re.compile(r"pagination-button-(\d+)")


class TrustpilotScraper(AsyncBaseScraper):

    def find_cards(self, document: Node) -> List[Node]:
        return document.find(CARD)

    def find_total_pages(self, document: Node) -> int:
        last = first(document, PAGINATION_LAST)
        if last is not None:
            n = _page_number(last)
            if n is not None:
                return n
            log.warning("Could not read pagination-button-last; falling back to numbered buttons")
        pages = []
        # next/previous buttons also carry page= hrefs, so only numbered buttons count
        for button in document.find(PAGINATION_BUTTONS):
            name = button.attr("name") or ""
            if name.endswith(("-next", "-previous")):
                continue
            m = _NUMBERED_BUTTON.fullmatch(name)
            n = int(m.group(1)) if m else _page_number(button)
            if n is not None:
                pages.append(n)
        if not pages:
            raise ParseError("could not read the last page number from the pagination control")
        return max(pages)

    def extract_review(self, card: Node, page_url: str, position: int) -> Review:
        reviewer_name = _text(first(card, REVIEWER_NAME))
        if not reviewer_name:
            log.warning("Could not find reviewer name on %s (review %d)", page_url, position)

        created_at = _attr(first(card, TIME), "datetime")
        if created_at is None:
            log.warning("Could not find createdAtTime %s", reviewer_name)

        # narrow the search to the review content section
        section = first(card, CONTENT_SECTION)
        if section is None:
            log.warning("Could not find review content section %s", reviewer_name)

        rating = _attr(first(section, REVIEW_HEADER), "data-service-review-rating")
        if rating is None:
            log.warning("Could not find rating %s", reviewer_name)

        href = _attr(first(section, REVIEW_LINK), "href")
        if href is None:
            log.warning("Could not find linkToReview %s", reviewer_name)
            link = ""
        else:
            link = page_url + href

        text_node = first(section, REVIEW_TEXT)
        if text_node is None:
            log.warning("Could not find review content %s", reviewer_name)

        return Review(
            id=f"review-{position}",
            content=clean_content(_text(text_node)),
            date=created_at or "",
            rating=rating or "",
            link=link,
            reviewer_name=reviewer_name,
        )


def _text(node: Optional[Node]) -> str:
    return node.text() if node is not None else ""


def _attr(node: Optional[Node], name: str) -> Optional[str]:
    return node.attr(name) if node is not None else None


def _page_number(button: Node) -> Optional[int]:
    m = _DIGITS.fullmatch(button.text().strip())
    if m:
        return int(m.group(0))
    return None


async def scrape_product(product: str, settings: Optional[Settings] = None, client=None) -> Tuple[CompanyReviews, Optional[ScrapeError]]:
    return await TrustpilotScraper(product, settings=settings, client=client).scrape()
