import asyncio
from html import escape
from typing import Dict, Optional, Union

from review_scraper.clients import HttpResponse
from review_scraper.config import Settings

PRODUCT = "example.com"
BASE_URL = "https://reviews.example.test"


def card_html(
    name: Optional[str] = "Jane Doe",
    created_at: Optional[str] = "2024-03-01T09:30:00.000Z",
    rating: Optional[str] = "5",
    href: Optional[str] = "/reviews/65e1a2b3",
    text: Optional[str] = "Great service",
    section: bool = True,
) -> str:
    name_html = ""
    if name is not None:
        name_html = (
            "<aside class='styles_consumerInfoWrapper__a1b2'>"
            "<a name='consumer-profile' href='/users/1'>"
            f"<span class='typography_heading-xxs__c3d4'>{escape(name)}</span>"
            "</a></aside>"
        )
    time_html = f"<time datetime='{created_at}'>March 1, 2024</time>" if created_at is not None else ""
    rating_attr = f" data-service-review-rating='{rating}'" if rating is not None else ""
    link_html = f"<a href='{href}'><h2>Title</h2></a>" if href is not None else ""
    text_html = (
        f"<p data-service-review-text-typography='true'>{escape(text, quote=False)}</p>" if text is not None else ""
    )
    body = (
        f"<div class='styles_reviewHeader__e5f6'{rating_attr}>{time_html}</div>"
        f"<div class='styles_reviewContent__g7h8'>{link_html}{text_html}</div>"
    )
    if section:
        body = f"<section class='styles_reviewContentwrapper__i9j0'>{body}</section>"
    else:
        body = time_html
    return f"<div class='styles_cardWrapper__k1l2'><article>{name_html}{body}</article></div>"


def pagination_html(last: Optional[int], with_last_button: bool = True) -> str:
    if last is None:
        return ""
    buttons = ["<a name='pagination-button-previous'>Previous page</a>"]
    for n in range(1, min(last, 4) + 1):
        buttons.append(f"<a name='pagination-button-{n}' href='/review/{PRODUCT}?page={n}'>{n}</a>")
    if with_last_button and last > 4:
        buttons.append(f"<a name='pagination-button-last' href='/review/{PRODUCT}?page={last}'>{last}</a>")
    buttons.append(f"<a name='pagination-button-next' href='/review/{PRODUCT}?page=2'>Next page</a>")
    return f"<nav aria-label='Pagination'>{''.join(buttons)}</nav>"


def page_html(cards: int, last: Optional[int] = None, page: int = 1, with_last_button: bool = True) -> bytes:
    html = "".join(card_html(name=f"Reviewer {page}-{i}", text=f"Review {page}-{i}") for i in range(1, cards + 1))
    # a wrapper without an article is not a review card
    html += "<div class='styles_cardWrapper__k1l2'><div>advert</div></div>"
    return f"<html><body><main>{html}</main>{pagination_html(last, with_last_button)}</body></html>".encode()


PageAnswer = Union[bytes, int, Exception]


class FakeClient:
    '''
    Serves pages by number. A bytes value is a 200 body, an int is a bare
    status code, an exception is raised. Unknown pages answer 404.
    '''

    def __init__(self, settings: Settings, pages: Dict[int, PageAnswer], delays: Optional[Dict[int, float]] = None):
        self.settings = settings
        self.pages = {settings.page_url(PRODUCT, n): answer for n, answer in pages.items()}
        self.delays = {settings.page_url(PRODUCT, n): d for n, d in (delays or {}).items()}
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get(self, url: str) -> HttpResponse:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
            answer = self.pages.get(url, 404)
            if isinstance(answer, Exception):
                raise answer
            if isinstance(answer, int):
                return HttpResponse(answer, b"")
            return HttpResponse(200, answer)
        finally:
            self.in_flight -= 1

    def close(self) -> None:
        pass


def single_page_pagination_html(next_disabled: bool = True) -> str:
    """Pagination control as rendered for a product with one page of reviews."""
    disabled = " aria-disabled='true'" if next_disabled else ""
    return (
        "<nav aria-label='Pagination'>"
        "<a name='pagination-button-previous' aria-disabled='true' rel='prev'>Previous page</a>"
        f"<a name='pagination-button-1' href='/review/{PRODUCT}?page=1' aria-current='page'>1</a>"
        f"<a name='pagination-button-next' href='/review/{PRODUCT}?page=2' rel='next'{disabled}>Next page</a>"
        "</nav>"
    )
