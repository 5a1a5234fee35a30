"""Page-level failures raised by the fetcher and reported by the driver.

Missing fields inside a review card are not errors: the extractor logs them
and substitutes an empty string.
"""
from typing import Optional


class ScrapeError(RuntimeError):
    def __init__(self, message: str, page: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.page = page
        self.url = url


class PageNotFound(ScrapeError):
    """The listing answered with a non-success status (past the last page)."""

    def __init__(self, page: int, url: str, status_code: int):
        super().__init__(f"page {page} not found (status {status_code})", page=page, url=url)
        self.status_code = status_code


class TransportError(ScrapeError):
    """The request never produced a response."""


class ParseError(ScrapeError):
    """The page body or its pagination control could not be understood."""
