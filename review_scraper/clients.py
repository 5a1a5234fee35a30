# review_scraper/clients.py
"""Network clients used by the page fetcher.

Both expose ``await client.get(url) -> HttpResponse``. Neither retries.
"""
import asyncio
import logging
import random
from typing import NamedTuple, Optional

import requests

from review_scraper.errors import TransportError

log = logging.getLogger("clients")


def _user_agent() -> str:
    major = random.randint(118, 125)
    return f"Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/{major}.0.0.0 Safari/537.36"


DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Upgrade-Insecure-Requests": "1",
}


class HttpResponse(NamedTuple):
    status_code: int
    body: bytes


class RequestsClient:
    def __init__(self, timeout: Optional[float] = 30.0, proxy: Optional[str] = None, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": _user_agent(), **DEFAULT_HEADERS})
        if proxy:
            self.session.proxies.update({"http": proxy, "https": proxy})

    def _get(self, url: str) -> HttpResponse:
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}", url=url) from e
        log.debug("GET %s | status=%s", url, r.status_code)
        return HttpResponse(r.status_code, r.content)

    async def get(self, url: str) -> HttpResponse:
        # requests is blocking; keep the event loop free for sibling pages
        return await asyncio.to_thread(self._get, url)

    def close(self) -> None:
        self.session.close()


class PlaywrightClient:
    '''
    Fetches pages through headless Chromium and returns the rendered markup.
    Use as ``async with PlaywrightClient() as client``.
    '''

    def __init__(self, headless: bool = True, timeout: Optional[float] = 30.0, proxy: Optional[str] = None):
        self.headless = headless
        self.timeout = timeout
        self.proxy = proxy
        self._playwright = None
        self._browser = None
        self._context = None

    async def __aenter__(self) -> "PlaywrightClient":
        from playwright.async_api import async_playwright

        self._playwright = await async_playwright().start()
        launch_kwargs = {"headless": self.headless}
        if self.proxy:
            launch_kwargs["proxy"] = {"server": self.proxy}
        self._browser = await self._playwright.chromium.launch(**launch_kwargs)
        self._context = await self._browser.new_context(
            viewport={"width": 1366, "height": 900},
            user_agent=_user_agent(),
            locale="en-US",
            extra_http_headers=DEFAULT_HEADERS,
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._context is not None:
            await self._context.close()
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()

    async def get(self, url: str) -> HttpResponse:
        if self._context is None:
            raise RuntimeError("PlaywrightClient used outside 'async with'")
        try:
            page = await self._context.new_page()
        except Exception as e:
            raise TransportError(f"could not open a page for {url}: {e}", url=url) from e
        try:
            timeout_ms = self.timeout * 1000 if self.timeout else 0
            try:
                response = await page.goto(url, wait_until="load", timeout=timeout_ms)
            except Exception as e:
                raise TransportError(f"navigation to {url} failed: {e}", url=url) from e
            if response is None:
                raise TransportError(f"navigation to {url} returned no response", url=url)
            try:
                html = await page.content()
            except Exception as e:
                raise TransportError(f"reading {url} failed: {e}", url=url) from e
            log.debug("render %s | status=%s", url, response.status)
            return HttpResponse(response.status, html.encode("utf-8"))
        finally:
            await page.close()
