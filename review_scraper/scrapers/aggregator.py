import asyncio
import logging
from typing import Optional

from review_scraper.models import CompanyReviews, Review

log = logging.getLogger("aggregator")

_CLOSED = object()


class Aggregator:
    '''
    Single owner of the review collection.

    Any number of producer tasks ``send`` reviews into one queue; one
    collector task appends them in arrival order. ``close`` is called once
    every producer is finished, after which ``done`` fires and ``result``
    hands back the collection.
    '''

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._reviews = CompanyReviews()
        self._done = asyncio.Event()
        self._closed = False
        self._task: Optional[asyncio.Task] = None

    def start(self) -> "Aggregator":
        if self._task is None:
            self._task = asyncio.create_task(self._collect(), name="review-aggregator")
        return self

    async def _collect(self) -> None:
        try:
            while True:
                item = await self._queue.get()
                if item is _CLOSED:
                    break
                self._reviews.reviews.append(item)
        finally:
            log.debug("aggregator drained %d reviews", len(self._reviews.reviews))
            self._done.set()

    async def send(self, review: Review) -> None:
        if self._closed:
            raise RuntimeError("aggregator is closed")
        await self._queue.put(review)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    @property
    def done(self) -> asyncio.Event:
        return self._done

    async def result(self) -> CompanyReviews:
        if self._task is None:
            raise RuntimeError("aggregator was never started")
        await self._done.wait()
        return self._reviews
