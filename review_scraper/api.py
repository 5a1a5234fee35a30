# review_scraper/api.py
import time
import platform
from datetime import date as Date
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from review_scraper.config import PaginationStrategy, get_settings
from review_scraper.models import ScrapeResponse, ScrapeStatus
from review_scraper.scrapers import scrape_product
from review_scraper.utils import iso_now, filter_by_date

app = FastAPI(title="Trustpilot Review Scraper API", version="0.1.0")


class ScrapeRequest(BaseModel):
    product: str = Field(..., min_length=1)
    strategy: Optional[PaginationStrategy] = None
    max_concurrency: Optional[int] = Field(None, ge=0)
    max_pages: Optional[int] = Field(None, ge=1)
    all_languages: Optional[bool] = None
    start: Optional[Date] = None
    end: Optional[Date] = None
    limit: Optional[int] = Field(None, ge=0)


@app.get("/health")
async def health():
    settings = get_settings()
    return {
        "status": "ok",
        "mode": "async",
        "strategy": settings.strategy.value,
        "base_url": settings.base_url,
        "python_version": platform.python_version(),
    }


@app.post("/scrape", response_model=ScrapeResponse)
async def scrape(req: ScrapeRequest):
    started = time.time()
    settings = get_settings().with_overrides(
        strategy=req.strategy,
        max_concurrency=req.max_concurrency,
        max_pages=req.max_pages,
        all_languages=req.all_languages,
    )
    reviews, error = await scrape_product(req.product, settings=settings)
    status = ScrapeStatus.of(reviews, error)
    if status == ScrapeStatus.FAILED:
        raise HTTPException(status_code=502, detail=f"Scrape failed: {error}")

    kept = filter_by_date(reviews.reviews, req.start, req.end)
    if req.limit is not None:
        kept = kept[: req.limit]

    return ScrapeResponse(
        product=req.product,
        status=status,
        error=str(error) if error else None,
        scraped_at=iso_now(),
        reviews=kept,
        meta={
            "reviews_found": len(kept),
            "raw_reviews_count": len(reviews.reviews),
            "duration_sec": round(time.time() - started, 3),
        },
    )
