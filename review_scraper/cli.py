# review_scraper/cli.py
import asyncio
import logging
from datetime import datetime
from typing import Optional

import typer

from review_scraper.clients import PlaywrightClient
from review_scraper.config import PaginationStrategy, get_settings
from review_scraper.models import CompanyReviews, ScrapeStatus
from review_scraper.output import write_result
from review_scraper.scrapers import scrape_product
from review_scraper.utils import filter_by_date

app = typer.Typer()


async def _run(product, settings, render: bool):
    if not render:
        return await scrape_product(product, settings=settings)
    async with PlaywrightClient(timeout=settings.request_timeout, proxy=settings.proxy) as client:
        return await scrape_product(product, settings=settings, client=client)


@app.command()
def scrape(
    product: str = typer.Option(..., help="Product (company domain) as it appears in /review/<product>"),
    strategy: Optional[PaginationStrategy] = typer.Option(None, help="probe | fan_out"),
    max_concurrency: Optional[int] = typer.Option(None, min=0, help="Max pages in flight for fan_out (0 = unbounded)"),
    max_pages: Optional[int] = typer.Option(None, min=1, help="Stop after this many pages"),
    all_languages: Optional[bool] = typer.Option(None, help="Request reviews in all languages"),
    render: bool = typer.Option(False, help="Fetch pages through headless Chromium"),
    start: Optional[str] = typer.Option(None, help="Keep reviews on/after YYYY-MM-DD"),
    end: Optional[str] = typer.Option(None, help="Keep reviews on/before YYYY-MM-DD"),
    limit: Optional[int] = typer.Option(None, min=0, help="Max reviews to keep (debug)"),
    verbose: bool = typer.Option(False, help="Debug logging"),
):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    try:
        start_date = datetime.fromisoformat(start).date() if start else None
        end_date = datetime.fromisoformat(end).date() if end else None
    except ValueError:
        typer.echo("Invalid date format. Use YYYY-MM-DD.")
        raise typer.Exit(code=1)

    settings = get_settings().with_overrides(
        strategy=strategy,
        max_concurrency=max_concurrency,
        max_pages=max_pages,
        all_languages=all_languages,
    )
    logging.info("Start scraping reviews for %s (%s)", product, settings.strategy.value)
    reviews, error = asyncio.run(_run(product, settings, render))
    status = ScrapeStatus.of(reviews, error)

    if status == ScrapeStatus.FAILED:
        typer.echo(f"Scrape failed: {error}")
        raise typer.Exit(code=2)

    kept = filter_by_date(reviews.reviews, start_date, end_date)
    if limit is not None:
        kept = kept[:limit]
    outpath = write_result(CompanyReviews(reviews=kept), product, settings.outputs_dir)

    if status == ScrapeStatus.PARTIAL:
        typer.echo(f"Partial scrape ({len(reviews.reviews)} reviews before error: {error})")
    typer.echo(f"Wrote {len(kept)} reviews to {outpath}")


if __name__ == "__main__":
    app()
