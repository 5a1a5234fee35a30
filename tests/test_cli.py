import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from review_scraper import cli, config
from review_scraper.config import PaginationStrategy
from review_scraper.errors import TransportError
from review_scraper.models import CompanyReviews, Review

runner = CliRunner()


@pytest.fixture
def outputs(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    monkeypatch.setenv("SCRAPER_OUTPUTS_DIR", str(tmp_path))
    return tmp_path


def _fake_scrape(reviews, error=None, seen=None):
    async def fake(product, settings=None, client=None):
        if seen is not None:
            seen.append(settings)
        return CompanyReviews(reviews=reviews), error
    return fake


def test_scrape_writes_json(monkeypatch, outputs):
    seen = []
    reviews = [Review(id="review-1", date="2024-01-05T00:00:00Z"), Review(id="review-2", date="2024-06-05T00:00:00Z")]
    monkeypatch.setattr(cli, "scrape_product", _fake_scrape(reviews, seen=seen))

    result = runner.invoke(cli.app, ["--product", "acme.com", "--strategy", "probe", "--max-pages", "3", "--start", "2024-03-01"])

    assert result.exit_code == 0, result.output
    assert seen[0].strategy == PaginationStrategy.PROBE
    assert seen[0].max_pages == 3
    data = json.loads(Path(outputs, "trustpilot_reviews_acme.com.json").read_text(encoding="utf-8"))
    assert [r["id"] for r in data["reviews"]] == ["review-2"]


def test_partial_scrape_still_writes(monkeypatch, outputs):
    monkeypatch.setattr(cli, "scrape_product", _fake_scrape([Review(id="review-1")], TransportError("reset", page=4)))

    result = runner.invoke(cli.app, ["--product", "acme.com"])

    assert result.exit_code == 0
    assert "Partial scrape" in result.output
    assert Path(outputs, "trustpilot_reviews_acme.com.json").exists()


def test_failed_scrape_exits_2(monkeypatch, outputs):
    monkeypatch.setattr(cli, "scrape_product", _fake_scrape([], TransportError("refused", page=1)))

    result = runner.invoke(cli.app, ["--product", "acme.com"])

    assert result.exit_code == 2
    assert "Scrape failed" in result.output
    assert not Path(outputs, "trustpilot_reviews_acme.com.json").exists()


def test_invalid_date(outputs):
    result = runner.invoke(cli.app, ["--product", "acme.com", "--start", "yesterday"])
    assert result.exit_code == 1


def test_negative_limit_is_rejected(monkeypatch, outputs):
    monkeypatch.setattr(cli, "scrape_product", _fake_scrape([Review(id="review-1")]))

    result = runner.invoke(cli.app, ["--product", "acme.com", "--limit", "-1"])

    assert result.exit_code != 0
    assert not Path(outputs, "trustpilot_reviews_acme.com.json").exists()
