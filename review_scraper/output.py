# review_scraper/output.py
import json
from pathlib import Path

from review_scraper.models import CompanyReviews
from review_scraper.utils import safe_filename, ensure_outputs_dir


def write_result(reviews: CompanyReviews, product: str, outputs_dir: str = "outputs") -> str:
    out = ensure_outputs_dir(outputs_dir)
    path = Path(out) / f"trustpilot_reviews_{safe_filename(product)}.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(reviews.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
    return str(path)
