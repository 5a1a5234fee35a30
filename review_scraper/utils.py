# review_scraper/utils.py
from dateutil import parser as dateparser
from datetime import datetime, date, timezone
from pathlib import Path
from typing import Iterable, List, Optional
import re

from review_scraper.models import Review


def parse_date_fuzzy(s):
    if not s:
        return None
    try:
        dt = dateparser.parse(str(s), fuzzy=True)
        return dt.date() if isinstance(dt, datetime) else dt
    except (ValueError, OverflowError):
        return None


def safe_filename(s: str) -> str:
    return re.sub(r'[^A-Za-z0-9\-_\.]+', '_', s).strip('_')


def iso_now():
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


def ensure_outputs_dir(path="outputs"):
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def clean_content(text: str) -> str:
    # single strips, applied in this order
    text = text.removeprefix('"')
    text = text.removeprefix("<br>")
    text = text.removesuffix('"')
    text = text.removesuffix("\n")
    return text


def filter_by_date(reviews: Iterable[Review], start: Optional[date] = None, end: Optional[date] = None) -> List[Review]:
    '''
    Keep reviews whose date falls in [start, end]. Reviews whose date is
    empty or unparsable are kept.
    '''
    kept = []
    for r in reviews:
        d = parse_date_fuzzy(r.date)
        if d is None:
            kept.append(r)
            continue
        if start and d < start:
            continue
        if end and d > end:
            continue
        kept.append(r)
    return kept
