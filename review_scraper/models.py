# review_scraper/models.py
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, ConfigDict


class Review(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    id: str = ""
    content: str = ""
    date: str = ""  # ISO timestamp, verbatim from the page
    rating: str = ""  # "1".."5", verbatim from the page
    link: str = ""
    reviewer_name: str = ""


class CompanyReviews(BaseModel):
    model_config = ConfigDict(extra="ignore")
    reviews: List[Review] = Field(default_factory=list)


class ScrapeStatus(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"

    @classmethod
    def of(cls, reviews: CompanyReviews, error: Optional[Exception]) -> "ScrapeStatus":
        if error is None:
            return cls.COMPLETE
        if len(reviews.reviews) > 0:
            return cls.PARTIAL
        return cls.FAILED


class ScrapeResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    product: str
    status: ScrapeStatus
    error: Optional[str] = None
    scraped_at: str
    reviews: List[Review] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict)
