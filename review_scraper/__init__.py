"""Trustpilot review scraper: paginated fetch, per-card extraction, JSON output."""

__version__ = "0.1.0"
