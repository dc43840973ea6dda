"""Data models and types used across the backend.

API request/response models are in schemas.py.
Types for the fetcher and the tag catalogue live here.
"""

from typing import Literal, TypedDict

TagCategory = Literal["essential", "opengraph", "twitter", "technical"]
TagStatus = Literal["present", "missing", "needs_improvement"]


class FetchedPage(TypedDict):
    """Structured output from the HTML fetcher."""

    url: str
    html: str
    source: str
    http_status: int
    response_time_ms: int


class CatalogueEntry(TypedDict):
    """One checked tag: lookup key, display name and category."""

    key: str
    name: str
    category: TagCategory
