"""Page fetcher and meta tag extractor.

Fetches a single URL (directly, then through CORS relays when enabled) and
extracts the tag mapping consumed by analyzer.analyze_meta_tags.
Does NOT crawl subpages or execute JavaScript.
"""

import logging
import os
import time
from pathlib import Path
from urllib.parse import quote, urljoin, urlparse

import requests
from bs4 import BeautifulSoup
from dotenv import load_dotenv

from analyzer import analyze_meta_tags
from models import FetchedPage
from schemas import AnalysisReport

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

logger = logging.getLogger(__name__)

_REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

DEFAULT_CORS_RELAYS = [
    "https://corsproxy.io/?{url}",
    "https://api.allorigins.win/raw?url={url}",
    "https://api.codetabs.com/v1/proxy?quest={url}",
]

FETCH_TIMEOUT_SECONDS = float(os.getenv("SEO_FETCH_TIMEOUT_SECONDS", "12"))
USE_CORS_RELAYS = os.getenv("SEO_USE_CORS_RELAYS", "0").strip().lower() in {"1", "true", "yes", "on"}
CORS_RELAYS = [
    template.strip()
    for template in os.getenv("SEO_CORS_RELAYS", "").split(",")
    if "{url}" in template
] or DEFAULT_CORS_RELAYS


class AnalysisError(Exception):
    """Base error for a failed analysis; the message is shown to the user."""


class InvalidUrlError(AnalysisError):
    """The URL is empty or cannot be parsed. Raised before any network activity."""


class FetchError(AnalysisError):
    """Network error, non-2xx status, or every fetch target failed."""


class MalformedContentError(FetchError):
    """The response body does not look like an HTML document."""


def normalize_url(raw: str) -> str:
    """Strip the input and prefix https:// when no http(s) scheme is given."""
    value = (raw or "").strip()
    if not value:
        raise InvalidUrlError("Please enter a URL")
    if not value.startswith(("http://", "https://")):
        value = f"https://{value}"
    try:
        hostname = urlparse(value).hostname
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid URL: {raw}") from exc
    if not hostname:
        raise InvalidUrlError(f"Invalid URL: {raw}")
    return value


def looks_like_html(body: str) -> bool:
    """True when the body has both an opening and a closing <html> tag."""
    lowered = body.lower()
    return "<html" in lowered and "</html>" in lowered


def build_fetch_targets(url: str, use_relays: bool, relays: list[str]) -> list[tuple[str, str]]:
    """Ordered (source, request_url) pairs: the page itself, then each relay."""
    targets = [("direct", url)]
    if use_relays:
        encoded = quote(url, safe="")
        for template in relays:
            targets.append((urlparse(template).netloc or template, template.replace("{url}", encoded)))
    return targets


def _fetch_target(source: str, request_url: str) -> tuple[str, int]:
    try:
        response = requests.get(request_url, timeout=FETCH_TIMEOUT_SECONDS, headers=_REQUEST_HEADERS)
    except requests.RequestException as exc:
        raise FetchError(f"Failed to fetch the URL: {exc}") from exc

    if not 200 <= response.status_code < 300:
        reason = response.reason or "HTTP error"
        raise FetchError(f"Failed to fetch the URL: {response.status_code} {reason}")

    response.encoding = response.apparent_encoding or "utf-8"
    html = response.text
    if source != "direct" and not looks_like_html(html):
        raise MalformedContentError(f"Relay {source} did not return a valid HTML document")
    return html, response.status_code


def fetch_html(url: str, use_relays: bool | None = None, relays: list[str] | None = None) -> FetchedPage:
    """
    Fetch `url`, trying each target in turn and returning the first success.
    When every target fails, the last target's error is raised.
    """
    if use_relays is None:
        use_relays = USE_CORS_RELAYS
    targets = build_fetch_targets(url, use_relays, relays if relays is not None else CORS_RELAYS)

    last_error = FetchError("Failed to analyze URL")
    for source, request_url in targets:
        started = time.monotonic()
        try:
            html, http_status = _fetch_target(source, request_url)
        except FetchError as exc:
            logger.warning("Fetch via %s failed for %s: %s", source, url, exc)
            last_error = exc
            continue
        response_time_ms = int((time.monotonic() - started) * 1000)
        logger.info("Fetched %s via %s (%s, %d ms)", url, source, http_status, response_time_ms)
        return {
            "url": url,
            "html": html,
            "source": source,
            "http_status": http_status,
            "response_time_ms": response_time_ms,
        }

    raise last_error


def extract_meta_tags(html: str, base_url: str) -> dict[str, str]:
    """
    Map each meta name/property/http-equiv to its content, plus title,
    canonical and favicon. Later duplicates overwrite earlier ones.
    """
    soup = BeautifulSoup(html, "html.parser")

    meta_tags: dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = ""
        for attr in ("name", "property", "http-equiv"):
            key = (meta.get(attr) or "").strip()
            if key:
                break
        content = (meta.get("content") or "").strip()
        if key and content:
            meta_tags[key] = content

    # --- Title ---
    meta_tags["title"] = soup.title.get_text().strip() if soup.title else ""

    # --- Canonical URL ---
    canonical_tag = soup.find("link", rel="canonical", href=True)
    meta_tags["canonical"] = (canonical_tag["href"] or "").strip() if canonical_tag else ""

    # --- Favicon (rel is multi-valued, so "icon" also matches "shortcut icon") ---
    icon_tag = soup.find("link", rel="icon", href=True)
    icon_href = (icon_tag["href"] or "").strip() if icon_tag else ""
    meta_tags["favicon"] = urljoin(base_url, icon_href) if icon_href else ""

    return meta_tags


def analyze_url(raw_url: str, use_relays: bool | None = None) -> AnalysisReport:
    """Pipeline: normalize URL -> fetch HTML -> extract tags -> analyze."""
    url = normalize_url(raw_url)
    page = fetch_html(url, use_relays=use_relays)
    meta_tags = extract_meta_tags(page["html"], url)
    logger.debug("Extracted %d tags from %s", len(meta_tags), url)
    return analyze_meta_tags(meta_tags, url)
