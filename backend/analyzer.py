"""Meta tag analysis: tag statuses, recommendations, previews and score.

Everything here is pure. `analyze_meta_tags` takes the tag mapping produced by
scraper.extract_meta_tags and returns a fresh AnalysisReport; a missing tag is
a status, never an error.
"""

import math
from typing import Mapping, Sequence
from urllib.parse import urlparse

from models import CatalogueEntry
from schemas import (
    AnalysisReport,
    CategorySummary,
    FacebookPreview,
    GooglePreview,
    Recommendation,
    Recommendations,
    SeoTag,
    SocialPreviews,
    StatusSummary,
    TwitterPreview,
)

TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60
DESCRIPTION_MIN_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 160

ESSENTIAL_WEIGHT = 0.5
SOCIAL_WEIGHT = 0.3
TECHNICAL_WEIGHT = 0.2

TAG_CATALOGUE: list[CatalogueEntry] = [
    {"key": "title", "name": "Title Tag", "category": "essential"},
    {"key": "description", "name": "Meta Description", "category": "essential"},
    {"key": "canonical", "name": "Canonical URL", "category": "essential"},
    {"key": "og:title", "name": "og:title", "category": "opengraph"},
    {"key": "og:description", "name": "og:description", "category": "opengraph"},
    {"key": "og:image", "name": "og:image", "category": "opengraph"},
    {"key": "og:image:width", "name": "og:image:width", "category": "opengraph"},
    {"key": "og:image:height", "name": "og:image:height", "category": "opengraph"},
    {"key": "og:type", "name": "og:type", "category": "opengraph"},
    {"key": "twitter:card", "name": "twitter:card", "category": "twitter"},
    {"key": "twitter:title", "name": "twitter:title", "category": "twitter"},
    {"key": "twitter:description", "name": "twitter:description", "category": "twitter"},
    {"key": "twitter:image", "name": "twitter:image", "category": "twitter"},
    {"key": "viewport", "name": "Viewport", "category": "technical"},
]

# Scoring groups: status summary key -> tag categories it covers.
SUMMARY_GROUPS: dict[str, tuple[str, ...]] = {
    "essential": ("essential",),
    "social": ("opengraph", "twitter"),
    "technical": ("technical",),
}

# Fixed hints for the binary tags.
_PRESENCE_HINTS = {
    "og:title": "Title for social media sharing",
    "og:description": "Description for social media sharing",
    "og:image": "Image for social media sharing",
    "og:image:width": "Width of the OG image",
    "og:image:height": "Height of the OG image",
    "og:type": "Type of content (e.g., website, article)",
    "twitter:card": "Defines the type of Twitter card",
    "twitter:title": "Title for Twitter sharing",
    "twitter:description": "Description for Twitter sharing",
    "twitter:image": "Image for Twitter sharing",
}


def _length_status(value: str, min_length: int, max_length: int) -> str:
    if not value:
        return "missing"
    if len(value) < min_length or len(value) > max_length:
        return "needs_improvement"
    return "present"


def _length_hint(value: str, status: str, min_length: int, target: str, missing_text: str) -> str:
    if status == "missing":
        return missing_text
    if status == "present":
        return f"Good length ({len(value)} characters). Aim for {target} characters."
    label = "Too short" if len(value) < min_length else "Too long"
    return f"{label} ({len(value)} characters). Aim for {target} characters."


def _tag_recommendation(key: str, value: str, status: str) -> str:
    if key == "title":
        return _length_hint(
            value, status, TITLE_MIN_LENGTH, "50-60", "Missing title tag. Add a descriptive title."
        )
    if key == "description":
        return _length_hint(
            value,
            status,
            DESCRIPTION_MIN_LENGTH,
            "150-160",
            "Missing meta description. Add a concise summary of your page.",
        )
    if key == "canonical":
        if status == "present":
            return "Canonical URL is properly set."
        return "Missing canonical tag. Add a canonical URL to prevent duplicate content issues."
    if key == "viewport":
        if status == "present":
            return "Viewport is properly set for responsive design."
        return "Missing viewport meta tag. Add it for better mobile rendering."
    return _PRESENCE_HINTS[key]


def build_tags(meta_tags: Mapping[str, str]) -> list[SeoTag]:
    """Return one SeoTag per catalogue entry, in catalogue order."""
    tags: list[SeoTag] = []
    for entry in TAG_CATALOGUE:
        key = entry["key"]
        value = meta_tags.get(key) or ""
        if key == "title":
            status = _length_status(value, TITLE_MIN_LENGTH, TITLE_MAX_LENGTH)
        elif key == "description":
            status = _length_status(value, DESCRIPTION_MIN_LENGTH, DESCRIPTION_MAX_LENGTH)
        else:
            status = "present" if value else "missing"
        tags.append(
            SeoTag(
                key=key,
                name=entry["name"],
                value=value,
                category=entry["category"],
                status=status,
                recommendation=_tag_recommendation(key, value, status),
            )
        )
    return tags


def build_recommendations(meta_tags: Mapping[str, str], url: str) -> Recommendations:
    """Critical fixes and improvements, in catalogue order."""
    critical: list[Recommendation] = []
    improvements: list[Recommendation] = []

    title = meta_tags.get("title") or ""
    description = meta_tags.get("description") or ""
    og_title = meta_tags.get("og:title") or ""
    og_description = meta_tags.get("og:description") or ""
    og_image = meta_tags.get("og:image") or ""
    twitter_title = meta_tags.get("twitter:title") or ""
    twitter_description = meta_tags.get("twitter:description") or ""

    if not title:
        critical.append(
            Recommendation(
                title="Missing Title Tag",
                description="Your page is missing a title tag, which is crucial for SEO.",
                solution="<title>Your Page Title | Your Brand</title>",
                additional_info="The title tag is one of the most important elements for SEO and user experience.",
            )
        )
    elif not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        too_short = len(title) < TITLE_MIN_LENGTH
        improvements.append(
            Recommendation(
                title="Title Too Short" if too_short else "Title Too Long",
                description=f"Your title is {'too short' if too_short else 'too long'} ({len(title)} characters).",
                solution="<title>Your Optimal Length Title (50-60 characters) | Brand</title>",
                additional_info="The ideal title length is between 50-60 characters to display properly in search results.",
            )
        )

    if not description:
        critical.append(
            Recommendation(
                title="Missing Meta Description",
                description="Your page is missing a meta description tag.",
                solution=(
                    '<meta name="description" content="Your concise page description that is '
                    '150-160 characters long and includes relevant keywords for your content." />'
                ),
                additional_info="Meta descriptions help improve click-through rates from search results.",
            )
        )
    elif not DESCRIPTION_MIN_LENGTH <= len(description) <= DESCRIPTION_MAX_LENGTH:
        too_short = len(description) < DESCRIPTION_MIN_LENGTH
        improvements.append(
            Recommendation(
                title="Description Too Short" if too_short else "Description Too Long",
                description=(
                    f"Your meta description is {'too short' if too_short else 'too long'} "
                    f"({len(description)} characters)."
                ),
                solution=(
                    '<meta name="description" content="Your optimal length description between '
                    "150-160 characters that accurately summarizes the page content and includes "
                    'relevant keywords." />'
                ),
                additional_info="The ideal description length is between 150-160 characters.",
            )
        )

    if not meta_tags.get("canonical"):
        critical.append(
            Recommendation(
                title="Missing Canonical URL Tag",
                description="Your page is missing a canonical URL tag.",
                solution=f'<link rel="canonical" href="{url}" />',
                additional_info=(
                    "This helps prevent duplicate content issues when the same page "
                    "is accessible via multiple URLs."
                ),
            )
        )

    if not og_title or not og_description or not og_image:
        improvements.append(
            Recommendation(
                title="Missing Open Graph Tags",
                description="Your page is missing essential Open Graph tags for social media sharing.",
                solution="\n".join(
                    [
                        f'<meta property="og:title" content="{title or "Your Title"}" />',
                        f'<meta property="og:description" content="{description or "Your Description"}" />',
                        '<meta property="og:image" content="https://example.com/image.jpg" />',
                        f'<meta property="og:url" content="{url}" />',
                        '<meta property="og:type" content="website" />',
                    ]
                ),
                additional_info=(
                    "Open Graph tags improve how your content appears when shared on "
                    "social media platforms like Facebook."
                ),
            )
        )

    if og_image and (not meta_tags.get("og:image:width") or not meta_tags.get("og:image:height")):
        improvements.append(
            Recommendation(
                title="Add Open Graph Image Dimensions",
                description="Your page has an og:image tag but is missing the image dimensions.",
                solution=(
                    '<meta property="og:image:width" content="1200" />\n'
                    '<meta property="og:image:height" content="630" />'
                ),
                additional_info="This improves rendering in Facebook and other platforms that use Open Graph.",
            )
        )

    if not meta_tags.get("twitter:card") or not meta_tags.get("twitter:image"):
        snippet_title = twitter_title or og_title or title or "Your Title"
        snippet_description = twitter_description or og_description or description or "Your Description"
        improvements.append(
            Recommendation(
                title="Add Twitter Card Tags",
                description="Your page is missing essential Twitter Card tags for better sharing on Twitter.",
                solution="\n".join(
                    [
                        '<meta name="twitter:card" content="summary_large_image" />',
                        f'<meta name="twitter:title" content="{snippet_title}" />',
                        f'<meta name="twitter:description" content="{snippet_description}" />',
                        '<meta name="twitter:image" content="https://example.com/image.jpg" />',
                    ]
                ),
                additional_info="Twitter Card tags help control how your content appears when shared on Twitter.",
            )
        )

    if not meta_tags.get("viewport"):
        improvements.append(
            Recommendation(
                title="Missing Viewport Meta Tag",
                description="Your page is missing a viewport meta tag for responsive design.",
                solution='<meta name="viewport" content="width=device-width, initial-scale=1.0" />',
                additional_info=(
                    "The viewport meta tag is essential for mobile-friendly pages, "
                    "which is a ranking factor for search engines."
                ),
            )
        )

    return Recommendations(critical=critical, improvements=improvements)


def summarize_tags(tags: Sequence[SeoTag]) -> StatusSummary:
    """Count present tags against totals for each scoring group."""
    counts: dict[str, CategorySummary] = {}
    for group, categories in SUMMARY_GROUPS.items():
        group_tags = [tag for tag in tags if tag.category in categories]
        present = sum(1 for tag in group_tags if tag.status == "present")
        counts[group] = CategorySummary(present=present, total=len(group_tags))
    return StatusSummary(**counts)


def _completeness(summary: CategorySummary) -> float:
    if summary.total <= 0:
        return 0.0
    return summary.present / summary.total * 100


def calculate_score(summary: StatusSummary) -> int:
    """Weighted completeness of the three groups, rounded half up to 0-100."""
    weighted = (
        _completeness(summary.essential) * ESSENTIAL_WEIGHT
        + _completeness(summary.social) * SOCIAL_WEIGHT
        + _completeness(summary.technical) * TECHNICAL_WEIGHT
    )
    return max(0, min(100, math.floor(weighted + 0.5)))


def display_url(url: str) -> str:
    """hostname + path for the search preview, or the raw URL if it does not parse."""
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return url
    if not hostname:
        return url
    return hostname + (parsed.path or "/")


def analyze_meta_tags(meta_tags: Mapping[str, str], url: str) -> AnalysisReport:
    """Build the full report for one page."""
    title = meta_tags.get("title") or ""
    description = meta_tags.get("description") or ""
    og_title = meta_tags.get("og:title") or ""
    og_description = meta_tags.get("og:description") or ""
    og_image = meta_tags.get("og:image") or ""
    twitter_title = meta_tags.get("twitter:title") or ""
    twitter_description = meta_tags.get("twitter:description") or ""

    tags = build_tags(meta_tags)
    summary = summarize_tags(tags)

    return AnalysisReport(
        url=url,
        title=title,
        description=description,
        favicon=meta_tags.get("favicon") or "",
        tags=tags,
        score=calculate_score(summary),
        google_preview=GooglePreview(
            title=title or "No title",
            url=display_url(url),
            description=description or "No description available",
        ),
        social_previews=SocialPreviews(
            facebook=FacebookPreview(
                title=og_title or title or "No title",
                description=og_description or description,
                image=og_image,
            ),
            twitter=TwitterPreview(
                title=twitter_title or og_title or title or "No title",
                description=twitter_description or og_description or description,
                image=meta_tags.get("twitter:image") or og_image,
                card_type=meta_tags.get("twitter:card") or "",
            ),
        ),
        recommendations=build_recommendations(meta_tags, url),
        status_summary=summary,
    )
