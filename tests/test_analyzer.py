"""
Unit tests for the meta tag analyzer.

The analyzer is pure, so these tests feed tag mappings directly.
"""

import pytest
from pydantic import ValidationError

from analyzer import (
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    TAG_CATALOGUE,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    analyze_meta_tags,
    calculate_score,
    display_url,
    summarize_tags,
)

URL = "https://example.com/blog/post"

COMPLETE_TAGS = {
    "title": "A" * 45,
    "description": "D" * 150,
    "canonical": URL,
    "og:title": "Open Graph Title",
    "og:description": "Open Graph description",
    "og:image": "https://example.com/og.png",
    "og:image:width": "1200",
    "og:image:height": "630",
    "og:type": "article",
    "twitter:card": "summary_large_image",
    "twitter:title": "Twitter Title",
    "twitter:description": "Twitter description",
    "twitter:image": "https://example.com/tw.png",
    "viewport": "width=device-width, initial-scale=1.0",
}


def _tag(report, key):
    return next(tag for tag in report.tags if tag.key == key)


def _titles(recommendations):
    return [item.title for item in recommendations]


class TestTagCatalogue:
    """Every report carries exactly the fixed catalogue."""

    @pytest.mark.parametrize("meta_tags", [{}, COMPLETE_TAGS, {"title": "Short", "robots": "noindex"}])
    def test_tags_match_catalogue(self, meta_tags):
        report = analyze_meta_tags(meta_tags, URL)
        assert [tag.key for tag in report.tags] == [entry["key"] for entry in TAG_CATALOGUE]
        assert len(report.tags) == 14

    @pytest.mark.parametrize("meta_tags", [{}, COMPLETE_TAGS, {"og:image": "x.png"}])
    def test_summary_totals_are_fixed(self, meta_tags):
        summary = analyze_meta_tags(meta_tags, URL).status_summary
        assert summary.essential.total == 3
        assert summary.social.total == 10
        assert summary.technical.total == 1

    def test_summary_recomputed_from_tags(self):
        report = analyze_meta_tags({"title": "T" * 40, "og:title": "x", "viewport": "w"}, URL)
        assert summarize_tags(report.tags) == report.status_summary
        present = sum(1 for tag in report.tags if tag.status == "present")
        summary = report.status_summary
        assert summary.essential.present + summary.social.present + summary.technical.present == present

    def test_display_names(self):
        report = analyze_meta_tags({}, URL)
        assert _tag(report, "title").name == "Title Tag"
        assert _tag(report, "description").name == "Meta Description"
        assert _tag(report, "canonical").name == "Canonical URL"
        assert _tag(report, "viewport").name == "Viewport"
        assert _tag(report, "og:type").category == "opengraph"
        assert _tag(report, "twitter:card").category == "twitter"

    def test_tags_are_immutable(self):
        report = analyze_meta_tags(COMPLETE_TAGS, URL)
        with pytest.raises(ValidationError):
            report.tags[0].status = "missing"


class TestLengthRules:
    """Title and description length bands."""

    @pytest.mark.parametrize(
        "length,expected",
        [
            (TITLE_MIN_LENGTH - 1, "needs_improvement"),
            (TITLE_MIN_LENGTH, "present"),
            (TITLE_MAX_LENGTH, "present"),
            (TITLE_MAX_LENGTH + 1, "needs_improvement"),
        ],
    )
    def test_title_bounds(self, length, expected):
        report = analyze_meta_tags({"title": "t" * length}, URL)
        assert _tag(report, "title").status == expected

    @pytest.mark.parametrize(
        "length,expected",
        [
            (DESCRIPTION_MIN_LENGTH - 1, "needs_improvement"),
            (DESCRIPTION_MIN_LENGTH, "present"),
            (DESCRIPTION_MAX_LENGTH, "present"),
            (DESCRIPTION_MAX_LENGTH + 1, "needs_improvement"),
        ],
    )
    def test_description_bounds(self, length, expected):
        report = analyze_meta_tags({"description": "d" * length}, URL)
        assert _tag(report, "description").status == expected

    def test_title_recommendation_states_length(self):
        report = analyze_meta_tags({"title": "Short"}, URL)
        tag = _tag(report, "title")
        assert tag.recommendation == "Too short (5 characters). Aim for 50-60 characters."

    def test_long_description_recommendation(self):
        report = analyze_meta_tags({"description": "d" * 200}, URL)
        assert "Too long (200 characters)" in _tag(report, "description").recommendation
        assert "150-160" in _tag(report, "description").recommendation

    def test_missing_title(self):
        report = analyze_meta_tags({"title": ""}, URL)
        assert _tag(report, "title").status == "missing"
        assert _tag(report, "title").value == ""

    def test_binary_tags_ignore_length(self):
        report = analyze_meta_tags({"og:title": "x", "canonical": "/"}, URL)
        assert _tag(report, "og:title").status == "present"
        assert _tag(report, "canonical").status == "present"


class TestScore:
    """Weighted category completeness."""

    def test_complete_page_scores_100(self):
        report = analyze_meta_tags(COMPLETE_TAGS, URL)
        assert report.score == 100
        assert report.recommendations.critical == []
        assert report.recommendations.improvements == []

    def test_empty_page_scores_0(self):
        assert analyze_meta_tags({}, URL).score == 0

    def test_short_title_contributes_nothing(self):
        report = analyze_meta_tags({"title": "Short", "description": "", "og:title": "", "canonical": ""}, URL)
        assert _tag(report, "title").status == "needs_improvement"
        assert _tag(report, "description").status == "missing"
        assert _tag(report, "canonical").status == "missing"
        assert report.status_summary.essential.present == 0
        assert report.score == 0

    def test_category_weights(self):
        assert analyze_meta_tags({"viewport": "width=device-width"}, URL).score == 20
        essentials = {key: COMPLETE_TAGS[key] for key in ("title", "description", "canonical")}
        assert analyze_meta_tags(essentials, URL).score == 50
        social = {key: value for key, value in COMPLETE_TAGS.items() if key.startswith(("og:", "twitter:"))}
        assert analyze_meta_tags(social, URL).score == 30

    def test_partial_essentials_round(self):
        # 33.33 * 0.5 = 16.67
        assert analyze_meta_tags({"canonical": URL}, URL).score == 17

    def test_score_is_monotonic(self):
        meta_tags: dict[str, str] = {}
        previous = analyze_meta_tags(meta_tags, URL).score
        for entry in TAG_CATALOGUE:
            meta_tags[entry["key"]] = COMPLETE_TAGS[entry["key"]]
            score = analyze_meta_tags(meta_tags, URL).score
            assert score >= previous
            previous = score
        assert previous == 100

    def test_partial_social_score(self):
        report = analyze_meta_tags({"og:title": "x", "twitter:card": "summary"}, URL)
        assert calculate_score(report.status_summary) == 6


class TestRecommendations:
    """Recommendation selection and snippets."""

    def test_empty_page_recommendations(self):
        recommendations = analyze_meta_tags({}, URL).recommendations
        assert _titles(recommendations.critical) == [
            "Missing Title Tag",
            "Missing Meta Description",
            "Missing Canonical URL Tag",
        ]
        assert _titles(recommendations.improvements) == [
            "Missing Open Graph Tags",
            "Add Twitter Card Tags",
            "Missing Viewport Meta Tag",
        ]

    def test_title_snippet(self):
        critical = analyze_meta_tags({}, URL).recommendations.critical
        assert critical[0].solution == "<title>Your Page Title | Your Brand</title>"
        assert critical[1].solution.startswith('<meta name="description"')

    def test_canonical_uses_resolved_url(self):
        critical = analyze_meta_tags({}, URL).recommendations.critical
        assert critical[2].solution == f'<link rel="canonical" href="{URL}" />'

    def test_out_of_range_lengths_are_improvements(self):
        recommendations = analyze_meta_tags(
            {"title": "t" * 70, "description": "short", "canonical": URL}, URL
        ).recommendations
        assert recommendations.critical == []
        titles = _titles(recommendations.improvements)
        assert titles[:2] == ["Title Too Long", "Description Too Short"]
        assert "50-60" in recommendations.improvements[0].solution

    def test_open_graph_snippet_uses_page_values(self):
        improvements = analyze_meta_tags(
            {"title": "My Page", "description": "About my page"}, URL
        ).recommendations.improvements
        snippet = improvements[-3].solution
        assert improvements[-3].title == "Missing Open Graph Tags"
        assert len(snippet.splitlines()) == 5
        assert '<meta property="og:title" content="My Page" />' in snippet
        assert '<meta property="og:description" content="About my page" />' in snippet
        assert f'<meta property="og:url" content="{URL}" />' in snippet

    def test_open_graph_snippet_placeholders(self):
        snippet = analyze_meta_tags({}, URL).recommendations.improvements[0].solution
        assert 'content="Your Title"' in snippet
        assert 'content="Your Description"' in snippet

    def test_single_open_graph_entry(self):
        improvements = analyze_meta_tags({"og:title": "x"}, URL).recommendations.improvements
        assert _titles(improvements).count("Missing Open Graph Tags") == 1

    def test_image_dimensions(self):
        tags = dict(COMPLETE_TAGS)
        del tags["og:image:height"]
        improvements = analyze_meta_tags(tags, URL).recommendations.improvements
        assert _titles(improvements) == ["Add Open Graph Image Dimensions"]
        assert 'content="1200"' in improvements[0].solution
        assert 'content="630"' in improvements[0].solution

    def test_no_dimensions_without_image(self):
        improvements = analyze_meta_tags({"og:title": "x"}, URL).recommendations.improvements
        assert "Add Open Graph Image Dimensions" not in _titles(improvements)

    def test_twitter_snippet_fallback_chain(self):
        tags = dict(COMPLETE_TAGS)
        del tags["twitter:image"]
        del tags["twitter:title"]
        improvements = analyze_meta_tags(tags, URL).recommendations.improvements
        assert _titles(improvements) == ["Add Twitter Card Tags"]
        snippet = improvements[0].solution
        assert len(snippet.splitlines()) == 4
        assert '<meta name="twitter:title" content="Open Graph Title" />' in snippet
        assert '<meta name="twitter:description" content="Twitter description" />' in snippet

    def test_viewport_snippet(self):
        tags = dict(COMPLETE_TAGS)
        del tags["viewport"]
        improvements = analyze_meta_tags(tags, URL).recommendations.improvements
        assert improvements[0].solution == '<meta name="viewport" content="width=device-width, initial-scale=1.0" />'


class TestPreviews:
    """Search and social previews."""

    def test_google_preview_defaults(self):
        preview = analyze_meta_tags({}, URL).google_preview
        assert preview.title == "No title"
        assert preview.description == "No description available"
        assert preview.url == "example.com/blog/post"

    def test_display_url(self):
        assert display_url("https://example.com/a/b?q=1#top") == "example.com/a/b"
        assert display_url("https://example.com") == "example.com/"
        assert display_url("not a url") == "not a url"

    def test_facebook_fallbacks(self):
        report = analyze_meta_tags({"title": "Page", "description": "Desc"}, URL)
        facebook = report.social_previews.facebook
        assert (facebook.title, facebook.description, facebook.image) == ("Page", "Desc", "")

    def test_twitter_fallbacks(self):
        report = analyze_meta_tags({"title": "Page", "og:title": "OG", "og:image": "og.png"}, URL)
        twitter = report.social_previews.twitter
        assert twitter.title == "OG"
        assert twitter.description == ""
        assert twitter.image == "og.png"
        assert twitter.card_type == ""

    def test_twitter_values_win(self):
        twitter = analyze_meta_tags(COMPLETE_TAGS, URL).social_previews.twitter
        assert twitter.title == "Twitter Title"
        assert twitter.image == "https://example.com/tw.png"
        assert twitter.card_type == "summary_large_image"

    def test_camel_case_serialization(self):
        data = analyze_meta_tags({"favicon": "https://example.com/favicon.ico"}, URL).model_dump(by_alias=True)
        assert data["favicon"] == "https://example.com/favicon.ico"
        assert set(data) >= {"googlePreview", "socialPreviews", "statusSummary", "recommendations"}
        assert "cardType" in data["socialPreviews"]["twitter"]
        assert "additionalInfo" in data["recommendations"]["critical"][0]
