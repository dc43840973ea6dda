"""Pydantic schemas for API request/response."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from models import TagCategory, TagStatus


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/analyze."""

    url: str

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url_field(cls, value: object) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("URL is required")
        return text


class _ReportModel(BaseModel):
    """Frozen model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class SeoTag(_ReportModel):
    """Status of a single checked tag."""

    key: str
    name: str
    value: str = ""
    category: TagCategory
    status: TagStatus
    recommendation: str | None = None


class Recommendation(_ReportModel):
    """A suggested fix, optionally with an HTML snippet."""

    title: str
    description: str
    solution: str | None = None
    additional_info: str | None = None


class GooglePreview(_ReportModel):
    title: str
    url: str
    description: str


class FacebookPreview(_ReportModel):
    title: str
    description: str
    image: str


class TwitterPreview(_ReportModel):
    title: str
    description: str
    image: str
    card_type: str


class SocialPreviews(_ReportModel):
    facebook: FacebookPreview
    twitter: TwitterPreview


class Recommendations(_ReportModel):
    critical: list[Recommendation] = Field(default_factory=list)
    improvements: list[Recommendation] = Field(default_factory=list)


class CategorySummary(_ReportModel):
    present: int
    total: int


class StatusSummary(_ReportModel):
    """Present/total counts per scoring group."""

    essential: CategorySummary
    social: CategorySummary
    technical: CategorySummary


class AnalysisReport(_ReportModel):
    """Full SEO analysis returned by POST /api/analyze."""

    url: str
    title: str = ""
    description: str = ""
    favicon: str = ""
    tags: list[SeoTag]
    score: int = Field(ge=0, le=100)
    google_preview: GooglePreview
    social_previews: SocialPreviews
    recommendations: Recommendations
    status_summary: StatusSummary


class ErrorResponse(BaseModel):
    """Body returned for 400/500 responses."""

    message: str
