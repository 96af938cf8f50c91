"""Domain models for the normalized fact-check verdict."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationInfo, computed_field, field_validator


class FactCategory(str, Enum):
    """High-level categories the model sorts content into."""

    SATIRE = "Satire"
    CLICKBAIT = "Clickbait"
    UNRELIABLE = "Unreliable Sources"
    MISLEADING = "Misleading"
    VERIFIED = "Verified / High Credibility"
    UNKNOWN = "Unknown"


class MisleadingSubCategory(str, Enum):
    """Specific nature of misleading content."""

    TECHNICALLY_TRUE = "Technically True"  # True facts used to imply falsehood
    PARTIALLY_TRUE = "Partially True"  # Mix of fact and fiction
    FACTS_TWISTED = "Facts Twisted"  # Real events re-interpreted falsely
    FALSE_CONTEXT = "False Context"  # Real image/quote in wrong context
    FABRICATED = "Fabricated / Total Fake"  # Completely made up
    NONE = "N/A"


class WebSource(BaseModel):
    """A web page the model consulted through search grounding."""

    uri: str = Field(..., description="Address of the source; identity for deduplication")
    title: str = Field(..., description="Display title of the source")

    class Config:
        """Pydantic model configuration."""
        frozen = True


class ExternalCheck(BaseModel):
    """An existing fact-check published by a third-party organization.

    Fields are passed through from the model as written; any of them may be
    missing and consumers must tolerate that.
    """

    organization: Optional[str] = Field(None, description="e.g. Snopes, PolitiFact")
    rating: Optional[str] = Field(None, description="The organization's own rating wording")
    url: Optional[str] = Field(None, description="Link to the published fact-check")

    class Config:
        """Pydantic model configuration."""
        frozen = True


class AnalysisResult(BaseModel):
    """Represents the verdict for one analyzed input."""

    truth_score: int = Field(..., ge=0, le=100, alias="truthScore", description="0 = total lie, 100 = absolute truth")
    source_credibility_score: int = Field(
        ..., ge=0, le=100, alias="sourceCredibilityScore",
        description="0 = known fake news site, 100 = gold standard journalism",
    )
    category: FactCategory = Field(..., description="High-level category")
    sub_category: Optional[MisleadingSubCategory] = Field(
        None, alias="subCategory", description="Only set when the category is Misleading"
    )
    summary: str = Field(..., description="One-line verdict")
    detailed_analysis: str = Field(..., alias="detailedAnalysis", description="Full explanation")
    grounding_sources: List[WebSource] = Field(
        default_factory=list, alias="groundingSources", description="Search results the verdict is grounded on"
    )
    external_fact_checks: List[ExternalCheck] = Field(
        default_factory=list, alias="externalFactChecks", description="Existing third-party fact-checks"
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "truthScore": 2,
                "sourceCredibilityScore": 80,
                "category": "Misleading",
                "subCategory": "Fabricated / Total Fake",
                "summary": "False claim",
                "detailedAnalysis": "The moon is composed of silicate rock, not cheese.",
                "groundingSources": [{"uri": "https://science.nasa.gov/moon/composition/", "title": "nasa.gov"}],
                "externalFactChecks": [],
            }
        }

    @field_validator("sub_category")
    @classmethod
    def _only_when_misleading(
        cls, value: Optional[MisleadingSubCategory], info: ValidationInfo
    ) -> Optional[MisleadingSubCategory]:
        if value == MisleadingSubCategory.NONE:
            return None
        if info.data.get("category") != FactCategory.MISLEADING:
            return None
        return value

    @computed_field(alias="verdictLabel")
    @property
    def verdict_label(self) -> str:
        """Human-readable band for the truth score."""
        if self.truth_score >= 80:
            return "Highly Credible"
        if self.truth_score >= 50:
            return "Questionable"
        return "Likely False"
