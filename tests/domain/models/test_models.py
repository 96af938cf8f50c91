"""Tests for domain models."""

import pytest
from pydantic import ValidationError

from aleth.domain.models.analysis_input import ImageInput, InputType, TextInput, UrlInput
from aleth.domain.models.analysis_result import (
    AnalysisResult,
    FactCategory,
    MisleadingSubCategory,
    WebSource,
)


def make_result(**overrides) -> AnalysisResult:
    fields = {
        "truth_score": 90,
        "source_credibility_score": 85,
        "category": FactCategory.VERIFIED,
        "summary": "Accurate",
        "detailed_analysis": "Confirmed by several outlets.",
    }
    fields.update(overrides)
    return AnalysisResult(**fields)


def test_text_input_is_stripped():
    """Test surrounding whitespace is removed."""
    text_input = TextInput(text="  a claim \n")
    assert text_input.text == "a claim"
    assert text_input.input_type is InputType.TEXT


@pytest.mark.parametrize("model,field", [(TextInput, "text"), (UrlInput, "url")])
def test_blank_inputs_rejected(model, field):
    """Test blank text and URLs are invalid."""
    with pytest.raises(ValidationError):
        model(**{field: "   "})


def test_image_input_requires_image_media_type():
    """Test non-image uploads are rejected."""
    with pytest.raises(ValidationError):
        ImageInput(data=b"%PDF", mime_type="application/pdf")
    with pytest.raises(ValidationError):
        ImageInput(data=b"", mime_type="image/png")

    image = ImageInput(data=b"gif", mime_type="IMAGE/GIF")
    assert image.mime_type == "image/gif"


def test_inputs_are_immutable():
    """Test inputs cannot be changed after creation."""
    text_input = TextInput(text="claim")
    with pytest.raises(ValidationError):
        text_input.text = "other"


def test_sub_category_kept_for_misleading():
    """Test a sub-category survives when the category is Misleading."""
    result = make_result(category=FactCategory.MISLEADING, sub_category=MisleadingSubCategory.FALSE_CONTEXT)
    assert result.sub_category is MisleadingSubCategory.FALSE_CONTEXT


def test_sub_category_cleared_for_other_categories():
    """Test the model enforces the category coupling itself."""
    result = make_result(category=FactCategory.SATIRE, sub_category=MisleadingSubCategory.FABRICATED)
    assert result.sub_category is None


def test_not_applicable_sub_category_is_absent():
    """Test N/A is stored as no sub-category."""
    result = make_result(category=FactCategory.MISLEADING, sub_category=MisleadingSubCategory.NONE)
    assert result.sub_category is None


@pytest.mark.parametrize("score", [-1, 101])
def test_scores_are_bounded(score):
    """Test scores outside 0-100 are rejected."""
    with pytest.raises(ValidationError):
        make_result(truth_score=score)


@pytest.mark.parametrize("score,label", [(100, "Highly Credible"), (80, "Highly Credible"), (79, "Questionable"), (50, "Questionable"), (49, "Likely False")])
def test_verdict_label(score, label):
    """Test truth score bands."""
    assert make_result(truth_score=score).verdict_label == label


def test_serializes_with_wire_names():
    """Test JSON output uses the camelCase wire names."""
    result = make_result(grounding_sources=[WebSource(uri="https://a.example", title="A")])
    data = result.model_dump(by_alias=True, mode="json")

    assert data["truthScore"] == 90
    assert data["sourceCredibilityScore"] == 85
    assert data["category"] == "Verified / High Credibility"
    assert data["subCategory"] is None
    assert data["groundingSources"] == [{"uri": "https://a.example", "title": "A"}]
    assert data["externalFactChecks"] == []
    assert data["verdictLabel"] == "Highly Credible"


def test_result_is_immutable():
    """Test the result cannot be changed once returned."""
    result = make_result()
    with pytest.raises(ValidationError):
        result.truth_score = 10
