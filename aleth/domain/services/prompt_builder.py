"""Builds the model request for one analysis input."""

from typing import List

from ..models.analysis_input import AnalysisInput, ImageInput, TextInput, UrlInput
from ..models.analysis_result import FactCategory, MisleadingSubCategory
from ..ports.model_provider import ContentPart, ModelRequest


def _bullets(members) -> str:
    return "\n".join(f"       - '{member.value}'" for member in members)


_CATEGORIES = [c for c in FactCategory if c is not FactCategory.UNKNOWN]
_SUB_CATEGORIES = [s for s in MisleadingSubCategory if s is not MisleadingSubCategory.NONE]

SYSTEM_PROMPT = f"""
    You are Aleth, an automated fact-checking system.
    Analyze the user input (text, URL or image) and determine how truthful it is, using Google Search.

    1. Search & Verify: search the web to verify the claims, the image context or the URL content.
    2. Cross-Reference: look for existing fact-checks by reputable organizations such as Snopes,
       PolitiFact, FactCheck.org, Reuters Fact Check and AP News.
    3. Source Analysis: assess the credibility of the source domain (for a URL) or the likely origin
       of the claim. Consider domain age, known biases and history of retractions.

    4. Categorize into exactly one of these categories:
{_bullets(_CATEGORIES)}

    5. If the category is 'Misleading', name its specific nature (sub-category):
{_bullets(_SUB_CATEGORIES)}
       Otherwise use null.

    6. Scoring:
       - 'truthScore' (0-100): 0 = completely false, 100 = completely true.
       - 'sourceCredibilityScore' (0-100): 0 = known fake news site, 100 = gold standard journalism.

    IMPORTANT: Output the result as raw JSON inside ```json ... ```.
    Structure:
    {{
      "truthScore": number,
      "sourceCredibilityScore": number,
      "category": string,
      "subCategory": string or null,
      "summary": string,
      "detailedAnalysis": string,
      "externalFactChecks": [
         {{ "organization": "Snopes", "rating": "False", "url": "..." }}
      ]
    }}
"""

IMAGE_INSTRUCTION = "Analyze this image for manipulation, missing or false context, or reuse as fake news."


def build_input_parts(analysis_input: AnalysisInput) -> List[ContentPart]:
    """Prompt parts specific to the input kind."""
    if isinstance(analysis_input, TextInput):
        return [ContentPart(text=f'Verify this claim/text: "{analysis_input.text}"')]
    if isinstance(analysis_input, UrlInput):
        return [ContentPart(text=f"Analyze the credibility and content of this URL: {analysis_input.url}")]
    if isinstance(analysis_input, ImageInput):
        return [
            ContentPart(inline_data=analysis_input.data, mime_type=analysis_input.mime_type),
            ContentPart(text=IMAGE_INSTRUCTION),
        ]
    raise TypeError(f"Unsupported analysis input: {type(analysis_input).__name__}")


def build_request(
    analysis_input: AnalysisInput,
    temperature: float = 0.1,
    enable_grounding: bool = True,
) -> ModelRequest:
    """Compose the instruction prompt with the input fragment.

    Args:
        analysis_input: Text, URL or image to analyze
        temperature: Decoding temperature; keep it low for consistent scoring
        enable_grounding: Ask the provider to ground the answer in web search

    Returns:
        Request ready to hand to a model provider
    """
    return ModelRequest(
        parts=[ContentPart(text=SYSTEM_PROMPT), *build_input_parts(analysis_input)],
        temperature=temperature,
        enable_grounding=enable_grounding,
    )
