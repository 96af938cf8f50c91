"""Turns the model's semi-structured answer into an AnalysisResult.

The model is asked for a JSON object inside a ```json fence, but it answers in
free text and regularly drifts: the fence may be missing, fields may be absent
or mistyped, and category names come back with slightly different wording.
Everything here is tolerant except one case: when no JSON object can be
recovered at all, :class:`ParseError` is raised rather than returning a
zero-valued verdict.
"""

import json
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Optional

from ..errors import ParseError
from ..models.analysis_result import (
    AnalysisResult,
    ExternalCheck,
    FactCategory,
    MisleadingSubCategory,
    WebSource,
)
from ..ports.model_provider import Citation

logger = logging.getLogger(__name__)

DEFAULT_TRUTH_SCORE = 0
DEFAULT_SOURCE_CREDIBILITY_SCORE = 50
DEFAULT_SUMMARY = "No summary provided."

_FENCED_JSON = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL | re.IGNORECASE)


def _lookup_key(value: str) -> str:
    return re.sub(r"[^a-z0-9]", "", value.lower())


def _build_lookup(enum_cls, aliases: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    lookup = {}
    for member in enum_cls:
        lookup[_lookup_key(member.value)] = member
        lookup[_lookup_key(member.name)] = member
    for alias, member in (aliases or {}).items():
        lookup[_lookup_key(alias)] = member
    return lookup


_CATEGORY_LOOKUP = _build_lookup(
    FactCategory,
    {
        "Unreliable Sources": FactCategory.UNRELIABLE,
        "Verified": FactCategory.VERIFIED,
        "High Credibility": FactCategory.VERIFIED,
    },
)
_SUB_CATEGORY_LOOKUP = _build_lookup(
    MisleadingSubCategory,
    {
        "Fabricated": MisleadingSubCategory.FABRICATED,
        "Total Fake": MisleadingSubCategory.FABRICATED,
        "Twisted": MisleadingSubCategory.FACTS_TWISTED,
        "null": MisleadingSubCategory.NONE,
    },
)


def extract_json_payload(text: str) -> Dict[str, Any]:
    """Find the structured payload in a model answer.

    A fenced block labelled ``json`` wins; otherwise the whole answer is
    parsed if it starts with ``{`` once trimmed.

    Raises:
        ParseError: If no JSON object can be recovered
    """
    match = _FENCED_JSON.search(text)
    if match:
        candidate = match.group(1)
    elif text.strip().startswith("{"):
        candidate = text.strip()
    else:
        raise ParseError("Model response contained no JSON payload.", raw_text=text)

    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.error(f"❌ Failed to parse JSON from model output: {e}")
        raise ParseError(f"Model response contained malformed JSON: {e.msg}", raw_text=text) from e

    if not isinstance(payload, dict):
        raise ParseError("Model response JSON is not an object.", raw_text=text)
    return payload


def normalize_score(value: Any, default: int) -> int:
    """Coerce a score to an integer in [0, 100], or ``default`` if not numeric."""
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return default
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return default
    return max(0, min(100, int(round(value))))


def normalize_category(value: Any) -> FactCategory:
    """Map a free-form category string onto :class:`FactCategory`."""
    if not isinstance(value, str):
        return FactCategory.UNKNOWN
    return _CATEGORY_LOOKUP.get(_lookup_key(value), FactCategory.UNKNOWN)


def normalize_sub_category(value: Any, category: FactCategory) -> Optional[MisleadingSubCategory]:
    """Map a sub-category string, dropping it unless the category is Misleading."""
    if category is not FactCategory.MISLEADING or not isinstance(value, str):
        return None
    sub_category = _SUB_CATEGORY_LOOKUP.get(_lookup_key(value))
    if sub_category is MisleadingSubCategory.NONE:
        return None
    return sub_category


def _text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def normalize_external_checks(value: Any) -> List[ExternalCheck]:
    """Pass external fact-checks through; only non-object entries are dropped."""
    if not isinstance(value, list):
        return []
    return [
        ExternalCheck(
            organization=_text_or_none(entry.get("organization")),
            rating=_text_or_none(entry.get("rating")),
            url=_text_or_none(entry.get("url")),
        )
        for entry in value
        if isinstance(entry, dict)
    ]


def dedupe_sources(citations: Iterable[Citation]) -> List[WebSource]:
    """Keep citations with both a URI and a title, first occurrence per URI."""
    sources: Dict[str, WebSource] = {}
    for citation in citations:
        if not citation.uri or not citation.title:
            continue
        if citation.uri not in sources:
            sources[citation.uri] = WebSource(uri=citation.uri, title=citation.title)
    return list(sources.values())


def _text_field(payload: Dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def parse_response(text: str, citations: Iterable[Citation] = ()) -> AnalysisResult:
    """Build the normalized result from raw model text and its citations.

    Args:
        text: Full model output
        citations: Grounding citations reported by the provider

    Returns:
        Normalized analysis result

    Raises:
        ParseError: If the text holds no recoverable JSON object
    """
    payload = extract_json_payload(text)

    category = normalize_category(payload.get("category"))
    return AnalysisResult(
        truth_score=normalize_score(payload.get("truthScore"), DEFAULT_TRUTH_SCORE),
        source_credibility_score=normalize_score(
            payload.get("sourceCredibilityScore"), DEFAULT_SOURCE_CREDIBILITY_SCORE
        ),
        category=category,
        sub_category=normalize_sub_category(payload.get("subCategory"), category),
        summary=_text_field(payload, "summary") or DEFAULT_SUMMARY,
        detailed_analysis=_text_field(payload, "detailedAnalysis") or text,
        grounding_sources=dedupe_sources(citations),
        external_fact_checks=normalize_external_checks(payload.get("externalFactChecks")),
    )
