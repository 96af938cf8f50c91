"""Analysis API endpoints."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from pydantic import BaseModel, Field

from ...domain.models.analysis_input import ImageInput, TextInput, UrlInput
from ...domain.models.analysis_result import AnalysisResult
from ...domain.services.analysis_service import AnalysisService
from ...infrastructure.dependencies import get_analysis_service, get_service_container

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analysis"])

SESSION_HEADER = "X-Session-Id"


def get_identity(request: Request) -> str:
    """Rate limit identity: the session header, else the client address."""
    session_id = request.headers.get(SESSION_HEADER, "").strip()
    if session_id:
        return session_id
    if request.client and request.client.host:
        return f"ip_{request.client.host}"
    return "default_user"


class TextAnalysisRequest(BaseModel):
    """Request model for text analysis."""

    text: str = Field(..., description="Claim or passage to verify")


class UrlAnalysisRequest(BaseModel):
    """Request model for URL analysis."""

    url: str = Field(..., description="Page to analyze")


@router.post("/text", response_model=AnalysisResult, response_model_by_alias=True)
async def analyze_text(
    body: TextAnalysisRequest,
    identity: str = Depends(get_identity),
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalysisResult:
    """Verify a free-text claim."""
    return await service.analyze(TextInput(text=body.text), identity)


@router.post("/url", response_model=AnalysisResult, response_model_by_alias=True)
async def analyze_url(
    body: UrlAnalysisRequest,
    identity: str = Depends(get_identity),
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalysisResult:
    """Assess the content and source credibility of a URL."""
    return await service.analyze(UrlInput(url=body.url), identity)


@router.post("/image", response_model=AnalysisResult, response_model_by_alias=True)
async def analyze_image(
    file: UploadFile = File(...),
    identity: str = Depends(get_identity),
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalysisResult:
    """Check an uploaded image for manipulation or false context."""
    max_bytes = get_service_container().config.max_image_bytes
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(status_code=413, detail=f"Image exceeds {max_bytes} bytes")

    logger.info(f"🖼️ Received image upload {file.filename!r} ({len(data)} bytes)")
    image = ImageInput(data=data, mime_type=file.content_type or "")
    return await service.analyze(image, identity)
