"""Feedback API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ...domain.models.feedback import FeedbackEntry, FeedbackRating
from ...domain.services.feedback_service import FeedbackService
from ...infrastructure.dependencies import get_feedback_service
from .analysis import get_identity

router = APIRouter(prefix="/feedback", tags=["feedback"])


class FeedbackRequest(BaseModel):
    """Request model for verdict feedback."""

    rating: FeedbackRating = Field(..., description="'up' if the verdict was accurate, 'down' otherwise")
    comment: Optional[str] = Field(None, max_length=2000, description="Additional context")


@router.post("", response_model=FeedbackEntry, status_code=201)
async def submit_feedback(
    body: FeedbackRequest,
    identity: str = Depends(get_identity),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackEntry:
    """Queue feedback on a verdict for review."""
    return service.submit(body.rating, body.comment, identity)


@router.get("", response_model=List[FeedbackEntry])
async def list_feedback(
    rating: Optional[FeedbackRating] = Query(None, description="Only list feedback with this rating"),
    service: FeedbackService = Depends(get_feedback_service),
) -> List[FeedbackEntry]:
    """List feedback awaiting review, optionally only one rating."""
    if rating is FeedbackRating.INACCURATE:
        return service.disputed()
    if rating is not None:
        return [entry for entry in service.pending() if entry.rating is rating]
    return service.pending()
