"""Domain model for user feedback on a verdict."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class FeedbackRating(str, Enum):
    """Whether the user agreed with the verdict."""

    ACCURATE = "up"
    INACCURATE = "down"


class FeedbackEntry(BaseModel):
    """A rating queued for human review."""

    id: UUID = Field(default_factory=uuid4, description="Feedback identifier")
    rating: FeedbackRating = Field(..., description="Accurate (up) or inaccurate (down)")
    comment: Optional[str] = Field(None, max_length=2000, description="Why the model might be wrong")
    identity: Optional[str] = Field(None, description="Session that submitted the feedback")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="When feedback was received")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        json_schema_extra = {
            "example": {
                "rating": "down",
                "comment": "The quote is real but from 2016, not this year.",
            }
        }
