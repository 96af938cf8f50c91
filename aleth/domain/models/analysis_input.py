"""Domain models for the content submitted for analysis."""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field, field_validator


class InputType(str, Enum):
    """Kinds of content the analyzer accepts."""

    TEXT = "TEXT"
    URL = "URL"
    IMAGE = "IMAGE"


class TextInput(BaseModel):
    """A free-text claim to verify."""

    input_type: Literal[InputType.TEXT] = InputType.TEXT
    text: str = Field(..., description="Claim or passage to verify")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @field_validator("text")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Text input cannot be empty")
        return value

    @property
    def preview(self) -> str:
        return self.text[:100] + ("..." if len(self.text) > 100 else "")


class UrlInput(BaseModel):
    """A web page whose content and source should be assessed."""

    input_type: Literal[InputType.URL] = InputType.URL
    url: str = Field(..., description="Address of the page to analyze")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @field_validator("url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("URL input cannot be empty")
        return value

    @property
    def preview(self) -> str:
        return self.url


class ImageInput(BaseModel):
    """An uploaded image checked for manipulation or reuse out of context."""

    input_type: Literal[InputType.IMAGE] = InputType.IMAGE
    data: bytes = Field(..., description="Raw image bytes")
    mime_type: str = Field(..., description="Declared media type, e.g. image/png")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @field_validator("data")
    @classmethod
    def _require_data(cls, value: bytes) -> bytes:
        if not value:
            raise ValueError("Image input cannot be empty")
        return value

    @field_validator("mime_type")
    @classmethod
    def _require_image_type(cls, value: str) -> str:
        value = value.strip().lower()
        if not value.startswith("image/"):
            raise ValueError(f"Unsupported media type for image input: {value or 'unknown'}")
        return value

    @property
    def preview(self) -> str:
        return f"[{self.mime_type}, {len(self.data)} bytes]"


AnalysisInput = Union[TextInput, UrlInput, ImageInput]
