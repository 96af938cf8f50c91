"""Protocol for hosted language model providers."""

from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, Field


class ContentPart(BaseModel):
    """One segment of a prompt: either text or a binary attachment."""

    text: Optional[str] = Field(None, description="Text segment")
    inline_data: Optional[bytes] = Field(None, description="Binary attachment")
    mime_type: Optional[str] = Field(None, description="Media type of the attachment")

    @property
    def is_attachment(self) -> bool:
        return self.inline_data is not None


class ModelRequest(BaseModel):
    """A single user turn sent to the model."""

    parts: List[ContentPart] = Field(..., description="Ordered prompt parts")
    temperature: float = Field(default=0.1, description="Decoding temperature")
    enable_grounding: bool = Field(default=True, description="Request web search grounding")


class Citation(BaseModel):
    """A grounding citation as reported by the provider."""

    uri: Optional[str] = Field(None, description="Reference URI")
    title: Optional[str] = Field(None, description="Display title")


class ModelResponse(BaseModel):
    """Free text answer plus any grounding citations."""

    text: str = Field(default="", description="Model output text")
    citations: List[Citation] = Field(default_factory=list, description="Grounding citations")


class ModelProvider(Protocol):
    """Protocol defining the interface for model providers."""

    async def initialize(self) -> None:
        """Initialize the provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def generate(self, request: ModelRequest) -> ModelResponse:
        """Send the prompt and return the model's answer.

        Raises:
            ConfigurationError: If the provider has no credential
            UpstreamError: If the call fails or times out
        """
        ...

    @property
    def provider_name(self) -> str:
        """Get the name of the provider."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is ready to serve requests."""
        ...

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        ...
