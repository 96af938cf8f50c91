"""Gemini implementation of the model provider interface."""

import base64
import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.errors import ConfigurationError, UpstreamError
from ...domain.ports.model_provider import Citation, ModelProvider, ModelRequest, ModelResponse

logger = logging.getLogger(__name__)


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class GeminiConfig(BaseModel):
    """Configuration for Gemini adapter."""

    api_key: str = Field(..., description="Google AI Studio API key")
    model: str = Field(default="gemini-2.5-flash", description="Model to use")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language API base URL",
    )
    timeout: float = Field(default=60.0, description="API timeout in seconds")

    @classmethod
    def from_env(cls) -> "GeminiConfig":
        """Create configuration from environment variables."""
        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", ""),
            model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            timeout=float(os.getenv("GEMINI_TIMEOUT", "60")),
        )


class GeminiAdapter(ModelProvider):
    """Gemini implementation of the model provider interface.

    Uses the ``generateContent`` REST endpoint with the Google Search tool
    for grounding.
    """

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            transport: Optional httpx transport, used to stub the API in tests
        """
        self._config = config or GeminiConfig(api_key="")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if not self._config.api_key:
            raise ConfigurationError("API Key is missing. Please set GEMINI_API_KEY in the environment.")

        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                transport=self._transport,
                headers={
                    "x-goog-api-key": self._config.api_key,
                    "Content-Type": "application/json",
                },
            )
        self._initialized = True
        logger.info(f"✅ Gemini provider ready ({self._config.model})")

    def _build_payload(self, request: ModelRequest) -> Dict[str, Any]:
        parts: List[Dict[str, Any]] = []
        for part in request.parts:
            if part.is_attachment:
                parts.append({
                    "inlineData": {
                        "mimeType": part.mime_type,
                        "data": base64.b64encode(part.inline_data).decode("ascii"),
                    }
                })
            elif part.text is not None:
                parts.append({"text": part.text})

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"temperature": request.temperature},
        }
        if request.enable_grounding:
            payload["tools"] = [{"google_search": {}}]
        return payload

    @staticmethod
    def _parse_body(body: Any) -> ModelResponse:
        if not isinstance(body, dict):
            raise UpstreamError("Model endpoint returned an unexpected body")
        candidates = body.get("candidates") or []
        if not isinstance(candidates, list):
            raise UpstreamError("Model endpoint returned an unexpected body")
        if not candidates:
            return ModelResponse()
        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise UpstreamError("Model endpoint returned an unexpected body")

        content = candidate.get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        text = "".join(
            part["text"] for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )

        metadata = candidate.get("groundingMetadata") or {}
        chunks = metadata.get("groundingChunks") if isinstance(metadata, dict) else None
        if not isinstance(chunks, list):
            chunks = []
        citations = [
            Citation(uri=_str_or_none(web.get("uri")), title=_str_or_none(web.get("title")))
            for web in (chunk.get("web") for chunk in chunks if isinstance(chunk, dict))
            if isinstance(web, dict)
        ]
        return ModelResponse(text=text, citations=citations)

    async def generate(self, request: ModelRequest) -> ModelResponse:
        """Run one ``generateContent`` call."""
        if not self._client:
            await self.initialize()

        try:
            response = await self._client.post(
                f"/models/{self._config.model}:generateContent",
                json=self._build_payload(request),
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"❌ Gemini request timed out after {self._config.timeout}s")
            raise UpstreamError(f"Model request timed out after {self._config.timeout:.0f} seconds") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"❌ Gemini API error: HTTP {status}")
            raise UpstreamError(f"Model request failed with HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.error(f"❌ Gemini request failed: {type(e).__name__}: {e}")
            raise UpstreamError(f"Model request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError("Model endpoint returned a non-JSON body") from e
        return self._parse_body(body)

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the provider."""
        return "Gemini"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "text_analysis": True,
            "url_analysis": True,
            "image_analysis": True,
            "search_grounding": True,
        }
