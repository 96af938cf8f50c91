"""Service orchestrating one fact-check analysis against a model provider."""

import logging
from typing import Optional

from ..errors import ConfigurationError, ParseError
from ..models.analysis_input import AnalysisInput
from ..models.analysis_result import AnalysisResult
from ..ports.identity_provider import IdentityProvider
from ..ports.model_provider import ModelProvider
from .prompt_builder import build_request
from .rate_limiter import RateLimiter
from .response_parser import parse_response

logger = logging.getLogger(__name__)


class AnalysisService:
    """Turns one analysis input into one normalized verdict."""

    def __init__(
        self,
        model_provider: Optional[ModelProvider],
        rate_limiter: RateLimiter,
        identity_provider: Optional[IdentityProvider] = None,
        temperature: float = 0.1,
        enable_grounding: bool = True,
    ):
        """Initialize the service.

        Args:
            model_provider: Provider used to run the analysis; None when unconfigured
            rate_limiter: Quota gate consulted before every model call
            identity_provider: Source of the caller identity when none is passed in
            temperature: Decoding temperature for the model
            enable_grounding: Whether to ask for web-grounded citations
        """
        self.model = model_provider
        self.rate_limiter = rate_limiter
        self.identity_provider = identity_provider
        self.temperature = temperature
        self.enable_grounding = enable_grounding
        logger.info("🔧 AnalysisService initialized")

    def _resolve_identity(self, identity: Optional[str]) -> str:
        if identity:
            return identity
        if self.identity_provider is None:
            raise ConfigurationError("No identity supplied and no identity provider configured.")
        return self.identity_provider.current_identity()

    async def analyze(self, analysis_input: AnalysisInput, identity: Optional[str] = None) -> AnalysisResult:
        """Analyze text, a URL or an image.

        Args:
            analysis_input: Content to check
            identity: Caller identity for rate limiting; defaults to the identity provider's

        Returns:
            Normalized analysis result

        Raises:
            RateLimitError: If the caller is over quota (the model is not called)
            ConfigurationError: If no model provider is configured
            UpstreamError: If the model call fails
            ParseError: If the answer has no recoverable JSON payload
        """
        identity = self._resolve_identity(identity)
        decision = self.rate_limiter.acquire(identity)
        logger.info(
            f"🔍 Starting {analysis_input.input_type.value} analysis for {identity} "
            f"({decision.remaining} requests left): {analysis_input.preview}"
        )

        if self.model is None:
            raise ConfigurationError("API Key is missing. Please set it in the environment.")

        request = build_request(
            analysis_input,
            temperature=self.temperature,
            enable_grounding=self.enable_grounding,
        )
        response = await self.model.generate(request)
        logger.info(f"🤖 Model answered with {len(response.text)} chars and {len(response.citations)} citations")

        try:
            result = parse_response(response.text, response.citations)
        except ParseError:
            logger.error(f"❌ Could not parse model output: {response.text[:200]!r}")
            raise

        logger.info(
            f"✅ Analysis complete: {result.category.value}, truth {result.truth_score}, "
            f"{len(result.grounding_sources)} sources"
        )
        return result
