"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.errors import ConfigurationError
from ..domain.ports.model_provider import ModelProvider
from ..domain.services.analysis_service import AnalysisService
from ..domain.services.feedback_service import FeedbackService
from ..domain.services.rate_limiter import RateLimiter
from .ai.factory import ModelProviderFactory
from .config import AlethConfig
from .identity.session_identity import SessionIdentityProvider

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(self, config: Optional[AlethConfig] = None, model_factory: Optional[ModelProviderFactory] = None):
        """Initialize service container.

        Args:
            config: Service configuration, read from the environment by default
            model_factory: Factory used to build the model provider
        """
        self.config = config or AlethConfig.from_env()
        self.model_factory = model_factory or ModelProviderFactory()
        self._services: Dict[str, Any] = {}
        self._setup_services()

    def _setup_services(self):
        """Setup all services and their dependencies."""
        logger.info("🔧 Setting up service container...")

        rate_limiter = RateLimiter(
            max_requests=self.config.rate_limit_max_requests,
            window_ms=self.config.rate_limit_window_ms,
        )

        self._services = {
            'rate_limiter': rate_limiter,
            'feedback_service': FeedbackService(),
            'identity_provider': SessionIdentityProvider(),
            'analysis_service': None,  # Will be created on-demand
        }

        logger.info("✅ Service container setup completed")

    async def _setup_model_provider(self) -> Optional[ModelProvider]:
        """Setup the model provider, or None if no credential is configured."""
        provider = self.model_factory.get_provider("gemini")
        if provider is not None:
            return provider

        try:
            logger.info("🔨 Creating new model provider...")
            provider = await self.model_factory.create_provider("gemini")
            logger.info("✅ Model provider ready")
            return provider
        except ConfigurationError as e:
            logger.warning(f"⚠️ {e}")
            return None

    async def _ensure_analysis_service(self) -> AnalysisService:
        """Ensure the analysis service exists, retrying provider setup while unconfigured."""
        service = self._services['analysis_service']
        if service is None or service.model is None:
            model_provider = await self._setup_model_provider()
            self._services['analysis_service'] = AnalysisService(
                model_provider,
                self.get_rate_limiter(),
                identity_provider=self.get('identity_provider'),
                temperature=self.config.temperature,
                enable_grounding=self.config.enable_grounding,
            )
        return self._services['analysis_service']

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_rate_limiter(self) -> RateLimiter:
        """Get the shared rate limiter."""
        return self.get('rate_limiter')

    def get_feedback_service(self) -> FeedbackService:
        """Get the feedback service."""
        return self.get('feedback_service')

    async def get_analysis_service(self) -> AnalysisService:
        """Get analysis service with its model provider."""
        return await self._ensure_analysis_service()

    async def shutdown(self) -> None:
        """Stop background work and release providers."""
        await self.get_rate_limiter().stop_sweeper()
        await self.model_factory.shutdown()


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance."""
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
def get_rate_limiter() -> RateLimiter:
    """FastAPI dependency for the rate limiter."""
    return get_service_container().get_rate_limiter()


def get_feedback_service() -> FeedbackService:
    """FastAPI dependency for the feedback service."""
    return get_service_container().get_feedback_service()


async def get_analysis_service() -> AnalysisService:
    """FastAPI dependency for the analysis service."""
    return await get_service_container().get_analysis_service()
