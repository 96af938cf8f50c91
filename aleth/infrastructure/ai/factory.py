"""Factory for creating and managing model providers."""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from ...domain.ports.model_provider import ModelProvider
from .gemini_adapter import GeminiAdapter, GeminiConfig

logger = logging.getLogger(__name__)


class ModelProviderFactory:
    """Factory for creating and managing model providers."""

    def __init__(self):
        """Initialize the factory."""
        self._providers: Dict[str, Callable[..., ModelProvider]] = {}
        self._instances: Dict[str, ModelProvider] = {}
        self._lock = asyncio.Lock()

        # Register default providers
        self.register_provider("gemini", GeminiAdapter)

    def register_provider(self, name: str, provider_class: Callable[..., ModelProvider]) -> None:
        """Register a new model provider.

        Args:
            name: Provider name
            provider_class: Provider class or callable returning a provider
        """
        self._providers[name] = provider_class

    async def create_provider(self, name: str, **kwargs: Any) -> ModelProvider:
        """Create and initialize a provider instance.

        Args:
            name: Provider name
            **kwargs: Provider-specific configuration

        Returns:
            Initialized provider instance

        Raises:
            ValueError: If provider not found
            ConfigurationError: If the provider has no credential
        """
        if name not in self._providers:
            raise ValueError(f"Provider '{name}' not found")

        # Held across initialize() so concurrent first calls share one instance
        async with self._lock:
            if name not in self._instances:
                if name == "gemini" and "config" not in kwargs:
                    kwargs["config"] = GeminiConfig.from_env()
                provider = self._providers[name](**kwargs)

                await provider.initialize()
                self._instances[name] = provider
                logger.info(f"🤖 Model provider '{name}' created")

            return self._instances[name]

    def get_provider(self, name: str) -> Optional[ModelProvider]:
        """Get an existing provider instance.

        Args:
            name: Provider name

        Returns:
            Provider instance if exists, None otherwise
        """
        return self._instances.get(name)

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and their availability."""
        return {
            name: name in self._instances and self._instances[name].is_available
            for name in self._providers
        }

    async def shutdown(self) -> None:
        """Shutdown all provider instances."""
        for provider in self._instances.values():
            await provider.shutdown()
        self._instances.clear()
