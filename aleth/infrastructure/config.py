"""Service configuration loaded from the environment."""

import logging
import os

from pydantic import BaseModel, Field

from ..domain.services.rate_limiter import DEFAULT_MAX_REQUESTS, DEFAULT_WINDOW_MS

logger = logging.getLogger(__name__)


class AlethConfig(BaseModel):
    """Configuration for the analysis service."""

    rate_limit_max_requests: int = Field(default=DEFAULT_MAX_REQUESTS, ge=1, description="Requests per window")
    rate_limit_window_ms: int = Field(default=DEFAULT_WINDOW_MS, gt=0, description="Window length in milliseconds")
    sweep_interval_seconds: float = Field(default=60.0, gt=0, description="Seconds between expired window sweeps")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Model decoding temperature")
    enable_grounding: bool = Field(default=True, description="Ask the model for search grounded citations")
    max_image_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="Largest accepted image upload")

    @classmethod
    def from_env(cls) -> "AlethConfig":
        """Create configuration from environment variables."""
        config = cls(
            rate_limit_max_requests=int(os.getenv("ALETH_RATE_LIMIT_MAX_REQUESTS", DEFAULT_MAX_REQUESTS)),
            rate_limit_window_ms=int(os.getenv("ALETH_RATE_LIMIT_WINDOW_MS", DEFAULT_WINDOW_MS)),
            sweep_interval_seconds=float(os.getenv("ALETH_SWEEP_INTERVAL_SECONDS", "60")),
            temperature=float(os.getenv("ALETH_TEMPERATURE", "0.1")),
            enable_grounding=os.getenv("ALETH_ENABLE_GROUNDING", "true").lower() == "true",
            max_image_bytes=int(os.getenv("ALETH_MAX_IMAGE_BYTES", 10 * 1024 * 1024)),
        )
        logger.info(
            f"⚙️ Rate limit: {config.rate_limit_max_requests} requests per "
            f"{config.rate_limit_window_ms / 1000:.0f}s"
        )
        return config
