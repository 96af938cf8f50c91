"""Test configuration and common fixtures."""

import json
from typing import Dict, List, Optional

import pytest

from aleth.domain.ports.model_provider import Citation, ModelRequest, ModelResponse
from aleth.domain.services.analysis_service import AnalysisService
from aleth.domain.services.rate_limiter import RateLimiter
from aleth.infrastructure.identity.session_identity import StaticIdentityProvider


class FakeClock:
    """Manually advanced clock in milliseconds."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class StubModelProvider:
    """Model provider returning a canned answer and recording requests."""

    def __init__(self, text: str = "", citations: Optional[List[Citation]] = None, error: Exception = None):
        self.text = text
        self.citations = citations or []
        self.error = error
        self.requests: List[ModelRequest] = []
        self._initialized = True

    async def initialize(self) -> None:
        self._initialized = True

    async def shutdown(self) -> None:
        self._initialized = False

    async def generate(self, request: ModelRequest) -> ModelResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return ModelResponse(text=self.text, citations=self.citations)

    @property
    def provider_name(self) -> str:
        return "Stub"

    @property
    def is_available(self) -> bool:
        return self._initialized

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {}


def fenced(payload: dict) -> str:
    """Wrap a payload the way the model is asked to answer."""
    return f"Here is my analysis.\n```json\n{json.dumps(payload)}\n```\nStay skeptical."


@pytest.fixture
def clock() -> FakeClock:
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def rate_limiter(clock: FakeClock) -> RateLimiter:
    """Provide a limiter with the default quota on the fake clock."""
    return RateLimiter(max_requests=2, window_ms=60_000, clock=clock)


@pytest.fixture
def model_provider() -> StubModelProvider:
    """Provide a stub model answering with a misleading verdict."""
    return StubModelProvider(
        text=fenced({
            "truthScore": 2,
            "sourceCredibilityScore": 80,
            "category": "Misleading",
            "subCategory": "Fabricated / Total Fake",
            "summary": "False claim",
            "detailedAnalysis": "...",
        })
    )


@pytest.fixture
def analysis_service(model_provider: StubModelProvider, rate_limiter: RateLimiter) -> AnalysisService:
    """Provide an analysis service wired to the stub model."""
    return AnalysisService(
        model_provider,
        rate_limiter,
        identity_provider=StaticIdentityProvider("session-a"),
    )
