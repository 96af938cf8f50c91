"""Error taxonomy surfaced by the analysis orchestrator."""

from typing import Optional


class AnalysisError(Exception):
    """Base class for every failure reported by an analysis request."""

    kind = "analysis_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(AnalysisError):
    """No credential or endpoint is configured for the model provider."""

    kind = "configuration_error"


class RateLimitError(AnalysisError):
    """The caller exhausted its request quota for the current window."""

    kind = "rate_limit_error"

    def __init__(self, retry_after_seconds: int, max_requests: Optional[int] = None):
        self.retry_after_seconds = retry_after_seconds
        self.max_requests = max_requests
        quota = f"You can only make {max_requests} requests per minute. " if max_requests else ""
        super().__init__(
            f"Rate limit exceeded. {quota}Please try again in {retry_after_seconds} seconds."
        )


class UpstreamError(AnalysisError):
    """The model provider call failed (network, auth, quota or timeout)."""

    kind = "upstream_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(AnalysisError):
    """The model answered, but without a recoverable structured payload."""

    kind = "parse_error"

    def __init__(self, message: str = "Failed to parse analysis results.", raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
