"""Identity providers for rate limiting."""

import secrets
import string
import time

from ...domain.ports.identity_provider import IdentityProvider

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_identity() -> str:
    """Create an identity of the form ``user_<epoch ms>_<random base36>``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"user_{int(time.time() * 1000)}_{suffix}"


class SessionIdentityProvider(IdentityProvider):
    """Generates one identity and keeps it for the provider's lifetime."""

    def __init__(self):
        self._identity = generate_session_identity()

    def current_identity(self) -> str:
        return self._identity


class StaticIdentityProvider(IdentityProvider):
    """Always returns the identity it was built with."""

    def __init__(self, identity: str = "default_user"):
        self._identity = identity

    def current_identity(self) -> str:
        return self._identity
