"""Protocol for rate limit identity sources."""

from typing import Protocol


class IdentityProvider(Protocol):
    """Supplies the opaque identity the current caller is rate limited under."""

    def current_identity(self) -> str:
        """Return the identity for the current session."""
        ...
