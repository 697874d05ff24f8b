"""Authentication: identity provider port and session context."""

from taskflow_mcp.auth.identity import IdentityProvider, LocalIdentityProvider
from taskflow_mcp.auth.session import SessionContext, SessionListener

__all__ = [
    "IdentityProvider",
    "LocalIdentityProvider",
    "SessionContext",
    "SessionListener",
]
