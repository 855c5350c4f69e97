"""Application session – the identity holder."""
from authz_core.application.session.ports import (
    MISSING_CREDENTIALS_MESSAGE,
    Credentials,
    IdentityDirectory,
    InMemoryTokenStore,
    TokenStore,
    UserRecord,
)
from authz_core.application.session.session import IdentityListener, IdentitySession
from authz_core.application.session.state import SessionState

__all__ = [
    "Credentials",
    "IdentityDirectory",
    "IdentityListener",
    "IdentitySession",
    "InMemoryTokenStore",
    "MISSING_CREDENTIALS_MESSAGE",
    "SessionState",
    "TokenStore",
    "UserRecord",
]
