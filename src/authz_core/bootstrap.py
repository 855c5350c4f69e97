"""Bootstrap – assemble a session and an editor from :class:`AuthzSettings`."""
from __future__ import annotations

from authz_core.adapters.http import HttpIdentityDirectory, HttpRolePermissionRepository, HttpxHttpClient
from authz_core.application.editor import PermissionMatrixEditor
from authz_core.application.session import IdentitySession, TokenStore
from authz_core.config import AuthzSettings, EnvSettingsLoader, SettingsLoader
from authz_core.kernel.messaging import ChannelTransport
from authz_core.observability.logging import JsonLoggerFactory


def load_settings(loader: SettingsLoader | None = None) -> AuthzSettings:
    return (loader or EnvSettingsLoader()).load(AuthzSettings)


def configure_logging(settings: AuthzSettings) -> None:
    JsonLoggerFactory.configure(level=settings.log_level, fmt=settings.log_format)


def build_http_client(settings: AuthzSettings) -> HttpxHttpClient:
    return HttpxHttpClient(settings.api_base_url, timeout=settings.request_timeout_seconds)


def build_transport(settings: AuthzSettings) -> ChannelTransport | None:
    """Redis transport when ``redis_url`` is set, else ``None`` (no real-time channel)."""
    if settings.redis_url is None:
        return None
    from authz_core.adapters.redis import RedisChannelTransport

    return RedisChannelTransport(settings.redis_url)


def build_session(
    settings: AuthzSettings,
    *,
    client: HttpxHttpClient | None = None,
    token_store: TokenStore | None = None,
    transport: ChannelTransport | None = None,
) -> IdentitySession:
    return IdentitySession(
        HttpIdentityDirectory(client or build_http_client(settings)),
        token_store=token_store,
        transport=transport if transport is not None else build_transport(settings),
        backoff=settings.reconnect_backoff,
        refresh_interval_seconds=settings.refresh_interval,
    )


def build_editor(
    settings: AuthzSettings,
    session: IdentitySession,
    *,
    client: HttpxHttpClient | None = None,
) -> PermissionMatrixEditor:
    """Editor acting with *session*'s token, refreshing *session* after saves."""
    repository = HttpRolePermissionRepository(
        client or build_http_client(settings), token_provider=lambda: session.token
    )
    return PermissionMatrixEditor(repository, session=session)


__all__ = [
    "build_editor",
    "build_http_client",
    "build_session",
    "build_transport",
    "configure_logging",
    "load_settings",
]
