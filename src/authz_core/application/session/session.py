"""Application session – IdentitySession.

The session is the single owner of the current :class:`Identity`. It is
constructed explicitly and handed to the query facade, the guards and the
editor; there is no module-level session.

Lifecycle::

    UNAUTHENTICATED -> RESOLVING -> AUTHENTICATED -> RESOLVING (refresh)
          ^                                              |
          +---------------- logout / rejected -----------+

Every login, restore and logout bumps a generation counter. All identity
fetches run in one shared task tagged with the generation it started
under; its result is only published if that generation is still current,
so a response arriving after logout (or after a newer login) is dropped.
"""
from __future__ import annotations

import asyncio
from typing import Callable

from authz_core.application.channel import InvalidationChannel, SubscriptionHandle
from authz_core.application.session.ports import (
    MISSING_CREDENTIALS_MESSAGE,
    Credentials,
    IdentityDirectory,
    InMemoryTokenStore,
    TokenStore,
)
from authz_core.application.session.state import SessionState
from authz_core.kernel.errors import AuthenticationError, BaseError
from authz_core.kernel.messaging import ChannelTransport, PermissionUpdateEvent
from authz_core.kernel.security import Identity
from authz_core.kernel.types import Err, Ok, Result
from authz_core.observability.logging import get_logger
from authz_core.resilience.retry import BackoffStrategy

logger = get_logger(__name__)

IdentityListener = Callable[[Identity | None], None]

UNREACHABLE_MESSAGE = "Unable to reach the authentication service. Please try again."
PROFILE_UNAVAILABLE_MESSAGE = "Signed in, but the user profile could not be loaded."


class IdentitySession:
    """Holds the signed-in user's permission snapshot.

    Parameters
    ----------
    directory:
        The authentication service.
    token_store:
        Durable token slot; defaults to an in-memory one.
    transport:
        Pub/sub transport for real-time invalidation. ``None`` disables the
        channel.
    backoff:
        Reconnect policy handed to the invalidation channel.
    refresh_interval_seconds:
        Period of the fallback refresh while authenticated. ``None`` or
        ``0`` disables it.
    """

    def __init__(
        self,
        directory: IdentityDirectory,
        *,
        token_store: TokenStore | None = None,
        transport: ChannelTransport | None = None,
        backoff: BackoffStrategy | None = None,
        refresh_interval_seconds: float | None = None,
    ) -> None:
        self._directory = directory
        self._token_store = token_store or InMemoryTokenStore()
        self._transport = transport
        self._backoff = backoff
        self._refresh_interval = refresh_interval_seconds or None

        self._state = SessionState.UNAUTHENTICATED
        self._identity: Identity | None = None
        self._generation = 0
        self._listeners: list[IdentityListener] = []

        self._channel: InvalidationChannel | None = None
        self._subscription: SubscriptionHandle | None = None
        self._refresh_task: asyncio.Task[Identity | None] | None = None
        self._refresh_pending = False
        self._periodic_task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def subscription(self) -> SubscriptionHandle | None:
        return self._subscription

    @property
    def token(self) -> str | None:
        return self._token_store.get()

    def add_listener(self, listener: IdentityListener) -> Callable[[], None]:
        """Call *listener* whenever a new identity snapshot (or ``None``) is published.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def login(self, credentials: Credentials) -> Result[None, AuthenticationError]:
        """Sign in and resolve the identity.

        Never raises for expected failures: the error comes back as
        ``Err(AuthenticationError)`` with a message fit for a sign-in form.
        """
        if not credentials.is_complete:
            return Err(AuthenticationError(MISSING_CREDENTIALS_MESSAGE))

        generation = await self._begin()
        self._set_state(SessionState.RESOLVING)
        try:
            token = await self._directory.authenticate(credentials)
        except AuthenticationError as exc:
            logger.info("session.login_failed", reason=exc.code)
            self._fail_login(generation)
            return Err(exc)
        except BaseError as exc:
            logger.warning("session.login_failed", reason=exc.code, error=exc.message)
            self._fail_login(generation)
            message = UNREACHABLE_MESSAGE if exc.retryable else exc.message
            return Err(AuthenticationError(message, cause=exc))

        if generation != self._generation:
            return Err(AuthenticationError("Sign-in was superseded by another session change."))

        self._token_store.set(token)
        identity = await asyncio.shield(self._start_resolve())
        if identity is None:
            return Err(AuthenticationError(PROFILE_UNAVAILABLE_MESSAGE))
        logger.info("session.logged_in", user_id=identity.user_id, role=identity.role)
        return Ok(None)

    async def restore(self) -> Identity | None:
        """Resolve the identity from a token already in the token slot."""
        if self._token_store.get() is None:
            return None
        await self._begin()
        self._set_state(SessionState.RESOLVING)
        return await asyncio.shield(self._start_resolve())

    async def fetch_identity(self) -> Identity | None:
        """Fetch the current user with the stored token.

        ``None`` when there is no token, the directory answers with anything
        but a user, or it cannot be reached. A rejected token is cleared; an
        unreachable directory leaves it in place. Does not publish.
        """
        token = self._token_store.get()
        if token is None:
            return None
        try:
            record = await self._directory.fetch_current_user(token)
        except BaseError as exc:
            if exc.retryable:
                logger.warning("session.fetch_failed", reason=exc.code, error=exc.message)
                return None
            logger.info("session.token_rejected", reason=exc.code)
            if self._token_store.get() == token:
                self._token_store.clear()
            return None
        return record.to_identity()

    async def refresh_permissions(self) -> Identity | None:
        """Re-fetch the identity; coalesced with every other fetch.

        Login, restore and refresh share one in-flight fetch. A call made
        while it runs queues exactly one re-run and all callers share its
        result. A ``None`` result signs the session out.
        """
        in_flight = self._refresh_task is not None and not self._refresh_task.done()
        if not in_flight and self._token_store.get() is None:
            if self._identity is not None:
                await self._drop()
            return None
        return await asyncio.shield(self._start_resolve())

    async def logout(self) -> None:
        """Close the channel, clear the token and drop the identity. Idempotent."""
        self._advance()
        token = self._token_store.get()
        await self._reset()
        if token is None:
            return
        try:
            await self._directory.sign_out(token)
        except Exception as exc:  # noqa: BLE001
            logger.warning("session.sign_out_failed", error=str(exc))
        logger.info("session.logged_out")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _advance(self) -> int:
        """Start a new generation; fetches begun under older ones are ignored."""
        self._generation += 1
        self._refresh_task = None
        self._refresh_pending = False
        return self._generation

    async def _begin(self) -> int:
        generation = self._advance()
        await self._close_channel()
        self._cancel_periodic()
        self._publish(None)
        return generation

    async def _drop(self) -> None:
        self._advance()
        await self._reset()

    def _fail_login(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._token_store.clear()
        self._set_state(SessionState.UNAUTHENTICATED)

    def _start_resolve(self) -> asyncio.Task[Identity | None]:
        task = self._refresh_task
        if task is not None and not task.done():
            self._refresh_pending = True
            return task
        task = asyncio.create_task(self._run_refresh(self._generation), name="identity-refresh")
        self._refresh_task = task
        return task

    async def _run_refresh(self, generation: int) -> Identity | None:
        try:
            while generation == self._generation:
                self._refresh_pending = False
                self._set_state(SessionState.RESOLVING)
                await self._resolve(generation)
                if not self._refresh_pending:
                    break
        finally:
            if generation == self._generation and self._state is SessionState.RESOLVING:
                settled = self._identity is not None
                self._set_state(SessionState.AUTHENTICATED if settled else SessionState.UNAUTHENTICATED)
        return self._identity if generation == self._generation else None

    async def _resolve(self, generation: int) -> Identity | None:
        identity = await self.fetch_identity()
        if generation != self._generation:
            logger.debug("session.stale_fetch_discarded", generation=generation)
            return None
        if identity is None:
            await self._drop()
            return None
        await self._apply(identity)
        return identity

    async def _apply(self, identity: Identity) -> None:
        previous = self._identity
        self._set_state(SessionState.AUTHENTICATED)
        self._publish(identity)
        if previous is None or previous.user_id != identity.user_id or self._subscription is None:
            await self._open_channel(identity.user_id)
        self._start_periodic()

    async def _reset(self) -> None:
        self._token_store.clear()
        self._set_state(SessionState.UNAUTHENTICATED)
        self._publish(None)
        await self._close_channel()
        self._cancel_periodic()

    def _set_state(self, state: SessionState) -> None:
        self._state = state

    def _publish(self, identity: Identity | None) -> None:
        if identity is self._identity:
            return
        self._identity = identity
        for listener in list(self._listeners):
            try:
                listener(identity)
            except Exception:
                logger.exception("session.listener_failed")

    async def _open_channel(self, user_id: str) -> None:
        await self._close_channel()
        if self._transport is None:
            return
        channel = InvalidationChannel(
            self._transport, self._on_permission_update, backoff=self._backoff
        )
        self._channel = channel
        self._subscription = await channel.subscribe(user_id)

    async def _close_channel(self) -> None:
        subscription, self._subscription = self._subscription, None
        self._channel = None
        if subscription is not None:
            await subscription.close()

    async def _on_permission_update(self, event: PermissionUpdateEvent) -> None:
        identity = self._identity
        if identity is None or event.user_id != identity.user_id:
            return
        logger.info("session.permissions_invalidated", user_id=event.user_id)
        await self.refresh_permissions()

    def _start_periodic(self) -> None:
        if self._refresh_interval is None:
            return
        if self._periodic_task is not None and not self._periodic_task.done():
            return
        self._periodic_task = asyncio.create_task(
            self._periodic_refresh(self._refresh_interval), name="identity-periodic-refresh"
        )

    def _cancel_periodic(self) -> None:
        task, self._periodic_task = self._periodic_task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _periodic_refresh(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            logger.debug("session.periodic_refresh")
            await self.refresh_permissions()


__all__ = ["IdentityListener", "IdentitySession"]
