"""
Session context.

Explicit authentication state passed to the services that need it.

Lifecycle:
    initializing ──► authenticated ◄──► unauthenticated

Listeners registered with ``subscribe`` receive ``(principal, loading)``
on every transition, and once immediately with the current state.
"""

from __future__ import annotations

import logging
from typing import Callable

from taskflow_mcp.auth.identity import IdentityProvider
from taskflow_mcp.constants import SessionStatus
from taskflow_mcp.exceptions import TaskFlowAuthenticationError
from taskflow_mcp.models import Principal

logger = logging.getLogger(__name__)

SessionListener = Callable[[Principal | None, bool], None]


class SessionContext:
    """Current principal plus a subscription point for auth transitions."""

    def __init__(self, identity: IdentityProvider) -> None:
        self._identity = identity
        self._principal: Principal | None = None
        self._status = SessionStatus.INITIALIZING
        self._listeners: list[SessionListener] = []

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def principal(self) -> Principal | None:
        return self._principal

    @property
    def loading(self) -> bool:
        return self._status is SessionStatus.INITIALIZING

    @property
    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        self._emit_to(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit_to(self, listener: SessionListener) -> None:
        try:
            listener(self._principal, self.loading)
        except Exception:
            logger.exception("Session listener %r failed", listener)

    def _transition(self, principal: Principal | None) -> None:
        self._principal = principal
        self._status = (
            SessionStatus.AUTHENTICATED if principal else SessionStatus.UNAUTHENTICATED
        )
        logger.info(
            "Session %s%s",
            self._status.value,
            f" as {principal.uid}" if principal else "",
        )
        for listener in list(self._listeners):
            self._emit_to(listener)

    def start(self, principal: Principal | None = None) -> None:
        """Leave the initializing state, optionally with a restored principal."""
        self._transition(principal)

    def require_principal(self) -> Principal:
        if self._principal is None:
            raise TaskFlowAuthenticationError("You must be logged in to do that.")
        return self._principal

    async def register(self, name: str, email: str, password: str) -> Principal:
        principal = await self._identity.register(name, email, password)
        self._transition(principal)
        return principal

    async def login(self, email: str, password: str) -> Principal:
        try:
            principal = await self._identity.login(email, password)
        except TaskFlowAuthenticationError:
            if self._status is SessionStatus.INITIALIZING:
                self._transition(None)
            raise
        self._transition(principal)
        return principal

    async def logout(self) -> None:
        await self._identity.logout()
        self._transition(None)
