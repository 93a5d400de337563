"""Application service: Session Gate.

Two states only: unauthenticated, or authenticated as a ``User``.  The
gate holds no business logic; it decides whether the inventory and
invoice operations are reachable.  Session lifetime belongs to the
credential provider.
"""

from __future__ import annotations

import logging

from stockroom.application.observable import Observable
from stockroom.domain.exceptions import AuthError, NotAuthenticatedError, ValidationError
from stockroom.domain.model.session import Session, User
from stockroom.domain.repository.auth_gateway import AuthGateway

logger = logging.getLogger(__name__)


class SessionGate(Observable):

    def __init__(self, auth_gateway: AuthGateway) -> None:
        super().__init__()
        self._auth_gateway = auth_gateway
        self._session: Session | None = None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def user(self) -> User | None:
        return self._session.user if self._session else None

    @property
    def session(self) -> Session | None:
        return self._session

    def require(self) -> User:
        """Return the signed-in user or raise NotAuthenticatedError."""
        if self._session is None:
            raise NotAuthenticatedError("Please log in to access the store dashboard")
        return self._session.user

    async def initialize(self) -> User | None:
        """Pick up a session the provider already considers active."""
        self._session = await self._auth_gateway.current_session()
        if self._session is not None:
            logger.debug("Resumed session for %s", self._session.user.email)
        self._notify()
        return self.user

    async def sign_in(self, identifier: str, secret: str) -> User:
        if not identifier or not identifier.strip() or not secret:
            raise ValidationError("Please fill in all fields")
        try:
            session = await self._auth_gateway.sign_in(identifier.strip(), secret)
        except AuthError as exc:
            logger.warning("Login failed for %s: %s", identifier, exc)
            raise
        self._session = session
        logger.info("Logged in as %s", session.user.email)
        self._notify()
        return session.user

    async def sign_out(self) -> None:
        """Close the session.  A provider failure keeps the gate open."""
        await self._auth_gateway.sign_out()
        self._session = None
        logger.info("Logged out")
        self._notify()
