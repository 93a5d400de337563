"""Abstract gateway to the external credential provider."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockroom.domain.model.session import Session


class AuthGateway(ABC):

    @abstractmethod
    async def sign_in(self, identifier: str, secret: str) -> Session:
        """Validate credentials and open a session.

        Raises AuthError when the provider rejects the credentials.
        """

    @abstractmethod
    async def sign_out(self) -> None:
        """Close the active session."""

    @abstractmethod
    async def current_session(self) -> Session | None:
        """Return the session that is already active, if any."""
