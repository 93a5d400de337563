"""AuthGateway backed by the hosted project's auth service (GoTrue).

Email/password sign-in yields an access token and a refresh token.  An
expired stored session is refreshed once on startup; if that fails the
user simply has to log in again.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from stockroom.domain.exceptions import AuthError
from stockroom.domain.model.session import Session, User
from stockroom.domain.repository.auth_gateway import AuthGateway
from stockroom.infrastructure.auth.session_store import FileSessionStore
from stockroom.infrastructure.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class SupabaseAuthGateway(AuthGateway):

    def __init__(self, client: SupabaseClient, session_store: FileSessionStore) -> None:
        self._client = client
        self._session_store = session_store

    async def sign_in(self, identifier: str, secret: str) -> Session:
        body = await self._client.auth(
            "POST",
            "token",
            params={"grant_type": "password"},
            json={"email": identifier, "password": secret},
        )
        session = _session_from_body(body)
        self._session_store.save(session)
        return session

    async def sign_out(self) -> None:
        session = self._session_store.load()
        if session is not None:
            await self._client.auth("POST", "logout", access_token=session.access_token)
        self._session_store.clear()

    async def current_session(self) -> Session | None:
        session = self._session_store.load()
        if session is None:
            return None
        if session.expires_at is None or session.expires_at > datetime.now(timezone.utc):
            return session
        if not session.refresh_token:
            self._session_store.clear()
            return None

        try:
            body = await self._client.auth(
                "POST",
                "token",
                params={"grant_type": "refresh_token"},
                json={"refresh_token": session.refresh_token},
            )
        except AuthError as exc:
            logger.info("Stored session could not be refreshed: %s", exc)
            self._session_store.clear()
            return None
        session = _session_from_body(body)
        self._session_store.save(session)
        return session


def _session_from_body(body: Any) -> Session:
    try:
        user = body["user"]
        metadata = user.get("user_metadata") or {}
        expires_in = body.get("expires_in")
        return Session(
            user=User(
                id=str(user["id"]),
                email=user["email"],
                full_name=metadata.get("full_name"),
            ),
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            expires_at=(
                datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))
                if expires_in
                else None
            ),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthError("Unexpected response from the auth provider") from exc
