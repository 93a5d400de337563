"""Thin async HTTP client for a hosted Supabase project.

Wraps one ``httpx.AsyncClient`` and knows the two API families the
store needs: PostgREST under ``/rest/v1`` and GoTrue under ``/auth/v1``.
Requests carry the project's anon key; data requests additionally carry
the signed-in user's access token when there is one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from stockroom.domain.exceptions import AuthError, PersistenceError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class SupabaseClient:

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 10.0,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._anon_key = anon_key
        self._token_provider = token_provider or (lambda: None)
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"apikey": anon_key},
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    # --- PostgREST ------------------------------------------------------------

    async def rest(
        self,
        method: str,
        table: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        return_rows: bool = False,
    ) -> Any:
        """Call ``/rest/v1/<table>``; raise PersistenceError on failure."""
        headers = {"Authorization": f"Bearer {self._token_provider() or self._anon_key}"}
        if return_rows:
            headers["Prefer"] = "return=representation"
        try:
            response = await self._http.request(
                method, f"/rest/v1/{table}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, table, exc)
            raise PersistenceError(f"Data backend unreachable: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.error("%s %s returned %s: %s", method, table, response.status_code, message)
            raise PersistenceError(message)
        if not response.content:
            return None
        return response.json()

    # --- GoTrue ---------------------------------------------------------------

    async def auth(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        access_token: str | None = None,
    ) -> Any:
        """Call ``/auth/v1/<path>``; raise AuthError on failure."""
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else None
        try:
            response = await self._http.request(
                method, f"/auth/v1/{path}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.error("auth %s failed: %s", path, exc)
            raise AuthError(f"Auth provider unreachable: {exc}") from exc

        if response.is_error:
            raise AuthError(_error_message(response))
        if not response.content:
            return None
        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "error_description", "msg", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"
