"""AuthGateway backed by a local ``users.json`` file.

Passwords are stored as passlib hashes, never in clear text.  Intended
for the JSON backend; the hosted backend uses its own auth service.
"""

from __future__ import annotations

import json
import secrets
import uuid
from pathlib import Path
from typing import Any

from passlib.context import CryptContext

from stockroom.domain.exceptions import AuthError, PersistenceError, ValidationError
from stockroom.domain.model.session import Session, User
from stockroom.domain.repository.auth_gateway import AuthGateway
from stockroom.infrastructure.auth.session_store import FileSessionStore

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class LocalAuthGateway(AuthGateway):

    def __init__(self, users_path: Path, session_store: FileSessionStore) -> None:
        self._users_path = users_path
        self._session_store = session_store

    # --- AuthGateway interface ------------------------------------------------

    async def sign_in(self, identifier: str, secret: str) -> Session:
        row = self._find(identifier)
        if row is None or not pwd_context.verify(secret, row["password_hash"]):
            raise AuthError("Invalid login credentials")
        session = Session(user=_user(row), access_token=secrets.token_urlsafe(32))
        self._session_store.save(session)
        return session

    async def sign_out(self) -> None:
        self._session_store.clear()

    async def current_session(self) -> Session | None:
        session = self._session_store.load()
        if session is None:
            return None
        if self._find(session.user.email) is None:
            self._session_store.clear()
            return None
        return session

    # --- User management ------------------------------------------------------

    def add_user(self, email: str, password: str, full_name: str | None = None) -> User:
        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required")
        if self._find(email) is not None:
            raise ValidationError(f"User '{email}' already exists")
        row = {
            "id": str(uuid.uuid4()),
            "email": email.strip(),
            "full_name": full_name,
            "password_hash": pwd_context.hash(password),
        }
        self._persist([*self._load(), row])
        return _user(row)

    # --- Serialization helpers ------------------------------------------------

    def _find(self, email: str) -> dict[str, Any] | None:
        wanted = email.strip().lower()
        for row in self._load():
            if row["email"].lower() == wanted:
                return row
        return None

    def _load(self) -> list[dict[str, Any]]:
        if not self._users_path.exists():
            return []
        try:
            return json.loads(self._users_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self._users_path}: {exc}") from exc

    def _persist(self, rows: list[dict[str, Any]]) -> None:
        self._users_path.parent.mkdir(parents=True, exist_ok=True)
        self._users_path.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")


def _user(row: dict[str, Any]) -> User:
    return User(id=row["id"], email=row["email"], full_name=row.get("full_name"))
