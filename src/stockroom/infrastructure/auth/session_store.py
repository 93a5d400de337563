"""File-backed storage for the active session.

The command line runs one process per command, so the session that
``auth login`` opens has to outlive the process.  It is kept in a small
JSON file next to the data files.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from stockroom.domain.model.session import Session, User

logger = logging.getLogger(__name__)


class FileSessionStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def load(self) -> Session | None:
        if not self._file_path.exists():
            return None
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            user = raw["user"]
            expires_at = raw.get("expires_at")
            return Session(
                user=User(
                    id=user["id"],
                    email=user["email"],
                    full_name=user.get("full_name"),
                ),
                access_token=raw["access_token"],
                refresh_token=raw.get("refresh_token"),
                expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
            )
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self._file_path, exc)
            return None

    def access_token(self) -> str | None:
        session = self.load()
        return session.access_token if session else None

    def save(self, session: Session) -> None:
        raw = {
            "user": {
                "id": session.user.id,
                "email": session.user.email,
                "full_name": session.user.full_name,
            },
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_at": session.expires_at.isoformat() if session.expires_at else None,
        }
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(json.dumps(raw, indent=2) + "\n", encoding="utf-8")

    def clear(self) -> None:
        self._file_path.unlink(missing_ok=True)
