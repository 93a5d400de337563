"""Runtime settings, read from environment variables.

``STOCKROOM_BACKEND`` selects where data lives:

- ``json`` (default): local JSON files under ``STOCKROOM_DATA_DIR``
- ``supabase``: a hosted backend reached over its REST and auth APIs,
  which needs ``SUPABASE_URL`` and ``SUPABASE_ANON_KEY``
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from stockroom.domain.exceptions import ConfigurationError

BACKENDS = ("json", "supabase")

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    backend: str = "json"
    data_dir: Path = _DEFAULT_DATA_DIR
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    http_timeout: float = 10.0
    log_level: str = "WARNING"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        backend = env.get("STOCKROOM_BACKEND", "json").strip().lower()
        if backend not in BACKENDS:
            raise ConfigurationError(
                f"STOCKROOM_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}"
            )

        raw_timeout = env.get("STOCKROOM_HTTP_TIMEOUT", "10")
        try:
            http_timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError(
                f"STOCKROOM_HTTP_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from exc

        settings = Settings(
            backend=backend,
            data_dir=Path(env.get("STOCKROOM_DATA_DIR") or _DEFAULT_DATA_DIR),
            supabase_url=(env.get("SUPABASE_URL") or "").rstrip("/") or None,
            supabase_anon_key=env.get("SUPABASE_ANON_KEY") or None,
            http_timeout=http_timeout,
            log_level=env.get("STOCKROOM_LOG_LEVEL", "WARNING").upper(),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.backend == "supabase":
            missing = [
                name
                for name, value in (
                    ("SUPABASE_URL", self.supabase_url),
                    ("SUPABASE_ANON_KEY", self.supabase_anon_key),
                )
                if not value
            ]
            if missing:
                raise ConfigurationError(
                    f"Missing settings for the supabase backend: {', '.join(missing)}"
                )
