from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv


load_dotenv()


DEFAULT_SESSION_SECRET = "anon-relay-dev-secret"


class Settings:
    """
    Central configuration for Anon Relay.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties.
    """

    def __init__(self) -> None:
        # Token signing
        self._session_secret = os.getenv("ANON_RELAY_SESSION_SECRET") or None

        # HTTP surface
        self._cors_origins = os.getenv("ANON_RELAY_CORS_ORIGINS", "*")
        self._host = os.getenv("HOST", "0.0.0.0")
        self._port = int(os.getenv("PORT", "3000"))

        # Logging
        self._log_level = os.getenv("ANON_RELAY_LOG_LEVEL", "info").lower()

    # ------------------------------------------------------------------
    # Token signing
    # ------------------------------------------------------------------

    @property
    def session_secret(self) -> str:
        return self._session_secret or DEFAULT_SESSION_SECRET

    @property
    def uses_default_secret(self) -> bool:
        """True when no secret was supplied and the dev fallback is in use."""
        return self._session_secret is None

    # ------------------------------------------------------------------
    # HTTP surface
    # ------------------------------------------------------------------

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self._cors_origins.split(",") if o.strip()]

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    @property
    def log_level(self) -> str:
        return self._log_level


settings = Settings()
