from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_DEFAULT_ORIGINS = "http://localhost:3000,http://localhost:8080"


def _origins(raw: str) -> tuple[str, ...]:
    return tuple(o.strip() for o in raw.split(",") if o.strip())


@dataclass(frozen=True)
class ServerConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "fruity-gulp-secret-change-in-production")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    allowed_origins: tuple[str, ...] = _origins(os.getenv("ALLOWED_ORIGINS", _DEFAULT_ORIGINS))
    allowed_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
    allowed_headers: tuple[str, ...] = ("Content-Type", "Authorization", "X-Requested-With")

    # Per client IP
    rate_limit_window_ms: int = int(os.getenv("RATE_LIMIT_WINDOW_MS", str(15 * 60 * 1000)))
    rate_limit_max_requests: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() != "false"

    @property
    def rate_limit(self) -> str:
        seconds = max(1, self.rate_limit_window_ms // 1000)
        return f"{self.rate_limit_max_requests} per {seconds} second"


DEFAULT_SERVER_CONFIG = ServerConfig()
