"""Centralised settings for the webfetch tools.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _parse_overrides(value: str) -> dict[str, float]:
    """Parse ``host=seconds,host=seconds`` into a mapping.

    Blank entries are ignored; a malformed entry raises ``ValueError`` so a
    typo in the environment is noticed at start-up rather than silently
    disabling the limit for that host.
    """
    overrides: dict[str, float] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        host, sep, seconds = item.partition("=")
        if not sep or not host.strip():
            raise ValueError(f"Malformed RATE_LIMIT_OVERRIDES entry: {item!r}")
        overrides[host.strip().lower()] = float(seconds)
    return overrides


def _split_patterns(value: str) -> list[str]:
    return [p.strip() for p in value.split(",") if p.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get("WEBFETCH_USER_AGENT", "webfetch/1.0")
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Rate limiting
    # ------------------------------------------------------------------
    rate_limit_interval: float = field(
        default_factory=lambda: float(os.environ.get("RATE_LIMIT_INTERVAL", "0.1"))
    )
    rate_limit_overrides: dict[str, float] = field(
        default_factory=lambda: _parse_overrides(os.environ.get("RATE_LIMIT_OVERRIDES", ""))
    )

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------
    default_max_length: int = field(
        default_factory=lambda: int(os.environ.get("DEFAULT_MAX_LENGTH", "5000"))
    )

    # ------------------------------------------------------------------
    # Content cache (opt-in)
    # ------------------------------------------------------------------
    cache_enabled: bool = field(
        default_factory=lambda: _env_bool("FETCH_CACHE_ENABLED", "false")
    )
    cache_size: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_CACHE_SIZE", "32"))
    )

    # ------------------------------------------------------------------
    # Documentation reader
    # ------------------------------------------------------------------
    docs_allowed_patterns: list[str] = field(
        default_factory=lambda: _split_patterns(
            os.environ.get("DOCS_ALLOWED_PATTERNS", r"^https?://docs\.python\.org/")
        )
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton, import this everywhere:
#   from webfetch.config import settings
settings = Settings()
