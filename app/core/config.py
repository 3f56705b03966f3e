# app/core/config.py
from __future__ import annotations

"""
# Mux Playback Gateway — Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config.

## Goals
- Safe defaults for local/dev; explicit where prod needs secrets.
- Optional signing/admin credentials so imports never crash in dev.
- CSV → list helpers for CORS origins.

## Usage
    from app.core.config import settings
"""

import base64
import logging
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)
load_dotenv()  # harmless in prod; convenient in dev


# ─────────────────────────────────────────────────────────────
# Small helpers
# ─────────────────────────────────────────────────────────────
def _split_csv(v: str | None) -> list[str]:
    """Split a comma-separated string into a trimmed list (empty-safe)."""
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s and s.strip()]


def _normalize_url_like(v: str | None, *, require_scheme: bool = True) -> str:
    """Normalize to a string URL without trailing slash."""
    s = (v or "").strip()
    if not s:
        return ""
    if require_scheme and not (s.startswith("http://") or s.startswith("https://")):
        s = "https://" + s
    return s.rstrip("/")


def _decode_pem(raw: str) -> str:
    """Accept a PEM string or a base64-encoded PEM (as handed out by Mux)."""
    s = raw.strip()
    if s.startswith("-----BEGIN"):
        return s.replace("\\n", "\n")
    try:
        return base64.b64decode(s).decode("utf-8")
    except Exception:
        log.warning("MUX_SIGNING_PRIVATE_KEY is neither PEM nor base64; using as-is")
        return s


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Security:
        - Mux API credentials are required for any remote call.
        - Signing credentials and the admin password are optional; the routes
          that need them answer with a configuration error when absent.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # don't crash on unknown keys
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "Mux Playback Gateway"
    VERSION: str = "1.0.0"
    ENV: Literal["development", "staging", "production"] = "development"
    ENABLE_DOCS: bool = True
    PORT: int = 3000

    # ── Mux API ───────────────────────────────────────────────
    MUX_TOKEN_ID: Optional[str] = None
    MUX_TOKEN_SECRET: Optional[SecretStr] = None
    MUX_API_BASE_URL: str = "https://api.mux.com"
    MUX_HTTP_TIMEOUT_SECONDS: float = Field(15.0, gt=0, le=120)

    # ── Playback ──────────────────────────────────────────────
    MUX_STREAM_BASE_URL: str = "https://stream.mux.com"
    MUX_DEFAULT_POLICY: Literal["public", "signed"] = "public"
    MUX_UPLOAD_CORS_ORIGIN: str = "*"

    # ── Signed playback (optional) ────────────────────────────
    MUX_SIGNING_KEY_ID: Optional[str] = None
    MUX_SIGNING_PRIVATE_KEY: Optional[SecretStr] = None
    MUX_SIGNED_URL_TTL_SECONDS: int = Field(3600, ge=60, le=7 * 24 * 60 * 60)

    # ── Admin ─────────────────────────────────────────────────
    ADMIN_PASSWORD: Optional[SecretStr] = None

    # ── CORS ──────────────────────────────────────────────────
    FRONTEND_ORIGINS: str = "https://movie-app-three-gold-76.vercel.app,http://localhost:5173"  # CSV
    ALLOW_ORIGINS_REGEX: Optional[str] = None

    # ── Validators / normalizers ──────────────────────────────
    @field_validator("FRONTEND_ORIGINS", mode="before")
    @classmethod
    def _normalize_origins_csv(cls, v) -> str:
        if isinstance(v, (list, tuple)):
            return ",".join(_split_csv(",".join(v)))
        return ",".join(_split_csv(str(v or "")))

    @field_validator("MUX_API_BASE_URL", "MUX_STREAM_BASE_URL", mode="before")
    @classmethod
    def _normalize_base_urls(cls, v) -> str:
        return _normalize_url_like(str(v))

    # ── Convenience ───────────────────────────────────────────
    @property
    def frontend_origins(self) -> List[str]:
        return _split_csv(self.FRONTEND_ORIGINS)

    @property
    def signing_configured(self) -> bool:
        return bool(self.MUX_SIGNING_KEY_ID and self.MUX_SIGNING_PRIVATE_KEY)

    @property
    def signing_private_key_pem(self) -> Optional[str]:
        if not self.MUX_SIGNING_PRIVATE_KEY:
            return None
        return _decode_pem(self.MUX_SIGNING_PRIVATE_KEY.get_secret_value())

    @property
    def mux_credentials(self) -> Optional[tuple[str, str]]:
        if not (self.MUX_TOKEN_ID and self.MUX_TOKEN_SECRET):
            return None
        return self.MUX_TOKEN_ID, self.MUX_TOKEN_SECRET.get_secret_value()


settings = Settings()

__all__ = ["Settings", "settings"]
