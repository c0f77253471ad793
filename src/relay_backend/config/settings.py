"""
Configuration settings for the relay backend.
Reads provider credentials from the environment (optionally via `.env`).

Every feature degrades independently: a missing credential only disables the
endpoint that needs it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_PORT = 8080
DEFAULT_WHATSAPP_API_VERSION = "v20.0"
DEFAULT_TEMPLATE_LANGUAGE = "en_US"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-05-20"
DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parents[1] / "public"


def _env(name: str) -> str | None:
    # Blank placeholders (e.g. copied from .env.example) count as unset.
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True, slots=True)
class RelaySettings:
    # WhatsApp Cloud API
    whatsapp_token: str | None = None
    whatsapp_phone_number_id: str | None = None
    whatsapp_api_version: str = DEFAULT_WHATSAPP_API_VERSION
    whatsapp_template_language: str = DEFAULT_TEMPLATE_LANGUAGE

    # Supabase storage
    supabase_url: str | None = None
    supabase_service_key: str | None = None

    # Google service account (Calendar + Sheets)
    google_client_email: str | None = None
    google_private_key: str | None = None
    calendar_id: str | None = None
    sheet_id: str | None = None

    # Gemini
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL

    http_timeout_seconds: float = 30.0
    public_dir: Path = DEFAULT_PUBLIC_DIR
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "RelaySettings":
        load_dotenv(override=False)

        return cls(
            whatsapp_token=_env("META_WABA_TOKEN"),
            whatsapp_phone_number_id=_env("META_PHONE_NUMBER_ID"),
            whatsapp_api_version=_env("WHATSAPP_API_VERSION") or DEFAULT_WHATSAPP_API_VERSION,
            whatsapp_template_language=_env("WHATSAPP_TEMPLATE_LANGUAGE") or DEFAULT_TEMPLATE_LANGUAGE,
            supabase_url=_env("SUPABASE_URL"),
            supabase_service_key=_env("SUPABASE_SERVICE_KEY"),
            google_client_email=_env("GCP_PROJECT_EMAIL"),
            google_private_key=_env("GCP_PRIVATE_KEY"),
            calendar_id=_env("CALENDAR_ID"),
            sheet_id=_env("SHEET_ID"),
            gemini_api_key=_env("GEMINI_API_KEY"),
            gemini_model=_env("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            http_timeout_seconds=float(_env("RELAY_HTTP_TIMEOUT_SECONDS") or "30"),
            public_dir=Path(_env("PUBLIC_DIR") or DEFAULT_PUBLIC_DIR),
            host=_env("HOST") or "0.0.0.0",
            port=int(_env("PORT") or DEFAULT_PORT),
            log_level=_env("LOG_LEVEL") or "INFO",
        )

    @property
    def whatsapp_configured(self) -> bool:
        return bool(self.whatsapp_token and self.whatsapp_phone_number_id)

    @property
    def storage_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)

    @property
    def google_configured(self) -> bool:
        return bool(self.google_client_email and self.google_private_key)

    @property
    def calendar_configured(self) -> bool:
        return self.google_configured and bool(self.calendar_id)

    @property
    def sheets_configured(self) -> bool:
        return self.google_configured and bool(self.sheet_id)

    @property
    def ai_configured(self) -> bool:
        return bool(self.gemini_api_key)

    def feature_flags(self) -> dict[str, bool]:
        """Which features have credentials, without exposing any values."""
        return {
            "whatsapp": self.whatsapp_configured,
            "storage": self.storage_configured,
            "calendar": self.calendar_configured,
            "sheets": self.sheets_configured,
            "ai": self.ai_configured,
        }
