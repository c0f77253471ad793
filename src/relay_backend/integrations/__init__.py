"""Integration adapters for external providers (WhatsApp, Supabase, Google, Gemini).

Keep these modules small and testable:
- No FastAPI request/response objects
- Provider failures surface as `UpstreamError`, missing credentials as `ConfigurationError`
- Pure IO + payload helpers
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from relay_backend.config.settings import RelaySettings
from relay_backend.integrations.gemini_client import GeminiClient
from relay_backend.integrations.google_workspace import GoogleWorkspaceClient
from relay_backend.integrations.supabase_storage import SupabaseStorageClient
from relay_backend.integrations.whatsapp_client import WhatsAppClient


@dataclass(slots=True)
class RelayClients:
    """Provider clients built once at startup and shared read-only by all requests."""

    http: httpx.AsyncClient
    whatsapp: WhatsAppClient
    storage: SupabaseStorageClient
    google: GoogleWorkspaceClient
    gemini: GeminiClient

    @classmethod
    def from_settings(
        cls,
        settings: RelaySettings,
        *,
        http: httpx.AsyncClient | None = None,
    ) -> "RelayClients":
        http = http or httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        return cls(
            http=http,
            whatsapp=WhatsAppClient(
                http=http,
                token=settings.whatsapp_token,
                phone_number_id=settings.whatsapp_phone_number_id,
                api_version=settings.whatsapp_api_version,
                template_language=settings.whatsapp_template_language,
            ),
            storage=SupabaseStorageClient(
                http=http,
                url=settings.supabase_url,
                service_key=settings.supabase_service_key,
            ),
            google=GoogleWorkspaceClient(
                client_email=settings.google_client_email,
                private_key=settings.google_private_key,
                calendar_id=settings.calendar_id,
                spreadsheet_id=settings.sheet_id,
            ),
            gemini=GeminiClient(
                http=http,
                api_key=settings.gemini_api_key,
                model=settings.gemini_model,
            ),
        )

    async def aclose(self) -> None:
        await self.http.aclose()
