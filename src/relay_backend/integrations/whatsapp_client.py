"""WhatsApp Cloud API connector.

Purpose
- Turn an `OutboundMessage` into a Graph API payload and send it.
- Keep bearer-token handling in one place.

This module is intentionally independent of FastAPI.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from relay_backend.integrations.errors import ConfigurationError, read_json
from relay_backend.models.messages import OutboundMessage, TemplateMessage

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"


def build_message_payload(message: OutboundMessage, *, language_code: str = "en_US") -> dict[str, Any]:
    """Build the Graph API `messages` payload for a text or template message."""

    if isinstance(message, TemplateMessage):
        components: list[dict[str, Any]] = []
        if message.params:
            components.append(
                {
                    "type": "body",
                    "parameters": [{"type": "text", "text": p} for p in message.params],
                }
            )
        return {
            "messaging_product": "whatsapp",
            "to": message.to,
            "type": "template",
            "template": {
                "name": message.name,
                "language": {"code": language_code},
                "components": components,
            },
        }

    return {
        "messaging_product": "whatsapp",
        "to": message.to,
        "type": "text",
        "text": {"body": message.body},
    }


class WhatsAppClient:
    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        token: str | None,
        phone_number_id: str | None,
        api_version: str = "v20.0",
        template_language: str = "en_US",
    ) -> None:
        self._http = http
        self._token = token
        self._phone_number_id = phone_number_id
        self._api_version = api_version
        self._template_language = template_language

    @property
    def configured(self) -> bool:
        return bool(self._token and self._phone_number_id)

    @property
    def messages_url(self) -> str:
        return f"{GRAPH_BASE_URL}/{self._api_version}/{self._phone_number_id}/messages"

    async def send(self, message: OutboundMessage) -> Any:
        if not self.configured:
            raise ConfigurationError("WhatsApp API credentials are not configured on the server.")

        payload = build_message_payload(message, language_code=self._template_language)
        logger.debug(f"Sending WhatsApp {payload['type']} message")

        resp = await self._http.post(
            self.messages_url,
            json=payload,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
            },
        )
        return read_json(resp)
