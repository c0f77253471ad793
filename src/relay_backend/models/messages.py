"""
Request models for the relay endpoints.

Field names follow the JSON contract used by the frontend (camelCase), so
every camelCase field carries an alias and can also be populated by name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _RelayRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# WhatsApp
# ---------------------------------------------------------------------------


class WhatsAppSendRequest(_RelayRequest):
    to: str
    text: Optional[str] = None
    template_name: Optional[str] = Field(default=None, alias="templateName")
    template_params: Optional[List[str]] = Field(default=None, alias="templateParams")

    @model_validator(mode="after")
    def _require_text_or_template(self) -> "WhatsAppSendRequest":
        if not self.template_name and self.text is None:
            raise ValueError("either text or templateName is required")
        return self

    def to_message(self) -> "OutboundMessage":
        """Template mode wins whenever a template name is present."""
        if self.template_name:
            return TemplateMessage(
                to=self.to,
                name=self.template_name,
                params=list(self.template_params or []),
            )
        return TextMessage(to=self.to, body=self.text or "")


@dataclass(frozen=True, slots=True)
class TextMessage:
    to: str
    body: str


@dataclass(frozen=True, slots=True)
class TemplateMessage:
    to: str
    name: str
    params: list[str] = field(default_factory=list)


OutboundMessage = Union[TextMessage, TemplateMessage]


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class SignUploadRequest(_RelayRequest):
    file_name: str = Field(alias="fileName")


class PublicUrlRequest(_RelayRequest):
    path: str


# ---------------------------------------------------------------------------
# Google Calendar / Sheets
# ---------------------------------------------------------------------------


class CalendarEventRequest(_RelayRequest):
    summary: Optional[str] = None
    description: Optional[str] = None
    start_iso: str = Field(alias="startISO")
    end_iso: str = Field(alias="endISO")


class SheetAppendRequest(_RelayRequest):
    range: str
    values: List[List[Any]]


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------


class GenerateRequest(_RelayRequest):
    prompt: str
