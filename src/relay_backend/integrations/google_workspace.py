"""Google Calendar + Sheets writer (service-account based).

Goals
- Provide a small, testable integration wrapper around the Calendar and Sheets APIs.
- Build credentials per call from the configured email + private key; nothing is cached.

The Google client library is blocking, so the async entry points run each call
in a worker thread. This module does not depend on FastAPI.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from relay_backend.integrations.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/spreadsheets",
]
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


def normalize_private_key(private_key: str) -> str:
    """Env files usually carry the PEM key with literal `\\n` sequences."""
    return private_key.replace("\\n", "\n")


def build_event_body(
    *,
    summary: str | None,
    description: str | None,
    start_iso: str,
    end_iso: str,
) -> dict[str, Any]:
    return {
        "summary": summary,
        "description": description,
        "start": {"dateTime": start_iso},
        "end": {"dateTime": end_iso},
    }


class GoogleWorkspaceClient:
    def __init__(
        self,
        *,
        client_email: str | None,
        private_key: str | None,
        calendar_id: str | None = None,
        spreadsheet_id: str | None = None,
    ) -> None:
        self._client_email = client_email
        self._private_key = private_key
        self._calendar_id = calendar_id
        self._spreadsheet_id = spreadsheet_id

    @property
    def calendar_configured(self) -> bool:
        return bool(self._client_email and self._private_key and self._calendar_id)

    @property
    def sheets_configured(self) -> bool:
        return bool(self._client_email and self._private_key and self._spreadsheet_id)

    def _credentials(self) -> Any:
        from google.oauth2 import service_account

        info = {
            "type": "service_account",
            "client_email": self._client_email,
            "private_key": normalize_private_key(self._private_key or ""),
            "token_uri": GOOGLE_TOKEN_URI,
        }
        return service_account.Credentials.from_service_account_info(info, scopes=GOOGLE_SCOPES)

    def _build_service(self, api: str, version: str) -> Any:
        from googleapiclient.discovery import build

        return build(
            api,
            version,
            credentials=self._credentials(),
            cache_discovery=False,
        )

    def _execute(self, request: Any) -> dict[str, Any]:
        from googleapiclient.errors import HttpError

        try:
            return request.execute()
        except HttpError as e:
            raise UpstreamError.from_content(int(e.resp.status), e.content) from e

    def insert_event(
        self,
        *,
        summary: str | None,
        description: str | None,
        start_iso: str,
        end_iso: str,
    ) -> dict[str, Any]:
        if not self.calendar_configured:
            raise ConfigurationError("Google Calendar credentials are not configured on the server.")

        calendar = self._build_service("calendar", "v3")
        data = self._execute(
            calendar.events().insert(
                calendarId=self._calendar_id,
                body=build_event_body(
                    summary=summary,
                    description=description,
                    start_iso=start_iso,
                    end_iso=end_iso,
                ),
            )
        )
        logger.info(f"Calendar event created: {data.get('id')}")
        return data

    def append_values(self, *, a1_range: str, values: list[list[Any]]) -> dict[str, Any]:
        """Append rows after the table found in `a1_range`, e.g. "Attendance!A:D".

        Values are parsed as if typed by a user (numbers, dates, formulas).
        """

        if not self.sheets_configured:
            raise ConfigurationError("Google Sheets credentials are not configured on the server.")

        sheets = self._build_service("sheets", "v4")
        return self._execute(
            sheets.spreadsheets()
            .values()
            .append(
                spreadsheetId=self._spreadsheet_id,
                range=a1_range,
                valueInputOption="USER_ENTERED",
                body={"values": values},
            )
        )

    async def create_event(self, **kwargs: Any) -> dict[str, Any]:
        return await asyncio.to_thread(lambda: self.insert_event(**kwargs))

    async def append_rows(self, *, a1_range: str, values: list[list[Any]]) -> dict[str, Any]:
        return await asyncio.to_thread(lambda: self.append_values(a1_range=a1_range, values=values))
