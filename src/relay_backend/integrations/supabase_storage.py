"""Supabase Storage connector (signed uploads + public URLs).

Uploads never pass through the relay: the client receives a signed upload URL
and sends the file straight to storage. Public URLs are built locally from the
storage URL scheme and do not call the provider.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable
from urllib.parse import parse_qs, quote, urlparse

import httpx

from relay_backend.integrations.errors import ConfigurationError, read_json

logger = logging.getLogger(__name__)

MATERIALS_BUCKET = "materials"

# Characters the storage public-URL scheme leaves unescaped (JavaScript `encodeURI`).
PUBLIC_URL_SAFE = "/;,?:@&=+$!*'()#"


def make_object_key(file_name: str, *, now_ms: int) -> str:
    """Prefix the file name with an epoch-milliseconds timestamp."""
    return f"{now_ms}-{file_name}"


class SupabaseStorageClient:
    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        url: str | None,
        service_key: str | None,
        bucket: str = MATERIALS_BUCKET,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._http = http
        self._url = (url or "").rstrip("/")
        self._service_key = service_key
        self._bucket = bucket
        self._clock = clock

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def configured(self) -> bool:
        return bool(self._url and self._service_key)

    @property
    def public_url_configured(self) -> bool:
        return bool(self._url)

    @property
    def storage_url(self) -> str:
        return f"{self._url}/storage/v1"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key or "",
        }

    def next_object_key(self, file_name: str) -> str:
        return make_object_key(file_name, now_ms=int(self._clock() * 1000))

    async def create_signed_upload_url(self, file_name: str) -> dict[str, Any]:
        """Mint a one-shot upload capability for a fresh object key.

        Returns `signedUrl` (absolute), `path` (the object key) and `token`.
        """

        if not self.configured:
            raise ConfigurationError("Supabase credentials are not configured on the server.")

        key = self.next_object_key(file_name)
        url = f"{self.storage_url}/object/upload/sign/{self._bucket}/{quote(key, safe='/')}"

        resp = await self._http.post(url, json={}, headers=self._headers())
        data = read_json(resp)

        signed_url = f"{self.storage_url}{data['url']}"
        token = (parse_qs(urlparse(signed_url).query).get("token") or [None])[0]
        logger.info(f"Signed upload URL issued for {self._bucket}/{key}")

        return {"signedUrl": signed_url, "path": key, "token": token}

    def get_public_url(self, path: str) -> str:
        """Publicly resolvable URL for an object in the bucket; no request is made."""

        if not self._url:
            raise ConfigurationError("Supabase URL is not configured on the server.")
        return f"{self.storage_url}/object/public/{self._bucket}/{quote(path, safe=PUBLIC_URL_SAFE)}"
