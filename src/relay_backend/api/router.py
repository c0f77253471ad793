"""Relay API Router.

Each endpoint forwards one request to one provider and wraps the outcome in
the `{ok, ...}` envelope:
- missing server configuration -> 400 `{ok: false, error}`
- provider non-2xx -> provider status + provider body, unmodified
- anything else raised locally -> 500 `{ok: false, error}`
"""

import logging
from typing import Any, Awaitable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from relay_backend.integrations import RelayClients
from relay_backend.integrations.errors import ConfigurationError, UpstreamError
from relay_backend.models.messages import (
    CalendarEventRequest,
    GenerateRequest,
    PublicUrlRequest,
    SheetAppendRequest,
    SignUploadRequest,
    WhatsAppSendRequest,
)

logger = logging.getLogger(__name__)

relay_router = APIRouter(
    prefix="/api",
    responses={404: {"description": "Not found"}},
)


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------


def get_clients(request: Request) -> RelayClients:
    return request.app.state.clients


_FEATURES = {
    "whatsapp": (
        lambda c: c.whatsapp.configured,
        "WhatsApp API credentials are not configured on the server.",
    ),
    "storage": (
        lambda c: c.storage.configured,
        "Supabase credentials are not configured on the server.",
    ),
    "public_url": (
        lambda c: c.storage.public_url_configured,
        "Supabase URL is not configured on the server.",
    ),
    "calendar": (
        lambda c: c.google.calendar_configured,
        "Google Calendar credentials are not configured on the server.",
    ),
    "sheets": (
        lambda c: c.google.sheets_configured,
        "Google Sheets credentials are not configured on the server.",
    ),
    "ai": (
        lambda c: c.gemini.configured,
        "Gemini API key is not configured on the server.",
    ),
}


def require_feature(feature: str):
    """Dependency that rejects the request before its body is validated when `feature` lacks credentials."""

    is_configured, message = _FEATURES[feature]

    async def _check(clients: RelayClients = Depends(get_clients)) -> RelayClients:
        if not is_configured(clients):
            raise ConfigurationError(message)
        return clients

    return _check


def failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": error})


def error_response(exc: Exception, *, operation: str) -> JSONResponse:
    """Map an exception raised by an integration onto the failure envelope."""

    if isinstance(exc, ConfigurationError):
        logger.warning(f"{operation}: {exc}")
        return failure(400, str(exc))

    if isinstance(exc, UpstreamError):
        logger.warning(f"{operation}: provider returned HTTP {exc.status_code}")
        if isinstance(exc.body, (dict, list)):
            return JSONResponse(status_code=exc.status_code, content=exc.body)
        return failure(exc.status_code, str(exc.body))

    logger.exception(f"{operation} failed")
    return failure(500, str(exc))


async def relay(operation: str, call: Awaitable[Any]) -> tuple[Any, JSONResponse | None]:
    """Await one provider call; return `(result, None)` or `(None, error_response)`."""

    try:
        return await call, None
    except Exception as e:
        return None, error_response(e, operation=operation)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@relay_router.post("/whatsapp/send")
async def whatsapp_send(
    body: WhatsAppSendRequest,
    clients: RelayClients = Depends(require_feature("whatsapp")),
):
    """Send a free-text or template WhatsApp message."""

    data, err = await relay("whatsapp send", clients.whatsapp.send(body.to_message()))
    if err is not None:
        return err
    return {"ok": True, "data": data}


@relay_router.post("/materials/sign-url")
async def materials_sign_url(
    body: SignUploadRequest,
    clients: RelayClients = Depends(require_feature("storage")),
):
    """Mint a signed upload URL; the file itself is uploaded directly to storage."""

    data, err = await relay(
        "materials sign-url",
        clients.storage.create_signed_upload_url(body.file_name),
    )
    if err is not None:
        return err
    return {"ok": True, **data, "bucket": clients.storage.bucket}


@relay_router.post("/materials/public-url")
async def materials_public_url(
    body: PublicUrlRequest,
    clients: RelayClients = Depends(require_feature("public_url")),
):
    # No authorization check: any caller can resolve any path in the bucket.
    try:
        url = clients.storage.get_public_url(body.path)
    except Exception as e:
        return error_response(e, operation="materials public-url")
    return {"ok": True, "url": url}


@relay_router.post("/calendar/create")
async def calendar_create(
    body: CalendarEventRequest,
    clients: RelayClients = Depends(require_feature("calendar")),
):
    data, err = await relay(
        "calendar create",
        clients.google.create_event(
            summary=body.summary,
            description=body.description,
            start_iso=body.start_iso,
            end_iso=body.end_iso,
        ),
    )
    if err is not None:
        return err
    return {"ok": True, "eventId": data.get("id"), "htmlLink": data.get("htmlLink")}


@relay_router.post("/sheets/append")
async def sheets_append(
    body: SheetAppendRequest,
    clients: RelayClients = Depends(require_feature("sheets")),
):
    data, err = await relay(
        "sheets append",
        clients.google.append_rows(a1_range=body.range, values=body.values),
    )
    if err is not None:
        return err
    return {"ok": True, "data": data}


@relay_router.post("/ai/generate")
async def ai_generate(
    body: GenerateRequest,
    clients: RelayClients = Depends(require_feature("ai")),
):
    """Single-turn text generation; only the extracted text is returned."""

    text, err = await relay("ai generate", clients.gemini.generate(body.prompt))
    if err is not None:
        return err
    return {"ok": True, "text": text}
