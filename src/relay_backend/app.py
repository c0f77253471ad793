import logging
from contextlib import asynccontextmanager

# FastAPI imports
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

# Local imports
from relay_backend.api.router import failure, relay_router
from relay_backend.config.settings import RelaySettings
from relay_backend.integrations import RelayClients
from relay_backend.integrations.errors import ConfigurationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build provider clients on startup (unless injected) and close them on shutdown."""

    settings: RelaySettings = app.state.settings
    owned = app.state.clients is None
    if owned:
        app.state.clients = RelayClients.from_settings(settings)

    logger.info(f"🚀 Relay API running on http://localhost:{settings.port}")
    for feature, enabled in settings.feature_flags().items():
        if not enabled:
            logger.warning(f"{feature} is not configured; its endpoint will answer 400")
    yield

    if owned:
        await app.state.clients.aclose()
    logger.info("👋 Relay API shutdown complete")


def create_app(
    settings: RelaySettings | None = None,
    clients: RelayClients | None = None,
) -> FastAPI:
    settings = settings or RelaySettings.from_env()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.clients = clients

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.warning(f"{request.url.path}: {exc}")
        return failure(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ()) if p != 'body') or 'body'}: {e.get('msg')}"
            for e in exc.errors()
        )
        return JSONResponse(status_code=422, content={"ok": False, "error": errors})

    @app.get("/healthz")
    async def healthz():
        return {"ok": True, "features": settings.feature_flags()}

    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(settings.public_dir / "index.html")

    app.include_router(relay_router)

    if settings.public_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.public_dir), name="public")
    else:
        logger.warning(f"Public directory not found: {settings.public_dir}")

    return app


def main() -> None:
    import uvicorn

    settings = RelaySettings.from_env()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    # httpx logs every request URL at INFO, which would include the Gemini key.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


# Run the app
if __name__ == "__main__":
    main()
