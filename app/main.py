from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.core.config import Settings, get_settings
from app.core.exceptions import ConfigurationError, UploadError
from app.core.logging import configure_logging
from app.integrations.storage.base import ContentStore, RemoteStoreError
from app.integrations.storage.factory import get_content_store
from app.services.keepalive_service import KeepAlivePinger
from app.services.path_resolver import PathResolver
from app.services.upload_service import UploadService

logger = structlog.get_logger()


async def run_startup_checks(settings: Settings, store: ContentStore) -> None:
    missing = settings.missing_required()
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")
    try:
        await store.verify_access()
    except RemoteStoreError as exc:
        raise ConfigurationError(f"Failed to access {store.name} repository: {exc.message}") from exc


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    store: ContentStore = app.state.store
    configure_logging(settings.log_level)
    try:
        await run_startup_checks(settings, store)
    except ConfigurationError as exc:
        logger.error("startup_failed", error=str(exc))
        await store.aclose()
        raise

    pinger = None
    if settings.keepalive_url:
        pinger = KeepAlivePinger(settings.keepalive_url, settings.keepalive_interval_seconds)
        pinger.start()
    logger.info(
        "startup",
        env=settings.app_env,
        provider=store.name,
        owner=settings.github_owner,
        repo=settings.github_repo,
        branch=settings.github_branch,
    )
    yield
    if pinger is not None:
        await pinger.stop()
    await store.aclose()
    logger.info("shutdown")


def create_app(
    settings: Settings | None = None,
    store: ContentStore | None = None,
    resolver: PathResolver | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    store = store or get_content_store(settings)

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.upload_service = UploadService(settings, store, resolver=resolver)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        response = await call_next(request)
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
        )
        return response

    @app.exception_handler(UploadError)
    async def upload_error_handler(_: Request, exc: UploadError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError):
        logger.info("request_invalid", error_count=len(exc.errors()))
        return JSONResponse(status_code=400, content={"error": "Invalid upload request"})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_: Request, exc: Exception):
        logger.exception("unhandled_exception", error=str(exc))
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run("app.main:create_app", factory=True, host="0.0.0.0", port=settings.port)
