from __future__ import annotations

import logging
import sys
import types
from importlib.metadata import PackageNotFoundError, version
from typing import NoReturn, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ExceptionHandler

from app.api.router import router as api_router
from app.content.fallback_store import FallbackStore
from app.content.fast_cache import FastCache
from app.content.remote_source import RemoteSource, SqlAlchemyRemoteSource
from app.core.config import InvalidSettingsError, MissingRequiredSettingsError
from app.core.errors import (
    http_exception_handler,
    rate_limit_exception_handler,
    request_validation_exception_handler,
    unhandled_exception_handler,
)
from app.core.lifespan import lifespan
from app.core.logging import configure_logging
from app.core.rate_limit import limiter
from app.db.session import get_session_maker
from app.services.admin_content_service import AdminContentService
from app.services.resolution_service import ContentResolver
from app.services.sync_service import SyncService


def _exit_with_settings_errors(heading: str, lines: list[str], action: str) -> NoReturn:
    print(f"ERROR: {heading}:", file=sys.stderr)
    for line in lines:
        print(f"  - {line}", file=sys.stderr)
    print(f"\nPlease {action} in your .env file (see env.example for reference)", file=sys.stderr)
    sys.exit(1)


# Import settings - this may raise MissingRequiredSettingsError or InvalidSettingsError
try:
    from app.core.config import settings
except MissingRequiredSettingsError as e:
    _exit_with_settings_errors(
        "Missing required environment variables", e.missing_fields, "set these"
    )
except InvalidSettingsError as e:
    _exit_with_settings_errors(
        "Invalid environment variable values",
        [f"{field}: {message}" for field, message in e.invalid_fields],
        "update these",
    )


def build_services(remote: RemoteSource | None = None) -> dict[str, object]:
    """Build the process-wide service registry around one store, cache and remote source."""
    store = FallbackStore(settings.fallback_path, settings.legacy_fallback_path)
    cache = FastCache(store.load_legacy)
    remote = remote or SqlAlchemyRemoteSource(get_session_maker)
    sync_service = SyncService(remote, store, cache, settings)
    return {
        "fallback_store": store,
        "fast_cache": cache,
        "remote_source": remote,
        "content_resolver": ContentResolver(remote, store, cache, settings),
        "sync_service": sync_service,
        "admin_content_service": AdminContentService(remote, store, cache, sync_service),
    }


def create_app() -> FastAPI:
    configure_logging()

    try:
        api_version = version("culture-alberta-api")
    except PackageNotFoundError:
        api_version = "0.1.0"  # Fallback if package not installed
        logging.warning("culture-alberta-api package not found, using fallback version 0.1.0")

    is_debug_mode = settings.environment == "local"
    app = FastAPI(
        title=settings.app_name,
        version=api_version,
        debug=is_debug_mode,
        lifespan=lifespan,
    )
    app.add_exception_handler(
        StarletteHTTPException, cast(ExceptionHandler, http_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast(ExceptionHandler, request_validation_exception_handler)
    )
    app.add_exception_handler(
        RateLimitExceeded, cast(ExceptionHandler, rate_limit_exception_handler)
    )
    app.add_exception_handler(Exception, cast(ExceptionHandler, unhandled_exception_handler))
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.include_router(api_router, prefix="/api")
    app.state.services = types.MappingProxyType(build_services())

    return app


app = create_app()
