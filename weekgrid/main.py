import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from weekgrid.api.router import api_router
from weekgrid.core.access import build_auth_config
from weekgrid.core.config import Settings, settings as default_settings
from weekgrid.core.errors import AuthorizationDenied, StorageError, WeekgridError
from weekgrid.core.logging_config import configure_logging
from weekgrid.db import init_db

logger = logging.getLogger(__name__)


def _not_found() -> Response:
    # Denied and unknown resources must look the same: 404, no body.
    return Response(status_code=status.HTTP_404_NOT_FOUND)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthorizationDenied)
    async def authorization_denied_handler(request: Request, exc: AuthorizationDenied):
        return _not_found()

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage error on {request.method} {request.url.path}: {exc.__cause__!r}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(WeekgridError)
    async def weekgrid_error_handler(request: Request, exc: WeekgridError):
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _not_found()
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning(f"Invalid request on {request.method} {request.url.path}: {message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": message},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_application(app_settings: Optional[Settings] = None, create_tables: bool = True) -> FastAPI:
    app_settings = app_settings or default_settings
    configure_logging(app_settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if create_tables:
            init_db()
        yield

    app = FastAPI(title=app_settings.PROJECT_NAME, version="0.1.0", lifespan=lifespan)
    app.state.settings = app_settings
    app.state.auth = build_auth_config(app_settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    init_data_header = app_settings.INIT_DATA_HEADER

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        has_init_data = "present" if request.headers.get(init_data_header) else "missing"
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} (init data {has_init_data})")
        return response

    register_exception_handlers(app)
    app.include_router(api_router, prefix=app_settings.API_PREFIX)

    return app


app = create_application()
